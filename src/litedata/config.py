"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (LITEDATA__RESOLVER__DATASET_URL=https://...)
  2. litedata.yaml          (searched in cwd, then ~/.config/litedata/)
  3. Hardcoded defaults

The config file is optional — all fields have sensible defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)


def _find_config_file() -> str | None:
    """Return the path of the first litedata.yaml found, or None."""
    candidates = [
        Path("litedata.yaml"),
        Path.home() / ".config" / "litedata" / "litedata.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class HttpSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user_agent: str = "LiteMonitor/1.0"


class ResolverSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    dataset_url: str = "https://litemonitor.cn/update/CityCode.json"
    timeout_seconds: float = Field(default=15.0, gt=0)
    poll_interval_seconds: float = Field(default=0.1, gt=0)
    pool_lifetime_seconds: float = Field(default=300.0, gt=0)
    # "poll" waits one interval for a concurrent load; "single_flight" shares the
    # in-flight load task with every waiter.
    coalescing: Literal["poll", "single_flight"] = "poll"


class QuoteSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    primary_url: str = "https://api.bybit.com/v5/market/tickers"
    primary_category: str = "spot"
    # May contain a {{symbol}} placeholder, e.g. https://relay.example/?symbol={{symbol}}
    fallback_url: str | None = None
    quote_suffix: str = "USDT"
    base_symbol: str = "BTC"
    primary_timeout_seconds: float = Field(default=3.0, gt=0)
    fallback_timeout_seconds: float = Field(default=10.0, gt=0)
    pool_lifetime_seconds: float = Field(default=120.0, gt=0)
    # Intercepting proxies on user machines re-sign TLS traffic.
    verify_tls: bool = False


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: LITEDATA__QUOTES__QUOTE_SUFFIX=USDC
        env_prefix="LITEDATA__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
        extra="forbid",
    )

    http: HttpSettings = HttpSettings()
    resolver: ResolverSettings = ResolverSettings()
    quotes: QuoteSettings = QuoteSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
