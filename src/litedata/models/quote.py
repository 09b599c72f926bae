from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class QuoteSource(StrEnum):
    DIRECT = "Direct"
    FALLBACK = "Fallback"


class TickerQuote(BaseModel):
    """Canonical market-data record, whichever tier produced it."""

    # Relays may send prices as JSON numbers.
    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str
    price: str
    change_percent: float = 0.0  # 2.5 means +2.5 %
    high: str
    low: str
    vol: str
    source: QuoteSource


class PrimaryTicker(BaseModel):
    """One row of the primary upstream's ``result.list``."""

    model_config = ConfigDict(populate_by_name=True)

    symbol: str
    last_price: str = Field(alias="lastPrice")
    price_24h_pcnt: str | None = Field(default=None, alias="price24hPcnt")
    high_price_24h: str = Field(alias="highPrice24h")
    low_price_24h: str = Field(alias="lowPrice24h")
    turnover_24h: str = Field(alias="turnover24h")


class PrimaryResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    items: list[PrimaryTicker] = Field(default_factory=list, alias="list")


class PrimaryEnvelope(BaseModel):
    """``{retCode, retMsg, result: {list: [...]}}`` as returned by the primary tier."""

    model_config = ConfigDict(populate_by_name=True)

    ret_code: int = Field(alias="retCode")
    ret_msg: str = Field(default="", alias="retMsg")
    result: PrimaryResult = Field(default_factory=PrimaryResult)
