"""Integration test fixtures.

Provides a fully wired AppState (real clients from build_http_client, HTTP
mocked with respx) and a subprocess environment for CLI tests.
"""

from __future__ import annotations

import os
from collections.abc import AsyncIterator

import pytest

from litedata.config import QuoteSettings, ResolverSettings, Settings
from litedata.state import AppState, open_app_state
from tests.conftest import DATASET_URL

PRIMARY_URL = "https://api.exchange.test/v5/market/tickers"
RELAY_TEMPLATE = "https://relay.litedata.test/?symbol={{symbol}}"

# Nothing listens on the discard port, so connections fail fast.
UNREACHABLE = "http://127.0.0.1:9"

_PROXY_VARS = ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy")


@pytest.fixture()
async def app_state() -> AsyncIterator[AppState]:
    settings = Settings(
        resolver=ResolverSettings(dataset_url=DATASET_URL),
        quotes=QuoteSettings(primary_url=PRIMARY_URL, fallback_url=RELAY_TEMPLATE),
    )
    async with open_app_state(settings) as state:
        yield state


@pytest.fixture()
def subprocess_env() -> dict[str, str]:
    env = {k: v for k, v in os.environ.items() if k not in _PROXY_VARS}
    env["PYTHONIOENCODING"] = "utf-8"
    env["LITEDATA__LOGGING__LEVEL"] = "ERROR"
    return env
