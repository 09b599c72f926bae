"""Explicit wiring of the litedata services.

Callers hold an ``AppState`` instead of reaching for module-level singletons;
each instance owns its HTTP clients and its resolver's cached dataset.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from litedata.http import build_http_client
from litedata.quotes import TieredFetchClient
from litedata.resolver import ReferenceDataResolver

if TYPE_CHECKING:
    import httpx

    from litedata.config import Settings


@dataclass
class AppState:
    settings: Settings
    resolver: ReferenceDataResolver
    quotes: TieredFetchClient
    dataset_client: httpx.AsyncClient
    quote_client: httpx.AsyncClient


@asynccontextmanager
async def open_app_state(settings: Settings) -> AsyncIterator[AppState]:
    """Build clients and services; close the clients on exit."""
    dataset_client = build_http_client(
        user_agent=settings.http.user_agent,
        timeout=settings.resolver.timeout_seconds,
        pool_lifetime=settings.resolver.pool_lifetime_seconds,
    )
    quote_client = build_http_client(
        user_agent=settings.http.user_agent,
        timeout=settings.quotes.fallback_timeout_seconds,
        pool_lifetime=settings.quotes.pool_lifetime_seconds,
        verify=settings.quotes.verify_tls,
    )
    async with dataset_client, quote_client:
        yield AppState(
            settings=settings,
            resolver=ReferenceDataResolver(dataset_client, settings.resolver),
            quotes=TieredFetchClient(quote_client, settings.quotes),
            dataset_client=dataset_client,
            quote_client=quote_client,
        )
