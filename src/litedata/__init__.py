"""Reference-data resolution and tiered quote fetching for monitoring widgets."""

from __future__ import annotations

from litedata.errors import (
    DataUnavailableError,
    ErrorCode,
    InvalidQueryError,
    LiteDataError,
    NoFallbackConfiguredError,
    NotFoundError,
    UpstreamError,
)
from litedata.quotes import TieredFetchClient
from litedata.resolver import ReferenceDataResolver

__all__ = [
    "ReferenceDataResolver",
    "TieredFetchClient",
    "ErrorCode",
    "LiteDataError",
    "DataUnavailableError",
    "InvalidQueryError",
    "NotFoundError",
    "UpstreamError",
    "NoFallbackConfiguredError",
]
