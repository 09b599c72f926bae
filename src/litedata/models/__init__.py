from __future__ import annotations

from litedata.models.quote import (
    PrimaryEnvelope,
    PrimaryResult,
    PrimaryTicker,
    QuoteSource,
    TickerQuote,
)
from litedata.models.reference import Candidate, LoadState, LoadStatus, ResolvedMatch

__all__ = [
    # reference data
    "Candidate",
    "ResolvedMatch",
    "LoadState",
    "LoadStatus",
    # quotes
    "QuoteSource",
    "TickerQuote",
    "PrimaryEnvelope",
    "PrimaryResult",
    "PrimaryTicker",
]
