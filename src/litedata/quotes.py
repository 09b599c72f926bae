"""Two-tier ticker fetch: a fast direct exchange call, then a relay fallback.

The primary tier talks to the exchange's public ticker endpoint with a short
timeout and normalises its envelope into a ``TickerQuote``. Any failure there
(transport, status, decode, ``retCode != 0``, empty list) is logged and the
call moves on to the fallback relay, whose body is forwarded verbatim. Only a
failure of the whole cascade reaches the caller.
"""

from __future__ import annotations

import json
import math
from typing import Any

import httpx
import structlog

from litedata.config import QuoteSettings
from litedata.errors import NoFallbackConfiguredError, UpstreamError
from litedata.models.quote import PrimaryEnvelope, QuoteSource, TickerQuote

log = structlog.get_logger()

_SYMBOL_PLACEHOLDER = "{{symbol}}"
_PAIR_DELIMITER = "-"
_USD_TOKEN = "USD"


def normalize_symbol(symbol: str | None, quote_suffix: str = "USDT", base_symbol: str = "BTC") -> str:
    """Coerce a bare asset ticker into the exchange's pair format.

    ``"btc"`` → ``"BTCUSDT"``; ``"ETHUSD"`` and ``"BTC-PERP"`` are left alone.
    """
    value = (symbol or "").strip().upper() or base_symbol.upper()
    if len(value) <= 4 and not value.endswith(quote_suffix):
        value += quote_suffix
    elif quote_suffix not in value and _PAIR_DELIMITER not in value and _USD_TOKEN not in value:
        value += quote_suffix
    return value


def build_fallback_url(template: str, symbol: str) -> str:
    url = template.replace(_SYMBOL_PLACEHOLDER, symbol)
    if "symbol=" not in url and symbol not in url:
        url += ("&" if "?" in url else "?") + f"symbol={symbol}"
    return url


def _fraction_to_percent(raw: str | None) -> float:
    try:
        fraction = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(fraction):
        return 0.0
    return round(fraction * 100, 2)


def parse_primary_response(payload: Any) -> TickerQuote:
    """Normalise the primary tier's envelope. Raises ``UpstreamError`` or ``ValueError``."""
    envelope = PrimaryEnvelope.model_validate(payload)
    if envelope.ret_code != 0:
        raise UpstreamError(
            f"Primary upstream error {envelope.ret_code}: {envelope.ret_msg}", tier="primary"
        )
    if not envelope.result.items:
        raise UpstreamError("Symbol not found", tier="primary")

    ticker = envelope.result.items[0]
    return TickerQuote(
        name=ticker.symbol,
        price=ticker.last_price,
        change_percent=_fraction_to_percent(ticker.price_24h_pcnt),
        high=ticker.high_price_24h,
        low=ticker.low_price_24h,
        vol=ticker.turnover_24h,
        source=QuoteSource.DIRECT,
    )


def _describe(exc: BaseException) -> str:
    text = str(exc)
    return f"{type(exc).__name__}: {text}" if text else type(exc).__name__


class TieredFetchClient:
    """Fetches a ticker from the primary tier, degrading to a relay on failure."""

    def __init__(self, client: httpx.AsyncClient, settings: QuoteSettings | None = None) -> None:
        self._client = client
        self._settings = settings or QuoteSettings()

    async def fetch(self, symbol: str | None, fallback_url: str | None = None) -> str:
        """Return the quote as JSON text.

        Primary results are the canonical ``TickerQuote`` JSON; fallback results
        are the relay's body as received. ``fallback_url`` overrides the
        configured template; pass ``""`` to disable the fallback tier.
        """
        outcome = await self._cascade(symbol, fallback_url)
        if isinstance(outcome, TickerQuote):
            return outcome.model_dump_json()
        return outcome

    async def fetch_quote(self, symbol: str | None, fallback_url: str | None = None) -> TickerQuote:
        """Like ``fetch`` but validates a fallback body into a ``TickerQuote``."""
        outcome = await self._cascade(symbol, fallback_url)
        if isinstance(outcome, TickerQuote):
            return outcome
        try:
            payload = json.loads(outcome)
            if isinstance(payload, dict):
                payload.setdefault("source", QuoteSource.FALLBACK.value)
            return TickerQuote.model_validate(payload)
        except ValueError as exc:
            raise UpstreamError(
                f"Fallback response is not a quote record: {_describe(exc)}", tier="fallback"
            ) from exc

    async def _cascade(self, symbol: str | None, fallback_url: str | None) -> TickerQuote | str:
        settings = self._settings
        normalized = normalize_symbol(symbol, settings.quote_suffix, settings.base_symbol)

        try:
            return await self._fetch_primary(normalized)
        except Exception as exc:
            primary_error = _describe(exc)
            log.warning(
                "primary_tier_failed", symbol=normalized, error=primary_error, exc_info=True
            )

        template = fallback_url if fallback_url is not None else settings.fallback_url
        if not template or not template.strip():
            raise NoFallbackConfiguredError(
                f"Primary tier failed ({primary_error}) and no fallback endpoint is configured"
            )

        return await self._fetch_fallback(normalized, template.strip(), primary_error)

    async def _fetch_primary(self, symbol: str) -> TickerQuote:
        settings = self._settings
        response = await self._client.get(
            settings.primary_url,
            params={"category": settings.primary_category, "symbol": symbol},
            timeout=settings.primary_timeout_seconds,
        )
        response.raise_for_status()
        return parse_primary_response(response.json())

    async def _fetch_fallback(self, symbol: str, template: str, primary_error: str) -> str:
        url = build_fallback_url(template, symbol)
        try:
            response = await self._client.get(url, timeout=self._settings.fallback_timeout_seconds)
            response.raise_for_status()
        except Exception as exc:
            raise UpstreamError(
                "Primary and fallback tiers failed. "
                f"primary: {primary_error}; fallback: {_describe(exc)}",
                tier="fallback",
            ) from exc

        log.info("fallback_tier_used", symbol=symbol, url=url)
        return response.text
