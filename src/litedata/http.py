"""HTTP client construction shared by the resolver and the quote client."""

from __future__ import annotations

import httpx

# Enough for a widget polling a handful of symbols plus the dataset download.
_MAX_CONNECTIONS = 10


def build_http_client(
    *,
    user_agent: str,
    timeout: float,
    pool_lifetime: float,
    verify: bool = True,
) -> httpx.AsyncClient:
    """Create the AsyncClient used for all outbound requests.

    - ``trust_env=True`` honours the system proxy variables (HTTP(S)_PROXY, NO_PROXY).
    - gzip/deflate responses are decoded by httpx transparently.
    - ``keepalive_expiry`` bounds how long a pooled connection is reused.
    - ``verify=False`` accepts any peer certificate; the quote tiers use it so
      that intercepting proxies do not break them.
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        limits=httpx.Limits(
            max_connections=_MAX_CONNECTIONS,
            max_keepalive_connections=_MAX_CONNECTIONS,
            keepalive_expiry=pool_lifetime,
        ),
        headers={"User-Agent": user_agent, "Accept-Encoding": "gzip, deflate"},
        verify=verify,
        trust_env=True,
        follow_redirects=True,
    )
