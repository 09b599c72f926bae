"""Tests for the ``python -m litedata`` command line.

Upstreams point at a closed local port, so every network call fails fast and
the commands exercise their error envelopes without touching the internet.
"""

from __future__ import annotations

import json
import subprocess
import sys

from tests.integration.conftest import UNREACHABLE


def _run(env: dict[str, str], *args: str, timeout: int = 30) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, "-m", "litedata", *args],
        stdin=subprocess.DEVNULL,
        capture_output=True,
        text=True,
        encoding="utf-8",
        timeout=timeout,
        env=env,
    )


class TestResolveCommand:
    def test_unreachable_dataset_reports_data_unavailable(
        self, subprocess_env: dict[str, str]
    ) -> None:
        env = {**subprocess_env, "LITEDATA__RESOLVER__DATASET_URL": f"{UNREACHABLE}/db.json"}
        result = _run(env, "resolve", "--district", "海淀区")

        assert result.returncode == 1
        payload = json.loads(result.stdout)
        assert payload["error"]["code"] == "DATA_UNAVAILABLE"
        assert payload["error"]["recoverable"] is True


class TestQuoteCommand:
    def test_no_fallback_configured(self, subprocess_env: dict[str, str]) -> None:
        env = {**subprocess_env, "LITEDATA__QUOTES__PRIMARY_URL": f"{UNREACHABLE}/tickers"}
        result = _run(env, "quote", "BTC")

        assert result.returncode == 1
        payload = json.loads(result.stdout)
        assert payload["error"]["code"] == "NO_FALLBACK_CONFIGURED"

    def test_both_tiers_failing(self, subprocess_env: dict[str, str]) -> None:
        env = {**subprocess_env, "LITEDATA__QUOTES__PRIMARY_URL": f"{UNREACHABLE}/tickers"}
        result = _run(env, "quote", "BTC", "--fallback-url", f"{UNREACHABLE}/?symbol={{{{symbol}}}}")

        assert result.returncode == 1
        payload = json.loads(result.stdout)
        assert payload["error"]["code"] == "UPSTREAM_ERROR"
        assert "primary:" in payload["error"]["message"]
        assert "fallback:" in payload["error"]["message"]


class TestBadConfig:
    def test_wrong_type_exits_before_any_request(self, subprocess_env: dict[str, str]) -> None:
        env = {**subprocess_env, "LITEDATA__RESOLVER__TIMEOUT_SECONDS": "not-a-number"}
        result = _run(env, "resolve", "--city", "南京")

        assert result.returncode == 2
        assert result.stdout == ""
