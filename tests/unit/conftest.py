"""Unit-specific fixtures (all HTTP is mocked with respx)."""

from __future__ import annotations

import httpx
import pytest

from litedata.config import ResolverSettings
from tests.conftest import DATASET_URL


@pytest.fixture()
def resolver_settings() -> ResolverSettings:
    return ResolverSettings(dataset_url=DATASET_URL, poll_interval_seconds=0.05)


@pytest.fixture()
async def http_client():
    async with httpx.AsyncClient() as client:
        yield client
