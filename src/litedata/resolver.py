"""Reference dataset loading and place-name resolution.

The dataset maps a place name to the administrative divisions that carry it,
e.g. ``"东城区" → [["110101", "东城区", "北京市"], ...]``. It is downloaded once,
shared read-only by every caller, and only replaced wholesale: a load swaps in
a fully built mapping and ``reset()`` swaps it out. Readers capture the current
reference and never take the lock.

Load failures never propagate. They are logged, recorded in ``status`` and
resurface as ``DataUnavailableError`` on the lookup that needed the data; the
next lookup retries the download.
"""

from __future__ import annotations

import asyncio
import re
import threading
import time
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import httpx
import structlog

from litedata.config import ResolverSettings
from litedata.errors import DataUnavailableError, InvalidQueryError, NotFoundError
from litedata.interning import StringInterner
from litedata.models.reference import Candidate, LoadState, LoadStatus, ResolvedMatch

if TYPE_CHECKING:
    Dataset = Mapping[str, tuple[Candidate, ...]]

log = structlog.get_logger()

# Removed anywhere in the province hint, in this order.
_PROVINCE_NOISE = ("省", "市", "自治区", "壮族", "回族", "维吾尔")

_ADMIN_SUFFIX = re.compile(r"(自治州|自治县|地区|盟|市|区|县|旗)$")

_PROVINCE_MATCH_SCORE = 100
_EXACT_NAME_SCORE = 50


class DatasetFormatError(ValueError):
    """Downloaded dataset does not have the expected shape."""


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


def normalize_province(province: str | None) -> str:
    value = (province or "").strip()
    for token in _PROVINCE_NOISE:
        value = value.replace(token, "")
    return value


def strip_admin_suffix(key: str) -> str:
    """Drop one trailing administrative suffix (``朝阳区`` → ``朝阳``).

    Stripping that would leave a single character returns the key unchanged.
    """
    root = _ADMIN_SUFFIX.sub("", key)
    if len(root) < 2 and len(key) > 1:
        return key
    return root


def lookup(dataset: Dataset, key: str) -> tuple[Candidate, ...] | None:
    """Exact lookup, then one retry with the suffix-stripped root."""
    if not key:
        return None
    found = dataset.get(key)
    if found is not None:
        return found
    root = strip_admin_suffix(key)
    if root == key:
        return None
    return dataset.get(root)


def score_candidate(candidate: Candidate, province: str, target_name: str) -> int:
    score = 0
    if province and province in candidate.parent_region:
        score += _PROVINCE_MATCH_SCORE
    if candidate.name == target_name:
        score += _EXACT_NAME_SCORE
    # Shorter names are more specific.
    return score - len(candidate.name)


def pick_best(candidates: Sequence[Candidate], province: str, target_name: str) -> Candidate:
    """Highest score wins; on equal scores the earliest candidate is kept."""
    best = candidates[0]
    if len(candidates) == 1:
        return best
    best_score: int | None = None
    for candidate in candidates:
        score = score_candidate(candidate, province, target_name)
        if best_score is None or score > best_score:
            best_score = score
            best = candidate
    return best


def build_dataset(raw: Any, interner: StringInterner) -> Dataset:
    """Turn the decoded JSON body into an immutable, interned dataset.

    Rows with fewer than two string fields are dropped, fields past the third
    are ignored, and keys left without candidates are omitted.
    """
    if not isinstance(raw, dict):
        raise DatasetFormatError(f"expected a JSON object, got {type(raw).__name__}")

    entries: dict[str, tuple[Candidate, ...]] = {}
    dropped = 0
    for key, rows in raw.items():
        if not isinstance(rows, list):
            dropped += 1
            continue
        candidates: list[Candidate] = []
        for row in rows:
            if (
                not isinstance(row, list)
                or len(row) < 2
                or not all(isinstance(value, str) for value in row[:3])
            ):
                dropped += 1
                continue
            candidates.append(Candidate(*(interner.intern(value) for value in row[:3])))
        if candidates:
            entries[interner.intern(key)] = tuple(candidates)

    if dropped:
        log.debug("dataset_rows_dropped", dropped=dropped)
    return MappingProxyType(entries)


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class ReferenceDataResolver:
    """Lazily loaded place-name dataset with deterministic disambiguation."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: ResolverSettings | None = None,
        interner: StringInterner | None = None,
    ) -> None:
        self._client = client
        self._settings = settings or ResolverSettings()
        self._interner = interner or StringInterner()

        # Guards the pointer swaps below, never the lookup path.
        self._swap_lock = threading.Lock()
        self._dataset: Dataset | None = None
        self._state = LoadState.EMPTY
        self._inflight: asyncio.Task[Dataset | None] | None = None

        self._loads_attempted = 0
        self._last_loaded_at: datetime | None = None
        self._last_error: str | None = None
        self._last_error_at: datetime | None = None

    @property
    def status(self) -> LoadStatus:
        dataset = self._dataset
        return LoadStatus(
            state=self._state,
            entries=len(dataset) if dataset is not None else 0,
            loads_attempted=self._loads_attempted,
            last_loaded_at=self._last_loaded_at,
            last_error=self._last_error,
            last_error_at=self._last_error_at,
        )

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    async def resolve(
        self,
        province: str | None,
        city: str | None,
        district: str | None,
    ) -> ResolvedMatch:
        """Resolve a (province, city, district) triple to one dataset entry.

        ``district`` is tried before ``city``; ``province`` only ranks
        candidates. Raises ``DataUnavailableError``, ``InvalidQueryError`` or
        ``NotFoundError``.
        """
        dataset = await self._ensure_loaded()
        if dataset is None:
            raise DataUnavailableError(
                f"Reference dataset could not be loaded from {self._settings.dataset_url}"
            )

        province = normalize_province(province)
        city = (city or "").strip()
        district = (district or "").strip()

        if not city and not district:
            raise InvalidQueryError("At least one of city or district must be provided")

        candidates: tuple[Candidate, ...] | None = None
        target_name = ""
        if district:
            candidates = lookup(dataset, district)
            target_name = district
        if candidates is None and city:
            candidates = lookup(dataset, city)
            target_name = city

        if candidates is None:
            raise NotFoundError(f"No matching place for query: {province} {city} {district}")

        best = pick_best(candidates, province, target_name)
        log.debug(
            "place_resolved",
            target=target_name,
            candidates=len(candidates),
            code=best.code,
        )
        return ResolvedMatch.from_candidate(best)

    async def resolve_json(
        self,
        province: str | None,
        city: str | None,
        district: str | None,
    ) -> str:
        """``resolve`` serialized as ``{"code", "name", "province"}``."""
        match = await self.resolve(province, city, district)
        return match.model_dump_json()

    def reset(self) -> None:
        """Drop the cached dataset so the next lookup downloads it again.

        Lookups that already captured the old dataset finish against it.
        """
        with self._swap_lock:
            self._dataset = None
            if self._state is LoadState.READY:
                self._state = LoadState.EMPTY
        log.info("dataset_reset")

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def _ensure_loaded(self) -> Dataset | None:
        dataset = self._dataset
        if dataset is not None:
            return dataset

        if self._settings.coalescing == "single_flight":
            return await self._join_inflight_load()

        if self._state is LoadState.LOADING:
            # Someone else is downloading: wait one interval, then take what is there.
            await asyncio.sleep(self._settings.poll_interval_seconds)
            return self._dataset

        return await self._load()

    async def _join_inflight_load(self) -> Dataset | None:
        task = self._inflight
        if task is None:
            task = asyncio.ensure_future(self._load())
            self._inflight = task
            task.add_done_callback(self._clear_inflight)
        # A cancelled waiter must not cancel the load the others are sharing.
        return await asyncio.shield(task)

    def _clear_inflight(self, task: asyncio.Task[Dataset | None]) -> None:
        if self._inflight is task:
            self._inflight = None

    async def _load(self) -> Dataset | None:
        url = self._settings.dataset_url
        with self._swap_lock:
            self._state = LoadState.LOADING
            self._loads_attempted += 1
        started = time.monotonic()

        try:
            dataset = await self._fetch_dataset(url)
        except Exception as exc:
            log.warning("dataset_load_failed", url=url, error=str(exc), exc_info=True)
            with self._swap_lock:
                self._last_error = f"{type(exc).__name__}: {exc}"
                self._last_error_at = datetime.now(UTC)
            return self._dataset
        else:
            with self._swap_lock:
                self._dataset = dataset
                self._state = LoadState.READY
                self._last_loaded_at = datetime.now(UTC)
                self._last_error = None
                self._last_error_at = None
        finally:
            # Failed or cancelled loads must not leave the resolver stuck in LOADING.
            with self._swap_lock:
                self._abandon_loading()

        log.info(
            "dataset_loaded",
            url=url,
            entries=len(dataset),
            interned_strings=len(self._interner),
            duration_ms=round((time.monotonic() - started) * 1000),
        )
        return dataset

    def _abandon_loading(self) -> None:
        # Caller holds _swap_lock. An overlapping load may already have succeeded.
        if self._dataset is None and self._state is LoadState.LOADING:
            self._state = LoadState.EMPTY

    async def _fetch_dataset(self, url: str) -> Dataset:
        response = await self._client.get(url, timeout=self._settings.timeout_seconds)
        response.raise_for_status()
        return build_dataset(response.json(), self._interner)
