from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import NamedTuple

from pydantic import BaseModel


class Candidate(NamedTuple):
    """One entry listed under a place name in the reference dataset.

    A tuple rather than a model: the dataset holds several thousand of these and
    their strings are shared through the interner.
    """

    code: str
    name: str
    parent_region: str = ""


class ResolvedMatch(BaseModel):
    """Single result returned by ReferenceDataResolver.resolve."""

    code: str
    name: str
    province: str  # parent region of the chosen candidate, may be empty

    @classmethod
    def from_candidate(cls, candidate: Candidate) -> ResolvedMatch:
        return cls(code=candidate.code, name=candidate.name, province=candidate.parent_region)


class LoadState(StrEnum):
    EMPTY = "empty"
    LOADING = "loading"
    READY = "ready"


class LoadStatus(BaseModel):
    """Observable health of the reference dataset."""

    state: LoadState
    entries: int = 0
    loads_attempted: int = 0
    last_loaded_at: datetime | None = None
    last_error: str | None = None
    last_error_at: datetime | None = None
