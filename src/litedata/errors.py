"""Error taxonomy shared by the resolver and the quote client.

Every failure a caller can observe is a ``LiteDataError`` carrying a stable
``code`` and a ``recoverable`` flag, so retry policies can tell "try again
later" apart from "this input will never match" without parsing messages.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    DATA_UNAVAILABLE = "DATA_UNAVAILABLE"
    INVALID_QUERY = "INVALID_QUERY"
    NOT_FOUND = "NOT_FOUND"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    NO_FALLBACK_CONFIGURED = "NO_FALLBACK_CONFIGURED"


class LiteDataError(Exception):
    """Base class for all typed failures surfaced to callers."""

    def __init__(self, code: ErrorCode, message: str, recoverable: bool) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.recoverable = recoverable

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "recoverable": self.recoverable,
            }
        }


class DataUnavailableError(LiteDataError):
    """The reference dataset is not loaded (failed or still loading)."""

    def __init__(self, message: str = "Reference dataset is not available") -> None:
        super().__init__(ErrorCode.DATA_UNAVAILABLE, message, recoverable=True)


class InvalidQueryError(LiteDataError):
    def __init__(self, message: str) -> None:
        super().__init__(ErrorCode.INVALID_QUERY, message, recoverable=False)


class NotFoundError(LiteDataError):
    def __init__(self, message: str) -> None:
        super().__init__(ErrorCode.NOT_FOUND, message, recoverable=False)


class UpstreamError(LiteDataError):
    """An upstream tier answered with a bad status, an error code or no data."""

    def __init__(self, message: str, tier: str) -> None:
        super().__init__(ErrorCode.UPSTREAM_ERROR, message, recoverable=True)
        self.tier = tier


class NoFallbackConfiguredError(LiteDataError):
    def __init__(self, message: str) -> None:
        super().__init__(ErrorCode.NO_FALLBACK_CONFIGURED, message, recoverable=True)
