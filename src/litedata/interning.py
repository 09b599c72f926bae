"""Append-only string interner used to deduplicate reference-data strings."""

from __future__ import annotations


class StringInterner:
    """Map every distinct string value to one shared instance.

    ``dict.setdefault`` is a single atomic operation, so concurrent loads may
    call ``intern`` freely: inserting an equal string twice is a no-op.
    Entries are never removed.
    """

    def __init__(self) -> None:
        self._pool: dict[str, str] = {}

    def intern(self, value: str) -> str:
        return self._pool.setdefault(value, value)

    def __len__(self) -> int:
        return len(self._pool)

    def __contains__(self, value: object) -> bool:
        return value in self._pool
