"""Unit tests for litedata.interning."""

from __future__ import annotations

from litedata.interning import StringInterner


class TestStringInterner:
    def test_returns_first_instance_for_equal_strings(self) -> None:
        interner = StringInterner()
        first = "".join(["北京", "市"])
        second = "".join(["北京", "市"])
        assert first is not second
        assert interner.intern(first) is first
        assert interner.intern(second) is first

    def test_counts_distinct_values(self) -> None:
        interner = StringInterner()
        for value in ["a", "b", "a", "c", "b"]:
            interner.intern(value)
        assert len(interner) == 3
        assert "c" in interner
        assert "d" not in interner
