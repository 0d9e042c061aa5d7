"""Tests for infrastructure converters."""

from __future__ import annotations

from torrentsearch.infrastructure.common.converters import to_int


class TestToInt:
    def test_none_returns_default(self) -> None:
        assert to_int(None) == 0
        assert to_int(None, default=7) == 7

    def test_int_passthrough(self) -> None:
        assert to_int(42) == 42

    def test_zero(self) -> None:
        assert to_int(0) == 0

    def test_negative_int_returns_default(self) -> None:
        assert to_int(-5) == 0

    def test_bool_is_not_a_count(self) -> None:
        assert to_int(True) == 0

    def test_string_digits(self) -> None:
        assert to_int("123") == 123

    def test_string_with_commas(self) -> None:
        assert to_int("1,234") == 1234

    def test_string_with_spaces(self) -> None:
        assert to_int("1 234") == 1234

    def test_placeholder_strings_return_default(self) -> None:
        assert to_int("") == 0
        assert to_int("-") == 0
        assert to_int("N/A") == 0
