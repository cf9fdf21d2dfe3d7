"""Unit tests for incoming key parsing and blank detection."""

from __future__ import annotations

import pytest

from nested_params.nested.keys import Existing, New, all_blank, is_blank, parse_key


class TestParseKey:
    def test_new_marker(self) -> None:
        assert parse_key("new_1700000000") == New("new_1700000000")

    def test_string_identity(self) -> None:
        assert parse_key("3") == Existing("3")

    def test_integer_identity_is_stringified(self) -> None:
        assert parse_key(3) == Existing("3")

    def test_custom_prefix(self) -> None:
        assert parse_key("tmp_4", prefix="tmp_") == New("tmp_4")
        assert parse_key("new_4", prefix="tmp_") == Existing("new_4")

    def test_markers_order_as_strings(self) -> None:
        markers = sorted([New("new_2"), New("new_10"), New("new_1")], key=lambda k: k.marker)
        assert [k.marker for k in markers] == ["new_1", "new_10", "new_2"]


class TestBlank:
    @pytest.mark.parametrize("value", [None, "", "   ", [], {}])
    def test_blank_values(self, value: object) -> None:
        assert is_blank(value)

    @pytest.mark.parametrize("value", ["x", 0, False, [1]])
    def test_present_values(self, value: object) -> None:
        assert not is_blank(value)

    def test_all_blank(self) -> None:
        assert all_blank({"name": "", "note": None})
        assert not all_blank({"name": "", "note": "x"})
        assert all_blank({})
