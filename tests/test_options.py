"""Tests for script option normalization."""

import pytest

from loadwright.options import select_values, snake_case, to_kwargs


class TestSnakeCase:
    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            ("timeout", "timeout"),
            ("waitUntil", "wait_until"),
            ("noWaitAfter", "no_wait_after"),
            ("fullPage", "full_page"),
            ("slow_mo", "slow_mo"),
            ("userDataDir", "user_data_dir"),
        ],
    )
    def test_conversion(self, key, expected):
        assert snake_case(key) == expected


class TestToKwargs:
    def test_none_and_empty(self):
        assert to_kwargs(None) == {}
        assert to_kwargs({}) == {}

    def test_drops_none_values_and_keeps_others_verbatim(self):
        viewport = {"width": 800, "height": 600}
        out = to_kwargs({"waitUntil": "load", "referer": None, "viewport": viewport})
        assert out == {"wait_until": "load", "viewport": viewport}
        assert out["viewport"] is viewport


class TestSelectValues:
    def test_string(self):
        assert select_values("m") == {"value": "m"}

    def test_list(self):
        assert select_values(("s", "m")) == {"value": ["s", "m"]}

    def test_mapping(self):
        assert select_values({"values": ["a"], "indexes": [2], "labels": None}) == {"value": ["a"], "index": [2]}

    def test_none(self):
        assert select_values(None) == {}
