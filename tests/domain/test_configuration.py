"""Tests for Configuration and property parsing."""

from __future__ import annotations

import pytest

from minictl.domain.configuration import Configuration, parse_property


class TestConfiguration:
    def test_empty_by_default(self) -> None:
        assert len(Configuration()) == 0

    def test_later_entries_overwrite(self) -> None:
        conf = Configuration([("a", "1"), ("b", "2"), ("a", "3")])
        assert conf.to_dict() == {"a": "3", "b": "2"}
        assert list(conf) == ["a", "b"]

    def test_apply_mapping(self) -> None:
        conf = Configuration({"a": "1"}).apply({"b": "2"})
        assert conf.to_dict() == {"a": "1", "b": "2"}

    def test_apply_none_is_noop(self) -> None:
        conf = Configuration({"a": "1"})
        assert conf.apply(None) is conf
        assert conf.to_dict() == {"a": "1"}

    def test_values_coerced_to_str(self) -> None:
        conf = Configuration()
        conf["port"] = 2181  # type: ignore[assignment]
        assert conf["port"] == "2181"

    def test_copy_is_independent(self) -> None:
        conf = Configuration({"a": "1"})
        clone = conf.copy()
        clone["a"] = "2"
        assert conf["a"] == "1"

    def test_equality_with_mapping(self) -> None:
        assert Configuration({"a": "1"}) == Configuration([("a", "1")])
        assert Configuration({"a": "1"}) == {"a": "1"}


class TestParseProperty:
    def test_simple(self) -> None:
        assert parse_property("hbase.master.port=16000") == ("hbase.master.port", "16000")

    def test_value_may_contain_equals(self) -> None:
        assert parse_property("opts=-Da=b") == ("opts", "-Da=b")

    def test_empty_value_allowed(self) -> None:
        assert parse_property("key=") == ("key", "")

    @pytest.mark.parametrize("text", ["novalue", "=value", "  =x"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(ValueError, match="KEY=VALUE"):
            parse_property(text)
