"""Tests for the info-string codec."""

import logging

import pytest

from q3text.core.errors import DropError
from q3text.core.limits import BIG_INFO_STRING, MAX_INFO_STRING
from q3text.info.infostring import (
    InfoString,
    iter_pairs,
    next_pair,
    remove_key,
    set_value_for_key,
    validate,
    validate_key_value,
    value_for_key,
)


class TestValueForKey:
    def test_found(self):
        assert value_for_key("\\name\\Bob\\model\\sarge", "model") == "sarge"

    def test_without_leading_backslash(self):
        assert value_for_key("name\\Bob\\rate\\25000", "rate") == "25000"

    def test_case_insensitive(self):
        assert value_for_key("\\Name\\Bob", "NAME") == "Bob"

    def test_exact_length(self):
        info = "\\names\\x\\name\\y"
        assert value_for_key(info, "name") == "y"
        assert value_for_key(info, "nam") == ""

    def test_first_match_wins(self):
        assert value_for_key("\\k\\1\\K\\2", "k") == "1"

    def test_missing(self):
        assert value_for_key("\\a\\1", "b") == ""

    def test_empty_inputs(self):
        assert value_for_key("", "a") == ""
        assert value_for_key(None, "a") == ""
        assert value_for_key("\\a\\1", "") == ""

    def test_dangling_key(self):
        assert value_for_key("\\a\\1\\b", "b") == ""

    def test_empty_value(self):
        assert value_for_key("\\a\\\\b\\2", "a") == ""
        assert value_for_key("\\a\\\\b\\2", "b") == "2"

    def test_oversize_value_drops(self):
        info = "\\k\\" + "v" * BIG_INFO_STRING
        with pytest.raises(DropError, match="oversize"):
            value_for_key(info, "k")

    def test_lookup_does_not_mutate(self):
        info = "\\a\\1\\b\\2"
        before = str(info)
        value_for_key(info, "a")
        value_for_key(info, "b")
        assert info == before


class TestNextPair:
    def test_three_pairs_then_end(self):
        info = "\\a\\1\\b\\2\\c\\3"
        seen = []
        cursor = 0
        while True:
            pair = next_pair(info, cursor)
            if pair is None:
                break
            key, value, cursor = pair
            seen.append((key, value))
        assert seen == [("a", "1"), ("b", "2"), ("c", "3")]

    def test_end_on_empty(self):
        assert next_pair("", 0) is None
        assert next_pair(None) is None

    def test_cursor_past_end(self):
        assert next_pair("\\a\\1", 4) is None

    def test_no_leading_backslash(self):
        assert next_pair("a\\1") == ("a", "1", 3)

    def test_dangling_key_is_end(self):
        assert list(iter_pairs("\\a\\1\\b")) == [("a", "1")]

    def test_iter_pairs(self):
        assert list(iter_pairs("\\x\\y")) == [("x", "y")]


class TestRemoveKey:
    def test_remove_middle(self):
        assert remove_key("\\a\\1\\b\\2\\c\\3", "b") == "\\a\\1\\c\\3"

    def test_remove_first_without_backslash(self):
        assert remove_key("a\\1\\b\\2", "A") == "\\b\\2"

    def test_remove_last(self):
        assert remove_key("\\a\\1\\b\\2", "b") == "\\a\\1"

    def test_remove_all_duplicates(self):
        assert remove_key("\\k\\1\\x\\0\\K\\2", "k") == "\\x\\0"

    def test_missing_key_unchanged(self):
        assert remove_key("\\a\\1", "z") == "\\a\\1"

    def test_backslash_in_key_ignored(self):
        assert remove_key("\\a\\1", "a\\1") == "\\a\\1"


class TestSetValueForKey:
    def test_set_then_get(self):
        ok, info = set_value_for_key("", "name", "Bob")
        assert ok
        assert info == "\\name\\Bob"
        assert value_for_key(info, "name") == "Bob"

    def test_replace_not_duplicate(self):
        _, info = set_value_for_key("", "name", "Bob")
        ok, info = set_value_for_key(info, "NAME", "Alice")
        assert ok
        assert info == "\\NAME\\Alice"
        assert len(list(iter_pairs(info))) == 1

    def test_replace_moves_to_end(self):
        _, info = set_value_for_key("\\a\\1\\b\\2", "a", "3")
        assert info == "\\b\\2\\a\\3"

    @pytest.mark.parametrize("key", ["bad;key", "bad\\key", 'bad"key', ""])
    def test_invalid_key_rejected(self, key, caplog):
        with caplog.at_level(logging.WARNING):
            ok, info = set_value_for_key("\\a\\1", key, "x")
        assert not ok
        assert info == "\\a\\1"
        assert "Invalid key name" in caplog.text

    @pytest.mark.parametrize("value", ["x;y", "x\\y", 'x"y'])
    def test_invalid_value_rejected(self, value, caplog):
        with caplog.at_level(logging.WARNING, logger="q3text.info.infostring"):
            ok, info = set_value_for_key("\\a\\1", "a", value)
        assert not ok
        assert info == "\\a\\1"
        assert "Invalid value name" in caplog.text

    def test_empty_value_deletes(self):
        ok, info = set_value_for_key("\\a\\1\\b\\2", "a", "")
        assert ok
        assert info == "\\b\\2"

    def test_none_value_deletes(self):
        ok, info = set_value_for_key("\\a\\1", "a", None)
        assert ok
        assert info == ""

    def test_result_at_bound_drops(self):
        # "\\k\\" + value is len(value) + 3 characters
        value = "v" * (MAX_INFO_STRING - 3)
        with pytest.raises(DropError):
            set_value_for_key("", "k", value)

    def test_result_just_under_bound(self):
        value = "v" * (MAX_INFO_STRING - 4)
        ok, info = set_value_for_key("", "k", value)
        assert ok
        assert len(info) == MAX_INFO_STRING - 1

    def test_big_bound(self):
        value = "v" * (MAX_INFO_STRING * 2)
        ok, info = set_value_for_key("", "k", value, big=True)
        assert ok
        assert value_for_key(info, "k") == value

    def test_oversize_input_drops(self):
        with pytest.raises(DropError, match="oversize"):
            set_value_for_key("x" * MAX_INFO_STRING, "k", "v")

    def test_set_remove_cycles_stay_bounded(self):
        info = ""
        for i in range(500):
            ok, info = set_value_for_key(info, f"k{i % 7}", "v" * (i % 50 + 1))
            assert ok
            assert len(info) < MAX_INFO_STRING
            ok, info = set_value_for_key(info, f"k{(i + 3) % 7}", "")
            assert ok
        assert len(list(iter_pairs(info))) <= 7


class TestValidate:
    def test_valid(self):
        assert validate("\\name\\Bob")
        assert validate(None)

    @pytest.mark.parametrize("info", ['\\name\\"Bob"', "\\name\\Bob;quit"])
    def test_invalid(self, info):
        assert not validate(info)

    def test_key_value(self):
        assert validate_key_value("plain")
        assert not validate_key_value("a\\b")


class TestInfoString:
    def test_roundtrip_through_wrapper(self):
        info = InfoString()
        assert info.set("name", "Bob")
        assert info.set("model", "sarge")
        assert info["NAME"] == "Bob"
        assert "model" in info
        assert "mode" not in info
        assert info.items() == [("name", "Bob"), ("model", "sarge")]
        assert str(info) == "\\name\\Bob\\model\\sarge"
        assert len(info) == len(str(info))

    def test_rejected_set_leaves_text(self):
        info = InfoString("\\a\\1")
        assert not info.set("bad;key", "x")
        assert str(info) == "\\a\\1"

    def test_overflow_leaves_text(self):
        info = InfoString("\\a\\1")
        with pytest.raises(DropError):
            info.set("k", "v" * MAX_INFO_STRING)
        assert str(info) == "\\a\\1"

    def test_remove(self):
        info = InfoString("\\a\\1\\b\\2")
        info.remove("a")
        assert list(info) == [("b", "2")]

    def test_big_limit(self):
        assert InfoString(big=True).limit == BIG_INFO_STRING
        assert InfoString().limit == MAX_INFO_STRING

    def test_oversize_construction(self):
        with pytest.raises(DropError):
            InfoString("x" * MAX_INFO_STRING)

    def test_from_pairs(self):
        info = InfoString.from_pairs([("a", "1"), ("b", "2"), ("a", "3")])
        assert str(info) == "\\b\\2\\a\\3"

    def test_validate(self):
        assert InfoString("\\a\\1").validate()
