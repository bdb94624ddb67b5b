"""Tests for locale-independent string helpers."""

import pytest

from q3text.core.errors import FatalError
from q3text.core.limits import MAX_QPATH, MAX_STRING_CHARS
from q3text.core.strings import (
    decode_string,
    default_extension,
    encode_string,
    replace_s,
    skip_path,
    strcat,
    stricmp,
    stricmpn,
    strip_extension,
    strkey,
    strlwr,
    strncmp,
    strncpyz,
    stristr,
    strupr,
)


class TestCompare:
    def test_stricmp_equal_ignoring_case(self):
        assert stricmp("Sarge", "sARGE") == 0

    def test_stricmp_order(self):
        assert stricmp("abc", "ABD") == -1
        assert stricmp("b", "A") == 1
        assert stricmp("ab", "abc") == -1

    def test_stricmp_none(self):
        assert stricmp(None, None) == 0
        assert stricmp(None, "a") == -1
        assert stricmp("a", None) == 1

    def test_stricmpn_limits_length(self):
        assert stricmpn("q3dm17", "Q3DM1", 5) == 0
        assert stricmpn("q3dm17", "Q3DM1", 6) == 1

    def test_brackets_fold_to_themselves(self):
        # '[' sits between 'Z' and 'a'; a locale-free fold keeps it there
        assert stricmp("[", "a") == -1

    def test_strncmp_case_sensitive(self):
        assert strncmp("abc", "abd", 2) == 0
        assert strncmp("abc", "ABC", 3) == 1

    def test_strkey(self):
        assert strkey("NAMEx", "name", 4)
        assert not strkey("nam", "name", 4)
        assert not strkey(None, "name", 4)

    def test_stristr(self):
        assert stristr("The Longest Yard", "longest") == "Longest Yard"
        assert stristr("abc", "z") is None
        assert stristr("abc", "") == "abc"


class TestCopy:
    def test_strncpyz_truncates(self):
        assert strncpyz("abcdef", 4) == "abc"

    def test_strncpyz_null_src(self):
        with pytest.raises(FatalError, match="NULL src"):
            strncpyz(None, 4)

    def test_strncpyz_bad_size(self):
        with pytest.raises(FatalError):
            strncpyz("a", 0)

    def test_strcat(self):
        assert strcat("base", 16, "q3") == "baseq3"

    def test_strcat_truncates(self):
        assert strcat("abc", 6, "defgh") == "abcde"
        assert strcat("abcde", 6, "f") == "abcde"

    def test_strcat_already_overflowed(self):
        with pytest.raises(FatalError, match="already overflowed"):
            strcat("abcdef", 6, "g")

    def test_strcat_null(self):
        with pytest.raises(FatalError):
            strcat(None, 6, "g")
        with pytest.raises(FatalError):
            strcat("a", 6, None)


class TestReplace:
    def test_counts_replacements(self):
        assert replace_s("$n", "Bob", "$n hit $n", 64) == ("Bob hit Bob", 2)

    def test_shrink(self):
        assert replace_s("abc", "x", "abcabc", 4) == ("xx", 2)

    def test_same_length(self):
        assert replace_s("a", "b", "aXa", 3) == ("bXb", 2)

    def test_growth_stops_at_bound(self):
        # each replacement adds two characters: 5 -> 7 fits, 7 -> 9 does not
        assert replace_s("a", "aaa", "a-a-a", 8) == ("aaa-a-a", 1)

    def test_replacement_not_rescanned(self):
        assert replace_s("a", "aa", "a", 10) == ("aa", 1)

    def test_no_match(self):
        assert replace_s("zz", "y", "abc", 10) == ("abc", 0)
        assert replace_s("", "y", "abc", 10) == ("abc", 0)

    def test_default_bound(self):
        text, count = replace_s("x", "xx", "x" * (MAX_STRING_CHARS - 1))
        assert count == 1
        assert len(text) == MAX_STRING_CHARS


class TestCase:
    def test_strlwr(self):
        assert strlwr("Q3DM17[X]") == "q3dm17[x]"

    def test_strupr(self):
        assert strupr("q3dm17_x") == "Q3DM17_X"

    def test_non_ascii_untouched(self):
        assert strlwr("\xc9") == "\xc9"
        assert strupr("\xe9") == "\xe9"


class TestPaths:
    def test_skip_path(self):
        assert skip_path("maps/q3dm17.bsp") == "q3dm17.bsp"
        assert skip_path("maps/") == "maps/"
        assert skip_path("") == ""

    def test_strip_extension(self):
        assert strip_extension("maps/q3dm17.bsp") == "maps/q3dm17"
        assert strip_extension("dir.d/file") == "dir.d/file"

    def test_default_extension(self):
        assert default_extension("demo", ".dm_68") == "demo.dm_68"
        assert default_extension("demo.dm_67", ".dm_68") == "demo.dm_67"
        assert default_extension("demo", ".cfg", 6) == "demo."

    def test_default_extension_bounded_by_qpath(self):
        path = default_extension("d" * 70, ".cfg")
        assert path == "d" * (MAX_QPATH - 1)


class TestEscaping:
    def test_encode(self):
        assert encode_string("50% #1") == "50#25 ##1"

    def test_encode_high_characters(self):
        assert encode_string("caf\xe9") == "caf#e9"

    def test_decode(self):
        assert decode_string("50#25 ##1") == "50% #1"

    def test_decode_trailing_hash(self):
        assert decode_string(encode_string("a#")) == "a#"

    def test_decode_malformed_passthrough(self):
        assert decode_string("#zz") == "#zz"
        assert decode_string(None) == ""
