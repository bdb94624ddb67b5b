"""Info strings: flat key/value state packed into one bounded string.

Wire format:
  \\key1\\value1\\key2\\value2...

The leading backslash is optional. Keys and values never contain a
backslash, a double quote or a semicolon. Standard info strings hold fewer
than MAX_INFO_STRING (1024) characters and carry per-client state; big ones
hold fewer than BIG_INFO_STRING (8192) and carry server-wide metadata.

Key comparison is case-insensitive through the byte table and requires an
exact length match, so "name" never matches "names".

The codec has no print sink. A rejected key or value is reported through
the module logger (q3text.info.infostring) at WARNING and the call returns
False; oversize strings raise DropError.
"""

import logging

from ..core.console import com_error
from ..core.errors import ErrorLevel
from ..core.limits import BIG_INFO_STRING, BIG_INFO_VALUE, MAX_INFO_STRING
from ..core.strings import strkey

logger = logging.getLogger(__name__)

INVALID_KEY_VALUE_CHARS = frozenset('\\";')
INVALID_INFO_CHARS = frozenset('";')


def info_limit(big: bool) -> int:
    return BIG_INFO_STRING if big else MAX_INFO_STRING


def _key_matches(candidate: str, key: str) -> bool:
    return len(candidate) == len(key) and strkey(candidate, key, len(key))


def _scan(info: str, i: int) -> int:
    """Index of the next backslash at or after i, or len(info)."""
    j = info.find('\\', i)
    return len(info) if j < 0 else j


def value_for_key(info: str | None, key: str | None) -> str:
    """Value of the first pair whose key matches, or "" if there is none.

    A matched value of BIG_INFO_VALUE characters or more means the string
    was corrupted upstream; that aborts the operation.
    """
    if not info or not key:
        return ""

    n = len(info)
    i = 1 if info[0] == '\\' else 0

    while i < n:
        key_end = _scan(info, i)
        if key_end >= n:
            break
        candidate = info[i:key_end]

        value_start = key_end + 1
        value_end = _scan(info, value_start)
        if _key_matches(candidate, key):
            if value_end - value_start >= BIG_INFO_VALUE:
                com_error(ErrorLevel.DROP, "Info_ValueForKey: oversize infostring value")
            return info[value_start:value_end]

        i = value_end + 1

    return ""


def next_pair(info: str | None, cursor: int = 0) -> tuple[str, str, int] | None:
    """Read the pair starting at cursor.

    Returns (key, value, next_cursor), or None once no complete pair is
    left. Pass next_cursor back in to continue.
    """
    if not info or cursor >= len(info):
        return None

    n = len(info)
    i = cursor
    if info[i] == '\\':
        i += 1

    key_end = _scan(info, i)
    if key_end >= n:
        return None

    value_end = _scan(info, key_end + 1)
    return info[i:key_end], info[key_end + 1:value_end], value_end


def iter_pairs(info: str | None):
    """Yield every (key, value) pair in order."""
    cursor = 0
    while True:
        pair = next_pair(info, cursor)
        if pair is None:
            return
        key, value, cursor = pair
        yield key, value


def remove_key(info: str | None, key: str | None) -> str:
    """Return info without any pair whose key matches."""
    if not info or not key or '\\' in key:
        return info or ""

    n = len(info)
    kept = []
    last = 0
    i = 0

    while i < n:
        start = i
        if info[i] == '\\':
            i += 1
        key_end = _scan(info, i)
        if key_end >= n:
            break
        candidate = info[i:key_end]
        i = _scan(info, key_end + 1)

        if _key_matches(candidate, key):
            kept.append(info[last:start])
            last = i

    kept.append(info[last:])
    return "".join(kept)


def validate(info: str | None) -> bool:
    """False if info contains characters that would confuse the parsers."""
    if info is None:
        return True
    return not any(c in INVALID_INFO_CHARS for c in info)


def validate_key_value(s: str | None) -> bool:
    if s is None:
        return True
    return not any(c in INVALID_KEY_VALUE_CHARS for c in s)


def set_value_for_key(info: str, key: str, value: str | None,
                      big: bool = False) -> tuple[bool, str]:
    """Set, replace or (with an empty value) delete a key.

    Returns (ok, new_info). Invalid characters or an empty key leave the
    string unchanged, report False and log a warning on this module's
    logger. An info string that already fills its bound, or would after
    the change, aborts the operation.
    """
    info = info or ""
    value = value or ""
    limit = info_limit(big)

    if len(info) >= limit:
        com_error(ErrorLevel.DROP, "Info_SetValueForKey: oversize infostring")

    if not key or not validate_key_value(key):
        logger.warning("Invalid key name: '%s'", key)
        return False, info

    if not validate_key_value(value):
        logger.warning("Invalid value name: '%s'", value)
        return False, info

    result = remove_key(info, key)
    if not value:
        return True, result

    result = f"{result}\\{key}\\{value}"
    if len(result) >= limit:
        com_error(ErrorLevel.DROP, "Info string length exceeded (%i >= %i)",
                  len(result), limit)

    return True, result


class InfoString:
    """Mutable holder for one info string and its size tier."""

    def __init__(self, text: str = "", big: bool = False):
        self.big = big
        self.limit = info_limit(big)
        text = text or ""
        if len(text) >= self.limit:
            com_error(ErrorLevel.DROP, "InfoString: oversize infostring (%i >= %i)",
                      len(text), self.limit)
        self.text = text

    @classmethod
    def from_pairs(cls, pairs, big: bool = False) -> "InfoString":
        info = cls(big=big)
        for key, value in pairs:
            info.set(key, value)
        return info

    def get(self, key: str) -> str:
        return value_for_key(self.text, key)

    def set(self, key: str, value: str) -> bool:
        ok, self.text = set_value_for_key(self.text, key, value, self.big)
        return ok

    def remove(self, key: str) -> None:
        self.text = remove_key(self.text, key)

    def validate(self) -> bool:
        return validate(self.text)

    def items(self) -> list[tuple[str, str]]:
        return list(iter_pairs(self.text))

    def __getitem__(self, key: str) -> str:
        return self.get(key)

    def __contains__(self, key: str) -> bool:
        return any(_key_matches(k, key) for k, _ in iter_pairs(self.text))

    def __iter__(self):
        return iter_pairs(self.text)

    def __len__(self):
        return len(self.text)

    def __str__(self):
        return self.text

    def __repr__(self):
        return f"InfoString({self.text!r}, big={self.big})"
