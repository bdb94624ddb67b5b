"""Locale-independent string helpers.

Comparisons and case conversion go through the LOCASE and UPCASE tables
so that results match byte for byte on every platform. Comparison
functions return -1, 0 or 1. Bounded helpers take buffer sizes that count
the terminator slot, like the limits in core.limits.
"""

from .byte_table import fold, upper
from .console import com_error
from .errors import ErrorLevel
from .limits import MAX_QPATH, MAX_STRING_CHARS


def _sign(v: int) -> int:
    return (v > 0) - (v < 0)


def stricmpn(s1: str | None, s2: str | None, n: int) -> int:
    """Case-insensitive comparison of at most n characters."""
    if s1 is None:
        return 0 if s2 is None else -1
    if s2 is None:
        return 1

    a = s1[:n]
    b = s2[:n]
    for c1, c2 in zip(a, b):
        d = fold(c1) - fold(c2)
        if d:
            return _sign(d)
    return _sign(len(a) - len(b))


def stricmp(s1: str | None, s2: str | None) -> int:
    if s1 is None or s2 is None:
        return stricmpn(s1, s2, 0)
    return stricmpn(s1, s2, max(len(s1), len(s2)))


def strncmp(s1: str | None, s2: str | None, n: int) -> int:
    """Case-sensitive comparison of at most n characters."""
    if s1 is None:
        return 0 if s2 is None else -1
    if s2 is None:
        return 1

    a = s1[:n]
    b = s2[:n]
    if a == b:
        return 0
    return -1 if a < b else 1


def strkey(s: str | None, key: str | None, key_len: int) -> bool:
    """True if the first key_len characters match case-insensitively."""
    if s is None or key is None or len(s) < key_len or len(key) < key_len:
        return False
    return all(fold(s[i]) == fold(key[i]) for i in range(key_len))


def stristr(haystack: str, needle: str) -> str | None:
    """Case-insensitive substring search.

    Returns the tail of haystack starting at the first match, or None.
    """
    if not needle:
        return haystack

    n = len(needle)
    for i in range(len(haystack) - n + 1):
        if strkey(haystack[i:i + n], needle, n):
            return haystack[i:]
    return None


def strncpyz(src: str, dest_size: int) -> str:
    """Copy into a buffer of dest_size characters, keeping room for a terminator."""
    if src is None:
        com_error(ErrorLevel.FATAL, "Q_strncpyz: NULL src")
    if dest_size < 1:
        com_error(ErrorLevel.FATAL, "Q_strncpyz: destsize < 1")
    return src[:dest_size - 1]


def strcat(dest: str, size: int, src: str) -> str:
    """Append src to dest within a buffer of size characters.

    The result is truncated to size - 1 characters. A dest that already
    fills the buffer is an overflow that happened somewhere else.
    """
    if dest is None or src is None:
        com_error(ErrorLevel.FATAL, "Q_strcat: NULL argument")
    if len(dest) >= size:
        com_error(ErrorLevel.FATAL, "Q_strcat: already overflowed")
    return dest + src[:size - len(dest) - 1]


def replace_s(old: str, new: str, text: str,
              max_len: int = MAX_STRING_CHARS) -> tuple[str, int]:
    """Replace every occurrence of old with new, left to right.

    Replacements that grow the text stop before the result would pass
    max_len characters. Returns (text, replacement_count).
    """
    if not old or not text:
        return text or "", 0

    grow = len(new) - len(old)
    count = 0
    index = text.find(old)
    while index >= 0:
        if grow > 0 and len(text) + grow > max_len:
            break
        text = text[:index] + new + text[index + len(old):]
        count += 1
        index = text.find(old, index + len(new))
    return text, count


def strlwr(s: str) -> str:
    return "".join(chr(fold(c)) for c in s)


def strupr(s: str) -> str:
    return "".join(chr(upper(c)) for c in s)


# ---- Paths ----

def skip_path(pathname: str) -> str:
    """Return the file name portion of a '/' separated path."""
    if not pathname:
        return ""
    slash = pathname.rfind('/')
    if 0 <= slash < len(pathname) - 1:
        return pathname[slash + 1:]
    return pathname


def strip_extension(path: str) -> str:
    if not path:
        return ""
    slash = path.rfind('/')
    dot = path.rfind('.')
    # the dot must belong to the file name, not a directory
    if dot > slash:
        return path[:dot]
    return path


def default_extension(path: str, extension: str, max_size: int = MAX_QPATH) -> str:
    """Append extension unless the file name already has one."""
    path = path or ""
    slash = path.rfind('/')
    dot = path.rfind('.')
    if path and dot > slash:
        return path[:max_size - 1]
    return (path + extension)[:max_size - 1]


# ---- Escaping ----

_HEXTAB = "0123456789abcdef"


def encode_string(text: str) -> str:
    """Escape '%' and non-ASCII characters as '#xx' and '#' as '##'."""
    if not text:
        return ""

    out = []
    for ch in text:
        c = ord(ch)
        if ch == '#':
            out.append("##")
        elif c > 127 or ch == '%':
            c &= 0xFF
            out.append('#' + _HEXTAB[c >> 4] + _HEXTAB[c & 0x0F])
        else:
            out.append(ch)
    return "".join(out)


def _is_hex(ch: str) -> bool:
    return ch in "0123456789abcdefABCDEF"


def decode_string(text: str | None) -> str:
    """Reverse encode_string. Malformed escapes pass through untouched."""
    if text is None:
        return ""

    out = []
    i = 0
    n = len(text)
    while i < n:
        if text[i] == '#':
            if i + 2 < n and _is_hex(text[i + 1]) and _is_hex(text[i + 2]):
                out.append(chr(int(text[i + 1:i + 3], 16)))
                i += 3
                continue
            if i + 1 < n and text[i + 1] == '#':
                out.append('#')
                i += 2
                continue
        out.append(text[i])
        i += 1
    return "".join(out)
