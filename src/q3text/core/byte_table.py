"""Byte classification for all 256 values.

Case folding is table driven so comparisons never depend on the host
locale; two peers on different platforms must agree on whether two keys
are equal. The separator class drives separator-policy tokenizing.
"""

from dataclasses import dataclass
from enum import Enum


class ByteClass(Enum):
    NUL = "nul"
    CONTROL = "control"
    WHITESPACE = "whitespace"
    SEPARATOR = "separator"
    LETTER_UPPER = "letter_upper"
    LETTER_LOWER = "letter_lower"
    DIGIT = "digit"
    PUNCTUATION = "punctuation"
    HIGH = "high"


@dataclass(frozen=True)
class ByteInfo:
    value: int
    folded: int
    byte_class: ByteClass
    separator: bool
    whitespace: bool
    printable: bool


# Newline is both whitespace and a separator; the separator policy
# checks separators first.
SEPARATORS = frozenset(b"\n;={}")

LOCASE = bytes(v + 0x20 if 0x41 <= v <= 0x5A else v for v in range(256))
UPCASE = bytes(v - 0x20 if 0x61 <= v <= 0x7A else v for v in range(256))


def _code(b) -> int:
    if isinstance(b, str):
        return ord(b)
    return b


def fold(b) -> int:
    """Lower-case an ASCII letter; every other byte maps to itself."""
    c = _code(b)
    return LOCASE[c] if c < 256 else c


def upper(b) -> int:
    c = _code(b)
    return UPCASE[c] if c < 256 else c


def is_separator(b) -> bool:
    return _code(b) in SEPARATORS


def is_whitespace(b) -> bool:
    """Bytes at or below 0x20 end a whitespace-policy token."""
    return _code(b) <= 0x20


def classify_byte(value: int) -> ByteInfo:
    """Classify a single byte value."""
    if value == 0x00:
        cls = ByteClass.NUL
    elif value in SEPARATORS and value != 0x0A:
        cls = ByteClass.SEPARATOR
    elif value <= 0x20:
        cls = ByteClass.WHITESPACE
    elif 0x41 <= value <= 0x5A:
        cls = ByteClass.LETTER_UPPER
    elif 0x61 <= value <= 0x7A:
        cls = ByteClass.LETTER_LOWER
    elif 0x30 <= value <= 0x39:
        cls = ByteClass.DIGIT
    elif value < 0x7F:
        cls = ByteClass.PUNCTUATION
    elif value == 0x7F:
        cls = ByteClass.CONTROL
    else:
        cls = ByteClass.HIGH

    return ByteInfo(value, LOCASE[value], cls,
                    value in SEPARATORS, value <= 0x20,
                    0x20 <= value <= 0x7E)


# Build the complete table
BYTE_TABLE = [classify_byte(v) for v in range(256)]
