"""Format engine: printf-style templates in the engine's directive dialect.

Directive grammar, in order:
  %[flags][width][.precision]conversion

  flags       '-' left adjust, '0' zero pad, '#' alternate form,
              'R' reduce: emit nothing for a zero-valued number
  width       digits, or '*' to take the next argument
  precision   '.' then digits, or '.*' for the next argument; a bare '.'
              means 0
  conversion  d i f s c %, anything else renders the next argument's
              plain text form

Floats are only ever space padded on the left; strings pad after the text
whatever the '-' flag says.
"""

import math
from dataclasses import dataclass
from enum import IntFlag
from numbers import Integral, Real

from ..core.errors import FatalError, FormatError


class FormatFlag(IntFlag):
    NONE = 0
    ALT = 0x001        # alternate form, accepted and ignored
    LADJUST = 0x004    # left adjustment
    ZEROPAD = 0x080    # zero (as opposed to blank) pad
    REDUCE = 0x200     # do not emit anything if value is zero


DEFAULT_FLOAT_PRECISION = 6
NULL_STRING = "(null)"


@dataclass(frozen=True)
class FormatDirective:
    """One parsed ``%...`` directive."""
    flags: FormatFlag = FormatFlag.NONE
    width: int = 0
    precision: int = -1   # -1 = unset
    conversion: str = ""

    @property
    def left_adjust(self) -> bool:
        return bool(self.flags & FormatFlag.LADJUST)

    @property
    def zero_pad(self) -> bool:
        return bool(self.flags & FormatFlag.ZEROPAD)

    @property
    def reduce(self) -> bool:
        return bool(self.flags & FormatFlag.REDUCE)


class _Arguments:
    """Positional argument cursor; running dry is an error, never a zero."""

    def __init__(self, args):
        self.args = tuple(args)
        self.index = 0

    def take(self, template: str):
        if self.index >= len(self.args):
            raise FormatError(
                f"not enough arguments for format {template!r} "
                f"(got {len(self.args)})")
        value = self.args[self.index]
        self.index += 1
        return value


def _as_int(value, template: str) -> int:
    if isinstance(value, Integral):
        return int(value)
    if isinstance(value, Real):
        if not math.isfinite(value):
            raise FormatError(f"finite number expected in {template!r}, got {value!r}")
        return round(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise FormatError(f"integer expected in {template!r}, got {value!r}")


def _as_float(value, template: str) -> float:
    if isinstance(value, Real):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            pass
    raise FormatError(f"number expected in {template!r}, got {value!r}")


def parse_directive(template: str, i: int, args: _Arguments):
    """Parse the options of one directive starting just after its '%'.

    Returns (directive, index of the conversion character). The index equals
    len(template) when the template ends inside the options.
    """
    flags = FormatFlag.NONE
    width = 0
    prec = -1
    n = len(template)

    while i < n:
        ch = template[i]
        if ch == '-':
            flags |= FormatFlag.LADJUST
            i += 1
        elif ch == '0':
            flags |= FormatFlag.ZEROPAD
            i += 1
        elif ch == '#':
            flags |= FormatFlag.ALT
            i += 1
        elif ch == 'R':
            flags |= FormatFlag.REDUCE
            i += 1
        elif ch == '.':
            i += 1
            if i < n and template[i] == '*':
                prec = _as_int(args.take(template), template)
                i += 1
            else:
                prec = 0
                while i < n and '0' <= template[i] <= '9':
                    prec = 10 * prec + ord(template[i]) - 0x30
                    i += 1
        elif '1' <= ch <= '9':
            width = 0
            while i < n and '0' <= template[i] <= '9':
                width = 10 * width + ord(template[i]) - 0x30
                i += 1
        elif ch == '*':
            width = _as_int(args.take(template), template)
            i += 1
        else:
            break

    conversion = template[i] if i < n else ""
    return FormatDirective(flags, width, prec, conversion), i


def _pad(d: FormatDirective, text: str) -> str:
    fill = '0' if d.zero_pad else ' '
    return fill * max(0, d.width - len(text))


def render_int(d: FormatDirective, value: int) -> str:
    if d.reduce and value == 0:
        return ""

    digits = str(abs(value))
    sign = "-" if value < 0 else ""
    pad = _pad(d, sign + digits)

    if d.left_adjust:
        return sign + digits + pad
    if d.zero_pad:
        return sign + pad + digits
    return pad + sign + digits


def render_float(d: FormatDirective, value: float) -> str:
    if d.reduce and value == 0.0:
        return ""

    prec = DEFAULT_FLOAT_PRECISION if d.precision < 0 else d.precision
    text = f"{value:.{prec}f}"
    return ' ' * max(0, d.width - len(text)) + text


def render_string(d: FormatDirective, value) -> str:
    text = NULL_STRING if value is None else str(value)
    if 0 <= d.precision < len(text):
        text = text[:d.precision]
    return text + ' ' * max(0, d.width - len(text))


def render_char(value, template: str) -> str:
    if isinstance(value, str) and len(value) == 1:
        return value
    if isinstance(value, Integral) and 0 <= value <= 0x10FFFF:
        return chr(value)
    raise FormatError(f"character expected in {template!r}, got {value!r}")


def vsprintf(template: str, args=()) -> tuple[str, int]:
    """Render a template against a sequence of positional arguments.

    Returns the text and its length, the latter for callers writing into
    fixed-size buffers.
    """
    if template is None:
        raise FormatError("NULL format template")

    cursor = _Arguments(args)
    out = []
    i = 0
    n = len(template)

    while i < n:
        ch = template[i]
        if ch != '%':
            out.append(ch)
            i += 1
            continue

        directive, i = parse_directive(template, i + 1, cursor)
        if i >= n:
            # dangling '%' or options at end of template
            break

        conv = directive.conversion
        if conv in ('d', 'i'):
            out.append(render_int(directive, _as_int(cursor.take(template), template)))
        elif conv == 'f':
            out.append(render_float(directive, _as_float(cursor.take(template), template)))
        elif conv == 's':
            out.append(render_string(directive, cursor.take(template)))
        elif conv == 'c':
            out.append(render_char(cursor.take(template), template))
        elif conv == '%':
            out.append('%')
        else:
            value = cursor.take(template)
            out.append(NULL_STRING if value is None else str(value))
        i += 1

    text = "".join(out)
    return text, len(text)


def format_text(template: str, *args) -> str:
    """Render a template; see the module docstring for the grammar."""
    return vsprintf(template, args)[0]


def com_sprintf(size: int, template: str, *args) -> str:
    """Render into a buffer of ``size`` characters including the terminator.

    Overflowing the buffer is a programming error and raises FatalError.
    """
    text, length = vsprintf(template, args)
    if length >= size:
        raise FatalError(f"Com_sprintf: overflow of {length} in {size}")
    return text
