"""Whole-buffer text helpers: comment stripping and delimiter splitting."""


def compress(data: str | None) -> str:
    """Strip comments and collapse whitespace.

    Runs of spaces/tabs become one space, runs containing a line break become
    one newline, quoted strings are copied untouched. Pending whitespace is
    only emitted before real content, so trailing whitespace disappears.
    """
    if not data:
        return ""

    out = []
    i = 0
    n = len(data)
    newline = False
    whitespace = False

    while i < n:
        c = data[i]
        if data.startswith("//", i):
            eol = data.find('\n', i + 2)
            i = n if eol < 0 else eol
        elif data.startswith("/*", i):
            close = data.find("*/", i + 2)
            i = n if close < 0 else close + 2
        elif c in '\n\r':
            newline = True
            i += 1
        elif c in ' \t':
            whitespace = True
            i += 1
        else:
            if newline:
                out.append('\n')
            elif whitespace:
                out.append(' ')
            newline = whitespace = False

            if c == '"':
                close = data.find('"', i + 1)
                end = n if close < 0 else close + 1
                out.append(data[i:end])
                i = end
            else:
                out.append(c)
                i += 1

    return "".join(out)


def _skip_blanks(text: str, i: int, delim: str) -> int:
    # leading blanks are only skipped for printable delimiters
    if delim >= ' ':
        while i < len(text) and text[i] <= ' ':
            i += 1
    return i


def split(text: str, delim: str, max_parts: int) -> list[str]:
    """Split text on delim into at most max_parts parts.

    Blanks after each delimiter are skipped when delim is printable. An
    empty trailing part is dropped. When max_parts is reached the last part
    stops at the next delimiter and the rest of the input is discarded.
    A NUL ends the input.
    """
    if max_parts <= 0:
        return []

    text = text.split('\0', 1)[0]
    n = len(text)
    parts = []
    i = _skip_blanks(text, 0, delim)

    while True:
        end = text.find(delim, i)
        if end < 0:
            end = n
        part = text[i:end]

        if len(parts) == max_parts - 1:
            parts.append(part)
            break
        if end >= n:
            if part:
                parts.append(part)
            break

        parts.append(part)
        i = _skip_blanks(text, end + 1, delim)

    return parts
