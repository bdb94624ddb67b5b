"""Tokenizer for configuration and script text.

A ParseSession owns everything one parse job needs: the buffer, the cursor,
the line counter and the session name used in diagnostics. Tokens are
requested one at a time; each call skips whitespace and comments, then
reads either a quoted string or a word.

Two boundary policies share the skipping and quoting core:
  - whitespace policy (parse / parse_ext): a word ends at the first byte
    <= 0x20
  - separator policy (parse_sep): a word also ends at any of \\n ; = { },
    and a lone separator is returned as a one-character token

Comments are // to end of line and /* ... */; both may repeat before real
content. Tokens longer than MAX_TOKEN_CHARS - 1 are truncated silently.
"""

from enum import Enum

from ..core.byte_table import is_separator
from ..core.console import PrintSink, com_error, com_printf
from ..core.errors import ErrorLevel
from ..core.limits import MAX_TOKEN_CHARS
from ..core.strings import strncpyz
from ..format.engine import format_text


class ParseState(Enum):
    READY = "ready"
    SKIPPING_WHITESPACE = "skipping_whitespace"
    IN_LINE_COMMENT = "in_line_comment"
    IN_BLOCK_COMMENT = "in_block_comment"
    IN_QUOTED_TOKEN = "in_quoted_token"
    IN_WORD_TOKEN = "in_word_token"
    EXHAUSTED = "exhausted"


class Token(str):
    """Token text plus the line it started on (0 when no token was found)."""

    line: int

    def __new__(cls, text: str = "", line: int = 0):
        obj = super().__new__(cls, text)
        obj.line = line
        return obj

    def __repr__(self):
        return f"Token({str(self)!r}, line={self.line})"


class ParseSession:
    """One parse job over a fully materialized buffer. Not re-entrant."""

    def __init__(self, data: str | bytes | None, name: str = "",
                 print_sink: PrintSink | None = None):
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode("latin-1")
        self.data = data or ""
        self.pos = 0
        self.print_sink = print_sink
        self.begin(name)

    def begin(self, name: str) -> None:
        """Reset line tracking and name the session for diagnostics."""
        self.lines = 1
        self.token_line = 0
        self.name = strncpyz(name or "", MAX_TOKEN_CHARS)
        self.state = ParseState.READY if self.pos < len(self.data) else ParseState.EXHAUSTED

    # ---- Cursor ----

    @property
    def at_end(self) -> bool:
        return self.state == ParseState.EXHAUSTED or self.pos >= len(self.data)

    @property
    def remaining(self) -> str:
        if self.state == ParseState.EXHAUSTED:
            return ""
        return self.data[self.pos:]

    @property
    def current_line(self) -> int:
        """Line of the last token, or the running line count between tokens."""
        return self.token_line or self.lines

    def _exhaust(self) -> None:
        self.pos = len(self.data)
        self.state = ParseState.EXHAUSTED

    # ---- Shared core ----

    def _skip_whitespace(self) -> tuple[bool, bool]:
        """Skip bytes <= 0x20. Returns (content_follows, saw_newline)."""
        self.state = ParseState.SKIPPING_WHITESPACE
        data = self.data
        n = len(data)
        newline = False

        while self.pos < n and data[self.pos] <= ' ':
            c = data[self.pos]
            if c == '\0':
                return False, newline
            if c == '\n':
                self.lines += 1
                newline = True
            self.pos += 1

        return self.pos < n, newline

    def _skip_to_content(self, allow_line_breaks: bool) -> bool:
        """Skip whitespace and comments.

        Returns False when no token should be read: the buffer ran out, or a
        line break was crossed while line breaks are disallowed.
        """
        self.token_line = 0
        if self.at_end:
            self._exhaust()
            return False

        data = self.data
        while True:
            content, newline = self._skip_whitespace()
            if not content:
                self._exhaust()
                return False
            if newline and not allow_line_breaks:
                self.state = ParseState.READY
                return False

            if data.startswith("//", self.pos):
                self.state = ParseState.IN_LINE_COMMENT
                eol = data.find('\n', self.pos)
                if eol < 0:
                    self._exhaust()
                    return False
                # the newline itself is counted by the next whitespace skip
                self.pos = eol
            elif data.startswith("/*", self.pos):
                self.state = ParseState.IN_BLOCK_COMMENT
                close = data.find("*/", self.pos + 2)
                if close < 0:
                    self.lines += data.count('\n', self.pos)
                    self._exhaust()
                    return False
                self.lines += data.count('\n', self.pos, close)
                self.pos = close + 2
            else:
                return True

    def _read_quoted(self) -> Token:
        """Read a "quoted" token; the opening quote is at the cursor."""
        self.state = ParseState.IN_QUOTED_TOKEN
        data = self.data
        n = len(data)
        chars = []
        self.pos += 1

        while self.pos < n:
            c = data[self.pos]
            if c == '"':
                self.pos += 1
                break
            if c == '\0':
                # left in place so the next call ends the session
                break
            if c == '\n':
                self.lines += 1
            if len(chars) < MAX_TOKEN_CHARS - 1:
                chars.append(c)
            self.pos += 1

        self.state = ParseState.READY
        return Token("".join(chars), self.token_line)

    def _read_word(self, separators: bool) -> Token:
        self.state = ParseState.IN_WORD_TOKEN
        data = self.data
        n = len(data)
        start = self.pos

        while self.pos < n:
            c = data[self.pos]
            if c <= ' ' or (separators and is_separator(c)):
                break
            self.pos += 1

        self.state = ParseState.READY
        return Token(data[start:min(self.pos, start + MAX_TOKEN_CHARS - 1)],
                     self.token_line)

    # ---- Tokens ----

    def parse_ext(self, allow_line_breaks: bool) -> Token:
        """Next whitespace-delimited or quoted token.

        An empty token with line 0 means nothing was read: either the input
        is exhausted or a line break was hit with allow_line_breaks False.
        """
        if not self._skip_to_content(allow_line_breaks):
            return Token("", 0)

        self.token_line = self.lines
        if self.data[self.pos] == '"':
            return self._read_quoted()
        return self._read_word(separators=False)

    def parse(self) -> Token:
        return self.parse_ext(True)

    def parse_sep(self, allow_line_breaks: bool = True) -> Token:
        """Next token under the separator policy."""
        if not self._skip_to_content(allow_line_breaks):
            return Token("", 0)

        self.token_line = self.lines
        c = self.data[self.pos]
        if c == '"':
            return self._read_quoted()
        if is_separator(c):
            self.pos += 1
            self.state = ParseState.READY
            return Token(c, self.token_line)
        return self._read_word(separators=True)

    def __iter__(self):
        while True:
            token = self.parse()
            if not token.line:
                return
            yield token

    # ---- Helpers ----

    def match_token(self, expected: str) -> Token:
        """Read the next token and abort the parse unless it equals expected."""
        token = self.parse()
        if token != expected:
            com_error(ErrorLevel.DROP, "MatchToken: %s != %s", token, expected)
        return token

    def skip_braced_section(self, depth: int = 0) -> int:
        """Skip tokens until the braces opened so far are balanced.

        With depth 0 the first token is expected to be the opening brace.
        Returns the remaining depth, non-zero only if the input ran out.
        """
        while True:
            token = self.parse_ext(True)
            if token == '{':
                depth += 1
            elif token == '}':
                depth -= 1
            if depth <= 0 or self.at_end:
                return depth

    def skip_rest_of_line(self) -> None:
        if self.at_end:
            return
        eol = self.data.find('\n', self.pos)
        if eol < 0:
            self.pos = len(self.data)
            return
        self.lines += 1
        self.pos = eol + 1

    def skip_till_separators(self) -> None:
        """Advance past the next separator character."""
        data = self.data
        n = len(data)
        while self.pos < n:
            c = data[self.pos]
            self.pos += 1
            if is_separator(c):
                if c == '\n':
                    self.lines += 1
                return

    # ---- Diagnostics ----

    def error(self, fmt: str, *args) -> str:
        return self._report("ERROR", fmt, args)

    def warning(self, fmt: str, *args) -> str:
        return self._report("WARNING", fmt, args)

    def _report(self, kind: str, fmt: str, args) -> str:
        message = format_text(fmt, *args)
        return com_printf(self.print_sink, "%s: %s, line %d: %s\n",
                          kind, self.name, self.current_line, message)
