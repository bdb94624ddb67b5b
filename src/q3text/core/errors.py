"""Error levels and the exceptions that carry them.

A raised Q3TextError aborts the enclosing logical operation (one file
parse, one message build). Callers decide what dropping means for them.
"""

from enum import IntEnum


class ErrorLevel(IntEnum):
    FATAL = 1               # exit the entire game
    DROP = 2                # print to console and disconnect from game
    SERVERDISCONNECT = 3    # don't kill server
    DISCONNECT = 4          # client disconnected from the server
    NEED_CD = 5


class Q3TextError(Exception):
    """Base class for unrecoverable text-layer conditions."""

    level = ErrorLevel.DROP

    def __init__(self, message: str, level: ErrorLevel | None = None):
        super().__init__(message)
        if level is not None:
            self.level = level


class DropError(Q3TextError):
    level = ErrorLevel.DROP


class FatalError(Q3TextError):
    level = ErrorLevel.FATAL


class FormatError(Q3TextError, ValueError):
    """Template and argument list do not agree."""

    level = ErrorLevel.DROP


def error_for_level(level: ErrorLevel, message: str) -> Q3TextError:
    """Build the exception matching an error level."""
    if level == ErrorLevel.FATAL:
        return FatalError(message)
    if level == ErrorLevel.DROP:
        return DropError(message)
    return Q3TextError(message, level)
