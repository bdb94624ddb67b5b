"""Print and error sinks plus environment configuration.

The library never writes to a terminal on its own. Diagnostics are handed
to a print sink (any callable taking the finished text); unrecoverable
conditions go through com_error, which raises and never returns.

Environment:
    Q3TEXT_LOG_LEVEL    Logging level used by the CLI (default: WARNING)
    Q3TEXT_BIG_INFO     Treat info strings as big by default in the CLI (default: 0)
"""

import os
import sys
from dataclasses import dataclass
from typing import Callable

from ..format.engine import format_text
from .errors import ErrorLevel, error_for_level

PrintSink = Callable[[str], None]


@dataclass(frozen=True)
class Config:
    log_level: str = "WARNING"
    big_info: bool = False


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config(environ=None) -> Config:
    """Read configuration from the environment."""
    env = os.environ if environ is None else environ
    return Config(
        log_level=env.get("Q3TEXT_LOG_LEVEL", "WARNING").upper(),
        big_info=_env_flag(env.get("Q3TEXT_BIG_INFO", "0")),
    )


CONFIG = load_config()


def default_print_sink(text: str) -> None:
    print(text, end="", file=sys.stderr)


def com_printf(sink: PrintSink | None, fmt: str, *args) -> str:
    """Format a message and hand it to a sink. Returns the text."""
    text = format_text(fmt, *args)
    (sink or default_print_sink)(text)
    return text


def com_error(level: ErrorLevel, fmt: str, *args):
    """Abort the current operation with a formatted message."""
    raise error_for_level(level, format_text(fmt, *args))
