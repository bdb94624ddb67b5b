"""Size limits shared by the tokenizer, the info-string codec and the
bounded string helpers.

All bounds count characters including the terminator slot the wire
format reserves, so usable lengths are one less than the constant.
"""

MAX_STRING_CHARS = 1024  # default bound for in-place string edits
MAX_TOKEN_CHARS = 1024   # longest token is MAX_TOKEN_CHARS - 1

MAX_INFO_STRING = 1024   # per-client info strings
BIG_INFO_STRING = 8192   # server-wide info strings
BIG_INFO_VALUE = 8192

MAX_QPATH = 64           # game-relative file paths
