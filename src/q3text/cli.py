"""q3text: command-line access to the tokenizer, formatter and info codec.

Usage:
    q3text <command> [args...]

Commands:
    tokenize <file>             One "line<TAB>token" per token ('-' for stdin)
    compress <file>             Strip comments and collapse whitespace
    format <template> [args]    Render a template (args typed as int, float or str)
    info get <info> <key>       Look up a key
    info set <info> <key> <val> Print the updated info string (--big/--no-big)
    info list <info>            List pairs in order
    info validate <info>        Exit 1 if the string has forbidden characters

Environment:
    Q3TEXT_LOG_LEVEL    Logging level (default: WARNING)
    Q3TEXT_BIG_INFO     Use the 8192-character info bound by default (default: 0)

Exit status: 0 ok, 1 rejected input, 2 aborted operation.
"""

import argparse
import json
import logging
import sys

from .core.console import CONFIG
from .core.errors import Q3TextError
from .format.engine import format_text
from .info.infostring import iter_pairs, set_value_for_key, validate, value_for_key
from .parse.session import ParseSession
from .parse.text import compress

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_ABORTED = 2


def read_source(path):
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="latin-1") as f:
        return f.read()


def typed_arg(text):
    """Interpret a command-line argument as int, then float, else str."""
    for conv in (int, float):
        try:
            return conv(text)
        except ValueError:
            pass
    return text


# ---- Commands ----

def cmd_tokenize(args):
    name = args.name or args.file
    session = ParseSession(read_source(args.file), name,
                           print_sink=lambda text: print(text, end="", file=sys.stderr))
    read = session.parse_sep if args.sep else session.parse

    tokens = []
    while True:
        token = read()
        if not token.line:
            break
        tokens.append((token.line, str(token)))

    if args.json:
        print(json.dumps([{"line": line, "token": tok} for line, tok in tokens], indent=2))
    else:
        for line, tok in tokens:
            print(f"{line}\t{tok}")
    return EXIT_OK


def cmd_compress(args):
    sys.stdout.write(compress(read_source(args.file)))
    return EXIT_OK


def cmd_format(args):
    print(format_text(args.template, *(typed_arg(a) for a in args.args)))
    return EXIT_OK


def cmd_info(args):
    if args.info_command == "get":
        print(value_for_key(args.info, args.key))
        return EXIT_OK

    if args.info_command == "set":
        ok, info = set_value_for_key(args.info, args.key, args.value, big=args.big)
        print(info)
        return EXIT_OK if ok else EXIT_REJECTED

    if args.info_command == "list":
        pairs = list(iter_pairs(args.info))
        if args.json:
            print(json.dumps([{"key": k, "value": v} for k, v in pairs], indent=2))
        else:
            for k, v in pairs:
                print(f"{k}\t{v}")
        return EXIT_OK

    # validate
    if validate(args.info):
        print("valid")
        return EXIT_OK
    print("invalid")
    return EXIT_REJECTED


# ---- CLI setup ----

def build_parser():
    parser = argparse.ArgumentParser(
        prog="q3text",
        description="Tokenize script text, render format templates, edit info strings",
    )
    parser.add_argument("--json", action="store_true", help="Machine-readable JSON output")

    sub = parser.add_subparsers(dest="command", required=True)

    # tokenize
    p_tok = sub.add_parser("tokenize", help="Print the tokens of a file")
    p_tok.add_argument("file", help="File path ('-' for stdin)")
    p_tok.add_argument("--sep", action="store_true", help="Use separator-policy tokens")
    p_tok.add_argument("--name", help="Session name for diagnostics (default: file path)")

    # compress
    p_comp = sub.add_parser("compress", help="Strip comments and collapse whitespace")
    p_comp.add_argument("file", help="File path ('-' for stdin)")

    # format
    p_fmt = sub.add_parser("format", help="Render a format template")
    p_fmt.add_argument("template")
    p_fmt.add_argument("args", nargs="*")

    # info
    p_info = sub.add_parser("info", help="Info string operations")
    info_sub = p_info.add_subparsers(dest="info_command", required=True)

    p_get = info_sub.add_parser("get", help="Look up a key")
    p_get.add_argument("info")
    p_get.add_argument("key")

    p_set = info_sub.add_parser("set", help="Set or delete (empty value) a key")
    p_set.add_argument("info")
    p_set.add_argument("key")
    p_set.add_argument("value")
    p_set.add_argument("--big", action=argparse.BooleanOptionalAction,
                       default=CONFIG.big_info,
                       help="Use the 8192-character bound (default: Q3TEXT_BIG_INFO)")

    p_list = info_sub.add_parser("list", help="List pairs")
    p_list.add_argument("info")

    p_val = info_sub.add_parser("validate", help="Check for forbidden characters")
    p_val.add_argument("info")

    return parser


def main(argv=None):
    logging.basicConfig(level=CONFIG.log_level,
                        format="%(levelname)s: %(name)s: %(message)s")
    args = build_parser().parse_args(argv)

    commands = {
        "tokenize": cmd_tokenize,
        "compress": cmd_compress,
        "format": cmd_format,
        "info": cmd_info,
    }

    try:
        return commands[args.command](args)
    except Q3TextError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_ABORTED


if __name__ == "__main__":
    sys.exit(main())
