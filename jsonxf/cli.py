"""Command line front end.

Pretty-print:
  jsonxf <foo.json >foo-pretty.json
Minimize:
  jsonxf -m <foo.json >foo-min.json
In place:
  jsonxf -i foo.json -o foo.json
"""

from __future__ import annotations

import argparse
import io
import logging
import os
import sys
from contextlib import ExitStack
from pathlib import Path

from jsonxf.env import chunk_size_from_env
from jsonxf.errors import FormatterError, FormatterIOError
from jsonxf.formatting.config import FormatterOptions, minimizer, pretty_printer
from jsonxf.formatting.files import open_input, output_for
from jsonxf.formatting.stream import format_stream
from jsonxf.logging_setup import configure_logging

logger = logging.getLogger(__name__)


def _decode_escapes(s: str) -> str:
    # Shells make a literal tab awkward to pass; accept the usual escapes.
    return s.replace("\\t", "\t").replace("\\n", "\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsonxf",
        description="Fast pretty-printing and minimizing of JSON-encoded UTF-8 data.",
    )
    src = parser.add_mutually_exclusive_group()
    src.add_argument("-i", "--input", metavar="FILE", help="read input from the given file (default: stdin)")
    src.add_argument("-s", "--string", metavar="JSON", help="format the given string instead of reading a file")
    parser.add_argument("-o", "--output", metavar="FILE", help="write output to the given file (default: stdout)")
    parser.add_argument(
        "-t",
        "--tab",
        metavar="TABSTR",
        help="use the given string to indent pretty-printed output (default: two spaces)",
    )
    parser.add_argument("-m", "--minimize", action="store_true", help="minimize JSON instead of pretty-printing it")
    parser.add_argument("--chunk-size", type=int, default=None, help="read buffer size in bytes")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output to stderr")
    return parser


def options_from_args(args: argparse.Namespace) -> FormatterOptions:
    if args.minimize:
        return minimizer()
    options = pretty_printer()
    if args.tab is not None:
        options = options.with_overrides(indent=_decode_escapes(args.tab))
    return options


def _is_std(name: str | None) -> bool:
    return name is None or name == "-"


def _silence_stdout() -> None:
    # Python flushes stdout again at exit; point it at devnull so a closed
    # pipe does not produce a second error.
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, sys.stdout.fileno())


def run(args: argparse.Namespace) -> dict[str, int]:
    options = options_from_args(args)
    chunk_size = args.chunk_size if args.chunk_size is not None else chunk_size_from_env()
    if chunk_size <= 0:
        raise FormatterError("--chunk-size must be positive")

    with ExitStack() as stack:
        if args.string is not None:
            # Raw argv bytes, including ones that are not valid UTF-8.
            source = io.BytesIO(os.fsencode(args.string))
        elif _is_std(args.input):
            source = sys.stdin.buffer
        else:
            source = stack.enter_context(open_input(Path(args.input)))

        if _is_std(args.output):
            sink = sys.stdout.buffer
        else:
            src = None if args.string is not None or _is_std(args.input) else Path(args.input)
            sink = stack.enter_context(output_for(src, Path(args.output)))

        return format_stream(source, sink, options, chunk_size=chunk_size)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv if argv is not None else sys.argv[1:])
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        stats = run(args)
    except FormatterIOError as e:
        if e.broken_pipe:
            _silence_stdout()
            return 0
        print(f"jsonxf: {e}", file=sys.stderr)
        return 1
    except FormatterError as e:
        print(f"jsonxf: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130

    logger.debug("done: %s", stats)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
