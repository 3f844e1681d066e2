#!/usr/bin/env python3
"""oxc — Onyx to C transpiler.

Usage: python main.py <input.ox> [-o output.c] [--strip-comments] [--verbose] [--emit-lines]
"""

import sys
import argparse
import logging

from . import __version__
from .classifier import classify_source
from .errors import LoadError
from .session import TranspilerConfig
from .transpiler import Transpiler, load_source


def _configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(message)s",
    )


def _dump_lines(source: str):
    """Print the classified line stream for debugging."""
    for line in classify_source(source):
        print(f"{line.line:4} {line.kind.name:<10} {line.text}")


def main(argv=None):
    argparser = argparse.ArgumentParser(prog="oxc", description="Onyx to C transpiler")
    argparser.add_argument("input", help="Input .ox file")
    argparser.add_argument("-o", "--output", default="out.c",
                           help="Output .c file (default: out.c)")
    argparser.add_argument("-v", "--version", action="version", version=__version__)
    argparser.add_argument("--verbose", action="store_true",
                           help="Log diagnostics while translating")
    argparser.add_argument("--strip-comments", action="store_true",
                           help="Drop source comments from the output")
    argparser.add_argument("--emit-lines", action="store_true",
                           help="Print the classified line stream")

    args = argparser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.emit_lines:
        try:
            source = load_source(args.input)
        except LoadError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        _dump_lines(source)
        return

    config = TranspilerConfig(verbose=args.verbose,
                              keep_comments=not args.strip_comments)
    if not Transpiler(config).process_file(args.input, args.output):
        print(f"failed to transpile - {args.input}", file=sys.stderr)
        sys.exit(1)

    print(f"Transpiled {args.input} → {args.output}")


if __name__ == "__main__":
    main()
