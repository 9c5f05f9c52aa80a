r"""Quote file names and arguments so a POSIX shell reads them back exactly.

Each argument (or each line of stdin when no arguments are given) is printed
in the least obtrusive form that is still safe:

┌───────────┬─────────────────┬──────────────────────────────────────────────┐
│ Strategy  │ Example         │ Used when                                    │
├───────────┼─────────────────┼──────────────────────────────────────────────┤
│ bare      │ hello           │ printable, no shell metacharacters           │
│ double    │ "a b"           │ printable, nothing special inside "..."      │
│ single    │ '$HOME'         │ printable, anything else                     │
│ dollar    │ $'\a'           │ any unprintable or undecodable byte          │
└───────────┴─────────────────┴──────────────────────────────────────────────┘

With --general, printable strings are printed bare, for display rather than
for pasting into a shell.

Settings come from ~/.wordesc/config, the nearest .wordesc file, and
$WORDESC_CONFIG, in that order; command line options win.

Exit codes:
- 0: Success.
- 1: At least one result was truncated to the configured capacity.
- 2: Invalid configuration or options.
"""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import replace
from pathlib import Path

from wordesc import __version__
from wordesc.core.buffer import BoundedBuffer
from wordesc.core.classify import (
    FLAVOR_GENERAL,
    FLAVOR_SHELL,
    TextClassifier,
    classifier_for_locale,
    display_width,
    get_classifier,
)
from wordesc.core.config import (
    Config,
    close_logging,
    configure_logging,
    load_config,
    log_quote,
)
from wordesc.core.quote import Analysis, quote_to

EXIT_OK = 0
EXIT_TRUNCATED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wordesc",
        description="Quote strings for safe use in a POSIX shell.",
    )
    parser.add_argument("words", nargs="*", help="strings to quote (default: stdin lines)")
    parser.add_argument(
        "--general",
        action="store_true",
        help="escape for display instead of for the shell",
    )
    parser.add_argument("--encoding", help="text encoding (default: locale)")
    parser.add_argument(
        "--max-length", type=int, help="only consider this many input bytes"
    )
    parser.add_argument("--capacity", type=int, help="output buffer size in bytes")
    parser.add_argument(
        "--explain", action="store_true", help="show how each string was analyzed"
    )
    parser.add_argument(
        "--join", action="store_true", help="print all words on one line"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _apply_options(config: Config, args: argparse.Namespace) -> Config:
    """Command line options override config files."""
    if args.general:
        config = replace(config, flavor=FLAVOR_GENERAL)
    if args.encoding is not None:
        config = replace(config, encoding=args.encoding)
    if args.max_length is not None:
        if args.max_length < 0:
            raise ValueError(f"--max-length must not be negative, got {args.max_length}")
        config = replace(config, max_length=args.max_length)
    if args.capacity is not None:
        if args.capacity < 1:
            raise ValueError(f"--capacity must be at least 1, got {args.capacity}")
        config = replace(config, capacity=args.capacity)
    return config


def get_text_classifier(config: Config) -> TextClassifier:
    if config.encoding:
        return get_classifier(config.encoding)
    return classifier_for_locale()


def quote_word(
    data: bytes, config: Config, classifier: TextClassifier
) -> tuple[bytes, Analysis, bool]:
    """Quote one input. Returns (output, analysis, truncated)."""
    capacity = config.capacity
    if capacity is None:
        capacity = 4 * len(data) + 4
    buf = BoundedBuffer(capacity)
    analysis = quote_to(
        buf, data, config.max_length, config.flavor or FLAVOR_SHELL, classifier
    )
    log_quote(analysis.strategy, analysis.length, buf.truncated, data)
    return buf.getvalue(), analysis, buf.truncated


def format_analysis(
    word: bytes, analysis: Analysis, classifier: TextClassifier
) -> bytes:
    """Append the scan results and the terminal width of the quoted word."""
    details = (
        f"strategy={analysis.strategy} length={analysis.length} "
        f"printable={analysis.printable} bare={analysis.bare} "
        f"quotable={analysis.quotable} width={display_width(word, classifier)}"
    )
    return word + b"\t" + details.encode("ascii")


def read_lines(stream) -> list[bytes]:
    """Read raw lines, dropping one trailing newline from each."""
    lines = []
    for line in stream:
        if line.endswith(b"\n"):
            line = line[:-1]
        lines.append(line)
    return lines


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = _apply_options(load_config(Path.cwd()), args)
        classifier = get_text_classifier(config)
    except ValueError as e:
        print(f"wordesc: {e}", file=sys.stderr)
        return EXIT_USAGE

    configure_logging(config)
    try:
        return _run(args, config, classifier)
    finally:
        close_logging()


def _run(args: argparse.Namespace, config: Config, classifier: TextClassifier) -> int:
    if args.words:
        inputs = [os.fsencode(w) for w in args.words]
    else:
        inputs = read_lines(sys.stdin.buffer)

    out = sys.stdout.buffer
    status = EXIT_OK
    words = []
    for data in inputs:
        word, analysis, truncated = quote_word(data, config, classifier)
        if truncated:
            status = EXIT_TRUNCATED
        if args.explain:
            word = format_analysis(word, analysis, classifier)
        words.append(word)

    if args.join:
        out.write(b" ".join(words) + b"\n")
    else:
        for word in words:
            out.write(word + b"\n")
    out.flush()
    return status


if __name__ == "__main__":
    sys.exit(main())
