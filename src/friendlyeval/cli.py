"""Command-line entry point: ``friendlyeval [FILE]``.

Reads R source from FILE (or stdin), rewrites capture calls into native
quoting forms and writes the result to stdout, to ``-o OUT`` or back to
FILE with ``-i``.

Exit codes:
    0  success
    1  ``--check`` and the text would change
    2  the source could not be read, parsed or rewritten (nothing is written)

Bytes are read and written as is, so line endings pass through untranslated.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from friendlyeval.exceptions import FriendlyEvalError
from friendlyeval.rewrite.config import TREAT_ALIASES, RewriteConfig
from friendlyeval.rewrite.engine import Rewriter


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="friendlyeval",
        description="Rewrite friendlyeval capture calls into native rlang quoting calls",
    )
    parser.add_argument("file", nargs="?", help="R source file (default: stdin)")
    parser.add_argument("-o", "--output", help="Write the result to this file")
    parser.add_argument(
        "-i", "--in-place", action="store_true", help="Rewrite FILE in place"
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Write nothing; exit 1 if the source would change",
    )
    parser.add_argument(
        "--namespace", default="rlang", help="Package of the native forms (default: rlang)"
    )
    parser.add_argument(
        "--no-qualify",
        action="store_true",
        help="Emit bare ensym()/sym() instead of namespace::ensym()",
    )
    parser.add_argument(
        "--treat-aliases",
        action="store_true",
        help="Also rewrite treat_input_as_col() and the other treat_* aliases",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Log matches")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.in_place and not args.file:
        parser.error("-i/--in-place requires FILE")
    if args.in_place and args.output:
        parser.error("-i/--in-place and -o/--output are mutually exclusive")

    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    config = RewriteConfig(
        namespace=args.namespace,
        qualify=not args.no_qualify,
        extra_capture_names=TREAT_ALIASES if args.treat_aliases else {},
    )

    filename = args.file or "<stdin>"
    try:
        source = _read_source(args.file)
    except (OSError, UnicodeDecodeError) as e:
        print(f"friendlyeval: cannot read {filename}: {e}", file=sys.stderr)
        return 2

    try:
        result = Rewriter(config).rewrite(source, filename=filename)
    except FriendlyEvalError as e:
        print(e.format_compact(), file=sys.stderr)
        return 2

    if args.check:
        if result.changed:
            print(f"{filename}: would rewrite {len(result.matches)} call(s)", file=sys.stderr)
            return 1
        return 0

    target = args.file if args.in_place else args.output
    if args.in_place and not result.changed:
        return 0
    try:
        _write_result(result.text, target)
    except OSError as e:
        print(f"friendlyeval: cannot write {target or '<stdout>'}: {e}", file=sys.stderr)
        return 2
    return 0


def _read_source(file: str | None) -> str:
    data = Path(file).read_bytes() if file else sys.stdin.buffer.read()
    return data.decode("utf-8")


def _write_result(text: str, file: str | None) -> None:
    data = text.encode("utf-8")
    if file:
        Path(file).write_bytes(data)
    else:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()


if __name__ == "__main__":
    sys.exit(main())
