"""Command-line front door for gridpick.

Reads elements from standard input, runs the picker on the controlling
terminal, and prints the committed payload. Exit status is 0 on commit, 2 on
cancellation, and 1 when setup or input parsing fails.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace

from . import __version__
from .config import GridSettings, load_settings
from .errors import GridpickError
from .records import read_elements
from .runtime import pick
from .session import Committed
from .theme import available_theme_names

EXIT_CANCELLED = 2
EXIT_FAILURE = 1


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer.") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _nonnegative_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer.") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def _fraction(value: str) -> float:
    """argparse type for origin fractions in ``[0, 1]``."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{value!r} is not a decimal fraction.") from exc
    if not 0.0 <= parsed <= 1.0:
        raise argparse.ArgumentTypeError("value must be in the range [0, 1]")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gridpick",
        description="Pick one line of standard input from a grid in the terminal.",
    )
    parser.add_argument("-c", "--complex", action="store_true", help="Use complex input format.")
    parser.add_argument(
        "-e",
        "--enumerate",
        action="store_true",
        help="Print the result as the (zero-indexed) element number.",
    )
    parser.add_argument("--cellwidth", type=_positive_int, metavar="WIDTH", help="The width of each element cell.")
    parser.add_argument("--cellheight", type=_positive_int, metavar="HEIGHT", help="The height of each element cell.")
    parser.add_argument(
        "--cellpadding",
        type=_nonnegative_int,
        metavar="PADDING",
        help="The inner padding of each element cell.",
    )
    parser.add_argument("-x", type=_fraction, metavar="FLOAT", help="The horizontal center of the grid, range [0,1].")
    parser.add_argument("-y", type=_fraction, metavar="FLOAT", help="The vertical center of the grid, range [0,1].")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colors.")
    parser.add_argument("--log-file", metavar="PATH", help="Write debug logs to PATH.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def settings_from_args(args: argparse.Namespace, base: GridSettings) -> GridSettings:
    """Overlay explicitly given CLI flags on config-file settings."""
    updates: dict[str, object] = {}
    for flag, key in (
        ("cellwidth", "cell_width"),
        ("cellheight", "cell_height"),
        ("cellpadding", "cell_padding"),
        ("x", "origin_x"),
        ("y", "origin_y"),
        ("theme", "theme"),
    ):
        value = getattr(args, flag)
        if value is not None:
            updates[key] = value
    return replace(base, **updates)


def format_payload(payload: object) -> str:
    """Join payload lines with newlines, without a trailing newline."""
    if isinstance(payload, (list, tuple)):
        return "\n".join(str(line) for line in payload)
    return str(payload)


def main(argv: list[str] | None = None) -> None:
    """Parse arguments, read elements from stdin, and run the picker."""
    args = build_parser().parse_args(argv)
    if args.log_file:
        logging.basicConfig(
            filename=args.log_file,
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    settings = settings_from_args(args, load_settings())
    try:
        elements = read_elements(sys.stdin.read(), complex_format=args.complex, enumerate_=args.enumerate)
        outcome = pick(elements, settings, no_color=args.no_color)
    except GridpickError as exc:
        logging.getLogger(__name__).error("%s", exc)
        sys.stderr.write(f"gridpick: {exc}\n")
        raise SystemExit(EXIT_FAILURE) from exc

    if not isinstance(outcome, Committed):
        raise SystemExit(EXIT_CANCELLED)
    sys.stdout.write(format_payload(outcome.payload))
    sys.stdout.flush()


if __name__ == "__main__":
    main()
