"""Command line tool for the family intelligence tree.

Reads a command stream (see :mod:`intel_tree.core.commands`), executes it
against a fresh AVL tree and writes the result lines produced by
:class:`intel_tree.core.driver.CommandDriver` to a file or standard output.

Settings come from an optional JSON/YAML configuration file and are
overridden by explicit flags.  Exit status is ``0`` on success, ``1`` when a
command, configuration or tree operation fails and ``2`` when the input file
is missing.  Lines produced before a failure are still written.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Sequence, TextIO

from intel_tree.core.avl_tree import EmptyTreeError, InvalidWeightError
from intel_tree.core.commands import CommandParseError, parse_commands
from intel_tree.core.config import LOG_LEVELS, OUTPUT_FORMATS, ConfigError, load_config
from intel_tree.core.driver import CommandDriver
from intel_tree.core.inspection import render_tree

logger = logging.getLogger(__name__)


def _non_negative_int(value: str) -> int:
    try:
        parsed = int(value, 10)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("precision must be an integer") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("precision must be non-negative")
    return parsed


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run a family intelligence command stream against an AVL tree.",
    )
    parser.add_argument("input", type=Path, help="Command stream to execute")
    parser.add_argument(
        "output",
        nargs="?",
        type=Path,
        default=None,
        help="Destination for result lines. Defaults to standard output.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON or YAML configuration file",
    )
    parser.add_argument(
        "--precision",
        type=_non_negative_int,
        default=None,
        help="Number of decimals used when rendering weights (default: 3)",
    )
    parser.add_argument(
        "--output-format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Emit plain result lines or one JSON object per command.",
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Skip malformed command lines instead of failing.",
    )
    parser.add_argument(
        "--show-tree",
        action="store_true",
        help="Print the final tree shape to standard error.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=LOG_LEVELS,
        help="Logging verbosity for diagnostic output.",
    )
    return parser


def _write(lines: List[str], stream: TextIO) -> None:
    for line in lines:
        stream.write(line + "\n")


def main(argv: Sequence[str] | None = None) -> int:
    """Execute the command stream named on the command line."""

    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config).with_overrides(
            precision=args.precision,
            output_format=args.output_format,
            log_level=args.log_level,
            strict=False if args.lenient else None,
        )
    except ConfigError as exc:
        logging.basicConfig(level=logging.WARNING)
        logger.error("Failed to load configuration: %s", exc)
        return 1

    logging.basicConfig(level=getattr(logging, config.log_level))

    if not args.input.is_file():
        logger.error("Input file not found: %s", args.input)
        return 2

    driver = CommandDriver(precision=config.precision)
    produced: List[str] = []
    status = 0
    with args.input.open("r", encoding="utf-8") as handle:
        try:
            for outcome in driver.run(parse_commands(handle, strict=config.strict)):
                if config.output_format == "json":
                    produced.append(json.dumps(outcome.to_dict(), sort_keys=True))
                else:
                    produced.extend(outcome.lines)
        except (CommandParseError, InvalidWeightError, EmptyTreeError) as exc:
            logger.error("Failed to execute command stream: %s", exc)
            status = 1

    if args.output is None:
        _write(produced, sys.stdout)
    else:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        with args.output.open("w", encoding="utf-8") as stream:
            _write(produced, stream)
        logger.info("Wrote %d line(s) to %s", len(produced), args.output)

    if args.show_tree:
        print(render_tree(driver.tree.root, precision=config.precision), file=sys.stderr)

    return status


if __name__ == "__main__":  # pragma: no cover - CLI entry
    raise SystemExit(main())
