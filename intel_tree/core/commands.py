"""Parser for the family intelligence command stream.

The stream is line oriented and whitespace separated.  The first non-blank
line seeds the tree with ``<label> <weight>``; every following line starts
with a keyword:

``MEMBER_IN <label> <weight>``
    Insert a member.
``MEMBER_OUT <label> <weight>``
    Remove a member.
``INTEL_TARGET <label_a> <weight_a> <label_b> <weight_b>``
    Report the node where both weights part ways.
``INTEL_RANK <label> <weight>``
    Report every member sharing the rank (depth) of ``weight``.
``INTEL_DIVIDE``
    Report the maximum independent set size.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import ClassVar, Iterable, Iterator, Sequence, Union

logger = logging.getLogger(__name__)

__all__ = [
    "Command",
    "CommandParseError",
    "DeleteCommand",
    "DivideQuery",
    "InsertCommand",
    "RankQuery",
    "TargetQuery",
    "parse_commands",
    "parse_line",
]


class CommandParseError(ValueError):
    """Raised when a command line cannot be parsed."""

    def __init__(self, message: str, *, line_number: int | None = None) -> None:
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


@dataclass(frozen=True, slots=True)
class InsertCommand:
    label: str
    weight: float
    keyword: ClassVar[str] = "MEMBER_IN"


@dataclass(frozen=True, slots=True)
class DeleteCommand:
    label: str
    weight: float
    keyword: ClassVar[str] = "MEMBER_OUT"


@dataclass(frozen=True, slots=True)
class TargetQuery:
    label_a: str
    weight_a: float
    label_b: str
    weight_b: float
    keyword: ClassVar[str] = "INTEL_TARGET"


@dataclass(frozen=True, slots=True)
class RankQuery:
    label: str
    weight: float
    keyword: ClassVar[str] = "INTEL_RANK"


@dataclass(frozen=True, slots=True)
class DivideQuery:
    keyword: ClassVar[str] = "INTEL_DIVIDE"


Command = Union[InsertCommand, DeleteCommand, TargetQuery, RankQuery, DivideQuery]

_ARITY = {
    "MEMBER_IN": 2,
    "MEMBER_OUT": 2,
    "INTEL_TARGET": 4,
    "INTEL_RANK": 2,
    "INTEL_DIVIDE": 0,
}


def _parse_weight(token: str, line_number: int | None) -> float:
    try:
        value = float(token)
    except ValueError as exc:
        raise CommandParseError(
            f"invalid weight {token!r}", line_number=line_number
        ) from exc
    if not math.isfinite(value):
        raise CommandParseError(
            f"weight must be finite, got {token!r}", line_number=line_number
        )
    return value


def _build(keyword: str, args: Sequence[str], line_number: int | None) -> Command:
    if keyword == "MEMBER_IN":
        return InsertCommand(args[0], _parse_weight(args[1], line_number))
    if keyword == "MEMBER_OUT":
        return DeleteCommand(args[0], _parse_weight(args[1], line_number))
    if keyword == "INTEL_TARGET":
        return TargetQuery(
            args[0],
            _parse_weight(args[1], line_number),
            args[2],
            _parse_weight(args[3], line_number),
        )
    if keyword == "INTEL_RANK":
        return RankQuery(args[0], _parse_weight(args[1], line_number))
    return DivideQuery()


def parse_line(
    line: str, *, line_number: int | None = None, seed: bool = False
) -> Command:
    """Parse a single non-blank *line*.

    With ``seed=True`` the line is the ``<label> <weight>`` header and is
    turned into an :class:`InsertCommand`.
    """

    tokens = line.split()
    if not tokens:
        raise CommandParseError("empty command line", line_number=line_number)

    if seed:
        if len(tokens) != 2:
            raise CommandParseError(
                "seed line must be '<label> <weight>'", line_number=line_number
            )
        return InsertCommand(tokens[0], _parse_weight(tokens[1], line_number))

    keyword, args = tokens[0], tokens[1:]
    expected = _ARITY.get(keyword)
    if expected is None:
        raise CommandParseError(
            f"unknown command {keyword!r}", line_number=line_number
        )
    if len(args) != expected:
        raise CommandParseError(
            f"{keyword} expects {expected} arguments, got {len(args)}",
            line_number=line_number,
        )
    return _build(keyword, args, line_number)


def parse_commands(lines: Iterable[str], *, strict: bool = True) -> Iterator[Command]:
    """Yield commands parsed from *lines*.

    Blank lines are skipped.  In non-strict mode malformed lines are logged
    and dropped instead of raising :class:`CommandParseError`; a malformed
    seed line does not consume the seed slot.
    """

    seeded = False
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            command = parse_line(line, line_number=line_number, seed=not seeded)
        except CommandParseError as exc:
            if strict:
                raise
            logger.warning("Skipping malformed command: %s", exc)
            continue
        seeded = True
        yield command
