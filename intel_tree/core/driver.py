"""Command driver executing parsed commands against an :class:`AVLTree`.

The driver owns the presentation concerns the tree deliberately avoids:
event messages, fixed-precision weight formatting and the analysis result
lines written by the family intelligence tool.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, localcontext
import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence

from .avl_tree import AVLTree, DepartureEvent, Entry, TreeEvent, WelcomeEvent
from .commands import (
    Command,
    DeleteCommand,
    DivideQuery,
    InsertCommand,
    RankQuery,
    TargetQuery,
)

logger = logging.getLogger(__name__)

__all__ = [
    "CommandDriver",
    "CommandOutcome",
    "format_weight",
    "render_event",
]


def format_weight(weight: float, precision: int = 3) -> str:
    """Format *weight* with *precision* decimals and a period separator.

    Ties round half up (away from zero), so ``2.0625`` renders as ``"2.063"``
    rather than the half-even ``"2.062"``.  The shortest ``repr`` of the float
    is rounded, not its binary expansion, and the active locale is ignored.
    """

    value = Decimal(repr(float(weight)))
    with localcontext() as context:
        context.prec = max(context.prec, value.adjusted() + precision + 2)
        rounded = value.quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP)
    return f"{rounded:f}"


def render_event(event: TreeEvent) -> str:
    """Return the human-readable message for a tree *event*."""

    if isinstance(event, WelcomeEvent):
        return f"{event.parent_label} welcomed {event.child_label}"
    if isinstance(event, DepartureEvent):
        replacement = (
            "nobody" if event.replacement_label is None else event.replacement_label
        )
        return f"{event.label} left the family, replaced by {replacement}"
    raise TypeError(f"Unsupported event type: {type(event).__name__}")


def _entry_to_dict(entry: Entry) -> Dict[str, Any]:
    return {"label": entry.label, "weight": entry.weight}


def _event_to_dict(event: TreeEvent) -> Dict[str, Any]:
    if isinstance(event, WelcomeEvent):
        return {
            "event": "welcomed",
            "parent": event.parent_label,
            "child": event.child_label,
        }
    return {
        "event": "departed",
        "label": event.label,
        "replacement": event.replacement_label,
    }


@dataclass(frozen=True)
class CommandOutcome:
    """Result of running a single command."""

    keyword: str
    lines: tuple[str, ...]
    result: Any = None
    events: tuple[TreeEvent, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """Expose a JSON-serialisable mapping of the outcome."""

        if isinstance(self.result, Entry):
            result: Any = _entry_to_dict(self.result)
        elif isinstance(self.result, list):
            result = [_entry_to_dict(entry) for entry in self.result]
        else:
            result = self.result
        return {
            "command": self.keyword,
            "result": result,
            "events": [_event_to_dict(event) for event in self.events],
            "lines": list(self.lines),
        }


class CommandDriver:
    """Feed commands to one tree in sequence and collect rendered outcomes."""

    def __init__(self, tree: Optional[AVLTree] = None, *, precision: int = 3) -> None:
        self.tree = tree if tree is not None else AVLTree()
        self.precision = precision

    def execute(self, command: Command) -> CommandOutcome:
        """Run *command* and return its outcome.

        :class:`~intel_tree.core.avl_tree.EmptyTreeError` propagates when a
        target query runs against an empty tree.
        """

        if isinstance(command, InsertCommand):
            size_before = len(self.tree)
            events = self.tree.insert(command.label, command.weight)
            return self._mutation_outcome(
                command.keyword, events, changed=len(self.tree) != size_before
            )
        if isinstance(command, DeleteCommand):
            size_before = len(self.tree)
            events = self.tree.delete(command.label, command.weight)
            return self._mutation_outcome(
                command.keyword, events, changed=len(self.tree) != size_before
            )
        if isinstance(command, TargetQuery):
            entry = self.tree.target_query(command.weight_a, command.weight_b)
            line = f"Target Analysis Result: {self._render_entry(entry)}"
            return CommandOutcome(command.keyword, (line,), result=entry)
        if isinstance(command, RankQuery):
            entries = self.tree.rank_group_query(command.weight)
            if not entries:
                logger.info("No rank group for weight %r", command.weight)
                return CommandOutcome(command.keyword, (), result=[])
            rendered = " ".join(self._render_entry(entry) for entry in entries)
            line = f"Rank Analysis Result: {rendered}"
            return CommandOutcome(command.keyword, (line,), result=entries)
        if isinstance(command, DivideQuery):
            size = self.tree.max_weight_independent_set_size()
            line = f"Division Analysis Result: {size}"
            return CommandOutcome(command.keyword, (line,), result=size)
        raise TypeError(f"Unsupported command type: {type(command).__name__}")

    def run(self, commands: Iterable[Command]) -> Iterator[CommandOutcome]:
        """Execute *commands* lazily, yielding one outcome per command."""

        for command in commands:
            outcome = self.execute(command)
            logger.debug("%s -> %d line(s)", outcome.keyword, len(outcome.lines))
            yield outcome

    def run_lines(self, commands: Iterable[Command]) -> List[str]:
        """Execute *commands* and return every rendered output line."""

        lines: List[str] = []
        for outcome in self.run(commands):
            lines.extend(outcome.lines)
        return lines

    def _mutation_outcome(
        self, keyword: str, events: Sequence[TreeEvent], *, changed: bool
    ) -> CommandOutcome:
        lines = tuple(render_event(event) for event in events)
        return CommandOutcome(keyword, lines, result=changed, events=tuple(events))

    def _render_entry(self, entry: Entry) -> str:
        return f"{entry.label} {format_weight(entry.weight, self.precision)}"
