"""Height-balanced ordered tree keyed by floating-point weights.

The module provides an AVL tree mapping unique numeric weights to string
labels together with the analytical queries used by the family intelligence
driver:

* ``search_rank`` – depth at which a weight sits on its search path.
* ``target_query`` – split point of two weights along the search path.
* ``rank_group_query`` – every node sharing the depth of a given weight.
* ``max_weight_independent_set_size`` – largest parent/child-free node set.

Mutations never perform I/O.  ``insert`` and ``delete`` return the events
they produced (``WelcomeEvent`` / ``DepartureEvent``) and leave rendering to
the caller.  Height of an absent subtree is ``-1`` so a leaf has height ``0``.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
import logging
import math
from numbers import Real
from typing import Deque, Iterator, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

__all__ = [
    "AVLNode",
    "AVLTree",
    "DepartureEvent",
    "EmptyTreeError",
    "Entry",
    "InvalidWeightError",
    "TreeEvent",
    "WelcomeEvent",
]


class EmptyTreeError(LookupError):
    """Raised when an operation requires at least one node."""


class InvalidWeightError(ValueError):
    """Raised when a weight is not a finite real number."""


@dataclass(slots=True)
class AVLNode:
    """Node representation used by :class:`AVLTree`."""

    weight: float
    label: str
    height: int = 0
    left: Optional["AVLNode"] = None
    right: Optional["AVLNode"] = None


@dataclass(frozen=True, slots=True)
class Entry:
    """Immutable ``(label, weight)`` snapshot of a node."""

    label: str
    weight: float


@dataclass(frozen=True, slots=True)
class WelcomeEvent:
    """A node on the insertion path welcomed the newly inserted label."""

    parent_label: str
    child_label: str


@dataclass(frozen=True, slots=True)
class DepartureEvent:
    """A label left the tree; ``replacement_label`` took its place if any."""

    label: str
    replacement_label: Optional[str]


TreeEvent = Union[WelcomeEvent, DepartureEvent]
IndependentSetPair = Tuple[int, int]


def _validate_weight(weight: float) -> float:
    if isinstance(weight, bool) or not isinstance(weight, Real):
        raise InvalidWeightError(f"weight must be a real number, got {weight!r}")
    value = float(weight)
    if not math.isfinite(value):
        raise InvalidWeightError(f"weight must be finite, got {weight!r}")
    return value


def _validate_label(label: str) -> str:
    if not isinstance(label, str):
        raise TypeError("label must be a string")
    return label


def _height(node: Optional[AVLNode]) -> int:
    return -1 if node is None else node.height


def _balance(node: Optional[AVLNode]) -> int:
    if node is None:
        return 0
    return _height(node.left) - _height(node.right)


def _update_height(node: AVLNode) -> None:
    node.height = max(_height(node.left), _height(node.right)) + 1


def _subtree_min(node: AVLNode) -> AVLNode:
    while node.left is not None:
        node = node.left
    return node


def _subtree_max(node: AVLNode) -> AVLNode:
    while node.right is not None:
        node = node.right
    return node


class AVLTree:
    """AVL tree mapping unique weights to labels."""

    __slots__ = ("root", "_size")

    def __init__(self) -> None:
        self.root: Optional[AVLNode] = None
        self._size = 0

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    def is_empty(self) -> bool:
        return self.root is None

    def __len__(self) -> int:
        return self._size

    def __contains__(self, weight: object) -> bool:
        if isinstance(weight, bool) or not isinstance(weight, Real):
            return False
        return self._locate(float(weight)) is not None

    def __iter__(self) -> Iterator[Entry]:
        """Yield entries in ascending weight order."""

        stack: List[AVLNode] = []
        current = self.root
        while stack or current is not None:
            while current is not None:
                stack.append(current)
                current = current.left
            current = stack.pop()
            yield Entry(current.label, current.weight)
            current = current.right

    @property
    def height(self) -> int:
        """Height of the whole tree, ``-1`` when empty."""

        return _height(self.root)

    def find(self, weight: float) -> Optional[Entry]:
        """Return the entry stored under *weight* or ``None``."""

        node = self._locate(_validate_weight(weight))
        if node is None:
            return None
        return Entry(node.label, node.weight)

    def find_min(self, subtree: Optional[AVLNode] = None) -> AVLNode:
        """Return the left-most node of *subtree* (the whole tree by default).

        Raises :class:`EmptyTreeError` when called on an empty tree.
        """

        if subtree is not None:
            return _subtree_min(subtree)
        if self.root is None:
            raise EmptyTreeError("cannot find the minimum of an empty tree")
        return _subtree_min(self.root)

    def find_max(self, subtree: Optional[AVLNode] = None) -> AVLNode:
        """Return the right-most node of *subtree* (the whole tree by default)."""

        if subtree is not None:
            return _subtree_max(subtree)
        if self.root is None:
            raise EmptyTreeError("cannot find the maximum of an empty tree")
        return _subtree_max(self.root)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def insert(self, label: str, weight: float) -> List[TreeEvent]:
        """Insert *label* under *weight* and return the welcome events.

        A weight that is already present is ignored: nothing changes and no
        events are returned.  Each node on the descent path produces one
        :class:`WelcomeEvent`, ordered from the root downwards.
        """

        label = _validate_label(label)
        weight = _validate_weight(weight)
        if self._locate(weight) is not None:
            logger.debug("Ignoring duplicate weight %r (%s)", weight, label)
            return []

        events: List[TreeEvent] = []
        self.root = self._insert(self.root, label, weight, events)
        self._size += 1
        return events

    def delete(self, label: str, weight: float) -> List[TreeEvent]:
        """Remove the node stored under *weight* and return the departure event.

        Matching is by weight only; *label* is informational and the event
        reports the label held by the tree.  Deleting an absent weight is a
        no-op returning an empty list.
        """

        _validate_label(label)
        weight = _validate_weight(weight)
        events: List[TreeEvent] = []
        self.root = self._delete(self.root, weight, events, report=True)
        if not events:
            logger.debug("Weight %r (%s) not present; nothing deleted", weight, label)
        return events

    def _insert(
        self,
        node: Optional[AVLNode],
        label: str,
        weight: float,
        events: List[TreeEvent],
    ) -> AVLNode:
        if node is None:
            return AVLNode(weight=weight, label=label)

        if weight < node.weight:
            events.append(WelcomeEvent(node.label, label))
            node.left = self._insert(node.left, label, weight, events)
            if _height(node.left) - _height(node.right) > 1:
                assert node.left is not None
                if weight < node.left.weight:
                    node = self._rotate_with_left_child(node)
                else:
                    node = self._double_with_left_child(node)
        elif weight > node.weight:
            events.append(WelcomeEvent(node.label, label))
            node.right = self._insert(node.right, label, weight, events)
            if _height(node.right) - _height(node.left) > 1:
                assert node.right is not None
                if weight > node.right.weight:
                    node = self._rotate_with_right_child(node)
                else:
                    node = self._double_with_right_child(node)

        _update_height(node)
        return node

    def _delete(
        self,
        node: Optional[AVLNode],
        weight: float,
        events: List[TreeEvent],
        *,
        report: bool,
    ) -> Optional[AVLNode]:
        if node is None:
            return None

        if weight < node.weight:
            node.left = self._delete(node.left, weight, events, report=report)
        elif weight > node.weight:
            node.right = self._delete(node.right, weight, events, report=report)
        elif node.left is not None and node.right is not None:
            successor = _subtree_min(node.right)
            if report:
                events.append(DepartureEvent(node.label, successor.label))
            node.label = successor.label
            node.weight = successor.weight
            node.right = self._delete(node.right, successor.weight, events, report=False)
        else:
            child = node.left if node.left is not None else node.right
            if report:
                events.append(
                    DepartureEvent(node.label, None if child is None else child.label)
                )
            self._size -= 1
            if child is None:
                return None
            node = child

        _update_height(node)
        balance = _balance(node)

        # Ties resolve toward the single rotation after a removal.
        if balance > 1:
            if _balance(node.left) >= 0:
                return self._rotate_with_left_child(node)
            return self._double_with_left_child(node)
        if balance < -1:
            if _balance(node.right) <= 0:
                return self._rotate_with_right_child(node)
            return self._double_with_right_child(node)
        return node

    # ------------------------------------------------------------------
    # Rotations
    # ------------------------------------------------------------------
    @staticmethod
    def _rotate_with_left_child(node: AVLNode) -> AVLNode:
        """Single right rotation; the left child becomes the subtree root."""

        pivot = node.left
        assert pivot is not None
        logger.debug("Right rotation at %r (pivot %r)", node.weight, pivot.weight)
        node.left = pivot.right
        pivot.right = node
        _update_height(node)
        _update_height(pivot)
        return pivot

    @staticmethod
    def _rotate_with_right_child(node: AVLNode) -> AVLNode:
        """Single left rotation; the right child becomes the subtree root."""

        pivot = node.right
        assert pivot is not None
        logger.debug("Left rotation at %r (pivot %r)", node.weight, pivot.weight)
        node.right = pivot.left
        pivot.left = node
        _update_height(node)
        _update_height(pivot)
        return pivot

    @classmethod
    def _double_with_left_child(cls, node: AVLNode) -> AVLNode:
        assert node.left is not None
        node.left = cls._rotate_with_right_child(node.left)
        return cls._rotate_with_left_child(node)

    @classmethod
    def _double_with_right_child(cls, node: AVLNode) -> AVLNode:
        assert node.right is not None
        node.right = cls._rotate_with_left_child(node.right)
        return cls._rotate_with_right_child(node)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def _locate(self, weight: float) -> Optional[AVLNode]:
        current = self.root
        while current is not None:
            if weight < current.weight:
                current = current.left
            elif weight > current.weight:
                current = current.right
            else:
                return current
        return None

    def search_rank(self, weight: float) -> int:
        """Return the depth of *weight* on its search path or ``-1`` if absent.

        This is an edge count from the root, not an order statistic.
        """

        weight = _validate_weight(weight)
        current = self.root
        depth = 0
        while current is not None:
            if weight < current.weight:
                current = current.left
            elif weight > current.weight:
                current = current.right
            else:
                return depth
            depth += 1
        return -1

    def target_query(self, weight_a: float, weight_b: float) -> Entry:
        """Return the node where the search paths of both weights diverge.

        Descends left while both weights are strictly smaller than the
        current node and right while both are strictly greater.  When the
        descent runs out of children the last visited node is returned.
        """

        weight_a = _validate_weight(weight_a)
        weight_b = _validate_weight(weight_b)
        if self.root is None:
            raise EmptyTreeError("target query requires a non-empty tree")

        current = self.root
        while True:
            if weight_a < current.weight and weight_b < current.weight:
                following = current.left
            elif weight_a > current.weight and weight_b > current.weight:
                following = current.right
            else:
                break
            if following is None:
                break
            current = following
        return Entry(current.label, current.weight)

    def rank_group_query(self, weight: float) -> List[Entry]:
        """Return every node on the same level as *weight*, left to right.

        An absent weight yields an empty list.
        """

        target_depth = self.search_rank(weight)
        if target_depth < 0 or self.root is None:
            return []

        queue: Deque[AVLNode] = deque([self.root])
        depth = 0
        while queue:
            if depth == target_depth:
                return [Entry(node.label, node.weight) for node in queue]
            for _ in range(len(queue)):
                node = queue.popleft()
                if node.left is not None:
                    queue.append(node.left)
                if node.right is not None:
                    queue.append(node.right)
            depth += 1
        return []  # pragma: no cover - search_rank guarantees the level exists

    def max_weight_independent_set_size(self) -> int:
        """Size of the largest node set with no selected parent/child pair.

        Counts nodes, not weights.  Computed with one post-order pass.
        """

        with_root, without_root = self._independent_set(self.root)
        return max(with_root, without_root)

    @classmethod
    def _independent_set(cls, node: Optional[AVLNode]) -> IndependentSetPair:
        if node is None:
            return 0, 0
        left_with, left_without = cls._independent_set(node.left)
        right_with, right_without = cls._independent_set(node.right)
        with_node = 1 + left_without + right_without
        without_node = max(left_with, left_without) + max(right_with, right_without)
        return with_node, without_node
