"""Structural inspection helpers for :mod:`intel_tree.core.avl_tree`.

These helpers never mutate a tree.  They exist so regression tests and the
command line tool can verify and display the shape produced by a command
stream:

* ``check_invariants`` – validates ordering, cached heights and the AVL
  balance condition in ``O(n)`` time, returning every violation found.
* ``in_order_weights`` / ``level_order_weights`` – traversal snapshots.
* ``render_tree`` – deterministic level-by-level ASCII rendering that marks
  missing children with centred dots.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, List, Optional

from .avl_tree import AVLNode
from .driver import format_weight

__all__ = [
    "check_invariants",
    "in_order_weights",
    "level_order_weights",
    "render_tree",
]


def check_invariants(root: Optional[AVLNode]) -> List[str]:
    """Return a description of every invariant violation below *root*.

    An empty list means the ordering, cached height and balance invariants
    all hold.
    """

    violations: List[str] = []

    def _walk(
        node: Optional[AVLNode], low: Optional[float], high: Optional[float]
    ) -> int:
        if node is None:
            return -1
        if (low is not None and node.weight <= low) or (
            high is not None and node.weight >= high
        ):
            violations.append(f"{node.weight!r} breaks the ordering bounds")
        left_height = _walk(node.left, low, node.weight)
        right_height = _walk(node.right, node.weight, high)
        expected = max(left_height, right_height) + 1
        if node.height != expected:
            violations.append(
                f"{node.weight!r} caches height {node.height}, expected {expected}"
            )
        if abs(left_height - right_height) > 1:
            violations.append(
                f"{node.weight!r} has balance factor {left_height - right_height}"
            )
        return expected

    _walk(root, None, None)
    return violations


def in_order_weights(root: Optional[AVLNode]) -> List[float]:
    """Return the weights below *root* in ascending traversal order."""

    result: List[float] = []
    stack: List[AVLNode] = []
    current = root
    while stack or current is not None:
        while current is not None:
            stack.append(current)
            current = current.left
        current = stack.pop()
        result.append(current.weight)
        current = current.right
    return result


def level_order_weights(root: Optional[AVLNode]) -> List[Optional[float]]:
    """Return the level-order traversal including ``None`` sentinels."""

    if root is None:
        return []
    result: List[Optional[float]] = []
    queue: Deque[Optional[AVLNode]] = deque([root])
    while queue:
        node = queue.popleft()
        if node is None:
            result.append(None)
            continue
        result.append(node.weight)
        queue.append(node.left)
        queue.append(node.right)
    while result and result[-1] is None:
        result.pop()
    return result


def render_tree(root: Optional[AVLNode], *, precision: int = 3) -> str:
    """Render *root* level-by-level, marking missing nodes with ``·``.

    The renderer stops once the next level would be empty so the output
    contains no placeholder-only rows.
    """

    if root is None:
        return "<empty>"

    lines: List[str] = []
    queue: Deque[Optional[AVLNode]] = deque([root])

    while queue:
        level_count = len(queue)
        level_nodes: List[str] = []
        next_level_has_real_node = False
        for _ in range(level_count):
            node = queue.popleft()
            if node is None:
                level_nodes.append("·")
                queue.extend((None, None))
                continue

            level_nodes.append(format_weight(node.weight, precision))
            queue.append(node.left)
            queue.append(node.right)
            if node.left is not None or node.right is not None:
                next_level_has_real_node = True

        lines.append(" ".join(level_nodes))
        if not next_level_has_real_node:
            break

    return "\n".join(lines)
