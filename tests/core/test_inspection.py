"""Tests for the structural inspection helpers."""

from __future__ import annotations

from intel_tree.core.avl_tree import AVLNode, AVLTree
from intel_tree.core.inspection import (
    check_invariants,
    in_order_weights,
    level_order_weights,
    render_tree,
)


def _build(*weights: float) -> AVLTree:
    tree = AVLTree()
    for weight in weights:
        tree.insert(f"m{weight}", float(weight))
    return tree


def test_render_tree_renders_structure_with_placeholders() -> None:
    tree = _build(2, 1, 3, 4)
    expected = "\n".join(["2", "1 3", "· · · 4"])
    assert render_tree(tree.root, precision=0) == expected


def test_render_tree_uses_fixed_precision() -> None:
    tree = _build(2, 1, 3)
    assert render_tree(tree.root) == "\n".join(["2.000", "1.000 3.000"])


def test_render_tree_empty_tree() -> None:
    assert render_tree(None) == "<empty>"


def test_traversals() -> None:
    tree = _build(2, 1, 3, 4)
    assert in_order_weights(tree.root) == [1, 2, 3, 4]
    assert level_order_weights(tree.root) == [2, 1, 3, None, None, None, 4]
    assert in_order_weights(None) == []
    assert level_order_weights(None) == []


def test_check_invariants_accepts_valid_tree() -> None:
    tree = _build(10, 5, 15, 3, 7, 12, 20)
    assert check_invariants(tree.root) == []
    assert check_invariants(None) == []


def test_check_invariants_detects_stale_height() -> None:
    violations = check_invariants(AVLNode(1.0, "a", height=5))
    assert violations == ["1.0 caches height 5, expected 0"]


def test_check_invariants_detects_ordering_violation() -> None:
    root = AVLNode(5.0, "a", height=1, left=AVLNode(7.0, "b"))
    violations = check_invariants(root)
    assert "7.0 breaks the ordering bounds" in violations


def test_check_invariants_detects_imbalance() -> None:
    root = AVLNode(
        1.0,
        "a",
        height=2,
        right=AVLNode(2.0, "b", height=1, right=AVLNode(3.0, "c")),
    )
    violations = check_invariants(root)
    assert violations == ["1.0 has balance factor -2"]


def test_render_tree_rounds_ties_half_up() -> None:
    tree = _build(2.0625, 1.3125, 3.5625)
    expected = "\n".join(["2.063", "1.313 3.563"])
    assert render_tree(tree.root) == expected
