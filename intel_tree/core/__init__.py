"""Balanced ordered tree and the command driver built around it."""

from .avl_tree import (
    AVLNode,
    AVLTree,
    DepartureEvent,
    EmptyTreeError,
    Entry,
    InvalidWeightError,
    TreeEvent,
    WelcomeEvent,
)
from .commands import (
    Command,
    CommandParseError,
    DeleteCommand,
    DivideQuery,
    InsertCommand,
    RankQuery,
    TargetQuery,
    parse_commands,
    parse_line,
)
from .config import ConfigError, DriverConfig, load_config
from .driver import CommandDriver, CommandOutcome, format_weight, render_event
from .inspection import (
    check_invariants,
    in_order_weights,
    level_order_weights,
    render_tree,
)

__all__ = [
    "AVLNode",
    "AVLTree",
    "Command",
    "CommandDriver",
    "CommandOutcome",
    "CommandParseError",
    "ConfigError",
    "DeleteCommand",
    "DepartureEvent",
    "DivideQuery",
    "DriverConfig",
    "EmptyTreeError",
    "Entry",
    "InsertCommand",
    "InvalidWeightError",
    "RankQuery",
    "TargetQuery",
    "TreeEvent",
    "WelcomeEvent",
    "check_invariants",
    "format_weight",
    "in_order_weights",
    "level_order_weights",
    "load_config",
    "parse_commands",
    "parse_line",
    "render_event",
    "render_tree",
]
