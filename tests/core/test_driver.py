"""Tests for the command driver and its rendering helpers."""

from __future__ import annotations

import pytest

from intel_tree.core.avl_tree import (
    AVLTree,
    DepartureEvent,
    EmptyTreeError,
    Entry,
    WelcomeEvent,
)
from intel_tree.core.commands import (
    DeleteCommand,
    DivideQuery,
    InsertCommand,
    RankQuery,
    TargetQuery,
    parse_commands,
)
from intel_tree.core.driver import CommandDriver, format_weight, render_event
from intel_tree.core.inspection import level_order_weights

STREAM = """\
Root 10
MEMBER_IN B 5
MEMBER_IN C 15
MEMBER_IN D 3
MEMBER_IN E 7
INTEL_TARGET X 6 Y 9
INTEL_RANK D 3
INTEL_DIVIDE
MEMBER_OUT Root 10
INTEL_RANK Q 42
"""

EXPECTED_LINES = [
    "Root welcomed B",
    "Root welcomed C",
    "Root welcomed D",
    "B welcomed D",
    "Root welcomed E",
    "B welcomed E",
    "Target Analysis Result: E 7.000",
    "Rank Analysis Result: D 3.000 E 7.000",
    "Division Analysis Result: 3",
    "Root left the family, replaced by C",
]


def test_run_lines_reproduces_tool_output() -> None:
    driver = CommandDriver()
    lines = driver.run_lines(parse_commands(STREAM.splitlines()))

    assert lines == EXPECTED_LINES
    assert level_order_weights(driver.tree.root) == [5, 3, 15, None, None, 7]


def test_format_weight_uses_period_separator() -> None:
    assert format_weight(3.14) == "3.140"
    assert format_weight(2.0, 0) == "2"
    assert format_weight(-1.23456, 2) == "-1.23"


def test_render_event_messages() -> None:
    assert render_event(WelcomeEvent("A", "B")) == "A welcomed B"
    assert render_event(DepartureEvent("A", "B")) == "A left the family, replaced by B"
    assert render_event(DepartureEvent("A", None)) == "A left the family, replaced by nobody"


def test_render_event_rejects_unknown_objects() -> None:
    with pytest.raises(TypeError):
        render_event("not an event")  # type: ignore[arg-type]


def test_insert_outcome_reports_change() -> None:
    driver = CommandDriver()
    first = driver.execute(InsertCommand("Root", 1.0))
    duplicate = driver.execute(InsertCommand("Twin", 1.0))

    assert first.result is True
    assert first.lines == ()
    assert duplicate.result is False
    assert duplicate.lines == ()
    assert len(driver.tree) == 1


def test_delete_outcome_carries_events() -> None:
    driver = CommandDriver()
    driver.execute(InsertCommand("Root", 1.0))
    outcome = driver.execute(DeleteCommand("Root", 1.0))

    assert outcome.result is True
    assert outcome.events == (DepartureEvent("Root", None),)
    assert outcome.lines == ("Root left the family, replaced by nobody",)


def test_precision_is_configurable() -> None:
    driver = CommandDriver(precision=1)
    driver.execute(InsertCommand("Root", 2.34))
    outcome = driver.execute(TargetQuery("a", 1.0, "b", 3.0))
    assert outcome.lines == ("Target Analysis Result: Root 2.3",)
    assert outcome.result == Entry("Root", 2.34)


def test_rank_query_for_absent_weight_produces_no_line() -> None:
    driver = CommandDriver()
    driver.execute(InsertCommand("Root", 1.0))
    outcome = driver.execute(RankQuery("Ghost", 2.0))
    assert outcome.lines == ()
    assert outcome.result == []


def test_target_query_on_empty_tree_propagates() -> None:
    driver = CommandDriver()
    with pytest.raises(EmptyTreeError):
        driver.execute(TargetQuery("a", 1.0, "b", 2.0))


def test_execute_rejects_unknown_commands() -> None:
    with pytest.raises(TypeError):
        CommandDriver().execute("MEMBER_IN A 1")  # type: ignore[arg-type]


def test_driver_reuses_supplied_tree() -> None:
    tree = AVLTree()
    tree.insert("Root", 4.0)
    driver = CommandDriver(tree)
    outcome = driver.execute(DivideQuery())
    assert driver.tree is tree
    assert outcome.lines == ("Division Analysis Result: 1",)


def test_outcome_to_dict_is_json_friendly() -> None:
    driver = CommandDriver()
    outcomes = list(
        driver.run(
            [
                InsertCommand("Root", 10.0),
                InsertCommand("B", 5.0),
                TargetQuery("x", 1.0, "y", 2.0),
                RankQuery("B", 5.0),
                DivideQuery(),
            ]
        )
    )

    assert outcomes[1].to_dict() == {
        "command": "MEMBER_IN",
        "result": True,
        "events": [{"event": "welcomed", "parent": "Root", "child": "B"}],
        "lines": ["Root welcomed B"],
    }
    assert outcomes[2].to_dict()["result"] == {"label": "B", "weight": 5.0}
    assert outcomes[3].to_dict()["result"] == [{"label": "B", "weight": 5.0}]
    assert outcomes[4].to_dict()["result"] == 1


@pytest.mark.parametrize(
    "weight,precision,expected",
    [
        (2.0625, 3, "2.063"),
        (1.3125, 3, "1.313"),
        (0.8125, 3, "0.813"),
        (-2.0625, 3, "-2.063"),
        (2.5, 0, "3"),
        (1e16, 3, "10000000000000000.000"),
    ],
)
def test_format_weight_rounds_ties_half_up(
    weight: float, precision: int, expected: str
) -> None:
    assert format_weight(weight, precision) == expected


def test_tie_weight_renders_like_original_tool() -> None:
    lines = CommandDriver().run_lines(
        parse_commands(["Root 2.0625", "INTEL_TARGET A 1 B 3"])
    )
    assert lines == ["Target Analysis Result: Root 2.063"]


def test_empty_replacement_label_is_not_nobody() -> None:
    assert render_event(DepartureEvent("A", "")) == "A left the family, replaced by "
