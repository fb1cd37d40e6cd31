# tests/unit/test_definitions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from elevo.core.definitions import (
    DefinitionBuilder,
    RawTransition,
    StateDefinition,
    StateOptions,
    TransitionDefinition,
    collect_definitions,
)
from elevo.core.errors import ConfigurationError, EmptyMachineError


def test_state_accepts_callable_and_iterable():
    b = DefinitionBuilder()
    lazy = b.state("a", lambda: [b.on("GO", "b")])
    eager = b.state("a", [b.on("GO", "b")])
    assert lazy == eager
    assert lazy.transitions == (TransitionDefinition("GO", "b"),)
    assert lazy.options == StateOptions(clear_on_exit=False)


def test_state_without_transitions_is_a_sink():
    s = DefinitionBuilder().state("done")
    assert s == StateDefinition(name="done")
    assert s.transitions == ()


def test_clear_on_exit_option():
    s = DefinitionBuilder().state("temp", clear_on_exit=True)
    assert s.options.clear_on_exit is True


def test_collect_first_state_is_initial(editor_builder):
    d = collect_definitions(editor_builder)
    assert d.initial == "idle"
    assert d.state_names == ("idle", "editing", "saving")


def test_collect_flattens_transitions_in_order(editor_builder):
    d = collect_definitions(editor_builder)
    assert d.transitions[0] == RawTransition("idle", "EDIT", "editing")
    assert [t.event for t in d.transitions] == ["EDIT", "SAVE", "CANCEL", "SUCCESS", "FAILURE"]


def test_collect_keeps_duplicate_edges():
    d = collect_definitions(lambda b: [b.state("a", [b.on("GO", "a"), b.on("GO", "b")]), b.state("b")])
    assert len(d.transitions) == 2


def test_collect_empty_raises():
    with pytest.raises(EmptyMachineError, match="at least one state"):
        collect_definitions(lambda b: [])


def test_collect_none_raises():
    with pytest.raises(EmptyMachineError):
        collect_definitions(lambda b: None)


def test_collect_rejects_duplicate_states():
    with pytest.raises(ConfigurationError, match="more than once"):
        collect_definitions(lambda b: [b.state("a"), b.state("a")])


def test_collect_rejects_foreign_items():
    with pytest.raises(ConfigurationError, match="state definition"):
        collect_definitions(lambda b: ["a"])


def test_collect_keeps_edges_to_undeclared_targets():
    d = collect_definitions(lambda b: [b.state("a", [b.on("GO", "nowhere")])])
    assert d.state_names == ("a",)
    assert d.transitions == (RawTransition(source="a", event="GO", target="nowhere"),)


def test_collect_rejects_wildcard_state_name():
    with pytest.raises(ConfigurationError, match="reserved"):
        collect_definitions(lambda b: [b.state("a", [b.on("GO", "*")]), b.state("*")])


def test_options_for():
    d = collect_definitions(lambda b: [b.state("a", clear_on_exit=True), b.state("b")])
    assert d.options_for("a").clear_on_exit is True
    assert d.options_for("b").clear_on_exit is False
    with pytest.raises(KeyError):
        d.options_for("c")
