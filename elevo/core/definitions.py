# elevo/core/definitions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Sequence, Tuple, Union

from elevo.core.errors import ConfigurationError, EmptyMachineError
from elevo.core.watchers import WILDCARD


@dataclass(frozen=True)
class StateOptions:
    """Per-state options fixed at definition time."""

    clear_on_exit: bool = False


@dataclass(frozen=True)
class TransitionDefinition:
    """An outgoing edge declared on a state: ``event`` moves the machine to ``target``."""

    event: str
    target: str


@dataclass(frozen=True)
class StateDefinition:
    """
    A declared state with its outgoing edges and options. The order of the
    ``transitions`` tuple is the order in which they were declared.
    """

    name: str
    transitions: Tuple[TransitionDefinition, ...] = ()
    options: StateOptions = field(default_factory=StateOptions)


@dataclass(frozen=True)
class RawTransition:
    """A flattened ``(source, event, target)`` triple, possibly duplicated."""

    source: str
    event: str
    target: str


@dataclass(frozen=True)
class MachineDefinition:
    """
    The collected result of a definition function: every state in declaration
    order plus the raw transition list. The first declared state is the initial one.
    """

    states: Tuple[StateDefinition, ...]
    transitions: Tuple[RawTransition, ...]

    @property
    def initial(self) -> str:
        return self.states[0].name

    @property
    def state_names(self) -> Tuple[str, ...]:
        return tuple(s.name for s in self.states)

    def options_for(self, state: str) -> StateOptions:
        for s in self.states:
            if s.name == state:
                return s.options
        raise KeyError(state)


TransitionSource = Union[Iterable[TransitionDefinition], Callable[[], Iterable[TransitionDefinition]]]


class DefinitionBuilder:
    """
    Helper handed to a definition function. It only produces plain definition
    objects; nothing is validated until :func:`collect_definitions` runs.

    Example:
        def editor(b):
            return [
                b.state("idle", lambda: [b.on("EDIT", "editing")]),
                b.state("editing", [b.on("SAVE", "idle")], clear_on_exit=True),
            ]
    """

    def state(self, name: str, transitions: TransitionSource = (), *, clear_on_exit: bool = False) -> StateDefinition:
        """
        Declare a state.

        :param name: Unique state name.
        :param transitions: Outgoing edges, or a zero-argument callable returning them.
        :param clear_on_exit: Discard this state's private context when it is exited.
        """
        if callable(transitions):
            transitions = transitions()
        return StateDefinition(
            name=name,
            transitions=tuple(transitions or ()),
            options=StateOptions(clear_on_exit=bool(clear_on_exit)),
        )

    def on(self, event: str, target: str) -> TransitionDefinition:
        """Declare an edge taken on ``event`` towards ``target``."""
        return TransitionDefinition(event=event, target=target)


DefinitionFunction = Callable[[DefinitionBuilder], Sequence[StateDefinition]]


def collect_definitions(builder_fn: DefinitionFunction) -> MachineDefinition:
    """
    Run a pure definition function and collect its states and transitions.

    :param builder_fn: Callable receiving a :class:`DefinitionBuilder` and returning
        a sequence of :class:`StateDefinition`.
    :raises EmptyMachineError: If no states are declared.
    :raises ConfigurationError: On duplicate or reserved state names and foreign
        items. Edges towards undeclared states are kept; the machine refuses to
        take them.
    """
    declared = list(builder_fn(DefinitionBuilder()) or [])
    if not declared:
        raise EmptyMachineError("Machine must have at least one state")

    states: List[StateDefinition] = []
    seen = set()
    for item in declared:
        if not isinstance(item, StateDefinition):
            raise ConfigurationError(f"Expected a state definition, got {type(item).__name__}")
        if item.name == WILDCARD:
            raise ConfigurationError(f"State name '{WILDCARD}' is reserved for any-entry watchers")
        if item.name in seen:
            raise ConfigurationError(f"State '{item.name}' is declared more than once")
        seen.add(item.name)
        states.append(item)

    raw: List[RawTransition] = []
    for st in states:
        for tr in st.transitions:
            if not isinstance(tr, TransitionDefinition):
                raise ConfigurationError(f"State '{st.name}' declares an invalid transition: {tr!r}")
            raw.append(RawTransition(source=st.name, event=tr.event, target=tr.target))

    return MachineDefinition(states=tuple(states), transitions=tuple(raw))
