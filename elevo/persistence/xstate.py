# elevo/persistence/xstate.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Projection of a machine onto the XState chart format.

The exported shape is a compatibility contract with the XState ecosystem and
the visualizer::

    {"id": str, "initial": str, "states": {name: {"on": {event: target}}}}

Only ids and edges survive; state options, contexts and watchers never do.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, TypedDict

from elevo.core.errors import ConfigurationError

if TYPE_CHECKING:
    from elevo.core.machine import Machine
    from elevo.core.transitions import TransitionTable


class XStateNode(TypedDict, total=False):
    on: Dict[str, str]


class XStateConfig(TypedDict):
    id: str
    initial: str
    states: Dict[str, XStateNode]


def to_xstate_json(
    machine_id: str, initial: str, table: "TransitionTable", state_names: Iterable[str]
) -> XStateConfig:
    """
    Build the XState chart for a compiled table.

    Every declared state is listed, sinks included, in declaration order.

    :param machine_id: Chart id.
    :param initial: Initial state name.
    :param table: Compiled transition table.
    :param state_names: Declared states in declaration order.
    """
    states: Dict[str, XStateNode] = {name: {"on": table.events_from(name)} for name in state_names}
    return {"id": machine_id, "initial": initial, "states": states}


def _target_of(state: str, event: str, value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping) and isinstance(value.get("target"), str):
        return value["target"]
    raise ConfigurationError(f"Unsupported transition '{event}' on state '{state}': {value!r}")


def machine_from_xstate(config: Mapping[str, Any], **options: Any) -> "Machine":
    """
    Rebuild a machine from an XState chart.

    The ``initial`` state is declared first so it becomes the initial state;
    the remaining states keep their order. Transition values may be a target
    name or a ``{"target": ...}`` object (actions are dropped).

    :param config: Chart mapping with ``id``, ``initial`` and ``states``.
    :param options: Keyword options forwarded to :func:`create_machine`.
    :raises ConfigurationError: If the chart shape is not understood.
    """
    from elevo.core.machine import create_machine

    if not isinstance(config, Mapping):
        raise ConfigurationError("XState config must be a mapping")
    machine_id = config.get("id")
    states = config.get("states")
    if not isinstance(machine_id, str):
        raise ConfigurationError("XState config requires a string 'id'")
    if not isinstance(states, Mapping):
        raise ConfigurationError("XState config requires a 'states' mapping")

    initial = config.get("initial")
    names: List[str] = list(states)
    if initial is not None:
        if initial not in states:
            raise ConfigurationError(f"Initial state '{initial}' is not among the declared states")
        names.remove(initial)
        names.insert(0, initial)

    def build(b):
        declared = []
        for name in names:
            node = states[name] or {}
            if not isinstance(node, Mapping):
                raise ConfigurationError(f"State '{name}' must be a mapping")
            edges = node.get("on") or {}
            declared.append(b.state(name, [b.on(event, _target_of(name, event, v)) for event, v in edges.items()]))
        return declared

    return create_machine(machine_id, build, **options)
