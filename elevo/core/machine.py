# elevo/core/machine.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple

from elevo.core.context import ContextStore
from elevo.core.definitions import DefinitionFunction, MachineDefinition, collect_definitions
from elevo.core.errors import ConfigurationError
from elevo.core.transitions import TransitionTable
from elevo.core.watchers import WILDCARD, Watcher, WatcherHandle, WatcherRegistry, WatchKind
from elevo.persistence.xstate import XStateConfig, to_xstate_json
from elevo.runtime.event_queue import EventQueue

logger = logging.getLogger(__name__)


class InvalidTransitionPolicy(Enum):
    """What to do when an event has no edge from the current state. Neither option raises."""

    IGNORE = "ignore"
    WARN = "warn"


class WatcherErrorPolicy(Enum):
    """
    How exceptions raised by watchers are handled.

    PROPAGATE re-raises the exception to the caller of ``transition`` and skips
    the remaining watchers of that round. LOG records it and keeps going.
    """

    PROPAGATE = "propagate"
    LOG = "log"


@dataclass(frozen=True)
class MachineSnapshot:
    """Read-only view of a machine at one point in time."""

    current: str
    context: Any
    global_context: Any


class Machine:
    """
    A flat, deterministic state machine with per-state private context and a
    write-once global context.

    ``transition`` runs to completion, watchers included, on the caller's thread.
    A watcher that calls ``transition`` on the same machine does not nest:
    the call is queued and applied once the running transition has fired every
    watcher, before the outermost ``transition`` returns. Entry watchers
    therefore always see the state they were registered for.

    The machine holds no locks. Share an instance across threads only behind
    the host's own mutual exclusion.
    """

    def __init__(
        self,
        machine_id: str,
        definition: MachineDefinition,
        invalid_transition_policy: InvalidTransitionPolicy = InvalidTransitionPolicy.IGNORE,
        watcher_error_policy: WatcherErrorPolicy = WatcherErrorPolicy.PROPAGATE,
    ) -> None:
        """
        :param machine_id: Identifying name, also used as the exported chart id.
        :param definition: Collected states and transitions.
        :param invalid_transition_policy: Handling of events with no edge.
        :param watcher_error_policy: Handling of exceptions raised by watchers.
        """
        if not definition.states:
            raise ConfigurationError("Machine must have at least one state")
        self._id = machine_id
        self._definition = definition
        self._table = TransitionTable.compile(definition.transitions)
        self._options = {s.name: s.options for s in definition.states}
        self._initial = definition.initial
        self._current = self._initial

        self._store = ContextStore(machine_id)
        self._watchers = WatcherRegistry()
        self._clear_overrides: Dict[str, bool] = {}
        self._pending = EventQueue()
        self._running = False

        self._invalid_policy = InvalidTransitionPolicy(invalid_transition_policy)
        self._watcher_policy = WatcherErrorPolicy(watcher_error_policy)

    @property
    def id(self) -> str:
        return self._id

    @property
    def initial(self) -> str:
        return self._initial

    @property
    def current(self) -> str:
        return self._current

    @property
    def context(self) -> Any:
        """Private context of the current state, or None."""
        return self._store.get(self._current)

    @property
    def global_context(self) -> Any:
        return self._store.global_context

    @property
    def states(self) -> Tuple[str, ...]:
        return self._definition.state_names

    @property
    def transitions(self) -> TransitionTable:
        return self._table

    @property
    def invalid_transition_policy(self) -> InvalidTransitionPolicy:
        return self._invalid_policy

    @property
    def watcher_error_policy(self) -> WatcherErrorPolicy:
        return self._watcher_policy

    def can(self, state: str, event: str) -> bool:
        """Whether ``event`` has an edge out of ``state`` towards a declared state. Never raises."""
        return self._is_declared(self._table.lookup(state, event))

    def transition(self, event: str, context: Any = None) -> bool:
        """
        Fire ``event`` from the current state.

        :param event: Event name.
        :param context: Optional private context for the target state. It is
            written before entry watchers run; None leaves the target's context as is.
        :return: True if the state changed during this call. Calls made from
            inside a watcher are deferred and return False.
        """
        if self._running:
            self._pending.enqueue(event, context)
            logger.debug("Deferred event %r on machine %s (%d pending)", event, self._id, len(self._pending))
            return False

        self._running = True
        try:
            changed = self._apply(event, context)
            while not self._pending.is_empty():
                pending = self._pending.dequeue()
                self._apply(pending.event, pending.context)
            return changed
        finally:
            self._pending.clear()
            self._running = False

    def _apply(self, event: str, context: Any) -> bool:
        source = self._current
        target = self._table.lookup(source, event)
        if not self._is_declared(target):
            self._reject(source, event)
            return False

        self._notify(WatchKind.EXIT, source, (self._store.get(source),))

        if self._should_clear(source, event):
            self._store.clear(source)
        if context is not None:
            self._store.set(target, context)

        self._current = target
        logger.debug("Machine %s: %s --%s--> %s", self._id, source, event, target)

        entered = self._store.get(target)
        self._notify(WatchKind.ENTRY, target, (entered, target))
        self._notify(WatchKind.ANY_ENTRY, WILDCARD, (entered, target))
        return True

    def _reject(self, state: str, event: str) -> None:
        if self._invalid_policy is InvalidTransitionPolicy.WARN:
            logger.warning('currentState is %s, cannot transition by event "%s"', state, event)
        else:
            logger.debug("Ignored event %r in state %r on machine %s", event, state, self._id)

    def _should_clear(self, state: str, event: str) -> bool:
        if event in self._clear_overrides:
            return self._clear_overrides[event]
        return self._options[state].clear_on_exit

    def _notify(self, kind: WatchKind, key: str, args: Tuple[Any, ...]) -> None:
        for slot in self._watchers.slots(kind, key):
            fn = self._watchers.resolve(slot)
            if fn is None:
                continue
            if self._watcher_policy is WatcherErrorPolicy.PROPAGATE:
                fn(*args)
                continue
            try:
                fn(*args)
            except Exception:
                logger.exception("Watcher %r failed on %s of %r (machine %s)", fn, kind.value, key, self._id)

    def set_global_only(self, value: Any) -> bool:
        """
        Set the global context. Only the first call has an effect; later calls
        log a warning and return False.
        """
        return self._store.set_global_once(value)

    def get_context(self, state: str) -> Any:
        return self._store.get(state)

    def set_context(self, state: str, value: Any) -> None:
        """
        Write a state's private context directly. No watchers fire and no
        clear-on-exit is applied; meant for seeding and tests. Undeclared
        states are ignored with a warning.
        """
        if not self._is_declared(state):
            logger.warning("Ignoring context for unknown state %r on machine %s", state, self._id)
            return
        self._store.set(state, value)

    def clear_context(self, state: str) -> None:
        self._store.clear(state)

    def set_clear_context_on_exit(self, event: str, should_clear: bool) -> None:
        """
        Override clear-on-exit for every transition triggered by ``event``,
        whichever state it leaves. The override lasts for the machine's lifetime.
        """
        self._clear_overrides[event] = bool(should_clear)

    def watch_entry(self, state: str, fn: Watcher) -> WatcherHandle:
        """
        Call ``fn(context, state)`` each time ``state`` is entered. Pass
        ``"*"`` to watch every entry.
        """
        if state == WILDCARD:
            return self.watch_entry_global(fn)
        self._require_state(state)
        return self._watchers.subscribe(WatchKind.ENTRY, state, fn)

    def watch_entry_global(self, fn: Watcher) -> WatcherHandle:
        return self._watchers.subscribe(WatchKind.ANY_ENTRY, WILDCARD, fn)

    def watch_exit(self, state: str, fn: Watcher) -> WatcherHandle:
        """Call ``fn(context)`` with the outgoing context each time ``state`` is exited."""
        self._require_state(state)
        return self._watchers.subscribe(WatchKind.EXIT, state, fn)

    def unwatch(self, handle: WatcherHandle) -> bool:
        return self._watchers.unsubscribe(handle)

    def _is_declared(self, state: Any) -> bool:
        try:
            return state in self._options
        except TypeError:
            return False

    def _require_state(self, state: str) -> None:
        if not self._is_declared(state):
            raise ConfigurationError(f"Unknown state '{state}' for machine '{self._id}'")

    def snapshot(self) -> MachineSnapshot:
        return MachineSnapshot(current=self._current, context=self.context, global_context=self.global_context)

    def to_xstate_json(self) -> XStateConfig:
        """Lossy projection of the chart: ids and edges only."""
        return to_xstate_json(self._id, self._initial, self._table, self.states)

    def __repr__(self) -> str:
        return f"Machine(id={self._id!r}, current={self._current!r})"


def create_machine(
    machine_id: str,
    builder: DefinitionFunction,
    *,
    invalid_transition_policy: InvalidTransitionPolicy = InvalidTransitionPolicy.IGNORE,
    watcher_error_policy: WatcherErrorPolicy = WatcherErrorPolicy.PROPAGATE,
) -> Machine:
    """
    Build a machine from a pure definition function.

    :param machine_id: Identifying name of the machine.
    :param builder: Receives a DefinitionBuilder and returns the declared states.
        The first declared state is the initial state.
    :raises EmptyMachineError: If no states are declared.
    :raises ConfigurationError: If the definition is otherwise malformed.
    """
    definition = collect_definitions(builder)
    return Machine(
        machine_id,
        definition,
        invalid_transition_policy=invalid_transition_policy,
        watcher_error_policy=watcher_error_policy,
    )
