# elevo/bindings/reactive.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, Optional, TypeVar

from elevo.core.machine import Machine, MachineSnapshot
from elevo.core.watchers import WatcherHandle, WatcherRegistry, WatchKind

logger = logging.getLogger(__name__)

T = TypeVar("T")

_CELL_KEY = "value"


class ReactiveCell(Generic[T]):
    """
    A single observable value. Listeners are called synchronously with the new
    value on every :meth:`set`, in subscription order.
    """

    def __init__(self, value: T) -> None:
        self._value = value
        self._listeners = WatcherRegistry()

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        for fn in self._listeners.watchers(WatchKind.ENTRY, _CELL_KEY):
            fn(value)

    def subscribe(self, fn: Callable[[T], Any]) -> WatcherHandle:
        return self._listeners.subscribe(WatchKind.ENTRY, _CELL_KEY, fn)

    def unsubscribe(self, handle: WatcherHandle) -> bool:
        return self._listeners.unsubscribe(handle)


class MachineBinding:
    """
    Mirrors ``(current, context, global_context)`` of a machine into a
    :class:`ReactiveCell`. It registers exactly one wildcard entry watcher.

    Example:
        with MachineBinding(machine) as binding:
            binding.cell.subscribe(render)
            machine.transition("EDIT")
    """

    def __init__(self, machine: Machine) -> None:
        self._machine = machine
        self.cell: ReactiveCell[MachineSnapshot] = ReactiveCell(machine.snapshot())
        self._handle: Optional[WatcherHandle] = machine.watch_entry_global(self._on_entry)

    @property
    def machine(self) -> Machine:
        return self._machine

    @property
    def snapshot(self) -> MachineSnapshot:
        return self.cell.value

    @property
    def bound(self) -> bool:
        return self._handle is not None

    def _on_entry(self, context: Any, state: str) -> None:
        self.cell.set(MachineSnapshot(current=state, context=context, global_context=self._machine.global_context))

    def refresh(self) -> MachineSnapshot:
        """Re-read the machine into the cell, e.g. after the global context was set."""
        self.cell.set(self._machine.snapshot())
        return self.cell.value

    def close(self) -> None:
        if self._handle is None:
            return
        self._machine.unwatch(self._handle)
        self._handle = None
        logger.debug("Unbound reactive cell from machine %s", self._machine.id)

    def __enter__(self) -> "MachineBinding":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def bind_machine(machine: Machine) -> MachineBinding:
    return MachineBinding(machine)
