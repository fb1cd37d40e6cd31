# elevo/core/watchers.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

WILDCARD = "*"

Watcher = Callable[..., Any]


class WatchKind(Enum):
    ENTRY = "entry"
    EXIT = "exit"
    # Entry into any state; never keyed by a state name.
    ANY_ENTRY = "any_entry"


@dataclass(eq=False)
class WatcherHandle:
    """
    Opaque token returned by a subscription. Redeeming it removes exactly the
    one callback it was issued for; redeeming it again does nothing.
    """

    kind: WatchKind
    key: str
    slot: int
    _registry: Optional["WatcherRegistry"] = field(default=None, repr=False)

    @property
    def active(self) -> bool:
        return self._registry is not None and self._registry.is_registered(self)

    def unsubscribe(self) -> bool:
        """
        Remove the callback this handle was issued for.

        :return: True if a callback was removed, False if it was already gone.
        """
        if self._registry is None:
            return False
        return self._registry.unsubscribe(self)

    def __call__(self) -> bool:
        return self.unsubscribe()


class WatcherRegistry:
    """
    Per-instance store of entry/exit watchers keyed by state name.

    Callbacks live in an arena indexed by a monotonically increasing slot
    number; each key keeps the ordered list of its slots, so registration
    order is preserved and removal never touches other subscriptions.
    """

    def __init__(self) -> None:
        self._arena: Dict[int, Watcher] = {}
        self._slots: Dict[Tuple[WatchKind, str], List[int]] = {}
        self._counter = itertools.count()

    def subscribe(self, kind: WatchKind, key: str, fn: Watcher) -> WatcherHandle:
        """
        Register ``fn`` for ``kind`` events on ``key``.

        :param kind: Entry, exit, or any-entry.
        :param key: State name, or :data:`WILDCARD` for any-entry watchers.
        :param fn: The callback.
        :raises TypeError: If ``fn`` is not callable.
        """
        if not callable(fn):
            raise TypeError("Watcher must be callable")
        slot = next(self._counter)
        self._arena[slot] = fn
        self._slots.setdefault((kind, key), []).append(slot)
        return WatcherHandle(kind=kind, key=key, slot=slot, _registry=self)

    def unsubscribe(self, handle: WatcherHandle) -> bool:
        """Remove the single callback identified by ``handle``. Idempotent."""
        if handle._registry is not self:
            return False
        if self._arena.pop(handle.slot, None) is None:
            return False
        slots = self._slots.get((handle.kind, handle.key))
        if slots is not None and handle.slot in slots:
            slots.remove(handle.slot)
        return True

    def is_registered(self, handle: WatcherHandle) -> bool:
        return handle._registry is self and handle.slot in self._arena

    def slots(self, kind: WatchKind, key: str) -> Tuple[int, ...]:
        """Snapshot of the slots currently registered on ``key``, in registration order."""
        return tuple(self._slots.get((kind, key), ()))

    def resolve(self, slot: int) -> Optional[Watcher]:
        """Return the callback in ``slot``, or None if it was unsubscribed."""
        return self._arena.get(slot)

    def watchers(self, kind: WatchKind, key: str) -> List[Watcher]:
        """Live callbacks registered on ``key``, in registration order."""
        return [self._arena[s] for s in self.slots(kind, key) if s in self._arena]

    def clear(self) -> None:
        self._arena.clear()
        self._slots.clear()

    def __len__(self) -> int:
        return len(self._arena)
