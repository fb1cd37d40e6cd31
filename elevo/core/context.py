# elevo/core/context.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ContextStore:
    """
    Two-tier context storage owned by a single machine instance: one private
    slot per state name plus one write-once global slot.

    The store has no locking of its own; callers that share a machine across
    threads must serialize access to it.
    """

    def __init__(self, machine_id: Optional[str] = None) -> None:
        self._machine_id = machine_id
        self._private: Dict[str, Any] = {}
        self._global: Any = {}
        self._global_locked = False

    def get(self, state: str, default: Any = None) -> Any:
        """Return the private context stored for ``state``, or ``default`` when unset."""
        try:
            return self._private.get(state, default)
        except TypeError:
            return default

    def has(self, state: str) -> bool:
        try:
            return state in self._private
        except TypeError:
            return False

    def set(self, state: str, value: Any) -> None:
        """Unconditionally overwrite the private context of ``state``."""
        self._private[state] = value

    def clear(self, state: str) -> None:
        """Remove the private context of ``state``; a missing entry is not an error."""
        try:
            self._private.pop(state, None)
        except TypeError:
            pass

    @property
    def global_context(self) -> Any:
        return self._global

    @property
    def global_locked(self) -> bool:
        return self._global_locked

    def set_global_once(self, value: Any) -> bool:
        """
        Store the global context and lock it. Every later call is a no-op that
        logs a warning, and the first value is kept.

        :param value: The global context.
        :return: True if the value was stored, False if the slot was already locked.
        """
        if self._global_locked:
            logger.warning("Global context can only be set once (machine=%s)", self._machine_id)
            return False
        self._global = value
        self._global_locked = True
        return True

    def __len__(self) -> int:
        return len(self._private)
