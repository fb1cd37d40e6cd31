# elevo/runtime/event_queue.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Optional


@dataclass(frozen=True)
class PendingTransition:
    """A transition request deferred while another transition was running."""

    event: str
    context: Any = None


class EventQueue:
    """
    FIFO of deferred transition requests for one machine. A machine drains it
    after the running transition has fired all of its watchers.

    Not thread-safe; it shares the single-threaded contract of its machine.
    """

    def __init__(self) -> None:
        self._queue: Deque[PendingTransition] = deque()

    def enqueue(self, event: str, context: Any = None) -> PendingTransition:
        """
        Append a request to the back of the queue.

        :param event: The event to apply later.
        :param context: Optional context for the target state.
        """
        pending = PendingTransition(event=event, context=context)
        self._queue.append(pending)
        return pending

    def dequeue(self) -> Optional[PendingTransition]:
        """Remove and return the oldest request, or None if the queue is empty."""
        if self._queue:
            return self._queue.popleft()
        return None

    def clear(self) -> None:
        self._queue.clear()

    def is_empty(self) -> bool:
        return not self._queue

    def __len__(self) -> int:
        return len(self._queue)
