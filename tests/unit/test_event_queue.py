# tests/unit/test_event_queue.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from elevo.runtime.event_queue import EventQueue, PendingTransition


def test_fifo_order():
    q = EventQueue()
    q.enqueue("A")
    q.enqueue("B", {"k": 1})
    assert len(q) == 2
    assert q.dequeue() == PendingTransition("A")
    assert q.dequeue() == PendingTransition("B", {"k": 1})
    assert q.dequeue() is None


def test_is_empty_and_clear():
    q = EventQueue()
    assert q.is_empty()
    q.enqueue("A")
    assert not q.is_empty()
    q.clear()
    assert q.is_empty()
    assert len(q) == 0
