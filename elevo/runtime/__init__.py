"""
Runtime support for the engine: the deferred transition queue used for
transitions requested from inside watchers.
"""

from .event_queue import EventQueue, PendingTransition

__all__ = ["EventQueue", "PendingTransition"]
