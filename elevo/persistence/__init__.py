"""
Persistence package: XState chart projection and the records consumed by the
file-watch, cache and transport pipeline.
"""

from .xstate import XStateConfig, machine_from_xstate, to_xstate_json
from .records import HISTORY_LIMIT, CacheEntry, MessageType, StateFileInfo, VisualizerMessage, describe_machine

__all__ = [
    "XStateConfig",
    "machine_from_xstate",
    "to_xstate_json",
    "HISTORY_LIMIT",
    "CacheEntry",
    "MessageType",
    "StateFileInfo",
    "VisualizerMessage",
    "describe_machine",
]
