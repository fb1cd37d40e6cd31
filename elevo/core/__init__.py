"""
Core package providing the state machine engine.

Architecture:
- Definition builder collects declared states and edges
- Transition table compiles them into an immutable lookup
- Context store keeps private and global context
- Watcher registry keeps entry/exit observers
- Machine orchestrates the transition lifecycle
"""

# Import order matters to avoid circular dependencies
from .errors import ConfigurationError, ElevoError, EmptyMachineError, RecordError
from .definitions import (
    DefinitionBuilder,
    MachineDefinition,
    StateDefinition,
    StateOptions,
    TransitionDefinition,
    collect_definitions,
)
from .transitions import TransitionTable
from .context import ContextStore
from .watchers import WILDCARD, WatcherHandle, WatcherRegistry, WatchKind
from .machine import InvalidTransitionPolicy, Machine, MachineSnapshot, WatcherErrorPolicy, create_machine

__all__ = [
    # Errors
    "ConfigurationError",
    "ElevoError",
    "EmptyMachineError",
    "RecordError",
    # Definitions
    "DefinitionBuilder",
    "MachineDefinition",
    "StateDefinition",
    "StateOptions",
    "TransitionDefinition",
    "collect_definitions",
    # Runtime structures
    "TransitionTable",
    "ContextStore",
    "WILDCARD",
    "WatcherHandle",
    "WatcherRegistry",
    "WatchKind",
    # Engine
    "InvalidTransitionPolicy",
    "Machine",
    "MachineSnapshot",
    "WatcherErrorPolicy",
    "create_machine",
]
