"""elevo: flat finite state machines with per-state and global context

This package models an application's control flow as named states, events that
move between them, and two tiers of contextual data.

Responsibilities:
    - State machine definition from a pure description function
    - Transition table compilation and lookup
    - Private (per-state) and write-once global context
    - Entry/exit observation
    - XState chart export and pipeline records

Cross-cutting Concerns:
    Thread Safety:
        - None internal; one machine belongs to one thread at a time

    Error Handling:
        - Construction errors raise ConfigurationError
        - Runtime conditions are logged, never raised

    Logging:
        - Standard library logging, one logger per module
        - No handlers installed by the library
"""

from .core import (
    ConfigurationError,
    DefinitionBuilder,
    ElevoError,
    EmptyMachineError,
    InvalidTransitionPolicy,
    Machine,
    MachineSnapshot,
    StateDefinition,
    StateOptions,
    TransitionDefinition,
    TransitionTable,
    WatcherErrorPolicy,
    WatcherHandle,
    create_machine,
)
from .persistence import machine_from_xstate, to_xstate_json

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "DefinitionBuilder",
    "ElevoError",
    "EmptyMachineError",
    "InvalidTransitionPolicy",
    "Machine",
    "MachineSnapshot",
    "StateDefinition",
    "StateOptions",
    "TransitionDefinition",
    "TransitionTable",
    "WatcherErrorPolicy",
    "WatcherHandle",
    "create_machine",
    "machine_from_xstate",
    "to_xstate_json",
]
