# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from unittest.mock import MagicMock

import pytest


def editor_definition(b):
    """The idle/editing/saving chart used throughout the tests."""
    return [
        b.state("idle", lambda: [b.on("EDIT", "editing")]),
        b.state("editing", lambda: [b.on("SAVE", "saving"), b.on("CANCEL", "idle")]),
        b.state("saving", lambda: [b.on("SUCCESS", "idle"), b.on("FAILURE", "editing")]),
    ]


@pytest.fixture
def editor_builder():
    return editor_definition


@pytest.fixture
def machine_factory():
    """Returns a factory function to create machines for tests."""
    from elevo.core.machine import create_machine

    def _factory(builder=editor_definition, machine_id="editor", **options):
        return create_machine(machine_id, builder, **options)

    return _factory


@pytest.fixture
def editor_machine(machine_factory):
    return machine_factory()


@pytest.fixture
def ping_pong_machine(machine_factory):
    """Two states bouncing between each other."""

    def build(b):
        return [
            b.state("start", [b.on("GO", "end")]),
            b.state("end", [b.on("RESET", "start")]),
        ]

    return machine_factory(build, machine_id="test")


@pytest.fixture
def watcher():
    """A watcher spy accepting any call signature."""
    return MagicMock(name="watcher")


@pytest.fixture
def error_classes():
    """Provides a tuple of error classes for quick reference."""
    from elevo.core.errors import ConfigurationError, ElevoError, EmptyMachineError, RecordError

    return (ElevoError, ConfigurationError, EmptyMachineError, RecordError)
