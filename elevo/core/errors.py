# elevo/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details


class ElevoError(Exception):
    """
    Base exception class for errors raised by the elevo state machine library.
    """


class ConfigurationError(ElevoError):
    """
    Raised when a machine definition is malformed and the machine cannot be built.
    """


class EmptyMachineError(ConfigurationError):
    """
    Raised when a definition function declares no states at all.
    """


class RecordError(ElevoError):
    """
    Raised when a pipeline record cannot be decoded into its typed form.
    """
