# elevo/persistence/records.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Records exchanged with the file-watch, cache and transport pipeline.

The pipeline itself lives outside this package. These types pin down the wire
shape it consumes: camelCase keys, integer millisecond timestamps.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Union

from elevo.core.errors import RecordError

if TYPE_CHECKING:
    from elevo.core.machine import Machine

# one "latest" snapshot plus at most this many historical ones
HISTORY_LIMIT = 10


def now_ms() -> int:
    return int(time.time() * 1000)


def _require(data: Mapping[str, Any], key: str, kind: Union[type, tuple]) -> Any:
    if not isinstance(data, Mapping):
        raise RecordError(f"Expected an object, got {type(data).__name__}")
    if key not in data:
        raise RecordError(f"Missing field '{key}'")
    value = data[key]
    # bool is an int subclass but never a valid timestamp
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise RecordError(f"Field '{key}' has unexpected type {type(value).__name__}")
    return value


@dataclass(frozen=True)
class StateFileInfo:
    """One machine definition discovered in a source file."""

    file_path: str
    machine_name: str
    xstate_json: Dict[str, Any]
    timestamp: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filePath": self.file_path,
            "machineName": self.machine_name,
            "xstateJson": self.xstate_json,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StateFileInfo":
        return cls(
            file_path=_require(data, "filePath", str),
            machine_name=_require(data, "machineName", str),
            xstate_json=_require(data, "xstateJson", dict),
            timestamp=_require(data, "timestamp", int),
        )


@dataclass(frozen=True)
class CacheEntry:
    """A snapshot of every discovered machine at one moment."""

    timestamp: int
    states: List[StateFileInfo] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"timestamp": self.timestamp, "states": [s.to_dict() for s in self.states]}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CacheEntry":
        return cls(
            timestamp=_require(data, "timestamp", int),
            states=[StateFileInfo.from_dict(s) for s in _require(data, "states", list)],
        )


class MessageType(Enum):
    STATE_UPDATE = "state_update"
    INITIAL_DATA = "initial_data"
    ERROR = "error"


@dataclass(frozen=True)
class VisualizerMessage:
    """
    A message broadcast to visualizer clients. ``data`` carries the discovered
    machines, or an error description for :attr:`MessageType.ERROR`.
    """

    type: MessageType
    data: Union[List[StateFileInfo], str]
    token: str
    timestamp: int

    def to_dict(self) -> Dict[str, Any]:
        if isinstance(self.data, str):
            data: Any = self.data
        else:
            data = [s.to_dict() for s in self.data]
        return {"type": self.type.value, "data": data, "token": self.token, "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "VisualizerMessage":
        raw_type = _require(data, "type", str)
        try:
            kind = MessageType(raw_type)
        except ValueError:
            raise RecordError(f"Unknown message type '{raw_type}'") from None
        payload = _require(data, "data", (str, list))
        if isinstance(payload, list):
            payload = [StateFileInfo.from_dict(s) for s in payload]
        return cls(
            type=kind,
            data=payload,
            token=_require(data, "token", str),
            timestamp=_require(data, "timestamp", int),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text: str) -> "VisualizerMessage":
        try:
            data = json.loads(text)
        except ValueError as e:
            raise RecordError(f"Invalid message JSON: {e}") from e
        return cls.from_dict(data)


def describe_machine(machine: "Machine", file_path: str, timestamp: Optional[int] = None) -> StateFileInfo:
    """
    Build the pipeline record for a machine. Only the machine's id and its
    XState projection are read.

    :param machine: The machine to describe.
    :param file_path: Source file the machine was discovered in.
    :param timestamp: Milliseconds since the epoch; defaults to now.
    """
    return StateFileInfo(
        file_path=file_path,
        machine_name=machine.id,
        xstate_json=dict(machine.to_xstate_json()),
        timestamp=now_ms() if timestamp is None else timestamp,
    )
