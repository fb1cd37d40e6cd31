# elevo/core/transitions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Dict, Iterable, Iterator, Optional, Tuple

from elevo.core.definitions import RawTransition


class TransitionTable:
    """
    Immutable ``(state, event) -> target`` lookup compiled once from the raw
    transition list of a machine definition. An unmodeled pair simply has no
    target; it is never an error.
    """

    def __init__(self, edges: Dict[str, Dict[str, str]]) -> None:
        self._edges = edges

    @classmethod
    def compile(cls, transitions: Iterable[RawTransition]) -> "TransitionTable":
        """
        Build a table in a single pass. When a (source, event) pair is declared
        more than once the last target wins, keeping the position of the first.

        :param transitions: Raw ``(source, event, target)`` triples.
        """
        edges: Dict[str, Dict[str, str]] = {}
        for tr in transitions:
            edges.setdefault(tr.source, {})[tr.event] = tr.target
        return cls(edges)

    def lookup(self, state: str, event: str) -> Optional[str]:
        """
        Return the target for ``(state, event)``, or None when no edge exists.
        """
        try:
            return self._edges.get(state, {}).get(event)
        except TypeError:
            # unhashable input can never name a modeled edge
            return None

    def can(self, state: str, event: str) -> bool:
        """Pure predicate; False for unknown states or events."""
        return self.lookup(state, event) is not None

    def events_from(self, state: str) -> Dict[str, str]:
        """Return a copy of the outgoing ``{event: target}`` map of ``state``."""
        try:
            return dict(self._edges.get(state, {}))
        except TypeError:
            return {}

    def __iter__(self) -> Iterator[Tuple[str, str, str]]:
        for source, events in self._edges.items():
            for event, target in events.items():
                yield source, event, target

    def __len__(self) -> int:
        return sum(len(events) for events in self._edges.values())

    def __contains__(self, pair: object) -> bool:
        if not isinstance(pair, tuple) or len(pair) != 2:
            return False
        return self.can(pair[0], pair[1])

    def __repr__(self) -> str:
        return f"TransitionTable({len(self)} transitions)"
