"""Operation identifiers and per-peer state vectors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

PeerId = int


@dataclass(frozen=True, order=True)
class OpId:
    """A unique operation identifier, ordered by counter and then by peer."""

    counter: int
    peer: PeerId


class StateVector:
    """The highest counter observed for each peer."""

    def __init__(self) -> None:
        self._peers: Dict[PeerId, int] = {}

    def is_empty(self) -> bool:
        return not self._peers

    def get(self, peer: PeerId) -> Optional[int]:
        return self._peers.get(peer)

    def set(self, peer: PeerId, counter: int) -> None:
        self._peers[peer] = counter

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StateVector):
            return NotImplemented
        return self._peers == other._peers

    def __repr__(self) -> str:
        return f"StateVector({dict(sorted(self._peers.items()))!r})"