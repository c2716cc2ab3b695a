"""Text mark intervals keyed by operation ids, with causal add-wins removal."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Generic, Hashable, Optional, TypeVar

from mdcrdt.ids import OpId
from mdcrdt.registers import LwwRegister

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass(frozen=True, order=True)
class TextAnchor:
    """A position in text, pinned to the element inserted by ``op_id``."""

    op_id: OpId


@dataclass
class MarkInterval(Generic[K, V]):
    """A marked range of text with last-writer-wins attributes."""

    id: OpId
    start: TextAnchor
    end: TextAnchor
    attributes: Dict[K, LwwRegister[V]] = field(default_factory=dict)

    def update_attribute(self, key: K, value: V, op_id: OpId) -> None:
        register = self.attributes.get(key)
        if register is None:
            self.attributes[key] = LwwRegister(value, op_id)
        else:
            register.set(value, op_id)


class MarkSet(Generic[K, V]):
    """A set of intervals where an add survives any remove with a lower id."""

    def __init__(self) -> None:
        self._adds: Dict[OpId, MarkInterval[K, V]] = {}
        self._removes: Dict[OpId, OpId] = {}

    def add(self, interval: MarkInterval[K, V]) -> None:
        self._adds[interval.id] = interval

    def remove(self, add_id: OpId, remove_id: OpId) -> None:
        """Record a removal; only the highest removal id is kept."""
        existing = self._removes.get(add_id)
        if existing is None or existing < remove_id:
            self._removes[add_id] = remove_id

    def is_active(self, add_id: OpId) -> bool:
        if add_id not in self._adds:
            return False
        remove_id = self._removes.get(add_id)
        return remove_id is None or add_id > remove_id

    def interval(self, add_id: OpId) -> Optional[MarkInterval[K, V]]:
        return self._adds.get(add_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MarkSet):
            return NotImplemented
        return self._adds == other._adds and self._removes == other._removes