"""Last-writer-wins register and map."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Generic, Hashable, Optional, TypeVar

from mdcrdt.ids import OpId

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass
class LwwRegister(Generic[T]):
    """A value that keeps the write carrying the highest operation id."""

    value: T
    op_id: OpId

    def set(self, value: T, op_id: OpId) -> None:
        if op_id >= self.op_id:
            self.value = value
            self.op_id = op_id


class Map(Generic[K, V]):
    """A map whose entries are last-writer-wins registers."""

    def __init__(self) -> None:
        self._entries: Dict[K, LwwRegister[V]] = {}

    def set(self, key: K, value: V, op_id: OpId) -> None:
        register = self._entries.get(key)
        if register is None:
            self._entries[key] = LwwRegister(value, op_id)
        else:
            register.set(value, op_id)

    def get(self, key: K) -> Optional[V]:
        register = self._entries.get(key)
        return None if register is None else register.value

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Map):
            return NotImplemented
        return self._entries == other._entries