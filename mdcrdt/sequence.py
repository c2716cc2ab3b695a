"""Replicated sequence (RGA) with buffering of out-of-order operations."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import (
    Deque,
    Dict,
    Generic,
    Iterable,
    Iterator,
    List,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from mdcrdt.ids import OpId

T = TypeVar("T")


@dataclass
class Element(Generic[T]):
    """A sequence slot; a value of None marks a deleted element (tombstone)."""

    id: OpId
    value: Optional[T]
    after: Optional[OpId]
    right_origin: Optional[OpId]


@dataclass(frozen=True)
class Insert(Generic[T]):
    """Insert ``value`` with identifier ``id`` after the element ``after``."""

    after: Optional[OpId]
    id: OpId
    value: T
    right_origin: Optional[OpId] = None


@dataclass(frozen=True)
class Delete:
    """Delete the element ``target``; ``id`` identifies this operation."""

    target: OpId
    id: OpId


SequenceOp = Union[Insert, Delete]


def _sibling_key(elem: Element) -> Tuple[int, int, int, int, int]:
    # Siblings with a right origin come first, ordered by it; ties and
    # origin-less siblings are ordered by descending id.
    ro = elem.right_origin
    if ro is None:
        return (1, 0, 0, -elem.id.counter, -elem.id.peer)
    return (0, ro.counter, ro.peer, -elem.id.counter, -elem.id.peer)


class Sequence(Generic[T]):
    """An ordered, replicated list of values."""

    def __init__(self) -> None:
        self._elements: List[Element[T]] = []
        self._index: Dict[OpId, int] = {}
        self._pending_inserts: Dict[OpId, List[Insert]] = {}
        self._pending_deletes: Dict[OpId, List[Delete]] = {}

    @classmethod
    def from_ordered(cls, items: Iterable[Tuple[OpId, T]]) -> "Sequence[T]":
        """Build a sequence from ``(id, value)`` pairs already in order."""
        seq = cls()
        after: Optional[OpId] = None
        for id_, value in items:
            seq._index[id_] = len(seq._elements)
            seq._elements.append(Element(id_, value, after, None))
            after = id_
        return seq

    def insert(self, after: Optional[OpId], value: T, id: OpId) -> None:
        right_origin = self._compute_right_origin(after)
        self.apply(Insert(after, id, value, right_origin))

    def delete(self, target: OpId, id: OpId) -> None:
        self.apply(Delete(target, id))

    def apply(self, op: SequenceOp) -> None:
        inserted_id = self._apply_now(op)
        if inserted_id is not None:
            self._process_pending(inserted_id)

    def apply_op(self, id: OpId, value: T) -> None:
        """Append ``value`` after the last element, tombstones included."""
        after = self._elements[-1].id if self._elements else None
        self.insert(after, value, id)

    def __iter__(self) -> Iterator[T]:
        return (e.value for e in self._elements if e.value is not None)

    def iter_desc(self) -> Iterator[T]:
        return (e.value for e in reversed(self._elements) if e.value is not None)

    def iter_all(self) -> Iterator[Element[T]]:
        return iter(self._elements)

    def to_list(self) -> List[T]:
        return list(self)

    def len_visible(self) -> int:
        return sum(1 for e in self._elements if e.value is not None)

    def get_element(self, id: OpId) -> Optional[Element[T]]:
        idx = self._index.get(id)
        return None if idx is None else self._elements[idx]

    def update_value(self, id: OpId, value: T) -> None:
        idx = self._index.get(id)
        if idx is not None:
            self._elements[idx].value = value

    def element_ids(self) -> List[OpId]:
        return [e.id for e in self._elements]

    def _compute_right_origin(self, after: Optional[OpId]) -> Optional[OpId]:
        position = 0 if after is None else self._index.get(after, 0) + 1
        if position < len(self._elements):
            return self._elements[position].id
        return None

    def _apply_insert(self, op: Insert, rebuild: bool) -> bool:
        if op.id in self._index:
            return True
        if op.after is not None and op.after not in self._index:
            return False
        self._elements.append(Element(op.id, op.value, op.after, op.right_origin))
        if rebuild:
            self._rebuild_order()
        else:
            self._index[op.id] = len(self._elements) - 1
        return True

    def _apply_delete(self, target: OpId) -> bool:
        idx = self._index.get(target)
        if idx is None:
            return False
        self._elements[idx].value = None
        return True

    def _apply_now(self, op: SequenceOp) -> Optional[OpId]:
        if isinstance(op, Insert):
            if self._apply_insert(op, rebuild=True):
                return op.id
            if op.after is not None:
                self._pending_inserts.setdefault(op.after, []).append(op)
            return None
        if not self._apply_delete(op.target):
            self._pending_deletes.setdefault(op.target, []).append(op)
        return None

    def _enqueue_pending(self, id: OpId, queue: Deque[SequenceOp]) -> None:
        queue.extend(self._pending_inserts.pop(id, ()))
        queue.extend(self._pending_deletes.pop(id, ()))

    def _process_pending(self, inserted_id: OpId) -> None:
        queue: Deque[SequenceOp] = deque()
        self._enqueue_pending(inserted_id, queue)
        inserted = False
        while queue:
            op = queue.popleft()
            if isinstance(op, Insert):
                if self._apply_insert(op, rebuild=False):
                    inserted = True
                    self._enqueue_pending(op.id, queue)
                elif op.after is not None:
                    self._pending_inserts.setdefault(op.after, []).append(op)
            elif not self._apply_delete(op.target):
                self._pending_deletes.setdefault(op.target, []).append(op)
        if inserted:
            self._rebuild_order()

    def _rebuild_order(self) -> None:
        by_id = {e.id: e for e in self._elements}
        children: Dict[Optional[OpId], List[Element[T]]] = {}
        for elem in by_id.values():
            children.setdefault(elem.after, []).append(elem)
        for siblings in children.values():
            siblings.sort(key=_sibling_key)

        ordered: List[Element[T]] = []
        stack = list(reversed(children.get(None, [])))
        while stack:
            elem = stack.pop()
            ordered.append(elem)
            stack.extend(reversed(children.get(elem.id, [])))

        self._elements = ordered
        self._index = {e.id: i for i, e in enumerate(ordered)}