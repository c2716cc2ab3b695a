"""Formatting marks over a replicated text, rendered as spans."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Mapping, Union

from mdcrdt.ids import OpId, StateVector
from mdcrdt.registers import LwwRegister


class MarkKind(enum.Enum):
    """Built-in mark kinds; any other kind is given as a plain string."""

    BOLD = "bold"
    ITALIC = "italic"
    CODE = "code"
    LINK = "link"


Kind = Union[MarkKind, str]
MarkValue = Union[str, bool]
MarkIntervalId = OpId


class AnchorBias(enum.Enum):
    """Whether an anchor sits before or after its element."""

    BEFORE = "before"
    AFTER = "after"


@dataclass(frozen=True)
class Anchor:
    """A position next to the element ``elem_id``."""

    elem_id: OpId
    bias: AnchorBias


@dataclass
class MarkInterval:
    """A mark of some kind spanning two anchors."""

    id: MarkIntervalId
    kind: Kind
    start: Anchor
    end: Anchor
    op_id: OpId
    attrs: Dict[str, LwwRegister[MarkValue]] = field(default_factory=dict)


@dataclass
class RemoveMark:
    """A removal, remembering which operations its author had seen."""

    observed: StateVector
    op_id: OpId


@dataclass
class Span:
    """A run of visible positions ``[start, end)`` carrying the same marks."""

    start: int
    end: int
    marks: List[MarkIntervalId]


def _resolve_anchor(anchor: Anchor, index_map: Mapping[OpId, int], length: int) -> int:
    base = index_map.get(anchor.elem_id, 0)
    if anchor.bias is AnchorBias.BEFORE:
        return base
    return min(base + 1, length)


class MarkSet:
    """Marks with last-writer-wins fields and causal add-wins removal."""

    def __init__(self) -> None:
        self._intervals: Dict[MarkIntervalId, MarkInterval] = {}
        self._removes: Dict[MarkIntervalId, RemoveMark] = {}

    def set_mark(
        self,
        interval_id: MarkIntervalId,
        kind: Kind,
        start: Anchor,
        end: Anchor,
        attrs: Mapping[str, MarkValue],
        op_id: OpId,
    ) -> None:
        entry = self._intervals.get(interval_id)
        if entry is None:
            entry = MarkInterval(interval_id, kind, start, end, op_id)
            self._intervals[interval_id] = entry
        elif op_id >= entry.op_id:
            entry.kind = kind
            entry.start = start
            entry.end = end
            entry.op_id = op_id

        for key, value in attrs.items():
            register = entry.attrs.get(key)
            if register is None:
                entry.attrs[key] = LwwRegister(value, op_id)
            else:
                register.set(value, op_id)

    def remove_mark(
        self, interval_id: MarkIntervalId, observed: StateVector, op_id: OpId
    ) -> None:
        existing = self._removes.get(interval_id)
        if existing is None or existing.op_id < op_id:
            self._removes[interval_id] = RemoveMark(observed, op_id)

    def is_active(self, interval_id: MarkIntervalId) -> bool:
        interval = self._intervals.get(interval_id)
        if interval is None:
            return False
        remove = self._removes.get(interval_id)
        if remove is None:
            return True
        seen = remove.observed.get(interval.id.peer) or 0
        return seen < interval.id.counter

    def iter_active_intervals(self) -> Iterator[MarkInterval]:
        """Active intervals in ascending id order."""
        return (
            self._intervals[key]
            for key in sorted(self._intervals)
            if self.is_active(key)
        )

    def active_intervals(self) -> List[MarkInterval]:
        return list(self.iter_active_intervals())

    def render_spans(
        self, element_order: Iterable[OpId], visible_len: int
    ) -> List[Span]:
        """Partition ``[0, visible_len)`` into spans of identical mark sets."""
        index_map = {id_: pos for pos, id_ in enumerate(element_order)}

        marks_at: List[List[MarkIntervalId]] = [[] for _ in range(visible_len + 1)]
        for interval in self.iter_active_intervals():
            start = _resolve_anchor(interval.start, index_map, visible_len)
            end = _resolve_anchor(interval.end, index_map, visible_len)
            low, high = sorted((start, end))
            for pos in range(low, min(high, len(marks_at))):
                marks_at[pos].append(interval.id)

        marks_at = [sorted(set(marks)) for marks in marks_at]

        spans: List[Span] = []
        start = 0
        while start < visible_len:
            current = marks_at[start]
            end = start + 1
            while end < visible_len and marks_at[end] == current:
                end += 1
            spans.append(Span(start, end, current))
            start = end
        return spans