# mdcrdt

Conflict-free replicated data types for building offline-first,
collaborative editors. Replicas that apply the same operations, in any
order, end up in the same state.

## What is inside

- `mdcrdt.ids` — `OpId`, a frozen, ordered `(counter, peer)` operation id
  (compared by counter first, then by peer), and `StateVector`, the highest
  counter seen per peer (`is_empty`, `get`, `set`).
- `mdcrdt.registers` — `LwwRegister`, a last-writer-wins register whose
  `set` keeps the write with the highest (or equal) `OpId`, and `Map`, a map
  of such registers (`set`, `get`).
- `mdcrdt.sequence` — `Sequence`, a replicated list (RGA style) with
  tombstones and buffering of operations that arrive before the element
  they refer to. Operations are `Insert` and `Delete`; stored slots are
  `Element`s. Concurrent inserts at the same place are ordered by
  descending `OpId`.
- `mdcrdt.intervals` — a simple interval set (`TextAnchor`, `MarkInterval`,
  `MarkSet`) where an add stays active only while its id is higher than
  the highest remove id recorded for it. Interval attributes are
  last-writer-wins.
- `mdcrdt.marks` — rich-text formatting marks (`MarkKind`, `Anchor`,
  `AnchorBias`, `MarkInterval`, `RemoveMark`, `Span`, `MarkSet`). A removal
  only removes a mark whose id its author had observed (causal add-wins),
  and `MarkSet.render_spans` splits the visible positions into contiguous
  spans that carry the same marks.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

A sequence:

```python
from mdcrdt.ids import OpId
from mdcrdt.sequence import Sequence

seq = Sequence()
a = OpId(counter=1, peer=1)
b = OpId(counter=2, peer=1)

seq.insert(None, "A", a)
seq.insert(a, "B", b)
print(seq.to_list())        # ['A', 'B']

seq.delete(a, OpId(counter=3, peer=1))
print(seq.to_list())        # ['B']
```

Operations whose anchor is not yet known are held back and applied as
soon as the anchor arrives:

```python
seq = Sequence()
seq.insert(a, "B", b)       # anchor `a` not present yet
print(seq.to_list())        # []
seq.insert(None, "A", a)
print(seq.to_list())        # ['A', 'B']
```

Last-writer-wins values:

```python
from mdcrdt.registers import LwwRegister, Map

reg = LwwRegister("old", OpId(1, 1))
reg.set("new", OpId(2, 1))
reg.set("stale", OpId(1, 1))
print(reg.value)            # 'new'

m = Map()
m.set("title", "Draft", OpId(1, 1))
m.set("title", "Final", OpId(2, 2))
print(m.get("title"))       # 'Final'
```

Formatting marks rendered over a run of visible elements:

```python
from mdcrdt.marks import Anchor, AnchorBias, MarkKind, MarkSet

marks = MarkSet()
mark_id = OpId(1, 1)
order = [OpId(1, 1), OpId(2, 1), OpId(3, 1), OpId(4, 1)]
marks.set_mark(
    mark_id,
    MarkKind.BOLD,
    Anchor(order[1], AnchorBias.BEFORE),
    Anchor(order[2], AnchorBias.AFTER),
    {},
    mark_id,
)
for span in marks.render_spans(order, 4):
    print(span.start, span.end, span.marks)
# 0 1 []
# 1 3 [OpId(counter=1, peer=1)]
# 3 4 []
```

## What this package does not do

`mdcrdt` holds the data types only. It has no command-line tool, no
Markdown document model or parser, no storage of state on disk, no
encoding of operations for the wire and no network synchronisation.
Generating operation ids, delivering operations between replicas and
persisting them are left to the application.