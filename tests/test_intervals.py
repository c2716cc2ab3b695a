from hypothesis import assume, given
from hypothesis import strategies as st

from mdcrdt.ids import OpId
from mdcrdt.intervals import MarkInterval, MarkSet, TextAnchor

op_ids = st.builds(OpId, st.integers(1, 99), st.integers(1, 2))
text_anchors = st.builds(TextAnchor, op_ids)


def test_mark_set_edge_cases():
    mark_set = MarkSet()
    add_id = OpId(1, 1)
    remove_id = OpId(2, 1)

    assert not mark_set.is_active(add_id)

    interval = MarkInterval(add_id, TextAnchor(OpId(0, 0)), TextAnchor(OpId(10, 0)))
    mark_set.add(interval)
    assert mark_set.is_active(add_id)

    lower_remove = OpId(0, 1)
    mark_set.remove(add_id, lower_remove)
    assert mark_set.is_active(add_id)

    mark_set.remove(add_id, add_id)
    assert not mark_set.is_active(add_id)

    mark_set.remove(add_id, lower_remove)
    assert not mark_set.is_active(add_id)

    mark_set.remove(add_id, remove_id)
    assert not mark_set.is_active(add_id)


def test_interval_lookup():
    mark_set = MarkSet()
    add_id = OpId(3, 1)
    interval = MarkInterval(add_id, TextAnchor(OpId(1, 1)), TextAnchor(OpId(2, 1)))
    mark_set.add(interval)
    assert mark_set.interval(add_id) is interval
    assert mark_set.interval(OpId(4, 1)) is None


def test_text_anchor_ordering():
    assert TextAnchor(OpId(1, 2)) > TextAnchor(OpId(1, 1))
    assert TextAnchor(OpId(2, 1)) > TextAnchor(OpId(1, 9))


def test_update_attribute_creates_register():
    interval = MarkInterval(OpId(1, 1), TextAnchor(OpId(1, 1)), TextAnchor(OpId(2, 1)))
    interval.update_attribute("href", "a", OpId(5, 1))
    assert interval.attributes["href"].value == "a"
    assert interval.attributes["href"].op_id == OpId(5, 1)
    interval.update_attribute("href", "b", OpId(4, 1))
    assert interval.attributes["href"].value == "a"


@given(op_ids, op_ids, text_anchors, text_anchors)
def test_causal_add_wins(add_id, remove_id, start, end):
    assume(add_id != remove_id)
    interval = MarkInterval(add_id, start, end)

    set1 = MarkSet()
    set2 = MarkSet()

    set1.add(interval)
    set1.remove(add_id, remove_id)

    set2.remove(add_id, remove_id)
    set2.add(interval)

    expected = add_id > remove_id
    assert set1.is_active(add_id) == expected
    assert set2.is_active(add_id) == expected
    assert set1.is_active(add_id) == set2.is_active(add_id)


@given(
    op_ids,
    text_anchors,
    text_anchors,
    st.text(),
    st.integers(0, 255),
    op_ids,
    st.integers(0, 255),
    op_ids,
)
def test_lww_attribute_update(
    add_id, start, end, attr_key, attr_val1, attr_id1, attr_val2, attr_id2
):
    assume(attr_id1 != attr_id2)

    interval1 = MarkInterval(add_id, start, end)
    interval2 = MarkInterval(add_id, start, end)

    interval1.update_attribute(attr_key, attr_val1, attr_id1)
    interval1.update_attribute(attr_key, attr_val2, attr_id2)

    interval2.update_attribute(attr_key, attr_val2, attr_id2)
    interval2.update_attribute(attr_key, attr_val1, attr_id1)

    expected = attr_val1 if attr_id1 > attr_id2 else attr_val2
    assert interval1.attributes[attr_key].value == expected
    assert interval2.attributes[attr_key].value == expected