from hypothesis import assume, given
from hypothesis import strategies as st

from mdcrdt.ids import OpId
from mdcrdt.registers import LwwRegister, Map


def op(counter):
    return OpId(counter=counter, peer=1)


op_ids = st.builds(
    OpId, counter=st.integers(min_value=1, max_value=99), peer=st.integers(min_value=1, max_value=2)
)
bytes_ = st.integers(min_value=0, max_value=255)


def test_lww_register_op_id():
    op1 = OpId(counter=1, peer=1)
    op2 = OpId(counter=2, peer=1)
    reg = LwwRegister(42, op1)
    assert reg.op_id == op1
    reg.set(100, op2)
    assert reg.op_id == op2
    assert reg.value == 100


def test_lww_register_uses_highest_op_id():
    reg_a = LwwRegister("old", op(1))
    reg_a.set("new", op(2))

    reg_b = LwwRegister("new", op(2))
    reg_b.set("old", op(1))

    assert reg_a.value == "new"
    assert reg_b.value == "new"


def test_lww_register_equal_op_id_overwrites():
    reg = LwwRegister("a", op(5))
    reg.set("b", op(5))
    assert reg.value == "b"


def test_map_missing_key():
    m = Map()
    assert m.get("absent") is None
    assert "absent" not in m


def test_map_set_and_get():
    m = Map()
    m.set("k", 1, op(1))
    m.set("k", 2, op(3))
    m.set("k", 9, op(2))
    assert m.get("k") == 2
    assert len(m) == 1


@given(st.tuples(bytes_, op_ids), st.tuples(bytes_, op_ids))
def test_lww_register_conflict_resolution(first, second):
    val1, id1 = first
    val2, id2 = second
    assume(id1 != id2)

    register1 = LwwRegister(0, OpId(0, 0))
    register2 = LwwRegister(0, OpId(0, 0))

    register1.set(val1, id1)
    register1.set(val2, id2)
    register2.set(val2, id2)
    register2.set(val1, id1)

    expected = val1 if id1 > id2 else val2
    assert register1.value == expected
    assert register2.value == expected
    assert register1.value == register2.value


@given(bytes_, st.tuples(bytes_, op_ids), st.tuples(bytes_, op_ids))
def test_map_conflict_resolution(key, first, second):
    val1, id1 = first
    val2, id2 = second
    assume(id1 != id2)

    map1 = Map()
    map2 = Map()
    map1.set(key, val1, id1)
    map1.set(key, val2, id2)
    map2.set(key, val2, id2)
    map2.set(key, val1, id1)

    expected = val1 if id1 > id2 else val2
    assert map1.get(key) == expected
    assert map2.get(key) == expected