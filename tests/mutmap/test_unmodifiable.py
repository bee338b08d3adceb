"""Tests for the read-only wrapper."""

import pytest

from mutmap import (
    HashMMap,
    TreeMMap,
    UnmodifiableMMap,
    UnsupportedOperation,
    unmodifiable,
)


def boom(*_args):
    raise AssertionError("function must not be called")


@pytest.fixture
def inner() -> TreeMMap:
    return TreeMMap({1: "a", 2: "b"})


def test_reads_pass_through(inner: TreeMMap):
    u = unmodifiable(inner)
    assert u.size() == 2
    assert u.get(1) == "a"
    assert 2 in u
    assert u[2] == "b"
    assert list(u.keys()) == [1, 2]
    assert u == inner
    assert u.capabilities().read_only
    assert u.capabilities().ordered


def test_reflects_later_changes(inner: TreeMMap):
    u = unmodifiable(inner)
    keys = u.keys()
    inner.put(3, "c")
    assert 3 in keys
    assert u.get(3) == "c"


def test_iteration_fails_fast_on_inner_change(inner: TreeMMap):
    u = unmodifiable(inner)
    it = iter(u.entries())
    inner.put(5, "e")
    with pytest.raises(RuntimeError):
        next(it)


@pytest.mark.parametrize(
    "mutate",
    [
        lambda u: u.put(9, "z"),
        lambda u: u.remove(1),
        lambda u: u.clear(),
        lambda u: u.put_all({9: "z"}),
        lambda u: u.replace_all(boom),
        lambda u: u.put_if_absent(9, "z"),
        lambda u: u.remove_if_equal(1, "a"),
        lambda u: u.replace_if_equal(1, "a", "z"),
        lambda u: u.replace(1, "z"),
        lambda u: u.compute_if_absent(9, boom),
        lambda u: u.compute_if_present(1, boom),
        lambda u: u.compute(1, boom),
        lambda u: u.merge(1, "z", boom),
        lambda u: u.__setitem__(9, "z"),
        lambda u: u.__delitem__(1),
        lambda u: u.keys().remove(1),
        lambda u: u.keys().remove(99),
        lambda u: u.values().remove("zz"),
        lambda u: u.entries().remove((99, "z")),
        lambda u: u.values().clear(),
        lambda u: u.entries().remove_if(lambda e: True),
        lambda u: u.keys().retain_all([]),
    ],
)
def test_mutations_rejected(inner: TreeMMap, mutate):
    u = unmodifiable(inner)
    with pytest.raises(UnsupportedOperation):
        mutate(u)
    assert dict(inner.items()) == {1: "a", 2: "b"}


def test_iterator_and_entry_writes_rejected(inner: TreeMMap):
    u = unmodifiable(inner)
    it = u.keys().iterator()
    next(it)
    with pytest.raises(UnsupportedOperation):
        it.remove()
    entry = next(iter(u.entries()))
    with pytest.raises(UnsupportedOperation):
        entry.set_value("z")
    assert inner.get(1) == "a"


def test_wrapping_is_idempotent():
    u = unmodifiable(HashMMap())
    assert unmodifiable(u) is u


def test_copy_is_detached(inner: TreeMMap):
    u = UnmodifiableMMap(inner)
    clone = u.copy()
    inner.put(3, "c")
    assert not clone.contains_key(3)
    with pytest.raises(UnsupportedOperation):
        clone.put(4, "d")
