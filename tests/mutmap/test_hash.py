"""Tests specific to the hash table strategy."""

import pytest

from mutmap import Capabilities, HashConfig, HashMMap, InvalidArgument


def test_defaults():
    m = HashMMap()
    assert m.capacity() == 16
    assert m.is_empty()
    caps = m.capabilities()
    assert caps.none_keys
    assert caps.none_values
    assert not caps.read_only
    assert not caps.ordered


def test_none_key_and_value():
    m = HashMMap()
    assert m.put(None, None) is None
    assert m.contains_key(None)
    assert m.get(None) is None
    assert m.put(None, 1) is None
    assert m.get(None) == 1
    assert m.remove(None) == 1
    assert not m.contains_key(None)


def test_resize_keeps_mappings():
    m = HashMMap(config=HashConfig(capacity=2, load_factor=0.5))
    for i in range(50):
        m.put(i, -i)
    assert m.capacity() >= 100
    assert m.size() == 50
    assert all(m.get(i) == -i for i in range(50))


def test_resize_counts_as_single_modification():
    m = HashMMap(config=HashConfig(capacity=1))
    m.put(1, 1)
    before = m.modification_count()
    m.put(2, 2)
    assert m.modification_count() == before + 1


def test_overwrite_is_not_structural():
    m = HashMMap({1: 1})
    before = m.modification_count()
    m.put(1, 2)
    m.remove(99)
    m.clear()
    m.clear()
    assert m.modification_count() == before + 1


def test_colliding_keys():
    class Collide:
        def __init__(self, n):
            self.n = n

        def __hash__(self):
            return 7

        def __eq__(self, other):
            return isinstance(other, Collide) and other.n == self.n

    m = HashMMap()
    keys = [Collide(i) for i in range(5)]
    for i, key in enumerate(keys):
        m.put(key, i)
    assert m.size() == 5
    assert m.remove(Collide(2)) == 2
    assert m.get(Collide(3)) == 3
    assert not m.contains_key(Collide(2))


def test_restricted_capabilities():
    config = HashConfig(capabilities=Capabilities(none_keys=False, none_values=False))
    m = HashMMap(config=config)
    with pytest.raises(InvalidArgument):
        m.put(None, 1)
    with pytest.raises(InvalidArgument):
        m.put(1, None)
    with pytest.raises(InvalidArgument):
        m.put_all({1: None})
    assert m.is_empty()
    assert m.put_if_absent(1, 2) is None
    with pytest.raises(InvalidArgument):
        m.replace_all(lambda k, v: None)
    assert m.get(1) == 2


@pytest.mark.parametrize(
    "kwargs",
    [
        {"capacity": 0},
        {"load_factor": 0},
        {"load_factor": -1.0},
        {"capabilities": Capabilities(read_only=True)},
        {"capabilities": Capabilities(ordered=True)},
    ],
)
def test_invalid_config(kwargs):
    with pytest.raises(InvalidArgument):
        HashConfig(**kwargs)


def test_copy_keeps_config():
    config = HashConfig(capabilities=Capabilities(none_keys=False))
    m = HashMMap({1: "a"}, config)
    clone = m.copy()
    assert clone.capabilities() == m.capabilities()
    with pytest.raises(InvalidArgument):
        clone.put(None, "x")


def test_mk_and_empty():
    assert HashMMap.empty().is_empty()
    m = HashMMap.mk([(1, "a"), (1, "b"), (2, "c")])
    assert dict(m.items()) == {1: "b", 2: "c"}
