"""Tests specific to the ordered tree strategy."""

import random

import pytest

from mutmap import InvalidArgument, TreeMMap
from mutmap.common import compare
from mutmap.tree import _Branch, _Tree, _tree_size


def check_balanced(tree: _Tree) -> int:
    """Check sizes and order; return the height."""
    if not isinstance(tree, _Branch):
        return 0
    left_size = _tree_size(tree.left)
    right_size = _tree_size(tree.right)
    assert tree.size == left_size + right_size + 1
    if isinstance(tree.left, _Branch):
        assert tree.left.slot.key < tree.slot.key
    if isinstance(tree.right, _Branch):
        assert tree.right.slot.key > tree.slot.key
    return 1 + max(check_balanced(tree.left), check_balanced(tree.right))


def test_iterates_in_key_order():
    m = TreeMMap()
    for key in [5, 3, 9, 1, 7]:
        m.put(key, str(key))
    assert list(m.keys()) == [1, 3, 5, 7, 9]
    assert list(m.values()) == ["1", "3", "5", "7", "9"]
    assert m.first_key() == 1
    assert m.last_key() == 9
    assert m.capabilities().ordered


def test_empty_bounds():
    m = TreeMMap.empty()
    assert m.first_key() is None
    assert m.last_key() is None


def test_custom_comparator():
    m = TreeMMap.empty(cmp=lambda a, b: compare(b, a))
    m.put_all({1: "a", 3: "c", 2: "b"})
    assert list(m.keys()) == [3, 2, 1]
    assert m.get(2) == "b"
    clone = m.copy()
    clone.put(4, "d")
    assert list(clone.keys()) == [4, 3, 2, 1]


def test_none_keys_rejected():
    m = TreeMMap()
    with pytest.raises(InvalidArgument):
        m.put(None, 1)
    assert not m.contains_key(None)
    assert m.get(None) is None
    assert m.remove(None) is None


def test_none_values_allowed():
    m = TreeMMap()
    m.put("a", None)
    assert m.contains_key("a")
    assert m.get_or_default("a", 1) is None


def test_stays_balanced_under_churn():
    rng = random.Random(1234)
    m = TreeMMap()
    model = {}
    for _ in range(2000):
        key = rng.randrange(300)
        if rng.random() < 0.6:
            m.put(key, key)
            model[key] = key
        else:
            assert m.remove(key) == model.pop(key, None)
    assert list(m.keys()) == sorted(model)
    height = check_balanced(m._root)
    assert height <= 3 * max(1, len(model)).bit_length()


def test_sequential_inserts_stay_shallow():
    m = TreeMMap.mk((i, i) for i in range(1024))
    assert m.size() == 1024
    assert check_balanced(m._root) <= 30
    for i in range(0, 1024, 2):
        m.remove(i)
    assert list(m.keys()) == list(range(1, 1024, 2))
    check_balanced(m._root)
