"""Tests for the lock-guarded wrapper."""

import operator
import time
from threading import Thread
from typing import Callable, List

from mutmap import Absent, HashMMap, LockedMMap, Present, TreeMMap


def run_threads(count: int, target: Callable[[], None]) -> None:
    threads: List[Thread] = [Thread(target=target) for _ in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()


def test_compute_if_absent_calls_function_once():
    locked = LockedMMap(HashMMap())
    calls = []

    def slow(key):
        calls.append(key)
        time.sleep(0.01)
        return len(calls)

    run_threads(8, lambda: locked.compute_if_absent("k", slow))
    assert calls == ["k"]
    assert locked.get("k") == 1


def test_merge_is_atomic():
    locked = LockedMMap(TreeMMap())

    def bump():
        for _ in range(200):
            locked.merge("count", 1, operator.add)

    run_threads(4, bump)
    assert locked.get("count") == 800


def test_context_manager_exposes_inner():
    inner = HashMMap({1: "a"})
    locked = LockedMMap(inner)
    with locked as guarded:
        assert guarded is inner
        assert dict(guarded.items()) == {1: "a"}


def test_reentrant_calls_from_functions():
    locked = LockedMMap(HashMMap())
    locked.put("a", 1)
    result = locked.compute("b", lambda k, v: locked.get("a") + 1)
    assert result == 2
    assert locked.get("b") == 2


def test_views_see_wrapped_map():
    locked = LockedMMap(HashMMap({1: "a", 2: "b"}))
    assert sorted(locked.keys()) == [1, 2]
    assert locked.keys().remove(1)
    assert not locked.contains_key(1)
    assert locked.capabilities() == HashMMap().capabilities()


def test_lookup_never_sees_half_removed_key():
    locked = LockedMMap(HashMMap())
    seen = []

    def churn():
        for _ in range(500):
            locked.put("k", "v")
            locked.remove("k")

    def read():
        for _ in range(500):
            seen.append(locked.lookup("k"))
            try:
                seen.append(Present(locked["k"]))
            except KeyError:
                seen.append(Absent.instance())

    threads = [Thread(target=churn), Thread(target=read), Thread(target=read)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert all(result in (Present("v"), Absent.instance()) for result in seen)


def test_delete_succeeds_once_per_key():
    locked = LockedMMap(TreeMMap((i, str(i)) for i in range(200)))
    deleted = []

    def delete_all():
        for i in range(200):
            try:
                del locked[i]
            except KeyError:
                continue
            deleted.append(i)

    run_threads(4, delete_all)
    assert sorted(deleted) == list(range(200))
    assert locked.is_empty()


def test_equality_and_hash_code_under_lock():
    inner = HashMMap({1: "a", 2: "b"})
    locked = LockedMMap(inner)
    assert locked == {1: "a", 2: "b"}
    assert locked == HashMMap({1: "a", 2: "b"})
    assert locked != {1: "a"}
    assert locked.__eq__(3) is NotImplemented
    assert locked.hash_code() == inner.hash_code()
    assert locked.lookup(3) == Absent.instance()
