import random
import string
import threading
from collections import defaultdict

import pytest

from conckit.list_set import OrderedListSet

THREADS = 8
STEPS = 1000
ALPHANUMERIC = string.ascii_letters + string.digits


def generate_random_string(rng):
    return rng.choice(ALPHANUMERIC)


def run_threads(target, count):
    threads = [threading.Thread(target=target) for _ in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()


def test_smoke():
    s = OrderedListSet()
    s.insert(1)
    s.insert(2)
    s.insert(3)
    assert s.remove(2) == 2
    assert list(s) == [1, 3]
    assert s.remove(3) == 3
    assert list(s) == [1]


def test_errors():
    s = OrderedListSet()
    s.insert("a")
    with pytest.raises(KeyError):
        s.insert("a")
    with pytest.raises(KeyError):
        s.remove("b")
    assert s.contains("a")
    assert not s.contains("b")


def test_iteration_sorted():
    s = OrderedListSet()
    for k in [5, 1, 4, 2, 3]:
        s.insert(k)
    assert list(s) == [1, 2, 3, 4, 5]


def test_parallel_iter_end():
    s = OrderedListSet()
    s.insert(1)
    s.insert(2)
    it = iter(s)
    assert next(it) == 1
    assert next(it) == 2
    with pytest.raises(StopIteration):
        next(it)
    result = []
    t = threading.Thread(target=lambda: result.append(list(s)))
    t.start()
    t.join(5)
    assert not t.is_alive()
    assert result == [[1, 2]]


def test_abandoned_iterator_releases_on_close():
    s = OrderedListSet()
    s.insert(1)
    s.insert(2)
    it = iter(s)
    assert next(it) == 1
    it.close()
    assert s.contains(2)


def test_stress_sequential():
    rng = random.Random(431)
    s = OrderedListSet()
    reference = set()
    ops = ["contains_some", "contains_none", "insert", "remove_some", "remove_none", "iterate"]
    for _ in range(4096):
        op = rng.choice(ops)
        if op == "contains_some":
            if reference:
                key = rng.choice(sorted(reference))
                assert s.contains(key) == (key in reference)
        elif op == "contains_none":
            key = generate_random_string(rng)
            assert s.contains(key) == (key in reference)
        elif op == "insert":
            key = generate_random_string(rng)
            try:
                s.insert(key)
                ok = True
            except KeyError:
                ok = False
            assert ok == (key not in reference)
            reference.add(key)
        elif op in ("remove_some", "remove_none"):
            if op == "remove_some":
                if not reference:
                    continue
                key = rng.choice(sorted(reference))
            else:
                key = generate_random_string(rng)
            try:
                s.remove(key)
                ok = True
            except KeyError:
                ok = False
            assert ok == (key in reference)
            reference.discard(key)
        else:
            assert set(s) == reference


def test_stress_concurrent():
    s = OrderedListSet()

    def work():
        rng = random.Random()
        for _ in range(STEPS):
            op = rng.randrange(3)
            key = generate_random_string(rng)
            try:
                if op == 0:
                    s.contains(key)
                elif op == 1:
                    s.insert(key)
                else:
                    s.remove(key)
            except KeyError:
                pass

    run_threads(work, THREADS)
    items = list(s)
    assert items == sorted(set(items))


def test_log_concurrent():
    s = OrderedListSet()
    logs = []
    logs_guard = threading.Lock()

    def work():
        rng = random.Random()
        local = []
        for _ in range(STEPS):
            op = rng.choice(["contains", "insert", "remove"])
            key = generate_random_string(rng)
            if op == "contains":
                local.append((op, key, s.contains(key)))
            else:
                try:
                    getattr(s, op)(key)
                    local.append((op, key, True))
                except KeyError:
                    local.append((op, key, False))
        with logs_guard:
            logs.extend(local)

    run_threads(work, THREADS)

    inserts = defaultdict(int)
    deletes = defaultdict(int)
    found = set()
    for op, key, result in logs:
        if not result:
            continue
        if op == "insert":
            inserts[key] += 1
        elif op == "remove":
            deletes[key] += 1
        else:
            found.add(key)

    assert len(logs) == THREADS * STEPS
    assert found <= set(inserts)
    over_deleted = {k: c for k, c in deletes.items() if c > inserts[k]}
    assert over_deleted == {}
    balances = {k: inserts[k] - deletes[k] for k in inserts}
    assert set(balances.values()) <= {0, 1}
    present = set(s)
    assert present == {k for k, b in balances.items() if b == 1}


def test_iter_consistent():
    s = OrderedListSet()
    for i in reversed(range(0, 100, 2)):
        s.insert(i)
    evens = set(s)
    done = threading.Event()
    failures = []

    def writer():
        rng = random.Random()
        for _ in range(STEPS):
            key = 2 * rng.randrange(50) + 1
            try:
                if rng.random() < 0.5:
                    s.insert(key)
                else:
                    s.remove(key)
            except KeyError:
                pass
        done.set()

    def reader():
        while not done.is_set():
            snapshot = list(s)
            if any(a > b for a, b in zip(snapshot, snapshot[1:])):
                failures.append(("unsorted", snapshot))
            if not evens <= set(snapshot):
                failures.append(("missing", snapshot))

    threads = [threading.Thread(target=writer) for _ in range(THREADS)]
    threads.append(threading.Thread(target=reader))
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert failures == []
    assert evens <= set(s)