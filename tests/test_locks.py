import threading

import pytest

from conckit.locks import (
    ClhLock,
    Lock,
    McsLock,
    McsParkingLock,
    RawLock,
    SpinLock,
    TicketLock,
)

RAW_LOCKS = [SpinLock, TicketLock, ClhLock, McsLock, McsParkingLock]


@pytest.mark.parametrize("raw_cls", RAW_LOCKS)
def test_smoke(raw_cls):
    lock = Lock(raw_cls(), 0)
    threads_n, iters = 4, 200
    inside = [0]
    violations = []

    def work():
        for _ in range(iters):
            with lock.lock() as guard:
                inside[0] += 1
                if inside[0] != 1:
                    violations.append(inside[0])
                guard.value = guard.value + 1
                inside[0] -= 1

    threads = [threading.Thread(target=work) for _ in range(threads_n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert violations == []
    with lock.lock() as guard:
        assert guard.value == threads_n * iters


@pytest.mark.parametrize("raw_cls", RAW_LOCKS)
def test_sequential_lock_unlock(raw_cls):
    raw = raw_cls()
    assert isinstance(raw, RawLock)
    for _ in range(3):
        token = raw.lock()
        raw.unlock(token)
    lock = Lock(raw, [])
    with lock.lock() as guard:
        guard.value.append(1)
    with lock.lock() as guard:
        assert guard.value == [1]


def test_spinlock_try_lock():
    raw = SpinLock()
    assert raw.try_lock() is True
    assert raw.try_lock() is False
    raw.unlock(None)
    assert raw.try_lock() is True


def test_lock_try_lock_guard():
    lock = Lock(SpinLock(), "data")
    guard = lock.try_lock()
    assert guard is not None and guard.value == "data"
    assert lock.try_lock() is None
    guard.release()
    second = lock.try_lock()
    assert second is not None and second.value == "data"
    second.release()


def test_try_lock_unsupported():
    lock = Lock(TicketLock(), 0)
    with pytest.raises(TypeError):
        lock.try_lock()


def test_ticket_tokens_in_order():
    raw = TicketLock()
    first = raw.lock()
    raw.unlock(first)
    second = raw.lock()
    raw.unlock(second)
    assert (first, second) == (0, 1)


def test_guard_double_release():
    lock = Lock(SpinLock(), 1)
    guard = lock.lock()
    guard.release()
    with pytest.raises(RuntimeError):
        guard.release()
    with pytest.raises(RuntimeError):
        _ = guard.value


def test_blocks_other_thread_until_release():
    lock = Lock(McsParkingLock(), 0)
    guard = lock.lock()
    acquired = threading.Event()

    def other():
        with lock.lock() as g:
            g.value = g.value + 10
        acquired.set()

    t = threading.Thread(target=other)
    t.start()
    assert not acquired.wait(0.1)
    guard.value = 5
    guard.release()
    t.join(5)
    assert acquired.is_set()
    with lock.lock() as g:
        assert g.value == 15