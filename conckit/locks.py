"""Spin, ticket, CLH and MCS locks, and a data-owning lock built on them."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

from conckit.atomics import AtomicCell, Backoff

T = TypeVar("T")


class RawLock(ABC):
    """A lock that hands out a token on acquiry and takes it back on release."""

    @abstractmethod
    def lock(self) -> Any:
        """Acquire the lock and return its token."""

    @abstractmethod
    def unlock(self, token: Any) -> None:
        """Release the lock acquired with ``token``."""


class RawTryLock(RawLock):
    """A raw lock that can also be tried without blocking."""

    @abstractmethod
    def try_lock(self) -> bool:
        """Try to acquire; return whether the lock was taken."""


class SpinLock(RawTryLock):
    """A spin lock."""

    def __init__(self) -> None:
        self._inner = AtomicCell(False)

    def lock(self) -> None:
        backoff = Backoff()
        while not self._inner.compare_exchange(False, True)[0]:
            backoff.snooze()

    def unlock(self, token: None) -> None:
        self._inner.store(False)

    def try_lock(self) -> bool:
        return self._inner.compare_exchange(False, True)[0]


class TicketLock(RawLock):
    """A ticket lock: waiters are served in arrival order."""

    def __init__(self) -> None:
        self._curr = AtomicCell(0)
        self._next = AtomicCell(0)

    def lock(self) -> int:
        ticket = self._next.fetch_add(1)
        backoff = Backoff()
        while self._curr.load() != ticket:
            backoff.snooze()
        return ticket

    def unlock(self, token: int) -> None:
        self._curr.store(token + 1)


class _ClhNode:
    __slots__ = ("locked",)

    def __init__(self, locked: bool) -> None:
        self.locked = AtomicCell(locked)


class ClhLock(RawLock):
    """CLH queue lock: each waiter spins on its predecessor's node."""

    def __init__(self) -> None:
        self._tail = AtomicCell(_ClhNode(False))

    def lock(self) -> _ClhNode:
        node = _ClhNode(True)
        prev = self._tail.swap(node)
        backoff = Backoff()
        while prev.locked.load():
            backoff.snooze()
        return node

    def unlock(self, token: _ClhNode) -> None:
        token.locked.store(False)


class _McsNode:
    __slots__ = ("locked", "next", "wakeup")

    def __init__(self) -> None:
        self.locked = AtomicCell(True)
        self.next: AtomicCell[Optional[_McsNode]] = AtomicCell(None)
        self.wakeup = threading.Event()


def _mcs_successor(tail: AtomicCell, node: _McsNode) -> Optional[_McsNode]:
    """Return the node's successor, or None once the queue has been emptied."""
    nxt = node.next.load()
    if nxt is not None:
        return nxt
    if tail.compare_exchange(node, None)[0]:
        return None
    backoff = Backoff()
    while (nxt := node.next.load()) is None:
        backoff.snooze()
    return nxt


class McsLock(RawLock):
    """MCS queue lock: each waiter spins on its own node."""

    def __init__(self) -> None:
        self._tail: AtomicCell[Optional[_McsNode]] = AtomicCell(None)

    def lock(self) -> _McsNode:
        node = _McsNode()
        prev = self._tail.swap(node)
        if prev is None:
            return node
        prev.next.store(node)
        backoff = Backoff()
        while node.locked.load():
            backoff.snooze()
        return node

    def unlock(self, token: _McsNode) -> None:
        nxt = _mcs_successor(self._tail, token)
        if nxt is not None:
            nxt.locked.store(False)


class McsParkingLock(RawLock):
    """MCS queue lock whose waiters sleep instead of spinning."""

    def __init__(self) -> None:
        self._tail: AtomicCell[Optional[_McsNode]] = AtomicCell(None)

    def lock(self) -> _McsNode:
        node = _McsNode()
        prev = self._tail.swap(node)
        if prev is None:
            return node
        prev.next.store(node)
        while node.locked.load():
            node.wakeup.wait()
        return node

    def unlock(self, token: _McsNode) -> None:
        nxt = _mcs_successor(self._tail, token)
        if nxt is not None:
            nxt.locked.store(False)
            nxt.wakeup.set()


class Lock(Generic[T]):
    """A value protected by a raw lock."""

    def __init__(self, raw: RawLock, data: T) -> None:
        self._raw = raw
        self._data = data

    def lock(self) -> LockGuard[T]:
        """Acquire the lock and return a guard over the value."""
        return LockGuard(self, self._raw.lock())

    def try_lock(self) -> Optional[LockGuard[T]]:
        """Return a guard if the lock was free, otherwise None."""
        if not isinstance(self._raw, RawTryLock):
            raise TypeError(f"{type(self._raw).__name__} does not support try_lock")
        if self._raw.try_lock():
            return LockGuard(self, None)
        return None

    def __repr__(self) -> str:
        return f"Lock({type(self._raw).__name__})"


class LockGuard(Generic[T]):
    """Access to a locked value; releases the lock on exit."""

    def __init__(self, lock: Lock[T], token: Any) -> None:
        self._lock = lock
        self._token = token
        self._held = True

    def _check(self) -> None:
        if not self._held:
            raise RuntimeError("lock guard already released")

    @property
    def value(self) -> T:
        self._check()
        return self._lock._data

    @value.setter
    def value(self, value: T) -> None:
        self._check()
        self._lock._data = value

    def __enter__(self) -> LockGuard[T]:
        return self

    def __exit__(self, *args: Any) -> None:
        if self._held:
            self.release()

    def release(self) -> None:
        """Release the lock; a guard can be released only once."""
        self._check()
        self._held = False
        self._lock._raw.unlock(self._token)