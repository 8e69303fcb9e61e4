"""A concurrent sorted set on a singly linked list with hand-over-hand locking."""

from __future__ import annotations

import threading
from typing import Generic, Iterator, Optional, TypeVar

T = TypeVar("T")


class _Link(Generic[T]):
    """A locked reference to the next node."""

    __slots__ = ("lock", "next")

    def __init__(self, nxt: Optional[_Node[T]] = None) -> None:
        self.lock = threading.Lock()
        self.next = nxt


class _Node(Generic[T]):
    __slots__ = ("data", "link")

    def __init__(self, data: T, nxt: Optional[_Node[T]]) -> None:
        self.data = data
        self.link: _Link[T] = _Link(nxt)


class OrderedListSet(Generic[T]):
    """Concurrent sorted singly linked list using lock-coupling."""

    def __init__(self) -> None:
        self._head: _Link[T] = _Link()

    def _find(self, key: T) -> tuple[bool, _Link[T]]:
        """Return whether ``key`` is present and the link that points at its
        position; that link's lock is held on return."""
        link = self._head
        link.lock.acquire()
        while True:
            node = link.next
            if node is None or not node.data < key:
                return node is not None and node.data == key, link
            node.link.lock.acquire()
            link.lock.release()
            link = node.link

    def contains(self, key: T) -> bool:
        found, link = self._find(key)
        link.lock.release()
        return found

    def insert(self, key: T) -> None:
        """Insert ``key``; raise KeyError if it is already present."""
        found, link = self._find(key)
        try:
            if found:
                raise KeyError(key)
            link.next = _Node(key, link.next)
        finally:
            link.lock.release()

    def remove(self, key: T) -> T:
        """Remove ``key`` and return it; raise KeyError if it is absent."""
        found, link = self._find(key)
        try:
            if not found:
                raise KeyError(key)
            node = link.next
            with node.link.lock:
                link.next = node.link.next
            return node.data
        finally:
            link.lock.release()

    def __iter__(self) -> Iterator[T]:
        link = self._head
        link.lock.acquire()
        try:
            while True:
                node = link.next
                if node is None:
                    return
                node.link.lock.acquire()
                link.lock.release()
                link = node.link
                yield node.data
        finally:
            link.lock.release()

    def __repr__(self) -> str:
        return f"OrderedListSet({list(self)!r})"