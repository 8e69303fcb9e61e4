"""Michael-Scott lock-free queue, usable by any number of producers and consumers."""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

from conckit.atomics import AtomicCell

T = TypeVar("T")


class _Node(Generic[T]):
    """A queue node; the sentinel at the front holds no value."""

    __slots__ = ("data", "next")

    def __init__(self, data: Optional[T] = None) -> None:
        self.data = data
        self.next: AtomicCell[Optional[_Node[T]]] = AtomicCell(None)


class Queue(Generic[T]):
    """Michael-Scott queue.

    A singly linked list with a sentinel node at the front. The ``tail``
    pointer may lag behind the real last node; operations help move it on.
    """

    def __init__(self) -> None:
        sentinel: _Node[T] = _Node()
        self._head: AtomicCell[_Node[T]] = AtomicCell(sentinel)
        self._tail: AtomicCell[_Node[T]] = AtomicCell(sentinel)

    def push(self, t: T) -> None:
        """Add ``t`` to the back of the queue."""
        new = _Node(t)
        while True:
            tail = self._tail.load()
            nxt = tail.next.load()
            if nxt is not None:
                # The tail is stale: help move it forward and retry.
                self._tail.compare_exchange(tail, nxt)
                continue
            if tail.next.compare_exchange(None, new)[0]:
                self._tail.compare_exchange(tail, new)
                return

    def try_pop(self) -> Optional[T]:
        """Remove and return the front element, or None if the queue looks empty."""
        while True:
            head = self._head.load()
            nxt = head.next.load()
            if nxt is None:
                return None
            tail = self._tail.load()
            if tail is head:
                self._tail.compare_exchange(tail, nxt)
            if self._head.compare_exchange(head, nxt)[0]:
                # ``nxt`` is now the sentinel; only this thread takes its value.
                result = nxt.data
                nxt.data = None
                return result

    def is_empty(self) -> bool:
        """Return whether the queue is observed to be empty."""
        return self._head.load().next.load() is None

    def __repr__(self) -> str:
        return f"Queue(empty={self.is_empty()})"