"""Treiber's lock-free stack, usable by any number of producers and consumers."""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

from conckit.atomics import AtomicCell

T = TypeVar("T")


class _Node(Generic[T]):
    __slots__ = ("data", "next")

    def __init__(self, data: T) -> None:
        self.data = data
        self.next: Optional[_Node[T]] = None


class Stack(Generic[T]):
    """Treiber's lock-free stack."""

    def __init__(self) -> None:
        self._head: AtomicCell[Optional[_Node[T]]] = AtomicCell(None)

    def push(self, t: T) -> None:
        """Push ``t`` on top of the stack."""
        node = _Node(t)
        while True:
            head = self._head.load()
            node.next = head
            if self._head.compare_exchange(head, node)[0]:
                return

    def pop(self) -> Optional[T]:
        """Remove and return the top element, or None if the stack is empty."""
        while True:
            head = self._head.load()
            if head is None:
                return None
            if self._head.compare_exchange(head, head.next)[0]:
                return head.data

    def is_empty(self) -> bool:
        return self._head.load() is None

    def __repr__(self) -> str:
        return f"Stack(empty={self.is_empty()})"