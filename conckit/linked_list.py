"""A doubly-linked list with constant-time operations at both ends."""

from __future__ import annotations

from typing import Any, Generic, Iterable, Iterator, Optional, TypeVar

T = TypeVar("T")


class Node(Generic[T]):
    """A list node; ``element`` may be reassigned in place."""

    __slots__ = ("next", "prev", "element")

    def __init__(self, element: T) -> None:
        self.next: Optional[Node[T]] = None
        self.prev: Optional[Node[T]] = None
        self.element = element

    def __repr__(self) -> str:
        return f"Node({self.element!r})"


class LinkedList(Generic[T]):
    """A doubly-linked list with owned nodes."""

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, iterable: Optional[Iterable[T]] = None) -> None:
        self._head: Optional[Node[T]] = None
        self._tail: Optional[Node[T]] = None
        self._len = 0
        if iterable is not None:
            for elt in iterable:
                self.push_back(elt)

    def _swap(self, other: LinkedList[T]) -> None:
        self._head, other._head = other._head, self._head
        self._tail, other._tail = other._tail, self._tail
        self._len, other._len = other._len, self._len

    def _take(self) -> tuple[Optional[Node[T]], Optional[Node[T]], int]:
        parts = (self._head, self._tail, self._len)
        self._head = self._tail = None
        self._len = 0
        return parts

    def append(self, other: LinkedList[T]) -> None:
        """Move every element of ``other`` to the end of this list."""
        if self._tail is None:
            self._swap(other)
            return
        head, tail, length = other._take()
        if head is None:
            return
        self._tail.next = head
        head.prev = self._tail
        self._tail = tail
        self._len += length

    def prepend(self, other: LinkedList[T]) -> None:
        """Move every element of ``other`` to the front of this list."""
        if self._head is None:
            self._swap(other)
            return
        head, tail, length = other._take()
        if tail is None:
            return
        tail.next = self._head
        self._head.prev = tail
        self._head = head
        self._len += length

    def __iter__(self) -> Iter[T]:
        return self.iter()

    def __reversed__(self) -> Iterator[T]:
        it = self.iter()
        while len(it):
            yield it.next_back()

    def iter(self) -> Iter[T]:
        """Return a double-ended iterator over the elements."""
        return Iter(self._head, self._tail, self._len)

    def iter_mut(self) -> IterMut[T]:
        """Return a double-ended iterator over the nodes, allowing edits."""
        return IterMut(self)

    def drain(self) -> Iterator[T]:
        """Yield elements from the front, removing each from the list."""
        while self._head is not None:
            yield self.pop_front()

    def is_empty(self) -> bool:
        return self._head is None

    def __len__(self) -> int:
        return self._len

    def clear(self) -> None:
        """Remove all elements."""
        node = self._head
        while node is not None:
            nxt = node.next
            node.next = node.prev = None
            node = nxt
        self._head = self._tail = None
        self._len = 0

    def __contains__(self, x: object) -> bool:
        return any(e == x for e in self.iter())

    def front(self) -> Optional[T]:
        """Return the first element, or None if the list is empty."""
        return None if self._head is None else self._head.element

    def back(self) -> Optional[T]:
        """Return the last element, or None if the list is empty."""
        return None if self._tail is None else self._tail.element

    def push_front(self, elt: T) -> None:
        node = Node(elt)
        node.next = self._head
        if self._head is None:
            self._tail = node
        else:
            self._head.prev = node
        self._head = node
        self._len += 1

    def pop_front(self) -> Optional[T]:
        """Remove and return the first element, or None if the list is empty."""
        node = self._head
        if node is None:
            return None
        self._head = node.next
        if self._head is None:
            self._tail = None
        else:
            self._head.prev = None
        node.next = None
        self._len -= 1
        return node.element

    def push_back(self, elt: T) -> None:
        node = Node(elt)
        node.prev = self._tail
        if self._tail is None:
            self._head = node
        else:
            self._tail.next = node
        self._tail = node
        self._len += 1

    def pop_back(self) -> Optional[T]:
        """Remove and return the last element, or None if the list is empty."""
        node = self._tail
        if node is None:
            return None
        self._tail = node.prev
        if self._tail is None:
            self._head = None
        else:
            self._tail.next = None
        node.prev = None
        self._len -= 1
        return node.element

    def copy(self) -> LinkedList[T]:
        """Return a shallow copy."""
        return LinkedList(self.iter())

    __copy__ = copy

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LinkedList):
            return NotImplemented
        return len(self) == len(other) and all(
            a == b for a, b in zip(self.iter(), other.iter())
        )

    def _partial_cmp(self, other: LinkedList[Any]) -> Optional[int]:
        """Lexicographic comparison; None when two elements are unordered."""
        for a, b in zip(self.iter(), other.iter()):
            if a == b:
                continue
            if a < b:
                return -1
            if a > b:
                return 1
            return None
        return (len(self) > len(other)) - (len(self) < len(other))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, LinkedList):
            return NotImplemented
        return self._partial_cmp(other) == -1

    def __le__(self, other: object) -> bool:
        if not isinstance(other, LinkedList):
            return NotImplemented
        return self._partial_cmp(other) in (-1, 0)

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, LinkedList):
            return NotImplemented
        return self._partial_cmp(other) == 1

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, LinkedList):
            return NotImplemented
        return self._partial_cmp(other) in (1, 0)

    def __repr__(self) -> str:
        return "[" + ", ".join(repr(e) for e in self.iter()) + "]"


class Iter(Generic[T]):
    """A double-ended iterator over the elements of a LinkedList."""

    def __init__(
        self, head: Optional[Node[T]], tail: Optional[Node[T]], length: int
    ) -> None:
        self._head = head
        self._tail = tail
        self._len = length

    def __iter__(self) -> Iter[T]:
        return self

    def __next__(self) -> T:
        if self._len == 0 or self._head is None:
            raise StopIteration
        node = self._head
        self._len -= 1
        self._head = node.next
        return node.element

    def next_back(self) -> T:
        """Return the next element from the back; raise StopIteration at the end."""
        if self._len == 0 or self._tail is None:
            raise StopIteration
        node = self._tail
        self._len -= 1
        self._tail = node.prev
        return node.element

    def __copy__(self) -> Iter[T]:
        return Iter(self._head, self._tail, self._len)

    def __len__(self) -> int:
        return self._len

    def __repr__(self) -> str:
        return f"Iter({self._len})"


class IterMut(Generic[T]):
    """A double-ended iterator yielding the nodes of a LinkedList.

    Assigning to a yielded node's ``element`` changes the list.
    """

    def __init__(self, lst: LinkedList[T]) -> None:
        self._list = lst
        self._head = lst._head
        self._tail = lst._tail
        self._len = len(lst)

    def __iter__(self) -> IterMut[T]:
        return self

    def __next__(self) -> Node[T]:
        if self._len == 0 or self._head is None:
            raise StopIteration
        node = self._head
        self._len -= 1
        self._head = node.next
        return node

    def next_back(self) -> Node[T]:
        """Return the next node from the back; raise StopIteration at the end."""
        if self._len == 0 or self._tail is None:
            raise StopIteration
        node = self._tail
        self._len -= 1
        self._tail = node.prev
        return node

    def insert_next(self, element: T) -> None:
        """Insert after the node most recently returned by ``next``.

        The inserted element does not appear in this iteration.
        """
        head = self._head
        if head is None:
            self._list.push_back(element)
            return
        prev = head.prev
        if prev is None:
            self._list.push_front(element)
            return
        node = Node(element)
        node.prev = prev
        node.next = head
        prev.next = node
        head.prev = node
        self._list._len += 1

    def peek_next(self) -> Optional[Node[T]]:
        """Return the node ``next`` would yield, without advancing."""
        if self._len == 0:
            return None
        return self._head

    def __repr__(self) -> str:
        return f"IterMut({self._list!r}, {self._len})"