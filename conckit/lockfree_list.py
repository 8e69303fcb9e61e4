"""A lock-free sorted singly linked list with Harris-style logical deletion."""

from __future__ import annotations

from typing import Callable, Generic, NamedTuple, Optional, TypeVar

from conckit.atomics import AtomicCell

K = TypeVar("K")
V = TypeVar("V")


class CursorConflict(Exception):
    """Another thread changed the list under the cursor; the caller should retry."""


class _Ptr(NamedTuple):
    """A link to a node together with its deletion mark."""

    node: Optional["Node"]
    tag: int


_NULL = _Ptr(None, 0)


class Node(Generic[K, V]):
    """A list node holding a key, a value and a marked link to the next node."""

    __slots__ = ("next", "key", "value")

    def __init__(self, key: K, value: V) -> None:
        self.next: AtomicCell[_Ptr] = AtomicCell(_NULL)
        self.key = key
        self.value = value

    def __repr__(self) -> str:
        return f"Node({self.key!r}, {self.value!r})"


class Cursor(Generic[K, V]):
    """A position in the list: the link ``prev`` that points at node ``curr``."""

    def __init__(self, prev: AtomicCell, curr: Optional[Node[K, V]]) -> None:
        self._prev = prev
        self._curr = curr

    def curr(self) -> Optional[Node[K, V]]:
        """Return the current node, or None at the end of the list."""
        return self._curr

    def find_harris(self, key: K) -> bool:
        """Move to ``key``, unlinking a whole chain of marked nodes at once.

        Raise CursorConflict if the cleanup could not be done.
        """
        prev_next = self._curr
        while True:
            curr = self._curr
            if curr is None:
                found = False
                break
            nxt = curr.next.load()
            if nxt.tag:
                self._curr = nxt.node
                continue
            if curr.key < key:
                self._curr = nxt.node
                self._prev = curr.next
                prev_next = nxt.node
            elif curr.key == key:
                found = True
                break
            else:
                found = False
                break

        if prev_next is self._curr:
            return found
        if not self._prev.compare_exchange(_Ptr(prev_next, 0), _Ptr(self._curr, 0))[0]:
            raise CursorConflict
        return found

    def find_harris_michael(self, key: K) -> bool:
        """Move to ``key``, unlinking marked nodes one at a time.

        Raise CursorConflict if an unlink fails.
        """
        while True:
            curr = self._curr
            if curr is None:
                return False
            nxt = curr.next.load()
            if nxt.tag:
                if not self._prev.compare_exchange(_Ptr(curr, 0), _Ptr(nxt.node, 0))[0]:
                    raise CursorConflict
                self._curr = nxt.node
                continue
            if curr.key < key:
                self._prev = curr.next
                self._curr = nxt.node
            else:
                return curr.key == key

    def find_harris_herlihy_shavit(self, key: K) -> bool:
        """Move to ``key`` without cleaning up; meant for lookups and never fails."""
        while True:
            curr = self._curr
            if curr is None:
                return False
            if curr.key < key:
                self._curr = curr.next.load().node
                self._prev = curr.next
                continue
            if curr.key == key:
                return curr.next.load().tag == 0
            return False

    def lookup(self) -> Optional[V]:
        """Return the current node's value, or None at the end of the list."""
        return None if self._curr is None else self._curr.value

    def insert(self, node: Node[K, V]) -> None:
        """Link ``node`` in before the current node; raise CursorConflict on a race."""
        node.next.store(_Ptr(self._curr, 0))
        if not self._prev.compare_exchange(_Ptr(self._curr, 0), _Ptr(node, 0))[0]:
            raise CursorConflict
        self._curr = node

    def delete(self) -> V:
        """Mark the current node deleted, try to unlink it, and return its value.

        Raise CursorConflict if it was already marked by another thread.
        """
        curr = self._curr
        if curr is None:
            raise ValueError("cursor is at the end of the list")
        while True:
            nxt = curr.next.load()
            if nxt.tag:
                raise CursorConflict
            if curr.next.compare_exchange(nxt, _Ptr(nxt.node, 1))[0]:
                break
        self._prev.compare_exchange(_Ptr(curr, 0), _Ptr(nxt.node, 0))
        return curr.value

    def __repr__(self) -> str:
        return f"Cursor({self._curr!r})"


_Find = Callable[[Cursor, object], bool]


class List(Generic[K, V]):
    """A lock-free sorted singly linked list of key-value pairs."""

    def __init__(self) -> None:
        self._head: AtomicCell[_Ptr] = AtomicCell(_NULL)

    def head(self) -> Cursor[K, V]:
        """Return a cursor at the start of the list."""
        return Cursor(self._head, self._head.load().node)

    def _find(self, key: K, find: _Find) -> tuple[bool, Cursor[K, V]]:
        while True:
            cursor = self.head()
            try:
                return find(cursor, key), cursor
            except CursorConflict:
                continue

    def _lookup(self, key: K, find: _Find) -> Optional[V]:
        found, cursor = self._find(key, find)
        return cursor.lookup() if found else None

    def _insert(self, key: K, value: V, find: _Find) -> bool:
        node = Node(key, value)
        while True:
            found, cursor = self._find(node.key, find)
            if found:
                return False
            try:
                cursor.insert(node)
                return True
            except CursorConflict:
                continue

    def _delete(self, key: K, find: _Find) -> Optional[V]:
        while True:
            found, cursor = self._find(key, find)
            if not found:
                return None
            try:
                return cursor.delete()
            except CursorConflict:
                continue

    def harris_lookup(self, key: K) -> Optional[V]:
        return self._lookup(key, Cursor.find_harris)

    def harris_insert(self, key: K, value: V) -> bool:
        return self._insert(key, value, Cursor.find_harris)

    def harris_delete(self, key: K) -> Optional[V]:
        return self._delete(key, Cursor.find_harris)

    def harris_michael_lookup(self, key: K) -> Optional[V]:
        return self._lookup(key, Cursor.find_harris_michael)

    def harris_michael_insert(self, key: K, value: V) -> bool:
        return self._insert(key, value, Cursor.find_harris_michael)

    def harris_michael_delete(self, key: K) -> Optional[V]:
        return self._delete(key, Cursor.find_harris_michael)

    def harris_herlihy_shavit_lookup(self, key: K) -> Optional[V]:
        return self._lookup(key, Cursor.find_harris_herlihy_shavit)

    def harris_herlihy_shavit_insert(self, key: K, value: V) -> bool:
        return self._insert(key, value, Cursor.find_harris_michael)

    def harris_herlihy_shavit_delete(self, key: K) -> Optional[V]:
        return self._delete(key, Cursor.find_harris_michael)

    def __repr__(self) -> str:
        return "List()"