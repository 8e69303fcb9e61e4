"""Map interfaces, random key generators and adapters between kinds of maps."""

from __future__ import annotations

import copy
import random
import string
from abc import ABC, abstractmethod
from typing import Callable, Generic, Optional, TypeVar

from conckit.locks import Lock, RawLock

K = TypeVar("K")
V = TypeVar("V")
R = TypeVar("R")

KEY_MAX_LENGTH = 4
_ALPHANUMERIC = string.ascii_uppercase + string.ascii_lowercase + string.digits
_USIZE_MASK = 0x4004004004007777
_U32_MASK = 0x66666666


def rand_gen_string(rng: random.Random) -> str:
    """Return a random alphanumeric string shorter than KEY_MAX_LENGTH."""
    length = rng.getrandbits(64) % KEY_MAX_LENGTH
    return "".join(rng.choice(_ALPHANUMERIC) for _ in range(length))


def rand_gen_usize(rng: random.Random) -> int:
    """Return a random 64-bit value with only 16 chosen bits possibly set."""
    return rng.getrandbits(64) & _USIZE_MASK


def rand_gen_u32(rng: random.Random) -> int:
    """Return a random 32-bit value with only 16 chosen bits possibly set."""
    return rng.getrandbits(32) & _U32_MASK


class SequentialMap(ABC, Generic[K, V]):
    """A key-value map for use by one thread at a time."""

    @abstractmethod
    def lookup(self, key: K) -> Optional[V]:
        """Return the value for ``key``, or None."""

    @abstractmethod
    def insert(self, key: K, value: V) -> None:
        """Insert a pair; raise KeyError if ``key`` is already present."""

    @abstractmethod
    def delete(self, key: K) -> V:
        """Remove ``key`` and return its value; raise KeyError if absent."""


class ConcurrentMap(ABC, Generic[K, V]):
    """A key-value map that may be shared between threads."""

    @abstractmethod
    def lookup(self, key: K, f: Callable[[Optional[V]], R]) -> R:
        """Call ``f`` with the value for ``key`` (or None) and return its result."""

    @abstractmethod
    def insert(self, key: K, value: V) -> None:
        """Insert a pair; raise KeyError if ``key`` is already present."""

    @abstractmethod
    def delete(self, key: K) -> V:
        """Remove ``key`` and return its value; raise KeyError if absent."""


class NonblockingMap(ABC, Generic[K, V]):
    """A key-value map whose operations never block."""

    @abstractmethod
    def lookup(self, key: K) -> Optional[V]:
        """Return the value for ``key``, or None."""

    @abstractmethod
    def insert(self, key: K, value: V) -> None:
        """Insert a pair; raise KeyError if ``key`` is already present."""

    @abstractmethod
    def delete(self, key: K) -> V:
        """Remove ``key`` and return its (possibly still shared) value; raise KeyError if absent."""


class StrStringMap(SequentialMap[str, V]):
    """A string-keyed map delegating to a map over string keys."""

    def __init__(self, inner: SequentialMap[str, V]) -> None:
        self._inner = inner

    def lookup(self, key: str) -> Optional[V]:
        return self._inner.lookup(str(key))

    def insert(self, key: str, value: V) -> None:
        self._inner.insert(str(key), value)

    def delete(self, key: str) -> V:
        return self._inner.delete(str(key))

    def __repr__(self) -> str:
        return f"StrStringMap({self._inner!r})"


class LockedMap(ConcurrentMap[K, V]):
    """A sequential map made concurrent by guarding it with a raw lock."""

    def __init__(self, raw: RawLock, inner: SequentialMap[K, V]) -> None:
        self._lock: Lock[SequentialMap[K, V]] = Lock(raw, inner)

    def lookup(self, key: K, f: Callable[[Optional[V]], R]) -> R:
        with self._lock.lock() as guard:
            return f(guard.value.lookup(key))

    def insert(self, key: K, value: V) -> None:
        with self._lock.lock() as guard:
            guard.value.insert(key, value)

    def delete(self, key: K) -> V:
        with self._lock.lock() as guard:
            return guard.value.delete(key)

    def __repr__(self) -> str:
        return f"LockedMap({self._lock!r})"


class NonblockingConcurrentMap(ConcurrentMap[K, V]):
    """A nonblocking map used through the concurrent-map interface."""

    def __init__(self, inner: NonblockingMap[K, V]) -> None:
        self._inner = inner

    def lookup(self, key: K, f: Callable[[Optional[V]], R]) -> R:
        return f(self._inner.lookup(key))

    def insert(self, key: K, value: V) -> None:
        self._inner.insert(key, value)

    def delete(self, key: K) -> V:
        """Remove ``key`` and return a copy of its value."""
        return copy.copy(self._inner.delete(key))

    def __repr__(self) -> str:
        return f"NonblockingConcurrentMap({self._inner!r})"