"""Atomic cells and a spin-wait backoff helper."""

from __future__ import annotations

import threading
import time
from typing import Generic, TypeVar

T = TypeVar("T")

_SPIN_LIMIT = 6
_YIELD_LIMIT = 10


class AtomicCell(Generic[T]):
    """A value whose every operation happens as one indivisible step."""

    __slots__ = ("_value", "_guard")

    def __init__(self, value: T) -> None:
        self._value = value
        self._guard = threading.Lock()

    def load(self) -> T:
        with self._guard:
            return self._value

    def store(self, value: T) -> None:
        with self._guard:
            self._value = value

    def swap(self, value: T) -> T:
        """Store ``value`` and return the previous value."""
        with self._guard:
            old = self._value
            self._value = value
            return old

    def compare_exchange(self, expected: T, new: T) -> tuple[bool, T]:
        """Store ``new`` if the current value is ``expected``.

        Returns whether the exchange happened and the value seen before it.
        """
        with self._guard:
            current = self._value
            if current is expected or current == expected:
                self._value = new
                return True, current
            return False, current

    def fetch_add(self, delta):
        """Add ``delta`` and return the previous value."""
        with self._guard:
            old = self._value
            self._value = old + delta
            return old

    def __repr__(self) -> str:
        return f"AtomicCell({self.load()!r})"


class Backoff:
    """Exponential backoff for spin loops."""

    def __init__(self) -> None:
        self._step = 0

    def snooze(self) -> None:
        """Back off in a blocking loop, yielding to other threads."""
        if self._step <= _SPIN_LIMIT:
            time.sleep(0)
        else:
            time.sleep(1e-6 * (1 << (self._step - _SPIN_LIMIT)))
        if self._step <= _YIELD_LIMIT:
            self._step += 1

    def reset(self) -> None:
        self._step = 0

    @property
    def is_completed(self) -> bool:
        """True once backing off has reached its longest wait."""
        return self._step > _YIELD_LIMIT

    def __repr__(self) -> str:
        return f"Backoff(step={self._step})"