"""A sequence lock: optimistic readers validated against a version counter."""

from __future__ import annotations

from typing import Any, Callable, Generic, Optional, TypeVar

from conckit.atomics import AtomicCell, Backoff

T = TypeVar("T")
R = TypeVar("R")

_MASK = (1 << 64) - 1


class UpgradeError(Exception):
    """A reader could not be upgraded because a writer intervened."""


class RawSeqLock:
    """A raw sequence lock: an even counter means no writer is active."""

    def __init__(self) -> None:
        self._seq = AtomicCell(0)

    def write_lock(self) -> int:
        """Acquire a writer's lock; return the sequence seen before it."""
        backoff = Backoff()
        while True:
            seq = self._seq.load()
            if seq & 1 == 0 and self._seq.compare_exchange(seq, (seq + 1) & _MASK)[0]:
                return seq
            backoff.snooze()

    def write_unlock(self, seq: int) -> None:
        self._seq.store((seq + 2) & _MASK)

    def read_begin(self) -> int:
        """Wait until no writer is active and return the sequence."""
        backoff = Backoff()
        while True:
            seq = self._seq.load()
            if seq & 1 == 0:
                return seq
            backoff.snooze()

    def read_validate(self, seq: int) -> bool:
        """Return whether no write has happened since ``seq`` was read."""
        return seq == self._seq.load()

    def upgrade(self, seq: int) -> None:
        """Turn a read begun at ``seq`` into a write; raise UpgradeError on conflict."""
        if seq & 1:
            raise ValueError("sequence number must be even")
        if not self._seq.compare_exchange(seq, (seq + 1) & _MASK)[0]:
            raise UpgradeError("sequence changed since the read began")


class SeqLock(Generic[T]):
    """A value guarded by a sequence lock."""

    def __init__(self, data: T) -> None:
        self._raw = RawSeqLock()
        self.data = data

    def write_lock(self) -> WriteGuard[T]:
        return WriteGuard(self, self._raw.write_lock())

    def read_lock(self) -> ReadGuard[T]:
        return ReadGuard(self, self._raw.read_begin())

    def read(self, f: Callable[[T], R]) -> Optional[R]:
        """Run ``f`` on the value; return its result, or None if a write interfered."""
        guard = self.read_lock()
        result = f(guard.value)
        return result if guard.finish() else None

    def __repr__(self) -> str:
        return f"SeqLock({self.data!r})"


class WriteGuard(Generic[T]):
    """A writer's access to a SeqLock's value."""

    def __init__(self, lock: SeqLock[T], seq: int) -> None:
        self._lock = lock
        self._seq = seq
        self._held = True

    def _check(self) -> None:
        if not self._held:
            raise RuntimeError("write guard already released")

    @property
    def value(self) -> T:
        self._check()
        return self._lock.data

    @value.setter
    def value(self, value: T) -> None:
        self._check()
        self._lock.data = value

    def __enter__(self) -> WriteGuard[T]:
        return self

    def __exit__(self, *args: Any) -> None:
        if self._held:
            self.release()

    def release(self) -> None:
        """Release the writer's lock; only once."""
        self._check()
        self._held = False
        self._lock._raw.write_unlock(self._seq)


class ReadGuard(Generic[T]):
    """A reader's optimistic view of a SeqLock's value.

    End it with ``finish`` or ``upgrade``.
    """

    def __init__(self, lock: SeqLock[T], seq: int) -> None:
        self._lock = lock
        self._seq = seq
        self._done = False

    def _check(self) -> None:
        if self._done:
            raise RuntimeError("read guard already finished")

    @property
    def value(self) -> T:
        return self._lock.data

    def validate(self) -> bool:
        return self._lock._raw.read_validate(self._seq)

    def restart(self) -> None:
        """Begin the read again from the current sequence."""
        self._seq = self._lock._raw.read_begin()

    def finish(self) -> bool:
        """End the read and return whether it was valid."""
        self._check()
        self._done = True
        return self._lock._raw.read_validate(self._seq)

    def upgrade(self) -> WriteGuard[T]:
        """End the read by turning it into a write; raise UpgradeError on conflict."""
        self._check()
        self._done = True
        self._lock._raw.upgrade(self._seq)
        return WriteGuard(self._lock, self._seq)

    def __copy__(self) -> ReadGuard[T]:
        return ReadGuard(self._lock, self._seq)