"""Concurrent data structures and locks: linked lists, spin and queue locks,
a sequence lock, lock-coupled and lock-free sorted lists, a queue, a stack
and map interfaces."""

__version__ = "0.1.0"