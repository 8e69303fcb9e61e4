# conckit

Concurrent data structures and locks for Python threads. It has no
dependencies outside the standard library.

## Contents

- `conckit.linked_list`: `LinkedList`, a doubly linked list with constant-time
  `push_front`, `push_back`, `pop_front` and `pop_back`, O(1) `append` and
  `prepend` (which move every element out of the other list), `front`, `back`,
  `drain`, `copy`, equality, lexicographic ordering and `in`.
  `iter()` returns an `Iter`, a double-ended iterator over elements
  (`next_back` takes from the back). `iter_mut()` returns an `IterMut`, which
  yields the list's `Node` objects: assigning to `node.element` changes the
  list. `IterMut.insert_next` inserts an element after the node last returned
  by `next`, and `peek_next` returns the next node without advancing.
- `conckit.atomics`: `AtomicCell`, a value with indivisible `load`, `store`,
  `swap`, `compare_exchange` and `fetch_add`, and `Backoff`, an exponential
  backoff for spin loops.
- `conckit.locks`: the raw locks `SpinLock` (which also has `try_lock`),
  `TicketLock`, `ClhLock`, `McsLock` and `McsParkingLock` (whose waiters sleep
  on an event rather than spin). Each raw lock's `lock()` returns a token that
  must be passed to `unlock()`. `Lock(raw, data)` pairs a raw lock with the data
  it protects; `Lock.lock()` returns a `LockGuard` whose `value` property reads
  and replaces the data, and which releases the lock on `release()` or when its
  `with` block ends. `Lock.try_lock()` works only with a `RawTryLock` and
  returns `None` when the lock is taken.
- `conckit.seqlock`: `RawSeqLock` and `SeqLock`. `SeqLock.write_lock()`
  returns a `WriteGuard`; `read_lock()` returns a `ReadGuard`, which is ended
  with `finish()` (returning whether the read was valid) or `upgrade()`
  (turning it into a `WriteGuard`, or raising `UpgradeError` if a writer got
  in first). `SeqLock.read(f)` runs `f` on the value and returns its result,
  or `None` if a write interfered.
- `conckit.list_set`: `OrderedListSet`, a sorted set that uses hand-over-hand
  locking. `insert` raises `KeyError` for a key already present, `remove`
  raises `KeyError` for an absent key, and iteration yields keys in order.
- `conckit.lockfree_list`: `List`, a sorted key-value list built on
  compare-and-exchange with logical deletion marks, with lookup, insert and
  delete under the Harris, Harris-Michael and Harris-Herlihy-Shavit search
  strategies (for example `harris_insert`, `harris_michael_lookup`,
  `harris_herlihy_shavit_delete`). Inserts return whether the key was added;
  lookups and deletes return the value or `None`. `List.head()` returns a
  `Cursor` for working with the list directly; a cursor raises
  `CursorConflict` when another thread changed the list under it.
- `conckit.queue`: `Queue`, a Michael-Scott queue with `push`, `try_pop`
  (returning `None` when empty) and `is_empty`.
- `conckit.stack`: `Stack`, a Treiber stack with `push`, `pop` (returning
  `None` when empty) and `is_empty`.
- `conckit.map`: the map interfaces `SequentialMap`, `ConcurrentMap` and
  `NonblockingMap`; the adapters `StrStringMap`, `LockedMap` (a sequential map
  behind a raw lock) and `NonblockingConcurrentMap` (whose `delete` returns a
  copy of the value); and the random key generators `rand_gen_string`,
  `rand_gen_usize` and `rand_gen_u32`. Inserting a key that is present and
  deleting one that is absent raise `KeyError`.

The atomic operations in `AtomicCell` are made indivisible with a
`threading.Lock`, so the "lock-free" structures here are lock-free in their
algorithm, not in how the interpreter runs them.

## What it does not include

`conckit.map` defines interfaces and adapters only; the package has no
ready-made map implementation (such as a hash table or a search tree) to put
behind them. You supply the inner map.

## Examples

```python
from conckit.linked_list import LinkedList

lst = LinkedList([1, 4])
it = lst.iter_mut()
next(it)
it.insert_next(2)
it.insert_next(3)
assert list(lst) == [1, 2, 3, 4]
```

```python
from conckit.locks import Lock, McsLock

counter = Lock(McsLock(), [0])
with counter.lock() as guard:
    guard.value[0] += 1
```

```python
from conckit.seqlock import SeqLock

cell = SeqLock(10)
with cell.write_lock() as guard:
    guard.value = 11
assert cell.read(lambda v: v * 2) == 22
```

```python
from conckit.queue import Queue

q = Queue()
q.push(37)
q.push(48)
assert q.try_pop() == 37
```

## Running the tests

```
pip install -e ".[test]"
pytest
```