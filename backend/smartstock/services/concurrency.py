# Overview: Locking primitives shared by the registry, ledger and stock operations.

from __future__ import annotations

import itertools
import threading
from contextlib import contextmanager
from typing import Hashable, Iterator


class KeyedLocks:
    """
    One exclusive lock per key (product id).

    Mutations on the same product serialize; mutations on different products
    never wait on each other. The guard lock is only held while looking up or
    creating a key's lock, never while the caller's critical section runs.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[Hashable, threading.Lock] = {}

    def _get(self, key: Hashable) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def lock_for(self, key: Hashable) -> Iterator[None]:
        lock = self._get(key)
        with lock:
            yield

    def discard(self, key: Hashable) -> None:
        """Forget a key's lock (after the product is gone)."""
        with self._guard:
            self._locks.pop(key, None)


class AtomicCounter:
    """Monotonic id allocator, safe under concurrent callers."""

    def __init__(self, start: int = 1):
        self._lock = threading.Lock()
        self._counter = itertools.count(start)

    def next(self) -> int:
        with self._lock:
            return next(self._counter)
