"""
Keyed re-entrant locks.

Serialises read-then-write sequences on the same product (or order)
inside one process. The stock source is remote, so database row locks
cannot protect it; this can.

Usage:
    locks = KeyedLock()
    with locks('product-1'):
        ...
    with locks.many(['b', 'a']):   # acquired in sorted order
        ...
"""

import threading
from contextlib import ExitStack, contextmanager


class _Entry:
    __slots__ = ('lock', 'holders')

    def __init__(self):
        self.lock = threading.RLock()
        self.holders = 0


class KeyedLock:
    """
    Registry of threading.RLock, one per key.

    A key's lock exists only while some thread holds or waits for it,
    so the registry does not grow with every key ever seen.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, _Entry] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def _acquire_entry(self, key: str) -> _Entry:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _Entry()
            entry.holders += 1
            return entry

    def _release_entry(self, key: str, entry: _Entry) -> None:
        with self._guard:
            entry.holders -= 1
            if entry.holders == 0:
                del self._locks[key]

    @contextmanager
    def __call__(self, key):
        key = str(key)
        entry = self._acquire_entry(key)
        try:
            with entry.lock:
                yield
        finally:
            self._release_entry(key, entry)

    @contextmanager
    def many(self, keys):
        """Hold the locks of all keys. Sorted to avoid lock-order deadlocks."""
        with ExitStack() as stack:
            for key in sorted({str(k) for k in keys}):
                stack.enter_context(self(key))
            yield
