"""Keyed mutex registry"""

import threading
import weakref


class KeyedLocks:
    """
    One mutex per key, created on first use.

    Entries are weakly held: a key's lock disappears once no caller
    references it, so the registry stays bounded by the keys currently
    in use rather than every key ever seen.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: "weakref.WeakValueDictionary[str, threading.Lock]" = weakref.WeakValueDictionary()

    def for_key(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def __len__(self) -> int:
        return len(self._locks)
