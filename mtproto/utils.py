"""Message ids, hashes and thread-safe containers."""

from __future__ import annotations

import hashlib
import random
import threading
import time
from typing import Any, Generic, Hashable, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

_BILLION = 1_000_000_000


def generate_message_id() -> int:
    """Return a message id: unix seconds in the high half, nanoseconds below."""
    seconds, nanoseconds = divmod(time.time_ns(), _BILLION)
    return (seconds << 32) | (nanoseconds & -4)


def sha1(data: bytes) -> bytes:
    """Return the SHA-1 digest of ``data``."""
    return hashlib.sha1(bytes(data)).digest()


def auth_key_hash(key: bytes) -> bytes:
    """Return the 8-byte hash identifying an auth key."""
    return sha1(key)[12:20]


def generate_session_id() -> int:
    """Return a random non-negative 63-bit session id."""
    return random.getrandbits(63)


class SyncSet(Generic[K]):
    """A set guarded by a lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: set[K] = set()

    def has(self, key: K) -> bool:
        with self._lock:
            return key in self._items

    def add(self, key: K) -> bool:
        """Add ``key``; return True if it was not there before."""
        with self._lock:
            added = key not in self._items
            self._items.add(key)
            return added

    def delete(self, key: K) -> bool:
        """Remove ``key``; return True if it was there."""
        with self._lock:
            present = key in self._items
            self._items.discard(key)
            return present

    def reset(self) -> None:
        with self._lock:
            self._items = set()

    def __contains__(self, key: Any) -> bool:
        return self.has(key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class SyncMap(Generic[K, V]):
    """A dictionary guarded by a lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: dict[K, V] = {}

    def has(self, key: K) -> bool:
        with self._lock:
            return key in self._items

    def get(self, key: K) -> V | None:
        """Return the value stored under ``key``, or None."""
        with self._lock:
            return self._items.get(key)

    def add(self, key: K, value: V) -> None:
        with self._lock:
            self._items[key] = value

    def keys(self) -> list[K]:
        with self._lock:
            return list(self._items)

    def delete(self, key: K) -> bool:
        """Remove ``key``; return True if it was there."""
        with self._lock:
            return self._items.pop(key, _MISSING) is not _MISSING

    def __contains__(self, key: Any) -> bool:
        return self.has(key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


_MISSING: Any = object()