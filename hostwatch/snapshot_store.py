"""In-memory ring buffer holding the encoded snapshot history.

Entries are ``(timestamp_ms, payload)`` pairs where ``payload`` is the JSON
encoding of one snapshot, produced once by the sampler. Queries splice the
stored bytes into a JSON array without decoding them.

The ring is a pair of preallocated parallel lists. Logically it is one
ascending sequence, physically it is at most two contiguous runs (before and
after the wrap point), and each run is searched with ``bisect`` restricted to
its own index range.
"""
from bisect import bisect_right
from typing import List, Optional, Tuple

from .rwlock import ReadWriteLock

EMPTY_ARRAY = b"[]"


class SnapshotStore:
    def __init__(self, max_snapshots: int = 1440):
        max_snapshots = int(max_snapshots)
        if max_snapshots < 1:
            raise ValueError("max_snapshots must be at least 1")
        self._capacity = max_snapshots
        self._times: List[int] = [0] * max_snapshots
        self._payloads: List[bytes] = [b""] * max_snapshots
        self._head = 0
        self._size = 0
        self._lock = ReadWriteLock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        with self._lock.read_locked():
            return self._size

    def append(self, timestamp: int, payload: bytes) -> bool:
        """Store ``payload`` under ``timestamp`` if it is newer than the newest entry.

        Returns False when the sample is dropped because its timestamp does not
        advance past the current newest one. When the ring is full the oldest
        entry is evicted first.
        """
        timestamp = int(timestamp)
        if not isinstance(payload, (bytes, bytearray)):
            raise TypeError(f"payload must be bytes, not {type(payload).__name__}")
        payload = bytes(payload)
        with self._lock.write_locked():
            if self._size and timestamp <= self._times[self._tail_index()]:
                return False
            if self._size == self._capacity:
                self._payloads[self._head] = b""
                self._head = (self._head + 1) % self._capacity
                self._size -= 1
            idx = (self._head + self._size) % self._capacity
            self._times[idx] = timestamp
            self._payloads[idx] = payload
            self._size += 1
            return True

    def query_since(self, threshold: int = 0) -> bytes:
        """Return a JSON array of every payload with ``timestamp > threshold``, oldest first."""
        threshold = int(threshold)
        parts: List[bytes] = []
        with self._lock.read_locked():
            if not self._size or threshold >= self._times[self._tail_index()]:
                return EMPTY_ARRAY
            for lo, hi in self._runs():
                start = bisect_right(self._times, threshold, lo, hi)
                parts.extend(self._payloads[start:hi])
        return b"[" + b",".join(parts) + b"]"

    def latest_timestamp(self) -> Optional[int]:
        with self._lock.read_locked():
            if not self._size:
                return None
            return self._times[self._tail_index()]

    def clear(self) -> None:
        with self._lock.write_locked():
            self._payloads = [b""] * self._capacity
            self._head = 0
            self._size = 0

    def _tail_index(self) -> int:
        return (self._head + self._size - 1) % self._capacity

    def _runs(self) -> List[Tuple[int, int]]:
        # Caller holds the lock.
        end = self._head + self._size
        if end <= self._capacity:
            return [(self._head, end)]
        return [(self._head, self._capacity), (0, end - self._capacity)]
