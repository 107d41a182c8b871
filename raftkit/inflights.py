"""Sliding window of in-flight append messages."""

from __future__ import annotations

import copy
from typing import NamedTuple


class _Inflight(NamedTuple):
    index: int  # index of the last entry in the message
    nbytes: int  # total byte size of the entries in the message


class Inflights:
    """Limits the number of unacknowledged appends sent to a follower.

    Each append is represented by the largest index it contains. Callers
    check :meth:`full` before :meth:`add`, and release quota with
    :meth:`free_le` whenever an acknowledgement arrives. A ``max_bytes`` of 0
    means no byte limit; the byte limit is soft, so a single message may push
    the total from below the limit to at or above it.
    """

    def __init__(self, size: int, max_bytes: int = 0) -> None:
        self.size = size
        self.max_bytes = max_bytes
        self.start = 0
        self._count = 0
        self.bytes_in_flight = 0
        # Ring buffer, grown on demand up to ``size`` entries.
        self.buffer: list[_Inflight] = []

    def clone(self) -> Inflights:
        """Return an identical Inflights that shares no memory with this one."""
        other = copy.copy(self)
        other.buffer = list(self.buffer)
        return other

    def add(self, index: int, nbytes: int) -> None:
        """Record a dispatched message whose last entry has the given index."""
        if self.full():
            raise RuntimeError("cannot add into a Full inflights")
        nxt = self.start + self._count
        if nxt >= self.size:
            nxt -= self.size
        if nxt >= len(self.buffer):
            self._grow()
        self.buffer[nxt] = _Inflight(index, nbytes)
        self._count += 1
        self.bytes_in_flight += nbytes

    def _grow(self) -> None:
        new_size = len(self.buffer) * 2
        if new_size == 0:
            new_size = 1
        elif new_size > self.size:
            new_size = self.size
        self.buffer = self.buffer + [_Inflight(0, 0)] * (new_size - len(self.buffer))

    def free_le(self, to: int) -> None:
        """Free all in-flight messages with an index less than or equal to ``to``."""
        if self._count == 0 or to < self.buffer[self.start].index:
            return
        idx = self.start
        freed = 0
        freed_bytes = 0
        for _ in range(self._count):
            item = self.buffer[idx]
            if to < item.index:
                break
            freed += 1
            freed_bytes += item.nbytes
            idx += 1
            if idx >= self.size:
                idx -= self.size
        self._count -= freed
        self.bytes_in_flight -= freed_bytes
        self.start = idx
        if self._count == 0:
            # Empty: restart at zero so the buffer does not grow needlessly.
            self.start = 0

    def full(self) -> bool:
        """Return True if no more messages can be sent at the moment."""
        return self._count == self.size or (
            self.max_bytes != 0 and self.bytes_in_flight >= self.max_bytes
        )

    def count(self) -> int:
        """Return the number of in-flight messages."""
        return self._count

    def reset(self) -> None:
        """Free all in-flight messages."""
        self.start = 0
        self._count = 0
        self.bytes_in_flight = 0