"""
Bounded append buffer for quoted output.

Writes never go past the end of the region, and the region is left
NUL-terminated after every write, even when the write was truncated.
"""

from __future__ import annotations


class BoundedBuffer:
    """A fixed-capacity output region with a write position.

    Once the position reaches the limit the buffer is exhausted, and every
    later write is a no-op. A chain of writes can therefore run unchecked,
    with a single look at `exhausted` (or `truncated`) at the end.
    """

    def __init__(self, capacity: int, buffer: bytearray | memoryview | None = None):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        if buffer is None:
            buffer = bytearray(capacity)
        elif len(buffer) < capacity:
            raise ValueError(
                f"buffer holds {len(buffer)} bytes, capacity is {capacity}"
            )
        self._view = memoryview(buffer)[:capacity]
        if self._view.readonly:
            raise ValueError("buffer is read-only")
        self._pos = 0
        self._limit = capacity
        self._requested = 0
        self._view[0] = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def exhausted(self) -> bool:
        return self._pos == self._limit

    @property
    def requested(self) -> int:
        """Total bytes asked for by every write so far."""
        return self._requested

    @property
    def truncated(self) -> bool:
        # Content plus terminator must fit
        return self._requested >= self._limit

    def write(self, data: bytes | bytearray | memoryview | str) -> int:
        """Append data, truncating at the limit. Returns the new position."""
        if isinstance(data, str):
            data = data.encode("ascii")
        self._requested += len(data)

        space = self._limit - self._pos
        n = min(space, len(data))
        self._view[self._pos : self._pos + n] = data[:n]
        if n < space:
            self._view[self._pos + n] = 0
            self._pos += n
        else:
            self._view[self._limit - 1] = 0
            self._pos = self._limit
        return self._pos

    def getvalue(self) -> bytes:
        """Return the written content, up to (not including) the terminator."""
        end = self._pos if self._pos < self._limit else self._limit - 1
        return bytes(self._view[:end])

    def __repr__(self) -> str:
        return f"BoundedBuffer(position={self._pos}, limit={self._limit})"
