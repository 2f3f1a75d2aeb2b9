"""
Caller-supplied PCM output buffer.

PcmBuffer is a fixed-capacity byte region with a read/write position, a
limit marking the end of valid data and a configurable byte order. The
decode session writes samples at indexes relative to the position and then
moves only the limit, so callers can consume the written bytes with get()
without flipping the buffer first.
"""

from __future__ import annotations

from typing import Optional

VALID_BYTE_ORDERS = ("little", "big")


class PcmBuffer:
    """
    Byte buffer with position / limit / capacity bookkeeping.

    Invariant: 0 <= position <= limit <= capacity.

    Attributes:
        capacity: Total size of the backing storage in bytes
    """

    def __init__(self, capacity: int, byteorder: str = "little") -> None:
        """
        Allocate a zero-filled buffer.

        Args:
            capacity: Size in bytes (must be >= 0)
            byteorder: "little" or "big" (default: "little")

        Raises:
            ValueError: If capacity is negative or byteorder is unknown
        """
        if capacity < 0:
            raise ValueError(f"PcmBuffer capacity must be >= 0, got {capacity}")
        self._data = bytearray(capacity)
        self._capacity = capacity
        self._position = 0
        self._limit = capacity
        self._byteorder = "little"
        self.byteorder = byteorder

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def byteorder(self) -> str:
        """Byte order used for 16-bit sample writes and reads."""
        return self._byteorder

    @byteorder.setter
    def byteorder(self, value: str) -> None:
        if value not in VALID_BYTE_ORDERS:
            raise ValueError(f"byteorder must be 'little' or 'big', got {value!r}")
        self._byteorder = value

    @property
    def position(self) -> int:
        return self._position

    @position.setter
    def position(self, value: int) -> None:
        if value < 0 or value > self._limit:
            raise ValueError(f"position {value} outside 0..{self._limit}")
        self._position = value

    @property
    def limit(self) -> int:
        return self._limit

    @limit.setter
    def limit(self, value: int) -> None:
        if value < 0 or value > self._capacity:
            raise ValueError(f"limit {value} outside 0..{self._capacity}")
        self._limit = value
        if self._position > value:
            self._position = value

    def remaining(self) -> int:
        """Bytes between position and limit."""
        return self._limit - self._position

    def _check_index(self, index: int, length: int) -> None:
        if index < 0 or index + length > self._limit:
            raise IndexError(f"write of {length} bytes at {index} exceeds limit {self._limit}")

    def put_short(self, index: int, value: int) -> None:
        """
        Write a 16-bit value at an absolute index.

        Accepts signed (-32768..32767) or unsigned (0..65535) values; both
        are stored as the same two's-complement bit pattern.
        """
        if value < -32768 or value > 0xFFFF:
            raise ValueError(f"value {value} does not fit in 16 bits")
        self._check_index(index, 2)
        self._data[index:index + 2] = (value & 0xFFFF).to_bytes(2, self._byteorder)

    def get_short(self, index: int) -> int:
        """Read a signed 16-bit value at an absolute index."""
        if index < 0 or index + 2 > self._limit:
            raise IndexError(f"read of 2 bytes at {index} exceeds limit {self._limit}")
        return int.from_bytes(self._data[index:index + 2], self._byteorder, signed=True)

    def put_bytes(self, index: int, data: bytes) -> None:
        """Write raw bytes at an absolute index without moving the position."""
        self._check_index(index, len(data))
        self._data[index:index + len(data)] = data

    def get(self, length: Optional[int] = None) -> bytes:
        """
        Relative read: return bytes from position and advance the position.

        Args:
            length: Bytes to read (default: everything up to the limit)

        Raises:
            ValueError: If fewer than length bytes remain
        """
        available = self.remaining()
        if length is None:
            length = available
        if length < 0 or length > available:
            raise ValueError(f"cannot read {length} bytes, {available} remaining")
        start = self._position
        self._position += length
        return bytes(self._data[start:start + length])

    def clear(self) -> None:
        """Reset position to 0 and limit to capacity. Contents are kept."""
        self._position = 0
        self._limit = self._capacity

    def compact(self) -> None:
        """
        Move unread bytes (position..limit) to the start of the buffer.

        Afterwards position is the number of bytes moved and limit is the
        capacity, ready for more data to be written after them.
        """
        unread = self._data[self._position:self._limit]
        self._data[:len(unread)] = unread
        self._position = len(unread)
        self._limit = self._capacity

    def __repr__(self) -> str:
        return (
            f"PcmBuffer(pos={self._position} lim={self._limit} "
            f"cap={self._capacity} order={self._byteorder})"
        )
