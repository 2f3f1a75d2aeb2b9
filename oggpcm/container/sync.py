"""
Ogg page synchronizer.

This module provides OggSync, which owns the compressed-data staging buffer.
Raw bytes from the byte source are fed in with feed(); pageout() captures
complete, checksum-verified pages from the front of the buffer.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from oggpcm.container.crc import ogg_crc
from oggpcm.container.page import (
    CAPTURE_PATTERN,
    CRC_OFFSET,
    OggPage,
    page_size,
    parse_page,
)
from oggpcm.container.status import DemuxStatus

logger = logging.getLogger(__name__)


class OggSync:
    """
    Page capture over a growable staging buffer.

    The synchronizer:
    1. Accepts byte chunks of any size via feed()
    2. Looks for the "OggS" capture pattern at the front of the buffer
    3. Waits until the full header, segment table and body are staged
    4. Verifies the page checksum before returning the page
    5. On garbage or a bad checksum, skips forward to the next candidate
       capture pattern and reports a HOLE once per lost-sync episode

    Consumed page bytes are removed from the buffer, so the buffer only ever
    holds at most one partial page plus unconsumed input.

    Attributes:
        bytes_skipped: Total bytes discarded while searching for sync
        pages_captured: Total pages returned by pageout()
    """

    def __init__(self) -> None:
        self._buffer = bytearray()
        self._unsynced = False
        self.bytes_skipped = 0
        self.pages_captured = 0

    def feed(self, data: bytes) -> None:
        """
        Append raw bytes to the staging buffer.

        Args:
            data: Bytes read from the byte source (can be empty)
        """
        if data:
            self._buffer.extend(data)

    @property
    def buffered(self) -> int:
        """Number of staged, not yet consumed bytes."""
        return len(self._buffer)

    def _seek(self) -> Tuple[int, Optional[OggPage]]:
        """
        Try to capture one page at the front of the buffer.

        Returns:
            (n > 0, page) when a page of n bytes was captured,
            (0, None) when more bytes are needed,
            (-n, None) when n bytes were skipped looking for sync
        """
        buf = self._buffer

        # Partial capture pattern at the end of the buffer is still a candidate
        head = bytes(buf[:len(CAPTURE_PATTERN)])
        if not CAPTURE_PATTERN.startswith(head):
            return self._skip(), None

        size = page_size(buf)
        if size is None or len(buf) < size:
            return 0, None

        raw = bytearray(buf[:size])
        expected = int.from_bytes(raw[CRC_OFFSET:CRC_OFFSET + 4], "little")
        raw[CRC_OFFSET:CRC_OFFSET + 4] = b"\x00\x00\x00\x00"
        if ogg_crc(raw) != expected:
            logger.debug(f"[SYNC] Checksum mismatch on {size}-byte page, resyncing")
            return self._skip(), None

        raw[CRC_OFFSET:CRC_OFFSET + 4] = expected.to_bytes(4, "little")
        del buf[:size]
        return size, parse_page(bytes(raw))

    def _skip(self) -> int:
        """Drop bytes up to the next possible capture pattern start."""
        buf = self._buffer
        nxt = buf.find(CAPTURE_PATTERN[:1], 1)
        skipped = len(buf) if nxt < 0 else nxt
        del buf[:skipped]
        self.bytes_skipped += skipped
        return -skipped

    def pageout(self) -> Tuple[DemuxStatus, Optional[OggPage]]:
        """
        Capture the next page from the staged bytes.

        A HOLE is reported only on the first lost-sync step; further skipped
        bytes in the same episode are dropped silently until a page is found.

        Returns:
            (READY, page), (NEED_MORE, None) or (HOLE, None)
        """
        while True:
            ret, page = self._seek()
            if ret > 0:
                self._unsynced = False
                self.pages_captured += 1
                return DemuxStatus.READY, page
            if ret == 0:
                return DemuxStatus.NEED_MORE, None
            if not self._unsynced:
                self._unsynced = True
                return DemuxStatus.HOLE, None

    def reset(self) -> None:
        """Drop staged bytes and sync state. Statistics are preserved."""
        self._buffer.clear()
        self._unsynced = False

    def clear(self) -> None:
        """Release the staging buffer."""
        self.reset()
