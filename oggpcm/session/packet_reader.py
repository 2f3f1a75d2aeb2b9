"""
Refill and extraction loop.

This module provides PacketReader, which pulls compressed bytes from a
ByteSource into the page synchronizer only when the demultiplexer needs
more, and hands out complete packets of the logical stream.

Hole policy:
- hole_is_error=True (header negotiation): any hole raises StreamCorruption
- hole_is_error=False (steady state): holes are skipped and decoding
  resynchronizes at the next page / packet boundary
"""

from __future__ import annotations

import logging
from typing import Optional

from oggpcm.config import DEFAULT_READ_CHUNK_SIZE
from oggpcm.container.page import OggPage
from oggpcm.container.status import DemuxStatus
from oggpcm.container.stream import OggPacket, OggStreamState
from oggpcm.container.sync import OggSync
from oggpcm.errors import IOFailure, StreamCorruption
from oggpcm.sources.base import ByteSource

logger = logging.getLogger(__name__)


class PacketReader:
    """
    Drives ByteSource -> OggSync -> OggStreamState.

    Every NEED_MORE outcome performs exactly one ByteSource read before the
    demultiplexer is asked again, so the loops always make progress or end.

    Attributes:
        sync: Page synchronizer owning the staging buffer
        stream: Packet reassembly state of the logical stream
        holes_skipped: Holes tolerated in steady state
    """

    def __init__(self, source: ByteSource, read_chunk_size: int = DEFAULT_READ_CHUNK_SIZE) -> None:
        if read_chunk_size <= 0:
            raise ValueError(f"read_chunk_size must be > 0, got {read_chunk_size}")
        self.source = source
        self.read_chunk_size = read_chunk_size
        self.sync = OggSync()
        self.stream = OggStreamState()
        self.holes_skipped = 0

    def read_data(self) -> bool:
        """
        Perform one ByteSource read into the staging buffer.

        Returns:
            True if bytes were staged, False at end of data

        Raises:
            IOFailure: If the source raised OSError or broke its contract
        """
        try:
            data = self.source.read(self.read_chunk_size)
        except OSError as e:
            logger.error(f"[READER] Byte source read failed: {e}")
            raise IOFailure(f"Byte source read failed: {e}") from e

        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise IOFailure(f"Byte source returned {type(data).__name__}, expected bytes")
        if len(data) > self.read_chunk_size:
            raise IOFailure(
                f"Byte source returned {len(data)} bytes, more than the {self.read_chunk_size} requested"
            )
        if not data:
            return False

        self.sync.feed(bytes(data))
        return True

    def first_page(self) -> Optional[OggPage]:
        """
        Capture the very first page and bind the stream state to its serial.

        The stream state must know its serial number before pages can be
        submitted, so this bootstrap step captures the first page directly
        from the synchronizer. One refill is done up front; further refills
        happen only if that did not stage a complete page.

        Returns:
            The first page, or None if the data ended before one was complete

        Raises:
            StreamCorruption: If the data does not start with a valid page
        """
        has_data = self.read_data()
        while True:
            status, page = self.sync.pageout()
            if status == DemuxStatus.READY:
                break
            if status == DemuxStatus.HOLE:
                raise StreamCorruption("Hole in data before the first page")
            if not has_data or not self.read_data():
                return None

        self.stream.init(page.serial_no)
        if not self.stream.pagein(page):
            raise StreamCorruption("Error when reading header page")
        logger.debug(f"[READER] Bound to logical stream serial {page.serial_no:#010x}")
        return page

    def next_page(self, hole_is_error: bool) -> bool:
        """
        Submit the next page of the logical stream to the stream state.

        Pages of other logical streams are skipped.

        Returns:
            True once a page was submitted, False at end of stream

        Raises:
            StreamCorruption: On a hole when hole_is_error is True
            IOFailure: If the byte source fails
        """
        while True:
            status, page = self.sync.pageout()

            if status == DemuxStatus.READY:
                if self.stream.pagein(page):
                    return True
                continue

            if status == DemuxStatus.HOLE:
                if hole_is_error:
                    logger.error("[READER] Hole in data while hole is not tolerated")
                    raise StreamCorruption("Hole in data")
                self.holes_skipped += 1
                logger.debug("[READER] Lost page sync, resynchronizing")
                # The synchronizer already skipped the bad bytes; anything
                # still staged is drained before end of data ends the stream.
                if not self.read_data() and self.sync.buffered == 0:
                    return False
                continue

            if not self.read_data():
                return False

    def next_packet(self, hole_is_error: bool) -> Optional[OggPacket]:
        """
        Return the next complete packet of the logical stream.

        Returns:
            The packet, or None at end of stream

        Raises:
            StreamCorruption: On a hole when hole_is_error is True
            IOFailure: If the byte source fails
        """
        while True:
            status, packet = self.stream.packetout()

            if status == DemuxStatus.READY:
                return packet

            if status == DemuxStatus.HOLE:
                if hole_is_error:
                    logger.error("[READER] Missing pages while hole is not tolerated")
                    raise StreamCorruption("Hole in data")
                self.holes_skipped += 1
                logger.debug("[READER] Missing pages in logical stream, skipping gap")
                # Packets after the gap are already queued
                continue

            if not self.next_page(hole_is_error):
                return None

    def close(self, close_source: bool = False) -> None:
        """Release demultiplexer state, and the byte source if requested."""
        self.stream.clear()
        self.sync.clear()
        if close_source:
            self.source.close()
