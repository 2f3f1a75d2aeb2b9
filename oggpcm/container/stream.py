"""
Ogg logical stream reassembly.

This module provides OggStreamState, which takes captured pages of one
logical bitstream and reassembles the codec packets they carry. Packets may
span pages; a page sequence gap is reported as a HOLE from packetout().
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Tuple, Union

from oggpcm.container.page import MAX_LACING, OggPage
from oggpcm.container.status import DemuxStatus

logger = logging.getLogger(__name__)

SEQUENCE_MASK = 0xFFFFFFFF


@dataclass
class OggPacket:
    """
    One reassembled codec packet.

    Attributes:
        data: Packet payload
        packet_no: Position of the packet within the logical stream
        bos: True for the first packet of a beginning-of-stream page
        eos: True for the last packet of an end-of-stream page
        granule_position: Page granule if this packet ends the page, else -1
    """
    data: bytes
    packet_no: int
    bos: bool = False
    eos: bool = False
    granule_position: int = -1


class _Hole:
    """Queue marker for lost data between two pages."""

    def __repr__(self) -> str:
        return "<hole>"


_HOLE = _Hole()


class OggStreamState:
    """
    Packet reassembly state for a single logical stream.

    Pages whose serial number does not match the stream are rejected by
    pagein(). Completed packets are queued until packetout() returns them.
    When a page arrives out of sequence, the partially assembled packet is
    dropped, a hole marker is queued, and any continued packet data at the
    start of the new page is skipped because its beginning was lost.
    """

    def __init__(self, serial_no: Optional[int] = None) -> None:
        self.serial_no: Optional[int] = None
        self._queue: Deque[Union[OggPacket, _Hole]] = deque()
        self._partial: Optional[bytearray] = None
        self._expected_seq: Optional[int] = None
        self._packet_no = 0
        self.holes = 0
        self.init(serial_no)

    def init(self, serial_no: Optional[int]) -> None:
        """Bind the state to a serial number and reset reassembly."""
        self.serial_no = serial_no
        self.reset()

    def reset(self) -> None:
        """Drop queued packets and partial data; keep the serial number."""
        self._queue.clear()
        self._partial = None
        self._expected_seq = None
        self._packet_no = 0

    def pagein(self, page: OggPage) -> bool:
        """
        Submit a page to the stream.

        Args:
            page: A captured page

        Returns:
            True if the page was accepted, False if it belongs to another
            stream or uses an unknown structure version
        """
        if page.version != 0:
            logger.debug(f"[STREAM] Rejecting page with unknown version {page.version}")
            return False
        if page.serial_no != self.serial_no:
            logger.debug(
                f"[STREAM] Rejecting page for serial {page.serial_no:#010x} "
                f"(stream is {self.serial_no!r})"
            )
            return False

        skip_continued = False
        if self._expected_seq is not None and page.sequence_no != self._expected_seq:
            logger.debug(
                f"[STREAM] Page sequence gap: expected {self._expected_seq}, got {page.sequence_no}"
            )
            self._mark_hole()
            skip_continued = page.continued
        elif page.continued and self._partial is None:
            # Continuation of a packet whose start we never saw
            skip_continued = True
        elif not page.continued and self._partial is not None:
            logger.debug("[STREAM] Unterminated packet before a fresh page")
            self._mark_hole()

        self._expected_seq = (page.sequence_no + 1) & SEQUENCE_MASK

        body = page.body
        offset = 0
        completed: List[bytes] = []
        current = self._partial

        for lacing in page.lacing:
            chunk = body[offset:offset + lacing]
            offset += lacing
            if skip_continued:
                if lacing < MAX_LACING:
                    skip_continued = False
                continue
            if current is None:
                current = bytearray()
            current.extend(chunk)
            if lacing < MAX_LACING:
                completed.append(bytes(current))
                current = None

        self._partial = current

        for i, data in enumerate(completed):
            last = i == len(completed) - 1
            self._queue.append(OggPacket(
                data=data,
                packet_no=self._packet_no,
                bos=page.bos and i == 0,
                eos=page.eos and last,
                granule_position=page.granule_position if last else -1,
            ))
            self._packet_no += 1

        return True

    def _mark_hole(self) -> None:
        self._partial = None
        self._queue.append(_HOLE)
        self.holes += 1

    def packetout(self) -> Tuple[DemuxStatus, Optional[OggPacket]]:
        """
        Return the next reassembled packet.

        Returns:
            (READY, packet), (NEED_MORE, None) when no complete packet is
            queued, or (HOLE, None) once for each detected gap
        """
        if not self._queue:
            return DemuxStatus.NEED_MORE, None
        item = self._queue.popleft()
        if item is _HOLE:
            return DemuxStatus.HOLE, None
        return DemuxStatus.READY, item

    @property
    def pending(self) -> int:
        """Number of queued packets and hole markers."""
        return len(self._queue)

    def clear(self) -> None:
        """Release reassembly state and unbind the serial number."""
        self.init(None)
