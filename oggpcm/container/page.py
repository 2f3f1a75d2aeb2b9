"""
Ogg page model.

This module provides OggPage, the container frame of the Ogg format, and
the helpers to parse a captured page from bytes and serialize one back.

Page layout (little-endian):
- 4 bytes: capture pattern b"OggS"
- 1 byte: stream structure version (always 0)
- 1 byte: header type flags (continued / BOS / EOS)
- 8 bytes: granule position (signed)
- 4 bytes: bitstream serial number
- 4 bytes: page sequence number
- 4 bytes: CRC checksum (computed with this field zeroed)
- 1 byte: number of segments
- N bytes: segment (lacing) table
- body: sum of the lacing values
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from oggpcm.container.crc import ogg_crc

CAPTURE_PATTERN = b"OggS"
HEADER_STRUCT = struct.Struct("<4sBBqIIIB")
HEADER_SIZE = HEADER_STRUCT.size  # 27 bytes
CRC_OFFSET = 22
MAX_SEGMENTS = 255
MAX_LACING = 255

FLAG_CONTINUED = 0x01
FLAG_BOS = 0x02
FLAG_EOS = 0x04


@dataclass
class OggPage:
    """
    One captured Ogg page.

    Attributes:
        serial_no: Logical bitstream serial number
        sequence_no: Page sequence number within the logical stream
        granule_position: Codec-defined position of the last packet ending here
        lacing: Segment table (lacing values)
        body: Page payload
        header_type: Header flags (FLAG_CONTINUED, FLAG_BOS, FLAG_EOS)
        version: Stream structure version
    """
    serial_no: int
    sequence_no: int
    granule_position: int = -1
    lacing: List[int] = field(default_factory=list)
    body: bytes = b""
    header_type: int = 0
    version: int = 0

    @property
    def continued(self) -> bool:
        """True if the first packet on this page continues one from the previous page."""
        return bool(self.header_type & FLAG_CONTINUED)

    @property
    def bos(self) -> bool:
        return bool(self.header_type & FLAG_BOS)

    @property
    def eos(self) -> bool:
        return bool(self.header_type & FLAG_EOS)

    def to_bytes(self) -> bytes:
        """
        Serialize the page, computing its checksum.

        Returns:
            Complete page bytes

        Raises:
            ValueError: If the lacing table is invalid or does not match the body
        """
        if len(self.lacing) > MAX_SEGMENTS:
            raise ValueError(f"Too many segments: {len(self.lacing)} (max {MAX_SEGMENTS})")
        if any(v < 0 or v > MAX_LACING for v in self.lacing):
            raise ValueError("Lacing values must be in range 0..255")
        if sum(self.lacing) != len(self.body):
            raise ValueError(
                f"Lacing total {sum(self.lacing)} does not match body length {len(self.body)}"
            )

        header = HEADER_STRUCT.pack(
            CAPTURE_PATTERN,
            self.version,
            self.header_type,
            self.granule_position,
            self.serial_no,
            self.sequence_no,
            0,
            len(self.lacing),
        )
        raw = bytearray(header)
        raw.extend(bytes(self.lacing))
        raw.extend(self.body)
        crc = ogg_crc(raw)
        struct.pack_into("<I", raw, CRC_OFFSET, crc)
        return bytes(raw)


def page_size(buf: Sequence[int], start: int = 0) -> Optional[int]:
    """
    Return the total size of the page starting at start, or None if the
    header or segment table is not yet complete.

    The capture pattern is not checked here.
    """
    if len(buf) - start < HEADER_SIZE:
        return None
    nsegs = buf[start + HEADER_SIZE - 1]
    table_end = start + HEADER_SIZE + nsegs
    if len(buf) < table_end:
        return None
    return HEADER_SIZE + nsegs + sum(buf[start + HEADER_SIZE:table_end])


def parse_page(raw: bytes) -> OggPage:
    """
    Parse a complete, checksum-verified page.

    Args:
        raw: Exactly one page of bytes

    Returns:
        OggPage

    Raises:
        ValueError: If raw does not hold exactly one page
    """
    if len(raw) < HEADER_SIZE:
        raise ValueError(f"Page must be at least {HEADER_SIZE} bytes, got {len(raw)}")

    (capture, version, header_type, granule, serial_no,
     sequence_no, _crc, nsegs) = HEADER_STRUCT.unpack_from(raw, 0)
    if capture != CAPTURE_PATTERN:
        raise ValueError("Missing OggS capture pattern")

    lacing = list(raw[HEADER_SIZE:HEADER_SIZE + nsegs])
    body = bytes(raw[HEADER_SIZE + nsegs:])
    if len(lacing) != nsegs or len(body) != sum(lacing):
        raise ValueError("Page length does not match its segment table")

    return OggPage(
        serial_no=serial_no,
        sequence_no=sequence_no,
        granule_position=granule,
        lacing=lacing,
        body=body,
        header_type=header_type,
        version=version,
    )


def lacing_for(length: int) -> List[int]:
    """
    Lacing values for one packet of the given length.

    A packet whose length is a multiple of 255 ends with a 0 lacing value.
    """
    values = [MAX_LACING] * (length // MAX_LACING)
    values.append(length % MAX_LACING)
    return values
