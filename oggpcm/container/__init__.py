"""
Ogg container demultiplexing.

This package provides the page and packet layers used by the decode session:
- OggSync: captures checksum-verified pages from a staging buffer
- OggStreamState: reassembles packets of one logical stream from pages
- OggPage / OggPacket: the transient units passed between the layers
"""

from oggpcm.container.page import OggPage, lacing_for, parse_page
from oggpcm.container.status import DemuxStatus
from oggpcm.container.stream import OggPacket, OggStreamState
from oggpcm.container.sync import OggSync

__all__ = [
    "DemuxStatus",
    "OggPacket",
    "OggPage",
    "OggStreamState",
    "OggSync",
    "lacing_for",
    "parse_page",
]
