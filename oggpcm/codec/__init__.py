"""
Codec engine boundary.

This package defines the interface the decode session drives (CodecEngine)
and the values it exchanges with it (PcmOut, StreamInfo).
"""

from oggpcm.codec.engine import HEADER_PACKETS, CodecEngine, PcmOut
from oggpcm.codec.info import StreamInfo

__all__ = [
    "HEADER_PACKETS",
    "CodecEngine",
    "PcmOut",
    "StreamInfo",
]
