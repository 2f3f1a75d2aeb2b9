"""
Decode session subsystem.

This package provides the components between the byte source and the
caller's PCM buffer:
- PacketReader: refill / extraction loop with the hole policy
- DecodeSession: block bookkeeping and PCM emission
- PcmBuffer: position / limit output buffer
"""

from oggpcm.session.decoder import DecodeSession
from oggpcm.session.packet_reader import PacketReader
from oggpcm.session.pcm import interleave_block
from oggpcm.session.pcm_buffer import PcmBuffer

__all__ = [
    "DecodeSession",
    "PacketReader",
    "PcmBuffer",
    "interleave_block",
]
