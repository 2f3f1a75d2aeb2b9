"""
Byte sources for oggpcm.

Provides the ByteSource interface and StreamByteSource for binary streams.
"""

from oggpcm.sources.base import ByteSource
from oggpcm.sources.stream_source import StreamByteSource, open_file

__all__ = [
    "ByteSource",
    "StreamByteSource",
    "open_file",
]
