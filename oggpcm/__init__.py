"""
oggpcm: pull-based Ogg stream decoding to interleaved 16-bit PCM.

The package does not ship a codec. Decoding needs a CodecEngine
implementation wrapping a Vorbis decoder (for example libvorbis through a
binding such as PyOgg); the tests use a fake engine.

Typical use, where engine is such an implementation:

    source = open_file("song.ogg")
    session = DecodeSession.open(source, engine)
    buf = PcmBuffer(4096)
    while (written := session.fill(buf)) is not None:
        sink.write(buf.get(written))
        buf.clear()
    session.close(close_source=True)
"""

from oggpcm.codec import CodecEngine, PcmOut, StreamInfo
from oggpcm.config import DecoderConfig
from oggpcm.errors import (
    DecoderError,
    InvalidFormat,
    IOFailure,
    SessionClosed,
    StreamCorruption,
    TruncatedStream,
)
from oggpcm.session import DecodeSession, PcmBuffer
from oggpcm.sources import ByteSource, StreamByteSource, open_file

__all__ = [
    "ByteSource",
    "CodecEngine",
    "DecodeSession",
    "DecoderConfig",
    "DecoderError",
    "IOFailure",
    "InvalidFormat",
    "PcmBuffer",
    "PcmOut",
    "SessionClosed",
    "StreamByteSource",
    "StreamCorruption",
    "StreamInfo",
    "TruncatedStream",
    "open_file",
]
