"""
Exception types raised by the oggpcm decoder.

End of stream is never raised: the decoding calls return None for it.
Everything here is fatal for the session that raised it; the only valid
next call on that session is close().
"""


class DecoderError(Exception):
    """Base class for all decoder errors."""
    pass


class StreamCorruption(DecoderError):
    """A hole (lost page boundary) was found where holes are not tolerated."""
    pass


class InvalidFormat(DecoderError):
    """The codec engine rejected the header data as not being its format."""
    pass


class TruncatedStream(InvalidFormat):
    """The byte source ran out of data before the headers were complete."""
    pass


class IOFailure(DecoderError):
    """The byte source failed or returned data violating its contract."""
    pass


class SessionClosed(DecoderError):
    """The session was used after close()."""
    pass
