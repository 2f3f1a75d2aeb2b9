"""
ByteSource over binary file-like objects.

StreamByteSource adapts anything with a read() method (open files, sockets
wrapped with makefile('rb'), io.BytesIO, pipes) to the ByteSource interface.
"""

from __future__ import annotations

import logging
import os
from typing import BinaryIO, Union

from oggpcm.sources.base import ByteSource

logger = logging.getLogger(__name__)


class StreamByteSource(ByteSource):
    """
    ByteSource reading from a binary stream.

    Short reads are passed through unchanged; only an empty read is taken as
    end of data. A non-blocking stream returning None is treated as an empty
    read, which ends decoding, so pass blocking streams.

    Attributes:
        bytes_read: Total bytes returned so far
    """

    def __init__(self, stream: BinaryIO, name: str = "<stream>") -> None:
        """
        Initialize the source.

        Args:
            stream: Binary file-like object opened for reading
            name: Label used in log messages
        """
        if not hasattr(stream, "read"):
            raise TypeError(f"Stream must provide read(), got {type(stream).__name__}")
        self._stream = stream
        self.name = name
        self.bytes_read = 0
        self._closed = False

    def read(self, max_bytes: int) -> bytes:
        try:
            data = self._stream.read(max_bytes)
        except ValueError as e:
            # Raised by io streams that were closed underneath the source
            raise OSError(f"Read from {self.name} failed: {e}") from e
        if not data:
            return b""
        self.bytes_read += len(data)
        return bytes(data)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        logger.debug(f"[SOURCE] Closing {self.name} after {self.bytes_read} bytes")
        self._stream.close()


def open_file(path: Union[str, os.PathLike]) -> StreamByteSource:
    """
    Open a file on disk as a byte source.

    Args:
        path: Path to an Ogg file

    Returns:
        StreamByteSource owning the opened file

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = os.fspath(path)
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Ogg file not found: {path}")
    return StreamByteSource(open(path, "rb"), name=path)
