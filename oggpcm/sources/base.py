"""
Base ByteSource interface for oggpcm.

A byte source supplies raw compressed bytes on demand. It is owned by
exactly one decode session.
"""

from abc import ABC, abstractmethod


class ByteSource(ABC):
    """
    Base class for compressed byte sources.

    read() blocks until at least one byte is available or the data is
    exhausted. An empty result means end of data. Failures are reported by
    raising OSError.
    """

    @abstractmethod
    def read(self, max_bytes: int) -> bytes:
        """
        Read up to max_bytes bytes.

        Args:
            max_bytes: Maximum number of bytes to return (> 0)

        Returns:
            bytes: Between 1 and max_bytes bytes, or b"" at end of data
        """
        pass

    def close(self) -> None:
        """
        Release the underlying resource.

        Subclasses should override if cleanup is needed.
        """
        pass
