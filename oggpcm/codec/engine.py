"""
Codec engine interface.

The decode session drives a codec engine through the operations below and
assumes nothing else about it. A concrete engine wraps a real bitstream
decoder (header parsing, entropy decoding, inverse transform).

Call order for one stream:
    headerin() x3 -> synthesis_init() ->
    repeat: synthesis() -> blockin() -> pcmout() -> read(n) ...
    -> clear()
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from oggpcm.codec.info import StreamInfo
from oggpcm.container.stream import OggPacket

# Number of header packets that precede audio data
HEADER_PACKETS = 3


@dataclass
class PcmOut:
    """
    Decoded samples currently available from the engine.

    Attributes:
        samples: Samples available per channel (0 if more data is needed)
        pcm: Float samples, shape (channels, N), nominal range [-1.0, 1.0]
        index: Per-channel offset into pcm of the first unread sample
    """
    samples: int = 0
    pcm: Optional[np.ndarray] = None
    index: List[int] = field(default_factory=list)


class CodecEngine(ABC):
    """Abstract codec engine driven by DecodeSession."""

    @property
    @abstractmethod
    def info(self) -> StreamInfo:
        """Stream metadata; complete once all header packets were accepted."""
        pass

    @abstractmethod
    def headerin(self, packet: OggPacket) -> int:
        """
        Ingest one header packet.

        Returns:
            0 on success, a negative code if the packet is not valid
            header data for this codec
        """
        pass

    @abstractmethod
    def synthesis_init(self) -> None:
        """Prepare the engine for audio decoding after header negotiation."""
        pass

    @abstractmethod
    def synthesis(self, packet: OggPacket) -> bool:
        """
        Decode one packet into the engine's working block.

        Returns:
            True if the packet was an audio packet, False if it is not
            (for example an in-band comment or metadata packet)
        """
        pass

    @abstractmethod
    def blockin(self) -> None:
        """Merge the working block into the engine's output area."""
        pass

    @abstractmethod
    def pcmout(self) -> PcmOut:
        """Return the samples currently available for reading."""
        pass

    @abstractmethod
    def read(self, samples: int) -> None:
        """Acknowledge that samples have been consumed from the output area."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Release decoder resources."""
        pass
