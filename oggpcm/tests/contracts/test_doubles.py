"""
Test doubles (fakes, stubs) for oggpcm contract tests.

These provide minimal implementations that satisfy the decoder's interfaces
without a real codec:
- FakeCodecEngine: a codec whose audio packets carry raw float32 samples
- ChunkedByteSource / FailingByteSource: in-memory byte sources
- build_pages(): packs packets into serialized Ogg pages
"""

import struct
from typing import List, Optional, Sequence

import numpy as np

from oggpcm.codec.engine import CodecEngine, PcmOut
from oggpcm.codec.info import StreamInfo
from oggpcm.container.page import FLAG_BOS, FLAG_CONTINUED, FLAG_EOS, OggPage, lacing_for
from oggpcm.container.stream import OggPacket
from oggpcm.sources.base import ByteSource


FAKE_MAGIC = b"fakec"
PACKET_AUDIO = 0x00
PACKET_IDENT = 0x01
PACKET_COMMENT = 0x03
PACKET_SETUP = 0x05
NOT_FAKE_DATA = -132

DEFAULT_SERIAL = 0x1234ABCD


# ---------------------------------------------------------------------------
# Packet builders
# ---------------------------------------------------------------------------

def ident_packet(channels: int = 2, rate: int = 44100) -> bytes:
    return bytes([PACKET_IDENT]) + FAKE_MAGIC + struct.pack("<BI", channels, rate)


def comment_packet(vendor: str = "fake encoder", comments: Sequence[str] = ()) -> bytes:
    text = "\n".join([vendor, *comments]).encode("utf-8")
    return bytes([PACKET_COMMENT]) + FAKE_MAGIC + text


def setup_packet() -> bytes:
    return bytes([PACKET_SETUP]) + FAKE_MAGIC


def header_packets(
    channels: int = 2,
    rate: int = 44100,
    vendor: str = "fake encoder",
    comments: Sequence[str] = (),
) -> List[bytes]:
    """The three header packets for a fake stream."""
    return [ident_packet(channels, rate), comment_packet(vendor, comments), setup_packet()]


def audio_packet(block: np.ndarray) -> bytes:
    """
    Audio packet carrying block (shape (channels, n)) as float32, channel-major.

    An empty block produces a packet that decodes to zero samples.
    """
    block = np.asarray(block, dtype="<f4")
    return bytes([PACKET_AUDIO]) + block.tobytes()


def metadata_packet(payload: bytes = b"in-band metadata") -> bytes:
    """A packet the fake engine reports as not audio."""
    return bytes([PACKET_COMMENT]) + FAKE_MAGIC + payload


# ---------------------------------------------------------------------------
# Ogg page builder
# ---------------------------------------------------------------------------

def build_pages(
    packets: Sequence[bytes],
    serial_no: int = DEFAULT_SERIAL,
    max_segments: int = 255,
    flush_after: Optional[Sequence[int]] = None,
    first_sequence: int = 0,
) -> List[bytes]:
    """
    Pack packets into serialized Ogg pages.

    Args:
        packets: Packet payloads in stream order
        serial_no: Logical stream serial number
        max_segments: Maximum lacing values per page (small values force
                      packets to span pages)
        flush_after: Packet indexes after which the current page is closed
                     (default: after every packet)
        first_sequence: Sequence number of the first page

    Returns:
        List of page bytes; the first page has BOS set, the last EOS
    """
    if flush_after is None:
        flush_after = range(len(packets))
    flush_set = set(flush_after)

    pages: List[OggPage] = []
    lacing: List[int] = []
    body = bytearray()
    continued = False
    granule = 0

    def close_page(next_continued: bool) -> None:
        nonlocal lacing, body, continued
        pages.append(OggPage(
            serial_no=serial_no,
            sequence_no=first_sequence + len(pages),
            granule_position=granule,
            lacing=lacing,
            body=bytes(body),
            header_type=FLAG_CONTINUED if continued else 0,
        ))
        lacing = []
        body = bytearray()
        continued = next_continued

    for index, data in enumerate(packets):
        offset = 0
        values = lacing_for(len(data))
        for value in values:
            if len(lacing) == max_segments:
                close_page(next_continued=lacing[-1] == 255)
            lacing.append(value)
            body.extend(data[offset:offset + value])
            offset += value
        granule += 1
        if index in flush_set:
            close_page(next_continued=False)

    if lacing:
        close_page(next_continued=False)

    if pages:
        pages[0].header_type |= FLAG_BOS
        pages[-1].header_type |= FLAG_EOS
    return [page.to_bytes() for page in pages]


def build_stream(
    blocks: Sequence[np.ndarray],
    channels: int = 2,
    rate: int = 44100,
    serial_no: int = DEFAULT_SERIAL,
    extra_packets: Sequence[bytes] = (),
) -> List[bytes]:
    """Pages for a complete fake stream: three headers then one audio packet per block."""
    packets = header_packets(channels, rate) + list(extra_packets)
    packets += [audio_packet(block) for block in blocks]
    return build_pages(packets, serial_no=serial_no)


# ---------------------------------------------------------------------------
# Codec engine
# ---------------------------------------------------------------------------

class FakeCodecEngine(CodecEngine):
    """
    Codec engine for a trivial format.

    Header packets: identification (channels, rate), comments, setup.
    Audio packets: type byte 0x00 followed by float32 samples, channel-major.
    Any other non-header packet is reported as not audio.

    Decoded samples accumulate in an output area; pcmout() returns the whole
    area plus the per-channel offset of the first unread sample, read()
    advances that offset. Consumed samples are dropped on the next blockin().
    """

    def __init__(self) -> None:
        self._info = StreamInfo()
        self._headers_seen = 0
        self._initialized = False
        self._working: Optional[np.ndarray] = None
        self._area: Optional[np.ndarray] = None
        self._start = 0
        self.read_calls: List[int] = []
        self.synthesis_calls = 0
        self.cleared = False

    @property
    def info(self) -> StreamInfo:
        return self._info

    def headerin(self, packet: OggPacket) -> int:
        data = packet.data
        expected = (PACKET_IDENT, PACKET_COMMENT, PACKET_SETUP)[self._headers_seen]
        if len(data) < 1 + len(FAKE_MAGIC) or data[0] != expected or data[1:6] != FAKE_MAGIC:
            return NOT_FAKE_DATA

        payload = data[6:]
        if expected == PACKET_IDENT:
            channels, rate = struct.unpack("<BI", payload[:5])
            self._info.channels = channels
            self._info.rate = rate
        elif expected == PACKET_COMMENT:
            lines = payload.decode("utf-8").split("\n")
            self._info.vendor = lines[0]
            self._info.comments = lines[1:]
        self._headers_seen += 1
        return 0

    def synthesis_init(self) -> None:
        assert self._headers_seen == 3, "synthesis_init before all headers"
        self._initialized = True
        self._area = np.zeros((self._info.channels, 0), dtype=np.float32)
        self._start = 0

    def synthesis(self, packet: OggPacket) -> bool:
        assert self._initialized, "synthesis before synthesis_init"
        self.synthesis_calls += 1
        data = packet.data
        if not data or data[0] != PACKET_AUDIO:
            self._working = None
            return False
        samples = np.frombuffer(data[1:], dtype="<f4").astype(np.float32)
        channels = self._info.channels
        self._working = samples.reshape(channels, len(samples) // channels)
        return True

    def blockin(self) -> None:
        assert self._working is not None, "blockin without an audio packet"
        unread = self._area[:, self._start:]
        self._area = np.concatenate([unread, self._working], axis=1)
        self._start = 0
        self._working = None

    def pcmout(self) -> PcmOut:
        available = self._area.shape[1] - self._start
        if available == 0:
            return PcmOut()
        return PcmOut(
            samples=available,
            pcm=self._area,
            index=[self._start] * self._info.channels,
        )

    def read(self, samples: int) -> None:
        available = self._area.shape[1] - self._start
        if samples > available:
            raise ValueError(f"read({samples}) with only {available} samples available")
        self.read_calls.append(samples)
        self._start += samples

    def clear(self) -> None:
        self.cleared = True
        self._area = None
        self._working = None


# ---------------------------------------------------------------------------
# Byte sources
# ---------------------------------------------------------------------------

class ChunkedByteSource(ByteSource):
    """In-memory source returning at most chunk_size bytes per read."""

    def __init__(self, data: bytes, chunk_size: Optional[int] = None) -> None:
        self._data = bytes(data)
        self._offset = 0
        self._chunk_size = chunk_size
        self.reads = 0
        self.eof_reads = 0
        self.closed = False

    def read(self, max_bytes: int) -> bytes:
        self.reads += 1
        n = max_bytes if self._chunk_size is None else min(max_bytes, self._chunk_size)
        data = self._data[self._offset:self._offset + n]
        self._offset += len(data)
        if not data:
            self.eof_reads += 1
        return data

    @property
    def exhausted(self) -> bool:
        return self._offset >= len(self._data)

    def close(self) -> None:
        self.closed = True


class FailingByteSource(ChunkedByteSource):
    """Source that raises OSError on read number fail_on_read (1-based)."""

    def __init__(self, data: bytes, fail_on_read: int, chunk_size: Optional[int] = None) -> None:
        super().__init__(data, chunk_size)
        self._fail_on_read = fail_on_read

    def read(self, max_bytes: int) -> bytes:
        if self.reads + 1 == self._fail_on_read:
            self.reads += 1
            raise OSError("simulated device error")
        return super().read(max_bytes)


class OversizedByteSource(ByteSource):
    """Source that breaks its contract by returning more than requested."""

    def read(self, max_bytes: int) -> bytes:
        return b"\x00" * (max_bytes + 1)


def create_block(channels: int, samples: int, start: float = 0.0, step: float = 0.001) -> np.ndarray:
    """Deterministic float32 block of shape (channels, samples) inside [-1, 1]."""
    base = start + step * np.arange(samples, dtype=np.float64)
    rows = [np.clip(base * (1 if c % 2 == 0 else -1) + 0.01 * c, -1.0, 1.0) for c in range(channels)]
    return np.array(rows, dtype=np.float32)


def expected_pcm(blocks: Sequence[np.ndarray], byteorder: str = "little") -> bytes:
    """Reference conversion: per-sample truncate, clamp and interleave in pure Python."""
    out = bytearray()
    for block in blocks:
        block = np.asarray(block, dtype=np.float32)
        channels, n = block.shape
        for s in range(n):
            for c in range(channels):
                value = int(float(block[c][s]) * 32767)
                value = max(-32768, min(32767, value))
                out.extend(value.to_bytes(2, byteorder, signed=True))
    return bytes(out)
