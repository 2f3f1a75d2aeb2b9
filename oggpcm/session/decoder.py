"""
Pull-based decode session.

This module provides DecodeSession, which turns an Ogg byte stream into
interleaved signed 16-bit PCM. The caller pulls PCM with fill(); compressed
bytes are read from the ByteSource only when a new block has to be decoded.

A session is full of mutable state and is not thread safe. Do not call it
from several threads without external locking.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional

import numpy as np

from oggpcm.codec.engine import HEADER_PACKETS, CodecEngine
from oggpcm.codec.info import StreamInfo
from oggpcm.config import DecoderConfig
from oggpcm.errors import (
    InvalidFormat,
    SessionClosed,
    TruncatedStream,
)
from oggpcm.session.packet_reader import PacketReader
from oggpcm.session.pcm import BYTES_PER_SAMPLE, interleave_block
from oggpcm.session.pcm_buffer import PcmBuffer
from oggpcm.sources.base import ByteSource

logger = logging.getLogger(__name__)


class DecodeSession:
    """
    Decoder state for one opened stream.

    Create with DecodeSession.open(); it negotiates the headers and returns
    a ready session or raises. Then call fill() until it returns None and
    finish with close().

    Block bookkeeping:
    - _pcm / _pcm_index: the pending block and the engine's per-channel
      offsets for it, kept unchanged until the block is drained
    - _samples: samples of the pending block not yet emitted
    - _sample_index: samples of the pending block already emitted
    """

    def __init__(self, reader: PacketReader, engine: CodecEngine, config: DecoderConfig) -> None:
        """Use DecodeSession.open() instead."""
        self._reader = reader
        self._engine = engine
        self._config = config
        self._channels = engine.info.channels
        self._rate = engine.info.rate
        self._pcm: Optional[np.ndarray] = None
        self._pcm_index: List[int] = [0] * self._channels
        self._samples = 0
        self._sample_index = 0
        self._closed = False
        self.blocks_decoded = 0
        self.packets_skipped = 0

    @classmethod
    def open(
        cls,
        source: ByteSource,
        engine: CodecEngine,
        config: Optional[DecoderConfig] = None,
    ) -> "DecodeSession":
        """
        Open a decode session and negotiate the stream headers.

        Args:
            source: Byte source positioned at the start of the Ogg stream
            engine: Fresh codec engine for this stream
            config: Decoder configuration (default: DecoderConfig())

        Returns:
            A session ready for fill()

        Raises:
            StreamCorruption: If a hole is found in the header pages
            InvalidFormat: If the engine rejects a header packet
            TruncatedStream: If the data ends before the headers are complete
            IOFailure: If the byte source fails
        """
        config = config or DecoderConfig()
        reader = PacketReader(source, read_chunk_size=config.read_chunk_size)
        try:
            cls._read_header(reader, engine)
            engine.synthesis_init()
        except Exception:
            reader.close(close_source=False)
            engine.clear()
            raise

        info = engine.info
        if info.channels < 1 or info.rate <= 0:
            reader.close(close_source=False)
            engine.clear()
            raise InvalidFormat(
                f"Engine negotiated invalid format: channels={info.channels} rate={info.rate}"
            )

        session = cls(reader, engine, config)
        logger.info(
            f"[DECODER] Opened stream serial={reader.stream.serial_no:#010x} "
            f"channels={info.channels} rate={info.rate}"
        )
        return session

    @staticmethod
    def _read_header(reader: PacketReader, engine: CodecEngine) -> None:
        """Bootstrap the logical stream and feed the header packets to the engine."""
        if reader.first_page() is None:
            raise TruncatedStream("Stream ended before the first page")

        for i in range(HEADER_PACKETS):
            packet = reader.next_packet(hole_is_error=True)
            if packet is None:
                logger.error(f"[DECODER] Stream ended while reading header packet {i + 1}")
                raise TruncatedStream(f"Error reading header packet {i + 1}")
            result = engine.headerin(packet)
            if result < 0:
                logger.error(f"[DECODER] Header packet {i + 1} rejected (code {result})")
                raise InvalidFormat("Not vorbis data")

    @property
    def channels(self) -> int:
        """Number of channels in the stream."""
        return self._channels

    @property
    def sample_rate(self) -> int:
        """Sample frequency of the stream in Hz."""
        return self._rate

    @property
    def info(self) -> StreamInfo:
        """Negotiated stream metadata (vendor, comments)."""
        return self._engine.info

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def frame_bytes(self) -> int:
        """Bytes per interleaved sample frame."""
        return BYTES_PER_SAMPLE * self._channels

    def _check_open(self) -> None:
        if self._closed:
            raise SessionClosed("Decode session is closed")

    def _decode_next_block(self) -> Optional[int]:
        """
        Decode packets until the engine has samples available.

        Returns:
            Samples in the new block, 0 if the current block is not drained
            yet, or None at end of stream
        """
        if self._samples > 0:
            return 0

        while True:
            packet = self._reader.next_packet(hole_is_error=False)
            if packet is None:
                return None

            if not self._engine.synthesis(packet):
                # Not an audio packet
                self.packets_skipped += 1
                continue

            self._engine.blockin()
            out = self._engine.pcmout()
            if out.samples == 0:
                # Need more data
                continue

            self._pcm = out.pcm
            self._pcm_index = list(out.index)
            self._samples = out.samples
            self._sample_index = 0
            self.blocks_decoded += 1
            return out.samples

    def fill(self, buf: PcmBuffer) -> Optional[int]:
        """
        Fill buf with interleaved signed 16-bit PCM.

        Samples are written starting at buf.position in buf.byteorder. The
        limit of the buffer is set after the last sample written and the
        position is not altered, so relative get() calls work without
        flipping the buffer. A buffer with room for less than one sample
        frame gets 0 bytes while audio is pending.

        Args:
            buf: Output buffer

        Returns:
            Number of bytes written, or None at end of stream
        """
        self._check_open()
        channels = self._channels
        max_samples = buf.remaining() // (BYTES_PER_SAMPLE * channels)

        while self._samples == 0:
            if self._decode_next_block() is None:
                return None

        span = min(max_samples, self._samples)
        offsets = [index + self._sample_index for index in self._pcm_index]
        data = interleave_block(self._pcm, offsets, span, buf.byteorder)
        buf.put_bytes(buf.position, data)

        if span > 0:
            self._engine.read(span)
        self._samples -= span
        self._sample_index += span

        written = span * BYTES_PER_SAMPLE * channels
        buf.limit = buf.position + written
        return written

    def iter_pcm(self, chunk_bytes: int = 4096) -> Iterator[bytes]:
        """
        Generator yielding PCM chunks of at most chunk_bytes until end of stream.

        Chunks never split a sample frame. Chunk sizes follow block
        boundaries, so they may be shorter than chunk_bytes.

        Raises:
            ValueError: If chunk_bytes cannot hold one sample frame
        """
        if chunk_bytes < self.frame_bytes:
            raise ValueError(
                f"chunk_bytes must hold at least one sample frame ({self.frame_bytes} bytes)"
            )
        buf = PcmBuffer(chunk_bytes, byteorder=self._config.byte_order)
        while True:
            buf.clear()
            written = self.fill(buf)
            if written is None:
                return
            yield buf.get(written)

    def close(self, close_source: bool = False) -> None:
        """
        Release decoding resources.

        A byte source that fails to close is logged at WARNING; the session
        is closed regardless.

        Args:
            close_source: Also close the ByteSource (default: False)
        """
        self._check_open()
        self._closed = True
        self._reader.stream.clear()
        self._engine.clear()
        self._reader.sync.clear()
        self._pcm = None
        self._samples = 0
        try:
            if close_source:
                self._reader.source.close()
        except OSError as e:
            logger.warning(f"[DECODER] Byte source close failed: {e}")
        finally:
            logger.info(
                f"[DECODER] Closed after {self.blocks_decoded} blocks "
                f"({self._reader.holes_skipped} holes skipped)"
            )

    def __enter__(self) -> "DecodeSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self._closed:
            self.close()

    def __repr__(self) -> str:
        return (
            f"DecodeSession(channels={self._channels} rate={self._rate} "
            f"pending={self._samples} closed={self._closed})"
        )
