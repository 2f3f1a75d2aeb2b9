"""
Shared pytest fixtures for oggpcm contract tests.

Contract tests use test doubles (fakes, stubs) instead of a real codec.
No environment variables, real files, or real directories are used unless a
test asks for tmp_path / monkeypatch explicitly.
"""

import pytest

from oggpcm.config import DecoderConfig
from oggpcm.session.decoder import DecodeSession
from oggpcm.tests.contracts.test_doubles import (
    ChunkedByteSource,
    FakeCodecEngine,
    build_stream,
    create_block,
)

# Canonical test stream format
TEST_CHANNELS = 2
TEST_RATE = 44100
TEST_BLOCK_SAMPLES = (64, 100, 37)


@pytest.fixture
def stereo_blocks():
    """Three stereo float blocks of different lengths."""
    return [
        create_block(TEST_CHANNELS, n, start=-0.9 + 0.5 * i)
        for i, n in enumerate(TEST_BLOCK_SAMPLES)
    ]


@pytest.fixture
def stereo_stream(stereo_blocks):
    """Serialized Ogg bytes of a stereo fake stream."""
    return b"".join(build_stream(stereo_blocks, channels=TEST_CHANNELS, rate=TEST_RATE))


@pytest.fixture
def fake_engine():
    return FakeCodecEngine()


@pytest.fixture
def small_read_config():
    """Config with a tiny refill size so pages span many reads."""
    return DecoderConfig(read_chunk_size=17)


@pytest.fixture
def open_session():
    """Factory opening a session over in-memory bytes; closes it after the test."""
    sessions = []

    def _open(data: bytes, config=None, chunk_size=None, engine=None):
        source = ChunkedByteSource(data, chunk_size=chunk_size)
        engine = engine or FakeCodecEngine()
        session = DecodeSession.open(source, engine, config)
        sessions.append(session)
        return session, source, engine

    yield _open

    for session in sessions:
        if not session.closed:
            session.close()
