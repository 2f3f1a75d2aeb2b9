"""
Float block to interleaved 16-bit PCM conversion.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

PCM_SCALE = 32767.0
PCM_MIN = -32768.0
PCM_MAX = 32767.0
BYTES_PER_SAMPLE = 2

_DTYPES = {
    "little": np.dtype("<i2"),
    "big": np.dtype(">i2"),
}


def interleave_block(
    pcm: np.ndarray,
    offsets: Sequence[int],
    span: int,
    byteorder: str = "little",
) -> bytes:
    """
    Convert span samples of each channel to interleaved signed 16-bit PCM.

    Each sample is scaled by 32767, truncated toward zero and clamped to
    [-32768, 32767]. NaN becomes 0.

    Args:
        pcm: Float samples indexed [channel][sample]
        offsets: Per-channel index of the first sample to convert
        span: Samples per channel to convert
        byteorder: "little" or "big"

    Returns:
        span * channels * 2 bytes, channel samples interleaved per time index
    """
    channels = len(offsets)
    frames = np.empty((span, channels), dtype=np.float64)
    for c in range(channels):
        start = offsets[c]
        frames[:, c] = pcm[c][start:start + span]

    frames *= PCM_SCALE
    np.nan_to_num(frames, copy=False, nan=0.0)
    np.clip(frames, PCM_MIN, PCM_MAX, out=frames)
    np.trunc(frames, out=frames)
    return frames.astype(_DTYPES[byteorder]).tobytes()
