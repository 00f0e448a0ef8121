"""Base64 transcoding and signed 16-bit PCM sample conversion."""

from __future__ import annotations

import base64
import binascii
from typing import Sequence

import numpy as np

from bookinsight.domain.errors import FormatError

PCM16_SCALE = 32768.0
_PCM16_DTYPE = np.dtype("<i2")


def encode_bytes(data: bytes) -> str:
    """Return the standard base64 text for ``data``."""

    return base64.b64encode(bytes(data)).decode("ascii")


def decode_bytes(text: str | bytes) -> bytes:
    """Decode base64 text, rejecting foreign characters and bad padding."""

    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise FormatError(f"Invalid base64 payload: {exc}") from exc


def decode_pcm16(data: bytes, channel_count: int) -> list[np.ndarray]:
    """Split interleaved little-endian PCM16 frames into normalized channels.

    Each sample is divided by 32768.0, so values land in ``[-1.0, 1.0)``.
    """

    if channel_count < 1:
        raise FormatError(f"Channel count must be positive, got {channel_count}.")

    frame_width = 2 * channel_count
    if len(data) % frame_width:
        raise FormatError(
            f"PCM payload of {len(data)} bytes is not a whole number of "
            f"{channel_count}-channel 16-bit frames."
        )

    interleaved = np.frombuffer(data, dtype=_PCM16_DTYPE).astype(np.float32) / PCM16_SCALE
    frames = interleaved.reshape(-1, channel_count)
    return [np.ascontiguousarray(frames[:, index]) for index in range(channel_count)]


def encode_pcm16(channels: Sequence[np.ndarray]) -> bytes:
    """Interleave float channels back into little-endian PCM16 bytes."""

    if not channels:
        return b""

    stacked = np.stack([np.asarray(channel, dtype=np.float32) for channel in channels], axis=1)
    scaled = np.rint(np.clip(stacked, -1.0, 1.0) * PCM16_SCALE)
    return np.clip(scaled, -32768, 32767).astype(_PCM16_DTYPE).tobytes()


__all__ = ["PCM16_SCALE", "encode_bytes", "decode_bytes", "decode_pcm16", "encode_pcm16"]
