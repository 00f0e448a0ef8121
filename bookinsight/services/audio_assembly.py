"""Assemble decoded PCM channels into playable narration buffers."""

from __future__ import annotations

import io
import wave
from typing import Sequence

import numpy as np

from bookinsight.config.settings import settings
from bookinsight.domain.errors import FormatError
from bookinsight.domain.models import PcmAudioBuffer
from bookinsight.services.codec import decode_bytes, decode_pcm16, encode_pcm16


def assemble_pcm_buffer(
    channels: Sequence[np.ndarray],
    *,
    sample_rate: int = settings.narration.sample_rate,
    channel_count: int = settings.narration.channel_count,
) -> PcmAudioBuffer:
    """Wrap per-channel samples without resampling or mixing."""

    if len(channels) != channel_count:
        raise FormatError(
            f"Expected {channel_count} channel(s), received {len(channels)}."
        )
    lengths = {len(channel) for channel in channels}
    if len(lengths) > 1:
        raise FormatError(f"Channels differ in length: {sorted(lengths)}.")

    frozen: list[np.ndarray] = []
    for channel in channels:
        samples = np.array(channel, dtype=np.float32)
        samples.flags.writeable = False
        frozen.append(samples)

    return PcmAudioBuffer(
        sample_rate=sample_rate,
        channel_count=channel_count,
        samples=tuple(frozen),
    )


def buffer_from_base64(
    payload: str,
    *,
    sample_rate: int = settings.narration.sample_rate,
    channel_count: int = settings.narration.channel_count,
) -> PcmAudioBuffer:
    """Decode a base64 PCM16 payload straight into a :class:`PcmAudioBuffer`."""

    raw = decode_bytes(payload)
    channels = decode_pcm16(raw, channel_count)
    return assemble_pcm_buffer(
        channels,
        sample_rate=sample_rate,
        channel_count=channel_count,
    )


def render_wav(buffer: PcmAudioBuffer) -> bytes:
    """Serialise the buffer as a 16-bit PCM WAV file."""

    pcm16 = encode_pcm16(buffer.samples)
    with io.BytesIO() as output:
        with wave.open(output, "wb") as wave_file:
            wave_file.setnchannels(buffer.channel_count)
            wave_file.setsampwidth(2)
            wave_file.setframerate(buffer.sample_rate)
            wave_file.writeframes(pcm16)
        return output.getvalue()


__all__ = ["assemble_pcm_buffer", "buffer_from_base64", "render_wav"]
