"""Tests for narration buffer assembly and WAV rendering."""

from __future__ import annotations

import io
import wave

import numpy as np
import pytest

from bookinsight.domain.errors import FormatError, PlaybackError
from bookinsight.services.audio_assembly import assemble_pcm_buffer, buffer_from_base64, render_wav
from bookinsight.services.codec import encode_bytes


def test_mono_payload_of_48000_bytes_yields_24000_frames():
    buffer = buffer_from_base64(encode_bytes(b"\x00" * 48000), sample_rate=24000, channel_count=1)

    assert buffer.sample_rate == 24000
    assert buffer.channel_count == 1
    assert buffer.frame_count == 24000
    assert buffer.duration_seconds == pytest.approx(1.0)


def test_assembly_passes_format_through_unchanged():
    channels = [np.zeros(10, dtype=np.float32), np.ones(10, dtype=np.float32) * 0.25]

    buffer = assemble_pcm_buffer(channels, sample_rate=44100, channel_count=2)

    assert buffer.sample_rate == 44100
    assert buffer.frame_count == 10
    assert buffer.channel(1).tolist() == pytest.approx([0.25] * 10)


def test_assembly_rejects_channel_count_mismatch():
    with pytest.raises(FormatError):
        assemble_pcm_buffer([np.zeros(4)], sample_rate=24000, channel_count=2)


def test_assembly_rejects_ragged_channels():
    with pytest.raises(FormatError):
        assemble_pcm_buffer([np.zeros(4), np.zeros(5)], sample_rate=24000, channel_count=2)


def test_invalid_base64_never_reaches_assembly():
    with pytest.raises(FormatError):
        buffer_from_base64("not base64!", sample_rate=24000, channel_count=1)


def test_buffer_samples_are_read_only():
    buffer = assemble_pcm_buffer([np.zeros(4)], sample_rate=24000, channel_count=1)

    with pytest.raises(ValueError):
        buffer.channel(0)[0] = 1.0


def test_buffer_can_only_be_claimed_once():
    buffer = assemble_pcm_buffer([np.zeros(4)], sample_rate=24000, channel_count=1)

    buffer.claim()

    assert buffer.consumed
    with pytest.raises(PlaybackError):
        buffer.claim()


def test_render_wav_writes_pcm16_container():
    samples = np.array([0.0, 0.5, -0.5, 0.25], dtype=np.float32)
    buffer = assemble_pcm_buffer([samples], sample_rate=24000, channel_count=1)

    clip = render_wav(buffer)

    with wave.open(io.BytesIO(clip), "rb") as wav_file:
        assert wav_file.getnchannels() == 1
        assert wav_file.getsampwidth() == 2
        assert wav_file.getframerate() == 24000
        assert wav_file.getnframes() == 4
        frames = np.frombuffer(wav_file.readframes(4), dtype="<i2")
    assert frames.tolist() == [0, 16384, -16384, 8192]
