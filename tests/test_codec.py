"""Tests for base64 transcoding and PCM16 decoding."""

from __future__ import annotations

import struct

import numpy as np
import pytest

from bookinsight.domain.errors import FormatError
from bookinsight.services.codec import decode_bytes, decode_pcm16, encode_bytes, encode_pcm16


@pytest.mark.parametrize("payload", [b"", b"\x00", bytes(range(256))])
def test_decode_bytes_inverts_encode_bytes(payload):
    assert decode_bytes(encode_bytes(payload)) == payload


def test_encode_bytes_is_standard_base64():
    assert encode_bytes(b"book") == "Ym9vaw=="


@pytest.mark.parametrize("text", ["Ym9v$w==", "Ym9vaw=", "Ym9vaw", "Ym9v\naw=="])
def test_decode_bytes_rejects_malformed_text(text):
    with pytest.raises(FormatError):
        decode_bytes(text)


def test_decode_pcm16_normalizes_signed_little_endian_samples():
    data = struct.pack("<4h", 0, 16384, -32768, 32767)

    (channel,) = decode_pcm16(data, 1)

    assert channel.dtype == np.float32
    assert channel.tolist() == pytest.approx([0.0, 0.5, -1.0, 32767 / 32768.0])


def test_decode_pcm16_deinterleaves_channels_in_order():
    data = struct.pack("<6h", 100, -100, 200, -200, 300, -300)

    left, right = decode_pcm16(data, 2)

    assert left.tolist() == pytest.approx([100 / 32768.0, 200 / 32768.0, 300 / 32768.0])
    assert right.tolist() == pytest.approx([-100 / 32768.0, -200 / 32768.0, -300 / 32768.0])


def test_decode_pcm16_rejects_odd_length():
    with pytest.raises(FormatError):
        decode_pcm16(b"\x00\x01\x02", 1)


def test_decode_pcm16_rejects_partial_stereo_frame():
    with pytest.raises(FormatError):
        decode_pcm16(b"\x00" * 6, 2)


def test_decode_pcm16_rejects_non_positive_channel_count():
    with pytest.raises(FormatError):
        decode_pcm16(b"\x00\x00", 0)


def test_decode_pcm16_empty_payload_yields_empty_channel():
    (channel,) = decode_pcm16(b"", 1)
    assert channel.size == 0


def test_pcm16_quantisation_round_trip_is_within_one_step():
    rng = np.random.default_rng(1234)
    original = rng.integers(-32768, 32768, size=4096, dtype=np.int32).astype("<i2").tobytes()

    restored = encode_pcm16(decode_pcm16(original, 1))

    before = np.frombuffer(original, dtype="<i2").astype(np.int32)
    after = np.frombuffer(restored, dtype="<i2").astype(np.int32)
    assert np.max(np.abs(before - after)) <= 1


def test_encode_pcm16_clips_out_of_range_samples():
    restored = encode_pcm16([np.array([1.5, -2.0], dtype=np.float32)])

    assert struct.unpack("<2h", restored) == (32767, -32768)
