"""Audio sinks that consume narration buffers."""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np
from fastapi.concurrency import run_in_threadpool

from bookinsight.application.interfaces import AudioSink
from bookinsight.config.settings import NarrationConfig, settings
from bookinsight.domain.errors import PlaybackError
from bookinsight.domain.models import PcmAudioBuffer
from bookinsight.services.audio_assembly import render_wav

logger = logging.getLogger(__name__)


class WavMemorySink(AudioSink):
    """Render each narration to WAV and keep the latest clip for download."""

    def __init__(self) -> None:
        self._latest: Optional[bytes] = None

    @property
    def latest_clip(self) -> Optional[bytes]:
        return self._latest

    async def play(self, buffer: PcmAudioBuffer) -> None:
        buffer.claim()
        self._latest = await run_in_threadpool(render_wav, buffer)
        logger.info(
            "Narration rendered: %.2fs, %d frames, %d bytes",
            buffer.duration_seconds,
            buffer.frame_count,
            len(self._latest),
        )


class SpeakerSink(AudioSink):
    """Play narrations on the default output device via ``sounddevice``."""

    async def play(self, buffer: PcmAudioBuffer) -> None:
        samples = buffer.claim()
        frames = np.stack(samples, axis=1)
        await run_in_threadpool(self._play_blocking, frames, buffer.sample_rate)

    @staticmethod
    def _play_blocking(frames: np.ndarray, sample_rate: int) -> None:
        import sounddevice as sd

        try:
            sd.play(frames, samplerate=sample_rate)
            sd.wait()
        except Exception as exc:  # pragma: no cover - audio device dependent
            raise PlaybackError(f"Audio device playback failed: {exc}") from exc


def create_audio_sink(config: NarrationConfig = settings.narration) -> AudioSink:
    """Return the sink selected by ``NARRATION_OUTPUT``."""

    if config.output == "speaker":
        return SpeakerSink()
    return WavMemorySink()


__all__ = ["SpeakerSink", "WavMemorySink", "create_audio_sink"]
