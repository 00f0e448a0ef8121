"""Narrated brief stage (Stage 03, on demand) of the generation pipeline."""

from __future__ import annotations

from bookinsight.application.interfaces import GenerativeBackend
from bookinsight.domain.errors import NoAudioError
from bookinsight.domain.models import PcmAudioBuffer
from bookinsight.services.audio_assembly import buffer_from_base64

from .prompts import build_narration_prompt


async def run_audio_narration(
    backend: GenerativeBackend,
    text: str,
    *,
    voice: str,
    sample_rate: int,
    channel_count: int,
) -> PcmAudioBuffer:
    """Synthesize the brief and decode the raw PCM reply into a buffer."""

    response = await backend.generate_audio(build_narration_prompt(text), voice=voice)
    payload = next(
        (part.inline_data.data for part in response.parts if part.inline_data is not None),
        None,
    )
    if not payload:
        raise NoAudioError("No audio data received")

    return buffer_from_base64(
        payload,
        sample_rate=sample_rate,
        channel_count=channel_count,
    )


__all__ = ["run_audio_narration"]
