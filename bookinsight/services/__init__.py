"""Service layer helpers for the codec, audio output, and the Gemini backend."""

from .audio_assembly import assemble_pcm_buffer, buffer_from_base64, render_wav
from .codec import decode_bytes, decode_pcm16, encode_bytes, encode_pcm16
from .gemini_client import GeminiBackend, to_backend_response
from .playback import SpeakerSink, WavMemorySink, create_audio_sink
from .response_contract import ANALYSIS_RESPONSE_SCHEMA, AnalysisResult

__all__ = [
    "ANALYSIS_RESPONSE_SCHEMA",
    "AnalysisResult",
    "GeminiBackend",
    "SpeakerSink",
    "WavMemorySink",
    "assemble_pcm_buffer",
    "buffer_from_base64",
    "create_audio_sink",
    "decode_bytes",
    "decode_pcm16",
    "encode_bytes",
    "encode_pcm16",
    "render_wav",
    "to_backend_response",
]
