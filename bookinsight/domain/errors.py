"""Error taxonomy shared by the codec, pipeline, and session layers."""

from __future__ import annotations


class BookInsightError(RuntimeError):
    """Base class for every failure raised by the analysis core."""


class ValidationError(BookInsightError):
    """Raised when the user-supplied book identity is incomplete."""


class FormatError(BookInsightError):
    """Raised for malformed base64 text or PCM byte layouts."""


class SchemaError(BookInsightError):
    """Raised when the analysis payload is not JSON or misses required fields."""


class NoImageError(BookInsightError):
    """Raised when the image response carries no inline image part."""


class NoAudioError(BookInsightError):
    """Raised when the speech response carries no inline audio part."""


class TransportError(BookInsightError):
    """Raised when the backend call itself fails (network, auth, quota)."""


class StageOrderError(BookInsightError):
    """Raised when a pipeline stage runs before the stage it depends on."""


class SessionBusyError(BookInsightError):
    """Raised when the session is asked to transition while a run is in flight."""


class PlaybackError(BookInsightError):
    """Raised when an audio buffer cannot be played."""


__all__ = [
    "BookInsightError",
    "ValidationError",
    "FormatError",
    "SchemaError",
    "NoImageError",
    "NoAudioError",
    "TransportError",
    "StageOrderError",
    "SessionBusyError",
    "PlaybackError",
]
