"""Pydantic schemas used as views in the MVC architecture."""

from .analysis import (
    AnalysisOutcomeView,
    AnalysisSubmitRequest,
    NarrationTriggerResponse,
    NarrationView,
    SessionSnapshot,
    narration_view,
    snapshot_from_state,
)
from .common import ErrorResponse

__all__ = [
    "AnalysisOutcomeView",
    "AnalysisSubmitRequest",
    "NarrationTriggerResponse",
    "NarrationView",
    "SessionSnapshot",
    "ErrorResponse",
    "narration_view",
    "snapshot_from_state",
]
