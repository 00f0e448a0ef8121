"""Schemas for the analysis session endpoints."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from bookinsight.application.narration import NarrationController
from bookinsight.application.session import Failed, Ready, Running, SessionState
from bookinsight.domain.models import BookRequest, GroundingSource


class AnalysisSubmitRequest(BaseModel):
    # Blank values are accepted here so the session guard reports them.
    title: str = ""
    author: str = ""


class AnalysisOutcomeView(BaseModel):
    analysis: Dict[str, Any] = Field(
        ..., description="Structured analysis using the camelCase wire names"
    )
    imageUri: str = Field(..., description="PNG concept art as a data URI")
    sources: List[GroundingSource] = Field(default_factory=list)


class NarrationView(BaseModel):
    state: str
    lastError: Optional[str] = None


class SessionSnapshot(BaseModel):
    """Current session state as exposed over HTTP."""

    state: str
    request: Optional[BookRequest] = None
    outcome: Optional[AnalysisOutcomeView] = None
    error: Optional[str] = None
    narration: NarrationView


class NarrationTriggerResponse(BaseModel):
    accepted: bool
    narration: NarrationView


def narration_view(controller: NarrationController) -> NarrationView:
    return NarrationView(state=controller.state.value, lastError=controller.last_error)


def snapshot_from_state(state: SessionState, narration: NarrationController) -> SessionSnapshot:
    """Project a session state variant onto the response schema."""

    snapshot = SessionSnapshot(state=state.tag, narration=narration_view(narration))
    if isinstance(state, Running):
        snapshot.request = state.request
    elif isinstance(state, Failed):
        snapshot.request = state.request
        snapshot.error = state.message
    elif isinstance(state, Ready):
        outcome = state.outcome
        snapshot.request = outcome.request
        snapshot.outcome = AnalysisOutcomeView(
            analysis=outcome.analysis.model_dump(by_alias=True),
            imageUri=outcome.image_uri,
            sources=list(outcome.sources),
        )
    return snapshot
