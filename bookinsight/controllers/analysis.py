"""Book analysis endpoints.

The POST `/analysis` call drives the session through the generation
pipeline (see `bookinsight.pipelines.generation.flow`):

1. Structured, web-grounded analysis of the submitted book.
2. Concept art generated from the analysis' visual metaphor prompt.

Narration is requested separately through `/analysis/narration` and runs in
the background; its progress is polled with GET on the same path.
"""

import logging

from fastapi import APIRouter, HTTPException, Response, status

from bookinsight.controllers.dependencies import AnalysisSessionDep
from bookinsight.domain.errors import SessionBusyError, ValidationError
from bookinsight.services.playback import WavMemorySink
from bookinsight.views import (
    AnalysisSubmitRequest,
    ErrorResponse,
    NarrationTriggerResponse,
    NarrationView,
    SessionSnapshot,
    narration_view,
    snapshot_from_state,
)

router = APIRouter(prefix="/analysis", tags=["analysis"])

logger = logging.getLogger(__name__)

_CONFLICT = {status.HTTP_409_CONFLICT: {"model": ErrorResponse}}


@router.get("", response_model=SessionSnapshot)
async def get_analysis(session: AnalysisSessionDep) -> SessionSnapshot:
    """Return the current session state."""

    return snapshot_from_state(session.state, session.narration)


@router.post(
    "",
    response_model=SessionSnapshot,
    responses={**_CONFLICT, status.HTTP_422_UNPROCESSABLE_ENTITY: {"model": ErrorResponse}},
)
async def submit_analysis(
    payload: AnalysisSubmitRequest,
    session: AnalysisSessionDep,
) -> SessionSnapshot:
    """Generate the analysis and concept art for a book."""

    try:
        state = await session.submit(payload.title, payload.author)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
    except SessionBusyError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    return snapshot_from_state(state, session.narration)


@router.post("/reset", response_model=SessionSnapshot, responses=_CONFLICT)
async def reset_analysis(session: AnalysisSessionDep) -> SessionSnapshot:
    """Discard the current outcome or error."""

    try:
        state = session.reset()
    except SessionBusyError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return snapshot_from_state(state, session.narration)


@router.post(
    "/narration",
    response_model=NarrationTriggerResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses=_CONFLICT,
)
async def trigger_narration(session: AnalysisSessionDep) -> NarrationTriggerResponse:
    """Start narrating the executive summary; repeated triggers are ignored."""

    try:
        task = session.narrate()
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    if task is None:
        logger.info("Narration already %s", session.narration_state.value)
    return NarrationTriggerResponse(
        accepted=task is not None,
        narration=narration_view(session.narration),
    )


@router.get("/narration", response_model=NarrationView)
async def get_narration(session: AnalysisSessionDep) -> NarrationView:
    return narration_view(session.narration)


@router.get(
    "/narration/audio",
    response_class=Response,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def download_narration(session: AnalysisSessionDep) -> Response:
    """Return the most recent narration as WAV bytes."""

    sink = session.narration.sink
    clip = sink.latest_clip if isinstance(sink, WavMemorySink) else None
    if clip is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No narration has been rendered yet",
        )
    return Response(content=clip, media_type="audio/wav")
