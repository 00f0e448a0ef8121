"""Session state machine for a single analysis request.

States are frozen variants, so an illegal combination such as "ready while
still generating" cannot be expressed::

    Idle / Ready / Failed --submit--> Running --success--> Ready
                                      Running --failure--> Failed
    Ready / Failed --reset--> Idle

Narration is delegated to :class:`NarrationController`, whose failures never
move the session out of ``Ready``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, ClassVar, List, Optional, Union

from bookinsight.application.narration import NarrationController, NarrationState
from bookinsight.domain.errors import SessionBusyError, ValidationError
from bookinsight.domain.models import BookRequest
from bookinsight.pipelines.generation import GenerationOutcome, GenerationPipeline

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_MESSAGE = "An error occurred while generating the pro version."
CANCELLED_MESSAGE = "The analysis was cancelled before it completed."


@dataclass(frozen=True)
class Idle:
    tag: ClassVar[str] = "idle"


@dataclass(frozen=True)
class Running:
    tag: ClassVar[str] = "running"
    request: BookRequest


@dataclass(frozen=True)
class Ready:
    tag: ClassVar[str] = "ready"
    outcome: GenerationOutcome


@dataclass(frozen=True)
class Failed:
    tag: ClassVar[str] = "failed"
    request: BookRequest
    message: str


SessionState = Union[Idle, Running, Ready, Failed]
TransitionListener = Callable[[SessionState, SessionState], None]


class AnalysisSession:
    """Owns the lifecycle of one user's analysis and its narration."""

    def __init__(
        self,
        pipeline: GenerationPipeline,
        narration: NarrationController,
    ) -> None:
        self._pipeline = pipeline
        self._narration = narration
        self._state: SessionState = Idle()
        self._listeners: List[TransitionListener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def narration(self) -> NarrationController:
        return self._narration

    @property
    def narration_state(self) -> NarrationState:
        return self._narration.state

    def subscribe(self, listener: TransitionListener) -> None:
        """Register a callback invoked with ``(previous, current)`` on each transition."""

        self._listeners.append(listener)

    async def submit(self, title: Optional[str], author: Optional[str]) -> SessionState:
        """Validate the book identity and run the pipeline to a terminal state."""

        if isinstance(self._state, Running):
            raise SessionBusyError("An analysis is already being generated.")

        # Raises before any transition; the current state is kept.
        request = BookRequest.create(title, author)

        self._transition(Running(request=request))
        try:
            outcome = await self._pipeline.generate(request)
        except asyncio.CancelledError:
            logger.warning("Analysis cancelled title=%r author=%r", request.title, request.author)
            self._transition(Failed(request=request, message=CANCELLED_MESSAGE))
            raise
        except Exception as exc:
            message = str(exc) or DEFAULT_FAILURE_MESSAGE
            logger.error(
                "Analysis failed title=%r author=%r: %s",
                request.title,
                request.author,
                message,
            )
            self._transition(Failed(request=request, message=message))
        else:
            self._transition(Ready(outcome=outcome))
        return self._state

    def reset(self) -> SessionState:
        """Return to ``Idle`` from a terminal state, discarding outcome and error."""

        if isinstance(self._state, Running):
            raise SessionBusyError("Cannot reset while an analysis is being generated.")
        if not isinstance(self._state, Idle):
            self._transition(Idle())
        return self._state

    def narrate(self) -> Optional[asyncio.Task[None]]:
        """Start narrating the ready outcome's executive summary.

        Returns ``None`` when a narration is already requested or playing.
        """

        state = self._state
        if not isinstance(state, Ready):
            raise ValidationError("Generate an analysis before requesting a narrated brief.")

        analysis = state.outcome.analysis

        async def synthesize():
            return await self._pipeline.narrate(analysis)

        return self._narration.trigger(synthesize)

    def _transition(self, new_state: SessionState) -> None:
        previous = self._state
        self._state = new_state
        logger.info("Session transition %s -> %s", previous.tag, new_state.tag)
        for listener in list(self._listeners):
            try:
                listener(previous, new_state)
            except Exception:
                logger.exception("Session listener failed on %s -> %s", previous.tag, new_state.tag)


__all__ = [
    "AnalysisSession",
    "CANCELLED_MESSAGE",
    "DEFAULT_FAILURE_MESSAGE",
    "Failed",
    "Idle",
    "Ready",
    "Running",
    "SessionState",
]
