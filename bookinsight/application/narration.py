"""Narration sub-state machine.

Runs beside the main session: ``NOT_PLAYING → REQUESTING → PLAYING →
NOT_PLAYING``. A trigger while a narration is requested or playing is a
no-op, and failures only revert the state; they never reach the session.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Optional

from bookinsight.application.interfaces import AudioSink
from bookinsight.domain.models import PcmAudioBuffer

logger = logging.getLogger(__name__)

Synthesizer = Callable[[], Awaitable[PcmAudioBuffer]]


class NarrationState(str, Enum):
    NOT_PLAYING = "not_playing"
    REQUESTING = "requesting"
    PLAYING = "playing"


class NarrationController:
    """Single-flight narration player."""

    def __init__(self, sink: AudioSink) -> None:
        self._sink = sink
        self._state = NarrationState.NOT_PLAYING
        self._task: Optional[asyncio.Task[None]] = None
        self._last_error: Optional[str] = None

    @property
    def state(self) -> NarrationState:
        return self._state

    @property
    def sink(self) -> AudioSink:
        return self._sink

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    def trigger(self, synthesize: Synthesizer) -> Optional[asyncio.Task[None]]:
        """Start a narration unless one is already in flight.

        Must be called from a running event loop. Returns the task driving the
        narration, or ``None`` when the trigger was ignored.
        """

        if self._state is not NarrationState.NOT_PLAYING:
            logger.info("Narration trigger ignored while %s", self._state.value)
            return None

        self._state = NarrationState.REQUESTING
        self._last_error = None
        self._task = asyncio.get_running_loop().create_task(self._run(synthesize))
        return self._task

    async def narrate(self, synthesize: Synthesizer) -> bool:
        """Trigger and wait; ``False`` when the trigger was a no-op."""

        task = self.trigger(synthesize)
        if task is None:
            return False
        await task
        return True

    async def _run(self, synthesize: Synthesizer) -> None:
        try:
            buffer = await synthesize()
            self._state = NarrationState.PLAYING
            await self._sink.play(buffer)
        except Exception as exc:
            self._last_error = str(exc) or type(exc).__name__
            logger.exception("Narration failed: %s", exc)
        finally:
            self._state = NarrationState.NOT_PLAYING
            self._task = None


__all__ = ["NarrationController", "NarrationState", "Synthesizer"]
