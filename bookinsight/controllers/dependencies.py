"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from bookinsight.application.narration import NarrationController
from bookinsight.application.session import AnalysisSession
from bookinsight.pipelines.generation import GenerationPipeline
from bookinsight.services.gemini_client import GeminiBackend
from bookinsight.services.playback import create_audio_sink


@lru_cache(maxsize=1)
def get_analysis_session() -> AnalysisSession:
    """Return the process-wide session, creating the Gemini backend on first use."""

    pipeline = GenerationPipeline(GeminiBackend())
    return AnalysisSession(pipeline, NarrationController(create_audio_sink()))


AnalysisSessionDep = Annotated[AnalysisSession, Depends(get_analysis_session)]


__all__ = ["get_analysis_session", "AnalysisSessionDep"]
