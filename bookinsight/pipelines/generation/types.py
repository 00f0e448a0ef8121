"""Typed containers shared across the generation pipeline.

These live in their own module so the stages (`analysis`, `imagery`,
`narration`) and the `pipeline` orchestrator can import them without
creating circular dependencies.
"""

from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, ConfigDict

from bookinsight.domain.models import BookRequest, GroundingSource
from bookinsight.services.response_contract import AnalysisResult


class AnalysisOutcome(BaseModel):
    """Validated analysis plus the web sources the backend cited."""

    result: AnalysisResult
    sources: Tuple[GroundingSource, ...] = ()

    model_config = ConfigDict(frozen=True)


class GenerationOutcome(BaseModel):
    """Everything a successful analysis-then-image run produced."""

    request: BookRequest
    analysis: AnalysisResult
    image_uri: str
    sources: Tuple[GroundingSource, ...] = ()

    model_config = ConfigDict(frozen=True)
