"""Structured analysis stage (Stage 01) of the generation pipeline."""

from __future__ import annotations

import logging
from typing import Iterable, List

from bookinsight.application.interfaces import GenerativeBackend, GroundingChunk
from bookinsight.domain.errors import SchemaError
from bookinsight.domain.models import BookRequest, GroundingSource
from bookinsight.services.response_contract import ANALYSIS_RESPONSE_SCHEMA, AnalysisResult

from .prompts import build_analysis_prompt
from .types import AnalysisOutcome

logger = logging.getLogger("bookinsight.pipeline")

DEFAULT_SOURCE_TITLE = "Reference"


def _truncate(value: str, max_length: int = 500) -> str:
    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."


def extract_grounding_sources(chunks: Iterable[GroundingChunk]) -> List[GroundingSource]:
    """Keep web citations in backend order; other citation kinds are dropped."""

    sources: List[GroundingSource] = []
    for chunk in chunks:
        if chunk.web is None:
            continue
        sources.append(
            GroundingSource(
                title=chunk.web.title or DEFAULT_SOURCE_TITLE,
                uri=chunk.web.uri or "",
            )
        )
    return sources


async def run_analysis(
    backend: GenerativeBackend,
    request: BookRequest,
    *,
    thinking_budget: int,
) -> AnalysisOutcome:
    """Ask the backend for the structured analysis and validate the contract."""

    response = await backend.generate_structured_analysis(
        build_analysis_prompt(request),
        schema=ANALYSIS_RESPONSE_SCHEMA,
        thinking_budget=thinking_budget,
    )
    if not response.text:
        raise SchemaError("Analysis response contained no text.")

    logger.info(
        "Analysis raw response title=%r: %s",
        request.title,
        _truncate(response.text),
    )
    result = AnalysisResult.from_json(response.text)
    sources = extract_grounding_sources(response.grounding_chunks)
    return AnalysisOutcome(result=result, sources=tuple(sources))


__all__ = ["DEFAULT_SOURCE_TITLE", "extract_grounding_sources", "run_analysis"]
