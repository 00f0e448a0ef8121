"""Pydantic models for validating the structured analysis JSON.

The analysis stage runs the backend's raw text through these schemas so that
downstream code only ever sees a complete, type-safe ``AnalysisResult``.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError, field_validator

from bookinsight.domain.errors import SchemaError

_CONTRACT_CONFIG = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")


class KeyConcept(BaseModel):
    title: str
    description: str
    importance: StrictInt = Field(ge=1, le=100)

    model_config = _CONTRACT_CONFIG

    @field_validator("importance", mode="before")
    @classmethod
    def round_importance(cls, value: Any) -> Any:
        # The backend schema declares a NUMBER, so 87.5 is a legitimate reply.
        if isinstance(value, float):
            return int(round(value))
        return value


class ChapterTakeaway(BaseModel):
    chapter: str
    key_takeaway: str = Field(alias="keyTakeaway")

    model_config = _CONTRACT_CONFIG


class AnalysisResult(BaseModel):
    executive_summary: str = Field(alias="executiveSummary")
    key_concepts: List[KeyConcept] = Field(alias="keyConcepts")
    actionable_insights: List[str] = Field(alias="actionableInsights")
    historical_context: str = Field(alias="historicalContext")
    chapter_breakdown: List[ChapterTakeaway] = Field(alias="chapterBreakdown")
    visual_metaphor_prompt: str = Field(alias="visualMetaphorPrompt")
    contemporary_relevance: str = Field(alias="contemporaryRelevance")

    model_config = _CONTRACT_CONFIG

    @classmethod
    def from_json(cls, payload: str) -> "AnalysisResult":
        cleaned = _clean_json_payload(payload)
        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise SchemaError(f"Analysis response is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise SchemaError("Analysis response must be a JSON object.")
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise SchemaError(_describe_validation_error(exc)) from exc


ANALYSIS_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "executiveSummary": {"type": "STRING"},
        "keyConcepts": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "title": {"type": "STRING"},
                    "description": {"type": "STRING"},
                    "importance": {"type": "NUMBER"},
                },
                "required": ["title", "description", "importance"],
            },
        },
        "actionableInsights": {"type": "ARRAY", "items": {"type": "STRING"}},
        "historicalContext": {"type": "STRING"},
        "chapterBreakdown": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "chapter": {"type": "STRING"},
                    "keyTakeaway": {"type": "STRING"},
                },
                "required": ["chapter", "keyTakeaway"],
            },
        },
        "visualMetaphorPrompt": {"type": "STRING"},
        "contemporaryRelevance": {"type": "STRING"},
    },
    "required": [
        "executiveSummary",
        "keyConcepts",
        "actionableInsights",
        "historicalContext",
        "chapterBreakdown",
        "visualMetaphorPrompt",
        "contemporaryRelevance",
    ],
}


def _describe_validation_error(exc: ValidationError) -> str:
    """Summarise pydantic errors as ``field: reason`` pairs using wire names."""

    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "<root>"
        problems.append(f"{location}: {error.get('msg', 'invalid')}")
    return "Analysis response failed schema validation (" + "; ".join(problems) + ")"


def _clean_json_payload(payload: str) -> str:
    """Strip a surrounding Markdown code block; the remainder must be the JSON itself."""
    if not payload:
        return ""

    cleaned = payload.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]

    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]

    return cleaned.strip()


__all__ = [
    "AnalysisResult",
    "ChapterTakeaway",
    "KeyConcept",
    "ANALYSIS_RESPONSE_SCHEMA",
]
