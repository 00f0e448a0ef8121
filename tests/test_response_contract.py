"""Tests for the structured analysis contract."""

from __future__ import annotations

import json

import pytest

from bookinsight.domain.errors import SchemaError
from bookinsight.services.response_contract import ANALYSIS_RESPONSE_SCHEMA, AnalysisResult

from conftest import build_analysis_payload


def test_from_json_accepts_complete_payload():
    result = AnalysisResult.from_json(json.dumps(build_analysis_payload()))

    assert result.executive_summary.startswith("Two systems")
    assert [concept.title for concept in result.key_concepts] == ["System 1", "Anchoring"]
    assert result.chapter_breakdown[0].key_takeaway == "Intuition is effortless."
    assert result.model_dump(by_alias=True)["visualMetaphorPrompt"].startswith("a calm tortoise")


def test_from_json_strips_markdown_fences():
    payload = "```json\n" + json.dumps(build_analysis_payload()) + "\n```"

    result = AnalysisResult.from_json(payload)

    assert result.contemporary_relevance


def test_missing_required_field_is_a_schema_error():
    payload = build_analysis_payload()
    del payload["visualMetaphorPrompt"]

    with pytest.raises(SchemaError) as excinfo:
        AnalysisResult.from_json(json.dumps(payload))

    assert "visualMetaphorPrompt" in str(excinfo.value)


@pytest.mark.parametrize("raw", ["", "not json at all", "[1, 2, 3]"])
def test_non_object_payloads_are_schema_errors(raw):
    with pytest.raises(SchemaError):
        AnalysisResult.from_json(raw)


def test_fractional_importance_is_rounded():
    payload = build_analysis_payload(
        keyConcepts=[{"title": "Priming", "description": "Cues shape action.", "importance": 62.6}]
    )

    result = AnalysisResult.from_json(json.dumps(payload))

    assert result.key_concepts[0].importance == 63


@pytest.mark.parametrize("importance", [0, 101])
def test_importance_outside_range_is_rejected(importance):
    payload = build_analysis_payload(
        keyConcepts=[{"title": "Priming", "description": "Cues shape action.", "importance": importance}]
    )

    with pytest.raises(SchemaError):
        AnalysisResult.from_json(json.dumps(payload))


def test_result_is_immutable():
    result = AnalysisResult.from_json(json.dumps(build_analysis_payload()))

    with pytest.raises(Exception):
        result.executive_summary = "changed"


def test_backend_schema_requires_every_field():
    assert set(ANALYSIS_RESPONSE_SCHEMA["required"]) == set(build_analysis_payload())


@pytest.mark.parametrize(
    "raw",
    [
        "Here is the analysis: " + json.dumps(build_analysis_payload()),
        "[" + json.dumps(build_analysis_payload()) + "]",
        "```json\n[" + json.dumps(build_analysis_payload()) + "]\n```",
    ],
)
def test_object_must_be_the_whole_payload(raw):
    with pytest.raises(SchemaError):
        AnalysisResult.from_json(raw)


@pytest.mark.parametrize("importance", [True, "50", None])
def test_non_numeric_importance_is_rejected(importance):
    payload = build_analysis_payload(
        keyConcepts=[{"title": "Priming", "description": "Cues shape action.", "importance": importance}]
    )

    with pytest.raises(SchemaError) as excinfo:
        AnalysisResult.from_json(json.dumps(payload))

    assert "importance" in str(excinfo.value)
