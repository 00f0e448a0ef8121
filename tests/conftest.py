"""Shared fixtures: a deterministic in-memory backend and analysis payloads."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from bookinsight.application.interfaces import (  # noqa: E402
    BackendResponse,
    ContentPart,
    GenerativeBackend,
    GroundingChunk,
    InlineData,
    WebReference,
)
from bookinsight.application.narration import NarrationController  # noqa: E402
from bookinsight.application.session import AnalysisSession  # noqa: E402
from bookinsight.pipelines.generation import GenerationPipeline  # noqa: E402
from bookinsight.services.codec import encode_bytes  # noqa: E402
from bookinsight.services.playback import WavMemorySink  # noqa: E402

PNG_PAYLOAD = encode_bytes(b"\x89PNG\r\n\x1a\nfake-image")


def build_analysis_payload(**overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "executiveSummary": "Two systems drive the way we think.",
        "keyConcepts": [
            {"title": "System 1", "description": "Fast, intuitive thinking.", "importance": 95},
            {"title": "Anchoring", "description": "Initial values bias estimates.", "importance": 70},
        ],
        "actionableInsights": ["Slow down for high-stakes decisions."],
        "historicalContext": "Builds on decades of work with Amos Tversky.",
        "chapterBreakdown": [
            {"chapter": "Part I: Two Systems", "keyTakeaway": "Intuition is effortless."},
        ],
        "visualMetaphorPrompt": "a calm tortoise racing a lightning-fast hare inside a brain",
        "contemporaryRelevance": "Shapes modern behavioural economics and product design.",
    }
    payload.update(overrides)
    return payload


class FakeBackend(GenerativeBackend):
    """Records every call in order and replays canned responses."""

    def __init__(self) -> None:
        self.calls: List[str] = []
        self.prompts: Dict[str, str] = {}
        self.options: Dict[str, Dict[str, Any]] = {}
        self.analysis_response = BackendResponse(
            text=json.dumps(build_analysis_payload()),
            grounding_chunks=(
                GroundingChunk(web=WebReference(title="Britannica", uri="https://www.britannica.com/")),
            ),
        )
        self.image_response = BackendResponse(
            parts=(
                ContentPart(text="Here is your illustration."),
                ContentPart(inline_data=InlineData(mime_type="image/png", data=PNG_PAYLOAD)),
            ),
        )
        self.audio_response = BackendResponse(
            parts=(
                ContentPart(
                    inline_data=InlineData(
                        mime_type="audio/L16;codec=pcm;rate=24000",
                        data=encode_bytes(b"\x00\x00" * 2400),
                    )
                ),
            ),
        )
        self.errors: Dict[str, Exception] = {}
        self.gates: Dict[str, asyncio.Event] = {}
        self.hooks: Dict[str, Any] = {}

    async def _respond(self, stage: str, prompt: str, response: BackendResponse, **options: Any) -> BackendResponse:
        self.calls.append(stage)
        self.prompts[stage] = prompt
        self.options[stage] = options
        hook = self.hooks.get(stage)
        if hook is not None:
            hook()
        gate = self.gates.get(stage)
        if gate is not None:
            await gate.wait()
        if stage in self.errors:
            raise self.errors[stage]
        return response

    async def generate_structured_analysis(self, prompt, *, schema, thinking_budget):
        return await self._respond(
            "analysis",
            prompt,
            self.analysis_response,
            schema=schema,
            thinking_budget=thinking_budget,
        )

    async def generate_image(self, prompt, *, aspect_ratio):
        return await self._respond("image", prompt, self.image_response, aspect_ratio=aspect_ratio)

    async def generate_audio(self, text, *, voice):
        return await self._respond("audio", text, self.audio_response, voice=voice)


class RecordingSink(WavMemorySink):
    """WAV sink that also remembers the narration state seen during playback."""

    def __init__(self) -> None:
        super().__init__()
        self.played = 0
        self.controller: Optional[NarrationController] = None
        self.states_during_play: List[str] = []

    async def play(self, buffer) -> None:
        if self.controller is not None:
            self.states_during_play.append(self.controller.state.value)
        self.played += 1
        await super().play(buffer)


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def pipeline(fake_backend: FakeBackend) -> GenerationPipeline:
    return GenerationPipeline(fake_backend)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def session(pipeline: GenerationPipeline, sink: RecordingSink) -> AnalysisSession:
    controller = NarrationController(sink)
    sink.controller = controller
    return AnalysisSession(pipeline, controller)
