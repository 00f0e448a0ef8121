"""Orchestrator that runs the stage graph against a generative backend."""

from __future__ import annotations

import logging
import time
from typing import Any, Awaitable, Callable, Dict, Iterable, TypeVar

from bookinsight.application.interfaces import GenerativeBackend
from bookinsight.config.settings import GeminiConfig, NarrationConfig, settings
from bookinsight.domain.models import BookRequest, PcmAudioBuffer
from bookinsight.services.response_contract import AnalysisResult
from bookinsight.telemetry import observe_stage

from .analysis import run_analysis
from .flow import (
    ANALYSIS_STAGE,
    IMAGE_STAGE,
    NARRATION_STAGE,
    GenerationFlow,
    PipelineStage,
    StageLedger,
)
from .imagery import run_image_generation
from .narration import run_audio_narration
from .types import AnalysisOutcome, GenerationOutcome

logger = logging.getLogger("bookinsight.pipeline")

T = TypeVar("T")


class GenerationPipeline:
    """Run analysis → image for a book, and narration on demand."""

    def __init__(
        self,
        backend: GenerativeBackend,
        *,
        gemini: GeminiConfig = settings.gemini,
        narration: NarrationConfig = settings.narration,
    ) -> None:
        self._backend = backend
        self._gemini = gemini
        self._narration = narration

    @staticmethod
    def describe() -> Iterable[PipelineStage]:
        return GenerationFlow.describe()

    async def run_analysis(self, request: BookRequest) -> AnalysisOutcome:
        return await run_analysis(
            self._backend,
            request,
            thinking_budget=self._gemini.thinking_budget,
        )

    async def run_image_generation(self, visual_prompt: str) -> str:
        return await run_image_generation(
            self._backend,
            visual_prompt,
            aspect_ratio=self._gemini.image_aspect_ratio,
        )

    async def run_audio_narration(self, text: str) -> PcmAudioBuffer:
        return await run_audio_narration(
            self._backend,
            text,
            voice=self._gemini.voice_name,
            sample_rate=self._narration.sample_rate,
            channel_count=self._narration.channel_count,
        )

    async def generate(self, request: BookRequest) -> GenerationOutcome:
        """Run the main sequence; nothing is returned unless every stage succeeded."""

        runners: Dict[str, Callable[[Any], Awaitable[Any]]] = {
            ANALYSIS_STAGE.name: self.run_analysis,
            IMAGE_STAGE.name: self.run_image_generation,
        }
        ledger = StageLedger()
        for stage in GenerationFlow.main_sequence():
            argument = request if stage.depends_on is None else ledger.resolve(stage)
            output = await self._run_stage(stage, runners[stage.name], argument)
            ledger.record(stage, output)

        analysis: AnalysisOutcome = ledger.output(ANALYSIS_STAGE)
        return GenerationOutcome(
            request=request,
            analysis=analysis.result,
            image_uri=ledger.output(IMAGE_STAGE),
            sources=analysis.sources,
        )

    async def narrate(self, analysis: AnalysisResult) -> PcmAudioBuffer:
        """Narrate the executive summary of an already validated analysis."""

        ledger = StageLedger()
        ledger.record(ANALYSIS_STAGE, AnalysisOutcome(result=analysis))
        summary = ledger.resolve(NARRATION_STAGE)
        return await self._run_stage(NARRATION_STAGE, self.run_audio_narration, summary)

    async def _run_stage(
        self,
        stage: PipelineStage,
        call: Callable[[Any], Awaitable[T]],
        argument: Any,
    ) -> T:
        started = time.perf_counter()
        logger.info("Stage %s (%s) started", stage.order, stage.name)
        try:
            result = await call(argument)
        except Exception as exc:
            elapsed = time.perf_counter() - started
            observe_stage(stage.name, type(exc).__name__, elapsed)
            logger.warning(
                "Stage %s (%s) failed after %.2fs: %s",
                stage.order,
                stage.name,
                elapsed,
                exc,
            )
            raise

        elapsed = time.perf_counter() - started
        observe_stage(stage.name, "success", elapsed)
        logger.info("Stage %s (%s) finished in %.2fs", stage.order, stage.name, elapsed)
        return result


__all__ = ["GenerationPipeline"]
