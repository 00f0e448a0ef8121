"""Stage graph for the generation pipeline.

Each backend round-trip is a :class:`PipelineStage`. A stage that consumes
another stage's output declares it through :class:`StageDependency`, naming
both the upstream stage and the attribute it reads:

1. ``analysis`` – structured, web-grounded book analysis.
2. ``image`` – concept art; reads ``analysis.result.visual_metaphor_prompt``.
3. ``narration`` – on-demand audio brief; reads ``analysis.result.executive_summary``.

:class:`StageLedger` records the outputs of completed stages for one run and
refuses to hand an input to a stage whose upstream has not succeeded yet.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from bookinsight.domain.errors import StageOrderError


@dataclass(frozen=True)
class StageDependency:
    """Dotted attribute path into an upstream stage's output."""

    stage: str
    field: str


@dataclass(frozen=True)
class PipelineStage:
    """Human-readable description of one stage in the generation pipeline."""

    order: int
    name: str
    summary: str
    depends_on: Optional[StageDependency] = None
    on_demand: bool = False


ANALYSIS_STAGE = PipelineStage(
    1,
    "analysis",
    "Request schema-constrained JSON with Google Search grounding and extract web citations.",
)
IMAGE_STAGE = PipelineStage(
    2,
    "image",
    "Render 16:9 concept art from the analysis' visual metaphor prompt.",
    depends_on=StageDependency("analysis", "result.visual_metaphor_prompt"),
)
NARRATION_STAGE = PipelineStage(
    3,
    "narration",
    "Synthesize a narrated brief of the executive summary (triggered on demand).",
    depends_on=StageDependency("analysis", "result.executive_summary"),
    on_demand=True,
)


class StageLedger:
    """Outputs of the stages that completed during one pipeline run."""

    def __init__(self) -> None:
        self._outputs: Dict[str, Any] = {}

    def record(self, stage: PipelineStage, output: Any) -> None:
        self._outputs[stage.name] = output

    def completed(self, stage: PipelineStage) -> bool:
        return stage.name in self._outputs

    def output(self, stage: PipelineStage) -> Any:
        if stage.name not in self._outputs:
            raise StageOrderError(f"Stage '{stage.name}' has not completed.")
        return self._outputs[stage.name]

    def resolve(self, stage: PipelineStage) -> Any:
        """Return the input ``stage`` declared, or raise if it is not available yet."""

        dependency = stage.depends_on
        if dependency is None:
            return None
        if dependency.stage not in self._outputs:
            raise StageOrderError(
                f"Stage '{stage.name}' requires '{dependency.stage}' to complete first."
            )
        value = self._outputs[dependency.stage]
        try:
            for attribute in dependency.field.split("."):
                value = getattr(value, attribute)
        except AttributeError as exc:
            raise StageOrderError(
                f"Stage '{dependency.stage}' output has no field '{dependency.field}'."
            ) from exc
        return value


class GenerationFlow:
    """Ordered view over the stage graph."""

    _STAGES: List[PipelineStage] = [ANALYSIS_STAGE, IMAGE_STAGE, NARRATION_STAGE]

    @classmethod
    def describe(cls) -> Iterable[PipelineStage]:
        """Expose the ordered list of stages for debugging and documentation."""

        return tuple(cls._STAGES)

    @classmethod
    def main_sequence(cls) -> Iterable[PipelineStage]:
        """Stages run on every submission (on-demand stages excluded)."""

        return tuple(stage for stage in cls._STAGES if not stage.on_demand)


__all__ = [
    "ANALYSIS_STAGE",
    "IMAGE_STAGE",
    "NARRATION_STAGE",
    "GenerationFlow",
    "PipelineStage",
    "StageDependency",
    "StageLedger",
]
