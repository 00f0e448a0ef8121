"""Generation pipeline package.

Modules are organised by the order in which a submission executes:

1. `analysis` – structured, web-grounded analysis plus citation extraction.
2. `imagery` – concept art derived from the analysis' visual metaphor.
3. `narration` – on-demand narrated brief decoded from raw PCM.
4. `flow` – the stage graph and its dependency ledger.
5. `pipeline` – the orchestrator the session drives.
"""

from .analysis import extract_grounding_sources, run_analysis
from .flow import (
    ANALYSIS_STAGE,
    IMAGE_STAGE,
    NARRATION_STAGE,
    GenerationFlow,
    PipelineStage,
    StageDependency,
    StageLedger,
)
from .imagery import run_image_generation
from .narration import run_audio_narration
from .pipeline import GenerationPipeline
from .types import AnalysisOutcome, GenerationOutcome

__all__ = [
    "ANALYSIS_STAGE",
    "IMAGE_STAGE",
    "NARRATION_STAGE",
    "AnalysisOutcome",
    "GenerationFlow",
    "GenerationOutcome",
    "GenerationPipeline",
    "PipelineStage",
    "StageDependency",
    "StageLedger",
    "extract_grounding_sources",
    "run_analysis",
    "run_audio_narration",
    "run_image_generation",
]
