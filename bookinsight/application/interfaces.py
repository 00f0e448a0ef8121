from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from bookinsight.domain.models import PcmAudioBuffer


@dataclass(frozen=True)
class InlineData:
    """Binary payload carried inside a content part (base64 text)."""

    mime_type: str
    data: str


@dataclass(frozen=True)
class ContentPart:
    text: Optional[str] = None
    inline_data: Optional[InlineData] = None


@dataclass(frozen=True)
class WebReference:
    title: Optional[str]
    uri: Optional[str]


@dataclass(frozen=True)
class GroundingChunk:
    """Citation entry; only web-backed chunks carry a ``web`` reference."""

    web: Optional[WebReference] = None


@dataclass(frozen=True)
class BackendResponse:
    """Provider-neutral view of a single generation response."""

    text: Optional[str] = None
    parts: Tuple[ContentPart, ...] = ()
    grounding_chunks: Tuple[GroundingChunk, ...] = ()


class GenerativeBackend(ABC):
    """Contract for the generative service used by the pipeline"""

    @abstractmethod
    async def generate_structured_analysis(
        self,
        prompt: str,
        *,
        schema: Mapping[str, Any],
        thinking_budget: int,
    ) -> BackendResponse:
        ...

    @abstractmethod
    async def generate_image(self, prompt: str, *, aspect_ratio: str) -> BackendResponse:
        ...

    @abstractmethod
    async def generate_audio(self, text: str, *, voice: str) -> BackendResponse:
        ...


class AudioSink(ABC):
    """Destination that consumes a narration buffer"""

    @abstractmethod
    async def play(self, buffer: PcmAudioBuffer) -> None:
        ...
