"""Thin Google Gemini wrapper implementing the generative backend contract."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from google import genai
from google.genai import types

from bookinsight.application.interfaces import (
    BackendResponse,
    ContentPart,
    GenerativeBackend,
    GroundingChunk,
    InlineData,
    WebReference,
)
from bookinsight.config.settings import GeminiConfig, settings
from bookinsight.domain.errors import TransportError
from bookinsight.services.codec import encode_bytes

logger = logging.getLogger(__name__)


class GeminiBackend(GenerativeBackend):
    """Invoke Gemini models with the configured model names and options."""

    def __init__(
        self,
        config: GeminiConfig = settings.gemini,
        *,
        client: Optional[genai.Client] = None,
    ) -> None:
        self._config = config
        self._client = client or _create_client(config)

    async def generate_structured_analysis(
        self,
        prompt: str,
        *,
        schema: Mapping[str, Any],
        thinking_budget: int,
    ) -> BackendResponse:
        """Request schema-constrained JSON with Google Search grounding."""

        config = types.GenerateContentConfig(
            thinking_config=types.ThinkingConfig(thinking_budget=thinking_budget),
            tools=[types.Tool(google_search=types.GoogleSearch())],
            response_mime_type="application/json",
            response_schema=dict(schema),
        )
        return await self._generate(self._config.analysis_model, prompt, config)

    async def generate_image(self, prompt: str, *, aspect_ratio: str) -> BackendResponse:
        contents = types.Content(role="user", parts=[types.Part(text=prompt)])
        config = types.GenerateContentConfig(
            image_config=types.ImageConfig(aspect_ratio=aspect_ratio),
        )
        return await self._generate(self._config.image_model, contents, config)

    async def generate_audio(self, text: str, *, voice: str) -> BackendResponse:
        contents = [types.Content(role="user", parts=[types.Part(text=text)])]
        config = types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice),
                ),
            ),
        )
        return await self._generate(self._config.tts_model, contents, config)

    async def _generate(
        self,
        model: str,
        contents: Any,
        config: types.GenerateContentConfig,
    ) -> BackendResponse:
        try:
            response = await self._client.aio.models.generate_content(
                model=model,
                contents=contents,
                config=config,
            )
        except Exception as exc:
            logger.warning("Gemini call to %s failed: %s", model, exc)
            raise TransportError(f"Gemini request to {model} failed: {exc}") from exc

        return to_backend_response(response)


def _create_client(config: GeminiConfig) -> genai.Client:
    """Instantiate the SDK client from settings (falls back to SDK env lookup)."""

    api_key = config.api_key.get_secret_value() if config.api_key else None
    http_options = None
    if config.request_timeout_seconds:
        # The SDK expects milliseconds.
        http_options = types.HttpOptions(timeout=int(config.request_timeout_seconds * 1000))
    return genai.Client(api_key=api_key, http_options=http_options)


def to_backend_response(response: types.GenerateContentResponse) -> BackendResponse:
    """Flatten the first candidate of an SDK response into a neutral shape.

    The SDK hands inline data back as raw bytes; it is re-encoded as base64 so
    that callers see the payload exactly as it travels on the wire.
    """

    candidates = response.candidates or []
    if not candidates:
        return BackendResponse()
    candidate = candidates[0]

    parts: list[ContentPart] = []
    texts: list[str] = []
    sdk_parts = candidate.content.parts if candidate.content and candidate.content.parts else []
    for part in sdk_parts:
        inline = None
        if part.inline_data is not None and part.inline_data.data:
            inline = InlineData(
                mime_type=part.inline_data.mime_type or "application/octet-stream",
                data=encode_bytes(part.inline_data.data),
            )
        if part.text and not part.thought:
            texts.append(part.text)
        parts.append(ContentPart(text=part.text, inline_data=inline))

    chunks: list[GroundingChunk] = []
    metadata = candidate.grounding_metadata
    for chunk in (metadata.grounding_chunks or []) if metadata else []:
        web = None
        if chunk.web is not None:
            web = WebReference(title=chunk.web.title, uri=chunk.web.uri)
        chunks.append(GroundingChunk(web=web))

    return BackendResponse(
        text="".join(texts) or None,
        parts=tuple(parts),
        grounding_chunks=tuple(chunks),
    )


__all__ = ["GeminiBackend", "to_backend_response"]
