"""Concept art stage (Stage 02) of the generation pipeline."""

from __future__ import annotations

from bookinsight.application.interfaces import GenerativeBackend
from bookinsight.domain.errors import NoImageError

from .prompts import build_image_prompt

IMAGE_URI_PREFIX = "data:image/png;base64,"


async def run_image_generation(
    backend: GenerativeBackend,
    visual_prompt: str,
    *,
    aspect_ratio: str,
) -> str:
    """Return the first inline image of the response as a PNG data URI."""

    response = await backend.generate_image(
        build_image_prompt(visual_prompt),
        aspect_ratio=aspect_ratio,
    )
    for part in response.parts:
        if part.inline_data is not None:
            return f"{IMAGE_URI_PREFIX}{part.inline_data.data}"
    raise NoImageError("No image generated")


__all__ = ["IMAGE_URI_PREFIX", "run_image_generation"]
