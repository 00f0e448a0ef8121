"""Prompt templates for the three backend stages."""

from __future__ import annotations

from typing import Final

from bookinsight.domain.models import BookRequest

ANALYSIS_PROMPT_TEMPLATE: Final[str] = (
    "Create a professional 'Pro Version' analysis of the book \"{title}\" by {author}.\n"
    "Focus on executive-level insights, conceptual architecture, and actionable intelligence.\n"
    "Use thinking to ensure deep historical and contemporary accuracy."
)

IMAGE_PROMPT_TEMPLATE: Final[str] = (
    "A high-end, professional concept art illustration of: {prompt}. "
    "Cinematic lighting, 8k, elegant design."
)

NARRATION_PROMPT_TEMPLATE: Final[str] = (
    "Narrate this book brief professionally and calmly: {text}"
)


def build_analysis_prompt(request: BookRequest) -> str:
    return ANALYSIS_PROMPT_TEMPLATE.format(title=request.title, author=request.author)


def build_image_prompt(visual_prompt: str) -> str:
    return IMAGE_PROMPT_TEMPLATE.format(prompt=visual_prompt.strip())


def build_narration_prompt(text: str) -> str:
    return NARRATION_PROMPT_TEMPLATE.format(text=text.strip())


__all__ = [
    "ANALYSIS_PROMPT_TEMPLATE",
    "IMAGE_PROMPT_TEMPLATE",
    "NARRATION_PROMPT_TEMPLATE",
    "build_analysis_prompt",
    "build_image_prompt",
    "build_narration_prompt",
]
