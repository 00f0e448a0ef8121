from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import numpy as np
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from bookinsight.domain.errors import PlaybackError, ValidationError

MISSING_BOOK_MESSAGE = "Please enter both title and author."


class BookRequest(BaseModel):
    """Book identity submitted by the user"""

    title: str = Field(min_length=1)
    author: str = Field(min_length=1)

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @classmethod
    def create(cls, title: str | None, author: str | None) -> "BookRequest":
        """Build a request, rejecting blank titles or authors."""

        try:
            return cls(title=title or "", author=author or "")
        except PydanticValidationError as exc:
            raise ValidationError(MISSING_BOOK_MESSAGE) from exc


class GroundingSource(BaseModel):
    """Web reference cited by the backend to support the analysis"""

    title: str
    uri: str

    model_config = ConfigDict(frozen=True)


@dataclass(frozen=True, eq=False)
class PcmAudioBuffer:
    """Decoded narration audio, addressable by frame and playable once."""

    sample_rate: int
    channel_count: int
    samples: tuple[np.ndarray, ...]
    _claims: List[bool] = field(default_factory=list, init=False, repr=False)

    @property
    def frame_count(self) -> int:
        return int(self.samples[0].shape[0]) if self.samples else 0

    @property
    def duration_seconds(self) -> float:
        return self.frame_count / float(self.sample_rate)

    @property
    def consumed(self) -> bool:
        return bool(self._claims)

    def channel(self, index: int) -> np.ndarray:
        return self.samples[index]

    def claim(self) -> tuple[np.ndarray, ...]:
        """Hand the samples to a player; a buffer can only be played once."""

        if self._claims:
            raise PlaybackError("Audio buffer has already been played.")
        self._claims.append(True)
        return self.samples


__all__ = ["BookRequest", "GroundingSource", "PcmAudioBuffer", "MISSING_BOOK_MESSAGE"]
