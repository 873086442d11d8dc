"""Pydantic models for Whisper JSON transcriptions.

Both the full Whisper output (segments with word-level probabilities) and the
simple ``{"text": ...}`` format are accepted. Extra keys such as timestamps and
token ids are ignored.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .inputs import InputError


class TranscriptionParseError(InputError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"Failed to parse Whisper transcription: {detail}")


class WhisperWord(BaseModel):
    """A single transcribed word with its confidence score."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str = Field(..., alias="word", description="Word text, may include a leading space")
    probability: float = Field(..., ge=0.0, le=1.0)


class WhisperSegment(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    words: List[WhisperWord] = Field(default_factory=list)


class WhisperTranscription(BaseModel):
    """Complete Whisper transcription."""

    model_config = ConfigDict(frozen=True)

    text: Optional[str] = None
    language: Optional[str] = None
    duration: Optional[float] = None
    segments: Optional[List[WhisperSegment]] = None

    def low_probability_words(self, threshold: float) -> List[WhisperWord]:
        """Return words scoring strictly below ``threshold``, in transcript order."""
        if not self.segments:
            return []
        return [
            word
            for segment in self.segments
            for word in segment.words
            if word.probability < threshold
        ]

    def word_count(self) -> int:
        if not self.segments:
            return 0
        return sum(len(segment.words) for segment in self.segments)

    def full_text(self) -> str:
        if self.text is not None:
            return self.text
        if self.segments is None:
            return ""
        return "\n".join(segment.text for segment in self.segments)

    def language_or_default(self) -> str:
        return self.language if self.language is not None else "unknown"

    def duration_or_default(self) -> float:
        return self.duration if self.duration is not None else 0.0


def parse_transcription(raw: str) -> WhisperTranscription:
    try:
        return WhisperTranscription.model_validate_json(raw)
    except ValidationError as exc:
        raise TranscriptionParseError(str(exc)) from exc
