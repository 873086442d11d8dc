"""Prompt construction for text refinement."""

from __future__ import annotations

from typing import List, Sequence

from .transcription import WhisperSegment, WhisperTranscription

_INSTRUCTIONS = (
    "You are a helpful assistant that refines transcribed text. Your task is to:\n"
    "1. Fix grammar, spelling, and punctuation errors\n"
    "2. Preserve the original meaning and intent of the text\n"
    "3. Maintain the original language\n"
    "4. Do not add commentary or explanations\n"
    "5. Only return the refined text, nothing else\n"
    "6. Preserve paragraph breaks and basic formatting"
)

_WHISPER_INSTRUCTIONS = (
    "\n7. Some words are followed by a [LOW PROBABILITY: X.XX] marker with the speech "
    "recognizer's confidence score. Treat these words as likely misrecognitions and "
    "replace them with the word that best fits the context; trust unmarked words\n"
    "8. Remove every [LOW PROBABILITY: X.XX] marker from the refined text"
)

_CLOSING = "\n\nReturn only the refined text without any additional commentary or formatting."


def _dictionary_section(dictionary_words: Sequence[str]) -> str:
    if not dictionary_words:
        return ""
    return (
        "\n\nUse the following dictionary terms correctly when they appear in the text:\n"
        + ", ".join(dictionary_words)
    )


def build_system_prompt(dictionary_words: Sequence[str]) -> str:
    return _INSTRUCTIONS + _dictionary_section(dictionary_words) + _CLOSING


def build_user_prompt(input_text: str) -> str:
    return f"Please refine the following transcribed text:\n\n{input_text}"


def build_whisper_system_prompt(dictionary_words: Sequence[str]) -> str:
    return _INSTRUCTIONS + _WHISPER_INSTRUCTIONS + _dictionary_section(dictionary_words) + _CLOSING


def build_whisper_user_prompt(transcription: WhisperTranscription, threshold: float) -> str:
    """Build the user prompt with low-probability words marked in place."""
    if transcription.segments:
        body = "\n".join(mark_low_probability_words(s, threshold) for s in transcription.segments)
    else:
        body = transcription.full_text()

    return (
        f"Detected language: {transcription.language_or_default()}\n"
        "Words followed by [LOW PROBABILITY: X.XX] were recognized with a confidence "
        f"below {threshold:.2f}.\n\n"
        f"Please refine the following transcribed text:\n\n{body}"
    )


def mark_low_probability_words(segment: WhisperSegment, threshold: float) -> str:
    """Annotate the words of ``segment`` scoring below ``threshold``.

    Words are located in the segment text in order, each search starting where
    the previous word ended, so only the occurrence belonging to a flagged word is
    annotated even if the same text appears elsewhere in the segment. Words that
    cannot be located are left unmarked.
    """
    text = segment.text
    pieces: List[str] = []
    cursor = 0
    for word in segment.words:
        token = word.text.strip()
        if not token:
            continue
        index = text.find(token, cursor)
        if index < 0:
            continue
        end = index + len(token)
        pieces.append(text[cursor:end])
        if word.probability < threshold:
            pieces.append(f" [LOW PROBABILITY: {word.probability:.2f}]")
        cursor = end
    pieces.append(text[cursor:])
    return "".join(pieces)
