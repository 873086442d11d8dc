import json

from pegasus.prompts import (
    build_system_prompt,
    build_user_prompt,
    build_whisper_system_prompt,
    build_whisper_user_prompt,
    mark_low_probability_words,
)
from pegasus.transcription import WhisperSegment, WhisperWord, parse_transcription


def _segment(text, words):
    return WhisperSegment(
        text=text,
        words=[WhisperWord(text=w, probability=p) for w, p in words],
    )


def test_system_prompt_without_dictionary():
    prompt = build_system_prompt([])
    assert "Fix grammar, spelling, and punctuation" in prompt
    assert "original language" in prompt
    assert "Return only the refined text" in prompt
    assert "dictionary" not in prompt


def test_system_prompt_lists_dictionary_terms():
    prompt = build_system_prompt(["Kubernetes", "httpx"])
    assert "Use the following dictionary terms correctly" in prompt
    assert "Kubernetes, httpx" in prompt
    assert prompt.rstrip().endswith("without any additional commentary or formatting.")


def test_user_prompt_embeds_text():
    assert build_user_prompt("helo wrld").endswith("\n\nhelo wrld")


def test_whisper_system_prompt_mentions_markers_and_dictionary():
    prompt = build_whisper_system_prompt(["Pegasus"])
    assert "[LOW PROBABILITY: X.XX]" in prompt
    assert "Pegasus" in prompt


def test_marks_low_probability_word_with_two_decimals():
    segment = _segment(" I love pie thon", [(" I", 0.99), (" love", 0.95), (" pie", 0.234), (" thon", 0.8)])
    assert mark_low_probability_words(segment, 0.5) == " I love pie [LOW PROBABILITY: 0.23] thon"


def test_marks_only_the_flagged_occurrence_of_a_repeated_word():
    segment = _segment("the cat saw the dog", [
        ("the", 0.99), ("cat", 0.9), ("saw", 0.9), ("the", 0.2), ("dog", 0.9),
    ])
    assert mark_low_probability_words(segment, 0.5) == (
        "the cat saw the [LOW PROBABILITY: 0.20] dog"
    )


def test_does_not_mark_substrings_of_earlier_words():
    segment = _segment("there is the end", [
        ("there", 0.9), ("is", 0.9), ("the", 0.1), ("end", 0.9),
    ])
    assert mark_low_probability_words(segment, 0.5) == (
        "there is the [LOW PROBABILITY: 0.10] end"
    )


def test_unlocatable_word_is_left_unmarked():
    segment = _segment("hello world", [("hello", 0.9), ("planet", 0.1), ("world", 0.9)])
    assert mark_low_probability_words(segment, 0.5) == "hello world"


def test_whisper_user_prompt_has_header_and_joined_segments():
    payload = {
        "language": "de",
        "segments": [
            {"text": "Guten Tag", "words": [{"word": "Guten", "probability": 0.9}, {"word": " Tag", "probability": 0.4}]},
            {"text": "wie geht's", "words": [{"word": "wie", "probability": 0.9}, {"word": " geht's", "probability": 0.9}]},
        ],
    }
    prompt = build_whisper_user_prompt(parse_transcription(json.dumps(payload)), 0.5)
    assert prompt.startswith("Detected language: de\n")
    assert "below 0.50" in prompt
    assert prompt.endswith("Guten Tag [LOW PROBABILITY: 0.40]\nwie geht's")


def test_whisper_user_prompt_falls_back_to_full_text():
    prompt = build_whisper_user_prompt(parse_transcription('{"text": "plain text"}'), 0.5)
    assert prompt.startswith("Detected language: unknown\n")
    assert prompt.endswith("\n\nplain text")
