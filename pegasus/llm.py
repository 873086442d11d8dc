"""Text refinement through OpenAI-compatible chat-completion services."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

import httpx
from pydantic import BaseModel

from .log import get_logger
from .models import DEFAULT_LLM_TIMEOUT
from .network import HttpClient, NetworkError
from .prompts import (
    build_system_prompt,
    build_user_prompt,
    build_whisper_system_prompt,
    build_whisper_user_prompt,
)
from .transcription import WhisperTranscription

CHAT_COMPLETIONS_ENDPOINT = "v1/chat/completions"


class LLMError(RuntimeError):
    """Raised when the language model cannot produce a refinement."""


class ApiRequestFailedError(LLMError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"LLM API request failed: {detail}")


class InvalidResponseError(LLMError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid API response: {detail}")


class RefinementFailedError(LLMError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"Text refinement failed: {detail}")


class ChatMessage(BaseModel):
    role: str
    content: str


class ChatCompletionRequest(BaseModel):
    model: str
    messages: List[ChatMessage]


class ResponseMessage(BaseModel):
    content: Optional[str] = None


class Choice(BaseModel):
    message: ResponseMessage


class ChatCompletionResponse(BaseModel):
    choices: List[Choice]


class LLMClient:
    """Refine transcribed text with a chat-completion model."""

    def __init__(
        self,
        base_url: str,
        model: str,
        api_key: str = "",
        timeout: float = DEFAULT_LLM_TIMEOUT,
        logger: Optional[logging.Logger] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url
        self.model = model
        self.api_key = api_key
        self.logger = logger or get_logger("llm")
        self._http = HttpClient(base_url, timeout=timeout, logger=self.logger, transport=transport)

    def refine_text(self, input_text: str, dictionary_words: Sequence[str]) -> str:
        self.logger.debug("Preparing LLM request for text refinement")
        refined = self._execute_refinement(
            build_system_prompt(dictionary_words),
            build_user_prompt(input_text),
        )
        self.logger.debug("Text refinement completed successfully")
        return refined

    def refine_whisper_transcription(
        self,
        transcription: WhisperTranscription,
        dictionary_words: Sequence[str],
        probability_threshold: float,
    ) -> str:
        """Refine a Whisper transcription with its low-confidence words flagged."""
        self.logger.debug("Preparing LLM request for Whisper transcription refinement")
        self.logger.debug(
            "Low probability threshold: %s, words flagged: %d of %d",
            probability_threshold,
            len(transcription.low_probability_words(probability_threshold)),
            transcription.word_count(),
        )
        refined = self._execute_refinement(
            build_whisper_system_prompt(dictionary_words),
            build_whisper_user_prompt(transcription, probability_threshold),
        )
        self.logger.debug("Whisper transcription refinement completed successfully")
        return refined

    def _execute_refinement(self, system_prompt: str, user_prompt: str) -> str:
        request = ChatCompletionRequest(
            model=self.model,
            messages=[
                ChatMessage(role="system", content=system_prompt),
                ChatMessage(role="user", content=user_prompt),
            ],
        )

        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
            self.logger.debug("Using API key authentication")

        try:
            completion = self._http.post_with_json(
                request,
                CHAT_COMPLETIONS_ENDPOINT,
                headers=headers or None,
                response_model=ChatCompletionResponse,
            )
        except NetworkError as exc:
            raise ApiRequestFailedError(str(exc)) from exc

        if not completion.choices:
            raise InvalidResponseError("No choices in response")
        refined = (completion.choices[0].message.content or "").strip()
        if not refined:
            raise RefinementFailedError("LLM returned empty content")
        return refined
