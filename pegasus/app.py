"""Refinement workflows tying input, prompts, the LLM and output together."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

import httpx

from .inputs import InputError, load_dictionary, read_input
from .llm import LLMClient, LLMError
from .log import get_logger
from .models import Config
from .output import OutputFormat, OutputFormatError, format_output
from .transcription import parse_transcription


class AppError(RuntimeError):
    """A terminal failure of a refinement workflow, tagged with its stage."""

    def __init__(self, category: str, message: str) -> None:
        self.category = category
        self.message = message
        super().__init__(f"{category} Error: {message}")


class App:
    """Run one refinement per call using the loaded configuration."""

    def __init__(
        self,
        config: Config,
        logger: Optional[logging.Logger] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.config = config
        self.logger = logger or get_logger()
        self.llm = LLMClient(
            base_url=config.llm_url,
            model=config.llm_model,
            api_key=config.llm_api_key,
            timeout=config.llm_timeout,
            logger=self.logger,
            transport=transport,
        )

    def refine_text(
        self,
        input_text: Optional[str],
        file_path: Optional[Union[str, Path]],
        output_format: OutputFormat = OutputFormat.TEXT,
    ) -> str:
        try:
            text = read_input(input_text, file_path)
        except InputError as exc:
            raise AppError("Input", str(exc)) from exc
        dictionary = self._load_dictionary()

        try:
            refined = self.llm.refine_text(text, dictionary)
        except LLMError as exc:
            raise AppError("LLM", str(exc)) from exc
        return self._format(refined, output_format)

    def refine_whisper_transcription(
        self,
        input_text: Optional[str],
        file_path: Optional[Union[str, Path]],
        output_format: OutputFormat = OutputFormat.TEXT,
        threshold: Optional[float] = None,
    ) -> str:
        """Refine Whisper JSON, flagging words below ``threshold`` to the model."""
        try:
            raw = read_input(input_text, file_path)
            transcription = parse_transcription(raw)
        except InputError as exc:
            raise AppError("Input", str(exc)) from exc
        self.logger.debug(
            "Parsed transcription: language=%s duration=%.2fs words=%d",
            transcription.language_or_default(),
            transcription.duration_or_default(),
            transcription.word_count(),
        )
        dictionary = self._load_dictionary()

        if threshold is None:
            threshold = self.config.probability_threshold
        try:
            refined = self.llm.refine_whisper_transcription(transcription, dictionary, threshold)
        except LLMError as exc:
            raise AppError("LLM", str(exc)) from exc
        return self._format(refined, output_format)

    def _load_dictionary(self) -> List[str]:
        path = self.config.custom_dictionary_path
        try:
            words = load_dictionary(path)
        except InputError as exc:
            raise AppError("Input", str(exc)) from exc
        if path:
            self.logger.debug("Loaded %d dictionary terms from %s", len(words), path)
        return words

    def _format(self, refined: str, output_format: OutputFormat) -> str:
        try:
            return format_output(refined, output_format)
        except OutputFormatError as exc:
            raise AppError("Refinement", str(exc)) from exc
