"""Dataclasses describing the persisted configuration for pegasus."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

DEFAULT_LLM_URL = "http://127.0.0.1:8080"
DEFAULT_LLM_MODEL = "default"
DEFAULT_LLM_TIMEOUT = 120.0
DEFAULT_PROBABILITY_THRESHOLD = 0.5


@dataclass(frozen=True, slots=True)
class LLMConfig:
    """Settings for the chat-completions service."""

    url: Optional[str] = None
    model: Optional[str] = None
    api_key: Optional[str] = None
    timeout: Optional[float] = None


@dataclass(frozen=True, slots=True)
class GeneralConfig:
    """Settings affecting overall refinement behaviour."""

    custom_dictionary_path: Optional[str] = None
    probability_threshold: Optional[float] = None


@dataclass(frozen=True, slots=True)
class Config:
    """User configuration stored on disk.

    Absent fields stay ``None`` and are resolved to their defaults by the
    accessors below, so a partially filled file behaves like the full default.
    """

    llm: LLMConfig = field(default_factory=LLMConfig)
    general: GeneralConfig = field(default_factory=GeneralConfig)

    @classmethod
    def defaults(cls) -> "Config":
        return cls(
            llm=LLMConfig(url=DEFAULT_LLM_URL),
            general=GeneralConfig(custom_dictionary_path=""),
        )

    @property
    def llm_url(self) -> str:
        return self.llm.url if self.llm.url is not None else DEFAULT_LLM_URL

    @property
    def llm_model(self) -> str:
        return self.llm.model or DEFAULT_LLM_MODEL

    @property
    def llm_api_key(self) -> str:
        return self.llm.api_key or ""

    @property
    def llm_timeout(self) -> float:
        return self.llm.timeout if self.llm.timeout is not None else DEFAULT_LLM_TIMEOUT

    @property
    def custom_dictionary_path(self) -> str:
        return self.general.custom_dictionary_path or ""

    @property
    def probability_threshold(self) -> float:
        if self.general.probability_threshold is None:
            return DEFAULT_PROBABILITY_THRESHOLD
        return self.general.probability_threshold
