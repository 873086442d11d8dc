"""Rendering refined text for stdout."""

from __future__ import annotations

import json
from enum import Enum


class OutputFormatError(RuntimeError):
    """Raised when refined text cannot be rendered."""


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"

    @classmethod
    def from_flags(cls, output_json: bool) -> "OutputFormat":
        return cls.JSON if output_json else cls.TEXT


def format_output(text: str, output_format: OutputFormat) -> str:
    if output_format is OutputFormat.TEXT:
        return text
    try:
        return json.dumps({"text": text}, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        raise OutputFormatError(f"Failed to serialize output: {exc}") from exc
