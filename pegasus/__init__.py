"""Top-level package for pegasus."""

__version__ = "0.1.0"

from . import app, config, inputs, llm, network, output, prompts, transcription

__all__ = ["app", "config", "inputs", "llm", "network", "output", "prompts", "transcription"]
