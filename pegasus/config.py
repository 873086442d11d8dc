"""Persisted configuration management."""

from __future__ import annotations

import tomllib
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar

import tomli_w
import typer

from .models import Config, GeneralConfig, LLMConfig

APP_NAME = "pegasus"
CONFIG_PATH = Path(typer.get_app_dir(APP_NAME)) / "config.toml"

_FLOAT_KEYS = {"timeout", "probability_threshold"}

SectionT = TypeVar("SectionT", LLMConfig, GeneralConfig)


class ConfigError(RuntimeError):
    """Raised when configuration cannot be loaded or saved."""


class ConfigFileReadError(ConfigError):
    def __init__(self, detail: str) -> None:
        super().__init__(
            f"Cannot read configuration file: '{detail}'. "
            "Please check file permissions and ensure the file exists."
        )


class ConfigParseError(ConfigError):
    def __init__(self, detail: str) -> None:
        super().__init__(
            f"Configuration file is invalid: '{detail}'. "
            "Please check the syntax and ensure all required fields are present."
        )


def load_config(path: Optional[Path] = None) -> Config:
    path = path or CONFIG_PATH
    if not path.exists():
        return Config.defaults()
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigFileReadError(str(exc)) from exc
    try:
        payload = tomllib.loads(content)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigParseError(str(exc)) from exc

    unknown = set(payload) - {"llm", "general"}
    if unknown:
        raise ConfigParseError(f"Unknown configuration section: {sorted(unknown)[0]}")
    return Config(
        llm=_load_section(LLMConfig, "llm", payload),
        general=_load_section(GeneralConfig, "general", payload),
    )


def save_config(config: Config, path: Optional[Path] = None) -> None:
    path = path or CONFIG_PATH
    data = {
        section: {k: v for k, v in values.items() if v is not None}
        for section, values in asdict(config).items()
    }
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(tomli_w.dumps(data), encoding="utf-8")
    except OSError as exc:
        raise ConfigFileReadError(str(exc)) from exc


def reset_config(path: Optional[Path] = None) -> Config:
    config = Config.defaults()
    save_config(config, path)
    return config


def _load_section(cls: Type[SectionT], name: str, payload: Dict[str, Any]) -> SectionT:
    section = payload.get(name, {})
    if not isinstance(section, dict):
        raise ConfigParseError(f"[{name}] must be a table")

    known = {f.name for f in fields(cls)}
    values: Dict[str, Any] = {}
    for key, value in section.items():
        if key not in known:
            raise ConfigParseError(f"Unknown configuration key: {name}.{key}")
        if key in _FLOAT_KEYS:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigParseError(f"{name}.{key} must be a number")
            value = float(value)
        elif not isinstance(value, str):
            raise ConfigParseError(f"{name}.{key} must be a string")
        values[key] = value
    return cls(**values)
