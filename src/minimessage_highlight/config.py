"""User configuration: load and validate config.toml."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from minimessage_highlight.extract import FORMATS
from minimessage_highlight.render import DEFAULT_MARKUP_STYLE


class ConfigError(Exception):
    """Raised when config.toml is malformed or holds invalid values."""


@dataclass
class Settings:
    """Highlighter settings from config.toml."""

    show_markup: bool = True
    markup_style: str = DEFAULT_MARKUP_STYLE
    formats: list[str] = field(default_factory=lambda: list(FORMATS))
    extensions: dict[str, str] = field(default_factory=dict)  # suffix → format


def get_config_path() -> Path:
    """Return the path to config.toml, respecting XDG_CONFIG_HOME."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "minimessage-highlight" / "config.toml"


def _check_type(path: Path, key: str, value: Any, expected: type) -> None:  # noqa: ANN401
    if not isinstance(value, expected):
        msg = f"'{key}' in {path} must be a {expected.__name__}, got {type(value).__name__}"
        raise ConfigError(msg)


def _check_format(path: Path, key: str, fmt: Any) -> None:  # noqa: ANN401
    if fmt not in FORMATS:
        msg = f"'{key}' in {path} names unknown format {fmt!r} (expected one of {FORMATS})"
        raise ConfigError(msg)


def load_settings(path: Path) -> Settings:
    """Load and validate settings from a TOML file.

    Returns defaults if the file does not exist.
    Raises ConfigError on parse errors or invalid values.
    """
    if not path.exists():
        return Settings()

    try:
        data = tomllib.loads(path.read_text())
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {path}: {e}"
        raise ConfigError(msg) from e

    settings = Settings()
    highlight = data.get("highlight", {})
    _check_type(path, "highlight", highlight, dict)
    if "show_markup" in highlight:
        _check_type(path, "highlight.show_markup", highlight["show_markup"], bool)
        settings.show_markup = highlight["show_markup"]
    if "markup_style" in highlight:
        _check_type(path, "highlight.markup_style", highlight["markup_style"], str)
        settings.markup_style = highlight["markup_style"]
    if "formats" in highlight:
        _check_type(path, "highlight.formats", highlight["formats"], list)
        for fmt in highlight["formats"]:
            _check_format(path, "highlight.formats", fmt)
        settings.formats = list(highlight["formats"])

    extensions = data.get("extensions", {})
    _check_type(path, "extensions", extensions, dict)
    for suffix, fmt in extensions.items():
        _check_format(path, f"extensions.{suffix}", fmt)
        normalized = suffix.lower() if suffix.startswith(".") else f".{suffix.lower()}"
        settings.extensions[normalized] = fmt
    return settings
