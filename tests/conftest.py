"""Shared fixtures: sample documents and an isolated config directory."""

from __future__ import annotations

import textwrap
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from pathlib import Path

SAMPLE_JSON = textwrap.dedent("""\
    {
      "greeting": "<red>Hello</red> <bold>world</bold>",
      "count": 3,
      "lines": ["<gradient:#FF0000:#0000FF>AB</gradient>", "plain"]
    }
    """)

SAMPLE_TOML = textwrap.dedent("""\
    title = "<gold>Title</gold>"

    [server]
    motd = '<rainbow>Welcome</rainbow>'
    """)

SAMPLE_YAML = textwrap.dedent("""\
    greeting: "<red>Hello</red>"
    farewell: <italic>bye</italic>
    """)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Point XDG_CONFIG_HOME at an empty temp dir so user config never leaks in."""
    config_home = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home


@pytest.fixture
def json_file(tmp_path: Path) -> Path:
    path = tmp_path / "messages.json"
    path.write_text(SAMPLE_JSON)
    return path


@pytest.fixture
def toml_file(tmp_path: Path) -> Path:
    path = tmp_path / "messages.toml"
    path.write_text(SAMPLE_TOML)
    return path


@pytest.fixture
def yaml_file(tmp_path: Path) -> Path:
    path = tmp_path / "messages.yml"
    path.write_text(SAMPLE_YAML)
    return path
