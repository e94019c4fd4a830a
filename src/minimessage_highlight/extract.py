"""Locate markup-bearing string literals in JSON, TOML and YAML documents."""

from __future__ import annotations

import json
import logging
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import PurePath

import yaml

logger = logging.getLogger(__name__)

FORMATS = ("json", "toml", "yaml")

DEFAULT_EXTENSIONS: dict[str, str] = {
    ".json": "json",
    ".toml": "toml",
    ".yaml": "yaml",
    ".yml": "yaml",
}

_YAML_STR_TAG = "tag:yaml.org,2002:str"
_TOML_BARE_KEY = re.compile(r"[A-Za-z0-9_-]*")
_YAML_NODE_PROPERTIES = re.compile(r"(?:[&!]\S*\s+)*")


class DocumentError(Exception):
    """Raised when a document cannot be read as the requested format."""


@dataclass(frozen=True)
class StringLiteral:
    """A string literal's raw body and where it sits in the document.

    ``document[content_start:content_end] == content``; escape sequences are
    left as written so offsets map one-to-one.
    """

    content: str
    content_start: int
    content_end: int
    path: tuple[str, ...] = field(default_factory=tuple)

    @property
    def dotted_path(self) -> str:
        return ".".join(self.path)


def detect_format(path: str | PurePath, extensions: dict[str, str] | None = None) -> str | None:
    """Guess a document format from its file suffix."""
    mapping = {**DEFAULT_EXTENSIONS, **(extensions or {})}
    return mapping.get(PurePath(path).suffix.lower())


# --- JSON ---


class _JsonScanner:
    """Recursive-descent walk over already-validated JSON, tracking offsets."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.index = 0
        self.found: list[StringLiteral] = []

    def skip_whitespace(self) -> None:
        while self.index < len(self.text) and self.text[self.index] in " \t\r\n":
            self.index += 1

    def read_string(self) -> tuple[int, int]:
        """Consume a string token; return its body's ``(start, end)``."""
        start = self.index + 1
        index = start
        while self.text[index] != '"':
            index += 2 if self.text[index] == "\\" else 1
        self.index = index + 1
        return start, index

    def scan_value(self, path: tuple[str, ...]) -> None:
        self.skip_whitespace()
        char = self.text[self.index]
        if char == '"':
            start, end = self.read_string()
            self.found.append(StringLiteral(self.text[start:end], start, end, path))
        elif char == "{":
            self.scan_object(path)
        elif char == "[":
            self.scan_array(path)
        else:
            # Number, true, false or null.
            while self.index < len(self.text) and self.text[self.index] not in ",]} \t\r\n":
                self.index += 1

    def scan_object(self, path: tuple[str, ...]) -> None:
        self.index += 1
        self.skip_whitespace()
        while self.text[self.index] != "}":
            start, end = self.read_string()
            key = json.loads(self.text[start - 1 : end + 1])
            self.skip_whitespace()
            self.index += 1  # ":"
            self.scan_value((*path, key))
            self.skip_whitespace()
            if self.text[self.index] == ",":
                self.index += 1
                self.skip_whitespace()
        self.index += 1

    def scan_array(self, path: tuple[str, ...]) -> None:
        self.index += 1
        self.skip_whitespace()
        position = 0
        while self.text[self.index] != "]":
            self.scan_value((*path, str(position)))
            position += 1
            self.skip_whitespace()
            if self.text[self.index] == ",":
                self.index += 1
                self.skip_whitespace()
        self.index += 1


def extract_json(text: str) -> list[StringLiteral]:
    """Every string value (not key) of a JSON document."""
    try:
        json.loads(text)
    except json.JSONDecodeError as e:
        msg = f"Invalid JSON: {e}"
        raise DocumentError(msg) from e
    scanner = _JsonScanner(text)
    scanner.skip_whitespace()
    if scanner.index < len(text):
        scanner.scan_value(())
    return scanner.found


# --- TOML ---


class _TomlScanner:
    """Walk over already-validated TOML, tracking string offsets and key paths."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.index = 0
        self.found: list[StringLiteral] = []

    def peek(self) -> str:
        return self.text[self.index] if self.index < len(self.text) else ""

    def skip_whitespace(self, *, newlines: bool = False) -> None:
        """Skip blanks and comments; line breaks only when ``newlines`` is set."""
        while self.index < len(self.text):
            char = self.text[self.index]
            if char in " \t" or (newlines and char in "\r\n"):
                self.index += 1
            elif char == "#":
                end = self.text.find("\n", self.index)
                self.index = len(self.text) if end == -1 else end
            else:
                break

    def read_string(self) -> tuple[int, int]:
        """Consume any of the four string forms; return its body's ``(start, end)``."""
        quote = self.text[self.index]
        delimiter = quote * 3 if self.text.startswith(quote * 3, self.index) else quote
        start = self.index + len(delimiter)
        index = start
        while index < len(self.text) and not self.text.startswith(delimiter, index):
            index += 2 if quote == '"' and self.text[index] == "\\" else 1
        if len(delimiter) == 3:
            # Up to two quotes may sit right before the closing delimiter.
            extra = 0
            while extra < 2 and self.text.startswith(quote, index + 3):
                index += 1
                extra += 1
        self.index = index + len(delimiter)
        return start, index

    def read_key(self) -> tuple[str, ...]:
        parts: list[str] = []
        while True:
            self.skip_whitespace()
            if self.peek() in "\"'":
                start, end = self.read_string()
                parts.append(self.text[start:end])
            else:
                match = _TOML_BARE_KEY.match(self.text, self.index)
                parts.append(match.group())
                self.index = match.end()
            self.skip_whitespace()
            if self.peek() != ".":
                return tuple(parts)
            self.index += 1

    def scan_value(self, path: tuple[str, ...]) -> None:
        char = self.peek()
        if char in "\"'":
            start, end = self.read_string()
            body = self.text[start:end]
            if "\n" not in body:
                self.found.append(StringLiteral(body, start, end, path))
        elif char == "[":
            self.scan_array(path)
        elif char == "{":
            self.scan_inline_table(path)
        else:
            # Number, boolean or date-time.
            while self.index < len(self.text) and self.text[self.index] not in ",]}#\r\n":
                self.index += 1

    def scan_array(self, path: tuple[str, ...]) -> None:
        self.index += 1
        position = 0
        while True:
            self.skip_whitespace(newlines=True)
            if self.peek() in ("]", ""):
                break
            self.scan_value((*path, str(position)))
            position += 1
            self.skip_whitespace(newlines=True)
            if self.peek() == ",":
                self.index += 1
        self.index += 1

    def scan_inline_table(self, path: tuple[str, ...]) -> None:
        self.index += 1
        while True:
            self.skip_whitespace(newlines=True)
            if self.peek() in ("}", ""):
                break
            self.scan_pair(path)
            self.skip_whitespace(newlines=True)
            if self.peek() == ",":
                self.index += 1
        self.index += 1

    def scan_pair(self, table: tuple[str, ...]) -> None:
        key = self.read_key()
        self.index += 1  # "="
        self.skip_whitespace()
        self.scan_value((*table, *key))

    def scan_document(self) -> None:
        table: tuple[str, ...] = ()
        while True:
            self.skip_whitespace(newlines=True)
            if not self.peek():
                return
            if self.peek() == "[":
                width = 2 if self.text.startswith("[[", self.index) else 1
                self.index += width
                table = self.read_key()
                self.index += width
            else:
                self.scan_pair(table)


def extract_toml(text: str) -> list[StringLiteral]:
    """String values of a TOML document, keyed by table path.

    Strings whose body spans several lines are skipped.
    """
    try:
        tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML: {e}"
        raise DocumentError(msg) from e
    scanner = _TomlScanner(text)
    scanner.scan_document()
    return scanner.found


# --- YAML ---


def _walk_yaml(
    node: yaml.Node,
    text: str,
    path: tuple[str, ...],
    found: list[StringLiteral],
    seen: set[int],
) -> None:
    if id(node) in seen:
        return
    seen.add(id(node))
    if isinstance(node, yaml.MappingNode):
        for key_node, value_node in node.value:
            key = str(key_node.value) if isinstance(key_node, yaml.ScalarNode) else "?"
            _walk_yaml(value_node, text, (*path, key), found, seen)
    elif isinstance(node, yaml.SequenceNode):
        for position, item in enumerate(node.value):
            _walk_yaml(item, text, (*path, str(position)), found, seen)
    elif isinstance(node, yaml.ScalarNode) and node.tag == _YAML_STR_TAG:
        if node.style not in (None, "'", '"'):
            return  # block scalar
        # The start mark includes any anchor or tag before the scalar.
        start = _YAML_NODE_PROPERTIES.match(text, node.start_mark.index).end()
        end = node.end_mark.index
        if node.style is not None:
            start, end = start + 1, end - 1
        body = text[start:end]
        if start > end or "\n" in body:
            return
        found.append(StringLiteral(body, start, end, path))


def extract_yaml(text: str) -> list[StringLiteral]:
    """Plain and quoted string scalar values of every YAML document in ``text``."""
    found: list[StringLiteral] = []
    seen: set[int] = set()
    try:
        for document in yaml.compose_all(text, Loader=yaml.SafeLoader):
            if document is not None:
                _walk_yaml(document, text, (), found, seen)
    except yaml.YAMLError as e:
        msg = f"Invalid YAML: {e}"
        raise DocumentError(msg) from e
    return found


_EXTRACTORS = {
    "json": extract_json,
    "toml": extract_toml,
    "yaml": extract_yaml,
}


def extract_strings(text: str, fmt: str) -> list[StringLiteral]:
    """Return the string literals of ``text`` in document order.

    Raises DocumentError if the format is unknown or the document is invalid.
    """
    extractor = _EXTRACTORS.get(fmt)
    if extractor is None:
        msg = f"Unsupported document format: {fmt}"
        raise DocumentError(msg)
    literals = extractor(text)
    logger.debug("Found %d string literal(s) in %s document", len(literals), fmt)
    return literals
