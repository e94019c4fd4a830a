"""Highlight pipeline: markup string → styled spans, per literal or per document."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from minimessage_highlight.effects import expand
from minimessage_highlight.extract import (
    FORMATS,
    DocumentError,
    StringLiteral,
    detect_format,
    extract_strings,
)
from minimessage_highlight.parser import parse
from minimessage_highlight.styles import Span, Style, StyledSpan, resolve

if TYPE_CHECKING:
    from collections.abc import Collection, Iterator
    from pathlib import Path

logger = logging.getLogger(__name__)


def iter_highlight(content: str) -> Iterator[StyledSpan]:
    """Lazily yield styled spans for ``content`` in document order."""
    for span, style in resolve(parse(content), Style()):
        yield from expand(span, style)


def highlight(content: str) -> list[StyledSpan]:
    """Styled spans covering every visible character of ``content``.

    Tag markup produces no span.  Rainbow and gradient runs come back one
    span per character.
    """
    return list(iter_highlight(content))


@dataclass(frozen=True)
class HighlightedString:
    """A document literal with its spans translated to document offsets."""

    literal: StringLiteral
    spans: list[StyledSpan] = field(default_factory=list)

    def relative_spans(self) -> list[StyledSpan]:
        """Spans as offsets into ``literal.content``."""
        base = self.literal.content_start
        return [(Span(s.start - base, s.end - base), style) for s, style in self.spans]


def highlight_literal(literal: StringLiteral) -> HighlightedString:
    base = literal.content_start
    spans = [
        (Span(base + span.start, base + span.end), style)
        for span, style in iter_highlight(literal.content)
    ]
    return HighlightedString(literal, spans)


def highlight_document(text: str, fmt: str) -> list[HighlightedString]:
    """Highlight every string literal of a document.

    Raises DocumentError if the document cannot be read as ``fmt``.
    """
    literals = extract_strings(text, fmt)
    result = [highlight_literal(literal) for literal in literals]
    logger.debug(
        "Highlighted %d literal(s), %d span(s)",
        len(result),
        sum(len(h.spans) for h in result),
    )
    return result


def highlight_file(
    path: Path,
    *,
    formats: Collection[str] = FORMATS,
    extensions: dict[str, str] | None = None,
) -> tuple[str, list[HighlightedString]]:
    """Read ``path`` and highlight it; return the text and its literals.

    Raises DocumentError for unknown or disabled formats, unreadable files and
    invalid documents.
    """
    fmt = detect_format(path, extensions)
    if fmt is None or fmt not in formats:
        msg = f"{path}: no enabled document format for suffix {path.suffix!r}"
        raise DocumentError(msg)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        msg = f"{path}: {e}"
        raise DocumentError(msg) from e
    try:
        return text, highlight_document(text, fmt)
    except DocumentError:
        logger.warning("Content unavailable for %s", path)
        raise
