"""Materialize computed styles as Rich styles and text."""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from rich.color import Color
from rich.style import Style as RichStyle
from rich.text import Text

from minimessage_highlight.effects import color_to_rgb

if TYPE_CHECKING:
    from collections.abc import Iterator

    from minimessage_highlight.highlight import HighlightedString
    from minimessage_highlight.styles import Style, StyledSpan

DEFAULT_MARKUP_STYLE = "dim"


@lru_cache(maxsize=1024)
def to_rich_style(style: Style) -> RichStyle:
    """Convert a resolved style; ``bold=False`` stays an explicit "not bold"."""
    color = None
    if style.color is not None and (rgb := color_to_rgb(style.color)) is not None:
        color = Color.from_rgb(*rgb)
    return RichStyle(
        color=color,
        bold=style.bold,
        italic=style.italic,
        underline=style.underline or None,
        strike=style.strikethrough or None,
    )


def _gaps(start: int, end: int, spans: list[StyledSpan]) -> Iterator[tuple[int, int]]:
    """Ranges of ``[start, end)`` not covered by ``spans`` (markup text)."""
    cursor = start
    for span, _style in spans:
        if span.start > cursor:
            yield cursor, span.start
        cursor = max(cursor, span.end)
    if cursor < end:
        yield cursor, end


def render_string(
    content: str,
    spans: list[StyledSpan],
    *,
    show_markup: bool = True,
    markup_style: str = DEFAULT_MARKUP_STYLE,
) -> Text:
    """Render one literal from spans relative to ``content``.

    With ``show_markup`` the tags stay visible in ``markup_style``; otherwise
    only the styled text is emitted.
    """
    text = Text()
    cursor = 0
    for span, style in spans:
        if show_markup and span.start > cursor:
            text.append(content[cursor : span.start], style=markup_style)
        text.append(content[span.start : span.end], style=to_rich_style(style))
        cursor = max(cursor, span.end)
    if show_markup and cursor < len(content):
        text.append(content[cursor:], style=markup_style)
    return text


def render_document(
    document: str,
    highlighted: list[HighlightedString],
    *,
    markup_style: str = DEFAULT_MARKUP_STYLE,
) -> Text:
    """The whole document with every literal styled in place."""
    text = Text(document)
    for item in highlighted:
        literal = item.literal
        for start, end in _gaps(literal.content_start, literal.content_end, item.spans):
            text.stylize(markup_style, start, end)
        for span, style in item.spans:
            text.stylize(to_rich_style(style), span.start, span.end)
    return text
