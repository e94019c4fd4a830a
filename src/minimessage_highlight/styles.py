"""Style resolution: walk a tag tree and compute the style of every text run."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, NamedTuple, TypeAlias

from minimessage_highlight.parser import TagNode, TextNode

if TYPE_CHECKING:
    from minimessage_highlight.parser import TreeNode

NAMED_COLORS: dict[str, str] = {
    "black": "#000000",
    "dark_blue": "#0000AA",
    "dark_green": "#00AA00",
    "dark_aqua": "#00AAAA",
    "dark_red": "#AA0000",
    "dark_purple": "#AA00AA",
    "gold": "#FFAA00",
    "gray": "#AAAAAA",
    "dark_gray": "#555555",
    "blue": "#5555FF",
    "green": "#55FF55",
    "aqua": "#55FFFF",
    "red": "#FF5555",
    "light_purple": "#FF55FF",
    "yellow": "#FFFF55",
    "white": "#FFFFFF",
}

BOLD_TAGS = frozenset({"bold", "b"})
ITALIC_TAGS = frozenset({"italic", "i", "em"})
UNDERLINE_TAGS = frozenset({"underline", "u"})
STRIKETHROUGH_TAGS = frozenset({"strikethrough", "st"})
COLOR_TAGS = frozenset({"color", "c", "colour"})

MIN_GRADIENT_COLORS = 2

_HEX_COLOR = re.compile(r"#[0-9a-fA-F]{6}")
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


class Span(NamedTuple):
    """Half-open ``[start, end)`` offset range."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class Rainbow:
    """Hue cycling across a run, starting ``start_index`` characters in."""

    start_index: int = 0
    reverse: bool = False


@dataclass(frozen=True)
class Gradient:
    """Linear interpolation across ``colors``, beginning at ``start_color_index``."""

    colors: tuple[str, ...]
    start_color_index: int = 0


@dataclass(frozen=True)
class Style:
    """Inheritable text style.

    ``bold`` / ``italic`` are tri-state: ``None`` means unset, ``False`` an
    explicit "normal" that overrides an ancestor.
    """

    color: str | None = None
    bold: bool | None = None
    italic: bool | None = None
    underline: bool = False
    strikethrough: bool = False
    rainbow: Rainbow | None = None
    gradient: Gradient | None = None

    @property
    def has_effect(self) -> bool:
        """True when the run needs per-character expansion."""
        return self.rainbow is not None or self.gradient is not None

    def to_dict(self) -> dict[str, object]:
        """Return the set fields only, for JSON output."""
        result: dict[str, object] = {}
        if self.color is not None:
            result["color"] = self.color
        if self.bold is not None:
            result["bold"] = self.bold
        if self.italic is not None:
            result["italic"] = self.italic
        if self.underline:
            result["underline"] = True
        if self.strikethrough:
            result["strikethrough"] = True
        if self.rainbow is not None:
            result["rainbow"] = {
                "start_index": self.rainbow.start_index,
                "reverse": self.rainbow.reverse,
            }
        if self.gradient is not None:
            result["gradient"] = {
                "colors": list(self.gradient.colors),
                "start_color_index": self.gradient.start_color_index,
            }
        return result


StyledSpan: TypeAlias = tuple[Span, Style]


def is_hex_color(token: str) -> bool:
    """Return True for a ``#RRGGBB`` token."""
    return _HEX_COLOR.fullmatch(token) is not None


def parse_int(text: str) -> int | None:
    """Leniently read a leading decimal integer (``"3x"`` → 3), else None."""
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else None


def resolve_color(token: str) -> str | None:
    """Resolve a named color or a ``#RRGGBB`` token to hex."""
    if token in NAMED_COLORS:
        return NAMED_COLORS[token]
    if is_hex_color(token):
        return token
    return None


def _negate(name: str, style: Style) -> Style:
    if name in BOLD_TAGS:
        return replace(style, bold=False)
    if name in ITALIC_TAGS:
        return replace(style, italic=False)
    if name in UNDERLINE_TAGS:
        return replace(style, underline=False)
    if name in STRIKETHROUGH_TAGS:
        return replace(style, strikethrough=False)
    return style


def _parse_rainbow(args: list[str]) -> Rainbow:
    if not args:
        return Rainbow()
    arg = args[0]
    if arg.startswith("!"):
        return Rainbow(start_index=parse_int(arg[1:]) or 0, reverse=True)
    return Rainbow(start_index=parse_int(arg) or 0)


def _parse_gradient(args: list[str]) -> Gradient | None:
    """Colors from every argument; a trailing integer is the start index."""
    if len(args) < MIN_GRADIENT_COLORS:
        return None
    colors: list[str] = []
    start_color_index = 0
    last = len(args) - 1
    for i, arg in enumerate(args):
        if i == last and (index := parse_int(arg)) is not None:
            start_color_index = index
            break
        color = resolve_color(arg)
        if color is not None:
            colors.append(color)
    if len(colors) < MIN_GRADIENT_COLORS:
        return None
    return Gradient(tuple(colors), start_color_index)


def apply_tag(tag: TagNode, parent: Style) -> Style:
    """Return the style for ``tag``'s children, derived from ``parent``.

    Every matching rule applies; unknown tags leave the style unchanged.
    """
    name = tag.name
    if name.startswith("!"):
        return _negate(name[1:], parent)

    style = parent
    if name in NAMED_COLORS:
        style = replace(style, color=NAMED_COLORS[name])
    if is_hex_color(name):
        style = replace(style, color=name)
    if name in COLOR_TAGS and len(tag.args) == 1 and is_hex_color(tag.args[0]):
        style = replace(style, color=tag.args[0])
    if name in BOLD_TAGS:
        style = replace(style, bold=True)
    if name in ITALIC_TAGS:
        style = replace(style, italic=True)
    if name in UNDERLINE_TAGS:
        style = replace(style, underline=True)
    if name in STRIKETHROUGH_TAGS:
        style = replace(style, strikethrough=True)
    if name == "rainbow":
        style = replace(style, rainbow=_parse_rainbow(tag.args))
    if name == "gradient" and (gradient := _parse_gradient(tag.args)) is not None:
        style = replace(style, gradient=gradient)
    return style


def resolve(nodes: list[TreeNode], inherited: Style | None = None) -> list[StyledSpan]:
    """Return one ``(span, style)`` pair per text node, in document order."""
    style = inherited if inherited is not None else Style()
    result: list[StyledSpan] = []
    for node in nodes:
        if isinstance(node, TextNode):
            result.append((Span(node.start_index, node.end_index), style))
        elif isinstance(node, TagNode):
            result.extend(resolve(node.children, apply_tag(node, style)))
    return result
