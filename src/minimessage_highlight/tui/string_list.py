"""String list widget — DataTable of the string literals found in a document."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from rich.text import Text
from textual.binding import Binding
from textual.widgets import DataTable

from minimessage_highlight.render import render_string

if TYPE_CHECKING:
    from textual.binding import BindingType

    from minimessage_highlight.highlight import HighlightedString

PREVIEW_MAX = 60


def _preview(item: HighlightedString) -> Text:
    """Styled, markup-free preview of a literal, truncated to PREVIEW_MAX."""
    text = render_string(item.literal.content, item.relative_spans(), show_markup=False)
    text.truncate(PREVIEW_MAX, overflow="ellipsis")
    return text


class StringList(DataTable[str | Text]):
    """A DataTable listing document string literals in document order."""

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("j", "cursor_down", "Cursor down", show=False),
        Binding("k", "cursor_up", "Cursor up", show=False),
    ]

    def __init__(self, *, id: str | None = None) -> None:  # noqa: A002
        super().__init__(cursor_type="row", id=id)
        self._items: list[HighlightedString] = []

    def load(self, highlighted: list[HighlightedString]) -> None:
        """Replace the rows with ``highlighted``."""
        self.clear()
        if not self.columns:
            self.add_columns("Path", "Preview")
        self._items = list(highlighted)
        for index, item in enumerate(self._items):
            self.add_row(item.literal.dotted_path or "<root>", _preview(item), key=str(index))

    @property
    def selected_item(self) -> HighlightedString | None:
        """Return the literal of the currently highlighted row."""
        if self.cursor_row < 0 or self.cursor_row >= len(self._items):
            return None
        return self._items[self.cursor_row]
