"""Textual App — browse the highlighted strings of one document."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical, VerticalScroll
from textual.widgets import Footer, Header, Static

from minimessage_highlight.config import Settings
from minimessage_highlight.extract import DocumentError
from minimessage_highlight.highlight import highlight_file
from minimessage_highlight.render import render_document, render_string
from minimessage_highlight.tui.help_screen import HelpScreen
from minimessage_highlight.tui.string_list import StringList

if TYPE_CHECKING:
    from pathlib import Path

    from textual.binding import BindingType

    from minimessage_highlight.highlight import HighlightedString


class HighlightApp(App[None]):
    """Markup highlighter TUI for a single JSON/TOML/YAML file."""

    TITLE = "minimessage-highlight"

    CSS = """
    #main-container {
        height: 1fr;
    }
    #list-pane {
        height: 1fr;
        border-bottom: solid $primary;
    }
    #detail-container {
        height: 1fr;
        padding: 1 2;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("q", "quit", "Quit", show=True),
        Binding("question_mark", "show_help", "Help", show=True),
        Binding("r", "reload", "Reload", show=True),
        Binding("m", "toggle_markup", "Markup", show=True),
        Binding("d", "toggle_document", "Document", show=True),
    ]

    def __init__(self, path: Path, *, settings: Settings | None = None) -> None:
        super().__init__()
        self._path = path
        self._settings = settings if settings is not None else Settings()
        self.show_markup = self._settings.show_markup
        self.show_document = False
        self.error: str | None = None
        self.detail_text = Text()
        self._text = ""
        self._highlighted: list[HighlightedString] = []

    def compose(self) -> ComposeResult:
        """Create the list / detail layout."""
        yield Header()
        with Vertical(id="main-container"):
            yield StringList(id="list-pane")
            with VerticalScroll(id="detail-container"):
                yield Static(id="detail-pane")
        yield Footer()

    def on_mount(self) -> None:
        """Load the document and focus the string list."""
        self.sub_title = str(self._path)
        self._load()
        self.set_focus(self.query_one(StringList))

    def _load(self) -> None:
        try:
            self._text, self._highlighted = highlight_file(
                self._path,
                formats=self._settings.formats,
                extensions=self._settings.extensions,
            )
            self.error = None
        except DocumentError as e:
            self._text, self._highlighted = "", []
            self.error = str(e)
        self.query_one(StringList).load(self._highlighted)
        self._refresh_detail()

    def _render_detail(self) -> Text:
        if self.error is not None:
            return Text(self.error, style="bold red")
        if self.show_document:
            return render_document(
                self._text, self._highlighted, markup_style=self._settings.markup_style
            )
        item = self.query_one(StringList).selected_item
        if item is None:
            return Text("No string literals found.", style="dim")
        return render_string(
            item.literal.content,
            item.relative_spans(),
            show_markup=self.show_markup,
            markup_style=self._settings.markup_style,
        )

    def _refresh_detail(self) -> None:
        self.detail_text = self._render_detail()
        self.query_one("#detail-pane", Static).update(self.detail_text)

    def on_data_table_row_highlighted(self) -> None:
        """Update the detail pane when the cursor moves."""
        self._refresh_detail()

    def action_reload(self) -> None:
        """Re-read the file from disk."""
        self._load()
        self.notify("Reloaded" if self.error is None else "Content unavailable")

    def action_toggle_markup(self) -> None:
        """Show or hide tag markup in the detail pane."""
        self.show_markup = not self.show_markup
        self._refresh_detail()

    def action_toggle_document(self) -> None:
        """Switch the detail pane between the selected string and the whole file."""
        self.show_document = not self.show_document
        self._refresh_detail()

    def action_show_help(self) -> None:
        """Show the help overlay."""
        self.push_screen(HelpScreen())
