"""Integration tests for the TUI."""

from __future__ import annotations

from typing import TYPE_CHECKING

from minimessage_highlight.config import Settings
from minimessage_highlight.tui.app import HighlightApp
from minimessage_highlight.tui.help_screen import HelpScreen
from minimessage_highlight.tui.string_list import StringList

if TYPE_CHECKING:
    from pathlib import Path


async def test_tui_lists_strings(json_file: Path) -> None:
    """TUI launches, lists every literal and shows the first one."""
    app = HighlightApp(json_file)
    async with app.run_test():
        slist = app.query_one(StringList)
        assert slist.row_count == 3
        assert app.error is None
        assert app.detail_text.plain == "<red>Hello</red> <bold>world</bold>"


async def test_vim_jk_navigation(json_file: Path) -> None:
    """Pressing j/k moves between literals and updates the detail pane."""
    app = HighlightApp(json_file)
    async with app.run_test() as pilot:
        slist = app.query_one(StringList)
        assert slist.cursor_row == 0

        await pilot.press("j")
        await pilot.pause()
        assert slist.cursor_row == 1
        assert app.detail_text.plain == "<gradient:#FF0000:#0000FF>AB</gradient>"

        await pilot.press("j")
        await pilot.pause()
        assert app.detail_text.plain == "plain"

        await pilot.press("k")
        await pilot.pause()
        assert slist.cursor_row == 1


async def test_toggle_markup(json_file: Path) -> None:
    """m hides and re-shows tag markup in the detail pane."""
    app = HighlightApp(json_file)
    async with app.run_test() as pilot:
        await pilot.press("m")
        await pilot.pause()
        assert app.show_markup is False
        assert app.detail_text.plain == "Hello world"

        await pilot.press("m")
        await pilot.pause()
        assert app.detail_text.plain == "<red>Hello</red> <bold>world</bold>"


async def test_settings_hide_markup(json_file: Path) -> None:
    app = HighlightApp(json_file, settings=Settings(show_markup=False))
    async with app.run_test():
        assert app.detail_text.plain == "Hello world"


async def test_toggle_document(toml_file: Path) -> None:
    """d switches the detail pane to the whole file."""
    app = HighlightApp(toml_file)
    async with app.run_test() as pilot:
        await pilot.press("d")
        await pilot.pause()
        assert app.show_document is True
        assert app.detail_text.plain == toml_file.read_text()

        await pilot.press("d")
        await pilot.pause()
        assert app.detail_text.plain == "<gold>Title</gold>"


async def test_invalid_document_shows_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text('{"a": ')
    app = HighlightApp(path)
    async with app.run_test():
        assert app.query_one(StringList).row_count == 0
        assert app.error is not None
        assert "Invalid JSON" in app.detail_text.plain


async def test_reload_picks_up_changes(yaml_file: Path) -> None:
    """r re-reads the file from disk."""
    app = HighlightApp(yaml_file)
    async with app.run_test() as pilot:
        slist = app.query_one(StringList)
        assert slist.row_count == 2

        yaml_file.write_text("only: <red>one</red>\n")
        await pilot.press("r")
        await pilot.pause()
        assert slist.row_count == 1
        assert app.detail_text.plain == "<red>one</red>"


async def test_empty_document(tmp_path: Path) -> None:
    path = tmp_path / "empty.json"
    path.write_text('{"n": 1}')
    app = HighlightApp(path)
    async with app.run_test():
        assert app.query_one(StringList).row_count == 0
        assert app.detail_text.plain == "No string literals found."


async def test_help_screen(json_file: Path) -> None:
    app = HighlightApp(json_file)
    async with app.run_test() as pilot:
        await pilot.press("question_mark")
        await pilot.pause()
        assert isinstance(app.screen, HelpScreen)

        await pilot.press("escape")
        await pilot.pause()
        assert not isinstance(app.screen, HelpScreen)
