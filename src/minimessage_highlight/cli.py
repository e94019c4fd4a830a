"""CLI entry point and subcommand definitions."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, NoReturn

from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from minimessage_highlight.config import ConfigError, Settings, get_config_path, load_settings
from minimessage_highlight.extract import DocumentError
from minimessage_highlight.highlight import highlight_file
from minimessage_highlight.parser import TagNode, parse, tree_to_dict
from minimessage_highlight.render import render_string

if TYPE_CHECKING:
    from minimessage_highlight.highlight import HighlightedString
    from minimessage_highlight.parser import TreeNode

PATH_COL_MAX = 40


def _fail(message: str) -> NoReturn:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _load_settings() -> Settings:
    try:
        return load_settings(get_config_path())
    except ConfigError as e:
        _fail(str(e))


def _load(path: Path, settings: Settings) -> tuple[str, list[HighlightedString]]:
    try:
        return highlight_file(path, formats=settings.formats, extensions=settings.extensions)
    except DocumentError as e:
        _fail(str(e))


def _literal_label(item: HighlightedString) -> str:
    label = item.literal.dotted_path or "<root>"
    if len(label) > PATH_COL_MAX:
        label = label[: PATH_COL_MAX - 1] + "…"
    return label


def _cmd_show(args: argparse.Namespace) -> None:
    """Print every highlighted string literal of a document."""
    settings = _load_settings()
    _text, highlighted = _load(Path(args.file), settings)
    if not highlighted:
        print("No string literals found.")
        return
    console = Console()
    for item in highlighted:
        rendered = render_string(
            item.literal.content,
            item.relative_spans(),
            show_markup=settings.show_markup and not args.preview,
            markup_style=settings.markup_style,
        )
        console.print(Text(f"{_literal_label(item):<{PATH_COL_MAX}} ", style="bold"), rendered)


def _cmd_spans(args: argparse.Namespace) -> None:
    """List styled spans with absolute document offsets."""
    settings = _load_settings()
    text, highlighted = _load(Path(args.file), settings)
    rows = [
        {
            "path": item.literal.dotted_path,
            "start": span.start,
            "end": span.end,
            "text": text[span.start : span.end],
            "style": style.to_dict(),
        }
        for item in highlighted
        for span, style in item.spans
    ]
    if args.json:
        print(json.dumps(rows, indent=2))
        return
    for row in rows:
        style_desc = " ".join(f"{k}={v}" for k, v in row["style"].items()) or "-"
        print(f"{row['start']}\t{row['end']}\t{row['path']}\t{row['text']!r}\t{style_desc}")


def _add_tree_nodes(branch: Tree, nodes: list[TreeNode]) -> None:
    for node in nodes:
        span = f"[{node.start_index}, {node.end_index})"
        if isinstance(node, TagNode):
            label = ":".join([node.name, *node.args])
            child = branch.add(Text.assemble((f"<{label}>", "bold cyan"), " ", (span, "dim")))
            _add_tree_nodes(child, node.children)
        else:
            branch.add(Text.assemble(repr(node.content), " ", (span, "dim")))


def _cmd_tree(args: argparse.Namespace) -> None:
    """Dump the parse tree of a single markup string."""
    nodes = parse(args.text)
    if args.json:
        print(json.dumps(tree_to_dict(nodes), indent=2))
        return
    tree = Tree(Text(repr(args.text), style="bold"))
    _add_tree_nodes(tree, nodes)
    Console().print(tree)


def _cmd_view(args: argparse.Namespace) -> None:
    """Launch the Textual viewer.

    Imports are deferred to avoid loading Textual for the print-only commands.
    """
    from minimessage_highlight.tui.app import HighlightApp  # noqa: PLC0415

    settings = _load_settings()
    HighlightApp(Path(args.file), settings=settings).run()


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and dispatch to the appropriate subcommand."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    parser = argparse.ArgumentParser(
        prog="minimessage-highlight",
        description="Highlight MiniMessage-style markup inside JSON, TOML and YAML strings",
    )
    subparsers = parser.add_subparsers(dest="command")

    # view
    view_parser = subparsers.add_parser("view", parents=[common], help="Open the TUI viewer")
    view_parser.add_argument("file", help="Document to highlight")

    # show
    show_parser = subparsers.add_parser(
        "show", parents=[common], help="Print highlighted string literals"
    )
    show_parser.add_argument("file", help="Document to highlight")
    show_parser.add_argument("--preview", action="store_true", help="Hide tag markup")

    # spans
    spans_parser = subparsers.add_parser("spans", parents=[common], help="List styled spans")
    spans_parser.add_argument("file", help="Document to highlight")
    spans_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # tree
    tree_parser = subparsers.add_parser(
        "tree", parents=[common], help="Show the parse tree of a markup string"
    )
    tree_parser.add_argument("text", help="Markup string, e.g. '<red>hi</red>'")
    tree_parser.add_argument("--json", action="store_true", help="Output as JSON")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    dispatch = {
        "view": _cmd_view,
        "show": _cmd_show,
        "spans": _cmd_spans,
        "tree": _cmd_tree,
    }
    dispatch[args.command](args)
