"""Tests for the tag tree parser."""

from __future__ import annotations

import re

import pytest

from minimessage_highlight.parser import (
    TagNode,
    TextNode,
    TreeNode,
    is_valid_tag,
    iter_nodes,
    parse,
    tree_to_dict,
)

TAG_TEXT = re.compile(r"<[^<>]*>")

INPUTS = [
    "",
    "plain text",
    "<red><bold>hi</bold></red>",
    "<bold>a<!bold>b</!bold>c</bold>",
    "<red><bold>a<reset>b</bold>",
    "a</foo>b",
    "a < b > c",
    "<a b<red>x</red>",
    "<gradient:#FF0000:#0000FF>AB</gradient> tail",
    "<red>unclosed <i>twice",
    "<<red>>x</red>>",
    "1 <2> 3 <",
]


def _text_nodes(nodes: list[TreeNode]) -> list[TextNode]:
    return [n for n in iter_nodes(nodes) if isinstance(n, TextNode)]


def test_nested_tags() -> None:
    """Balanced tags nest; end offsets cover the closing tags."""
    nodes = parse("<red><bold>hi</bold></red>")
    assert nodes == [
        TagNode(
            "red",
            [],
            [TagNode("bold", [], [TextNode("hi", 11, 13)], 5, 20)],
            0,
            26,
        )
    ]


def test_negation_tag_keeps_marker() -> None:
    """Negated tags are stored with their ! prefix and close by that name."""
    nodes = parse("<bold>a<!bold>b</!bold>c</bold>")
    assert len(nodes) == 1
    bold = nodes[0]
    assert isinstance(bold, TagNode)
    assert bold.name == "bold"
    assert (bold.start_index, bold.end_index) == (0, 31)
    first, negated, last = bold.children
    assert first == TextNode("a", 6, 7)
    assert negated == TagNode("!bold", [], [TextNode("b", 14, 15)], 7, 23)
    assert last == TextNode("c", 23, 24)


def test_reset_discards_open_tags() -> None:
    """<reset> pops every open tag; the later </bold> no longer matches."""
    nodes = parse("<red><bold>a<reset>b</bold>")
    assert len(nodes) == 2
    red, tail = nodes
    assert isinstance(red, TagNode)
    assert (red.start_index, red.end_index) == (0, 12)
    bold = red.children[0]
    assert isinstance(bold, TagNode)
    assert bold.children == [TextNode("a", 11, 12)]
    assert tail == TextNode("b</bold>", 19, 27)


@pytest.mark.parametrize("tag", ["reset", "RESET", "Reset", " reset "])
def test_reset_is_case_insensitive(tag: str) -> None:
    nodes = parse(f"<red>a<{tag}>b")
    assert [n.name for n in nodes if isinstance(n, TagNode)] == ["red"]
    assert isinstance(nodes[-1], TextNode)
    assert nodes[-1].content == "b"


def test_unmatched_close_is_single_text_run() -> None:
    """A closing tag with no opener stays literal and does not split the run."""
    assert parse("a</foo>b") == [TextNode("a</foo>b", 0, 8)]


def test_unterminated_angle_is_text() -> None:
    """A < with no later > is an ordinary character."""
    assert parse("a < b") == [TextNode("a < b", 0, 5)]


def test_invalid_tag_rescans_content() -> None:
    """Only the leading < of an invalid tag is literal; a real tag inside still parses."""
    nodes = parse("<a b<red>x</red>")
    assert nodes == [
        TextNode("<a b", 0, 4),
        TagNode("red", [], [TextNode("x", 9, 10)], 4, 16),
    ]


@pytest.mark.parametrize("content", ["2", " ", "", "a b", "a.b", "red/", "-x"])
def test_invalid_tag_contents(content: str) -> None:
    assert not is_valid_tag(content)


@pytest.mark.parametrize("content", ["red", "/red", "!bold", "#FF00aa", "gradient:red:blue:1", " b "])
def test_valid_tag_contents(content: str) -> None:
    assert is_valid_tag(content)


def test_closing_tag_closes_intermediate_tags() -> None:
    """Closing an outer tag implicitly closes the tags opened inside it."""
    nodes = parse("<red><bold>x</red>y")
    assert nodes == [
        TagNode("red", [], [TagNode("bold", [], [TextNode("x", 11, 12)], 5, 12)], 0, 18),
        TextNode("y", 18, 19),
    ]


def test_closing_tag_ignores_opening_args() -> None:
    """Names alone are matched: </color> closes <color:#FF0000>."""
    nodes = parse("<color:#FF0000>x</color>y")
    tag = nodes[0]
    assert isinstance(tag, TagNode)
    assert tag.name == "color"
    assert tag.args == ["#FF0000"]
    assert tag.end_index == 24
    assert nodes[1] == TextNode("y", 24, 25)


def test_args_are_split_and_trimmed() -> None:
    nodes = parse("<gradient:red:blue:1>x")
    tag = nodes[0]
    assert isinstance(tag, TagNode)
    assert tag.name == "gradient"
    assert tag.args == ["red", "blue", "1"]


def test_whitespace_around_name_is_trimmed() -> None:
    tag = parse("< red >x")[0]
    assert isinstance(tag, TagNode)
    assert tag.name == "red"


def test_unclosed_tag_extends_to_last_child() -> None:
    nodes = parse("<red>abc")
    assert nodes == [TagNode("red", [], [TextNode("abc", 5, 8)], 0, 8)]


def test_hex_tag_name() -> None:
    tag = parse("<#00ff00>x")[0]
    assert isinstance(tag, TagNode)
    assert tag.name == "#00ff00"


@pytest.mark.parametrize("text", INPUTS)
def test_text_nodes_and_tags_reconstruct_input(text: str) -> None:
    """Text runs plus the tag substrings between them rebuild the input exactly."""
    cursor = 0
    rebuilt: list[str] = []
    for node in _text_nodes(parse(text)):
        assert node.content == text[node.start_index : node.end_index]
        gap = text[cursor : node.start_index]
        assert TAG_TEXT.sub("", gap) == ""
        rebuilt.extend([gap, node.content])
        cursor = node.end_index
    assert TAG_TEXT.sub("", text[cursor:]) == ""
    rebuilt.append(text[cursor:])
    assert "".join(rebuilt) == text


@pytest.mark.parametrize("text", INPUTS)
def test_offsets_are_well_formed(text: str) -> None:
    """Offsets stay in bounds and every tag covers its descendants."""
    for node in iter_nodes(parse(text)):
        assert 0 <= node.start_index <= node.end_index <= len(text)
        if isinstance(node, TagNode):
            for child in iter_nodes(node.children):
                assert child.end_index <= node.end_index


@pytest.mark.parametrize("text", INPUTS)
def test_reparse_is_identical(text: str) -> None:
    assert tree_to_dict(parse(text)) == tree_to_dict(parse(text))


def test_tree_to_dict() -> None:
    assert tree_to_dict(parse("<c:#123456>x</c>")) == [
        {
            "type": "tag",
            "name": "c",
            "args": ["#123456"],
            "start": 0,
            "end": 16,
            "children": [{"type": "text", "content": "x", "start": 11, "end": 12}],
        }
    ]
