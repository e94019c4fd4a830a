"""Tag tree parser: raw markup string → forest of text and tag nodes.

Parsing is lenient. Anything that does not look like a well-formed tag is
kept as literal text, so every input has a defined tree.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from collections.abc import Iterator

# First char: letter, "/" (closing), "!" (negation) or "#" (hex color).
_VALID_TAG = re.compile(r"[a-zA-Z/!#][a-zA-Z0-9:#\-_!]*")

RESET_TAG = "reset"
_ROOT_NAME = "__root__"


@dataclass
class TextNode:
    """A literal run; offsets index into the original input."""

    content: str
    start_index: int
    end_index: int


@dataclass
class TagNode:
    """A tag and everything nested inside it.

    ``start_index`` is the offset of ``<``.  ``end_index`` starts just past the
    opening ``>`` and grows to cover the closing tag or the last descendant.
    Negation tags keep their ``!`` prefix in ``name``.
    """

    name: str
    args: list[str] = field(default_factory=list)
    children: list[TreeNode] = field(default_factory=list)
    start_index: int = 0
    end_index: int = 0


TreeNode: TypeAlias = TextNode | TagNode


def is_valid_tag(tag_content: str) -> bool:
    """Return True if the text between ``<`` and ``>`` forms a tag."""
    return "<" not in tag_content and _VALID_TAG.fullmatch(tag_content.strip()) is not None


def _split_name_and_args(tag_content: str) -> tuple[str, list[str]]:
    parts = tag_content.split(":")
    return parts[0].strip(), [arg.strip() for arg in parts[1:]]


class _TreeBuilder:
    """Call-local parse state: cursor, open-tag stack and pending text."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.root = TagNode(_ROOT_NAME, start_index=0, end_index=len(text))
        self.stack: list[TagNode] = [self.root]
        self.buffer: list[str] = []
        self.buffer_start = 0

    @property
    def top(self) -> TagNode:
        return self.stack[-1]

    def add_text(self, chunk: str, start: int) -> None:
        if not self.buffer:
            self.buffer_start = start
        self.buffer.append(chunk)

    def flush_text(self) -> None:
        if not self.buffer:
            return
        content = "".join(self.buffer)
        node = TextNode(content, self.buffer_start, self.buffer_start + len(content))
        self.top.children.append(node)
        self.top.end_index = max(self.top.end_index, node.end_index)
        self.buffer = []

    def reset(self) -> None:
        self.flush_text()
        del self.stack[1:]

    def close(self, name: str, tag_start: int, tag_end: int) -> None:
        """Close the innermost open tag called ``name``.

        Unclosed tags opened after it are closed implicitly.  With no match
        the whole ``</...>`` is kept as text.
        """
        for depth in range(len(self.stack) - 1, 0, -1):
            if self.stack[depth].name == name:
                self.flush_text()
                self.stack[depth].end_index = tag_end
                parent = self.stack[depth - 1]
                parent.end_index = max(parent.end_index, tag_end)
                del self.stack[depth:]
                return
        self.add_text(self.text[tag_start:tag_end], tag_start)

    def open(self, tag_content: str, tag_start: int, tag_end: int) -> None:
        self.flush_text()
        name, args = _split_name_and_args(tag_content)
        # Self-closing tags carry no children, so they never produce a node.
        if not name or tag_content.rstrip().endswith("/"):
            return
        node = TagNode(name, args, start_index=tag_start, end_index=tag_end)
        self.top.children.append(node)
        self.top.end_index = max(self.top.end_index, node.end_index)
        self.stack.append(node)

    def build(self) -> list[TreeNode]:
        text = self.text
        index = 0
        while index < len(text):
            char = text[index]
            if char != "<":
                self.add_text(char, index)
                index += 1
                continue

            close_index = text.find(">", index + 1)
            tag_content = text[index + 1 : close_index]
            if close_index == -1 or not is_valid_tag(tag_content):
                # Only the "<" is literal; the rest is rescanned.
                self.add_text(char, index)
                index += 1
                continue

            tag_end = close_index + 1
            normalized = tag_content.strip().removesuffix("/")
            if normalized.lower() == RESET_TAG:
                self.reset()
            elif tag_content.startswith("/"):
                self.close(tag_content.strip().removeprefix("/"), index, tag_end)
            else:
                self.open(tag_content, index, tag_end)
            index = tag_end

        self.flush_text()
        for child in self.root.children:
            _repair_end_index(child)
        return self.root.children


def _repair_end_index(node: TreeNode) -> int:
    """Widen every tag's end offset to cover its descendants, deepest first."""
    if isinstance(node, TagNode):
        for child in node.children:
            node.end_index = max(node.end_index, _repair_end_index(child))
    return node.end_index


def parse(text: str) -> list[TreeNode]:
    """Parse markup into a forest of nodes (the children of an implicit root).

    Never raises: unterminated tags, invalid tag characters and unmatched
    closing tags all come back as literal text.
    """
    return _TreeBuilder(text).build()


def iter_nodes(nodes: list[TreeNode]) -> Iterator[TreeNode]:
    """Yield every node in document (pre-)order."""
    for node in nodes:
        yield node
        if isinstance(node, TagNode):
            yield from iter_nodes(node.children)


def tree_to_dict(nodes: list[TreeNode]) -> list[dict[str, object]]:
    """Return a JSON-serializable view of a parse tree."""
    result: list[dict[str, object]] = []
    for node in nodes:
        if isinstance(node, TextNode):
            result.append(
                {
                    "type": "text",
                    "content": node.content,
                    "start": node.start_index,
                    "end": node.end_index,
                }
            )
        else:
            result.append(
                {
                    "type": "tag",
                    "name": node.name,
                    "args": list(node.args),
                    "start": node.start_index,
                    "end": node.end_index,
                    "children": tree_to_dict(node.children),
                }
            )
    return result
