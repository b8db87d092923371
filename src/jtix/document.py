"""Typed document tree for rich issue descriptions and comment bodies.

The tracker returns descriptions and comments as loosely-structured JSON trees
(``{"type": "doc", "content": [...]}``). This module turns that data into a
small closed set of node types. Parsing never raises: missing or malformed
optional fields are defaulted, and kinds we do not know about are kept as
``OtherNode`` so their children can still be rendered.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

logger = logging.getLogger(__name__)

# Nesting levels deeper than this are replaced with a Truncated node.
MAX_DEPTH = 64

Scalar = Union[str, int, float, bool, None]


class NodeKind(str, Enum):
    """Node kinds the renderer knows how to draw."""

    DOC = "doc"
    PARAGRAPH = "paragraph"
    TEXT = "text"
    HARD_BREAK = "hardBreak"
    HEADING = "heading"
    BULLET_LIST = "bulletList"
    ORDERED_LIST = "orderedList"
    LIST_ITEM = "listItem"
    CODE_BLOCK = "codeBlock"
    BLOCKQUOTE = "blockquote"
    RULE = "rule"
    MENTION = "mention"
    EMOJI = "emoji"
    INLINE_CARD = "inlineCard"
    BLOCK_CARD = "blockCard"
    TABLE = "table"
    PANEL = "panel"
    MEDIA = "media"
    MEDIA_SINGLE = "mediaSingle"


class MarkType(str, Enum):
    """Inline style annotations on text nodes."""

    STRONG = "strong"
    EMPHASIS = "em"
    CODE = "code"
    LINK = "link"
    STRIKE = "strike"
    UNDERLINE = "underline"
    TEXT_COLOR = "textColor"


@dataclass(frozen=True)
class Mark:
    """A style annotation.

    ``type`` is a MarkType for known marks, or the raw type string otherwise.
    """

    type: MarkType | str
    attrs: Mapping[str, Scalar] = field(default_factory=dict)


@dataclass(frozen=True)
class Node:
    """A node of a known kind."""

    kind: NodeKind
    children: tuple["DocumentNode", ...] = ()
    text: str = ""
    marks: tuple[Mark, ...] = ()
    attrs: Mapping[str, Scalar] = field(default_factory=dict)

    def attr(self, key: str) -> str | None:
        """Return an attribute as a string, or None when absent or empty."""
        value = self.attrs.get(key)
        if value is None or value is False or value == "":
            return None
        return str(value)


@dataclass(frozen=True)
class OtherNode:
    """A node whose kind is not in NodeKind; only its children are kept."""

    kind: str
    children: tuple["DocumentNode", ...] = ()


@dataclass(frozen=True)
class Truncated:
    """Stands in for a subtree nested deeper than MAX_DEPTH."""


DocumentNode = Union[Node, OtherNode, Truncated]

_KNOWN_KINDS = {kind.value: kind for kind in NodeKind}
_KNOWN_MARKS = {mark.value: mark for mark in MarkType}


def _parse_attrs(raw: Any) -> dict[str, Scalar]:
    if not isinstance(raw, Mapping):
        return {}
    return {
        str(key): value
        for key, value in raw.items()
        if value is None or isinstance(value, (str, int, float, bool))
    }


def parse_mark(raw: Any) -> Mark | None:
    """Parse one mark entry, returning None when it is not a mapping."""
    if not isinstance(raw, Mapping):
        return None
    mark_type = raw.get("type")
    if not isinstance(mark_type, str):
        mark_type = ""
    return Mark(
        type=_KNOWN_MARKS.get(mark_type, mark_type),
        attrs=_parse_attrs(raw.get("attrs")),
    )


def _parse_marks(raw: Any) -> tuple[Mark, ...]:
    if not isinstance(raw, (list, tuple)):
        return ()
    marks = (parse_mark(item) for item in raw)
    return tuple(mark for mark in marks if mark is not None)


def _parse_children(raw: Any, depth: int) -> tuple[DocumentNode, ...]:
    if not isinstance(raw, (list, tuple)):
        return ()
    return tuple(
        parse_node(item, depth + 1) for item in raw if isinstance(item, Mapping)
    )


def parse_node(raw: Mapping[str, Any], depth: int = 0) -> DocumentNode:
    """Build a DocumentNode from one mapping of the raw tree.

    Args:
        raw: A mapping shaped like ``{"type": ..., "content": [...], ...}``
        depth: Nesting level of ``raw`` below the root

    Returns:
        A Node for known kinds, an OtherNode for anything else, or Truncated
        when ``depth`` exceeds MAX_DEPTH.
    """
    if depth > MAX_DEPTH:
        logger.debug(f"document nesting exceeds {MAX_DEPTH} levels, truncating")
        return Truncated()

    kind_name = raw.get("type")
    if not isinstance(kind_name, str):
        kind_name = ""
    children = _parse_children(raw.get("content"), depth)

    kind = _KNOWN_KINDS.get(kind_name)
    if kind is None:
        return OtherNode(kind=kind_name, children=children)

    text = raw.get("text")
    return Node(
        kind=kind,
        children=children,
        text=text if isinstance(text, str) else "",
        marks=_parse_marks(raw.get("marks")),
        attrs=_parse_attrs(raw.get("attrs")),
    )


def parse_document(raw: Any) -> Node | None:
    """Parse a raw document tree.

    A ``doc`` without a ``content`` list is treated as no document at all, so
    callers show their "no description" sentinel rather than a blank body.

    Returns:
        The root Node, or None when ``raw`` is not a mapping whose type is
        "doc" and whose content is a list.
    """
    if not isinstance(raw, Mapping) or raw.get("type") != NodeKind.DOC.value:
        return None
    if not isinstance(raw.get("content"), list):
        return None
    root = parse_node(raw)
    return root if isinstance(root, Node) else None
