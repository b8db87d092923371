"""Render rich document trees (descriptions, comments) as terminal text.

``render_document`` is the entry point. It checks that the input is a
document, parses it into the typed tree from ``jtix.document`` and walks it
with a ``BlockRenderer``. Rendering is total: any input produces a string.
"""

import logging
import math
from collections.abc import Callable, Iterable
from typing import Any

from jtix.document import (
    MAX_DEPTH,
    DocumentNode,
    Node,
    NodeKind,
    OtherNode,
    Truncated,
    parse_document,
)
from jtix.marks import apply_marks_in_order
from jtix.styles import PLAIN, PlainStyler, Styler
from jtix.table import layout_table

logger = logging.getLogger(__name__)

INDENT_UNIT = "  "
BULLET = "•"
HEADING_MARKER = "═"
CODE_BLOCK_WIDTH = 40
RULE_WIDTH = 50
MEDIA_PLACEHOLDER = "[media attachment]"
MENTION_PLACEHOLDER = "@user"
TRUNCATED_MARKER = "[...]"

EMPTY_BODY = "(empty)"
NO_DESCRIPTION = "No description"

# panelType -> (icon, color)
PANEL_ICONS: dict[str, tuple[str, str]] = {
    "info": ("ℹ", "blue"),
    "note": ("📝", "cyan"),
    "warning": ("⚠", "yellow"),
    "error": ("✖", "red"),
    "success": ("✔", "green"),
}

INLINE_KINDS = frozenset({
    NodeKind.TEXT,
    NodeKind.HARD_BREAK,
    NodeKind.MENTION,
    NodeKind.EMOJI,
    NodeKind.INLINE_CARD,
})

Handler = Callable[[Node, int, int], str]


def _is_inline(node: DocumentNode) -> bool:
    return isinstance(node, Node) and node.kind in INLINE_KINDS


def _children(node: DocumentNode) -> tuple[DocumentNode, ...]:
    if isinstance(node, Truncated):
        return ()
    return node.children


def _heading_level(node: Node) -> int:
    """Return the heading level, treating anything missing or below 1 as 1.

    Negative and zero levels are clamped before the marker width is worked
    out, so ``level: -1`` gets the same three markers as level 1 rather
    than five, and a huge negative level cannot build a huge marker.
    """
    level = node.attrs.get("level")
    if isinstance(level, bool) or not isinstance(level, (int, float)):
        return 1
    if not math.isfinite(level) or level < 1:
        return 1
    return int(level)


class BlockRenderer:
    """Recursive-descent renderer from document nodes to styled text.

    The only state is the injected styler, so one instance can be shared
    between threads. ``indent`` is the nesting level used to prefix block
    output; ``depth`` counts recursion and is capped at MAX_DEPTH.
    """

    def __init__(self, styler: Styler = PLAIN) -> None:
        self._styler = styler
        # Table cells are laid out from plain text.
        self._plain = self if isinstance(styler, PlainStyler) else BlockRenderer(PLAIN)
        self._handlers: dict[NodeKind, Handler] = {
            NodeKind.DOC: self._render_doc,
            NodeKind.PARAGRAPH: self._render_paragraph,
            NodeKind.TEXT: self._render_text,
            NodeKind.HARD_BREAK: self._render_hard_break,
            NodeKind.HEADING: self._render_heading,
            NodeKind.BULLET_LIST: self._render_bullet_list,
            NodeKind.ORDERED_LIST: self._render_ordered_list,
            NodeKind.LIST_ITEM: self._render_list_item,
            NodeKind.CODE_BLOCK: self._render_code_block,
            NodeKind.BLOCKQUOTE: self._render_blockquote,
            NodeKind.RULE: self._render_rule,
            NodeKind.MENTION: self._render_mention,
            NodeKind.EMOJI: self._render_emoji,
            NodeKind.INLINE_CARD: self._render_card,
            NodeKind.BLOCK_CARD: self._render_card,
            NodeKind.TABLE: self._render_table,
            NodeKind.PANEL: self._render_panel,
            NodeKind.MEDIA: self._render_media,
            NodeKind.MEDIA_SINGLE: self._render_media,
        }

    @property
    def handled_kinds(self) -> frozenset[NodeKind]:
        return frozenset(self._handlers)

    def render(self, node: DocumentNode, indent: int = 0, depth: int = 0) -> str:
        """Render one node and its subtree."""
        if isinstance(node, Truncated) or depth > MAX_DEPTH:
            if depth > MAX_DEPTH:
                logger.debug(f"render depth exceeds {MAX_DEPTH} levels, truncating")
            return self._styler.dim(self._styler.text(TRUNCATED_MARKER))
        if isinstance(node, OtherNode):
            return self._render_other(node, indent, depth)
        return self._handlers[node.kind](node, indent, depth)

    def _render_all(
        self, nodes: Iterable[DocumentNode], indent: int, depth: int
    ) -> list[str]:
        return [self.render(child, indent, depth + 1) for child in nodes]

    def _render_doc(self, node: Node, indent: int, depth: int) -> str:
        # Block children go on their own lines; runs of inline children
        # placed directly under the root are concatenated.
        parts: list[str] = []
        previous_inline = False
        for child in node.children:
            rendered = self.render(child, indent, depth + 1)
            inline = _is_inline(child)
            if parts and inline and previous_inline:
                parts[-1] += rendered
            else:
                parts.append(rendered)
            previous_inline = inline
        return "\n".join(parts)

    def _render_paragraph(self, node: Node, indent: int, depth: int) -> str:
        text = "".join(self._render_all(node.children, 0, depth))
        return f"{INDENT_UNIT * indent}{text}" if text else ""

    def _render_text(self, node: Node, indent: int, depth: int) -> str:
        return apply_marks_in_order(self._styler.text(node.text), node.marks, self._styler)

    def _render_hard_break(self, node: Node, indent: int, depth: int) -> str:
        return "\n" + INDENT_UNIT * indent

    def _render_heading(self, node: Node, indent: int, depth: int) -> str:
        s = self._styler
        marker = HEADING_MARKER * max(1, 4 - _heading_level(node)) + " "
        text = "".join(self._render_all(node.children, 0, depth))
        return f"\n{INDENT_UNIT * indent}{s.color(s.text(marker), 'bold cyan')}{s.bold(text)}"

    def _render_bullet_list(self, node: Node, indent: int, depth: int) -> str:
        return "\n".join(
            self._render_item(child, indent, depth + 1, BULLET)
            for child in node.children
        )

    def _render_ordered_list(self, node: Node, indent: int, depth: int) -> str:
        return "\n".join(
            self._render_item(child, indent, depth + 1, f"{number}.")
            for number, child in enumerate(node.children, start=1)
        )

    def _render_item(
        self, node: DocumentNode, indent: int, depth: int, bullet: str
    ) -> str:
        if (
            isinstance(node, Node)
            and node.kind is NodeKind.LIST_ITEM
            and depth <= MAX_DEPTH
        ):
            return self._list_item(node, indent, depth, bullet)
        return self.render(node, indent, depth)

    def _render_list_item(self, node: Node, indent: int, depth: int) -> str:
        return self._list_item(node, indent, depth, BULLET)

    def _list_item(self, node: Node, indent: int, depth: int, bullet: str) -> str:
        s = self._styler
        content = "\n".join(self._render_all(node.children, 0, depth)).strip()
        return f"{INDENT_UNIT * indent}{s.accent(s.text(bullet))} {content}"

    def _render_code_block(self, node: Node, indent: int, depth: int) -> str:
        s = self._styler
        prefix = INDENT_UNIT * indent
        language = node.attr("language")
        code = "".join(
            child.text
            for child in node.children
            if isinstance(child, Node) and child.kind is NodeKind.TEXT
        )

        label = f" {language} " if language else ""
        fill = "─" * max(0, CODE_BLOCK_WIDTH - 3 - len(label))
        width = 3 + len(label) + len(fill)
        top = s.dim("┌──")
        if label:
            top += s.color(s.text(label), "black on yellow")
        top += s.dim(fill)
        bottom = s.dim("└" + "─" * (width - 1))

        lines = [f"{prefix}{top}"]
        lines.extend(
            f"{prefix}{s.dim('│')} {s.code(s.text(line))}" for line in code.split("\n")
        )
        lines.append(f"{prefix}{bottom}")
        return "\n".join(lines)

    def _render_blockquote(self, node: Node, indent: int, depth: int) -> str:
        s = self._styler
        prefix = INDENT_UNIT * indent
        content = "\n".join(self._render_all(node.children, 0, depth))
        return "\n".join(
            f"{prefix}{s.dim('│')} {s.italic(line)}" for line in content.split("\n")
        )

    def _render_rule(self, node: Node, indent: int, depth: int) -> str:
        return f"\n{INDENT_UNIT * indent}{self._styler.dim('─' * RULE_WIDTH)}\n"

    def _render_mention(self, node: Node, indent: int, depth: int) -> str:
        s = self._styler
        return s.accent(s.text(node.attr("text") or MENTION_PLACEHOLDER))

    def _render_emoji(self, node: Node, indent: int, depth: int) -> str:
        return self._styler.text(node.attr("shortName") or "")

    def _render_card(self, node: Node, indent: int, depth: int) -> str:
        url = node.attr("url")
        if not url:
            return ""
        return self._styler.link(self._styler.text(url))

    def _render_table(self, node: Node, indent: int, depth: int) -> str:
        rows = [
            [self._cell_text(cell, depth + 2) for cell in _children(row)]
            for row in node.children
        ]
        return layout_table(rows, styler=self._styler, prefix=INDENT_UNIT * indent)

    def _cell_text(self, cell: DocumentNode, depth: int) -> str:
        # Nested marks inside cells are dropped; the grid is laid out from plain text.
        return "".join(
            self._plain.render(child, 0, depth + 1) for child in _children(cell)
        ).strip()

    def _render_panel(self, node: Node, indent: int, depth: int) -> str:
        s = self._styler
        icon, color = PANEL_ICONS.get(node.attr("panelType") or "", PANEL_ICONS["info"])
        content = "\n".join(self._render_all(node.children, 0, depth))
        return f"\n{INDENT_UNIT * indent}{s.color(s.text(icon), color)} {content}\n"

    def _render_media(self, node: Node, indent: int, depth: int) -> str:
        s = self._styler
        return f"{INDENT_UNIT * indent}{s.dim(s.text(MEDIA_PLACEHOLDER))}"

    def _render_other(self, node: OtherNode, indent: int, depth: int) -> str:
        if not node.children:
            return ""
        logger.debug(f"rendering unknown node kind {node.kind!r} as its children")
        return "".join(self._render_all(node.children, indent, depth))


def render_document(
    raw: Any,
    *,
    styler: Styler = PLAIN,
    empty: str = EMPTY_BODY,
) -> str:
    """Render a raw document tree to a multi-line string.

    Args:
        raw: Loosely-typed tree, normally ``{"type": "doc", "content": [...]}``
        styler: Styling capability; PLAIN produces unstyled text
        empty: Sentinel returned when ``raw`` is not a document

    Returns:
        The rendered document, or the dimmed sentinel
    """
    root = parse_document(raw)
    if root is None:
        return styler.dim(styler.text(empty))
    return BlockRenderer(styler).render(root)


def document_to_text(raw: Any, empty: str = EMPTY_BODY) -> str:
    """Render a raw document tree without any styling."""
    return render_document(raw, styler=PLAIN, empty=empty)
