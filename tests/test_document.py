"""Tests for the document tree model."""

from typing import Any

from conftest import adf, paragraph, text

from jtix.document import (
    MAX_DEPTH,
    Mark,
    MarkType,
    Node,
    NodeKind,
    OtherNode,
    Truncated,
    parse_document,
    parse_mark,
    parse_node,
)


class TestParseDocument:
    def test_returns_root_node_for_doc(self) -> None:
        root = parse_document(adf(paragraph(text("hi"))))
        assert isinstance(root, Node)
        assert root.kind is NodeKind.DOC
        assert len(root.children) == 1

    def test_non_mapping_is_not_a_document(self) -> None:
        for value in (None, "text", 42, [], ["doc"], 3.5):
            assert parse_document(value) is None

    def test_wrong_root_type_is_not_a_document(self) -> None:
        assert parse_document({"type": "paragraph", "content": []}) is None
        assert parse_document({"content": []}) is None

    def test_doc_without_content_list_is_not_a_document(self) -> None:
        assert parse_document({"type": "doc"}) is None
        assert parse_document({"type": "doc", "content": None}) is None
        assert parse_document({"type": "doc", "content": "nope"}) is None

    def test_doc_with_empty_content_has_no_children(self) -> None:
        root = parse_document({"type": "doc", "content": []})
        assert root is not None
        assert root.children == ()


class TestParseNode:
    def test_defaults_missing_fields(self) -> None:
        node = parse_node({"type": "text"})
        assert isinstance(node, Node)
        assert node.text == ""
        assert node.marks == ()
        assert node.children == ()
        assert dict(node.attrs) == {}

    def test_children_preserve_order(self) -> None:
        node = parse_node(paragraph(text("a"), text("b"), text("c")))
        assert [child.text for child in node.children] == ["a", "b", "c"]

    def test_unknown_kind_becomes_other_node(self) -> None:
        node = parse_node({"type": "customWidget", "content": [text("x")]})
        assert isinstance(node, OtherNode)
        assert node.kind == "customWidget"
        assert len(node.children) == 1

    def test_table_rows_are_other_nodes(self) -> None:
        node = parse_node({"type": "tableRow", "content": []})
        assert isinstance(node, OtherNode)

    def test_missing_type_becomes_other_node(self) -> None:
        node = parse_node({"content": [text("x")]})
        assert isinstance(node, OtherNode)
        assert node.kind == ""

    def test_malformed_fields_are_defaulted(self) -> None:
        node = parse_node({
            "type": "paragraph",
            "content": "not a list",
            "marks": {"type": "strong"},
            "attrs": ["nope"],
            "text": 12,
        })
        assert isinstance(node, Node)
        assert node.children == ()
        assert node.marks == ()
        assert dict(node.attrs) == {}
        assert node.text == ""

    def test_non_mapping_children_are_dropped(self) -> None:
        node = parse_node({"type": "paragraph", "content": [None, "x", 3, text("kept")]})
        assert len(node.children) == 1
        assert node.children[0].text == "kept"

    def test_attrs_keep_only_scalars(self) -> None:
        node = parse_node({
            "type": "heading",
            "attrs": {"level": 2, "id": "abc", "nested": {"a": 1}, "list": [1], "none": None},
        })
        assert dict(node.attrs) == {"level": 2, "id": "abc", "none": None}

    def test_attr_treats_empty_values_as_absent(self) -> None:
        node = parse_node({"type": "mention", "attrs": {"text": "", "id": 0, "url": "x"}})
        assert node.attr("text") is None
        assert node.attr("missing") is None
        assert node.attr("url") == "x"


class TestParseMarks:
    def test_known_marks_become_enum_values(self) -> None:
        node = parse_node(text("x", "strong", "em", "textColor"))
        assert [mark.type for mark in node.marks] == [
            MarkType.STRONG,
            MarkType.EMPHASIS,
            MarkType.TEXT_COLOR,
        ]

    def test_unknown_mark_kept_as_string(self) -> None:
        mark = parse_mark({"type": "subsup", "attrs": {"type": "sub"}})
        assert mark == Mark(type="subsup", attrs={"type": "sub"})

    def test_non_mapping_marks_are_dropped(self) -> None:
        node = parse_node({"type": "text", "text": "x", "marks": ["strong", None, {"type": "em"}]})
        assert [mark.type for mark in node.marks] == [MarkType.EMPHASIS]

    def test_mark_order_is_preserved(self) -> None:
        node = parse_node(text("x", "em", "strong", "em"))
        assert [mark.type for mark in node.marks] == [
            MarkType.EMPHASIS,
            MarkType.STRONG,
            MarkType.EMPHASIS,
        ]


class TestDepthCap:
    """Hardening: nesting deeper than MAX_DEPTH is truncated, not followed."""

    @staticmethod
    def _nested(levels: int) -> dict[str, Any]:
        node: dict[str, Any] = text("leaf")
        for _ in range(levels):
            node = {"type": "blockquote", "content": [node]}
        return node

    def test_shallow_tree_is_not_truncated(self) -> None:
        node = parse_node(self._nested(5))
        for _ in range(5):
            node = node.children[0]
        assert isinstance(node, Node)
        assert node.text == "leaf"

    def test_deep_tree_is_truncated(self) -> None:
        node = parse_node(self._nested(MAX_DEPTH + 10))
        for _ in range(MAX_DEPTH):
            assert isinstance(node, Node)
            node = node.children[0]
        assert isinstance(node.children[0], Truncated)

    def test_very_deep_tree_does_not_hit_recursion_limit(self) -> None:
        root = parse_document(adf(self._nested(5000)))
        assert root is not None
