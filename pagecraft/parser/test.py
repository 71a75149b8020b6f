"""Unit tests for the template parser."""

import pytest

from pagecraft.parser import (
    ROOT_TAG,
    TEXT_TAG,
    Node,
    TemplateSyntaxError,
    parse_template,
)


class TestParseTemplate:
    """Tests for tree construction."""

    @pytest.mark.unit
    def test_preserves_component_case(self):
        document = parse_template('<DisplayName showLabel="true"></DisplayName>')
        node = document.root.children[0]
        assert node.tag == "DisplayName"
        assert node.attributes == {"showLabel": "true"}

    @pytest.mark.unit
    def test_self_closing_component(self):
        document = parse_template('<BlogPosts limit="3" /><Bio />')
        tags = [child.tag for child in document.root.children]
        assert tags == ["BlogPosts", "Bio"]
        assert document.root.children[0].children == []

    @pytest.mark.unit
    def test_nesting_and_text(self):
        document = parse_template("<div><Heading>Hello</Heading></div>")
        div = document.root.children[0]
        heading = div.children[0]
        assert heading.tag == "Heading"
        assert heading.children[0].tag == TEXT_TAG
        assert heading.children[0].text == "Hello"

    @pytest.mark.unit
    def test_whitespace_text_dropped(self):
        document = parse_template("<div>\n   <Bio />\n</div>")
        assert [c.tag for c in document.root.children[0].children] == ["Bio"]

    @pytest.mark.unit
    def test_void_elements_close_immediately(self):
        document = parse_template("<div><br><img src='a.png'><span>x</span></div>")
        tags = [c.tag for c in document.root.children[0].children]
        assert tags == ["br", "img", "span"]

    @pytest.mark.unit
    def test_valueless_attribute(self):
        document = parse_template("<FlexContainer wrap></FlexContainer>")
        assert document.root.children[0].attributes == {"wrap": ""}

    @pytest.mark.unit
    def test_positions_recorded(self):
        document = parse_template("<div>\n  <Bio />\n</div>")
        bio = document.root.children[0].children[0]
        assert (bio.line, bio.column) == (2, 3)

    @pytest.mark.unit
    def test_root_tag(self):
        assert parse_template("").root.tag == ROOT_TAG


class TestStyleAndDocument:
    """Tests for style extraction and full documents."""

    @pytest.mark.unit
    def test_style_block_extracted(self):
        document = parse_template("<style> .x { color: red; } </style><Bio />")
        assert document.css == ".x { color: red; }"
        assert [c.tag for c in document.root.children] == ["Bio"]

    @pytest.mark.unit
    def test_no_style_block(self):
        assert parse_template("<Bio />").css is None

    @pytest.mark.unit
    def test_second_style_block_rejected(self):
        with pytest.raises(TemplateSyntaxError) as exc_info:
            parse_template("<style>a{}</style>\n<style>b{}</style>")
        assert "second <style>" in str(exc_info.value)
        assert exc_info.value.line == 2

    @pytest.mark.unit
    def test_body_extracted_from_full_document(self):
        markup = (
            "<!DOCTYPE html><html><head><title>Mine</title>"
            "<style>p{}</style></head><body><Bio /></body></html>"
        )
        document = parse_template(markup)
        assert [c.tag for c in document.root.children] == ["Bio"]
        assert document.css == "p{}"


class TestSyntaxErrors:
    """Tests for malformed markup."""

    @pytest.mark.unit
    def test_unexpected_closing_tag(self):
        with pytest.raises(TemplateSyntaxError) as exc_info:
            parse_template("<div></Tab>")
        message = str(exc_info.value)
        assert message == "Unexpected closing tag </Tab> at line 1, column 6"
        assert exc_info.value.column == 6

    @pytest.mark.unit
    def test_missing_closing_tag(self):
        with pytest.raises(TemplateSyntaxError) as exc_info:
            parse_template("<div>\n  <Tabs>")
        assert str(exc_info.value) == (
            "Missing closing tag for <Tabs> opened at line 2, column 3"
        )


class TestNodeHelpers:
    """Tests for Node traversal helpers."""

    @pytest.mark.unit
    def test_count_and_depth(self):
        document = parse_template("<div><div><span>x</span></div></div><Bio />")
        assert document.root.count_nodes() == 5
        assert document.root.max_depth() == 3

    @pytest.mark.unit
    def test_walk_order(self):
        root = Node(
            tag=ROOT_TAG,
            children=[Node(tag="a", children=[Node(tag="b")]), Node(tag="c")],
        )
        assert [(n.tag, d) for n, d in root.walk()] == [
            (ROOT_TAG, 0),
            ("a", 1),
            ("b", 2),
            ("c", 1),
        ]
