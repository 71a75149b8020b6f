"""Markup parser for the pagecraft template dialect.

Converts template markup into a generic ``Node`` tree plus the content of
an optional single ``<style>`` block. Full HTML documents are accepted:
``<html>``, ``<head>`` and ``<body>`` are transparent and only body content
becomes part of the tree.

Tag and attribute names keep the case the author wrote, since component
names are PascalCase and ``HTMLParser`` lowercases everything it reports.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from html.parser import HTMLParser

from pydantic import BaseModel, Field

ROOT_TAG = "#root"
TEXT_TAG = "#text"

# Tags whose start and end are dropped while their content is kept
TRANSPARENT_TAGS = {"html", "body"}

# Self-closing tags
VOID_TAGS = {
    "area",
    "base",
    "br",
    "col",
    "embed",
    "hr",
    "img",
    "input",
    "link",
    "meta",
    "param",
    "source",
    "track",
    "wbr",
}

_TAG_NAME_RE = re.compile(r"</?\s*([^\s/>]+)")
_ATTR_NAME_RE = re.compile(
    r"""([^\s"'>/=]+)(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s>]+))?"""
)


class TemplateSyntaxError(Exception):
    """Malformed template markup.

    Attributes:
        line: 1-based line of the offending tag.
        column: 1-based column of the offending tag.
    """

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        super().__init__(message)
        self.line = line
        self.column = column


# =============================================================================
# Tree Model
# =============================================================================


class Node(BaseModel):
    """One element or text run of a parsed template.

    Attributes:
        tag: Tag name as written, ``#text`` for text runs, ``#root`` for the
            document root.
        attributes: Attribute name to value, in source order.
        children: Child nodes, in source order.
        text: Literal text for ``#text`` nodes.
        line: 1-based line of the opening tag.
        column: 1-based column of the opening tag.
    """

    tag: str = Field(..., description="Tag name as written in the markup")
    attributes: dict[str, str] = Field(
        default_factory=dict, description="Attributes in source order"
    )
    children: list["Node"] = Field(
        default_factory=list, description="Child nodes in source order"
    )
    text: str | None = Field(None, description="Literal text for text runs")
    line: int | None = Field(None, description="1-based source line")
    column: int | None = Field(None, description="1-based source column")

    @property
    def is_text(self) -> bool:
        return self.tag == TEXT_TAG

    def walk(self, depth: int = 0) -> Iterator[tuple["Node", int]]:
        """Yield (node, depth) pairs in document order, self first.

        Iterative, so arbitrarily deep trees can be measured before any
        depth budget is enforced.
        """
        pending: list[tuple[Node, int]] = [(self, depth)]
        while pending:
            node, level = pending.pop()
            yield node, level
            pending.extend((child, level + 1) for child in reversed(node.children))

    def count_nodes(self) -> int:
        """Number of nodes below this one (elements and text runs)."""
        return sum(1 for _ in self.walk()) - 1

    def max_depth(self) -> int:
        """Deepest element nesting level below this node."""
        return max(
            (depth for node, depth in self.walk() if not node.is_text), default=0
        )

    def location(self) -> str:
        return f"line {self.line}, column {self.column}"


class ParsedDocument(BaseModel):
    """Result of parsing: the node tree and the extracted style block."""

    root: Node
    css: str | None = None


# =============================================================================
# Parser
# =============================================================================


class TemplateTreeBuilder(HTMLParser):
    """HTML parser that builds a case-preserving ``Node`` tree."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.root = Node(tag=ROOT_TAG, line=1, column=1)
        self.stack: list[Node] = [self.root]
        self.css: str | None = None
        self._style_parts: list[str] | None = None
        self._in_head = False
        self._source = ""

    def feed(self, data: str) -> None:
        self._source += data
        super().feed(data)

    def _source_line(self, line: int) -> str:
        lines = self._source.split("\n")
        return lines[line - 1] if 0 < line <= len(lines) else ""

    # -------------------------------------------------------------------------
    # Raw name recovery
    # -------------------------------------------------------------------------

    def _raw_names(self, tag: str) -> tuple[str, dict[str, str]]:
        """Recover the written tag name and attribute names from the raw tag."""
        raw = self.get_starttag_text() or ""
        match = _TAG_NAME_RE.match(raw)
        if not match:
            return tag, {}
        name = match.group(1)
        body = raw[match.end():]
        attr_names: dict[str, str] = {}
        for attr_match in _ATTR_NAME_RE.finditer(body):
            written = attr_match.group(1)
            attr_names.setdefault(written.lower(), written)
        return name, attr_names

    def _position(self) -> tuple[int, int]:
        line, offset = self.getpos()
        return line, offset + 1

    # -------------------------------------------------------------------------
    # HTMLParser callbacks
    # -------------------------------------------------------------------------

    def _open(
        self, tag: str, attrs: list[tuple[str, str | None]], self_closing: bool
    ) -> None:
        line, column = self._position()

        if tag == "style":
            if self.css is not None or self._style_parts is not None:
                raise TemplateSyntaxError(
                    f"Unexpected second <style> block at line {line}, column {column}",
                    line,
                    column,
                )
            self._style_parts = []
            if self_closing:
                self._close_style()
            return
        if tag == "head":
            self._in_head = not self_closing
            return
        if self._in_head or tag in TRANSPARENT_TAGS:
            return

        name, attr_names = self._raw_names(tag)
        node = Node(
            tag=name,
            attributes={
                attr_names.get(key, key): value if value is not None else ""
                for key, value in attrs
            },
            line=line,
            column=column,
        )
        self.stack[-1].children.append(node)
        if not self_closing and tag not in VOID_TAGS:
            self.stack.append(node)

    def _close_style(self) -> None:
        self.css = "".join(self._style_parts or []).strip()
        self._style_parts = None

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._open(tag, attrs, self_closing=False)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._open(tag, attrs, self_closing=True)

    def handle_endtag(self, tag: str) -> None:
        if tag == "style" and self._style_parts is not None:
            self._close_style()
            return
        if tag == "head":
            self._in_head = False
            return
        if self._in_head or tag in TRANSPARENT_TAGS or tag in VOID_TAGS:
            return

        line, column = self._position()
        current = self.stack[-1]
        if len(self.stack) > 1 and current.tag.lower() == tag:
            self.stack.pop()
            return

        name = tag
        written = _TAG_NAME_RE.search(self._source_line(line), column - 1)
        if written:
            name = written.group(1)
        raise TemplateSyntaxError(
            f"Unexpected closing tag </{name}> at line {line}, column {column}",
            line,
            column,
        )

    def handle_data(self, data: str) -> None:
        if self._style_parts is not None:
            self._style_parts.append(data)
            return
        if self._in_head or not data.strip():
            return
        line, column = self._position()
        self.stack[-1].children.append(
            Node(tag=TEXT_TAG, text=data, line=line, column=column)
        )

    # -------------------------------------------------------------------------
    # Finishing
    # -------------------------------------------------------------------------

    def finish(self) -> ParsedDocument:
        """Close the parser and return the document, or raise on unclosed tags."""
        self.close()
        if self._style_parts is not None:
            raise TemplateSyntaxError("Missing closing tag for <style>")
        if len(self.stack) > 1:
            unclosed = self.stack[-1]
            raise TemplateSyntaxError(
                f"Missing closing tag for <{unclosed.tag}> opened at "
                f"{unclosed.location()}",
                unclosed.line,
                unclosed.column,
            )
        return ParsedDocument(root=self.root, css=self.css)


def parse_template(markup: str) -> ParsedDocument:
    """Parse template markup into a node tree and style block.

    Args:
        markup: Template markup (fragment or full HTML document).

    Returns:
        ParsedDocument with a ``#root`` node and extracted CSS.

    Raises:
        TemplateSyntaxError: On mismatched or unclosed tags, or a second
            style block.
    """
    builder = TemplateTreeBuilder()
    builder.feed(markup)
    return builder.finish()
