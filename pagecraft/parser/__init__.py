"""Template markup parser.

Example usage:
    >>> from pagecraft.parser import parse_template
    >>> document = parse_template('<style>.a{}</style><BlogPosts limit="3" />')
    >>> document.root.children[0].tag
    'BlogPosts'
    >>> document.css
    '.a{}'
"""

from .lib import (
    ROOT_TAG,
    TEXT_TAG,
    VOID_TAGS,
    Node,
    ParsedDocument,
    TemplateSyntaxError,
    TemplateTreeBuilder,
    parse_template,
)

__all__ = [
    # Models
    "Node",
    "ParsedDocument",
    # Parsing
    "TemplateTreeBuilder",
    "TemplateSyntaxError",
    "parse_template",
    # Constants
    "ROOT_TAG",
    "TEXT_TAG",
    "VOID_TAGS",
]
