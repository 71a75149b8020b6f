"""Error reporter: raw compiler failures to user-actionable records.

Raw failures arrive as exception messages or strings. They are categorized
by keyword, location and component name are pulled out with regular
expressions, and a title, suggestion and details are generated per
category. Hosts only ever show ``TemplateError`` records, never raw
messages or tracebacks.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from pagecraft.registry import ComponentRegistry


class ErrorKind(str, Enum):
    """Categories of template errors."""

    COMPONENT = "component"
    SYNTAX = "syntax"
    ATTRIBUTE = "attribute"
    VALIDATION = "validation"
    COMPILATION = "compilation"
    UNKNOWN = "unknown"


class TemplateError(BaseModel):
    """Structured, user-facing template error."""

    kind: ErrorKind = Field(..., description="Error category")
    title: str = Field(..., description="Short headline")
    message: str = Field(..., description="One-paragraph explanation")
    line: int | None = Field(None, description="1-based source line")
    column: int | None = Field(None, description="1-based source column")
    component: str | None = Field(None, description="Component involved")
    suggestion: str | None = Field(None, description="One-line fix hint")
    details: str | None = Field(None, description="Additional context")
    raw_error: str = Field(..., alias="rawError", description="Original message")

    model_config = {
        "use_enum_values": True,
        "populate_by_name": True,
    }


# =============================================================================
# Tables
# =============================================================================

# Keyword groups checked in order; the first group with a hit wins.
CATEGORY_KEYWORDS: tuple[tuple[ErrorKind, tuple[str, ...]], ...] = (
    (
        ErrorKind.COMPONENT,
        ("unknown component", "invalid component", "component not found", "not registered"),
    ),
    (
        ErrorKind.SYNTAX,
        ("closing tag", "opening tag", "unexpected", "syntax error"),
    ),
    (ErrorKind.ATTRIBUTE, ("attribute", "prop", "property")),
    (
        ErrorKind.VALIDATION,
        (
            "validation",
            "invalid value",
            "too many nodes",
            "too large",
            "too deeply nested",
            "too many components",
            "exceeds",
            "maximum",
        ),
    ),
    (ErrorKind.COMPILATION, ("compilation", "parse", "transform")),
)

TYPO_CORRECTIONS: dict[str, str] = {
    "BlogPost": "BlogPosts",
    "Post": "BlogPosts",
    "Friend": "FriendDisplay",
    "Friends": "FriendDisplay or MutualFriends",
    "Profile": "ProfilePhoto or ProfileHero",
    "Image": "ProfilePhoto or UserImage",
    "Text": "TextElement or Paragraph",
}

_LINE_RE = re.compile(r"line\s*(\d+)", re.IGNORECASE)
_COLUMN_RE = re.compile(r"(?:column|col)\s*(\d+)", re.IGNORECASE)
_COMPONENT_PATTERNS = (
    re.compile(r"(?i:component)\s+[\"']?([A-Z][a-zA-Z0-9]+)[\"']?"),
    re.compile(r"(?i:tag)\s+[\"']?([A-Z][a-zA-Z0-9]+)[\"']?"),
    re.compile(r"<([A-Z][a-zA-Z0-9]+)>"),
    re.compile(r"(?i:unknown\s+(?:component|tag)):\s*[\"']?([A-Za-z][a-zA-Z0-9]*)[\"']?"),
)
_COUNT_RE = re.compile(r"(\d+)\s*(?:levels\s*)?\(max:\s*(\d+)\)")
_SIZE_RE = re.compile(r"([\d.]+)KB\s*\(max:\s*([\d.]+)KB\)")


# =============================================================================
# Parsing Helpers
# =============================================================================


def categorize_error(message: str) -> ErrorKind:
    """Keyword-based category of a raw error message."""
    lower = message.lower()
    for kind, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            return kind
    return ErrorKind.UNKNOWN


def extract_location(message: str) -> tuple[int | None, int | None]:
    line = _LINE_RE.search(message)
    column = _COLUMN_RE.search(message)
    return (
        int(line.group(1)) if line else None,
        int(column.group(1)) if column else None,
    )


def extract_component(message: str) -> str | None:
    for pattern in _COMPONENT_PATTERNS:
        match = pattern.search(message)
        if match:
            return match.group(1)
    return None


def _suggestion(kind: ErrorKind, component: str | None, message: str) -> str | None:
    lower = message.lower()
    if kind == ErrorKind.COMPONENT:
        if component is None:
            return "Make sure the component is registered and spelled correctly."
        if component in TYPO_CORRECTIONS:
            return f'Did you mean "{TYPO_CORRECTIONS[component]}"?'
        return (
            "Check the component name spelling. "
            "Components must start with a capital letter."
        )
    if kind == ErrorKind.SYNTAX:
        if "closing tag" in lower:
            return (
                "Every opening tag needs a matching closing tag. "
                "Example: <Tabs>...</Tabs>"
            )
        if "attribute" in lower:
            return 'Check the attribute syntax. Use double quotes for values: attribute="value"'
        return "Check your HTML syntax. Make sure tags are properly opened and closed."
    if kind == ErrorKind.ATTRIBUTE:
        return "Check the attribute name and value against the component's properties."
    if kind == ErrorKind.VALIDATION:
        if "too many nodes" in lower:
            return (
                "Try simplifying your template or removing unnecessary wrapper "
                "elements. Move large inline <style> blocks out of the document "
                "to reduce the node count."
            )
        if "too large" in lower:
            return (
                "Your template exceeds the size limit. Consider moving inline "
                "styles to the Custom CSS field."
            )
        if "too many components" in lower:
            return "Reduce the number of components or simplify your template structure."
        if "too deeply nested" in lower:
            return (
                "Reduce nesting depth by flattening your template structure or "
                "breaking it into smaller sections."
            )
        return "Your template exceeds complexity limits. Try simplifying the structure."
    if kind == ErrorKind.COMPILATION:
        return "Try simplifying your template to find the problematic section."
    return None


def _title(kind: ErrorKind, component: str | None, message: str) -> str:
    lower = message.lower()
    if kind == ErrorKind.COMPONENT:
        return f'Unknown Component: "{component}"' if component else "Component Error"
    if kind == ErrorKind.SYNTAX:
        return "Syntax Error"
    if kind == ErrorKind.ATTRIBUTE:
        return "Attribute Error"
    if kind == ErrorKind.VALIDATION:
        if "too many nodes" in lower or "too large" in lower:
            return "Template Too Complex"
        if "too many components" in lower:
            return "Too Many Components"
        if "too deeply nested" in lower:
            return "Template Too Deeply Nested"
        return "Validation Error"
    if kind == ErrorKind.COMPILATION:
        return "Template Compilation Error"
    return "Template Error"


def _details(
    kind: ErrorKind,
    component: str | None,
    message: str,
    registry: ComponentRegistry | None,
) -> str | None:
    lower = message.lower()
    if kind == ErrorKind.COMPONENT and component:
        if registry is not None:
            names = sorted(registry.get_allowed_tags())
            listed = ", ".join(names[:10])
            more = ", and more." if len(names) > 10 else "."
            return f"Available components: {listed}{more}"
        return (
            "Available components: BlogPosts, DisplayName, Bio, ProfilePhoto, "
            "Tabs, FlexContainer, and more."
        )
    if kind == ErrorKind.SYNTAX:
        return "HTML syntax must be valid. Check that all tags are properly closed and nested."
    if kind != ErrorKind.VALIDATION:
        return None

    size = _SIZE_RE.search(message)
    if size:
        current, maximum = size.groups()
        return f"Your template is {current}KB. The maximum size is {maximum}KB."
    count = _COUNT_RE.search(message)
    if count:
        current, maximum = count.groups()
        if "too deeply nested" in lower:
            return f"Your template is nested {current} levels deep. The maximum is {maximum}."
        if "too many components" in lower:
            return f"Your template has {current} components. The maximum is {maximum}."
        return (
            f"Your template has {current} nodes. The maximum is {maximum}. "
            "Consider moving inline CSS to the Custom CSS field to reduce node count."
        )
    return "Templates have size and complexity limits to ensure good performance."


# =============================================================================
# Public Interface
# =============================================================================


def parse_template_error(
    error: BaseException | str, registry: ComponentRegistry | None = None
) -> TemplateError:
    """Convert a raw failure into a structured ``TemplateError``.

    Args:
        error: Exception or raw error message.
        registry: Optional registry used to list available components.

    Returns:
        TemplateError with category, title, message, location, suggestion
        and details filled in.

    Example:
        >>> error = parse_template_error("Unknown component: BlogPost is not registered")
        >>> error.suggestion
        'Did you mean "BlogPosts"?'
    """
    raw = error if isinstance(error, str) else str(error)
    kind = categorize_error(raw)
    line, column = extract_location(raw)
    if not isinstance(error, str):
        line = getattr(error, "line", None) or line
        column = getattr(error, "column", None) or column
    component = extract_component(raw)

    message = raw
    if line:
        location = f"Line {line}, Column {column}" if column else f"Line {line}"
        message = f"{location}: {raw}"

    return TemplateError(
        kind=kind,
        title=_title(kind, component, raw),
        message=message,
        line=line,
        column=column,
        component=component,
        suggestion=_suggestion(kind, component, raw),
        details=_details(kind, component, raw, registry),
        raw_error=raw,
    )


def format_for_display(error: TemplateError) -> str:
    """Multi-line text rendering for a UI or terminal."""
    formatted = f"{error.title}\n\n{error.message}\n"
    if error.suggestion:
        formatted += f"\nSuggestion: {error.suggestion}\n"
    if error.details:
        formatted += f"\nDetails: {error.details}\n"
    return formatted


def format_for_api(error: TemplateError) -> dict[str, Any]:
    """Compact mapping for an API response body."""
    return {
        "error": error.title,
        "type": error.kind,
        "line": error.line,
        "column": error.column,
        "suggestion": error.suggestion,
        "details": error.details or error.message,
    }


def get_user_friendly_error(error: Any) -> str:
    """Display text for any error value."""
    if not error:
        return "An unknown error occurred while processing your template."
    if isinstance(error, (str, BaseException)):
        return format_for_display(parse_template_error(error))
    return "An unexpected error occurred. Please check your template syntax."


def is_template_error(error: Any) -> bool:
    """Whether an error value looks template-related."""
    if not error:
        return False
    if isinstance(error, str):
        message = error
    elif isinstance(error, BaseException):
        message = str(error)
    else:
        return False
    lower = message.lower()
    return any(word in lower for word in ("template", "component", "compilation", "parse"))
