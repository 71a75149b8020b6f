"""User-facing template error reporting.

Example usage:
    >>> from pagecraft.errors import parse_template_error, format_for_display
    >>> error = parse_template_error("Unknown component: BlogPost is not registered")
    >>> print(format_for_display(error))
"""

from .lib import (
    ErrorKind,
    TemplateError,
    categorize_error,
    extract_component,
    extract_location,
    format_for_api,
    format_for_display,
    get_user_friendly_error,
    is_template_error,
    parse_template_error,
)

__all__ = [
    "ErrorKind",
    "TemplateError",
    "categorize_error",
    "extract_component",
    "extract_location",
    "format_for_api",
    "format_for_display",
    "get_user_friendly_error",
    "is_template_error",
    "parse_template_error",
]
