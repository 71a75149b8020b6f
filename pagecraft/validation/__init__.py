"""Template validation against budgets and the component registry.

Example usage:
    >>> from pagecraft.config import CompilerLimits
    >>> from pagecraft.parser import parse_template
    >>> from pagecraft.registry import build_default_registry
    >>> from pagecraft.validation import validate_tree
    >>> document = parse_template("<Tabs><Tab title='One'></Tab></Tabs>")
    >>> validate_tree(document.root, build_default_registry(), CompilerLimits()).is_valid
    True
"""

from .lib import (
    TemplateStats,
    ValidationError,
    ValidationReport,
    check_budgets,
    check_size,
    measure_size_kb,
    measure_tree,
    resolve_tag,
    validate_tree,
)

__all__ = [
    # Types
    "TemplateStats",
    "ValidationError",
    "ValidationReport",
    # Budgets
    "check_budgets",
    "check_size",
    "measure_size_kb",
    "measure_tree",
    # Registry checks
    "resolve_tag",
    "validate_tree",
]
