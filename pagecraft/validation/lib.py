"""Template validation.

Checks a parsed template against hard budgets and against the component
registry before anything is compiled:

- Budgets: size in kilobytes, node count, nesting depth and component
  count. Any violation is fatal and reported alone.
- Registry: every tag must be a registered component or a plain HTML tag,
  every component attribute must be allowed, and parent/child rules must
  hold.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from pydantic import BaseModel, Field

from pagecraft.config import CompilerLimits
from pagecraft.core.log import get_logger
from pagecraft.parser import Node
from pagecraft.registry import PLAIN_HTML_TAGS, ComponentRegistry, RelationshipKind

logger = get_logger("validation")

UNSAFE_URL_SCHEMES = ("javascript:", "vbscript:")
URL_ATTRIBUTES = {"href", "src", "action", "formaction"}


@dataclass
class ValidationError:
    """A single validation failure.

    Attributes:
        message: Human-readable error description, including location.
        error_type: Category of the error (validation, component, attribute).
        line: 1-based line of the offending node, if known.
        column: 1-based column of the offending node, if known.
        component: Component name involved, if any.
    """

    message: str
    error_type: str
    line: int | None = None
    column: int | None = None
    component: str | None = None


class TemplateStats(BaseModel):
    """Size and complexity measurements of one template."""

    node_count: int = Field(0, alias="nodeCount")
    max_depth: int = Field(0, alias="maxDepth")
    size_kb: float = Field(0.0, alias="sizeKB")
    component_counts: dict[str, int] = Field(
        default_factory=dict, alias="componentCounts"
    )

    model_config = {"populate_by_name": True}

    @property
    def component_total(self) -> int:
        return sum(self.component_counts.values())


@dataclass
class ValidationReport:
    """Outcome of validating one template tree."""

    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    stats: TemplateStats | None = None

    @property
    def is_valid(self) -> bool:
        return not self.errors


# =============================================================================
# Budgets
# =============================================================================


def measure_size_kb(markup: str) -> float:
    """UTF-8 size of the raw markup in kilobytes."""
    return len(markup.encode("utf-8")) / 1024


def check_size(markup: str, limits: CompilerLimits) -> ValidationError | None:
    """Size budget, checked on the raw text before parsing."""
    size_kb = measure_size_kb(markup)
    if size_kb <= limits.max_size_kb:
        return None
    return ValidationError(
        message=(
            f"Template too large: {size_kb:.1f}KB (max: {limits.max_size_kb:g}KB)"
        ),
        error_type="validation",
    )


def resolve_tag(tag: str, registry: ComponentRegistry) -> tuple[str, bool] | None:
    """Resolve a tag to (name, is_component), or None if unknown.

    An exact registry match wins, then an exact plain HTML tag, then a
    case-insensitive registry match, then a case-insensitive HTML tag.
    """
    match = registry.get_any_component(tag)
    if match is not None and match[0].name == tag:
        return tag, True
    if tag in PLAIN_HTML_TAGS:
        return tag, False
    if match is not None:
        return match[0].name, True
    if tag.lower() in PLAIN_HTML_TAGS:
        return tag.lower(), False
    return None


def measure_tree(
    root: Node, registry: ComponentRegistry, size_kb: float = 0.0
) -> TemplateStats:
    """Count nodes, depth and component instances in one pass."""
    node_count = -1
    max_depth = 0
    components: Counter[str] = Counter()
    for node, depth in root.walk():
        node_count += 1
        if node.is_text or node is root:
            continue
        max_depth = max(max_depth, depth)
        resolved = resolve_tag(node.tag, registry)
        if resolved is not None and resolved[1]:
            components[resolved[0]] += 1
    return TemplateStats(
        node_count=node_count,
        max_depth=max_depth,
        size_kb=round(size_kb, 2),
        component_counts=dict(components),
    )


def check_budgets(stats: TemplateStats, limits: CompilerLimits) -> ValidationError | None:
    """First violated tree budget, or None."""
    if stats.node_count > limits.max_nodes:
        message = f"Too many nodes: {stats.node_count} (max: {limits.max_nodes})"
    elif stats.max_depth > limits.max_depth:
        message = (
            f"Template too deeply nested: {stats.max_depth} levels "
            f"(max: {limits.max_depth})"
        )
    elif stats.component_total > limits.max_components:
        message = (
            f"Too many components: {stats.component_total} "
            f"(max: {limits.max_components})"
        )
    else:
        return None
    return ValidationError(message=message, error_type="validation")


# =============================================================================
# Registry Checks
# =============================================================================


def _location(node: Node) -> str:
    return f"(line {node.line}, column {node.column})"


def _check_attributes(
    node: Node,
    name: str,
    is_component: bool,
    registry: ComponentRegistry,
    limits: CompilerLimits,
    report: ValidationReport,
) -> None:
    for attribute, value in node.attributes.items():
        lowered = attribute.lower()
        if lowered.startswith("on"):
            report.errors.append(
                ValidationError(
                    message=(
                        f"Event handler attribute \"{attribute}\" is not allowed "
                        f"on <{name}> {_location(node)}"
                    ),
                    error_type="attribute",
                    line=node.line,
                    column=node.column,
                    component=name if is_component else None,
                )
            )
            continue
        if lowered in URL_ATTRIBUTES and value.strip().lower().startswith(
            UNSAFE_URL_SCHEMES
        ):
            report.errors.append(
                ValidationError(
                    message=(
                        f"Unsafe URL in attribute \"{attribute}\" on <{name}> "
                        f"{_location(node)}"
                    ),
                    error_type="attribute",
                    line=node.line,
                    column=node.column,
                )
            )
            continue
        if not is_component or registry.resolve_attribute(name, attribute):
            continue
        message = f"Unknown attribute \"{attribute}\" on <{name}> {_location(node)}"
        if limits.strict_attributes:
            report.errors.append(
                ValidationError(
                    message=message,
                    error_type="attribute",
                    line=node.line,
                    column=node.column,
                    component=name,
                )
            )
        else:
            report.warnings.append(message)


def _check_relationships(
    node: Node,
    name: str,
    parent_component: str | None,
    registry: ComponentRegistry,
    report: ValidationReport,
) -> None:
    required_parent = registry.get_required_parent(name)
    if required_parent is not None and parent_component != required_parent:
        report.errors.append(
            ValidationError(
                message=(
                    f"Validation failed: <{name}> must be placed inside "
                    f"<{required_parent}> {_location(node)}"
                ),
                error_type="validation",
                line=node.line,
                column=node.column,
                component=name,
            )
        )

    if parent_component is None:
        return
    relationship = registry.get_relationship(parent_component)
    if relationship is None or relationship.accepts_children is True:
        return
    if not registry.can_accept_child(parent_component, name):
        report.errors.append(
            ValidationError(
                message=(
                    f"Validation failed: <{parent_component}> does not accept "
                    f"<{name}> as a child {_location(node)}"
                ),
                error_type="validation",
                line=node.line,
                column=node.column,
                component=name,
            )
        )


def _check_child_count(
    node: Node,
    name: str,
    component_children: int,
    registry: ComponentRegistry,
    report: ValidationReport,
) -> None:
    relationship = registry.get_relationship(name)
    if relationship is None:
        return
    minimum = relationship.min_children
    if minimum is not None and component_children < minimum:
        plural = "" if minimum == 1 else "s"
        report.errors.append(
            ValidationError(
                message=(
                    f"Validation failed: <{name}> requires at least {minimum} "
                    f"child component{plural}, found {component_children} "
                    f"{_location(node)}"
                ),
                error_type="validation",
                line=node.line,
                column=node.column,
                component=name,
            )
        )
    if relationship.max_children is None:
        return
    if component_children > relationship.max_children:
        report.errors.append(
            ValidationError(
                message=(
                    f"Validation failed: <{name}> allows at most "
                    f"{relationship.max_children} child components, found "
                    f"{component_children} {_location(node)}"
                ),
                error_type="validation",
                line=node.line,
                column=node.column,
                component=name,
            )
        )


def _walk(
    node: Node,
    parent_component: str | None,
    registry: ComponentRegistry,
    limits: CompilerLimits,
    report: ValidationReport,
) -> int:
    """Validate one element and its subtree.

    Returns the number of component instances it contributes to the
    enclosing component: 1 for a component, the sum over its children for
    a plain HTML wrapper.
    """
    resolved = resolve_tag(node.tag, registry)
    if resolved is None:
        report.errors.append(
            ValidationError(
                message=(
                    f"Unknown component: {node.tag} is not registered "
                    f"{_location(node)}"
                ),
                error_type="component",
                line=node.line,
                column=node.column,
                component=node.tag,
            )
        )
        return 0

    name, is_component = resolved
    _check_attributes(node, name, is_component, registry, limits, report)
    if is_component:
        _check_relationships(node, name, parent_component, registry, report)

    component_children = 0
    inner_parent = name if is_component else parent_component
    for child in node.children:
        if child.is_text:
            continue
        component_children += _walk(child, inner_parent, registry, limits, report)
    if is_component:
        _check_child_count(node, name, component_children, registry, report)
        return 1
    return component_children


def validate_tree(
    root: Node,
    registry: ComponentRegistry,
    limits: CompilerLimits,
    size_kb: float = 0.0,
) -> ValidationReport:
    """Validate a parsed template tree.

    Budgets are checked first; a violated budget is returned as the only
    error without walking the tree further. Otherwise every registry check
    runs and all failures are collected.

    Args:
        root: ``#root`` node of the parsed (and migrated) template.
        registry: Frozen component registry.
        limits: Budgets and strictness settings.
        size_kb: Raw markup size, recorded in the stats.

    Returns:
        ValidationReport with errors, warnings and stats.
    """
    stats = measure_tree(root, registry, size_kb)
    report = ValidationReport(stats=stats)

    budget_error = check_budgets(stats, limits)
    if budget_error is not None:
        logger.warning(budget_error.message)
        report.errors.append(budget_error)
        return report

    for child in root.children:
        if not child.is_text:
            _walk(child, None, registry, limits, report)

    for error in report.errors:
        logger.warning(error.message)
    return report
