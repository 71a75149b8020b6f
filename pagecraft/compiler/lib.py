"""Template compiler.

Turns untrusted template markup into a ``CompiledTemplate``:

    markup -> size budget -> parse -> tree budgets -> compile-time migration
           -> validation -> island extraction

``compile_template`` never raises. Every failure, expected or not, comes
back as a ``TemplateError`` in the ``CompilationResult``.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, Field

from pagecraft.config import CompilerLimits, get_compiler_limits
from pagecraft.core.log import get_logger
from pagecraft.errors import TemplateError, parse_template_error
from pagecraft.ir import (
    CURRENT_SCHEMA_VERSION,
    POSITIONING_PROP,
    SIZE_PROP,
    CompiledTemplate,
    Island,
)
from pagecraft.migration import migrate_node
from pagecraft.parser import ROOT_TAG, Node, TemplateSyntaxError, parse_template
from pagecraft.registry import (
    ComponentKind,
    ComponentRegistry,
    PropCoercionError,
    coerce_prop,
)
from pagecraft.validation import (
    TemplateStats,
    check_budgets,
    check_size,
    measure_size_kb,
    measure_tree,
    resolve_tag,
    validate_tree,
)

logger = get_logger("compiler")

ISLAND_ATTRIBUTE = "data-island"

# Props carried as JSON strings in markup and decoded into objects
JSON_PROPS = (POSITIONING_PROP, SIZE_PROP, "css")


class CompilationResult(BaseModel):
    """Outcome of one compile call.

    Attributes:
        success: True when ``ast`` holds a compiled template.
        ast: Compiled template, present only on success.
        errors: Structured errors; empty on success.
        warnings: Non-fatal findings such as unknown attributes in lenient mode.
        stats: Size and complexity measurements, when the template got far
            enough to be measured.
    """

    success: bool = Field(..., description="Whether compilation succeeded")
    ast: CompiledTemplate | None = Field(None, description="Compiled template")
    errors: list[TemplateError] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    stats: TemplateStats | None = Field(None, description="Template measurements")


class _IslandBuilder:
    """Walks a validated tree, assigning island ids in document order."""

    def __init__(self, registry: ComponentRegistry) -> None:
        self._registry = registry
        self._counter = 0
        self.errors: list[str] = []

    def _next_id(self) -> str:
        self._counter += 1
        return f"island-{self._counter}"

    def _resolve_props(self, node: Node, component: str) -> dict[str, Any]:
        registration, kind = self._registry.get_any_component(component)
        schemas = registration.props if kind == ComponentKind.LEGACY else {}

        props: dict[str, Any] = {}
        for attribute, value in node.attributes.items():
            name = self._registry.resolve_attribute(component, attribute) or attribute
            if name in JSON_PROPS:
                try:
                    props[name] = json.loads(value)
                except ValueError:
                    raise PropCoercionError(
                        f'Invalid JSON in attribute "{attribute}" on <{component}>',
                        prop_name=name,
                    ) from None
            elif name in schemas:
                props[name] = coerce_prop(value, schemas[name], name)
            else:
                props[name] = value

        for name, schema in schemas.items():
            if name in props:
                continue
            value = coerce_prop(None, schema, name)
            if value is not None:
                props[name] = value
        return props

    def build(self, node: Node, islands: list[Island]) -> Node:
        """Return a copy of ``node`` with islands appended to ``islands``."""
        if node.is_text or node.tag == ROOT_TAG:
            return node.model_copy(
                update={"children": [self.build(c, islands) for c in node.children]}
            )

        name, is_component = resolve_tag(node.tag, self._registry)
        if not is_component:
            return node.model_copy(
                update={"children": [self.build(c, islands) for c in node.children]}
            )

        island_id = self._next_id()
        nested: list[Island] = []
        children = [self.build(c, nested) for c in node.children]
        try:
            props = self._resolve_props(node, name)
        except PropCoercionError as exc:
            self.errors.append(f"{exc} (line {node.line}, column {node.column})")
            props = {}

        islands.append(
            Island(id=island_id, component=name, props=props, children=nested)
        )
        attributes = dict(node.attributes)
        attributes[ISLAND_ATTRIBUTE] = island_id
        return node.model_copy(
            update={"tag": name, "attributes": attributes, "children": children}
        )


def _failure(
    errors: list[TemplateError],
    stats: TemplateStats | None = None,
    warnings: list[str] | None = None,
) -> CompilationResult:
    for error in errors:
        logger.warning(f"{error.title}: {error.message}")
    return CompilationResult(
        success=False, errors=errors, warnings=warnings or [], stats=stats
    )


def compile_template(
    markup: str,
    registry: ComponentRegistry,
    limits: CompilerLimits | None = None,
) -> CompilationResult:
    """Compile template markup against a component registry.

    Args:
        markup: Untrusted template source.
        registry: Frozen component registry.
        limits: Budgets and strictness; defaults to the environment settings.

    Returns:
        CompilationResult with either a compiled template or structured
        errors.

    Example:
        >>> from pagecraft.registry import build_default_registry
        >>> result = compile_template("<BlogPosts limit='3' />", build_default_registry())
        >>> result.ast.islands[0].props["limit"]
        3
    """
    limits = limits or get_compiler_limits()
    size_kb = measure_size_kb(markup)

    try:
        size_error = check_size(markup, limits)
        if size_error is not None:
            return _failure(
                [parse_template_error(size_error.message, registry)],
                stats=TemplateStats(size_kb=size_kb),
            )

        try:
            document = parse_template(markup)
        except TemplateSyntaxError as exc:
            return _failure([parse_template_error(exc, registry)])

        # Tree budgets run before any recursive pass over the tree
        stats = measure_tree(document.root, registry, size_kb)
        budget_error = check_budgets(stats, limits)
        if budget_error is not None:
            return _failure(
                [parse_template_error(budget_error.message, registry)], stats=stats
            )

        root = migrate_node(document.root)
        report = validate_tree(root, registry, limits, size_kb)
        if not report.is_valid:
            return _failure(
                [parse_template_error(e.message, registry) for e in report.errors],
                stats=report.stats,
                warnings=report.warnings,
            )

        builder = _IslandBuilder(registry)
        islands: list[Island] = []
        compiled_root = builder.build(root, islands)
        if builder.errors:
            return _failure(
                [parse_template_error(message, registry) for message in builder.errors],
                stats=report.stats,
                warnings=report.warnings,
            )
    except Exception as e:
        return _failure(
            [parse_template_error(f"Template compilation failed: {e}", registry)],
        )

    ast = CompiledTemplate(
        schema_version=CURRENT_SCHEMA_VERSION,
        root=compiled_root,
        islands=islands,
        css=document.css,
    )
    logger.debug(
        f"Compiled template: {report.stats.node_count} nodes, "
        f"{len(islands)} top-level islands"
    )
    return CompilationResult(
        success=True, ast=ast, warnings=report.warnings, stats=report.stats
    )
