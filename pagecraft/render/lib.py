"""Render-time driver.

Walks a compiled template's islands, applies the render-time migration
pass for templates compiled under an older schema, splits each island's
props into style and passthrough attributes, and resolves placement
through the positioning registry.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from pydantic import Field

from pagecraft.core.log import get_logger
from pagecraft.ir import CompiledTemplate, Island
from pagecraft.migration import migrate_component_props, migrate_island, strip_for_output
from pagecraft.positioning import (
    PositionedElement,
    PositioningContext,
    PositioningInput,
    PositioningRegistry,
    build_default_positioning_registry,
)

logger = get_logger("render")

# Removed from a component's own style when a wrapper positions it
POSITION_STYLE_KEYS = frozenset({"position", "top", "right", "bottom", "left", "zIndex"})


class PlacedIsland(PositionedElement):
    """Render instruction for one island.

    Attributes:
        attributes: Passthrough attributes; never contains presentation
            properties or editor metadata.
        style: Presentation properties for the component itself.
        children: Placed nested islands, in document order.
    """

    attributes: dict[str, Any] = Field(default_factory=dict)
    style: dict[str, Any] = Field(default_factory=dict)
    children: list["PlacedIsland"] = Field(default_factory=list)

    def walk(self) -> Iterator["PlacedIsland"]:
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class RenderResult:
    """Placed islands plus the template-level style block.

    Attributes:
        islands: Top-level placed islands in document order.
        css: Style block of the compiled template.
        resident_data: Read-only data handed to every component.
    """

    islands: list[PlacedIsland] = field(default_factory=list)
    css: str | None = None
    resident_data: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def iter_placed(self) -> Iterator[PlacedIsland]:
        for island in self.islands:
            yield from island.walk()

    def get(self, island_id: str) -> PlacedIsland | None:
        for placed in self.iter_placed():
            if placed.island_id == island_id:
                return placed
        return None


def _place_island(
    island: Island,
    schema_version: int,
    positioning: PositioningRegistry,
    is_nested: bool,
) -> PlacedIsland:
    island = migrate_island(island, schema_version)
    children = [
        _place_island(child, schema_version, positioning, is_nested=True)
        for child in island.children
    ]
    element = PlacedIsland(
        island_id=island.id,
        component=island.component,
        attributes=strip_for_output(island.props, island.component),
        style=migrate_component_props(island.props, island.component),
        children=children,
    )
    placed = positioning.apply_positioning(
        element,
        PositioningInput(island, is_nested),
        PositioningContext(component_type=island.component.lower(), island_id=island.id),
    )
    if placed.wrapper_style is not None:
        style = {k: v for k, v in placed.style.items() if k not in POSITION_STYLE_KEYS}
        placed = placed.model_copy(update={"style": style})
    return placed


def render_template(
    compiled: CompiledTemplate,
    positioning: PositioningRegistry | None = None,
    resident_data: Mapping[str, Any] | None = None,
) -> RenderResult:
    """Resolve render instructions for every island of a compiled template.

    Args:
        compiled: Template produced by ``compile_template`` (possibly under
            an older schema version).
        positioning: Strategy registry; defaults to the built-in strategies.
        resident_data: Data exposed read-only to every component.

    Returns:
        RenderResult with one ``PlacedIsland`` per island.
    """
    if positioning is None:
        positioning = build_default_positioning_registry()
    islands = [
        _place_island(island, compiled.schema_version, positioning, is_nested=False)
        for island in compiled.islands
    ]
    result = RenderResult(
        islands=islands,
        css=compiled.css,
        resident_data=MappingProxyType(dict(resident_data or {})),
    )
    logger.debug(f"Rendered {sum(1 for _ in result.iter_placed())} islands")
    return result
