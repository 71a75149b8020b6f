"""Positioning resolver.

Example usage:
    >>> from pagecraft.ir import Island
    >>> from pagecraft.positioning import (
    ...     PositionedElement,
    ...     PositioningContext,
    ...     PositioningInput,
    ...     build_default_positioning_registry,
    ... )
    >>> island = Island(id="island-1", component="Bio", props={"_positioning": {"mode": "absolute", "x": 10, "y": 20}})
    >>> registry = build_default_positioning_registry()
    >>> placed = registry.apply_positioning(
    ...     PositionedElement(island_id=island.id, component=island.component),
    ...     PositioningInput(island),
    ...     PositioningContext(component_type="bio", island_id=island.id),
    ... )
    >>> placed.wrapper_style["left"], placed.strategy
    ('10px', 'legacyAbsolute')
"""

from .lib import (
    DEFAULT_STRATEGIES,
    DEFAULT_Z_INDEX,
    NAVIGATION_Z_INDEX,
    AttributePositioning,
    AttributeStrategy,
    Breakpoints,
    FallbackStrategy,
    GridPositioning,
    GridStrategy,
    LegacyAbsolutePositioning,
    LegacyAbsoluteStrategy,
    NoPositioning,
    Placement,
    PositionedElement,
    PositioningContext,
    PositioningData,
    PositioningInput,
    PositioningRegistry,
    PositioningStrategy,
    ResponsivePositioning,
    ResponsiveStrategy,
    SizeOnlyPositioning,
    SizeOnlyStrategy,
    SizingCategory,
    build_absolute_style,
    build_default_positioning_registry,
    build_grid_style,
    build_size_style,
    classify_positioning,
    get_sizing_category,
    is_navigation_component,
    parse_position_value,
)

__all__ = [
    # Positioning data
    "AttributePositioning",
    "Breakpoints",
    "GridPositioning",
    "LegacyAbsolutePositioning",
    "NoPositioning",
    "Placement",
    "PositioningData",
    "ResponsivePositioning",
    "SizeOnlyPositioning",
    "classify_positioning",
    "parse_position_value",
    # Sizing
    "DEFAULT_Z_INDEX",
    "NAVIGATION_Z_INDEX",
    "SizingCategory",
    "build_absolute_style",
    "build_grid_style",
    "build_size_style",
    "get_sizing_category",
    "is_navigation_component",
    # Strategies
    "DEFAULT_STRATEGIES",
    "AttributeStrategy",
    "FallbackStrategy",
    "GridStrategy",
    "LegacyAbsoluteStrategy",
    "PositionedElement",
    "PositioningContext",
    "PositioningInput",
    "PositioningRegistry",
    "PositioningStrategy",
    "ResponsiveStrategy",
    "SizeOnlyStrategy",
    "build_default_positioning_registry",
]
