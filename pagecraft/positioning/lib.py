"""Positioning resolver.

Every island carries raw, historically accumulated placement data in its
``_positioning`` and ``_size`` props. This module classifies that data into
one closed set of shapes, and resolves each island to concrete wrapper
styles through a priority-ordered registry of strategies.

Strategy order (lower priority checked first):

    responsive (10) -> legacy absolute (20) -> grid (30) -> attribute (40)
    -> size-only (50) -> none (999, always matches)

Nested islands are laid out by their parent and never receive independent
placement.
"""

from __future__ import annotations

import json
import math
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, ValidationError

from pagecraft.core.log import get_logger
from pagecraft.ir import POSITIONING_PROP, SIZE_PROP, Island

logger = get_logger("positioning")

DEFAULT_Z_INDEX = 1
NAVIGATION_Z_INDEX = 9999

FULL_WIDTH_MIN_HEIGHT = 70
FULL_WIDTH_MAX_HEIGHT = 100

CONTENT_MAX_WIDTH_FACTOR = 1.5
CONTENT_MAX_WIDTH_FLOOR = 200
CONTENT_MAX_WIDTH_CEILING = 800

Dimension = Union[int, float, str]


# =============================================================================
# Positioning Data
# =============================================================================


class Placement(BaseModel):
    """A pixel placement: raw numbers or ``px`` strings."""

    x: Dimension = 0
    y: Dimension = 0
    z_index: int | None = Field(None, alias="zIndex")
    width: Dimension | None = None
    height: Dimension | None = None

    model_config = {"populate_by_name": True, "frozen": True}


class Breakpoints(BaseModel):
    """Per-viewport placements. Only ``desktop`` is consumed."""

    desktop: Placement
    tablet: Placement | None = None
    mobile: Placement | None = None

    model_config = {"frozen": True}


class ResponsivePositioning(BaseModel):
    kind: Literal["responsive"] = "responsive"
    breakpoints: Breakpoints

    model_config = {"frozen": True}


class LegacyAbsolutePositioning(BaseModel):
    kind: Literal["legacyAbsolute"] = "legacyAbsolute"
    placement: Placement

    model_config = {"frozen": True}


class GridPositioning(BaseModel):
    kind: Literal["grid"] = "grid"
    column: int
    row: int
    span: int = 1
    z_index: int | None = Field(None, alias="zIndex")

    model_config = {"populate_by_name": True, "frozen": True}


class AttributePositioning(BaseModel):
    """Placement encoded in ``data-*`` attributes instead of ``_positioning``."""

    kind: Literal["attribute"] = "attribute"
    mode: Literal["absolute", "grid"] = "absolute"
    x: Dimension | None = None
    y: Dimension | None = None
    column: int | None = None
    row: int | None = None
    span: int = 1
    width: Dimension | None = None
    height: Dimension | None = None

    model_config = {"frozen": True}


class SizeOnlyPositioning(BaseModel):
    kind: Literal["sizeOnly"] = "sizeOnly"
    width: Dimension | None = None
    height: Dimension | None = None

    model_config = {"frozen": True}


class NoPositioning(BaseModel):
    kind: Literal["none"] = "none"

    model_config = {"frozen": True}


PositioningData = Annotated[
    Union[
        ResponsivePositioning,
        LegacyAbsolutePositioning,
        GridPositioning,
        AttributePositioning,
        SizeOnlyPositioning,
        NoPositioning,
    ],
    Field(discriminator="kind"),
]


def parse_position_value(value: Any) -> int | float:
    """Numeric value of a coordinate or size.

    Example:
        >>> parse_position_value(100), parse_position_value("100px")
        (100, 100)
        >>> parse_position_value("nope")
        0
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else 0
    text = str(value).strip()
    if text.endswith("px"):
        text = text[:-2].strip()
    try:
        number = float(text)
    except ValueError:
        return 0
    if not math.isfinite(number):
        return 0
    return int(number) if number.is_integer() else number


def _has_size(size: Any) -> bool:
    return isinstance(size, Mapping) and (
        size.get("width") is not None or size.get("height") is not None
    )


def _json_object(value: Any) -> Mapping[str, Any] | None:
    if isinstance(value, Mapping):
        return value
    try:
        parsed = json.loads(value)
    except (TypeError, ValueError):
        return None
    return parsed if isinstance(parsed, Mapping) else None


def _attribute_size(props: Mapping[str, Any]) -> dict[str, Any]:
    size = dict(_json_object(props.get("data-component-size")) or {})
    for key in ("width", "height"):
        if props.get(f"data-{key}") is not None:
            size[key] = props[f"data-{key}"]
    return {key: size.get(key) for key in ("width", "height")}


def _classify_attributes(props: Mapping[str, Any]) -> AttributePositioning | None:
    """Positioning from ``data-*`` attributes, if any are present."""
    mode = props.get("data-positioning-mode")
    if mode not in ("absolute", "grid"):
        mode = None
    size = _attribute_size(props)

    grid = _json_object(props.get("data-grid-position")) or {}
    column = grid.get("column", props.get("data-grid-column"))
    row = grid.get("row", props.get("data-grid-row"))
    if mode == "grid" or (mode is None and column is not None and row is not None):
        if column is None or row is None:
            return None
        span = grid.get("span", props.get("data-grid-span")) or 1
        return AttributePositioning(
            mode="grid",
            column=int(parse_position_value(column)),
            row=int(parse_position_value(row)),
            span=int(parse_position_value(span)) or 1,
            **size,
        )

    pixel = _json_object(props.get("data-pixel-position"))
    if pixel is not None:
        x, y = pixel.get("x"), pixel.get("y")
    elif props.get("data-position"):
        x, _, y = str(props["data-position"]).partition(",")
    else:
        x, y = props.get("data-x"), props.get("data-y")
    if x is None and mode is None:
        return None
    return AttributePositioning(
        mode="absolute",
        x=parse_position_value(x) if x is not None else 0,
        y=parse_position_value(y) if y not in (None, "") else 0,
        **size,
    )


def classify_positioning(props: Mapping[str, Any]) -> PositioningData:
    """Classify an island's raw props into exactly one positioning shape.

    Checked in strategy priority order. A ``_positioning`` object that
    matches none of the known shapes is treated as absent.

    Args:
        props: Island props, including ``_positioning`` and ``_size``.

    Returns:
        One member of the ``PositioningData`` union.
    """
    positioning = props.get(POSITIONING_PROP)
    size = props.get(SIZE_PROP)

    if isinstance(positioning, Mapping):
        if "breakpoints" in positioning:
            try:
                return ResponsivePositioning(breakpoints=positioning["breakpoints"])
            except ValidationError:
                logger.debug("Ignoring responsive positioning without a desktop entry")
                return NoPositioning()

        mode = positioning.get("mode")
        has_grid = (
            positioning.get("column") is not None or positioning.get("row") is not None
        )
        absolute = (
            mode == "absolute"
            or positioning.get("isResponsive") is False
            or (mode is None and not has_grid)
        )
        if absolute and "x" in positioning and "y" in positioning:
            try:
                return LegacyAbsolutePositioning(
                    placement=Placement.model_validate(dict(positioning))
                )
            except ValidationError:
                return NoPositioning()

        if positioning.get("column") is not None and positioning.get("row") is not None:
            try:
                return GridPositioning(
                    column=int(parse_position_value(positioning["column"])),
                    row=int(parse_position_value(positioning["row"])),
                    span=int(parse_position_value(positioning.get("span") or 1)) or 1,
                    zIndex=positioning.get("zIndex"),
                )
            except ValidationError:
                return NoPositioning()

    try:
        attribute = _classify_attributes(props)
    except ValidationError:
        logger.debug("Ignoring unusable data-* positioning attributes")
        return NoPositioning()
    if attribute is not None:
        return attribute

    if _has_size(size):
        try:
            return SizeOnlyPositioning(
                width=size.get("width"), height=size.get("height")
            )
        except ValidationError:
            logger.debug(f"Ignoring unusable {SIZE_PROP} value: {dict(size)!r}")
    return NoPositioning()


# =============================================================================
# Sizing Categories
# =============================================================================


class SizingCategory(str, Enum):
    """How a component's wrapper is sized from its requested size."""

    FULL_WIDTH = "full-width"
    CONTENT_DRIVEN = "content-driven"
    AUTO_SIZE = "auto-size"
    SQUARE = "square"
    FIXED = "fixed"


FULL_WIDTH_COMPONENTS = frozenset(
    {
        "navigationbar",
        "navigation",
        "siteheader",
        "sitefooter",
        "header",
        "footer",
        "breadcrumb",
    }
)

CONTENT_DRIVEN_COMPONENTS = frozenset(
    {
        "textelement",
        "heading",
        "paragraph",
        "bio",
        "displayname",
        "wavetext",
        "glitchtext",
        "blogposts",
        "guestbook",
        "contactcard",
    }
)

AUTO_SIZE_COMPONENTS = frozenset(
    {"followbutton", "friendbadge", "notificationbell", "floatingbadge", "useraccount"}
)

SQUARE_COMPONENTS = frozenset({"profilephoto", "userimage"})


def is_navigation_component(component_type: str) -> bool:
    return "nav" in component_type.lower()


def get_sizing_category(component_type: str) -> SizingCategory:
    name = component_type.lower()
    if name in FULL_WIDTH_COMPONENTS or is_navigation_component(name):
        return SizingCategory.FULL_WIDTH
    if name in CONTENT_DRIVEN_COMPONENTS:
        return SizingCategory.CONTENT_DRIVEN
    if name in AUTO_SIZE_COMPONENTS:
        return SizingCategory.AUTO_SIZE
    if name in SQUARE_COMPONENTS:
        return SizingCategory.SQUARE
    return SizingCategory.FIXED


def _px(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"{value}px"


def _css_size(value: Dimension) -> str:
    """Numbers become ``Npx``; strings are used verbatim."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return _px(value)
    return str(value)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def build_absolute_style(
    component_type: str,
    x: Any,
    y: Any,
    z_index: int | None = None,
    width: Dimension | None = None,
    height: Dimension | None = None,
) -> dict[str, Any]:
    """Wrapper style for a pixel-placed component.

    Args:
        component_type: Component name; selects the sizing category.
        x: Horizontal offset, number or ``px`` string.
        y: Vertical offset, number or ``px`` string.
        z_index: Stacking order; defaults to ``DEFAULT_Z_INDEX``.
        width: Requested width, if any.
        height: Requested height, if any.

    Returns:
        CSS properties for the wrapper element.
    """
    category = get_sizing_category(component_type)
    style: dict[str, Any] = {
        "position": "absolute",
        "left": _px(parse_position_value(x)),
        "top": _px(parse_position_value(y)),
        "zIndex": z_index if z_index is not None else DEFAULT_Z_INDEX,
    }

    if category == SizingCategory.FULL_WIDTH:
        style["left"] = "0"
        style["width"] = "100%"
        style["minHeight"] = _px(FULL_WIDTH_MIN_HEIGHT)
        style["maxHeight"] = _px(FULL_WIDTH_MAX_HEIGHT)
        if height is not None:
            style["height"] = _px(
                _clamp(
                    parse_position_value(height),
                    FULL_WIDTH_MIN_HEIGHT,
                    FULL_WIDTH_MAX_HEIGHT,
                )
            )
        if is_navigation_component(component_type):
            style["zIndex"] = NAVIGATION_Z_INDEX

    elif category == SizingCategory.CONTENT_DRIVEN:
        style["width"] = "fit-content"
        style["height"] = "fit-content"
        if width is not None:
            requested = parse_position_value(width)
            style["minWidth"] = _px(requested)
            style["maxWidth"] = _px(
                _clamp(
                    requested * CONTENT_MAX_WIDTH_FACTOR,
                    CONTENT_MAX_WIDTH_FLOOR,
                    CONTENT_MAX_WIDTH_CEILING,
                )
            )
        if height is not None:
            style["minHeight"] = _px(parse_position_value(height))

    elif category == SizingCategory.FIXED:
        if width is not None:
            style["width"] = _css_size(width)
        if height is not None:
            style["height"] = _css_size(height)

    return style


def build_grid_style(column: int, row: int, span: int = 1) -> dict[str, Any]:
    return {"gridColumn": f"{column} / span {span}", "gridRow": f"{row} / span 1"}


def build_size_style(
    width: Dimension | None = None, height: Dimension | None = None
) -> dict[str, Any]:
    style: dict[str, Any] = {}
    if width is not None:
        style["width"] = _css_size(width)
    if height is not None:
        style["height"] = _css_size(height)
    return style


# =============================================================================
# Strategies
# =============================================================================


class PositionedElement(BaseModel):
    """Element a strategy places.

    Strategies return a copy with ``wrapper_style`` and ``strategy`` set;
    subclasses keep their own fields through the copy.
    """

    island_id: str = Field(..., description="Island being placed")
    component: str = Field(..., description="Component type")
    wrapper_style: dict[str, Any] | None = Field(
        None, description="Style of the positioning wrapper, if any"
    )
    strategy: str = Field("none", description="Strategy that placed the element")

    model_config = {"frozen": True}


@dataclass(frozen=True)
class PositioningInput:
    """The island being placed and whether it sits inside another component."""

    island: Island
    is_nested: bool = False


@dataclass(frozen=True)
class PositioningContext:
    """Render-time context for one placement."""

    component_type: str
    island_id: str


class PositioningStrategy(ABC):
    """One way of turning positioning data into a wrapper style.

    Subclasses must implement:
        - name: Strategy identifier
        - priority: Lower values are checked first
        - can_handle: Whether the strategy applies to an island
        - apply: Produce the placed element
    """

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def priority(self) -> int: ...

    @abstractmethod
    def can_handle(self, island: Island, is_nested: bool) -> bool: ...

    @abstractmethod
    def apply(
        self,
        element: PositionedElement,
        data: PositioningInput,
        context: PositioningContext,
    ) -> PositionedElement: ...

    def _place(
        self, element: PositionedElement, style: dict[str, Any]
    ) -> PositionedElement:
        return element.model_copy(update={"wrapper_style": style, "strategy": self.name})


class _ShapeStrategy(PositioningStrategy):
    """Strategy matching one positioning shape on non-nested islands."""

    shape: type[BaseModel]

    def can_handle(self, island: Island, is_nested: bool) -> bool:
        if is_nested:
            return False
        return isinstance(classify_positioning(island.props), self.shape)


def _requested_size(island: Island, placement: Placement) -> tuple[Any, Any]:
    size = island.size if isinstance(island.size, Mapping) else {}
    width = placement.width if placement.width is not None else size.get("width")
    height = placement.height if placement.height is not None else size.get("height")
    return width, height


class ResponsiveStrategy(_ShapeStrategy):
    """Breakpoint placements; resolves with the desktop entry."""

    name = "responsive"
    priority = 10
    shape = ResponsivePositioning

    def apply(
        self,
        element: PositionedElement,
        data: PositioningInput,
        context: PositioningContext,
    ) -> PositionedElement:
        positioning = classify_positioning(data.island.props)
        desktop = positioning.breakpoints.desktop
        width, height = _requested_size(data.island, desktop)
        style = build_absolute_style(
            context.component_type, desktop.x, desktop.y, desktop.z_index, width, height
        )
        return self._place(element, style)


class LegacyAbsoluteStrategy(_ShapeStrategy):
    name = "legacyAbsolute"
    priority = 20
    shape = LegacyAbsolutePositioning

    def apply(
        self,
        element: PositionedElement,
        data: PositioningInput,
        context: PositioningContext,
    ) -> PositionedElement:
        placement = classify_positioning(data.island.props).placement
        width, height = _requested_size(data.island, placement)
        style = build_absolute_style(
            context.component_type,
            placement.x,
            placement.y,
            placement.z_index,
            width,
            height,
        )
        return self._place(element, style)


class GridStrategy(_ShapeStrategy):
    name = "grid"
    priority = 30
    shape = GridPositioning

    def apply(
        self,
        element: PositionedElement,
        data: PositioningInput,
        context: PositioningContext,
    ) -> PositionedElement:
        positioning = classify_positioning(data.island.props)
        style = build_grid_style(positioning.column, positioning.row, positioning.span)
        if positioning.z_index is not None:
            style["zIndex"] = positioning.z_index
        return self._place(element, style)


class AttributeStrategy(_ShapeStrategy):
    """Placement read from ``data-*`` attributes."""

    name = "attribute"
    priority = 40
    shape = AttributePositioning

    def apply(
        self,
        element: PositionedElement,
        data: PositioningInput,
        context: PositioningContext,
    ) -> PositionedElement:
        positioning = classify_positioning(data.island.props)
        if positioning.mode == "grid":
            style = build_grid_style(positioning.column, positioning.row, positioning.span)
        else:
            style = build_absolute_style(
                context.component_type,
                positioning.x,
                positioning.y,
                width=positioning.width,
                height=positioning.height,
            )
        return self._place(element, style)


class SizeOnlyStrategy(_ShapeStrategy):
    name = "sizeOnly"
    priority = 50
    shape = SizeOnlyPositioning

    def apply(
        self,
        element: PositionedElement,
        data: PositioningInput,
        context: PositioningContext,
    ) -> PositionedElement:
        positioning = classify_positioning(data.island.props)
        return self._place(
            element, build_size_style(positioning.width, positioning.height)
        )


class FallbackStrategy(PositioningStrategy):
    """Always matches; leaves the element untouched."""

    name = "none"
    priority = 999

    def can_handle(self, island: Island, is_nested: bool) -> bool:
        return True

    def apply(
        self,
        element: PositionedElement,
        data: PositioningInput,
        context: PositioningContext,
    ) -> PositionedElement:
        return element


# =============================================================================
# Registry
# =============================================================================


class PositioningRegistry:
    """Strategies sorted by ascending priority, ending in the fallback.

    Example:
        >>> registry = build_default_positioning_registry()
        >>> registry.strategy_names()
        ['responsive', 'legacyAbsolute', 'grid', 'attribute', 'sizeOnly', 'none']
    """

    def __init__(self) -> None:
        self._fallback = FallbackStrategy()
        self._strategies: list[PositioningStrategy] = [self._fallback]

    def register(self, strategy: PositioningStrategy) -> None:
        """Add a strategy, replacing any registered under the same name."""
        self._strategies = [s for s in self._strategies if s.name != strategy.name]
        self._strategies.append(strategy)
        self._strategies.sort(key=lambda s: s.priority)

    def clear(self) -> None:
        """Remove every strategy except the fallback."""
        self._strategies = [self._fallback]

    def strategy_names(self) -> list[str]:
        return [strategy.name for strategy in self._strategies]

    def __len__(self) -> int:
        return len(self._strategies)

    def select(self, island: Island, is_nested: bool = False) -> PositioningStrategy:
        """First strategy, in priority order, that can handle the island."""
        for strategy in self._strategies:
            if strategy.can_handle(island, is_nested):
                return strategy
        return self._fallback

    def apply_positioning(
        self,
        element: PositionedElement,
        data: PositioningInput,
        context: PositioningContext,
    ) -> PositionedElement:
        """Place an element with the first matching strategy."""
        strategy = self.select(data.island, data.is_nested)
        logger.debug(
            f"[{context.island_id}] {context.component_type} placed by {strategy.name}"
        )
        return strategy.apply(element, data, context)


DEFAULT_STRATEGIES: tuple[type[PositioningStrategy], ...] = (
    ResponsiveStrategy,
    LegacyAbsoluteStrategy,
    GridStrategy,
    AttributeStrategy,
    SizeOnlyStrategy,
)


def build_default_positioning_registry() -> PositioningRegistry:
    """Registry holding every built-in strategy plus the fallback."""
    registry = PositioningRegistry()
    for strategy_cls in DEFAULT_STRATEGIES:
        registry.register(strategy_cls())
    return registry
