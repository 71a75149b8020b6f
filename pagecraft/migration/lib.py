"""Legacy migration adapter.

Templates authored against older schemas use flat lowercase style keys,
old absolute/grid positioning shapes and a flex-container shorthand. This
module maps all of them onto the current property names.

Two passes use it:

- Compile time: ``migrate_node`` renames attributes on a freshly parsed
  tree before validation.
- Render time: ``migrate_island`` upgrades islands compiled under an older
  schema version before positioning.

All remapping lives in the static tables below; the functions only
consult them.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pagecraft.core.log import get_logger
from pagecraft.ir import CURRENT_SCHEMA_VERSION, POSITIONING_PROP, SIZE_PROP, Island
from pagecraft.parser import Node
from pagecraft.registry import PLAIN_HTML_TAGS

logger = get_logger("migration")

# =============================================================================
# Remapping Tables
# =============================================================================

# Flat lowercase style keys -> current presentation names.
# "bordercolor"/"borderwidth" merge into "border" when both are present.
LEGACY_PROP_MAPPINGS: dict[str, str] = {
    "backgroundcolor": "backgroundColor",
    "textcolor": "color",
    "fontsize": "fontSize",
    "fontweight": "fontWeight",
    "fontfamily": "fontFamily",
    "lineheight": "lineHeight",
    "textalign": "textAlign",
    "bordercolor": "border",
    "borderwidth": "border",
    "borderradius": "borderRadius",
    "boxshadow": "boxShadow",
    "accentcolor": "backgroundColor",
    "customcss": "css",
}

FLEX_CONTAINER_MAPPINGS: dict[str, str] = {
    "direction": "flexDirection",
    "align": "alignItems",
    "justify": "justifyContent",
    "gap": "gap",
    "wrap": "flexWrap",
}

ALIGN_MAP: dict[str, str] = {
    "start": "start",
    "center": "center",
    "end": "end",
    "stretch": "stretch",
    "baseline": "baseline",
    "flex-start": "flex-start",
    "flex-end": "flex-end",
}
DEFAULT_ALIGN = "stretch"

JUSTIFY_MAP: dict[str, str] = {
    "start": "start",
    "center": "center",
    "end": "end",
    "between": "space-between",
    "around": "space-around",
    "evenly": "space-evenly",
    "flex-start": "flex-start",
    "flex-end": "flex-end",
    "stretch": "stretch",
}
DEFAULT_JUSTIFY = "start"

GAP_MAP: dict[str, str] = {
    "xs": "0.25rem",
    "sm": "0.5rem",
    "md": "1rem",
    "lg": "1.5rem",
    "xl": "2rem",
}

NARROW_VIEWPORT_QUERY = "@media (max-width: 768px)"

# Flat lowercase attribute names -> current camelCase names. Kebab-case
# names are camel-cased without a table entry.
ATTRIBUTE_MAP: dict[str, str] = {
    "fontstyle": "fontStyle",
    "textdecoration": "textDecoration",
    "texttransform": "textTransform",
    "letterspacing": "letterSpacing",
    "borderstyle": "borderStyle",
    "showlabel": "showLabel",
    "showphoto": "showPhoto",
    "showbio": "showBio",
    "showactions": "showActions",
    "photosize": "photoSize",
    "showtitle": "showTitle",
    "showheader": "showHeader",
    "showvalues": "showValues",
    "buttontext": "buttonText",
    "revealtext": "revealText",
    "maxmethods": "maxMethods",
    "maxwidth": "maxWidth",
    "glitchcolor1": "glitchColor1",
    "glitchcolor2": "glitchColor2",
    "class": "className",
}

# Attributes read verbatim by the positioning resolver
POSITIONING_ATTRIBUTES: frozenset[str] = frozenset(
    {
        "data-positioning-mode",
        "data-pixel-position",
        "data-position",
        "data-grid-position",
        "data-grid-column",
        "data-grid-row",
        "data-grid-span",
        "data-x",
        "data-y",
        "data-width",
        "data-height",
        "data-component-size",
        "data-island",
    }
)

# Internal props preserved as written
INTERNAL_PROPS: frozenset[str] = frozenset(
    {POSITIONING_PROP, SIZE_PROP, "_positioningMode", "_isInVisualBuilder"}
)

# Presentation properties: rendered through the style channel only
STYLE_PROPERTIES: frozenset[str] = frozenset(
    {
        "backgroundColor",
        "color",
        "fontSize",
        "fontFamily",
        "fontWeight",
        "fontStyle",
        "lineHeight",
        "textAlign",
        "textIndent",
        "textDecoration",
        "textTransform",
        "letterSpacing",
        "wordSpacing",
        "whiteSpace",
        "wordBreak",
        "wordWrap",
        "overflowWrap",
        "textOverflow",
        "padding",
        "paddingTop",
        "paddingRight",
        "paddingBottom",
        "paddingLeft",
        "margin",
        "marginTop",
        "marginRight",
        "marginBottom",
        "marginLeft",
        "border",
        "borderRadius",
        "borderColor",
        "borderWidth",
        "borderStyle",
        "borderTop",
        "borderRight",
        "borderBottom",
        "borderLeft",
        "boxShadow",
        "opacity",
        "overflow",
        "overflowX",
        "overflowY",
        "position",
        "top",
        "right",
        "bottom",
        "left",
        "width",
        "height",
        "minWidth",
        "minHeight",
        "maxWidth",
        "maxHeight",
        "zIndex",
        "display",
        "flexDirection",
        "flexWrap",
        "justifyContent",
        "alignItems",
        "alignContent",
        "justifyItems",
        "justifySelf",
        "alignSelf",
        "gap",
        "rowGap",
        "columnGap",
        "gridTemplateColumns",
        "gridTemplateRows",
        "gridTemplateAreas",
        "gridAutoColumns",
        "gridAutoRows",
        "gridAutoFlow",
        "gridColumn",
        "gridRow",
        "gridArea",
        "css",
    }
)

# Legacy names consumed by migrate_component_props for every component
LEGACY_PRESENTATION_KEYS: frozenset[str] = frozenset(LEGACY_PROP_MAPPINGS) | {
    "gridPosition"
}

# Flex shorthand consumed by migrate_component_props for FlexContainer only
FLEX_SHORTHAND_KEYS: frozenset[str] = frozenset(FLEX_CONTAINER_MAPPINGS) | {
    "responsive"
}

# Editor-only interaction metadata: never handed to a rendering surface
EDITOR_METADATA: frozenset[str] = frozenset(
    {
        "_isInVisualBuilder",
        "_onContentChange",
        "_onPropsChange",
        "_positioningMode",
        "_isSelected",
        "_isHovered",
        "__visualBuilder",
        "__visualbuilder",
    }
)

_KEBAB_RE = re.compile(r"-([a-z0-9])")


# =============================================================================
# Keyword Conversion
# =============================================================================


def convert_legacy_align(value: str) -> str:
    return ALIGN_MAP.get(value, DEFAULT_ALIGN)


def convert_legacy_justify(value: str) -> str:
    return JUSTIFY_MAP.get(value, DEFAULT_JUSTIFY)


def convert_legacy_gap(value: str) -> str:
    return GAP_MAP.get(value, value)


def normalize_attribute_name(name: str) -> str:
    """Map an attribute name onto its current property name.

    Positioning attributes and internal props are preserved. Known names
    come from ``ATTRIBUTE_MAP``; other kebab-case names are camel-cased,
    except ``data-*`` and ``aria-*`` which keep their HTML form.

    Example:
        >>> normalize_attribute_name("background-color")
        'backgroundColor'
        >>> normalize_attribute_name("data-x")
        'data-x'
    """
    if name in POSITIONING_ATTRIBUTES or name in INTERNAL_PROPS:
        return name
    mapped = ATTRIBUTE_MAP.get(name) or ATTRIBUTE_MAP.get(name.lower())
    if mapped:
        return mapped
    if name.startswith(("data-", "aria-")):
        return name
    return _KEBAB_RE.sub(lambda match: match.group(1).upper(), name)


# =============================================================================
# Property Migration
# =============================================================================


def _parse_json_object(value: Any) -> dict[str, Any] | None:
    if isinstance(value, Mapping):
        return dict(value)
    try:
        parsed = json.loads(value)
    except (TypeError, ValueError):
        return None
    return parsed if isinstance(parsed, dict) else None


def migrate_legacy_styling(props: Mapping[str, Any]) -> dict[str, Any]:
    """Map flat lowercase style keys onto presentation properties.

    Border width and color merge into one ``border`` value. ``customcss``
    is parsed as a JSON object into ``css``; invalid JSON is ignored.
    """
    migrated: dict[str, Any] = {}
    for legacy_key, new_key in LEGACY_PROP_MAPPINGS.items():
        if props.get(legacy_key) is None:
            continue
        value = props[legacy_key]
        if legacy_key in ("borderwidth", "bordercolor"):
            width = props.get("borderwidth")
            color = props.get("bordercolor")
            if width is not None and color is not None:
                migrated["border"] = f"{width} solid {color}"
            else:
                migrated["border"] = value
        elif legacy_key == "customcss":
            css = _parse_json_object(value)
            if css is not None:
                migrated["css"] = css
            else:
                logger.debug(f"Ignoring unparseable customcss value: {value!r}")
        else:
            migrated[new_key] = value
    return migrated


def migrate_legacy_positioning(props: Mapping[str, Any]) -> dict[str, Any]:
    """Map ``_positioningMode`` plus ``position``/``gridPosition`` onto CSS props."""
    migrated: dict[str, Any] = {}
    mode = props.get("_positioningMode")
    position = props.get("position")
    if mode == "absolute":
        migrated["position"] = "absolute"
        if isinstance(position, Mapping):
            migrated["left"] = f"{position.get('x', 0)}px"
            migrated["top"] = f"{position.get('y', 0)}px"
            if position.get("z") is not None:
                migrated["zIndex"] = position["z"]
        size = props.get(SIZE_PROP)
        if isinstance(size, Mapping):
            for key in ("width", "height"):
                if size.get(key) is not None:
                    migrated[key] = size[key]
    grid = props.get("gridPosition")
    if mode == "grid" and isinstance(grid, Mapping):
        migrated["gridColumn"] = f"{grid.get('column')} / span {grid.get('span') or 1}"
        migrated["gridRow"] = f"{grid.get('row')} / span 1"
    return migrated


def migrate_flex_container(props: Mapping[str, Any]) -> dict[str, Any]:
    """Map the flex-container shorthand onto flex properties.

    Unknown align/justify keywords fall back to ``stretch``/``start``. A
    responsive row layout gains a narrow-viewport rule switching it to a
    column.
    """
    migrated: dict[str, Any] = {"display": "flex"}
    css: dict[str, Any] = {}
    direction = props.get("direction")
    if direction:
        migrated["flexDirection"] = direction
    if props.get("align"):
        migrated["alignItems"] = convert_legacy_align(str(props["align"]))
    if props.get("justify"):
        migrated["justifyContent"] = convert_legacy_justify(str(props["justify"]))
    if props.get("gap"):
        migrated["gap"] = convert_legacy_gap(str(props["gap"]))
    if props.get("wrap") in (True, "true", ""):
        migrated["flexWrap"] = "wrap"
        css["flexWrap"] = "wrap"
    if props.get("responsive") in (True, "true", "") and direction in (
        "row",
        "row-reverse",
    ):
        css[NARROW_VIEWPORT_QUERY] = {"flexDirection": "column"}
    if css:
        migrated["css"] = css
    return migrated


def migrate_component_props(
    props: Mapping[str, Any], component: str | None = None
) -> dict[str, Any]:
    """Migrate one component's props into current-schema presentation props.

    Args:
        props: Resolved component properties (possibly legacy-shaped).
        component: Component type; ``FlexContainer`` gets the flex shorthand.

    Returns:
        New dict of current presentation properties.
    """
    standard: dict[str, Any] = {
        key: value for key, value in props.items() if key in STYLE_PROPERTIES
    }
    standard.update(migrate_legacy_positioning(props))
    standard.update(migrate_legacy_styling(props))
    if component == "FlexContainer":
        standard.update(migrate_flex_container(props))
    return standard


# =============================================================================
# Editor Metadata & Output
# =============================================================================


@dataclass(frozen=True)
class EditorContext:
    """Interaction state supplied by a visual editor."""

    positioning_mode: str = "normal"
    is_selected: bool = False
    is_hovered: bool = False


def extract_editor_context(props: Mapping[str, Any]) -> EditorContext | None:
    """Editor context when the props come from a visual editor, else None."""
    if not props.get("_isInVisualBuilder"):
        return None
    mode = props.get("_positioningMode")
    return EditorContext(
        positioning_mode=mode if mode in ("absolute", "grid") else "normal",
        is_selected=bool(props.get("_isSelected")),
        is_hovered=bool(props.get("_isHovered")),
    )


def strip_for_output(
    props: Mapping[str, Any], component: str | None = None
) -> dict[str, Any]:
    """The only conversion from props to passthrough attributes.

    Removes every presentation property, every legacy name that
    ``migrate_component_props`` turns into style, every editor-metadata
    name and every other underscore-prefixed internal prop.

    Args:
        props: Resolved component properties.
        component: Component type; ``FlexContainer`` also loses its flex
            shorthand.
    """
    excluded = STYLE_PROPERTIES | LEGACY_PRESENTATION_KEYS | EDITOR_METADATA
    if component == "FlexContainer":
        excluded = excluded | FLEX_SHORTHAND_KEYS
    return {
        key: value
        for key, value in props.items()
        if key not in excluded and not key.startswith("_")
    }


# =============================================================================
# Positioning Shapes
# =============================================================================


def normalize_positioning_data(data: Any) -> dict[str, Any] | None:
    """Rewrite legacy ``_positioning`` shapes into the current shapes.

    - ``{isResponsive: false, x, y, ...}`` and ``{mode: "absolute", ...}``
      become ``{mode: "absolute", x, y, zIndex?, width?, height?}``.
    - A nested ``position: {x, y, z}`` is flattened the same way.
    - Legacy ``z`` becomes ``zIndex``.
    - ``{mode: "grid", gridPosition: {...}}`` becomes ``{column, row, span}``.
    - Responsive and already-current shapes are returned as a copy.

    Returns:
        Normalized dict, or None when ``data`` is not an object.
    """
    data = _parse_json_object(data) if data is not None else None
    if data is None:
        return None
    if "breakpoints" in data:
        return data

    grid = data.get("gridPosition")
    if data.get("mode") == "grid" and isinstance(grid, Mapping):
        normalized = {
            "column": grid.get("column"),
            "row": grid.get("row"),
            "span": grid.get("span") or 1,
        }
        if data.get("zIndex") is not None:
            normalized["zIndex"] = data["zIndex"]
        return normalized

    position = data.get("position")
    source = dict(position) if isinstance(position, Mapping) else data
    is_absolute = data.get("mode") == "absolute" or data.get("isResponsive") is False
    if not is_absolute or "x" not in source or "y" not in source:
        return data

    normalized = {"mode": "absolute", "x": source["x"], "y": source["y"]}
    z_index = source.get("zIndex", source.get("z", data.get("zIndex")))
    if z_index is not None:
        normalized["zIndex"] = z_index
    for key in ("width", "height"):
        value = source.get(key, data.get(key))
        if value is not None:
            normalized[key] = value
    return normalized


# =============================================================================
# Passes
# =============================================================================


def migrate_attributes(attributes: Mapping[str, str]) -> dict[str, str]:
    """Compile-time migration of one component's raw attributes.

    Flat lowercase style keys are mapped (merging border pairs, parsing
    ``customcss``), and every remaining name is normalized.
    """
    legacy: dict[str, str] = {}
    migrated: dict[str, str] = {}
    for key, value in attributes.items():
        flat = key.replace("-", "")
        if key == key.lower() and flat in LEGACY_PROP_MAPPINGS:
            legacy[flat] = value
        else:
            migrated[normalize_attribute_name(key)] = value
    for key, value in migrate_legacy_styling(legacy).items():
        migrated[key] = json.dumps(value) if isinstance(value, dict) else value
    return migrated


def migrate_node(node: Node) -> Node:
    """Compile-time pass: return a migrated copy of a parsed tree.

    Attribute names on component tags (anything that is not a plain HTML
    tag) are migrated; plain HTML and text nodes keep theirs. The input
    tree is not modified.
    """
    attributes = dict(node.attributes)
    if not node.tag.startswith("#") and node.tag.lower() not in PLAIN_HTML_TAGS:
        attributes = migrate_attributes(attributes)
    return node.model_copy(
        update={
            "attributes": attributes,
            "children": [migrate_node(child) for child in node.children],
        }
    )


def migrate_island_props(props: Mapping[str, Any]) -> dict[str, Any]:
    """Render-time migration of one island's props."""
    migrated: dict[str, Any] = {}
    for key, value in props.items():
        if key in LEGACY_PROP_MAPPINGS:
            continue
        migrated[normalize_attribute_name(key)] = value
    migrated.update(migrate_legacy_styling(props))

    positioning = props.get(POSITIONING_PROP)
    if positioning is None and props.get("_positioningMode") in ("absolute", "grid"):
        positioning = {
            "mode": props["_positioningMode"],
            "position": props.get("position"),
            "gridPosition": props.get("gridPosition"),
        }
        migrated.pop("position", None)
        migrated.pop("gridPosition", None)
    normalized = normalize_positioning_data(positioning)
    if normalized is not None:
        migrated[POSITIONING_PROP] = normalized
    return migrated


def migrate_island(island: Island, schema_version: int) -> Island:
    """Render-time pass: upgrade an island compiled under an older schema.

    Islands already at ``CURRENT_SCHEMA_VERSION`` are returned unchanged.
    """
    if schema_version >= CURRENT_SCHEMA_VERSION:
        return island
    logger.debug(
        f"Migrating island {island.id} ({island.component}) "
        f"from schema v{schema_version}"
    )
    return Island(
        id=island.id,
        component=island.component,
        props=migrate_island_props(island.props),
        children=[migrate_island(child, schema_version) for child in island.children],
    )
