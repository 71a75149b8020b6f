"""Legacy migration adapter.

Example usage:
    >>> from pagecraft.migration import convert_legacy_justify, strip_for_output
    >>> convert_legacy_justify("between")
    'space-between'
    >>> strip_for_output({"color": "red", "href": "/", "_isSelected": True})
    {'href': '/'}
"""

from .lib import (
    ALIGN_MAP,
    ATTRIBUTE_MAP,
    DEFAULT_ALIGN,
    DEFAULT_JUSTIFY,
    EDITOR_METADATA,
    FLEX_CONTAINER_MAPPINGS,
    FLEX_SHORTHAND_KEYS,
    GAP_MAP,
    INTERNAL_PROPS,
    JUSTIFY_MAP,
    LEGACY_PRESENTATION_KEYS,
    LEGACY_PROP_MAPPINGS,
    NARROW_VIEWPORT_QUERY,
    POSITIONING_ATTRIBUTES,
    STYLE_PROPERTIES,
    EditorContext,
    convert_legacy_align,
    convert_legacy_gap,
    convert_legacy_justify,
    extract_editor_context,
    migrate_attributes,
    migrate_component_props,
    migrate_flex_container,
    migrate_island,
    migrate_island_props,
    migrate_legacy_positioning,
    migrate_legacy_styling,
    migrate_node,
    normalize_attribute_name,
    normalize_positioning_data,
    strip_for_output,
)

__all__ = [
    # Tables
    "ALIGN_MAP",
    "ATTRIBUTE_MAP",
    "DEFAULT_ALIGN",
    "DEFAULT_JUSTIFY",
    "FLEX_CONTAINER_MAPPINGS",
    "GAP_MAP",
    "INTERNAL_PROPS",
    "JUSTIFY_MAP",
    "LEGACY_PROP_MAPPINGS",
    "NARROW_VIEWPORT_QUERY",
    "POSITIONING_ATTRIBUTES",
    # Property sets
    "EDITOR_METADATA",
    "FLEX_SHORTHAND_KEYS",
    "LEGACY_PRESENTATION_KEYS",
    "STYLE_PROPERTIES",
    # Conversion
    "convert_legacy_align",
    "convert_legacy_gap",
    "convert_legacy_justify",
    "normalize_attribute_name",
    "normalize_positioning_data",
    # Property migration
    "migrate_component_props",
    "migrate_flex_container",
    "migrate_legacy_positioning",
    "migrate_legacy_styling",
    # Editor metadata & output
    "EditorContext",
    "extract_editor_context",
    "strip_for_output",
    # Passes
    "migrate_attributes",
    "migrate_node",
    "migrate_island",
    "migrate_island_props",
]
