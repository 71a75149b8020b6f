"""Component registry - catalog of known components and nesting rules.

Example usage:
    >>> from pagecraft.registry import build_default_registry
    >>> registry = build_default_registry()
    >>> registry.can_accept_child("Tabs", "Tab")
    True
    >>> registry.get_any_component("navigationbar")[1]
    <ComponentKind.STANDARDIZED: 'standardized'>
"""

from .catalog import (
    LEGACY_COMPONENTS,
    STANDARDIZED_COMPONENTS,
    build_default_registry,
    register_default_components,
)
from .lib import (
    ALWAYS_ALLOWED_ATTRIBUTES,
    PLAIN_HTML_TAGS,
    UNIVERSAL_PROPERTIES,
    AnyRegistration,
    ComponentCategory,
    ComponentKind,
    ComponentRegistration,
    ComponentRegistry,
    ComponentRelationship,
    DefaultChild,
    PropCoercionError,
    PropSchema,
    PropType,
    RegistryFrozenError,
    RelationshipKind,
    StandardizedComponentRegistration,
    coerce_prop,
    is_always_allowed_attribute,
)

__all__ = [
    # Enums
    "ComponentCategory",
    "ComponentKind",
    "PropType",
    "RelationshipKind",
    # Schemas
    "PropSchema",
    "PropCoercionError",
    "coerce_prop",
    # Registrations
    "AnyRegistration",
    "ComponentRegistration",
    "ComponentRelationship",
    "DefaultChild",
    "StandardizedComponentRegistration",
    # Registry
    "ComponentRegistry",
    "RegistryFrozenError",
    "build_default_registry",
    "register_default_components",
    "LEGACY_COMPONENTS",
    "STANDARDIZED_COMPONENTS",
    # Property sets
    "ALWAYS_ALLOWED_ATTRIBUTES",
    "PLAIN_HTML_TAGS",
    "UNIVERSAL_PROPERTIES",
    "is_always_allowed_attribute",
]
