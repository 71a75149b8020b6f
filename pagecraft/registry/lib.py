"""Component registry for the pagecraft markup dialect.

The registry is the single authority on which component names exist,
which properties they accept and how they may nest. It is populated once
during initialization, frozen, and then passed by reference to the parser,
validator, compiler and positioning resolver.

Two registration styles coexist:

- Legacy components declare an explicit ``PropSchema`` per property.
- Standardized components accept the universal presentation-property set.

Example:
    >>> from pagecraft.registry import build_default_registry
    >>> registry = build_default_registry()
    >>> registry.get_required_parent("Tab")
    'Tabs'
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# =============================================================================
# Enums
# =============================================================================


class PropType(str, Enum):
    """Value types a legacy property schema may declare."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ENUM = "enum"


class RelationshipKind(str, Enum):
    """Structural role of a component within the tree."""

    PARENT = "parent"
    CHILD = "child"
    CONTAINER = "container"
    LEAF = "leaf"


class ComponentCategory(str, Enum):
    """Category of a standardized component."""

    LAYOUT = "layout"
    CONTENT = "content"
    MEDIA = "media"
    INTERACTIVE = "interactive"
    DECORATIVE = "decorative"


class ComponentKind(str, Enum):
    """Which registration style matched a lookup."""

    STANDARDIZED = "standardized"
    LEGACY = "legacy"


# =============================================================================
# Property Sets
# =============================================================================

# Presentation properties every component accepts.
UNIVERSAL_PROPERTIES: frozenset[str] = frozenset(
    {
        # Colors & typography
        "backgroundColor",
        "color",
        "fontSize",
        "fontFamily",
        "fontWeight",
        "fontStyle",
        "textAlign",
        "lineHeight",
        "textDecoration",
        "textTransform",
        "letterSpacing",
        "wordSpacing",
        "textIndent",
        "whiteSpace",
        "wordBreak",
        "wordWrap",
        "textOverflow",
        # Box
        "padding",
        "margin",
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
        # Positioning & sizing
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
        # Flex & grid
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
        "gridColumn",
        "gridRow",
        "gridArea",
        "gridAutoColumns",
        "gridAutoRows",
        "gridAutoFlow",
        # Content passthrough
        "content",
        "contentEditable",
        "tabIndex",
        "css",
    }
)

# Attribute names accepted on any tag, component or plain HTML.
ALWAYS_ALLOWED_ATTRIBUTES: frozenset[str] = frozenset(
    {"class", "className", "id", "style", "title", "role"}
)

ALWAYS_ALLOWED_PREFIXES: tuple[str, ...] = ("data-", "aria-", "_")


# Plain HTML tags allowed alongside registered components.
PLAIN_HTML_TAGS: frozenset[str] = frozenset(
    {
        # Sectioning
        "div", "span", "section", "article", "aside", "header", "footer", "main", "nav",
        # Text
        "a", "p", "h1", "h2", "h3", "h4", "h5", "h6", "strong", "em", "b", "i", "u",
        "small", "code", "pre", "blockquote", "br", "hr",
        # Lists & tables
        "ul", "ol", "li", "dl", "dt", "dd",
        "table", "thead", "tbody", "tfoot", "tr", "th", "td",
        # Forms
        "form", "input", "button", "select", "textarea", "label",
        # Media
        "img", "video", "audio", "canvas", "svg", "figure", "figcaption",
    }
)


def is_always_allowed_attribute(name: str) -> bool:
    """Check whether an attribute name is accepted regardless of component."""
    return name in ALWAYS_ALLOWED_ATTRIBUTES or name.startswith(
        ALWAYS_ALLOWED_PREFIXES
    )


# =============================================================================
# Property Schemas
# =============================================================================


class PropCoercionError(Exception):
    """Raised when a property value cannot be coerced to its schema."""

    def __init__(self, message: str, prop_name: str | None = None):
        super().__init__(message)
        self.prop_name = prop_name


@dataclass(frozen=True)
class PropSchema:
    """Schema for one legacy component property.

    Attributes:
        type: Declared value type.
        required: Whether the property must be present.
        default: Value used when the property is absent or invalid.
        values: Allowed values for enum properties.
        min: Lower clamp for number properties.
        max: Upper clamp for number properties.
    """

    type: PropType
    required: bool = False
    default: Any = None
    values: tuple[str, ...] = ()
    min: float | None = None
    max: float | None = None


def _to_number(value: Any) -> float | int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    if math.isnan(number):
        return None
    return int(number) if number.is_integer() else number


def coerce_prop(value: Any, schema: PropSchema, name: str | None = None) -> Any:
    """Coerce a raw attribute value according to its schema.

    Args:
        value: Raw value (usually the attribute string), or None if absent.
        schema: Property schema to coerce against.
        name: Property name, used in error messages.

    Returns:
        The coerced value.

    Raises:
        PropCoercionError: If a required property is missing, or a number
            is invalid and the schema has no default.
    """
    if value is None:
        if schema.required:
            label = f"Required prop {name}" if name else "Required prop"
            raise PropCoercionError(f"{label} is missing", prop_name=name)
        return schema.default

    if schema.type == PropType.STRING:
        return str(value)

    if schema.type == PropType.NUMBER:
        number = _to_number(value)
        if number is None:
            if schema.default is not None:
                return schema.default
            raise PropCoercionError(
                f"Invalid number for prop {name}: {value}", prop_name=name
            )
        if schema.min is not None and number < schema.min:
            return schema.min
        if schema.max is not None and number > schema.max:
            return schema.max
        return number

    if schema.type == PropType.BOOLEAN:
        if isinstance(value, bool):
            return value
        if value in ("true", ""):
            return True
        if value == "false":
            return False
        return schema.default if schema.default is not None else False

    if schema.type == PropType.ENUM:
        text = str(value)
        if text in schema.values:
            return text
        return schema.default

    return value


# =============================================================================
# Relationships & Registrations
# =============================================================================


@dataclass(frozen=True)
class DefaultChild:
    """Child created automatically when a parent component is added."""

    type: str
    properties: dict[str, Any] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class ComponentRelationship:
    """Structural rules for a component.

    Attributes:
        kind: Structural role (parent, child, container, leaf).
        accepts_children: True for any child, or the set of accepted names.
        requires_parent: Name of the component this one must sit under.
        default_children: Children created when the component is added.
        min_children: Minimum number of component children.
        max_children: Maximum number of component children.
    """

    kind: RelationshipKind
    accepts_children: bool | frozenset[str] = True
    requires_parent: str | None = None
    default_children: tuple[DefaultChild, ...] = ()
    min_children: int | None = None
    max_children: int | None = None


@dataclass(frozen=True)
class ComponentRegistration:
    """Legacy registration with an explicit property schema."""

    name: str
    props: dict[str, PropSchema] = field(default_factory=dict, hash=False)
    relationship: ComponentRelationship | None = None


@dataclass(frozen=True)
class StandardizedComponentRegistration:
    """Registration accepting the universal presentation-property set."""

    name: str
    category: ComponentCategory
    description: str = ""
    relationship: ComponentRelationship | None = None


AnyRegistration = ComponentRegistration | StandardizedComponentRegistration


class RegistryFrozenError(Exception):
    """Raised when registering into a registry after initialization."""

    def __init__(self, name: str):
        super().__init__(
            f"Cannot register {name!r}: component registry is frozen"
        )
        self.name = name


# =============================================================================
# Registry
# =============================================================================


def _lookup(components: dict[str, Any], name: str) -> Any | None:
    """Exact lookup, then a case-insensitive scan."""
    found = components.get(name)
    if found is not None:
        return found
    lowered = name.lower()
    for key, value in components.items():
        if key.lower() == lowered:
            return value
    return None


class ComponentRegistry:
    """Catalog of known components and their structural rules.

    Registration is only allowed until ``freeze()`` is called. Lookups are
    exact first, then case-insensitive. Standardized registrations win
    over legacy ones with the same name.
    """

    def __init__(self) -> None:
        self._components: dict[str, ComponentRegistration] = {}
        self._standardized: dict[str, StandardizedComponentRegistration] = {}
        self._frozen = False

    # -------------------------------------------------------------------------
    # Initialization phase
    # -------------------------------------------------------------------------

    def register(self, registration: ComponentRegistration) -> None:
        """Register a legacy component."""
        if self._frozen:
            raise RegistryFrozenError(registration.name)
        self._components[registration.name] = registration

    def register_standardized(
        self, registration: StandardizedComponentRegistration
    ) -> None:
        """Register a standardized component."""
        if self._frozen:
            raise RegistryFrozenError(registration.name)
        self._standardized[registration.name] = registration

    def freeze(self) -> "ComponentRegistry":
        """End the initialization phase. Returns self for chaining."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def size(self) -> int:
        """Total registrations across both styles."""
        return len(self._components) + len(self._standardized)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get(self, name: str) -> ComponentRegistration | None:
        return _lookup(self._components, name)

    def get_standardized(self, name: str) -> StandardizedComponentRegistration | None:
        return _lookup(self._standardized, name)

    def get_any_component(
        self, name: str
    ) -> tuple[AnyRegistration, ComponentKind] | None:
        """Look up a component of either style, standardized first."""
        standardized = self.get_standardized(name)
        if standardized is not None:
            return standardized, ComponentKind.STANDARDIZED
        legacy = self.get(name)
        if legacy is not None:
            return legacy, ComponentKind.LEGACY
        return None

    def get_all_registrations(self) -> dict[str, AnyRegistration]:
        """Copy of every registration keyed by name, standardized winning."""
        merged: dict[str, AnyRegistration] = dict(self._components)
        merged.update(self._standardized)
        return merged

    def get_allowed_tags(self) -> list[str]:
        """Every registered component name."""
        return list(dict.fromkeys([*self._components, *self._standardized]))

    def get_allowed_attributes(self, tag: str) -> list[str]:
        """Property names the component accepts (excluding always-allowed ones).

        Standardized components accept the universal set; legacy components
        accept their explicit props plus the universal set.
        """
        match = self.get_any_component(tag)
        if match is None:
            return []
        registration, kind = match
        universal = sorted(UNIVERSAL_PROPERTIES)
        if kind == ComponentKind.STANDARDIZED:
            return universal
        explicit = list(registration.props)
        return explicit + [name for name in universal if name not in explicit]

    def resolve_attribute(self, tag: str, attribute: str) -> str | None:
        """Canonical property name for an attribute, or None if not allowed.

        Always-allowed attributes resolve to themselves. Legacy property
        names match case-insensitively.
        """
        if is_always_allowed_attribute(attribute):
            return attribute
        match = self.get_any_component(tag)
        if match is None:
            return None
        registration, kind = match
        if kind == ComponentKind.LEGACY:
            if attribute in registration.props:
                return attribute
            lowered = attribute.lower()
            for prop_name in registration.props:
                if prop_name.lower() == lowered:
                    return prop_name
        if attribute in UNIVERSAL_PROPERTIES:
            return attribute
        return None

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------

    def get_relationship(self, name: str) -> ComponentRelationship | None:
        match = self.get_any_component(name)
        if match is None:
            return None
        return match[0].relationship

    def can_accept_child(self, parent: str, child: str) -> bool:
        relationship = self.get_relationship(parent)
        if relationship is None:
            return False
        if relationship.accepts_children is True:
            return True
        if isinstance(relationship.accepts_children, frozenset):
            return child in relationship.accepts_children
        return False

    def get_valid_child_types(self, parent: str) -> list[str]:
        """Every registered tag if the parent accepts anything, else its allow-set."""
        relationship = self.get_relationship(parent)
        if relationship is None:
            return []
        if relationship.accepts_children is True:
            return self.get_allowed_tags()
        if isinstance(relationship.accepts_children, frozenset):
            return sorted(relationship.accepts_children)
        return []

    def get_required_parent(self, child: str) -> str | None:
        relationship = self.get_relationship(child)
        return relationship.requires_parent if relationship else None

    def get_default_children(self, parent: str) -> list[DefaultChild]:
        relationship = self.get_relationship(parent)
        return list(relationship.default_children) if relationship else []

    def is_parent_component(self, name: str) -> bool:
        relationship = self.get_relationship(name)
        return relationship is not None and relationship.kind in (
            RelationshipKind.PARENT,
            RelationshipKind.CONTAINER,
        )

    def is_child_component(self, name: str) -> bool:
        relationship = self.get_relationship(name)
        return relationship is not None and relationship.kind == RelationshipKind.CHILD

