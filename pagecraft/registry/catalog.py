"""Default component catalog.

Profile widgets, layout containers, decorative frames, tabs and the other
parent/child families, plus a handful of standardized layout components.
"""

from .lib import (
    ComponentCategory,
    ComponentRegistration,
    ComponentRegistry,
    ComponentRelationship,
    DefaultChild,
    PropSchema,
    PropType,
    RelationshipKind,
    StandardizedComponentRegistration,
)

# Shared schema fragments
_SIZES = ("xs", "sm", "md", "lg", "xl")
_GAP = PropSchema(PropType.ENUM, values=_SIZES, default="md")
_PADDING = PropSchema(PropType.ENUM, values=_SIZES, default="md")
_RESPONSIVE = PropSchema(PropType.BOOLEAN, default=True)
_ROTATION = PropSchema(PropType.NUMBER, min=-15, max=15, default=0)

_TEXT = ComponentRelationship(kind=RelationshipKind.LEAF, accepts_children=True)
_CONTAINER = ComponentRelationship(
    kind=RelationshipKind.CONTAINER, accepts_children=True
)


def _string(default=None, required=False) -> PropSchema:
    return PropSchema(PropType.STRING, default=default, required=required)


def _boolean(default=False) -> PropSchema:
    return PropSchema(PropType.BOOLEAN, default=default)


def _enum(*values: str, default: str | None = None) -> PropSchema:
    return PropSchema(PropType.ENUM, values=values, default=default or values[0])


def _parent(*accepts: str, defaults=(), max_children=None) -> ComponentRelationship:
    return ComponentRelationship(
        kind=RelationshipKind.PARENT,
        accepts_children=frozenset(accepts),
        default_children=tuple(defaults),
        min_children=1,
        max_children=max_children,
    )


def _child(parent: str, accepts_children=False) -> ComponentRelationship:
    return ComponentRelationship(
        kind=RelationshipKind.CHILD,
        accepts_children=accepts_children,
        requires_parent=parent,
    )


LEGACY_COMPONENTS: tuple[ComponentRegistration, ...] = (
    # -------------------------------------------------------------------------
    # Text
    # -------------------------------------------------------------------------
    ComponentRegistration(
        "TextElement",
        {
            "content": _string("Edit this text"),
            "tag": _enum("div", "span", "p"),
        },
        _TEXT,
    ),
    ComponentRegistration(
        "Heading",
        {
            "content": _string("Heading Text"),
            "level": _enum("1", "2", "3", "4", "5", "6", default="2"),
        },
        _TEXT,
    ),
    ComponentRegistration(
        "Paragraph",
        {"content": _string("This is a paragraph.")},
        _TEXT,
    ),
    ComponentRegistration(
        "WaveText",
        {
            "text": _string(required=True),
            "speed": _enum("slow", "medium", "fast", default="medium"),
            "amplitude": _enum("small", "medium", "large", default="medium"),
        },
    ),
    ComponentRegistration(
        "GlitchText",
        {
            "text": _string(required=True),
            "intensity": _enum("low", "medium", "high", default="medium"),
            "glitchColor1": _string("#ff0000"),
            "glitchColor2": _string("#00ffff"),
        },
    ),
    # -------------------------------------------------------------------------
    # Profile widgets
    # -------------------------------------------------------------------------
    ComponentRegistration(
        "ProfilePhoto",
        {
            "size": _enum("xs", "sm", "md", "lg", default="md"),
            "shape": _enum("circle", "square"),
        },
    ),
    ComponentRegistration(
        "DisplayName",
        {
            "as": _enum("h1", "h2", "h3", "span", "div", default="h2"),
            "showLabel": _boolean(),
        },
    ),
    ComponentRegistration("Bio"),
    ComponentRegistration(
        "BlogPosts",
        {"limit": PropSchema(PropType.NUMBER, min=1, max=20, default=5)},
    ),
    ComponentRegistration("Guestbook"),
    ComponentRegistration("FollowButton"),
    ComponentRegistration("MutualFriends"),
    ComponentRegistration("FriendBadge"),
    ComponentRegistration("FriendDisplay"),
    ComponentRegistration("WebsiteDisplay"),
    ComponentRegistration("NotificationCenter"),
    ComponentRegistration("NotificationBell"),
    ComponentRegistration("UserAccount"),
    ComponentRegistration("SiteBranding"),
    ComponentRegistration("Breadcrumb"),
    ComponentRegistration("MediaGrid"),
    ComponentRegistration(
        "ProfileHero", {"variant": _enum("tape", "plain", default="plain")}
    ),
    ComponentRegistration(
        "ProfileHeader",
        {
            "showPhoto": _boolean(True),
            "showBio": _boolean(True),
            "showActions": _boolean(True),
            "photoSize": _enum("xs", "sm", "md", "lg", default="md"),
        },
    ),
    ComponentRegistration(
        "ProfileBadges",
        {"showTitle": _boolean(), "layout": _enum("grid", "list")},
    ),
    ComponentRegistration(
        "UserImage",
        {
            "src": _string(),
            "index": PropSchema(PropType.NUMBER, default=0),
            "alt": _string(""),
            "size": _enum(*_SIZES, "full", default="md"),
            "fit": _enum("cover", "contain", "fill", "scale-down"),
        },
    ),
    # -------------------------------------------------------------------------
    # Layout containers
    # -------------------------------------------------------------------------
    ComponentRegistration(
        "FlexContainer",
        {
            "direction": _enum("row", "column", "row-reverse", "column-reverse"),
            "align": _enum("start", "center", "end", "stretch"),
            "justify": _enum("start", "center", "end", "between", "around", "evenly"),
            "wrap": _boolean(),
            "gap": _GAP,
            "responsive": _RESPONSIVE,
        },
        _CONTAINER,
    ),
    ComponentRegistration(
        "GridLayout",
        {
            "columns": _enum("1", "2", "3", "4", "5", "6", default="2"),
            "gap": _GAP,
            "responsive": _RESPONSIVE,
        },
        _CONTAINER,
    ),
    ComponentRegistration(
        "SplitLayout",
        {
            "ratio": _enum("1:1", "1:2", "2:1", "1:3", "3:1"),
            "vertical": _boolean(),
            "gap": _GAP,
            "responsive": _RESPONSIVE,
        },
        _CONTAINER,
    ),
    ComponentRegistration(
        "CenteredBox",
        {
            "maxWidth": _enum("sm", "md", "lg", "xl", "2xl", "full", default="lg"),
            "padding": _PADDING,
        },
        _CONTAINER,
    ),
    # -------------------------------------------------------------------------
    # Decorative frames
    # -------------------------------------------------------------------------
    ComponentRegistration(
        "GradientBox",
        {
            "gradient": _enum("sunset", "ocean", "forest", "neon", "rainbow", "fire"),
            "direction": _enum("r", "l", "b", "t", "br", "bl", "tr", "tl", default="br"),
            "padding": _PADDING,
            "rounded": _boolean(True),
        },
        _CONTAINER,
    ),
    ComponentRegistration(
        "NeonBorder",
        {
            "color": _enum("blue", "pink", "green", "purple", "cyan", "yellow"),
            "intensity": _enum("soft", "medium", "bright", default="medium"),
            "padding": _PADDING,
            "rounded": _boolean(True),
        },
        _CONTAINER,
    ),
    ComponentRegistration(
        "RetroTerminal",
        {
            "variant": _enum("green", "amber", "blue", "white"),
            "showHeader": _boolean(True),
            "padding": _PADDING,
        },
        _CONTAINER,
    ),
    ComponentRegistration(
        "PolaroidFrame",
        {"caption": _string(""), "rotation": _ROTATION, "shadow": _boolean(True)},
        _CONTAINER,
    ),
    ComponentRegistration(
        "StickyNote",
        {
            "color": _enum("yellow", "pink", "blue", "green", "orange", "purple"),
            "size": _enum("sm", "md", "lg", default="md"),
            "rotation": _ROTATION,
        },
        _CONTAINER,
    ),
    ComponentRegistration(
        "RevealBox",
        {
            "buttonText": _string("Click to reveal"),
            "revealText": _string("Hide"),
            "variant": _enum("slide", "fade", "grow", default="fade"),
        },
        _CONTAINER,
    ),
    ComponentRegistration(
        "FloatingBadge",
        {
            "color": _enum("blue", "green", "red", "yellow", "purple", "pink"),
            "size": _enum("sm", "md", "lg", default="md"),
            "animation": _enum("bounce", "pulse", "float", "none", default="float"),
        },
    ),
    # -------------------------------------------------------------------------
    # Parent / child families
    # -------------------------------------------------------------------------
    ComponentRegistration(
        "Tabs",
        {},
        _parent(
            "Tab",
            defaults=(
                DefaultChild("Tab", {"title": "Tab 1"}),
                DefaultChild("Tab", {"title": "Tab 2"}),
            ),
        ),
    ),
    ComponentRegistration(
        "Tab", {"title": _string(required=True)}, _child("Tabs", True)
    ),
    ComponentRegistration(
        "ProgressTracker",
        {
            "title": _string(),
            "display": _enum("bars", "stars", "circles", "dots"),
            "showValues": _boolean(True),
        },
        _parent(
            "ProgressItem",
            defaults=(
                DefaultChild("ProgressItem", {"label": "JavaScript", "value": 85}),
                DefaultChild("ProgressItem", {"label": "Python", "value": 90}),
            ),
        ),
    ),
    ComponentRegistration(
        "ProgressItem",
        {
            "label": _string(required=True),
            "value": PropSchema(PropType.NUMBER, required=True, min=0),
            "max": PropSchema(PropType.NUMBER, min=1, default=100),
        },
        _child("ProgressTracker"),
    ),
    ComponentRegistration(
        "ImageCarousel",
        {
            "autoplay": _boolean(),
            "interval": PropSchema(PropType.NUMBER, min=1, max=30, default=5),
            "loop": _boolean(True),
        },
        _parent(
            "CarouselImage",
            defaults=(
                DefaultChild("CarouselImage", {"src": "/placeholder1.jpg"}),
                DefaultChild("CarouselImage", {"src": "/placeholder2.jpg"}),
            ),
        ),
    ),
    ComponentRegistration(
        "CarouselImage",
        {"src": _string(required=True), "alt": _string(), "caption": _string()},
        _child("ImageCarousel"),
    ),
    ComponentRegistration(
        "ContactCard",
        {
            "expanded": _boolean(),
            "title": _string("Contact Me"),
            "maxMethods": PropSchema(PropType.NUMBER, min=1, max=10, default=3),
        },
        _parent(
            "ContactMethod",
            defaults=(
                DefaultChild(
                    "ContactMethod", {"type": "email", "value": "user@example.com"}
                ),
            ),
            max_children=10,
        ),
    ),
    ComponentRegistration(
        "ContactMethod",
        {
            "type": PropSchema(
                PropType.ENUM,
                required=True,
                values=("email", "phone", "github", "website", "custom"),
            ),
            "value": _string(required=True),
            "label": _string(),
        },
        _child("ContactCard"),
    ),
)


STANDARDIZED_COMPONENTS: tuple[StandardizedComponentRegistration, ...] = (
    StandardizedComponentRegistration(
        "NavigationBar",
        ComponentCategory.LAYOUT,
        "Site-wide navigation strip pinned across the page",
        _CONTAINER,
    ),
    StandardizedComponentRegistration(
        "SiteHeader", ComponentCategory.LAYOUT, "Full-width page header", _CONTAINER
    ),
    StandardizedComponentRegistration(
        "SiteFooter", ComponentCategory.LAYOUT, "Full-width page footer", _CONTAINER
    ),
    StandardizedComponentRegistration(
        "ContentCard", ComponentCategory.CONTENT, "Boxed content card", _CONTAINER
    ),
    StandardizedComponentRegistration(
        "ImageFrame",
        ComponentCategory.MEDIA,
        "Framed image",
        ComponentRelationship(kind=RelationshipKind.LEAF, accepts_children=False),
    ),
)


def register_default_components(registry: ComponentRegistry) -> None:
    """Register the default catalog into an unfrozen registry."""
    for registration in LEGACY_COMPONENTS:
        registry.register(registration)
    for registration in STANDARDIZED_COMPONENTS:
        registry.register_standardized(registration)


def build_default_registry() -> ComponentRegistry:
    """Construct and freeze a registry holding the default component catalog."""
    registry = ComponentRegistry()
    register_default_components(registry)
    return registry.freeze()
