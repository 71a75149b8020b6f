"""Unit tests for the component registry."""

import pytest

from pagecraft.registry import (
    LEGACY_COMPONENTS,
    STANDARDIZED_COMPONENTS,
    ComponentCategory,
    ComponentKind,
    ComponentRegistration,
    ComponentRegistry,
    ComponentRelationship,
    PropCoercionError,
    PropSchema,
    PropType,
    RegistryFrozenError,
    RelationshipKind,
    StandardizedComponentRegistration,
    build_default_registry,
    coerce_prop,
    is_always_allowed_attribute,
)


@pytest.fixture
def registry():
    return build_default_registry()


class TestCoerceProp:
    """Tests for legacy property coercion."""

    @pytest.mark.unit
    def test_number_clamped_to_bounds(self):
        schema = PropSchema(PropType.NUMBER, min=1, max=20, default=5)
        assert coerce_prop("50", schema) == 20
        assert coerce_prop("0", schema) == 1
        assert coerce_prop("7", schema) == 7

    @pytest.mark.unit
    def test_invalid_number_uses_default(self):
        schema = PropSchema(PropType.NUMBER, default=5)
        assert coerce_prop("many", schema) == 5

    @pytest.mark.unit
    def test_invalid_number_without_default_raises(self):
        schema = PropSchema(PropType.NUMBER)
        with pytest.raises(PropCoercionError):
            coerce_prop("many", schema, "limit")

    @pytest.mark.unit
    def test_boolean_forms(self):
        schema = PropSchema(PropType.BOOLEAN, default=False)
        assert coerce_prop("", schema) is True
        assert coerce_prop("true", schema) is True
        assert coerce_prop("false", schema) is False
        assert coerce_prop("perhaps", schema) is False

    @pytest.mark.unit
    def test_enum_outside_values_uses_default(self):
        schema = PropSchema(PropType.ENUM, values=("a", "b"), default="a")
        assert coerce_prop("b", schema) == "b"
        assert coerce_prop("z", schema) == "a"

    @pytest.mark.unit
    def test_missing_required_raises(self):
        schema = PropSchema(PropType.STRING, required=True)
        with pytest.raises(PropCoercionError) as exc_info:
            coerce_prop(None, schema, "title")
        assert exc_info.value.prop_name == "title"
        assert "title" in str(exc_info.value)

    @pytest.mark.unit
    def test_missing_optional_returns_default(self):
        schema = PropSchema(PropType.STRING, default="x")
        assert coerce_prop(None, schema) == "x"


class TestLookup:
    """Tests for exact and case-insensitive lookup."""

    @pytest.mark.unit
    def test_exact_and_case_insensitive(self, registry):
        assert registry.get("BlogPosts").name == "BlogPosts"
        assert registry.get("blogposts").name == "BlogPosts"
        assert registry.get("NoSuchThing") is None

    @pytest.mark.unit
    def test_standardized_preferred(self):
        registry = ComponentRegistry()
        registry.register(ComponentRegistration("Card"))
        registry.register_standardized(
            StandardizedComponentRegistration("Card", ComponentCategory.CONTENT)
        )
        registration, kind = registry.get_any_component("card")
        assert kind == ComponentKind.STANDARDIZED
        assert isinstance(registration, StandardizedComponentRegistration)

    @pytest.mark.unit
    def test_legacy_fallback(self, registry):
        registration, kind = registry.get_any_component("Tabs")
        assert kind == ComponentKind.LEGACY
        assert registration.name == "Tabs"
        assert registry.get_any_component("Nope") is None

    @pytest.mark.unit
    def test_size_counts_both_maps(self, registry):
        assert registry.size == len(LEGACY_COMPONENTS) + len(STANDARDIZED_COMPONENTS)

    @pytest.mark.unit
    def test_allowed_tags(self, registry):
        tags = registry.get_allowed_tags()
        assert "BlogPosts" in tags
        assert "NavigationBar" in tags
        assert len(tags) == registry.size


class TestAttributes:
    """Tests for attribute allow-lists."""

    @pytest.mark.unit
    def test_legacy_explicit_plus_universal(self, registry):
        allowed = registry.get_allowed_attributes("BlogPosts")
        assert allowed[0] == "limit"
        assert "backgroundColor" in allowed

    @pytest.mark.unit
    def test_standardized_universal_only(self, registry):
        allowed = registry.get_allowed_attributes("NavigationBar")
        assert "limit" not in allowed
        assert "padding" in allowed

    @pytest.mark.unit
    def test_unknown_tag_has_no_attributes(self, registry):
        assert registry.get_allowed_attributes("Nope") == []

    @pytest.mark.unit
    def test_resolve_attribute_case_insensitive(self, registry):
        assert registry.resolve_attribute("DisplayName", "showlabel") == "showLabel"
        assert registry.resolve_attribute("DisplayName", "bogus") is None
        assert registry.resolve_attribute("DisplayName", "data-x") == "data-x"

    @pytest.mark.unit
    def test_always_allowed(self):
        for name in ("class", "id", "style", "data-foo", "aria-label", "_size"):
            assert is_always_allowed_attribute(name)
        assert not is_always_allowed_attribute("onclick")


class TestRelationships:
    """Tests for parent/child relationship queries."""

    @pytest.mark.unit
    def test_explicit_accept_set(self, registry):
        assert registry.can_accept_child("Tabs", "Tab")
        assert not registry.can_accept_child("Tabs", "BlogPosts")
        assert registry.get_valid_child_types("Tabs") == ["Tab"]

    @pytest.mark.unit
    def test_accepts_anything(self, registry):
        assert registry.can_accept_child("FlexContainer", "BlogPosts")
        assert registry.get_valid_child_types("FlexContainer") == (
            registry.get_allowed_tags()
        )

    @pytest.mark.unit
    def test_required_parent(self, registry):
        assert registry.get_required_parent("Tab") == "Tabs"
        assert registry.get_required_parent("BlogPosts") is None

    @pytest.mark.unit
    def test_default_children(self, registry):
        defaults = registry.get_default_children("Tabs")
        assert [child.properties["title"] for child in defaults] == ["Tab 1", "Tab 2"]
        assert registry.get_default_children("Bio") == []

    @pytest.mark.unit
    def test_parent_and_child_kinds(self, registry):
        assert registry.is_parent_component("Tabs")
        assert registry.is_parent_component("FlexContainer")
        assert registry.is_child_component("Tab")
        assert not registry.is_child_component("Tabs")
        assert not registry.is_parent_component("Bio")


class TestFreeze:
    """Tests for the initialization phase."""

    @pytest.mark.unit
    def test_default_registry_is_frozen(self, registry):
        assert registry.frozen
        with pytest.raises(RegistryFrozenError) as exc_info:
            registry.register(ComponentRegistration("Late"))
        assert exc_info.value.name == "Late"

    @pytest.mark.unit
    def test_standardized_registration_blocked_after_freeze(self):
        registry = ComponentRegistry().freeze()
        with pytest.raises(RegistryFrozenError):
            registry.register_standardized(
                StandardizedComponentRegistration(
                    "Late",
                    ComponentCategory.LAYOUT,
                    relationship=ComponentRelationship(RelationshipKind.LEAF),
                )
            )

    @pytest.mark.unit
    def test_all_registrations_is_a_copy(self, registry):
        snapshot = registry.get_all_registrations()
        snapshot.pop("BlogPosts")
        assert registry.get("BlogPosts") is not None
