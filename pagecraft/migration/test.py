"""Unit tests for the legacy migration adapter."""

import json
from itertools import combinations

import pytest

from pagecraft.ir import CURRENT_SCHEMA_VERSION, Island
from pagecraft.migration import (
    EDITOR_METADATA,
    FLEX_SHORTHAND_KEYS,
    LEGACY_PRESENTATION_KEYS,
    NARROW_VIEWPORT_QUERY,
    STYLE_PROPERTIES,
    convert_legacy_align,
    convert_legacy_gap,
    convert_legacy_justify,
    extract_editor_context,
    migrate_attributes,
    migrate_component_props,
    migrate_flex_container,
    migrate_island,
    migrate_legacy_positioning,
    migrate_legacy_styling,
    migrate_node,
    normalize_attribute_name,
    normalize_positioning_data,
    strip_for_output,
)
from pagecraft.parser import parse_template
from pagecraft.positioning import build_grid_style


class TestKeywordConversion:
    """Tests for the flex keyword tables."""

    @pytest.mark.unit
    def test_justify_between(self):
        assert convert_legacy_justify("between") == "space-between"
        assert convert_legacy_justify("evenly") == "space-evenly"

    @pytest.mark.unit
    def test_unknown_keywords_use_safe_defaults(self):
        assert convert_legacy_justify("sideways") == "start"
        assert convert_legacy_align("sideways") == "stretch"

    @pytest.mark.unit
    def test_gap_scale(self):
        assert convert_legacy_gap("xs") == "0.25rem"
        assert convert_legacy_gap("xl") == "2rem"
        assert convert_legacy_gap("3px") == "3px"


class TestNormalizeAttributeName:
    """Tests for attribute name normalization."""

    @pytest.mark.unit
    def test_kebab_case(self):
        assert normalize_attribute_name("font-style") == "fontStyle"
        assert normalize_attribute_name("max-width") == "maxWidth"

    @pytest.mark.unit
    def test_flat_lowercase_table(self):
        assert normalize_attribute_name("showlabel") == "showLabel"
        assert normalize_attribute_name("class") == "className"

    @pytest.mark.unit
    def test_preserved_names(self):
        assert normalize_attribute_name("data-pixel-position") == "data-pixel-position"
        assert normalize_attribute_name("aria-label") == "aria-label"
        assert normalize_attribute_name("_positioning") == "_positioning"
        assert normalize_attribute_name("limit") == "limit"


class TestLegacyStyling:
    """Tests for flat lowercase style keys."""

    @pytest.mark.unit
    def test_one_to_one_mapping(self):
        migrated = migrate_legacy_styling({"backgroundcolor": "#fff", "textcolor": "red"})
        assert migrated == {"backgroundColor": "#fff", "color": "red"}

    @pytest.mark.unit
    def test_border_pair_merges(self):
        migrated = migrate_legacy_styling({"borderwidth": "2px", "bordercolor": "blue"})
        assert migrated == {"border": "2px solid blue"}

    @pytest.mark.unit
    def test_customcss_parsed(self):
        migrated = migrate_legacy_styling({"customcss": '{"color": "red"}'})
        assert migrated == {"css": {"color": "red"}}

    @pytest.mark.unit
    def test_invalid_customcss_ignored(self):
        assert migrate_legacy_styling({"customcss": "{nope"}) == {}


class TestLegacyPositioning:
    """Tests for legacy positioning props."""

    @pytest.mark.unit
    def test_absolute(self):
        migrated = migrate_legacy_positioning(
            {
                "_positioningMode": "absolute",
                "position": {"x": 10, "y": 20, "z": 3},
                "_size": {"width": 200},
            }
        )
        assert migrated == {
            "position": "absolute",
            "left": "10px",
            "top": "20px",
            "zIndex": 3,
            "width": 200,
        }

    @pytest.mark.unit
    def test_grid(self):
        migrated = migrate_legacy_positioning(
            {"_positioningMode": "grid", "gridPosition": {"column": 2, "row": 3}}
        )
        assert migrated == {"gridColumn": "2 / span 1", "gridRow": "3 / span 1"}
        assert migrated == build_grid_style(2, 3)


class TestFlexContainer:
    """Tests for the flex-container shorthand."""

    @pytest.mark.unit
    def test_full_shorthand(self):
        migrated = migrate_flex_container(
            {
                "direction": "row",
                "align": "center",
                "justify": "between",
                "gap": "lg",
                "wrap": True,
                "responsive": True,
            }
        )
        assert migrated["display"] == "flex"
        assert migrated["flexDirection"] == "row"
        assert migrated["alignItems"] == "center"
        assert migrated["justifyContent"] == "space-between"
        assert migrated["gap"] == "1.5rem"
        assert migrated["flexWrap"] == "wrap"
        assert migrated["css"][NARROW_VIEWPORT_QUERY] == {"flexDirection": "column"}

    @pytest.mark.unit
    def test_column_layout_has_no_responsive_rule(self):
        migrated = migrate_flex_container({"direction": "column", "responsive": True})
        assert "css" not in migrated

    @pytest.mark.unit
    def test_component_props_only_for_flex_container(self):
        props = {"justify": "between", "color": "red"}
        assert migrate_component_props(props, "FlexContainer")["justifyContent"] == (
            "space-between"
        )
        assert migrate_component_props(props, "Bio") == {"color": "red"}


class TestStripForOutput:
    """Tests for the passthrough-attribute conversion."""

    @pytest.mark.unit
    def test_removes_style_and_editor_names(self):
        props = {
            "href": "/about",
            "backgroundColor": "#000",
            "css": {"a": 1},
            "_isSelected": True,
            "_positioning": {"x": 1},
            "data-id": "7",
        }
        assert strip_for_output(props) == {"href": "/about", "data-id": "7"}

    @pytest.mark.unit
    def test_never_leaks_for_any_combination(self):
        sample = (
            sorted(STYLE_PROPERTIES)[:4]
            + sorted(LEGACY_PRESENTATION_KEYS)[:3]
            + sorted(FLEX_SHORTHAND_KEYS)[:3]
            + sorted(EDITOR_METADATA)[:3]
            + ["title"]
        )
        presentation = STYLE_PROPERTIES | LEGACY_PRESENTATION_KEYS | FLEX_SHORTHAND_KEYS
        for size in range(len(sample) + 1):
            for names in combinations(sample, size):
                output = strip_for_output({name: "v" for name in names}, "FlexContainer")
                assert not set(output) & presentation
                assert not set(output) & EDITOR_METADATA

    @pytest.mark.unit
    def test_flex_shorthand_stripped_for_flex_container(self):
        props = {
            "direction": "row",
            "align": "start",
            "justify": "between",
            "wrap": False,
            "responsive": True,
            "gap": "md",
            "textcolor": "red",
            "title": "Row",
        }
        assert strip_for_output(props, "FlexContainer") == {"title": "Row"}

    @pytest.mark.unit
    def test_shorthand_names_kept_for_other_components(self):
        props = {"direction": "br", "gradient": "ocean", "backgroundcolor": "red"}
        assert strip_for_output(props, "GradientBox") == {
            "direction": "br",
            "gradient": "ocean",
        }

    @pytest.mark.unit
    def test_editor_context(self):
        assert extract_editor_context({"_isSelected": True}) is None
        context = extract_editor_context(
            {"_isInVisualBuilder": True, "_positioningMode": "grid", "_isHovered": 1}
        )
        assert context.positioning_mode == "grid"
        assert context.is_hovered is True
        assert context.is_selected is False


class TestNormalizePositioningData:
    """Tests for legacy _positioning shapes."""

    @pytest.mark.unit
    def test_current_absolute_unchanged(self):
        data = {"mode": "absolute", "x": 10, "y": 20, "zIndex": 3}
        assert normalize_positioning_data(data) == data

    @pytest.mark.unit
    def test_is_responsive_false(self):
        data = {"isResponsive": False, "x": 5, "y": 6, "z": 2}
        assert normalize_positioning_data(data) == {
            "mode": "absolute",
            "x": 5,
            "y": 6,
            "zIndex": 2,
        }

    @pytest.mark.unit
    def test_nested_position(self):
        data = {"mode": "absolute", "position": {"x": 1, "y": 2}, "width": 30}
        assert normalize_positioning_data(data) == {
            "mode": "absolute",
            "x": 1,
            "y": 2,
            "width": 30,
        }

    @pytest.mark.unit
    def test_grid_shape(self):
        data = {"mode": "grid", "gridPosition": {"column": 2, "row": 1, "span": 3}}
        assert normalize_positioning_data(data) == {"column": 2, "row": 1, "span": 3}

    @pytest.mark.unit
    def test_json_string_and_garbage(self):
        assert normalize_positioning_data('{"breakpoints": {}}') == {"breakpoints": {}}
        assert normalize_positioning_data("not json") is None
        assert normalize_positioning_data(None) is None


class TestPasses:
    """Tests for the compile-time and render-time passes."""

    @pytest.mark.unit
    def test_migrate_attributes(self):
        migrated = migrate_attributes(
            {
                "background-color": "#fff",
                "borderwidth": "1px",
                "bordercolor": "red",
                "customcss": '{"margin": 0}',
                "showlabel": "true",
            }
        )
        assert migrated == {
            "showLabel": "true",
            "backgroundColor": "#fff",
            "border": "1px solid red",
            "css": json.dumps({"margin": 0}),
        }

    @pytest.mark.unit
    def test_migrate_node_leaves_html_and_input_alone(self):
        document = parse_template(
            '<div class="a"><DisplayName showlabel="true" /></div>'
        )
        migrated = migrate_node(document.root)
        div = migrated.children[0]
        assert div.attributes == {"class": "a"}
        assert div.children[0].attributes == {"showLabel": "true"}
        assert document.root.children[0].children[0].attributes == {
            "showlabel": "true"
        }

    @pytest.mark.unit
    def test_migrate_island_current_version_unchanged(self):
        island = Island(id="island-1", component="Bio", props={"textcolor": "red"})
        assert migrate_island(island, CURRENT_SCHEMA_VERSION) is island

    @pytest.mark.unit
    def test_migrate_island_old_version(self):
        child = Island(
            id="island-2",
            component="Bio",
            props={"_positioningMode": "absolute", "position": {"x": 4, "y": 5}},
        )
        parent = Island(
            id="island-1",
            component="FlexContainer",
            props={"backgroundcolor": "#000"},
            children=[child],
        )
        migrated = migrate_island(parent, 1)
        assert migrated.props == {"backgroundColor": "#000"}
        assert migrated.children[0].props["_positioning"] == {
            "mode": "absolute",
            "x": 4,
            "y": 5,
        }
        assert "position" not in migrated.children[0].props
