"""Unit tests for the positioning resolver."""

from typing import get_type_hints

import pytest

from pagecraft.ir import Island
from pagecraft.migration import migrate_island
from pagecraft.positioning import (
    DEFAULT_STRATEGIES,
    NAVIGATION_Z_INDEX,
    FallbackStrategy,
    PositionedElement,
    PositioningContext,
    PositioningInput,
    PositioningRegistry,
    PositioningStrategy,
    ResponsiveStrategy,
    SizingCategory,
    build_absolute_style,
    build_default_positioning_registry,
    build_grid_style,
    classify_positioning,
    get_sizing_category,
    parse_position_value,
)


@pytest.fixture
def registry():
    return build_default_positioning_registry()


def _place(registry, props, component="Bio", nested=False):
    island = Island(id="island-1", component=component, props=props)
    return registry.apply_positioning(
        PositionedElement(island_id=island.id, component=component),
        PositioningInput(island, nested),
        PositioningContext(component_type=component.lower(), island_id=island.id),
    )


class TestClassify:
    """Tests for classifying raw props into positioning shapes."""

    @pytest.mark.unit
    def test_parse_position_value(self):
        assert parse_position_value(100) == 100
        assert parse_position_value("100px") == 100
        assert parse_position_value(" 12.5px ") == 12.5
        assert parse_position_value("wide") == 0
        assert parse_position_value(None) == 0
        assert parse_position_value("inf") == 0
        assert parse_position_value(float("nan")) == 0

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "props,kind",
        [
            ({"_positioning": {"breakpoints": {"desktop": {"x": 1, "y": 2}}}}, "responsive"),
            ({"_positioning": {"mode": "absolute", "x": 1, "y": 2}}, "legacyAbsolute"),
            ({"_positioning": {"isResponsive": False, "x": 1, "y": 2}}, "legacyAbsolute"),
            ({"_positioning": {"x": 1, "y": 2, "zIndex": 3}}, "legacyAbsolute"),
            ({"_positioning": {"column": 2, "row": 3}}, "grid"),
            ({"_positioning": {"x": 1, "y": 2, "column": 2, "row": 3}}, "grid"),
            ({"data-position": "10,20"}, "attribute"),
            ({"data-pixel-position": '{"x": 5, "y": 6}'}, "attribute"),
            ({"data-grid-column": "2", "data-grid-row": "1"}, "attribute"),
            ({"_size": {"width": 300}}, "sizeOnly"),
            ({}, "none"),
            ({"_size": {}}, "none"),
        ],
    )
    def test_kinds(self, props, kind):
        assert classify_positioning(props).kind == kind

    @pytest.mark.unit
    def test_breakpoints_without_desktop(self):
        props = {"_positioning": {"breakpoints": {"mobile": {"x": 1, "y": 2}}}}
        assert classify_positioning(props).kind == "none"

    @pytest.mark.unit
    def test_unrecognized_positioning_treated_as_absent(self):
        assert classify_positioning({"_positioning": {"mode": "flow"}}).kind == "none"
        props = {"_positioning": {"mode": "flow"}, "_size": {"height": 40}}
        assert classify_positioning(props).kind == "sizeOnly"

    @pytest.mark.unit
    def test_absolute_requires_both_coordinates(self):
        props = {"_positioning": {"mode": "absolute", "x": 10}}
        assert classify_positioning(props).kind == "none"

    @pytest.mark.unit
    def test_malformed_size_treated_as_absent(self):
        assert classify_positioning({"_size": {"width": [300]}}).kind == "none"
        assert classify_positioning({"_size": {"height": {"px": 3}}}).kind == "none"

    @pytest.mark.unit
    def test_malformed_attribute_size_treated_as_absent(self):
        props = {"data-position": "10,20", "data-component-size": '{"width": [1]}'}
        assert classify_positioning(props).kind == "none"

    @pytest.mark.unit
    def test_non_finite_grid_values(self):
        positioning = classify_positioning({"_positioning": {"column": "inf", "row": 2}})
        assert (positioning.kind, positioning.column) == ("grid", 0)

    @pytest.mark.unit
    def test_tablet_and_mobile_kept(self):
        positioning = classify_positioning(
            {
                "_positioning": {
                    "breakpoints": {
                        "desktop": {"x": "10px", "y": 20, "zIndex": 2},
                        "mobile": {"x": 0, "y": 0},
                    }
                }
            }
        )
        assert positioning.breakpoints.desktop.z_index == 2
        assert positioning.breakpoints.mobile.x == 0
        assert positioning.breakpoints.tablet is None

    @pytest.mark.unit
    def test_attribute_grid_values(self):
        positioning = classify_positioning(
            {"data-positioning-mode": "grid", "data-grid-position": '{"column": 2, "row": 4, "span": 3}'}
        )
        assert (positioning.mode, positioning.column, positioning.row, positioning.span) == (
            "grid",
            2,
            4,
            3,
        )


class TestSizing:
    """Tests for sizing categories and wrapper math."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "component,category",
        [
            ("NavigationBar", SizingCategory.FULL_WIDTH),
            ("SiteFooter", SizingCategory.FULL_WIDTH),
            ("MainNav", SizingCategory.FULL_WIDTH),
            ("Bio", SizingCategory.CONTENT_DRIVEN),
            ("FollowButton", SizingCategory.AUTO_SIZE),
            ("ProfilePhoto", SizingCategory.SQUARE),
            ("MediaGrid", SizingCategory.FIXED),
        ],
    )
    def test_categories(self, component, category):
        assert get_sizing_category(component) == category

    @pytest.mark.unit
    def test_full_width_navigation(self):
        style = build_absolute_style("NavigationBar", 40, 0, z_index=3, height=150)
        assert style["left"] == "0"
        assert style["width"] == "100%"
        assert style["height"] == "100px"
        assert style["minHeight"] == "70px"
        assert style["maxHeight"] == "100px"
        assert style["zIndex"] == NAVIGATION_Z_INDEX

    @pytest.mark.unit
    def test_full_width_keeps_z_index_when_not_navigation(self):
        style = build_absolute_style("SiteHeader", 0, 0, z_index=3, height=20)
        assert style["zIndex"] == 3
        assert style["height"] == "70px"

    @pytest.mark.unit
    def test_content_driven(self):
        style = build_absolute_style("Bio", 0, 0, width=300, height=50)
        assert style["width"] == "fit-content"
        assert style["height"] == "fit-content"
        assert style["minWidth"] == "300px"
        assert style["minHeight"] == "50px"
        assert style["maxWidth"] == "450px"

    @pytest.mark.unit
    def test_content_driven_max_width_clamped(self):
        assert build_absolute_style("Bio", 0, 0, width=100)["maxWidth"] == "200px"
        assert build_absolute_style("Bio", 0, 0, width=1000)["maxWidth"] == "800px"

    @pytest.mark.unit
    def test_auto_size_and_square_only_place(self):
        for component in ("FollowButton", "ProfilePhoto"):
            style = build_absolute_style(component, "5px", 6, width=100, height=100)
            assert style == {
                "position": "absolute",
                "left": "5px",
                "top": "6px",
                "zIndex": 1,
            }

    @pytest.mark.unit
    def test_fixed_sizes_verbatim(self):
        style = build_absolute_style("MediaGrid", 0, 0, width=300, height="50%")
        assert style["width"] == "300px"
        assert style["height"] == "50%"

    @pytest.mark.unit
    def test_grid_style(self):
        assert build_grid_style(2, 3, 4) == {
            "gridColumn": "2 / span 4",
            "gridRow": "3 / span 1",
        }


class TestRegistry:
    """Tests for strategy ordering and selection."""

    @pytest.mark.unit
    def test_priority_order(self, registry):
        assert registry.strategy_names() == [
            "responsive",
            "legacyAbsolute",
            "grid",
            "attribute",
            "sizeOnly",
            "none",
        ]

    @pytest.mark.unit
    @pytest.mark.parametrize("strategy", [*DEFAULT_STRATEGIES, FallbackStrategy])
    def test_apply_signature_matches_base(self, strategy):
        hints = get_type_hints(strategy.apply)
        assert hints == get_type_hints(PositioningStrategy.apply)
        assert hints["return"] is PositionedElement

    @pytest.mark.unit
    def test_clear_keeps_fallback(self, registry):
        registry.clear()
        assert registry.strategy_names() == ["none"]
        island = Island(id="island-1", component="Bio", props={"_size": {"width": 5}})
        assert isinstance(registry.select(island), FallbackStrategy)

    @pytest.mark.unit
    def test_register_replaces_by_name(self):
        registry = PositioningRegistry()
        registry.register(ResponsiveStrategy())
        registry.register(ResponsiveStrategy())
        assert registry.strategy_names() == ["responsive", "none"]
        assert len(registry) == 2

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "props,strategy",
        [
            ({"_positioning": {"breakpoints": {"desktop": {"x": 1, "y": 2}}}}, "responsive"),
            ({"_positioning": {"mode": "absolute", "x": 1, "y": 2}}, "legacyAbsolute"),
            ({"_positioning": {"column": 1, "row": 1}}, "grid"),
            ({"data-x": "4", "data-y": "5"}, "attribute"),
            ({"_size": {"width": 10}}, "sizeOnly"),
            ({"title": "plain"}, "none"),
        ],
    )
    def test_exactly_one_strategy_selected(self, registry, props, strategy):
        island = Island(id="island-1", component="Bio", props=props)
        assert registry.select(island).name == strategy
        assert _place(registry, props).strategy == strategy

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "props",
        [
            {"_positioning": {"breakpoints": {"desktop": {"x": 1, "y": 2}}}},
            {"_positioning": {"mode": "absolute", "x": 1, "y": 2}},
            {"_positioning": {"column": 1, "row": 1}},
            {"data-position": "1,2"},
            {"_size": {"width": 10}},
        ],
    )
    def test_nested_islands_never_placed(self, registry, props):
        placed = _place(registry, props, nested=True)
        assert placed.strategy == "none"
        assert placed.wrapper_style is None


class TestStrategies:
    """Tests for the wrapper styles each strategy produces."""

    @pytest.mark.unit
    def test_responsive_uses_desktop(self, registry):
        props = {
            "_positioning": {
                "breakpoints": {
                    "desktop": {"x": 100, "y": "40px"},
                    "mobile": {"x": 0, "y": 0},
                }
            },
            "_size": {"width": 300},
        }
        style = _place(registry, props, component="MediaGrid").wrapper_style
        assert style["left"] == "100px"
        assert style["top"] == "40px"
        assert style["width"] == "300px"
        assert style["zIndex"] == 1

    @pytest.mark.unit
    def test_navigation_forced_on_top(self, registry):
        props = {"_positioning": {"mode": "absolute", "x": 50, "y": 0, "zIndex": 2}}
        style = _place(registry, props, component="NavigationBar").wrapper_style
        assert style["zIndex"] == NAVIGATION_Z_INDEX
        assert style["left"] == "0"

    @pytest.mark.unit
    def test_grid_strategy(self, registry):
        props = {"_positioning": {"column": 2, "row": 3, "span": 2, "zIndex": 4}}
        assert _place(registry, props).wrapper_style == {
            "gridColumn": "2 / span 2",
            "gridRow": "3 / span 1",
            "zIndex": 4,
        }

    @pytest.mark.unit
    def test_size_only_strategy(self, registry):
        style = _place(registry, {"_size": {"width": 200, "height": "auto"}}).wrapper_style
        assert style == {"width": "200px", "height": "auto"}

    @pytest.mark.unit
    def test_attribute_strategy(self, registry):
        style = _place(registry, {"data-position": "10,20"}, component="MediaGrid").wrapper_style
        assert (style["left"], style["top"]) == ("10px", "20px")

    @pytest.mark.unit
    def test_fallback_is_identity(self, registry):
        element = PositionedElement(island_id="island-1", component="Bio")
        island = Island(id="island-1", component="Bio")
        placed = registry.apply_positioning(
            element,
            PositioningInput(island),
            PositioningContext(component_type="bio", island_id="island-1"),
        )
        assert placed is element

    @pytest.mark.unit
    def test_legacy_round_trip_matches_current_format(self, registry):
        legacy = migrate_island(
            Island(
                id="island-1",
                component="Bio",
                props={"_positioning": {"mode": "absolute", "x": 10, "y": 20, "zIndex": 3}},
            ),
            schema_version=1,
        )
        legacy_style = _place(registry, legacy.props).wrapper_style
        current = _place(registry, {"_positioning": {"x": 10, "y": 20, "zIndex": 3}})
        responsive_style = _place(
            registry,
            {"_positioning": {"breakpoints": {"desktop": {"x": 10, "y": 20, "zIndex": 3}}}},
        ).wrapper_style
        assert current.strategy == "legacyAbsolute"
        for key in ("left", "top", "zIndex"):
            assert legacy_style[key] == current.wrapper_style[key]
            assert legacy_style[key] == responsive_style[key]
        assert (legacy_style["left"], legacy_style["top"], legacy_style["zIndex"]) == (
            "10px",
            "20px",
            3,
        )
