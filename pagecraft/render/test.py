"""Unit tests for the render-time driver."""

from types import MappingProxyType

import pytest

from pagecraft.compiler import compile_template
from pagecraft.ir import CompiledTemplate, Island
from pagecraft.parser import Node
from pagecraft.positioning import PositioningRegistry
from pagecraft.registry import build_default_registry
from pagecraft.render import render_template


@pytest.fixture
def registry():
    return build_default_registry()


class TestRenderTemplate:
    """Tests for turning compiled islands into placed instructions."""

    @pytest.mark.unit
    def test_style_and_attributes_separated(self, registry):
        markup = (
            "<Bio _positioning='{\"mode\": \"absolute\", \"x\": 10, \"y\": 20}' "
            'background-color="red" position="relative" data-test="x" />'
        )
        compiled = compile_template(markup, registry).ast
        placed = render_template(compiled).islands[0]

        assert placed.strategy == "legacyAbsolute"
        assert placed.wrapper_style["left"] == "10px"
        assert placed.style == {"backgroundColor": "red"}
        assert placed.attributes == {"data-test": "x"}

    @pytest.mark.unit
    def test_unplaced_island_keeps_own_position(self, registry):
        compiled = compile_template('<Bio position="relative" />', registry).ast
        placed = render_template(compiled).islands[0]
        assert placed.strategy == "none"
        assert placed.wrapper_style is None
        assert placed.style == {"position": "relative"}

    @pytest.mark.unit
    def test_nested_islands_not_placed(self, registry):
        markup = (
            "<Tabs _size='{\"width\": 400}'>"
            "<Tab title='One' _positioning='{\"mode\": \"absolute\", \"x\": 1, \"y\": 2}'>"
            "</Tab></Tabs>"
        )
        result = render_template(compile_template(markup, registry).ast)
        tabs = result.islands[0]
        tab = tabs.children[0]
        assert tabs.strategy == "sizeOnly"
        assert tab.strategy == "none"
        assert [p.island_id for p in result.iter_placed()] == ["island-1", "island-2"]
        assert result.get("island-2") is tab

    @pytest.mark.unit
    def test_flex_shorthand_rendered_as_style_only(self, registry):
        markup = '<FlexContainer direction="row" justify="between"><Bio /></FlexContainer>'
        placed = render_template(compile_template(markup, registry).ast).islands[0]
        assert placed.attributes == {}
        assert placed.style["flexDirection"] == "row"
        assert placed.style["justifyContent"] == "space-between"

    @pytest.mark.unit
    def test_malformed_size_still_resolves(self, registry):
        result = compile_template("<MediaGrid _size='{\"width\": [300]}' />", registry)
        assert result.success
        placed = render_template(result.ast).islands[0]
        assert placed.strategy == "none"
        assert placed.wrapper_style is None

    @pytest.mark.unit
    def test_older_schema_migrated(self):
        compiled = CompiledTemplate(
            schema_version=1,
            root=Node(tag="#root"),
            islands=[
                Island(
                    id="island-1",
                    component="Bio",
                    props={
                        "backgroundcolor": "blue",
                        "_positioningMode": "absolute",
                        "position": {"x": 5, "y": 6},
                    },
                )
            ],
        )
        placed = render_template(compiled).islands[0]
        assert placed.strategy == "legacyAbsolute"
        assert (placed.wrapper_style["left"], placed.wrapper_style["top"]) == (
            "5px",
            "6px",
        )
        assert placed.style == {"backgroundColor": "blue"}
        assert placed.attributes == {}

    @pytest.mark.unit
    def test_custom_positioning_registry(self, registry):
        compiled = compile_template("<Bio _size='{\"width\": 10}' />", registry).ast
        empty = PositioningRegistry()
        assert render_template(compiled, empty).islands[0].strategy == "none"

    @pytest.mark.unit
    def test_resident_data_read_only(self, registry):
        compiled = compile_template("<Bio />", registry).ast
        result = render_template(compiled, resident_data={"owner": "ada"})
        assert isinstance(result.resident_data, MappingProxyType)
        assert result.resident_data["owner"] == "ada"
        with pytest.raises(TypeError):
            result.resident_data["owner"] = "bob"

    @pytest.mark.unit
    def test_css_carried(self, registry):
        compiled = compile_template("<style>.x{}</style><Bio />", registry).ast
        assert render_template(compiled).css == ".x{}"
