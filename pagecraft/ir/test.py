"""Unit tests for compiled-template models."""

import pytest
from pydantic import ValidationError

from pagecraft.ir import CURRENT_SCHEMA_VERSION, CompiledTemplate, Island
from pagecraft.parser import Node


def _template() -> CompiledTemplate:
    tab_one = Island(id="island-2", component="Tab", props={"title": "One"})
    tabs = Island(id="island-1", component="Tabs", children=[tab_one])
    bio = Island(
        id="island-3",
        component="Bio",
        props={"_positioning": {"mode": "absolute", "x": 1, "y": 2}},
    )
    return CompiledTemplate(root=Node(tag="#root"), islands=[tabs, bio])


class TestIsland:
    """Tests for Island."""

    @pytest.mark.unit
    def test_reserved_props(self):
        island = Island(
            id="island-1",
            component="Bio",
            props={"_positioning": {"x": 1}, "_size": {"width": 10}},
        )
        assert island.positioning == {"x": 1}
        assert island.size == {"width": 10}

    @pytest.mark.unit
    def test_missing_reserved_props(self):
        island = Island(id="island-1", component="Bio")
        assert island.positioning is None
        assert island.size is None

    @pytest.mark.unit
    def test_frozen(self):
        island = Island(id="island-1", component="Bio")
        with pytest.raises(ValidationError):
            island.component = "Guestbook"


class TestCompiledTemplate:
    """Tests for CompiledTemplate traversal and persistence."""

    @pytest.mark.unit
    def test_default_schema_version(self):
        assert _template().schema_version == CURRENT_SCHEMA_VERSION

    @pytest.mark.unit
    def test_iter_islands_marks_nesting(self):
        pairs = [(island.id, nested) for island, nested in _template().iter_islands()]
        assert pairs == [
            ("island-1", False),
            ("island-2", True),
            ("island-3", False),
        ]

    @pytest.mark.unit
    def test_get_island(self):
        template = _template()
        assert template.get_island("island-2").component == "Tab"
        assert template.get_island("island-9") is None

    @pytest.mark.unit
    def test_json_round_trip(self):
        template = _template()
        restored = CompiledTemplate.from_json(template.to_json())
        assert restored == template
