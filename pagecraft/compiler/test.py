"""Unit tests for the template compiler."""

import pytest

from pagecraft.compiler import ISLAND_ATTRIBUTE, compile_template
from pagecraft.config import CompilerLimits
from pagecraft.ir import CURRENT_SCHEMA_VERSION, CompiledTemplate
from pagecraft.registry import build_default_registry

PROFILE_MARKUP = """
<div>
  <ProfilePhoto size="lg" />
  <Tabs>
    <Tab title="One"><Bio /></Tab>
  </Tabs>
</div>
"""


@pytest.fixture
def registry():
    return build_default_registry()


class TestCompileSuccess:
    """Tests for successful compilation."""

    @pytest.mark.unit
    def test_islands_in_document_order(self, registry):
        result = compile_template(PROFILE_MARKUP, registry)
        assert result.success
        assert result.errors == []
        ids = [(island.id, island.component) for island, _ in result.ast.iter_islands()]
        assert ids == [
            ("island-1", "ProfilePhoto"),
            ("island-2", "Tabs"),
            ("island-3", "Tab"),
            ("island-4", "Bio"),
        ]
        assert [island.component for island in result.ast.islands] == [
            "ProfilePhoto",
            "Tabs",
        ]

    @pytest.mark.unit
    def test_nesting_flags(self, registry):
        result = compile_template(PROFILE_MARKUP, registry)
        nested = {island.component: flag for island, flag in result.ast.iter_islands()}
        assert nested == {
            "ProfilePhoto": False,
            "Tabs": False,
            "Tab": True,
            "Bio": True,
        }

    @pytest.mark.unit
    def test_component_nodes_reference_islands(self, registry):
        result = compile_template(PROFILE_MARKUP, registry)
        div = result.ast.root.children[0]
        photo, tabs = div.children
        assert photo.attributes[ISLAND_ATTRIBUTE] == "island-1"
        assert tabs.attributes[ISLAND_ATTRIBUTE] == "island-2"
        assert ISLAND_ATTRIBUTE not in div.attributes

    @pytest.mark.unit
    def test_props_coerced_with_defaults(self, registry):
        result = compile_template(
            '<BlogPosts limit="50" /><ProfilePhoto size="huge" />', registry
        )
        posts, photo = result.ast.islands
        assert posts.props["limit"] == 20
        assert photo.props["size"] == "md"
        assert photo.props["shape"] == "circle"

    @pytest.mark.unit
    def test_case_insensitive_component_name(self, registry):
        result = compile_template("<blogposts />", registry)
        assert result.success
        assert result.ast.islands[0].component == "BlogPosts"
        assert result.ast.root.children[0].tag == "BlogPosts"

    @pytest.mark.unit
    def test_reserved_props_decoded(self, registry):
        markup = (
            "<Bio _positioning='{\"mode\": \"absolute\", \"x\": 10, \"y\": 20}' "
            "_size='{\"width\": 300}' />"
        )
        island = compile_template(markup, registry).ast.islands[0]
        assert island.positioning == {"mode": "absolute", "x": 10, "y": 20}
        assert island.size == {"width": 300}

    @pytest.mark.unit
    def test_legacy_attributes_migrated(self, registry):
        island = compile_template(
            '<Bio background-color="red" class="card" />', registry
        ).ast.islands[0]
        assert island.props["backgroundColor"] == "red"
        assert island.props["className"] == "card"

    @pytest.mark.unit
    def test_style_block_and_stats(self, registry):
        result = compile_template("<style>.a{color:red}</style><Bio />", registry)
        assert result.ast.css == ".a{color:red}"
        assert result.ast.schema_version == CURRENT_SCHEMA_VERSION
        assert result.stats.node_count == 1
        assert result.stats.component_counts == {"Bio": 1}

    @pytest.mark.unit
    def test_lenient_attributes_warn(self, registry):
        result = compile_template(
            '<Bio colour="red" />', registry, CompilerLimits(strict_attributes=False)
        )
        assert result.success
        assert len(result.warnings) == 1
        assert result.ast.islands[0].props["colour"] == "red"

    @pytest.mark.unit
    def test_json_round_trip(self, registry):
        result = compile_template(PROFILE_MARKUP, registry)
        restored = CompiledTemplate.from_json(result.ast.to_json())
        assert restored == result.ast


class TestCompileFailure:
    """Tests for failures reported as structured errors."""

    @pytest.mark.unit
    def test_size_budget(self, registry):
        result = compile_template(
            "<Bio />" * 50, registry, CompilerLimits(max_size_kb=0.1)
        )
        assert not result.success
        assert result.ast is None
        assert result.errors[0].kind == "validation"
        assert result.errors[0].title == "Template Too Complex"
        assert result.stats.size_kb > 0.1

    @pytest.mark.unit
    def test_depth_budget_reported_before_deep_walks(self, registry):
        markup = "<div>" * 1200 + "x" + "</div>" * 1200
        result = compile_template(markup, registry)
        error = result.errors[0]
        assert not result.success
        assert len(result.errors) == 1
        assert error.kind == "validation"
        assert error.message == "Template too deeply nested: 1200 levels (max: 30)"
        assert error.details == "Your template is nested 1200 levels deep. The maximum is 30."
        assert "recursion" not in error.raw_error
        assert result.stats.max_depth == 1200

    @pytest.mark.unit
    def test_empty_parent_component(self, registry):
        result = compile_template("<Tabs></Tabs>", registry)
        assert not result.success
        assert result.errors[0].kind == "validation"
        assert result.errors[0].component == "Tabs"

    @pytest.mark.unit
    def test_syntax_error(self, registry):
        result = compile_template("<div><Bio />", registry)
        error = result.errors[0]
        assert error.kind == "syntax"
        assert error.line == 1
        assert error.column == 1

    @pytest.mark.unit
    def test_unknown_component(self, registry):
        result = compile_template("<div>\n  <BlogPost />\n</div>", registry)
        error = result.errors[0]
        assert error.kind == "component"
        assert error.component == "BlogPost"
        assert error.suggestion == 'Did you mean "BlogPosts"?'
        assert (error.line, error.column) == (2, 3)

    @pytest.mark.unit
    def test_all_registry_errors_reported(self, registry):
        result = compile_template("<Nope /><Tab title='x'></Tab>", registry)
        assert len(result.errors) == 2

    @pytest.mark.unit
    def test_missing_required_prop(self, registry):
        result = compile_template("<Tabs><Tab>Hi</Tab></Tabs>", registry)
        error = result.errors[0]
        assert error.kind == "attribute"
        assert "Required prop title is missing" in error.message
        assert (error.line, error.column) == (1, 7)

    @pytest.mark.unit
    def test_invalid_json_prop(self, registry):
        result = compile_template('<Bio _size="{oops" />', registry)
        assert not result.success
        assert result.errors[0].kind == "attribute"
        assert "Invalid JSON" in result.errors[0].message

    @pytest.mark.unit
    def test_unexpected_exception_is_reported(self, registry, monkeypatch):
        def explode(node):
            raise RuntimeError("boom")

        monkeypatch.setattr("pagecraft.compiler.lib.migrate_node", explode)
        result = compile_template("<Bio />", registry)
        assert not result.success
        assert result.errors[0].kind == "compilation"
        assert result.errors[0].raw_error == "Template compilation failed: boom"
