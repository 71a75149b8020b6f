"""Unit tests for template validation."""

import pytest

from pagecraft.config import CompilerLimits
from pagecraft.parser import parse_template
from pagecraft.registry import build_default_registry
from pagecraft.validation import (
    check_budgets,
    check_size,
    measure_tree,
    resolve_tag,
    validate_tree,
)


@pytest.fixture
def registry():
    return build_default_registry()


def _validate(markup, registry, **limits):
    document = parse_template(markup)
    return validate_tree(document.root, registry, CompilerLimits(**limits))


class TestBudgets:
    """Tests for the size, node, depth and component budgets."""

    @pytest.mark.unit
    def test_size_budget(self):
        error = check_size("x" * 3 * 1024, CompilerLimits(max_size_kb=2))
        assert error is not None
        assert error.message == "Template too large: 3.0KB (max: 2KB)"
        assert check_size("small", CompilerLimits()) is None

    @pytest.mark.unit
    def test_node_budget(self, registry):
        report = _validate("<div><p>a</p><p>b</p></div>", registry, max_nodes=4)
        assert [e.message for e in report.errors] == ["Too many nodes: 5 (max: 4)"]
        assert report.errors[0].error_type == "validation"

    @pytest.mark.unit
    def test_depth_budget(self, registry):
        markup = "<div>" * 4 + "</div>" * 4
        report = _validate(markup, registry, max_depth=3)
        assert report.errors[0].message == (
            "Template too deeply nested: 4 levels (max: 3)"
        )

    @pytest.mark.unit
    def test_component_budget(self, registry):
        report = _validate("<Bio /><Bio /><Bio />", registry, max_components=2)
        assert report.errors[0].message == "Too many components: 3 (max: 2)"

    @pytest.mark.unit
    def test_budget_error_reported_alone(self, registry):
        report = _validate("<Nope /><Nope /><Nope />", registry, max_nodes=2)
        assert len(report.errors) == 1

    @pytest.mark.unit
    def test_within_budgets(self, registry):
        stats = measure_tree(
            parse_template("<div><Bio /><span>x</span></div>").root, registry
        )
        assert stats.node_count == 4
        assert stats.max_depth == 2
        assert stats.component_counts == {"Bio": 1}
        assert check_budgets(stats, CompilerLimits()) is None


class TestTags:
    """Tests for tag allow-lists."""

    @pytest.mark.unit
    def test_resolve_tag_order(self, registry):
        assert resolve_tag("BlogPosts", registry) == ("BlogPosts", True)
        assert resolve_tag("blogposts", registry) == ("BlogPosts", True)
        assert resolve_tag("div", registry) == ("div", False)
        assert resolve_tag("DIV", registry) == ("div", False)
        assert resolve_tag("script", registry) is None

    @pytest.mark.unit
    def test_unknown_component(self, registry):
        report = _validate("<div>\n  <BlogPost />\n</div>", registry)
        assert len(report.errors) == 1
        error = report.errors[0]
        assert error.error_type == "component"
        assert error.message == (
            "Unknown component: BlogPost is not registered (line 2, column 3)"
        )

    @pytest.mark.unit
    def test_script_rejected(self, registry):
        report = _validate("<script>alert(1)</script>", registry)
        assert report.errors[0].error_type == "component"

    @pytest.mark.unit
    def test_valid_template(self, registry):
        markup = (
            '<FlexContainer direction="row"><ProfilePhoto size="lg" />'
            '<DisplayName showLabel="true" /><p class="x">Hi</p></FlexContainer>'
        )
        report = _validate(markup, registry)
        assert report.is_valid
        assert report.warnings == []


class TestAttributes:
    """Tests for attribute allow-lists."""

    @pytest.mark.unit
    def test_unknown_attribute_strict(self, registry):
        report = _validate('<BlogPosts colour="red" />', registry)
        assert report.errors[0].error_type == "attribute"
        assert 'Unknown attribute "colour" on <BlogPosts>' in report.errors[0].message

    @pytest.mark.unit
    def test_unknown_attribute_lenient(self, registry):
        report = _validate('<BlogPosts colour="red" />', registry, strict_attributes=False)
        assert report.is_valid
        assert len(report.warnings) == 1

    @pytest.mark.unit
    def test_universal_and_always_allowed(self, registry):
        markup = (
            '<NavigationBar backgroundColor="#000" data-x="1" aria-label="nav" '
            'className="n"></NavigationBar>'
        )
        assert _validate(markup, registry).is_valid

    @pytest.mark.unit
    def test_event_handlers_rejected(self, registry):
        report = _validate('<div onclick="steal()"></div>', registry)
        assert report.errors[0].error_type == "attribute"

    @pytest.mark.unit
    def test_unsafe_url_rejected(self, registry):
        report = _validate('<a href="javascript:alert(1)">x</a>', registry)
        assert "Unsafe URL" in report.errors[0].message


class TestRelationships:
    """Tests for parent/child rules."""

    @pytest.mark.unit
    def test_required_parent(self, registry):
        report = _validate('<Tab title="Lonely"></Tab>', registry)
        assert report.errors[0].message.startswith(
            "Validation failed: <Tab> must be placed inside <Tabs>"
        )

    @pytest.mark.unit
    def test_required_parent_through_html_wrapper(self, registry):
        report = _validate('<Tabs><div><Tab title="A"></Tab></div></Tabs>', registry)
        assert report.is_valid

    @pytest.mark.unit
    def test_explicit_accept_set(self, registry):
        report = _validate('<Tabs><Tab title="A"></Tab><Bio /></Tabs>', registry)
        assert len(report.errors) == 1
        assert "does not accept <Bio>" in report.errors[0].message

    @pytest.mark.unit
    def test_max_children(self, registry):
        methods = '<ContactMethod type="email" value="a@b.c" />' * 11
        report = _validate(f"<ContactCard>{methods}</ContactCard>", registry)
        assert len(report.errors) == 1
        assert "at most 10 child components, found 11" in report.errors[0].message

    @pytest.mark.unit
    def test_min_children(self, registry):
        report = _validate("<Tabs></Tabs>", registry)
        assert len(report.errors) == 1
        assert report.errors[0].message.startswith(
            "Validation failed: <Tabs> requires at least 1 child component, found 0"
        )
        assert report.errors[0].component == "Tabs"

    @pytest.mark.unit
    def test_min_children_counts_through_html_wrapper(self, registry):
        report = _validate('<Tabs><div><Tab title="A"></Tab></div></Tabs>', registry)
        assert report.is_valid

    @pytest.mark.unit
    def test_text_does_not_count_as_child_component(self, registry):
        report = _validate("<ImageCarousel>just text</ImageCarousel>", registry)
        assert "requires at least 1 child component" in report.errors[0].message
