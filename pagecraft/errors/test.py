"""Unit tests for template error reporting."""

import pytest

from pagecraft.errors import (
    ErrorKind,
    categorize_error,
    extract_component,
    extract_location,
    format_for_api,
    format_for_display,
    get_user_friendly_error,
    is_template_error,
    parse_template_error,
)
from pagecraft.parser import TemplateSyntaxError
from pagecraft.registry import build_default_registry


class TestCategorize:
    """Tests for keyword categorization."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "message,kind",
        [
            ("Unknown component: Foo is not registered", ErrorKind.COMPONENT),
            ("Unexpected closing tag </Tab> at line 1, column 6", ErrorKind.SYNTAX),
            ('Unknown attribute "colour" on <Bio>', ErrorKind.ATTRIBUTE),
            ("Too many nodes: 5 (max: 4)", ErrorKind.VALIDATION),
            ("Template too large: 3.0KB (max: 2KB)", ErrorKind.VALIDATION),
            ("Could not parse input", ErrorKind.COMPILATION),
            ("Something odd happened", ErrorKind.UNKNOWN),
        ],
    )
    def test_categories(self, message, kind):
        assert categorize_error(message) == kind

    @pytest.mark.unit
    def test_component_wins_over_syntax(self):
        """Earlier keyword groups take precedence."""
        assert categorize_error("Unexpected unknown component") == ErrorKind.COMPONENT


class TestExtraction:
    """Tests for location and component extraction."""

    @pytest.mark.unit
    def test_location(self):
        assert extract_location("error at line 12, column 4") == (12, 4)
        assert extract_location("Line 3: bad") == (3, None)
        assert extract_location("no location") == (None, None)

    @pytest.mark.unit
    def test_component_patterns(self):
        assert extract_component("Unknown component: BlogPost is missing") == "BlogPost"
        assert extract_component('component "ProfileHero" failed') == "ProfileHero"
        assert extract_component("problem inside <Tabs> here") == "Tabs"
        assert extract_component("plain message") is None


class TestParseTemplateError:
    """Tests for structured error construction."""

    @pytest.mark.unit
    def test_unknown_component_typo(self):
        error = parse_template_error(
            "Unknown component: BlogPost is not registered (line 2, column 3)"
        )
        assert error.kind == "component"
        assert error.title == 'Unknown Component: "BlogPost"'
        assert error.suggestion == 'Did you mean "BlogPosts"?'
        assert error.line == 2
        assert error.column == 3
        assert error.message.startswith("Line 2, Column 3: ")
        assert error.raw_error.startswith("Unknown component")

    @pytest.mark.unit
    def test_unknown_component_without_typo(self):
        error = parse_template_error("Unknown component: Wibble is not registered")
        assert error.suggestion.startswith("Check the component name spelling")
        assert error.details.startswith("Available components:")

    @pytest.mark.unit
    def test_registry_lists_components(self):
        error = parse_template_error(
            "Unknown component: Wibble is not registered", build_default_registry()
        )
        assert error.details.startswith("Available components: ")
        assert error.details.endswith("and more.")

    @pytest.mark.unit
    def test_syntax_error_from_exception(self):
        exc = TemplateSyntaxError("Missing closing tag for <Tabs> opened", line=4, column=1)
        error = parse_template_error(exc)
        assert error.kind == "syntax"
        assert error.title == "Syntax Error"
        assert error.line == 4
        assert error.column == 1
        assert "matching closing tag" in error.suggestion

    @pytest.mark.unit
    def test_node_budget_details(self):
        error = parse_template_error("Too many nodes: 1600 (max: 1500)")
        assert error.title == "Template Too Complex"
        assert error.details.startswith(
            "Your template has 1600 nodes. The maximum is 1500."
        )
        assert "style" in error.suggestion

    @pytest.mark.unit
    def test_size_budget_details(self):
        error = parse_template_error("Template too large: 70.2KB (max: 64KB)")
        assert error.title == "Template Too Complex"
        assert error.details == "Your template is 70.2KB. The maximum size is 64KB."

    @pytest.mark.unit
    def test_depth_and_component_titles(self):
        depth = parse_template_error("Template too deeply nested: 40 levels (max: 30)")
        assert depth.title == "Template Too Deeply Nested"
        assert depth.details == "Your template is nested 40 levels deep. The maximum is 30."
        count = parse_template_error("Too many components: 300 (max: 250)")
        assert count.title == "Too Many Components"

    @pytest.mark.unit
    def test_unknown_kind(self):
        error = parse_template_error("Something odd happened")
        assert error.title == "Template Error"
        assert error.suggestion is None
        assert error.details is None


class TestFormatting:
    """Tests for display and API formatting."""

    @pytest.mark.unit
    def test_format_for_display(self):
        error = parse_template_error("Unknown component: Post is not registered")
        text = format_for_display(error)
        assert text.startswith('Unknown Component: "Post"\n\n')
        assert 'Suggestion: Did you mean "BlogPosts"?' in text
        assert "Details: " in text

    @pytest.mark.unit
    def test_format_for_api(self):
        error = parse_template_error("Something odd happened")
        payload = format_for_api(error)
        assert payload["error"] == "Template Error"
        assert payload["type"] == "unknown"
        assert payload["details"] == "Something odd happened"
        assert payload["line"] is None

    @pytest.mark.unit
    def test_user_friendly_error(self):
        assert get_user_friendly_error(None).startswith("An unknown error")
        assert get_user_friendly_error(42).startswith("An unexpected error")
        assert get_user_friendly_error(ValueError("Too many nodes: 9 (max: 1)")).startswith(
            "Template Too Complex"
        )

    @pytest.mark.unit
    def test_is_template_error(self):
        assert is_template_error("Template compilation failed")
        assert is_template_error(RuntimeError("component missing"))
        assert not is_template_error("network timeout")
        assert not is_template_error(None)
        assert not is_template_error(12)
