"""End-to-end tests: markup through compilation, persistence and rendering."""

import json

import pytest

from pagecraft import compile_template, render_template
from pagecraft.__main__ import main
from pagecraft.ir import CompiledTemplate
from pagecraft.positioning import NAVIGATION_Z_INDEX


@pytest.mark.integration
class TestProfilePipeline:
    """Compile, persist, reload and render a full profile page."""

    def test_compiles_full_document(self, profile_template, component_registry):
        result = compile_template(profile_template, component_registry)
        assert result.success, [e.message for e in result.errors]
        assert result.ast.css == ".profile { color: #222; }"
        components = [island.component for island, _ in result.ast.iter_islands()]
        assert components == [
            "NavigationBar",
            "ProfilePhoto",
            "DisplayName",
            "Bio",
            "Tabs",
            "Tab",
            "BlogPosts",
            "Tab",
            "FriendDisplay",
        ]

    def test_renders_after_persistence(
        self, profile_template, component_registry, positioning_registry
    ):
        compiled = compile_template(profile_template, component_registry).ast
        restored = CompiledTemplate.from_json(compiled.to_json())
        result = render_template(
            restored, positioning_registry, resident_data={"username": "ada"}
        )

        placed = {p.island_id: p for p in result.iter_placed()}
        nav = placed["island-1"]
        assert nav.strategy == "legacyAbsolute"
        assert nav.wrapper_style["width"] == "100%"
        assert nav.wrapper_style["zIndex"] == NAVIGATION_Z_INDEX

        photo = placed["island-2"]
        assert photo.strategy == "responsive"
        assert (photo.wrapper_style["left"], photo.wrapper_style["top"]) == (
            "40px",
            "120px",
        )
        assert photo.wrapper_style["zIndex"] == 2

        assert placed["island-3"].wrapper_style == {"width": "320px"}
        assert placed["island-4"].strategy == "none"
        assert placed["island-4"].style == {"backgroundColor": "#fafafa"}
        assert placed["island-5"].wrapper_style == {
            "gridColumn": "1 / span 2",
            "gridRow": "2 / span 1",
        }
        nested = [placed[f"island-{n}"].strategy for n in range(6, 10)]
        assert nested == ["none"] * 4

    def test_every_island_resolves(self, profile_template, component_registry):
        compiled = compile_template(profile_template, component_registry).ast
        rendered = render_template(compiled)
        assert sum(1 for _ in rendered.iter_placed()) == sum(
            1 for _ in compiled.iter_islands()
        )

    def test_budget_rejects_before_rendering(self, profile_template, component_registry):
        from pagecraft.config import get_compiler_limits

        result = compile_template(
            profile_template, component_registry, get_compiler_limits(max_nodes=5)
        )
        assert not result.success
        assert result.ast is None
        assert result.errors[0].title == "Template Too Complex"


@pytest.mark.integration
class TestCli:
    """Tests for the command-line entry point."""

    def test_compile_summary(self, tmp_path, profile_template, capsys):
        path = tmp_path / "profile.html"
        path.write_text(profile_template, encoding="utf-8")
        assert main(["compile", str(path)]) == 0
        output = capsys.readouterr().out
        assert "islands:    9" in output

    def test_compile_json_failure(self, tmp_path, capsys):
        path = tmp_path / "broken.html"
        path.write_text("<BlogPost />", encoding="utf-8")
        assert main(["compile", str(path), "--json"]) == 1
        payload = json.loads(capsys.readouterr().out)
        assert payload["success"] is False
        assert payload["errors"][0]["suggestion"] == 'Did you mean "BlogPosts"?'

    def test_render_prints_islands(self, tmp_path, profile_template, capsys):
        path = tmp_path / "profile.html"
        path.write_text(profile_template, encoding="utf-8")
        assert main(["render", str(path)]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["islands"][0]["component"] == "NavigationBar"

    def test_missing_file(self, tmp_path):
        assert main(["compile", str(tmp_path / "nope.html")]) == 1

    def test_explain(self, capsys):
        assert main(["explain", "Too", "many", "nodes:", "1600", "(max:", "1500)"]) == 0
        assert "Template Too Complex" in capsys.readouterr().out

    def test_no_command(self):
        assert main([]) == 1
