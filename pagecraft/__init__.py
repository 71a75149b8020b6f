"""pagecraft: compile user-authored page templates and place their components."""

from pagecraft.compiler import CompilationResult, compile_template
from pagecraft.errors import TemplateError, parse_template_error
from pagecraft.positioning import build_default_positioning_registry
from pagecraft.registry import ComponentRegistry, build_default_registry
from pagecraft.render import RenderResult, render_template

__version__ = "0.1.0"

__all__ = [
    "CompilationResult",
    "ComponentRegistry",
    "RenderResult",
    "TemplateError",
    "build_default_positioning_registry",
    "build_default_registry",
    "compile_template",
    "parse_template_error",
    "render_template",
]
