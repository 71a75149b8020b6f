"""Render-time driver: compiled islands to placed render instructions."""

from .lib import POSITION_STYLE_KEYS, PlacedIsland, RenderResult, render_template

__all__ = [
    "POSITION_STYLE_KEYS",
    "PlacedIsland",
    "RenderResult",
    "render_template",
]
