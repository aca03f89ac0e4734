"""Render a laid-out tree to drawing commands and SVG.

Public API:
    from equitree.render import render, to_svg
"""

from __future__ import annotations

from equitree.render.labels import ELLIPSIS, format_percentage, wrap_label
from equitree.render.primitives import DrawCommand, Path, Rect, Scene, Text, Toggle, ToggleSymbol
from equitree.render.scene import render, toggle_symbol
from equitree.render.svg import SvgDiagram, to_svg

__all__ = [
    "DrawCommand",
    "ELLIPSIS",
    "Path",
    "Rect",
    "Scene",
    "SvgDiagram",
    "Text",
    "Toggle",
    "ToggleSymbol",
    "format_percentage",
    "render",
    "to_svg",
    "toggle_symbol",
    "wrap_label",
]
