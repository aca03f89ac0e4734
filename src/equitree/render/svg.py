"""Server-side SVG backend.

Usage:
    diagram = to_svg(scene, width=960, height=640)
    diagram                  # renders in notebooks
    diagram.save("tree.svg")
    diagram.source           # raw SVG string
"""

from __future__ import annotations

import html
from pathlib import Path as FilePath
from typing import Any

from equitree.render.primitives import Path, Rect, Scene, Text, Toggle, ToggleSymbol
from equitree.render.scene import ACCENT

_ARROW_MARKER = (
    '<marker id="arrowhead" viewBox="0 -5 10 10" refX="10" refY="0" orient="auto" '
    'markerWidth="6" markerHeight="6">'
    f'<path d="M0,-5L10,0L0,5" fill="{ACCENT}" stroke="none"/></marker>'
)


class SvgDiagram:
    """An SVG document that renders in Jupyter notebooks.

    Example:
        >>> diagram = to_svg(scene, 800, 600)
        >>> print(diagram)           # prints raw SVG source
    """

    def __init__(self, source: str) -> None:
        self.source = source

    def __str__(self) -> str:
        return self.source

    def __repr__(self) -> str:
        return f"SvgDiagram({len(self.source)} chars)"

    def __contains__(self, item: str) -> bool:
        return item in self.source

    def _repr_mimebundle_(self, **kwargs: Any) -> dict[str, str]:
        return {
            "image/svg+xml": self.source,
            "text/plain": repr(self),
        }

    def save(self, filepath: str | FilePath) -> FilePath:
        """Write the SVG to *filepath*, adding a .svg extension if missing."""
        path = FilePath(filepath)
        if path.suffix != ".svg":
            path = path.with_name(path.name + ".svg")
        path.write_text(self.source, encoding="utf-8")
        return path


def to_svg(scene: Scene, width: float, height: float) -> SvgDiagram:
    """Serialize a scene into a standalone SVG document of the container's size."""
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{_num(width)}" height="{_num(height)}" '
        f'viewBox="0 0 {_num(width)} {_num(height)}">',
        f"<defs>{_ARROW_MARKER}</defs>",
        f'<g transform="{scene.transform.as_svg()}">',
    ]
    for command in scene.commands:
        if isinstance(command, Path):
            parts.append(_path(command))
        elif isinstance(command, Rect):
            parts.append(_rect(command))
        elif isinstance(command, Text):
            parts.append(_text(command))
        elif isinstance(command, Toggle):
            parts.append(_toggle(command))
    parts.append("</g></svg>")
    return SvgDiagram("\n".join(parts))


def _path(command: Path) -> str:
    head, *rest = command.points
    d = f"M{_num(head[0])},{_num(head[1])}" + "".join(f" L{_num(x)},{_num(y)}" for x, y in rest)
    marker = ' marker-end="url(#arrowhead)"' if command.arrow else ""
    ids = ""
    if command.source_id is not None:
        ids = f' data-source="{_attr(command.source_id)}" data-target="{_attr(command.target_id or "")}"'
    return f'<path class="link" d="{d}" fill="none" stroke="{command.stroke}" stroke-width="1"{marker}{ids}/>'


def _rect(command: Rect) -> str:
    return (
        f'<rect class="node" data-node-id="{_attr(command.node_id)}" x="{_num(command.x)}" y="{_num(command.y)}" '
        f'width="{_num(command.width)}" height="{_num(command.height)}" rx="{_num(command.radius)}" '
        f'ry="{_num(command.radius)}" fill="{command.fill}" stroke="{command.stroke}" stroke-width="1"/>'
    )


def _text(command: Text) -> str:
    extra = ' font-weight="bold"' if command.bold else ""
    if command.baseline != "alphabetic":
        extra += f' dominant-baseline="{command.baseline}"'
    spans = []
    for i, line in enumerate(command.lines):
        dy = f' dy="{_num(command.line_height)}em"' if i else ""
        spans.append(f'<tspan x="{_num(command.x)}"{dy}>{html.escape(line)}</tspan>')
    return (
        f'<text x="{_num(command.x)}" y="{_num(command.y)}" text-anchor="{command.anchor}" '
        f'font-size="{_num(command.font_size)}" fill="{command.fill}"{extra}>{"".join(spans)}</text>'
    )


def _toggle(command: Toggle) -> str:
    dash = ' stroke-dasharray="2,2"' if command.symbol is ToggleSymbol.LOADING else ""
    return (
        f'<g class="toggle" data-node-id="{_attr(command.node_id)}" data-state="{command.symbol.name.lower()}">'
        f'<circle cx="{_num(command.x)}" cy="{_num(command.y)}" r="{_num(command.radius)}" '
        f'fill="#fff" stroke="{ACCENT}"{dash}/>'
        f'<text x="{_num(command.x)}" y="{_num(command.y)}" text-anchor="middle" '
        f'dominant-baseline="central" font-size="12" fill="{ACCENT}">{command.symbol.value}</text></g>'
    )


def _attr(value: str) -> str:
    return html.escape(value, quote=True)


def _num(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text
