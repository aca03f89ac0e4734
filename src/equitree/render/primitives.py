"""Backend-neutral drawing primitives.

Coordinates are in layout space; the scene's viewport transform maps them
to screen space. Every primitive can be turned into a plain dict for
JSON clients.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Union

from equitree.viewport import ViewportTransform


class ToggleSymbol(Enum):
    """Affordance drawn under an expandable node."""

    PLUS = "+"
    MINUS = "−"
    LOADING = "…"


@dataclass(frozen=True)
class Rect:
    node_id: str
    x: float  # Left edge
    y: float  # Top edge
    width: float
    height: float
    fill: str
    stroke: str
    radius: float = 4.0


@dataclass(frozen=True)
class Path:
    """Polyline; ``arrow`` puts an arrowhead on the last point."""

    points: tuple[tuple[float, float], ...]
    stroke: str
    arrow: bool = False
    source_id: str | None = None
    target_id: str | None = None


@dataclass(frozen=True)
class Text:
    x: float
    y: float  # First line: alphabetic baseline, or its center when baseline="central"
    lines: tuple[str, ...]
    fill: str
    font_size: float = 12.0
    line_height: float = 1.4  # em
    anchor: str = "middle"
    bold: bool = False
    node_id: str | None = None
    baseline: str = "alphabetic"


@dataclass(frozen=True)
class Toggle:
    node_id: str
    x: float  # Center
    y: float
    symbol: ToggleSymbol
    radius: float = 7.0


DrawCommand = Union[Rect, Path, Text, Toggle]


@dataclass(frozen=True)
class Scene:
    """Drawing commands in z-order plus the transform to draw them with."""

    commands: tuple[DrawCommand, ...]
    transform: ViewportTransform

    def of_type(self, cls: type) -> list[Any]:
        return [c for c in self.commands if isinstance(c, cls)]

    def toggle_for(self, node_id: str) -> Toggle | None:
        return next((t for t in self.of_type(Toggle) if t.node_id == node_id), None)

    def to_dict(self) -> dict[str, Any]:
        commands = []
        for command in self.commands:
            data = asdict(command)
            if isinstance(command, Toggle):
                data["symbol"] = command.symbol.value
            commands.append({"kind": type(command).__name__.lower(), **data})
        return {"transform": asdict(self.transform), "commands": commands}
