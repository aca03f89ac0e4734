"""Engine configuration.

Layout spacing, box geometry, label wrapping and zoom limits live in one
frozen ``EngineConfig``. Project-level overrides are read from the
``[tool.equitree]`` section of the nearest pyproject.toml.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class EngineConfig:
    """Geometry and interaction constants shared by layout, viewport and renderer."""

    horizontal_spacing: float = 150.0
    vertical_spacing: float = 140.0
    node_width: float = 120.0
    node_height: float = 60.0

    # Label wrapping: chars per line = wrap_width // char_width
    wrap_width: float = 110.0
    char_width: float = 12.0
    max_label_lines: int = 2

    # Auto-fit keeps 10% of the container free
    fit_padding: float = 0.9
    min_scale: float = 0.2
    max_scale: float = 3.0

    # Widen sibling slots to fill the container (original widget behaviour)
    adaptive_spacing: bool = False
    highlight_root: bool = True

    def __post_init__(self) -> None:
        if self.horizontal_spacing <= self.node_width:
            raise ValueError(
                f"horizontal_spacing ({self.horizontal_spacing}) must exceed node_width ({self.node_width})"
            )
        if self.vertical_spacing <= self.node_height:
            raise ValueError(
                f"vertical_spacing ({self.vertical_spacing}) must exceed node_height ({self.node_height})"
            )
        if not 0 < self.min_scale <= self.max_scale:
            raise ValueError(f"Invalid scale range [{self.min_scale}, {self.max_scale}]")
        if self.max_label_lines < 1:
            raise ValueError("max_label_lines must be at least 1")

    @property
    def half_width(self) -> float:
        return self.node_width / 2

    @property
    def half_height(self) -> float:
        return self.node_height / 2

    @property
    def chars_per_line(self) -> int:
        return max(1, int(self.wrap_width // self.char_width))

    def clamp_scale(self, scale: float) -> float:
        return min(self.max_scale, max(self.min_scale, scale))

    def with_overrides(self, overrides: dict[str, Any]) -> EngineConfig:
        """Return a copy with known keys from *overrides* applied; unknown keys are ignored."""
        known = {f.name for f in fields(self)}
        return replace(self, **{k: v for k, v in overrides.items() if k in known})


DEFAULT_CONFIG = EngineConfig()


def find_pyproject(start: Path | None = None) -> Path | None:
    """Walk up from start directory to find pyproject.toml."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def load_config(start: Path | None = None) -> EngineConfig:
    """Load [tool.equitree] from the nearest pyproject.toml.

    Returns the default config if no pyproject.toml or no [tool.equitree] section.
    """
    path = find_pyproject(start)
    if path is None:
        return DEFAULT_CONFIG

    if sys.version_info >= (3, 11):
        import tomllib
    else:
        try:
            import tomli as tomllib
        except ImportError:
            return DEFAULT_CONFIG

    with open(path, "rb") as f:
        data = tomllib.load(f)

    section = data.get("tool", {}).get("equitree", {})
    if not section:
        return DEFAULT_CONFIG

    return DEFAULT_CONFIG.with_overrides(section)
