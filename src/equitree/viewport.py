"""Pan/zoom transform from layout space to screen space.

The transform is fitted to the tree on the first layout and whenever the
container's pixel size changes. Layouts caused by collapse, expand or
lazy loads reuse it verbatim so the camera does not jump. Gestures
overwrite it immediately, with the scale clamped to the configured range.

Screen mapping: ``screen = layout * scale + translate``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from equitree.config import DEFAULT_CONFIG, EngineConfig
from equitree.events import EventDispatcher, ViewportFitEvent
from equitree.layout import BoundingBox, LayoutResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewportTransform:
    """Uniform scale followed by translation."""

    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0

    def to_screen(self, x: float, y: float) -> tuple[float, float]:
        return (x * self.scale + self.translate_x, y * self.scale + self.translate_y)

    def to_layout(self, x: float, y: float) -> tuple[float, float]:
        return ((x - self.translate_x) / self.scale, (y - self.translate_y) / self.scale)

    def as_svg(self) -> str:
        return f"translate({_num(self.translate_x)},{_num(self.translate_y)}) scale({_num(self.scale)})"


@dataclass(frozen=True)
class ContainerSize:
    """Pixel dimensions of the drawing surface."""

    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Container dimensions must be positive, got {self.width}x{self.height}")


def fit_transform(
    bounds: BoundingBox,
    container: ContainerSize,
    config: EngineConfig = DEFAULT_CONFIG,
) -> ViewportTransform:
    """Fit *bounds* inside *container* and center it.

    ``scale = min(scaleX, scaleY, 1.0) * 0.9`` so the tree never renders
    above natural size and keeps a 10% margin.
    """
    scale_x = container.width / bounds.width
    scale_y = container.height / bounds.height
    scale = config.clamp_scale(min(scale_x, scale_y, 1.0) * config.fit_padding)
    cx, cy = bounds.center
    return ViewportTransform(
        scale=scale,
        translate_x=container.width / 2 - cx * scale,
        translate_y=container.height / 2 - cy * scale,
    )


class ViewportManager:
    """Owns the current transform and decides when to refit it."""

    def __init__(
        self,
        config: EngineConfig = DEFAULT_CONFIG,
        *,
        dispatcher: EventDispatcher | None = None,
    ) -> None:
        self.config = config
        self._dispatcher = dispatcher or EventDispatcher()
        self._transform: ViewportTransform | None = None
        self._container: ContainerSize | None = None
        # Container size the current transform was fitted for
        self._fitted_for: ContainerSize | None = None

    @property
    def transform(self) -> ViewportTransform | None:
        return self._transform

    @property
    def container(self) -> ContainerSize | None:
        return self._container

    def reset(self) -> None:
        """Forget the transform; the next layout refits."""
        self._transform = None
        self._fitted_for = None

    def resize(self, width: float, height: float) -> bool:
        """Record new container dimensions.

        Returns False when the dimensions are unchanged (the event is ignored).
        """
        size = ContainerSize(width, height)
        if size == self._container:
            return False
        self._container = size
        return True

    def on_layout(self, result: LayoutResult) -> ViewportTransform:
        """Return the transform to draw *result* with, fitting it if needed."""
        if self._container is None:
            raise RuntimeError("Container size unknown; call resize() before the first layout")
        if self._transform is None or self._fitted_for != self._container:
            self._transform = fit_transform(result.bounds, self._container, self.config)
            self._fitted_for = self._container
            logger.debug("Fitted viewport %s for %sx%s", self._transform, self._container.width, self._container.height)
            self._dispatcher.emit(
                ViewportFitEvent(
                    scale=self._transform.scale,
                    translate_x=self._transform.translate_x,
                    translate_y=self._transform.translate_y,
                    width=self._container.width,
                    height=self._container.height,
                )
            )
        return self._transform

    def set_transform(self, transform: ViewportTransform) -> ViewportTransform:
        """Overwrite the transform from a gesture, clamping the scale."""
        self._transform = ViewportTransform(
            scale=self.config.clamp_scale(transform.scale),
            translate_x=transform.translate_x,
            translate_y=transform.translate_y,
        )
        # A gesture counts as fitted for the current container
        self._fitted_for = self._container
        return self._transform

    def pan(self, dx: float, dy: float) -> ViewportTransform:
        current = self._require_transform()
        return self.set_transform(
            ViewportTransform(current.scale, current.translate_x + dx, current.translate_y + dy)
        )

    def zoom(self, factor: float, anchor: tuple[float, float] | None = None) -> ViewportTransform:
        """Scale by *factor* keeping the screen point *anchor* fixed.

        The anchor defaults to the container center.
        """
        if factor <= 0:
            raise ValueError(f"Zoom factor must be positive, got {factor}")
        current = self._require_transform()
        if anchor is None:
            anchor = (self._container.width / 2, self._container.height / 2) if self._container else (0.0, 0.0)
        new_scale = self.config.clamp_scale(current.scale * factor)
        ratio = new_scale / current.scale
        ax, ay = anchor
        return self.set_transform(
            ViewportTransform(
                new_scale,
                ax - (ax - current.translate_x) * ratio,
                ay - (ay - current.translate_y) * ratio,
            )
        )

    def _require_transform(self) -> ViewportTransform:
        if self._transform is None:
            raise RuntimeError("No viewport transform yet; lay out the tree first")
        return self._transform


def _num(value: float) -> str:
    """Compact number formatting for SVG attributes."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text
