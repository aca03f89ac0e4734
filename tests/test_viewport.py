"""Tests for the viewport transform manager."""

import pytest

from equitree import EngineConfig, EventDispatcher, ViewportFitEvent, ViewportManager, ViewportTransform, fit_transform
from equitree import layout, visible_nodes
from equitree.layout import BoundingBox
from equitree.viewport import ContainerSize

SAMPLE_BOUNDS = BoundingBox(min_x=-247.5, max_x=322.5, min_y=-30.0, max_y=310.0)


class Recorder:
    def __init__(self):
        self.events = []

    def on_event(self, event):
        self.events.append(event)

    def shutdown(self):
        pass


@pytest.fixture
def sample_layout(tree):
    return layout(visible_nodes(tree, set()))


class TestFitTransform:
    def test_scale_capped_at_natural_size(self):
        t = fit_transform(SAMPLE_BOUNDS, ContainerSize(1000, 800))
        assert t.scale == pytest.approx(0.9)
        assert t.translate_x == pytest.approx(466.25)
        assert t.translate_y == pytest.approx(274.0)

    def test_shrinks_to_fit_with_margin(self):
        t = fit_transform(SAMPLE_BOUNDS, ContainerSize(285, 170))
        assert t.scale == pytest.approx(0.45)
        assert t.translate_x == pytest.approx(125.625)
        assert t.translate_y == pytest.approx(22.0)

    def test_box_is_centered(self):
        container = ContainerSize(640, 480)
        t = fit_transform(SAMPLE_BOUNDS, container)
        left, top = t.to_screen(SAMPLE_BOUNDS.min_x, SAMPLE_BOUNDS.min_y)
        right, bottom = t.to_screen(SAMPLE_BOUNDS.max_x, SAMPLE_BOUNDS.max_y)
        assert (left + right) / 2 == pytest.approx(320)
        assert (top + bottom) / 2 == pytest.approx(240)
        assert left >= 0 and right <= 640 and top >= 0 and bottom <= 480

    def test_scale_clamped_to_minimum(self):
        t = fit_transform(SAMPLE_BOUNDS, ContainerSize(57, 34))
        assert t.scale == 0.2

    def test_container_must_be_positive(self):
        with pytest.raises(ValueError):
            ContainerSize(0, 100)


class TestViewportTransform:
    def test_screen_layout_roundtrip(self):
        t = ViewportTransform(scale=2.0, translate_x=10, translate_y=-5)
        assert t.to_screen(3, 4) == (16, 3)
        assert t.to_layout(16, 3) == (3, 4)

    def test_svg_attribute(self):
        assert ViewportTransform(0.45, 125.625, 22.0).as_svg() == "translate(125.625,22) scale(0.45)"


class TestViewportManager:
    def test_requires_container_before_layout(self, sample_layout):
        with pytest.raises(RuntimeError):
            ViewportManager().on_layout(sample_layout)

    def test_first_layout_fits(self, sample_layout):
        manager = ViewportManager()
        manager.resize(1000, 800)
        t = manager.on_layout(sample_layout)
        assert t == fit_transform(sample_layout.bounds, ContainerSize(1000, 800))

    def test_reused_across_structural_changes(self, tree, sample_layout):
        manager = ViewportManager()
        manager.resize(1000, 800)
        first = manager.on_layout(sample_layout)
        collapsed = layout(visible_nodes(tree, {"company-4"}))
        assert manager.on_layout(collapsed) is first
        assert manager.on_layout(sample_layout) is first

    def test_refit_when_dimensions_change(self, sample_layout):
        manager = ViewportManager()
        manager.resize(1000, 800)
        first = manager.on_layout(sample_layout)
        assert manager.resize(285, 170) is True
        second = manager.on_layout(sample_layout)
        assert second != first
        assert second.scale == pytest.approx(0.45)

    def test_unchanged_resize_is_ignored(self, sample_layout):
        manager = ViewportManager()
        manager.resize(1000, 800)
        first = manager.on_layout(sample_layout)
        manager.pan(10, 0)
        assert manager.resize(1000, 800) is False
        assert manager.on_layout(sample_layout) == ViewportTransform(first.scale, first.translate_x + 10, first.translate_y)

    def test_gestures_survive_relayout(self, sample_layout):
        manager = ViewportManager()
        manager.resize(1000, 800)
        manager.on_layout(sample_layout)
        panned = manager.pan(-40, 25)
        assert manager.on_layout(sample_layout) == panned

    def test_zoom_keeps_anchor_fixed(self, sample_layout):
        manager = ViewportManager()
        manager.resize(1000, 800)
        before = manager.on_layout(sample_layout)
        anchor = (300.0, 200.0)
        layout_point = before.to_layout(*anchor)

        after = manager.zoom(2.0, anchor)
        assert after.scale == pytest.approx(1.8)
        assert after.to_screen(*layout_point) == pytest.approx(anchor)

    @pytest.mark.parametrize(("factor", "expected"), [(100.0, 3.0), (0.001, 0.2)])
    def test_zoom_clamped(self, sample_layout, factor, expected):
        manager = ViewportManager()
        manager.resize(1000, 800)
        manager.on_layout(sample_layout)
        assert manager.zoom(factor).scale == expected

    def test_set_transform_clamps(self):
        manager = ViewportManager(EngineConfig(min_scale=0.5, max_scale=2.0))
        manager.resize(100, 100)
        assert manager.set_transform(ViewportTransform(9.0, 1, 2)) == ViewportTransform(2.0, 1, 2)

    def test_gesture_before_layout(self):
        manager = ViewportManager()
        manager.resize(100, 100)
        with pytest.raises(RuntimeError):
            manager.pan(1, 1)

    def test_invalid_zoom_factor(self, sample_layout):
        manager = ViewportManager()
        manager.resize(1000, 800)
        manager.on_layout(sample_layout)
        with pytest.raises(ValueError):
            manager.zoom(0)

    def test_reset_forces_refit(self, sample_layout):
        manager = ViewportManager()
        manager.resize(1000, 800)
        fitted = manager.on_layout(sample_layout)
        manager.pan(50, 50)
        manager.reset()
        assert manager.on_layout(sample_layout) == fitted

    def test_fit_emits_event(self, sample_layout):
        recorder = Recorder()
        manager = ViewportManager(dispatcher=EventDispatcher([recorder]))
        manager.resize(1000, 800)
        manager.on_layout(sample_layout)
        manager.on_layout(sample_layout)

        assert len(recorder.events) == 1
        event = recorder.events[0]
        assert isinstance(event, ViewportFitEvent)
        assert event.width == 1000
        assert event.scale == pytest.approx(0.9)
