"""
Tests for the decoration overlay, color conversion and the recording renderer.
"""

import pytest

from particle_flow2d.core.vector import Vector2
from particle_flow2d.rendering.color import background_rgb, hsb_to_rgba, particle_color, trail_fade_rgba
from particle_flow2d.rendering.decorations import LABEL_TEXT, Decorations, Label
from particle_flow2d.rendering.renderer import RecordingRenderer


class TestColor:
    """HSB to RGBA conversion."""

    @pytest.mark.parametrize(
        "hue, expected",
        [
            (0.0, (255, 0, 0, 255)),
            (120.0, (0, 255, 0, 255)),
            (240.0, (0, 0, 255, 255)),
            (360.0, (255, 0, 0, 255)),
            (-120.0, (0, 0, 255, 255)),
        ],
    )
    def test_primary_hues(self, hue, expected):
        assert hsb_to_rgba(hue) == expected

    def test_zero_brightness_is_black(self):
        assert hsb_to_rgba(200.0, 100.0, 0.0, 100.0) == (0, 0, 0, 255)

    def test_zero_saturation_is_grey(self):
        r, g, b, _ = hsb_to_rgba(77.0, 0.0, 50.0)
        assert r == g == b == 128

    def test_particle_alpha(self):
        assert particle_color(0.0)[3] == 204

    def test_background_has_no_alpha(self):
        assert background_rgb(0.0, 0.0, 0.0) == (0, 0, 0)

    def test_trail_fade_keeps_background_rgb(self):
        assert trail_fade_rgba((12, 34, 56), 5.0) == (12, 34, 56, 13)

    def test_trail_fade_alpha_bounds(self):
        assert trail_fade_rgba((0, 0, 0), 0.0)[3] == 0
        assert trail_fade_rgba((0, 0, 0), 100.0)[3] == 255
        assert trail_fade_rgba((0, 0, 0), 250.0)[3] == 255


class TestDecorations:
    """Labels, polygons and background re-roll."""

    def test_label_hit_testing(self):
        deco = Decorations(800, 600, label_count=0)
        deco.labels.append(Label(Vector2(100.0, 100.0)))
        x0, y0, x1, y1 = deco.label_bounds(deco.labels[0])
        assert x1 - x0 == pytest.approx(9.0 * len(LABEL_TEXT))
        assert y1 - y0 == pytest.approx(15.0)
        assert deco.label_at(Vector2(100.0, 100.0)) == 0
        assert deco.label_at(Vector2(120.0, 105.0)) == 0
        assert deco.label_at(Vector2(130.0, 100.0)) is None
        assert deco.label_at(Vector2(100.0, 110.0)) is None

    def test_labels_drift_inside_area(self):
        deco = Decorations(200, 100, label_count=5, seed=4)
        deco.labels[0].position = Vector2(0.0, 0.0)
        for frame in range(200):
            deco.update(frame)
        for label in deco.labels:
            assert 0.0 <= label.position.x <= 200.0
            assert 0.0 <= label.position.y <= 100.0
            assert 0.0 <= label.hue < 360.0

    def test_label_hues_follow_frame(self):
        deco = Decorations(800, 600, label_count=3)
        deco.update(10)
        assert [label.hue for label in deco.labels] == [5.0, 55.0, 105.0]

    def test_polygons(self):
        deco = Decorations(800, 600, polygon_count=4)
        polys = deco.polygons(0)
        assert len(polys) == 4
        for poly in polys:
            assert 3 <= len(poly.vertices) <= 7
            assert 1.0 <= poly.stroke_width <= 3.0
            assert len(poly.color) == 4
            assert all(v.is_finite() for v in poly.vertices)

    def test_resize_constrains_labels(self):
        deco = Decorations(800, 600, label_count=0)
        deco.labels.append(Label(Vector2(700.0, 500.0)))
        deco.resize(300, 200)
        assert deco.labels[0].position == Vector2(300.0, 200.0)

    def test_reroll_background_ranges(self):
        deco = Decorations(800, 600, seed=9)
        for _ in range(50):
            h, s, b = deco.reroll_background()
            assert 0.0 <= h <= 360.0
            assert 50.0 <= s <= 100.0
            assert 0.0 <= b <= 40.0
            assert max(deco.background()) <= 102


class TestRecordingRenderer:
    """Frame bracketing."""

    def test_frame_cycle(self):
        renderer = RecordingRenderer()
        renderer.begin_frame()
        renderer.draw_point(Vector2(1.0, 2.0), 10.0, 1.5)
        renderer.draw_label("What?", Vector2(0.0, 0.0), (1, 2, 3, 4))
        renderer.draw_polygon([Vector2(0.0, 0.0), Vector2(1.0, 0.0), Vector2(0.0, 1.0)], (0, 0, 0, 255))
        renderer.end_frame()
        assert renderer.summary() == {"frames": 1, "points": 1, "polygons": 1, "labels": 1}
        assert renderer.polygons[0][2] == 1.0

    def test_begin_clears_previous_frame(self):
        renderer = RecordingRenderer()
        renderer.begin_frame()
        renderer.draw_point(Vector2(1.0, 2.0), 10.0, 1.5)
        renderer.end_frame()
        renderer.begin_frame()
        assert renderer.points == []

    def test_misordered_calls_raise(self):
        renderer = RecordingRenderer()
        with pytest.raises(RuntimeError):
            renderer.end_frame()
        renderer.begin_frame()
        with pytest.raises(RuntimeError):
            renderer.begin_frame()
