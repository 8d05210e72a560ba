"""Tests for curve outlines, arc-length sampling and collective targets."""

import math
import unittest

from particle_flow2d.core.area import AreaError
from particle_flow2d.core.curves import (
    CurveFamily,
    CurveSampler,
    Polyline,
    archimedean_point,
    build_star_outline,
    build_tree_outline,
    build_tree_segments,
    circle_point,
    collective_t,
    flatten_segments,
)
from particle_flow2d.core.vector import Vector2


class TestPolyline(unittest.TestCase):
    def test_empty_rejected(self) -> None:
        with self.assertRaises(ValueError):
            Polyline.from_vertices([])

    def test_single_vertex(self) -> None:
        line = Polyline.from_vertices([Vector2(3.0, 4.0)])
        self.assertEqual(line.total, 0.0)
        self.assertEqual(line.point_at(0.5), Vector2(3.0, 4.0))

    def test_point_at_interpolates_by_length(self) -> None:
        # Segment lengths 10 and 30: t=0.5 lands 10 units into the second segment.
        line = Polyline.from_vertices([Vector2(0.0, 0.0), Vector2(10.0, 0.0), Vector2(10.0, 30.0)])
        self.assertAlmostEqual(line.total, 40.0)
        p = line.point_at(0.5)
        self.assertAlmostEqual(p.x, 10.0)
        self.assertAlmostEqual(p.y, 10.0)
        p = line.point_at(0.125)
        self.assertAlmostEqual(p.x, 5.0)
        self.assertAlmostEqual(p.y, 0.0)

    def test_out_of_range_clamps(self) -> None:
        line = Polyline.from_vertices([Vector2(0.0, 0.0), Vector2(10.0, 0.0)])
        self.assertEqual(line.point_at(-0.5), Vector2(0.0, 0.0))
        self.assertEqual(line.point_at(1.5), Vector2(10.0, 0.0))

    def test_zero_length_segment_returns_vertex(self) -> None:
        line = Polyline.from_vertices([Vector2(0.0, 0.0), Vector2(0.0, 0.0), Vector2(10.0, 0.0)])
        p = line.point_at(0.5)
        self.assertTrue(p.is_finite())
        self.assertAlmostEqual(p.x, 5.0)


class TestStar(unittest.TestCase):
    def test_first_vertex_is_top_outer_point(self) -> None:
        star = build_star_outline(800, 600)
        self.assertEqual(len(star), 11)
        self.assertAlmostEqual(star.first.x, 400.0)
        self.assertAlmostEqual(star.first.y, 100.0)
        self.assertEqual(star.first, star.last)

    def test_endpoints(self) -> None:
        star = build_star_outline(800, 600)
        self.assertEqual(star.point_at(0.0), star.first)
        end = star.point_at(1.0)
        self.assertAlmostEqual(end.x, star.last.x)
        self.assertAlmostEqual(end.y, star.last.y)

    def test_radii_alternate(self) -> None:
        star = build_star_outline(600, 600)
        center = Vector2(300.0, 300.0)
        for i, v in enumerate(star.vertices[:-1]):
            expected = 200.0 if i % 2 == 0 else 100.0
            self.assertAlmostEqual(v.dist(center), expected)


class TestTree(unittest.TestCase):
    def test_segment_count(self) -> None:
        segments = build_tree_segments(800, 600)
        self.assertEqual(len(segments), 31)

    def test_trunk(self) -> None:
        start, end = build_tree_segments(800, 600)[0]
        self.assertEqual(start, Vector2(400.0, 600.0))
        self.assertAlmostEqual(end.x, 400.0)
        self.assertAlmostEqual(end.y, 450.0)

    def test_left_branch_before_right(self) -> None:
        segments = build_tree_segments(800, 600)
        _, trunk_end = segments[0]
        left_start, left_end = segments[1]
        self.assertEqual(left_start, trunk_end)
        self.assertLess(left_end.x, trunk_end.x)
        # Right child of the trunk follows the full left subtree (15 segments).
        right_start, right_end = segments[16]
        self.assertEqual(right_start, trunk_end)
        self.assertGreater(right_end.x, trunk_end.x)

    def test_flatten_drops_repeated_joints(self) -> None:
        flat = flatten_segments(build_tree_segments(800, 600))
        self.assertEqual(len(flat), 47)
        for a, b in zip(flat, flat[1:]):
            self.assertNotEqual(a, b)
        self.assertEqual(len(build_tree_outline(800, 600)), 47)


class TestArcLengthMonotonic(unittest.TestCase):
    def _assert_walks_forward(self, line: Polyline) -> None:
        # Chords never exceed the arc between samples, so a sampler that
        # backtracks would add up to more than the total length.
        steps = 2000
        chords = 0.0
        prev = line.point_at(0.0)
        for k in range(1, steps + 1):
            cur = line.point_at(k / steps)
            self.assertLessEqual(prev.dist(cur), line.total / steps + 1e-6)
            chords += prev.dist(cur)
            prev = cur
        self.assertLessEqual(chords, line.total + 1e-6)
        self.assertGreater(chords, line.total * 0.95)

    def test_star(self) -> None:
        self._assert_walks_forward(build_star_outline(800, 600))

    def test_fibonacci(self) -> None:
        sampler = CurveSampler(800, 600)
        outline = sampler.outline(CurveFamily.FIBONACCI_SPIRAL)
        assert outline is not None
        self.assertGreater(len(outline), 100)
        self._assert_walks_forward(outline)

    def test_tree(self) -> None:
        self._assert_walks_forward(build_tree_outline(800, 600))


class TestCollectiveT(unittest.TestCase):
    def test_spacing(self) -> None:
        n = 11
        self.assertEqual(collective_t(0, n), 0.0)
        self.assertEqual(collective_t(n - 1, n), 1.0)
        for k in range(n):
            self.assertAlmostEqual(collective_t(k, n), k / (n - 1))

    def test_single_particle(self) -> None:
        self.assertEqual(collective_t(0, 1), 0.0)

    def test_index_wraps(self) -> None:
        self.assertEqual(collective_t(12, 10), collective_t(2, 10))


class TestCurveSampler(unittest.TestCase):
    def test_family_cycle(self) -> None:
        family = CurveFamily.STAR
        seen = []
        for _ in range(5):
            seen.append(family)
            family = family.next()
        self.assertEqual(family, CurveFamily.STAR)
        self.assertEqual(len(set(seen)), 5)

    def test_every_family_stays_finite(self) -> None:
        sampler = CurveSampler(800, 600)
        for family in CurveFamily:
            for k in range(101):
                p = sampler.point_at(family, k / 100)
                self.assertTrue(p.is_finite(), family)
                self.assertTrue(-1e-9 <= p.x <= 800 + 1e-9, family)
                self.assertTrue(-1e-9 <= p.y <= 600 + 1e-9, family)

    def test_endpoints_for_every_family(self) -> None:
        sampler = CurveSampler(800, 600)
        analytic = {CurveFamily.CIRCLE: circle_point, CurveFamily.ARCHIMEDEAN_SPIRAL: archimedean_point}
        for family in CurveFamily:
            with self.subTest(family=family):
                outline = sampler.outline(family)
                if outline is not None:
                    start, end = outline.first, outline.last
                else:
                    start, end = analytic[family](800, 600, 0.0), analytic[family](800, 600, 1.0)
                self.assertAlmostEqual(sampler.point_at(family, 0.0).dist(start), 0.0)
                self.assertAlmostEqual(sampler.point_at(family, 1.0).dist(end), 0.0)
                self.assertAlmostEqual(sampler.get_collective_target(0, family, 25).dist(start), 0.0)
                self.assertAlmostEqual(sampler.get_collective_target(24, family, 25).dist(end), 0.0)

    def test_analytic_families(self) -> None:
        sampler = CurveSampler(800, 600)
        self.assertIsNone(sampler.outline(CurveFamily.CIRCLE))
        start = sampler.point_at(CurveFamily.CIRCLE, 0.0)
        self.assertAlmostEqual(start.x, 550.0)
        self.assertAlmostEqual(start.y, 300.0)
        self.assertEqual(sampler.point_at(CurveFamily.ARCHIMEDEAN_SPIRAL, 0.0), Vector2(400.0, 300.0))
        end = sampler.point_at(CurveFamily.ARCHIMEDEAN_SPIRAL, 1.0)
        self.assertAlmostEqual(end.dist(Vector2(400.0, 300.0)), 300.0)

    def test_collective_target(self) -> None:
        sampler = CurveSampler(800, 600)
        star = sampler.outline(CurveFamily.STAR)
        assert star is not None
        self.assertEqual(sampler.get_collective_target(0, CurveFamily.STAR, 50), star.first)
        last = sampler.get_collective_target(49, CurveFamily.STAR, 50)
        self.assertAlmostEqual(last.dist(star.last), 0.0)
        self.assertEqual(sampler.get_collective_target(0, CurveFamily.STAR, 1), star.first)

    def test_targets_cached_per_population(self) -> None:
        sampler = CurveSampler(800, 600)
        a = sampler.targets(CurveFamily.CIRCLE, 10)
        self.assertIs(a, sampler.targets(CurveFamily.CIRCLE, 10))
        self.assertEqual(len(sampler.targets(CurveFamily.CIRCLE, 12)), 12)

    def test_resize_rebuilds(self) -> None:
        sampler = CurveSampler(800, 600)
        sampler.outline(CurveFamily.STAR)
        self.assertTrue(sampler.is_cached(CurveFamily.STAR))
        sampler.resize(400, 400)
        self.assertFalse(sampler.is_cached(CurveFamily.STAR))
        first = sampler.point_at(CurveFamily.STAR, 0.0)
        self.assertAlmostEqual(first.x, 200.0)
        self.assertAlmostEqual(first.y, 200.0 - 400.0 / 3.0)

    def test_resize_rejects_empty_area(self) -> None:
        sampler = CurveSampler(800, 600)
        with self.assertRaises(AreaError):
            sampler.resize(0, 600)
        self.assertEqual((sampler.width, sampler.height), (800.0, 600.0))

    def test_labels(self) -> None:
        self.assertEqual(CurveFamily.STAR.label, "5-Point Star")
        self.assertEqual(CurveFamily.FRACTAL_TREE.label, "Fractal Tree")
        self.assertTrue(all(isinstance(f.label, str) for f in CurveFamily))
        self.assertTrue(math.isclose(collective_t(5, 11), 0.5))
