"""
Curve sampling for collective shape mode.

Every curve family answers "where is the point at normalized distance t"
for t in [0, 1]. Families that have a closed form (circle, Archimedean
spiral) are evaluated directly; the others are flattened once into an
arc-length parameterized polyline and looked up by distance.

Families:
- STAR: 10-gon alternating outer/inner radius, closed
- CIRCLE: analytic
- ARCHIMEDEAN_SPIRAL: analytic, four full turns
- FIBONACCI_SPIRAL: golden logarithmic spiral, polyline
- FRACTAL_TREE: binary branching tree flattened depth-first, polyline

Constants:
    STAR_POINTS: Vertex count of the star outline (outer + inner)
    SPIRAL_TURN_ANGLE: Total sweep of the Archimedean spiral
    FIB_THETA_STEP: Angular sampling step of the golden spiral
    FIB_MAX_THETA: Hard cap on the golden spiral sweep
    TREE_DEPTH: Branching levels of the fractal tree
    TREE_BRANCH_ANGLE: Child rotation relative to the parent
    TREE_LENGTH_RATIO: Child length relative to the parent
"""

from __future__ import annotations

import math
from bisect import bisect_left
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from particle_flow2d.core.area import AreaError
from particle_flow2d.core.vector import Vector2


STAR_POINTS = 10
STAR_START_ANGLE = -math.pi / 2.0
SPIRAL_TURN_ANGLE = 8.0 * math.pi
GOLDEN_RATIO = (1.0 + math.sqrt(5.0)) / 2.0
FIB_GROWTH = math.log(GOLDEN_RATIO)
FIB_SCALE = 1.0
FIB_THETA_STEP = 0.02
FIB_MAX_THETA = 50.0
TREE_DEPTH = 5
TREE_BRANCH_ANGLE = math.pi / 4.0
TREE_LENGTH_RATIO = 0.67


class CurveFamily(Enum):
    STAR = "star"
    CIRCLE = "circle"
    ARCHIMEDEAN_SPIRAL = "spiral"
    FIBONACCI_SPIRAL = "fibonacci"
    FRACTAL_TREE = "tree"

    @property
    def label(self) -> str:
        return _LABELS[self]

    def next(self) -> "CurveFamily":
        members = list(CurveFamily)
        return members[(members.index(self) + 1) % len(members)]


_LABELS = {
    CurveFamily.STAR: "5-Point Star",
    CurveFamily.CIRCLE: "Circle",
    CurveFamily.ARCHIMEDEAN_SPIRAL: "Spiral",
    CurveFamily.FIBONACCI_SPIRAL: "Fibonacci Spiral",
    CurveFamily.FRACTAL_TREE: "Fractal Tree",
}


# =============================================================================
# Polyline
# =============================================================================

@dataclass(frozen=True, slots=True)
class Polyline:
    """
    Ordered vertices with precomputed segment lengths.

    Attributes:
        vertices: Curve points in drawing order
        lengths: lengths[i] is the distance from vertices[i] to vertices[i + 1]
        cumulative: cumulative[i] is the arc length at the end of segment i
        total: Sum of all segment lengths
    """
    vertices: tuple[Vector2, ...]
    lengths: tuple[float, ...]
    cumulative: tuple[float, ...]
    total: float

    @classmethod
    def from_vertices(cls, vertices: list[Vector2] | tuple[Vector2, ...]) -> "Polyline":
        verts = tuple(vertices)
        if not verts:
            raise ValueError("a polyline needs at least one vertex")
        lengths: list[float] = []
        cumulative: list[float] = []
        total = 0.0
        for a, b in zip(verts, verts[1:]):
            seg = a.dist(b)
            lengths.append(seg)
            total += seg
            cumulative.append(total)
        return cls(verts, tuple(lengths), tuple(cumulative), total)

    def __len__(self) -> int:
        return len(self.vertices)

    @property
    def first(self) -> Vector2:
        return self.vertices[0]

    @property
    def last(self) -> Vector2:
        return self.vertices[-1]

    def point_at(self, t: float) -> Vector2:
        """
        Point at normalized arc length t.

        t <= 0 gives the first vertex; targets past the accumulated length
        give the last vertex.
        """
        if not self.lengths:
            return self.vertices[0]
        target = float(t) * self.total
        if target <= 0.0:
            return self.vertices[0]
        # First segment whose running end reaches the target.
        i = bisect_left(self.cumulative, target)
        if i >= len(self.lengths):
            return self.vertices[-1]
        seg = self.lengths[i]
        if seg <= 0.0:
            return self.vertices[i]
        start = self.cumulative[i - 1] if i > 0 else 0.0
        return self.vertices[i].lerp(self.vertices[i + 1], (target - start) / seg)


# =============================================================================
# Outline builders
# =============================================================================

def _center(width: float, height: float) -> Vector2:
    return Vector2(width / 2.0, height / 2.0)


def build_star_outline(width: float, height: float) -> Polyline:
    center = _center(width, height)
    outer = min(width, height) / 3.0
    inner = outer / 2.0
    vertices: list[Vector2] = []
    for i in range(STAR_POINTS):
        angle = STAR_START_ANGLE + i * (2.0 * math.pi) / STAR_POINTS
        r = outer if i % 2 == 0 else inner
        vertices.append(center + Vector2.from_angle(angle, r))
    vertices.append(vertices[0])
    return Polyline.from_vertices(vertices)


def build_fibonacci_outline(width: float, height: float) -> Polyline:
    """Golden spiral r = a * e^(b * theta) sampled until it leaves the area."""
    center = _center(width, height)
    max_r = 0.5 * min(width, height)
    vertices: list[Vector2] = []
    theta = 0.0
    while theta <= FIB_MAX_THETA:
        r = FIB_SCALE * math.exp(FIB_GROWTH * theta)
        if r > max_r:
            break
        vertices.append(center + Vector2.from_angle(theta, r))
        theta += FIB_THETA_STEP
    if not vertices:
        vertices.append(center)
    return Polyline.from_vertices(vertices)


def build_tree_segments(width: float, height: float) -> list[tuple[Vector2, Vector2]]:
    """Branch segments, parent before its left subtree, left before right."""
    segments: list[tuple[Vector2, Vector2]] = []

    def branch(pos: Vector2, direction: Vector2, length: float, level: int) -> None:
        if level <= 0:
            return
        end = pos + direction * length
        segments.append((pos, end))
        child_len = length * TREE_LENGTH_RATIO
        branch(end, direction.rotate(-TREE_BRANCH_ANGLE), child_len, level - 1)
        branch(end, direction.rotate(TREE_BRANCH_ANGLE), child_len, level - 1)

    branch(Vector2(width / 2.0, float(height)), Vector2(0.0, -1.0), min(width, height) / 4.0, TREE_DEPTH)
    return segments


def flatten_segments(segments: list[tuple[Vector2, Vector2]]) -> list[Vector2]:
    path: list[Vector2] = []
    for start, end in segments:
        path.append(start)
        path.append(end)
    cleaned: list[Vector2] = path[:1]
    for v in path[1:]:
        if v != cleaned[-1]:
            cleaned.append(v)
    return cleaned


def build_tree_outline(width: float, height: float) -> Polyline:
    return Polyline.from_vertices(flatten_segments(build_tree_segments(width, height)))


def circle_point(width: float, height: float, t: float) -> Vector2:
    r = min(width, height) / 4.0
    return _center(width, height) + Vector2.from_angle(t * 2.0 * math.pi, r)


def archimedean_point(width: float, height: float, t: float) -> Vector2:
    r = t * (min(width, height) / 2.0)
    return _center(width, height) + Vector2.from_angle(t * SPIRAL_TURN_ANGLE, r)


# =============================================================================
# Curve shapes
# =============================================================================

@dataclass(frozen=True, slots=True)
class PolylineShape:
    polyline: Polyline

    def point_at(self, t: float) -> Vector2:
        return self.polyline.point_at(t)


@dataclass(frozen=True, slots=True)
class AnalyticShape:
    width: float
    height: float
    formula: Callable[[float, float, float], Vector2]

    def point_at(self, t: float) -> Vector2:
        return self.formula(self.width, self.height, t)


CurveShape = PolylineShape | AnalyticShape

_POLYLINE_BUILDERS: dict[CurveFamily, Callable[[float, float], Polyline]] = {
    CurveFamily.STAR: build_star_outline,
    CurveFamily.FIBONACCI_SPIRAL: build_fibonacci_outline,
    CurveFamily.FRACTAL_TREE: build_tree_outline,
}

_ANALYTIC_FORMULAS: dict[CurveFamily, Callable[[float, float, float], Vector2]] = {
    CurveFamily.CIRCLE: circle_point,
    CurveFamily.ARCHIMEDEAN_SPIRAL: archimedean_point,
}


def collective_t(index: int, population: int) -> float:
    """Evenly spaced parameter for a stable particle index."""
    if population <= 1:
        return 0.0
    return (index % population) / (population - 1)


# =============================================================================
# Sampler
# =============================================================================

class CurveSampler:
    """
    Owns one lazily built shape per curve family for the current area.

    Shapes and per-population target lists are cached until `invalidate`
    (called by `resize`), after which they are rebuilt on next access.
    """

    def __init__(self, width: float, height: float) -> None:
        self.width = 0.0
        self.height = 0.0
        self._shapes: dict[CurveFamily, CurveShape] = {}
        self._targets: dict[tuple[CurveFamily, int], tuple[Vector2, ...]] = {}
        self.resize(width, height)

    def resize(self, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            raise AreaError(f"area must be positive, got {width}x{height}")
        self.width = float(width)
        self.height = float(height)
        self.invalidate()

    def invalidate(self) -> None:
        self._shapes.clear()
        self._targets.clear()

    def is_cached(self, family: CurveFamily) -> bool:
        return family in self._shapes

    def shape(self, family: CurveFamily) -> CurveShape:
        shape = self._shapes.get(family)
        if shape is None:
            builder = _POLYLINE_BUILDERS.get(family)
            if builder is not None:
                shape = PolylineShape(builder(self.width, self.height))
            else:
                shape = AnalyticShape(self.width, self.height, _ANALYTIC_FORMULAS[family])
            self._shapes[family] = shape
        return shape

    def outline(self, family: CurveFamily) -> Polyline | None:
        shape = self.shape(family)
        if isinstance(shape, PolylineShape):
            return shape.polyline
        return None

    def point_at(self, family: CurveFamily, t: float) -> Vector2:
        return self.shape(family).point_at(t)

    def get_collective_target(self, index: int, family: CurveFamily, population: int) -> Vector2:
        return self.point_at(family, collective_t(index, population))

    def targets(self, family: CurveFamily, population: int) -> tuple[Vector2, ...]:
        """All targets for indices 0..population-1, cached per family."""
        key = (family, int(population))
        cached = self._targets.get(key)
        if cached is None:
            cached = tuple(self.get_collective_target(i, family, population) for i in range(population))
            self._targets[key] = cached
        return cached
