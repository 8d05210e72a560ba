"""
Decorative overlay: jittery random polygons and drifting "What?" labels.

None of this feeds back into the particle simulation. Clicking a label
re-rolls the background color; clicking anywhere else starts the glitch
effect (see FlowFieldSim.click).
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass

from particle_flow2d.core.vector import Vector2
from particle_flow2d.rendering.color import background_rgb, label_color, polygon_color


LABEL_TEXT = "What?"
LABEL_FONT_SIZE = 15
# Rough glyph width for hit testing without a font backend.
LABEL_CHAR_WIDTH = 0.6 * LABEL_FONT_SIZE
LABEL_DRIFT = 0.5
POLYGON_SIDES = (3, 8)  # randrange bounds
POLYGON_RADIUS = (10.0, 50.0)
POLYGON_JITTER = 10.0
POLYGON_STROKE = (1.0, 3.0)


@dataclass(slots=True)
class Label:
    position: Vector2
    hue: float = 0.0


@dataclass(frozen=True, slots=True)
class DecorPolygon:
    vertices: tuple[Vector2, ...]
    color: tuple[int, int, int, int]
    stroke_width: float


class Decorations:
    def __init__(
        self,
        width: float,
        height: float,
        *,
        polygon_count: int = 2,
        label_count: int = 5,
        seed: int = 1,
    ) -> None:
        self.width = float(width)
        self.height = float(height)
        self.polygon_count = int(polygon_count)
        self._rng = random.Random(seed)
        self.labels: list[Label] = [
            Label(Vector2(self._rng.uniform(0.0, self.width), self._rng.uniform(0.0, self.height)))
            for _ in range(int(label_count))
        ]
        self.background_hsb: tuple[float, float, float] = (0.0, 0.0, 0.0)

    def resize(self, width: float, height: float) -> None:
        self.width = float(width)
        self.height = float(height)
        for label in self.labels:
            label.position = self._constrain(label.position)

    def _constrain(self, v: Vector2) -> Vector2:
        return Vector2(min(self.width, max(0.0, v.x)), min(self.height, max(0.0, v.y)))

    def update(self, frame: int) -> None:
        for i, label in enumerate(self.labels):
            drift = Vector2(
                self._rng.uniform(-LABEL_DRIFT, LABEL_DRIFT),
                self._rng.uniform(-LABEL_DRIFT, LABEL_DRIFT),
            )
            label.position = self._constrain(label.position + drift)
            label.hue = (frame * 0.5 + i * 50) % 360.0

    def label_bounds(self, label: Label) -> tuple[float, float, float, float]:
        half_w = (LABEL_CHAR_WIDTH * len(LABEL_TEXT)) / 2.0
        half_h = LABEL_FONT_SIZE / 2.0
        x, y = label.position.x, label.position.y
        return x - half_w, y - half_h, x + half_w, y + half_h

    def label_at(self, point: Vector2) -> int | None:
        for i, label in enumerate(self.labels):
            x0, y0, x1, y1 = self.label_bounds(label)
            if x0 < point.x < x1 and y0 < point.y < y1:
                return i
        return None

    def polygons(self, frame: int) -> list[DecorPolygon]:
        out: list[DecorPolygon] = []
        rng = self._rng
        for _ in range(self.polygon_count):
            center = Vector2(rng.uniform(0.0, self.width), rng.uniform(0.0, self.height))
            sides = rng.randrange(*POLYGON_SIDES)
            radius = rng.uniform(*POLYGON_RADIUS)
            hue = (frame * 2 + rng.uniform(0.0, 100.0)) % 360.0
            rotation = rng.uniform(0.0, 2.0 * math.pi)
            stroke = rng.uniform(*POLYGON_STROKE)
            verts: list[Vector2] = []
            for s in range(sides):
                angle = (s / sides) * 2.0 * math.pi
                local = Vector2(
                    math.cos(angle) * radius + rng.uniform(-POLYGON_JITTER, POLYGON_JITTER),
                    math.sin(angle) * radius + rng.uniform(-POLYGON_JITTER, POLYGON_JITTER),
                )
                verts.append(center + local.rotate(rotation))
            out.append(DecorPolygon(tuple(verts), polygon_color(hue), stroke))
        return out

    def label_color(self, label: Label) -> tuple[int, int, int, int]:
        return label_color(label.hue)

    def reroll_background(self) -> tuple[float, float, float]:
        self.background_hsb = (
            self._rng.uniform(0.0, 360.0),
            self._rng.uniform(50.0, 100.0),
            self._rng.uniform(0.0, 40.0),
        )
        return self.background_hsb

    def background(self) -> tuple[int, int, int]:
        return background_rgb(*self.background_hsb)
