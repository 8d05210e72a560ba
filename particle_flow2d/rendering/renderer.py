"""
Renderer interface the simulation reports to.

The simulation never touches pixels. Once per tick it calls
`begin_frame`, then `draw_point` once per particle and `draw_polygon` /
`draw_label` once per decoration, then `end_frame`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence

from particle_flow2d.core.vector import Vector2


RGBA = tuple[int, int, int, int]


class Renderer(Protocol):
    def begin_frame(self) -> None: ...

    def draw_point(self, position: Vector2, hue: float, size: float) -> None: ...

    def draw_polygon(self, vertices: Sequence[Vector2], stroke_color: RGBA, stroke_width: float = 1.0) -> None: ...

    def draw_label(self, text: str, position: Vector2, color: RGBA) -> None: ...

    def end_frame(self) -> None: ...


@dataclass
class RecordingRenderer:
    """
    Headless renderer that keeps the calls of the last frame.

    Used by the benchmark and tests; `frames` counts completed frames.
    """
    points: list[tuple[Vector2, float, float]] = field(default_factory=list)
    polygons: list[tuple[tuple[Vector2, ...], RGBA, float]] = field(default_factory=list)
    labels: list[tuple[str, Vector2, RGBA]] = field(default_factory=list)
    frames: int = 0
    in_frame: bool = False

    def begin_frame(self) -> None:
        if self.in_frame:
            raise RuntimeError("begin_frame called twice without end_frame")
        self.points.clear()
        self.polygons.clear()
        self.labels.clear()
        self.in_frame = True

    def draw_point(self, position: Vector2, hue: float, size: float) -> None:
        self.points.append((position, float(hue), float(size)))

    def draw_polygon(self, vertices: Sequence[Vector2], stroke_color: RGBA, stroke_width: float = 1.0) -> None:
        self.polygons.append((tuple(vertices), stroke_color, float(stroke_width)))

    def draw_label(self, text: str, position: Vector2, color: RGBA) -> None:
        self.labels.append((text, position, color))

    def end_frame(self) -> None:
        if not self.in_frame:
            raise RuntimeError("end_frame called without begin_frame")
        self.in_frame = False
        self.frames += 1

    def summary(self) -> dict[str, Any]:
        return {
            "frames": self.frames,
            "points": len(self.points),
            "polygons": len(self.polygons),
            "labels": len(self.labels),
        }
