"""
Flow field grid: one unit direction per cell, rebuilt from noise every tick.

Cells are stored row-major in a flat list, index `x + y * cols`. The grid
is reallocated on resize and fully overwritten by `regenerate`, so no cell
ever carries over a direction from a previous tick.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from particle_flow2d.core.area import grid_shape
from particle_flow2d.core.vector import ZERO, Vector2

if TYPE_CHECKING:
    from particle_flow2d.core.noise import NoiseField


DEFAULT_CELL_SIZE = 100
DEFAULT_INCREMENT = 0.1
# Noise [0, 1) maps to up to two full rotations.
ANGLE_TURNS = 2


class FlowFieldGrid:
    def __init__(
        self,
        width: int,
        height: int,
        *,
        cell_size: int = DEFAULT_CELL_SIZE,
        increment: float = DEFAULT_INCREMENT,
    ) -> None:
        self.cell_size = int(cell_size)
        self.increment = float(increment)
        self.width = 0
        self.height = 0
        self.cols = 0
        self.rows = 0
        self.vectors: list[Vector2] = []
        self.resize(width, height)

    def __len__(self) -> int:
        return len(self.vectors)

    def resize(self, width: int, height: int) -> None:
        # grid_shape raises before anything is touched, so a failed resize keeps the old grid.
        cols, rows = grid_shape(width, height, self.cell_size)
        self.width = int(width)
        self.height = int(height)
        self.cols = cols
        self.rows = rows
        self.vectors = [ZERO] * (cols * rows)

    def regenerate(self, noise: "NoiseField", time: float) -> None:
        cols = self.cols
        inc = self.increment
        scale = 2.0 * math.pi * ANGLE_TURNS
        vectors = self.vectors
        for y in range(self.rows):
            yoff = y * inc
            row = y * cols
            for x in range(cols):
                angle = noise.sample(x * inc, yoff, time) * scale
                vectors[x + row] = Vector2(math.cos(angle), math.sin(angle))

    def cell_of(self, position: Vector2) -> tuple[int, int] | None:
        if not position.is_finite():
            return None
        cx = math.floor(position.x / self.cell_size)
        cy = math.floor(position.y / self.cell_size)
        if cx < 0 or cy < 0 or cx >= self.cols or cy >= self.rows:
            return None
        return int(cx), int(cy)

    def lookup(self, position: Vector2) -> Vector2:
        cell = self.cell_of(position)
        if cell is None:
            return ZERO
        cx, cy = cell
        return self.vectors[cx + cy * self.cols]

    def magnitudes(self) -> list[float]:
        return [v.mag() for v in self.vectors]
