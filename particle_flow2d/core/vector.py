"""
Immutable 2D vector used by every part of the simulation.

Values are never shared mutably: every operation returns a new vector,
so a particle handed a sampled curve point cannot alter the curve.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Vector2:
    x: float = 0.0
    y: float = 0.0

    @classmethod
    def from_angle(cls, angle: float, length: float = 1.0) -> "Vector2":
        return cls(math.cos(angle) * length, math.sin(angle) * length)

    def __add__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, k: float) -> "Vector2":
        return Vector2(self.x * k, self.y * k)

    __rmul__ = __mul__

    def __iter__(self):
        yield self.x
        yield self.y

    def mag(self) -> float:
        return math.hypot(self.x, self.y)

    def mag_sq(self) -> float:
        return (self.x * self.x) + (self.y * self.y)

    def set_mag(self, length: float) -> "Vector2":
        """Same direction, new length. The zero vector stays zero."""
        m = self.mag()
        if m <= 0.0:
            return ZERO
        s = length / m
        return Vector2(self.x * s, self.y * s)

    def limit(self, max_mag: float) -> "Vector2":
        m2 = self.mag_sq()
        if m2 <= max_mag * max_mag:
            return self
        m = math.sqrt(m2)
        s = max_mag / m
        return Vector2(self.x * s, self.y * s)

    def lerp(self, other: "Vector2", amt: float) -> "Vector2":
        return Vector2(self.x + (other.x - self.x) * amt, self.y + (other.y - self.y) * amt)

    def rotate(self, angle: float) -> "Vector2":
        c = math.cos(angle)
        s = math.sin(angle)
        return Vector2(self.x * c - self.y * s, self.x * s + self.y * c)

    def dist(self, other: "Vector2") -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)


ZERO = Vector2(0.0, 0.0)
