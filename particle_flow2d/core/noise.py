"""
Coherent 3D noise used to animate the flow field.

The field samples (x, y) in grid space and uses z as time: `z_offset`
creeps forward by a small fixed step every tick, so successive fields
differ only slightly and the motion looks smooth.

Constants:
    DEFAULT_OCTAVES: Number of summed noise layers
    DEFAULT_FALLOFF: Amplitude multiplier applied per octave
    DEFAULT_Z_INCREMENT: Time advance per tick
"""

from __future__ import annotations

import math
import random


DEFAULT_OCTAVES = 4
DEFAULT_FALLOFF = 0.5
DEFAULT_Z_INCREMENT = 0.003

_ONE_BELOW = math.nextafter(1.0, 0.0)

# Gradient directions: the 12 cube edge midpoints.
_GRADIENTS = (
    (1, 1, 0), (-1, 1, 0), (1, -1, 0), (-1, -1, 0),
    (1, 0, 1), (-1, 0, 1), (1, 0, -1), (-1, 0, -1),
    (0, 1, 1), (0, -1, 1), (0, 1, -1), (0, -1, -1),
)


def _fade(t: float) -> float:
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


class NoiseField:
    """
    Seeded 3D gradient noise with fractal octaves.

    `sample` is deterministic for a given seed and continuous in all three
    inputs. The output is normalized into [0, 1).
    """

    def __init__(
        self,
        seed: int = 1,
        *,
        octaves: int = DEFAULT_OCTAVES,
        falloff: float = DEFAULT_FALLOFF,
        z_increment: float = DEFAULT_Z_INCREMENT,
    ) -> None:
        self.seed = int(seed)
        self.octaves = max(1, int(octaves))
        self.falloff = float(falloff)
        self.z_increment = float(z_increment)
        self.z_offset = 0.0
        perm = list(range(256))
        random.Random(self.seed).shuffle(perm)
        self._perm = perm + perm

    def reset(self) -> None:
        self.z_offset = 0.0

    def advance(self) -> float:
        self.z_offset += self.z_increment
        return self.z_offset

    def _grad(self, h: int, x: float, y: float, z: float) -> float:
        gx, gy, gz = _GRADIENTS[h % 12]
        return (gx * x) + (gy * y) + (gz * z)

    def _perlin(self, x: float, y: float, z: float) -> float:
        """Single octave in roughly [-1, 1]."""
        p = self._perm
        fx = math.floor(x)
        fy = math.floor(y)
        fz = math.floor(z)
        xi = int(fx) & 255
        yi = int(fy) & 255
        zi = int(fz) & 255
        x -= fx
        y -= fy
        z -= fz
        u = _fade(x)
        v = _fade(y)
        w = _fade(z)

        a = p[xi] + yi
        aa = p[a] + zi
        ab = p[a + 1] + zi
        b = p[xi + 1] + yi
        ba = p[b] + zi
        bb = p[b + 1] + zi

        x1 = _lerp(self._grad(p[aa], x, y, z), self._grad(p[ba], x - 1, y, z), u)
        x2 = _lerp(self._grad(p[ab], x, y - 1, z), self._grad(p[bb], x - 1, y - 1, z), u)
        y1 = _lerp(x1, x2, v)
        x3 = _lerp(self._grad(p[aa + 1], x, y, z - 1), self._grad(p[ba + 1], x - 1, y, z - 1), u)
        x4 = _lerp(self._grad(p[ab + 1], x, y - 1, z - 1), self._grad(p[bb + 1], x - 1, y - 1, z - 1), u)
        y2 = _lerp(x3, x4, v)
        return _lerp(y1, y2, w)

    def sample(self, x: float, y: float, z: float = 0.0) -> float:
        total = 0.0
        norm = 0.0
        amp = 1.0
        freq = 1.0
        for _ in range(self.octaves):
            total += amp * (self._perlin(x * freq, y * freq, z * freq) + 1.0) * 0.5
            norm += amp
            amp *= self.falloff
            freq *= 2.0
        if norm <= 0.0:
            return 0.0
        return min(_ONE_BELOW, max(0.0, total / norm))
