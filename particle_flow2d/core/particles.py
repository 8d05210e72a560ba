from __future__ import annotations

import math
import random
from dataclasses import dataclass

import numpy as np

from particle_flow2d.core.curves import CurveFamily, CurveSampler
from particle_flow2d.core.flow_field import FlowFieldGrid
from particle_flow2d.core.modes import SteeringMode
from particle_flow2d.core.vector import ZERO, Vector2
from particle_flow2d.params import FlowParams


DEFAULT_MAX_SPEED = 4.0
FOLLOW_STRENGTH = 0.5
HUE_STEP = 0.2
# Above this population the integration pass is vectorized.
NUMPY_THRESHOLD = 50


@dataclass(slots=True)
class Particle:
    position: Vector2
    velocity: Vector2 = ZERO
    acceleration: Vector2 = ZERO
    max_speed: float = DEFAULT_MAX_SPEED
    hue: float = 0.0
    index: int = 0

    def apply_force(self, force: Vector2) -> None:
        self.acceleration = self.acceleration + force

    def follow(self, field: FlowFieldGrid) -> None:
        self.apply_force(field.lookup(self.position))

    def seek(self, target: Vector2, strength: float = FOLLOW_STRENGTH) -> None:
        self.apply_force((target - self.position).set_mag(strength))

    def update(self) -> None:
        self.velocity = (self.velocity + self.acceleration).limit(self.max_speed)
        self.position = self.position + self.velocity
        self.acceleration = ZERO

    def edges(self, width: float, height: float) -> None:
        x, y = self.position.x, self.position.y
        if x > width:
            x = 0.0
        if x < 0:
            x = float(width)
        if y > height:
            y = 0.0
        if y < 0:
            y = float(height)
        if x != self.position.x or y != self.position.y:
            self.position = Vector2(x, y)

    def advance_hue(self, step: float = HUE_STEP) -> float:
        self.hue = (self.hue + step) % 360.0
        return self.hue


class ParticleSystem:
    """
    The full particle population and its per-tick update pass.

    Each particle only reads the shared grid/curve state and writes its own
    fields, so the order of the pass does not matter.
    """

    def __init__(self, params: FlowParams) -> None:
        self.params = params
        self.width = float(params.width)
        self.height = float(params.height)
        self._rng = random.Random(params.seed)
        self.particles: list[Particle] = []
        self.reset()

    def __len__(self) -> int:
        return len(self.particles)

    def __iter__(self):
        return iter(self.particles)

    def reset(self) -> None:
        p = self.params
        self._rng = random.Random(p.seed)
        self.particles = [self._spawn(i) for i in range(int(p.particle_count))]

    def _spawn(self, index: int) -> Particle:
        return Particle(
            position=Vector2(self._rng.uniform(0.0, self.width), self._rng.uniform(0.0, self.height)),
            max_speed=float(self.params.max_speed),
            hue=self._rng.uniform(0.0, 360.0),
            index=index,
        )

    def set_area(self, width: float, height: float) -> None:
        self.width = float(width)
        self.height = float(height)

    def resize_population(self, new_count: int) -> None:
        """Grow or shrink the population; surviving particles keep their index."""
        new_count = max(1, int(new_count))
        n = len(self.particles)
        if new_count < n:
            del self.particles[new_count:]
        else:
            self.particles.extend(self._spawn(i) for i in range(n, new_count))
        self.params.particle_count = new_count

    # -------------------------------------------------------------------------
    # Update pass
    # -------------------------------------------------------------------------

    def apply_steering(
        self,
        mode: SteeringMode,
        *,
        grid: FlowFieldGrid,
        sampler: CurveSampler,
        curve_family: CurveFamily,
        pointer: Vector2 | None = None,
    ) -> None:
        strength = float(self.params.follow_strength)
        if mode is SteeringMode.COLLECTIVE_TARGET:
            targets = sampler.targets(curve_family, len(self.particles))
            for pt in self.particles:
                pt.seek(targets[pt.index % len(targets)], strength)
        elif mode is SteeringMode.FOLLOW_POINT:
            if pointer is None:
                return
            for pt in self.particles:
                pt.seek(pointer, strength)
        else:
            for pt in self.particles:
                pt.follow(grid)

    def update(
        self,
        mode: SteeringMode,
        *,
        grid: FlowFieldGrid,
        sampler: CurveSampler,
        curve_family: CurveFamily,
        pointer: Vector2 | None = None,
    ) -> None:
        """Steer, integrate, wrap and recolor every particle once."""
        self.apply_steering(mode, grid=grid, sampler=sampler, curve_family=curve_family, pointer=pointer)
        if len(self.particles) > NUMPY_THRESHOLD:
            self._integrate_numpy()
        else:
            self._integrate_python()

    def _integrate_python(self) -> None:
        hue_step = float(self.params.hue_step)
        for pt in self.particles:
            pt.update()
            pt.edges(self.width, self.height)
            pt.advance_hue(hue_step)

    def _integrate_numpy(self) -> None:
        """Vectorized integration; same semantics as Particle.update + edges."""
        n = len(self.particles)
        pos = np.empty((n, 2), dtype=np.float64)
        vel = np.empty((n, 2), dtype=np.float64)
        acc = np.empty((n, 2), dtype=np.float64)
        limits = np.empty(n, dtype=np.float64)
        for i, pt in enumerate(self.particles):
            pos[i, 0] = pt.position.x
            pos[i, 1] = pt.position.y
            vel[i, 0] = pt.velocity.x
            vel[i, 1] = pt.velocity.y
            acc[i, 0] = pt.acceleration.x
            acc[i, 1] = pt.acceleration.y
            limits[i] = pt.max_speed

        vel += acc

        speed2 = vel[:, 0] * vel[:, 0] + vel[:, 1] * vel[:, 1]
        fast = speed2 > limits * limits
        if np.any(fast):
            scale = limits[fast] / np.sqrt(speed2[fast])
            vel[fast] *= scale[:, np.newaxis]

        pos += vel

        # Wrap-around, checked in the same order as Particle.edges.
        w = self.width
        h = self.height
        xs = pos[:, 0]
        ys = pos[:, 1]
        xs[xs > w] = 0.0
        xs[xs < 0.0] = w
        ys[ys > h] = 0.0
        ys[ys < 0.0] = h

        hue_step = float(self.params.hue_step)
        for i, pt in enumerate(self.particles):
            pt.position = Vector2(float(pos[i, 0]), float(pos[i, 1]))
            pt.velocity = Vector2(float(vel[i, 0]), float(vel[i, 1]))
            pt.acceleration = ZERO
            pt.advance_hue(hue_step)

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------

    def positions(self) -> list[tuple[float, float]]:
        return [(pt.position.x, pt.position.y) for pt in self.particles]

    def validate_state(self) -> list[str]:
        issues: list[str] = []
        eps = 1e-9
        for i, pt in enumerate(self.particles):
            if not (pt.position.is_finite() and pt.velocity.is_finite()):
                issues.append(f"particle {i} has non-finite position/velocity")
                continue
            if pt.velocity.mag() > pt.max_speed + eps:
                issues.append(f"particle {i} exceeds max speed")
            if pt.acceleration != ZERO:
                issues.append(f"particle {i} has pending acceleration")
            if not (0.0 <= pt.hue < 360.0) or math.isnan(pt.hue):
                issues.append(f"particle {i} hue out of range")
        return issues
