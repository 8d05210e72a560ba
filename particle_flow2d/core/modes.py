"""
Mode state for the simulation.

Only input handlers write to the ModeController. The tick reads it once
through `snapshot()`, so a handler that fires between two ticks can never
leave a tick half in one mode and half in another.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from particle_flow2d.core.curves import CurveFamily


SIZE_SCALE_MIN = 0.5
SIZE_SCALE_MAX = 5.0
SIZE_SCALE_STEP = 0.1


class SteeringMode(Enum):
    FLOW_FIELD = "flow"
    FOLLOW_POINT = "follow"
    COLLECTIVE_TARGET = "collective"


@dataclass(frozen=True, slots=True)
class ModeState:
    steering_mode: SteeringMode
    curve_family: CurveFamily
    size_scale: float
    show_shapes: bool
    frozen: bool


class ModeController:
    def __init__(
        self,
        *,
        curve_family: CurveFamily = CurveFamily.STAR,
        size_scale: float = 1.0,
        show_shapes: bool = True,
    ) -> None:
        self._defaults = (curve_family, size_scale, show_shapes)
        self.follow_pointer = False
        self.collective = False
        self.frozen = False
        self.curve_family = curve_family
        self.size_scale = 1.0
        self.show_shapes = bool(show_shapes)
        self.set_size_scale(size_scale)

    def reset(self) -> None:
        family, scale, shapes = self._defaults
        self.follow_pointer = False
        self.collective = False
        self.frozen = False
        self.curve_family = family
        self.show_shapes = shapes
        self.set_size_scale(scale)

    @property
    def steering_mode(self) -> SteeringMode:
        # Collective mode overrides flow/follow whenever it is on.
        if self.collective:
            return SteeringMode.COLLECTIVE_TARGET
        if self.follow_pointer:
            return SteeringMode.FOLLOW_POINT
        return SteeringMode.FLOW_FIELD

    def toggle_follow(self) -> bool:
        self.follow_pointer = not self.follow_pointer
        return self.follow_pointer

    def toggle_collective(self) -> bool:
        self.collective = not self.collective
        return self.collective

    def toggle_shapes(self) -> bool:
        self.show_shapes = not self.show_shapes
        return self.show_shapes

    def toggle_freeze(self) -> bool:
        self.frozen = not self.frozen
        return self.frozen

    def cycle_curve_family(self) -> CurveFamily:
        self.curve_family = self.curve_family.next()
        return self.curve_family

    def set_size_scale(self, value: float) -> float:
        self.size_scale = min(SIZE_SCALE_MAX, max(SIZE_SCALE_MIN, float(value)))
        return self.size_scale

    def nudge_size_scale(self, direction: int) -> float:
        return self.set_size_scale(round(self.size_scale + direction * SIZE_SCALE_STEP, 6))

    def snapshot(self) -> ModeState:
        return ModeState(
            steering_mode=self.steering_mode,
            curve_family=self.curve_family,
            size_scale=self.size_scale,
            show_shapes=self.show_shapes,
            frozen=self.frozen,
        )
