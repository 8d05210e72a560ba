"""
Input source: pointer position plus named discrete events.

The window layer translates raw device events into `InputEvent`s and
emits them here; the simulation subscribes and never polls devices.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable

from particle_flow2d.core.vector import Vector2


class InputEvent(Enum):
    TOGGLE_SHAPES = "toggle_shapes"
    TOGGLE_FOLLOW = "toggle_follow"
    TOGGLE_FREEZE = "toggle_freeze"
    RESET = "reset"
    TOGGLE_COLLECTIVE = "toggle_collective"
    CYCLE_CURVE_FAMILY = "cycle_curve_family"
    RESIZE = "resize"  # width, height
    SET_SIZE_SCALE = "set_size_scale"  # value
    NUDGE_SIZE_SCALE = "nudge_size_scale"  # direction
    CLICK = "click"  # x, y


Handler = Callable[..., Any]


class InputSource:
    def __init__(self) -> None:
        self.pointer = Vector2(0.0, 0.0)
        self._handlers: dict[InputEvent, list[Handler]] = {}

    def move_pointer(self, x: float, y: float) -> None:
        self.pointer = Vector2(float(x), float(y))

    def subscribe(self, event: InputEvent, handler: Handler) -> None:
        self._handlers.setdefault(event, []).append(handler)

    def unsubscribe(self, event: InputEvent, handler: Handler) -> None:
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def clear(self) -> None:
        self._handlers.clear()

    def emit(self, event: InputEvent, **payload: Any) -> int:
        """Dispatch to every subscriber in subscription order; returns the handler count."""
        handlers = list(self._handlers.get(event, ()))
        for handler in handlers:
            handler(**payload)
        return len(handlers)
