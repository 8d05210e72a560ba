from __future__ import annotations

import math

from particle_flow2d.core.area import grid_shape
from particle_flow2d.core.clock import SimulationClock
from particle_flow2d.core.curves import CurveFamily, CurveSampler
from particle_flow2d.core.flow_field import FlowFieldGrid
from particle_flow2d.core.modes import ModeController, ModeState, SteeringMode
from particle_flow2d.core.noise import NoiseField
from particle_flow2d.core.particles import ParticleSystem
from particle_flow2d.core.vector import Vector2
from particle_flow2d.params import FlowParams
from particle_flow2d.rendering.decorations import LABEL_TEXT, DecorPolygon, Decorations
from particle_flow2d.rendering.renderer import Renderer
from particle_flow2d.ui.input import InputEvent, InputSource


GLITCH_EFFECT = "glitch"
DEFAULT_DT = 1.0 / 60.0


class FlowFieldSim:
    def __init__(self, params: FlowParams) -> None:
        self.params = params
        # Builds (and validates) the grid first so a bad area fails before anything else exists.
        self.grid = FlowFieldGrid(
            params.width,
            params.height,
            cell_size=params.cell_size,
            increment=params.noise_increment,
        )
        self.noise = NoiseField(
            params.seed,
            octaves=params.noise_octaves,
            falloff=params.noise_falloff,
            z_increment=params.z_increment,
        )
        self.sampler = CurveSampler(params.width, params.height)
        self.modes = ModeController(
            curve_family=CurveFamily(params.curve_family),
            size_scale=params.size_scale,
            show_shapes=params.shapes_enabled,
        )
        self.clock = SimulationClock()
        self.particles = ParticleSystem(params)
        self.decorations = self._make_decorations()
        # Rebuilt once per tick; render() only reads them.
        self.polygons: list[DecorPolygon] = self.decorations.polygons(0)
        self.last_state: ModeState | None = None
        self._input: InputSource | None = None

    def _make_decorations(self) -> Decorations:
        p = self.params
        return Decorations(
            p.width,
            p.height,
            polygon_count=p.polygon_count,
            label_count=p.label_count,
            seed=p.seed,
        )

    # -------------------------------------------------------------------------
    # Tick
    # -------------------------------------------------------------------------

    def step(self, dt: float = DEFAULT_DT, pointer: Vector2 | None = None) -> bool:
        """
        Advance one tick.

        Order: mode snapshot, grid regeneration, noise advance, particle
        pass, clock. Returns False (and changes nothing) while frozen.
        """
        if self.modes.frozen:
            return False

        state = self.modes.snapshot()
        self.grid.regenerate(self.noise, self.noise.z_offset)
        self.noise.advance()

        if pointer is None and self._input is not None:
            pointer = self._input.pointer
        self.particles.update(
            state.steering_mode,
            grid=self.grid,
            sampler=self.sampler,
            curve_family=state.curve_family,
            pointer=pointer,
        )
        if state.show_shapes:
            self.decorations.update(self.clock.ticks)
            self.polygons = self.decorations.polygons(self.clock.ticks)

        self.clock.tick(dt)
        self.last_state = state
        return True

    def render(self, renderer: Renderer) -> None:
        state = self.modes.snapshot()
        size = float(self.params.point_size) * state.size_scale

        renderer.begin_frame()
        if state.show_shapes:
            for label in self.decorations.labels:
                renderer.draw_label(LABEL_TEXT, label.position, self.decorations.label_color(label))
        for pt in self.particles:
            renderer.draw_point(pt.position, pt.hue, size)
        if state.show_shapes:
            for poly in self.polygons:
                renderer.draw_polygon(poly.vertices, poly.color, poly.stroke_width)
        renderer.end_frame()

    # -------------------------------------------------------------------------
    # Control
    # -------------------------------------------------------------------------

    def resize(self, width: int, height: int) -> None:
        """Reallocate the grid and drop cached curves. Raises AreaError for degenerate sizes."""
        cols, rows = grid_shape(width, height, self.grid.cell_size)
        self.grid.resize(width, height)
        self.sampler.resize(width, height)
        self.particles.set_area(width, height)
        self.decorations.resize(width, height)
        self.polygons = self.decorations.polygons(self.clock.ticks)
        self.params.width = int(width)
        self.params.height = int(height)
        print(f"[resize] {width}x{height} -> {cols}x{rows} cells")

    def reset(self) -> None:
        self.noise.reset()
        self.particles.reset()
        self.modes.reset()
        self.clock.reset()
        self.decorations = self._make_decorations()
        self.polygons = self.decorations.polygons(0)
        self.last_state = None

    def toggle_freeze(self) -> bool:
        frozen = self.modes.toggle_freeze()
        self.clock.paused = frozen
        return frozen

    def click(self, x: float, y: float) -> str:
        if self.modes.frozen:
            return "ignored"
        point = Vector2(float(x), float(y))
        if self.modes.show_shapes and self.decorations.label_at(point) is not None:
            self.decorations.reroll_background()
            return "background"
        self.clock.start_effect(GLITCH_EFFECT, self.params.glitch_duration)
        return GLITCH_EFFECT

    @property
    def glitch_active(self) -> bool:
        return not self.modes.frozen and self.clock.effect_active(GLITCH_EFFECT)

    @property
    def glitch_strength(self) -> float:
        """1.0 right after a click, fading to 0.0 when the glitch ends."""
        if not self.glitch_active:
            return 0.0
        return 1.0 - self.clock.effect_progress(GLITCH_EFFECT)

    def background(self) -> tuple[int, int, int]:
        if self.decorations.background_hsb == (0.0, 0.0, 0.0):
            return tuple(self.params.background)  # type: ignore[return-value]
        return self.decorations.background()

    # -------------------------------------------------------------------------
    # Input wiring
    # -------------------------------------------------------------------------

    def bind_input(self, source: InputSource) -> None:
        self._input = source
        source.subscribe(InputEvent.TOGGLE_SHAPES, lambda: self._report("shapes", self.modes.toggle_shapes()))
        source.subscribe(InputEvent.TOGGLE_FOLLOW, lambda: self._report("follow", self.modes.toggle_follow()))
        source.subscribe(InputEvent.TOGGLE_FREEZE, lambda: self._report("freeze", self.toggle_freeze()))
        source.subscribe(InputEvent.TOGGLE_COLLECTIVE, lambda: self._report("collective", self.modes.toggle_collective()))
        source.subscribe(InputEvent.CYCLE_CURVE_FAMILY, self._on_cycle_family)
        source.subscribe(InputEvent.RESET, self.reset)
        source.subscribe(InputEvent.RESIZE, self.resize)
        source.subscribe(InputEvent.SET_SIZE_SCALE, self.modes.set_size_scale)
        source.subscribe(InputEvent.NUDGE_SIZE_SCALE, self.modes.nudge_size_scale)
        source.subscribe(InputEvent.CLICK, self.click)

    def _report(self, name: str, enabled: bool) -> None:
        print(f"[mode] {name} {'on' if enabled else 'off'}")

    def _on_cycle_family(self) -> None:
        family = self.modes.cycle_curve_family()
        print(f"[mode] curve {family.label}")

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------

    def caption(self) -> str:
        state = self.modes.snapshot()
        mode = state.steering_mode.value
        if state.steering_mode is SteeringMode.COLLECTIVE_TARGET:
            mode = f"{mode}:{state.curve_family.label}"
        run = "FROZEN" if state.frozen else "RUN"
        return (
            f"Flow | t={self.clock.elapsed:7.1f}s | {run} | {mode} | "
            f"N={len(self.particles)} | size x{state.size_scale:.1f}"
        )

    def validate_state(self) -> list[str]:
        issues: list[str] = []
        eps = 1e-9
        if self.clock.ticks > 0:
            for i, m in enumerate(self.grid.magnitudes()):
                if not math.isfinite(m) or abs(m - 1.0) > eps:
                    issues.append(f"grid cell {i} is not a unit vector")
        if (self.grid.width, self.grid.height) != (int(self.sampler.width), int(self.sampler.height)):
            issues.append("grid and curve sampler disagree on area size")
        issues.extend(self.particles.validate_state())
        return issues
