from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from particle_flow2d.core.area import AreaError
from particle_flow2d.core.sim import FlowFieldSim
from particle_flow2d.params import FlowParams
from particle_flow2d.rendering.renderer import RecordingRenderer
from particle_flow2d.ui.callbacks import KeyHandler
from particle_flow2d.ui.input import InputEvent, InputSource

# Host frame time is clamped so a stalled window does not produce a huge jump.
MAX_FRAME_DT = 0.1
AUTORELOAD_INTERVAL_S = 0.5


class FlowFieldApp:
    def __init__(self, params: FlowParams | None = None, params_path: Path | None = None) -> None:
        self.params_path = params_path or (Path(__file__).resolve().parent / "params.json")
        self.params = params if params is not None else self._load_initial_params()
        for warning in self.params.validate():
            print(f"[params] warning: {warning}", file=sys.stderr)

        self.sim = FlowFieldSim(self.params)
        self.input = InputSource()
        self.sim.bind_input(self.input)

        self._help_open = True
        self._params_error = ""
        self.keys = KeyHandler(
            self.input,
            get_help_open=lambda: self._help_open,
            set_help_open=self._set_help_open,
        )

        self._last_params_mtime: float | None = self.params_path.stat().st_mtime if self.params_path.exists() else None
        self._last_autoreload = time.monotonic()

    def _set_help_open(self, value: bool) -> None:
        self._help_open = bool(value)

    def run(self) -> None:
        from particle_flow2d.rendering.pyglet_renderer import run_pyglet

        run_pyglet(
            width=self.params.width,
            height=self.params.height,
            get_background=lambda: self.sim.background(),
            step_simulation=self._step,
            render_frame=lambda renderer: self.sim.render(renderer),
            on_key=self._on_key,
            on_pointer=self.input.move_pointer,
            on_click=lambda x, y: self.input.emit(InputEvent.CLICK, x=x, y=y),
            resize_area=self._on_resize,
            get_glitch_strength=lambda: self.sim.glitch_strength,
            trail_alpha=self.params.trail_alpha,
            get_overlay_text=self._get_overlay_text,
            get_caption=lambda: self.sim.caption(),
            target_fps=self.params.target_fps,
            title="Flow Field",
            mac_compat=self.params.mac_compat,
        )

    def run_headless(self, ticks: int, *, dt: float = 1.0 / 60.0) -> RecordingRenderer:
        renderer = RecordingRenderer()
        for _ in range(max(0, int(ticks))):
            self.sim.step(dt)
            self.sim.render(renderer)
        return renderer

    # -------------------------------------------------------------------------
    # Params
    # -------------------------------------------------------------------------

    def _load_initial_params(self) -> FlowParams:
        if self.params_path.exists():
            try:
                return FlowParams.load(self.params_path)
            except (OSError, ValueError, TypeError) as e:
                print(f"[params] {self.params_path} unreadable, using defaults: {e}", file=sys.stderr)
        return FlowParams().clamp()

    def _maybe_autoreload(self) -> None:
        if not self.params_path.exists():
            return
        now = time.monotonic()
        if (now - self._last_autoreload) < AUTORELOAD_INTERVAL_S:
            return
        self._last_autoreload = now
        mtime = self.params_path.stat().st_mtime
        if self._last_params_mtime is not None and mtime <= self._last_params_mtime:
            return
        self._last_params_mtime = mtime
        self._load_params()

    def _load_params(self) -> None:
        try:
            loaded = FlowParams.load(self.params_path)
        except (OSError, ValueError, TypeError) as e:
            self._params_error = f"Params reload failed: {e}"
            print(self._params_error, file=sys.stderr)
            return
        # The window owns the area; a reload never resizes it.
        loaded.width = self.params.width
        loaded.height = self.params.height
        try:
            sim = FlowFieldSim(loaded)
        except AreaError as e:
            self._params_error = f"Params reload failed: {e}"
            print(self._params_error, file=sys.stderr)
            return

        self._params_error = ""
        self.params = loaded
        self.sim = sim
        self.input.clear()
        self.sim.bind_input(self.input)
        print(f"[params] reloaded {self.params_path}")

    # -------------------------------------------------------------------------
    # Host callbacks
    # -------------------------------------------------------------------------

    def _step(self, dt: float) -> None:
        self._maybe_autoreload()
        self.sim.step(max(0.0, min(MAX_FRAME_DT, float(dt))))

    def _on_key(self, k: str) -> None:
        self.keys.handle_key(k)

    def _on_resize(self, width: int, height: int) -> None:
        try:
            self.input.emit(InputEvent.RESIZE, width=width, height=height)
        except AreaError as e:
            print(f"[resize] rejected: {e}", file=sys.stderr)

    def _get_overlay_text(self) -> str:
        lines: list[str] = []
        if self._help_open:
            lines.append(KeyHandler.HELP_TEXT)
            modes = self.sim.modes
            if modes.collective:
                lines.append(f"Current: {modes.curve_family.label}")
        if self._params_error:
            lines.append(self._params_error)
        return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Flow field particle simulation")
    parser.add_argument("--params", type=Path, default=None, help="Path to a params.json file")
    parser.add_argument("--particles", "-n", type=int, default=None, help="Particle count override")
    parser.add_argument("--seed", type=int, default=None, help="Random seed override")
    parser.add_argument("--width", type=int, default=None, help="Initial area width")
    parser.add_argument("--height", type=int, default=None, help="Initial area height")
    parser.add_argument("--headless", type=int, default=0, metavar="TICKS", help="Run TICKS ticks without a window")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    params: FlowParams | None = None
    if args.params is not None:
        try:
            params = FlowParams.load(args.params)
        except (OSError, ValueError, TypeError) as e:
            print(f"[params] {args.params}: {e}", file=sys.stderr)
            return 2
    overrides = {"particle_count": args.particles, "seed": args.seed, "width": args.width, "height": args.height}
    if any(v is not None for v in overrides.values()):
        params = params or FlowParams()
        for name, value in overrides.items():
            if value is not None:
                setattr(params, name, value)
        params.clamp()

    try:
        app = FlowFieldApp(params, params_path=args.params)
    except AreaError as e:
        print(f"[params] {e}", file=sys.stderr)
        return 2

    if args.headless > 0:
        renderer = app.run_headless(args.headless)
        issues = app.sim.validate_state()
        print(f"[headless] {app.sim.caption()} | {renderer.summary()}")
        for issue in issues[:10]:
            print(f"[headless] {issue}", file=sys.stderr)
        return 1 if issues else 0

    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
