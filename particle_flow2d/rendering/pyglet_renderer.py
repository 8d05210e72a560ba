from __future__ import annotations

import random
from array import array
from typing import Any, Callable, Sequence

from particle_flow2d.core.vector import Vector2
from particle_flow2d.rendering.color import particle_color, trail_fade_rgba
from particle_flow2d.rendering.decorations import LABEL_FONT_SIZE


GLITCH_COPIES = 5
GLITCH_OFFSET = 20.0


class PygletRenderer:
    """
    Renderer backed by a pyglet window.

    Points and polygon edges are buffered between begin_frame and
    end_frame and drawn as two vertex lists. Simulation coordinates are
    y-down; pyglet is y-up, so y is flipped here.
    """

    def __init__(self, window: Any, *, get_glitch_strength: Callable[[], float] | None = None) -> None:
        import pyglet  # type: ignore
        from pyglet import gl  # type: ignore

        self._pyglet = pyglet
        self._gl = gl
        self.window = window
        self._get_glitch_strength = get_glitch_strength
        self._program = pyglet.graphics.get_default_shader()
        self._rng = random.Random()

        self._xyz = array("f")
        self._rgba = array("B")
        self._line_xyz = array("f")
        self._line_rgba = array("B")
        self._point_size = 1.5
        self._point_list = None
        self._point_count = 0
        self._labels: list[Any] = []
        self._label_count = 0

    def _flip(self, v: Vector2) -> tuple[float, float]:
        return float(v.x), float(self.window.height) - float(v.y)

    def begin_frame(self) -> None:
        del self._xyz[:]
        del self._rgba[:]
        del self._line_xyz[:]
        del self._line_rgba[:]
        self._label_count = 0

    def draw_point(self, position: Vector2, hue: float, size: float) -> None:
        x, y = self._flip(position)
        self._xyz.extend((x, y, 0.0))
        self._rgba.extend(particle_color(hue))
        self._point_size = float(size)

    def draw_polygon(self, vertices: Sequence[Vector2], stroke_color: tuple[int, int, int, int], stroke_width: float = 1.0) -> None:  # noqa: ARG002
        n = len(vertices)
        if n < 2:
            return
        for i in range(n):
            ax, ay = self._flip(vertices[i])
            bx, by = self._flip(vertices[(i + 1) % n])
            self._line_xyz.extend((ax, ay, 0.0, bx, by, 0.0))
            self._line_rgba.extend(stroke_color)
            self._line_rgba.extend(stroke_color)

    def draw_label(self, text: str, position: Vector2, color: tuple[int, int, int, int]) -> None:
        if self._label_count >= len(self._labels):
            self._labels.append(
                self._pyglet.text.Label(
                    text,
                    font_size=LABEL_FONT_SIZE,
                    anchor_x="center",
                    anchor_y="center",
                )
            )
        label = self._labels[self._label_count]
        label.text = text
        label.x, label.y = self._flip(position)
        label.color = tuple(color)
        self._label_count += 1

    def end_frame(self) -> None:
        from pyglet.math import Mat4, Vec3  # type: ignore

        gl = self._gl
        strength = float(self._get_glitch_strength()) if self._get_glitch_strength is not None else 0.0
        if strength > 0.0:
            offset = GLITCH_OFFSET * strength
            for _ in range(GLITCH_COPIES):
                dx = self._rng.uniform(-offset, offset)
                dy = self._rng.uniform(-offset, offset)
                self.window.view = Mat4.from_translation(Vec3(dx, dy, 0.0))
                self._draw_buffers(gl)
            self.window.view = Mat4()
        else:
            self._draw_buffers(gl)

    def _draw_buffers(self, gl: Any) -> None:
        for label in self._labels[: self._label_count]:
            label.draw()

        count = len(self._xyz) // 3
        if count:
            self._program.use()
            gl.glPointSize(max(1.0, self._point_size))
            if self._point_list is None:
                self._point_count = count
                self._point_list = self._program.vertex_list(
                    count,
                    gl.GL_POINTS,
                    position=("f", self._xyz),
                    colors=("Bn", self._rgba),
                )
            else:
                if count != self._point_count:
                    self._point_count = count
                    self._point_list.resize(count)
                self._point_list.position[:] = self._xyz
                self._point_list.colors[:] = self._rgba
            self._point_list.draw(gl.GL_POINTS)
            self._program.stop()

        line_count = len(self._line_xyz) // 3
        if line_count:
            self._program.use()
            vl = self._program.vertex_list(
                line_count,
                gl.GL_LINES,
                position=("f", self._line_xyz),
                colors=("Bn", self._line_rgba),
            )
            vl.draw(gl.GL_LINES)
            vl.delete()
            self._program.stop()


class TrailCanvas:
    """
    Offscreen color buffer that keeps the previous frames.

    Each frame paints the background over the old image at a low alpha
    before the scene is drawn, so moving particles leave fading streaks.
    The canvas is fully cleared on its first frame and after a resize.
    """

    def __init__(self, window: Any) -> None:
        import pyglet  # type: ignore

        self._pyglet = pyglet
        self.window = window
        self._texture = None
        self._fbo = None
        self._fade = pyglet.shapes.Rectangle(0, 0, window.width, window.height, color=(0, 0, 0, 0))
        self._needs_clear = True
        self.resize(window.width, window.height)

    def resize(self, width: int, height: int) -> None:
        pyglet = self._pyglet
        width, height = max(1, int(width)), max(1, int(height))
        if self._fbo is not None:
            self._fbo.delete()
        self._texture = pyglet.image.Texture.create(width, height)
        self._fbo = pyglet.image.Framebuffer()
        self._fbo.attach_texture(self._texture)
        self._fade.width = width
        self._fade.height = height
        self._needs_clear = True

    def draw(self, background: tuple[int, int, int], alpha: float, draw_scene: Callable[[], None]) -> None:
        gl = self._pyglet.gl
        self._fbo.bind()
        gl.glViewport(0, 0, self._texture.width, self._texture.height)
        if self._needs_clear:
            r, g, b = background
            gl.glClearColor(r / 255.0, g / 255.0, b / 255.0, 1.0)
            gl.glClear(gl.GL_COLOR_BUFFER_BIT)
            self._needs_clear = False
        else:
            self._fade.color = trail_fade_rgba(background, alpha)
            self._fade.draw()
        draw_scene()
        self._fbo.unbind()

        fb_w, fb_h = self.window.get_framebuffer_size()
        gl.glViewport(0, 0, fb_w, fb_h)
        self.window.clear()
        self._texture.blit(0, 0, width=self.window.width, height=self.window.height)


def run_pyglet(
    *,
    width: int,
    height: int,
    get_background: Callable[[], tuple[int, int, int]],
    step_simulation: Callable[[float], None],
    render_frame: Callable[[PygletRenderer], None],
    on_key: Callable[[str], None],
    on_pointer: Callable[[float, float], None],
    on_click: Callable[[float, float], None],
    resize_area: Callable[[int, int], None],
    get_glitch_strength: Callable[[], float] | None = None,
    trail_alpha: float = 0.0,
    get_overlay_text: Callable[[], str] | None = None,
    get_caption: Callable[[], str] | None = None,
    target_fps: int,
    title: str,
    mac_compat: bool = False,
) -> None:
    try:
        import pyglet  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("Missing dependency: install pyglet (pip install pyglet).") from e

    from pyglet import gl  # type: ignore
    from pyglet.window import key  # type: ignore

    if mac_compat:
        pyglet.options["shadow_window"] = False
        pyglet.options["vsync"] = True

    window = pyglet.window.Window(width=width, height=height, caption=title, resizable=True, vsync=True)
    gl.glEnable(gl.GL_BLEND)
    gl.glBlendFunc(gl.GL_SRC_ALPHA, gl.GL_ONE_MINUS_SRC_ALPHA)

    renderer = PygletRenderer(window, get_glitch_strength=get_glitch_strength)
    trails = TrailCanvas(window) if trail_alpha > 0.0 else None

    overlay_label = pyglet.text.Label(
        "",
        x=10,
        y=window.height - 10,
        anchor_x="left",
        anchor_y="top",
        font_size=12,
        multiline=True,
        width=max(200, window.width - 20),
        color=(230, 230, 240, 255),
    )

    mapping = {
        key.SPACE: "space",
        key.R: "r",
        key.S: "s",
        key.M: "m",
        key.C: "c",
        key.N: "n",
        key.F1: "f1",
        key.TAB: "tab",
        key.ESCAPE: "esc",
        key.PLUS: "plus",
        key.EQUAL: "plus",
        key.NUM_ADD: "plus",
        key.MINUS: "minus",
        key.NUM_SUBTRACT: "minus",
    }

    @window.event
    def on_draw() -> None:
        background = get_background()
        if trails is not None:
            trails.draw(background, trail_alpha, lambda: render_frame(renderer))
        else:
            r, g, b = background
            gl.glClearColor(r / 255.0, g / 255.0, b / 255.0, 1.0)
            window.clear()
            render_frame(renderer)
        if get_overlay_text is not None:
            text = get_overlay_text()
            if text:
                overlay_label.text = text
                overlay_label.y = window.height - 10
                overlay_label.width = max(200, window.width - 20)
                overlay_label.draw()

    @window.event
    def on_key_press(symbol: int, modifiers: int) -> None:  # noqa: ARG001
        k = mapping.get(symbol)
        if k is None:
            return
        if k == "esc":
            pyglet.app.exit()
            return
        on_key(k)

    @window.event
    def on_mouse_motion(x: int, y: int, dx: int, dy: int) -> None:  # noqa: ARG001
        on_pointer(float(x), float(window.height - y))

    @window.event
    def on_mouse_drag(x: int, y: int, dx: int, dy: int, buttons: int, modifiers: int) -> None:  # noqa: ARG001
        on_pointer(float(x), float(window.height - y))

    @window.event
    def on_mouse_press(x: int, y: int, button: int, modifiers: int) -> None:  # noqa: ARG001
        on_click(float(x), float(window.height - y))

    @window.event
    def on_resize(w: int, h: int) -> None:
        if w > 0 and h > 0:
            resize_area(int(w), int(h))
            if trails is not None:
                trails.resize(w, h)

    def tick(dt: float) -> None:
        step_simulation(dt)
        window.set_caption(get_caption() if get_caption is not None else title)

    pyglet.clock.schedule_interval(tick, 1.0 / max(10, target_fps))
    pyglet.app.run()
