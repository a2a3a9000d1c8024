from __future__ import annotations

from typing import Any, Callable

from canvas_particles.core.scheduler import FrameScheduler
from canvas_particles.rendering.color_mapper import hex_to_rgba, parse_color


class PygletSurface:
    """
    ``Surface`` backed by ``pyglet.shapes`` in one batch.

    Draw calls build shapes in canvas coordinates (origin top-left); they
    are flipped to GL coordinates here and drawn on the next ``on_draw``.
    """

    def __init__(self, width: float, height: float) -> None:
        try:
            import pyglet  # type: ignore
        except Exception as e:  # pragma: no cover
            raise RuntimeError("Missing dependency: install pyglet (pip install pyglet).") from e

        self._pyglet = pyglet
        self.width = float(width)
        self.height = float(height)
        self.background: Any = None
        self.batch = pyglet.graphics.Batch()
        self._shapes: list[Any] = []

    def clear(self) -> None:
        self._shapes.clear()
        self.batch = self._pyglet.graphics.Batch()

    def fill_circle(self, x: float, y: float, radius: float, color: str) -> None:
        self._shapes.append(
            self._pyglet.shapes.Circle(x, self.height - y, radius, color=hex_to_rgba(color), batch=self.batch)
        )

    def fill_rect(self, x: float, y: float, w: float, h: float, color: str) -> None:
        self._shapes.append(
            self._pyglet.shapes.Rectangle(x, self.height - y - h, w, h, color=hex_to_rgba(color), batch=self.batch)
        )

    def stroke_line(self, x1: float, y1: float, x2: float, y2: float, color: str, width: float) -> None:
        # fifth positional argument is the line thickness across pyglet 2.x
        self._shapes.append(
            self._pyglet.shapes.Line(
                x1, self.height - y1, x2, self.height - y2, width,
                color=hex_to_rgba(color),
                batch=self.batch,
            )
        )

    def set_background(self, value: Any) -> None:
        from pyglet import gl  # type: ignore

        self.background = value
        if value is None:
            r, g, b, a = 0, 0, 0, 0
        else:
            r, g, b, a = parse_color(str(value))
        gl.glClearColor(r / 255.0, g / 255.0, b / 255.0, a / 255.0)

    def draw(self) -> None:
        self.batch.draw()


class PygletFrameScheduler(FrameScheduler):
    """Runs pending frame callbacks from ``pyglet.clock`` at a fixed rate."""

    def __init__(self) -> None:
        super().__init__()
        self._scheduled = False

    def start(self, target_fps: int) -> None:
        import pyglet  # type: ignore

        if self._scheduled:
            return
        pyglet.clock.schedule_interval(self._tick, 1.0 / max(10, target_fps))
        self._scheduled = True

    def stop(self) -> None:
        import pyglet  # type: ignore

        if not self._scheduled:
            return
        pyglet.clock.unschedule(self._tick)
        self._scheduled = False

    def _tick(self, dt: float) -> None:  # noqa: ARG002
        self.run_pending()


def run_pyglet(
    *,
    width: int,
    height: int,
    title: str,
    target_fps: int,
    build: Callable[[PygletSurface, PygletFrameScheduler], Any],
    on_key: Callable[[str], None] | None = None,
    on_click: Callable[[float, float], None] | None = None,
    on_tick: Callable[[], None] | None = None,
    get_caption: Callable[[], str] | None = None,
) -> None:
    """
    Open a window and run the pyglet event loop.

    ``build(surface, scheduler)`` must return the frame driver (anything with
    ``on_resize``, ``on_mouse_move`` and ``on_mouse_leave``). Pointer
    coordinates are converted to canvas coordinates (y down) before they are
    forwarded.
    """
    try:
        import pyglet  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("Missing dependency: install pyglet (pip install pyglet).") from e

    from pyglet import gl  # type: ignore

    window = pyglet.window.Window(width=width, height=height, caption=title, resizable=True, vsync=True)
    gl.glEnable(gl.GL_BLEND)
    gl.glBlendFunc(gl.GL_SRC_ALPHA, gl.GL_ONE_MINUS_SRC_ALPHA)

    surface = PygletSurface(window.width, window.height)
    scheduler = PygletFrameScheduler()
    driver = build(surface, scheduler)

    @window.event
    def on_draw() -> None:
        window.clear()
        surface.draw()

    @window.event
    def on_resize(w: int, h: int) -> None:
        driver.on_resize(w, h)

    @window.event
    def on_mouse_motion(x: int, y: int, dx: int, dy: int) -> None:  # noqa: ARG001
        driver.on_mouse_move(float(x), surface.height - float(y))

    @window.event
    def on_mouse_drag(x: int, y: int, dx: int, dy: int, buttons: int, modifiers: int) -> None:  # noqa: ARG001
        driver.on_mouse_move(float(x), surface.height - float(y))

    @window.event
    def on_mouse_leave(x: int, y: int) -> None:  # noqa: ARG001
        driver.on_mouse_leave()

    @window.event
    def on_mouse_press(x: int, y: int, button: int, modifiers: int) -> None:  # noqa: ARG001
        if on_click is not None:
            on_click(float(x), surface.height - float(y))

    @window.event
    def on_key_press(symbol: int, modifiers: int) -> None:  # noqa: ARG001
        from pyglet.window import key  # type: ignore

        mapping = {
            key.SPACE: "space",
            key.R: "r",
            key.M: "m",
            key.C: "c",
            key.B: "b",
        }
        name = mapping.get(symbol)
        if name is not None and on_key is not None:
            on_key(name)

    def tick(dt: float) -> None:  # noqa: ARG001
        if on_tick is not None:
            on_tick()
        window.set_caption(get_caption() if get_caption is not None else title)

    scheduler.start(target_fps)
    pyglet.clock.schedule_interval(tick, 0.5)
    pyglet.app.run()
