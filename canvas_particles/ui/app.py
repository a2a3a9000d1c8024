from __future__ import annotations

import argparse
import logging
import sys
import time
from dataclasses import asdict
from pathlib import Path

from canvas_particles.core.driver import CanvasParticles
from canvas_particles.params import MOUSE_DRAG, MOUSE_OFF, MOUSE_PUSH, ParticlesParams
from canvas_particles.rendering.pyglet_renderer import PygletFrameScheduler, PygletSurface, run_pyglet
from canvas_particles.utils.config_groups import MENU_GROUPS, WINDOW_KEYS, get_menu_group_title, get_param_hint

DEFAULT_PARAMS_PATH = Path.cwd() / "canvas_particles.json"

PALETTE = ["#88c8ffa0", "rgba(150, 255, 105, 0.95)", "#f45c", "white", "black"]
MOUSE_MODES = [MOUSE_OFF, MOUSE_PUSH, MOUSE_DRAG]
MOUSE_MODE_LABELS = {MOUSE_OFF: "off", MOUSE_PUSH: "push", MOUSE_DRAG: "drag"}


class CanvasParticlesApp:
    def __init__(self, params_path: Path | None = None, overrides: dict | None = None) -> None:
        self.params_path = params_path or DEFAULT_PARAMS_PATH
        self.params = self._load_initial_params()
        for key, value in (overrides or {}).items():
            setattr(self.params, key, value)
        self.params.clamp()
        self.driver: CanvasParticles | None = None
        self._palette_index = 0

        self._last_params_mtime: float | None = self.params_path.stat().st_mtime if self.params_path.exists() else None
        self._last_autoreload = time.monotonic()

    def run(self) -> None:
        run_pyglet(
            width=self.params.width,
            height=self.params.height,
            title="canvas particles",
            target_fps=self.params.target_fps,
            build=self._build,
            on_key=self._on_key,
            on_click=self._on_click,
            on_tick=self._maybe_autoreload,
            get_caption=self._get_caption,
        )

    def _build(self, surface: PygletSurface, scheduler: PygletFrameScheduler) -> CanvasParticles:
        # param warnings are logged by the driver
        self.driver = CanvasParticles(surface, self.params, scheduler=scheduler)
        self.driver.start()
        return self.driver

    def _get_caption(self) -> str:
        if self.driver is None:
            return "canvas particles"
        stats = self.driver.last_stats
        lines = stats.lines_drawn if stats is not None else 0
        state = "running" if self.driver.animating else "stopped"
        mode = MOUSE_MODE_LABELS.get(self.params.mouse_interaction_type, "?")
        return f"canvas particles | {len(self.driver.particles)} particles | {lines} lines | mouse {mode} | {state}"

    def _load_initial_params(self) -> ParticlesParams:
        try:
            if self.params_path.exists():
                return ParticlesParams.load(self.params_path)
        except (OSError, ValueError) as e:
            print(f"[params] could not load {self.params_path}: {e}", file=sys.stderr)
        return ParticlesParams().clamp()

    def _maybe_autoreload(self) -> None:
        if not self.params_path.exists():
            return
        now = time.monotonic()
        if (now - self._last_autoreload) < 0.5:
            return
        self._last_autoreload = now

        mtime = self.params_path.stat().st_mtime
        if self._last_params_mtime is None or mtime > self._last_params_mtime:
            self._last_params_mtime = mtime
            self._load_params()

    def _load_params(self) -> None:
        try:
            loaded = ParticlesParams.load(self.params_path)
        except (OSError, ValueError) as e:
            print(f"[params] reload failed: {e}", file=sys.stderr)
            return

        old = asdict(self.params)
        changes = {k: v for k, v in asdict(loaded).items() if old.get(k) != v and k not in WINDOW_KEYS}
        if not changes or self.driver is None:
            return
        try:
            self.driver.update_params(**changes)
        except ValueError as e:
            print(f"[params] rejected: {e}", file=sys.stderr)
            return
        print(f"[params] applied {', '.join(sorted(changes))}")

    def _on_key(self, k: str) -> None:
        if self.driver is None:
            return
        if k == "space":
            if self.driver.animating:
                self.driver.stop()
            else:
                self.driver.start()
        elif k == "r":
            self.driver.resize(regenerate=True)
        elif k == "m":
            idx = MOUSE_MODES.index(self.params.mouse_interaction_type)
            self.driver.update_params(mouse_interaction_type=MOUSE_MODES[(idx + 1) % len(MOUSE_MODES)])
        elif k == "c":
            self._palette_index = (self._palette_index + 1) % len(PALETTE)
            self.driver.set_particle_color(PALETTE[self._palette_index])
        elif k == "b":
            self.driver.set_background(None if self.params.background else "#101828")

    def _on_click(self, x: float, y: float) -> None:
        if self.driver is not None:
            self.driver.spawn(x, y)


def describe_params() -> str:
    lines: list[str] = []
    last_group = None
    for key in MENU_GROUPS:
        group, sub = get_menu_group_title(key)
        if group != last_group:
            lines.append(f"{group}:")
            last_group = group
        lines.append(f"  {key:<26} [{sub}] {get_param_hint(key)}")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Animated particle mesh")
    parser.add_argument("--params", type=Path, default=None, help="JSON params file (auto-reloaded)")
    parser.add_argument("--width", type=int, default=None, help="Window width")
    parser.add_argument("--height", type=int, default=None, help="Window height")
    parser.add_argument("--fps", type=int, default=None, help="Target refresh rate")
    parser.add_argument("--color", default=None, help="Particle colour")
    parser.add_argument("--list-params", action="store_true", help="Describe every parameter and exit")
    parser.add_argument("--save-params", type=Path, default=None, help="Write the effective params and exit")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="[%(name)s] %(levelname)s - %(message)s")

    if args.list_params:
        print(describe_params())
        return

    overrides = {
        key: value
        for key, value in (
            ("width", args.width),
            ("height", args.height),
            ("target_fps", args.fps),
            ("particle_color", args.color),
        )
        if value is not None
    }
    app = CanvasParticlesApp(args.params, overrides)
    if args.save_params is not None:
        app.params.save(args.save_params)
        print(f"[params] saved to {args.save_params}")
        return
    app.run()


if __name__ == "__main__":
    main()
