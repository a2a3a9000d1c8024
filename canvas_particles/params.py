from __future__ import annotations

import json
import math
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Mapping


FORCE_BACKENDS = {"python", "numpy"}

# interaction types
MOUSE_OFF = 0
MOUSE_PUSH = 1
MOUSE_DRAG = 2


@dataclass(slots=True)
class ParticlesParams:
    # host window (desktop app only)
    width: int = 1100
    height: int = 720
    target_fps: int = 60
    seed: int | None = None

    background: str | None = None
    frames_per_update: int = 1
    reset_on_resize: bool = True

    mouse_interaction_type: int = MOUSE_PUSH  # 0 off | 1 visual push | 2 drag
    mouse_connect_dist_mult: float = 2.0 / 3.0
    mouse_dist_ratio: float = 2.0 / 3.0

    particle_color: str = "black"
    ppm: float = 100.0  # particles per million square pixels
    max_particles: float = 500.0
    max_work: float = math.inf  # in units of connect_distance, per particle
    connect_distance: float = 150.0
    rel_speed: float = 1.0
    rel_size: float = 1.0
    rotation_speed: float = 2.0  # turn rate = rotation_speed / 100 rad per update

    gravity_repulsive: float = 0.0
    gravity_pulling: float = 0.0
    gravity_friction: float = 0.8
    gravity_max: float = 10.0
    force_backend: str = "python"  # python | numpy

    @property
    def turn_rate(self) -> float:
        return self.rotation_speed / 100.0

    @property
    def mouse_connect_distance(self) -> float:
        return self.connect_distance * self.mouse_connect_dist_mult

    def clamp(self) -> "ParticlesParams":
        self.width = max(1, int(self.width))
        self.height = max(1, int(self.height))
        self.target_fps = max(10, int(self.target_fps))
        if self.seed is not None:
            self.seed = int(self.seed)
        if self.background is not None:
            self.background = str(self.background)
        self.frames_per_update = max(1, int(self.frames_per_update))
        self.reset_on_resize = bool(self.reset_on_resize)

        self.mouse_interaction_type = int(self.mouse_interaction_type)
        if self.mouse_interaction_type not in {MOUSE_OFF, MOUSE_PUSH, MOUSE_DRAG}:
            self.mouse_interaction_type = MOUSE_PUSH
        self.mouse_connect_dist_mult = max(0.0, float(self.mouse_connect_dist_mult))
        self.mouse_dist_ratio = float(self.mouse_dist_ratio)

        self.particle_color = str(self.particle_color or "black").strip()
        # ppm and max_particles may stay non-finite (inf or NaN); the population manager rejects that.
        self.ppm = _non_negative(self.ppm)
        self.max_particles = _non_negative(self.max_particles)
        self.max_work = max(0.0, float(self.max_work))
        self.connect_distance = max(1.0, float(self.connect_distance))
        self.rel_speed = max(0.0, float(self.rel_speed))
        self.rel_size = max(0.0, float(self.rel_size))
        self.rotation_speed = max(0.0, float(self.rotation_speed))

        self.gravity_repulsive = float(self.gravity_repulsive)
        self.gravity_pulling = float(self.gravity_pulling)
        self.gravity_friction = min(1.0, max(0.0, float(self.gravity_friction)))
        self.gravity_max = max(0.0, float(self.gravity_max))
        self.force_backend = str(self.force_backend or "python").strip().lower()
        if self.force_backend not in FORCE_BACKENDS:
            self.force_backend = "python"
        return self

    def validate(self) -> list[str]:
        warnings: list[str] = []
        defaults = ParticlesParams()

        if self.mouse_interaction_type == MOUSE_OFF:
            if (
                self.mouse_connect_dist_mult != defaults.mouse_connect_dist_mult
                or self.mouse_dist_ratio != defaults.mouse_dist_ratio
            ):
                warnings.append("mouse options ignored while mouse_interaction_type is 0 (off).")
        if self.gravity_repulsive == 0.0 and self.gravity_pulling == 0.0:
            if self.gravity_friction != defaults.gravity_friction:
                warnings.append("gravity_friction has no effect when both gravity gains are zero.")
            if self.force_backend != "python":
                warnings.append("force_backend ignored when both gravity gains are zero.")
        if self.max_particles == 0.0 or self.ppm == 0.0:
            warnings.append("particle count resolves to zero: nothing will be drawn.")
        if math.isnan(self.ppm) or math.isnan(self.max_particles):
            warnings.append("ppm or max_particles is NaN: construction will fail.")
        elif not math.isfinite(self.ppm) and not math.isfinite(self.max_particles):
            warnings.append("ppm and max_particles are both unbounded: construction will fail.")
        if self.mouse_dist_ratio <= 0.0 and self.mouse_interaction_type != MOUSE_OFF:
            warnings.append("mouse_dist_ratio <= 0 pushes every particle regardless of distance.")

        return warnings

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None) -> "ParticlesParams":
        """
        Build params from the nested option map used by embedders.

        Recognised keys: ``background``, ``framesPerUpdate``, ``resetOnResize``,
        ``mouse.{interactionType, connectDistMult, distRatio}``,
        ``particles.{color, ppm, max, maxWork, connectDistance, relSpeed,
        relSize, rotationSpeed}`` and ``gravity.{repulsive, pulling, friction,
        max}``. Numeric values that fail to parse fall back to their default.
        """
        options = options or {}
        mouse = _section(options, "mouse")
        particles = _section(options, "particles")
        gravity = _section(options, "gravity")
        d = cls()

        params = cls(
            background=options.get("background", d.background) or None,
            frames_per_update=_as_int(options.get("framesPerUpdate"), d.frames_per_update),
            reset_on_resize=bool(options.get("resetOnResize", d.reset_on_resize)),
            mouse_interaction_type=_as_int(mouse.get("interactionType"), d.mouse_interaction_type),
            mouse_connect_dist_mult=_as_float(mouse.get("connectDistMult"), d.mouse_connect_dist_mult),
            mouse_dist_ratio=_as_float(mouse.get("distRatio"), d.mouse_dist_ratio),
            particle_color=str(particles.get("color", d.particle_color)),
            ppm=_as_float(particles.get("ppm"), d.ppm),
            max_particles=_as_float(particles.get("max"), d.max_particles),
            max_work=_as_float(particles.get("maxWork"), d.max_work),
            connect_distance=_as_float(particles.get("connectDistance"), d.connect_distance),
            rel_speed=_as_float(particles.get("relSpeed"), d.rel_speed),
            rel_size=_as_float(particles.get("relSize"), d.rel_size),
            rotation_speed=_as_float(particles.get("rotationSpeed"), d.rotation_speed),
            gravity_repulsive=_as_float(gravity.get("repulsive"), d.gravity_repulsive),
            gravity_pulling=_as_float(gravity.get("pulling"), d.gravity_pulling),
            gravity_friction=_as_float(gravity.get("friction"), d.gravity_friction),
            gravity_max=_as_float(gravity.get("max"), d.gravity_max),
            force_backend=str(options.get("forceBackend", d.force_backend)),
        )
        return params.clamp()

    @classmethod
    def load(cls, path: str | Path) -> "ParticlesParams":
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("params file must contain a JSON object.")
        names = {f.name for f in fields(cls)}
        filtered: dict[str, Any] = {k: v for k, v in data.items() if k in names}
        return cls(**filtered).clamp()

    def save(self, path: str | Path) -> None:
        Path(path).write_text(json.dumps(asdict(self), indent=2, ensure_ascii=False), encoding="utf-8")


def _section(options: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = options.get(key)
    return value if isinstance(value, Mapping) else {}


def _non_negative(value: Any) -> float:
    out = float(value)
    return out if math.isnan(out) else max(0.0, out)


def _as_float(value: Any, default: float) -> float:
    if value is None:
        return default
    try:
        out = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(out):
        return default
    return out


def _as_int(value: Any, default: int) -> int:
    out = _as_float(value, float(default))
    if not math.isfinite(out):
        return default
    return int(out)
