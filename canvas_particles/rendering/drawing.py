"""
Drawing surface abstraction and the particle/connection renderer.

The renderer is a read-only pass over the particles: it draws every
visible particle, then joins pairs closer than the connection distance
with a line whose opacity fades with distance. A per-particle work budget
(sum of drawn line lengths) bounds the cost of dense clusters.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from canvas_particles.physics.visibility import can_connect

if TYPE_CHECKING:
    from canvas_particles.core.particle import Particle
    from canvas_particles.rendering.color_mapper import StrokeStyleTable


LINE_WIDTH = 1.0

SURFACE_METHODS = ("clear", "fill_circle", "fill_rect", "stroke_line", "set_background")


# =============================================================================
# Surface
# =============================================================================

@runtime_checkable
class Surface(Protocol):
    """2D drawing target. Coordinates are viewport pixels, y pointing down."""

    width: float
    height: float

    def clear(self) -> None: ...

    def fill_circle(self, x: float, y: float, radius: float, color: str) -> None: ...

    def fill_rect(self, x: float, y: float, w: float, h: float, color: str) -> None: ...

    def stroke_line(self, x1: float, y1: float, x2: float, y2: float, color: str, width: float) -> None: ...

    def set_background(self, value: Any) -> None: ...


class RecordingSurface:
    """Headless surface that keeps every draw call since the last clear."""

    def __init__(self, width: float = 800.0, height: float = 600.0) -> None:
        self.width = float(width)
        self.height = float(height)
        self.background: Any = None
        self.clear_count = 0
        self.circles: list[tuple[float, float, float, str]] = []
        self.rects: list[tuple[float, float, float, float, str]] = []
        self.lines: list[tuple[float, float, float, float, str, float]] = []

    def clear(self) -> None:
        self.clear_count += 1
        self.circles.clear()
        self.rects.clear()
        self.lines.clear()

    def fill_circle(self, x: float, y: float, radius: float, color: str) -> None:
        self.circles.append((x, y, radius, color))

    def fill_rect(self, x: float, y: float, w: float, h: float, color: str) -> None:
        self.rects.append((x, y, w, h, color))

    def stroke_line(self, x1: float, y1: float, x2: float, y2: float, color: str, width: float) -> None:
        self.lines.append((x1, y1, x2, y2, color, width))

    def set_background(self, value: Any) -> None:
        self.background = value


def check_surface(surface: Any) -> None:
    """Raise TypeError unless ``surface`` provides the drawing operations and a size."""
    missing = [name for name in SURFACE_METHODS if not callable(getattr(surface, name, None))]
    for name in ("width", "height"):
        if not hasattr(surface, name):
            missing.append(name)
    if missing:
        raise TypeError(f"invalid drawing surface {type(surface).__name__}: missing {', '.join(missing)}")


# =============================================================================
# Renderer
# =============================================================================

@dataclass
class RenderStats:
    """Counters for one rendered frame."""
    particles_drawn: int = 0
    lines_drawn: int = 0
    pair_evaluations: int = 0
    work: list[float] = field(default_factory=list)


def draw_particles(surface: Surface, particles: list["Particle"], color: str) -> int:
    """Circles for radius > 1px, squares below (cheaper, looks the same)."""
    drawn = 0
    for pt in particles:
        if not pt.visible:
            continue
        if pt.size > 1.0:
            surface.fill_circle(pt.x, pt.y, pt.size, color)
        else:
            surface.fill_rect(pt.x - pt.size, pt.y - pt.size, pt.size * 2.0, pt.size * 2.0, color)
        drawn += 1
    return drawn


def draw_connections(
    surface: Surface,
    particles: list["Particle"],
    styles: "StrokeStyleTable",
    *,
    connect_distance: float,
    max_work: float = math.inf,
    draw_all: bool = False,
    stats: RenderStats | None = None,
) -> RenderStats:
    """
    Join close pairs with a fading line.

    Pairs are visited in index order. Once the lower-indexed particle's work
    (sum of its drawn line lengths) reaches ``connect_distance * max_work``
    the rest of its pairs are skipped for this frame, so the cutoff favours
    low indices rather than short distances.
    """
    if stats is None:
        stats = RenderStats()
    n = len(particles)
    stats.work = [0.0] * n
    half = connect_distance / 2.0
    max_work_per_particle = connect_distance * max_work
    full = styles.fill

    for i in range(n):
        a = particles[i]
        work = 0.0
        for j in range(i + 1, n):
            b = particles[j]
            if not (draw_all or can_connect(a, b)):
                continue
            stats.pair_evaluations += 1
            dist = math.hypot(a.x - b.x, a.y - b.y)
            if dist >= connect_distance:
                continue

            if dist <= half:
                color = full
            else:
                color = styles.fade(connect_distance / dist - 1.0)
            surface.stroke_line(a.x, a.y, b.x, b.y, color, LINE_WIDTH)
            stats.lines_drawn += 1

            work += dist
            if work >= max_work_per_particle:
                break
        stats.work[i] = work

    return stats


def render_frame(
    surface: Surface,
    particles: list["Particle"],
    styles: "StrokeStyleTable",
    *,
    connect_distance: float,
    max_work: float = math.inf,
    draw_all: bool = False,
) -> RenderStats:
    surface.clear()
    stats = RenderStats()
    stats.particles_drawn = draw_particles(surface, particles, styles.fill)
    return draw_connections(
        surface,
        particles,
        styles,
        connect_distance=connect_distance,
        max_work=max_work,
        draw_all=draw_all,
        stats=stats,
    )
