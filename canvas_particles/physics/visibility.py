"""
Visibility culling for the connection pass.

The extended space has a border as wide as the connection distance on
every side, so most of the O(n^2) pairs can sit entirely off-screen. Each
particle is classified into a 3x3 grid around the viewport:

    (0,0) (1,0) (2,0)
    (0,1) (1,1) (2,1)
    (0,2) (1,2) (2,2)

where (1,1) is the viewport itself. Two particles whose drawn positions
share an off-screen column (or row) cannot be joined by a line that
crosses the viewport, so the pair is skipped without measuring it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from canvas_particles.core.particle import Particle


class VisibilityGrid:
    """3x3 grid bounds for one viewport size, rebuilt on resize."""

    __slots__ = ("width", "height")

    def __init__(self, width: float, height: float) -> None:
        self.width = float(width)
        self.height = float(height)

    def classify(self, x: float, y: float) -> tuple[int, int]:
        gx = 0 if x < 0.0 else (2 if x > self.width else 1)
        gy = 0 if y < 0.0 else (2 if y > self.height else 1)
        return gx, gy

    def update(self, particle: "Particle") -> None:
        particle.gx, particle.gy = self.classify(particle.x, particle.y)


def can_connect(a: "Particle", b: "Particle") -> bool:
    """
    False when the segment a-b cannot cross the viewport.

    Conservative: some pairs that pass still miss the viewport, but no pair
    whose segment crosses it is rejected.
    """
    if a.gx == b.gx and a.gx != 1:
        return False
    if a.gy == b.gy and a.gy != 1:
        return False
    return True


def should_draw_all(connect_distance: float, width: float, height: float) -> bool:
    """Culling rejects almost nothing when the connection distance spans the viewport."""
    return connect_distance >= min(width, height)
