from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Particle:
    """
    One simulated point.

    Attributes:
        pos_x, pos_y: Logical position in extended space, always wrapped into
            ``[0, width) x [0, height)``
        x, y: Visual (drawn) position in viewport coordinates
        vel_x, vel_y: Force-driven drift, damped by friction every update
        off_x, off_y: Mouse interaction offset between logical and drawn position
        heading: Direction of intrinsic motion (radians)
        speed: Intrinsic speed in pixels per update
        size: Drawn radius in pixels
        gx, gy: Column/row of the 3x3 visibility grid the drawn position is in
    """
    pos_x: float
    pos_y: float
    heading: float
    speed: float
    size: float
    x: float = 0.0
    y: float = 0.0
    vel_x: float = 0.0
    vel_y: float = 0.0
    off_x: float = 0.0
    off_y: float = 0.0
    gx: int = 1
    gy: int = 1

    @property
    def visible(self) -> bool:
        return self.gx == 1 and self.gy == 1

    @property
    def region(self) -> tuple[int, int]:
        return self.gx, self.gy
