"""
Particle creation and population sizing.

Particles are spawned either at a random logical position (initial
population, resize top-ups) or at an explicit position (click to spawn).
Intrinsic speed and size are fixed at creation.
"""

from __future__ import annotations

import math
import random

from canvas_particles.core.particle import Particle


TAU = 2.0 * math.pi

# particles per million square pixels
PPM_AREA = 1_000_000.0


def target_particle_count(ppm: float, width: float, height: float, max_particles: float) -> float:
    """
    Number of particles for an extended area of ``width * height`` pixels.

    The density result is floored, then clamped to ``[0, max_particles]``.
    A non-finite result (unbounded ``ppm`` and ``max_particles``, or NaN in
    either) is returned as-is so the population manager can reject it.

    Args:
        ppm: Particles per million square pixels
        width, height: Extended space dimensions
        max_particles: Upper bound (may be ``inf``)

    Returns:
        Target count as a float (integral when finite)
    """
    raw = ppm * width * height / PPM_AREA
    if math.isfinite(raw):
        raw = float(math.floor(raw))
    if math.isnan(raw) or math.isnan(max_particles):
        return math.nan
    return max(0.0, min(float(max_particles), raw))


def sample_size(rng: random.Random, rel_size: float = 1.0) -> float:
    """Drawn radius, skewed towards small particles (0.5 .. 2.5 before scaling)."""
    return (0.5 + (rng.random() ** 5) * 2.0) * rel_size


def sample_speed(rng: random.Random, rel_speed: float = 1.0) -> float:
    return (0.5 + rng.random() * 0.5) * rel_speed


def create_particle(
    rng: random.Random,
    *,
    width: float,
    height: float,
    rel_speed: float = 1.0,
    rel_size: float = 1.0,
    pos: tuple[float, float] | None = None,
    heading: float | None = None,
    speed: float | None = None,
    size: float | None = None,
) -> Particle:
    """
    Create a particle in an extended space of ``width x height``.

    Args:
        rng: Random number generator
        width, height: Extended space dimensions
        rel_speed, rel_size: Multipliers for the sampled speed and size
        pos: Explicit logical position (wrapped into the space), or None for random
        heading, speed, size: Explicit values, or None to sample them

    Returns:
        New Particle with zero velocity and zero interaction offset
    """
    if pos is None:
        pos_x = rng.random() * width
        pos_y = rng.random() * height
    else:
        pos_x = wrap(float(pos[0]), width)
        pos_y = wrap(float(pos[1]), height)
    return Particle(
        pos_x=pos_x,
        pos_y=pos_y,
        heading=rng.random() * TAU if heading is None else float(heading) % TAU,
        speed=sample_speed(rng, rel_speed) if speed is None else float(speed),
        size=sample_size(rng, rel_size) if size is None else float(size),
    )


def wrap(value: float, extent: float) -> float:
    """Toroidal wrap into ``[0, extent)``."""
    if extent <= 0.0:
        return 0.0
    value %= extent
    # -1e-17 % extent rounds up to extent
    if value >= extent:
        value = 0.0
    return value
