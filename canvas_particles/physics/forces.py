"""
Pairwise forces and per-particle integration.

Forces are stylised rather than physical: particles closer than half the
connection distance push each other apart, particles further away pull
together. Impulses accumulate into velocity, which friction damps every
update.

Two backends evaluate the pair pass:
- python: explicit i<j double loop (reference implementation)
- numpy: the same n(n-1)/2 pairs over the upper triangle, vectorised
"""

from __future__ import annotations

import math
import random
from typing import TYPE_CHECKING

import numpy as np

from canvas_particles.core.init_conditions import TAU, wrap
from canvas_particles.params import MOUSE_DRAG, MOUSE_OFF

if TYPE_CHECKING:
    from canvas_particles.core.particle import Particle


# floor for the distance fed into the inverse power law
MIN_GRAVITY_DISTANCE = 10.0
GRAVITY_EXPONENT = 1.8

# exponential moving average weight for the mouse offset
MOUSE_BLEND = 0.25


def gravity_magnitude(dist: float, connect_distance: float, gain: float, max_grav: float) -> float:
    """
    Impulse magnitude for one pair.

    ``min(max_grav, (1/dist)^1.8 * connect_distance * gain)`` with ``dist``
    floored at MIN_GRAVITY_DISTANCE.
    """
    inv = 1.0 / max(dist, MIN_GRAVITY_DISTANCE)
    return min(max_grav, (inv ** GRAVITY_EXPONENT) * connect_distance * gain)


def apply_pairwise_forces(
    particles: list["Particle"],
    *,
    connect_distance: float,
    repulsive: float,
    pulling: float,
    max_grav: float,
) -> int:
    """
    Accumulate pair impulses into particle velocities.

    Returns:
        Number of pair evaluations (n(n-1)/2, or 0 when both gains are zero)
    """
    if repulsive == 0.0 and pulling == 0.0:
        return 0

    half = connect_distance / 2.0
    n = len(particles)
    evaluations = 0

    for i in range(n):
        a = particles[i]
        for j in range(i + 1, n):
            b = particles[j]
            evaluations += 1
            dx = b.pos_x - a.pos_x
            dy = b.pos_y - a.pos_y
            dist = math.hypot(dx, dy)
            angle = math.atan2(dy, dx)

            if dist < half:
                grav = gravity_magnitude(dist, connect_distance, repulsive, max_grav)
                gx = math.cos(angle) * grav
                gy = math.sin(angle) * grav
                a.vel_x -= gx
                a.vel_y -= gy
                b.vel_x += gx
                b.vel_y += gy
            elif pulling != 0.0:
                grav = gravity_magnitude(dist, connect_distance, pulling, max_grav)
                gx = math.cos(angle) * grav
                gy = math.sin(angle) * grav
                a.vel_x += gx
                a.vel_y += gy
                b.vel_x -= gx
                b.vel_y -= gy

    return evaluations


def apply_pairwise_forces_numpy(
    particles: list["Particle"],
    *,
    connect_distance: float,
    repulsive: float,
    pulling: float,
    max_grav: float,
) -> int:
    if repulsive == 0.0 and pulling == 0.0:
        return 0
    n = len(particles)
    if n < 2:
        return 0

    pos = np.array([(p.pos_x, p.pos_y) for p in particles], dtype=np.float64)
    ii, jj = np.triu_indices(n, k=1)
    dx = pos[jj, 0] - pos[ii, 0]
    dy = pos[jj, 1] - pos[ii, 1]
    dist = np.hypot(dx, dy)
    angle = np.arctan2(dy, dx)

    base = (1.0 / np.maximum(dist, MIN_GRAVITY_DISTANCE)) ** GRAVITY_EXPONENT * connect_distance
    # signed impulse on the lower-indexed particle along a->b
    mag = np.where(
        dist < connect_distance / 2.0,
        -np.minimum(max_grav, base * repulsive),
        np.minimum(max_grav, base * pulling) if pulling != 0.0 else 0.0,
    )
    gx = np.cos(angle) * mag
    gy = np.sin(angle) * mag

    dvx = np.zeros(n)
    dvy = np.zeros(n)
    np.add.at(dvx, ii, gx)
    np.add.at(dvx, jj, -gx)
    np.add.at(dvy, ii, gy)
    np.add.at(dvy, jj, -gy)

    for p, vx, vy in zip(particles, dvx.tolist(), dvy.tolist()):
        p.vel_x += vx
        p.vel_y += vy

    return int(ii.size)


PAIR_BACKENDS = {
    "python": apply_pairwise_forces,
    "numpy": apply_pairwise_forces_numpy,
}


def integrate(
    particle: "Particle",
    rng: random.Random,
    *,
    width: float,
    height: float,
    friction: float,
    turn_rate: float,
) -> None:
    """Damp velocity, random-walk the heading and move with toroidal wrap."""
    particle.vel_x *= friction
    particle.vel_y *= friction
    particle.heading = (particle.heading + rng.uniform(-turn_rate, turn_rate)) % TAU
    particle.pos_x = wrap(particle.pos_x + particle.vel_x + math.sin(particle.heading) * particle.speed, width)
    particle.pos_y = wrap(particle.pos_y + particle.vel_y + math.cos(particle.heading) * particle.speed, height)


def apply_mouse(
    particle: "Particle",
    *,
    mouse: tuple[float, float] | None,
    border_x: float,
    border_y: float,
    interaction: int,
    radius: float,
    dist_ratio: float,
    width: float,
    height: float,
) -> None:
    """
    Update the interaction offset and the drawn position.

    ``mouse`` is in viewport coordinates, None when the pointer is absent.
    ``border_x``/``border_y`` translate logical into viewport coordinates
    (negative, minus the connection distance).
    """
    if interaction != MOUSE_OFF:
        pushed = False
        if mouse is not None:
            dist_x = particle.pos_x + border_x - mouse[0]
            dist_y = particle.pos_y + border_y - mouse[1]
            dist = math.hypot(dist_x, dist_y)
            if dist == 0.0:
                # no direction to push in
                pushed = True
            else:
                ratio = radius / dist
                if dist_ratio < ratio:
                    particle.off_x += (ratio * dist_x - dist_x - particle.off_x) * MOUSE_BLEND
                    particle.off_y += (ratio * dist_y - dist_y - particle.off_y) * MOUSE_BLEND
                    pushed = True
        if not pushed:
            particle.off_x -= particle.off_x * MOUSE_BLEND
            particle.off_y -= particle.off_y * MOUSE_BLEND

    particle.x = particle.pos_x + particle.off_x + border_x
    particle.y = particle.pos_y + particle.off_y + border_y

    if interaction == MOUSE_DRAG:
        particle.pos_x = wrap(particle.x - border_x, width)
        particle.pos_y = wrap(particle.y - border_y, height)
