from __future__ import annotations

import logging
import math
import random

from canvas_particles.core.init_conditions import create_particle, target_particle_count, wrap
from canvas_particles.core.particle import Particle
from canvas_particles.params import ParticlesParams
from canvas_particles.physics.forces import PAIR_BACKENDS, apply_mouse, integrate
from canvas_particles.physics.visibility import VisibilityGrid, should_draw_all

logger = logging.getLogger(__name__)


class ParticleSim:
    """
    Particle population and per-update motion for one viewport.

    The simulation runs in an extended space: the viewport grown by the
    connection distance on every side, so toroidal wrap happens out of view.
    """

    def __init__(self, params: ParticlesParams, *, rng: random.Random | None = None) -> None:
        self.params = params
        self._rng = rng if rng is not None else random.Random(params.seed)
        self.particles: list[Particle] = []

        self.view_width = 0.0
        self.view_height = 0.0
        self.width = 0.0
        self.height = 0.0
        self.border_x = 0.0
        self.border_y = 0.0
        self.grid = VisibilityGrid(0.0, 0.0)
        self.draw_all = False
        self.target_count = 0.0
        self.mouse: tuple[float, float] | None = None
        self.last_pair_evaluations = 0

    def reseed(self, seed: int | None) -> None:
        self._rng = random.Random(seed)

    # ------------------------------------------------------------------
    # viewport / population
    # ------------------------------------------------------------------

    def set_viewport(self, view_width: float, view_height: float) -> None:
        """Re-derive the extended space, visibility grid and target count."""
        cd = self.params.connect_distance
        self.view_width = float(view_width)
        self.view_height = float(view_height)
        self.width = self.view_width + cd * 2.0
        self.height = self.view_height + cd * 2.0
        self.border_x = (self.view_width - self.width) / 2.0
        self.border_y = (self.view_height - self.height) / 2.0
        self.grid = VisibilityGrid(self.view_width, self.view_height)
        self.draw_all = should_draw_all(cd, self.view_width, self.view_height)
        self.mouse = None
        self.set_target_count(self.count_for(self.params))

    def count_for(self, params: ParticlesParams) -> float:
        """Target count ``params`` would give for the current viewport."""
        cd = params.connect_distance
        return target_particle_count(
            params.ppm, self.view_width + cd * 2.0, self.view_height + cd * 2.0, params.max_particles
        )

    def set_target_count(self, n: float) -> None:
        if math.isnan(n) or math.isnan(self.params.max_particles):
            self.target_count = math.nan
            return
        self.target_count = max(0.0, min(float(self.params.max_particles), float(n)))

    def _checked_target(self) -> int:
        if not math.isfinite(self.target_count):
            raise ValueError(f"cannot create a non-finite amount of particles ({self.target_count})")
        return int(self.target_count)

    def regenerate(self) -> None:
        """Discard every particle and create ``target_count`` fresh ones."""
        n = self._checked_target()
        self.particles = []
        for _ in range(n):
            self._add_particle()
        logger.debug("regenerated %d particles in %.0fx%.0f", n, self.width, self.height)

    def reconcile(self) -> None:
        """Truncate or top up the population to ``target_count`` without a reset."""
        n = self._checked_target()
        del self.particles[n:]
        for pt in self.particles:
            pt.pos_x = wrap(pt.pos_x, self.width)
            pt.pos_y = wrap(pt.pos_y, self.height)
            self._place(pt)
        while len(self.particles) < n:
            self._add_particle()
        logger.debug("reconciled population to %d particles", n)

    def spawn(self, x: float, y: float) -> Particle | None:
        """Create a particle at a viewport position. Returns None once max_particles is reached."""
        if len(self.particles) >= self.params.max_particles:
            logger.debug("spawn ignored: %d particles already", len(self.particles))
            return None
        return self._add_particle(pos=(x - self.border_x, y - self.border_y))

    def _add_particle(self, pos: tuple[float, float] | None = None) -> Particle:
        pt = create_particle(
            self._rng,
            width=self.width,
            height=self.height,
            rel_speed=self.params.rel_speed,
            rel_size=self.params.rel_size,
            pos=pos,
        )
        self._place(pt)
        self.particles.append(pt)
        return pt

    def _place(self, pt: Particle) -> None:
        pt.x = pt.pos_x + pt.off_x + self.border_x
        pt.y = pt.pos_y + pt.off_y + self.border_y
        self.grid.update(pt)

    # ------------------------------------------------------------------
    # pointer
    # ------------------------------------------------------------------

    def set_mouse(self, x: float, y: float) -> None:
        self.mouse = (float(x), float(y))

    def clear_mouse(self) -> None:
        self.mouse = None

    # ------------------------------------------------------------------
    # update
    # ------------------------------------------------------------------

    def step(self) -> None:
        p = self.params
        pair_pass = PAIR_BACKENDS[p.force_backend]
        self.last_pair_evaluations = pair_pass(
            self.particles,
            connect_distance=p.connect_distance,
            repulsive=p.gravity_repulsive,
            pulling=p.gravity_pulling,
            max_grav=p.gravity_max,
        )

        turn_rate = p.turn_rate
        radius = p.mouse_connect_distance
        for pt in self.particles:
            integrate(
                pt,
                self._rng,
                width=self.width,
                height=self.height,
                friction=p.gravity_friction,
                turn_rate=turn_rate,
            )
            apply_mouse(
                pt,
                mouse=self.mouse,
                border_x=self.border_x,
                border_y=self.border_y,
                interaction=p.mouse_interaction_type,
                radius=radius,
                dist_ratio=p.mouse_dist_ratio,
                width=self.width,
                height=self.height,
            )
            self.grid.update(pt)

    def validate_state(self) -> list[str]:
        issues: list[str] = []
        if len(self.particles) > self.params.max_particles:
            issues.append(f"{len(self.particles)} particles exceed max_particles={self.params.max_particles:g}")
        for i, pt in enumerate(self.particles):
            values = (pt.pos_x, pt.pos_y, pt.x, pt.y, pt.vel_x, pt.vel_y, pt.off_x, pt.off_y)
            if not all(math.isfinite(v) for v in values):
                issues.append(f"particle {i} has non-finite state")
                continue
            if not (0.0 <= pt.pos_x < self.width and 0.0 <= pt.pos_y < self.height):
                issues.append(f"particle {i} logical position ({pt.pos_x:.3f}, {pt.pos_y:.3f}) out of range")
        return issues
