"""
Frame driver and embedding API.

``CanvasParticles`` owns the simulation, the stroke style table and the
start/stop lifecycle. The host calls ``on_mouse_move``/``on_resize`` when
the pointer or the surface changes; frames arrive through a
``FrameScheduler`` and run one update + render every ``frames_per_update``
refreshes.

Example:
    >>> surface = RecordingSurface(800, 600)
    >>> scheduler = FrameScheduler()
    >>> cp = CanvasParticles(surface, {"particles": {"max": 50}}, scheduler=scheduler)
    >>> cp.start()
    >>> scheduler.run_pending()
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import fields, replace
from typing import Any, Mapping

from canvas_particles.core.particle import Particle
from canvas_particles.core.scheduler import FrameScheduler
from canvas_particles.core.sim import ParticleSim
from canvas_particles.params import ParticlesParams
from canvas_particles.rendering.color_mapper import StrokeStyleTable
from canvas_particles.rendering.drawing import RenderStats, Surface, check_surface, render_frame
from canvas_particles.utils.config_groups import (
    BACKGROUND_KEYS,
    is_color_related,
    is_reset_required,
    is_resize_required,
)

logger = logging.getLogger(__name__)


class CanvasParticles:
    def __init__(
        self,
        surface: Surface,
        options: ParticlesParams | Mapping[str, Any] | None = None,
        *,
        scheduler: FrameScheduler | None = None,
        rng: random.Random | None = None,
    ) -> None:
        check_surface(surface)
        self.surface = surface
        if isinstance(options, ParticlesParams):
            self.params = options.clamp()
        else:
            self.params = ParticlesParams.from_options(options)
        for warning in self.params.validate():
            logger.warning(warning)

        self.scheduler = scheduler if scheduler is not None else FrameScheduler()
        self.sim = ParticleSim(self.params, rng=rng)
        self.styles = StrokeStyleTable.from_color(self.params.particle_color)
        self.animating = False
        self.last_stats: RenderStats | None = None
        self._update_count = math.inf
        self._generation = 0
        self._populated = False

        if self.params.background is not None:
            self.set_background(self.params.background)
        self.resize()

    @property
    def particles(self):
        return self.sim.particles

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        if self.animating:
            return
        self.animating = True
        self._update_count = math.inf
        self._generation += 1
        self._request(self._generation)
        logger.debug("animation started")

    def stop(self) -> None:
        if not self.animating:
            return
        self.animating = False
        self.surface.clear()
        logger.debug("animation stopped")

    def _request(self, generation: int) -> None:
        self.scheduler.request_frame(lambda: self._animation(generation))

    def _animation(self, generation: int) -> None:
        # a stop() (or stop+start) since this frame was requested ends this chain
        if not self.animating or generation != self._generation:
            return
        self._request(generation)

        self._update_count += 1
        if self._update_count >= self.params.frames_per_update:
            self._update_count = 0
            self.step()

    def step(self) -> RenderStats:
        """Run one update and render it, regardless of lifecycle state."""
        self.sim.step()
        self.last_stats = render_frame(
            self.surface,
            self.sim.particles,
            self.styles,
            connect_distance=self.params.connect_distance,
            max_work=self.params.max_work,
            draw_all=self.sim.draw_all,
        )
        return self.last_stats

    # ------------------------------------------------------------------
    # host notifications
    # ------------------------------------------------------------------

    def on_mouse_move(self, x: float, y: float) -> None:
        self.sim.set_mouse(x, y)

    def on_mouse_leave(self) -> None:
        self.sim.clear_mouse()

    def on_resize(self, width: float, height: float) -> None:
        self.surface.width = float(width)
        self.surface.height = float(height)
        self.resize()

    def resize(self, *, regenerate: bool | None = None) -> None:
        """Re-derive the extended space from the surface size and refit the population."""
        self.sim.set_viewport(self.surface.width, self.surface.height)
        self._update_count = math.inf
        if regenerate is None:
            regenerate = self.params.reset_on_resize
        if regenerate or not self._populated:
            self.sim.regenerate()
        else:
            self.sim.reconcile()
        self._populated = True

    def spawn(self, x: float, y: float) -> Particle | None:
        return self.sim.spawn(x, y)

    # ------------------------------------------------------------------
    # appearance / options
    # ------------------------------------------------------------------

    def set_background(self, value: Any) -> None:
        self.params.background = None if value is None else str(value)
        self.surface.set_background(value)

    def set_particle_color(self, color: str) -> None:
        styles = StrokeStyleTable.from_color(color)
        self.params.particle_color = str(color)
        self.styles = styles

    def update_params(self, **changes: Any) -> None:
        """
        Apply changed options and re-derive only the state they affect.

        The changes are checked on a copy first: on ValueError nothing has
        been applied.
        """
        names = {f.name for f in fields(ParticlesParams)}
        unknown = sorted(set(changes) - names)
        if unknown:
            raise ValueError(f"unknown parameter(s): {', '.join(unknown)}")
        try:
            candidate = replace(self.params, **changes).clamp()
        except TypeError as exc:
            raise ValueError(f"invalid parameter value: {exc}") from exc

        keys = set(changes)
        reset = any(is_reset_required(key) for key in keys)
        resize = any(is_resize_required(key) for key in keys)
        if (reset or resize) and not math.isfinite(self.sim.count_for(candidate)):
            raise ValueError("cannot create a non-finite amount of particles")
        styles = self.styles
        if any(is_color_related(key) for key in keys):
            styles = StrokeStyleTable.from_color(candidate.particle_color)

        # params is shared with the simulation: copy values in place
        for f in fields(ParticlesParams):
            setattr(self.params, f.name, getattr(candidate, f.name))
        self.styles = styles

        if keys & BACKGROUND_KEYS:
            self.set_background(self.params.background)
        if "seed" in keys:
            self.sim.reseed(self.params.seed)
        if reset:
            self.resize(regenerate=True)
        elif resize:
            self.resize()
