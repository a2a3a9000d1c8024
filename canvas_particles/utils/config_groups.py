"""
Parameter groups for live updates and help text.

Each group lists the ``ParticlesParams`` keys whose change invalidates a
piece of derived state.
"""

from __future__ import annotations


# =============================================================================
# Derived-state groups
# =============================================================================

# speed and size are fixed at creation: existing particles must be replaced
RESET_KEYS = {
    "rel_speed",
    "rel_size",
    "seed",
}

# extended space, visibility grid or target count change
RESIZE_KEYS = {
    "connect_distance",
    "ppm",
    "max_particles",
}

COLOR_KEYS = {
    "particle_color",
}

BACKGROUND_KEYS = {
    "background",
}

# read by the host window only
WINDOW_KEYS = {
    "width",
    "height",
    "target_fps",
}


# =============================================================================
# Help text
# =============================================================================

MENU_GROUPS = {
    "background": ("View", "Surface"),
    "frames_per_update": ("View", "Timing"),
    "reset_on_resize": ("Particles", "Population"),
    "mouse_interaction_type": ("Mouse", "Mode"),
    "mouse_connect_dist_mult": ("Mouse", "Radius"),
    "mouse_dist_ratio": ("Mouse", "Radius"),
    "particle_color": ("Particles", "Look"),
    "ppm": ("Particles", "Population"),
    "max_particles": ("Particles", "Population"),
    "max_work": ("Particles", "Budget"),
    "connect_distance": ("Particles", "Look"),
    "rel_speed": ("Particles", "Motion"),
    "rel_size": ("Particles", "Look"),
    "rotation_speed": ("Particles", "Motion"),
    "gravity_repulsive": ("Gravity", "Gains"),
    "gravity_pulling": ("Gravity", "Gains"),
    "gravity_friction": ("Gravity", "Damping"),
    "gravity_max": ("Gravity", "Gains"),
    "force_backend": ("Gravity", "Backend"),
}

PARAM_HINTS = {
    "background": "Surface background colour (none = leave untouched).",
    "frames_per_update": "Run one update every N display refreshes.",
    "reset_on_resize": "Regenerate particles on resize instead of topping up.",
    "mouse_interaction_type": "Mouse mode: 0 off, 1 visual push, 2 drag.",
    "mouse_connect_dist_mult": "Mouse radius as a multiple of connect_distance.",
    "mouse_dist_ratio": "Push only when radius/distance exceeds this ratio.",
    "particle_color": "Particle and line colour (name, #hex or rgba()).",
    "ppm": "Particles per million square pixels.",
    "max_particles": "Upper bound on the particle count.",
    "max_work": "Per-particle line budget in connect distances (inf = off).",
    "connect_distance": "Maximum distance at which particles are joined.",
    "rel_speed": "Intrinsic speed multiplier.",
    "rel_size": "Particle size multiplier.",
    "rotation_speed": "Heading random-walk rate (1/100 rad per update).",
    "gravity_repulsive": "Push strength for particles closer than half connect_distance.",
    "gravity_pulling": "Pull strength for particles further than half connect_distance.",
    "gravity_friction": "Velocity kept per update (1 = no damping).",
    "gravity_max": "Cap on a single pair impulse.",
    "force_backend": "Pair pass backend: python or numpy.",
}


# =============================================================================
# Helper Functions
# =============================================================================

def get_menu_group_title(key: str) -> tuple[str | None, str | None]:
    group = MENU_GROUPS.get(key)
    if group is None:
        return None, None
    return group


def get_param_hint(key: str) -> str:
    return PARAM_HINTS.get(key, "")


def is_reset_required(key: str) -> bool:
    """Check if changing this parameter requires a population regenerate."""
    return key in RESET_KEYS


def is_resize_required(key: str) -> bool:
    return key in RESIZE_KEYS


def is_color_related(key: str) -> bool:
    return key in COLOR_KEYS
