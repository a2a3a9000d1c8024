"""
Tests for config_groups module.
"""

from dataclasses import fields

import pytest

from canvas_particles.params import ParticlesParams
from canvas_particles.utils.config_groups import (
    BACKGROUND_KEYS,
    COLOR_KEYS,
    MENU_GROUPS,
    PARAM_HINTS,
    RESET_KEYS,
    RESIZE_KEYS,
    WINDOW_KEYS,
    get_menu_group_title,
    get_param_hint,
    is_color_related,
    is_reset_required,
    is_resize_required,
)

PARAM_NAMES = {f.name for f in fields(ParticlesParams)}


class TestConfigGroups:
    """Tests for configuration group constants and functions."""

    def test_reset_keys_contain_creation_values(self):
        """Speed and size are sampled at creation, so changing them needs new particles."""
        assert {"rel_speed", "rel_size"} <= RESET_KEYS

    def test_resize_keys_contain_connect_distance(self):
        assert "connect_distance" in RESIZE_KEYS
        assert "ppm" in RESIZE_KEYS

    def test_groups_disjoint(self):
        groups = [RESET_KEYS, RESIZE_KEYS, COLOR_KEYS, BACKGROUND_KEYS, WINDOW_KEYS]
        for i, a in enumerate(groups):
            for b in groups[i + 1 :]:
                assert not (a & b)

    @pytest.mark.parametrize("group", [RESET_KEYS, RESIZE_KEYS, COLOR_KEYS, BACKGROUND_KEYS, WINDOW_KEYS])
    def test_groups_name_real_params(self, group):
        assert group <= PARAM_NAMES

    def test_menu_groups_structure(self):
        assert len(MENU_GROUPS) > 0
        assert MENU_GROUPS["connect_distance"] == ("Particles", "Look")
        for group in MENU_GROUPS.values():
            assert len(group) == 2

    def test_every_menu_entry_has_hint(self):
        assert set(MENU_GROUPS) == set(PARAM_HINTS)
        assert set(MENU_GROUPS) <= PARAM_NAMES


class TestHelpers:
    def test_get_menu_group_title(self):
        assert get_menu_group_title("gravity_max") == ("Gravity", "Gains")

    def test_get_menu_group_title_unknown(self):
        assert get_menu_group_title("unknown") == (None, None)

    def test_get_param_hint(self):
        assert "connect_distance" in get_param_hint("mouse_connect_dist_mult")
        assert get_param_hint("unknown") == ""

    def test_predicates(self):
        assert is_reset_required("rel_size")
        assert not is_reset_required("connect_distance")
        assert is_resize_required("max_particles")
        assert not is_resize_required("particle_color")
        assert is_color_related("particle_color")
        assert not is_color_related("background")
