"""
Tests for visibility culling.
"""

import pytest

from canvas_particles.core.particle import Particle
from canvas_particles.physics.visibility import VisibilityGrid, can_connect, should_draw_all


def placed(grid: VisibilityGrid, x: float, y: float) -> Particle:
    pt = Particle(pos_x=0.0, pos_y=0.0, heading=0.0, speed=0.0, size=1.0, x=x, y=y)
    grid.update(pt)
    return pt


class TestClassify:
    """Tests for VisibilityGrid.classify."""

    @pytest.fixture
    def grid(self):
        return VisibilityGrid(800.0, 600.0)

    def test_center_is_visible(self, grid):
        assert grid.classify(400.0, 300.0) == (1, 1)
        assert placed(grid, 400.0, 300.0).visible

    def test_edges_inclusive(self, grid):
        assert grid.classify(0.0, 0.0) == (1, 1)
        assert grid.classify(800.0, 600.0) == (1, 1)

    @pytest.mark.parametrize(
        "x, y, region",
        [
            (-500.0, -500.0, (0, 0)),
            (400.0, -1.0, (1, 0)),
            (5000.0, -20.0, (2, 0)),
            (-0.5, 300.0, (0, 1)),
            (801.0, 300.0, (2, 1)),
            (-10.0, 700.0, (0, 2)),
            (400.0, 5000.0, (1, 2)),
            (900.0, 601.0, (2, 2)),
        ],
    )
    def test_off_screen_regions(self, grid, x, y, region):
        pt = placed(grid, x, y)
        assert pt.region == region
        assert not pt.visible


class TestCanConnect:
    """Tests for the pair rejection rule."""

    @pytest.fixture
    def grid(self):
        return VisibilityGrid(800.0, 600.0)

    def test_same_corner_rejected(self, grid):
        assert not can_connect(placed(grid, -10.0, -10.0), placed(grid, -50.0, -30.0))

    def test_same_off_screen_column_rejected(self, grid):
        assert not can_connect(placed(grid, -10.0, -10.0), placed(grid, -10.0, 700.0))

    def test_same_off_screen_row_rejected(self, grid):
        assert not can_connect(placed(grid, -10.0, 700.0), placed(grid, 900.0, 700.0))

    def test_visible_particle_always_kept(self, grid):
        on = placed(grid, 400.0, 300.0)
        for x, y in [(-10.0, -10.0), (400.0, -10.0), (900.0, 700.0), (400.0, 300.0)]:
            assert can_connect(on, placed(grid, x, y))

    def test_opposite_corners_kept(self, grid):
        # the segment may cross the viewport
        assert can_connect(placed(grid, -10.0, -10.0), placed(grid, 900.0, 700.0))

    def test_adjacent_edges_kept(self, grid):
        assert can_connect(placed(grid, 400.0, -10.0), placed(grid, -10.0, 300.0))


def test_should_draw_all():
    assert should_draw_all(900.0, 1100.0, 900.0)
    assert not should_draw_all(150.0, 1100.0, 900.0)
