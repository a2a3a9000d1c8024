"""Tests for particle creation and population sizing."""

import math
import random
import unittest

from canvas_particles.core.init_conditions import (
    TAU,
    create_particle,
    sample_size,
    sample_speed,
    target_particle_count,
    wrap,
)


class TestTargetParticleCount(unittest.TestCase):
    def test_density_times_area(self) -> None:
        # 1100 x 900 extended area at 100 ppm
        self.assertEqual(target_particle_count(100.0, 1100.0, 900.0, 500.0), 99.0)

    def test_clamped_to_max(self) -> None:
        self.assertEqual(target_particle_count(1e6, 1000.0, 1000.0, 42.0), 42.0)

    def test_floor(self) -> None:
        self.assertEqual(target_particle_count(1.0, 999.0, 1000.0, 500.0), 0.0)

    def test_zero_density(self) -> None:
        self.assertEqual(target_particle_count(0.0, 1000.0, 1000.0, 500.0), 0.0)

    def test_unbounded_is_returned_not_clamped(self) -> None:
        n = target_particle_count(math.inf, 1000.0, 1000.0, math.inf)
        self.assertTrue(math.isinf(n))

    def test_unbounded_density_with_finite_max(self) -> None:
        self.assertEqual(target_particle_count(math.inf, 1000.0, 1000.0, 10.0), 10.0)

    def test_nan_is_returned_not_clamped(self) -> None:
        self.assertTrue(math.isnan(target_particle_count(math.nan, 1000.0, 1000.0, 500.0)))
        self.assertTrue(math.isnan(target_particle_count(100.0, 1000.0, 1000.0, math.nan)))


class TestWrap(unittest.TestCase):
    def test_wraps_past_far_edge(self) -> None:
        self.assertAlmostEqual(wrap(100.4, 100.0), 0.4)

    def test_wraps_negative(self) -> None:
        self.assertAlmostEqual(wrap(-0.5, 100.0), 99.5)

    def test_tiny_negative_stays_in_range(self) -> None:
        value = wrap(-1e-17, 100.0)
        self.assertTrue(0.0 <= value < 100.0)

    def test_zero_extent(self) -> None:
        self.assertEqual(wrap(12.0, 0.0), 0.0)


class TestCreateParticle(unittest.TestCase):
    def test_random_position_inside_space(self) -> None:
        rng = random.Random(1)
        for _ in range(200):
            pt = create_particle(rng, width=300.0, height=200.0)
            self.assertTrue(0.0 <= pt.pos_x < 300.0)
            self.assertTrue(0.0 <= pt.pos_y < 200.0)
            self.assertTrue(0.0 <= pt.heading < TAU)
            self.assertEqual((pt.vel_x, pt.vel_y), (0.0, 0.0))
            self.assertEqual((pt.off_x, pt.off_y), (0.0, 0.0))

    def test_explicit_position_is_wrapped(self) -> None:
        pt = create_particle(random.Random(1), width=300.0, height=200.0, pos=(310.0, -10.0))
        self.assertAlmostEqual(pt.pos_x, 10.0)
        self.assertAlmostEqual(pt.pos_y, 190.0)

    def test_explicit_values(self) -> None:
        pt = create_particle(
            random.Random(1), width=300.0, height=200.0, pos=(1.0, 2.0), heading=0.5, speed=2.0, size=3.0
        )
        self.assertEqual((pt.heading, pt.speed, pt.size), (0.5, 2.0, 3.0))

    def test_speed_and_size_ranges(self) -> None:
        rng = random.Random(7)
        speeds = [sample_speed(rng, 2.0) for _ in range(500)]
        sizes = [sample_size(rng, 1.0) for _ in range(500)]
        self.assertTrue(all(1.0 <= s <= 2.0 for s in speeds))
        self.assertTrue(all(0.5 <= s <= 2.5 for s in sizes))
        # skewed towards small particles
        small = sum(1 for s in sizes if s <= 1.0)
        self.assertGreater(small, len(sizes) // 2)

    def test_rel_size_scales(self) -> None:
        a = sample_size(random.Random(3), 1.0)
        b = sample_size(random.Random(3), 2.0)
        self.assertAlmostEqual(b, a * 2.0)
