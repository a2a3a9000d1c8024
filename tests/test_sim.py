import math
import random
import unittest

from canvas_particles.core.particle import Particle
from canvas_particles.core.sim import ParticleSim
from canvas_particles.params import ParticlesParams


def make_sim(**kwargs) -> ParticleSim:
    params = ParticlesParams(**kwargs).clamp()
    sim = ParticleSim(params, rng=random.Random(1))
    sim.set_viewport(800, 600)
    return sim


class TestViewport(unittest.TestCase):
    def test_extended_space(self) -> None:
        sim = make_sim(connect_distance=150.0)
        self.assertEqual((sim.width, sim.height), (1100.0, 900.0))
        self.assertEqual((sim.border_x, sim.border_y), (-150.0, -150.0))
        self.assertEqual(sim.target_count, 99.0)
        self.assertFalse(sim.draw_all)

    def test_draw_all_for_large_connect_distance(self) -> None:
        sim = make_sim(connect_distance=1000.0)
        self.assertTrue(sim.draw_all)

    def test_draw_all_measured_against_viewport(self) -> None:
        # 800x600 viewport: the shorter side decides
        self.assertTrue(make_sim(connect_distance=600.0).draw_all)
        self.assertFalse(make_sim(connect_distance=599.0).draw_all)

    def test_nan_count_rejected(self) -> None:
        for kwargs in ({"ppm": math.nan}, {"max_particles": math.nan}):
            sim = make_sim(**kwargs)
            self.assertTrue(math.isnan(sim.target_count))
            with self.assertRaises(ValueError):
                sim.regenerate()

    def test_resize_clears_mouse(self) -> None:
        sim = make_sim()
        sim.set_mouse(10, 10)
        sim.set_viewport(400, 400)
        self.assertIsNone(sim.mouse)


class TestPopulation(unittest.TestCase):
    def test_regenerate_exact_count(self) -> None:
        sim = make_sim()
        sim.regenerate()
        self.assertEqual(len(sim.particles), 99)
        self.assertEqual(sim.validate_state(), [])

    def test_regenerate_replaces_particles(self) -> None:
        sim = make_sim()
        sim.regenerate()
        before = list(sim.particles)
        sim.regenerate()
        self.assertFalse(any(a is b for a, b in zip(before, sim.particles)))

    def test_reconcile_truncates_keeping_lowest_indices(self) -> None:
        sim = make_sim()
        sim.regenerate()
        first = sim.particles[:10]
        sim.params.max_particles = 10.0
        sim.set_viewport(800, 600)
        sim.reconcile()
        self.assertEqual(len(sim.particles), 10)
        for a, b in zip(first, sim.particles):
            self.assertIs(a, b)

    def test_reconcile_tops_up(self) -> None:
        sim = make_sim(max_particles=10)
        sim.regenerate()
        first = list(sim.particles)
        sim.params.max_particles = 25.0
        sim.set_viewport(800, 600)
        sim.reconcile()
        self.assertEqual(len(sim.particles), 25)
        for a, b in zip(first, sim.particles):
            self.assertIs(a, b)

    def test_reconcile_wraps_into_smaller_space(self) -> None:
        sim = make_sim()
        sim.regenerate()
        sim.set_viewport(100, 100)
        sim.reconcile()
        self.assertEqual(sim.validate_state(), [])

    def test_set_target_count_clamps(self) -> None:
        sim = make_sim(max_particles=20)
        sim.set_target_count(1000)
        self.assertEqual(sim.target_count, 20.0)
        sim.set_target_count(-5)
        self.assertEqual(sim.target_count, 0.0)

    def test_non_finite_target_fails_fast(self) -> None:
        sim = make_sim(ppm=math.inf, max_particles=math.inf)
        self.assertTrue(math.isinf(sim.target_count))
        with self.assertRaises(ValueError):
            sim.regenerate()
        with self.assertRaises(ValueError):
            sim.reconcile()

    def test_nan_target_fails_fast(self) -> None:
        sim = make_sim()
        sim.set_target_count(float("nan"))
        with self.assertRaises(ValueError):
            sim.regenerate()

    def test_spawn_at_viewport_position(self) -> None:
        sim = make_sim(max_particles=200)
        sim.regenerate()
        pt = sim.spawn(100.0, 50.0)
        self.assertIs(sim.particles[-1], pt)
        self.assertAlmostEqual(pt.pos_x, 250.0)
        self.assertAlmostEqual(pt.pos_y, 200.0)
        self.assertAlmostEqual(pt.x, 100.0)
        self.assertAlmostEqual(pt.y, 50.0)
        self.assertTrue(pt.visible)

    def test_spawn_ignored_when_full(self) -> None:
        sim = make_sim(max_particles=3)
        sim.regenerate()
        before = list(sim.particles)
        self.assertIsNone(sim.spawn(10.0, 10.0))
        self.assertEqual(sim.particles, before)

    def test_spawn_without_room(self) -> None:
        sim = make_sim(max_particles=0)
        self.assertIsNone(sim.spawn(1.0, 1.0))
        self.assertEqual(sim.particles, [])


class TestStep(unittest.TestCase):
    def test_positions_stay_in_range(self) -> None:
        sim = make_sim(gravity_repulsive=3.0, gravity_pulling=1.0, mouse_interaction_type=2, rotation_speed=50.0)
        sim.regenerate()
        sim.set_mouse(400.0, 300.0)
        for _ in range(20):
            sim.step()
            self.assertEqual(sim.validate_state(), [])

    def test_pair_evaluations_recorded(self) -> None:
        sim = make_sim(max_particles=12, gravity_repulsive=1.0)
        sim.regenerate()
        sim.step()
        self.assertEqual(sim.last_pair_evaluations, 12 * 11 // 2)

    def test_no_pair_pass_without_gravity(self) -> None:
        sim = make_sim(max_particles=12)
        sim.regenerate()
        sim.step()
        self.assertEqual(sim.last_pair_evaluations, 0)
        for pt in sim.particles:
            self.assertEqual((pt.vel_x, pt.vel_y), (0.0, 0.0))

    def test_visibility_refreshed(self) -> None:
        sim = make_sim(rel_speed=0.0, mouse_interaction_type=0)
        sim.particles = [Particle(pos_x=10.0, pos_y=10.0, heading=0.0, speed=0.0, size=1.0)]
        sim.step()
        self.assertEqual(sim.particles[0].region, (0, 0))
        self.assertFalse(sim.particles[0].visible)

    def test_validate_state_flags_nan(self) -> None:
        sim = make_sim(max_particles=1)
        sim.regenerate()
        self.assertEqual(sim.validate_state(), [])

        sim.particles[0].vel_x = float("nan")
        issues = sim.validate_state()
        self.assertTrue(any("non-finite" in issue for issue in issues))
