import math
import unittest

import numpy as np

from gasreactor.config import SimulationConfig
from gasreactor.models import ParticleState
from gasreactor.particles import (
    Particle,
    ParticleFactory,
    average_position,
    average_speed,
    change_temperature,
    mark_removed,
)
from gasreactor.vector import Vector


def make_particle(x, y, vx=0.0, vy=0.0, temperature=2.0, formula="A"):
    return Particle(formula, "blue", Vector(x, y), temperature, vel=Vector(vx, vy), radius=10.0)


class TestBoundaryReflection(unittest.TestCase):
    def test_left_wall(self):
        particle = make_particle(12.0, 50.0, vx=-5.0, vy=1.0)
        particle.update(100.0, 100.0)
        self.assertEqual(particle.pos.x, particle.radius)
        self.assertEqual(particle.vel.x, 5.0)
        self.assertEqual(particle.vel.y, 1.0)
        self.assertEqual(particle.pos.y, 51.0)

    def test_right_and_bottom_walls(self):
        particle = make_particle(88.0, 88.0, vx=5.0, vy=5.0)
        particle.update(100.0, 100.0)
        self.assertEqual(particle.pos, Vector(90.0, 90.0))
        self.assertEqual(particle.vel, Vector(-5.0, -5.0))

    def test_corner_reflects_both_axes(self):
        particle = make_particle(12.0, 12.0, vx=-5.0, vy=-5.0)
        particle.update(100.0, 100.0)
        self.assertEqual(particle.pos, Vector(10.0, 10.0))
        self.assertEqual(particle.vel, Vector(5.0, 5.0))

    def test_interior_motion(self):
        particle = make_particle(50.0, 50.0, vx=1.5, vy=-2.0)
        particle.update(100.0, 100.0)
        self.assertEqual(particle.pos, Vector(51.5, 48.0))
        self.assertEqual(particle.vel, Vector(1.5, -2.0))


class TestCooldown(unittest.TestCase):
    def test_cooldown_counts_down_to_active(self):
        particle = make_particle(50.0, 50.0)
        particle.state = ParticleState.COOLDOWN
        particle.cooldown = 3

        particle.update(100.0, 100.0)
        particle.update(100.0, 100.0)
        self.assertEqual(particle.state, ParticleState.COOLDOWN)
        self.assertEqual(particle.cooldown, 1)
        self.assertFalse(particle.is_reactive)

        particle.update(100.0, 100.0)
        self.assertEqual(particle.state, ParticleState.ACTIVE)
        self.assertEqual(particle.cooldown, 0)
        self.assertTrue(particle.is_reactive)

    def test_active_particle_stays_active(self):
        particle = make_particle(50.0, 50.0)
        particle.update(100.0, 100.0)
        self.assertEqual(particle.state, ParticleState.ACTIVE)
        self.assertEqual(particle.cooldown, 0)


class TestTemperature(unittest.TestCase):
    def test_rescale_preserves_speed_ratio(self):
        particle = make_particle(50.0, 50.0, vx=3.0, vy=4.0, temperature=2.0)
        ratio = particle.speed / particle.temperature

        particle.change_temperature(4.0)

        self.assertAlmostEqual(particle.speed / 4.0, ratio)
        self.assertAlmostEqual(particle.vel.x, 6.0)
        self.assertAlmostEqual(particle.vel.y, 8.0)
        self.assertEqual(particle.temperature, 4.0)

    def test_zero_temperature_is_noop(self):
        particle = make_particle(50.0, 50.0, vx=3.0, vy=4.0, temperature=0.0)
        particle.change_temperature(5.0)
        self.assertEqual(particle.vel, Vector(3.0, 4.0))
        self.assertEqual(particle.temperature, 0.0)

    def test_population_helpers(self):
        particles = [
            make_particle(10.0, 10.0, vx=3.0, vy=4.0, temperature=1.0),
            make_particle(30.0, 20.0, vx=0.0, vy=1.0, temperature=1.0),
        ]
        self.assertAlmostEqual(average_speed(particles), 3.0)
        self.assertEqual(average_position(particles), Vector(20.0, 15.0))

        change_temperature(particles, 2.0)
        self.assertAlmostEqual(average_speed(particles), 6.0)

        mark_removed(particles)
        self.assertTrue(all(p.is_removed for p in particles))

    def test_empty_population(self):
        self.assertEqual(average_speed([]), 0.0)
        self.assertEqual(average_position([]), Vector(0.0, 0.0))


class TestParticleFactory(unittest.TestCase):
    def setUp(self):
        self.config = SimulationConfig(width=200.0, height=100.0, speed_variation=0.5, cooldown=12)
        self.factory = ParticleFactory(self.config, np.random.default_rng(42))

    def test_speed_within_variation_bound(self):
        for _ in range(50):
            particle = self.factory.create("A", Vector(50.0, 50.0), 2.0)
            self.assertGreaterEqual(particle.speed, 1.0 - 1e-9)
            self.assertLessEqual(particle.speed, 3.0 + 1e-9)
            self.assertEqual(particle.state, ParticleState.ACTIVE)
            self.assertEqual(particle.radius, self.config.radius)

    def test_no_variation_gives_nominal_speed(self):
        factory = ParticleFactory(SimulationConfig(speed_variation=0.0), np.random.default_rng(0))
        particle = factory.create("B", Vector(1.0, 1.0), 3.0)
        self.assertTrue(math.isclose(particle.speed, 3.0))

    def test_colors(self):
        self.assertEqual(self.factory.create("A", Vector(), 1.0).color, "blue")
        self.assertEqual(self.factory.create("Xe", Vector(), 1.0).color, self.config.fallback_color)

    def test_product_starts_in_cooldown(self):
        particle = self.factory.create_product("B", Vector(5.0, 5.0), 2.0)
        self.assertEqual(particle.state, ParticleState.COOLDOWN)
        self.assertEqual(particle.cooldown, 12)
        self.assertEqual(particle.pos, Vector(5.0, 5.0))

    def test_random_position_in_bounds(self):
        for _ in range(100):
            pos = self.factory.random_position()
            self.assertTrue(self.config.radius <= pos.x <= self.config.width - self.config.radius)
            self.assertTrue(self.config.radius <= pos.y <= self.config.height - self.config.radius)

    def test_seeded_factories_are_reproducible(self):
        config = SimulationConfig(seed=5)
        first = ParticleFactory(config).create("A", Vector(), 2.0)
        second = ParticleFactory(config).create("A", Vector(), 2.0)
        self.assertEqual(first.vel, second.vel)


if __name__ == '__main__':
    unittest.main()
