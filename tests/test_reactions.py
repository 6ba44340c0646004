import unittest

import numpy as np

from gasreactor.config import SimulationConfig
from gasreactor.models import ParticleState, Term
from gasreactor.particles import Particle, ParticleFactory
from gasreactor.reactions import Direction, Reaction
from gasreactor.vector import Vector


def make_particle(formula, x=100.0, y=100.0, state=ParticleState.ACTIVE):
    return Particle(formula, "blue", Vector(x, y), 2.0, state=state)


class TestReactionMatching(unittest.TestCase):
    def setUp(self):
        self.factory = ParticleFactory(SimulationConfig(cooldown=30), np.random.default_rng(1))

    def test_all_or_nothing(self):
        reaction = Reaction("rxn", [Term("A", 1), Term("B", 2)], [Term("C", 1)])
        a = make_particle("A")
        b = make_particle("B")
        candidates = [a, b]
        queue = []

        self.assertIsNone(reaction.get_consumed_particles(Direction.FORWARD, candidates))
        self.assertIsNone(reaction.attempt_reaction(candidates, queue, 2.0, self.factory))

        self.assertEqual(candidates, [a, b])
        self.assertEqual(a.state, ParticleState.ACTIVE)
        self.assertEqual(b.state, ParticleState.ACTIVE)
        self.assertEqual(queue, [])

    def test_consumes_only_matching_species(self):
        reaction = Reaction("rxn", [Term("A", 2)], [Term("B", 1)])
        c = make_particle("C")
        a1 = make_particle("A")
        a2 = make_particle("A")
        a3 = make_particle("A")

        consumed = reaction.get_consumed_particles(Direction.FORWARD, [c, a1, a2, a3])

        self.assertEqual(len(consumed), 2)
        self.assertIs(consumed[0], a1)
        self.assertIs(consumed[1], a2)
        # Planning never commits
        self.assertTrue(all(p.state is ParticleState.ACTIVE for p in [c, a1, a2, a3]))

    def test_cooldown_particles_are_invisible(self):
        reaction = Reaction("rxn", [Term("A", 2)], [Term("B", 1)])
        candidates = [make_particle("A"), make_particle("A", state=ParticleState.COOLDOWN)]
        self.assertIsNone(reaction.get_consumed_particles(Direction.FORWARD, candidates))

    def test_forward_takes_priority(self):
        reaction = Reaction("rxn", [Term("A", 1)], [Term("B", 1)], reversible=True)
        a = make_particle("A")
        b = make_particle("B")
        queue = []

        fired = reaction.attempt_reaction([a, b], queue, 2.0, self.factory)

        self.assertIs(fired, Direction.FORWARD)
        self.assertEqual(a.state, ParticleState.REMOVED)
        self.assertEqual(b.state, ParticleState.ACTIVE)
        self.assertEqual([p.formula for p in queue], ["B"])

    def test_reverse_direction(self):
        reaction = Reaction("rxn", [Term("A", 2)], [Term("B", 1)], reversible=True)
        b = make_particle("B")
        queue = []

        fired = reaction.attempt_reaction([b], queue, 2.0, self.factory)

        self.assertIs(fired, Direction.REVERSE)
        self.assertEqual(b.state, ParticleState.REMOVED)
        self.assertEqual([p.formula for p in queue], ["A", "A"])

    def test_irreversible_never_reverses(self):
        reaction = Reaction("rxn", [Term("A", 2)], [Term("B", 1)])
        b = make_particle("B")
        queue = []
        self.assertIsNone(reaction.attempt_reaction([b], queue, 2.0, self.factory))
        self.assertEqual(b.state, ParticleState.ACTIVE)
        self.assertEqual(queue, [])

    def test_products_at_centroid_in_cooldown(self):
        reaction = Reaction("rxn", [Term("A", 1), Term("B", 1)], [Term("C", 2)])
        a = make_particle("A", 100.0, 100.0)
        b = make_particle("B", 110.0, 120.0)
        queue = []

        reaction.attempt_reaction([a, b], queue, 3.0, self.factory)

        self.assertEqual(len(queue), 2)
        for product in queue:
            self.assertEqual(product.formula, "C")
            self.assertEqual(product.state, ParticleState.COOLDOWN)
            self.assertEqual(product.cooldown, 30)
            self.assertEqual(product.pos, Vector(105.0, 110.0))
            self.assertEqual(product.temperature, 3.0)

    def test_produced_particles_by_direction(self):
        reaction = Reaction("rxn", [Term("A", 2), Term("B", 1)], [Term("C", 3)], reversible=True)
        forward = reaction.get_produced_particles(Direction.FORWARD, Vector(), 2.0, self.factory)
        reverse = reaction.get_produced_particles(Direction.REVERSE, Vector(), 2.0, self.factory)
        self.assertEqual([p.formula for p in forward], ["C", "C", "C"])
        self.assertEqual([p.formula for p in reverse], ["A", "A", "B"])


class TestReactionDefinition(unittest.TestCase):
    def test_formula(self):
        reversible = Reaction("rxn1", [Term("A", 2)], [Term("B", 2)], reversible=True)
        forward_only = Reaction("rxn2", [Term("A", 1), Term("B", 1)], [Term("C", 2)])
        self.assertEqual(reversible.formula, "2A <=> 2B")
        self.assertEqual(forward_only.formula, "1A + 1B -> 2C")
        self.assertEqual(forward_only.species, ("A", "B", "C"))

    def test_invalid_coefficients(self):
        with self.assertRaises(ValueError):
            Term("A", 0)
        with self.assertRaises(ValueError):
            Term("A", -2)
        with self.assertRaises(ValueError):
            Term("A", 1.5)

    def test_terms_required(self):
        with self.assertRaises(ValueError):
            Reaction("rxn", [("A", 1)], [Term("B", 1)])


if __name__ == '__main__':
    unittest.main()
