"""Simulation context and per-tick driver."""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np

from gasreactor.config import Scenario, SimulationConfig
from gasreactor.models import ParticleState
from gasreactor.particles import Particle, ParticleFactory, average_speed, change_temperature
from gasreactor.reactions import Reaction
from gasreactor.vector import Vector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderItem:
    """What a renderer needs to draw one particle."""

    x: float
    y: float
    radius: float
    color: str
    label: str


class Simulation:
    """Owns the particle population and applies control inputs.

    External mutations (temperature, concentration, pause, clicks) are
    applied immediately; they are never interleaved with a running tick.
    """

    def __init__(
        self,
        config: SimulationConfig,
        reactions: Sequence[Reaction] = (),
        rng: Optional[np.random.Generator] = None,
    ):
        self.config = config
        self.reactions = tuple(reactions)
        self.factory = ParticleFactory(config, rng)
        self.temperature = config.temperature
        self.paused = False
        self.particles: List[Particle] = []
        self.creation_queue: List[Particle] = []
        self.tick_count = 0

    @classmethod
    def from_scenario(cls, scenario: Scenario, rng: Optional[np.random.Generator] = None) -> Simulation:
        simulation = cls(scenario.config, scenario.reactions, rng)
        simulation.populate(scenario.initial_counts)
        return simulation

    # Tick

    def tick(self) -> bool:
        """Advance one frame. Returns ``False`` when paused."""
        if self.paused:
            return False

        self.particles.extend(self.creation_queue)
        self.creation_queue = []

        survivors = []
        for particle in self.particles:
            if particle.state is ParticleState.REMOVED:
                continue
            particle.update(self.config.width, self.config.height)
            survivors.append(particle)
        self.particles = survivors

        for particle in self.particles:
            if particle.state is not ParticleState.ACTIVE:
                continue
            neighbors = self.neighbors(particle)
            for reaction in self.reactions:
                if reaction.attempt_reaction(neighbors, self.creation_queue, self.temperature, self.factory):
                    break

        self.tick_count += 1
        return True

    def neighbors(self, particle: Particle) -> List[Particle]:
        """``particle`` followed by every active particle overlapping it."""
        found = [particle]
        for other in self.particles:
            if other is particle or other.state is not ParticleState.ACTIVE:
                continue
            if particle.pos.distance_to(other.pos) < particle.radius + other.radius:
                found.append(other)
        return found

    def run(self, ticks: int) -> int:
        """Invoke :meth:`tick` ``ticks`` times; returns how many advanced."""
        advanced = 0
        for _ in range(ticks):
            if self.tick():
                advanced += 1
        return advanced

    # Control inputs

    def set_temperature(self, temperature: float) -> None:
        if not math.isfinite(temperature) or temperature < 0:
            raise ValueError(f"Temperature must be finite and non-negative: {temperature}")

        change_temperature(self.particles, temperature)
        change_temperature(self.creation_queue, temperature)
        self.temperature = temperature
        logger.info("Container temperature set to %s", temperature)

    def toggle_pause(self) -> bool:
        self.paused = not self.paused
        logger.info("Simulation %s", "paused" if self.paused else "resumed")
        return self.paused

    def click(self, x: float, y: float) -> Particle:
        """Queue one active particle of the default species at ``(x, y)``."""
        particle = self.factory.create(self.config.default_species, Vector(x, y), self.temperature)
        self.creation_queue.append(particle)
        return particle

    def species_count(self, formula: str) -> int:
        """Live non-removed plus queued particles of ``formula``."""
        live = sum(
            1
            for particle in self.particles
            if particle.formula == formula and particle.state is not ParticleState.REMOVED
        )
        queued = sum(1 for particle in self.creation_queue if particle.formula == formula)
        return live + queued

    def set_concentration(self, formula: str, target: int) -> int:
        """Add or remove ``formula`` particles until its count equals ``target``.

        The count is :meth:`species_count`, so particles still in cooldown
        count and may be removed. Excess live particles are removed
        oldest-first (ACTIVE or COOLDOWN alike), then the newest queued ones
        are dropped. Shortfalls are queued as ACTIVE particles at random
        in-bounds positions.
        """
        if target < 0:
            raise ValueError(f"Target count of {formula!r} must be non-negative: {target}")

        count = self.species_count(formula)
        if count > target:
            excess = count - target
            for particle in self.particles:
                if excess == 0:
                    break
                if particle.formula == formula and particle.state is not ParticleState.REMOVED:
                    particle.state = ParticleState.REMOVED
                    excess -= 1
            # Queued particles were never live; drop the newest ones
            index = len(self.creation_queue) - 1
            while excess > 0 and index >= 0:
                if self.creation_queue[index].formula == formula:
                    del self.creation_queue[index]
                    excess -= 1
                index -= 1
        elif count < target:
            for _ in range(target - count):
                self.creation_queue.append(
                    self.factory.create(formula, self.factory.random_position(), self.temperature)
                )

        logger.debug("Concentration of %s adjusted from %d to %d", formula, count, target)
        return self.species_count(formula)

    def populate(self, counts: Mapping[str, int]) -> None:
        for formula, count in counts.items():
            self.set_concentration(formula, self.species_count(formula) + count)

    # Reporting

    def species(self) -> List[str]:
        """Known formulas: configured colors, reaction species, then any live ones."""
        names: List[str] = list(self.config.colors)
        for reaction in self.reactions:
            names.extend(reaction.species)
        names.extend(particle.formula for particle in self.particles + self.creation_queue)
        return list(dict.fromkeys(names))

    def species_counts(self) -> Dict[str, int]:
        """:meth:`species_count` for every known formula."""
        counts = Counter(
            particle.formula
            for particle in self.particles
            if particle.state is not ParticleState.REMOVED
        )
        counts.update(particle.formula for particle in self.creation_queue)
        return {formula: counts.get(formula, 0) for formula in self.species()}

    def average_speed(self) -> float:
        return average_speed(p for p in self.particles if p.state is not ParticleState.REMOVED)

    def render_items(self) -> List[RenderItem]:
        return [
            RenderItem(
                x=particle.pos.x,
                y=particle.pos.y,
                radius=particle.radius,
                color=particle.color,
                label=particle.formula,
            )
            for particle in self.particles
            if particle.state is not ParticleState.REMOVED
        ]
