"""Particles and the factory that spawns them."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Optional

import numpy as np

from gasreactor import constants
from gasreactor.models import ParticleState
from gasreactor.vector import Vector, average

if TYPE_CHECKING:
    from gasreactor.config import SimulationConfig


@dataclass(eq=False)
class Particle:
    """A single instance of a chemical species.

    Identity matters: two particles with equal fields are still different
    particles, so equality falls back to ``is``.
    """

    formula: str
    color: str
    pos: Vector
    temperature: float
    vel: Vector = field(default_factory=Vector.zero)
    radius: float = constants.PARTICLE_RADIUS
    state: ParticleState = ParticleState.ACTIVE
    cooldown: int = 0

    @property
    def is_reactive(self) -> bool:
        return self.state is ParticleState.ACTIVE

    @property
    def is_removed(self) -> bool:
        return self.state is ParticleState.REMOVED

    @property
    def speed(self) -> float:
        return self.vel.magnitude()

    def change_temperature(self, temperature: float) -> None:
        """Rescale velocity to ``temperature`` keeping the speed/temperature ratio."""
        if self.temperature == 0:
            return

        speed_ratio = self.vel.magnitude() / self.temperature
        self.vel = self.vel.normalized().scaled(speed_ratio * temperature)
        self.temperature = temperature

    def update(self, width: float, height: float) -> None:
        """Advance one tick inside a ``width`` x ``height`` container."""
        new_pos = self.pos.added(self.vel)
        x, y = new_pos.x, new_pos.y
        vx, vy = self.vel.x, self.vel.y

        # Each wall reflects its own axis; a corner flips both
        if x - self.radius < 0:
            x = self.radius
            vx = -vx
        if x + self.radius > width:
            x = width - self.radius
            vx = -vx
        if y - self.radius < 0:
            y = self.radius
            vy = -vy
        if y + self.radius > height:
            y = height - self.radius
            vy = -vy

        self.pos = Vector(x, y)
        self.vel = Vector(vx, vy)

        if self.cooldown > 0:
            self.cooldown -= 1
        if self.cooldown <= 0 or self.state is ParticleState.ACTIVE:
            self.cooldown = 0
            self.state = ParticleState.ACTIVE


class ParticleFactory:
    """Creates particles with a randomized heading and speed."""

    def __init__(self, config: SimulationConfig, rng: Optional[np.random.Generator] = None):
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)

    def create(self, formula: str, pos: Vector, temperature: float, cooldown: int = 0) -> Particle:
        variation = self.config.speed_variation
        speed_scaler = float(self.rng.uniform(1.0 - variation, 1.0 + variation))
        angle = float(self.rng.uniform(0.0, 2.0 * math.pi))
        vel = Vector(temperature, 0.0).scaled(speed_scaler).rotated(angle)

        particle = Particle(
            formula=formula,
            color=self.config.color_for(formula),
            pos=pos,
            temperature=temperature,
            vel=vel,
            radius=self.config.radius,
        )
        if cooldown != 0:
            particle.state = ParticleState.COOLDOWN
            particle.cooldown = cooldown
        return particle

    def create_product(self, formula: str, pos: Vector, temperature: float) -> Particle:
        return self.create(formula, pos, temperature, cooldown=self.config.cooldown)

    def random_position(self) -> Vector:
        radius = self.config.radius
        return Vector(
            float(self.rng.uniform(radius, self.config.width - radius)),
            float(self.rng.uniform(radius, self.config.height - radius)),
        )


def mark_removed(particles: Iterable[Particle]) -> None:
    for particle in particles:
        particle.state = ParticleState.REMOVED


def change_temperature(particles: Iterable[Particle], temperature: float) -> None:
    for particle in particles:
        particle.change_temperature(temperature)


def average_speed(particles: Iterable[Particle]) -> float:
    speeds = [particle.speed for particle in particles]
    if not speeds:
        return 0.0
    return float(np.mean(speeds))


def average_position(particles: Iterable[Particle]) -> Vector:
    return average(particle.pos for particle in particles)
