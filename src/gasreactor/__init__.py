"""gasreactor core package."""

from gasreactor.config import Scenario, SimulationConfig, default_scenario, load_scenario
from gasreactor.models import ParticleState, Term
from gasreactor.particles import Particle, ParticleFactory
from gasreactor.reactions import Direction, Reaction
from gasreactor.simulation import RenderItem, Simulation
from gasreactor.vector import Vector

__all__ = [
    "Direction",
    "Particle",
    "ParticleFactory",
    "ParticleState",
    "Reaction",
    "RenderItem",
    "Scenario",
    "Simulation",
    "SimulationConfig",
    "Term",
    "Vector",
    "default_scenario",
    "load_scenario",
]
