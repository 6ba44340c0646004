"""Stoichiometric reaction rules and particle matching.

A reaction fires between particles that overlap in space. Matching is
planned on a private copy of the candidate list and only committed (consumed
particles marked removed, products queued) once every required species is
present in sufficient number. Products are queued rather than inserted so the
live particle list is never extended while it is being iterated; they become
live at the start of the next tick.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, MutableSequence, Optional, Sequence, Tuple

from gasreactor.models import ParticleState, Term
from gasreactor.particles import Particle, ParticleFactory, average_position, mark_removed
from gasreactor.vector import Vector

logger = logging.getLogger(__name__)


class Direction(Enum):
    FORWARD = "forward"
    REVERSE = "reverse"


@dataclass(frozen=True)
class Reaction:
    """Rule ``reactants -> products`` (or ``<=>`` when reversible).

    Attributes:
        name: Label used in logs and reports.
        reactants: Consumed by the forward direction.
        products: Produced by the forward direction, consumed by the reverse.
        reversible: Whether the reverse direction may fire.
    """

    name: str
    reactants: Tuple[Term, ...]
    products: Tuple[Term, ...]
    reversible: bool = False

    def __post_init__(self) -> None:
        # Allow lists at construction, store tuples
        object.__setattr__(self, "reactants", tuple(self.reactants))
        object.__setattr__(self, "products", tuple(self.products))
        for term in self.reactants + self.products:
            if not isinstance(term, Term):
                raise ValueError(f"Reaction {self.name!r} has a non-Term entry: {term!r}")

    @property
    def formula(self) -> str:
        arrow = "<=>" if self.reversible else "->"
        left = " + ".join(str(term) for term in self.reactants)
        right = " + ".join(str(term) for term in self.products)
        return f"{left} {arrow} {right}"

    @property
    def species(self) -> Tuple[str, ...]:
        seen = []
        for term in self.reactants + self.products:
            if term.formula not in seen:
                seen.append(term.formula)
        return tuple(seen)

    def required_terms(self, direction: Direction) -> Tuple[Term, ...]:
        return self.reactants if direction is Direction.FORWARD else self.products

    def produced_terms(self, direction: Direction) -> Tuple[Term, ...]:
        return self.products if direction is Direction.FORWARD else self.reactants

    def get_consumed_particles(
        self, direction: Direction, candidates: Sequence[Particle]
    ) -> Optional[List[Particle]]:
        """Plan which candidates one firing in ``direction`` would consume.

        Returns ``None`` when any required species is short. Neither the
        caller's sequence nor any particle is modified.
        """
        pool = list(candidates)
        consumed: List[Particle] = []

        for term in self.required_terms(direction):
            matching = [
                particle
                for particle in pool
                if particle.state is ParticleState.ACTIVE and particle.formula == term.formula
            ]
            if len(matching) < term.coefficient:
                return None

            taken = matching[: term.coefficient]
            consumed.extend(taken)
            pool = [particle for particle in pool if particle not in taken]

        return consumed

    def get_produced_particles(
        self,
        direction: Direction,
        location: Vector,
        temperature: float,
        factory: ParticleFactory,
    ) -> List[Particle]:
        produced = []
        for term in self.produced_terms(direction):
            for _ in range(term.coefficient):
                produced.append(factory.create_product(term.formula, location, temperature))
        return produced

    def attempt_reaction(
        self,
        candidates: Sequence[Particle],
        creation_queue: MutableSequence[Particle],
        temperature: float,
        factory: ParticleFactory,
    ) -> Optional[Direction]:
        """Fire at most one direction, forward first.

        Returns the direction that fired, or ``None`` if neither matched.
        """
        directions = [Direction.FORWARD]
        if self.reversible:
            directions.append(Direction.REVERSE)

        for direction in directions:
            consumed = self.get_consumed_particles(direction, candidates)
            if consumed is None:
                continue

            location = average_position(consumed)
            mark_removed(consumed)
            creation_queue.extend(
                self.get_produced_particles(direction, location, temperature, factory)
            )
            logger.debug(
                "Reaction %s fired %s at (%.1f, %.1f): consumed %d particle(s)",
                self.name,
                direction.value,
                location.x,
                location.y,
                len(consumed),
            )
            return direction

        return None
