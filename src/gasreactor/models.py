"""Data structures shared by particles and reactions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ParticleState(Enum):
    ACTIVE = "active"
    COOLDOWN = "cooldown"
    REMOVED = "removed"


@dataclass(frozen=True)
class Term:
    """One side entry of a reaction, e.g. ``2A`` is ``Term("A", 2)``."""

    formula: str
    coefficient: int = 1

    def __post_init__(self) -> None:
        if isinstance(self.coefficient, bool) or not isinstance(self.coefficient, int):
            raise ValueError(f"Coefficient of {self.formula!r} must be an integer: {self.coefficient!r}")
        if self.coefficient <= 0:
            raise ValueError(f"Coefficient of {self.formula!r} must be positive: {self.coefficient}")

    def __str__(self) -> str:
        return f"{self.coefficient}{self.formula}"
