"""Two dimensional vector value type."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class Vector:
    """Immutable 2D vector. Every operation returns a new instance."""

    x: float = 0.0
    y: float = 0.0

    @classmethod
    def zero(cls) -> Vector:
        return cls(0.0, 0.0)

    def copy(self) -> Vector:
        return Vector(self.x, self.y)

    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def scaled(self, scaler: float) -> Vector:
        return Vector(scaler * self.x, scaler * self.y)

    def negated(self) -> Vector:
        return self.scaled(-1)

    def added(self, other: Vector) -> Vector:
        return Vector(self.x + other.x, self.y + other.y)

    def difference(self, other: Vector) -> Vector:
        """Return ``other - self``.

        The operands are reversed with respect to the usual ``a - b``
        convention: ``a.difference(b)`` points from ``a`` to ``b``.
        """
        return Vector(other.x - self.x, other.y - self.y)

    def distance_to(self, other: Vector) -> float:
        return self.difference(other).magnitude()

    def normalized(self) -> Vector:
        mag = self.magnitude()
        # Zero vector has no direction
        if mag == 0:
            return Vector(0.0, 0.0)
        return Vector(self.x / mag, self.y / mag)

    def rotated(self, theta: float) -> Vector:
        """Rotate counter-clockwise by ``theta`` radians."""
        cos_t = math.cos(theta)
        sin_t = math.sin(theta)
        return Vector(
            self.x * cos_t - self.y * sin_t,
            self.x * sin_t + self.y * cos_t,
        )


def average(vectors: Iterable[Vector]) -> Vector:
    """Mean of ``vectors``; the origin when there are none."""
    total = Vector.zero()
    count = 0
    for vector in vectors:
        total = total.added(vector)
        count += 1
    if count == 0:
        return total
    return total.scaled(1.0 / count)
