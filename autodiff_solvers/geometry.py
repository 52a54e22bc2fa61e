"""
Egocentric and allocentric 2D points.

Allocentric coordinates live in the shared world frame; egocentric
coordinates are relative to a robot at PositionAllo (x, y, theta), with the
x axis along the robot's heading. Planning code converts points here and
then hands the numbers to the term layer via as_terms().
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from autodiff_solvers.terms import Constant


@dataclass(frozen=True)
class PositionAllo:
    """A pose in the world frame; theta in radians."""

    x: float = 0.0
    y: float = 0.0
    theta: float = 0.0


@dataclass(frozen=True)
class Point2DAllo:
    x: float = 0.0
    y: float = 0.0

    def to_ego(self, origin: PositionAllo) -> Point2DEgo:
        """Express this point relative to origin."""
        dx, dy = self.x - origin.x, self.y - origin.y
        cos_t, sin_t = math.cos(-origin.theta), math.sin(-origin.theta)
        return Point2DEgo(dx * cos_t - dy * sin_t, dx * sin_t + dy * cos_t)

    def distance_to(self, other: Point2DAllo) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def as_terms(self) -> tuple[Constant, Constant]:
        return Constant(self.x), Constant(self.y)

    def __str__(self) -> str:
        return f"Point2DAllo: x: {self.x} y: {self.y}"


@dataclass(frozen=True)
class Point2DEgo:
    x: float = 0.0
    y: float = 0.0

    def to_allo(self, origin: PositionAllo) -> Point2DAllo:
        """Express this origin-relative point in the world frame."""
        cos_t, sin_t = math.cos(origin.theta), math.sin(origin.theta)
        return Point2DAllo(
            origin.x + self.x * cos_t - self.y * sin_t,
            origin.y + self.x * sin_t + self.y * cos_t,
        )

    def distance_to(self, other: Point2DEgo) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def as_terms(self) -> tuple[Constant, Constant]:
        return Constant(self.x), Constant(self.y)

    def __str__(self) -> str:
        return f"Point2DEgo: x: {self.x} y: {self.y}"
