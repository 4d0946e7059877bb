"""Rays, planar rotations and small numeric helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

from raytrace.vector import Vec3


@dataclass
class Ray:
    """A half-line with an origin and a direction."""

    origin: Vec3 = field(default_factory=Vec3)
    direction: Vec3 = field(default_factory=Vec3)


@dataclass(frozen=True)
class Rotation:
    """A rotation by a fixed angle in a plane."""

    radians: float = 0.0
    _sin: float = field(init=False, repr=False, compare=False)
    _cos: float = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_sin", math.sin(self.radians))
        object.__setattr__(self, "_cos", math.cos(self.radians))

    def rotate(self, x: float, y: float) -> Tuple[float, float]:
        """Return (x, y) rotated by this angle."""
        return (
            x * self._cos - y * self._sin,
            x * self._sin + y * self._cos,
        )

    @classmethod
    def from_degrees(cls, degrees: float) -> "Rotation":
        return cls(degrees * math.pi / 180.0)


def rotate_vector(v: Vec3, horizontal: Rotation, vertical: Rotation) -> Vec3:
    """Turn a vector horizontally (x-z plane), then tilt it vertically."""
    x, z = horizontal.rotate(v.x, v.z)
    horizontal_length = math.sqrt(x * x + z * z)
    tilted_length, y = vertical.rotate(horizontal_length, v.y)
    scale = tilted_length / horizontal_length if horizontal_length != 0 else math.nan
    return Vec3(x * scale, y, z * scale)


def solve_quadratic(a: float, b: float, c: float) -> Optional[Tuple[float, float]]:
    """Real roots of a*t^2 + b*t + c, smaller first, or None if there are none."""
    if a == 0:
        if b == 0:
            return None
        root = -c / b
        return (root, root)
    discriminant = b * b - 4 * a * c
    if discriminant < 0:
        return None
    s = math.sqrt(discriminant)
    r0 = (-b - s) / (2 * a)
    r1 = (-b + s) / (2 * a)
    return (min(r0, r1), max(r0, r1))


def nearest_root(a: float, b: float, c: float) -> float:
    """Smallest non-negative root of the quadratic, or -1 if none exists."""
    roots = solve_quadratic(a, b, c)
    if roots is None:
        return -1.0
    for root in roots:
        if root >= 0:
            return root
    return -1.0


def neg_mod(value: float, modulus: float) -> float:
    """Modulo whose result takes the sign of the modulus, also for negative values."""
    return value % modulus


def divide_neg(value: float, divisor: float) -> int:
    """Integer division rounding toward negative infinity."""
    return math.floor(value / divisor)