"""Two- and three-component vectors of floats."""

from __future__ import annotations

import math
import operator
from dataclasses import dataclass
from typing import Callable, Iterator, Tuple, TypeVar, Union

Scalar = Union[int, float]
_V = TypeVar("_V", bound="_VectorOps")


def _div(a: float, b: float) -> float:
    """Divide with IEEE semantics: division by zero gives inf or nan."""
    if b == 0:
        if a == 0 or math.isnan(a) or math.isnan(b):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _rdiv(a: float, b: float) -> float:
    return _div(b, a)


def _rsub(a: float, b: float) -> float:
    return b - a


def _clamp_one(value: float, low: float, high: float) -> float:
    if value < low:
        return low
    if value > high:
        return high
    return value


class _VectorOps:
    """Component-wise arithmetic shared by the vector types."""

    __slots__ = ()

    def _parts(self) -> Tuple[float, ...]:
        raise NotImplementedError

    @classmethod
    def _from_parts(cls: type[_V], parts: Tuple[float, ...]) -> _V:
        return cls(*parts)  # type: ignore[call-arg]

    def _apply(self, other: object, op: Callable[[float, float], float]):
        if isinstance(other, type(self)):
            pairs = zip(self._parts(), other._parts())
            return self._from_parts(tuple(op(a, b) for a, b in pairs))
        if isinstance(other, (int, float)):
            return self._from_parts(tuple(op(a, other) for a in self._parts()))
        return NotImplemented

    def __add__(self, other):
        return self._apply(other, operator.add)

    def __radd__(self, other):
        return self._apply(other, operator.add)

    def __sub__(self, other):
        return self._apply(other, operator.sub)

    def __rsub__(self, other):
        return self._apply(other, _rsub)

    def __mul__(self, other):
        return self._apply(other, operator.mul)

    def __rmul__(self, other):
        return self._apply(other, operator.mul)

    def __truediv__(self, other):
        return self._apply(other, _div)

    def __rtruediv__(self, other):
        return self._apply(other, _rdiv)

    def __neg__(self):
        return self._from_parts(tuple(-a for a in self._parts()))

    def __iter__(self) -> Iterator[float]:
        return iter(self._parts())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return all(a == b for a, b in zip(self._parts(), other._parts()))

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return any(a != b for a, b in zip(self._parts(), other._parts()))

    def __hash__(self) -> int:
        return hash(self._parts())


@dataclass(frozen=True, eq=False)
class Vec2(_VectorOps):
    """A 2D vector."""

    x: float = 0.0
    y: float = 0.0

    def _parts(self) -> Tuple[float, ...]:
        return (self.x, self.y)

    def dot(self, other: "Vec2") -> float:
        """Scalar product."""
        return self.x * other.x + self.y * other.y

    def dot_itself(self) -> float:
        """Squared length."""
        return self.x * self.x + self.y * self.y

    def length(self) -> float:
        return math.sqrt(self.dot_itself())

    def normal(self) -> "Vec2":
        """Unit vector in the same direction; the zero vector stays zero."""
        length = self.length()
        if length == 0:
            return Vec2(0.0, 0.0)
        return Vec2(_div(self.x, length), _div(self.y, length))

    def inverse(self) -> "Vec2":
        return Vec2(-self.x, -self.y)

    def clamp(self, low: float, high: float) -> "Vec2":
        """Clamp every component into [low, high]."""
        return Vec2(_clamp_one(self.x, low, high), _clamp_one(self.y, low, high))

    def is_empty(self) -> bool:
        """True when every component is NaN."""
        return math.isnan(self.x) and math.isnan(self.y)

    @classmethod
    def empty(cls) -> "Vec2":
        """A vector marked as 'no value' (all components NaN)."""
        return cls(math.nan, math.nan)


@dataclass(frozen=True, eq=False)
class Vec3(_VectorOps):
    """A 3D vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def _parts(self) -> Tuple[float, ...]:
        return (self.x, self.y, self.z)

    def dot(self, other: "Vec3") -> float:
        """Scalar product."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "Vec3") -> "Vec3":
        return Vec3(
            self.y * other.z - self.z * other.y,
            -(self.x * other.z - self.z * other.x),
            self.x * other.y - self.y * other.x,
        )

    def dot_itself(self) -> float:
        """Squared length."""
        return self.x * self.x + self.y * self.y + self.z * self.z

    def length(self) -> float:
        return math.sqrt(self.dot_itself())

    def normal(self) -> "Vec3":
        """Unit vector in the same direction; the zero vector stays zero."""
        length = self.length()
        if length == 0:
            return Vec3(0.0, 0.0, 0.0)
        return Vec3(_div(self.x, length), _div(self.y, length), _div(self.z, length))

    def inverse(self) -> "Vec3":
        return Vec3(-self.x, -self.y, -self.z)

    def clamp(self, low: float, high: float) -> "Vec3":
        """Clamp every component into [low, high]."""
        return Vec3(
            _clamp_one(self.x, low, high),
            _clamp_one(self.y, low, high),
            _clamp_one(self.z, low, high),
        )

    def xz(self) -> Vec2:
        """Projection onto the horizontal plane."""
        return Vec2(self.x, self.z)

    def is_empty(self) -> bool:
        """True when every component is NaN."""
        return math.isnan(self.x) and math.isnan(self.y) and math.isnan(self.z)

    @classmethod
    def empty(cls) -> "Vec3":
        """A vector marked as 'no value' (all components NaN)."""
        return cls(math.nan, math.nan, math.nan)