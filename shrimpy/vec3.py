"""Three-component single-precision style vector used throughout the tracer."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Iterator

_COMPONENTS = ("x", "y", "z")


def _fmin(a: float, b: float) -> float:
    """Minimum that ignores a NaN operand, as IEEE minNum does."""
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return a if a <= b else b


def _fmax(a: float, b: float) -> float:
    """Maximum that ignores a NaN operand, as IEEE maxNum does."""
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return a if a >= b else b


def _is_scalar(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True, slots=True)
class Vec3:
    """An immutable 3D vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __post_init__(self) -> None:
        for name in _COMPONENTS:
            object.__setattr__(self, name, float(getattr(self, name)))

    @classmethod
    def all(cls, v: float) -> Vec3:
        """A vector with every component set to ``v``."""
        return cls(v, v, v)

    @classmethod
    def zero(cls) -> Vec3:
        """The zero vector."""
        return cls(0.0, 0.0, 0.0)

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def length_squared(self) -> float:
        return self.dot(self)

    def dot(self, other: Vec3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vec3) -> Vec3:
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def normalized(self) -> Vec3:
        """Unit vector in the same direction; components are NaN for the zero vector."""
        length = self.length()
        recip = 1.0 / length if length else math.inf
        return self * recip

    def min(self, other: Vec3) -> Vec3:
        """Component-wise minimum."""
        return Vec3(*(_fmin(a, b) for a, b in zip(self, other)))

    def max(self, other: Vec3) -> Vec3:
        """Component-wise maximum."""
        return Vec3(*(_fmax(a, b) for a, b in zip(self, other)))

    def with_component(self, index: int, value: float) -> Vec3:
        """Copy of this vector with one component replaced."""
        if not 0 <= index < 3:
            raise IndexError(f"Vec3 index out of range: {index}")
        return replace(self, **{_COMPONENTS[index]: value})

    def __getitem__(self, index: int) -> float:
        if not 0 <= index < 3:
            raise IndexError(f"Vec3 index out of range: {index}")
        return getattr(self, _COMPONENTS[index])

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: object) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: object) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: object) -> Vec3:
        if not _is_scalar(scalar):
            return NotImplemented
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar: object) -> Vec3:
        return self.__mul__(scalar)

    def __truediv__(self, scalar: object) -> Vec3:
        if not _is_scalar(scalar):
            return NotImplemented
        return Vec3(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)