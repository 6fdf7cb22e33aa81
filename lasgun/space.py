"""Linear-algebra primitives for three-space: vectors, points, normals and rays."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Iterator


def _recip(value: float) -> float:
    """Reciprocal with IEEE semantics for zero (signed infinity)."""
    if value == 0.0:
        return math.copysign(math.inf, value)
    return 1.0 / value


@dataclass(frozen=True, slots=True)
class Vector3:
    """Three-component vector, also used for points and colours."""

    x: float
    y: float
    z: float

    @classmethod
    def zero(cls) -> Vector3:
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def from_value(cls, value: float) -> Vector3:
        return cls(value, value, value)

    @classmethod
    def unit_x(cls) -> Vector3:
        return cls(1.0, 0.0, 0.0)

    @classmethod
    def unit_y(cls) -> Vector3:
        return cls(0.0, 1.0, 0.0)

    @classmethod
    def unit_z(cls) -> Vector3:
        return cls(0.0, 0.0, 1.0)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y, self.z)[index]

    def __add__(self, other: Vector3) -> Vector3:
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def __mul__(self, scalar: float) -> Vector3:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector3:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        inv = _recip(float(scalar))
        return Vector3(self.x * inv, self.y * inv, self.z * inv)

    def dot(self, other: Vector3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3) -> Vector3:
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def magnitude2(self) -> float:
        return self.dot(self)

    def magnitude(self) -> float:
        return math.sqrt(self.magnitude2())

    def normalize(self) -> Vector3:
        """Unit vector in the same direction; NaN components for a zero vector."""
        length = self.magnitude()
        if length == 0.0:
            return Vector3(math.nan, math.nan, math.nan)
        return self / length

    def map(self, func: Callable[[float], float]) -> Vector3:
        return Vector3(func(self.x), func(self.y), func(self.z))


@dataclass(frozen=True, slots=True)
class Point2:
    """Two-component point, used for texture coordinates."""

    x: float
    y: float

    def __add__(self, other: Point2) -> Point2:
        if not isinstance(other, Point2):
            return NotImplemented
        return Point2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point2) -> Point2:
        if not isinstance(other, Point2):
            return NotImplemented
        return Point2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Point2:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return Point2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__


@dataclass(frozen=True, slots=True)
class Normal3:
    """A vector that is to be treated as a surface normal."""

    vec: Vector3

    @classmethod
    def zero(cls) -> Normal3:
        return cls(Vector3.zero())

    def face_forward(self, v: Vector3) -> Normal3:
        """Return this normal flipped, if needed, into the hemisphere of ``v``."""
        return Normal3(-self.vec if self.vec.dot(v) < 0.0 else self.vec)

    def normalized(self) -> Normal3:
        return Normal3(self.vec.normalize())

    def __neg__(self) -> Normal3:
        return Normal3(-self.vec)


@dataclass(frozen=True, slots=True)
class Ray:
    """A ray with an origin point, a direction and the reciprocal direction."""

    origin: Vector3
    d: Vector3
    dinv: Vector3 = field(init=False, compare=False)

    def __post_init__(self) -> None:
        if self.d.x == 0.0 and self.d.y == 0.0 and self.d.z == 0.0:
            raise ValueError("ray direction must not be the zero vector")
        object.__setattr__(self, "dinv", self.d.map(_recip))

    @classmethod
    def default(cls) -> Ray:
        return cls(Vector3.zero(), Vector3.from_value(1.0))


def abs_vec(v: Vector3) -> Vector3:
    """Component-wise absolute value."""
    return v.map(abs)


def lerp(t: float, p0: float, p1: float) -> float:
    """Linear interpolation between ``p0`` (t = 0) and ``p1`` (t = 1)."""
    return p0 * (1.0 - t) + p1 * t


def max_dimension(v: Vector3) -> int:
    """Index of the largest component."""
    if v.x > v.y:
        return 0 if v.x > v.z else 2
    return 1 if v.y > v.z else 2


def coordinate_system(v1: Vector3) -> tuple[Vector3, Vector3]:
    """Two vectors that, together with ``v1``, form an orthogonal basis."""
    if abs(v1.x) > abs(v1.y):
        v2 = Vector3(-v1.z, 0.0, v1.x) / math.sqrt(v1.x * v1.x + v1.z * v1.z)
    else:
        v2 = Vector3(0.0, v1.z, -v1.y) / math.sqrt(v1.y * v1.y + v1.z * v1.z)
    return v2, v1.cross(v2)


def permute(v: Vector3, x: int, y: int, z: int) -> Vector3:
    """Rearrange components so that component ``x`` comes first, and so on."""
    return Vector3(v[x], v[y], v[z])