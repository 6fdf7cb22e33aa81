"""Affine transformations of points, vectors, normals, rays and bounds."""

from __future__ import annotations

import math
import struct
import sys
from dataclasses import dataclass
from typing import Sequence

from .bounds import Bounds3
from .interaction import RayIntersection
from .space import Normal3, Ray, Vector3

Column = tuple[float, float, float, float]
Matrix4 = tuple[Column, Column, Column, Column]

_EPSILON = sys.float_info.epsilon
_MAX_ULPS = 4

_IDENTITY: Matrix4 = (
    (1.0, 0.0, 0.0, 0.0),
    (0.0, 1.0, 0.0, 0.0),
    (0.0, 0.0, 1.0, 0.0),
    (0.0, 0.0, 0.0, 1.0),
)


def _as_matrix(columns: Sequence[Sequence[float]]) -> Matrix4:
    """Validate and freeze a 4x4 matrix given as four columns."""
    if len(columns) != 4 or any(len(col) != 4 for col in columns):
        raise ValueError("a 4x4 matrix is required")
    return tuple(tuple(float(v) for v in col) for col in columns)  # type: ignore[return-value]


def _rows(m: Matrix4) -> tuple[tuple[float, ...], ...]:
    return tuple(zip(*m))


def _transpose(m: Matrix4) -> Matrix4:
    return _rows(m)  # type: ignore[return-value]


def _mul(a: Matrix4, b: Matrix4) -> Matrix4:
    """Matrix product ``a * b`` on column-major matrices."""
    rows = _rows(a)
    return tuple(  # type: ignore[return-value]
        tuple(sum(x * y for x, y in zip(row, col)) for row in rows) for col in b
    )


def _det3(m: list[list[float]]) -> float:
    (a, b, c), (d, e, f), (g, h, i) = m
    return a * (e * i - f * h) - b * (d * i - f * g) + c * (d * h - e * g)


def _minor(m: Matrix4, skip_row: int, skip_col: int) -> list[list[float]]:
    return [
        [value for c, value in enumerate(row) if c != skip_col]
        for r, row in enumerate(m)
        if r != skip_row
    ]


def _invert(m: Matrix4) -> Matrix4:
    """Inverse by the adjugate; raises ``ValueError`` if the matrix is singular."""
    cofactors = [
        [(-1.0) ** (r + c) * _det3(_minor(m, r, c)) for c in range(4)] for r in range(4)
    ]
    det = sum(x * cf for x, cf in zip(m[0], cofactors[0]))
    if det == 0.0:
        raise ValueError("matrix is not invertible")
    return tuple(  # type: ignore[return-value]
        tuple(cofactors[c][r] / det for c in range(4)) for r in range(4)
    )


def _apply_vector(m: Matrix4, v: Vector3) -> Vector3:
    return Vector3(*(row[0] * v.x + row[1] * v.y + row[2] * v.z for row in _rows(m)[:3]))


def _apply_point(m: Matrix4, p: Vector3) -> Vector3:
    hx, hy, hz, hw = (
        row[0] * p.x + row[1] * p.y + row[2] * p.z + row[3] for row in _rows(m)
    )
    inv_w = 1.0 / hw
    return Vector3(hx * inv_w, hy * inv_w, hz * inv_w)


def _apply_normal_transposed(m: Matrix4, n: Normal3) -> Normal3:
    """Multiply the normal by the transpose of the upper 3x3 of ``m``."""
    v = n.vec
    return Normal3(Vector3(*(col[0] * v.x + col[1] * v.y + col[2] * v.z for col in m[:3])))


def _from_rotation(columns: Sequence[Sequence[float]]) -> Matrix4:
    """Embed a 3x3 rotation (columns) into a homogeneous matrix."""
    return (
        *(tuple(col) + (0.0,) for col in columns),
        (0.0, 0.0, 0.0, 1.0),
    )  # type: ignore[return-value]


def _ulps_eq(a: float, b: float) -> bool:
    if abs(a - b) <= _EPSILON:
        return True
    if math.copysign(1.0, a) != math.copysign(1.0, b):
        return a == b
    (ia,) = struct.unpack("<q", struct.pack("<d", a))
    (ib,) = struct.unpack("<q", struct.pack("<d", b))
    return abs(ia - ib) <= _MAX_ULPS


@dataclass(eq=True)
class Transform3:
    """A 4x4 transformation matrix together with its inverse.

    Matrices are stored column-major: ``m[c][r]`` is row ``r`` of column ``c``.
    """

    m: Matrix4
    minv: Matrix4

    @classmethod
    def from_matrix(cls, m: Sequence[Sequence[float]]) -> Transform3:
        """Transformation from a column-major matrix; its inverse is computed."""
        matrix = _as_matrix(m)
        return cls(matrix, _invert(matrix))

    @classmethod
    def from_slice(cls, mat: Sequence[Sequence[float]]) -> Transform3:
        """Transformation from four columns of four values each."""
        return cls.from_matrix(mat)

    @classmethod
    def identity(cls) -> Transform3:
        return cls(_IDENTITY, _IDENTITY)

    @classmethod
    def translate(cls, delta: Vector3) -> Transform3:
        def translation(d: Vector3) -> Matrix4:
            return (*_IDENTITY[:3], (d.x, d.y, d.z, 1.0))  # type: ignore[return-value]

        return cls(translation(delta), translation(-delta))

    @classmethod
    def scale(cls, x: float, y: float, z: float) -> Transform3:
        if x == 0.0 or y == 0.0 or z == 0.0:
            raise ValueError("scale factors must be non-zero")

        def diagonal(a: float, b: float, c: float) -> Matrix4:
            return (
                (a, 0.0, 0.0, 0.0),
                (0.0, b, 0.0, 0.0),
                (0.0, 0.0, c, 0.0),
                (0.0, 0.0, 0.0, 1.0),
            )

        return cls(diagonal(x, y, z), diagonal(1.0 / x, 1.0 / y, 1.0 / z))

    @classmethod
    def _rotation(cls, columns: Sequence[Sequence[float]]) -> Transform3:
        m = _from_rotation(columns)
        return cls(m, _transpose(m))

    @classmethod
    def rotate_x(cls, theta: float) -> Transform3:
        """Rotation about the x axis by ``theta`` degrees."""
        s, c = math.sin(math.radians(theta)), math.cos(math.radians(theta))
        return cls._rotation(((1.0, 0.0, 0.0), (0.0, c, s), (0.0, -s, c)))

    @classmethod
    def rotate_y(cls, theta: float) -> Transform3:
        """Rotation about the y axis by ``theta`` degrees."""
        s, c = math.sin(math.radians(theta)), math.cos(math.radians(theta))
        return cls._rotation(((c, 0.0, -s), (0.0, 1.0, 0.0), (s, 0.0, c)))

    @classmethod
    def rotate_z(cls, theta: float) -> Transform3:
        """Rotation about the z axis by ``theta`` degrees."""
        s, c = math.sin(math.radians(theta)), math.cos(math.radians(theta))
        return cls._rotation(((c, s, 0.0), (-s, c, 0.0), (0.0, 0.0, 1.0)))

    @classmethod
    def rotate(cls, theta: float, axis: Vector3) -> Transform3:
        """Rotation by ``theta`` degrees about the unit vector ``axis``."""
        s, c = math.sin(math.radians(theta)), math.cos(math.radians(theta))
        k = 1.0 - c
        x, y, z = axis.x, axis.y, axis.z
        return cls._rotation(
            (
                (k * x * x + c, k * x * y + s * z, k * x * z - s * y),
                (k * x * y - s * z, k * y * y + c, k * y * z + s * x),
                (k * x * z + s * y, k * y * z - s * x, k * z * z + c),
            )
        )

    @classmethod
    def look_at(cls, eye: Vector3, look: Vector3, up: Vector3) -> Transform3:
        """Right-handed view transformation from ``eye`` towards ``look``."""
        f = (look - eye).normalize()
        s = f.cross(up).normalize()
        u = s.cross(f)
        m: Matrix4 = (
            (s.x, u.x, -f.x, 0.0),
            (s.y, u.y, -f.y, 0.0),
            (s.z, u.z, -f.z, 0.0),
            (-eye.dot(s), -eye.dot(u), eye.dot(f), 1.0),
        )
        return cls(m, _invert(m))

    def inverse(self) -> Transform3:
        return Transform3(self.minv, self.m)

    def transpose(self) -> Transform3:
        return Transform3(_transpose(self.m), _transpose(self.minv))

    def has_scale(self) -> bool:
        """Whether the transformation changes the length of any unit axis."""
        return any(
            not _ulps_eq(1.0, self.transform_vector(axis).magnitude2())
            for axis in (Vector3.unit_x(), Vector3.unit_y(), Vector3.unit_z())
        )

    def transform_vector(self, vec: Vector3) -> Vector3:
        return _apply_vector(self.m, vec)

    def transform_point(self, point: Vector3) -> Vector3:
        return _apply_point(self.m, point)

    def inverse_transform_vector(self, vec: Vector3) -> Vector3:
        return _apply_vector(self.minv, vec)

    def concat(self, other: Transform3) -> Transform3:
        """Transformation applying ``self`` first and then ``other``."""
        return Transform3(_mul(other.m, self.m), _mul(self.minv, other.minv))

    def concat_self(self, other: Transform3) -> None:
        """Follow this transformation with ``other``, in place."""
        self.m, self.minv = _mul(other.m, self.m), _mul(self.minv, other.minv)

    def transform_normal(self, normal: Normal3) -> Normal3:
        return _apply_normal_transposed(self.minv, normal)

    def transform_ray(self, ray: Ray) -> Ray:
        return Ray(self.transform_point(ray.origin), self.transform_vector(ray.d))

    def transform_bounds(self, bounds: Bounds3) -> Bounds3:
        lo_terms = []
        hi_terms = []
        for col, lo, hi in zip(self.m[:3], bounds.min, bounds.max):
            axis = Vector3(col[0], col[1], col[2])
            a, b = axis * lo, axis * hi
            lo_terms.append(Vector3(*map(min, a, b)))
            hi_terms.append(Vector3(*map(max, a, b)))

        w = self.m[3]
        shift = Vector3(w[0], w[1], w[2])
        lo = lo_terms[0] + lo_terms[1] + lo_terms[2] + shift
        hi = hi_terms[0] + hi_terms[1] + hi_terms[2] + shift
        return Bounds3(lo, hi)

    def transform_ray_intersection(self, isect: RayIntersection) -> RayIntersection:
        result = RayIntersection(
            isect.t,
            isect.uv,
            self.transform_vector(isect.geometry.dpdu),
            self.transform_vector(isect.geometry.dpdv),
            material=isect.material,
        )
        if isect.geometry != isect.surface:
            result.set_surface_shading(
                self.transform_vector(isect.surface.dpdu),
                self.transform_vector(isect.surface.dpdv),
            )
        if isect.n is not None:
            result.n = self.transform_normal(isect.n)
        return result

    def inverse_transform_normal(self, normal: Normal3) -> Normal3:
        return _apply_normal_transposed(self.m, normal)

    def inverse_transform_ray(self, ray: Ray) -> Ray:
        """Map a ray from world coordinates into model coordinates."""
        return Ray(_apply_point(self.minv, ray.origin), _apply_vector(self.minv, ray.d))

    def inverse_transform_bounds(self, bounds: Bounds3) -> Bounds3:
        return self.inverse().transform_bounds(bounds)

    def inverse_transform_ray_intersection(self, isect: RayIntersection) -> RayIntersection:
        result = RayIntersection(
            isect.t,
            isect.uv,
            self.inverse_transform_vector(isect.geometry.dpdu),
            self.inverse_transform_vector(isect.geometry.dpdv),
        )
        if isect.geometry != isect.surface:
            result.set_surface_shading(
                self.inverse_transform_vector(isect.surface.dpdu),
                self.inverse_transform_vector(isect.surface.dpdv),
            )
        if isect.n is not None:
            result.n = self.inverse_transform_normal(isect.n)
        return result