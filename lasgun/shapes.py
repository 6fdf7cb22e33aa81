"""Analytic shapes: axis-aligned boxes and spheres."""

from __future__ import annotations

import math
from typing import Optional, Sequence

from .bounds import Bounds3
from .interaction import RayIntersection, Shading
from .material import Material, default_material
from .primitive import Primitive
from .space import Point2, Ray, Vector3

__all__ = ["Cuboid", "Sphere", "Primitive"]


def _point(values: Sequence[float]) -> Vector3:
    if len(values) != 3:
        raise ValueError(f"expected 3 coordinates, got {len(values)}")
    return Vector3(*(float(v) for v in values))


def _quad_roots(a: float, b: float, c: float) -> tuple[float, ...]:
    """Real roots of ``a*t^2 + b*t + c = 0``."""
    if a == 0.0:
        if b == 0.0:
            return ()
        return (-c / b,)
    disc = b * b - 4.0 * a * c
    if disc < 0.0:
        return ()
    if disc == 0.0:
        return (-b / (2.0 * a),)
    q = -0.5 * (b + math.copysign(math.sqrt(disc), b))
    return (q / a, c / q)


class Cuboid(Primitive):
    """A rectangular prism (box) with its own material."""

    __slots__ = ("bounds", "mat")

    def __init__(
        self, minbound: Sequence[float], maxbound: Sequence[float], mat: Material
    ) -> None:
        self.bounds = Bounds3(_point(minbound), _point(maxbound))
        self.mat = mat

    @classmethod
    def cube(cls, origin: Sequence[float], dim: float, mat: Material) -> Cuboid:
        """A cube with corner ``origin`` and edge length ``dim``."""
        start = _point(origin)
        cuboid = cls.__new__(cls)
        cuboid.bounds = Bounds3(start, start + Vector3.from_value(dim))
        cuboid.mat = mat
        return cuboid

    def __repr__(self) -> str:
        return f"Cuboid(bounds={self.bounds!r}, mat={self.mat!r})"

    def bound(self) -> Bounds3:
        return self.bounds.bound()

    def intersect(self, ray: Ray, isect: RayIntersection) -> Optional[Primitive]:
        if self.bounds.intersect(ray, isect) is not None:
            return self
        return None

    def intersects(self, ray: Ray) -> bool:
        return self.bounds.intersects(ray)

    def material(self) -> Optional[Material]:
        return self.mat


class Sphere(Primitive):
    """A sphere of any size positioned somewhere in space."""

    __slots__ = ("origin", "radius", "_material")

    def __init__(self, origin: Sequence[float], radius: float, material: Material) -> None:
        self.origin = _point(origin)
        self.radius = float(radius)
        self._material = material

    def __repr__(self) -> str:
        return (
            f"Sphere(origin={self.origin!r}, radius={self.radius!r}, "
            f"material={self._material!r})"
        )

    def _intersect_t(self, ray: Ray) -> tuple[float, bool]:
        """Ray parameter of the nearest hit (negative for none) and whether
        the ray starts inside the sphere."""
        d = ray.d
        l = ray.origin - self.origin
        a = d.dot(d)
        b = 2.0 * d.dot(l)
        c = l.dot(l) - self.radius * self.radius

        roots = _quad_roots(a, b, c)
        if len(roots) == 2:
            t0, t1 = min(roots), max(roots)
            return (t1, True) if t0 < 0.0 else (t0, False)
        if len(roots) == 1:
            return roots[0], False
        return -math.inf, False

    def bound(self) -> Bounds3:
        extent = Vector3.from_value(self.radius)
        return Bounds3(self.origin - extent, self.origin + extent)

    def intersect(self, ray: Ray, isect: RayIntersection) -> Optional[Primitive]:
        t, inside = self._intersect_t(ray)
        if t < 0.0 or t >= isect.t:
            return None

        p = ray.origin + ray.d * t - self.origin
        # Nudge off the pole, where the parametrisation degenerates.
        if p.x == 0.0 and p.y == 0.0:
            p = Vector3(1e-5 * self.radius, p.y, p.z)

        phi = math.atan2(p.y, p.x)
        if phi < 0.0:
            phi += 2.0 * math.pi
        theta = math.acos(min(max(p.z / self.radius, -1.0), 1.0))

        dpdu = Vector3(-2.0 * math.pi * p.y, 2.0 * math.pi * p.x, 0.0)
        dpdv = math.pi * Vector3(
            p.z * math.cos(phi),
            p.z * math.sin(phi),
            -self.radius * math.sin(theta),
        )
        if not inside:
            dpdu, dpdv = dpdv, dpdu

        isect.t = t
        isect.uv = Point2(0.0, 0.0)
        isect.geometry = Shading(dpdu, dpdv)
        isect.surface = isect.geometry
        isect.material = default_material()
        isect.n = None
        return self

    def intersects(self, ray: Ray) -> bool:
        return self._intersect_t(ray)[0] >= 0.0

    def material(self) -> Optional[Material]:
        return self._material