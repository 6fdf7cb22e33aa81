"""Ray/surface intersection records and the shading data derived from them."""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from typing import Optional

from .material import Material, default_material
from .space import Normal3, Point2, Ray, Vector3

# Offset applied along the geometric normal to keep points off the surface.
_P_ERR_SCALE = sys.float_info.epsilon * 2.0**16


@dataclass(frozen=True, slots=True)
class Shading:
    """Parametric differentials dp/du and dp/dv at a point of interaction."""

    dpdu: Vector3
    dpdv: Vector3


class RayIntersection:
    """Closest-hit data gathered while a ray is cast through the scene.

    ``t`` is the ray parameter of the hit; primitives compare against it to
    discard hits that are farther away than the one already recorded.
    """

    def __init__(
        self,
        t: float,
        uv: Point2,
        dpdu: Vector3,
        dpdv: Vector3,
        material: Optional[Material] = None,
        n: Optional[Normal3] = None,
    ) -> None:
        self.t = t
        self.uv = uv
        self.geometry = Shading(dpdu, dpdv)
        # Surface shading starts out as a copy of the geometry shading.
        self.surface = self.geometry
        self.material: Material = material if material is not None else default_material()
        self.n = n

    @classmethod
    def default(cls) -> RayIntersection:
        """A record with no hit yet (``t`` is infinite)."""
        return cls(math.inf, Point2(0.0, 0.0), Vector3.zero(), Vector3.zero())

    def set_surface_shading(self, dpdu: Vector3, dpdv: Vector3) -> None:
        self.surface = Shading(dpdu, dpdv)

    def swap_backface(self) -> None:
        """Flip the orientation of the normals given by the shading differentials."""
        self.geometry = Shading(self.geometry.dpdv, self.geometry.dpdu)
        self.surface = Shading(self.surface.dpdv, self.surface.dpdu)
        if self.n is not None:
            self.n = -self.n

    def exists(self) -> bool:
        """Whether a hit in front of the ray origin has been recorded."""
        return self.t > 0.0 and self.t != math.inf

    def ng(self) -> Vector3:
        """Unit geometric normal."""
        return self.geometry.dpdu.cross(self.geometry.dpdv).normalize()

    def ns(self) -> Vector3:
        """Unit shading normal, preferring an explicit normal when one is set."""
        if self.n is not None:
            return self.n.vec.normalize()
        return self.surface.dpdu.cross(self.surface.dpdv).normalize()

    def __repr__(self) -> str:
        return (
            f"RayIntersection(t={self.t!r}, uv={self.uv!r}, geometry={self.geometry!r}, "
            f"surface={self.surface!r}, material={self.material!r}, n={self.n!r})"
        )


@dataclass(frozen=True, slots=True)
class SurfaceInteraction:
    """Light interaction at point ``p`` looking back along the ray (``wo``)."""

    p: Vector3
    p_err: Vector3
    wo: Vector3
    ng: Normal3
    ns: Normal3
    geometry: Shading
    surface: Shading

    @classmethod
    def from_ray(cls, ray: Ray, isect: RayIntersection) -> SurfaceInteraction:
        """Build the interaction for the hit recorded in ``isect`` along ``ray``."""
        if not isect.exists():
            raise ValueError("ray intersection does not exist")

        wo = -ray.d.normalize()
        ng = Normal3(isect.ng()).face_forward(wo)
        ns = Normal3(isect.ns())
        p = ray.origin + ray.d * isect.t
        p_err = ng.vec * _P_ERR_SCALE

        return cls(
            p=p,
            p_err=p_err,
            wo=wo,
            ng=ng,
            ns=ns,
            geometry=Shading(isect.geometry.dpdu.normalize(), isect.geometry.dpdv.normalize()),
            surface=Shading(isect.surface.dpdu.normalize(), isect.surface.dpdv.normalize()),
        )