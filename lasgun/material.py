"""Surface materials and the scene background."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Union

from .space import Vector3, lerp


def _color(values: Sequence[float]) -> Vector3:
    if len(values) != 3:
        raise ValueError(f"expected 3 colour components, got {len(values)}")
    return Vector3(*(float(v) for v in values))


@dataclass(frozen=True)
class Matte:
    """Diffuse surface; ``sigma`` is the Oren-Nayar roughness, clamped to [0, 90]."""

    kd: Vector3
    sigma: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "sigma", min(max(self.sigma, 0.0), 90.0))


@dataclass(frozen=True)
class Plastic:
    """Diffuse base with a glossy dielectric coating."""

    kd: Vector3
    ks: Vector3
    roughness: float


@dataclass(frozen=True)
class Metal:
    """Conductor described by its refractive index and absorption coefficient."""

    eta: Vector3
    k: Vector3
    u_roughness: float
    v_roughness: float


@dataclass(frozen=True)
class Glass:
    """Dielectric with reflection and transmission coefficients."""

    kr: Vector3
    kt: Vector3
    eta: float
    u_roughness: float = 0.0
    v_roughness: float = 0.0


@dataclass(frozen=True)
class Mirror:
    """Perfect specular reflector."""

    kr: Vector3


Material = Union[Matte, Plastic, Metal, Glass, Mirror]


@dataclass(frozen=True)
class Background:
    """Radial gradient between an inner and an outer colour."""

    inner: Vector3
    outer: Vector3
    scale: float

    @classmethod
    def radial(cls, inner: Vector3, outer: Vector3, scale: float) -> Background:
        """Gradient whose extent over the world sphere is set by ``scale`` in [0, 1]."""
        return cls(inner, outer, scale)

    @classmethod
    def solid(cls, color: Vector3) -> Background:
        return cls(color, color, 1.0)

    def bg(self, d: Vector3) -> Vector3:
        """Background colour seen along the normalized direction ``d``."""
        z = abs(Vector3.unit_z().dot(d))
        radicand = 1.0 - z * z
        if radicand < 0.0 or self.scale == 0.0:
            t = 1.0
        else:
            t = min(math.sqrt(radicand) / self.scale, 1.0)
        return Vector3(
            lerp(t, self.inner.x, self.outer.x),
            lerp(t, self.inner.y, self.outer.y),
            lerp(t, self.inner.z, self.outer.z),
        )


def default_material() -> Matte:
    """Grey matte used where a shape supplies no material of its own."""
    return matte([0.5, 0.5, 0.5], 0.0)


def matte(kd: Sequence[float], sigma: float) -> Matte:
    return Matte(_color(kd), sigma)


def plastic(kd: Sequence[float], ks: Sequence[float], roughness: float) -> Plastic:
    return Plastic(_color(kd), _color(ks), roughness)


def metal(
    eta: Sequence[float], k: Sequence[float], u_roughness: float, v_roughness: float
) -> Metal:
    return Metal(_color(eta), _color(k), u_roughness, v_roughness)


def glass(kr: Sequence[float], kt: Sequence[float], eta: float) -> Glass:
    return Glass(_color(kr), _color(kt), eta, 0.0, 0.0)


def mirror(kr: Sequence[float]) -> Mirror:
    return Mirror(_color(kr))