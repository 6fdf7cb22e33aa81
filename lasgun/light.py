"""Light sources and iteration over the samples visible from a point."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

from .interaction import RayIntersection
from .primitive import Primitive
from .space import Ray, Vector3


def _vec(values: Sequence[float]) -> Vector3:
    if isinstance(values, Vector3):
        return values
    if len(values) != 3:
        raise ValueError(f"expected 3 components, got {len(values)}")
    return Vector3(*(float(v) for v in values))


class Light(ABC):
    """A source of light in the scene."""

    @abstractmethod
    def sample(self, root: Primitive, p: Vector3) -> Optional[PointLight]:
        """A point light sample visible from ``p``, or ``None`` if it is occluded."""

    @abstractmethod
    def iter_samples(self, root: Primitive, p: Vector3) -> Iterator[PointLight]:
        """Yield the samples of this light that are visible from ``p``."""


def iter_light_samples(
    light: Light, root: Primitive, point: Vector3, samples: int
) -> Iterator[PointLight]:
    """Draw ``samples`` samples from ``light`` and yield the visible ones."""
    for _ in range(samples):
        sampled = light.sample(root, point)
        if sampled is not None:
            yield sampled


@dataclass(frozen=True)
class PointLight(Light):
    """A light with no surface area that emits equally in all directions.

    ``falloff`` holds the constant, linear and quadratic attenuation terms.
    """

    position: Vector3
    intensity: Vector3
    falloff: tuple[float, float, float]

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", _vec(self.position))
        object.__setattr__(self, "intensity", _vec(self.intensity))
        falloff = tuple(float(f) for f in self.falloff)
        if len(falloff) != 3:
            raise ValueError(f"expected 3 falloff terms, got {len(falloff)}")
        object.__setattr__(self, "falloff", falloff)

    def sample(self, root: Primitive, p: Vector3) -> Optional[PointLight]:
        """This light if nothing lies between ``p`` and it, otherwise ``None``."""
        ray = Ray(p, self.position - p)
        isect = RayIntersection.default()
        root.intersect(ray, isect)
        if isect.t < 1.0:
            return None
        return self

    def iter_samples(self, root: Primitive, p: Vector3) -> Iterator[PointLight]:
        # A point light needs only one sample.
        return iter_light_samples(self, root, p, 1)