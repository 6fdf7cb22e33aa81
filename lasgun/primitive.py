"""The interface shared by every object that a ray can hit."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from .interaction import RayIntersection
from .material import Material
from .space import Ray

if TYPE_CHECKING:
    from .bounds import Bounds3


class Primitive(ABC):
    """A shape placed in the scene that can be intersected by a ray."""

    @abstractmethod
    def bound(self) -> Bounds3:
        """Object-level bounds for this primitive."""

    @abstractmethod
    def intersect(self, ray: Ray, isect: RayIntersection) -> Optional[Primitive]:
        """Test ``ray`` against this primitive.

        When the hit is nearer than ``isect.t``, update ``isect`` in place and
        return the primitive that was hit; otherwise return ``None``.
        """

    def material(self) -> Optional[Material]:
        """Material of this primitive, or ``None`` to use a default one."""
        return None

    def intersects(self, ray: Ray) -> bool:
        """Whether ``ray`` hits this primitive at all."""
        return self.intersect(ray, RayIntersection.default()) is not None