"""Description of the world to render: the node tree, lights and meshes."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence, Union

from .light import Light, PointLight
from .material import Background, Material
from .space import Vector3
from .transform import Transform3
from .triangle import Obj
from .triangle import load_obj as _load_obj
from .triangle import parse_obj as _parse_obj


def _vec(values: Sequence[float]) -> Vector3:
    if isinstance(values, Vector3):
        return values
    if len(values) != 3:
        raise ValueError(f"expected 3 components, got {len(values)}")
    return Vector3(*(float(v) for v in values))


@dataclass(frozen=True)
class ObjRef:
    """Opaque reference to a mesh held by a scene."""

    index: int


@dataclass(frozen=True)
class SphereShape:
    """Sphere with a centre and radius."""

    center: tuple[float, float, float]
    radius: float


@dataclass(frozen=True)
class CubeShape:
    """Cube with an origin corner and edge length."""

    origin: tuple[float, float, float]
    dim: float


@dataclass(frozen=True)
class CuboidShape:
    """Rectangular prism between two corners."""

    minbound: tuple[float, float, float]
    maxbound: tuple[float, float, float]


Shape = Union[SphereShape, CubeShape, CuboidShape]


@dataclass(frozen=True)
class Geometry:
    """A geometric shape and its material."""

    shape: Shape
    material: Material


@dataclass(frozen=True)
class Mesh:
    """A triangle mesh loaded into the scene, with an optional material."""

    obj: ObjRef
    material: Optional[Material] = None


@dataclass(frozen=True)
class Group:
    """A nested collection of nodes."""

    aggregate: Aggregate


SceneNode = Union[Geometry, Mesh, Group]


def _triple(values: Sequence[float]) -> tuple[float, float, float]:
    v = _vec(values)
    return (v.x, v.y, v.z)


@dataclass
class Aggregate:
    """A transformed collection of scene nodes.

    ``swap_backface`` reverses the orientation of the shading normals of all
    children, which is useful to render the inside of a shape.
    """

    contents: list[SceneNode] = field(default_factory=list)
    transform: Transform3 = field(default_factory=Transform3.identity)
    swap_backface: bool = False

    def add(self, node: SceneNode) -> None:
        self.contents.append(node)

    def add_group(self, aggregate: Aggregate) -> None:
        self.add(Group(aggregate))

    def add_sphere(self, center: Sequence[float], radius: float, material: Material) -> None:
        self.add(Geometry(SphereShape(_triple(center), float(radius)), material))

    def add_cube(self, origin: Sequence[float], dim: float, material: Material) -> None:
        self.add(Geometry(CubeShape(_triple(origin), float(dim)), material))

    def add_box(
        self, minbound: Sequence[float], maxbound: Sequence[float], material: Material
    ) -> None:
        self.add(Geometry(CuboidShape(_triple(minbound), _triple(maxbound)), material))

    def add_obj(self, mesh: ObjRef) -> None:
        """Add a mesh that uses its own (or the default) material."""
        self.add(Mesh(mesh, None))

    def add_obj_of(self, mesh: ObjRef, material: Material) -> None:
        """Add a mesh made of a single material."""
        self.add(Mesh(mesh, material))

    def toggle_backface(self) -> None:
        self.swap_backface = not self.swap_backface

    def translate(self, delta: Sequence[float]) -> Aggregate:
        self.transform.concat_self(Transform3.translate(_vec(delta)))
        return self

    def scale(self, x: float, y: float, z: float) -> Aggregate:
        self.transform.concat_self(Transform3.scale(x, y, z))
        return self

    def rotate_x(self, theta: float) -> Aggregate:
        self.transform.concat_self(Transform3.rotate_x(theta))
        return self

    def rotate_y(self, theta: float) -> Aggregate:
        self.transform.concat_self(Transform3.rotate_y(theta))
        return self

    def rotate_z(self, theta: float) -> Aggregate:
        self.transform.concat_self(Transform3.rotate_z(theta))
        return self

    def rotate(self, theta: float, axis: Sequence[float]) -> Aggregate:
        """Rotate by ``theta`` degrees about ``axis``."""
        self.transform.concat_self(Transform3.rotate(theta, _vec(axis)))
        return self


class Scene:
    """The world to render and the settings for rendering it.

    ``recursion`` is the maximum ray depth; ``threads`` of zero means as many
    render threads as the system allows.
    """

    def __init__(self) -> None:
        self.root = Aggregate()
        self.background = Background.solid(Vector3.zero())
        self.ambient = Vector3.zero()
        self.smoothing = True
        self.recursion = 3
        self.threads = 0
        self._lights: list[Light] = []
        self._meshes: list[Obj] = []

    @property
    def lights(self) -> tuple[Light, ...]:
        return tuple(self._lights)

    def set_solid_background(self, color: Sequence[float]) -> None:
        self.background = Background.solid(_vec(color))

    def set_radial_background(
        self, inner: Sequence[float], outer: Sequence[float], scale: float
    ) -> None:
        self.background = Background.radial(_vec(inner), _vec(outer), scale)

    def set_ambient_light(self, color: Sequence[float]) -> None:
        self.ambient = _vec(color)

    def add_point_light(
        self, position: Sequence[float], intensity: Sequence[float], falloff: Sequence[float]
    ) -> None:
        self._lights.append(PointLight(_vec(position), _vec(intensity), tuple(falloff)))

    def add_obj(self, mesh: Obj) -> ObjRef:
        """Add a loaded mesh; its normals are dropped when smoothing is off."""
        if not self.smoothing:
            mesh.normal.clear()
        reference = ObjRef(len(self._meshes))
        self._meshes.append(mesh)
        return reference

    def parse_obj(self, text: str) -> ObjRef:
        """Parse .obj contents and add the mesh; raises ``ObjError`` on bad input."""
        return self.add_obj(_parse_obj(text))

    def load_obj(self, path: Union[str, Path]) -> ObjRef:
        """Load the .obj file at ``path`` and add the mesh."""
        return self.add_obj(_load_obj(path))

    def obj(self, ref: ObjRef) -> Optional[Obj]:
        """The mesh for ``ref``, or ``None`` if the scene has no such mesh."""
        if 0 <= ref.index < len(self._meshes):
            return self._meshes[ref.index]
        return None