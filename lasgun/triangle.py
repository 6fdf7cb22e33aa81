"""Triangle meshes loaded from Wavefront .obj data."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Iterable, Iterator, Optional, Union

from .bounds import Bounds3
from .interaction import RayIntersection, Shading
from .material import Material, default_material
from .primitive import Primitive
from .space import (
    Normal3,
    Point2,
    Ray,
    Vector3,
    abs_vec,
    coordinate_system,
    max_dimension,
    permute,
)

# Zero-based (position, texture, normal) indices of one polygon vertex.
IndexTuple = tuple[int, Optional[int], Optional[int]]
Polygon = tuple[IndexTuple, ...]


class ObjError(Exception):
    """Raised when .obj data cannot be read or parsed."""


@dataclass
class ObjGroup:
    """A named group of polygons within an object."""

    name: str
    polys: list[Polygon] = field(default_factory=list)


@dataclass
class ObjObject:
    """A named object made of polygon groups."""

    name: str
    groups: list[ObjGroup] = field(default_factory=list)


@dataclass
class Obj:
    """Parsed mesh data: vertex attributes and the objects that index them."""

    position: list[tuple[float, float, float]] = field(default_factory=list)
    texture: list[tuple[float, float]] = field(default_factory=list)
    normal: list[tuple[float, float, float]] = field(default_factory=list)
    objects: list[ObjObject] = field(default_factory=list)
    path: Path = field(default_factory=Path)


class _Parser:
    """Accumulates .obj statements line by line."""

    def __init__(self) -> None:
        self.obj = Obj()
        self._object: Optional[ObjObject] = None
        self._group: Optional[ObjGroup] = None

    def _error(self, lineno: int, message: str) -> ObjError:
        return ObjError(f"line {lineno}: {message}")

    def _floats(self, args: list[str], lineno: int, minimum: int) -> list[float]:
        if len(args) < minimum:
            raise self._error(lineno, f"expected at least {minimum} values")
        try:
            return [float(a) for a in args]
        except ValueError as exc:
            raise self._error(lineno, f"invalid number: {exc}") from exc

    def _index(self, token: str, count: int, lineno: int, kind: str) -> int:
        try:
            value = int(token)
        except ValueError as exc:
            raise self._error(lineno, f"invalid {kind} index {token!r}") from exc
        if value == 0:
            raise self._error(lineno, f"{kind} index must not be zero")
        index = value - 1 if value > 0 else count + value
        if not 0 <= index < count:
            raise self._error(lineno, f"{kind} index {value} out of range")
        return index

    def _vertex(self, token: str, lineno: int) -> IndexTuple:
        parts = token.split("/")
        if len(parts) > 3 or not parts[0]:
            raise self._error(lineno, f"invalid face vertex {token!r}")
        data = self.obj
        pos = self._index(parts[0], len(data.position), lineno, "position")
        tex = None
        norm = None
        if len(parts) > 1 and parts[1]:
            tex = self._index(parts[1], len(data.texture), lineno, "texture")
        if len(parts) > 2 and parts[2]:
            norm = self._index(parts[2], len(data.normal), lineno, "normal")
        return (pos, tex, norm)

    def _current_object(self) -> ObjObject:
        if self._object is None:
            self._object = ObjObject("default")
            self.obj.objects.append(self._object)
        return self._object

    def _current_group(self) -> ObjGroup:
        if self._group is None:
            self._group = ObjGroup("default")
            self._current_object().groups.append(self._group)
        return self._group

    def line(self, text: str, lineno: int) -> None:
        text = text.split("#", 1)[0].strip()
        if not text:
            return
        keyword, *args = text.split()
        if keyword == "v":
            x, y, z = self._floats(args, lineno, 3)[:3]
            self.obj.position.append((x, y, z))
        elif keyword == "vt":
            values = self._floats(args, lineno, 1)
            self.obj.texture.append((values[0], values[1] if len(values) > 1 else 0.0))
        elif keyword == "vn":
            x, y, z = self._floats(args, lineno, 3)[:3]
            self.obj.normal.append((x, y, z))
        elif keyword == "f":
            if len(args) < 3:
                raise self._error(lineno, "a face needs at least 3 vertices")
            poly = tuple(self._vertex(token, lineno) for token in args)
            self._current_group().polys.append(poly)
        elif keyword == "o":
            self._object = ObjObject(" ".join(args) or "default")
            self.obj.objects.append(self._object)
            self._group = None
        elif keyword == "g":
            self._group = ObjGroup(" ".join(args) or "default")
            self._current_object().groups.append(self._group)

    def finish(self) -> Obj:
        for obj in self.obj.objects:
            obj.groups = [group for group in obj.groups if group.polys]
        self.obj.objects = [obj for obj in self.obj.objects if obj.groups]
        return self.obj


def _logical_lines(stream: Iterable[Union[str, bytes]]) -> Iterator[tuple[int, str]]:
    """Yield (line number, text) with backslash continuations joined."""
    pending = ""
    start = 0
    for lineno, raw in enumerate(stream, 1):
        line = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        line = line.rstrip("\r\n")
        if not pending:
            start = lineno
        if line.endswith("\\"):
            pending += line[:-1] + " "
            continue
        yield start, pending + line
        pending = ""
    if pending:
        yield start, pending


def obj_from_buf(stream: Iterable[Union[str, bytes]]) -> Obj:
    """Parse .obj data from a readable stream of lines."""
    parser = _Parser()
    try:
        for lineno, text in _logical_lines(stream):
            parser.line(text, lineno)
    except UnicodeDecodeError as exc:
        raise ObjError(f"invalid text: {exc}") from exc
    return parser.finish()


def parse_obj(text: str) -> Obj:
    """Parse the string contents of a .obj file."""
    return obj_from_buf(io.StringIO(text))


def load_obj(path: Union[str, Path]) -> Obj:
    """Load the .obj file at ``path``; the result's path is its directory."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as stream:
            obj = obj_from_buf(stream)
    except OSError as exc:
        raise ObjError(f"cannot read {path}: {exc}") from exc
    obj.path = path.parent
    return obj


def face_count(obj: Obj) -> int:
    """Number of polygons in the mesh."""
    return sum(len(group.polys) for o in obj.objects for group in o.groups)


class Triangle(Primitive):
    """One face of a mesh, referring to its parent mesh by index."""

    __slots__ = ("obj", "object", "group", "poly")

    def __init__(self, obj: Obj, object: int, group: int, poly: int) -> None:
        self.obj = obj
        self.object = object
        self.group = group
        self.poly = poly

    def __repr__(self) -> str:
        return f"Triangle(object={self.object}, group={self.group}, poly={self.poly})"

    def _polygon(self) -> Polygon:
        return self.obj.objects[self.object].groups[self.group].polys[self.poly]

    def _position(self, i: int) -> Vector3:
        return Vector3(*self.obj.position[self._polygon()[i][0]])

    def _normal(self, i: int) -> Vector3:
        index = self._polygon()[i][2]
        if index is None:
            raise ValueError("triangle vertex has no normal")
        return Vector3(*self.obj.normal[index])

    def _uv(self, i: int) -> Point2:
        index = self._polygon()[i][1]
        if index is None:
            raise ValueError("triangle vertex has no texture coordinate")
        return Point2(*self.obj.texture[index])

    def p0(self) -> Vector3:
        return self._position(0)

    def p1(self) -> Vector3:
        return self._position(1)

    def p2(self) -> Vector3:
        return self._position(2)

    def n0(self) -> Vector3:
        return self._normal(0)

    def n1(self) -> Vector3:
        return self._normal(1)

    def n2(self) -> Vector3:
        return self._normal(2)

    def uv(self) -> tuple[Point2, Point2, Point2]:
        """Texture coordinates of the three vertices, or defaults without them."""
        if self.has_uv():
            return (self.uv0(), self.uv1(), self.uv2())
        return (Point2(0.0, 0.0), Point2(1.0, 0.0), Point2(1.0, 1.0))

    def uv0(self) -> Point2:
        return self._uv(0)

    def uv1(self) -> Point2:
        return self._uv(1)

    def uv2(self) -> Point2:
        return self._uv(2)

    def has_n(self) -> bool:
        """Whether the mesh has vertex normals."""
        return len(self.obj.normal) > 0

    def has_uv(self) -> bool:
        """Whether the mesh has texture coordinates."""
        return len(self.obj.texture) > 0

    def bound(self) -> Bounds3:
        return Bounds3(self.p0(), self.p1()).point_union(self.p2())

    def intersect(self, ray: Ray, isect: RayIntersection) -> Optional[Primitive]:
        p0, p1, p2 = self.p0(), self.p1(), self.p2()

        # Move into a space where the ray starts at the origin and looks down +z.
        kz = max_dimension(abs_vec(ray.d))
        kx = (kz + 1) % 3
        ky = (kx + 1) % 3
        d = permute(ray.d, kx, ky, kz)
        p0t = permute(p0 - ray.origin, kx, ky, kz)
        p1t = permute(p1 - ray.origin, kx, ky, kz)
        p2t = permute(p2 - ray.origin, kx, ky, kz)

        sx = -d.x / d.z
        sy = -d.y / d.z
        sz = 1.0 / d.z

        x0, y0 = p0t.x + sx * p0t.z, p0t.y + sy * p0t.z
        x1, y1 = p1t.x + sx * p1t.z, p1t.y + sy * p1t.z
        x2, y2 = p2t.x + sx * p2t.z, p2t.y + sy * p2t.z

        e0 = x1 * y2 - y1 * x2
        e1 = x2 * y0 - y2 * x0
        e2 = x0 * y1 - y0 * x1

        if (e0 < 0.0 or e1 < 0.0 or e2 < 0.0) and (e0 > 0.0 or e1 > 0.0 or e2 > 0.0):
            return None

        det = e0 + e1 + e2
        if det == 0.0:
            return None

        tscaled = e0 * p0t.z * sz + e1 * p1t.z * sz + e2 * p2t.z * sz
        if (det < 0.0 and tscaled >= 0.0) or (det > 0.0 and tscaled <= 0.0):
            return None

        invdet = 1.0 / det
        b0, b1, b2 = e0 * invdet, e1 * invdet, e2 * invdet
        t = tscaled * invdet
        if t >= isect.t:
            return None

        uv = self.uv()
        duv02 = uv[0] - uv[2]
        duv12 = uv[1] - uv[2]
        dp02 = p0 - p2
        dp12 = p1 - p2
        determinant = duv02.x * duv12.y - duv02.y * duv12.x
        if determinant == 0.0:
            dpdu, dpdv = coordinate_system((p2 - p1).cross(p1 - p0))
        else:
            inv = 1.0 / determinant
            dpdu = (duv12.y * dp02 - duv02.y * dp12) * inv
            dpdv = (-duv12.x * dp02 - duv02.x * dp12) * inv

        hit_uv = b0 * (uv[0] + b1 * uv[1] + b2 * uv[2])

        isect.t = t
        isect.uv = hit_uv
        isect.geometry = Shading(dpdu, dpdv)
        isect.surface = isect.geometry
        isect.material = default_material()

        if self.has_n():
            ns = b0 * self.n0() + b1 * self.n1() + b2 * self.n2()
            ss = isect.geometry.dpdu
            ts = ns.cross(ss)
            if ts.magnitude2() > 0.0:
                ss = ts.cross(ns)
            else:
                ss, ts = coordinate_system(ns)
            isect.n = Normal3(ns)
            isect.set_surface_shading(ss, ts)
        else:
            isect.n = Normal3(dp02.cross(dp12)).face_forward(-ray.d)

        return self

    def material(self) -> Optional[Material]:
        return None


def triangles(obj: Obj) -> Iterator[Triangle]:
    """Yield every face of the mesh as a triangle, in file order."""
    for oi, o in enumerate(obj.objects):
        for gi, group in enumerate(o.groups):
            for pi in range(len(group.polys)):
                yield Triangle(obj, oi, gi, pi)