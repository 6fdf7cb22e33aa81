# lasgun

The geometric core of a ray tracer: vectors and rays, bounding boxes,
affine transformations, spheres, boxes and triangle meshes read from
Wavefront `.obj` data, material descriptions, point lights and a scene
description to hold them all. It has no dependencies beyond the standard
library.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `lasgun.space`: `Vector3` (also used for points and colours), `Point2`,
  `Normal3`, `Ray`, and helpers `abs_vec`, `lerp`, `max_dimension`,
  `coordinate_system`, `permute`.
- `lasgun.bounds`: `Bounds3`, an axis-aligned box that can also be
  intersected by rays.
- `lasgun.transform`: `Transform3`, a 4x4 matrix kept together with its
  inverse.
- `lasgun.interaction`: `RayIntersection`, `Shading` and
  `SurfaceInteraction`.
- `lasgun.primitive`: the abstract `Primitive` interface.
- `lasgun.shapes`: `Cuboid` and `Sphere`.
- `lasgun.triangle`: `.obj` parsing (`parse_obj`, `load_obj`,
  `obj_from_buf`, raising `ObjError`), `Obj`, `Triangle`, `triangles`,
  `face_count`.
- `lasgun.material`: `Matte`, `Plastic`, `Metal`, `Glass`, `Mirror`,
  `Background` and the constructors `matte`, `plastic`, `metal`, `glass`,
  `mirror`, `default_material`.
- `lasgun.light`: `Light`, `PointLight`, `iter_light_samples`.
- `lasgun.scene`: `Scene`, `Aggregate`, `ObjRef` and the node types
  `Geometry`, `Mesh`, `Group` with shapes `SphereShape`, `CubeShape`,
  `CuboidShape`.

## Building a scene

```python
from lasgun.scene import Scene, Aggregate
from lasgun import material

scene = Scene()
scene.set_radial_background([0.9, 0.9, 1.0], [0.2, 0.3, 0.6], 0.8)
scene.set_ambient_light([0.1, 0.1, 0.1])
scene.add_point_light([0.0, 10.0, 10.0], [1.0, 1.0, 1.0], [1.0, 0.0, 0.0])

red = material.matte([0.8, 0.1, 0.1], 0.0)
chrome = material.mirror([0.9, 0.9, 0.9])

group = Aggregate()
group.add_sphere([0.0, 0.0, 0.0], 1.0, red)
group.add_cube([2.0, -1.0, -1.0], 2.0, chrome)
group.translate([0.0, 0.5, 0.0]).rotate_y(30.0)

plane = scene.parse_obj("""o plane
v -5 -1 -5
v 5 -1 -5
v 5 -1 5
v -5 -1 5
f 1 2 3
f 1 3 4
""")
group.add_obj_of(plane, material.plastic([0.5, 0.5, 0.5], [0.3, 0.3, 0.3], 0.1))

scene.root.add_group(group)
```

Meshes can also be loaded from disk with `scene.load_obj(path)`; the
returned `ObjRef` is what scene nodes refer to, and `scene.obj(ref)`
gives back the parsed mesh (or `None` for an unknown reference). When
`scene.smoothing` is off, `add_obj` drops the mesh's vertex normals.

## Intersecting rays

Every shape is a `Primitive`. `intersect(ray, isect)` updates a
`RayIntersection` in place when a nearer hit is found and returns the
primitive that was hit, or `None`. `intersects(ray)` only answers whether
there is a hit.

```python
from lasgun.space import Ray, Vector3
from lasgun.shapes import Sphere
from lasgun.interaction import RayIntersection
from lasgun import material

sphere = Sphere([0.0, 0.0, 0.0], 1.0, material.default_material())
ray = Ray(Vector3(0.0, 0.0, 2.0), Vector3(0.0, 0.0, -1.0))
isect = RayIntersection.default()

if sphere.intersect(ray, isect) is not None:
    print(isect.t, isect.ng())   # 1.0 and the normal facing the ray
```

Triangle meshes are intersected one face at a time:

```python
from lasgun.triangle import load_obj, triangles

mesh = load_obj("model.obj")
for tri in triangles(mesh):
    tri.intersect(ray, isect)
```

A point light can be asked whether it is visible from a point:
`PointLight.sample(root, p)` casts a ray towards the light against the
primitive `root` and returns the light, or `None` if it is occluded.

## Transformations

`Transform3` can move points, vectors, normals, rays, bounding boxes and
intersections between model and world space. Rotation angles are in
degrees.

```python
from lasgun.transform import Transform3
from lasgun.space import Vector3

t = Transform3.translate(Vector3(1.0, 0.0, 0.0))
t.concat_self(Transform3.rotate_z(90.0))
world_ray = t.transform_ray(ray)
```

## What this package does not do

It does not render images. There is no camera, no film or image output,
no light integrator and no acceleration structure: a scene can be
described and rays can be intersected with individual primitives, but
nothing here turns a `Scene` into pixels. The materials hold their
parameters only and do not compute scattering functions, and
`Scene.recursion` and `Scene.threads` are stored settings that nothing in
the package acts on.