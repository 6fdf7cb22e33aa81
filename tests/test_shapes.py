import math

import pytest

from lasgun.bounds import Bounds3
from lasgun.interaction import RayIntersection
from lasgun.material import default_material, mirror
from lasgun.shapes import Cuboid, Sphere
from lasgun.space import Ray, Vector3


def _unit_cube():
    return Cuboid([-1.0, -1.0, -1.0], [1.0, 1.0, 1.0], default_material())


def _wide_box():
    return Cuboid([-1.1, -1.1, -1.0], [1.1, 1.1, 1.0], default_material())


def _hit(shape, ray):
    isect = RayIntersection.default()
    result = shape.intersect(ray, isect)
    return result, isect


# Cuboid cases


def test_cuboid_straight_on_intersection():
    cube = _unit_cube()
    result, isect = _hit(cube, Ray(Vector3(0.0, 0.0, -2.0), Vector3(0.0, 0.0, 1.0)))
    assert result is cube
    assert isect.t == 1.0
    assert isect.ng() == Vector3(0.0, 0.0, -1.0)


def test_cuboid_edge_intersection():
    result, isect = _hit(_wide_box(), Ray(Vector3(0.0, 0.0, -2.0), Vector3(1.0, 0.0, 1.0)))
    assert result is not None
    assert isect.t == 1.0
    assert isect.ng() == Vector3(0.0, 0.0, -1.0)


def test_cuboid_corner_intersection():
    result, isect = _hit(_wide_box(), Ray(Vector3(0.0, 0.0, -2.0), Vector3(1.0, 1.0, 1.0)))
    assert result is not None
    assert isect.t == 1.0
    assert isect.ng() == Vector3(0.0, 0.0, -1.0)


def test_cuboid_inside_intersection():
    result, isect = _hit(_unit_cube(), Ray(Vector3(0.0, 0.0, 0.0), Vector3.unit_z()))
    assert result is not None
    assert isect.t == 1.0


def test_cuboid_inside_behind_intersection():
    result, isect = _hit(_unit_cube(), Ray(Vector3(0.0, 0.0, 0.0), -Vector3.unit_y()))
    assert result is not None
    assert isect.t == 1.0


def test_cuboid_inside_intersection_offset():
    cube = _unit_cube()
    result, isect = _hit(cube, Ray(Vector3(0.5, 0.5, 0.5), Vector3(1.0, 0.0, 1.0)))
    assert result is cube
    assert isect.t == pytest.approx(0.5)


def test_cuboid_behind_intersection():
    result, isect = _hit(_unit_cube(), Ray(Vector3(0.0, 0.0, 2.0), Vector3(0.0, 0.0, -1.0)))
    assert result is not None
    assert isect.t == 1.0
    assert isect.ng() == Vector3(0.0, 0.0, 1.0)


def test_cuboid_top_intersection():
    result, isect = _hit(_unit_cube(), Ray(Vector3(0.0, 2.0, 0.0), Vector3(0.0, -1.0, 0.0)))
    assert result is not None
    assert isect.t == 1.0
    assert isect.ns() == Vector3(0.0, 1.0, 0.0)


def test_cuboid_bottom_intersection():
    result, isect = _hit(_unit_cube(), Ray(Vector3(0.0, -2.0, 0.0), Vector3(0.0, 1.0, 0.0)))
    assert result is not None
    assert isect.t == 1.0
    assert isect.ns() == Vector3(0.0, -1.0, 0.0)


def test_cuboid_top_angled_intersection():
    result, isect = _hit(_unit_cube(), Ray(Vector3(0.0, 2.0, 2.0), Vector3(0.0, -0.5, -1.0)))
    assert result is not None
    assert isect.t == 2.0
    assert isect.ng() == Vector3(0.0, 1.0, 0.0)


def test_cuboid_miss_leaves_intersection_untouched():
    result, isect = _hit(_unit_cube(), Ray(Vector3(0.0, 3.0, -2.0), Vector3(0.0, 0.0, 1.0)))
    assert result is None
    assert isect.t == math.inf


def test_cuboid_discards_farther_hit():
    isect = RayIntersection.default()
    isect.t = 0.5
    ray = Ray(Vector3(0.0, 0.0, -2.0), Vector3(0.0, 0.0, 1.0))
    assert _unit_cube().intersect(ray, isect) is None
    assert isect.t == 0.5


def test_cuboid_intersects():
    cube = _unit_cube()
    assert cube.intersects(Ray(Vector3(0.0, 0.0, -2.0), Vector3(0.0, 0.0, 1.0))) is True
    assert cube.intersects(Ray(Vector3(0.0, 0.0, -2.0), Vector3(0.0, 0.0, -1.0))) is False


def test_cuboid_bound_and_material():
    mat = mirror([1.0, 1.0, 1.0])
    cuboid = Cuboid([1.0, -2.0, 3.0], [-1.0, 2.0, -3.0], mat)
    assert cuboid.bound() == Bounds3(Vector3(-1.0, -2.0, -3.0), Vector3(1.0, 2.0, 3.0))
    assert cuboid.material() == mat


def test_cube_constructor():
    cube = Cuboid.cube([1.0, 2.0, 3.0], 2.0, default_material())
    assert cube.bound().min == Vector3(1.0, 2.0, 3.0)
    assert cube.bound().max == Vector3(3.0, 4.0, 5.0)


def test_cuboid_rejects_bad_coordinates():
    with pytest.raises(ValueError):
        Cuboid([0.0, 0.0], [1.0, 1.0, 1.0], default_material())


# Sphere cases


def _unit_sphere():
    return Sphere([0.0, 0.0, 0.0], 1.0, default_material())


def test_sphere_straight_on_intersection():
    sphere = _unit_sphere()
    result, isect = _hit(sphere, Ray(Vector3(0.0, 0.0, 2.0), Vector3(0.0, 0.0, -1.0)))
    assert result is sphere
    assert isect.t == 1.0
    assert tuple(isect.ng()) == pytest.approx((0.0, 0.0, 1.0))


def test_sphere_inside_intersection():
    result, isect = _hit(_unit_sphere(), Ray(Vector3(0.0, 0.0, 0.0), Vector3(0.0, 0.0, 1.0)))
    assert result is not None
    assert isect.t == 1.0
    assert tuple(isect.ng()) == pytest.approx((0.0, 0.0, -1.0))


def test_sphere_behind_intersection():
    result, isect = _hit(_unit_sphere(), Ray(Vector3(0.0, 0.0, -2.0), Vector3(0.0, 0.0, 1.0)))
    assert result is not None
    assert isect.t == 1.0
    ng = isect.ng()
    assert Vector3(round(ng.x), round(ng.y), round(ng.z)) == Vector3(0.0, 0.0, -1.0)


def test_sphere_miss():
    sphere = _unit_sphere()
    ray = Ray(Vector3(0.0, 0.0, 2.0), Vector3(1.0, 0.0, 0.0))
    result, isect = _hit(sphere, ray)
    assert result is None
    assert isect.t == math.inf
    assert sphere.intersects(ray) is False


def test_sphere_entirely_behind_ray():
    sphere = _unit_sphere()
    ray = Ray(Vector3(0.0, 0.0, 5.0), Vector3(0.0, 0.0, 1.0))
    assert sphere.intersect(ray, RayIntersection.default()) is None
    assert sphere.intersects(ray) is False


def test_sphere_intersects_in_front():
    assert _unit_sphere().intersects(Ray(Vector3(0.0, 0.0, 2.0), Vector3(0.0, 0.0, -1.0)))


def test_sphere_discards_farther_hit():
    isect = RayIntersection.default()
    isect.t = 0.25
    ray = Ray(Vector3(0.0, 0.0, 2.0), Vector3(0.0, 0.0, -1.0))
    assert _unit_sphere().intersect(ray, isect) is None
    assert isect.t == 0.25


def test_sphere_off_axis_normal_points_outward():
    sphere = Sphere([1.0, 2.0, 3.0], 2.0, default_material())
    ray = Ray(Vector3(5.0, 2.0, 3.0), Vector3(-1.0, 0.0, 0.0))
    result, isect = _hit(sphere, ray)
    assert result is sphere
    assert isect.t == pytest.approx(2.0)
    assert tuple(isect.ng()) == pytest.approx((1.0, 0.0, 0.0), abs=1e-9)


def test_sphere_bound_and_material():
    mat = mirror([0.5, 0.5, 0.5])
    sphere = Sphere([1.0, 2.0, 3.0], 0.5, mat)
    assert sphere.bound() == Bounds3(Vector3(0.5, 1.5, 2.5), Vector3(1.5, 2.5, 3.5))
    assert sphere.material() == mat