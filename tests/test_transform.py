import pytest

from lasgun.bounds import Bounds3
from lasgun.interaction import RayIntersection
from lasgun.material import mirror
from lasgun.space import Normal3, Point2, Ray, Vector3
from lasgun.transform import Transform3

IDENTITY_FLAT = [
    1.0, 0.0, 0.0, 0.0,
    0.0, 1.0, 0.0, 0.0,
    0.0, 0.0, 1.0, 0.0,
    0.0, 0.0, 0.0, 1.0,
]

FACTORIES = [
    ("translate", (Vector3(1.0, -2.0, 3.0),)),
    ("scale", (2.0, 3.0, 0.5)),
    ("rotate_x", (30.0,)),
    ("rotate_y", (45.0,)),
    ("rotate_z", (60.0,)),
    ("rotate", (33.0, Vector3(1.0, 1.0, 1.0).normalize())),
]


def _flat(m):
    return [x for col in m for x in col]


def test_identity_leaves_point_unchanged():
    p = Vector3(1.5, -2.0, 7.0)
    assert Transform3.identity().transform_point(p) == p


@pytest.mark.parametrize("name, args", FACTORIES)
def test_matrix_times_inverse_is_identity(name, args):
    t = getattr(Transform3, name)(*args)
    product = t.concat(Transform3.inverse(t))
    assert _flat(product.m) == pytest.approx(IDENTITY_FLAT, abs=1e-9)


@pytest.mark.parametrize("name, args", FACTORIES)
def test_point_round_trip(name, args):
    t = getattr(Transform3, name)(*args)
    p = Vector3(0.3, -4.0, 2.5)
    back = Transform3.inverse(t).transform_point(t.transform_point(p))
    assert list(back) == pytest.approx([0.3, -4.0, 2.5], abs=1e-9)


def test_translate_moves_points_but_not_vectors():
    delta = Vector3(1.0, 2.0, 3.0)
    t = Transform3.translate(delta)
    p = Vector3(4.0, 5.0, 6.0)
    assert t.transform_point(p) == p + delta
    assert t.transform_vector(p) == p


def test_rotate_z_quarter_turn():
    v = Transform3.rotate_z(90.0).transform_vector(Vector3.unit_x())
    assert list(v) == pytest.approx([0.0, 1.0, 0.0], abs=1e-9)


def test_rotation_inverse_is_transpose():
    t = Transform3.rotate(20.0, Vector3.unit_y())
    assert t.minv == t.transpose().m


def test_transpose_twice_is_original():
    t = Transform3.from_slice(
        [[1.0, 2.0, 0.0, 0.0], [0.0, 1.0, 0.0, 0.0], [0.0, 0.0, 3.0, 0.0], [4.0, 5.0, 6.0, 1.0]]
    )
    assert t.transpose().transpose() == t


def test_from_matrix_computes_inverse():
    columns = [[2.0, 0.0, 1.0, 0.0], [0.0, 1.0, 0.0, 0.0], [1.0, 0.0, 3.0, 0.0], [5.0, 6.0, 7.0, 1.0]]
    t = Transform3.from_matrix(columns)
    assert _flat(t.concat(t.inverse()).m) == pytest.approx(IDENTITY_FLAT, abs=1e-9)
    p = Vector3(1.0, 2.0, 3.0)
    back = t.inverse_transform_vector(t.transform_vector(p))
    assert list(back) == pytest.approx([1.0, 2.0, 3.0], abs=1e-9)


def test_singular_matrix_raises():
    with pytest.raises(ValueError):
        Transform3.from_matrix([[1.0, 0.0, 0.0, 0.0]] * 4)


def test_malformed_matrix_raises():
    with pytest.raises(ValueError):
        Transform3.from_slice([[1.0, 0.0, 0.0]] * 4)


def test_zero_scale_raises():
    with pytest.raises(ValueError):
        Transform3.scale(1.0, 0.0, 1.0)


def test_has_scale():
    assert Transform3.scale(2.0, 1.0, 1.0).has_scale()
    assert not Transform3.rotate_x(37.0).has_scale()
    assert not Transform3.translate(Vector3(5.0, 5.0, 5.0)).has_scale()


def test_concat_applies_self_first():
    t = Transform3.translate(Vector3(1.0, 0.0, 0.0))
    s = Transform3.scale(2.0, 2.0, 2.0)
    p = Vector3(1.0, 1.0, 1.0)
    assert t.concat(s).transform_point(p) == s.transform_point(t.transform_point(p))


def test_concat_self_matches_concat():
    t = Transform3.rotate_y(15.0)
    s = Transform3.translate(Vector3(0.0, 3.0, 0.0))
    expected = t.concat(s)
    t.concat_self(s)
    assert t == expected


def test_normal_stays_perpendicular_under_nonuniform_scale():
    t = Transform3.scale(2.0, 1.0, 1.0)
    tangent = Vector3(1.0, -1.0, 0.0)
    normal = Normal3(Vector3(1.0, 1.0, 0.0))
    product = t.transform_normal(normal).vec.dot(t.transform_vector(tangent))
    assert product == pytest.approx(0.0, abs=1e-12)


def test_inverse_transform_normal_matches_inverse():
    t = Transform3.scale(2.0, 3.0, 4.0).concat(Transform3.rotate_x(25.0))
    n = Normal3(Vector3(0.2, 0.5, -1.0))
    direct = t.inverse_transform_normal(n).vec
    via_inverse = t.inverse().transform_normal(n).vec
    assert list(direct) == pytest.approx(list(via_inverse), abs=1e-9)


def test_transform_ray():
    t = Transform3.translate(Vector3(0.0, 0.0, 5.0))
    ray = Ray(Vector3.zero(), Vector3.unit_x())
    moved = t.transform_ray(ray)
    assert moved.origin == t.transform_point(ray.origin)
    assert moved.d == ray.d
    back = t.inverse_transform_ray(moved)
    assert list(back.origin) == pytest.approx([0.0, 0.0, 0.0], abs=1e-9)
    assert list(back.d) == pytest.approx([1.0, 0.0, 0.0], abs=1e-9)


def test_transform_bounds_contains_transformed_corners():
    t = Transform3.rotate(40.0, Vector3(0.0, 1.0, 1.0).normalize()).concat(
        Transform3.translate(Vector3(1.0, 2.0, 3.0))
    )
    b = Bounds3(Vector3(-1.0, -2.0, 0.5), Vector3(1.0, 1.0, 2.0))
    tb = t.transform_bounds(b)
    for i in range(8):
        c = t.transform_point(b.corner(i))
        assert all(lo - 1e-9 <= x <= hi + 1e-9 for x, lo, hi in zip(c, tb.min, tb.max))


def test_translate_bounds_is_exact():
    delta = Vector3(1.0, 2.0, 3.0)
    b = Bounds3(Vector3(0.0, 0.0, 0.0), Vector3(1.0, 1.0, 1.0))
    tb = Transform3.translate(delta).transform_bounds(b)
    assert tb == Bounds3(b.min + delta, b.max + delta)


def test_inverse_transform_bounds_round_trip():
    t = Transform3.translate(Vector3(-3.0, 1.0, 2.0)).concat(Transform3.scale(2.0, 2.0, 2.0))
    b = Bounds3(Vector3(-1.0, -1.0, -1.0), Vector3(1.0, 2.0, 3.0))
    back = t.inverse_transform_bounds(t.transform_bounds(b))
    assert list(back.min) == pytest.approx([-1.0, -1.0, -1.0], abs=1e-9)
    assert list(back.max) == pytest.approx([1.0, 2.0, 3.0], abs=1e-9)


def test_transform_ray_intersection_keeps_material_and_t():
    mat = mirror([1.0, 1.0, 1.0])
    isect = RayIntersection(2.5, Point2(0.0, 0.0), Vector3.unit_x(), Vector3.unit_y(), material=mat)
    isect.n = Normal3(Vector3.unit_z())
    t = Transform3.rotate_x(90.0)
    out = t.transform_ray_intersection(isect)
    assert out.t == 2.5
    assert out.material == mat
    assert list(out.geometry.dpdv) == pytest.approx(
        list(t.transform_vector(Vector3.unit_y())), abs=1e-9
    )
    assert list(out.n.vec) == pytest.approx(list(t.transform_normal(isect.n).vec), abs=1e-9)
    assert out.surface == out.geometry


def test_ray_intersection_round_trip_with_surface_shading():
    isect = RayIntersection(1.0, Point2(0.0, 0.0), Vector3.unit_x(), Vector3.unit_y())
    isect.set_surface_shading(Vector3(1.0, 1.0, 0.0), Vector3(0.0, 1.0, 1.0))
    t = Transform3.scale(2.0, 3.0, 4.0)
    back = t.inverse_transform_ray_intersection(t.transform_ray_intersection(isect))
    assert list(back.geometry.dpdu) == pytest.approx([1.0, 0.0, 0.0], abs=1e-9)
    assert list(back.surface.dpdu) == pytest.approx([1.0, 1.0, 0.0], abs=1e-9)
    assert list(back.surface.dpdv) == pytest.approx([0.0, 1.0, 1.0], abs=1e-9)
    assert back.n is None


def test_look_at_maps_eye_to_origin_and_target_forward():
    eye = Vector3(1.0, 2.0, 3.0)
    look = Vector3(1.0, 2.0, -7.0)
    t = Transform3.look_at(eye, look, Vector3.unit_y())
    assert list(t.transform_point(eye)) == pytest.approx([0.0, 0.0, 0.0], abs=1e-9)
    target = t.transform_point(look)
    assert [target.x, target.y] == pytest.approx([0.0, 0.0], abs=1e-9)
    assert target.z < 0.0
    assert list(t.inverse().transform_point(target)) == pytest.approx([1.0, 2.0, -7.0], abs=1e-9)