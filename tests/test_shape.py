from raytrace.geometry import Ray
from raytrace.shape import Object
from raytrace.vector import Vec3


def _ray():
    return Ray(Vec3(0, 0, -5), Vec3(0, 0, 1))


def test_base_object_never_intersects():
    assert Object().intersect(_ray()) < 0


def test_base_object_surface_intersect_is_a_miss():
    hit = Object().surface_intersect(_ray())
    assert not hit.does_intersect()
    assert hit.normal.is_empty()


def test_base_object_contains_nothing():
    assert Object().contains(Vec3()) is False
    assert Object().contains(Vec3(1, 2, 3)) is False