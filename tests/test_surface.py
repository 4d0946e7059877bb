import math

import pytest

from raytrace.geometry import Rotation
from raytrace.imagebuffer import ImageFileBuffer
from raytrace.surface import (
    CheckedFlatSurface,
    CheckedUvSurface,
    FlatSurface,
    GeneratedSquareUvSurface,
    LineFlatSurface,
    RotatedFlatSurface,
    SolidFlatSurface,
    SolidUvSurface,
    SurfaceIntersection,
    SurfaceResult,
    TexturedUvSurface,
    UvSurface,
)
from raytrace.vector import Vec3

RED = SurfaceResult(Vec3(1, 0, 0))
BLUE = SurfaceResult(Vec3(0, 0, 1), reflection_index=0.5)


def test_no_intersection():
    miss = SurfaceIntersection.none()
    assert not miss.does_intersect()
    assert miss.normal.is_empty()
    assert SurfaceIntersection(0, Vec3(0, 1, 0)).does_intersect()


def test_base_surfaces_are_default():
    assert FlatSurface().get_surface(1, 2) == SurfaceResult()
    assert UvSurface().get_surface(0.3, 0.4) == SurfaceResult()


def test_solid_surfaces():
    assert SolidFlatSurface(RED).get_surface(10, -3) == RED
    assert SolidUvSurface(BLUE).get_surface(0.1, 0.9) == BLUE


def test_checked_flat_alternates():
    s = CheckedFlatSurface(1.0, RED, BLUE)
    a = s.get_surface(0.5, 0.5)
    assert a != s.get_surface(1.5, 0.5)
    assert a != s.get_surface(-0.5, 0.5)
    assert a == s.get_surface(1.5, 1.5)
    assert {s.get_surface(0.5, 0.5), s.get_surface(1.5, 0.5)} == {RED, BLUE}


def test_line_flat_stripes():
    s = LineFlatSurface(1.0, 2.0, 0.0, RED, BLUE)
    assert s.get_surface(0.5, 0) == RED
    assert s.get_surface(1.5, 0) == BLUE
    assert s.get_surface(3.5, 0) == RED
    assert s.get_surface(-0.5, 7) == BLUE
    shifted = LineFlatSurface(1.0, 2.0, 1.0, RED, BLUE)
    assert shifted.get_surface(0.5, 0) == s.get_surface(1.5, 0)


def test_rotated_flat_uses_rotated_coordinates():
    inner = CheckedFlatSurface(1.0, RED, BLUE)
    rotation = Rotation(math.pi / 2)
    s = RotatedFlatSurface(inner, rotation)
    for x, y in [(0.5, 1.5), (2.25, -0.75), (-1.2, 3.3)]:
        assert s.get_surface(x, y) == inner.get_surface(*rotation.rotate(x, y))


def test_checked_uv_alternates():
    s = CheckedUvSurface(0.5, 0.5, RED, BLUE)
    assert s.get_surface(0.25, 0.25) != s.get_surface(0.75, 0.25)
    assert s.get_surface(0.25, 0.25) == s.get_surface(0.75, 0.75)


def test_generated_squares():
    default = SurfaceResult(Vec3(), reflection_index=0.3, specular_pow=2)
    s = GeneratedSquareUvSurface(Vec3(0, 0, 0), Vec3(1, 1, 1), default, 0.5, 0.5)
    a = s.get_surface(0.1, 0.1)
    assert a == s.get_surface(0.4, 0.4)
    assert a.reflection_index == default.reflection_index
    assert a.specular_pow == default.specular_pow
    for u, v in [(0.1, 0.1), (-3.2, 7.9), (12.0, -0.6)]:
        c = s.get_surface(u, v).color
        assert all(0 <= comp <= 1 for comp in c)
        assert c.x == c.y == c.z


def test_textured_surface_samples_buffer():
    buffer = ImageFileBuffer(2, 1)
    buffer.set_pixel(0, 0, Vec3(1, 0, 0))
    buffer.set_pixel(1, 0, Vec3(0, 1, 0))
    default = SurfaceResult(reflection_index=0.25)
    s = TexturedUvSurface(buffer, 0.0, default)
    left = s.get_surface(0.5, 0)
    right = s.get_surface(-0.5, 0)
    assert left.color == buffer.get_pixel(0, 0)
    assert right.color == buffer.get_pixel(1, 0)
    assert left.reflection_index == default.reflection_index


def test_textured_surface_without_buffer():
    with pytest.raises(ValueError):
        TexturedUvSurface().get_surface(0, 0)