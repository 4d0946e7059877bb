import math

import pytest

from raytrace.geometry import (
    Ray,
    Rotation,
    divide_neg,
    nearest_root,
    neg_mod,
    rotate_vector,
    solve_quadratic,
)
from raytrace.vector import Vec3


def test_ray_defaults():
    ray = Ray()
    assert ray.origin == Vec3()
    assert ray.direction == Vec3()


def test_identity_rotation():
    assert Rotation().rotate(3, 4) == pytest.approx((3, 4))


def test_quarter_turn():
    assert Rotation(math.pi / 2).rotate(1, 0) == pytest.approx((0, 1), abs=1e-12)


def test_rotation_preserves_length_and_inverts():
    r = Rotation(0.7)
    x, y = r.rotate(3, -2)
    assert math.hypot(x, y) == pytest.approx(math.hypot(3, -2))
    assert Rotation(-0.7).rotate(x, y) == pytest.approx((3, -2))


def test_from_degrees():
    assert Rotation.from_degrees(180).radians == pytest.approx(math.pi)
    assert Rotation.from_degrees(0).rotate(2, 5) == pytest.approx((2, 5))


def test_rotate_vector_identity_and_length():
    v = Vec3(1, 2, 3)
    same = rotate_vector(v, Rotation(), Rotation())
    assert tuple(same) == pytest.approx(tuple(v))
    turned = rotate_vector(v, Rotation(0.4), Rotation(0.3))
    assert turned.length() == pytest.approx(v.length())


def test_solve_quadratic_roots_satisfy_equation():
    roots = solve_quadratic(2, -3, -5)
    assert roots is not None
    r0, r1 = roots
    assert r0 <= r1
    for r in roots:
        assert 2 * r * r - 3 * r - 5 == pytest.approx(0, abs=1e-9)


def test_solve_quadratic_no_real_roots():
    assert solve_quadratic(1, 0, 1) is None


def test_nearest_root():
    t = nearest_root(1, 0, -4)
    assert t >= 0
    assert t * t - 4 == pytest.approx(0)
    roots = solve_quadratic(1, -5, 4)
    assert nearest_root(1, -5, 4) == roots[0]
    assert nearest_root(1, 5, 4) == -1
    assert nearest_root(1, 0, 1) == -1


@pytest.mark.parametrize("value", [-3.25, -0.25, 0.0, 0.5, 7.75])
def test_neg_mod_range_and_congruence(value):
    m = 1.5
    r = neg_mod(value, m)
    assert 0 <= r < m
    k = (value - r) / m
    assert k == pytest.approx(round(k))


@pytest.mark.parametrize("value", [-2.5, -0.5, 0.0, 0.5, 4.0])
def test_divide_neg_floors(value):
    w = 2.0
    n = divide_neg(value, w)
    assert isinstance(n, int)
    assert n * w <= value < (n + 1) * w