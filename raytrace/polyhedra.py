"""Shapes built from flat pieces: triangle and plane meshes, boxes, prisms, pyramids."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Tuple

from raytrace.geometry import Ray, Rotation, neg_mod
from raytrace.shape import Object
from raytrace.surface import FlatSurface, SurfaceIntersection, SurfaceResult
from raytrace.traced import plane_intersect
from raytrace.vector import Vec2, Vec3

_EPSILON = 1e-9
_UP = Vec3(0, 1, 0)
_DOWN = Vec3(0, -1, 0)
# In-plane axes of horizontal polygon faces: coordinates are (-dx, dz).
_POLYGON_U = Vec3(-1, 0, 0)
_POLYGON_V = Vec3(0, 0, 1)


@dataclass
class Triangle:
    """A triangle; its normal follows the winding order unless given."""

    p0: Vec3
    p1: Vec3
    p2: Vec3
    normal: Optional[Vec3] = None

    def __post_init__(self) -> None:
        if self.normal is None:
            self.normal = (self.p1 - self.p0).cross(self.p2 - self.p0).normal()

    def intersect(self, ray: Ray) -> float:
        """Distance along the ray to the triangle, or -1 for a miss."""
        edge1 = self.p1 - self.p0
        edge2 = self.p2 - self.p0
        h = ray.direction.cross(edge2)
        a = edge1.dot(h)
        if abs(a) < _EPSILON:
            return -1.0
        f = 1.0 / a
        s = ray.origin - self.p0
        u = f * s.dot(h)
        if u < 0 or u > 1:
            return -1.0
        q = s.cross(edge1)
        v = f * ray.direction.dot(q)
        if v < 0 or u + v > 1:
            return -1.0
        t = f * edge2.dot(q)
        return t if t > _EPSILON else -1.0


@dataclass(eq=False)
class TriangleMesh(Object):
    """A set of triangles sharing one material."""

    triangles: List[Triangle] = field(default_factory=list)
    surface: SurfaceResult = field(default_factory=SurfaceResult)

    def _nearest(self, ray: Ray) -> Tuple[float, Vec3]:
        t, normal = -1.0, Vec3.empty()
        for triangle in self.triangles:
            tt = triangle.intersect(ray)
            if tt < 0 or (tt > t and t > 0):
                continue
            t, normal = tt, triangle.normal
        return t, normal

    def intersect(self, ray: Ray) -> float:
        return self._nearest(ray)[0]

    def surface_intersect(self, ray: Ray) -> SurfaceIntersection:
        t, normal = self._nearest(ray)
        if t < 0:
            return SurfaceIntersection.none()
        return SurfaceIntersection(t, normal, self.surface)


@dataclass
class CustomPlaneIntersection:
    """A hit on a bounded plane, with the hit's coordinates within the plane."""

    t: float = -1.0
    normal: Vec3 = field(default_factory=Vec3.empty)
    coords: Vec2 = field(default_factory=Vec2.empty)

    @classmethod
    def miss(cls) -> "CustomPlaneIntersection":
        return cls()


def _accept_all(point: Vec2) -> bool:
    return True


@dataclass
class CustomPlane:
    """A plane bounded by a predicate on in-plane coordinates."""

    origin: Vec3
    normal: Vec3
    u_axis: Vec3 = field(default_factory=lambda: _POLYGON_U)
    v_axis: Vec3 = field(default_factory=lambda: _POLYGON_V)
    validator: Callable[[Vec2], bool] = _accept_all

    def coords(self, point: Vec3) -> Vec2:
        offset = point - self.origin
        return Vec2(offset.dot(self.u_axis), offset.dot(self.v_axis))

    def intersect(self, ray: Ray) -> CustomPlaneIntersection:
        t = plane_intersect(self.origin, self.normal, ray)
        if t < 0:
            return CustomPlaneIntersection.miss()
        coords = self.coords(ray.origin + ray.direction * t)
        if not self.validator(coords):
            return CustomPlaneIntersection.miss()
        return CustomPlaneIntersection(t, self.normal, coords)


@dataclass(eq=False)
class CustomPlaneMesh(Object):
    """A set of bounded planes sharing one material."""

    planes: List[CustomPlane] = field(default_factory=list)
    surface: SurfaceResult = field(default_factory=SurfaceResult)

    def _nearest(self, ray: Ray) -> Tuple[float, Vec3]:
        t, normal = -1.0, Vec3.empty()
        for plane in self.planes:
            hit = plane.intersect(ray)
            if hit.t < 0 or (hit.t > t and t > 0):
                continue
            t, normal = hit.t, hit.normal
        return t, normal

    def intersect(self, ray: Ray) -> float:
        return self._nearest(ray)[0]

    def surface_intersect(self, ray: Ray) -> SurfaceIntersection:
        t, normal = self._nearest(ray)
        if t < 0:
            return SurfaceIntersection.none()
        return SurfaceIntersection(t, normal, self.surface)


def polygon_contains(point: Vec2, radius: float, triangle_size: float,
                     sin_of_outer_corner: float) -> bool:
    """Whether a point lies in a regular polygon centred at the origin.

    The polygon has a vertex on the positive y axis, circumradius ``radius`` and
    ``triangle_size`` radians between neighbouring vertices.
    """
    distance_squared = point.dot_itself()
    if distance_squared > radius * radius:
        return False
    angle = neg_mod(math.atan2(point.x, point.y), triangle_size)
    b = (math.pi - triangle_size) / 2
    a = math.pi - angle - b
    length = radius / math.sin(a) * sin_of_outer_corner
    return distance_squared <= length * length


def _polygon_measures(radius: float, sides: int) -> Tuple[float, float, float]:
    """Angle per side, sine of the outer corner and side length."""
    triangle_size = 2 * math.pi / sides
    sin_of_outer_corner = math.sin((math.pi - triangle_size) / 2)
    side_length = math.sqrt(2 * radius * radius - 2 * radius * radius * math.cos(triangle_size))
    return triangle_size, sin_of_outer_corner, side_length


def _polygon_sides(radius: float, sides: int) -> Iterator[Tuple[Vec3, Vec3, Vec3]]:
    """Each side as (start vertex, outward unit normal, end vertex), at height 0."""
    half_step = Rotation(-math.pi / sides)
    x, z = 0.0, radius
    for _ in range(sides):
        start = Vec3(x, 0, z)
        x, z = half_step.rotate(x, z)
        middle = Vec3(x, 0, z) / radius
        x, z = half_step.rotate(x, z)
        yield start, middle, Vec3(x, 0, z)


def _in_range(x: float, a: float, b: float) -> bool:
    return a < x < b or b < x < a


class Box(Object):
    """An axis-aligned box between two opposite corners."""

    def __init__(self, first_point: Vec3, second_point: Vec3) -> None:
        self.first_point = first_point
        self.second_point = second_point
        f, s = first_point, second_point

        p0 = f
        p1 = Vec3(s.x, f.y, f.z)
        p2 = Vec3(s.x, f.y, s.z)
        p3 = Vec3(f.x, f.y, s.z)
        p4 = Vec3(f.x, s.y, f.z)
        p5 = Vec3(s.x, s.y, f.z)
        p6 = s
        p7 = Vec3(f.x, s.y, s.z)

        self._mesh = TriangleMesh([
            Triangle(p0, p1, p2, Vec3(0, -1, 0)),
            Triangle(p0, p2, p3, Vec3(0, -1, 0)),
            Triangle(p4, p5, p6, Vec3(0, 1, 0)),
            Triangle(p4, p6, p7, Vec3(0, 1, 0)),
            Triangle(p0, p3, p7, Vec3(1, 0, 0)),
            Triangle(p0, p4, p7, Vec3(1, 0, 0)),
            Triangle(p1, p2, p6, Vec3(-1, 0, 0)),
            Triangle(p1, p5, p6, Vec3(-1, 0, 0)),
            Triangle(p3, p2, p6, Vec3(0, 0, 1)),
            Triangle(p3, p7, p6, Vec3(0, 0, 1)),
            Triangle(p0, p4, p5, Vec3(0, 0, -1)),
            Triangle(p0, p1, p5, Vec3(0, 0, -1)),
        ])

    @property
    def surface(self) -> SurfaceResult:
        return self._mesh.surface

    @surface.setter
    def surface(self, value: SurfaceResult) -> None:
        self._mesh.surface = value

    def intersect(self, ray: Ray) -> float:
        return self._mesh.intersect(ray)

    def surface_intersect(self, ray: Ray) -> SurfaceIntersection:
        return self._mesh.surface_intersect(ray)

    def contains(self, point: Vec3) -> bool:
        f, s = self.first_point, self.second_point
        return (
            _in_range(point.x, f.x, s.x)
            and _in_range(point.y, f.y, s.y)
            and _in_range(point.z, f.z, s.z)
        )


class Prism(Object):
    """An upright prism over a regular polygon whose base centre is ``location``."""

    def __init__(self, location: Vec3, height: float, radius: float, sides: int) -> None:
        self.location = location
        self.height = height
        self.radius = radius
        self.sides = sides
        self._triangle_size, self._sin_of_outer_corner, self._side_length = (
            _polygon_measures(radius, sides)
        )

        def cap_validator(point: Vec2) -> bool:
            return polygon_contains(point, radius, self._triangle_size, self._sin_of_outer_corner)

        def side_validator(point: Vec2) -> bool:
            return 0 <= point.x <= self._side_length and 0 <= point.y <= height

        planes = [
            CustomPlane(location, _DOWN, validator=cap_validator),
            CustomPlane(location + Vec3(0, height, 0), _UP, validator=cap_validator),
        ]
        for start, normal, end in _polygon_sides(radius, sides):
            planes.append(CustomPlane(
                start + location, normal, (end - start) / self._side_length, _UP, side_validator,
            ))
        self._mesh = CustomPlaneMesh(planes)

    @property
    def surface(self) -> SurfaceResult:
        return self._mesh.surface

    @surface.setter
    def surface(self, value: SurfaceResult) -> None:
        self._mesh.surface = value

    def intersect(self, ray: Ray) -> float:
        return self._mesh.intersect(ray)

    def surface_intersect(self, ray: Ray) -> SurfaceIntersection:
        return self._mesh.surface_intersect(ray)

    def contains(self, point: Vec3) -> bool:
        loc = self.location
        flat = Vec2(-(point.x - loc.x), point.z - loc.z)
        if not polygon_contains(flat, self.radius, self._triangle_size, self._sin_of_outer_corner):
            return False
        return loc.y <= point.y <= loc.y + self.height


class Pyramid(Object):
    """A pyramid over a regular polygon whose base centre is ``location``."""

    def __init__(self, location: Vec3, height: float, radius: float, sides: int) -> None:
        self.location = location
        self.height = height
        self.radius = radius
        self.sides = sides
        self._triangle_size, self._sin_of_outer_corner, _ = _polygon_measures(radius, sides)

        apex = location + Vec3(0, height, 0)
        triangles = []
        for start, _, end in _polygon_sides(radius, sides):
            triangle = Triangle(start + location, end + location, apex)
            if triangle.normal.y < 0:
                triangle.normal = triangle.normal.inverse()
            triangles.append(triangle)
        self._mesh = TriangleMesh(triangles)

        def base_validator(point: Vec2) -> bool:
            return polygon_contains(point, radius, self._triangle_size, self._sin_of_outer_corner)

        self._base = CustomPlane(location, _DOWN, validator=base_validator)

    @property
    def surface(self) -> SurfaceResult:
        return self._mesh.surface

    @surface.setter
    def surface(self, value: SurfaceResult) -> None:
        self._mesh.surface = value

    def intersect(self, ray: Ray) -> float:
        t1 = self._mesh.intersect(ray)
        t2 = self._base.intersect(ray).t
        if t1 < 0:
            return t2
        if t2 < 0:
            return t1
        return min(t1, t2)

    def surface_intersect(self, ray: Ray) -> SurfaceIntersection:
        sides = self._mesh.surface_intersect(ray)
        base = self._base.intersect(ray)
        if base.t < 0 or (sides.t >= 0 and sides.t < base.t):
            return sides
        return SurfaceIntersection(base.t, base.normal, self._mesh.surface)

    def contains(self, point: Vec3) -> bool:
        loc = self.location
        if point.y < loc.y or point.y > loc.y + self.height:
            return False
        radius = self.radius * (1 - (point.y - loc.y) / self.height)
        flat = Vec2(-(point.x - loc.x), point.z - loc.z)
        return polygon_contains(flat, radius, self._triangle_size, self._sin_of_outer_corner)


class FlatPolygon(Object):
    """A horizontal regular polygon facing up, centred at ``location``."""

    def __init__(self, location: Vec3, radius: float, sides: int,
                 surface: Optional[FlatSurface] = None) -> None:
        self.location = location
        self.radius = radius
        self.sides = sides
        self.surface = surface if surface is not None else FlatSurface()
        self._triangle_size, self._sin_of_outer_corner, _ = _polygon_measures(radius, sides)

        def validator(point: Vec2) -> bool:
            return polygon_contains(point, radius, self._triangle_size, self._sin_of_outer_corner)

        self._plane = CustomPlane(location, _UP, validator=validator)

    def intersect(self, ray: Ray) -> float:
        return self._plane.intersect(ray).t

    def surface_intersect(self, ray: Ray) -> SurfaceIntersection:
        hit = self._plane.intersect(ray)
        if hit.t < 0:
            return SurfaceIntersection.none()
        return SurfaceIntersection(
            hit.t, self._plane.normal, self.surface.get_surface(hit.coords.x, hit.coords.y)
        )