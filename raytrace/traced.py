"""Shapes intersected analytically: plane, sphere, cylinder and cone."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

from raytrace.geometry import Ray, Rotation, nearest_root, solve_quadratic
from raytrace.shape import Object
from raytrace.surface import FlatSurface, SurfaceIntersection, UvSurface
from raytrace.vector import Vec2, Vec3

_DOWN = Vec3(0, -1, 0)


def plane_intersect(origin: Vec3, normal: Vec3, ray: Ray) -> float:
    """Signed distance along the ray to the plane, or -1 when the ray is parallel."""
    denom = normal.dot(ray.direction)
    if abs(denom) > 0.000001:
        return (origin - ray.origin).dot(normal) / denom
    return -1.0


def sphere_intersect(location: Vec3, radius: float, ray: Ray) -> float:
    """Distance to the nearest non-negative hit on a sphere, or -1."""
    oc = ray.origin - location
    b = 2.0 * ray.direction.dot(oc)
    c = oc.dot_itself() - radius * radius
    return nearest_root(1, b, c)


@dataclass(eq=False)
class Plane(Object):
    """An infinite plane with a material laid out in its own coordinates."""

    origin: Vec3 = field(default_factory=Vec3)
    normal: Vec3 = field(default_factory=lambda: Vec3(0, 1, 0))
    surface: FlatSurface = field(default_factory=FlatSurface)
    _x_rotation: Rotation = field(init=False, repr=False)
    _z_rotation: Rotation = field(init=False, repr=False)

    def __post_init__(self) -> None:
        n = self.normal
        self._x_rotation = Rotation(math.atan2(n.z, n.y))
        _, rotated_y = self._x_rotation.rotate(n.z, n.y)
        self._z_rotation = Rotation(math.atan2(n.x, rotated_y))

    def intersect(self, ray: Ray) -> float:
        return plane_intersect(self.origin, self.normal, ray)

    def surface_intersect(self, ray: Ray) -> SurfaceIntersection:
        t = plane_intersect(self.origin, self.normal, ray)
        if t < 0:
            return SurfaceIntersection.none()
        x, y = self.transform_point(ray.origin + ray.direction * t)
        return SurfaceIntersection(t, self.normal, self.surface.get_surface(x, y))

    def transform_point(self, point: Vec3) -> Tuple[float, float]:
        """Coordinates of a point within the plane."""
        xz, xy = self._x_rotation.rotate(point.z, point.y)
        zx, _ = self._z_rotation.rotate(point.x, xy)
        return zx, xz


@dataclass(eq=False)
class Sphere(Object):
    location: Vec3 = field(default_factory=Vec3)
    radius: float = 1.0
    surface: UvSurface = field(default_factory=UvSurface)

    def intersect(self, ray: Ray) -> float:
        return sphere_intersect(self.location, self.radius, ray)

    def surface_intersect(self, ray: Ray) -> SurfaceIntersection:
        t = sphere_intersect(self.location, self.radius, ray)
        if t < 0:
            return SurfaceIntersection.none()
        normal = ((ray.origin + ray.direction * t) - self.location) / self.radius
        u, v = self.uv(normal)
        return SurfaceIntersection(t, normal, self.surface.get_surface(u, v))

    def uv(self, normal: Vec3) -> Tuple[float, float]:
        """Texture coordinates for a point with the given unit normal."""
        u = math.atan2(normal.x, -normal.z) / math.pi
        v = math.atan2(math.sqrt(normal.x * normal.x + normal.z * normal.z), normal.y) / math.pi
        return u, v

    def contains(self, point: Vec3) -> bool:
        return (point - self.location).dot_itself() < self.radius * self.radius


@dataclass(eq=False)
class Cylinder(Object):
    """An infinite vertical cylinder."""

    location: Vec3 = field(default_factory=Vec3)
    radius: float = 1.0
    surface: UvSurface = field(default_factory=UvSurface)

    def _solve(self, ray: Ray) -> Optional[Tuple[Vec2, Vec2, float, float]]:
        origin = Vec2(ray.origin.z, ray.origin.x)
        direction = Vec2(ray.direction.z, ray.direction.x)
        offset = origin - Vec2(self.location.z, self.location.x)
        direction_length = direction.length()
        if direction_length == 0:
            return None
        direction = direction / direction_length
        a = direction.dot(direction)
        b = 2 * offset.dot(direction)
        c = offset.dot(offset) - self.radius * self.radius
        return origin, direction, direction_length, nearest_root(a, b, c)

    def intersect(self, ray: Ray) -> float:
        solved = self._solve(ray)
        if solved is None:
            return -1.0
        _, _, direction_length, t = solved
        return t / direction_length

    def surface_intersect(self, ray: Ray) -> SurfaceIntersection:
        solved = self._solve(ray)
        if solved is None or solved[3] < 0:
            return SurfaceIntersection.none()
        origin, direction, direction_length, t = solved
        point = origin + direction * t
        t /= direction_length
        normal = Vec3(point.y - self.location.x, 0, point.x - self.location.z) / self.radius
        u, v = self.uv(normal, ray.origin.y + ray.direction.y * t)
        return SurfaceIntersection(t, normal, self.surface.get_surface(u, v))

    def uv(self, normal: Vec3, y: float) -> Tuple[float, float]:
        u = math.atan2(-normal.x, -normal.z) / (2 * math.pi)
        return u, y / (2 * math.pi)

    def contains(self, point: Vec3) -> bool:
        return (point.xz() - self.location.xz()).dot_itself() < self.radius * self.radius


@dataclass(eq=False)
class Cone(Object):
    """An upright cone standing on its base disc at ``location``."""

    location: Vec3 = field(default_factory=Vec3)
    radius: float = 1.0
    height: float = 1.0
    surface: UvSurface = field(default_factory=UvSurface)

    def intersect(self, ray: Ray) -> float:
        t, _ = self._intersect_with_base(ray)
        return t

    def surface_intersect(self, ray: Ray) -> SurfaceIntersection:
        t, is_base = self._intersect_with_base(ray)
        if t < 0:
            return SurfaceIntersection.none()
        if is_base:
            return SurfaceIntersection(t, _DOWN, self.surface.get_surface(0, 0))

        p = ray.origin + ray.direction * t
        loc = self.location
        r = math.sqrt((p.x - loc.x) ** 2 + (p.z - loc.z) ** 2)
        normal = Vec3(p.x - loc.x, r * (self.radius / self.height), p.z - loc.z).normal()
        u, v = self.uv(p)
        return SurfaceIntersection(t, normal, self.surface.get_surface(u, v))

    def _intersect_with_base(self, ray: Ray) -> Tuple[float, bool]:
        """Nearest hit and whether it lies on the base disc."""
        o, d, loc = ray.origin, ray.direction, self.location
        A = o.x - loc.x
        B = o.z - loc.z
        D = self.height - o.y + loc.y
        tan2 = (self.radius / self.height) ** 2

        a = d.x * d.x + d.z * d.z - tan2 * d.y * d.y
        b = 2 * A * d.x + 2 * B * d.z + 2 * tan2 * D * d.y
        c = A * A + B * B - tan2 * D * D

        plane_t = plane_intersect(loc, _DOWN, ray)
        xz_squared = ((o + d * plane_t) - loc).dot_itself()
        if xz_squared > self.radius * self.radius:
            plane_t = -1.0

        roots = solve_quadratic(a, b, c)
        if roots is None:
            return plane_t, plane_t >= 0

        validated = self._validate_y(ray, *roots)
        if validated is None:
            return plane_t, plane_t >= 0
        cone_t, y = validated

        if y < loc.y:
            cone_t = -1.0
        if plane_t >= 0 and (cone_t > plane_t or cone_t < 0):
            return plane_t, True
        return cone_t, False

    def _validate_y(self, ray: Ray, t0: float, t1: float) -> Optional[Tuple[float, float]]:
        """Pick the root below the apex, returning it with its height."""
        t0, t1 = min(t0, t1), max(t0, t1)
        top = self.location.y + self.height

        chosen, first_negative = (t1, True) if t0 < 0 else (t0, False)
        y = ray.origin.y + ray.direction.y * chosen
        if y < top:
            return chosen, y
        if first_negative:
            return None
        y = ray.origin.y + ray.direction.y * t1
        return (t1, y) if y < top else None

    def contains(self, point: Vec3) -> bool:
        loc = self.location
        if point.y < loc.y or point.y > loc.y + self.height:
            return False
        xz_squared = (point - loc).dot_itself()
        radius = (1 - (point.y - loc.y) / self.height) * self.radius
        return xz_squared < radius * radius

    def uv(self, point: Vec3) -> Tuple[float, float]:
        n = point.xz() - self.location.xz()
        u = math.atan2(-n.x, -n.y) / (2 * math.pi)
        v = ((self.location + Vec3(0, self.height, 0)) - point).length()
        return u, v