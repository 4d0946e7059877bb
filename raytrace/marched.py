"""Shapes found by sphere tracing along a distance estimate."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Tuple

from raytrace.geometry import Ray, Rotation, divide_neg, neg_mod
from raytrace.shape import Object
from raytrace.surface import SurfaceIntersection, SurfaceResult, UvSurface
from raytrace.vector import Vec2, Vec3

_HIT_THRESHOLD = 0.000000001
_BACK_OFF = 0.0000001


@dataclass(eq=False)
class MarchedObject(Object):
    """A shape described by a distance function; the base one is never hit."""

    max_steps: int = field(default=200, kw_only=True)

    def intersect(self, ray: Ray) -> float:
        origin = ray.origin
        t = 0.0
        for _ in range(self.max_steps):
            step = self.distance(Ray(origin, ray.direction))
            if step < 0:
                return -1.0
            if step < _HIT_THRESHOLD:
                return max((t + step) - _BACK_OFF, _BACK_OFF)
            t += step
            origin = ray.origin + ray.direction * t
        return -1.0

    def surface_intersect(self, ray: Ray) -> SurfaceIntersection:
        t = self.intersect(ray)
        normal, surface = self.normal_and_surface(ray.origin + ray.direction * t)
        return SurfaceIntersection(t, normal, surface)

    def contains(self, point: Vec3) -> bool:
        return False

    def distance(self, ray: Ray) -> float:
        """Safe step length from the ray's origin, or negative when it can never hit."""
        return -1.0

    def normal_and_surface(self, point: Vec3) -> Tuple[Vec3, SurfaceResult]:
        return Vec3.empty(), SurfaceResult()


def _sphere_uv(normal: Vec3) -> Tuple[float, float]:
    u = math.atan2(normal.x, -normal.z) / math.pi
    v = math.atan2(math.sqrt(normal.x * normal.x + normal.z * normal.z), normal.y) / math.pi
    return u, v


@dataclass(eq=False)
class MarchedSphere(MarchedObject):
    location: Vec3 = field(default_factory=Vec3)
    radius: float = 1.0
    surface: UvSurface = field(default_factory=UvSurface)

    def distance(self, ray: Ray) -> float:
        o, d = ray.origin, ray.direction
        if o.y < self.location.y - self.radius and d.y <= 0:
            return -1.0
        if o.y > self.location.y + self.radius and d.y >= 0:
            return -1.0
        return abs((o - self.location).length() - self.radius)

    def normal_and_surface(self, point: Vec3) -> Tuple[Vec3, SurfaceResult]:
        normal = (point - self.location) / self.radius
        u, v = _sphere_uv(normal)
        return normal, self.surface.get_surface(u, v)

    def contains(self, point: Vec3) -> bool:
        return (point - self.location).dot_itself() < self.radius * self.radius


@dataclass(eq=False)
class MarchedCone(MarchedObject):
    """An upright cone standing on its base disc at ``location``."""

    location: Vec3 = field(default_factory=Vec3)
    radius: float = 1.0
    height: float = 1.0
    surface: UvSurface = field(default_factory=UvSurface)

    def distance(self, ray: Ray) -> float:
        o, d, loc = ray.origin, ray.direction, self.location
        r, h = self.radius, self.height
        if o.y < loc.y and d.y <= 0:
            return -1.0
        if o.y > loc.y + h and d.y >= 0:
            return -1.0

        p0 = Vec2((o.xz() - loc.xz()).length(), o.y - loc.y)
        if o.y < loc.y:
            if p0.x * p0.x < r * r:
                return abs(p0.y)
            return Vec2(p0.x - r, p0.y).length()

        p1, p2 = Vec2(r, 0), Vec2(0, h)
        a = abs((p2.x - p1.x) * (p1.y - p0.y) - (p1.x - p0.x) * (p2.y - p1.y))
        b = math.sqrt((p2.x - p1.x) ** 2 + (p2.y - p1.y) ** 2)
        if p0.x < r:
            return min(abs(p0.y), a / b)
        return a / b

    def normal_and_surface(self, point: Vec3) -> Tuple[Vec3, SurfaceResult]:
        loc = self.location
        on_base = (
            (point - loc).dot_itself() < self.radius * self.radius
            and abs(point.y - loc.y) < 0.00001
        )
        if on_base:
            return Vec3(0, -1, 0), self.surface.get_surface(0, 0)

        r = math.sqrt((point.x - loc.x) ** 2 + (point.z - loc.z) ** 2)
        normal = Vec3(point.x - loc.x, r * (self.radius / self.height), point.z - loc.z).normal()
        n = point.xz() - loc.xz()
        u = math.atan2(-n.x, -n.y) / (2 * math.pi)
        v = ((loc + Vec3(0, self.height, 0)) - point).length()
        return normal, self.surface.get_surface(u, v)

    def contains(self, point: Vec3) -> bool:
        loc = self.location
        if point.y < loc.y or point.y > loc.y + self.height:
            return False
        xz_squared = (point - loc).dot_itself()
        radius = (1 - (point.y - loc.y) / self.height) * self.radius
        return xz_squared < radius * radius


@dataclass(eq=False)
class MarchedCylinder(MarchedObject):
    """An infinite vertical cylinder."""

    location: Vec3 = field(default_factory=Vec3)
    radius: float = 1.0
    surface: UvSurface = field(default_factory=UvSurface)

    def distance(self, ray: Ray) -> float:
        return abs((ray.origin.xz() - self.location.xz()).length() - self.radius)

    def normal_and_surface(self, point: Vec3) -> Tuple[Vec3, SurfaceResult]:
        loc = self.location
        normal = (point - Vec3(loc.x, point.y, loc.z)) / self.radius
        u = math.atan2(-normal.x, -normal.z) / (2 * math.pi)
        v = point.y / (2 * math.pi)
        return normal, self.surface.get_surface(u, v)

    def contains(self, point: Vec3) -> bool:
        return (point.xz() - self.location.xz()).dot_itself() < self.radius * self.radius


def _set_length_between(origin: Vec3, target: Vec3, length: float) -> Vec3:
    """The point at the given distance from origin toward target."""
    offset = target - origin
    return origin + offset * (length / offset.length())


@dataclass(eq=False)
class Torus(MarchedObject):
    """A horizontal ring: ``radius1`` to the tube's centre, ``radius2`` of the tube."""

    location: Vec3 = field(default_factory=Vec3)
    radius1: float = 1.0
    radius2: float = 0.25
    surface: UvSurface = field(default_factory=UvSurface)

    def distance(self, ray: Ray) -> float:
        o, d = ray.origin, ray.direction
        if o.y < self.location.y - self.radius2 and d.y <= 0:
            return -1.0
        if o.y > self.location.y + self.radius2 and d.y >= 0:
            return -1.0
        point = o - self.location
        q = Vec2(point.xz().length() - self.radius1, point.y)
        return abs(q.length() - self.radius2)

    def normal_and_surface(self, point: Vec3) -> Tuple[Vec3, SurfaceResult]:
        level = Vec3(point.x, self.location.y, point.z)
        ring_point = _set_length_between(self.location, level, self.radius1)
        normal = (point - ring_point) / self.radius2
        u, v = self._uv(point, normal)
        return normal, self.surface.get_surface(u, v)

    def contains(self, point: Vec3) -> bool:
        loc = self.location
        if point.y > loc.y + self.radius2 or point.y < loc.y - self.radius2:
            return False
        p = Vec2(point.xz().length(), point.y - loc.y - self.radius2)
        limit = self.radius2 * self.radius2
        return (
            (p - Vec2(self.radius1, 0)).dot_itself() <= limit
            or (p - Vec2(-self.radius1, 0)).dot_itself() <= limit
        )

    def _uv(self, point: Vec3, normal: Vec3) -> Tuple[float, float]:
        loc = self.location
        h_angle = math.atan2(point.z - loc.z, -point.x + loc.x)
        u = h_angle / math.pi
        u = (2 - (u + 1)) - 1

        nx, _ = Rotation(h_angle).rotate(normal.x, normal.z)
        v = (math.atan2(nx, normal.y) / math.pi + 1) / 2
        v = 1 - v
        return u, neg_mod(v - 0.25, 1)


@dataclass(eq=False)
class RepeatedMarchedObject(MarchedObject):
    """A marched shape tiled over the x-z plane in cells between two corners."""

    shape: MarchedObject
    corner1: Vec2
    corner2: Vec2
    max_x_cells: float = math.inf
    min_x_cells: float = -math.inf
    max_z_cells: float = math.inf
    min_z_cells: float = -math.inf

    def distance(self, ray: Ray) -> float:
        return self.shape.distance(Ray(self.mod_point(ray.origin), ray.direction))

    def normal_and_surface(self, point: Vec3) -> Tuple[Vec3, SurfaceResult]:
        return self.shape.normal_and_surface(self.mod_point(point))

    def contains(self, point: Vec3) -> bool:
        return self.shape.contains(self.mod_point(point))

    def mod_point(self, point: Vec3) -> Vec3:
        """Fold a point back into the first cell, within the cell limits."""
        x = _fold(point.x, self.corner1.x, self.corner2.x - self.corner1.x,
                  self.max_x_cells, self.min_x_cells)
        z = _fold(point.z, self.corner1.y, self.corner2.y - self.corner1.y,
                  self.max_z_cells, self.min_z_cells)
        return Vec3(x, point.y, z)


def _fold(value: float, offset: float, width: float, max_cells: float, min_cells: float) -> float:
    n = divide_neg(value - offset, width)
    n = int(min(max(n, min_cells), max_cells))
    return value - n * width