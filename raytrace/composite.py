"""Shapes built from other shapes: transformed, set difference and union."""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Iterable, List, Optional, Tuple

from raytrace.geometry import Ray, Rotation
from raytrace.shape import Object
from raytrace.surface import SurfaceIntersection
from raytrace.vector import Vec2, Vec3

_STEP_PAST = 1.000001

_OUTSIDE_MAIN = 0
_INSIDE_MAIN = 1
_INSIDE_DIFFERENCE = 2


class TransformableObject(Object):
    """Another shape moved by an offset and rotated about a point."""

    def __init__(
        self,
        shape: Object,
        offset: Optional[Vec3] = None,
        rotational_point: Optional[Vec3] = None,
        horizontal_rotation: Optional[Rotation] = None,
        vertical_rotation: Optional[Rotation] = None,
        vertical_axis: Optional[Vec2] = None,
    ) -> None:
        self.shape = shape
        self.offset = offset if offset is not None else Vec3()
        self.rotational_point = rotational_point if rotational_point is not None else Vec3()
        self.horizontal_rotation = horizontal_rotation or Rotation()
        self.vertical_rotation = vertical_rotation or Rotation()
        self.vertical_axis = vertical_axis if vertical_axis is not None else Vec2()

    @property
    def horizontal_rotation(self) -> Rotation:
        return self._horizontal

    @horizontal_rotation.setter
    def horizontal_rotation(self, rotation: Rotation) -> None:
        self._horizontal = rotation
        self._horizontal_opposite = Rotation(-rotation.radians)

    @property
    def vertical_rotation(self) -> Rotation:
        return self._vertical

    @vertical_rotation.setter
    def vertical_rotation(self, rotation: Rotation) -> None:
        self._vertical = rotation
        self._vertical_opposite = Rotation(-rotation.radians)

    @property
    def vertical_axis(self) -> Vec2:
        return self._vertical_axis

    @vertical_axis.setter
    def vertical_axis(self, axis: Vec2) -> None:
        self._vertical_axis = axis
        angle = math.atan2(axis.y, axis.x)
        self._axis_rotation = Rotation(angle)
        self._axis_rotation_opposite = Rotation(-angle)

    def intersect(self, ray: Ray) -> float:
        return self.shape.intersect(self._transform_ray(ray))

    def surface_intersect(self, ray: Ray) -> SurfaceIntersection:
        hit = self.shape.surface_intersect(self._transform_ray(ray))
        x, z = self._horizontal_opposite.rotate(hit.normal.x, hit.normal.z)
        normal = self._rotate_vertically(Vec3(x, hit.normal.y, z), inverse=True)
        return replace(hit, normal=normal)

    def contains(self, point: Vec3) -> bool:
        return self.shape.contains(self.rotate_point(point) - self.offset)

    def rotate_point(self, point: Vec3) -> Vec3:
        """Map a world point into the wrapped shape's own space."""
        local = self._rotate_vertically(point - self.rotational_point - self.offset, inverse=False)
        x, z = self._horizontal.rotate(local.x, local.z)
        return Vec3(x, local.y, z) + self.rotational_point

    def _transform_ray(self, ray: Ray) -> Ray:
        direction = self._rotate_vertically(ray.direction, inverse=False)
        x, z = self._horizontal.rotate(direction.x, direction.z)
        return Ray(self.rotate_point(ray.origin), Vec3(x, direction.y, z))

    def _rotate_vertically(self, point: Vec3, inverse: bool) -> Vec3:
        if self._vertical.radians == 0:
            return point
        axis = self._vertical_opposite if inverse else self._vertical

        x, z = self._axis_rotation.rotate(point.x, point.z)
        rotated_z, y = axis.rotate(z, point.y)
        scale = rotated_z / z if z != 0 else math.nan
        z *= scale
        x, z = self._axis_rotation_opposite.rotate(x, z)
        return Vec3(x, y, z)


class SetDifferenceObject(Object):
    """A main shape with other shapes cut out of it."""

    def __init__(self, main: Object, difference: Iterable[Object]) -> None:
        self.main = main
        self.difference: List[Object] = list(difference)

    def _scenario(self, origin: Vec3, previous: int, ignore: Optional[Object]) -> Tuple[bool, bool, int]:
        inside_main = previous == _OUTSIDE_MAIN or self.main.contains(origin)
        inside_difference = self._contains_difference(origin, ignore)
        if not inside_main:
            scenario = _OUTSIDE_MAIN
        elif not inside_difference:
            scenario = _INSIDE_MAIN
        else:
            scenario = _INSIDE_DIFFERENCE
        return inside_main, inside_difference, scenario

    @staticmethod
    def _finished(previous: int, inside_main: bool, inside_difference: bool) -> bool:
        if previous == _INSIDE_DIFFERENCE and inside_main and not inside_difference:
            return True
        return previous == _OUTSIDE_MAIN and not inside_difference

    def intersect(self, ray: Ray) -> float:
        origin = ray.origin
        ignore: Optional[Object] = None
        travelled = 0.0
        previous = -1

        while True:
            inside_main, inside_difference, scenario = self._scenario(origin, previous, ignore)
            if self._finished(previous, inside_main, inside_difference):
                return travelled

            step_ray = Ray(origin, ray.direction)
            ignore = None
            if scenario == _OUTSIDE_MAIN:
                t = self.main.intersect(step_ray)
            elif scenario == _INSIDE_MAIN:
                main_t = self.main.intersect(step_ray)
                diff_t, _ = self._intersect_difference(step_ray)
                if diff_t < 0:
                    return travelled + main_t
                return travelled + min(main_t, diff_t)
            else:
                t, ignore = self._intersect_difference(step_ray)

            if t < 0:
                return -1.0
            origin = origin + ray.direction * (t * _STEP_PAST)
            travelled += t
            previous = scenario

    def surface_intersect(self, ray: Ray) -> SurfaceIntersection:
        origin = ray.origin
        ignore: Optional[Object] = None
        last = SurfaceIntersection()
        travelled = 0.0
        previous = -1

        while True:
            inside_main, inside_difference, scenario = self._scenario(origin, previous, ignore)
            if self._finished(previous, inside_main, inside_difference):
                return replace(last, t=travelled)

            step_ray = Ray(origin, ray.direction)
            ignore = None
            if scenario == _OUTSIDE_MAIN:
                last = self.main.surface_intersect(step_ray)
            elif scenario == _INSIDE_MAIN:
                main_hit = self.main.surface_intersect(step_ray)
                diff_hit, _ = self._surface_intersect_difference(step_ray)
                if diff_hit.t < 0 or main_hit.t < diff_hit.t:
                    return replace(main_hit, t=travelled + main_hit.t)
                return replace(diff_hit, t=travelled + diff_hit.t, normal=diff_hit.normal.inverse())
            else:
                last, ignore = self._surface_intersect_difference(step_ray)

            if last.t < 0:
                return SurfaceIntersection.none()
            origin = origin + ray.direction * (last.t * _STEP_PAST)
            travelled += last.t
            previous = scenario

    def contains(self, point: Vec3) -> bool:
        return self.main.contains(point) and not self._contains_difference(point, None)

    def _intersect_difference(self, ray: Ray) -> Tuple[float, Optional[Object]]:
        t = -1.0
        hit_shape: Optional[Object] = None
        for shape in self.difference:
            tt = shape.intersect(ray)
            if tt < 0:
                continue
            if t < 0 or tt < t:
                t = tt
            hit_shape = shape
        return t, hit_shape

    def _surface_intersect_difference(self, ray: Ray) -> Tuple[SurfaceIntersection, Optional[Object]]:
        output = SurfaceIntersection.none()
        hit_shape: Optional[Object] = None
        for shape in self.difference:
            hit = shape.surface_intersect(ray)
            if output.does_intersect() and (not hit.does_intersect() or hit.t > output.t):
                continue
            output = hit
            hit_shape = shape
        return output, hit_shape

    def _contains_difference(self, point: Vec3, ignore: Optional[Object]) -> bool:
        return any(
            shape.contains(point)
            for shape in self.difference
            if ignore is None or shape is not ignore
        )


class UnionObject(Object):
    """Several shapes rendered together; the nearest hit wins."""

    def __init__(self, objects: Iterable[Object]) -> None:
        self.objects: List[Object] = list(objects)

    def intersect(self, ray: Ray) -> float:
        t = -1.0
        for shape in self.objects:
            tt = shape.intersect(ray)
            if tt < 0:
                continue
            if t < 0 or tt < t:
                t = tt
        return t

    def surface_intersect(self, ray: Ray) -> SurfaceIntersection:
        output = SurfaceIntersection.none()
        for shape in self.objects:
            hit = shape.surface_intersect(ray)
            if output.does_intersect() and (not hit.does_intersect() or hit.t > output.t):
                continue
            output = hit
        return output

    def contains(self, point: Vec3) -> bool:
        """True only when every member contains the point."""
        return all(shape.contains(point) for shape in self.objects)