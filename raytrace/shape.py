"""The base type of every renderable shape."""

from __future__ import annotations

from raytrace.geometry import Ray
from raytrace.surface import SurfaceIntersection
from raytrace.vector import Vec3


class Object:
    """A shape that is never hit and contains nothing."""

    def intersect(self, ray: Ray) -> float:
        """Distance along the ray to the first hit, or a negative number for a miss."""
        return -1.0

    def surface_intersect(self, ray: Ray) -> SurfaceIntersection:
        """The first hit with its normal and material."""
        return SurfaceIntersection.none()

    def contains(self, point: Vec3) -> bool:
        """Whether the point lies inside the shape."""
        return False