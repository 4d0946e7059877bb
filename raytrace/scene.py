"""Scene contents: cameras, lights, fog, sky and the scene itself."""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Tuple

from raytrace.geometry import Ray, Rotation
from raytrace.imagebuffer import ImageBuffer
from raytrace.shape import Object
from raytrace.vector import Vec3

_WHITE = Vec3(1, 1, 1)


@dataclass(frozen=True)
class ThreadInfo:
    """Which band of rows one worker handles."""

    index: int = 0
    thread_count: int = 1

    def band(self, height: int) -> range:
        """The rows of an image of the given height that belong to this worker."""
        delta = math.ceil(height / self.thread_count)
        first = delta * self.index
        return range(first, min(first + delta, height))


class Camera:
    """A camera that produces no rays."""

    def set_dimensions(self, width: int, height: int) -> None:
        return None

    def generate_rays(self, info: ThreadInfo) -> List[Ray]:
        """Rays for the worker's rows, in a row-major list covering the whole image."""
        return []


@dataclass(eq=False)
class _GridCamera(Camera):
    """Shared ray-grid layout for cameras looking along a direction."""

    _width: int = field(default=0, init=False, repr=False)
    _height: int = field(default=0, init=False, repr=False)
    _rays: List[Ray] = field(default_factory=list, init=False, repr=False)
    _h_rotation: Rotation = field(default_factory=Rotation, init=False, repr=False)
    _v_rotation: Rotation = field(default_factory=Rotation, init=False, repr=False)

    def set_dimensions(self, width: int, height: int) -> None:
        if (width, height) != (self._width, self._height):
            self._width, self._height = width, height
            self._rays = [Ray(Vec3.empty(), Vec3.empty()) for _ in range(width * height)]
        d = self.direction
        self._h_rotation = Rotation(math.atan2(d.x, d.z))
        self._v_rotation = Rotation(math.atan2(d.y, math.sqrt(d.x * d.x + d.z * d.z)))

    def _plane_points(self, info: ThreadInfo) -> Iterator[Tuple[int, float, float]]:
        """(buffer index, x, y) of each pixel centre on the image plane."""
        width, height = self._width, self._height
        dx = 1.0 / width
        y_top = height / width / 2.0
        for y in info.band(height):
            for x in range(width):
                xp = 0.5 - dx / 2 - dx * x
                yp = y_top - dx / 2 - dx * y
                xp, yp = self.rotation_in_plane.rotate(xp, yp)
                yield width * y + x, xp, yp

    def _orient(self, v: Vec3) -> Vec3:
        """Turn a camera-space vector to face along the camera's direction."""
        vx, vy = self._v_rotation.rotate(v.z, v.y)
        hx, hy = self._h_rotation.rotate(vx, v.x)
        return Vec3(hy, vy, hx)


@dataclass(eq=False)
class PerspectiveCamera(_GridCamera):
    """A pinhole camera: every ray starts at ``origin``."""

    origin: Vec3 = field(default_factory=Vec3)
    direction: Vec3 = field(default_factory=lambda: Vec3(0, 0, 1))
    focal_length: float = 1.0
    rotation_in_plane: Rotation = field(default_factory=Rotation)

    def set_dimensions(self, width: int, height: int) -> None:
        super().set_dimensions(width, height)

    def generate_rays(self, info: ThreadInfo) -> List[Ray]:
        if not self._rays:
            return self._rays
        for index, xp, yp in self._plane_points(info):
            direction = self._orient(Vec3(xp, yp, self.focal_length))
            self._rays[index] = Ray(self.origin, direction.normal())
        return self._rays


@dataclass(eq=False)
class ParallelCamera(_GridCamera):
    """An orthographic camera: all rays share ``direction``."""

    origin: Vec3 = field(default_factory=Vec3)
    direction: Vec3 = field(default_factory=lambda: Vec3(0, 0, 1))
    plane_horizontal_length: float = 1.0
    rotation_in_plane: Rotation = field(default_factory=Rotation)

    def set_dimensions(self, width: int, height: int) -> None:
        super().set_dimensions(width, height)

    def generate_rays(self, info: ThreadInfo) -> List[Ray]:
        if not self._rays:
            return self._rays
        length = self.plane_horizontal_length
        for index, xp, yp in self._plane_points(info):
            offset = self._orient(Vec3(xp * length, yp * length, 0))
            self._rays[index] = Ray(self.origin + offset, self.direction)
        return self._rays


class Light:
    """A light that gives no light."""

    color: Vec3 = _WHITE

    def direction_and_distance(self, point: Vec3) -> Tuple[Vec3, float]:
        """Unit direction from the point toward the light, and the distance to it."""
        return Vec3(), 0.0

    def lumens_at(self, distance: float) -> float:
        return 0.0


@dataclass(eq=False)
class PointLight(Light):
    location: Vec3 = field(default_factory=Vec3)
    lumens: float = 0.0
    color: Vec3 = _WHITE

    def direction_and_distance(self, point: Vec3) -> Tuple[Vec3, float]:
        offset = self.location - point
        distance = offset.length()
        return offset / distance, distance

    def lumens_at(self, distance: float) -> float:
        """Brightness falling off with the square of the distance."""
        return self.lumens / (distance * distance)


@dataclass(eq=False)
class DirectionalLight(Light):
    """A light infinitely far away, such as the sun."""

    direction_in_sky: Vec3 = field(default_factory=lambda: Vec3(0, 1, 0))
    lumens: float = 0.0
    color: Vec3 = _WHITE

    def direction_and_distance(self, point: Vec3) -> Tuple[Vec3, float]:
        return self.direction_in_sky, sys.float_info.max

    def lumens_at(self, distance: float) -> float:
        return self.lumens


class Fog:
    """No fog."""

    def color_and_intensity(self, t: float) -> Tuple[Vec3, float]:
        """Fog colour and its blend weight at distance t."""
        return Vec3(), 0.0


@dataclass(eq=False)
class FormulaFog(Fog):
    """Fog whose intensity is a function of distance, clamped to a range."""

    formula: Callable[[float], float]
    color: Vec3 = field(default_factory=Vec3)
    enabled: bool = True
    minimum_distance_to_enable: float = 0.0
    min_fog_intensity: float = 0.0
    max_fog_intensity: float = 1.0

    def color_and_intensity(self, t: float) -> Tuple[Vec3, float]:
        if not self.enabled or t < self.minimum_distance_to_enable:
            return Vec3(), 0.0
        intensity = self.formula(t)
        intensity = max(intensity, self.min_fog_intensity)
        intensity = min(intensity, self.max_fog_intensity)
        return self.color, intensity


class Sky:
    """A black sky."""

    def color(self, direction: Vec3) -> Vec3:
        return Vec3()


@dataclass(eq=False)
class SolidColorSky(Sky):
    fill: Vec3 = field(default_factory=Vec3)

    def color(self, direction: Vec3) -> Vec3:
        return self.fill


@dataclass(eq=False)
class SkyBox(Sky):
    """A sky painted from an equirectangular image."""

    buffer: ImageBuffer
    offset: float = 0.0
    fog_enabled: bool = False
    fog_color: Vec3 = field(default_factory=Vec3)

    def color(self, direction: Vec3) -> Vec3:
        u, v = self.uv(direction)
        u = (u + 1) / 2 + self.offset
        u -= int(u)
        u = max(0.0, min(1.0, u))
        v = max(0.0, min(1.0, v))

        width, height = self.buffer.width(), self.buffer.height()
        x = min(int(u * width), width - 1)
        y = min(int(v * height), height - 1)
        color = self.buffer.get_pixel(x, y)

        if self.fog_enabled and 0 <= direction.y <= 0.01:
            intensity = 1 - direction.y / 0.01
            color = color * (1 - intensity) + self.fog_color * intensity
        return color.clamp(0, 1)

    def uv(self, direction: Vec3) -> Tuple[float, float]:
        """Image coordinates for a view direction."""
        n = direction
        u = math.atan2(n.x, -n.z) / math.pi
        v = math.atan2(math.sqrt(n.x * n.x + n.z * n.z), n.y) / math.pi
        return u, v


@dataclass(eq=False)
class Scene:
    """Everything the renderer draws."""

    camera: Camera = field(default_factory=Camera)
    objects: List[Object] = field(default_factory=list)
    lights: List[Light] = field(default_factory=list)
    ambient_light: Vec3 = field(default_factory=Vec3)
    sky: Sky = field(default_factory=Sky)
    fog: Fog = field(default_factory=Fog)