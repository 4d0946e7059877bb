"""Surface materials and the result of a ray hitting a surface."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Optional

from raytrace.geometry import Rotation, neg_mod
from raytrace.imagebuffer import ImageBuffer
from raytrace.vector import Vec3

_MASK64 = (1 << 64) - 1


@dataclass(frozen=True)
class SurfaceResult:
    """Material properties at a point on a surface."""

    color: Vec3 = field(default_factory=Vec3)
    reflection_index: float = 0.0
    fresnel_index: float = 0.0
    specular_pow: float = 0.0
    refraction_index: float = 0.0
    refraction_reflection_index: float = 0.0


@dataclass
class SurfaceIntersection:
    """Distance along a ray to a surface, with its normal and material."""

    t: float = -1.0
    normal: Vec3 = field(default_factory=Vec3.empty)
    surface: SurfaceResult = field(default_factory=SurfaceResult)

    def does_intersect(self) -> bool:
        return self.t >= 0

    @classmethod
    def none(cls) -> "SurfaceIntersection":
        """The value meaning 'no hit'."""
        return cls(-1.0, Vec3.empty())


class FlatSurface:
    """Material as a function of planar coordinates."""

    def get_surface(self, x: float, y: float) -> SurfaceResult:
        return SurfaceResult()


@dataclass
class SolidFlatSurface(FlatSurface):
    surface: SurfaceResult = field(default_factory=SurfaceResult)

    def get_surface(self, x: float, y: float) -> SurfaceResult:
        return self.surface


@dataclass
class CheckedFlatSurface(FlatSurface):
    """A checkerboard of two materials."""

    zoom: float = 1.0
    first: SurfaceResult = field(default_factory=SurfaceResult)
    second: SurfaceResult = field(default_factory=SurfaceResult)

    def get_surface(self, x: float, y: float) -> SurfaceResult:
        even_x = math.floor(x * self.zoom) % 2 == 0
        even_y = math.floor(y * self.zoom) % 2 == 0
        return self.first if even_x ^ even_y else self.second


@dataclass
class LineFlatSurface(FlatSurface):
    """Alternating stripes along the x axis."""

    first_line_width: float = 1.0
    second_line_width: float = 1.0
    offset: float = 0.0
    first: SurfaceResult = field(default_factory=SurfaceResult)
    second: SurfaceResult = field(default_factory=SurfaceResult)

    def get_surface(self, x: float, y: float) -> SurfaceResult:
        position = neg_mod(x + self.offset, self.first_line_width + self.second_line_width)
        return self.first if position <= self.first_line_width else self.second


@dataclass
class RotatedFlatSurface(FlatSurface):
    """Another flat surface with its coordinates rotated."""

    wrapped: FlatSurface
    rotation: Rotation = field(default_factory=Rotation)

    def get_surface(self, x: float, y: float) -> SurfaceResult:
        return self.wrapped.get_surface(*self.rotation.rotate(x, y))


class UvSurface:
    """Material as a function of texture coordinates."""

    def get_surface(self, u: float, v: float) -> SurfaceResult:
        return SurfaceResult(Vec3(), 0, 0, 0)


@dataclass
class SolidUvSurface(UvSurface):
    surface: SurfaceResult = field(default_factory=SurfaceResult)

    def get_surface(self, u: float, v: float) -> SurfaceResult:
        return self.surface


@dataclass
class CheckedUvSurface(UvSurface):
    """A checkerboard in texture space."""

    square_size_u: float = 1.0
    square_size_v: float = 1.0
    first_cell: SurfaceResult = field(default_factory=SurfaceResult)
    second_cell: SurfaceResult = field(default_factory=SurfaceResult)

    def get_surface(self, u: float, v: float) -> SurfaceResult:
        even_u = math.floor(u / self.square_size_u) % 2 == 0
        even_v = math.floor(v / self.square_size_v) % 2 == 0
        return self.first_cell if even_u ^ even_v else self.second_cell


def _cell_hash(a: int, b: int) -> int:
    h = (((a & _MASK64) << 32) + (b & _MASK64)) & _MASK64
    h = (h * 1231231557) & _MASK64
    return h ^ (h >> 32)


@dataclass
class GeneratedSquareUvSurface(UvSurface):
    """Squares whose colour is a pseudo-random blend of two colours."""

    first_color: Vec3 = field(default_factory=Vec3)
    second_color: Vec3 = field(default_factory=Vec3)
    default_surface: SurfaceResult = field(default_factory=SurfaceResult)
    square_size_u: float = 1.0
    square_size_v: float = 1.0

    def get_surface(self, u: float, v: float) -> SurfaceResult:
        cell_u = math.floor(u / self.square_size_u)
        cell_v = math.floor(v / self.square_size_v)
        intensity = (_cell_hash(cell_u, cell_v) % 1000) / 1000.0
        color = (self.first_color * (1 - intensity) + self.second_color * intensity).clamp(0, 1)
        return replace(self.default_surface, color=color)


@dataclass
class TexturedUvSurface(UvSurface):
    """Colour sampled from an image; other properties from a default material."""

    buffer: Optional[ImageBuffer] = None
    offset: float = 0.0
    default_surface: SurfaceResult = field(default_factory=SurfaceResult)

    def get_surface(self, u: float, v: float) -> SurfaceResult:
        if self.buffer is None:
            raise ValueError("textured surface has no image buffer")
        u = (u + 1) / 2 + self.offset
        u -= int(u)
        u = 1 - u
        u = max(0.0, min(1.0, u))
        v = max(0.0, min(1.0, v))

        width, height = self.buffer.width(), self.buffer.height()
        x = min(int(u * width), width - 1)
        y = min(int(v * height), height - 1)
        return replace(self.default_surface, color=self.buffer.get_pixel(x, y))