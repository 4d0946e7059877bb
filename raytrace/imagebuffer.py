"""Pixel buffers that store colours as Vec3 with components in [0, 1]."""

from __future__ import annotations

import math
from os import PathLike
from typing import Optional, Union

from PIL import Image

from raytrace.vector import Vec3

BYTES_PER_PIXEL = 4


class ImageBuffer:
    """An empty image: zero size, reads black, ignores writes."""

    def width(self) -> int:
        return 0

    def height(self) -> int:
        return 0

    def get_pixel(self, x: int, y: int) -> Vec3:
        return Vec3()

    def set_pixel(self, x: int, y: int, pixel: Vec3) -> None:
        return None


def _to_byte(value: float) -> int:
    return max(0, min(255, int(value * 255)))


class RgbaImageBuffer(ImageBuffer):
    """An RGBA byte buffer whose rows are stored bottom-up."""

    def __init__(self, width: int, height: int, pixel_data: Optional[bytearray] = None) -> None:
        size = width * height * BYTES_PER_PIXEL
        if pixel_data is None:
            pixel_data = bytearray(size)
        elif not isinstance(pixel_data, bytearray):
            pixel_data = bytearray(pixel_data)
        if len(pixel_data) < size:
            raise ValueError(
                f"pixel data holds {len(pixel_data)} bytes, {size} needed for {width}x{height}"
            )
        self._width = width
        self._height = height
        self.pixel_data = pixel_data

    def width(self) -> int:
        return self._width

    def height(self) -> int:
        return self._height

    def is_within_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def _index(self, x: int, y: int) -> int:
        return ((self._height - y - 1) * self._width + x) * BYTES_PER_PIXEL

    def get_pixel(self, x: int, y: int) -> Vec3:
        """Colour at (x, y); black outside the image."""
        if not self.is_within_bounds(x, y):
            return Vec3()
        i = self._index(x, y)
        data = self.pixel_data
        return Vec3(data[i] / 255.0, data[i + 1] / 255.0, data[i + 2] / 255.0)

    def set_pixel(self, x: int, y: int, pixel: Vec3) -> None:
        """Write an opaque colour at (x, y); writes outside the image are ignored."""
        if not self.is_within_bounds(x, y):
            return
        i = self._index(x, y)
        self.pixel_data[i:i + 4] = bytes(
            (_to_byte(pixel.x), _to_byte(pixel.y), _to_byte(pixel.z), 255)
        )


class ImageFileBuffer(RgbaImageBuffer):
    """An RGBA buffer with rows stored top-down, as image files are."""

    def _index(self, x: int, y: int) -> int:
        return (y * self._width + x) * BYTES_PER_PIXEL

    @classmethod
    def load(cls, path: Union[str, PathLike]) -> "ImageFileBuffer":
        """Read an image file into a buffer."""
        with Image.open(path) as image:
            rgba = image.convert("RGBA")
            return cls(rgba.width, rgba.height, bytearray(rgba.tobytes()))


class ScaledImageBuffer(ImageBuffer):
    """A view where each pixel covers a scale x scale block of the wrapped buffer."""

    def __init__(self, buffer: ImageBuffer, scale: int) -> None:
        self.buffer = buffer
        self.scale = scale

    def width(self) -> int:
        return math.ceil(self.buffer.width() / self.scale)

    def height(self) -> int:
        return math.ceil(self.buffer.height() / self.scale)

    def get_pixel(self, x: int, y: int) -> Vec3:
        return self.buffer.get_pixel(x * self.scale, y * self.scale)

    def set_pixel(self, x: int, y: int, pixel: Vec3) -> None:
        full_width, full_height = self.buffer.width(), self.buffer.height()
        for yi in range(self.scale):
            yp = y * self.scale + yi
            for xi in range(self.scale):
                xp = x * self.scale + xi
                if xp >= full_width or yp >= full_height:
                    continue
                self.buffer.set_pixel(xp, yp, pixel)


class SegmentedImageBuffer(ImageBuffer):
    """A rectangular window into another buffer."""

    def __init__(self, buffer: ImageBuffer, x: int, y: int, width: int, height: int) -> None:
        self.buffer = buffer
        self.x = x
        self.y = y
        self._width = width
        self._height = height

    def width(self) -> int:
        return self._width

    def height(self) -> int:
        return self._height

    def get_pixel(self, x: int, y: int) -> Vec3:
        return self.buffer.get_pixel(x + self.x, y + self.y)

    def set_pixel(self, x: int, y: int, pixel: Vec3) -> None:
        self.buffer.set_pixel(x + self.x, y + self.y, pixel)