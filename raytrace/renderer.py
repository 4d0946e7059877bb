"""The ray tracer that turns a scene into pixels."""

from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional, Tuple

from raytrace.geometry import Ray
from raytrace.imagebuffer import ImageBuffer, ScaledImageBuffer
from raytrace.scene import Scene, ThreadInfo
from raytrace.surface import SurfaceIntersection
from raytrace.vector import Vec2, Vec3

_MAX_LUMENS = 1000.0
_VIGNETTE_NORMALIZATION = 1000.0


@dataclass
class VignetteSettings:
    """Darkening toward the edges of the image."""

    enabled: bool = False
    radius: float = 1.0
    strength: float = 0.0
    color: Vec3 = field(default_factory=Vec3)


@dataclass
class RenderSettings:
    thread_count: int = 1
    scale: int = 1
    max_depth: int = 4
    max_refraction_depth: int = 4
    vignette: VignetteSettings = field(default_factory=VignetteSettings)

    def __post_init__(self) -> None:
        if self.thread_count < 1:
            raise ValueError(f"thread_count must be at least 1, got {self.thread_count}")
        if self.scale < 1:
            raise ValueError(f"scale must be at least 1, got {self.scale}")


def reflect(direction: Vec3, normal: Vec3) -> Vec3:
    """Mirror a direction about a surface normal."""
    return direction - (normal * direction.dot(normal)) * 2


def refract(incident: Vec3, normal: Vec3, ior: float) -> Optional[Vec3]:
    """Direction after refraction, or None on total internal reflection."""
    cosi = max(-1.0, min(1.0, incident.dot(normal)))
    etai, etat = 1.0, ior
    n = normal
    if cosi < 0:
        cosi = -cosi
    else:
        etai, etat = etat, etai
        n = normal.inverse()
    eta = etai / etat
    k = 1 - eta * eta * (1 - cosi * cosi)
    if k < 0:
        return None
    return incident * eta + n * (eta * cosi - math.sqrt(k))


class Renderer:
    """Traces a scene into an image buffer."""

    def __init__(self, scene: Scene, image_buffer: ImageBuffer,
                 settings: Optional[RenderSettings] = None) -> None:
        self.scene = scene
        self._image_buffer = image_buffer
        self.settings = settings if settings is not None else RenderSettings()

    @property
    def settings(self) -> RenderSettings:
        return self._settings

    @settings.setter
    def settings(self, settings: RenderSettings) -> None:
        self._settings = settings
        self._scaled = ScaledImageBuffer(self._image_buffer, settings.scale)

    @property
    def image_buffer(self) -> ImageBuffer:
        return self._image_buffer

    @image_buffer.setter
    def image_buffer(self, buffer: ImageBuffer) -> None:
        self._image_buffer = buffer
        self._scaled = ScaledImageBuffer(buffer, self._settings.scale)

    def render(self) -> None:
        """Render one frame, splitting the rows between the configured workers."""
        self.scene.camera.set_dimensions(self._scaled.width(), self._scaled.height())
        count = self._settings.thread_count
        infos = [ThreadInfo(i, count) for i in range(count)]
        if count == 1:
            self.render_band(infos[0])
            return
        with ThreadPoolExecutor(max_workers=count) as pool:
            list(pool.map(self.render_band, infos))

    def render_band(self, info: ThreadInfo) -> None:
        """Render the rows that belong to one worker."""
        buffer = self._scaled
        width, height = buffer.width(), buffer.height()
        rays = self.scene.camera.generate_rays(info)
        vignette = self._settings.vignette
        for y in info.band(height):
            for x in range(width):
                color = self.trace_ray(rays[width * y + x], 1, 1).clamp(0, 1)
                if vignette.enabled:
                    color = self._apply_vignette(color, x, y, width, height)
                buffer.set_pixel(x, y, color)

    def _apply_vignette(self, color: Vec3, x: int, y: int, width: int, height: int) -> Vec3:
        vignette = self._settings.vignette
        centre = Vec2(width // 2, height // 2)
        d = (Vec2(x, y) - centre).dot_itself()
        edge = width // 2 * vignette.radius
        if d <= edge * edge:
            return color
        d = math.sqrt(d) - edge
        strength = d * vignette.strength * (_VIGNETTE_NORMALIZATION / width)
        return (color * (1 - strength) + vignette.color * strength).clamp(0, 1)

    def trace_ray(self, ray: Ray, refraction_depth: int, depth: int) -> Vec3:
        """Colour seen along a ray."""
        hit = self.surface_intersect(ray)
        if not hit.does_intersect():
            return self.scene.sky.color(ray.direction)

        material = hit.surface
        point = ray.origin + ray.direction * (hit.t * 0.999999)
        shade, specular = self.shade(hit.normal, point, ray.direction, material.specular_pow)
        color = material.color * shade

        settings = self._settings
        if depth < settings.max_depth and (
            material.reflection_index > 0 or material.fresnel_index > 0
        ):
            reflected_ray = Ray(point, reflect(ray.direction, hit.normal))
            reflected_color = self.trace_ray(reflected_ray, refraction_depth + 1, depth + 1)
            angle = 1 - abs(reflected_ray.direction.dot(hit.normal))
            ri = material.reflection_index
            reflection = min(ri + (1 - ri) * material.fresnel_index * angle, 1.0)
            color = color * (1 - reflection) + reflected_color * reflection

        if refraction_depth < settings.max_refraction_depth and material.refraction_index > 0:
            refracted = refract(ray.direction, hit.normal, material.refraction_index)
            if refracted is not None:
                inner = Ray(ray.origin + ray.direction * (hit.t * 1.000001), refracted)
                refracted_color = self.trace_ray(inner, refraction_depth + 1, depth + 1)
                weight = material.refraction_reflection_index
                color = color * (1 - weight) + refracted_color * weight

        color = (color + specular).clamp(0, 1)

        fog_color, fog_intensity = self.scene.fog.color_and_intensity(hit.t)
        if fog_intensity > 0:
            color = color * (1 - fog_intensity) + fog_color * fog_intensity
        return color

    def surface_intersect(self, ray: Ray) -> SurfaceIntersection:
        """The nearest hit among the scene's objects."""
        output = SurfaceIntersection.none()
        for shape in self.scene.objects:
            hit = shape.surface_intersect(ray)
            if output.does_intersect() and (not hit.does_intersect() or hit.t > output.t):
                continue
            output = hit
        return output

    def shade(self, normal: Vec3, point: Vec3, ray_direction: Vec3,
              ks: float) -> Tuple[Vec3, Vec3]:
        """Light reaching a point: (diffuse plus ambient, specular highlight)."""
        diffuse = Vec3()
        specular = Vec3()
        for light in self.scene.lights:
            direction, distance = light.direction_and_distance(point)
            if self.hit(Ray(point, direction), distance):
                continue
            angle = abs(direction.dot(normal))
            lumens = min(light.lumens_at(distance) * angle, _MAX_LUMENS)
            diffuse = diffuse + light.color * (lumens / _MAX_LUMENS)
            r = reflect(direction, normal)
            specular = specular + light.color * ks * max(0.0, r.dot(ray_direction)) ** 100.0
        return (self.scene.ambient_light + diffuse).clamp(0, 1), specular

    def hit(self, ray: Ray, distance: float) -> bool:
        """Whether any object blocks the ray before the given distance."""
        return any(0 < shape.intersect(ray) < distance for shape in self.scene.objects)