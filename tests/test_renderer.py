import math

import pytest

from raytrace.geometry import Ray
from raytrace.imagebuffer import RgbaImageBuffer
from raytrace.renderer import RenderSettings, Renderer, VignetteSettings, reflect, refract
from raytrace.scene import PerspectiveCamera, PointLight, Scene, SolidColorSky
from raytrace.surface import SolidUvSurface, SurfaceResult
from raytrace.traced import Sphere
from raytrace.vector import Vec3

RED = Vec3(1, 0, 0)
GREEN = Vec3(0, 1, 0)
WHITE = Vec3(1, 1, 1)


def make_scene(**kwargs):
    return Scene(PerspectiveCamera(Vec3(), Vec3(0, 0, 1), 1.0), **kwargs)


def green_sphere(**material):
    surface = SolidUvSurface(SurfaceResult(color=GREEN, **material))
    return Sphere(Vec3(0, 0, 5), 1.0, surface)


def pixels(buffer):
    return [buffer.get_pixel(x, y) for y in range(buffer.height()) for x in range(buffer.width())]


def test_reflect_mirrors_about_normal():
    assert reflect(Vec3(1, -1, 0), Vec3(0, 1, 0)) == Vec3(1, 1, 0)


def test_refract_with_unit_index_keeps_direction():
    incident = Vec3(1, -1, 0).normal()
    out = refract(incident, Vec3(0, 1, 0), 1.0)
    assert all(math.isclose(a, b, abs_tol=1e-12) for a, b in zip(out, incident))


def test_refract_total_internal_reflection():
    incident = Vec3(1, 0.1, 0).normal()
    assert refract(incident, Vec3(0, 1, 0), 1.5) is None


def test_settings_reject_bad_values():
    with pytest.raises(ValueError):
        RenderSettings(thread_count=0)
    with pytest.raises(ValueError):
        RenderSettings(scale=0)


def test_empty_scene_renders_sky():
    buffer = RgbaImageBuffer(4, 3)
    Renderer(make_scene(sky=SolidColorSky(RED)), buffer, RenderSettings(thread_count=2)).render()
    assert all(p == RED for p in pixels(buffer))


def test_scaled_render_fills_every_pixel():
    buffer = RgbaImageBuffer(5, 5)
    Renderer(make_scene(sky=SolidColorSky(RED)), buffer, RenderSettings(scale=2)).render()
    assert all(p == RED for p in pixels(buffer))


def test_sphere_seen_in_centre():
    buffer = RgbaImageBuffer(3, 3)
    scene = make_scene(objects=[green_sphere()], ambient_light=WHITE, sky=SolidColorSky(RED))
    Renderer(scene, buffer).render()
    assert buffer.get_pixel(1, 1) == GREEN
    assert buffer.get_pixel(0, 0) == RED


def test_thread_count_does_not_change_image():
    scene = make_scene(objects=[green_sphere()], ambient_light=Vec3(0.5, 0.5, 0.5),
                       lights=[PointLight(Vec3(0, 5, 0), 5000.0)], sky=SolidColorSky(RED))
    single, multi = RgbaImageBuffer(7, 5), RgbaImageBuffer(7, 5)
    Renderer(scene, single, RenderSettings(thread_count=1)).render()
    Renderer(scene, multi, RenderSettings(thread_count=3)).render()
    assert single.pixel_data == multi.pixel_data


def test_trace_ray_miss_returns_sky():
    renderer = Renderer(make_scene(sky=SolidColorSky(RED)), RgbaImageBuffer(1, 1))
    assert renderer.trace_ray(Ray(Vec3(), Vec3(0, 0, 1)), 1, 1) == RED


def test_mirror_shows_sky():
    scene = make_scene(objects=[green_sphere(reflection_index=1.0)], sky=SolidColorSky(RED))
    renderer = Renderer(scene, RgbaImageBuffer(1, 1))
    assert renderer.trace_ray(Ray(Vec3(), Vec3(0, 0, 1)), 1, 1) == RED


def test_surface_intersect_picks_nearest():
    near = Sphere(Vec3(0, 0, 5), 1.0)
    far = Sphere(Vec3(0, 0, 10), 1.0)
    renderer = Renderer(make_scene(objects=[far, near]), RgbaImageBuffer(1, 1))
    hit = renderer.surface_intersect(Ray(Vec3(), Vec3(0, 0, 1)))
    assert hit.t == pytest.approx(near.intersect(Ray(Vec3(), Vec3(0, 0, 1))))
    assert not renderer.surface_intersect(Ray(Vec3(), Vec3(0, 1, 0))).does_intersect()


def test_hit_respects_distance():
    renderer = Renderer(make_scene(objects=[green_sphere()]), RgbaImageBuffer(1, 1))
    ray = Ray(Vec3(), Vec3(0, 0, 1))
    assert renderer.hit(ray, 10.0) is True
    assert renderer.hit(ray, 3.0) is False


def test_shade_without_lights_is_ambient():
    ambient = Vec3(0.2, 0.3, 0.4)
    renderer = Renderer(make_scene(ambient_light=ambient), RgbaImageBuffer(1, 1))
    shade, specular = renderer.shade(Vec3(0, 1, 0), Vec3(), Vec3(0, -1, 0), 1.0)
    assert shade == ambient
    assert specular == Vec3()


def test_shadowed_light_adds_nothing():
    light = PointLight(Vec3(0, 10, 0), 1e6)
    lit = Renderer(make_scene(lights=[light]), RgbaImageBuffer(1, 1))
    blocker = Sphere(Vec3(0, 5, 0), 1.0)
    shadowed = Renderer(make_scene(lights=[light], objects=[blocker]), RgbaImageBuffer(1, 1))
    args = (Vec3(0, 1, 0), Vec3(), Vec3(0, -1, 0), 0.0)
    assert lit.shade(*args)[0].y > 0
    assert shadowed.shade(*args)[0] == Vec3()


def test_vignette_darkens_corners():
    buffer = RgbaImageBuffer(5, 5)
    vignette = VignetteSettings(enabled=True, radius=0.5, strength=1.0, color=Vec3())
    scene = make_scene(sky=SolidColorSky(WHITE))
    Renderer(scene, buffer, RenderSettings(vignette=vignette)).render()
    assert buffer.get_pixel(2, 2) == WHITE
    assert buffer.get_pixel(0, 0) == Vec3()