import math
import sys

import pytest

from raytrace.geometry import Ray
from raytrace.imagebuffer import RgbaImageBuffer
from raytrace.scene import (
    Camera,
    DirectionalLight,
    Fog,
    FormulaFog,
    ParallelCamera,
    PerspectiveCamera,
    PointLight,
    Scene,
    Sky,
    SkyBox,
    SolidColorSky,
    ThreadInfo,
)
from raytrace.vector import Vec3


def close(a, b, tol=1e-9):
    return all(math.isclose(p, q, abs_tol=tol) for p, q in zip(a, b))


@pytest.mark.parametrize("height,threads", [(10, 3), (7, 7), (5, 1), (9, 4)])
def test_thread_bands_partition_rows(height, threads):
    rows = [r for i in range(threads) for r in ThreadInfo(i, threads).band(height)]
    assert rows == list(range(height))


def test_base_camera_generates_nothing():
    camera = Camera()
    camera.set_dimensions(4, 4)
    assert camera.generate_rays(ThreadInfo()) == []


def test_perspective_centre_ray_looks_forward():
    camera = PerspectiveCamera(Vec3(1, 2, 3), Vec3(0, 0, 1), 1.0)
    camera.set_dimensions(1, 1)
    rays = camera.generate_rays(ThreadInfo())
    assert len(rays) == 1
    assert rays[0].origin == Vec3(1, 2, 3)
    assert close(rays[0].direction, (0, 0, 1))


def test_perspective_follows_camera_direction():
    camera = PerspectiveCamera(Vec3(), Vec3(1, 0, 0), 1.0)
    camera.set_dimensions(1, 1)
    ray = camera.generate_rays(ThreadInfo())[0]
    assert tuple(ray.direction) == pytest.approx((1.0, 0.0, 0.0), abs=1e-9)


def test_perspective_rays_are_unit_and_filled_per_band():
    camera = PerspectiveCamera(Vec3(), Vec3(0, 0, 1), 2.0)
    camera.set_dimensions(4, 3)
    rays = camera.generate_rays(ThreadInfo(0, 3))
    assert all(not r.direction.is_empty() for r in rays[:4])
    assert all(r.direction.is_empty() for r in rays[4:])
    for i in (1, 2):
        rays = camera.generate_rays(ThreadInfo(i, 3))
    assert all(math.isclose(r.direction.length(), 1.0) for r in rays)


def test_parallel_rays_share_direction_and_centre_origin():
    camera = ParallelCamera(Vec3(0, 1, 0), Vec3(0, 0, 1), 2.0)
    camera.set_dimensions(3, 3)
    rays = camera.generate_rays(ThreadInfo())
    assert all(r.direction == Vec3(0, 0, 1) for r in rays)
    assert close(rays[4].origin, (0, 1, 0))
    assert len({tuple(r.origin) for r in rays}) == 9


def test_point_light_direction_and_falloff():
    light = PointLight(Vec3(0, 4, 0), 100.0)
    direction, distance = light.direction_and_distance(Vec3(0, 1, 0))
    assert close(direction, (0, 1, 0))
    assert distance == pytest.approx(3.0)
    assert light.lumens_at(distance) * distance * distance == pytest.approx(100.0)
    assert light.color == Vec3(1, 1, 1)


def test_directional_light_is_infinitely_far():
    light = DirectionalLight(Vec3(0, 1, 0), 5.0, Vec3(1, 0, 0))
    direction, distance = light.direction_and_distance(Vec3(7, 8, 9))
    assert direction == Vec3(0, 1, 0)
    assert distance == sys.float_info.max
    assert light.lumens_at(123.0) == 5.0


def test_plain_fog_is_clear():
    assert Fog().color_and_intensity(10.0) == (Vec3(), 0.0)


def test_formula_fog_clamps_and_switches():
    fog = FormulaFog(lambda t: t / 10, color=Vec3(0.5, 0.5, 0.5),
                     minimum_distance_to_enable=2.0, max_fog_intensity=0.8)
    assert fog.color_and_intensity(1.0) == (Vec3(), 0.0)
    color, intensity = fog.color_and_intensity(5.0)
    assert color == Vec3(0.5, 0.5, 0.5)
    assert intensity == pytest.approx(0.5)
    assert fog.color_and_intensity(100.0)[1] == 0.8
    fog.enabled = False
    assert fog.color_and_intensity(5.0) == (Vec3(), 0.0)


def test_skies():
    assert Sky().color(Vec3(0, 1, 0)) == Vec3()
    assert SolidColorSky(Vec3(0.2, 0.3, 0.4)).color(Vec3(1, 0, 0)) == Vec3(0.2, 0.3, 0.4)


def _red_box(**kwargs):
    buffer = RgbaImageBuffer(4, 2)
    for y in range(2):
        for x in range(4):
            buffer.set_pixel(x, y, Vec3(1, 0, 0))
    return SkyBox(buffer, **kwargs)


def test_skybox_samples_image():
    sky = _red_box()
    assert sky.color(Vec3(0, 1, 0)) == Vec3(1, 0, 0)
    assert sky.color(Vec3(0, 0, -1)) == Vec3(1, 0, 0)


def test_skybox_horizon_fog():
    sky = _red_box(fog_enabled=True, fog_color=Vec3(0, 0, 1))
    assert sky.color(Vec3(1, 0, 0)) == Vec3(0, 0, 1)
    assert sky.color(Vec3(0, 1, 0)) == Vec3(1, 0, 0)


def test_skybox_uv_poles():
    sky = _red_box()
    assert sky.uv(Vec3(0, 1, 0))[1] == 0.0
    assert sky.uv(Vec3(0, -1, 0))[1] == pytest.approx(1.0)


def test_scene_defaults():
    scene = Scene(PerspectiveCamera())
    assert scene.objects == [] and scene.lights == []
    assert scene.ambient_light == Vec3()
    assert scene.sky.color(Vec3(0, 1, 0)) == Vec3()
    assert scene.fog.color_and_intensity(1.0)[1] == 0.0
    assert isinstance(Ray(), Ray) and scene.camera.generate_rays(ThreadInfo()) == []