# raytrace

A small CPU renderer that combines analytic ray tracing with ray marching.

A `Scene` holds a camera, a list of objects, a list of lights, an ambient
light, a sky and a fog. A `Renderer` shoots one ray per pixel from the
camera and writes the resulting colours into an image buffer.

## Modules

- `raytrace.vector`: `Vec2` and `Vec3`, immutable vectors with
  component-wise `+ - * /` (with vectors or numbers), `dot`, `length`,
  `normal`, `inverse`, `clamp`, and `Vec3.cross` / `Vec3.xz`. `empty()`
  gives an all-NaN "no value" vector.
- `raytrace.geometry`: `Ray`, `Rotation` (a planar rotation; `rotate(x, y)`
  returns the rotated pair), `rotate_vector`, and the helpers
  `solve_quadratic`, `nearest_root`, `neg_mod` and `divide_neg`.
- `raytrace.imagebuffer`: `ImageBuffer` (the empty base), `RgbaImageBuffer`
  (RGBA bytes, rows stored bottom-up), `ImageFileBuffer` (rows top-down;
  `ImageFileBuffer.load(path)` reads a picture with Pillow),
  `ScaledImageBuffer` and `SegmentedImageBuffer` (views onto another
  buffer). Colours are `Vec3` values in `[0, 1]`.
- `raytrace.surface`: `SurfaceResult` (colour, reflection, Fresnel,
  specular power, refraction index and refraction weight),
  `SurfaceIntersection`, flat surfaces (`SolidFlatSurface`,
  `CheckedFlatSurface`, `LineFlatSurface`, `RotatedFlatSurface`) and UV
  surfaces (`SolidUvSurface`, `CheckedUvSurface`,
  `GeneratedSquareUvSurface`, `TexturedUvSurface`).
- `raytrace.shape`: `Object`, the base of every shape, with `intersect`,
  `surface_intersect` and `contains`.
- `raytrace.traced`: `Plane`, `Sphere`, `Cylinder` (infinite, vertical),
  `Cone`, and the functions `plane_intersect` and `sphere_intersect`.
- `raytrace.polyhedra`: `Triangle`, `TriangleMesh`, `CustomPlane`,
  `CustomPlaneMesh`, `Box`, `Prism`, `Pyramid`, `FlatPolygon` and
  `polygon_contains`.
- `raytrace.marched`: `MarchedObject` (sphere tracing over a distance
  function, `max_steps` keyword, default 200), `MarchedSphere`,
  `MarchedCone`, `MarchedCylinder`, `Torus` and `RepeatedMarchedObject`,
  which tiles a marched shape over the x-z plane.
- `raytrace.composite`: `TransformableObject` (offsets and rotates another
  shape), `UnionObject` and `SetDifferenceObject` (cuts shapes out of a
  main shape).
- `raytrace.scene`: `ThreadInfo`, `PerspectiveCamera`, `ParallelCamera`,
  `PointLight`, `DirectionalLight`, `FormulaFog`, `SolidColorSky`, `SkyBox`
  and `Scene`.
- `raytrace.renderer`: `Renderer`, `RenderSettings`, `VignetteSettings`,
  and the functions `reflect` and `refract`.
- `raytrace.serializer_ids`: stable string names for scene element types.

## Installation

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Usage

Render a red sphere lit by a point light into an RGBA buffer:

```python
from raytrace.vector import Vec3
from raytrace.scene import Scene, PerspectiveCamera, PointLight, SolidColorSky
from raytrace.traced import Sphere
from raytrace.surface import SolidUvSurface, SurfaceResult
from raytrace.imagebuffer import RgbaImageBuffer
from raytrace.renderer import Renderer, RenderSettings

camera = PerspectiveCamera(Vec3(0, 0, -5), Vec3(0, 0, 1), 1.0)
scene = Scene(camera)
scene.sky = SolidColorSky(Vec3(0.2, 0.3, 0.5))

material = SurfaceResult(Vec3(1, 0, 0), 0.2, 0.0, 0.5)
scene.objects.append(Sphere(Vec3(0, 0, 0), 1.0, SolidUvSurface(material)))
scene.lights.append(PointLight(Vec3(-3, 3, -3), 5000))

image = RgbaImageBuffer(64, 64)
renderer = Renderer(scene, image, RenderSettings())
renderer.render()

print(image.get_pixel(32, 32))
```

`RenderSettings` has these fields:

- `thread_count` (default 1): rows are split into bands, one per worker;
  more than one worker runs them in a thread pool.
- `scale` (default 1): each traced pixel fills a `scale` x `scale` block.
- `max_depth` and `max_refraction_depth` (default 4): recursion limits for
  reflected and refracted rays.
- `vignette`: a `VignetteSettings` with `enabled`, `radius`, `strength`
  and `color`.

Both `thread_count` and `scale` must be at least 1; otherwise
`RenderSettings` raises `ValueError`.

`FormulaFog` takes any Python callable mapping distance to intensity, for
example `FormulaFog(lambda t: t / 100, color=Vec3(1, 1, 1))`. The result
is clamped between `min_fog_intensity` and `max_fog_intensity`.

`raytrace.serializer_ids` maps scene classes to names such as
`"Object.Traced.Sphere"`:

- `serializer_id(obj)` returns the name of the object's exact type. It
  raises `KeyError` for types that have no name.
- `type_for_id(identifier)` returns the class registered under a name.

## What it does not do

- The package has no command-line program and no window: it fills an image
  buffer in memory and leaves display or saving to the caller.
- It does not read or write scene files. `serializer_ids` only provides the
  type names.
- Fog formulas are Python callables, not parsed from text.