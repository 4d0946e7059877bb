[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "raytrace"
version = "0.1.0"
description = "A CPU ray tracer and ray marcher with traced, marched and composite shapes, textured surfaces, lights, fog and skies"
requires-python = ">=3.10"
keywords = ["ray tracing", "ray marching", "rendering", "3d", "graphics"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]
dependencies = [
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["raytrace"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
