"""A CPU ray tracer and ray marcher with composable shapes, surfaces, lights, fog and skies."""

__version__ = "0.1.0"