"""Stable names for scene element types, used when saving scenes."""

from __future__ import annotations

from typing import Dict

from raytrace.composite import SetDifferenceObject, TransformableObject, UnionObject
from raytrace.marched import (
    MarchedCone,
    MarchedCylinder,
    MarchedSphere,
    RepeatedMarchedObject,
    Torus,
)
from raytrace.polyhedra import Box, FlatPolygon, Prism, Pyramid, TriangleMesh
from raytrace.scene import (
    DirectionalLight,
    FormulaFog,
    ParallelCamera,
    PerspectiveCamera,
    PointLight,
    SkyBox,
    SolidColorSky,
)
from raytrace.surface import (
    CheckedFlatSurface,
    CheckedUvSurface,
    GeneratedSquareUvSurface,
    LineFlatSurface,
    RotatedFlatSurface,
    SolidFlatSurface,
    SolidUvSurface,
    TexturedUvSurface,
)
from raytrace.traced import Cone, Cylinder, Plane, Sphere

SERIALIZER_IDS: Dict[type, str] = {
    PerspectiveCamera: "Camera.Perspective",
    ParallelCamera: "Camera.Parallel",
    PointLight: "Light.Point",
    DirectionalLight: "Light.Directional",
    SolidColorSky: "Sky.Solid",
    SkyBox: "Sky.SkyBox",
    SolidFlatSurface: "Surface.Flat.Solid",
    RotatedFlatSurface: "Surface.Flat.Rotated",
    CheckedFlatSurface: "Surface.Flat.Checked",
    LineFlatSurface: "Surface.Flat.Line",
    SolidUvSurface: "Surface.Uv.Solid",
    GeneratedSquareUvSurface: "Surface.Uv.GeneratedSquare",
    TexturedUvSurface: "Surface.Uv.Textured",
    CheckedUvSurface: "Surface.Uv.Checked",
    Sphere: "Object.Traced.Sphere",
    Plane: "Object.Traced.Plane",
    Cylinder: "Object.Traced.Cylinder",
    TriangleMesh: "Object.Traced.Mesh",
    TransformableObject: "Object.Composite.Transformable",
    Box: "Object.Traced.Box",
    Prism: "Object.Traced.Prism",
    Pyramid: "Object.Traced.Pyramid",
    Cone: "Object.Traced.Cone",
    Torus: "Object.Marched.Torus",
    MarchedSphere: "Object.Marched.Sphere",
    MarchedCone: "Object.Marched.Cone",
    MarchedCylinder: "Object.Marched.Cylinder",
    RepeatedMarchedObject: "Object.Marched.Composite.Repeated",
    FlatPolygon: "Object.Traced.FlatPolygon",
    SetDifferenceObject: "Object.Set.Difference",
    UnionObject: "Object.Set.Union",
    FormulaFog: "Fog.Formula",
}

_TYPES_BY_ID: Dict[str, type] = {name: cls for cls, name in SERIALIZER_IDS.items()}


def serializer_id(obj: object) -> str:
    """The name of the object's exact type; subclasses are not matched."""
    try:
        return SERIALIZER_IDS[type(obj)]
    except KeyError:
        raise KeyError(f"no serializer id for type {type(obj).__name__}") from None


def type_for_id(identifier: str) -> type:
    """The type registered under a name."""
    try:
        return _TYPES_BY_ID[identifier]
    except KeyError:
        raise KeyError(f"unknown serializer id {identifier!r}") from None