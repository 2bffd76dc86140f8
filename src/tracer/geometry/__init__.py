"""Geometry module for scene object primitives.

This module provides the surfaces a ray can hit:

Components:
    sphere: Sphere primitive with geometric ray-sphere intersection
    plane: Bounded plane parallel to the XZ plane

The set of object kinds is closed. Each primitive exposes an intersection
function returning (hit, t), a surface normal, and a Python-scope validator
that rejects malformed parameters before they are uploaded to Taichi fields.
Surface colour is per object and lives in the scene tables.

Ray-object intersection follows the pattern:
    hit, t = intersect_shape(ray, shape)
"""

from .plane import (
    PARALLEL_EPSILON,
    XZPlane,
    intersect_xz_plane,
    plane_normal,
    validate_xz_plane,
    xz_in_bounds,
)
from .sphere import Sphere, intersect_sphere, sphere_normal, validate_sphere

__all__ = [
    "Sphere",
    "intersect_sphere",
    "sphere_normal",
    "validate_sphere",
    "XZPlane",
    "intersect_xz_plane",
    "plane_normal",
    "validate_xz_plane",
    "xz_in_bounds",
    "PARALLEL_EPSILON",
]
