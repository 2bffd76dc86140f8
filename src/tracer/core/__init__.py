"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    vector: Vector algebra (kernel-scope and Python-scope)
    ray: Ray data structure and construction
    colour: Colour and Intensity value types
    errors: Exceptions raised while validating configuration
    shading: Direct illumination with shadow rays
    tone_mapping: Global linear normalisation of radiance to colour
    integrator: Frame buffers and the per-pixel trace
    renderer: Two-phase render of a whole frame with progress events

All compute-intensive operations use Taichi kernels for GPU acceleration.
"""

from .colour import BLACK, WHITE, Colour, Intensity, to_colour, to_intensity
from .errors import DegenerateVectorError, GeometryError
from .ray import Ray, make_ray, make_ray_checked, offset_origin, ray_at
from .vector import as_vec3, dot, magnitude, normalize, normalize_checked, scale, vec3

# Note: shading, integrator and renderer are NOT imported here to avoid circular
# imports with the scene package. Import them directly, e.g.:
#   from src.tracer.core.renderer import Renderer

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "make_ray_checked",
    "offset_origin",
    "vec3",
    "dot",
    "magnitude",
    "normalize",
    "scale",
    "as_vec3",
    "normalize_checked",
    "Colour",
    "Intensity",
    "BLACK",
    "WHITE",
    "to_colour",
    "to_intensity",
    "DegenerateVectorError",
    "GeometryError",
]
