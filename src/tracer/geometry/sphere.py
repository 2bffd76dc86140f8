"""Sphere primitive with geometric ray-sphere intersection.

The intersection uses the geometric (rather than quadratic) formulation:

    L   = centre - ray.source
    tca = dot(L, ray.direction)          # projection of the centre on the ray
    d2  = dot(L, L) - tca * tca          # squared distance centre -> ray
    thc = sqrt(radius^2 - d2)            # half chord length
    t0, t1 = tca - thc, tca + thc

If the centre projects behind the ray source (tca < 0) the sphere is rejected
outright. This also rejects a ray that starts inside the sphere and points
away from the centre, even though such a ray does exit through the surface.
That case never arises for primary rays from a camera outside every sphere,
and for shadow rays it means a surface never occludes a light in front of it.

The ray direction must be unit length so that t is a distance.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tracer.geometry.sphere import Sphere, intersect_sphere
    >>> # Use intersect_sphere within a Taichi kernel:
    >>> # hit, t = intersect_sphere(ray, Sphere(centre=vec3(0, 0, -3), radius=1.0))
"""

import math
from collections.abc import Sequence

import taichi as ti
import taichi.math as tm

from src.tracer.core.errors import GeometryError
from src.tracer.core.ray import Ray
from src.tracer.core.vector import as_vec3

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by centre point and radius.

    Attributes:
        centre: The centre point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    centre: vec3
    radius: ti.f32


@ti.func
def intersect_sphere(ray: Ray, sphere: Sphere):
    """Find the distance along a ray to the nearest sphere surface.

    Root selection:
        - both roots negative: no hit
        - exactly one negative: the non-negative root
        - both non-negative: the smaller (nearer) root

    Args:
        ray: The ray to test (unit direction).
        sphere: The sphere to test against.

    Returns:
        Tuple of (hit, t) where hit is 1 on intersection and t is the
        distance along the ray. t is only meaningful when hit == 1.
    """
    hit = 0
    t = 0.0

    l_vec = sphere.centre - ray.source
    tca = tm.dot(l_vec, ray.direction)

    if tca >= 0.0:
        d2 = tm.dot(l_vec, l_vec) - tca * tca
        radius2 = sphere.radius * sphere.radius

        # Perpendicular distance exceeds the radius: clean miss
        if d2 <= radius2:
            thc = ti.sqrt(radius2 - d2)
            t0 = tca - thc
            t1 = tca + thc

            if t0 >= 0.0 and t1 >= 0.0:
                hit = 1
                t = ti.min(t0, t1)
            elif t0 >= 0.0:
                hit = 1
                t = t0
            elif t1 >= 0.0:
                hit = 1
                t = t1

    return hit, t


@ti.func
def sphere_normal(sphere: Sphere, point: vec3) -> vec3:
    """Outward unit normal of a sphere at a point on its surface."""
    return tm.normalize(point - sphere.centre)


def validate_sphere(centre: Sequence[float], radius: float) -> None:
    """Check sphere parameters before they reach a kernel.

    Raises:
        GeometryError: If the centre is not finite or the radius is not a
            positive finite number.
    """
    try:
        as_vec3(centre, "sphere centre")
    except ValueError as e:
        raise GeometryError(str(e)) from e
    if not math.isfinite(radius) or radius <= 0.0:
        raise GeometryError(f"Sphere radius must be positive and finite, got {radius}")
