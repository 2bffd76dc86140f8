"""Bounded horizontal plane (rectangle parallel to the XZ plane).

The plane sits at height ``y`` and covers the axis-aligned rectangle
x in [x_min, x_max], z in [z_min, z_max]. Its surface normal is +y.

Intersection follows the parametric plane test with the normal that faces
away from a viewer above the plane, n_in = (0, -1, 0):

    denominator = dot(ray.direction, n_in)
    t = dot(p0 - ray.source, n_in) / denominator,   p0 = (x_min, y, z_min)

Rays with a denominator below PARALLEL_EPSILON run parallel to the plane or
approach it from below, and miss. The plane is therefore one-sided: it is
seen from above and is transparent from below, which also means a shadow
ray leaving the plane upwards can never hit the plane it started on.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tracer.geometry.plane import XZPlane, intersect_xz_plane
    >>> floor = XZPlane(y=-1.0, x_min=-1.0, x_max=1.0, z_min=-4.0, z_max=-2.0)
    >>> # Use intersect_xz_plane within a Taichi kernel
"""

import math

import taichi as ti
import taichi.math as tm

from src.tracer.core.errors import GeometryError
from src.tracer.core.ray import Ray

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Minimum dot(direction, n_in) for a ray to count as approaching the plane
PARALLEL_EPSILON = 1e-6


@ti.dataclass
class XZPlane:
    """A rectangle at height y with edges parallel to the x and z axes.

    Attributes:
        y: Height of the plane.
        x_min: Lower x bound (inclusive).
        x_max: Upper x bound (inclusive).
        z_min: Lower z bound (inclusive).
        z_max: Upper z bound (inclusive).
    """

    y: ti.f32
    x_min: ti.f32
    x_max: ti.f32
    z_min: ti.f32
    z_max: ti.f32


@ti.func
def xz_in_bounds(plane: XZPlane, point: vec3) -> ti.i32:
    """Check whether a point on the plane lies inside its rectangle."""
    inside = 0
    if plane.x_min <= point.x <= plane.x_max and plane.z_min <= point.z <= plane.z_max:
        inside = 1
    return inside


@ti.func
def intersect_xz_plane(ray: Ray, plane: XZPlane):
    """Find the distance along a ray to the bounded plane.

    Args:
        ray: The ray to test (unit direction).
        plane: The plane to test against.

    Returns:
        Tuple of (hit, t) where hit is 1 on intersection and t is the
        distance along the ray. t is only meaningful when hit == 1.
    """
    hit = 0
    t = 0.0

    facing_away = vec3(0.0, -1.0, 0.0)
    denominator = tm.dot(ray.direction, facing_away)

    if denominator >= PARALLEL_EPSILON:
        p0 = vec3(plane.x_min, plane.y, plane.z_min)
        distance = tm.dot(p0 - ray.source, facing_away) / denominator
        if distance >= 0.0:
            point = ray.source + distance * ray.direction
            if xz_in_bounds(plane, point) == 1:
                hit = 1
                t = distance

    return hit, t


@ti.func
def plane_normal() -> vec3:
    """Unit surface normal of every XZ plane (+y)."""
    return vec3(0.0, 1.0, 0.0)


def validate_xz_plane(y: float, x_min: float, x_max: float, z_min: float, z_max: float) -> None:
    """Check plane parameters before they reach a kernel.

    Raises:
        GeometryError: If any value is not finite or a bound is inverted.
    """
    values = {"y": y, "x_min": x_min, "x_max": x_max, "z_min": z_min, "z_max": z_max}
    for name, value in values.items():
        if not math.isfinite(value):
            raise GeometryError(f"Plane {name} must be finite, got {value}")
    if x_min > x_max:
        raise GeometryError(f"Plane x bounds are inverted: x_min={x_min} > x_max={x_max}")
    if z_min > z_max:
        raise GeometryError(f"Plane z bounds are inverted: z_min={z_min} > z_max={z_max}")
