"""Ray data structure for primary and shadow rays.

A ray is a source point plus a unit direction. The unit-length invariant is
established at construction: ``make_ray`` (kernel scope) normalises the
direction it is given, and ``make_ray_checked`` (Python scope) additionally
rejects zero-length directions with ``DegenerateVectorError``.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tracer.core.ray import make_ray, ray_at, vec3
    >>> @ti.kernel
    ... def point_on_ray() -> vec3:
    ...     ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -2.0))
    ...     return ray_at(ray, 5.0)  # (0, 0, -5)
"""

from collections.abc import Sequence

import taichi as ti
import taichi.math as tm

from src.tracer.core.vector import as_vec3, normalize, normalize_checked

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Ray:
    """A ray with a source point and a unit direction.

    Attributes:
        source: The starting point of the ray (vec3).
        direction: The direction of travel (vec3), always unit length when
            built through make_ray().
    """

    source: vec3
    direction: vec3


@ti.func
def make_ray(source: vec3, direction: vec3) -> Ray:
    """Create a ray, normalising the given direction.

    Args:
        source: The starting point of the ray.
        direction: Any non-zero direction vector.

    Returns:
        A new Ray whose direction has unit length.
    """
    return Ray(source=source, direction=normalize(direction))


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point at distance t along the ray."""
    return ray.source + t * ray.direction


@ti.func
def offset_origin(point: vec3, normal: vec3, direction: vec3, bias: ti.f32) -> vec3:
    """Push a ray origin off a surface to avoid self-intersection.

    The point moves by ``bias`` along the normal, on the side of the surface
    that the new ray travels into.

    Args:
        point: The point on the surface.
        normal: The unit surface normal at that point.
        direction: The direction of the ray that will leave the surface.
        bias: Offset distance.

    Returns:
        The offset origin.
    """
    offset_dir = normal
    if tm.dot(direction, normal) < 0.0:
        offset_dir = -normal
    return point + bias * offset_dir


def make_ray_checked(
    source: Sequence[float],
    direction: Sequence[float],
) -> tuple[tuple[float, float, float], tuple[float, float, float]]:
    """Build a ray in Python scope.

    Args:
        source: The ray source as (x, y, z).
        direction: Any non-zero direction as (x, y, z).

    Returns:
        Tuple of (source, unit_direction), each an (x, y, z) tuple.

    Raises:
        DegenerateVectorError: If the direction has zero length.
    """
    src = as_vec3(source, "ray source")
    unit = normalize_checked(direction, "ray direction")
    return (
        (float(src[0]), float(src[1]), float(src[2])),
        (float(unit[0]), float(unit[1]), float(unit[2])),
    )
