"""Scene-level ray intersection: nearest hit and shadow-ray occlusion.

Scene objects are stored in an ordered object table. Each entry records the
object kind (a closed tagged variant, see ObjectKind), a slot into the
kind-specific Structure-of-Arrays storage, and the object's surface colour.
Kernels dispatch on the kind; no virtual calls are involved.

Traversal is a brute-force linear scan in scene order. For the nearest hit
the comparison is strict, so when two objects report exactly the same
distance the one added first wins.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tracer.scene.intersection import add_sphere, clear_scene
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, -3.0), 1.0, colour=(0.6, 0.9, 0.6))
    0
    >>> # Use intersect_scene(ray) within a Taichi kernel
"""

from collections.abc import Sequence
from enum import IntEnum

import taichi as ti
import taichi.math as tm

from src.tracer.core.ray import Ray
from src.tracer.geometry.plane import (
    XZPlane,
    intersect_xz_plane,
    plane_normal,
    validate_xz_plane,
)
from src.tracer.geometry.sphere import (
    Sphere,
    intersect_sphere,
    sphere_normal,
    validate_sphere,
)

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class ObjectKind(IntEnum):
    """Enumeration of supported scene object kinds, used for kernel dispatch."""

    SPHERE = 0
    XZ_PLANE = 1


@ti.dataclass
class SceneHitRecord:
    """Record of the nearest ray-scene intersection.

    Attributes:
        hit: Whether the ray intersected any object (1 if hit, 0 if miss).
        t: Distance along the ray to the intersection. Only valid if hit == 1.
        object_index: Index of the hit object in scene order.
            Only valid if hit == 1. -1 for a miss.
    """

    hit: ti.i32
    t: ti.f32
    object_index: ti.i32


# Maximum number of objects supported in the scene
MAX_OBJECTS = 1024

# Ordered object table
object_kinds = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
object_slots = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
object_colours = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
num_objects = ti.field(dtype=ti.i32, shape=())

# Sphere storage: Structure of Arrays layout
sphere_centres = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Plane storage: height plus (x_min, x_max, z_min, z_max)
plane_heights = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
plane_bounds = ti.Vector.field(4, dtype=ti.f32, shape=MAX_OBJECTS)
num_planes = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all objects from the scene.

    Resets the counts to zero. Field data is overwritten as new objects
    are added.
    """
    num_objects[None] = 0
    num_spheres[None] = 0
    num_planes[None] = 0


def _append_object(kind: ObjectKind, slot: int, colour: Sequence[float]) -> int:
    idx = num_objects[None]
    object_kinds[idx] = int(kind)
    object_slots[idx] = slot
    object_colours[idx] = [float(colour[0]), float(colour[1]), float(colour[2])]
    num_objects[None] = idx + 1
    return idx


def _check_capacity() -> None:
    if num_objects[None] >= MAX_OBJECTS:
        raise RuntimeError(f"Maximum number of objects ({MAX_OBJECTS}) exceeded")


def add_sphere(centre: Sequence[float], radius: float, colour: Sequence[float]) -> int:
    """Add a sphere to the scene.

    Args:
        centre: The centre of the sphere as (x, y, z).
        radius: The radius of the sphere.
        colour: The surface colour as (r, g, b) in [0, 1].

    Returns:
        The object index of the added sphere (its position in scene order).

    Raises:
        GeometryError: If the sphere parameters are malformed.
        RuntimeError: If the maximum number of objects is exceeded.
    """
    validate_sphere(centre, radius)
    _check_capacity()
    slot = num_spheres[None]
    sphere_centres[slot] = [float(centre[0]), float(centre[1]), float(centre[2])]
    sphere_radii[slot] = radius
    num_spheres[None] = slot + 1
    return _append_object(ObjectKind.SPHERE, slot, colour)


def add_xz_plane(
    y: float,
    x_min: float,
    x_max: float,
    z_min: float,
    z_max: float,
    colour: Sequence[float],
) -> int:
    """Add a bounded plane parallel to the XZ plane.

    Args:
        y: Height of the plane.
        x_min: Lower x bound.
        x_max: Upper x bound.
        z_min: Lower z bound.
        z_max: Upper z bound.
        colour: The surface colour as (r, g, b) in [0, 1].

    Returns:
        The object index of the added plane (its position in scene order).

    Raises:
        GeometryError: If the bounds are inverted or not finite.
        RuntimeError: If the maximum number of objects is exceeded.
    """
    validate_xz_plane(y, x_min, x_max, z_min, z_max)
    _check_capacity()
    slot = num_planes[None]
    plane_heights[slot] = y
    plane_bounds[slot] = [x_min, x_max, z_min, z_max]
    num_planes[None] = slot + 1
    return _append_object(ObjectKind.XZ_PLANE, slot, colour)


def get_object_count() -> int:
    """Get the number of objects in the scene."""
    return int(num_objects[None])


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def get_plane_count() -> int:
    """Get the number of planes in the scene."""
    return int(num_planes[None])


@ti.func
def _sphere_at(slot: ti.i32) -> Sphere:
    return Sphere(centre=sphere_centres[slot], radius=sphere_radii[slot])


@ti.func
def _plane_at(slot: ti.i32) -> XZPlane:
    bounds = plane_bounds[slot]
    return XZPlane(
        y=plane_heights[slot],
        x_min=bounds[0],
        x_max=bounds[1],
        z_min=bounds[2],
        z_max=bounds[3],
    )


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(hit=0, t=0.0, object_index=-1)


@ti.func
def intersect_object(index: ti.i32, ray: Ray):
    """Intersect a ray with one object, dispatching on its kind.

    Returns:
        Tuple of (hit, t) as returned by the primitive's intersection.
    """
    hit = 0
    t = 0.0
    slot = object_slots[index]
    kind = object_kinds[index]
    if kind == int(ObjectKind.SPHERE):
        hit, t = intersect_sphere(ray, _sphere_at(slot))
    elif kind == int(ObjectKind.XZ_PLANE):
        hit, t = intersect_xz_plane(ray, _plane_at(slot))
    return hit, t


@ti.func
def intersect_scene(ray: Ray) -> SceneHitRecord:
    """Find the nearest object hit by a ray at a positive distance.

    Args:
        ray: The ray to trace (unit direction).

    Returns:
        A SceneHitRecord for the nearest hit, or a miss record.
    """
    result = _make_miss_record()
    closest_t = tm.inf

    for i in range(num_objects[None]):
        hit, t = intersect_object(i, ray)
        if hit == 1 and t > 0.0 and t < closest_t:
            closest_t = t
            result = SceneHitRecord(hit=1, t=t, object_index=i)

    return result


@ti.func
def is_occluded(ray: Ray, max_distance: ti.f32) -> ti.i32:
    """Test whether any object blocks a shadow ray before max_distance.

    An object occludes when it is hit at a distance d with
    0 <= d < max_distance. Every object is tested, including the one the
    ray started on.

    Returns:
        1 if the ray is blocked, 0 otherwise.
    """
    occluded = 0
    for i in range(num_objects[None]):
        if occluded == 0:
            hit, t = intersect_object(i, ray)
            if hit == 1 and t >= 0.0 and t < max_distance:
                occluded = 1
    return occluded


@ti.func
def object_normal(index: ti.i32, point: vec3) -> vec3:
    """Unit surface normal of an object at a point on its surface."""
    normal = plane_normal()
    if object_kinds[index] == int(ObjectKind.SPHERE):
        normal = sphere_normal(_sphere_at(object_slots[index]), point)
    return normal


@ti.func
def object_colour(index: ti.i32) -> vec3:
    """Surface colour of an object (constant over its surface)."""
    return object_colours[index]
