"""Viewport camera: maps pixel coordinates to primary rays.

The camera sits at ``location`` looking along ``direction``. A flat
viewport is placed ``viewport_distance`` in front of it, ``viewport_width``
units wide, divided into ``columns`` x ``rows`` square pixels. Pixel (0, 0)
is the top-left pixel and rows grow downward.

Derived once at construction:
    pixel_size     = viewport_width / columns
    top_left_pixel = viewport top-left corner + half a pixel toward the
                     viewport interior

and a primary ray for pixel (col, row) runs from the camera location through

    top_left_pixel + col * pixel_size * right - row * pixel_size * up

The viewport basis (right, up) is built from the facing direction and the
world up axis (+y). When the camera looks straight along y, -z is used as
the up reference instead.

With the default configuration (origin, looking down -z, viewport one unit
away and two units wide, 200x200 pixels) the viewport's top-left corner is
(-1, 1, -1).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tracer.camera.viewport import CameraConfig, setup_camera
    >>> camera = setup_camera(CameraConfig(columns=400, rows=300))
    >>> camera.pixel_size
    0.005
    >>> # Use primary_ray(col, row) within a Taichi kernel
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

import numpy as np
import taichi as ti
import taichi.math as tm

from src.tracer.core.errors import GeometryError
from src.tracer.core.ray import Ray, make_ray
from src.tracer.core.vector import as_vec3, normalize_checked

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

WORLD_UP = (0.0, 1.0, 0.0)
# Up reference used when the camera looks along the world up axis
FALLBACK_UP = (0.0, 0.0, -1.0)


# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class CameraConfig:
    """Configuration for the viewport camera.

    Attributes:
        location: Camera position in world space (x, y, z).
        direction: Facing direction (need not be unit length, must be non-zero).
        viewport_distance: Distance from the camera to the viewport (> 0).
        viewport_width: Width of the viewport in world units (> 0).
        columns: Number of pixel columns (> 0).
        rows: Number of pixel rows (> 0).
    """

    location: tuple[float, float, float] = (0.0, 0.0, 0.0)
    direction: tuple[float, float, float] = (0.0, 0.0, -1.0)
    viewport_distance: float = 1.0
    viewport_width: float = 2.0
    columns: int = 200
    rows: int = 200

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> "CameraConfig":
        """Build a configuration from a mapping of recognised options.

        Missing options take their defaults.

        Raises:
            ValueError: If the mapping contains an unrecognised option.
        """
        recognised = {f.name for f in fields(cls)}
        unknown = set(options) - recognised
        if unknown:
            raise ValueError(
                f"Unknown camera option(s): {', '.join(sorted(unknown))}. "
                f"Recognised options: {', '.join(sorted(recognised))}"
            )
        values = dict(options)
        for key in ("location", "direction"):
            if key in values:
                values[key] = tuple(float(c) for c in values[key])
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """Export the configuration as a plain dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class Camera:
    """An immutable camera with its derived viewport geometry.

    Built by build_camera(); never constructed directly.

    Attributes:
        location: Camera position.
        direction: Unit facing direction.
        right: Unit vector along the viewport's +x (left to right).
        up: Unit vector along the viewport's +y (bottom to top).
        viewport_distance: Distance from camera to viewport.
        viewport_width: Viewport width in world units.
        viewport_height: Viewport height, pixel_size * rows.
        columns: Number of pixel columns.
        rows: Number of pixel rows.
        pixel_size: Side length of one pixel in world units.
        top_left_pixel: World position of the centre of pixel (0, 0).
    """

    location: tuple[float, float, float]
    direction: tuple[float, float, float]
    right: tuple[float, float, float]
    up: tuple[float, float, float]
    viewport_distance: float
    viewport_width: float
    viewport_height: float
    columns: int
    rows: int
    pixel_size: float
    top_left_pixel: tuple[float, float, float]


def _as_tuple(v: np.ndarray) -> tuple[float, float, float]:
    return (float(v[0]), float(v[1]), float(v[2]))


def _validate(config: CameraConfig) -> None:
    for name in ("viewport_distance", "viewport_width"):
        value = getattr(config, name)
        if not math.isfinite(value) or value <= 0.0:
            raise GeometryError(f"Camera {name} must be positive and finite, got {value}")
    for name in ("columns", "rows"):
        value = getattr(config, name)
        if int(value) != value or value <= 0:
            raise GeometryError(f"Camera {name} must be a positive integer, got {value}")
    try:
        as_vec3(config.location, "camera location")
        as_vec3(config.direction, "camera direction")
    except ValueError as e:
        raise GeometryError(str(e)) from e


def build_camera(config: CameraConfig) -> Camera:
    """Compute the camera's viewport geometry from its configuration.

    Args:
        config: The camera configuration.

    Returns:
        The immutable Camera.

    Raises:
        GeometryError: If a distance, width or resolution is not positive, or
            the location or direction is not three finite numbers.
        DegenerateVectorError: If the facing direction has zero length.
    """
    _validate(config)

    location = as_vec3(config.location, "camera location")
    direction = normalize_checked(config.direction, "camera direction")

    right = np.cross(direction, np.asarray(WORLD_UP))
    if np.linalg.norm(right) < 1e-8:
        right = np.cross(direction, np.asarray(FALLBACK_UP))
    right = right / np.linalg.norm(right)
    up = np.cross(right, direction)

    columns = int(config.columns)
    rows = int(config.rows)
    pixel_size = config.viewport_width / columns
    viewport_height = pixel_size * rows

    viewport_centre = location + config.viewport_distance * direction
    top_left_corner = (
        viewport_centre - (config.viewport_width / 2.0) * right + (viewport_height / 2.0) * up
    )
    top_left_pixel = top_left_corner + (pixel_size / 2.0) * (right - up)

    return Camera(
        location=_as_tuple(location),
        direction=_as_tuple(direction),
        right=_as_tuple(right),
        up=_as_tuple(up),
        viewport_distance=float(config.viewport_distance),
        viewport_width=float(config.viewport_width),
        viewport_height=float(viewport_height),
        columns=columns,
        rows=rows,
        pixel_size=float(pixel_size),
        top_left_pixel=_as_tuple(top_left_pixel),
    )


def primary_ray_direction(camera: Camera, col: int, row: int) -> tuple[float, float, float]:
    """Compute a primary ray direction in Python scope.

    Mirrors primary_ray() for inspection and testing.

    Returns:
        The unit direction from the camera through the centre of pixel (col, row).
    """
    pixel = (
        np.asarray(camera.top_left_pixel)
        + col * camera.pixel_size * np.asarray(camera.right)
        - row * camera.pixel_size * np.asarray(camera.up)
    )
    return _as_tuple(normalize_checked(pixel - np.asarray(camera.location), "primary ray direction"))


# =============================================================================
# Taichi Fields for Camera State (GPU-accessible)
# =============================================================================

_camera_location = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_right = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_up = ti.Vector.field(3, dtype=ti.f32, shape=())
_top_left_pixel = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel_size = ti.field(dtype=ti.f32, shape=())
_camera_ready = ti.field(dtype=ti.i32, shape=())


def setup_camera(config: CameraConfig) -> Camera:
    """Build the camera and upload it for use by kernels.

    Args:
        config: The camera configuration.

    Returns:
        The immutable Camera that kernels will now use.
    """
    camera = build_camera(config)
    _camera_location[None] = list(camera.location)
    _camera_right[None] = list(camera.right)
    _camera_up[None] = list(camera.up)
    _top_left_pixel[None] = list(camera.top_left_pixel)
    _pixel_size[None] = camera.pixel_size
    _camera_ready[None] = 1
    return camera


def is_camera_ready() -> bool:
    """Check whether setup_camera() has been called."""
    return bool(_camera_ready[None])


def reset_camera() -> None:
    """Mark the camera as not set up."""
    _camera_ready[None] = 0


@ti.func
def primary_ray(col: ti.i32, row: ti.i32) -> Ray:
    """Generate the primary ray through the centre of pixel (col, row).

    Args:
        col: Pixel column (0 = left).
        row: Pixel row (0 = top).

    Returns:
        A Ray from the camera location with unit direction.
    """
    size = _pixel_size[None]
    pixel = (
        _top_left_pixel[None]
        + (ti.cast(col, ti.f32) * size) * _camera_right[None]
        - (ti.cast(row, ti.f32) * size) * _camera_up[None]
    )
    origin = _camera_location[None]
    return make_ray(origin, pixel - origin)


def get_camera_info() -> dict[str, Any]:
    """Get the uploaded camera state for debugging.

    Returns:
        Dictionary with location, right, up, top_left_pixel and pixel_size.
    """

    def _read(field: Any) -> tuple[float, float, float]:
        v = field[None]
        return (float(v[0]), float(v[1]), float(v[2]))

    return {
        "location": _read(_camera_location),
        "right": _read(_camera_right),
        "up": _read(_camera_up),
        "top_left_pixel": _read(_top_left_pixel),
        "pixel_size": float(_pixel_size[None]),
    }
