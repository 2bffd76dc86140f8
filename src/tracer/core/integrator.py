"""Direct-illumination integrator and frame buffers.

This module owns the render target and the per-pixel trace:

    primary_ray(col, row) -> intersect_scene -> shade (hit)
                                             -> background (miss)

Rendering is split into the two phases the tone mapper requires:

1. Trace: every pixel's unbounded radiance is written to the intensity
   buffer. Pixels are independent, so each band of rows is one parallel
   Taichi loop. Each pixel writes only its own buffer slot.
2. Tone map: after the whole frame is traced, the intensity buffer is
   normalised by its global maximum into the colour buffer.

Buffers are preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT and indexed
[col, row] with row 0 at the top of the image.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tracer.camera.viewport import CameraConfig, setup_camera
    >>> from src.tracer.core.integrator import (
    ...     render_intensity, setup_render_target, tone_map_render_target
    ... )
    >>> camera = setup_camera(CameraConfig())
    >>> setup_render_target(camera.columns, camera.rows)
    >>> render_intensity()
    >>> tone_map_render_target()
"""

import math

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.tracer.camera.viewport import is_camera_ready, primary_ray
from src.tracer.core.colour import Colour, ColourLike, to_colour
from src.tracer.core.ray import Ray, ray_at
from src.tracer.core.shading import shade
from src.tracer.core.tone_mapping import tone_map_field
from src.tracer.scene.intersection import intersect_scene, object_colour, object_normal

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Background colour for rays that hit nothing
DEFAULT_BACKGROUND = Colour.from_24bit_int(0x3030FF)

# Shadow-ray origin offset along the surface normal
DEFAULT_SHADOW_BIAS = 1e-4

# =============================================================================
# Shading Settings
# =============================================================================

_background = ti.Vector.field(3, dtype=ti.f32, shape=())
_shadow_bias = ti.field(dtype=ti.f32, shape=())


def configure_shading(
    background: ColourLike = DEFAULT_BACKGROUND,
    shadow_bias: float = DEFAULT_SHADOW_BIAS,
) -> None:
    """Set the background colour and shadow-ray bias used by kernels.

    Args:
        background: Colour returned for rays that hit nothing. Accepts a
            Colour, a 0xRRGGBB integer or an (r, g, b) tuple.
        shadow_bias: Non-negative offset of shadow-ray origins.

    Raises:
        ValueError: If the background is not a valid colour or the bias is
            negative or not finite.
    """
    colour = to_colour(background)
    if not math.isfinite(shadow_bias) or shadow_bias < 0.0:
        raise ValueError(f"Shadow bias must be non-negative and finite, got {shadow_bias}")
    _background[None] = list(colour.to_tuple())
    _shadow_bias[None] = shadow_bias


def get_background() -> tuple[float, float, float]:
    """Get the configured background colour as an (r, g, b) tuple."""
    v = _background[None]
    return (float(v[0]), float(v[1]), float(v[2]))


# =============================================================================
# Render Target (Frame Buffers)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_columns = ti.field(dtype=ti.i32, shape=())
_image_rows = ti.field(dtype=ti.i32, shape=())

# Unbounded radiance per pixel (phase 1 output)
_intensity_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Display colour per pixel in [0, 1] (phase 2 output)
_colour_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(columns: int, rows: int) -> None:
    """Set the active image dimensions and clear the buffers.

    Args:
        columns: Image width in pixels (max MAX_IMAGE_WIDTH).
        rows: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum.
    """
    if columns <= 0 or rows <= 0:
        raise ValueError(f"Image dimensions must be positive, got {columns}x{rows}")
    if columns > MAX_IMAGE_WIDTH or rows > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({columns}x{rows}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_columns[None] = columns
    _image_rows[None] = rows
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear both frame buffers to zero."""
    _intensity_buffer.fill(0.0)
    _colour_buffer.fill(0.0)


def reset_render_target() -> None:
    """Clear the buffers and mark the render target as not set up."""
    clear_render_target()
    _render_target_initialized[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the active render target dimensions.

    Returns:
        Tuple of (columns, rows).
    """
    return int(_image_columns[None]), int(_image_rows[None])


def _check_ready() -> None:
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")
    if not is_camera_ready():
        raise RuntimeError("Camera not set up. Call setup_camera() first.")


# =============================================================================
# Tracing
# =============================================================================


@ti.func
def trace(ray: Ray) -> vec3:
    """Compute the radiance arriving along a primary ray.

    Args:
        ray: The primary ray.

    Returns:
        Shaded radiance at the nearest hit, or the background colour as an
        intensity when nothing is hit.
    """
    radiance = _background[None]
    record = intersect_scene(ray)
    if record.hit == 1:
        point = ray_at(ray, record.t)
        normal = object_normal(record.object_index, point)
        colour = object_colour(record.object_index)
        radiance = shade(point, normal, colour, _shadow_bias[None])
    return radiance


@ti.kernel
def _trace_rows(columns: ti.i32, start_row: ti.i32, end_row: ti.i32):
    """Trace every pixel in rows [start_row, end_row) into the intensity buffer."""
    for col, row in ti.ndrange(columns, (start_row, end_row)):
        _intensity_buffer[col, row] = trace(primary_ray(col, row))


@ti.kernel
def _trace_single_pixel(col: ti.i32, row: ti.i32) -> vec3:
    return trace(primary_ray(col, row))


def render_intensity(start_row: int = 0, end_row: int | None = None) -> None:
    """Trace a band of rows into the intensity buffer.

    Args:
        start_row: First row to trace (inclusive).
        end_row: Last row to trace (exclusive). Defaults to all rows.

    Raises:
        RuntimeError: If the render target or camera has not been set up.
        ValueError: If the row range is outside the image.
    """
    _check_ready()

    columns, rows = get_image_dimensions()
    if end_row is None:
        end_row = rows
    if not 0 <= start_row <= end_row <= rows:
        raise ValueError(f"Row range [{start_row}, {end_row}) outside image of {rows} rows")

    if end_row > start_row:
        _trace_rows(columns, start_row, end_row)


def render_pixel(col: int, row: int) -> tuple[float, float, float]:
    """Trace a single pixel and return its radiance without storing it.

    Intended for testing and debugging; render_intensity() traces whole
    frames in parallel.

    Returns:
        Tuple of (R, G, B) radiance.

    Raises:
        RuntimeError: If the render target or camera has not been set up.
        ValueError: If the pixel is outside the image.
    """
    _check_ready()

    columns, rows = get_image_dimensions()
    if not (0 <= col < columns and 0 <= row < rows):
        raise ValueError(f"Pixel ({col}, {row}) outside image of {columns}x{rows}")

    radiance = _trace_single_pixel(col, row)
    return (float(radiance[0]), float(radiance[1]), float(radiance[2]))


def tone_map_render_target() -> float:
    """Normalise the whole intensity buffer into the colour buffer.

    Must run after every row has been traced.

    Returns:
        The max_intensity the frame was normalised by (0.0 for a dark frame).

    Raises:
        RuntimeError: If the render target has not been set up.
    """
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")

    columns, rows = get_image_dimensions()
    return tone_map_field(_intensity_buffer, _colour_buffer, columns, rows)


# =============================================================================
# Buffer Read-back
# =============================================================================


def _active_region(buffer: "ti.MatrixField") -> npt.NDArray[np.float32]:
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")

    columns, rows = get_image_dimensions()
    full = buffer.to_numpy()
    # (columns, rows, 3) -> row-major (rows, columns, 3)
    image = np.transpose(full[:columns, :rows, :], (1, 0, 2))
    return np.ascontiguousarray(image).astype(np.float32)


def get_intensity_numpy() -> npt.NDArray[np.float32]:
    """Get the raw radiance buffer as a row-major (rows, columns, 3) array."""
    return _active_region(_intensity_buffer)


def get_colour_numpy() -> npt.NDArray[np.float32]:
    """Get the tone-mapped colour buffer as a row-major (rows, columns, 3) array."""
    return _active_region(_colour_buffer)
