"""Global linear tone mapping from unbounded radiance to display colour.

Tone mapping is a two-phase pass that can only start once every pixel's
radiance is known:

1. Reduce: find the largest value over every channel of every pixel
   (``max_intensity``).
2. Map: divide every channel of every pixel by ``max_intensity``.

Because the divisor is the true maximum, every output channel lands in
[0, 1]. A frame whose maximum is exactly zero (empty or completely dark)
maps to all-black instead of dividing by zero.

This is a scene-wide linear rescale, not a per-pixel or logarithmic curve.

Example:
    >>> import numpy as np
    >>> from src.tracer.core.tone_mapping import tone_map_numpy
    >>> colours, max_intensity = tone_map_numpy(np.array([[[2, 0, 0], [1, 0, 0]]]))
    >>> max_intensity
    2.0
    >>> colours[0, 1]
    array([0.5, 0. , 0. ], dtype=float32)
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Scratch value for the max reduction
_frame_max = ti.field(dtype=ti.f32, shape=())


@ti.kernel
def _reduce_max(buffer: ti.template(), columns: ti.i32, rows: ti.i32):
    for col, row in ti.ndrange(columns, rows):
        value = buffer[col, row]
        ti.atomic_max(_frame_max[None], ti.max(value[0], value[1], value[2]))


def find_max_intensity(buffer: "ti.MatrixField", columns: int, rows: int) -> float:
    """Find the largest channel value over the active region of a buffer.

    Args:
        buffer: A 2D vec3 field indexed [col, row] holding non-negative radiance.
        columns: Number of active columns.
        rows: Number of active rows.

    Returns:
        The maximum over all channels and pixels (0.0 for an empty region).
    """
    _frame_max[None] = 0.0
    _reduce_max(buffer, columns, rows)
    return float(_frame_max[None])


@ti.kernel
def normalise_buffer(
    source: ti.template(),
    target: ti.template(),
    columns: ti.i32,
    rows: ti.i32,
    max_intensity: ti.f32,
):
    """Divide every pixel of source by max_intensity into target.

    A zero max_intensity produces black.
    """
    for col, row in ti.ndrange(columns, rows):
        colour = vec3(0.0, 0.0, 0.0)
        if max_intensity > 0.0:
            colour = tm.clamp(source[col, row] / max_intensity, 0.0, 1.0)
        target[col, row] = colour


def tone_map_field(
    source: "ti.MatrixField", target: "ti.MatrixField", columns: int, rows: int
) -> float:
    """Run both tone-mapping phases from one field into another.

    Returns:
        The max_intensity the frame was normalised by.
    """
    max_intensity = find_max_intensity(source, columns, rows)
    normalise_buffer(source, target, columns, rows, max_intensity)
    return max_intensity


def tone_map_numpy(
    intensities: npt.ArrayLike,
) -> tuple[npt.NDArray[np.float32], float]:
    """Tone map a row-major radiance array.

    Runs in NumPy on buffers already read back from Taichi, so it allocates
    no fields and compiles no kernels.

    Args:
        intensities: Array of shape (rows, columns, 3), non-negative.

    Returns:
        Tuple of (colours, max_intensity) where colours has the same shape
        with every channel in [0, 1].

    Raises:
        ValueError: If the array does not have shape (rows, columns, 3).
    """
    image = np.asarray(intensities, dtype=np.float32)
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an array of shape (rows, columns, 3), got {image.shape}")

    if image.size == 0:
        return np.zeros_like(image), 0.0

    max_intensity = float(image.max())
    if max_intensity <= 0.0:
        return np.zeros_like(image), 0.0

    colours = np.clip(image / np.float32(max_intensity), 0.0, 1.0)
    return colours.astype(np.float32), max_intensity
