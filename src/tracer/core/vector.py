"""Vector algebra for the ray tracer.

Two flavours of the same operations are provided:

- Taichi functions (``@ti.func``) used inside kernels on the hot path:
  ``dot``, ``magnitude``, ``normalize`` and ``scale``. Componentwise
  add/subtract/negate are the native ``vec3`` operators.
- Python-scope helpers built on NumPy, used while validating scene and
  camera configuration: ``as_vec3`` and ``normalize_checked``.

Kernel code cannot raise, so every direction that reaches a kernel is
normalised (or rejected) in Python scope first. ``normalize_checked``
raises ``DegenerateVectorError`` instead of letting a NaN escape.

Example:
    >>> from src.tracer.core.vector import normalize_checked
    >>> normalize_checked((0.0, 3.0, 4.0))
    array([0. , 0.6, 0.8])
"""

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.tracer.core.errors import DegenerateVectorError

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


# =============================================================================
# Kernel-scope operations
# =============================================================================


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product of two vectors."""
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def magnitude(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector: sqrt(dot(v, v))."""
    return ti.sqrt(dot(v, v))


@ti.func
def normalize(v: vec3) -> vec3:
    """Scale a vector to unit length.

    Only defined for non-zero vectors. Callers are expected to have rejected
    zero-length inputs in Python scope (see ``normalize_checked``).

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v.
    """
    return v / magnitude(v)


@ti.func
def scale(v: vec3, s: ti.f32) -> vec3:
    """Multiply every component of a vector by a scalar."""
    return v * s


# =============================================================================
# Python-scope helpers
# =============================================================================


def as_vec3(value: Sequence[float], name: str = "vector") -> npt.NDArray[np.float64]:
    """Convert a 3-sequence to a NumPy vector, checking shape and finiteness.

    Args:
        value: Any sequence of three numbers.
        name: Name used in error messages.

    Returns:
        A float64 array of shape (3,).

    Raises:
        ValueError: If the value does not have exactly three finite components.
    """
    arr = np.asarray(value, dtype=np.float64)
    if arr.shape != (3,):
        raise ValueError(f"{name} must have 3 components, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{name} must be finite, got {tuple(arr.tolist())}")
    return arr


def normalize_checked(value: Sequence[float], name: str = "vector") -> npt.NDArray[np.float64]:
    """Normalise a vector in Python scope, refusing zero-length input.

    Args:
        value: Any sequence of three finite numbers.
        name: Name used in error messages.

    Returns:
        A unit-length float64 array of shape (3,).

    Raises:
        DegenerateVectorError: If the vector has zero magnitude.
        ValueError: If the value is not three finite numbers.
    """
    arr = as_vec3(value, name)
    length = float(np.sqrt(np.dot(arr, arr)))
    if length == 0.0:
        raise DegenerateVectorError(f"Cannot normalise zero-length {name}")
    return arr / length
