"""Exceptions raised while building a scene or camera.

All of these are raised from Python scope before any kernel runs. Taichi
kernels never raise: by the time a render starts, every vector that will
be normalised and every primitive that will be intersected has already been
validated here.
"""


class DegenerateVectorError(ValueError):
    """Raised when a zero-length vector would have to be normalised."""


class GeometryError(ValueError):
    """Raised for malformed geometry or camera configuration.

    Examples are a non-positive sphere radius, inverted plane bounds, a
    non-positive viewport width, or non-finite coordinates.
    """
