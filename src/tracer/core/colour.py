"""Display colours and unbounded light intensities.

Two value types carry RGB triples through the renderer:

- ``Colour``: a display-ready colour, each channel in [0, 1]. Surface
  colours and the background are Colours, as is every pixel of the final
  tone-mapped frame.
- ``Intensity``: accumulated radiance, each channel >= 0 with no upper
  bound. Light sources emit Intensities and the shading engine sums them.

Inside kernels both are plain ``vec3`` values; these classes exist for
configuration and validation in Python scope.

Example:
    >>> from src.tracer.core.colour import Colour, Intensity
    >>> green = Colour.from_24bit_int(0xA0F0A0)
    >>> Intensity(1.0, 1.0, 1.0) * green * 0.5
    Intensity(r=0.3137..., g=0.4705..., b=0.3137...)
"""

import math
from dataclasses import dataclass
from typing import Union


def _check_channels(name: str, r: float, g: float, b: float, upper: float) -> None:
    for label, value in (("r", r), ("g", g), ("b", b)):
        if not math.isfinite(value) or value < 0.0 or value > upper:
            bound = "[0, 1]" if upper == 1.0 else ">= 0"
            raise ValueError(f"{name} channel {label}={value} must be {bound}")


@dataclass(frozen=True)
class Colour:
    """An RGB display colour with channels in [0, 1].

    Attributes:
        r: Red channel.
        g: Green channel.
        b: Blue channel.
    """

    r: float
    g: float
    b: float

    def __post_init__(self) -> None:
        _check_channels("Colour", self.r, self.g, self.b, 1.0)

    @classmethod
    def from_24bit_int(cls, value: int) -> "Colour":
        """Create a colour from a packed 0xRRGGBB integer.

        Args:
            value: Integer in [0, 0xFFFFFF].

        Returns:
            The colour with each 8-bit channel scaled to [0, 1].

        Raises:
            ValueError: If the value is outside the 24-bit range.
        """
        if not 0 <= value <= 0xFFFFFF:
            raise ValueError(f"Colour value {value:#x} is not a 24-bit RGB integer")
        red = (value & 0xFF0000) >> 16
        green = (value & 0x00FF00) >> 8
        blue = value & 0x0000FF
        return cls(red / 255.0, green / 255.0, blue / 255.0)

    def to_24bit_int(self) -> int:
        """Pack the colour into a 0xRRGGBB integer (rounding each channel)."""
        red, green, blue = (int(round(c * 255.0)) for c in self.to_tuple())
        return (red << 16) | (green << 8) | blue

    def to_tuple(self) -> tuple[float, float, float]:
        """Return the channels as an (r, g, b) tuple."""
        return (self.r, self.g, self.b)


BLACK = Colour(0.0, 0.0, 0.0)
WHITE = Colour(1.0, 1.0, 1.0)


@dataclass(frozen=True)
class Intensity:
    """Unbounded RGB radiance, each channel non-negative.

    Supports ``+`` with another Intensity and ``*`` with a Colour, an
    Intensity (elementwise) or a non-negative scalar.
    """

    r: float
    g: float
    b: float

    def __post_init__(self) -> None:
        _check_channels("Intensity", self.r, self.g, self.b, math.inf)

    @classmethod
    def from_colour(cls, colour: Colour) -> "Intensity":
        """Convert a colour to an intensity with identity weighting."""
        return cls(colour.r, colour.g, colour.b)

    def to_tuple(self) -> tuple[float, float, float]:
        """Return the channels as an (r, g, b) tuple."""
        return (self.r, self.g, self.b)

    def __add__(self, other: "Intensity") -> "Intensity":
        if not isinstance(other, Intensity):
            return NotImplemented
        return Intensity(self.r + other.r, self.g + other.g, self.b + other.b)

    def __mul__(self, other: Union["Intensity", Colour, float]) -> "Intensity":
        if isinstance(other, (Intensity, Colour)):
            return Intensity(self.r * other.r, self.g * other.g, self.b * other.b)
        if isinstance(other, (int, float)):
            return Intensity(self.r * other, self.g * other, self.b * other)
        return NotImplemented

    __rmul__ = __mul__


ColourLike = Union[Colour, int, tuple[float, float, float]]


def to_colour(value: ColourLike) -> Colour:
    """Coerce a Colour, a 0xRRGGBB integer or an (r, g, b) tuple to a Colour."""
    if isinstance(value, Colour):
        return value
    if isinstance(value, int):
        return Colour.from_24bit_int(value)
    r, g, b = value
    return Colour(float(r), float(g), float(b))


def to_intensity(value: Union[Intensity, tuple[float, float, float]]) -> Intensity:
    """Coerce an Intensity or an (r, g, b) tuple to an Intensity."""
    if isinstance(value, Intensity):
        return value
    r, g, b = value
    return Intensity(float(r), float(g), float(b))
