"""Light sources: point lights and distant (directional) lights.

Lights are a closed tagged variant. Every light exposes, for a point P being
illuminated:

    direction_to(P): vector oriented from the light toward P
        point light   -> P - location (not normalised)
        distant light -> the light's fixed unit direction
    distance(P): how far the light is from P
        point light   -> |location - P|
        distant light -> +infinity

and a radiant intensity. Light data is stored in Taichi fields in
Structure-of-Arrays layout, indexed in insertion order.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tracer.scene.lights import DistantLight, add_light
    >>> from src.tracer.core.colour import Intensity
    >>> add_light(DistantLight(direction=(-2.0, -5.0, -2.0), intensity=Intensity(1, 1, 1)))
    0
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Union

import taichi as ti
import taichi.math as tm

from src.tracer.core.colour import Intensity, to_intensity
from src.tracer.core.errors import GeometryError
from src.tracer.core.vector import as_vec3, normalize_checked

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class LightKind(IntEnum):
    """Enumeration of supported light kinds, used for kernel dispatch."""

    POINT = 0
    DISTANT = 1


@dataclass(frozen=True)
class PointLight:
    """A light radiating from a single location.

    Attributes:
        location: Position of the light as (x, y, z).
        intensity: Radiant intensity of the light.

    Raises:
        GeometryError: If the location is not three finite numbers.
    """

    location: tuple[float, float, float]
    intensity: Intensity

    def __post_init__(self) -> None:
        try:
            loc = as_vec3(self.location, "point light location")
        except ValueError as e:
            raise GeometryError(str(e)) from e
        object.__setattr__(self, "location", (float(loc[0]), float(loc[1]), float(loc[2])))
        object.__setattr__(self, "intensity", to_intensity(self.intensity))


@dataclass(frozen=True)
class DistantLight:
    """A light infinitely far away, shining along a fixed direction.

    The direction is normalised on construction.

    Attributes:
        direction: Direction the light travels, from the light toward the scene.
        intensity: Radiant intensity of the light.

    Raises:
        GeometryError: If the direction is not three finite numbers.
        DegenerateVectorError: If the direction has zero length.
    """

    direction: tuple[float, float, float]
    intensity: Intensity

    def __post_init__(self) -> None:
        try:
            as_vec3(self.direction, "distant light direction")
        except ValueError as e:
            raise GeometryError(str(e)) from e
        unit = normalize_checked(self.direction, "distant light direction")
        object.__setattr__(self, "direction", (float(unit[0]), float(unit[1]), float(unit[2])))
        object.__setattr__(self, "intensity", to_intensity(self.intensity))


Light = Union[PointLight, DistantLight]


# Maximum number of lights supported in the scene
MAX_LIGHTS = 64

light_kinds = ti.field(dtype=ti.i32, shape=MAX_LIGHTS)
# Location for point lights, unit direction for distant lights
light_vectors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_intensities = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_lights() -> None:
    """Remove all lights from the scene."""
    num_lights[None] = 0


def add_light(light: Light) -> int:
    """Add a light to the scene.

    Args:
        light: A PointLight or DistantLight.

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
        TypeError: If the object is not a supported light.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")

    if isinstance(light, PointLight):
        light_kinds[idx] = int(LightKind.POINT)
        light_vectors[idx] = list(light.location)
    elif isinstance(light, DistantLight):
        light_kinds[idx] = int(LightKind.DISTANT)
        light_vectors[idx] = list(light.direction)
    else:
        raise TypeError(f"Unsupported light type: {type(light).__name__}")

    light_intensities[idx] = list(light.intensity.to_tuple())
    num_lights[None] = idx + 1
    return idx


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


@ti.func
def light_direction_to(index: ti.i32, point: vec3) -> vec3:
    """Vector from a light toward a point (not normalised for point lights)."""
    result = light_vectors[index]
    if light_kinds[index] == int(LightKind.POINT):
        result = point - light_vectors[index]
    return result


@ti.func
def light_distance(index: ti.i32, point: vec3) -> ti.f32:
    """Distance from a point to a light; infinite for distant lights."""
    result = tm.inf
    if light_kinds[index] == int(LightKind.POINT):
        result = tm.length(light_vectors[index] - point)
    return result


@ti.func
def light_intensity(index: ti.i32) -> vec3:
    """Radiant intensity of a light."""
    return light_intensities[index]
