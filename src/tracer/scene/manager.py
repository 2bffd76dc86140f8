"""Scene manager for building and serializing scenes.

This module provides a high-level scene API that coordinates object storage
(spheres, bounded XZ planes) with light storage. Objects and lights keep
the order they were added in; object order decides which object wins an
exact tie in nearest-hit traversal.

The SceneManager maintains:
- Ordered Python-side records of every object and light
- The matching Taichi field storage, uploaded as objects are added
- Scene serialization/configuration support

All geometry is validated when it is added, so a malformed scene fails
before any ray is traced.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tracer.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> scene.add_sphere(centre=(0, 0, -3), radius=1.0, colour=0xA0F0A0)
    0
    >>> scene.add_distant_light(direction=(-2, -5, -2), intensity=(1, 1, 1))
    0
"""

from dataclasses import dataclass, field
from typing import Any, Union

from src.tracer.core.colour import Colour, ColourLike, Intensity, to_colour
from src.tracer.scene.intersection import (
    MAX_OBJECTS,
    add_sphere,
    add_xz_plane,
    clear_scene,
)
from src.tracer.scene.lights import (
    MAX_LIGHTS,
    DistantLight,
    Light,
    PointLight,
    add_light,
    clear_lights,
)


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        object_index: Position of the sphere in scene order.
        centre: The centre of the sphere.
        radius: The radius of the sphere.
        colour: The surface colour.
    """

    object_index: int
    centre: tuple[float, float, float]
    radius: float
    colour: Colour


@dataclass
class PlaneInfo:
    """Information about a bounded XZ plane in the scene.

    Attributes:
        object_index: Position of the plane in scene order.
        y: Height of the plane.
        x_min: Lower x bound.
        x_max: Upper x bound.
        z_min: Lower z bound.
        z_max: Upper z bound.
        colour: The surface colour.
    """

    object_index: int
    y: float
    x_min: float
    x_max: float
    z_min: float
    z_max: float
    colour: Colour


ObjectInfo = Union[SphereInfo, PlaneInfo]


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        objects: Ordered list of object configurations.
        lights: Ordered list of light configurations.
    """

    objects: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)


def _float_tuple(values: Any) -> tuple[float, float, float]:
    x, y, z = values
    return (float(x), float(y), float(z))


class SceneManager:
    """Scene container coordinating objects and lights.

    Adding an object or light validates it and uploads it to the Taichi
    fields the kernels read. Creating a SceneManager clears those fields,
    so only one scene is live at a time.

    Attributes:
        objects: Ordered list of SphereInfo / PlaneInfo records.
        lights: Ordered list of PointLight / DistantLight values.

    Example:
        >>> scene = SceneManager()
        >>> scene.add_sphere((0, 0, -3), 1.0, colour=0xA0F0A0)
        >>> scene.add_xz_plane(-1.0, -1.0, 1.0, -4.0, -2.0, colour=0xFFFFFF)
        >>> scene.add_point_light((0, 3, -3), intensity=(1, 1, 1))
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.objects: list[ObjectInfo] = []
        self.lights: list[Light] = []
        self._clear_all()

    def _clear_all(self) -> None:
        clear_scene()
        clear_lights()
        self.objects.clear()
        self.lights.clear()

    def clear(self) -> None:
        """Clear the entire scene (objects and lights).

        Resets all Taichi fields and internal tracking structures.
        """
        self._clear_all()

    # =========================================================================
    # Object Management
    # =========================================================================

    def add_sphere(
        self,
        centre: tuple[float, float, float],
        radius: float,
        colour: ColourLike,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            centre: The centre of the sphere.
            radius: The radius of the sphere (> 0).
            colour: Surface colour as a Colour, 0xRRGGBB integer or tuple.

        Returns:
            The object index of the sphere.

        Raises:
            GeometryError: If the radius is not positive or a value is not finite.
            RuntimeError: If the maximum number of objects is exceeded.
            ValueError: If the colour is invalid.
        """
        surface = to_colour(colour)
        centre = _float_tuple(centre)
        object_index = add_sphere(centre, float(radius), surface.to_tuple())
        self.objects.append(
            SphereInfo(
                object_index=object_index,
                centre=centre,
                radius=float(radius),
                colour=surface,
            )
        )
        return object_index

    def add_xz_plane(
        self,
        y: float,
        x_min: float,
        x_max: float,
        z_min: float,
        z_max: float,
        colour: ColourLike,
    ) -> int:
        """Add a bounded plane at height y, spanning x_min..x_max and z_min..z_max.

        Returns:
            The object index of the plane.

        Raises:
            GeometryError: If the bounds are inverted or a value is not finite.
            RuntimeError: If the maximum number of objects is exceeded.
            ValueError: If the colour is invalid.
        """
        surface = to_colour(colour)
        values = (float(y), float(x_min), float(x_max), float(z_min), float(z_max))
        object_index = add_xz_plane(*values, surface.to_tuple())
        self.objects.append(PlaneInfo(object_index, *values, colour=surface))
        return object_index

    # =========================================================================
    # Light Management
    # =========================================================================

    def add_light(self, light: Light) -> int:
        """Add an already constructed light to the scene.

        Returns:
            The index of the light.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
            TypeError: If the object is not a supported light.
        """
        index = add_light(light)
        self.lights.append(light)
        return index

    def add_point_light(
        self,
        location: tuple[float, float, float],
        intensity: Union[Intensity, tuple[float, float, float]],
    ) -> int:
        """Add a point light at a location."""
        return self.add_light(PointLight(location=location, intensity=intensity))

    def add_distant_light(
        self,
        direction: tuple[float, float, float],
        intensity: Union[Intensity, tuple[float, float, float]],
    ) -> int:
        """Add a distant light shining along a direction.

        The direction need not be unit length; it is normalised.

        Raises:
            DegenerateVectorError: If the direction has zero length.
        """
        return self.add_light(DistantLight(direction=direction, intensity=intensity))

    # =========================================================================
    # Queries
    # =========================================================================

    def get_object_count(self) -> int:
        """Get the total number of objects."""
        return len(self.objects)

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return sum(1 for o in self.objects if isinstance(o, SphereInfo))

    def get_plane_count(self) -> int:
        """Get the number of planes in the scene."""
        return sum(1 for o in self.objects if isinstance(o, PlaneInfo))

    def get_light_count(self) -> int:
        """Get the number of lights in the scene."""
        return len(self.lights)

    def upload(self) -> None:
        """Re-upload this scene to the Taichi fields.

        Used when another scene has been built since this one.
        """
        clear_scene()
        clear_lights()
        for obj in self.objects:
            if isinstance(obj, SphereInfo):
                add_sphere(obj.centre, obj.radius, obj.colour.to_tuple())
            else:
                add_xz_plane(
                    obj.y, obj.x_min, obj.x_max, obj.z_min, obj.z_max, obj.colour.to_tuple()
                )
        for light in self.lights:
            add_light(light)

    # =========================================================================
    # Scene Configuration
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene as a configuration.

        Colours are exported as 0xRRGGBB integers.

        Returns:
            SceneConfig containing ordered objects and lights.
        """
        config = SceneConfig()

        for obj in self.objects:
            if isinstance(obj, SphereInfo):
                config.objects.append(
                    {
                        "type": "sphere",
                        "centre": list(obj.centre),
                        "radius": obj.radius,
                        "colour": obj.colour.to_24bit_int(),
                    }
                )
            else:
                config.objects.append(
                    {
                        "type": "xz_plane",
                        "y": obj.y,
                        "x_min": obj.x_min,
                        "x_max": obj.x_max,
                        "z_min": obj.z_min,
                        "z_max": obj.z_max,
                        "colour": obj.colour.to_24bit_int(),
                    }
                )

        for light in self.lights:
            if isinstance(light, PointLight):
                config.lights.append(
                    {
                        "type": "point",
                        "location": list(light.location),
                        "intensity": list(light.intensity.to_tuple()),
                    }
                )
            else:
                config.lights.append(
                    {
                        "type": "distant",
                        "direction": list(light.direction),
                        "intensity": list(light.intensity.to_tuple()),
                    }
                )

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Replace the scene with the contents of a configuration.

        Args:
            config: SceneConfig containing ordered objects and lights.

        Raises:
            ValueError: If an object or light type is unknown.
        """
        self.clear()

        for obj in config.objects:
            kind = obj.get("type")
            if kind == "sphere":
                self.add_sphere(
                    centre=_float_tuple(obj["centre"]),
                    radius=obj["radius"],
                    colour=_config_colour(obj["colour"]),
                )
            elif kind == "xz_plane":
                self.add_xz_plane(
                    y=obj["y"],
                    x_min=obj["x_min"],
                    x_max=obj["x_max"],
                    z_min=obj["z_min"],
                    z_max=obj["z_max"],
                    colour=_config_colour(obj["colour"]),
                )
            else:
                raise ValueError(f"Unknown object type: {kind}")

        for light in config.lights:
            kind = light.get("type")
            if kind == "point":
                self.add_point_light(
                    location=_float_tuple(light["location"]),
                    intensity=_float_tuple(light["intensity"]),
                )
            elif kind == "distant":
                self.add_distant_light(
                    direction=_float_tuple(light["direction"]),
                    intensity=_float_tuple(light["intensity"]),
                )
            else:
                raise ValueError(f"Unknown light type: {kind}")

    def to_dict(self) -> dict[str, Any]:
        """Export the scene as a dictionary.

        Returns:
            Dictionary with 'objects' and 'lights' keys.
        """
        config = self.to_config()
        return {"objects": config.objects, "lights": config.lights}

    def from_dict(self, data: dict[str, Any]) -> None:
        """Replace the scene with the contents of a dictionary.

        Args:
            data: Dictionary with 'objects' and 'lights' keys.
        """
        config = SceneConfig(
            objects=data.get("objects", []),
            lights=data.get("lights", []),
        )
        self.from_config(config)

    @staticmethod
    def get_max_objects() -> int:
        """Get the maximum number of objects supported."""
        return MAX_OBJECTS

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of lights supported."""
        return MAX_LIGHTS


def _config_colour(value: Any) -> ColourLike:
    # Lists from JSON round-trips become tuples
    if isinstance(value, (list, tuple)):
        return _float_tuple(value)
    return value

