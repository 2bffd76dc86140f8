"""Preset scenes.

Each preset is a factory that builds a fresh SceneManager and returns it
together with the CameraConfig it is meant to be viewed with. Both presets
use the default camera: at the origin, looking down -z, viewport one unit
away and two units wide.

Available presets:
- one_sphere: a green sphere resting over a small white floor tile, lit by
  one distant light from above and to the left
- one_sphere_two_lights: a white sphere lit by a dim red distant light from
  above and a white distant light from the right

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tracer.scene.presets import create_scene
    >>> scene, camera = create_scene("one_sphere")
    >>> scene.get_object_count()
    2
"""

from collections.abc import Callable

from src.tracer.camera.viewport import CameraConfig
from src.tracer.core.colour import WHITE, Colour
from src.tracer.scene.manager import SceneManager

# =============================================================================
# Preset Parameters
# =============================================================================

SPHERE_GREEN = Colour.from_24bit_int(0xA0F0A0)

# one_sphere
ONE_SPHERE_CENTRE = (0.0, 0.0, -3.0)
ONE_SPHERE_RADIUS = 1.0
FLOOR_HEIGHT = -1.0
FLOOR_X_BOUNDS = (-1.0, 1.0)
FLOOR_Z_BOUNDS = (-4.0, -2.0)
ONE_SPHERE_LIGHT_DIRECTION = (-2.0, -5.0, -2.0)

# one_sphere_two_lights
TWO_LIGHTS_SPHERE_CENTRE = (0.0, 0.0, -2.0)
RED_LIGHT_DIRECTION = (-1.0, -5.0, -1.0)
RED_LIGHT_INTENSITY = (1.0, 0.1, 0.1)
WHITE_LIGHT_DIRECTION = (2.0, -2.0, -2.0)
WHITE_LIGHT_INTENSITY = (1.0, 1.0, 1.0)


def one_sphere(camera: CameraConfig | None = None) -> tuple[SceneManager, CameraConfig]:
    """Create the single sphere scene.

    Args:
        camera: Camera configuration to pair with the scene. Defaults to
            CameraConfig().

    Returns:
        Tuple of (SceneManager, CameraConfig).
    """
    scene = SceneManager()
    scene.add_sphere(ONE_SPHERE_CENTRE, ONE_SPHERE_RADIUS, colour=SPHERE_GREEN)
    scene.add_xz_plane(
        FLOOR_HEIGHT,
        FLOOR_X_BOUNDS[0],
        FLOOR_X_BOUNDS[1],
        FLOOR_Z_BOUNDS[0],
        FLOOR_Z_BOUNDS[1],
        colour=WHITE,
    )
    scene.add_distant_light(ONE_SPHERE_LIGHT_DIRECTION, intensity=WHITE_LIGHT_INTENSITY)
    return scene, camera if camera is not None else CameraConfig()


def one_sphere_two_lights(
    camera: CameraConfig | None = None,
) -> tuple[SceneManager, CameraConfig]:
    """Create the sphere lit by two coloured distant lights.

    Args:
        camera: Camera configuration to pair with the scene. Defaults to
            CameraConfig().

    Returns:
        Tuple of (SceneManager, CameraConfig).
    """
    scene = SceneManager()
    scene.add_sphere(TWO_LIGHTS_SPHERE_CENTRE, 1.0, colour=WHITE)
    scene.add_distant_light(RED_LIGHT_DIRECTION, intensity=RED_LIGHT_INTENSITY)
    scene.add_distant_light(WHITE_LIGHT_DIRECTION, intensity=WHITE_LIGHT_INTENSITY)
    return scene, camera if camera is not None else CameraConfig()


PRESETS: dict[str, Callable[..., tuple[SceneManager, CameraConfig]]] = {
    "one_sphere": one_sphere,
    "one_sphere_two_lights": one_sphere_two_lights,
}


def create_scene(
    name: str, camera: CameraConfig | None = None
) -> tuple[SceneManager, CameraConfig]:
    """Build a preset scene by name.

    Raises:
        ValueError: If no preset has that name.
    """
    try:
        factory = PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown scene preset: {name!r}. Available: {', '.join(sorted(PRESETS))}"
        ) from None
    return factory(camera)
