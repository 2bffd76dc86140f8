"""Scene module for scene management and ray-scene queries.

Components:
    intersection: Ordered object table, nearest-hit traversal, occlusion
    lights: Point and distant lights
    manager: Scene manager coordinating objects and lights
    presets: Ready-made scenes

Scene data is organized for efficient GPU access:
    - Structure-of-Arrays layout for geometric data
    - A closed set of object and light kinds dispatched by integer tag
    - Scene order preserved, so exact distance ties resolve to the first object
"""

from .intersection import (
    MAX_OBJECTS,
    ObjectKind,
    SceneHitRecord,
    add_sphere,
    add_xz_plane,
    clear_scene,
    get_object_count,
    get_plane_count,
    get_sphere_count,
    intersect_scene,
    is_occluded,
)
from .lights import (
    MAX_LIGHTS,
    DistantLight,
    Light,
    LightKind,
    PointLight,
    add_light,
    clear_lights,
    get_light_count,
)
from .manager import PlaneInfo, SceneConfig, SceneManager, SphereInfo
from .presets import PRESETS, create_scene, one_sphere, one_sphere_two_lights

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "ObjectKind",
    "add_sphere",
    "add_xz_plane",
    "clear_scene",
    "get_object_count",
    "get_sphere_count",
    "get_plane_count",
    "intersect_scene",
    "is_occluded",
    "MAX_OBJECTS",
    # Lights module
    "PointLight",
    "DistantLight",
    "Light",
    "LightKind",
    "add_light",
    "clear_lights",
    "get_light_count",
    "MAX_LIGHTS",
    # Manager module
    "SceneManager",
    "SphereInfo",
    "PlaneInfo",
    "SceneConfig",
    # Presets module
    "PRESETS",
    "create_scene",
    "one_sphere",
    "one_sphere_two_lights",
]
