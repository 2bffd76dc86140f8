"""Direct-illumination shading with shadow rays.

For a surface point P with unit normal N and surface colour S, every light
in the scene is tested with one shadow ray:

    shadow direction = -normalize(light.direction_to(P))
    occluded         = some object is hit at 0 <= d < light.distance(P)

Every unoccluded light adds

    light.intensity * S * max(0, dot(N, shadow direction))

to the point's radiance. The cosine term is clamped at zero, so a light
behind the surface (as seen from the normal) contributes nothing instead of
negative radiance. With no light reaching the point the result is exactly
zero.

The shadow ray starts ``bias`` units off the surface along the normal so the
surface does not shadow itself through floating-point error at P.
"""

import taichi as ti
import taichi.math as tm

from src.tracer.core.ray import make_ray, offset_origin
from src.tracer.scene.intersection import is_occluded
from src.tracer.scene.lights import (
    light_direction_to,
    light_distance,
    light_intensity,
    num_lights,
)

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.func
def shade(point: vec3, normal: vec3, surface_colour: vec3, bias: ti.f32) -> vec3:
    """Accumulate the radiance reaching a surface point from all lights.

    Args:
        point: The point on the surface.
        normal: The unit surface normal at the point.
        surface_colour: The surface colour at the point (RGB in [0, 1]).
        bias: Shadow-ray origin offset along the normal.

    Returns:
        The unbounded radiance (RGB, each channel >= 0).
    """
    radiance = vec3(0.0, 0.0, 0.0)

    for i in range(num_lights[None]):
        toward_light = -tm.normalize(light_direction_to(i, point))
        origin = offset_origin(point, normal, toward_light, bias)
        shadow_ray = make_ray(origin, toward_light)

        if is_occluded(shadow_ray, light_distance(i, point)) == 0:
            cos_incidence = ti.max(tm.dot(normal, shadow_ray.direction), 0.0)
            radiance += light_intensity(i) * surface_colour * cos_incidence

    return radiance
