"""Python implementation of the Taichi-based direct-illumination ray tracer.

This package provides GPU-accelerated ray tracing using Taichi, with support for:
- Spheres and bounded planes parallel to the XZ plane
- Point and distant lights with hard shadows
- Global linear tone mapping of the whole frame

Subpackages:
    core: Vectors, rays, colours, shading, tone mapping and the render loop
    geometry: Shape primitives and intersection algorithms
    scene: Scene management, lights and preset scenes
    camera: Viewport camera with primary ray generation
    preview: Image export and preview utilities
"""

__version__ = "0.1.0"
