"""Camera module for primary ray generation.

Components:
    viewport: Flat-viewport camera mapping pixel (col, row) to a primary ray

Camera responsibilities:
    - Hold the recognised configuration options (location, direction,
      viewport distance, viewport width, columns, rows)
    - Derive pixel size and the top-left pixel centre once
    - Generate one primary ray per pixel centre, inside Taichi kernels

Pixel coordinates:
    col in [0, columns): left to right
    row in [0, rows): top to bottom
"""

from .viewport import (
    Camera,
    CameraConfig,
    build_camera,
    get_camera_info,
    is_camera_ready,
    primary_ray,
    primary_ray_direction,
    reset_camera,
    setup_camera,
)

__all__ = [
    "Camera",
    "CameraConfig",
    "build_camera",
    "setup_camera",
    "reset_camera",
    "is_camera_ready",
    "primary_ray",
    "primary_ray_direction",
    "get_camera_info",
]
