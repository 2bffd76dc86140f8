"""Pytest configuration for ray tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene, light, camera and render target state around each test.

    This ensures tests are isolated from each other.
    """
    # Import here so module-level fields are created after ti.init()
    from src.tracer.camera.viewport import reset_camera
    from src.tracer.core.integrator import configure_shading, reset_render_target
    from src.tracer.scene.intersection import clear_scene
    from src.tracer.scene.lights import clear_lights

    def _clear_all():
        clear_scene()
        clear_lights()
        reset_camera()
        reset_render_target()
        configure_shading()

    # Clear everything before test
    _clear_all()

    yield

    # Clear everything after test
    _clear_all()


@pytest.fixture
def default_camera():
    """Upload the default 200x200 camera and a matching render target."""
    from src.tracer.camera.viewport import CameraConfig, setup_camera
    from src.tracer.core.integrator import setup_render_target

    camera = setup_camera(CameraConfig())
    setup_render_target(camera.columns, camera.rows)
    return camera
