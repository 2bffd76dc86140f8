"""Unit tests for the preset scenes.

Tests cover:
- Object and light contents of each preset
- Lookup by name
- The sphere-over-floor render: floor visible beneath the sphere
"""

import math

import numpy as np
import pytest


class TestPresetContents:
    """Tests for the preset factories."""

    def test_one_sphere(self):
        """Test the sphere, floor tile and single distant light."""
        from src.tracer.camera.viewport import CameraConfig
        from src.tracer.core.colour import Colour
        from src.tracer.scene.lights import DistantLight
        from src.tracer.scene.presets import one_sphere

        scene, camera = one_sphere()
        assert camera == CameraConfig()
        assert scene.get_sphere_count() == 1
        assert scene.get_plane_count() == 1
        assert scene.get_light_count() == 1

        sphere, floor = scene.objects
        assert sphere.centre == (0.0, 0.0, -3.0)
        assert sphere.colour == Colour.from_24bit_int(0xA0F0A0)
        assert (floor.y, floor.x_min, floor.x_max, floor.z_min, floor.z_max) == (
            -1.0,
            -1.0,
            1.0,
            -4.0,
            -2.0,
        )
        assert isinstance(scene.lights[0], DistantLight)

    def test_one_sphere_two_lights(self):
        """Test the white sphere with a red and a white distant light."""
        from src.tracer.core.colour import Intensity
        from src.tracer.scene.presets import one_sphere_two_lights

        scene, _ = one_sphere_two_lights()
        assert scene.get_object_count() == 1
        assert scene.objects[0].centre == (0.0, 0.0, -2.0)
        assert [light.intensity for light in scene.lights] == [
            Intensity(1.0, 0.1, 0.1),
            Intensity(1.0, 1.0, 1.0),
        ]

    def test_custom_camera_passed_through(self):
        """Test that a supplied camera is returned unchanged."""
        from src.tracer.camera.viewport import CameraConfig
        from src.tracer.scene.presets import one_sphere

        custom = CameraConfig(columns=64, rows=48)
        _, camera = one_sphere(custom)
        assert camera is custom


class TestCreateScene:
    """Tests for create_scene."""

    @pytest.mark.parametrize("name", ["one_sphere", "one_sphere_two_lights"])
    def test_known_presets(self, name):
        """Test that every registered preset can be built by name."""
        from src.tracer.scene.presets import create_scene

        scene, _ = create_scene(name)
        assert scene.get_object_count() >= 1
        assert scene.get_light_count() >= 1

    def test_unknown_preset(self):
        """Test that an unknown name raises ValueError listing the presets."""
        from src.tracer.scene.presets import create_scene

        with pytest.raises(ValueError, match="one_sphere"):
            create_scene("cornell")


class TestPresetRender:
    """Render checks for the preset scenes."""

    def test_floor_visible_below_sphere(self):
        """Test that the floor tile shows beneath the sphere, lit and white."""
        from src.tracer.camera.viewport import CameraConfig
        from src.tracer.core.renderer import Renderer
        from src.tracer.scene.presets import one_sphere

        scene, camera = one_sphere(CameraConfig(columns=100, rows=100))
        renderer = Renderer(scene, camera)
        renderer.render()
        intensity = renderer.get_intensity_numpy()

        # Row 72 meets the floor near z=-2.22, in front of the sphere's shadow
        cos_incidence = 5.0 / math.sqrt(33.0)
        assert np.allclose(intensity[72, 50], cos_incidence, atol=1e-4)

        # The sphere's green tint: green above red and blue at the centre
        centre = intensity[50, 50]
        assert centre[1] > centre[0]
        assert centre[0] == pytest.approx(centre[2], abs=1e-6)
        assert np.all(centre > 0.0)
