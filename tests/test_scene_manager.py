"""Unit tests for the SceneManager.

Tests cover:
- Object addition (spheres, bounded planes) in scene order
- Light addition (point, distant)
- Validation of malformed geometry and colours
- Scene serialization (to_config, from_config, to_dict, from_dict)
- Scene clearing and re-uploading
"""

import pytest


@pytest.fixture
def fresh_scene():
    """Create a fresh SceneManager for each test."""
    from src.tracer.scene.manager import SceneManager

    scene = SceneManager()
    yield scene
    scene.clear()


@pytest.fixture
def populated_scene(fresh_scene):
    """A scene with a sphere, a plane and one light of each kind."""
    fresh_scene.add_sphere((0.0, 0.0, -3.0), 1.0, colour=0xA0F0A0)
    fresh_scene.add_xz_plane(-1.0, -1.0, 1.0, -4.0, -2.0, colour=0xFFFFFF)
    fresh_scene.add_point_light((0.0, 3.0, -3.0), intensity=(2.0, 2.0, 2.0))
    fresh_scene.add_distant_light((-2.0, -5.0, -2.0), intensity=(1.0, 0.1, 0.1))
    return fresh_scene


class TestObjects:
    """Tests for adding objects."""

    def test_objects_keep_insertion_order(self, fresh_scene):
        """Test that object indices follow the order objects are added."""
        assert fresh_scene.add_sphere((0.0, 0.0, -3.0), 1.0, colour=0xFF0000) == 0
        assert fresh_scene.add_xz_plane(-1.0, -1.0, 1.0, -4.0, -2.0, colour=0x00FF00) == 1
        assert fresh_scene.add_sphere((1.0, 0.0, -3.0), 0.5, colour=(0.0, 0.0, 1.0)) == 2

        assert fresh_scene.get_object_count() == 3
        assert fresh_scene.get_sphere_count() == 2
        assert fresh_scene.get_plane_count() == 1
        assert [o.object_index for o in fresh_scene.objects] == [0, 1, 2]

    def test_records_store_colour(self, fresh_scene):
        """Test that colours are stored as Colour values."""
        from src.tracer.core.colour import Colour
        from src.tracer.scene.manager import PlaneInfo, SphereInfo

        fresh_scene.add_sphere((0.0, 0.0, -3.0), 1.0, colour=0xA0F0A0)
        fresh_scene.add_xz_plane(-1.0, -1.0, 1.0, -4.0, -2.0, colour=(1.0, 1.0, 1.0))

        sphere, plane = fresh_scene.objects
        assert isinstance(sphere, SphereInfo)
        assert sphere.colour == Colour.from_24bit_int(0xA0F0A0)
        assert isinstance(plane, PlaneInfo)
        assert plane.colour == Colour(1.0, 1.0, 1.0)
        assert (plane.y, plane.x_min, plane.x_max, plane.z_min, plane.z_max) == (
            -1.0,
            -1.0,
            1.0,
            -4.0,
            -2.0,
        )

    def test_objects_uploaded_to_fields(self, fresh_scene):
        """Test that the Taichi-side counters track the scene."""
        from src.tracer.scene.intersection import get_object_count, get_plane_count

        fresh_scene.add_sphere((0.0, 0.0, -3.0), 1.0, colour=0xFFFFFF)
        fresh_scene.add_xz_plane(-1.0, -1.0, 1.0, -4.0, -2.0, colour=0xFFFFFF)
        assert get_object_count() == 2
        assert get_plane_count() == 1

    def test_invalid_sphere_radius(self, fresh_scene):
        """Test that non-positive radii are rejected and nothing is added."""
        from src.tracer.core.errors import GeometryError

        with pytest.raises(GeometryError):
            fresh_scene.add_sphere((0.0, 0.0, -3.0), 0.0, colour=0xFFFFFF)
        with pytest.raises(GeometryError):
            fresh_scene.add_sphere((0.0, 0.0, -3.0), -1.0, colour=0xFFFFFF)
        assert fresh_scene.get_object_count() == 0

    def test_inverted_plane_bounds(self, fresh_scene):
        """Test that inverted plane bounds are rejected."""
        from src.tracer.core.errors import GeometryError

        with pytest.raises(GeometryError, match="x bounds"):
            fresh_scene.add_xz_plane(-1.0, 1.0, -1.0, -4.0, -2.0, colour=0xFFFFFF)
        with pytest.raises(GeometryError, match="z bounds"):
            fresh_scene.add_xz_plane(-1.0, -1.0, 1.0, -2.0, -4.0, colour=0xFFFFFF)
        assert fresh_scene.get_object_count() == 0

    def test_invalid_colour(self, fresh_scene):
        """Test that colours outside [0, 1] or 24 bits are rejected."""
        with pytest.raises(ValueError):
            fresh_scene.add_sphere((0.0, 0.0, -3.0), 1.0, colour=(1.5, 0.0, 0.0))
        with pytest.raises(ValueError):
            fresh_scene.add_sphere((0.0, 0.0, -3.0), 1.0, colour=0x1000000)
        assert fresh_scene.get_object_count() == 0


class TestLights:
    """Tests for adding lights."""

    def test_add_lights(self, fresh_scene):
        """Test adding one light of each kind."""
        from src.tracer.scene.lights import DistantLight, PointLight, get_light_count

        assert fresh_scene.add_point_light((0.0, 3.0, 0.0), intensity=(1.0, 1.0, 1.0)) == 0
        assert fresh_scene.add_distant_light((0.0, -2.0, 0.0), intensity=(1.0, 1.0, 1.0)) == 1

        assert fresh_scene.get_light_count() == 2
        assert get_light_count() == 2
        assert isinstance(fresh_scene.lights[0], PointLight)
        assert isinstance(fresh_scene.lights[1], DistantLight)
        assert fresh_scene.lights[1].direction == pytest.approx((0.0, -1.0, 0.0))

    def test_add_constructed_light(self, fresh_scene):
        """Test add_light with a ready-made light value."""
        from src.tracer.core.colour import Intensity
        from src.tracer.scene.lights import PointLight

        light = PointLight((1.0, 2.0, 3.0), Intensity(0.5, 0.5, 0.5))
        assert fresh_scene.add_light(light) == 0
        assert fresh_scene.lights == [light]

    def test_zero_distant_direction(self, fresh_scene):
        """Test that a zero-length distant light direction is rejected."""
        from src.tracer.core.errors import DegenerateVectorError

        with pytest.raises(DegenerateVectorError):
            fresh_scene.add_distant_light((0.0, 0.0, 0.0), intensity=(1.0, 1.0, 1.0))
        assert fresh_scene.get_light_count() == 0

    def test_negative_intensity(self, fresh_scene):
        """Test that negative intensities are rejected."""
        with pytest.raises(ValueError):
            fresh_scene.add_point_light((0.0, 0.0, 0.0), intensity=(-1.0, 0.0, 0.0))


class TestSerialization:
    """Tests for scene configuration export and import."""

    def test_to_dict(self, populated_scene):
        """Test the exported dictionary layout."""
        data = populated_scene.to_dict()

        assert data["objects"][0] == {
            "type": "sphere",
            "centre": [0.0, 0.0, -3.0],
            "radius": 1.0,
            "colour": 0xA0F0A0,
        }
        assert data["objects"][1]["type"] == "xz_plane"
        assert data["objects"][1]["colour"] == 0xFFFFFF
        assert data["lights"][0] == {
            "type": "point",
            "location": [0.0, 3.0, -3.0],
            "intensity": [2.0, 2.0, 2.0],
        }
        assert data["lights"][1]["type"] == "distant"

    def test_dict_round_trip(self, populated_scene):
        """Test that from_dict rebuilds an equivalent scene."""
        from src.tracer.scene.manager import SceneManager

        data = populated_scene.to_dict()
        rebuilt = SceneManager()
        rebuilt.from_dict(data)

        assert rebuilt.objects == populated_scene.objects
        assert rebuilt.lights[0] == populated_scene.lights[0]
        assert rebuilt.lights[1].direction == pytest.approx(populated_scene.lights[1].direction)
        assert rebuilt.to_dict()["objects"] == data["objects"]

    def test_from_dict_with_list_colour(self, fresh_scene):
        """Test that colours given as lists are accepted."""
        fresh_scene.from_dict(
            {
                "objects": [
                    {"type": "sphere", "centre": [0, 0, -3], "radius": 1, "colour": [1, 0, 0]}
                ],
            }
        )
        assert fresh_scene.get_sphere_count() == 1
        assert fresh_scene.get_light_count() == 0
        assert fresh_scene.objects[0].colour.to_24bit_int() == 0xFF0000

    def test_from_config_replaces_scene(self, populated_scene):
        """Test that loading a configuration clears the previous contents."""
        from src.tracer.scene.manager import SceneConfig

        populated_scene.from_config(
            SceneConfig(lights=[{"type": "point", "location": [0, 1, 0], "intensity": [1, 1, 1]}])
        )
        assert populated_scene.get_object_count() == 0
        assert populated_scene.get_light_count() == 1

    def test_unknown_object_type(self, fresh_scene):
        """Test that an unknown object type is rejected."""
        with pytest.raises(ValueError, match="Unknown object type"):
            fresh_scene.from_dict({"objects": [{"type": "torus"}]})

    def test_unknown_light_type(self, fresh_scene):
        """Test that an unknown light type is rejected."""
        with pytest.raises(ValueError, match="Unknown light type"):
            fresh_scene.from_dict({"lights": [{"type": "spot"}]})


class TestSceneState:
    """Tests for clearing and re-uploading scenes."""

    def test_clear(self, populated_scene):
        """Test that clear removes all objects and lights."""
        from src.tracer.scene.intersection import get_object_count
        from src.tracer.scene.lights import get_light_count

        populated_scene.clear()
        assert populated_scene.get_object_count() == 0
        assert populated_scene.get_light_count() == 0
        assert get_object_count() == 0
        assert get_light_count() == 0

    def test_upload_restores_fields(self, populated_scene):
        """Test that upload() restores a scene after another one was built."""
        from src.tracer.scene.intersection import get_object_count, get_sphere_count
        from src.tracer.scene.lights import get_light_count
        from src.tracer.scene.manager import SceneManager

        other = SceneManager()
        other.add_sphere((0.0, 0.0, -5.0), 1.0, colour=0xFFFFFF)
        assert get_object_count() == 1
        assert get_light_count() == 0

        populated_scene.upload()
        assert get_object_count() == 2
        assert get_sphere_count() == 1
        assert get_light_count() == 2

    def test_capacity_limits(self):
        """Test the reported capacity limits."""
        from src.tracer.scene.intersection import MAX_OBJECTS
        from src.tracer.scene.lights import MAX_LIGHTS
        from src.tracer.scene.manager import SceneManager

        assert SceneManager.get_max_objects() == MAX_OBJECTS
        assert SceneManager.get_max_lights() == MAX_LIGHTS
