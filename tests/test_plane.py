"""Unit tests for the bounded XZ plane.

Tests cover:
- Hits from above inside the rectangle
- Misses outside the x and z bounds
- Rays parallel to the plane or approaching from below
- Plane behind the ray origin
- Validation of bounds
"""

import pytest
import taichi as ti


def _intersect(source, direction, bounds=(-1.0, -1.0, 1.0, -4.0, -2.0)):
    """Run intersect_xz_plane in a kernel and return (hit, t)."""
    from src.tracer.core.ray import make_ray
    from src.tracer.geometry.plane import XZPlane, intersect_xz_plane

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    src = ti.Vector.field(3, dtype=ti.f32, shape=())
    dirn = ti.Vector.field(3, dtype=ti.f32, shape=())
    src[None] = source
    dirn[None] = direction
    y, x_min, x_max, z_min, z_max = bounds

    @ti.kernel
    def test_kernel():
        ray = make_ray(src[None], dirn[None])
        plane = XZPlane(y=y, x_min=x_min, x_max=x_max, z_min=z_min, z_max=z_max)
        h, t = intersect_xz_plane(ray, plane)
        hit[None] = h
        t_val[None] = t

    test_kernel()
    return hit[None], t_val[None]


class TestPlaneIntersection:
    """Tests for ray-plane intersection."""

    def test_hit_straight_down(self):
        """Test a vertical ray from above the rectangle."""
        hit, t = _intersect((0.0, 2.0, -3.0), (0.0, -1.0, 0.0))
        assert hit == 1
        assert abs(t - 3.0) < 1e-5

    def test_hit_oblique(self):
        """Test a ray from the camera origin down onto the floor."""
        # From the origin through (0, -1, -3): distance sqrt(10)
        hit, t = _intersect((0.0, 0.0, 0.0), (0.0, -1.0, -3.0))
        assert hit == 1
        assert abs(t - 10.0**0.5) < 1e-4

    def test_miss_outside_x_bounds(self):
        """Test a ray hitting the infinite plane beyond x_max."""
        hit, _ = _intersect((1.5, 2.0, -3.0), (0.0, -1.0, 0.0))
        assert hit == 0

    def test_miss_outside_z_bounds(self):
        """Test a ray hitting the infinite plane in front of z_max."""
        hit, _ = _intersect((0.0, 2.0, -1.0), (0.0, -1.0, 0.0))
        assert hit == 0

    def test_hit_on_edge_is_inside(self):
        """Test that the rectangle bounds are inclusive."""
        hit, _ = _intersect((1.0, 2.0, -2.0), (0.0, -1.0, 0.0))
        assert hit == 1

    def test_parallel_ray_misses(self):
        """Test a ray running parallel to the plane."""
        hit, _ = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 0

    def test_ray_from_below_misses(self):
        """Test that the plane is not seen from below."""
        hit, _ = _intersect((0.0, -3.0, -3.0), (0.0, 1.0, 0.0))
        assert hit == 0

    def test_plane_behind_origin(self):
        """Test a ray below the plane pointing further down."""
        hit, _ = _intersect((0.0, -2.0, -3.0), (0.0, -1.0, 0.0))
        assert hit == 0

    def test_upward_shadow_ray_from_surface_misses(self):
        """Test that a ray leaving the plane upward cannot hit it."""
        hit, _ = _intersect((0.0, -1.0, -3.0), (0.0, 1.0, 0.2))
        assert hit == 0


class TestPlaneHelpers:
    """Tests for xz_in_bounds and plane_normal."""

    def test_in_bounds(self):
        """Test the rectangle containment check."""
        from src.tracer.geometry.plane import XZPlane, xz_in_bounds, vec3

        results = ti.field(dtype=ti.i32, shape=4)

        @ti.kernel
        def test_kernel():
            plane = XZPlane(y=0.0, x_min=-1.0, x_max=1.0, z_min=-4.0, z_max=-2.0)
            results[0] = xz_in_bounds(plane, vec3(0.0, 0.0, -3.0))
            results[1] = xz_in_bounds(plane, vec3(-1.5, 0.0, -3.0))
            results[2] = xz_in_bounds(plane, vec3(0.0, 0.0, -4.5))
            results[3] = xz_in_bounds(plane, vec3(-1.0, 0.0, -4.0))

        test_kernel()
        assert results[0] == 1
        assert results[1] == 0
        assert results[2] == 0
        assert results[3] == 1

    def test_plane_normal_is_up(self):
        """Test the plane's surface normal."""
        from src.tracer.geometry.plane import plane_normal

        normal = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            normal[None] = plane_normal()

        test_kernel()
        n = normal[None]
        assert (n[0], n[1], n[2]) == (0.0, 1.0, 0.0)


class TestPlaneValidation:
    """Tests for validate_xz_plane."""

    def test_valid(self):
        """Test that well-formed bounds pass, including a degenerate strip."""
        from src.tracer.geometry.plane import validate_xz_plane

        validate_xz_plane(-1.0, -1.0, 1.0, -4.0, -2.0)
        validate_xz_plane(0.0, 0.0, 0.0, -1.0, 1.0)

    def test_inverted_x(self):
        """Test that x_min > x_max is rejected."""
        from src.tracer.core.errors import GeometryError
        from src.tracer.geometry.plane import validate_xz_plane

        with pytest.raises(GeometryError, match="x bounds"):
            validate_xz_plane(0.0, 1.0, -1.0, -4.0, -2.0)

    def test_inverted_z(self):
        """Test that z_min > z_max is rejected."""
        from src.tracer.core.errors import GeometryError
        from src.tracer.geometry.plane import validate_xz_plane

        with pytest.raises(GeometryError, match="z bounds"):
            validate_xz_plane(0.0, -1.0, 1.0, -2.0, -4.0)

    def test_not_finite(self):
        """Test that non-finite values are rejected."""
        from src.tracer.core.errors import GeometryError
        from src.tracer.geometry.plane import validate_xz_plane

        with pytest.raises(GeometryError, match="finite"):
            validate_xz_plane(float("inf"), -1.0, 1.0, -4.0, -2.0)
