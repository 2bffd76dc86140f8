"""Tests for the preview module.

This module tests the preview/display and preview/export functionality including:
- Conversion of the colour buffer to 8 bits
- PNG export from arrays and renderers
- Matplotlib figures for the colour and radiance buffers

Note: Tests never open windows. Matplotlib runs on the Agg backend and
plt.show is replaced.
"""

import os
import tempfile

import numpy as np
import pytest
from PIL import Image as PILImage


def _render_small_scene(columns=16, rows=16):
    """Helper to render a small lit sphere."""
    from src.tracer.camera.viewport import CameraConfig
    from src.tracer.core.renderer import Renderer
    from src.tracer.scene.manager import SceneManager

    scene = SceneManager()
    scene.add_sphere((0, 0, -2), 1.0, colour=0x808080)
    scene.add_distant_light((0, -1, -1), intensity=(1, 1, 1))

    renderer = Renderer(scene, CameraConfig(columns=columns, rows=rows))
    renderer.render()
    return renderer


@pytest.fixture
def no_show(monkeypatch):
    """Use the Agg backend and make plt.show a no-op."""
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    monkeypatch.setattr(plt, "show", lambda *args, **kwargs: None)
    yield plt
    plt.close("all")


class TestColourToUint8:
    """Test conversion to uint8."""

    def test_output_type(self):
        """Test that output is uint8 with the same shape."""
        from src.tracer.preview.export import colour_to_uint8

        image = np.random.rand(10, 12, 3).astype(np.float32)
        result = colour_to_uint8(image)

        assert result.dtype == np.uint8
        assert result.shape == (10, 12, 3)

    def test_black_and_white(self):
        """Test uint8 conversion of black and white."""
        from src.tracer.preview.export import colour_to_uint8

        image = np.array([[[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]]], dtype=np.float32)
        result = colour_to_uint8(image)

        assert np.all(result[0, 0] == 0)
        assert np.all(result[0, 1] == 255)

    def test_out_of_range_values_clamped(self):
        """Test that values just outside [0, 1] are clamped."""
        from src.tracer.preview.export import colour_to_uint8

        image = np.array([[[-0.1, 1.0000001, 0.5]]], dtype=np.float32)
        result = colour_to_uint8(image)

        assert result[0, 0].tolist() == [0, 255, 127]

    def test_wrong_shape_raises(self):
        """Test that arrays without three channels are rejected."""
        from src.tracer.preview.export import colour_to_uint8

        with pytest.raises(ValueError, match="rows, columns, 3"):
            colour_to_uint8(np.zeros((4, 4, 4), dtype=np.float32))


class TestSavePngFromArray:
    """Test PNG export from NumPy array."""

    def test_save_png_from_array(self):
        """Test saving a NumPy array as PNG."""
        from src.tracer.preview.export import save_png_from_array

        # Create a gradient image
        image = np.zeros((32, 64, 3), dtype=np.float32)
        image[:, :, 0] = np.linspace(0, 1, 64)  # Red gradient

        with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as f:
            filepath = f.name

        try:
            save_png_from_array(image, filepath)

            assert os.path.exists(filepath)

            with PILImage.open(filepath) as img:
                assert img.size == (64, 32)  # PIL size is (width, height)
                assert img.mode == "RGB"
                pixels = np.asarray(img)
            assert pixels[0, 0].tolist() == [0, 0, 0]
            assert pixels[0, 63].tolist() == [255, 0, 0]
        finally:
            if os.path.exists(filepath):
                os.remove(filepath)


class TestSavePng:
    """Test PNG export from a renderer."""

    def test_save_png_creates_file(self):
        """Test that save_png creates a valid PNG file."""
        from src.tracer.preview.export import save_png

        renderer = _render_small_scene(32, 24)

        with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as f:
            filepath = f.name

        try:
            save_png(renderer, filepath)

            assert os.path.exists(filepath)

            with PILImage.open(filepath) as img:
                assert img.size == (32, 24)
                assert img.mode == "RGB"
                pixels = np.asarray(img)
            assert np.array_equal(pixels, renderer.get_image_uint8())
        finally:
            if os.path.exists(filepath):
                os.remove(filepath)


class TestDisplay:
    """Test the Matplotlib figures without opening windows."""

    def test_show_preview(self, no_show):
        """Test that show_preview draws the colour buffer with a default title."""
        from src.tracer.preview.display import show_preview

        renderer = _render_small_scene()
        show_preview(renderer, block=False)

        ax = no_show.gcf().axes[0]
        assert ax.get_title() == "Render Preview - 16x16"

    def test_show_radiance_returns_peak(self, no_show):
        """Test that show_radiance reports the brightest raw channel."""
        from src.tracer.preview.display import show_radiance

        renderer = _render_small_scene()
        peak = show_radiance(renderer, block=False)

        assert peak == pytest.approx(float(renderer.get_intensity_numpy().max()))
        assert peak == pytest.approx(renderer.max_intensity)


class TestModuleExports:
    """Test that all expected symbols are exported from the module."""

    def test_preview_exports(self):
        """Test that display and export functions are exported."""
        from src.tracer.preview import (
            colour_to_uint8,
            save_png,
            save_png_from_array,
            show_preview,
            show_radiance,
        )

        assert callable(show_preview)
        assert callable(show_radiance)
        assert callable(save_png)
        assert callable(save_png_from_array)
        assert callable(colour_to_uint8)
