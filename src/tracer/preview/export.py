"""Image export utilities for rendered images.

This module saves tone-mapped colour buffers to files. The colour buffer
is already in [0, 1], so export only quantises to 8 bits.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from src.tracer.preview.export import save_png
    >>> from src.tracer.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(scene, camera)
    >>> renderer.render()
    >>> save_png(renderer, "output.png")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from src.tracer.core.renderer import Renderer


def colour_to_uint8(image: npt.NDArray[np.float32]) -> npt.NDArray[np.uint8]:
    """Convert a colour buffer in [0, 1] to uint8 for display/export.

    Args:
        image: Colour array of shape (rows, columns, 3).

    Returns:
        8-bit image array of the same shape with dtype uint8.

    Raises:
        ValueError: If the array does not have shape (rows, columns, 3).
    """
    image = np.asarray(image, dtype=np.float32)
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an array of shape (rows, columns, 3), got {image.shape}")

    # Clamp guards against float error above 1.0
    return (np.clip(image, 0.0, 1.0) * 255).astype(np.uint8)


def save_png_from_array(image: npt.NDArray[np.float32], filepath: str) -> None:
    """Save a colour buffer as a PNG file.

    Args:
        image: Colour array of shape (rows, columns, 3) in [0, 1].
        filepath: Output file path (should end in .png).
    """
    pil_image = PILImage.fromarray(colour_to_uint8(image))
    pil_image.save(filepath)


def save_png(renderer: Renderer, filepath: str) -> None:
    """Save a renderer's tone-mapped image as a PNG file.

    Args:
        renderer: A Renderer that has completed render().
        filepath: Output file path (should end in .png).
    """
    save_png_from_array(renderer.get_colour_numpy(), filepath)
