"""Preview module for output and visualization.

Components:
    display: Matplotlib-based preview display
    export: PNG export via Pillow

Example:
    >>> from src.tracer.preview import save_png, show_preview
    >>> renderer.render()
    >>> show_preview(renderer)
    >>> save_png(renderer, "output.png")
"""

from src.tracer.preview.display import show_preview, show_radiance
from src.tracer.preview.export import colour_to_uint8, save_png, save_png_from_array

__all__ = [
    # Display functions
    "show_preview",
    "show_radiance",
    # Export functions
    "save_png",
    "save_png_from_array",
    "colour_to_uint8",
]
