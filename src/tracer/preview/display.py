"""Matplotlib-based preview display for rendered images.

Features:
    - Preview window for the tone-mapped colour buffer
    - Side-by-side view of the colour buffer and the raw radiance, useful
      for checking where the frame's maximum comes from

Matplotlib is imported inside each function so that rendering never needs
a display backend.

Example:
    >>> from src.tracer.preview.display import show_preview
    >>> renderer.render()
    >>> show_preview(renderer)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from src.tracer.core.renderer import Renderer


def show_preview(
    renderer: Renderer,
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display the current render as a Matplotlib figure.

    Args:
        renderer: A Renderer that has completed render().
        title: Custom title (default shows the resolution).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    image = renderer.get_colour_numpy()

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(image)
    ax.axis("off")

    if title is None:
        title = f"Render Preview - {renderer.columns}x{renderer.rows}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)


def show_radiance(
    renderer: Renderer,
    *,
    figsize: tuple[float, float] = (14, 6),
    block: bool = True,
) -> float:
    """Display the colour buffer next to the brightest channel of the raw radiance.

    Args:
        renderer: A Renderer that has completed render().
        figsize: Figure size in inches.
        block: Whether to block execution until figure is closed.

    Returns:
        The largest raw radiance value in the frame.
    """
    import matplotlib.pyplot as plt

    colours = renderer.get_colour_numpy()
    radiance = renderer.get_intensity_numpy().max(axis=2)
    peak = float(np.max(radiance)) if radiance.size else 0.0

    fig, axes = plt.subplots(1, 2, figsize=figsize)

    axes[0].imshow(colours)
    axes[0].set_title("Colour")
    axes[0].axis("off")

    heat = axes[1].imshow(radiance, cmap="inferno")
    axes[1].set_title(f"Radiance (max channel) - peak: {peak:.4f}")
    axes[1].axis("off")
    fig.colorbar(heat, ax=axes[1])

    plt.tight_layout()
    plt.show(block=block)

    return peak
