"""Renderer: one full frame from a scene and a camera.

This module wraps the integrator and tone mapper in a small object that
owns a render's configuration and reports progress through an injected
event callback:

- Phase 1 traces the frame in bands of rows, emitting ``rows_traced``
  after each band
- Phase 2 runs only after every row is traced: the global maximum is found
  and the frame is normalised into display colours

Rendering is deterministic. There is no sampling or randomness, so the same
scene, camera and configuration always produce bit-identical buffers.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tracer.core.renderer import Renderer
    >>> from src.tracer.scene.presets import one_sphere
    >>>
    >>> scene, camera = one_sphere()
    >>> renderer = Renderer(scene, camera, on_event=print)
    >>> colours = renderer.render()
    >>> renderer.save_image("one_sphere.png")
"""

from collections.abc import Callable, Generator
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import numpy.typing as npt

from src.tracer.camera.viewport import Camera, CameraConfig, setup_camera
from src.tracer.core.colour import ColourLike
from src.tracer.core.integrator import (
    DEFAULT_BACKGROUND,
    DEFAULT_SHADOW_BIAS,
    configure_shading,
    get_colour_numpy,
    get_intensity_numpy,
    render_intensity,
    setup_render_target,
    tone_map_render_target,
)
from src.tracer.scene.manager import SceneManager


@dataclass(frozen=True)
class RenderConfig:
    """Settings for a render that are not part of the scene or camera.

    Attributes:
        background: Colour of pixels whose primary ray hits nothing.
        shadow_bias: Offset of shadow-ray origins along the surface normal.
        batch_rows: Number of rows traced between progress events.
    """

    background: ColourLike = DEFAULT_BACKGROUND
    shadow_bias: float = DEFAULT_SHADOW_BIAS
    batch_rows: int = 16

    def __post_init__(self) -> None:
        if self.batch_rows <= 0:
            raise ValueError(f"batch_rows must be positive, got {self.batch_rows}")


@dataclass(frozen=True)
class RenderEvent:
    """A structured progress event.

    Attributes:
        name: Event name (render_started, rows_traced, tone_mapped,
            render_finished).
        fields: Event payload.
    """

    name: str
    fields: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        details = " ".join(f"{k}={v}" for k, v in self.fields.items())
        return f"{self.name} {details}".rstrip()


# Type alias for the event callback
EventCallback = Callable[[RenderEvent], None]


class Renderer:
    """Render a scene through a camera into intensity and colour buffers.

    The renderer uploads the scene, camera and shading settings to the
    Taichi fields when it renders, so several renderers can be created but
    only the one currently rendering owns the shared buffers.

    Attributes:
        scene: The scene to render.
        camera_config: The camera configuration.
        render_config: Background, shadow bias and progress batching.
    """

    def __init__(
        self,
        scene: SceneManager,
        camera_config: CameraConfig | None = None,
        render_config: RenderConfig | None = None,
        on_event: EventCallback | None = None,
    ) -> None:
        """Initialize the renderer.

        Args:
            scene: The scene to render.
            camera_config: Camera configuration. Defaults to CameraConfig().
            render_config: Render settings. Defaults to RenderConfig().
            on_event: Optional callback receiving RenderEvents.

        Raises:
            GeometryError: If the camera configuration is malformed.
            DegenerateVectorError: If the camera direction has zero length.
            ValueError: If the resolution exceeds the render target maximum or
                the background is not a valid colour.
        """
        self.scene = scene
        self.camera_config = camera_config if camera_config is not None else CameraConfig()
        self.render_config = render_config if render_config is not None else RenderConfig()
        self._on_event = on_event
        self._max_intensity: float | None = None
        self.camera: Camera = self._prepare()

    @property
    def columns(self) -> int:
        """Get the image width in pixels."""
        return self.camera.columns

    @property
    def rows(self) -> int:
        """Get the image height in pixels."""
        return self.camera.rows

    @property
    def max_intensity(self) -> float | None:
        """Get the maximum of the last tone-mapped frame, or None before a render."""
        return self._max_intensity

    def _emit(self, name: str, **fields: Any) -> None:
        if self._on_event is not None:
            self._on_event(RenderEvent(name, fields))

    def _prepare(self) -> Camera:
        camera = setup_camera(self.camera_config)
        setup_render_target(camera.columns, camera.rows)
        configure_shading(self.render_config.background, self.render_config.shadow_bias)
        return camera

    def trace_progressive(self) -> Generator[tuple[int, int], None, None]:
        """Trace the frame band by band, yielding progress after each band.

        Only phase 1 runs here; call render() for the complete frame.

        Yields:
            Tuple of (rows_completed, total_rows).
        """
        self.camera = self._prepare()
        self.scene.upload()
        self._max_intensity = None

        rows = self.rows
        batch = self.render_config.batch_rows
        for start in range(0, rows, batch):
            end = min(start + batch, rows)
            render_intensity(start, end)
            self._emit("rows_traced", completed=end, total=rows)
            yield (end, rows)

    def render(self) -> npt.NDArray[np.float32]:
        """Render the full frame.

        Returns:
            The tone-mapped colour buffer, row-major (rows, columns, 3) with
            every channel in [0, 1].
        """
        self._emit(
            "render_started",
            columns=self.columns,
            rows=self.rows,
            objects=self.scene.get_object_count(),
            lights=self.scene.get_light_count(),
        )

        for _ in self.trace_progressive():
            pass

        # Every row is traced before the maximum is known
        self._max_intensity = tone_map_render_target()
        self._emit(
            "tone_mapped",
            max_intensity=self._max_intensity,
            empty_frame=self._max_intensity == 0.0,
        )
        self._emit("render_finished", columns=self.columns, rows=self.rows)

        return get_colour_numpy()

    def get_intensity_numpy(self) -> npt.NDArray[np.float32]:
        """Get the raw radiance buffer, row-major (rows, columns, 3)."""
        return get_intensity_numpy()

    def get_colour_numpy(self) -> npt.NDArray[np.float32]:
        """Get the tone-mapped colour buffer, row-major (rows, columns, 3)."""
        return get_colour_numpy()

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the colour buffer as an 8-bit array suitable for saving."""
        from src.tracer.preview.export import colour_to_uint8

        return colour_to_uint8(self.get_colour_numpy())

    def save_image(self, filepath: str) -> None:
        """Save the rendered image to a file.

        Args:
            filepath: Path to save the image (e.g., "output.png").
        """
        from PIL import Image as PILImage

        PILImage.fromarray(self.get_image_uint8()).save(filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(columns={self.columns}, rows={self.rows}, "
            f"objects={self.scene.get_object_count()}, lights={self.scene.get_light_count()})"
        )
