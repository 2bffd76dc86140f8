#!/usr/bin/env python3
"""Render a preset scene.

This script renders one of the preset scenes end to end: it builds the
scene, configures the camera, traces every pixel, tone maps the frame and
saves it as a PNG.

Usage:
    python -m examples.render_scene [options]

Options:
    --scene NAME              Preset scene (default: one_sphere)
    --columns COLUMNS         Image width in pixels (default: 200)
    --rows ROWS               Image height in pixels (default: 200)
    --viewport-width WIDTH    Viewport width in world units (default: 2.0)
    --viewport-distance DIST  Camera to viewport distance (default: 1.0)
    --background HEX          Background colour as RRGGBB (default: 3030FF)
    --batch-rows ROWS         Rows per progress update (default: 16)
    --output OUTPUT           Output file path (default: <scene>.png)
    --preview                 Show the result in a Matplotlib window
    --quiet                   Suppress progress output

Example:
    python -m examples.render_scene --scene one_sphere_two_lights --columns 400 --rows 400
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import taichi as ti

SCENE_NAMES = ("one_sphere", "one_sphere_two_lights")


def _hex_colour(value: str) -> int:
    text = value.removeprefix("#").removeprefix("0x")
    try:
        colour = int(text, 16)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid hex colour: {value!r}") from None
    if len(text) != 6 or colour < 0:
        raise argparse.ArgumentTypeError(f"hex colour must have 6 digits: {value!r}")
    return colour


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a preset scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        choices=SCENE_NAMES,
        default="one_sphere",
        help="Preset scene (default: one_sphere)",
    )
    parser.add_argument(
        "--columns",
        type=int,
        default=200,
        help="Image width in pixels (default: 200)",
    )
    parser.add_argument(
        "--rows",
        type=int,
        default=200,
        help="Image height in pixels (default: 200)",
    )
    parser.add_argument(
        "--viewport-width",
        type=float,
        default=2.0,
        help="Viewport width in world units (default: 2.0)",
    )
    parser.add_argument(
        "--viewport-distance",
        type=float,
        default=1.0,
        help="Camera to viewport distance (default: 1.0)",
    )
    parser.add_argument(
        "--background",
        type=_hex_colour,
        default=0x3030FF,
        help="Background colour as RRGGBB (default: 3030FF)",
    )
    parser.add_argument(
        "--batch-rows",
        type=int,
        default=16,
        help="Rows per progress update (default: 16)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output file path (default: <scene>.png)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the result in a Matplotlib window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def render_scene(
    scene_name: str = "one_sphere",
    columns: int = 200,
    rows: int = 200,
    viewport_width: float = 2.0,
    viewport_distance: float = 1.0,
    background: int = 0x3030FF,
    batch_rows: int = 16,
    output_path: str | None = None,
    preview: bool = False,
    quiet: bool = False,
) -> Path:
    """Render a preset scene and save it to file.

    Args:
        scene_name: Name of the preset scene.
        columns: Image width in pixels.
        rows: Image height in pixels.
        viewport_width: Viewport width in world units.
        viewport_distance: Distance from the camera to the viewport.
        background: Background colour as a 0xRRGGBB integer.
        batch_rows: Number of rows to trace between progress updates.
        output_path: Output file path (PNG). Defaults to "<scene_name>.png".
        preview: If True, show the result in a Matplotlib window.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from src.tracer.camera.viewport import CameraConfig
    from src.tracer.core.renderer import RenderConfig, RenderEvent, Renderer
    from src.tracer.preview.export import save_png
    from src.tracer.scene.presets import create_scene

    if not quiet:
        print(f"Creating scene '{scene_name}' ({columns}x{rows})...")

    camera = CameraConfig(
        viewport_distance=viewport_distance,
        viewport_width=viewport_width,
        columns=columns,
        rows=rows,
    )
    scene, camera = create_scene(scene_name, camera)

    start_time = time.time()

    def on_event(event: RenderEvent) -> None:
        if quiet:
            return
        if event.name == "rows_traced":
            completed = event.fields["completed"]
            total = event.fields["total"]
            elapsed = time.time() - start_time
            progress_pct = (completed / total) * 100 if total > 0 else 0
            print(
                f"\r  Progress: {completed}/{total} rows "
                f"({progress_pct:.1f}%) - {elapsed:.2f}s",
                end="",
                flush=True,
            )
            if completed == total:
                print()  # Newline after progress
        else:
            print(f"  {event}")

    renderer = Renderer(
        scene,
        camera,
        RenderConfig(background=background, batch_rows=batch_rows),
        on_event=on_event,
    )
    renderer.render()

    output_file = Path(output_path if output_path is not None else f"{scene_name}.png")
    save_png(renderer, str(output_file))

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    if preview:
        from src.tracer.preview.display import show_preview

        show_preview(renderer, title=scene_name)

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Initialize Taichi
    # Use GPU if available, fall back to CPU
    try:
        ti.init(arch=ti.gpu)
        if not args.quiet:
            print("Using GPU backend")
    except Exception:
        ti.init(arch=ti.cpu)
        if not args.quiet:
            print("Using CPU backend")

    try:
        render_scene(
            scene_name=args.scene,
            columns=args.columns,
            rows=args.rows,
            viewport_width=args.viewport_width,
            viewport_distance=args.viewport_distance,
            background=args.background,
            batch_rows=args.batch_rows,
            output_path=args.output,
            preview=args.preview,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
