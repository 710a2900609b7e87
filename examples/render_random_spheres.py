#!/usr/bin/env python3
"""Render the random-spheres scene.

This script builds the random-spheres scene, renders it progressively and
writes the result as a plain PPM (or PNG, chosen by the file extension).
Progress goes to stderr so the image can be streamed to stdout.

Usage:
    python -m examples.render_random_spheres [options]

Options:
    --width WIDTH         Image width in pixels (default: 1200)
    --samples SAMPLES     Number of samples per pixel (default: 100)
    --max-depth DEPTH     Maximum bounces per path (default: 50)
    --seed SEED           Seed for the per-pixel random streams (default: 0)
    --scene-seed SEED     Seed for the sphere layout (default: random)
    --output OUTPUT       Output file, .ppm or .png; "-" writes PPM to stdout
                          (default: image.ppm)
    --batch-size SIZE     Samples per progress update (default: 10)
    --cpu                 Force the CPU backend
    --preview             Show the result in a Matplotlib window
    --quiet               Suppress progress output

Example:
    python -m examples.render_random_spheres --width 400 --samples 20 --output spheres.png
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the random-spheres scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=1200,
        help="Image width in pixels (default: 1200)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=100,
        help="Number of samples per pixel (default: 100)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=50,
        help="Maximum bounces per path (default: 50)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Seed for the per-pixel random streams (default: 0)",
    )
    parser.add_argument(
        "--scene-seed",
        type=int,
        default=None,
        help="Seed for the sphere layout (default: random)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="image.ppm",
        help='Output file, .ppm or .png; "-" writes PPM to stdout (default: image.ppm)',
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=10,
        help="Samples per progress update (default: 10)",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
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
    return parser.parse_args()


def log(message: str, quiet: bool, end: str = "\n") -> None:
    if not quiet:
        print(message, end=end, file=sys.stderr, flush=True)


def render_random_spheres(
    width: int = 1200,
    num_samples: int = 100,
    max_depth: int = 50,
    seed: int = 0,
    scene_seed: int | None = None,
    output_path: str = "image.ppm",
    batch_size: int = 10,
    preview: bool = False,
    quiet: bool = False,
) -> Path | None:
    """Render the random-spheres scene and save it.

    Args:
        width: Image width in pixels.
        num_samples: Number of samples per pixel.
        max_depth: Maximum bounces per path.
        seed: Seed for the per-pixel random streams.
        scene_seed: Seed for the sphere layout; None draws a fresh layout.
        output_path: Output file path (.ppm or .png), or "-" for stdout.
        batch_size: Number of samples to render between progress updates.
        preview: If True, show the image in a Matplotlib window.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file, or None when writing to stdout.
    """
    # Lazy imports to allow Taichi initialization first
    from src.glint.core.renderer import Renderer
    from src.glint.preview.display import show_preview
    from src.glint.preview.export import save_png_from_array, save_ppm, write_ppm
    from src.glint.scene.presets import create_random_spheres_scene

    scene, camera = create_random_spheres_scene(
        seed=scene_seed,
        image_width=width,
        samples_per_pixel=num_samples,
        max_depth=max_depth,
    )
    renderer = Renderer(camera, seed=seed)

    log(
        f"Rendering {scene.get_sphere_count()} spheres at "
        f"{renderer.width}x{renderer.height}, {num_samples} spp...",
        quiet,
    )

    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        elapsed = time.time() - start_time
        progress_pct = (current / target) * 100 if target > 0 else 0
        samples_per_sec = current / elapsed if elapsed > 0 else 0
        log(
            f"\r  Samples remaining: {target - current:4d} "
            f"({progress_pct:.1f}%) - {samples_per_sec:.1f} spp/s",
            quiet,
            end="",
        )

    renderer.render(batch_size=batch_size, callback=progress_callback)
    log("", quiet)

    image = renderer.get_image_numpy()

    output_file: Path | None = None
    if output_path == "-":
        write_ppm(image, sys.stdout)
    else:
        output_file = Path(output_path)
        if output_file.suffix.lower() == ".png":
            save_png_from_array(image, str(output_file))
        else:
            save_ppm(image, str(output_file))
        log(f"Saved to: {output_file.absolute()}", quiet)

    log(f"Total time: {time.time() - start_time:.2f}s", quiet)

    if preview:
        show_preview(image, title=f"Random spheres - {num_samples} SPP")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    # Use GPU if available, fall back to CPU
    if args.cpu:
        ti.init(arch=ti.cpu)
        log("Using CPU backend", args.quiet)
    else:
        try:
            ti.init(arch=ti.gpu)
            log("Using GPU backend", args.quiet)
        except Exception:
            ti.init(arch=ti.cpu)
            log("Using CPU backend", args.quiet)

    try:
        render_random_spheres(
            width=args.width,
            num_samples=args.samples,
            max_depth=args.max_depth,
            seed=args.seed,
            scene_seed=args.scene_seed,
            output_path=args.output,
            batch_size=args.batch_size,
            preview=args.preview,
            quiet=args.quiet,
        )
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
