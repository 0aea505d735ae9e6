#!/usr/bin/env python3
"""Render a sphere scene to a PPM (or PNG) image.

The image is written as PPM "P3" text to stdout by default, so the usual
invocation redirects it to a file. Progress goes to stderr and never mixes
with the pixel stream.

Usage:
    python -m examples.render_spheres [options] > image.ppm

Options:
    --width WIDTH           Image width in pixels (default: 400)
    --aspect-ratio RATIO    Width / height (default: 16/9)
    --samples SAMPLES       Samples per pixel (default: 100)
    --max-depth DEPTH       Maximum bounces per sample (default: 50)
    --seed SEED             Random seed (default: 0)
    --arch {cpu,gpu}        Taichi backend (default: cpu)
    --output OUTPUT         Output file path, '-' for stdout (default: -)
    --format {ppm,png}      Output format (default: ppm)
    --scene {default,single}
                            Preset scene (default: default)
    --quiet                 Suppress progress output

Example:
    python -m examples.render_spheres --width 200 --samples 20 > spheres.ppm
"""

from __future__ import annotations

import argparse
import sys
import time

import taichi as ti

from src.tracer.config import DEFAULT_ASPECT_RATIO, RenderConfig

SCENE_NAMES = ("default", "single")


def parse_aspect_ratio(text: str) -> float:
    """Parse an aspect ratio given as a number or as 'W/H' (e.g. '16/9')."""
    try:
        if "/" in text:
            num, den = text.split("/", 1)
            return float(num) / float(den)
        return float(text)
    except (ValueError, ZeroDivisionError):
        raise argparse.ArgumentTypeError(f"invalid aspect ratio: {text!r}") from None


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a sphere scene lit by a sky gradient.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=400,
        help="Image width in pixels (default: 400)",
    )
    parser.add_argument(
        "--aspect-ratio",
        type=parse_aspect_ratio,
        default=DEFAULT_ASPECT_RATIO,
        help="Image width / height, as a number or W/H (default: 16/9)",
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
        help="Maximum ray bounces per sample (default: 50)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed (default: 0)",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="-",
        help="Output file path, '-' for stdout (default: -)",
    )
    parser.add_argument(
        "--format",
        choices=("ppm", "png"),
        default="ppm",
        help="Output format (default: ppm)",
    )
    parser.add_argument(
        "--scene",
        choices=SCENE_NAMES,
        default="default",
        help="Preset scene (default: default)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def render_spheres(
    config: RenderConfig,
    output: str = "-",
    output_format: str = "ppm",
    scene_name: str = "default",
    quiet: bool = False,
) -> None:
    """Render a preset scene and write the image.

    Taichi must already be initialized.

    Args:
        config: Validated render configuration.
        output: Output file path, or '-' for stdout.
        output_format: 'ppm' or 'png'.
        scene_name: Name of the preset scene.
        quiet: If True, suppress progress output.
    """
    # Lazy imports to allow Taichi initialization first
    from src.tracer.camera.pinhole import setup_camera
    from src.tracer.core.renderer import Renderer
    from src.tracer.scene.presets import create_scene

    if output_format == "png" and output == "-":
        raise ValueError("PNG output needs a file path (--output)")

    _, camera = create_scene(scene_name, aspect_ratio=config.aspect_ratio)
    setup_camera(camera)

    renderer = Renderer(config.image_width, config.image_height)

    start_time = time.time()

    def progress_callback(remaining: int, height: int) -> None:
        if not quiet:
            print(f"\rScanlines remaining: {remaining} ", end="", file=sys.stderr, flush=True)

    renderer.render(
        samples_per_pixel=config.samples_per_pixel,
        max_depth=config.max_depth,
        callback=progress_callback,
    )

    if output_format == "png":
        renderer.save_png(output)
    elif output == "-":
        renderer.write_ppm(sys.stdout)
        sys.stdout.flush()
    else:
        renderer.save_ppm(output)

    if not quiet:
        elapsed = time.time() - start_time
        print(f"\nDone. ({elapsed:.2f}s)", file=sys.stderr, flush=True)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        config = RenderConfig(
            image_width=args.width,
            aspect_ratio=args.aspect_ratio,
            samples_per_pixel=args.samples,
            max_depth=args.max_depth,
            seed=args.seed,
        )
        config.validate()

        arch = ti.gpu if args.arch == "gpu" else ti.cpu
        ti.init(arch=arch, default_fp=ti.f64, random_seed=config.seed)

        render_spheres(
            config,
            output=args.output,
            output_format=args.format,
            scene_name=args.scene,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
