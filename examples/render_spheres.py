#!/usr/bin/env python3
"""Render a demo sphere scene to a PPM (or PNG) image.

Usage:
    python -m examples.render_spheres [options] > image.ppm

Options:
    --scene SCENE       Scene to render: two-spheres or materials
                        (default: materials)
    --width WIDTH       Override the scene's image width in pixels
    --samples SAMPLES   Override the scene's samples per pixel
    --max-depth DEPTH   Override the scene's maximum bounce depth
    --seed SEED         Random seed (default: 0)
    --output OUTPUT     Output path; "-" writes PPM to stdout, a .png
                        suffix writes PNG (default: -)
    --quiet             Suppress progress output

Progress goes to stderr so that stdout carries only the image.

Example:
    python -m examples.render_spheres --scene two-spheres --seed 7 > spheres.ppm
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import taichi as ti

SCENES = ("two-spheres", "materials")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a demo sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        choices=SCENES,
        default="materials",
        help="Scene to render (default: materials)",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Image width in pixels (default: scene setting)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=None,
        help="Number of samples per pixel (default: scene setting)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Maximum ray bounce depth (default: scene setting)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed (default: 0)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="-",
        help='Output file path, or "-" for stdout (default: -)',
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def render_spheres(
    scene_name: str = "materials",
    width: int | None = None,
    num_samples: int | None = None,
    max_depth: int | None = None,
    seed: int = 0,
    output_path: str = "-",
    quiet: bool = False,
) -> None:
    """Build a demo scene, render it and write the image.

    Args:
        scene_name: One of SCENES.
        width: Image width override.
        num_samples: Samples per pixel override.
        max_depth: Bounce depth override.
        seed: Random seed.
        output_path: Output path, "-" for PPM on stdout.
        quiet: If True, suppress progress output.
    """
    # Lazy imports to allow Taichi initialization first
    from pathtracer.core.integrator import render
    from pathtracer.preview.export import save_png, save_ppm, write_ppm
    from pathtracer.scene.demo import create_material_demo_scene, create_two_sphere_scene

    if scene_name == "two-spheres":
        _, camera = create_two_sphere_scene()
    else:
        _, camera = create_material_demo_scene()

    if width is not None:
        camera.image_width = width
    if num_samples is not None:
        camera.samples_per_pixel = num_samples
    if max_depth is not None:
        camera.max_depth = max_depth

    def progress_callback(rows_remaining: int) -> None:
        print(f"\rScanlines remaining: {rows_remaining} ", end="", file=sys.stderr, flush=True)

    image = render(camera, seed=seed, progress=None if quiet else progress_callback)

    if not quiet:
        print("\rDone.                 ", file=sys.stderr)

    if output_path == "-":
        write_ppm(image, sys.stdout)
    elif Path(output_path).suffix.lower() == ".png":
        save_png(image, output_path)
    else:
        save_ppm(image, output_path)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    ti.init(arch=ti.cpu)

    try:
        render_spheres(
            scene_name=args.scene,
            width=args.width,
            num_samples=args.samples,
            max_depth=args.max_depth,
            seed=args.seed,
            output_path=args.output,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
