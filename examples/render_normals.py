#!/usr/bin/env python3
"""Render a normal visualization of a scene.

This script traces one ray per pixel against a primitive list and colors each
pixel by the normal of the closest hit. Without --scene it renders the built-in
demo scene (ground plane, two spheres and a triangle).

Usage:
    python -m examples.render_normals [options]

Options:
    --width WIDTH       Image width in pixels (default: 640)
    --height HEIGHT     Image height in pixels (default: 360)
    --scene SCENE       JSON scene file (default: built-in demo scene)
    --output OUTPUT     Output file path (default: normals.png)
    --cpu               Force the CPU backend
    --quiet             Suppress progress output

Example:
    python -m examples.render_normals --width 320 --height 180 --output demo.png
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a normal visualization of a scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=640,
        help="Image width in pixels (default: 640)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=360,
        help="Image height in pixels (default: 360)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file (default: built-in demo scene)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="normals.png",
        help="Output file path (default: normals.png)",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def render_normals(
    width: int = 640,
    height: int = 360,
    scene_path: str | None = None,
    output_path: str = "normals.png",
    quiet: bool = False,
) -> Path:
    """Render a scene's normals and save to file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        scene_path: Optional JSON scene file. The demo scene geometry is used
            when omitted; the demo camera is used in both cases.
        output_path: Output file path (PNG).
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from raykit.camera.pinhole import setup_camera
    from raykit.preview.export import save_png
    from raykit.render.normals import NormalRenderer
    from raykit.scene.config import build_primitive_list, load_scene_config
    from raykit.scene.demo import create_demo_scene

    config, camera = create_demo_scene(aspect_ratio=width / height)
    if scene_path is not None:
        config = load_scene_config(scene_path)

    if not quiet:
        print(f"Building scene with {config.primitive_count()} primitives ({width}x{height})...")

    world = build_primitive_list(config)
    setup_camera(camera)

    renderer = NormalRenderer(width, height)

    start_time = time.time()
    renderer.render(world)

    output_file = Path(output_path)
    save_png(renderer, str(output_file))

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.cpu:
        ti.init(arch=ti.cpu)
        if not args.quiet:
            print("Using CPU backend")
    else:
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
        render_normals(
            width=args.width,
            height=args.height,
            scene_path=args.scene,
            output_path=args.output,
            quiet=args.quiet,
        )
        return 0
    except (OSError, ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
