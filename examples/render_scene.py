#!/usr/bin/env python3
"""Render one of the built-in scenes to a PNG file.

Usage:
    python examples/render_scene.py [options]

Options:
    --scene NAME          Scene to render (default: three_spheres)
    --width WIDTH         Image width in pixels (default: 400)
    --height HEIGHT       Image height in pixels (default: 225)
    --samples SAMPLES     Number of samples per pixel (default: 100)
    --max-depth DEPTH     Maximum ray bounces (default: 50)
    --camera X Y Z        Camera position (default: the scene's preset)
    --focus X Y Z         Point the camera looks at (default: the scene's preset)
    --fov DEGREES         Vertical field of view (default: the scene's preset)
    --defocus-angle DEG   Depth of field cone angle (default: 0, disabled)
    --focus-distance D    Distance to the plane of focus (default: 10)
    --seed SEED           Random seed for Taichi and random scenes
    --arch {gpu,cpu}      Taichi backend (default: gpu, falls back to cpu)
    --output OUTPUT       Output file path (default: render.png)
    --verbose             Log strip-by-strip progress

Example:
    python examples/render_scene.py --scene cornell_box --width 300 --height 300 --samples 200
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import taichi as ti

logger = logging.getLogger("render_scene")

SCENE_NAMES = [
    "one_sphere",
    "metal_spheres",
    "glass_spheres",
    "three_spheres",
    "hollow_glass",
    "red_and_blue",
    "many_spheres",
    "earth",
    "two_perlin_spheres",
    "quads",
    "simple_light",
    "cornell_box",
    "cornell_box_two_boxes",
]


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a built-in scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        choices=SCENE_NAMES,
        default="three_spheres",
        help="Scene to render (default: three_spheres)",
    )
    parser.add_argument("--width", type=int, default=400, help="Image width in pixels (default: 400)")
    parser.add_argument("--height", type=int, default=225, help="Image height in pixels (default: 225)")
    parser.add_argument(
        "--samples",
        type=int,
        default=100,
        help="Number of samples per pixel (default: 100)",
    )
    parser.add_argument("--max-depth", type=int, default=50, help="Maximum ray bounces (default: 50)")
    parser.add_argument(
        "--camera",
        type=float,
        nargs=3,
        metavar=("X", "Y", "Z"),
        help="Camera position (default: the scene's preset)",
    )
    parser.add_argument(
        "--focus",
        type=float,
        nargs=3,
        metavar=("X", "Y", "Z"),
        help="Point the camera looks at (default: the scene's preset)",
    )
    parser.add_argument("--fov", type=float, help="Vertical field of view in degrees")
    parser.add_argument(
        "--defocus-angle",
        type=float,
        default=0.0,
        help="Depth of field cone angle in degrees (default: 0, disabled)",
    )
    parser.add_argument(
        "--focus-distance",
        type=float,
        default=10.0,
        help="Distance from the camera to the plane of focus (default: 10)",
    )
    parser.add_argument("--seed", type=int, help="Random seed for Taichi and random scenes")
    parser.add_argument(
        "--arch",
        choices=["gpu", "cpu"],
        default="gpu",
        help="Taichi backend (default: gpu)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="render.png",
        help="Output file path (default: render.png)",
    )
    parser.add_argument("--verbose", action="store_true", help="Log strip-by-strip progress")
    return parser.parse_args()


def init_taichi(arch: str, seed: int | None) -> None:
    """Initialize Taichi on the requested backend, falling back to the CPU."""
    kwargs = {} if seed is None else {"random_seed": seed}
    if arch == "cpu":
        ti.init(arch=ti.cpu, **kwargs)
        return
    try:
        ti.init(arch=ti.gpu, **kwargs)
    except RuntimeError as e:
        logger.warning(f"GPU backend unavailable ({e}); using CPU")
        ti.init(arch=ti.cpu, **kwargs)


def render_scene(args: argparse.Namespace) -> Path:
    """Render the scene selected by ``args`` and save it.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from pathtracer.core.renderer import render
    from pathtracer.core.settings import CameraSettings, RenderSettings
    from pathtracer.preview.export import save_png
    from pathtracer.scene.presets import Scene, create_world, get_scene_camera

    scene = Scene[args.scene.upper()]
    preset = get_scene_camera(scene)
    camera = CameraSettings(
        camera_position=tuple(args.camera) if args.camera else preset.camera_position,
        focus_point=tuple(args.focus) if args.focus else preset.focus_point,
        field_of_view=args.fov if args.fov is not None else preset.field_of_view,
    )
    settings = RenderSettings(
        width=args.width,
        height=args.height,
        samples=args.samples,
        max_depth=args.max_depth,
        defocus_angle=args.defocus_angle,
        focus_distance=args.focus_distance,
    ).with_camera(camera)

    logger.info(f"Scene: {scene.display_name}")
    world = create_world(scene, rng=args.seed)

    def report(fraction: float) -> None:
        print(f"\r  Progress: {fraction:6.1%}", end="", flush=True)

    image = render(world, settings, progress=report)
    print()  # Newline after progress

    output_file = Path(args.output)
    save_png(image, output_file)
    logger.info(f"Saved to: {output_file.absolute()}")
    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    init_taichi(args.arch, args.seed)

    try:
        render_scene(args)
        return 0
    except (ValueError, RuntimeError) as e:
        logger.error(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
