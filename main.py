#!/usr/bin/env python3
"""
raymarcher - A Python Signed-Distance Ray Marcher

Main entry point for rendering scenes.
"""

import argparse
import logging
import os
import sys
import time
from pathlib import Path

from raymarcher.vec3 import Vec3, Color, Point3
from raymarcher.camera import Camera
from raymarcher.geometry import Geometry
from raymarcher.shapes import Sphere, Plane, Cube, Scene
from raymarcher.materials import SolidColorMaterial, CheckerboardMaterial
from raymarcher.lights import PointLight
from raymarcher.renderer import Renderer, RenderSettings
from raymarcher.scene_parser import load_scene, SceneParseError
from raymarcher.logging_config import setup_logging


def create_floor() -> Geometry:
    floor = Plane(Vec3.up(), CheckerboardMaterial(Color.gray(0.8), Color.gray(0.4)))
    return floor.translate(Vec3.down() * 0.3)


def create_spheres_scene() -> Scene:
    """Three colored spheres above a checkerboard floor."""
    return Scene([
        Sphere(0.5, SolidColorMaterial.from_rgb(1.0, 0.2, 0.2)).translate(Point3(1.1, 0, 0)),
        Sphere(0.5, SolidColorMaterial.from_rgb(0.2, 1.0, 0.2)).translate(Point3(0, 0, -0.5)),
        Sphere(0.5, SolidColorMaterial.from_rgb(0.2, 0.2, 1.0)).translate(Point3(-1.1, 0, 0)),
        create_floor(),
    ])


def create_fractal_scene(levels: int = 3) -> Scene:
    """A cube folded into its own octants a few times over."""
    origin = Point3(0, 0, 0)
    shape = Cube(1.0, SolidColorMaterial.from_rgb(0.9, 0.6, 0.2))
    for _ in range(levels):
        shape = (
            shape.scale(0.5)
            .translate(Vec3(0.5, 0.5, 0.5))
            .mirror_on_plane(origin, Vec3.left())
            .mirror_on_plane(origin, Vec3.down())
            .mirror_on_plane(origin, Vec3.backward())
        )
    fractal = shape.scale(0.6).rotate_y(0.6).rotate_x(-0.4).translate(Point3(0, 0.5, 0))
    return Scene([fractal, create_floor().translate(Vec3.down() * 0.5)])


def create_grid_scene() -> Scene:
    """An endless lattice of small spheres."""
    lattice = Sphere(0.25, SolidColorMaterial.from_rgb(0.3, 0.7, 1.0)).grid(1.5)
    return Scene([lattice.rotate_y(0.3).translate(Point3(0, 0, 2)), create_floor()])


SCENES = {
    'spheres': create_spheres_scene,
    'fractal': create_fractal_scene,
    'grid': create_grid_scene,
}


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='raymarcher - A Python Signed-Distance Ray Marcher',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene spheres --output render.png
  python main.py --scene fractal --width 1920 --height 1080 --output fractal.png
  python main.py --scene-file scenes/demo.yaml --output demo.png
        '''
    )

    parser.add_argument('--width', type=int, default=None, help='Image width (default: 800)')
    parser.add_argument('--height', type=int, default=None, help='Image height (default: 450)')
    parser.add_argument('--threads', type=int, default=None, help='Number of threads (0=auto)')
    parser.add_argument('--hit-distance', type=float, default=None,
                        help='Surface thickness for hits (default: 0.01)')
    parser.add_argument('--max-steps', type=int, default=None,
                        help='Step ceiling per ray (default: 1000)')
    parser.add_argument('--output', type=str, default='output/render.png', help='Output filename')
    parser.add_argument('--scene', type=str, default='spheres', choices=sorted(SCENES),
                        help='Built-in scene to render (default: spheres)')
    parser.add_argument('--scene-file', type=str, default=None,
                        help='YAML or JSON scene description (overrides --scene)')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    parser.add_argument('--info', action='store_true',
                        help='Show scene and render settings, then exit')

    args = parser.parse_args()

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    # Print header
    print("=" * 60)
    print("raymarcher")
    print("=" * 60)

    if args.scene_file:
        print(f"\nLoading scene: {args.scene_file}")
        try:
            geometry, lights, camera, settings = load_scene(args.scene_file)
        except SceneParseError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
    else:
        print(f"\nCreating scene: {args.scene}")
        geometry = SCENES[args.scene]()
        lights = [PointLight(
            position=Point3(-2.0, 2.7, -1.8),
            min_distance=7.0,
            max_distance=8.0,
            intensity=0.35
        )]
        camera = Camera.from_frustum(
            origin=Point3(0, 0, -5),
            upper_left=Point3(-4, 2.25, 5),
            lower_right=Point3(4, -2.25, 5)
        )
        settings = RenderSettings()

    # Command-line flags override the scene's settings
    if args.width is not None:
        settings.width = args.width
    if args.height is not None:
        settings.height = args.height
    if args.threads is not None:
        settings.num_threads = args.threads or (os.cpu_count() or 4)
    if args.hit_distance is not None:
        settings.hit_distance = args.hit_distance
    if args.max_steps is not None:
        settings.max_steps = args.max_steps

    print(f"\nRender Settings:")
    print(f"  Resolution: {settings.width}x{settings.height}")
    print(f"  Hit distance: {settings.hit_distance}")
    print(f"  Max steps: {settings.max_steps}")
    print(f"  Threads: {settings.num_threads}")
    print(f"  Top-level objects: {len(geometry)}")
    print(f"  Lights: {len(lights)}")

    if args.info:
        print(f"\nCamera: {camera}")
        for child in geometry:
            print(f"  Object: {child!r}")
        for light in lights:
            print(f"  Light: {light!r}")
        return 0

    renderer = Renderer(settings)

    # Progress tracking
    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

    renderer.set_progress_callback(progress_callback)

    print("\nRendering...")
    start_time = time.time()

    image = renderer.render(geometry, lights, camera)

    elapsed = time.time() - start_time
    print(f"\nRender completed in {elapsed:.2f} seconds")
    print(f"  Rays per second: {(settings.width * settings.height) / elapsed:.0f}")

    # Ensure output directory exists
    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    print(f"\nSaving to: {args.output}")
    renderer.save_image(image, args.output)

    print("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
