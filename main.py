#!/usr/bin/env python3
"""
spherecast - A Python Path Tracer

Main entry point for rendering scenes.
"""

import argparse
import logging
import sys
import threading
import time
from dataclasses import replace
from pathlib import Path

import numpy as np

from spherecast.renderer import Renderer, RenderSettings, RenderError, get_platform_info
from spherecast.scene_parser import SceneParseError, load_scene
from spherecast.scenes import SCENES


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='spherecast - A Python Path Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene demo --output render.png
  python main.py --width 1200 --height 800 --samples 500 --output final.ppm
  python main.py --scene-file scenes/three_spheres.yaml --threads 8
        '''
    )

    parser.add_argument('--width', type=int, help='Image width (default: 400)')
    parser.add_argument('--height', type=int, help='Image height (default: 225)')
    parser.add_argument('--samples', type=int, help='Samples per pixel (default: 100)')
    parser.add_argument('--depth', type=int, help='Max bounce depth (default: 50)')
    parser.add_argument('--threads', type=int, help='Number of worker threads (0=auto, default: 4)')
    parser.add_argument('--seed', type=int, help='Seed for scene generation and sampling')
    parser.add_argument('--output', type=str, default='output/render.ppm', help='Output filename')
    parser.add_argument('--scene', type=str, default='random', choices=sorted(SCENES),
                        help='Built-in scene to render (default: random)')
    parser.add_argument('--scene-file', type=str, help='YAML or JSON scene description')
    parser.add_argument('--verbose', action='store_true', help='Log render details')
    parser.add_argument('--info', action='store_true', help='Show platform info and exit')
    return parser


def apply_overrides(settings: RenderSettings, args: argparse.Namespace) -> RenderSettings:
    """Return settings with any command-line values applied on top."""
    overrides = {
        'width': args.width,
        'height': args.height,
        'samples_per_pixel': args.samples,
        'max_depth': args.depth,
        'num_threads': args.threads,
        'seed': args.seed,
    }
    return replace(settings, **{k: v for k, v in overrides.items() if v is not None})


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    if args.info:
        info = get_platform_info()
        print("spherecast Platform Info:")
        print(f"  System: {info['system']}")
        print(f"  Machine: {info['machine']}")
        print(f"  Processor: {info['processor']}")
        print(f"  Python: {info['python_version']}")
        print(f"  CPU Cores: {info['cpu_count']}")
        print(f"  ARM: {info['is_arm']}")
        print(f"  x86: {info['is_x86']}")
        print(f"  Apple Silicon: {info['is_apple_silicon']}")
        return 0

    print("=" * 60)
    print("spherecast Path Tracer")
    print("=" * 60)

    try:
        if args.scene_file:
            print(f"\nLoading scene file: {args.scene_file}")
            world, camera, file_settings = load_scene(args.scene_file)
            settings = apply_overrides(file_settings, args)
        else:
            settings = apply_overrides(RenderSettings(), args)
            print(f"\nCreating scene: {args.scene}")
            build_scene, build_camera = SCENES[args.scene]
            world = build_scene(np.random.default_rng(settings.seed))
            camera = build_camera(settings.aspect_ratio)
    except (SceneParseError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"  Objects in scene: {len(world)}")

    print(f"\nRender Settings:")
    print(f"  Resolution: {settings.width}x{settings.height}")
    print(f"  Samples: {settings.samples_per_pixel}")
    print(f"  Max Depth: {settings.max_depth}")
    print(f"  Threads: {settings.num_threads}")

    renderer = Renderer(settings)

    last_progress = [0]
    progress_lock = threading.Lock()

    def progress_callback(progress: float):
        pct = int(progress * 100)
        with progress_lock:
            if pct <= last_progress[0]:
                return
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

    renderer.set_progress_callback(progress_callback)

    print("\nRendering...")
    start_time = time.time()

    try:
        image = renderer.render(world, camera)
    except (RenderError, ValueError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1

    elapsed = max(time.time() - start_time, 1e-6)
    print(f"\nRender completed in {elapsed:.2f} seconds")
    print(f"  Samples per second: {(settings.width * settings.height * settings.samples_per_pixel) / elapsed:.0f}")

    output_path = Path(args.output)
    print(f"\nSaving to: {args.output}")
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        renderer.save_image(image, args.output)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
