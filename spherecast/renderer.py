"""
Renderer module - the heart of the ray tracer.

Implements:
- Recursive path tracing (`ray_color`) with a bounded bounce depth
- Per-pixel supersampling with jittered sub-pixel offsets
- A fixed worker pool pulling pixel tasks from a shared, locked queue
- Order-preserving reassembly of the results into an image
"""

from __future__ import annotations
import logging
import os
import platform
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, NamedTuple, Optional
import numpy as np

from .vec3 import Color
from .ray import Ray
from .camera import Camera
from .shapes import Hittable
from .image import save_image

logger = logging.getLogger(__name__)

# Lower bound on hit distance; keeps bounced rays from re-hitting their origin
T_MIN = 0.001

SKY_WHITE = Color(1.0, 1.0, 1.0)
SKY_BLUE = Color(0.5, 0.7, 1.0)


class RenderError(Exception):
    """Raised when a render finishes without a result for every pixel."""
    pass


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 400
    height: int = 225
    samples_per_pixel: int = 100
    max_depth: int = 50
    num_threads: int = 4  # 0 = auto-detect
    seed: Optional[int] = None

    def __post_init__(self):
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


class PixelTask(NamedTuple):
    """One pixel to render.

    `i` is the column, `j` the row counted from the bottom, and `index`
    the pixel's position in the final raster-ordered output.
    """
    i: int
    j: int
    index: int


def sky_color(ray: Ray) -> Color:
    """Blend white to sky blue by the height of the ray direction."""
    unit_direction = ray.direction.normalize()
    a = 0.5 * (unit_direction.y + 1.0)
    return SKY_WHITE * (1.0 - a) + SKY_BLUE * a


def ray_color(ray: Ray, scene: Hittable, depth: int, rng: np.random.Generator) -> Color:
    """Compute the radiance carried back along a ray.

    Args:
        ray: The ray to trace
        scene: Anything exposing `hit(ray, t_min, t_max)`
        depth: Remaining bounces
        rng: Random source for material scattering

    Returns:
        Black once the bounces run out or the ray is absorbed, the sky
        gradient on a miss, otherwise the attenuated color of the bounce
    """
    if depth <= 0:
        return Color(0, 0, 0)

    hit_record = scene.hit(ray, T_MIN, float('inf'))
    if hit_record is None:
        return sky_color(ray)

    scatter_result = hit_record.material.scatter(ray, hit_record, rng)
    if scatter_result is None:
        return Color(0, 0, 0)

    return scatter_result.attenuation * ray_color(
        scatter_result.scattered_ray, scene, depth - 1, rng
    )


def generate_tasks(width: int, height: int) -> list[PixelTask]:
    """Enumerate pixel tasks in output order: top row first, left to right."""
    tasks = []
    for j in range(height - 1, -1, -1):
        for i in range(width):
            tasks.append(PixelTask(i, j, len(tasks)))
    return tasks


class Renderer:
    """Path tracing renderer with multi-threading support."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0).
                It is called from worker threads.
        """
        self._progress_callback = callback

    def sample_pixel(self, task: PixelTask, scene: Hittable, camera: Camera,
                     rng: np.random.Generator) -> Color:
        """Sum `samples_per_pixel` jittered samples for one pixel."""
        width = self.settings.width
        height = self.settings.height
        max_depth = self.settings.max_depth

        pixel_color = Color(0, 0, 0)
        for _ in range(self.settings.samples_per_pixel):
            u = (task.i + rng.random()) / (width - 1)
            v = (task.j + rng.random()) / (height - 1)
            ray = camera.get_ray(u, v, rng)
            pixel_color = pixel_color + ray_color(ray, scene, max_depth, rng)
        return pixel_color

    def render_pixels(self, scene: Hittable, camera: Camera) -> list[Color]:
        """Render every pixel and return the summed samples in output order.

        Workers pop tasks from a shared list under a lock and write each
        sum into the slot given by the task index. A worker exception is
        re-raised here once all workers have stopped.

        Args:
            scene: The scene to render (any Hittable)
            camera: The camera to render from

        Returns:
            One accumulated (not averaged) color per pixel, top row first
        """
        width = self.settings.width
        height = self.settings.height
        if width < 2 or height < 2:
            raise ValueError(f"Image must be at least 2x2 pixels, got {width}x{height}")
        if self.settings.samples_per_pixel < 1:
            raise ValueError(
                f"samples_per_pixel must be at least 1, got {self.settings.samples_per_pixel}"
            )

        tasks = generate_tasks(width, height)
        total = len(tasks)
        tasks_lock = threading.Lock()
        results: list[Optional[Color]] = [None] * total

        num_workers = max(1, min(self.settings.num_threads, total))
        seed_seq = np.random.SeedSequence(self.settings.seed)
        rngs = [np.random.default_rng(s) for s in seed_seq.spawn(num_workers)]

        def worker(rng: np.random.Generator) -> int:
            rendered = 0
            while True:
                with tasks_lock:
                    if not tasks:
                        return rendered
                    task = tasks.pop()
                    remaining = len(tasks)

                results[task.index] = self.sample_pixel(task, scene, camera, rng)
                rendered += 1

                if self._progress_callback:
                    self._progress_callback((total - remaining) / total)

        logger.info(
            "Rendering %dx%d at %d spp (max depth %d) on %d worker(s)",
            width, height, self.settings.samples_per_pixel,
            self.settings.max_depth, num_workers
        )
        start = time.perf_counter()

        if num_workers > 1:
            with ThreadPoolExecutor(max_workers=num_workers) as executor:
                futures = [executor.submit(worker, rng) for rng in rngs]
                counts = [future.result() for future in futures]
        else:
            counts = [worker(rngs[0])]

        missing = [index for index, color in enumerate(results) if color is None]
        if missing:
            raise RenderError(f"{len(missing)} of {total} pixels were not rendered")

        logger.info("Rendered %d pixels in %.2fs (per worker: %s)",
                    total, time.perf_counter() - start, counts)
        return results

    def render(self, scene: Hittable, camera: Camera) -> np.ndarray:
        """Render the scene and return the image as a numpy array.

        Args:
            scene: The scene to render (any Hittable)
            camera: The camera to render from

        Returns:
            Linear HDR image of shape (height, width, 3), averaged over
            samples; row 0 is the top scanline
        """
        pixels = self.render_pixels(scene, camera)
        image = np.array([color.to_array() for color in pixels], dtype=np.float64)
        image = image.reshape(self.settings.height, self.settings.width, 3)
        return image / self.settings.samples_per_pixel

    def save_image(self, image: np.ndarray, filename: str) -> None:
        """Save a rendered image; the extension selects the format."""
        save_image(image, filename)


def get_platform_info() -> dict:
    """Get information about the current platform.

    Returns:
        Dictionary with platform details
    """
    info = {
        'system': platform.system(),
        'machine': platform.machine(),
        'processor': platform.processor(),
        'python_version': platform.python_version(),
        'cpu_count': os.cpu_count(),
        'is_arm': platform.machine().lower() in ('arm64', 'aarch64'),
        'is_x86': platform.machine().lower() in ('x86_64', 'amd64', 'x86'),
    }
    info['is_apple_silicon'] = info['system'] == 'Darwin' and info['is_arm']
    return info
