"""
spherecast - A Python Path Tracer for sphere scenes

Renders spheres with stochastic path tracing:
- Diffuse, metal and glass materials
- Depth of field through a thin-lens camera
- Jittered supersampling (antialiasing)
- Multi-threaded per-pixel scheduling with order-preserving output
- PPM and Pillow image output
"""

__version__ = "0.1.0"
__author__ = "spherecast Team"

from .vec3 import Vec3, Point3, Color
from .ray import Ray
from .shapes import Sphere, HittableList, HitRecord, Hittable
from .materials import Material, ScatterResult, Lambertian, Metal, Dielectric
from .camera import Camera
from .renderer import (
    Renderer, RenderSettings, RenderError, PixelTask,
    ray_color, sky_color, generate_tasks, get_platform_info
)
from .image import format_color, to_ldr, write_ppm, save_image
from .scenes import random_scene, random_scene_camera, demo_scene, demo_camera
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene
