"""
Built-in scenes.

`random_scene` is the classic field of small random spheres around three
large ones; `demo_scene` is a small fixed arrangement for quick renders.
Each scene has a matching camera factory.
"""

from __future__ import annotations
import numpy as np

from .vec3 import Vec3, Point3, Color
from .camera import Camera
from .shapes import Sphere, HittableList
from .materials import Lambertian, Metal, Dielectric


def random_scene(rng: np.random.Generator) -> HittableList:
    """Create the random sphere field.

    Args:
        rng: Random source for placement and material choice

    Returns:
        A ground sphere, up to 484 small spheres and three large ones
    """
    world = HittableList()

    ground_material = Lambertian(Color(0.5, 0.5, 0.5))
    world.add(Sphere(Point3(0, -1000, 0), 1000, ground_material))

    glass = Dielectric(1.5)
    clearing = Point3(4, 0.2, 0)

    for a in range(-11, 11):
        for b in range(-11, 11):
            choose_mat = rng.random()
            center = Point3(a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random())

            if (center - clearing).length() <= 0.9:
                continue

            if choose_mat < 0.8:
                albedo = Color.random(rng) * Color.random(rng)
                material = Lambertian(albedo)
            elif choose_mat < 0.95:
                albedo = Color.random(rng, 0.5, 1.0)
                fuzz = rng.uniform(0.0, 0.5)
                material = Metal(albedo, fuzz)
            else:
                material = glass
            world.add(Sphere(center, 0.2, material))

    world.add(Sphere(Point3(0, 1, 0), 1.0, glass))
    world.add(Sphere(Point3(-4, 1, 0), 1.0, Lambertian(Color(0.4, 0.2, 0.1))))
    world.add(Sphere(Point3(4, 1, 0), 1.0, Metal(Color(0.7, 0.6, 0.5), 0.0)))

    return world


def random_scene_camera(aspect_ratio: float) -> Camera:
    """Camera framing the random sphere field."""
    return Camera(
        look_from=Point3(13, 2, 3),
        look_at=Point3(0, 0, 0),
        vup=Vec3(0, 1, 0),
        vfov=20,
        aspect_ratio=aspect_ratio,
        aperture=0.1,
        focus_dist=10.0
    )


def demo_scene() -> HittableList:
    """Create a demo scene with one sphere of each material."""
    world = HittableList()

    # Ground
    world.add(Sphere(Point3(0, -100.5, -1), 100, Lambertian(Color(0.8, 0.8, 0.0))))

    # Diffuse center, hollow glass left, brushed metal right
    world.add(Sphere(Point3(0, 0, -1), 0.5, Lambertian(Color(0.1, 0.2, 0.5))))
    glass = Dielectric(1.5)
    world.add(Sphere(Point3(-1, 0, -1), 0.5, glass))
    world.add(Sphere(Point3(-1, 0, -1), 0.45, Dielectric(1.0 / 1.5)))
    world.add(Sphere(Point3(1, 0, -1), 0.5, Metal(Color(0.8, 0.6, 0.2), 0.3)))

    return world


def demo_camera(aspect_ratio: float) -> Camera:
    """Camera framing the demo scene."""
    look_from = Point3(-2, 2, 1)
    look_at = Point3(0, 0, -1)
    return Camera(
        look_from=look_from,
        look_at=look_at,
        vup=Vec3(0, 1, 0),
        vfov=40,
        aspect_ratio=aspect_ratio,
        aperture=0.0,
        focus_dist=(look_from - look_at).length()
    )


SCENES = {
    'random': (random_scene, random_scene_camera),
    'demo': (lambda rng: demo_scene(), demo_camera),
}
