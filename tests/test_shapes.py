"""Tests for spheres and the scene aggregate."""

import pytest
import math
import numpy as np

from spherecast.vec3 import Vec3, Point3, Color
from spherecast.ray import Ray
from spherecast.shapes import Sphere, HittableList, HitRecord
from spherecast.materials import Lambertian, Metal, Dielectric


class TestSphere:
    """Test Sphere class."""

    def test_creation(self):
        center = Point3(0, 0, 0)
        sphere = Sphere(center, 1.0)
        assert sphere.center == center
        assert sphere.radius == 1.0

    def test_hit_through_center(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        hit = sphere.hit(ray, 0.001, float('inf'))

        assert hit is not None
        assert abs(hit.t - 4.0) < 1e-9
        assert hit.point == Point3(0, 0, -1)

    def test_t_scales_with_direction_length(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 2))
        hit = sphere.hit(ray, 0.001, float('inf'))
        assert abs(hit.t - 2.0) < 1e-9

    def test_hit_front_face(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        hit = sphere.hit(ray, 0.001, float('inf'))

        assert hit.front_face is True
        assert hit.normal == Vec3(0, 0, -1)
        assert hit.normal.dot(ray.direction) < 0

    def test_hit_from_inside(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        hit = sphere.hit(ray, 0.001, float('inf'))

        assert hit is not None
        assert hit.front_face is False
        # Outward normal is +z; the stored normal is flipped to face the ray
        assert hit.normal == Vec3(0, 0, -1)

    def test_miss(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 5, -5), Vec3(0, 0, 1))
        assert sphere.hit(ray, 0.001, float('inf')) is None

    def test_behind_ray(self):
        sphere = Sphere(Point3(0, 0, -5), 1.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        assert sphere.hit(ray, 0.001, float('inf')) is None

    def test_t_range_falls_back_to_far_root(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))

        hit = sphere.hit(ray, 4.5, float('inf'))
        assert hit is not None
        assert abs(hit.t - 6.0) < 1e-9

    def test_t_min_is_exclusive(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))

        hit = sphere.hit(ray, 4.0, float('inf'))
        assert abs(hit.t - 6.0) < 1e-9

    def test_t_max_is_inclusive(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))

        assert sphere.hit(ray, 0.001, 4.0) is not None
        assert sphere.hit(ray, 0.001, 3.999) is None

    def test_both_roots_out_of_range(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        assert sphere.hit(ray, 6.5, float('inf')) is None

    def test_with_material(self):
        material = Lambertian(Color(1, 0, 0))
        sphere = Sphere(Point3(0, 0, 0), 1.0, material)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        hit = sphere.hit(ray, 0.001, float('inf'))
        assert hit.material is material

    def test_hit_points_lie_on_surface(self):
        rng = np.random.default_rng(21)
        center = Point3(1, -2, 3)
        radius = 2.5
        sphere = Sphere(center, radius)

        hits = 0
        for _ in range(300):
            origin = center + Vec3.random_unit_vector(rng) * 6.0
            target = center + Vec3.random_in_unit_sphere(rng) * 3.0
            ray = Ray(origin, target - origin)
            hit = sphere.hit(ray, 0.001, float('inf'))
            if hit is None:
                continue
            hits += 1
            assert abs((hit.point - center).length() - radius) < 1e-9
            assert abs(hit.normal.length() - 1.0) < 1e-9
            assert hit.normal.dot(ray.direction) < 0
        assert hits > 0


class TestHitRecord:
    """Test HitRecord face orientation."""

    def test_set_face_normal_outside(self):
        rec = HitRecord(point=Point3(0, 0, 0), normal=Vec3(0, 1, 0), t=1.0, front_face=False)
        rec.set_face_normal(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), Vec3(0, 1, 0))
        assert rec.front_face is True
        assert rec.normal == Vec3(0, 1, 0)

    def test_set_face_normal_inside(self):
        rec = HitRecord(point=Point3(0, 0, 0), normal=Vec3(0, 1, 0), t=1.0, front_face=True)
        rec.set_face_normal(Ray(Point3(0, -1, 0), Vec3(0, 1, 0)), Vec3(0, 1, 0))
        assert rec.front_face is False
        assert rec.normal == Vec3(0, -1, 0)


class TestHittableList:
    """Test HittableList class."""

    def test_empty_list(self):
        world = HittableList()
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        assert world.hit(ray, 0.001, float('inf')) is None
        assert len(world) == 0

    def test_add_and_iterate(self):
        world = HittableList()
        a = Sphere(Point3(0, 0, -1), 0.5)
        b = Sphere(Point3(0, 0, -3), 0.5)
        world.add(a)
        world.add(b)
        assert len(world) == 2
        assert list(world) == [a, b]

    def test_clear(self):
        world = HittableList([Sphere(Point3(0, 0, -1), 0.5)])
        world.clear()
        assert len(world) == 0

    @pytest.mark.parametrize("near_first", [True, False])
    def test_nearest_hit_wins(self, near_first):
        near_mat = Lambertian(Color(1, 0, 0))
        far_mat = Metal(Color(0, 0, 1), 0.0)
        near = Sphere(Point3(0, 0, -2), 0.5, near_mat)
        far = Sphere(Point3(0, 0, -5), 0.5, far_mat)

        world = HittableList([near, far] if near_first else [far, near])
        hit = world.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, float('inf'))

        assert hit is not None
        assert hit.material is near_mat
        assert abs(hit.t - 1.5) < 1e-9

    def test_exact_tie_keeps_first_object(self):
        first_mat = Lambertian(Color(1, 0, 0))
        second_mat = Dielectric(1.5)
        world = HittableList([
            Sphere(Point3(0, 0, -2), 0.5, first_mat),
            Sphere(Point3(0, 0, -2), 0.5, second_mat),
        ])
        hit = world.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, float('inf'))
        assert hit.material is first_mat

    def test_respects_t_max(self):
        world = HittableList([Sphere(Point3(0, 0, -5), 0.5)])
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        assert world.hit(ray, 0.001, 2.0) is None

    def test_shared_material(self):
        shared = Lambertian(Color(0.5, 0.5, 0.5))
        world = HittableList([
            Sphere(Point3(-1, 0, -2), 0.5, shared),
            Sphere(Point3(1, 0, -2), 0.5, shared),
        ])
        left = world.hit(Ray(Point3(-1, 0, 0), Vec3(0, 0, -1)), 0.001, float('inf'))
        right = world.hit(Ray(Point3(1, 0, 0), Vec3(0, 0, -1)), 0.001, float('inf'))
        assert left.material is right.material is shared
