"""Tests for Camera class."""

import pytest
import math
import numpy as np

from spherecast.vec3 import Vec3, Point3
from spherecast.camera import Camera


def make_camera(**kwargs):
    params = dict(
        look_from=Point3(0, 0, 0),
        look_at=Point3(0, 0, -1),
        vup=Vec3(0, 1, 0),
        vfov=90,
        aspect_ratio=1.0,
    )
    params.update(kwargs)
    return Camera(**params)


class TestCameraCreation:
    """Test Camera construction."""

    def test_origin(self):
        cam = make_camera(aspect_ratio=16 / 9)
        assert cam.origin == Point3(0, 0, 0)

    def test_camera_basis_vectors(self):
        cam = make_camera()
        assert cam.w == Vec3(0, 0, 1)   # backward
        assert cam.u == Vec3(1, 0, 0)   # right
        assert cam.v == Vec3(0, 1, 0)   # up

    def test_basis_is_orthonormal(self):
        cam = make_camera(look_from=Point3(13, 2, 3), look_at=Point3(0, 0, 0), vfov=20)
        for axis in (cam.u, cam.v, cam.w):
            assert abs(axis.length() - 1.0) < 1e-12
        assert abs(cam.u.dot(cam.v)) < 1e-12
        assert abs(cam.u.dot(cam.w)) < 1e-12
        assert abs(cam.v.dot(cam.w)) < 1e-12

    def test_viewport_size(self):
        # vfov 90 gives a viewport of height 2 at unit distance
        cam = make_camera(aspect_ratio=2.0, focus_dist=3.0)
        assert abs(cam.vertical.length() - 6.0) < 1e-9
        assert abs(cam.horizontal.length() - 12.0) < 1e-9

    def test_lower_left_corner(self):
        cam = make_camera()
        assert cam.lower_left_corner == Point3(-1, -1, -1)

    def test_lens_radius(self):
        assert make_camera(aperture=0.5).lens_radius == 0.25


class TestCameraRays:
    """Test Camera.get_ray() method."""

    def test_center_ray(self):
        rng = np.random.default_rng(0)
        ray = make_camera().get_ray(0.5, 0.5, rng)
        assert ray.direction == Vec3(0, 0, -1)

    def test_corner_rays(self):
        rng = np.random.default_rng(0)
        cam = make_camera()

        bl = cam.get_ray(0, 0, rng)
        assert bl.direction == Vec3(-1, -1, -1)

        tr = cam.get_ray(1, 1, rng)
        assert tr.direction.x > 0
        assert tr.direction.y > 0

    def test_pinhole_origin(self):
        rng = np.random.default_rng(0)
        cam = make_camera(look_from=Point3(1, 2, 3), look_at=Point3(0, 0, 0))
        for _ in range(10):
            assert cam.get_ray(0.3, 0.7, rng).origin == Point3(1, 2, 3)


class TestDepthOfField:
    """Test lens sampling."""

    def test_origins_spread_over_lens(self):
        rng = np.random.default_rng(1)
        cam = make_camera(aperture=2.0, focus_dist=5.0)
        origins = [cam.get_ray(0.5, 0.5, rng).origin for _ in range(50)]

        for origin in origins:
            # Lens disk lies in the u-v plane through the camera origin
            assert abs(origin.z) < 1e-12
            assert origin.length() < 1.0
        assert any(origin.length() > 0.1 for origin in origins)

    def test_rays_converge_on_focus_plane(self):
        rng = np.random.default_rng(2)
        cam = make_camera(aperture=2.0, focus_dist=5.0)
        target = cam.lower_left_corner + cam.horizontal * 0.25 + cam.vertical * 0.6

        for _ in range(50):
            ray = cam.get_ray(0.25, 0.6, rng)
            assert ray.at(1.0) == target
            assert abs(ray.at(1.0).z + 5.0) < 1e-9


class TestShutter:
    """Test ray time sampling."""

    def test_closed_shutter_time(self):
        rng = np.random.default_rng(0)
        cam = make_camera(shutter_open=0.3, shutter_close=0.3)
        assert cam.get_ray(0.5, 0.5, rng).time == 0.3

    def test_time_within_interval(self):
        rng = np.random.default_rng(3)
        cam = make_camera(shutter_open=0.0, shutter_close=1.0)
        times = [cam.get_ray(0.5, 0.5, rng).time for _ in range(100)]
        assert all(0.0 <= t <= 1.0 for t in times)
        assert len(set(times)) > 1
