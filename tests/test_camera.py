"""Unit tests for the thin-lens camera.

Tests cover:
- Camera configuration defaults and validation
- Derived geometry (basis, viewport, pixel grid, defocus disk)
- Primary ray generation with and without defocus
"""

import math

import numpy as np
import pytest


class TestCameraConfig:
    """Tests for the Camera dataclass."""

    def test_defaults(self):
        from src.glint.camera.thin_lens import Camera

        camera = Camera()
        assert camera.aspect_ratio == 1.0
        assert camera.image_width == 100
        assert camera.samples_per_pixel == 10
        assert camera.max_depth == 10
        assert camera.vfov == 90.0
        assert camera.lookfrom == (0.0, 0.0, 0.0)
        assert camera.lookat == (0.0, 0.0, -1.0)
        assert camera.vup == (0.0, 1.0, 0.0)
        assert camera.defocus_angle == 0.0
        assert camera.focus_dist == 10.0

    def test_image_height_from_aspect_ratio(self):
        from src.glint.camera.thin_lens import Camera

        assert Camera(aspect_ratio=16.0 / 9.0, image_width=400).image_height == 225
        assert Camera(aspect_ratio=2.0, image_width=101).image_height == 50

    def test_image_height_at_least_one(self):
        from src.glint.camera.thin_lens import Camera

        assert Camera(aspect_ratio=16.0, image_width=10).image_height == 1

    def test_pixel_samples_scale(self):
        from src.glint.camera.thin_lens import Camera

        assert Camera(samples_per_pixel=4).pixel_samples_scale == 0.25

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"image_width": 0},
            {"samples_per_pixel": 0},
            {"max_depth": -1},
            {"aspect_ratio": 0.0},
            {"focus_dist": 0.0},
            {"vfov": 0.0},
            {"vfov": -30.0},
            {"vfov": 180.0},
            {"vfov": 270.0},
        ],
    )
    def test_invalid_settings_rejected(self, kwargs):
        from src.glint.camera.thin_lens import Camera

        with pytest.raises(ValueError):
            Camera(**kwargs)

    def test_zero_max_depth_allowed(self):
        from src.glint.camera.thin_lens import Camera

        assert Camera(max_depth=0).max_depth == 0

    def test_vfov_just_inside_range_allowed(self):
        from src.glint.camera.thin_lens import Camera, compute_camera_geometry

        for vfov in (0.5, 179.5):
            geometry = compute_camera_geometry(Camera(vfov=vfov, image_width=10))
            assert all(math.isfinite(c) for c in geometry.pixel_delta_u)
            assert geometry.pixel_delta_u[0] > 0.0


class TestCameraGeometry:
    """Tests for compute_camera_geometry."""

    def test_default_basis(self):
        from src.glint.camera.thin_lens import Camera, compute_camera_geometry

        geometry = compute_camera_geometry(Camera())
        np.testing.assert_allclose(geometry.u, (1.0, 0.0, 0.0), atol=1e-12)
        np.testing.assert_allclose(geometry.v, (0.0, 1.0, 0.0), atol=1e-12)
        np.testing.assert_allclose(geometry.w, (0.0, 0.0, 1.0), atol=1e-12)

    def test_default_pixel_grid(self):
        """A 90 degree view at focus distance 10 spans a 20 x 20 viewport."""
        from src.glint.camera.thin_lens import Camera, compute_camera_geometry

        geometry = compute_camera_geometry(Camera())
        assert geometry.image_width == 100
        assert geometry.image_height == 100
        np.testing.assert_allclose(geometry.pixel_delta_u, (0.2, 0.0, 0.0), atol=1e-12)
        np.testing.assert_allclose(geometry.pixel_delta_v, (0.0, -0.2, 0.0), atol=1e-12)
        np.testing.assert_allclose(geometry.pixel00_loc, (-9.9, 9.9, -10.0), atol=1e-12)

    def test_viewport_width_uses_rounded_height(self):
        """Pixels stay square even when the height was rounded down."""
        from src.glint.camera.thin_lens import Camera, compute_camera_geometry

        geometry = compute_camera_geometry(Camera(aspect_ratio=16.0 / 9.0, image_width=401))
        du = np.linalg.norm(geometry.pixel_delta_u)
        dv = np.linalg.norm(geometry.pixel_delta_v)
        assert du == pytest.approx(dv, rel=1e-12)

    def test_basis_is_orthonormal(self):
        from src.glint.camera.thin_lens import Camera, compute_camera_geometry

        geometry = compute_camera_geometry(
            Camera(lookfrom=(13.0, 2.0, 3.0), lookat=(0.0, 0.0, 0.0), vfov=30.0)
        )
        u, v, w = (np.array(geometry.u), np.array(geometry.v), np.array(geometry.w))
        for a in (u, v, w):
            assert np.linalg.norm(a) == pytest.approx(1.0)
        assert abs(np.dot(u, v)) < 1e-12
        assert abs(np.dot(u, w)) < 1e-12
        assert abs(np.dot(v, w)) < 1e-12
        # w points back toward the camera
        np.testing.assert_allclose(w, np.array([13.0, 2.0, 3.0]) / math.sqrt(182.0))

    def test_defocus_disk_radius(self):
        from src.glint.camera.thin_lens import Camera, compute_camera_geometry

        geometry = compute_camera_geometry(Camera(defocus_angle=0.6, focus_dist=10.0))
        expected = 10.0 * math.tan(math.radians(0.3))
        assert np.linalg.norm(geometry.defocus_disk_u) == pytest.approx(expected)
        assert np.linalg.norm(geometry.defocus_disk_v) == pytest.approx(expected)

    def test_coincident_lookfrom_lookat_rejected(self):
        from src.glint.camera.thin_lens import Camera, compute_camera_geometry

        with pytest.raises(ValueError):
            compute_camera_geometry(Camera(lookfrom=(1.0, 1.0, 1.0), lookat=(1.0, 1.0, 1.0)))

    def test_vup_parallel_to_view_rejected(self):
        from src.glint.camera.thin_lens import Camera, compute_camera_geometry

        with pytest.raises(ValueError):
            compute_camera_geometry(
                Camera(lookfrom=(0.0, 5.0, 0.0), lookat=(0.0, 0.0, 0.0), vup=(0.0, 1.0, 0.0))
            )


class TestRayGeneration:
    """Tests for get_ray via sample_ray."""

    def test_pixel_center_ray_with_constant_source(self):
        """A draw of 0.5 aims the ray at the exact pixel center."""
        from src.glint.camera.thin_lens import Camera, sample_ray, setup_camera
        from src.glint.core.sampler import use_constant_random

        setup_camera(Camera())
        use_constant_random(0.5)

        origin, direction = sample_ray(0, 0)
        np.testing.assert_allclose(origin, (0.0, 0.0, 0.0), atol=1e-6)
        np.testing.assert_allclose(direction, (-9.9, 9.9, -10.0), atol=1e-4)

        origin, direction = sample_ray(3, 7)
        np.testing.assert_allclose(direction, (-9.9 + 0.6, 9.9 - 1.4, -10.0), atol=1e-4)

    def test_rows_count_from_top(self):
        from src.glint.camera.thin_lens import Camera, sample_ray, setup_camera
        from src.glint.core.sampler import use_constant_random

        setup_camera(Camera())
        use_constant_random(0.5)

        _, top = sample_ray(50, 0)
        _, bottom = sample_ray(50, 99)
        assert top[1] > 0.0
        assert bottom[1] < 0.0

    def test_jittered_ray_stays_inside_pixel(self):
        from src.glint.camera.thin_lens import Camera, sample_ray, setup_camera

        geometry = setup_camera(Camera())
        center = np.array(geometry.pixel00_loc)
        for stream in range(20):
            _, direction = sample_ray(0, 0, stream)
            offset = np.array(direction) - center
            assert abs(offset[0]) <= 0.1 + 1e-5
            assert abs(offset[1]) <= 0.1 + 1e-5
            assert abs(offset[2]) < 1e-5

    def test_pinhole_origin_is_center(self):
        from src.glint.camera.thin_lens import Camera, sample_ray, setup_camera

        setup_camera(Camera(lookfrom=(1.0, 2.0, 3.0), lookat=(0.0, 0.0, 0.0)))
        for stream in range(10):
            origin, _ = sample_ray(5, 5, stream)
            np.testing.assert_allclose(origin, (1.0, 2.0, 3.0), atol=1e-6)

    def test_defocus_origin_on_lens_disk(self):
        """With defocus the origin lies on the lens disk around the center."""
        from src.glint.camera.thin_lens import Camera, sample_ray, setup_camera

        geometry = setup_camera(Camera(defocus_angle=10.0, focus_dist=5.0))
        radius = np.linalg.norm(geometry.defocus_disk_u)
        w = np.array(geometry.w)

        origins = np.array([sample_ray(10, 10, stream)[0] for stream in range(50)])
        offsets = origins - np.array(geometry.center)
        assert np.linalg.norm(offsets, axis=1).max() <= radius + 1e-5
        np.testing.assert_allclose(offsets @ w, 0.0, atol=1e-5)
        assert np.linalg.norm(offsets, axis=1).max() > 0.0

    def test_defocus_rays_converge_on_focus_plane(self):
        """Every lens sample for a pixel ends on the focus plane inside that pixel."""
        from src.glint.camera.thin_lens import Camera, sample_ray, setup_camera

        geometry = setup_camera(Camera(defocus_angle=10.0, focus_dist=5.0))
        target = np.array(geometry.pixel00_loc)

        for stream in range(10):
            origin, direction = sample_ray(0, 0, stream)
            end = np.array(origin) + np.array(direction)
            assert abs(np.dot(end - target, np.array(geometry.w))) < 1e-4
            assert np.linalg.norm(end - target) < 0.75 * np.linalg.norm(
                np.array(geometry.pixel_delta_u)
            )


class TestCameraInfo:
    """Tests for get_camera_info."""

    def test_info_after_setup(self):
        from src.glint.camera.thin_lens import Camera, get_camera_info, setup_camera

        setup_camera(Camera())
        info = get_camera_info()
        assert info["center"] == (0.0, 0.0, 0.0)
        assert set(info) == {
            "center",
            "pixel00_loc",
            "pixel_delta_u",
            "pixel_delta_v",
            "u",
            "v",
            "w",
            "defocus_disk_u",
            "defocus_disk_v",
        }

    def test_info_before_setup_raises(self, monkeypatch):
        from src.glint.camera import thin_lens

        monkeypatch.setattr(thin_lens, "_current_geometry", None)
        with pytest.raises(RuntimeError):
            thin_lens.get_camera_info()
