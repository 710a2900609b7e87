"""Tests for the random-spheres preset scene.

Tests cover:
- Scene layout (ground, small spheres, feature spheres)
- Reproducibility for a fixed layout seed
- Camera settings
"""

import numpy as np
import pytest


class TestRandomSpheresLayout:
    """Tests for the sphere layout."""

    def test_ground_and_feature_spheres(self):
        from src.glint.materials.material import MaterialType
        from src.glint.scene.presets import create_random_spheres_scene

        scene, _ = create_random_spheres_scene(seed=1)

        ground = scene.spheres[0]
        assert ground.center == (0.0, -1000.0, 0.0)
        assert ground.radius == 1000.0
        assert scene.materials[ground.material_id].params["albedo"] == (0.5, 0.5, 0.5)

        glass, diffuse, mirror = scene.spheres[-3:]
        assert glass.center == (0.0, 1.0, 0.0)
        assert diffuse.center == (-4.0, 1.0, 0.0)
        assert mirror.center == (4.0, 1.0, 0.0)
        assert scene.materials[glass.material_id].material_type == MaterialType.DIELECTRIC
        assert scene.materials[diffuse.material_id].material_type == MaterialType.LAMBERTIAN
        assert scene.materials[mirror.material_id].material_type == MaterialType.METAL
        assert scene.materials[mirror.material_id].params["fuzz"] == 0.0

    def test_small_spheres(self):
        from src.glint.scene.presets import (
            CLEARANCE_DISTANCE,
            CLEARANCE_POINT,
            GRID_EXTENT,
            SMALL_RADIUS,
            create_random_spheres_scene,
        )

        scene, _ = create_random_spheres_scene(seed=2)
        small = scene.spheres[1:-3]

        assert 0 < len(small) <= (2 * GRID_EXTENT) ** 2
        for sphere in small:
            assert sphere.radius == SMALL_RADIUS
            assert sphere.center[1] == SMALL_RADIUS
            assert -GRID_EXTENT <= sphere.center[0] < GRID_EXTENT
            assert -GRID_EXTENT <= sphere.center[2] < GRID_EXTENT
            assert np.linalg.norm(np.array(sphere.center) - CLEARANCE_POINT) > CLEARANCE_DISTANCE

    def test_every_sphere_has_own_material(self):
        from src.glint.scene.presets import create_random_spheres_scene

        scene, _ = create_random_spheres_scene(seed=3)
        assert scene.get_sphere_count() == scene.get_material_count()
        ids = [sphere.material_id for sphere in scene.spheres]
        assert len(set(ids)) == len(ids)

    def test_small_material_parameters(self):
        from src.glint.materials.material import MaterialType
        from src.glint.scene.presets import create_random_spheres_scene

        scene, _ = create_random_spheres_scene(seed=4)
        for info in scene.materials[1:-3]:
            if info.material_type == MaterialType.METAL:
                assert all(0.5 <= c < 1.0 for c in info.params["albedo"])
                assert 0.0 <= info.params["fuzz"] < 0.5
            elif info.material_type == MaterialType.DIELECTRIC:
                assert info.params["refraction_index"] == 1.5
            else:
                assert all(0.0 <= c < 1.0 for c in info.params["albedo"])

    def test_material_mix_is_mostly_diffuse(self):
        from src.glint.materials.material import MaterialType
        from src.glint.scene.presets import create_random_spheres_scene

        scene, _ = create_random_spheres_scene(seed=5)
        types = [info.material_type for info in scene.materials[1:-3]]
        diffuse = types.count(MaterialType.LAMBERTIAN) / len(types)
        assert 0.65 < diffuse < 0.95


class TestRandomSpheresSeeding:
    """Tests for layout reproducibility."""

    def test_same_seed_same_scene(self):
        from src.glint.scene.presets import create_random_spheres_scene

        first, _ = create_random_spheres_scene(seed=42)
        data_a = first.to_dict()
        second, _ = create_random_spheres_scene(seed=42)
        assert second.to_dict() == data_a

    def test_different_seed_different_scene(self):
        from src.glint.scene.presets import create_random_spheres_scene

        first, _ = create_random_spheres_scene(seed=1)
        data_a = first.to_dict()
        second, _ = create_random_spheres_scene(seed=2)
        assert second.to_dict() != data_a


class TestRandomSpheresCamera:
    """Tests for the preset camera."""

    def test_camera_settings(self):
        from src.glint.scene.presets import create_random_spheres_scene

        _, camera = create_random_spheres_scene(seed=0)
        assert camera.aspect_ratio == pytest.approx(16.0 / 9.0)
        assert camera.image_width == 1200
        assert camera.image_height == 675
        assert camera.samples_per_pixel == 100
        assert camera.max_depth == 50
        assert camera.vfov == 30.0
        assert camera.lookfrom == (13.0, 2.0, 3.0)
        assert camera.lookat == (0.0, 0.0, 0.0)
        assert camera.vup == (0.0, 1.0, 0.0)
        assert camera.defocus_angle == 0.6
        assert camera.focus_dist == 10.0

    def test_camera_overrides(self):
        from src.glint.scene.presets import create_random_spheres_scene

        _, camera = create_random_spheres_scene(
            seed=0, image_width=320, samples_per_pixel=8, max_depth=6
        )
        assert camera.image_width == 320
        assert camera.image_height == 180
        assert camera.samples_per_pixel == 8
        assert camera.max_depth == 6
