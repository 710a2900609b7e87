"""Unit tests for the Lambertian material module.

Tests cover:
- Scattered directions lie on the unit sphere around the normal
- Attenuation equals albedo and the surface never absorbs
- Degenerate direction fallback
- Material registry operations and albedo validation
"""

import numpy as np
import pytest
import taichi as ti


class TestLambertianScatter:
    """Tests for scatter_lambertian."""

    def test_direction_is_normal_plus_unit_vector(self):
        """direction - normal is a unit vector for every sample."""
        from src.glint.materials.lambertian import scatter_lambertian

        n = 1000
        offsets = ti.field(dtype=ti.f32, shape=n)
        scattered = ti.field(dtype=ti.i32, shape=n)

        @ti.kernel
        def test_kernel():
            for k in range(n):
                normal = ti.math.vec3(0.0, 1.0, 0.0)
                direction, _, did_scatter = scatter_lambertian(
                    ti.math.vec3(0.5, 0.5, 0.5), normal, k
                )
                offsets[k] = (direction - normal).norm()
                scattered[k] = did_scatter

        test_kernel()
        values = offsets.to_numpy()
        assert abs(values - 1.0).max() < 1e-4
        assert scattered.to_numpy().min() == 1

    def test_directions_lean_toward_normal(self):
        """The average scattered direction points along the normal."""
        from src.glint.materials.lambertian import scatter_lambertian

        n = 4000
        directions = ti.Vector.field(3, dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for k in range(n):
                direction, _, _ = scatter_lambertian(
                    ti.math.vec3(1.0, 1.0, 1.0), ti.math.vec3(0.0, 0.0, 1.0), k
                )
                directions[k] = direction

        test_kernel()
        d = directions.to_numpy()
        assert (d[:, 2] >= -1e-6).all()
        mean = d.mean(axis=0)
        assert abs(mean[0]) < 0.05
        assert abs(mean[1]) < 0.05
        assert abs(mean[2] - 1.0) < 0.05

    def test_attenuation_is_albedo(self):
        from src.glint.materials.lambertian import scatter_lambertian

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            _, attenuation, _ = scatter_lambertian(
                ti.math.vec3(0.8, 0.3, 0.1), ti.math.vec3(0.0, 1.0, 0.0), 0
            )
            result[None] = attenuation

        test_kernel()
        a = result[None]
        assert abs(a[0] - 0.8) < 1e-6
        assert abs(a[1] - 0.3) < 1e-6
        assert abs(a[2] - 0.1) < 1e-6

    def test_degenerate_direction_falls_back_to_normal(self):
        """A unit vector exactly opposite the normal yields the normal."""
        from src.glint.core.ray import random_unit_vector
        from src.glint.core.sampler import use_constant_random
        from src.glint.materials.lambertian import scatter_lambertian

        result = ti.Vector.field(3, dtype=ti.f32, shape=())
        expected = ti.Vector.field(3, dtype=ti.f32, shape=())

        # With a constant source the unit vector is the same on every call,
        # so its negation cancels it exactly
        @ti.kernel
        def test_kernel():
            normal = -random_unit_vector(0)
            direction, _, _ = scatter_lambertian(ti.math.vec3(0.5, 0.5, 0.5), normal, 0)
            result[None] = direction
            expected[None] = normal

        use_constant_random(0.0)
        test_kernel()
        d = result[None]
        e = expected[None]
        assert abs(d[0] - e[0]) < 1e-6
        assert abs(d[1] - e[1]) < 1e-6
        assert abs(d[2] - e[2]) < 1e-6
        assert abs(e[0] - 1.0 / np.sqrt(3.0)) < 1e-5


class TestLambertianRegistry:
    """Tests for the Lambertian material registry."""

    def test_add_material(self):
        from src.glint.materials.lambertian import (
            add_lambertian_material,
            get_lambertian_material_count,
            lambertian_albedos,
        )

        idx = add_lambertian_material((0.7, 0.6, 0.5))
        assert idx == 0
        assert get_lambertian_material_count() == 1
        stored = lambertian_albedos[idx]
        assert abs(stored[0] - 0.7) < 1e-6
        assert abs(stored[1] - 0.6) < 1e-6
        assert abs(stored[2] - 0.5) < 1e-6

    def test_clear_materials(self):
        from src.glint.materials.lambertian import (
            add_lambertian_material,
            clear_lambertian_materials,
            get_lambertian_material_count,
        )

        add_lambertian_material((0.5, 0.5, 0.5))
        add_lambertian_material((0.2, 0.2, 0.2))
        clear_lambertian_materials()
        assert get_lambertian_material_count() == 0

    @pytest.mark.parametrize(
        "albedo",
        [(1.1, 0.5, 0.5), (0.5, -0.1, 0.5), (0.5, 0.5), (0.1, 0.2, 0.3, 0.4)],
    )
    def test_invalid_albedo_rejected(self, albedo):
        from src.glint.materials.lambertian import add_lambertian_material

        with pytest.raises(ValueError):
            add_lambertian_material(albedo)

    def test_boundary_albedo_accepted(self):
        from src.glint.materials.lambertian import add_lambertian_material

        assert add_lambertian_material((0.0, 1.0, 0.0)) == 0

    def test_capacity_exceeded_raises(self):
        from src.glint.materials.lambertian import (
            MAX_LAMBERTIAN_MATERIALS,
            add_lambertian_material,
            num_lambertian_materials,
        )

        num_lambertian_materials[None] = MAX_LAMBERTIAN_MATERIALS
        with pytest.raises(RuntimeError):
            add_lambertian_material((0.5, 0.5, 0.5))

    def test_scatter_by_id_uses_stored_albedo(self):
        from src.glint.materials.lambertian import (
            add_lambertian_material,
            scatter_lambertian_by_id,
        )

        add_lambertian_material((0.1, 0.1, 0.1))
        idx = add_lambertian_material((0.9, 0.4, 0.2))
        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel(material_idx: ti.i32):
            _, attenuation, _ = scatter_lambertian_by_id(
                material_idx, ti.math.vec3(0.0, 1.0, 0.0), 0
            )
            result[None] = attenuation

        test_kernel(idx)
        a = result[None]
        assert abs(a[0] - 0.9) < 1e-6
        assert abs(a[1] - 0.4) < 1e-6
        assert abs(a[2] - 0.2) < 1e-6
