"""Pytest configuration for the glint test suite.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Reset scene, materials, render target and random source around each test."""
    # Import here so Taichi is initialized before any field is created
    from src.glint.core.integrator import reset_render_target
    from src.glint.core.sampler import seed_streams, use_random_streams
    from src.glint.materials.material import clear_all_materials
    from src.glint.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        clear_all_materials()
        reset_render_target()
        use_random_streams()

    _clear_all()
    seed_streams(12345, 4096)

    yield

    _clear_all()
