"""Scene module for scene storage and construction.

Components:
    intersection: Sphere storage in Taichi fields and closest-hit search
    manager: Unified scene manager coordinating spheres and materials
    presets: Ready-made scenes (random spheres)

Scene data is organized for efficient GPU access:
    - Structure-of-Arrays layout for sphere data
    - Contiguous material ID arrays
"""

from .intersection import (
    MAX_SPHERES,
    HitInfo,
    add_sphere,
    clear_scene,
    closest_hit,
    get_sphere,
    get_sphere_count,
    hit_scene,
)
from .manager import (
    MaterialInfo,
    SceneConfig,
    SceneManager,
    SphereInfo,
)
from .presets import create_random_spheres_scene

__all__ = [
    # Intersection module
    "MAX_SPHERES",
    "HitInfo",
    "add_sphere",
    "clear_scene",
    "closest_hit",
    "get_sphere",
    "get_sphere_count",
    "hit_scene",
    # Manager module
    "SceneManager",
    "MaterialInfo",
    "SphereInfo",
    "SceneConfig",
    # Presets
    "create_random_spheres_scene",
]
