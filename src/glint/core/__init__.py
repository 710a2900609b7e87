"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    sampler: Per-pixel PCG random streams
    interval: Closed/open real intervals for hit windows
    ray: Ray data structure, reflection/refraction and random directions
    integrator: Path tracing kernel and the render target
    renderer: Camera-driven progressive renderer

All compute-intensive operations use Taichi kernels for GPU acceleration.
"""

from .interval import Interval, empty_interval, universe_interval
from .ray import (
    MAX_REJECTION_ATTEMPTS,
    Ray,
    length_squared,
    make_ray,
    near_zero,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_unit_square_offset,
    random_unit_vector,
    ray_at,
    reflect,
    refract,
    schlick_fresnel,
    vec3,
)
from .sampler import (
    MAX_STREAMS,
    draw_floats,
    is_constant_random,
    pcg_hash,
    random_float,
    random_range,
    random_u32,
    seed_streams,
    use_constant_random,
    use_random_streams,
)

# Note: integrator and renderer are NOT imported here to avoid circular imports.
# Import directly from src.glint.core.integrator or src.glint.core.renderer.

__all__ = [
    # Sampler
    "MAX_STREAMS",
    "pcg_hash",
    "random_u32",
    "random_float",
    "random_range",
    "seed_streams",
    "use_constant_random",
    "use_random_streams",
    "is_constant_random",
    "draw_floats",
    # Interval
    "Interval",
    "empty_interval",
    "universe_interval",
    # Ray
    "MAX_REJECTION_ATTEMPTS",
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length_squared",
    "reflect",
    "refract",
    "schlick_fresnel",
    "near_zero",
    "random_in_unit_sphere",
    "random_unit_vector",
    "random_in_unit_disk",
    "random_unit_square_offset",
]
