"""Dielectric (glass/water) material implementation.

Dielectrics never absorb: every hit either reflects or refracts, and the
attenuation is always white.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when ratio * sin(theta) > 1

The reflect/refract choice is stochastic: a ray reflects with probability
equal to the Schlick reflectance, so averaging many samples reproduces the
Fresnel-weighted mix.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.glint.materials.dielectric import scatter_dielectric
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_dielectric(
    >>> #     refraction_index, incident_dir, normal, front_face, stream
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from src.glint.core.ray import reflect, refract, schlick_fresnel
from src.glint.core.sampler import random_float

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def refraction_ratio(refraction_index: ti.f32, front_face: ti.i32) -> ti.f32:
    """Ratio n_incident / n_transmitted for a ray entering or leaving."""
    ratio = refraction_index
    if front_face == 1:
        ratio = 1.0 / refraction_index
    return ratio


@ti.func
def cannot_refract(
    refraction_index: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
) -> ti.i32:
    """Determine if total internal reflection will occur.

    Args:
        refraction_index: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        normal: The surface normal (unit, facing the ray).
        front_face: 1 if entering the material, 0 if leaving it.

    Returns:
        1 if the ray cannot refract, 0 otherwise.
    """
    ri = refraction_ratio(refraction_index, front_face)
    unit_direction = tm.normalize(incident_direction)
    cos_theta = tm.min(tm.dot(-unit_direction, normal), 1.0)
    sin_theta = tm.sqrt(1.0 - cos_theta * cos_theta)
    return 1 if ri * sin_theta > 1.0 else 0


@ti.func
def fresnel_reflectance(
    refraction_index: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
) -> ti.f32:
    """Compute the Schlick reflectance for a hit.

    Args:
        refraction_index: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        normal: The surface normal (unit, facing the ray).
        front_face: 1 if entering the material, 0 if leaving it.

    Returns:
        The reflection probability in [0, 1].
    """
    ri = refraction_ratio(refraction_index, front_face)
    unit_direction = tm.normalize(incident_direction)
    cos_theta = tm.min(tm.dot(-unit_direction, normal), 1.0)
    return schlick_fresnel(cos_theta, ri)


@ti.func
def scatter_dielectric(
    refraction_index: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
    stream: ti.i32,
):
    """Compute the scattered direction for a dielectric surface.

    Args:
        refraction_index: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        normal: The surface normal (unit, facing the ray).
        front_face: 1 if the ray is entering the material, 0 if leaving it.
        stream: The random stream to draw from.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where:
        - scattered_direction: The reflected or refracted unit direction.
        - attenuation: Always (1, 1, 1).
        - did_scatter: Always 1.
    """
    attenuation = vec3(1.0, 1.0, 1.0)
    ri = refraction_ratio(refraction_index, front_face)
    unit_direction = tm.normalize(incident_direction)

    # No random draw is consumed under total internal reflection
    should_reflect = cannot_refract(refraction_index, incident_direction, normal, front_face)
    if should_reflect == 0:
        reflectance = fresnel_reflectance(refraction_index, incident_direction, normal, front_face)
        if random_float(stream) < reflectance:
            should_reflect = 1

    scattered_direction = vec3(0.0, 0.0, 0.0)
    if should_reflect == 1:
        scattered_direction = reflect(unit_direction, normal)
    else:
        scattered_direction = refract(unit_direction, normal, ri)

    return scattered_direction, attenuation, 1


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of dielectric materials in the scene
MAX_DIELECTRIC_MATERIALS = 1024

# Storage for dielectric material properties
dielectric_indices = ti.field(dtype=ti.f32, shape=MAX_DIELECTRIC_MATERIALS)
num_dielectric_materials = ti.field(dtype=ti.i32, shape=())


def clear_dielectric_materials() -> None:
    """Clear all dielectric materials."""
    num_dielectric_materials[None] = 0


def add_dielectric_material(refraction_index: float = 1.5) -> int:
    """Add a dielectric material to the material registry.

    Args:
        refraction_index: Index of refraction. Default is 1.5 (typical glass).
            Must be positive.

    Returns:
        The index of the added material within the dielectric registry.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If the refraction index is not positive.
    """
    if refraction_index <= 0.0:
        raise ValueError(f"Refraction index = {refraction_index} must be positive.")

    idx = num_dielectric_materials[None]
    if idx >= MAX_DIELECTRIC_MATERIALS:
        raise RuntimeError(
            f"Maximum number of dielectric materials ({MAX_DIELECTRIC_MATERIALS}) exceeded"
        )

    dielectric_indices[idx] = float(refraction_index)
    num_dielectric_materials[None] = idx + 1
    return idx


def get_dielectric_material_count() -> int:
    """Get the number of dielectric materials in the registry."""
    return int(num_dielectric_materials[None])


@ti.func
def get_dielectric_refraction_index(material_idx: ti.i32) -> ti.f32:
    return dielectric_indices[material_idx]


@ti.func
def scatter_dielectric_by_id(
    material_idx: ti.i32,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
    stream: ti.i32,
):
    """Scatter off a registered dielectric material.

    Args:
        material_idx: The index of the material in the dielectric registry.
        incident_direction: The incoming ray direction.
        normal: The surface normal at the hit point.
        front_face: 1 if the ray is entering the material, 0 if leaving it.
        stream: The random stream to draw from.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter).
    """
    return scatter_dielectric(
        get_dielectric_refraction_index(material_idx),
        incident_direction,
        normal,
        front_face,
        stream,
    )
