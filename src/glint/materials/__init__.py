"""Materials module for light scattering models.

Components:
    lambertian: Ideal diffuse (Lambertian) reflection
    metal: Mirror reflection with an optional fuzz radius
    dielectric: Glass-like materials (refraction, Schlick Fresnel, TIR)
    material: Unified material ids and the scatter_material dispatch

Every scatter function returns (direction, attenuation, did_scatter) and
takes the random stream it draws from as its last argument. All of them
are Taichi functions for use inside kernels.
"""

from .dielectric import (
    add_dielectric_material,
    cannot_refract,
    clear_dielectric_materials,
    fresnel_reflectance,
    get_dielectric_material_count,
    get_dielectric_refraction_index,
    scatter_dielectric,
    scatter_dielectric_by_id,
)
from .lambertian import (
    add_lambertian_material,
    clear_lambertian_materials,
    get_lambertian_albedo,
    get_lambertian_material_count,
    scatter_lambertian,
    scatter_lambertian_by_id,
    validate_albedo,
)
from .material import (
    MAX_MATERIALS,
    MaterialType,
    clear_all_materials,
    clear_material_tracking,
    get_material_count,
    get_material_type,
    get_material_type_index,
    register_material,
    scatter_material,
)
from .metal import (
    add_metal_material,
    clamp_fuzz,
    clear_metal_materials,
    get_metal_albedo,
    get_metal_fuzz,
    get_metal_material_count,
    scatter_metal,
    scatter_metal_by_id,
)

__all__ = [
    # Lambertian
    "scatter_lambertian",
    "scatter_lambertian_by_id",
    "add_lambertian_material",
    "clear_lambertian_materials",
    "get_lambertian_material_count",
    "get_lambertian_albedo",
    "validate_albedo",
    # Metal
    "scatter_metal",
    "scatter_metal_by_id",
    "add_metal_material",
    "clear_metal_materials",
    "get_metal_material_count",
    "get_metal_albedo",
    "get_metal_fuzz",
    "clamp_fuzz",
    # Dielectric
    "scatter_dielectric",
    "scatter_dielectric_by_id",
    "add_dielectric_material",
    "clear_dielectric_materials",
    "get_dielectric_material_count",
    "get_dielectric_refraction_index",
    "fresnel_reflectance",
    "cannot_refract",
    # Dispatch
    "MaterialType",
    "MAX_MATERIALS",
    "register_material",
    "clear_material_tracking",
    "clear_all_materials",
    "get_material_count",
    "get_material_type",
    "get_material_type_index",
    "scatter_material",
]
