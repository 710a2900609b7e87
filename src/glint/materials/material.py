"""Unified material ids and scatter dispatch.

Each material lives in the registry of its own type (see lambertian.py,
metal.py and dielectric.py). A unified material id maps to a
(material_type, type_local_index) pair, so any number of spheres can share
one material by holding the same id.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.glint.materials.lambertian import add_lambertian_material
    >>> from src.glint.materials.material import MaterialType, register_material
    >>> idx = add_lambertian_material((0.5, 0.5, 0.5))
    >>> register_material(MaterialType.LAMBERTIAN, idx)
    0
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from src.glint.core.ray import Ray, make_ray
from src.glint.geometry.sphere import HitRecord
from src.glint.materials.dielectric import (
    MAX_DIELECTRIC_MATERIALS,
    clear_dielectric_materials,
    scatter_dielectric_by_id,
)
from src.glint.materials.lambertian import (
    MAX_LAMBERTIAN_MATERIALS,
    clear_lambertian_materials,
    scatter_lambertian_by_id,
)
from src.glint.materials.metal import (
    MAX_METAL_MATERIALS,
    clear_metal_materials,
    scatter_metal_by_id,
)

# Type alias for 3D vectors
vec3 = tm.vec3


class MaterialType(IntEnum):
    """Enumeration of supported material types.

    Used for material dispatch in the path tracer to determine which
    scattering function to call.
    """

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


# Maximum number of materials across all types
MAX_MATERIALS = MAX_LAMBERTIAN_MATERIALS + MAX_METAL_MATERIALS + MAX_DIELECTRIC_MATERIALS

# material_types[i] stores the MaterialType for material_id i
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
# material_type_indices[i] stores the type-local index for material_id i
# (e.g., if material_id 5 is the 2nd metal material, material_type_indices[5] = 1)
material_type_indices = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_material_tracking() -> None:
    """Forget every unified material id."""
    num_materials[None] = 0


def clear_all_materials() -> None:
    """Clear the unified ids and every per-type registry."""
    clear_material_tracking()
    clear_lambertian_materials()
    clear_metal_materials()
    clear_dielectric_materials()


def register_material(material_type: MaterialType, type_index: int) -> int:
    """Assign a unified material id to a per-type registry entry.

    Args:
        material_type: The registry the material lives in.
        type_index: The index returned by that registry's add function.

    Returns:
        The new unified material id.

    Raises:
        RuntimeError: If MAX_MATERIALS ids are already in use.
        ValueError: If material_type is not a known MaterialType.
    """
    material_type = MaterialType(material_type)

    material_id = num_materials[None]
    if material_id >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_types[material_id] = int(material_type)
    material_type_indices[material_id] = int(type_index)
    num_materials[None] = material_id + 1
    return material_id


def get_material_count() -> int:
    """Get the number of unified material ids in use."""
    return int(num_materials[None])


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Get the material type for a given material ID.

    Args:
        material_id: The unified material ID.

    Returns:
        The material type as an integer (see MaterialType enum).
        Returns -1 for invalid material IDs.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_types[material_id]
    return result


@ti.func
def get_material_type_index(material_id: ti.i32) -> ti.i32:
    """Get the type-local index for a given material ID.

    Returns:
        The index into the type-specific material array, or -1 for
        invalid material IDs.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_type_indices[material_id]
    return result


@ti.func
def scatter_material(material_id: ti.i32, ray: Ray, rec: HitRecord, stream: ti.i32):
    """Scatter an incoming ray off the material stored under material_id.

    Args:
        material_id: The unified material ID of the hit surface.
        ray: The incoming ray.
        rec: The hit record for the surface point.
        stream: The random stream to draw from.

    Returns:
        A tuple of (scattered, attenuation, did_scatter) where:
        - scattered: The outgoing Ray, starting at the hit point.
        - attenuation: The color attenuation for this bounce.
        - did_scatter: 1 if the ray scattered, 0 if it was absorbed.
          Unknown material ids always absorb.
    """
    mat_type = get_material_type(material_id)
    type_index = get_material_type_index(material_id)

    direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if mat_type == int(MaterialType.LAMBERTIAN):
        direction, attenuation, did_scatter = scatter_lambertian_by_id(
            type_index, rec.normal, stream
        )
    elif mat_type == int(MaterialType.METAL):
        direction, attenuation, did_scatter = scatter_metal_by_id(
            type_index, ray.direction, rec.normal, stream
        )
    elif mat_type == int(MaterialType.DIELECTRIC):
        direction, attenuation, did_scatter = scatter_dielectric_by_id(
            type_index, ray.direction, rec.normal, rec.front_face, stream
        )

    return make_ray(rec.point, direction), attenuation, did_scatter
