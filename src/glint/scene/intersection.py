"""Scene-level closest-hit search.

The scene stores its spheres in Taichi fields (Structure of Arrays) and
answers ray queries with a linear scan: each sphere is tested against the
window (t_min, closest_so_far), and every hit shrinks the window. The
returned record is therefore the globally closest hit; when two spheres
report the same t, the one added first wins.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.glint.scene.intersection import add_sphere, clear_scene, closest_hit
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, -1.0), 0.5, material_id=0)
    >>> hit = closest_hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
    >>> hit.t
    0.5
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from src.glint.core.interval import Interval
from src.glint.core.ray import Ray
from src.glint.geometry.sphere import HitRecord, Sphere, hit_sphere, miss_record

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Maximum number of primitives supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Result slot for host-side queries
_query_record = HitRecord.field(shape=())


def clear_scene() -> None:
    """Clear all primitives from the scene.

    Resets the primitive count to zero. The field data is overwritten when
    new primitives are added.
    """
    num_spheres[None] = 0


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    material_id: int = 0,
) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere. Negative values are clamped to 0.
        material_id: The material ID to associate with this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = [float(center[0]), float(center[1]), float(center[2])]
    sphere_radii[idx] = max(0.0, float(radius))
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def get_sphere(index: ti.i32) -> Sphere:
    return Sphere(
        center=sphere_centers[index],
        radius=sphere_radii[index],
        material_id=sphere_material_ids[index],
    )


@ti.func
def hit_scene(ray: Ray, ray_t: Interval) -> HitRecord:
    """Find the closest intersection of a ray with the scene.

    Args:
        ray: The ray to test.
        ray_t: Valid parameter window; hits must satisfy min < t < max.

    Returns:
        The HitRecord of the closest hit, or a miss record (hit == 0).
    """
    closest_so_far = ray_t.max
    result = miss_record()

    for i in range(num_spheres[None]):
        rec = hit_sphere(ray, get_sphere(i), Interval(min=ray_t.min, max=closest_so_far))
        if rec.hit == 1:
            closest_so_far = rec.t
            result = rec

    return result


# =============================================================================
# Host-side Queries
# =============================================================================


@dataclass(frozen=True)
class HitInfo:
    """Python-side copy of a HitRecord.

    Attributes:
        t: Ray parameter of the hit.
        point: Hit point.
        normal: Unit normal facing against the ray.
        front_face: Whether the ray hit the outward side.
        material_id: Material ID of the hit primitive.
    """

    t: float
    point: tuple[float, float, float]
    normal: tuple[float, float, float]
    front_face: bool
    material_id: int


@ti.kernel
def _closest_hit_kernel(
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    t_min: ti.f32,
    t_max: ti.f32,
):
    ray = Ray(origin=vec3(ox, oy, oz), direction=vec3(dx, dy, dz))
    _query_record[None] = hit_scene(ray, Interval(min=t_min, max=t_max))


def _to_tuple(v) -> tuple[float, float, float]:
    return (float(v[0]), float(v[1]), float(v[2]))


def closest_hit(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    t_min: float = 0.001,
    t_max: float = math.inf,
) -> HitInfo | None:
    """Query the closest hit from Python.

    Runs the same search the renderer uses inside its kernels.

    Args:
        origin: Ray origin.
        direction: Ray direction (need not be normalized).
        t_min: Exclusive lower bound of the parameter window.
        t_max: Exclusive upper bound of the parameter window.

    Returns:
        A HitInfo for the closest hit, or None on a miss.
    """
    _closest_hit_kernel(
        origin[0], origin[1], origin[2], direction[0], direction[1], direction[2], t_min, t_max
    )
    if _query_record.hit[None] == 0:
        return None
    return HitInfo(
        t=float(_query_record.t[None]),
        point=_to_tuple(_query_record.point[None]),
        normal=_to_tuple(_query_record.normal[None]),
        front_face=bool(_query_record.front_face[None]),
        material_id=int(_query_record.material_id[None]),
    )
