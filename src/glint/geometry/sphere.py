"""Sphere primitive with ray-sphere intersection.

This module provides the Sphere and HitRecord dataclasses and the
intersection routine used by the scene's closest-hit search.

The intersection solves |origin + t * direction - center|^2 = radius^2 in
the reduced (half-b) form:

    oc = center - origin
    a  = dot(direction, direction)
    h  = dot(direction, oc)
    c  = dot(oc, oc) - radius^2
    t  = (h -/+ sqrt(h^2 - a c)) / a

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.glint.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -1), radius=0.5, material_id=0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.glint.core.interval import Interval
from src.glint.core.ray import Ray, ray_at

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point, radius and material.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (non-negative).
        material_id: Unified material ID shared with other primitives.
    """

    center: vec3
    radius: ti.f32
    material_id: ti.i32


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: Whether the ray intersected the primitive (1 if hit, 0 if miss).
        t: The parameter value along the ray where intersection occurred.
        point: The 3D point where the ray intersected the surface.
        normal: The unit surface normal, always facing against the ray.
        front_face: 1 if the ray arrived from the outward-normal side,
            0 if it arrived from inside.
        material_id: Material ID of the hit primitive, -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32
    material_id: ti.i32


@ti.func
def miss_record() -> HitRecord:
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material_id=-1,
    )


@ti.func
def set_face_normal(ray_direction: vec3, outward_normal: vec3):
    """Orient a geometric normal against the incoming ray.

    Args:
        ray_direction: Direction of the incident ray.
        outward_normal: Unit normal pointing out of the surface.

    Returns:
        A tuple (front_face, normal). front_face is 1 when the ray and the
        outward normal already point in opposite directions; normal is the
        outward normal or its negation so that dot(ray_direction, normal) <= 0.
    """
    front_face = 1
    normal = outward_normal
    if tm.dot(ray_direction, outward_normal) >= 0.0:
        front_face = 0
        normal = -outward_normal
    return front_face, normal


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, ray_t: Interval) -> HitRecord:
    """Test for ray-sphere intersection inside an open parameter window.

    The nearer root is tried first; if it is not strictly inside ray_t the
    farther root is tried. Degenerate spheres (radius 0) never report hits.

    Args:
        ray: The ray to test.
        sphere: The sphere to test against.
        ray_t: Valid parameter window; roots must satisfy min < t < max.

    Returns:
        A HitRecord. Check the hit field to determine if intersection occurred.
    """
    result = miss_record()

    oc = sphere.center - ray.origin
    a = tm.dot(ray.direction, ray.direction)
    h = tm.dot(ray.direction, oc)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = h * h - a * c

    if discriminant >= 0.0 and sphere.radius > 0.0:
        sqrtd = tm.sqrt(discriminant)

        root = (h - sqrtd) / a
        valid = ray_t.surrounds(root)
        if not valid:
            root = (h + sqrtd) / a
            valid = ray_t.surrounds(root)

        if valid:
            point = ray_at(ray, root)
            outward_normal = (point - sphere.center) / sphere.radius
            front_face, normal = set_face_normal(ray.direction, outward_normal)
            result = HitRecord(
                hit=1,
                t=root,
                point=point,
                normal=normal,
                front_face=front_face,
                material_id=sphere.material_id,
            )

    return result
