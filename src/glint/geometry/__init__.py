"""Geometry module for shape primitives.

This module provides geometric primitives and intersection algorithms:

Components:
    sphere: Sphere primitive, hit record and ray-sphere intersection

All intersection routines are implemented as Taichi functions (@ti.func).
New primitive types follow the same pattern:
    rec = hit_shape(ray, shape, ray_t)   # returns a HitRecord
and are added to the linear scan in scene.intersection.
"""

from .sphere import HitRecord, Sphere, hit_sphere, miss_record, set_face_normal

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "miss_record",
    "set_face_normal",
]
