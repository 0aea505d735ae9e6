"""Geometry module for the surface abstraction and shape primitives.

Components:
    hittable: Hit record, face-normal orientation and surface kinds
    sphere: Sphere primitive with ray-sphere intersection

All intersection routines are Taichi functions (@ti.func) returning a
HitRecord whose ``hit`` flag is 0 when nothing was found in the open
interval (t_min, t_max).
"""

from .hittable import HitRecord, SurfaceKind, make_miss_record, set_face_normal
from .sphere import Sphere, hit_sphere, make_sphere

__all__ = [
    "HitRecord",
    "SurfaceKind",
    "make_miss_record",
    "set_face_normal",
    "Sphere",
    "hit_sphere",
    "make_sphere",
]
