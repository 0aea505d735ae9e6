"""Hit records and the surface (hittable) abstraction.

Every surface answers the same query:

    hit(ray, t_min, t_max) -> HitRecord

The returned record has ``hit == 0`` when no intersection parameter lies in
the closed interval [t_min, t_max]; otherwise it describes the nearest one.

Surfaces are a closed set, dispatched through the ``SurfaceKind`` tag stored
alongside each surface in the scene (see ``scene.intersection``). Adding a new
geometry kind means adding an enum member, a ``hit_<kind>`` function and a
branch in the scene dispatch.
"""

from enum import IntEnum

import taichi as ti

from src.tracer.core.ray import Ray, dot, real, vec3


class SurfaceKind(IntEnum):
    """Tag identifying the geometry type of a scene surface."""

    SPHERE = 0


@ti.dataclass
class HitRecord:
    """Record of a ray-surface intersection.

    Attributes:
        hit: Whether the ray intersected the surface (1 if hit, 0 if miss).
        t: The ray parameter at the intersection. Only valid if hit == 1.
        point: The intersection point. Only valid if hit == 1.
        normal: Unit surface normal, always facing against the incoming ray.
            Only valid if hit == 1.
        front_face: 1 if the ray arrived from outside the surface (the
            outward normal opposes the ray), 0 if it hit from inside.
            Only valid if hit == 1.
    """

    hit: ti.i32
    t: real
    point: vec3
    normal: vec3
    front_face: ti.i32


@ti.func
def set_face_normal(rec: HitRecord, ray: Ray, outward_normal: vec3) -> HitRecord:
    """Orient the record's normal against the incoming ray.

    Args:
        rec: The record to finalize.
        ray: The ray that produced the hit.
        outward_normal: The geometric normal pointing out of the surface
            (unit length).

    Returns:
        A copy of ``rec`` with ``front_face`` and ``normal`` set.
    """
    front_face = 0
    normal = -outward_normal
    if dot(ray.direction, outward_normal) < 0.0:
        front_face = 1
        normal = outward_normal

    return HitRecord(
        hit=rec.hit,
        t=rec.t,
        point=rec.point,
        normal=normal,
        front_face=front_face,
    )


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
    )
