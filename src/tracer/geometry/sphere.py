"""Sphere primitive with ray-sphere intersection.

The intersection solves |P(t) - C|^2 = r^2 for P(t) = origin + t * direction
using the half-b form of the quadratic formula:

    a      = |direction|^2
    half_b = dot(origin - C, direction)
    c      = |origin - C|^2 - r^2
    disc   = half_b^2 - a * c

The smaller root is preferred; the larger one is the fallback (the case of a
ray starting inside the sphere).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.tracer.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=vec3(0, 0, -1), radius=0.5)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti

from src.tracer.core.ray import Ray, dot, length_squared, ray_at, real, vec3
from src.tracer.geometry.hittable import HitRecord, make_miss_record, set_face_normal


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere. A zero radius is degenerate and
            never produces a hit.
    """

    center: vec3
    radius: real


@ti.func
def make_sphere(center: vec3, radius: real) -> Sphere:
    """Create a sphere from center and radius inside a Taichi kernel."""
    return Sphere(center=center, radius=radius)


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, t_min: real, t_max: real) -> HitRecord:
    """Test for ray-sphere intersection.

    Args:
        ray: The ray to test. The direction need not be normalized.
        sphere: The sphere to test against.
        t_min: Inclusive lower bound on accepted t (avoids self-intersection).
        t_max: Inclusive upper bound on accepted t (closest hit so far).

    Returns:
        A HitRecord for the nearest root in [t_min, t_max], or a miss record.
        A zero-length ray direction or a zero radius is a miss. A negative
        radius flips the outward normal, which set_face_normal re-orients.
    """
    result = make_miss_record()

    oc = ray.origin - sphere.center
    a = length_squared(ray.direction)
    half_b = dot(oc, ray.direction)
    c = length_squared(oc) - sphere.radius * sphere.radius
    discriminant = half_b * half_b - a * c

    if a > 0.0 and sphere.radius != 0.0 and discriminant >= 0.0:
        sqrtd = ti.sqrt(discriminant)

        # Find the nearest root that lies in the acceptable range
        root = (-half_b - sqrtd) / a
        valid = root >= t_min and root <= t_max
        if not valid:
            root = (-half_b + sqrtd) / a
            valid = root >= t_min and root <= t_max

        if valid:
            point = ray_at(ray, root)
            outward_normal = (point - sphere.center) / sphere.radius
            rec = HitRecord(hit=1, t=root, point=point, normal=outward_normal, front_face=1)
            result = set_face_normal(rec, ray, outward_normal)

    return result
