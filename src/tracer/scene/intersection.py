"""Scene storage and closest-hit queries.

The scene is an ordered list of surfaces. Each entry is a tagged variant:
``surface_kinds[k]`` says which geometry kind surface ``k`` is, and
``surface_slots[k]`` indexes that kind's Structure-of-Arrays storage.
``hit_scene`` satisfies the same contract as a single surface's hit function,
so callers never need to know how many surfaces there are.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.tracer.scene.intersection import add_sphere, clear_scene, hit_scene
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, -1.0), 0.5)
    >>> add_sphere((0.0, -100.5, -1.0), 100.0)
    >>> # Use hit_scene within a Taichi kernel
"""

import math

import taichi as ti

from src.tracer.core.ray import Ray, real
from src.tracer.core.vec3 import Vec3, as_vec3
from src.tracer.geometry.hittable import HitRecord, SurfaceKind, make_miss_record
from src.tracer.geometry.sphere import Sphere, hit_sphere

# Maximum number of surfaces supported in the scene
MAX_SURFACES = 1024
MAX_SPHERES = MAX_SURFACES

# Surface table: kind tag and slot in the per-kind storage
surface_kinds = ti.field(dtype=ti.i32, shape=MAX_SURFACES)
surface_slots = ti.field(dtype=ti.i32, shape=MAX_SURFACES)
num_surfaces = ti.field(dtype=ti.i32, shape=())

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=real, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=real, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all surfaces from the scene.

    Resets the counts to zero. Field data is overwritten as new surfaces
    are added.
    """
    num_surfaces[None] = 0
    num_spheres[None] = 0


def _append_surface(kind: SurfaceKind, slot: int) -> int:
    idx = num_surfaces[None]
    if idx >= MAX_SURFACES:
        raise RuntimeError(f"Maximum number of surfaces ({MAX_SURFACES}) exceeded")
    surface_kinds[idx] = int(kind)
    surface_slots[idx] = slot
    num_surfaces[None] = idx + 1
    return idx


def add_sphere(center: Vec3 | tuple[float, float, float], radius: float) -> int:
    """Add a sphere to the end of the scene's surface list.

    Args:
        center: The center point of the sphere.
        radius: The sphere radius. A zero radius is accepted but such a
            sphere is never hit. A negative radius is hit at the same points
            as its absolute value, with front_face inverted.

    Returns:
        The surface index of the added sphere.

    Raises:
        ValueError: If the center or radius is NaN or infinite.
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    center = as_vec3(center)
    if not center.is_finite() or not math.isfinite(radius):
        raise ValueError(f"Sphere center {center!r} and radius {radius} must be finite")

    slot = num_spheres[None]
    if slot >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")

    surface_index = _append_surface(SurfaceKind.SPHERE, slot)
    sphere_centers[slot] = list(center)
    sphere_radii[slot] = float(radius)
    num_spheres[None] = slot + 1
    return surface_index


def get_surface_count() -> int:
    """Get the number of surfaces in the scene."""
    return int(num_surfaces[None])


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def hit_surface(k: ti.i32, ray: Ray, t_min: real, t_max: real) -> HitRecord:
    """Dispatch a hit query to surface ``k`` according to its kind tag."""
    rec = make_miss_record()
    kind = surface_kinds[k]
    slot = surface_slots[k]
    if kind == int(SurfaceKind.SPHERE):
        sphere = Sphere(center=sphere_centers[slot], radius=sphere_radii[slot])
        rec = hit_sphere(ray, sphere, t_min, t_max)
    return rec


@ti.func
def hit_scene(ray: Ray, t_min: real, t_max: real) -> HitRecord:
    """Test a ray against every surface in the scene.

    Iterates through all surfaces in insertion order, shrinking the upper
    bound to the closest accepted t so later surfaces can only replace the
    result with a nearer hit.

    Args:
        ray: The ray to test.
        t_min: Inclusive lower bound on accepted t.
        t_max: Inclusive upper bound on accepted t.

    Returns:
        The closest HitRecord, or a miss record if nothing was hit.
    """
    closest_so_far = t_max
    result = make_miss_record()

    for k in range(num_surfaces[None]):
        rec = hit_surface(k, ray, t_min, closest_so_far)
        if rec.hit == 1:
            closest_so_far = rec.t
            result = rec

    return result
