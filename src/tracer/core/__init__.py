"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    vec3: Host-side Vec3/Point3/Color value type
    ray: Device-side vector types, Ray data structure and vector helpers
    sampling: Uniform random numbers and unit-ball/hemisphere sampling
    integrator: Diffuse path integrator and the render target
    renderer: Scanline renderer with progress reporting and output

The integrator traces each jittered camera ray through a bounded loop of
diffuse bounces, attenuating by half per bounce, until it escapes to the sky
or the depth budget runs out.

All compute-intensive operations use Taichi kernels.
"""

from .ray import (
    Ray,
    cross,
    degrees_to_radians,
    dot,
    length,
    length_squared,
    make_ray,
    near_zero,
    ray_at,
    real,
    unit_vector,
    vec3,
)
from .sampling import (
    random_double,
    random_double_range,
    random_in_hemisphere,
    random_in_unit_sphere,
    random_vec3,
)
from .vec3 import Color, Point3, Vec3, as_vec3

# Note: integrator and renderer are NOT imported here because they own
# Taichi fields, which must be created after ti.init(). Import them directly:
#   from src.tracer.core.renderer import Renderer

__all__ = [
    # Host vectors
    "Vec3",
    "Point3",
    "Color",
    "as_vec3",
    # Device vectors and rays
    "Ray",
    "real",
    "vec3",
    "ray_at",
    "make_ray",
    "length",
    "length_squared",
    "unit_vector",
    "dot",
    "cross",
    "near_zero",
    "degrees_to_radians",
    # Sampling
    "random_double",
    "random_double_range",
    "random_vec3",
    "random_in_unit_sphere",
    "random_in_hemisphere",
]
