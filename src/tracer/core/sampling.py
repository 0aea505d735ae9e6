"""Random sampling utilities for Monte Carlo ray tracing.

All functions draw from Taichi's per-thread random generators, which are
seeded by ``ti.init(random_seed=...)``. Rendering with the same seed, backend
and image size is therefore reproducible, and no Python-side global random
state is involved.
"""

import taichi as ti

from src.tracer.core.ray import dot, length_squared, real, vec3

# Cap on rejection-sampling attempts (each attempt succeeds with p = pi/6)
MAX_REJECTION_TRIES = 100


@ti.func
def random_double() -> real:
    """Uniform random number in [0, 1)."""
    return ti.random(real)


@ti.func
def random_double_range(lo: real, hi: real) -> real:
    """Uniform random number in [lo, hi)."""
    return lo + (hi - lo) * ti.random(real)


@ti.func
def random_vec3(lo: real, hi: real) -> vec3:
    """Random vector with each component uniform in [lo, hi)."""
    return vec3(
        random_double_range(lo, hi),
        random_double_range(lo, hi),
        random_double_range(lo, hi),
    )


@ti.func
def random_in_unit_sphere() -> vec3:
    """Generate a random point inside the unit sphere.

    Uses rejection sampling to generate uniformly distributed points
    within the unit ball.

    Returns:
        A random point with length < 1.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(MAX_REJECTION_TRIES):
        if not found:
            p = random_vec3(-1.0, 1.0)
            if length_squared(p) < 1.0:
                found = True
    return p


@ti.func
def random_in_hemisphere(normal: vec3) -> vec3:
    """Generate a random point in the unit half-ball around a normal.

    A uniform point in the unit ball is mirrored into the hemisphere whose
    pole is ``normal``, so the result always satisfies dot(result, normal) >= 0.

    Args:
        normal: The surface normal defining the hemisphere orientation.

    Returns:
        A random vector in the hemisphere around the normal.
    """
    in_unit_sphere = random_in_unit_sphere()
    result = in_unit_sphere
    if dot(in_unit_sphere, normal) < 0.0:
        result = -in_unit_sphere
    return result
