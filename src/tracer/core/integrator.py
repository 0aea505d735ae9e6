"""Monte Carlo color integrator and render target.

This module implements ``ray_color``, the radiance estimate for a single ray,
and the kernels that accumulate jittered samples into a per-pixel buffer.

The estimate follows a diffuse light path:
    - A ray that escapes the scene picks up the sky gradient.
    - A ray that hits a surface continues in a random direction from the
      hemisphere around the surface normal, losing half its energy.
    - A path that runs out of bounces contributes black.

The bounces are an explicit loop carrying (ray, attenuation); the depth
budget is the only termination rule.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=0)
    >>> from src.tracer.camera.pinhole import PinholeCamera, setup_camera
    >>> from src.tracer.core.integrator import render_image, setup_render_target
    >>> from src.tracer.scene.presets import create_default_scene
    >>>
    >>> scene, camera = create_default_scene()
    >>> setup_camera(camera)
    >>> setup_render_target(400, 225)
    >>> render_image(samples_per_pixel=100, max_depth=50)
"""

import sys

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.tracer.camera.pinhole import get_ray_jittered
from src.tracer.core.ray import Ray, make_ray, near_zero, real, unit_vector, vec3
from src.tracer.core.sampling import random_in_hemisphere
from src.tracer.scene.intersection import hit_scene

# =============================================================================
# Rendering Constants
# =============================================================================

# Default maximum number of bounces per path
MAX_DEPTH = 50

# Default samples per pixel
SAMPLES_PER_PIXEL = 100

# Intersection interval for scene queries. T_MIN suppresses shadow acne
# from bounced rays re-hitting their own origin surface.
T_MIN = 1e-4
T_MAX = sys.float_info.max

# Fraction of energy kept at each diffuse bounce
REFLECTANCE = 0.5

# Sky gradient endpoints
SKY_HORIZON_COLOR = vec3(1.0, 1.0, 1.0)
SKY_ZENITH_COLOR = vec3(0.5, 0.7, 1.0)


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 1920
MAX_IMAGE_HEIGHT = 1080

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Per-pixel sum of sample colors, indexed [column, row] with row 0 at the bottom
_color_sum = ti.Vector.field(3, dtype=real, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Number of samples accumulated into each pixel
_sample_count = ti.field(dtype=ti.i32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffers.

    Sets the active image dimensions and clears the buffers.

    Args:
        width: Image width in pixels (1..MAX_IMAGE_WIDTH).
        height: Image height in pixels (1..MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum.
    """
    if width < 1 or height < 1:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the render target buffers to zero."""
    _color_sum.fill(0.0)
    _sample_count.fill(0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Raise if the render target has not been set up."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Color Integrator
# =============================================================================


@ti.func
def sky_color(direction: vec3) -> vec3:
    """Procedural sky: white at the horizon blending to light blue overhead.

    Args:
        direction: Ray direction (any nonzero length).

    Returns:
        Linear interpolation between SKY_HORIZON_COLOR and SKY_ZENITH_COLOR
        by t = 0.5 * (unit(direction).y + 1).
    """
    unit_direction = unit_vector(direction)
    t = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - t) * SKY_HORIZON_COLOR + t * SKY_ZENITH_COLOR


@ti.func
def ray_color(ray: Ray, depth: ti.i32) -> vec3:
    """Estimate the radiance arriving along a ray.

    Args:
        ray: The ray to trace.
        depth: Remaining bounce budget. A budget of zero or less yields black.

    Returns:
        The radiance estimate (RGB, linear).
    """
    color = vec3(0.0, 0.0, 0.0)
    attenuation = 1.0
    current = ray

    # Active flag for path continuation (no break inside ti.func loops)
    active = 1

    for _ in range(depth):
        if active == 1:
            rec = hit_scene(current, T_MIN, T_MAX)

            if rec.hit == 0:
                color = attenuation * sky_color(current.direction)
                active = 0
            else:
                bounce = random_in_hemisphere(rec.normal)
                if near_zero(bounce):
                    bounce = rec.normal
                current = make_ray(rec.point, bounce)
                attenuation *= REFLECTANCE

    return color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_scanline(
    row: ti.i32, width: ti.i32, height: ti.i32, samples_per_pixel: ti.i32, max_depth: ti.i32
):
    """Accumulate samples for every pixel of one row.

    The column loop is parallel; each iteration touches only its own pixel.
    """
    for i in range(width):
        total = vec3(0.0, 0.0, 0.0)
        for _ in range(samples_per_pixel):
            ray = get_ray_jittered(i, row, width, height)
            color = ray_color(ray, max_depth)

            # Replace NaN/Inf from degenerate samples with zero
            for c in ti.static(range(3)):
                if tm.isnan(color[c]) or tm.isinf(color[c]):
                    color[c] = 0.0

            total += color

        _color_sum[i, row] += total
        _sample_count[i, row] += samples_per_pixel


@ti.kernel
def _render_single_pixel(
    pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32, max_depth: ti.i32
) -> vec3:
    """Trace one jittered sample through a pixel (not accumulated)."""
    return ray_color(get_ray_jittered(pixel_i, pixel_j, width, height), max_depth)


@ti.kernel
def _trace_ray(
    ox: real, oy: real, oz: real, dx: real, dy: real, dz: real, max_depth: ti.i32
) -> vec3:
    """Trace a single explicitly specified ray."""
    return ray_color(make_ray(vec3(ox, oy, oz), vec3(dx, dy, dz)), max_depth)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_scanline(row: int, samples_per_pixel: int, max_depth: int = MAX_DEPTH) -> None:
    """Render one image row and add it to the render target.

    Args:
        row: Row index (0 = bottom row of the image).
        samples_per_pixel: Number of jittered samples per pixel.
        max_depth: Bounce budget per sample.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If row is outside the image.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    if not 0 <= row < height:
        raise ValueError(f"Row {row} outside image of height {height}")

    _render_scanline(row, width, height, samples_per_pixel, max_depth)


def render_image(samples_per_pixel: int = SAMPLES_PER_PIXEL, max_depth: int = MAX_DEPTH) -> None:
    """Render every row, top row first.

    Args:
        samples_per_pixel: Number of jittered samples per pixel.
        max_depth: Bounce budget per sample.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    _, height = get_image_dimensions()
    for row in range(height - 1, -1, -1):
        render_scanline(row, samples_per_pixel, max_depth)


def render_sample(pixel_i: int, pixel_j: int, max_depth: int = MAX_DEPTH) -> tuple[float, float, float]:
    """Render a single sample for a specific pixel.

    Python-callable entry point for testing; the result is not accumulated.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = bottom).
        max_depth: Bounce budget.

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    color = _render_single_pixel(pixel_i, pixel_j, width, height, max_depth)
    return (float(color[0]), float(color[1]), float(color[2]))


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    max_depth: int = MAX_DEPTH,
) -> tuple[float, float, float]:
    """Evaluate ray_color for one ray against the current scene.

    Args:
        origin: Ray origin.
        direction: Ray direction (any length).
        max_depth: Bounce budget.

    Returns:
        Tuple of (R, G, B) color values.
    """
    ox, oy, oz = origin
    dx, dy, dz = direction
    color = _trace_ray(ox, oy, oz, dx, dy, dz, max_depth)
    return (float(color[0]), float(color[1]), float(color[2]))


def get_accumulated_numpy() -> npt.NDArray[np.float64]:
    """Get the accumulated color sums as a NumPy array.

    Returns:
        Array of shape (height, width, 3); row 0 is the top of the image.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    image = _color_sum.to_numpy()[:width, :height, :]

    # (width, height, 3) -> (height, width, 3), then flip so the top row comes first
    return np.flipud(np.transpose(image, (1, 0, 2))).astype(np.float64)


def get_sample_count_numpy() -> npt.NDArray[np.int32]:
    """Get per-pixel sample counts, shape (height, width), top row first."""
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    counts = _sample_count.to_numpy()[:width, :height]
    return np.flipud(counts.T).astype(np.int32)
