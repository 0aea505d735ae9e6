"""Pinhole camera model for perspective ray generation.

The camera sits at ``origin`` looking down the -z axis. Its viewport is a
rectangle ``viewport_height`` units tall (width from the aspect ratio) placed
``focal_length`` units in front of the origin. Normalized image coordinates
map onto the viewport as:

    point(u, v) = lower_left_corner + u * horizontal + v * vertical

with (0, 0) at the lower-left and (1, 1) at the upper-right of the viewport.

The geometry is computed on the Python side with Vec3 and uploaded to Taichi
fields by ``setup_camera``; ray generation runs inside kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.tracer.camera.pinhole import PinholeCamera, setup_camera, get_ray
    >>>
    >>> camera = PinholeCamera()  # 16:9, viewport height 2, focal length 1
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0.5, 0.5)  # Ray through the viewport center
"""

from dataclasses import dataclass, field

import taichi as ti

from src.tracer.core.ray import Ray, make_ray, real, vec3
from src.tracer.core.sampling import random_double
from src.tracer.core.vec3 import Point3, Vec3

# =============================================================================
# Camera Data Structures
# =============================================================================

DEFAULT_ASPECT_RATIO = 16.0 / 9.0
DEFAULT_VIEWPORT_HEIGHT = 2.0
DEFAULT_FOCAL_LENGTH = 1.0


@dataclass(frozen=True)
class PinholeCamera:
    """Configuration for a pinhole (perspective) camera.

    Attributes:
        aspect_ratio: Width divided by height of the viewport.
        viewport_height: Height of the viewport in world units.
        focal_length: Distance from the origin to the viewport plane.
        origin: Camera position in world space.
    """

    aspect_ratio: float = DEFAULT_ASPECT_RATIO
    viewport_height: float = DEFAULT_VIEWPORT_HEIGHT
    focal_length: float = DEFAULT_FOCAL_LENGTH
    origin: Point3 = field(default_factory=lambda: Point3(0.0, 0.0, 0.0))

    def __post_init__(self) -> None:
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"aspect_ratio must be positive, got {self.aspect_ratio}")
        if self.viewport_height <= 0.0:
            raise ValueError(f"viewport_height must be positive, got {self.viewport_height}")
        if self.focal_length <= 0.0:
            raise ValueError(f"focal_length must be positive, got {self.focal_length}")

    @property
    def viewport_width(self) -> float:
        return self.aspect_ratio * self.viewport_height

    @property
    def horizontal(self) -> Vec3:
        """Vector spanning the full viewport width."""
        return Vec3(self.viewport_width, 0.0, 0.0)

    @property
    def vertical(self) -> Vec3:
        """Vector spanning the full viewport height."""
        return Vec3(0.0, self.viewport_height, 0.0)

    @property
    def lower_left_corner(self) -> Point3:
        """Lower-left corner of the viewport in world space."""
        return (
            self.origin
            - self.horizontal / 2.0
            - self.vertical / 2.0
            - Vec3(0.0, 0.0, self.focal_length)
        )

    def ray_direction(self, u: float, v: float) -> Vec3:
        """Direction of the ray through viewport coordinates (u, v).

        Host-side mirror of ``get_ray``, useful for checking camera setup.
        """
        return self.lower_left_corner + u * self.horizontal + v * self.vertical - self.origin


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=real, shape=())
_viewport_horizontal = ti.Vector.field(3, dtype=real, shape=())
_viewport_vertical = ti.Vector.field(3, dtype=real, shape=())
_lower_left_corner = ti.Vector.field(3, dtype=real, shape=())


def setup_camera(camera: PinholeCamera) -> None:
    """Upload the camera geometry to the device.

    Must be called (from Python, not from a kernel) before rendering.

    Args:
        camera: Camera configuration.
    """
    _camera_origin[None] = list(camera.origin)
    _viewport_horizontal[None] = list(camera.horizontal)
    _viewport_vertical[None] = list(camera.vertical)
    _lower_left_corner[None] = list(camera.lower_left_corner)


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_ray(u: real, v: real) -> Ray:
    """Generate a ray through normalized viewport coordinates (u, v).

    Args:
        u: Horizontal coordinate in [0, 1] (left to right).
        v: Vertical coordinate in [0, 1] (bottom to top).

    Returns:
        A Ray from the camera origin toward the viewport point. The direction
        is not normalized.
    """
    origin = _camera_origin[None]
    point_on_viewport = (
        _lower_left_corner[None] + u * _viewport_horizontal[None] + v * _viewport_vertical[None]
    )
    return make_ray(origin, point_on_viewport - origin)


@ti.func
def get_ray_jittered(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate a jittered ray for anti-aliasing.

    A uniform offset in [0, 1) is added to each pixel coordinate before
    normalizing by (dimension - 1), so the last column and row reach the
    right and top viewport edges.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray with random sub-pixel offset.
    """
    u = (ti.cast(pixel_i, real) + random_double()) / ti.cast(ti.max(width - 1, 1), real)
    v = (ti.cast(pixel_j, real) + random_double()) / ti.cast(ti.max(height - 1, 1), real)
    return get_ray(u, v)


@ti.func
def get_camera_origin() -> vec3:
    """Get the camera position in world space."""
    return _camera_origin[None]


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get the uploaded camera state for debugging.

    Returns:
        Dictionary with origin, horizontal, vertical and lower_left.
    """
    fields = {
        "origin": _camera_origin,
        "horizontal": _viewport_horizontal,
        "vertical": _viewport_vertical,
        "lower_left": _lower_left_corner,
    }
    info = {}
    for name, f in fields.items():
        value = f[None]
        info[name] = (float(value[0]), float(value[1]), float(value[2]))
    return info
