"""Camera module for primary ray generation.

Components:
    pinhole: Pinhole (perspective) camera with jittered ray generation

Ray generation uses normalized viewport coordinates:
    u in [0, 1]: left to right across image
    v in [0, 1]: bottom to top across image
"""

from .pinhole import (
    DEFAULT_ASPECT_RATIO,
    DEFAULT_FOCAL_LENGTH,
    DEFAULT_VIEWPORT_HEIGHT,
    PinholeCamera,
    get_camera_info,
    get_camera_origin,
    get_ray,
    get_ray_jittered,
    setup_camera,
)

__all__ = [
    "PinholeCamera",
    "DEFAULT_ASPECT_RATIO",
    "DEFAULT_VIEWPORT_HEIGHT",
    "DEFAULT_FOCAL_LENGTH",
    "setup_camera",
    "get_ray",
    "get_ray_jittered",
    "get_camera_origin",
    "get_camera_info",
]
