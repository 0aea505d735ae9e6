"""Scene module for scene storage and ray-scene queries.

Components:
    intersection: Device-side surface table, sphere storage and closest-hit query
    manager: Host-side scene manager keeping the device fields in sync
    presets: Ready-made scenes paired with a camera

Scene data is organized for GPU access:
    - A surface table of (kind, slot) pairs in insertion order
    - Structure-of-Arrays storage per surface kind
"""

from .intersection import (
    MAX_SPHERES,
    MAX_SURFACES,
    add_sphere,
    clear_scene,
    get_sphere_count,
    get_surface_count,
    hit_scene,
    hit_surface,
)
from .manager import SceneManager, SphereInfo
from .presets import SCENE_PRESETS, create_default_scene, create_scene, create_single_sphere_scene

__all__ = [
    # Intersection module
    "MAX_SURFACES",
    "MAX_SPHERES",
    "add_sphere",
    "clear_scene",
    "get_surface_count",
    "get_sphere_count",
    "hit_surface",
    "hit_scene",
    # Manager module
    "SceneManager",
    "SphereInfo",
    # Presets module
    "SCENE_PRESETS",
    "create_scene",
    "create_default_scene",
    "create_single_sphere_scene",
]
