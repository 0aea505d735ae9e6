"""Preset scene configurations.

This module provides factory functions for the scenes the renderer ships with.
Each factory builds the scene into the device fields (replacing any previous
scene) and returns it together with a matching camera.

Available scenes:
- ``default``: a small sphere resting on a very large "ground" sphere
- ``single``: the small sphere alone against the sky

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.tracer.scene.presets import create_default_scene
    >>> from src.tracer.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_default_scene()
    >>> setup_camera(camera)
    >>> # Now render using the scene and camera
"""

from collections.abc import Callable

from src.tracer.camera.pinhole import DEFAULT_ASPECT_RATIO, PinholeCamera
from src.tracer.core.vec3 import Point3
from src.tracer.scene.manager import SceneManager

# =============================================================================
# Scene Parameters
# =============================================================================

# Small sphere straight ahead of the camera
CENTER_SPHERE_CENTER = Point3(0.0, 0.0, -1.0)
CENTER_SPHERE_RADIUS = 0.5

# Huge sphere whose top acts as the ground plane under the small sphere
GROUND_SPHERE_CENTER = Point3(0.0, -100.5, -1.0)
GROUND_SPHERE_RADIUS = 100.0


# =============================================================================
# Scene Factories
# =============================================================================


def create_default_scene(
    aspect_ratio: float = DEFAULT_ASPECT_RATIO,
) -> tuple[SceneManager, PinholeCamera]:
    """Create the two-sphere scene.

    Args:
        aspect_ratio: Camera aspect ratio (image width / height).

    Returns:
        Tuple of (scene, camera).
    """
    scene = SceneManager.from_spheres(
        [
            (CENTER_SPHERE_CENTER, CENTER_SPHERE_RADIUS),
            (GROUND_SPHERE_CENTER, GROUND_SPHERE_RADIUS),
        ]
    )
    return scene, PinholeCamera(aspect_ratio=aspect_ratio)


def create_single_sphere_scene(
    aspect_ratio: float = DEFAULT_ASPECT_RATIO,
) -> tuple[SceneManager, PinholeCamera]:
    """Create a scene holding only the small center sphere."""
    scene = SceneManager.from_spheres([(CENTER_SPHERE_CENTER, CENTER_SPHERE_RADIUS)])
    return scene, PinholeCamera(aspect_ratio=aspect_ratio)


SCENE_PRESETS: dict[str, Callable[[float], tuple[SceneManager, PinholeCamera]]] = {
    "default": create_default_scene,
    "single": create_single_sphere_scene,
}


def create_scene(
    name: str, aspect_ratio: float = DEFAULT_ASPECT_RATIO
) -> tuple[SceneManager, PinholeCamera]:
    """Create a preset scene by name.

    Args:
        name: One of the keys of SCENE_PRESETS.
        aspect_ratio: Camera aspect ratio (image width / height).

    Returns:
        Tuple of (scene, camera).

    Raises:
        ValueError: If the name is not a known preset.
    """
    try:
        factory = SCENE_PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown scene '{name}', expected one of {sorted(SCENE_PRESETS)}"
        ) from None
    return factory(aspect_ratio)
