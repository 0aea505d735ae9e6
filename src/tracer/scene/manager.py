"""Host-side scene manager.

The SceneManager is the Python-side view of the scene: it owns an ordered
list of surface descriptions and keeps the Taichi scene fields in sync with
it. The scene is built once before rendering and is read-only afterwards.

Only one scene is active at a time, because the device-side storage lives in
module-level fields. Creating a SceneManager clears whatever scene was there.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.tracer.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> scene.add_sphere((0, 0, -1), 0.5)
    0
    >>> scene.add_sphere((0, -100.5, -1), 100)
    1
    >>> len(scene)
    2
"""

from collections.abc import Iterable
from dataclasses import dataclass

from src.tracer.core.vec3 import Vec3, as_vec3
from src.tracer.geometry.hittable import SurfaceKind
from src.tracer.scene.intersection import (
    MAX_SURFACES,
    add_sphere,
    clear_scene,
    get_surface_count,
)


@dataclass(frozen=True)
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        surface_index: The position of the sphere in the scene's surface list.
        center: The center of the sphere.
        radius: The radius of the sphere.
    """

    surface_index: int
    center: Vec3
    radius: float

    @property
    def kind(self) -> SurfaceKind:
        return SurfaceKind.SPHERE


class SceneManager:
    """Ordered collection of scene surfaces backed by Taichi fields.

    Attributes:
        surfaces: The surfaces in insertion order.
    """

    def __init__(self) -> None:
        """Initialize an empty scene (clears the device-side scene)."""
        self.surfaces: list[SphereInfo] = []
        clear_scene()

    @classmethod
    def from_spheres(
        cls, spheres: Iterable[tuple[Vec3 | tuple[float, float, float], float]]
    ) -> "SceneManager":
        """Build a scene from (center, radius) pairs.

        Args:
            spheres: Iterable of (center, radius) pairs, added in order.

        Returns:
            A new SceneManager holding those spheres.
        """
        scene = cls()
        for center, radius in spheres:
            scene.add_sphere(center, radius)
        return scene

    def add_sphere(self, center: Vec3 | tuple[float, float, float], radius: float) -> int:
        """Append a sphere to the scene.

        Args:
            center: The sphere center.
            radius: The sphere radius.

        Returns:
            The surface index of the new sphere.

        Raises:
            ValueError: If center or radius is not finite.
            RuntimeError: If the scene is full (see MAX_SURFACES).
        """
        center = as_vec3(center)
        surface_index = add_sphere(center, radius)
        self.surfaces.append(SphereInfo(surface_index, center, float(radius)))
        return surface_index

    def clear(self) -> None:
        """Remove every surface (host list and device fields)."""
        clear_scene()
        self.surfaces.clear()

    @property
    def spheres(self) -> list[SphereInfo]:
        return [s for s in self.surfaces if s.kind == SurfaceKind.SPHERE]

    @property
    def capacity(self) -> int:
        return MAX_SURFACES

    def is_synchronized(self) -> bool:
        """True if the device-side scene still matches this manager."""
        return get_surface_count() == len(self.surfaces)

    def __len__(self) -> int:
        return len(self.surfaces)

    def __repr__(self) -> str:
        return f"SceneManager(surfaces={len(self.surfaces)})"
