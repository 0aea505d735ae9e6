"""Tests for scene storage and closest-hit queries.

Tests cover:
- Adding spheres and counting surfaces
- Validation of sphere data and capacity limits
- Closest-hit selection independent of insertion order
- Empty scene behavior
"""

import math

import numpy as np
import pytest
import taichi as ti


def _query_scene(origin, direction, t_min=1e-4, t_max=1e30):
    """Run hit_scene for one ray and return (hit, t, normal)."""
    from src.tracer.core.ray import make_ray, vec3
    from src.tracer.scene.intersection import hit_scene

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f64, shape=())
    normal = ti.field(dtype=vec3, shape=())

    @ti.kernel
    def test_kernel(
        ox: ti.f64, oy: ti.f64, oz: ti.f64,
        dx: ti.f64, dy: ti.f64, dz: ti.f64,
        t_min: ti.f64, t_max: ti.f64,
    ):
        record = hit_scene(make_ray(vec3(ox, oy, oz), vec3(dx, dy, dz)), t_min, t_max)
        hit[None] = record.hit
        t_val[None] = record.t
        normal[None] = record.normal

    test_kernel(*origin, *direction, t_min, t_max)
    return hit[None], t_val[None], normal[None].to_numpy()


class TestSceneStorage:
    """Tests for adding and clearing surfaces."""

    def test_add_sphere_returns_surface_index(self):
        from src.tracer.scene.intersection import add_sphere, get_sphere_count, get_surface_count

        assert add_sphere((0.0, 0.0, -1.0), 0.5) == 0
        assert add_sphere((0.0, -100.5, -1.0), 100.0) == 1
        assert get_surface_count() == 2
        assert get_sphere_count() == 2

    def test_clear_scene(self):
        from src.tracer.scene.intersection import add_sphere, clear_scene, get_surface_count

        add_sphere((0.0, 0.0, -1.0), 0.5)
        clear_scene()
        assert get_surface_count() == 0

    def test_sphere_data_is_uploaded(self):
        from src.tracer.core.vec3 import Vec3
        from src.tracer.geometry.hittable import SurfaceKind
        from src.tracer.scene.intersection import (
            add_sphere,
            sphere_centers,
            sphere_radii,
            surface_kinds,
            surface_slots,
        )

        add_sphere(Vec3(1.0, 2.0, 3.0), 0.25)
        assert surface_kinds[0] == int(SurfaceKind.SPHERE)
        assert surface_slots[0] == 0
        np.testing.assert_allclose(sphere_centers[0].to_numpy(), [1.0, 2.0, 3.0])
        assert sphere_radii[0] == 0.25

    @pytest.mark.parametrize(
        "center, radius",
        [
            ((math.nan, 0.0, 0.0), 1.0),
            ((0.0, math.inf, 0.0), 1.0),
            ((0.0, 0.0, 0.0), math.nan),
        ],
    )
    def test_non_finite_sphere_rejected(self, center, radius):
        from src.tracer.scene.intersection import add_sphere, get_surface_count

        with pytest.raises(ValueError, match="must be finite"):
            add_sphere(center, radius)
        assert get_surface_count() == 0

    def test_capacity_exceeded(self):
        from src.tracer.scene.intersection import MAX_SURFACES, add_sphere, get_surface_count

        for i in range(MAX_SURFACES):
            add_sphere((float(i), 0.0, 0.0), 0.1)

        with pytest.raises(RuntimeError, match="Maximum number"):
            add_sphere((0.0, 0.0, 0.0), 0.1)
        assert get_surface_count() == MAX_SURFACES


class TestHitScene:
    """Tests for the closest-hit query."""

    def test_empty_scene_misses(self):
        hit, _, _ = _query_scene((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 0

    def test_single_sphere_matches_sphere_hit(self):
        from src.tracer.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -1.0), 0.5)
        hit, t, normal = _query_scene((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert hit == 1
        assert abs(t - 0.5) < 1e-12
        np.testing.assert_allclose(normal, [0.0, 0.0, 1.0], atol=1e-12)

    @pytest.mark.parametrize("near_first", [True, False])
    def test_closest_hit_wins(self, near_first):
        """The nearest sphere is reported whichever order they were added in."""
        from src.tracer.scene.intersection import add_sphere

        near = ((0.0, 0.0, -2.0), 0.5)
        far = ((0.0, 0.0, -5.0), 0.5)
        for center, radius in (near, far) if near_first else (far, near):
            add_sphere(center, radius)

        hit, t, _ = _query_scene((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert abs(t - 1.5) < 1e-12

    def test_t_max_limits_scene_query(self):
        from src.tracer.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -5.0), 0.5)
        hit, _, _ = _query_scene((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), t_max=4.0)
        assert hit == 0

    def test_negative_radius_sphere_is_hit(self):
        """A negative radius is stored as given and found at |r|."""
        from src.tracer.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -1.0), -0.5)
        hit, t, normal = _query_scene((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert hit == 1
        assert abs(t - 0.5) < 1e-12
        np.testing.assert_allclose(normal, [0.0, 0.0, 1.0], atol=1e-12)

    def test_ground_sphere_below_camera(self):
        """A downward ray from the camera hits the ground sphere's top."""
        from src.tracer.scene.intersection import add_sphere

        add_sphere((0.0, -100.5, -1.0), 100.0)
        hit, t, normal = _query_scene((0.0, 0.0, -1.0), (0.0, -1.0, 0.0))

        assert hit == 1
        assert abs(t - 0.5) < 1e-9
        np.testing.assert_allclose(normal, [0.0, 1.0, 0.0], atol=1e-9)
