"""Pytest configuration for raytracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate fields created by modules imported earlier.
    """
    ti.init(arch=ti.cpu, random_seed=42, default_fp=ti.f64)
    yield


@pytest.fixture(autouse=True)
def clear_scene_and_render_target():
    """Clear scene data and accumulated pixels around each test."""
    # Import here so the fields are created after ti.init()
    from src.tracer.core.integrator import clear_render_target
    from src.tracer.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        clear_render_target()

    _clear_all()
    yield
    _clear_all()


@pytest.fixture
def default_scene():
    """The two-sphere scene with its camera uploaded."""
    from src.tracer.camera.pinhole import setup_camera
    from src.tracer.scene.presets import create_default_scene

    scene, camera = create_default_scene()
    setup_camera(camera)
    return scene, camera
