"""Integration tests for the end-to-end rendering pipeline.

This module tests the complete pipeline from scene creation through final
PPM output, and the command-line example built on top of it.

Tests are designed to be fast (low resolution, few samples) while still
exercising the full pipeline.

Note: Imports are done inside test methods to avoid Taichi initialization issues.
The conftest.py fixture initializes Taichi before tests run.
"""

from __future__ import annotations

import importlib.util
import io
from pathlib import Path

import numpy as np
import pytest

EXAMPLE_SCRIPT = Path(__file__).parent.parent / "examples" / "render_spheres.py"

WIDTH = 32
HEIGHT = 18


def _load_example():
    """Import the example script as a module without running main()."""
    spec = importlib.util.spec_from_file_location("render_spheres", EXAMPLE_SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _render(scene_factory, samples_per_pixel=8, max_depth=10):
    from src.tracer.camera.pinhole import setup_camera
    from src.tracer.core.renderer import Renderer

    _, camera = scene_factory()
    setup_camera(camera)
    renderer = Renderer(WIDTH, HEIGHT)
    renderer.render(samples_per_pixel=samples_per_pixel, max_depth=max_depth)
    return renderer, camera


def _background(camera, i, j):
    """Sky color seen through the center of pixel (i, j) with no geometry."""
    d = camera.ray_direction((i + 0.5) / (WIDTH - 1), (j + 0.5) / (HEIGHT - 1))
    t = 0.5 * (d.unit_vector().y + 1.0)
    return (1.0 - t) * np.array([1.0, 1.0, 1.0]) + t * np.array([0.5, 0.7, 1.0])


class TestSingleSphereImage:
    """A single sphere in front of the camera shows up against the sky."""

    def test_center_pixel_differs_from_background(self) -> None:
        from src.tracer.scene.presets import create_single_sphere_scene

        renderer, camera = _render(create_single_sphere_scene)
        image = renderer.get_image_numpy()

        i, j = WIDTH // 2, HEIGHT // 2
        # Readback is top row first; j counts from the bottom
        center = image[HEIGHT - 1 - j, i]
        background = _background(camera, i, j)

        assert np.abs(center - background).max() > 0.2
        # Shaded by one diffuse bounce to the sky
        assert abs(center[2] - 0.5) < 1e-9

    def test_corners_are_sky(self) -> None:
        from src.tracer.scene.presets import create_single_sphere_scene

        renderer, _ = _render(create_single_sphere_scene)
        image = renderer.get_image_numpy()

        for y, x in [(0, 0), (0, WIDTH - 1), (HEIGHT - 1, 0), (HEIGHT - 1, WIDTH - 1)]:
            assert abs(image[y, x, 2] - 1.0) < 1e-9

    def test_silhouette_is_roughly_circular(self) -> None:
        """Shaded pixels form a blob centered in the image."""
        from src.tracer.scene.presets import create_single_sphere_scene

        renderer, _ = _render(create_single_sphere_scene, samples_per_pixel=4)
        image = renderer.get_image_numpy()

        # Sphere pixels are darkened by the bounce: blue well below the sky's 1.0
        mask = image[..., 2] < 0.75
        ys, xs = np.nonzero(mask)
        assert mask.sum() > 0
        assert abs(xs.mean() - (WIDTH - 1) / 2) < 1.5
        assert abs(ys.mean() - (HEIGHT - 1) / 2) < 1.5
        # Same extent horizontally and vertically (square pixels)
        assert abs((xs.max() - xs.min()) - (ys.max() - ys.min())) <= 2


class TestDefaultSceneImage:
    """The default two-sphere scene renders cleanly."""

    def test_output_is_finite_and_in_range(self) -> None:
        from src.tracer.scene.presets import create_default_scene

        renderer, _ = _render(create_default_scene, samples_per_pixel=4)
        image = renderer.get_image_numpy()

        assert not np.any(np.isnan(image)), "Image contains NaN values"
        assert not np.any(np.isinf(image)), "Image contains Inf values"
        assert np.all(image >= 0.0), "Image contains negative values"
        assert np.all(image <= 1.0 + 1e-12)

    def test_ground_is_darker_than_sky(self) -> None:
        from src.tracer.scene.presets import create_default_scene

        renderer, _ = _render(create_default_scene, samples_per_pixel=4)
        image = renderer.get_image_numpy()

        assert image[-1].mean() < image[0].mean()

    def test_ppm_stream(self) -> None:
        from src.tracer.scene.presets import create_default_scene

        renderer, _ = _render(create_default_scene, samples_per_pixel=2)
        stream = io.StringIO()
        renderer.write_ppm(stream)
        lines = stream.getvalue().splitlines()

        assert lines[:3] == ["P3", f"{WIDTH} {HEIGHT}", "255"]
        assert len(lines) == 3 + WIDTH * HEIGHT
        for line in lines[3:]:
            values = [int(v) for v in line.split()]
            assert len(values) == 3
            assert all(0 <= v <= 255 for v in values)


class TestExampleScript:
    """Tests for examples/render_spheres.py (Taichi is already initialized)."""

    def test_parse_args_defaults(self) -> None:
        example = _load_example()
        args = example.parse_args([])

        assert args.width == 400
        assert args.aspect_ratio == pytest.approx(16.0 / 9.0)
        assert args.samples == 100
        assert args.max_depth == 50
        assert args.output == "-"
        assert args.format == "ppm"
        assert args.scene == "default"

    @pytest.mark.parametrize("text, value", [("16/9", 16.0 / 9.0), ("2", 2.0), ("1.5", 1.5)])
    def test_parse_aspect_ratio(self, text, value) -> None:
        example = _load_example()
        assert example.parse_aspect_ratio(text) == pytest.approx(value)

    def test_render_to_stdout(self, capsys) -> None:
        from src.tracer.config import RenderConfig

        example = _load_example()
        config = RenderConfig(image_width=16, samples_per_pixel=2, max_depth=5)
        example.render_spheres(config, output="-", scene_name="single")

        captured = capsys.readouterr()
        assert captured.out.startswith("P3\n16 9\n255\n")
        assert len(captured.out.splitlines()) == 3 + 16 * 9
        # Progress goes to stderr, never into the pixel stream
        assert "Scanlines remaining: 0" in captured.err
        assert "Done." in captured.err
        assert "Scanlines" not in captured.out

    def test_render_to_files_quietly(self, tmp_path, capsys) -> None:
        from src.tracer.config import RenderConfig

        example = _load_example()
        config = RenderConfig(image_width=16, samples_per_pixel=1, max_depth=3)
        ppm_path = tmp_path / "out.ppm"
        png_path = tmp_path / "out.png"

        example.render_spheres(config, output=str(ppm_path), quiet=True)
        example.render_spheres(config, output=str(png_path), output_format="png", quiet=True)

        assert ppm_path.read_text(encoding="ascii").startswith("P3\n16 9\n255\n")
        assert png_path.stat().st_size > 0
        assert capsys.readouterr().err == ""

    def test_png_to_stdout_is_rejected(self) -> None:
        from src.tracer.config import RenderConfig

        example = _load_example()
        with pytest.raises(ValueError, match="PNG output needs a file path"):
            example.render_spheres(RenderConfig(image_width=16), output="-", output_format="png")
