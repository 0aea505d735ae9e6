"""Scanline renderer driving the integrator.

This module wraps the core integrator with a small stateful interface:
- Top-to-bottom scanline rendering with progress callbacks
- A generator variant that yields after each row
- Access to the result as linear floats, encoded bytes, PPM or PNG

Example:
    >>> import sys
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=0)
    >>> from src.tracer.camera.pinhole import setup_camera
    >>> from src.tracer.core.renderer import Renderer
    >>> from src.tracer.scene.presets import create_default_scene
    >>>
    >>> scene, camera = create_default_scene()
    >>> setup_camera(camera)
    >>> renderer = Renderer(400, 225)
    >>> renderer.render(samples_per_pixel=100)
    >>> renderer.write_ppm(sys.stdout)
"""

from collections.abc import Callable, Generator
from pathlib import Path
from typing import TextIO

import numpy as np
import numpy.typing as npt

from src.tracer.core.integrator import (
    MAX_DEPTH,
    SAMPLES_PER_PIXEL,
    clear_render_target,
    get_accumulated_numpy,
    get_sample_count_numpy,
    render_scanline,
    setup_render_target,
)
from src.tracer.output.export import save_png
from src.tracer.output.ppm import encode_image, write_ppm

# Callback receives (scanlines_remaining, image_height) after each row
ProgressCallback = Callable[[int, int], None]


class Renderer:
    """Renders the current scene and camera into the render target.

    The renderer owns the image size and delegates storage to the
    integrator's render target (Taichi fields).

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
    """

    def __init__(self, width: int, height: int) -> None:
        """Initialize the renderer.

        Args:
            width: Image width in pixels.
            height: Image height in pixels.

        Raises:
            ValueError: If dimensions are not supported by the render target.
        """
        self._width = width
        self._height = height
        setup_render_target(width, height)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def sample_counts(self) -> npt.NDArray[np.int32]:
        """Per-pixel sample counts, shape (height, width)."""
        return get_sample_count_numpy()

    def reset(self) -> None:
        """Discard accumulated samples, keeping the image size."""
        clear_render_target()

    def render(
        self,
        samples_per_pixel: int = SAMPLES_PER_PIXEL,
        max_depth: int = MAX_DEPTH,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render every scanline, top row first.

        Args:
            samples_per_pixel: Jittered samples per pixel.
            max_depth: Bounce budget per sample.
            callback: Optional function called after each row with
                (scanlines_remaining, height).

        Raises:
            ValueError: If samples_per_pixel is less than 1.
        """
        for remaining in self.render_progressive(samples_per_pixel, max_depth):
            if callback is not None:
                callback(remaining, self._height)

    def render_progressive(
        self,
        samples_per_pixel: int = SAMPLES_PER_PIXEL,
        max_depth: int = MAX_DEPTH,
    ) -> Generator[int, None, None]:
        """Render scanlines one at a time, yielding after each.

        Rows are rendered from the top of the image (row height - 1) down to
        row 0. Stopping the generator early leaves the remaining rows black.

        Args:
            samples_per_pixel: Jittered samples per pixel.
            max_depth: Bounce budget per sample.

        Yields:
            The number of scanlines still to be rendered.

        Raises:
            ValueError: If samples_per_pixel is less than 1.
        """
        if samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be at least 1, got {samples_per_pixel}")

        for row in range(self._height - 1, -1, -1):
            render_scanline(row, samples_per_pixel, max_depth)
            yield row

    def get_accumulated(self) -> npt.NDArray[np.float64]:
        """Per-pixel color sums, shape (height, width, 3), top row first."""
        return get_accumulated_numpy()

    def get_image_numpy(self) -> npt.NDArray[np.float64]:
        """Average linear color per pixel, shape (height, width, 3).

        Pixels with no samples are black.
        """
        counts = self.sample_counts[..., np.newaxis].astype(np.float64)
        sums = self.get_accumulated()
        return np.divide(sums, counts, out=np.zeros_like(sums), where=counts > 0)

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Gamma-corrected 8-bit image, shape (height, width, 3)."""
        return encode_image(self.get_accumulated(), self.sample_counts)

    def write_ppm(self, stream: TextIO) -> None:
        """Write the image as PPM P3 text to an open text stream.

        Raises:
            OSError: If writing to the stream fails.
        """
        write_ppm(stream, self.get_accumulated(), self.sample_counts)

    def save_ppm(self, filepath: str | Path) -> None:
        """Save the image as a PPM P3 file."""
        with open(filepath, "w", encoding="ascii", newline="\n") as f:
            self.write_ppm(f)

    def save_png(self, filepath: str | Path) -> None:
        """Save the image as an 8-bit PNG file."""
        save_png(self.get_image_uint8(), filepath)

    def __repr__(self) -> str:
        return f"Renderer(width={self.width}, height={self.height})"
