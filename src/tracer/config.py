"""Render configuration.

Bundles the image and sampling parameters for one render. The image height
is derived from the width and aspect ratio, truncated to an integer.

Example:
    >>> from src.tracer.config import RenderConfig
    >>> config = RenderConfig()
    >>> config.image_width, config.image_height
    (400, 225)
    >>> RenderConfig(image_width=100, aspect_ratio=2.0).image_height
    50
"""

import math
from dataclasses import dataclass

# Matches the camera default; kept here so the config can be built before ti.init()
DEFAULT_ASPECT_RATIO = 16.0 / 9.0


@dataclass(frozen=True)
class RenderConfig:
    """Parameters for a render.

    Attributes:
        image_width: Image width in pixels.
        aspect_ratio: Image width divided by image height.
        samples_per_pixel: Jittered samples averaged per pixel.
        max_depth: Maximum number of ray bounces per sample.
        seed: Seed for Taichi's random number generators.
    """

    image_width: int = 400
    aspect_ratio: float = DEFAULT_ASPECT_RATIO
    samples_per_pixel: int = 100
    max_depth: int = 50
    seed: int = 0

    @property
    def image_height(self) -> int:
        return int(self.image_width / self.aspect_ratio)

    @property
    def image_size(self) -> tuple[int, int]:
        """(width, height) in pixels."""
        return self.image_width, self.image_height

    def validate(self) -> None:
        """Check that the configuration can be rendered.

        Raises:
            ValueError: If any parameter is out of range.
        """
        if not math.isfinite(self.aspect_ratio) or self.aspect_ratio <= 0.0:
            raise ValueError(f"aspect_ratio must be a positive number, got {self.aspect_ratio}")
        if self.image_width < 1:
            raise ValueError(f"image_width must be at least 1, got {self.image_width}")
        if self.image_height < 1:
            raise ValueError(
                f"image_height must be at least 1, got {self.image_height} "
                f"(width {self.image_width}, aspect ratio {self.aspect_ratio})"
            )
        if self.samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be at least 1, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.seed < 0:
            raise ValueError(f"seed must be non-negative, got {self.seed}")
