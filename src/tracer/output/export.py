"""Image export for encoded renders.

PPM text output lives in ``ppm``; this module covers binary formats via
Pillow, using the same 8-bit encoding so both outputs agree pixel for pixel.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from src.tracer.output.export import save_png
    >>> from src.tracer.output.ppm import encode_image
    >>>
    >>> save_png(encode_image(sums, samples_per_pixel=100), "output.png")
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.tracer.output.ppm import encode_image


def save_png(image_uint8: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save an encoded image as a PNG file.

    Args:
        image_uint8: Encoded image of shape (H, W, 3), top row first.
        filepath: Output file path (should end in .png).

    Raises:
        ValueError: If the array is not an (H, W, 3) image.
        OSError: If the file cannot be written.
    """
    image_uint8 = np.ascontiguousarray(image_uint8, dtype=np.uint8)
    if image_uint8.ndim != 3 or image_uint8.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image_uint8.shape}")

    pil_image = PILImage.fromarray(image_uint8)
    pil_image.save(filepath)


def save_png_from_accumulated(
    accumulated: npt.NDArray[np.floating],
    samples_per_pixel: int | npt.NDArray[np.integer],
    filepath: str | Path,
) -> None:
    """Encode accumulated color sums and save them as a PNG file.

    Args:
        accumulated: Color sums of shape (H, W, 3), top row first.
        samples_per_pixel: Sample count (int or (H, W) array).
        filepath: Output file path.
    """
    save_png(encode_image(accumulated, samples_per_pixel), filepath)
