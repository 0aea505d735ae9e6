"""PPM "P3" pixel encoding.

A pixel's accumulated color sum is turned into three 8-bit integers by:

1. Dividing by the number of samples (averaging).
2. Gamma correction with gamma 2.0 (square root).
3. Clamping to [0, 0.999].
4. Scaling by 256 and truncating, giving an integer in [0, 255].

Negative and NaN channel values are treated as 0; +inf saturates to 255.
``encode_color`` works on one pixel and ``encode_image`` on a whole
NumPy image; both produce identical values.

Output layout:

    P3
    <width> <height>
    255
    <r> <g> <b>     (one pixel per line, top row first, left to right)

Example:
    >>> from src.tracer.core.vec3 import Color
    >>> encode_color(Color(1.0, 0.0, 0.0), samples_per_pixel=1)
    (255, 0, 0)
    >>> format_pixel((255, 0, 0))
    '255 0 0'
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from pathlib import Path
from typing import TextIO

import numpy as np
import numpy.typing as npt

from src.tracer.core.vec3 import Color

# Maximum channel value written in the header
MAX_COLOR_VALUE = 255

# Clamp bound applied after gamma correction, so 256 * value stays below 256
CLAMP_MAX = 0.999


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp x into [lo, hi]."""
    if x < lo:
        return lo
    if x > hi:
        return hi
    return x


def tone_map_channel(value: float, scale: float) -> int:
    """Encode a single accumulated channel value.

    Args:
        value: Accumulated (summed) linear channel value.
        scale: Reciprocal of the sample count.

    Returns:
        Integer channel value in [0, 255].
    """
    v = value * scale
    if math.isnan(v) or v < 0.0:
        v = 0.0
    return int(256 * clamp(math.sqrt(v), 0.0, CLAMP_MAX))


def encode_color(
    pixel_color: Color | Iterable[float], samples_per_pixel: int
) -> tuple[int, int, int]:
    """Encode an accumulated pixel color.

    Args:
        pixel_color: Sum of ``samples_per_pixel`` linear color samples.
        samples_per_pixel: Number of samples in the sum.

    Returns:
        Tuple of (r, g, b) integers in [0, 255].

    Raises:
        ValueError: If samples_per_pixel is less than 1.
    """
    if samples_per_pixel < 1:
        raise ValueError(f"samples_per_pixel must be at least 1, got {samples_per_pixel}")

    scale = 1.0 / samples_per_pixel
    r, g, b = pixel_color
    return (
        tone_map_channel(r, scale),
        tone_map_channel(g, scale),
        tone_map_channel(b, scale),
    )


def format_pixel(rgb: Iterable[int]) -> str:
    """Format an encoded pixel as three space-separated integers."""
    return " ".join(str(int(c)) for c in rgb)


def format_header(width: int, height: int) -> str:
    """Build the P3 header (including its trailing newline)."""
    return f"P3\n{width} {height}\n{MAX_COLOR_VALUE}\n"


def write_header(stream: TextIO, width: int, height: int) -> None:
    """Write the P3 header to a text stream."""
    stream.write(format_header(width, height))


def write_color(stream: TextIO, pixel_color: Color | Iterable[float], samples_per_pixel: int) -> None:
    """Encode one accumulated pixel and write it as a line.

    Raises:
        ValueError: If samples_per_pixel is less than 1.
        OSError: If writing to the stream fails.
    """
    stream.write(format_pixel(encode_color(pixel_color, samples_per_pixel)) + "\n")


def encode_image(
    accumulated: npt.NDArray[np.floating],
    samples_per_pixel: int | npt.NDArray[np.integer],
) -> npt.NDArray[np.uint8]:
    """Encode a whole image of accumulated colors.

    Args:
        accumulated: Color sums of shape (H, W, 3).
        samples_per_pixel: Sample count, either a single int or an array of
            shape (H, W). Pixels with zero samples encode as black.

    Returns:
        Array of shape (H, W, 3) with dtype uint8.

    Raises:
        ValueError: If a scalar samples_per_pixel is less than 1.
    """
    accumulated = np.asarray(accumulated, dtype=np.float64)

    if np.isscalar(samples_per_pixel):
        if samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be at least 1, got {samples_per_pixel}")
        scale = np.full(accumulated.shape[:2], 1.0 / samples_per_pixel)
    else:
        counts = np.asarray(samples_per_pixel, dtype=np.float64)
        scale = np.divide(1.0, counts, out=np.zeros_like(counts), where=counts > 0)

    # inf * 0 for unsampled pixels produces NaN, which is mapped to black below
    with np.errstate(invalid="ignore"):
        v = accumulated * scale[..., np.newaxis]
    v = np.where(np.isnan(v) | (v < 0.0), 0.0, v)
    v = np.clip(np.sqrt(v), 0.0, CLAMP_MAX)
    return (256 * v).astype(np.uint8)


def write_ppm(
    stream: TextIO,
    accumulated: npt.NDArray[np.floating],
    samples_per_pixel: int | npt.NDArray[np.integer],
) -> None:
    """Write a full PPM P3 image.

    Args:
        stream: Open text stream (file or sys.stdout).
        accumulated: Color sums of shape (H, W, 3), top row first.
        samples_per_pixel: Sample count (int or (H, W) array).

    Raises:
        OSError: If writing to the stream fails (e.g. a closed pipe).
    """
    encoded = encode_image(accumulated, samples_per_pixel)
    height, width = encoded.shape[:2]

    write_header(stream, width, height)
    for row in encoded:
        stream.write("".join(format_pixel(pixel) + "\n" for pixel in row))


def save_ppm(
    filepath: str | Path,
    accumulated: npt.NDArray[np.floating],
    samples_per_pixel: int | npt.NDArray[np.integer],
) -> None:
    """Save accumulated colors as a PPM P3 file."""
    with open(filepath, "w", encoding="ascii", newline="\n") as f:
        write_ppm(f, accumulated, samples_per_pixel)
