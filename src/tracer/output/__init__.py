"""Output module for encoding and saving rendered images.

Components:
    ppm: Gamma-corrected 8-bit encoding and PPM "P3" text output
    export: PNG export via Pillow

Example:
    >>> import sys
    >>> from src.tracer.output import write_ppm
    >>> write_ppm(sys.stdout, sums, samples_per_pixel=100)
"""

from src.tracer.output.export import save_png, save_png_from_accumulated
from src.tracer.output.ppm import (
    MAX_COLOR_VALUE,
    encode_color,
    encode_image,
    format_header,
    format_pixel,
    save_ppm,
    write_color,
    write_header,
    write_ppm,
)

__all__ = [
    "MAX_COLOR_VALUE",
    "encode_color",
    "encode_image",
    "format_header",
    "format_pixel",
    "write_header",
    "write_color",
    "write_ppm",
    "save_ppm",
    "save_png",
    "save_png_from_accumulated",
]
