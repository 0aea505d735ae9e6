"""Tests for PNG export.

Tests cover:
- Saving an encoded image and reading it back with Pillow
- Agreement between PNG pixels and the PPM encoder
- Shape validation
"""

import numpy as np
import pytest
from PIL import Image

from src.tracer.output.export import save_png, save_png_from_accumulated
from src.tracer.output.ppm import encode_image


class TestSavePng:
    """Tests for save_png."""

    def test_round_trip_pixels(self, tmp_path):
        image = np.zeros((2, 3, 3), dtype=np.uint8)
        image[0, :, 0] = 255
        image[1, 2] = (10, 20, 30)
        path = tmp_path / "out.png"

        save_png(image, path)

        with Image.open(path) as loaded:
            assert loaded.mode == "RGB"
            assert loaded.size == (3, 2)
            np.testing.assert_array_equal(np.asarray(loaded), image)

    @pytest.mark.parametrize("shape", [(4, 4), (4, 4, 4), (2, 2, 1)])
    def test_rejects_non_rgb_arrays(self, tmp_path, shape):
        with pytest.raises(ValueError, match="Expected an"):
            save_png(np.zeros(shape, dtype=np.uint8), tmp_path / "bad.png")

    def test_from_accumulated_matches_ppm_encoding(self, tmp_path):
        rng = np.random.default_rng(5)
        sums = rng.uniform(0.0, 8.0, size=(4, 6, 3))
        path = tmp_path / "acc.png"

        save_png_from_accumulated(sums, 8, path)

        with Image.open(path) as loaded:
            np.testing.assert_array_equal(np.asarray(loaded), encode_image(sums, 8))
