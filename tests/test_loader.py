"""Unit tests for image texture loading."""

import logging

import numpy as np
import pytest
from PIL import Image


class TestDefaultTexture:
    """Tests for the fallback checkerboard."""

    def test_size(self):
        """Test the fallback is a 10x10 grid."""
        from pathtracer.textures.loader import DEFAULT_GRID_SIZE, default_image_texture

        texture = default_image_texture()
        assert texture.width == DEFAULT_GRID_SIZE
        assert texture.height == DEFAULT_GRID_SIZE

    def test_colors(self):
        """Test cells alternate black and magenta starting with black."""
        from pathtracer.textures.loader import default_image_texture

        pixels = default_image_texture().pixels
        np.testing.assert_array_equal(pixels[0, 0], [0.0, 0.0, 0.0])
        np.testing.assert_array_equal(pixels[0, 1], [1.0, 0.0, 1.0])
        np.testing.assert_array_equal(pixels[1, 0], [1.0, 0.0, 1.0])
        np.testing.assert_array_equal(pixels[9, 9], [0.0, 0.0, 0.0])


class TestLoadImageTexture:
    """Tests for load_image_texture."""

    def test_missing_file_falls_back(self, tmp_path, caplog):
        """Test a missing file yields the checkerboard and a warning."""
        from pathtracer.textures.loader import default_image_texture, load_image_texture

        with caplog.at_level(logging.WARNING):
            texture = load_image_texture(tmp_path / "missing.png")
        np.testing.assert_array_equal(texture.pixels, default_image_texture().pixels)
        assert "missing.png" in caplog.text

    def test_corrupt_file_falls_back(self, tmp_path):
        """Test an unreadable file yields the checkerboard."""
        from pathtracer.textures.loader import DEFAULT_GRID_SIZE, load_image_texture

        path = tmp_path / "broken.png"
        path.write_bytes(b"not an image")
        texture = load_image_texture(path)
        assert texture.width == DEFAULT_GRID_SIZE

    def test_loads_png(self, tmp_path):
        """Test a real image is loaded with channels scaled to [0, 1]."""
        from pathtracer.textures.loader import load_image_texture

        data = np.zeros((2, 3, 3), dtype=np.uint8)
        data[0, 0] = (255, 0, 0)
        data[1, 2] = (0, 51, 255)
        path = tmp_path / "small.png"
        Image.fromarray(data).save(path)

        texture = load_image_texture(path)
        assert texture.width == 3
        assert texture.height == 2
        np.testing.assert_allclose(texture.pixels[0, 0], [1.0, 0.0, 0.0])
        np.testing.assert_allclose(texture.pixels[1, 2], [0.0, 0.2, 1.0], atol=1e-6)

    def test_converts_grayscale_to_rgb(self, tmp_path):
        """Test single-channel images are expanded to RGB."""
        from pathtracer.textures.loader import load_image_texture

        path = tmp_path / "grey.png"
        Image.fromarray(np.full((4, 4), 128, dtype=np.uint8)).save(path)

        texture = load_image_texture(path)
        assert texture.pixels.shape == (4, 4, 3)
        np.testing.assert_allclose(texture.pixels[0, 0], [128 / 255] * 3, atol=1e-6)

    def test_oversized_image_is_downscaled(self, tmp_path, caplog):
        """Test an image larger than the texel budget shrinks with its aspect ratio."""
        from pathtracer.textures.loader import MAX_IMAGE_TEXELS, load_image_texture

        path = tmp_path / "huge.png"
        Image.fromarray(np.full((1100, 2048, 3), 200, dtype=np.uint8)).save(path)

        with caplog.at_level(logging.WARNING):
            texture = load_image_texture(path)
        assert texture.width * texture.height <= MAX_IMAGE_TEXELS
        assert texture.width / texture.height == pytest.approx(2048 / 1100, rel=0.01)
        np.testing.assert_allclose(texture.pixels[0, 0], [200 / 255] * 3, atol=1e-6)
        assert "downscaled" in caplog.text

    def test_two_oversized_images_fit_the_scene(self, tmp_path):
        """Test two downscaled images upload together without exhausting the texel pool."""
        from pathtracer.scene.manager import SceneManager
        from pathtracer.textures.loader import load_image_texture

        path = tmp_path / "huge.png"
        Image.fromarray(np.zeros((1100, 2048, 3), dtype=np.uint8)).save(path)

        scene = SceneManager()
        first = scene.add_texture(load_image_texture(path))
        second = scene.add_texture(load_image_texture(path))
        assert first != second
        assert scene.get_texture_count() == 2
