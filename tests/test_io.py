"""Tests for texture parsing and PNG export."""

from pathlib import Path

import numpy as np
import numpy.testing as npt
import pytest
from PIL import Image

from sdf_texture import SDFConfig, Texture, TextureExporter, TextureParser, generate_file
from sdf_texture.core.exporter import default_output_path


def _write_png(path, pixels, mode='RGBA'):
    Image.fromarray(pixels, mode).save(path)
    return path


def _square_rgba(size=8):
    pixels = np.zeros((size, size, 4), dtype=np.uint8)
    pixels[..., 0] = 200
    pixels[..., 1] = 100
    pixels[..., 2] = 50
    pixels[2:6, 2:6, 3] = 255
    return pixels


class TestTextureParser:
    def test_parse_png(self, tmp_path):
        raw = _square_rgba()
        path = _write_png(tmp_path / "square.png", raw)
        tex = TextureParser.parse(path)
        assert (tex.width, tex.height) == (8, 8)
        assert tex.name == "square"
        assert tex.source_path == path
        assert tex.pixels.dtype == np.float32
        npt.assert_allclose(tex.pixels, raw / 255.0, atol=1e-7)

    def test_parse_rgb_png_is_opaque(self, tmp_path):
        path = _write_png(tmp_path / "rgb.png", np.full((3, 3, 3), 10, dtype=np.uint8), 'RGB')
        tex = TextureParser.parse(path)
        npt.assert_array_equal(tex.alpha, np.ones((3, 3), dtype=np.float32))
        assert not tex.has_transparency

    def test_parse_grayscale_png(self, tmp_path):
        path = _write_png(tmp_path / "gray.png", np.full((2, 5), 128, dtype=np.uint8), 'L')
        tex = TextureParser.parse(path)
        assert tex.pixels.shape == (2, 5, 4)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            TextureParser.parse(tmp_path / "nope.png")

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        with pytest.raises(ValueError):
            TextureParser.parse(path)

    def test_from_array_uint8(self):
        tex = TextureParser.from_array(_square_rgba())
        assert tex.pixels.max() == 1.0
        assert tex.pixels[0, 0, 3] == 0.0

    def test_from_array_float_kept(self):
        pixels = np.full((2, 3, 4), 0.25, dtype=np.float64)
        tex = TextureParser.from_array(pixels, name="f")
        assert tex.pixels.dtype == np.float32
        assert (tex.width, tex.height) == (3, 2)
        npt.assert_array_equal(tex.pixels, np.full((2, 3, 4), 0.25, dtype=np.float32))

    def test_from_array_rgb_gets_alpha(self):
        tex = TextureParser.from_array(np.zeros((2, 2, 3), dtype=np.uint8))
        npt.assert_array_equal(tex.alpha, np.ones((2, 2), dtype=np.float32))

    def test_from_array_does_not_alias(self):
        pixels = np.zeros((2, 2, 4), dtype=np.float32)
        tex = TextureParser.from_array(pixels)
        tex.pixels[0, 0, 0] = 1.0
        assert pixels[0, 0, 0] == 0.0

    @pytest.mark.parametrize("shape", [(4, 4), (4, 4, 2), (4, 4, 5)])
    def test_from_array_bad_shape(self, shape):
        with pytest.raises(ValueError):
            TextureParser.from_array(np.zeros(shape))

    def test_from_image(self):
        img = Image.new('LA', (3, 2), (255, 0))
        tex = TextureParser.from_image(img, name="la")
        assert tex.pixels.shape == (2, 3, 4)
        assert tex.has_transparency

    def test_copy_is_deep(self):
        tex = TextureParser.from_array(_square_rgba())
        clone = tex.copy()
        clone.pixels[0, 0, 0] = 0.0
        assert tex.pixels[0, 0, 0] != 0.0


class TestTextureExporter:
    def test_to_uint8_rounds_and_clips(self):
        pixels = np.array([[[0.0, 0.5, 1.0, 1.5]], [[-0.2, 0.25, 0.75, 0.998]]], dtype=np.float32)
        tex = Texture(width=1, height=2, pixels=pixels)
        out = TextureExporter.to_uint8(tex)
        assert out.dtype == np.uint8
        npt.assert_array_equal(out, [[[0, 128, 255, 255]], [[0, 64, 191, 254]]])

    def test_to_png_round_trip(self, tmp_path):
        tex = TextureParser.from_array(_square_rgba())
        path = TextureExporter.to_png(tex, tmp_path / "out" / "square.png")
        assert path.is_file()
        with Image.open(path) as img:
            assert img.mode == 'RGBA'
            npt.assert_array_equal(np.array(img), _square_rgba())

    def test_to_png_default_path(self, tmp_path):
        tex = TextureParser.from_array(_square_rgba(), name="thing_SDF")
        tex.source_path = tmp_path / "thing.png"
        path = TextureExporter.to_png(tex)
        assert path == tmp_path / "thing_SDF.png"
        assert path.is_file()

    def test_default_output_path(self):
        assert default_output_path("assets/glyph.png") == Path("assets/glyph_SDF.png")
        assert default_output_path("assets/glyph.tga", alpha_only=True) == \
            Path("assets/glyph_SDF_Alpha.png")


class TestGenerateFile:
    def test_writes_sdf_png(self, tmp_path):
        src = _write_png(tmp_path / "square.png", _square_rgba())
        out = generate_file(src, inside_distance=2, outside_distance=2)
        assert out == tmp_path / "square_SDF.png"
        with Image.open(out) as img:
            data = np.array(img)
        assert data.shape == (8, 8, 4)
        # Center of the square is 2px from the outside -> fully inside
        assert data[4, 4, 3] == 255
        assert data[0, 0, 3] == 0
        npt.assert_array_equal(data[..., 0], data[..., 3])

    def test_alpha_only_keeps_colors(self, tmp_path):
        src = _write_png(tmp_path / "square.png", _square_rgba())
        out = generate_file(src, config=SDFConfig(inside_distance=4), alpha_only=True)
        assert out.name == "square_SDF_Alpha.png"
        with Image.open(out) as img:
            data = np.array(img)
        npt.assert_array_equal(data[..., :3], _square_rgba()[..., :3])

    def test_explicit_output(self, tmp_path):
        src = _write_png(tmp_path / "square.png", _square_rgba())
        out = generate_file(src, tmp_path / "custom" / "result.png", method="edt")
        assert out == tmp_path / "custom" / "result.png"
        assert out.is_file()
