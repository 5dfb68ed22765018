"""Tests for the sdf-texture command line."""

import numpy as np
import pytest
import yaml
from PIL import Image

from sdf_texture.main import build_parser, main


@pytest.fixture
def square_png(tmp_path):
    pixels = np.zeros((6, 6, 4), dtype=np.uint8)
    pixels[1:5, 1:5] = (255, 0, 0, 255)
    path = tmp_path / "square.png"
    Image.fromarray(pixels, 'RGBA').save(path)
    return path


@pytest.fixture
def settings_file(tmp_path):
    return tmp_path / "settings.yaml"


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args(["in.png"])
        assert args.input == "in.png"
        assert args.fill_mode is None
        assert args.inside_distance is None
        assert args.method == "brute"
        assert not args.alpha_only

    def test_rejects_unknown_fill_mode(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["in.png", "--fill-mode", "neon"])


class TestMain:
    def test_generates_default_output(self, square_png, settings_file, capsys):
        main([str(square_png), "--settings", str(settings_file), "--inside-distance", "2"])
        out = square_png.parent / "square_SDF.png"
        assert out.is_file()
        assert "Done!" in capsys.readouterr().out
        assert not settings_file.exists()

    def test_alpha_only_and_explicit_output(self, square_png, settings_file, tmp_path):
        target = tmp_path / "out" / "mask.png"
        main([str(square_png), "-o", str(target), "--alpha-only", "--method", "edt",
              "--settings", str(settings_file)])
        with Image.open(target) as img:
            data = np.array(img)
        assert (data[2, 2, :3] == (255, 0, 0)).all()

    def test_uses_stored_settings(self, square_png, settings_file, tmp_path):
        settings_file.write_text("rgb_fill_mode: solid_black\n")
        target = tmp_path / "black.png"
        main([str(square_png), "-o", str(target), "--settings", str(settings_file)])
        with Image.open(target) as img:
            data = np.array(img).astype(int)
        assert (np.abs(data[..., 0] + data[..., 3] - 255) <= 1).all()

    def test_save_settings(self, square_png, settings_file):
        main([str(square_png), "--settings", str(settings_file), "--outside-distance", "3",
              "--fill-mode", "sdf", "--save-settings"])
        with open(settings_file) as f:
            data = yaml.safe_load(f)
        assert data['outside_distance'] == 3.0
        assert data['rgb_fill_mode'] == 'sdf'

    def test_failed_run_keeps_stored_settings(self, tmp_path, settings_file, capsys):
        broken = tmp_path / "broken.png"
        broken.write_bytes(b"not an image")
        with pytest.raises(SystemExit) as exc:
            main([str(broken), "--settings", str(settings_file), "--inside-distance", "5",
                  "--save-settings"])
        assert exc.value.code == 1
        assert not settings_file.exists()
        assert "Saved settings" not in capsys.readouterr().out

    def test_show_settings(self, settings_file, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--show-settings", "--settings", str(settings_file)])
        assert exc.value.code == 0
        out = capsys.readouterr().out
        assert "inside_distance" in out
        assert "solid_white" in out

    def test_missing_input_argument(self, settings_file, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--settings", str(settings_file)])
        assert exc.value.code == 1
        assert "Input file is required" in capsys.readouterr().out

    def test_missing_input_file(self, tmp_path, settings_file, capsys):
        with pytest.raises(SystemExit) as exc:
            main([str(tmp_path / "ghost.png"), "--settings", str(settings_file)])
        assert exc.value.code == 1
        assert "not found" in capsys.readouterr().out

    def test_invalid_distance(self, square_png, settings_file, capsys):
        with pytest.raises(SystemExit) as exc:
            main([str(square_png), "--settings", str(settings_file), "--inside-distance", "0"])
        assert exc.value.code == 1
        assert "Invalid configuration" in capsys.readouterr().out
        assert not (square_png.parent / "square_SDF.png").exists()

    def test_soft_limit_warning(self, square_png, settings_file, capsys):
        main([str(square_png), "--settings", str(settings_file), "--inside-distance", "40",
              "--method", "edt"])
        assert "outside the usual range" in capsys.readouterr().out
