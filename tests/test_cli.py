"""Tests for the command line entry point."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
import pytest
from seamstitch import cli
from seamstitch.codec import decode
from seamstitch.grid import CutGrid

from conftest import save_gray_png


@pytest.fixture
def images(tmp_path):
    left = np.zeros((6, 10), dtype=np.uint8)
    right = np.full((6, 8), 255, dtype=np.uint8)
    return (save_gray_png(tmp_path / 'left.png', left),
            save_gray_png(tmp_path / 'right.png', right))


@pytest.fixture
def no_solver(monkeypatch):
    def fail(self):
        raise AssertionError("solver must not run")

    monkeypatch.setattr(CutGrid, 'solve', fail)


class TestMain:
    def test_direct_stitch(self, images, tmp_path, capsys):
        output = str(tmp_path / 'result.png')
        code = cli.main([images[0], images[1], '4', output, '0'])

        assert code == 0
        buffer, width, height = decode(output)
        assert (width, height) == (14, 6)
        pixels = buffer.reshape(6, 14, 4)
        assert (pixels[:, :7, 0] == 0).all()
        assert (pixels[:, 9:, 0] == 255).all()

        out = capsys.readouterr().out
        for line in ("Opening images...", "Stitching images...", "Stitching complete!",
                     "Saving result...", "Success!"):
            assert line in out

    def test_gradient_stitch(self, images, tmp_path):
        output = str(tmp_path / 'grad.png')
        assert cli.main([images[0], images[1], '3', output, '2']) == 0
        _, width, height = decode(output)
        assert (width, height) == (15, 6)

    def test_gradient_view_needs_only_first_image(self, images, tmp_path):
        output = str(tmp_path / 'view.png')
        missing = str(tmp_path / 'missing.png')
        assert cli.main([images[0], missing, '4', output, '1']) == 0
        _, width, height = decode(output)
        assert (width, height) == (10, 6)

    def test_decode_failure_stops_before_stitching(self, images, tmp_path, capsys, no_solver):
        output = tmp_path / 'result.png'
        code = cli.main([images[0], str(tmp_path / 'missing.png'), '4', str(output), '0'])

        assert code != 0
        assert not output.exists()
        out = capsys.readouterr().out
        assert "Failed to open image files!" in out
        assert "Stitching images..." not in out

    def test_malformed_buffer_reported_while_opening(self, images, tmp_path, capsys,
                                                     monkeypatch, no_solver):
        """A truncated pixel buffer fails in the opening stage, before stitching starts."""
        def truncated(path):
            buffer, width, height = decode(path)
            return buffer[:-4], width, height

        monkeypatch.setattr(cli, 'decode', truncated)
        output = tmp_path / 'result.png'
        code = cli.main([images[0], images[1], '4', str(output), '0'])

        assert code != 0
        assert not output.exists()
        out = capsys.readouterr().out
        assert "Failed to open image files!" in out
        assert "Stitching images..." not in out

    def test_margin_too_wide(self, images, tmp_path, capsys, no_solver):
        output = tmp_path / 'result.png'
        code = cli.main([images[0], images[1], '9', str(output), '0'])

        assert code != 0
        assert not output.exists()
        assert "Stitching failed" in capsys.readouterr().out

    def test_save_failure(self, images, tmp_path, capsys):
        output = tmp_path / 'nowhere' / 'result.png'
        code = cli.main([images[0], images[1], '4', str(output), '0'])

        assert code != 0
        assert not output.exists()
        assert "Failed to save result!" in capsys.readouterr().out

    def test_invalid_mode(self, images, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            cli.main([images[0], images[1], '4', str(tmp_path / 'r.png'), '7'])
        assert excinfo.value.code != 0

    def test_defaults(self):
        args = cli.build_parser().parse_args([])
        assert args.image1 == 'goat2.png'
        assert args.image2 == 'cat.png'
        assert args.margin == 100
        assert args.output == 'result.png'
        assert args.mode.value == 0
