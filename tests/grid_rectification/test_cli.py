"""
Tests for the grid-rectify command-line entry point.
"""

import cv2
import pytest
import yaml

from src.grid_rectification.cli import build_parser, main


@pytest.fixture
def sheet_path(tmp_path, grid_sheet_image):
    path = tmp_path / "sheet.png"
    cv2.imwrite(str(path), grid_sheet_image)
    return path


class TestCli:
    """Tests for main()."""

    def test_parser_requires_grid_dimensions(self):
        """Test rows and cols are mandatory."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--image", "a.png", "--output", "b.png"])

    def test_rectifies_and_writes_output(self, tmp_path, sheet_path):
        """Test a clean sheet is rectified and written with an overlay."""
        output = tmp_path / "out" / "rectified.png"
        overlay = tmp_path / "out" / "overlay.png"

        code = main(
            [
                "--image", str(sheet_path),
                "--rows", "2",
                "--cols", "2",
                "--output", str(output),
                "--overlay", str(overlay),
            ]
        )

        assert code == 0
        rectified = cv2.imread(str(output))
        assert rectified is not None
        assert rectified.shape[0] > 250
        assert cv2.imread(str(overlay)).shape == (400, 400, 3)

    def test_blank_page_rejected(self, tmp_path, blank_image, capsys):
        """Test a rejected page prints the message and writes nothing."""
        image_path = tmp_path / "blank.png"
        cv2.imwrite(str(image_path), blank_image)
        output = tmp_path / "rectified.png"

        code = main(
            ["--image", str(image_path), "--rows", "2", "--cols", "2", "--output", str(output)]
        )

        assert code == 1
        assert "Grid boundary unclear" in capsys.readouterr().out
        assert not output.exists()

    def test_localized_message_from_config(self, tmp_path, blank_image, capsys):
        """Test the message locale is taken from the given config file."""
        image_path = tmp_path / "blank.png"
        cv2.imwrite(str(image_path), blank_image)
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            yaml.safe_dump({"messages": {"locale": "zh-TW"}}), encoding="utf-8"
        )

        code = main(
            [
                "--image", str(image_path),
                "--rows", "2",
                "--cols", "2",
                "--output", str(tmp_path / "rectified.png"),
                "--config", str(config_path),
            ]
        )

        assert code == 1
        assert "網格邊界不清楚" in capsys.readouterr().out

    def test_missing_image(self, tmp_path):
        """Test a missing input file is a usage error."""
        code = main(
            [
                "--image", str(tmp_path / "missing.png"),
                "--rows", "2",
                "--cols", "2",
                "--output", str(tmp_path / "rectified.png"),
            ]
        )

        assert code == 2

    def test_invalid_dimensions(self, sheet_path, tmp_path):
        """Test non-positive grid dimensions are a usage error."""
        code = main(
            [
                "--image", str(sheet_path),
                "--rows", "0",
                "--cols", "2",
                "--output", str(tmp_path / "rectified.png"),
            ]
        )

        assert code == 2
