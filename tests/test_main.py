"""Tests for the command line interface."""

import os

import pytest
from PIL import Image

from main import VERSION, get_options, main
from tests.conftest import NAMED_COLORS_XML


def run_main(capsys, *argv):
    """Run the CLI; return (exit status, stdout)."""
    try:
        main(list(argv))
        status = 0
    except SystemExit as e:
        status = e.code
    return status, capsys.readouterr().out


def test_version(capsys):
    status, out = run_main(capsys, "-version")
    assert status == 0
    assert out.strip() == VERSION


def test_missing_input(capsys):
    status, out = run_main(capsys)
    assert status == 1
    assert out.startswith("ERROR: Input vector image parameter is missing")
    assert "usage: vectopng" in out


@pytest.mark.parametrize("argv", [["-scale", "big", "a.xml"], ["-bogus", "a.xml"], ["a.xml", "b.png", "c.png"]])
def test_bad_arguments(capsys, argv):
    status, out = run_main(capsys, *argv)
    assert status == 1
    assert out.startswith("ERROR: ")


def test_options_defaults():
    options = get_options(["icons/home.xml"])
    assert options.input_path == "icons/home.xml"
    assert options.output_path == "icons/home.png"
    assert options.scale == 1.0
    assert not options.ios
    assert options.color_flags == []


def test_options_all_flags():
    options = get_options(
        ["-color", "a=#FFF", "--color", "b=a", "-colors", "c.xml", "-width", "48", "-height", "32", "-scale", "2",
         "-ios", "-x", "3", "-y", "-4", "in.xml", "out.png"]
    )
    assert options.color_flags == ["a=#FFF", "b=a"]
    assert options.colors_file == "c.xml"
    assert (options.width, options.height, options.scale) == (48.0, 32.0, 2.0)
    assert options.ios
    assert (options.x, options.y) == (3.0, -4.0)
    assert options.output_path == "out.png"


def test_convert_derives_output_name(capsys, red_square_path):
    status, out = run_main(capsys, red_square_path)
    png_path = red_square_path[: -len(".xml")] + ".png"
    assert status == 0
    assert png_path in out
    with Image.open(png_path) as image:
        assert image.size == (24, 24)
        assert image.convert("RGBA").getpixel((12, 12)) == (255, 0, 0, 255)


def test_ios_writes_three_densities(capsys, tmp_path, red_square_path):
    output = str(tmp_path / "out" / "icon.png")
    os.makedirs(os.path.dirname(output))
    status, _ = run_main(capsys, "-ios", "-scale", "2", red_square_path, output)
    assert status == 0
    assert sorted(os.listdir(tmp_path / "out")) == ["icon.png", "icon@2x.png", "icon@3x.png"]
    for name, size in [("icon.png", 48), ("icon@2x.png", 96), ("icon@3x.png", 144)]:
        with Image.open(tmp_path / "out" / name) as image:
            assert image.size == (size, size)


def test_colors_from_flags_and_file(capsys, tmp_path, write_file, colors_path):
    vector_path = write_file("named.xml", NAMED_COLORS_XML)
    output = str(tmp_path / "named.png")
    status, out = run_main(capsys, "-colors", colors_path, "-color", "brand=#80FF00FF", vector_path, output)
    assert status == 0, out
    with Image.open(output) as image:
        image = image.convert("RGBA")
        assert image.size == (48, 24)
        assert image.getpixel((6, 6)) == (0, 0, 255, 255)
        # 4px stroke along y=12 in the right half, half transparent
        assert image.getpixel((36, 12)) == (255, 0, 255, 128)


@pytest.mark.parametrize(
    "argv", [["-scale", "inf"], ["-scale", "nan"], ["-scale", "0"], ["-width", "inf"], ["-height", "-2"], ["-x", "nan"]]
)
def test_non_finite_numbers_are_argument_errors(capsys, red_square_path, argv):
    status, out = run_main(capsys, *argv, red_square_path)
    assert status == 1
    assert out.startswith("ERROR: Invalid ")
    assert not os.path.exists(red_square_path[: -len(".xml")] + ".png")
