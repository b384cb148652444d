"""Tests for the SVG path data parser."""

import pytest

from exceptions import PathParseException
from path import arc, parse_path_commands, path_commands_to_points


def flatten(data, resolution=32):
    return path_commands_to_points(parse_path_commands(data), resolution)


def test_parse_commands():
    assert parse_path_commands("M1,2 l3-4 h.5 V-1e1 z") == [
        ("M", (1.0, 2.0)),
        ("l", (3.0, -4.0)),
        ("h", (0.5,)),
        ("V", (-10.0,)),
        ("z", ()),
    ]


def test_implicit_lineto_after_moveto():
    assert parse_path_commands("m0 0 10 0 0 10") == [("m", (0.0, 0.0)), ("l", (10.0, 0.0)), ("l", (0.0, 10.0))]


def test_repeated_arguments():
    assert parse_path_commands("M0,0 L1,1 2,2") == [("M", (0.0, 0.0)), ("L", (1.0, 1.0)), ("L", (2.0, 2.0))]


@pytest.mark.parametrize("data", ["M0", "M0,0 L1", "M0,0 X1,1", "L1,1", "1,1", "M0,0 Z1", "M0,0 L1;1"])
def test_invalid_path_data(data):
    with pytest.raises(PathParseException):
        parse_path_commands(data)


def test_square_subpath():
    assert flatten("M4,4 h16 v16 h-16 z") == [[(4, 4), (20, 4), (20, 20), (4, 20), (4, 4)]]


def test_multiple_subpaths():
    subpaths = flatten("M0,0 L1,0 L1,1 Z M5,5 l1,0 l0,1 z")
    assert len(subpaths) == 2
    assert subpaths[1] == [(5, 5), (6, 5), (6, 6), (5, 5)]


def test_drawing_after_close_starts_at_subpath_start():
    subpaths = flatten("M2,2 L4,2 Z L2,4")
    assert subpaths[1] == [(2, 2), (2, 4)]


def test_curves_end_on_their_end_point():
    (points,) = flatten("M0,0 C0,10 10,10 10,0 S20,-10 20,0 Q25,5 30,0 T40,0", resolution=8)
    assert points[0] == (0, 0)
    assert points[8] == pytest.approx((10, 0))
    assert points[16] == pytest.approx((20, 0))
    assert points[-1] == pytest.approx((40, 0))
    assert len(points) == 1 + 4 * 8


def test_smooth_cubic_reflects_control_point():
    (points,) = flatten("M0,0 C0,10 10,10 10,0 S20,-10 20,0", resolution=2)
    # midpoint of the S segment sits below the axis, mirroring the C segment
    assert points[1] == pytest.approx((5, 7.5))
    assert points[3] == pytest.approx((15, -7.5))


def test_arc_half_circle():
    points = arc(5, 5, 0, 0, 1, (0, 0), (10, 0), 4)
    assert points[-1] == (10, 0)
    for x, y in points:
        assert (x - 5) ** 2 + y**2 == pytest.approx(25)
    # sweep flag 1 runs clockwise on a y-down canvas, over the top
    assert points[1][1] < 0


def test_degenerate_arc_is_a_line():
    assert arc(0, 5, 0, 0, 1, (0, 0), (10, 0), 4) == [(10, 0)]


def test_arc_flags_without_separators():
    assert parse_path_commands("M2,12a10 10 0 1020 0a10 10 0 10-20 0z") == [
        ("M", (2.0, 12.0)),
        ("a", (10.0, 10.0, 0.0, 1.0, 0.0, 20.0, 0.0)),
        ("a", (10.0, 10.0, 0.0, 1.0, 0.0, -20.0, 0.0)),
        ("z", ()),
    ]
    assert parse_path_commands("M0,0 A5,5,0,0,1,10,0") == [("M", (0.0, 0.0)), ("A", (5.0, 5.0, 0.0, 0.0, 1.0, 10.0, 0.0))]


def test_arc_flag_must_be_zero_or_one():
    with pytest.raises(PathParseException):
        parse_path_commands("M0,0 a5 5 0 2 0 10 0")
