import math
import re
from enum import Enum
from functools import partial
from typing import TypeAlias

from common import Point
from exceptions import PathParseException

PathCommand: TypeAlias = tuple[str, tuple[float, ...]]

_NUMBER_PATTERN = re.compile(r"[-+]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][-+]?[0-9]+)?")
_FLAG_PATTERN = re.compile(r"[01]")
_SEPARATOR_PATTERN = re.compile(r"[\s,]*")


def reflection(point: Point, current_point: Point) -> Point:
    return (2 * current_point[0] - point[0], 2 * current_point[1] - point[1])


def interpolate(interpolation_callable, resolution: int) -> list[Point]:
    """Sample `interpolation_callable` at `resolution` evenly spaced t in (0, 1]; t = 0 is the current point."""
    return [interpolation_callable(i / resolution) for i in range(1, resolution + 1)]


def cubic_bezier_interpolation(
    point_0: Point, control_point_0: Point, control_point_1: Point, point_1: Point, t: float
) -> Point:
    u = 1 - t
    return tuple(
        u**3 * point_0[i] + 3 * u**2 * t * control_point_0[i] + 3 * u * t**2 * control_point_1[i] + t**3 * point_1[i]
        for i in (0, 1)
    )


def quadratic_bezier_interpolation(point_0: Point, control_point: Point, point_1: Point, t: float) -> Point:
    u = 1 - t
    return tuple(u**2 * point_0[i] + 2 * u * t * control_point[i] + t**2 * point_1[i] for i in (0, 1))


def cubic_bezier(point_0: Point, control_point_0: Point, control_point_1: Point, point_1: Point, n: int):
    return interpolate(partial(cubic_bezier_interpolation, point_0, control_point_0, control_point_1, point_1), n)


def quadratic_bezier(point_0: Point, control_point: Point, point_1: Point, n: int):
    return interpolate(partial(quadratic_bezier_interpolation, point_0, control_point, point_1), n)


def _angle(u: Point, v: Point) -> float:
    cosine = (u[0] * v[0] + u[1] * v[1]) / (math.hypot(*u) * math.hypot(*v))
    # fix for precision
    cosine = min(1.0, max(-1.0, cosine))
    sign = 1 if u[0] * v[1] - u[1] * v[0] >= 0 else -1
    return sign * math.acos(cosine)


def arc(rx, ry, x_axis_rotation, large_arc_flag, sweep_flag, start_point: Point, end_point: Point, n) -> list[Point]:
    """Flatten an elliptical arc, converting it to center parameterization first.

    Returns:
        list[Point]: points after `start_point`, ending at `end_point`
    """
    rx, ry = abs(rx), abs(ry)
    if rx == 0 or ry == 0 or start_point == end_point:
        return [end_point]

    phi = math.radians(math.fmod(x_axis_rotation, 360.0))
    cos_phi, sin_phi = math.cos(phi), math.sin(phi)

    dx = (start_point[0] - end_point[0]) / 2
    dy = (start_point[1] - end_point[1]) / 2
    x1 = cos_phi * dx + sin_phi * dy
    y1 = -sin_phi * dx + cos_phi * dy

    # scale up radii that are too small to reach the end point
    radii_check = x1**2 / rx**2 + y1**2 / ry**2
    if radii_check > 1:
        rx *= math.sqrt(radii_check)
        ry *= math.sqrt(radii_check)

    radicand = (rx**2 * ry**2 - rx**2 * y1**2 - ry**2 * x1**2) / (rx**2 * y1**2 + ry**2 * x1**2)
    coefficient = math.sqrt(max(0.0, radicand))
    if large_arc_flag == sweep_flag:
        coefficient = -coefficient
    cx1 = coefficient * rx * y1 / ry
    cy1 = -coefficient * ry * x1 / rx

    center = (
        cos_phi * cx1 - sin_phi * cy1 + (start_point[0] + end_point[0]) / 2,
        sin_phi * cx1 + cos_phi * cy1 + (start_point[1] + end_point[1]) / 2,
    )

    start_vector = ((x1 - cx1) / rx, (y1 - cy1) / ry)
    end_vector = ((-x1 - cx1) / rx, (-y1 - cy1) / ry)
    theta_1 = _angle((1.0, 0.0), start_vector)
    delta_theta = _angle(start_vector, end_vector)
    if not sweep_flag and delta_theta > 0:
        delta_theta -= 2 * math.pi
    elif sweep_flag and delta_theta < 0:
        delta_theta += 2 * math.pi

    def point_at(theta):
        return (
            cos_phi * rx * math.cos(theta) - sin_phi * ry * math.sin(theta) + center[0],
            sin_phi * rx * math.cos(theta) + cos_phi * ry * math.sin(theta) + center[1],
        )

    points = [point_at(theta_1 + i * delta_theta / n) for i in range(1, n)]
    points.append(end_point)
    return points


class PathCommandTypes(Enum):
    C = 6
    S = 4
    L = 2
    H = 1
    V = 1
    Z = 0
    M = 2
    Q = 4
    T = 2
    A = 7

    @staticmethod
    def get_length(command: str) -> int:
        command_upper = command.upper()
        if command_upper not in PathCommandTypes.__members__:
            raise PathParseException(f'Invalid path command "{command}"')
        return PathCommandTypes.__members__[command_upper].value


def parse_path_commands(path_data: str) -> list[PathCommand]:
    """Split SVG path data into single commands with their arguments.

    Repeated argument groups become repeated commands, except after a moveto,
    where they are implicit linetos (`M0 0 10 0` is `M0 0 L10 0`).

    Raises:
        PathParseException: on unknown commands, stray characters or wrong argument counts
    """
    commands: list[PathCommand] = []
    current_command = None
    current_values: list[float] = []

    def add_command(command, values):
        count = PathCommandTypes.get_length(command)
        if count == 0:
            if values:
                raise PathParseException(f'Unexpected arguments for path command "{command}": {values}')
            commands.append((command, ()))
            return
        if not values or len(values) % count != 0:
            raise PathParseException(f'Wrong number of arguments ({len(values)}) for path command "{command}"')
        for i in range(0, len(values), count):
            if i > 0 and command in "Mm":
                command = "L" if command == "M" else "l"
            commands.append((command, tuple(values[i : i + count])))

    position = 0
    while True:
        position = _SEPARATOR_PATTERN.match(path_data, position).end()
        if position >= len(path_data):
            break
        letter = path_data[position]
        if letter.isalpha():
            if current_command is not None:
                add_command(current_command, current_values)
            elif letter not in "Mm":
                raise PathParseException(f'Path data must start with a moveto, not "{letter}"')
            current_command = letter
            current_values = []
            position += 1
            continue

        if current_command is None:
            raise PathParseException("Path data must start with a moveto")
        # arc flags are single digits and may be written without separators ("a10 10 0 1020 0")
        is_flag = current_command in "Aa" and len(current_values) % 7 in (3, 4)
        match = (_FLAG_PATTERN if is_flag else _NUMBER_PATTERN).match(path_data, position)
        if not match:
            raise PathParseException(f'Unexpected character "{letter}" in path data')
        current_values.append(float(match.group()))
        position = match.end()

    if current_command is not None:
        add_command(current_command, current_values)

    return commands


def relative_to_absolute(command: PathCommand, current_point: Point) -> PathCommand:
    name, values = command
    if name.isupper():
        return command

    match name.upper():
        case "H":
            new_values = (current_point[0] + values[0],)
        case "V":
            new_values = (current_point[1] + values[0],)
        case "A":
            new_values = (*values[:5], current_point[0] + values[5], current_point[1] + values[6])
        case _:
            new_values = tuple(current_point[i % 2] + value for i, value in enumerate(values))

    return (name.upper(), new_values)


def path_commands_to_points(commands: list[PathCommand], resolution: int) -> list[list[Point]]:
    """Flatten commands into subpaths of absolute points, sampling each curve with `resolution` points."""
    subpaths: list[list[Point]] = []
    points: list[Point] = []
    current_point: Point = (0.0, 0.0)
    start_point: Point = (0.0, 0.0)
    last_control_point = None  # for S/T commands
    previous = None

    def end_subpath():
        if len(points) >= 2:
            subpaths.append(list(points))
        points.clear()

    for command in commands:
        name, values = relative_to_absolute(command, current_point)
        pairs = list(zip(values[0::2], values[1::2]))

        if name != "M" and not points:
            # drawing after a closepath starts at the closed subpath's first point
            points.append(current_point)

        match name:
            case "M":
                end_subpath()
                current_point = start_point = pairs[0]
                points.append(current_point)
            case "Z":
                points.append(start_point)
                current_point = start_point
                end_subpath()
            case "L":
                points.append(pairs[0])
            case "H":
                points.append((values[0], current_point[1]))
            case "V":
                points.append((current_point[0], values[0]))
            case "C":
                points.extend(cubic_bezier(current_point, *pairs, resolution))
            case "Q":
                points.extend(quadratic_bezier(current_point, *pairs, resolution))
            case "S" | "T":
                control_point = current_point
                smooth_predecessors = {"C", "S"} if name == "S" else {"Q", "T"}
                if previous in smooth_predecessors and last_control_point is not None:
                    control_point = reflection(last_control_point, current_point)
                if name == "S":
                    points.extend(cubic_bezier(current_point, control_point, *pairs, resolution))
                else:
                    points.extend(quadratic_bezier(current_point, control_point, *pairs, resolution))
            case "A":
                points.extend(arc(*values[:5], current_point, (values[5], values[6]), resolution))

        match name:
            case "C" | "S":
                last_control_point = pairs[-2]
            case "Q":
                last_control_point = pairs[0]
            case "T":
                last_control_point = control_point
            case _:
                last_control_point = None

        if name != "Z":
            current_point = points[-1]
        previous = name

    end_subpath()
    return subpaths

