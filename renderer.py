import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

from PIL import Image, ImageDraw

from color import RGBA, parse_color
from common import Point
from exceptions import InvalidDimensionException
from path import PathCommand, parse_path_commands, path_commands_to_points
from vector import PathElement, VectorDocument, parse_dimension

logger = logging.getLogger(__name__)


class CoordinateSystem(Enum):
    """Orientation of the user space relative to the image, named after the quadrant it occupies."""

    CARTESIAN_I = "y-up"  # origin bottom-left
    CARTESIAN_IV = "y-down"  # origin top-left, as used by Android vector drawables


@dataclass(frozen=True)
class ViewTransform:
    """Axis-aligned scale from viewport units to canvas units."""

    scale_x: float = 1.0
    scale_y: float = 1.0

    @classmethod
    def fit(cls, viewport_size: tuple[float, float], canvas_size: tuple[float, float]) -> "ViewTransform":
        """Map the viewport rectangle (0, 0)-(w, h) onto the whole canvas."""
        return cls(canvas_size[0] / viewport_size[0], canvas_size[1] / viewport_size[1])

    def apply(self, point: Point) -> Point:
        return (point[0] * self.scale_x, point[1] * self.scale_y)

    def mean_scale(self) -> float:
        return (self.scale_x + self.scale_y) / 2


class Canvas(Protocol):
    """Drawing surface the renderer talks to; sizes are in canvas units (dp)."""

    def set_coordinate_system(self, system: CoordinateSystem) -> None: ...

    def set_view(self, view: ViewTransform) -> None: ...

    def set_fill_color(self, color: RGBA) -> None: ...

    def set_stroke_color(self, color: RGBA) -> None: ...

    def set_stroke_width(self, width: float) -> None: ...

    def set_fill_type(self, fill_type: str) -> None: ...

    def draw_path(self, x: float, y: float, path_data: str) -> None: ...

    def write_png(self, png_path: str, scale: float) -> None: ...


@dataclass(frozen=True)
class _Shape:
    commands: list[PathCommand]
    offset: Point
    view: ViewTransform
    fill: RGBA
    stroke: RGBA
    stroke_width: float
    fill_type: str


def winding_mask(subpaths: list[list[Point]], size: tuple[int, int], fill_type: str = "nonZero") -> Image.Image:
    """Fill subpaths into an 8-bit mask, sampling each pixel at its center.

    Every edge adds a signed crossing (+1 going down, -1 going up) to the rows it
    spans; walking a row left to right, the running sum is the winding number.
    Subpaths are closed implicitly.

    Args:
        subpaths (list[list[Point]]): polygons in pixel coordinates
        size (tuple[int, int]): mask width and height
        fill_type (str, optional): "nonZero" or "evenOdd". Defaults to "nonZero".

    Returns:
        Image.Image: "L" mask, 255 inside and 0 outside
    """
    width, height = size
    crossings: list[list[tuple[float, int]]] = [[] for _ in range(height)]
    for points in subpaths:
        for (x0, y0), (x1, y1) in zip(points, points[1:] + points[:1]):
            if y0 == y1:
                continue
            direction = 1 if y1 > y0 else -1
            first_row = max(0, math.ceil(min(y0, y1) - 0.5))
            end_row = min(height, math.ceil(max(y0, y1) - 0.5))
            slope = (x1 - x0) / (y1 - y0)
            for row in range(first_row, end_row):
                crossings[row].append((x0 + (row + 0.5 - y0) * slope, direction))

    buffer = bytearray(width * height)
    for row, row_crossings in enumerate(crossings):
        row_crossings.sort()
        winding = 0
        for (x, direction), (next_x, _) in zip(row_crossings, row_crossings[1:]):
            winding += direction
            inside = winding % 2 == 1 if fill_type == "evenOdd" else winding != 0
            if not inside:
                continue
            start = min(width, max(0, math.ceil(x - 0.5)))
            end = min(width, max(0, math.ceil(next_x - 0.5)))
            if end > start:
                buffer[row * width + start : row * width + end] = b"\xff" * (end - start)
    return Image.frombytes("L", size, bytes(buffer))


class PillowCanvas:
    """Canvas that records drawing operations and rasterizes them with Pillow when written.

    Recording keeps the drawing resolution independent, so the same canvas can be
    written at several scales.
    """

    SUPERSAMPLING = 4

    def __init__(self, width: float, height: float):
        self.width = width
        self.height = height
        self.coordinate_system = CoordinateSystem.CARTESIAN_I
        self.view = ViewTransform()
        self.fill = RGBA.TRANSPARENT
        self.stroke = RGBA.TRANSPARENT
        self.stroke_width = 0.0
        self.fill_type = "nonZero"
        self.shapes: list[_Shape] = []

    def set_coordinate_system(self, system: CoordinateSystem) -> None:
        self.coordinate_system = system

    def set_view(self, view: ViewTransform) -> None:
        self.view = view

    def set_fill_color(self, color: RGBA) -> None:
        self.fill = color

    def set_stroke_color(self, color: RGBA) -> None:
        self.stroke = color

    def set_stroke_width(self, width: float) -> None:
        self.stroke_width = width

    def set_fill_type(self, fill_type: str) -> None:
        self.fill_type = fill_type

    def draw_path(self, x: float, y: float, path_data: str) -> None:
        """Record a path with the current drawing state; path data errors are raised here."""
        commands = parse_path_commands(path_data)
        self.shapes.append(
            _Shape(commands, (x, y), self.view, self.fill, self.stroke, self.stroke_width, self.fill_type)
        )

    def pixel_size(self, scale: float) -> tuple[int, int]:
        return (max(1, round(self.width * scale)), max(1, round(self.height * scale)))

    def _project(self, shape: _Shape, point: Point, factor: float) -> Point:
        x, y = shape.view.apply(point)
        x, y = x + shape.offset[0], y + shape.offset[1]
        if self.coordinate_system is CoordinateSystem.CARTESIAN_I:
            y = self.height - y
        return (x * factor, y * factor)

    def _fill_coverage(self, subpaths: list[list[Point]], size: tuple[int, int], fill_type: str) -> Image.Image:
        supersampled = (size[0] * self.SUPERSAMPLING, size[1] * self.SUPERSAMPLING)
        return winding_mask(subpaths, supersampled, fill_type).resize(size, Image.Resampling.BOX)

    def _stroke_coverage(self, subpaths: list[list[Point]], size: tuple[int, int], width: int) -> Image.Image:
        supersampled = (size[0] * self.SUPERSAMPLING, size[1] * self.SUPERSAMPLING)
        mask = Image.new("L", supersampled, 0)
        draw = ImageDraw.Draw(mask)
        for points in subpaths:
            if len(points) > 2 and points[0] == points[-1]:
                # run past the start so the closing corner gets a join too
                points = points + [points[1]]
            draw.line(points, fill=255, width=width, joint="curve")
        return mask.resize(size, Image.Resampling.BOX)

    def _composite(self, image: Image.Image, coverage: Image.Image, color: RGBA) -> Image.Image:
        layer = Image.new("RGBA", image.size, (color.r, color.g, color.b, 0))
        alpha = coverage.point(lambda value: value * color.a // 255)
        layer.putalpha(alpha)
        return Image.alpha_composite(image, layer)

    def rasterize(self, scale: float) -> Image.Image:
        """Render the recorded shapes to an RGBA image `scale` pixels per canvas unit."""
        size = self.pixel_size(scale)
        factor = scale * self.SUPERSAMPLING
        image = Image.new("RGBA", size, (0, 0, 0, 0))
        resolution = max(16, max(size) // 2)

        for shape in self.shapes:
            subpaths = [
                [self._project(shape, point, factor) for point in points]
                for points in path_commands_to_points(shape.commands, resolution)
            ]
            if not subpaths:
                continue

            if not shape.fill.is_transparent():
                image = self._composite(image, self._fill_coverage(subpaths, size, shape.fill_type), shape.fill)

            if not shape.stroke.is_transparent() and shape.stroke_width > 0:
                # at least one output pixel wide
                stroke_width = max(self.SUPERSAMPLING, round(shape.stroke_width * shape.view.mean_scale() * factor))
                image = self._composite(image, self._stroke_coverage(subpaths, size, stroke_width), shape.stroke)

        return image

    def write_png(self, png_path: str, scale: float) -> None:
        self.rasterize(scale).save(png_path, format="PNG")


class Renderer:
    """Class used to render a vector drawable onto a canvas."""

    def __init__(
        self,
        colors,
        canvas_factory: Callable[[float, float], Canvas] = PillowCanvas,
        width: float | None = None,
        height: float | None = None,
    ):
        """
        Args:
            colors (Mapping[str, RGBA]): named colors paths may refer to
            canvas_factory (Callable, optional): builds the canvas from its width and height. Defaults to PillowCanvas.
            width (float | None, optional): canvas width in dp, overriding the document's. Defaults to None.
            height (float | None, optional): canvas height in dp, overriding the document's. Defaults to None.
        """
        self.colors = colors
        self.canvas_factory = canvas_factory
        self.width = width
        self.height = height

    def canvas_size(self, document: VectorDocument) -> tuple[float, float]:
        width = self.width if self.width is not None else parse_dimension(document.width, "width")
        height = self.height if self.height is not None else parse_dimension(document.height, "height")
        if width <= 0 or height <= 0:
            raise InvalidDimensionException(f"Invalid canvas size {width}x{height}")
        return width, height

    def draw_path(self, canvas: Canvas, path: PathElement):
        canvas.set_fill_color(RGBA.TRANSPARENT)
        canvas.set_stroke_color(RGBA.TRANSPARENT)
        canvas.set_stroke_width(path.stroke_width)
        canvas.set_fill_type(path.fill_type)
        if path.fill_color:
            canvas.set_fill_color(parse_color(path.fill_color, self.colors).with_alpha(path.fill_alpha))
        if path.stroke_color:
            canvas.set_stroke_color(parse_color(path.stroke_color, self.colors).with_alpha(path.stroke_alpha))
        canvas.draw_path(0, 0, path.path_data)

    def render(self, document: VectorDocument) -> Canvas:
        """Render every path of `document` onto a new canvas.

        Raises:
            InvalidDimensionException: if the canvas or viewport size is invalid
            InvalidColorException: if a path uses an unknown or malformed color
            PathParseException: if a path has malformed path data
        """
        width, height = self.canvas_size(document)
        if document.viewport_width <= 0 or document.viewport_height <= 0:
            raise InvalidDimensionException(
                f"Invalid viewport size {document.viewport_width}x{document.viewport_height}"
            )

        canvas = self.canvas_factory(width, height)
        canvas.set_coordinate_system(CoordinateSystem.CARTESIAN_IV)
        canvas.set_view(ViewTransform.fit((document.viewport_width, document.viewport_height), (width, height)))

        for path in document.paths:
            self.draw_path(canvas, path)

        logger.debug("Rendered %d path(s) on a %gx%g canvas", len(document.paths), width, height)
        return canvas
