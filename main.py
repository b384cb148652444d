import argparse
import logging
import math
import sys
from dataclasses import dataclass, field

from color import ColorTable
from exceptions import InvalidArgumentException, VectopngException
from output import output_path_for, write_all
from renderer import Renderer
from vector import load_vector

VERSION = "1.0"

logger = logging.getLogger(__name__)


@dataclass
class Options:
    """Settings of a single conversion run, as given on the command line."""

    input_path: str
    output_path: str
    color_flags: list[str] = field(default_factory=list)
    colors_file: str | None = None
    width: float | None = None
    height: float | None = None
    scale: float = 1.0
    ios: bool = False
    x: float = 0.0
    y: float = 0.0
    verbose: bool = False


class ArgumentParser(argparse.ArgumentParser):
    """Argument parser raising InvalidArgumentException instead of exiting with status 2."""

    def error(self, message):
        raise InvalidArgumentException(message)


def get_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="vectopng",
        usage="%(prog)s [options] <vector-image-input> [<png-image-output>]",
        description="Render an Android vector drawable to a PNG image.",
        allow_abbrev=False,
    )
    parser.add_argument("input", nargs="?", help="path to the vector drawable XML")
    parser.add_argument("output", nargs="?", help="output PNG path (default is the input path with a .png extension)")
    parser.add_argument(
        "-color",
        "--color",
        dest="color_flags",
        action="append",
        default=[],
        metavar="name=value",
        help="define an (A)RGB value for a color name (name=#(a)rgb|(aa)rrggbb); repeatable",
    )
    parser.add_argument(
        "-colors", "--colors", dest="colors_file", metavar="path", help="Android color resource file to read"
    )
    parser.add_argument("-width", "--width", type=float, metavar="N", help="canvas width in dp")
    parser.add_argument("-height", "--height", type=float, metavar="N", help="canvas height in dp")
    parser.add_argument("-scale", "--scale", type=float, default=1.0, metavar="N", help="scale factor (default 1)")
    parser.add_argument("-ios", "--ios", action="store_true", help="also generate @2x and @3x versions")
    parser.add_argument("-x", type=float, default=0.0, metavar="N", help="horizontal offset")
    parser.add_argument("-y", type=float, default=0.0, metavar="N", help="vertical offset")
    parser.add_argument("-verbose", "--verbose", action="store_true", help="print debug messages")
    parser.add_argument("-version", "--version", action="version", version=VERSION)
    return parser


def get_options(argv: list[str] | None = None) -> Options:
    args = get_parser().parse_args(argv)

    if args.input is None:
        raise InvalidArgumentException("Input vector image parameter is missing")
    for name in ("scale", "width", "height", "x", "y"):
        value = getattr(args, name)
        if value is None:
            continue
        if not math.isfinite(value) or (name in ("scale", "width", "height") and value <= 0):
            raise InvalidArgumentException(f"Invalid {name} {value:g}")

    return Options(
        input_path=args.input,
        output_path=args.output or output_path_for(args.input),
        color_flags=args.color_flags,
        colors_file=args.colors_file,
        width=args.width,
        height=args.height,
        scale=args.scale,
        ios=args.ios,
        x=args.x,
        y=args.y,
        verbose=args.verbose,
    )


def run(options: Options) -> list[str]:
    """Convert `options.input_path`; return the paths of the written PNG files."""
    colors = ColorTable()
    for flag in options.color_flags:
        colors.define_flag(flag)
    if options.colors_file:
        colors.load(options.colors_file)

    if options.x or options.y:
        logger.warning("Offsets -x/-y are not applied")

    document = load_vector(options.input_path)
    canvas = Renderer(colors, width=options.width, height=options.height).render(document)
    return write_all(canvas, options.output_path, options.scale, options.ios)


def main(argv: list[str] | None = None):
    try:
        options = get_options(argv)
    except InvalidArgumentException as e:
        print(f"ERROR: {e}")
        get_parser().print_usage(sys.stdout)
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        for path in run(options):
            print(f'Successfully saved output image to: "{path}"')
    except VectopngException as e:
        print(f"ERROR: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
