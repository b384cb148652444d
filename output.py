import logging
import os

from exceptions import EncodeException

logger = logging.getLogger(__name__)

IOS_DENSITIES = (("@2x", 2), ("@3x", 3))


def output_path_for(input_path: str) -> str:
    """Return the default PNG path for an input file: same name, `.png` extension."""
    return density_path(input_path, "")


def density_path(png_path: str, suffix: str) -> str:
    """Insert a density suffix (e.g. "@2x") before the extension: `icon.png` -> `icon@2x.png`."""
    return os.path.splitext(png_path)[0] + suffix + ".png"


def write(canvas, png_path: str, scale: float) -> None:
    """Encode `canvas` as a PNG file at `scale` pixels per dp.

    Raises:
        EncodeException: if the image cannot be encoded or written
    """
    try:
        canvas.write_png(png_path, scale)
    except (OSError, ValueError) as e:
        raise EncodeException(f'Cannot save PNG data to "{png_path}" ({e})') from e
    logger.debug('Wrote "%s" at scale %g', png_path, scale)


def write_all(canvas, png_path: str, scale: float = 1.0, ios: bool = False) -> list[str]:
    """Write the base image and, in iOS mode, its @2x and @3x versions.

    Files written before a failure are left in place.

    Returns:
        list[str]: paths of the written files, base density first
    """
    write(canvas, png_path, scale)
    written = [png_path]
    if ios:
        for suffix, factor in IOS_DENSITIES:
            path = density_path(png_path, suffix)
            write(canvas, path, factor * scale)
            written.append(path)
    return written
