import logging
import re
import xml.etree.ElementTree
from dataclasses import dataclass

from common import local_attributes, local_name
from exceptions import FileReadException, InvalidDimensionException, XMLParseException

logger = logging.getLogger(__name__)

_DP_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)dp\s*$")

FILL_TYPES = ("nonZero", "evenOdd")


def parse_dimension(value: str, field_name: str) -> float:
    """Parse a dimension given in device-independent pixels (e.g. "24dp").

    Args:
        value (str): dimension string
        field_name (str): attribute the value comes from, used in the error message

    Raises:
        InvalidDimensionException: if the value is not a number followed by "dp"

    Returns:
        float: magnitude of the dimension
    """
    match = _DP_PATTERN.match(value or "")
    if not match:
        raise InvalidDimensionException(f'Invalid {field_name} "{value}"')
    return float(match.group(1))


@dataclass(frozen=True)
class PathElement:
    path_data: str
    fill_color: str | None = None
    stroke_color: str | None = None
    stroke_width: float = 0.0
    fill_alpha: float = 1.0
    stroke_alpha: float = 1.0
    fill_type: str = "nonZero"


@dataclass(frozen=True)
class VectorDocument:
    """A `<vector>` drawable: raw canvas size (dp strings), viewport size and its paths in drawing order."""

    width: str
    height: str
    viewport_width: float
    viewport_height: float
    paths: tuple[PathElement, ...] = ()


def _float_attribute(attributes: dict, name: str, default: float) -> float:
    if name not in attributes:
        return default
    try:
        return float(attributes[name])
    except ValueError as e:
        raise XMLParseException(f'Invalid {name} "{attributes[name]}"') from e


def _parse_path_node(node) -> PathElement:
    attributes = local_attributes(node)
    fill_type = attributes.get("fillType", "nonZero")
    if fill_type not in FILL_TYPES:
        raise XMLParseException(f'Invalid fillType "{fill_type}"')
    return PathElement(
        path_data=attributes.get("pathData", ""),
        fill_color=attributes.get("fillColor") or None,
        stroke_color=attributes.get("strokeColor") or None,
        stroke_width=_float_attribute(attributes, "strokeWidth", 0.0),
        fill_alpha=_float_attribute(attributes, "fillAlpha", 1.0),
        stroke_alpha=_float_attribute(attributes, "strokeAlpha", 1.0),
        fill_type=fill_type,
    )


def document_from_root(root) -> VectorDocument:
    """Build a VectorDocument from the root element of a parsed vector drawable."""
    if local_name(root.tag) != "vector":
        raise XMLParseException("Not a valid Android vector drawable")

    attributes = local_attributes(root)
    paths = []
    for node in root:
        tag = local_name(node.tag)
        if tag == "path":
            paths.append(_parse_path_node(node))
        elif tag in ("group", "clip-path"):
            logger.warning("Ignoring unsupported <%s> element", tag)

    return VectorDocument(
        width=attributes.get("width", ""),
        height=attributes.get("height", ""),
        viewport_width=_float_attribute(attributes, "viewportWidth", 0.0),
        viewport_height=_float_attribute(attributes, "viewportHeight", 0.0),
        paths=tuple(paths),
    )


def parse_vector(text: str) -> VectorDocument:
    try:
        root = xml.etree.ElementTree.fromstring(text)
    except xml.etree.ElementTree.ParseError as e:
        raise XMLParseException(f"Cannot parse vector file ({e})") from e
    return document_from_root(root)


def load_vector(vector_path: str) -> VectorDocument:
    """Read and parse an Android vector drawable file.

    Raises:
        FileReadException: if the file cannot be read
        XMLParseException: if the file is not a well-formed `<vector>` document
    """
    try:
        root = xml.etree.ElementTree.parse(vector_path).getroot()
    except OSError as e:
        raise FileReadException(f'Cannot read vector file "{vector_path}" ({e})') from e
    except xml.etree.ElementTree.ParseError as e:
        raise XMLParseException(f'Cannot parse vector file "{vector_path}" ({e})') from e

    document = document_from_root(root)
    logger.debug('Loaded "%s": %d path(s)', vector_path, len(document.paths))
    return document
