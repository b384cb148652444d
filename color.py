import logging
import re
import xml.etree.ElementTree
from collections.abc import Iterable, Iterator, Mapping
from typing import Union

from common import local_name
from exceptions import FileReadException, InvalidColorDefinitionException, InvalidColorException, XMLParseException

logger = logging.getLogger(__name__)

RESOURCE_PREFIX = "@color/"

_HEX_PATTERN = re.compile(r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


class RGBA:
    """Straight-alpha color with four 8-bit channels."""

    __slots__ = ("values",)

    def __init__(self, r: int, g: int, b: int, a: int = 255):
        """Initialize a RGBA object from r, g, b, a values.

        Args:
            r (int): red, from 0 to 255
            g (int): green, from 0 to 255
            b (int): blue, from 0 to 255
            a (int, optional): alpha, from 0 to 255. Defaults to 255 (opaque).

        Raises:
            ValueError: if any of the values is not in [0, 256)
        """
        if not all(0 <= x <= 255 for x in (r, g, b, a)):
            raise ValueError(f"Invalid RGBA color {r} {g} {b} {a}")
        self.values = (r, g, b, a)

    @property
    def r(self) -> int:
        return self.values[0]

    @property
    def g(self) -> int:
        return self.values[1]

    @property
    def b(self) -> int:
        return self.values[2]

    @property
    def a(self) -> int:
        return self.values[3]

    def with_alpha(self, factor: float) -> "RGBA":
        """Return a copy of the color with its alpha channel multiplied by `factor` (clamped to [0, 1])."""
        factor = min(1.0, max(0.0, factor))
        return RGBA(self.r, self.g, self.b, round(self.a * factor))

    def is_transparent(self) -> bool:
        return self.a == 0

    @staticmethod
    def from_hex(hex: str) -> Union["RGBA", None]:
        """Return a RGBA object from an Android hex color (`#RGB`, `#ARGB`, `#RRGGBB` or `#AARRGGBB`).

        Note that, unlike CSS, the alpha channel comes first.

        Returns:
            RGBA | None: a RGBA object if the hex code is valid, or None otherwise
        """
        match = _HEX_PATTERN.match(hex)
        if not match:
            return None

        digits = match.group(1)
        if len(digits) in (3, 4):
            digits = "".join(digit * 2 for digit in digits)
        if len(digits) == 6:
            digits = "ff" + digits

        a, r, g, b = (int(digits[i : i + 2], 16) for i in range(0, 8, 2))
        return RGBA(r, g, b, a)

    def __eq__(self, other) -> bool:
        if not isinstance(other, RGBA):
            return NotImplemented
        return self.values == other.values

    def __hash__(self) -> int:
        return hash(self.values)

    def __iter__(self):
        return iter(self.values)

    def __repr__(self) -> str:
        return f"RGBA{self.values}"


RGBA.TRANSPARENT = RGBA(0, 0, 0, 0)


def parse_color(text: str, table: Mapping[str, RGBA] | None = None) -> RGBA:
    """Return the color named by `text`, either a key of `table` or a hex literal.

    Args:
        text (str): color token, e.g. "#FF0000", "@color/accent" or "accent"
        table (Mapping[str, RGBA] | None, optional): known named colors. Defaults to None.

    Raises:
        InvalidColorException: if `text` is neither a known name nor a valid hex color

    Returns:
        RGBA: the parsed color
    """
    if table is not None and text in table:
        return table[text]

    color = RGBA.from_hex(text)
    if color is None:
        raise InvalidColorException(f'Invalid color "{text}"')
    return color


def load_color_definitions(colors_path: str) -> list[tuple[str, str]]:
    """Read the `<color name="...">value</color>` entries of an Android color resource file, in file order."""
    try:
        root = xml.etree.ElementTree.parse(colors_path).getroot()
    except OSError as e:
        raise FileReadException(f'Cannot read colors file "{colors_path}" ({e})') from e
    except xml.etree.ElementTree.ParseError as e:
        raise XMLParseException(f'Cannot parse colors file "{colors_path}" ({e})') from e

    definitions = []
    for node in root:
        if local_name(node.tag) != "color":
            continue
        name = node.attrib.get("name", "").strip()
        if not name:
            raise XMLParseException(f'Cannot parse colors file "{colors_path}" (<color> without a name)')
        definitions.append((name, (node.text or "").strip()))
    return definitions


class ColorTable(Mapping[str, RGBA]):
    """Named colors available to a conversion run.

    Names given on the command line are stored as-is; names read from a color
    resource file are stored with the `@color/` prefix, which is how vector
    drawables refer to them.
    """

    def __init__(self):
        self._colors: dict[str, RGBA] = {}

    def __getitem__(self, name: str) -> RGBA:
        return self._colors[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._colors)

    def __len__(self) -> int:
        return len(self._colors)

    def define(self, name: str, text: str) -> RGBA:
        """Parse `text` (which may refer to an already defined name) and store it as `name`."""
        color = parse_color(text, self)
        self._colors[name] = color
        return color

    def define_flag(self, flag: str) -> RGBA:
        """Define a color from a `name=value` command line flag."""
        name, sep, value = flag.partition("=")
        name = name.strip()
        if not sep or not name:
            raise InvalidColorDefinitionException(f'Invalid color definition "{flag}"')
        try:
            return self.define(name, value.strip())
        except InvalidColorException as e:
            raise InvalidColorDefinitionException(f'Invalid color definition "{flag}"') from e

    def resolve(self, definitions: Iterable[tuple[str, str]]) -> int:
        """Add resource color definitions whose values may refer to each other in any order.

        Each pass tries every pending definition once; the ones that cannot be parsed yet
        (because they refer to a name defined later) are retried on the next pass.
        Resolution stops once nothing is pending or a pass resolves nothing, so reference
        cycles and unknown names are left undefined and only fail when a path uses them.

        Args:
            definitions (Iterable[tuple[str, str]]): (name, raw value) pairs, in file order

        Returns:
            int: number of passes run
        """
        pending = list(definitions)
        passes = 0
        while pending:
            passes += 1
            remaining = []
            for name, text in pending:
                key = RESOURCE_PREFIX + name
                if key in self._colors:
                    # already defined on the command line
                    continue
                try:
                    self._colors[key] = parse_color(text, self)
                except InvalidColorException:
                    remaining.append((name, text))
            logger.debug("Color pass %d: %d resolved, %d pending", passes, len(pending) - len(remaining), len(remaining))
            if len(remaining) == len(pending):
                logger.warning("Unresolved colors: %s", ", ".join(name for name, _ in remaining))
                break
            pending = remaining
        return passes

    def load(self, colors_path: str) -> int:
        """Load and resolve an Android color resource file; return the number of resolution passes."""
        definitions = load_color_definitions(colors_path)
        logger.debug('Read %d color definitions from "%s"', len(definitions), colors_path)
        return self.resolve(definitions)
