from typing import TypeAlias

Point: TypeAlias = tuple[float, float]


def local_name(name: str) -> str:
    """Strip the `{namespace}` prefix ElementTree puts on tags and attribute names
    (e.g. `{http://schemas.android.com/apk/res/android}fillColor` -> `fillColor`).
    """
    return name.rsplit("}", 1)[-1]


def local_attributes(node) -> dict[str, str]:
    return {local_name(key): value for key, value in node.attrib.items()}
