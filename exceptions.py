class VectopngException(Exception):
    """Base class for every error that aborts a conversion."""


class InvalidArgumentException(VectopngException):
    pass


class InvalidColorDefinitionException(VectopngException):
    pass


class FileReadException(VectopngException):
    pass


class XMLParseException(VectopngException):
    pass


class InvalidDimensionException(VectopngException):
    pass


class InvalidColorException(VectopngException):
    pass


class PathParseException(VectopngException):
    pass


class EncodeException(VectopngException):
    pass
