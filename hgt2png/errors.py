class ConversionError(Exception):
    '''
    Base class of everything that aborts a conversion. The message names the
    failing condition and its concrete values.
    '''


class OpenError(ConversionError):
    def __init__(self, path: str, reason: str = ''):
        self.path = path
        self.reason = reason
        message = F'Could not open file "{path}"'
        if reason:
            message += F' ({reason})'
        super().__init__(message)


class SizeMismatchError(ConversionError):
    def __init__(self, actual: int, expected: int):
        self.actual = actual
        self.expected = expected
        super().__init__(F'Actual size {actual}, expected {expected}')


class ShortReadError(ConversionError):
    def __init__(self, actual: int, expected: int):
        self.actual = actual
        self.expected = expected
        super().__init__(F'Read {actual} bytes, expected {expected}')


class TileWriteError(ConversionError):
    pass


class TileOpenError(OpenError, TileWriteError):
    pass


class ShortWriteError(TileWriteError):
    def __init__(self, path: str, actual: int, expected: int):
        self.path = path
        self.actual = actual
        self.expected = expected
        super().__init__(F'Wrote {actual} bytes to "{path}", expected {expected}')


class InvalidHemisphereError(ConversionError):
    def __init__(self, character: str, file_name: str, message: str = None):
        self.character = character
        self.file_name = file_name
        super().__init__(message or F'Invalid hemisphere "{character}" in "{file_name}"')


class InvalidCellNameError(InvalidHemisphereError):
    '''
    The file name does not have the shape of a cell name at all.
    ``character`` is the first hemisphere position holding an illegal
    letter, or empty if both letters are legal.
    '''
    def __init__(self, file_name: str, character: str = ''):
        super().__init__(character, file_name, F'"{file_name}" does not name a 1 degree cell (expected e.g. N37W122.hgt)')


class InvalidTileDivisionError(ConversionError):
    def __init__(self, dimension_name: str, dimension: int, divisor: int):
        self.dimension_name = dimension_name
        self.dimension = dimension
        self.divisor = divisor
        if divisor < 1:
            message = F'The number of tiles along the {dimension_name} must be at least 1, got {divisor}'
        else:
            message = F'One less than the {dimension_name} of {dimension} is not evenly divisible by {divisor}'
        super().__init__(message)


class DegenerateRangeError(ConversionError):
    def __init__(self, minimum: int, maximum: int):
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(F'Elevation range [{minimum}, {maximum}] is flat, cannot rescale')


class RasterStageError(ConversionError):
    def __init__(self, operation: str, actual, expected):
        self.actual = actual
        self.expected = expected
        super().__init__(F'{operation} needs a raster in stage {expected.name}, got {actual.name}')


class InvalidDimensionsError(ConversionError):
    def __init__(self, width: int, height: int, minimum: int):
        self.width = width
        self.height = height
        super().__init__(F'A raster needs at least {minimum} x {minimum} samples, got {width} x {height}')
