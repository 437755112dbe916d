"""
Error taxonomy for the grid pipeline

Every error is terminal for the operation that raised it. Callers surface a
message and let the user start again with a new upload.
"""


class GridMakerError(Exception):
    """Base class for all pipeline errors"""


class UnsupportedFormatError(GridMakerError):
    """Input is not an image, or is an image format we do not accept"""


class DecodeError(GridMakerError):
    """Source bytes could not be decoded into pixels"""


class ResampleError(GridMakerError):
    """Resampling to the target geometry failed"""


class OutOfBoundsError(GridMakerError):
    """A tile rectangle falls outside the raster it is cut from"""


class EmptyInputError(GridMakerError):
    """An operation that needs tiles was given none"""


class ArchiveBuildError(GridMakerError):
    """The archive could not be assembled"""
