"""
Error taxonomy for the catalogue.

Every error here is recoverable: the operation that raised it leaves the
working set and the navigation cursor exactly as they were.
"""


class CatalogueError(Exception):
    """Base class for all catalogue errors."""


class ValidationError(CatalogueError):
    """A required field (the name) is empty."""


class StorageCorruptError(CatalogueError):
    """The stored overlay record could not be parsed."""


class SizeLimitError(CatalogueError):
    """An asset is larger than the accepted maximum."""


class AssetReadError(CatalogueError):
    """An asset could not be read from disk."""


class ImportFormatError(CatalogueError):
    """An imported payload is not a sequence of nodes."""


class NavigationError(CatalogueError):
    """A cursor operation was requested from a state that does not allow it."""
