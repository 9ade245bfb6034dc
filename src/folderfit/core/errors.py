"""
Exceptions raised by FolderFit.

Inaccessible files are not errors (they count as zero bytes) and an
empty selection is a result, not a failure.
"""


class FolderFitError(Exception):
    """Base class for all FolderFit errors."""


class SizeParseError(FolderFitError, ValueError):
    """Raised when a human-entered size expression cannot be parsed."""


class InvalidCapacityError(SizeParseError):
    """Raised when a parsed capacity is not usable as a selection target."""


class InvalidInputError(FolderFitError, ValueError):
    """Raised when the selector receives a negative capacity or item size."""
