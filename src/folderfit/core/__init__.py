"""Core modules for FolderFit."""

from folderfit.core.selector import Selector
from folderfit.core.sizes import size_of
from folderfit.core.units import format_size, parse_size

__all__ = ["Selector", "size_of", "format_size", "parse_size"]
