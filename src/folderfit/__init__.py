"""
FolderFit - fit files and folders into a fixed amount of space.

Finds the subset of files and folders whose combined size comes as
close as possible to a target capacity without exceeding it, e.g. to
plan what fits on a DVD or a USB stick.
"""

__version__ = "1.0.4"
__author__ = "FolderFit Team"

from folderfit.core.selector import ScalingPolicy, Selector, select
from folderfit.core.sizes import compute_sizes, size_of
from folderfit.core.units import format_size, parse_capacity, parse_size

__all__ = [
    "ScalingPolicy",
    "Selector",
    "select",
    "compute_sizes",
    "size_of",
    "format_size",
    "parse_capacity",
    "parse_size",
    "__version__",
]
