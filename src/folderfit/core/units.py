"""
Parsing and formatting of byte sizes.

Sizes use binary multiples: 1 KB is 1024 bytes.
"""

import math

from folderfit.core.errors import InvalidCapacityError, SizeParseError

KB = 1024
MB = 1024 * KB
GB = 1024 * MB
TB = 1024 * GB

# Longest suffix first so "GB" is not mistaken for "B".
SIZE_SUFFIXES = (
    ("TB", TB),
    ("GB", GB),
    ("MB", MB),
    ("KB", KB),
    ("BYTES", 1),
    ("B", 1),
)


def parse_size(text: str) -> int:
    """
    Convert a size expression like ``"4.7GB"`` or ``"1024"`` to bytes.

    Args:
        text: Plain number or number followed by B, KB, MB, GB, TB or
            "bytes". Case-insensitive, a comma may be used as decimal
            separator.

    Returns:
        Size in bytes, truncated to an integer.

    Raises:
        SizeParseError: If the expression is empty, malformed or negative.
    """
    if text is None:
        raise SizeParseError("Size expression is missing")

    expr = str(text).strip().upper()
    multiplier = 1
    for suffix, factor in SIZE_SUFFIXES:
        if expr.endswith(suffix):
            expr = expr[: -len(suffix)].strip()
            multiplier = factor
            break

    number = expr.replace(",", ".")
    try:
        value = float(number)
    except ValueError:
        raise SizeParseError(f"Invalid size expression: {text!r}") from None

    if not math.isfinite(value):
        raise SizeParseError(f"Invalid size expression: {text!r}")
    if value < 0:
        raise SizeParseError(f"Size must not be negative: {text!r}")

    return int(value * multiplier)


def parse_capacity(text: str) -> int:
    """
    Parse a target capacity.

    A capacity of zero is rejected the same way as a malformed one,
    since nothing could ever be selected for it.
    """
    capacity = parse_size(text)
    if capacity == 0:
        raise InvalidCapacityError(f"Capacity must be greater than zero: {text!r}")
    return capacity


def format_size(size: int) -> str:
    """
    Format a byte count for display.

    Args:
        size: Number of bytes.

    Returns:
        Bytes below 1 KB, whole KB below 1 MB, otherwise MB or GB with
        two decimals.
    """
    if size < 0:
        return "-" + format_size(-size)
    if size < KB:
        return f"{size} bytes"
    if size < MB:
        return f"{size // KB} KB"
    if size < GB:
        return f"{size / MB:.2f} MB"
    return f"{size / GB:.2f} GB"
