"""
Structured selection report for machine-readable output.
"""

from typing import Mapping

from pydantic import BaseModel

from folderfit.core.selector import total_size
from folderfit.core.units import format_size


class EntryModel(BaseModel):
    """A file or folder with its size."""

    name: str
    size_bytes: int
    size: str


class SelectionReport(BaseModel):
    """Result of one selection run."""

    capacity_bytes: int
    source_count: int
    source_size_bytes: int
    selected: list[EntryModel]
    selection_size_bytes: int
    free_space_bytes: int
    feasible: bool
    elapsed_seconds: float


def _entries(items: Mapping[str, int]) -> list[EntryModel]:
    return [
        EntryModel(name=name, size_bytes=size, size=format_size(size))
        for name, size in items.items()
    ]


def build_report(
    sources: Mapping[str, int],
    selected: Mapping[str, int],
    capacity: int,
    elapsed_seconds: float,
) -> SelectionReport:
    """
    Build the report for a finished selection.

    Args:
        sources: All measured sources.
        selected: The selection returned by the selector.
        capacity: Target capacity in bytes.
        elapsed_seconds: Wall time of the whole run.

    Returns:
        SelectionReport ready for serialization.
    """
    selection_size = total_size(selected)
    return SelectionReport(
        capacity_bytes=capacity,
        source_count=len(sources),
        source_size_bytes=total_size(sources),
        selected=_entries(selected),
        selection_size_bytes=selection_size,
        free_space_bytes=capacity - selection_size,
        feasible=bool(selected),
        elapsed_seconds=elapsed_seconds,
    )
