"""
FolderFit CLI - pick the files and folders that best fill a given size.

Usage:
    folderfit SOURCES... --size SIZE [--verbose] [--json]

Sources are files and folders, or a single quoted "*" for every entry
of the current directory. SIZE is a byte count or a number with a
B, KB, MB, GB or TB suffix, e.g. "4.7GB".
"""

import logging
import time

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from folderfit import __version__
from folderfit.cli.report import build_report
from folderfit.core.errors import SizeParseError
from folderfit.core.selector import Selector, total_size
from folderfit.core.sizes import compute_sizes, expand_sources
from folderfit.core.units import format_size, parse_capacity

console = Console()
err_console = Console(stderr=True)

SIZE_ENVVAR = "FOLDERFIT_SIZE"


class CapacityType(click.ParamType):
    """Click parameter type for human-entered capacities."""

    name = "size"

    def convert(self, value, param, ctx):
        if isinstance(value, int):
            return value
        try:
            return parse_capacity(value)
        except SizeParseError as exc:
            self.fail(f"Invalid size argument: {exc}", param, ctx)


CAPACITY = CapacityType()


def configure_logging(verbose: bool) -> None:
    """Route log records through rich, DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def print_sources(folder_sizes: dict[str, int], capacity: int) -> None:
    """Print every source with its size, then the totals."""
    table = Table(title="Sources")
    table.add_column("Source", style="green")
    table.add_column("Size", style="magenta", justify="right")
    for name, size in folder_sizes.items():
        table.add_row(escape(name), format_size(size))
    console.print(table)

    console.print(
        f"Total source size: {format_size(total_size(folder_sizes))} "
        f"({len(folder_sizes)} files)"
    )
    console.print(f"Total target size: {format_size(capacity)}")


@click.command()
@click.version_option(version=__version__, prog_name="folderfit")
@click.argument("sources", nargs=-1)
@click.option(
    "--size",
    "-s",
    "capacity",
    type=CAPACITY,
    required=True,
    envvar=SIZE_ENVVAR,
    help='Target size in bytes, or with B/KB/MB/GB/TB suffix (e.g. "4.7GB")',
)
@click.option("--verbose", "-v", is_flag=True, help="Print sizes and progress details")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def cli(sources, capacity, verbose, as_json):
    """
    Select the files and folders that best fill SIZE.

    Computes the size of every source and prints the subset whose total
    comes closest to SIZE without exceeding it.
    """
    configure_logging(verbose)
    initial_time = time.perf_counter()

    if not sources:
        raise click.UsageError("No sources given")

    if not as_json:
        console.print(f"[bold]FolderFit v{__version__}[/]\n")

    if verbose and not as_json:
        console.print("[bold blue]Calculating sizes...[/]")
    folder_sizes = compute_sizes(expand_sources(sources))

    if verbose and not as_json:
        print_sources(folder_sizes, capacity)
        console.print("\n[bold blue]Calculating selection...[/]")

    selected = Selector().select(folder_sizes, capacity)
    elapsed = time.perf_counter() - initial_time

    if as_json:
        report = build_report(folder_sizes, selected, capacity, elapsed)
        click.echo(report.model_dump_json(indent=2))
        return

    if not selected:
        console.print("[red]No selection possible[/]")
        return

    if verbose:
        console.print("[bold]Selected:[/]")
    for name, size in selected.items():
        console.print(f"{escape(name)} - {format_size(size)}", soft_wrap=True)

    selection_size = total_size(selected)
    console.print(
        f"\nSelection size: {format_size(selection_size)} / {format_size(capacity)}"
    )
    console.print(f"Free space: {format_size(capacity - selection_size)}")
    console.print(f"\nFinished in: {elapsed:.3f}s")


if __name__ == "__main__":
    cli()
