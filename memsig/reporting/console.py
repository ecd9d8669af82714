"""Terminal summaries rendered with rich."""

from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table

from ..core.comparison import ComparisonMatrix
from ..core.product import Product
from ..core.signature import Signature
from ..grouping.base import GroupAssignment


def signature_table(product: Product, signatures: Sequence[Signature]) -> Table:
    table = Table(title=f"Version signatures: {product.name}", show_header=True,
                  header_style="bold magenta")
    table.add_column("Version", style="cyan", no_wrap=True)
    table.add_column("Pages", justify="right")
    table.add_column("Signature", justify="right", style="green")
    table.add_column("All 0/1", justify="right")
    table.add_column("Int. dup", justify="right")
    table.add_column("Other dup", justify="right")

    for sig in signatures:
        size = sig.number_of_pages()
        style = "red" if size == 0 else "green"
        table.add_row(
            sig.label(),
            str(sig.primary_version.number_of_pages(sig.page_size)),
            f"[{style}]{size}[/{style}]",
            str(sig.all01_count),
            str(sig.internal_duplicate_count),
            str(sig.other_version_duplicate_count),
        )
    return table


def comparison_table(product: Product, matrix: ComparisonMatrix, page_size: int) -> Table:
    """Matching page counts between every pair of versions."""
    table = Table(title=f"Matching pages: {product.name}", show_header=True,
                  header_style="bold cyan")
    table.add_column("Version", style="cyan", no_wrap=True)
    table.add_column("#pages", justify="right")
    for v in product.versions:
        table.add_column(str(v), justify="right")

    for v in product.versions:
        cells = []
        for u in product.versions:
            result = matrix[v][u]
            cells.append("-" if result is None else str(result.matches))
        table.add_row(str(v), str(v.number_of_pages(page_size)), *cells)
    return table


def group_table(product: Product, assignments: Sequence[GroupAssignment]) -> Table:
    table = Table(title=f"Version groups: {product.name}", show_header=True,
                  header_style="bold magenta")
    table.add_column("#", justify="right")
    table.add_column("Versions", style="cyan")
    table.add_column("Signature", justify="right", style="green")
    table.add_column("Avg dist", justify="right")
    table.add_column("Skipped", justify="right")

    for number, assignment in enumerate(assignments, start=1):
        group = assignment.group
        table.add_row(
            str(number),
            ", ".join(group.version_strings()),
            str(assignment.signature_size),
            f"{group.avg_version_distance():.2f}",
            str(group.skipped_version_count()),
        )
    return table


def print_signatures(product: Product, signatures: Sequence[Signature],
                     console: Optional[Console] = None) -> None:
    console = console or Console()
    console.print(signature_table(product, signatures))
    empty = [s.label() for s in signatures if s.number_of_pages() == 0]
    if empty:
        console.print(f"[yellow]No unique pages for: {', '.join(empty)}[/yellow]")


def print_groups(product: Product, assignments: Sequence[GroupAssignment],
                 average: float, console: Optional[Console] = None) -> None:
    console = console or Console()
    console.print(group_table(product, assignments))
    console.print(f"Average signature size: [bold]{average:.2f}[/bold] pages "
                  f"over {len(assignments)} groups")
