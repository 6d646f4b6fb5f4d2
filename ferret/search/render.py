from typing import Optional

from rich.console import Console
from rich.table import Table

from ferret.search.schema import Query


def format_title(result) -> str:
    """Title with the result date appended when it is known."""
    if result.date is None:
        return result.title
    return f"{result.title} ({result.date:%Y-%m-%d})"


def build_results_table(query: Query) -> Table:
    table = Table(box=None, header_style="bold", pad_edge=False)
    table.add_column("#", justify="right")
    table.add_column("TITLE", overflow="fold")
    for i, result in enumerate(query.results, start=1):
        table.add_row(str(i), format_title(result))
    return table


def print_results(query: Query, console: Optional[Console] = None) -> None:
    """Print the results of a completed query as a table plus elapsed time.

    Goto queries print nothing; the link was handed to the open command instead.
    """
    if query.is_goto or query.goto != 0:
        return

    console = console or Console()
    console.print(build_results_table(query))
    console.print(f"\n{query.elapsed_ms}ms", highlight=False)
