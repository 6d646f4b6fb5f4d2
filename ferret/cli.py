#!/usr/bin/env python3
"""
Ferret CLI

Typer/Rich-powered command-line interface that sends a search to one of the
registered providers, prints the results as a table or opens one of them.
"""

from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ferret.providers import build_registry
from ferret.search.opener import CommandOpener
from ferret.search.orchestrator import SearchOrchestrator
from ferret.search.parsing import parse_goto, parse_page, parse_timeout
from ferret.search.render import print_results
from ferret.search.schema import Query
from ferret.shared.errors import FerretError
from ferret.shared.logger import SearchLogger
from ferret.shared.settings import get_settings


console = Console()
err_console = Console(stderr=True)

app = typer.Typer(help="Ferret search CLI", no_args_is_help=True)


def _build_orchestrator(verbose: bool) -> SearchOrchestrator:
    settings = get_settings()
    logger = SearchLogger("cli")
    if verbose:
        logger.set_level("INFO")
    return SearchOrchestrator(
        build_registry(settings),
        opener=CommandOpener(settings.goto_cmd),
        logger=logger,
    )


def execute_search(
    provider: str,
    keyword: str,
    page: Optional[str],
    goto: Optional[str],
    timeout: Optional[str],
    verbose: bool,
) -> int:
    """Run one query and report it on the console. Returns the exit code."""
    orchestrator = _build_orchestrator(verbose)
    query = Query(
        provider=provider,
        keyword=keyword,
        page=parse_page(page),
        goto=parse_goto(goto),
        timeout=parse_timeout(timeout),
    )

    if verbose:
        err_console.print(
            f"[bold cyan][ferret][/bold cyan] provider={query.provider} "
            f"page={query.page} timeout={query.timeout.total_seconds()}s"
        )

    try:
        orchestrator.do(query)
    except FerretError as exc:
        err_console.print(f"[bold red][ferret][/bold red] {escape(str(exc))}", highlight=False)
        return 1

    print_results(query, console=console)
    return 0


@app.command("search")
def search_command(
    provider: str = typer.Argument(..., help="Name of the provider to search (see `ferret providers`)."),
    keyword: str = typer.Argument(..., help="Search keyword."),
    page: Optional[str] = typer.Option(None, "--page", "-p", help="Page number, 1 by default."),
    goto: Optional[str] = typer.Option(
        None,
        "--goto",
        "-g",
        help="Open result # with FERRET_GOTO_CMD instead of listing the results.",
    ),
    timeout: Optional[str] = typer.Option(
        None,
        "--timeout",
        "-t",
        help="Search timeout such as 5000ms or 2s. Defaults to FERRET_SEARCH_TIMEOUT.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log search events to stderr."),
) -> None:
    """Search a provider for a keyword."""
    raise typer.Exit(code=execute_search(provider, keyword, page, goto, timeout, verbose))


@app.command("providers")
def providers_command() -> None:
    """List the registered search providers."""
    registry = build_registry(get_settings())

    table = Table(box=None, header_style="bold", pad_edge=False)
    table.add_column("NAME")
    table.add_column("TITLE")
    table.add_column("ENABLED")
    for entry in registry.entries():
        table.add_row(entry.name, entry.title, "yes" if entry.enabled else "no")
    console.print(table)


@app.command("listen")
def listen_command(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address. Defaults to FERRET_HTTP_HOST."),
    port: Optional[int] = typer.Option(None, "--port", help="Bind port. Defaults to FERRET_HTTP_PORT."),
) -> None:
    """Serve the search API over HTTP."""
    from ferret.services.fastapi_server import main as serve
    serve(host=host, port=port)


def main() -> None:
    """Entrypoint used by `python -m ferret.cli` or the `ferret` console script."""
    app()


if __name__ == "__main__":
    main()
