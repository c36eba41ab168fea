"""CLI entry point for logtint."""

from __future__ import annotations

import logging
from pathlib import Path  # noqa: TC003 - typer needs this at runtime for argument parsing
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.logging import RichHandler

from logtint.buffer import LogBuffer
from logtint.config import load_settings, save_settings
from logtint.filters import FilterState
from logtint.highlight import Highlighter
from logtint.models import LineEvent
from logtint.query import QueryParseError, parse_query
from logtint.reader import is_pipe, read_file, read_stdin
from logtint.render import render_runs

app = typer.Typer(add_completion=False)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command()
def view(
    file: Annotated[Path | None, typer.Argument(help="Log file to view (default: stdin)")] = None,
    filter_query: Annotated[str | None, typer.Option("--filter", "-f", help="Only show lines matching this query")] = None,
    hide: Annotated[str | None, typer.Option("--hide", "-x", help="Hide lines matching this regex")] = None,
    highlight: Annotated[str | None, typer.Option("--highlight", "-H", help="Highlight hits of this query")] = None,
    heuristic: Annotated[
        bool | None, typer.Option("--heuristic/--no-heuristic", help="Toggle built-in token highlighting")
    ] = None,
    json_values: Annotated[
        bool | None, typer.Option("--json/--no-json", help="Toggle embedded JSON highlighting")
    ] = None,
    save: Annotated[bool, typer.Option("--save", help="Remember these settings for next time")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output to stderr")] = False,
) -> None:
    """Print log lines that pass the filters, highlighted."""
    _configure_logging(verbose)

    if file is not None and not file.is_file():
        typer.echo(f"Error: {file} is not a file")
        raise typer.Exit(1)
    if file is None and not is_pipe():
        typer.echo("Error: provide a file or pipe input")
        raise typer.Exit(1)

    updates: dict[str, Any] = {}
    if filter_query is not None:
        updates["filter_query"] = filter_query
    if hide is not None:
        updates["hide_query"] = hide
    if highlight is not None:
        updates["highlight_query"] = highlight
    if heuristic is not None:
        updates["heuristic_enabled"] = heuristic
    if json_values is not None:
        updates["json_enabled"] = json_values
    settings = load_settings().model_copy(update=updates)

    state = FilterState.from_settings(settings)
    if state.errors:
        for error in state.errors:
            typer.echo(f"Error: {error}")
        raise typer.Exit(1)
    if save:
        save_settings(settings)

    highlighter = Highlighter.from_settings(settings)
    buffer = LogBuffer()
    for text in read_file(file) if file is not None else read_stdin():
        buffer.ingest(LineEvent(text=text), state)

    console = Console(highlight=False)
    for line in buffer.visible_lines():
        console.print(render_runs(highlighter.compute_runs(line.text)), soft_wrap=not settings.wrap_lines)


@app.command()
def check(query: Annotated[str, typer.Argument(help="Filter or highlight query to validate")]) -> None:
    """Validate a query and print it with explicit operators."""
    try:
        expr = parse_query(query)
    except QueryParseError as e:
        typer.echo(query)
        typer.echo(" " * e.position + "^")
        typer.echo(f"Error: {e}")
        raise typer.Exit(1)  # noqa: B904
    typer.echo(str(expr))


def main() -> None:
    """Entry point for the CLI."""
    app()
