"""linecomplete CLI.

Commands:
- check: Evaluate every line of a solutions project
- gate: Exit 0 only when every line of a project is 100% complete
- check-file: Evaluate one line offline from a JSON file
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from linecomplete.completeness.orchestrator import (
    CompletenessOrchestrator,
    check_all_lines_complete,
)
from linecomplete.completeness.scorer import evaluate_line
from linecomplete.core.logging import configure_logging
from linecomplete.db.connection import close_db, get_session
from linecomplete.db.line_queries import fetch_project_lines
from linecomplete.models import (
    Classification,
    CompletenessResult,
    Line,
    LineSnapshot,
    LineTableKind,
)

app = typer.Typer(
    name="linecomplete",
    help="Line configuration completeness checks",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main_callback(
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level"),
    json_logs: bool = typer.Option(
        False, "--json-logs", envvar="JSON_LOGS", help="Emit JSON log lines"
    ),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", envvar="LOG_FILE", help="Also write logs to this file"
    ),
):
    """Line configuration completeness checks."""
    configure_logging(level=log_level, json_logs=json_logs, log_file=log_file)


def _print_results(lines: list[Line], results: dict[str, CompletenessResult]) -> None:
    table = Table(title="Line Completeness")
    table.add_column("Line", style="cyan")
    table.add_column("Complete", justify="center")
    table.add_column("Score", justify="right")
    table.add_column("Gaps", justify="right", style="yellow")

    for line in lines:
        result = results.get(line.id)
        if result is None:
            continue
        status = "[green]✓[/green]" if result.is_complete else "[red]✗[/red]"
        gap_count = sum(len(gap.items) for gap in result.gaps)
        table.add_row(line.line_name or line.id, status, f"{result.percentage}%", str(gap_count))

    console.print(table)

    for line in lines:
        result = results.get(line.id)
        if result is None or not result.gaps:
            continue
        console.print(f"\n[bold]{line.line_name or line.id}[/bold]")
        for gap in result.gaps:
            console.print(f"  [yellow]{gap.category}[/yellow]")
            for item in gap.items:
                console.print(f"    • {item}")


@app.command()
def check(
    project_id: str = typer.Argument(..., help="Solutions project ID"),
    kind: LineTableKind = typer.Option(
        LineTableKind.SOLUTIONS, "--kind", help="Table line ids refer to"
    ),
):
    """Evaluate every line of a solutions project."""
    console.print(f"[bold]Checking completeness:[/bold] project={project_id}")

    async def _check():
        try:
            async with get_session() as session:
                lines = await fetch_project_lines(session, project_id)

            if not lines:
                console.print("[yellow]No lines found for project[/yellow]")
                return

            orchestrator = CompletenessOrchestrator(kind=kind)
            outcome = await orchestrator.evaluate_project(project_id, lines)
            _print_results(lines, outcome.results)

            complete = sum(1 for r in outcome.results.values() if r.is_complete)
            console.print(f"\n[bold]Summary:[/bold] {complete}/{len(lines)} lines complete")
        finally:
            await close_db()

    asyncio.run(_check())


@app.command()
def gate(
    project_id: str = typer.Argument(..., help="Solutions project ID"),
):
    """Exit 0 when every line is 100% complete, 1 otherwise."""

    async def _gate() -> bool:
        try:
            return await check_all_lines_complete(project_id)
        finally:
            await close_db()

    if asyncio.run(_gate()):
        console.print("[bold green]✓[/bold green] All lines complete")
        raise typer.Exit(code=0)

    console.print("[bold red]✗[/bold red] Not every line is complete")
    raise typer.Exit(code=1)


@app.command(name="check-file")
def check_file(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file"),
    classification: Classification = typer.Option(
        Classification.BOTH, "--classification", "-c", help="Line classification"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
):
    """Evaluate one line from a JSON file of the form {"line": ..., "snapshot": ...}.

    A null or missing snapshot is scored as a failed load.
    """
    try:
        payload = json.loads(path.read_text())
        line = Line.model_validate(payload["line"])
        raw_snapshot = payload.get("snapshot")
        snapshot = (
            LineSnapshot.model_validate(raw_snapshot) if raw_snapshot is not None else None
        )
    except (json.JSONDecodeError, KeyError, TypeError, ValidationError) as e:
        console.print(f"[red]✗[/red] Invalid input file: {e}")
        raise typer.Exit(code=2)

    result = evaluate_line(line, snapshot, classification)

    if as_json:
        typer.echo(result.model_dump_json(indent=2))
        return

    _print_results([line], {line.id: result})
    console.print(f"\n[bold]Score:[/bold] {result.percentage}%")


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
