"""CLI for workdiff."""

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import load_resolver_config
from .core import ChangeType
from .errors import ConfigError, SnapshotError
from .resolver import FileSnapshotResolver


app = typer.Typer(help="""\
Show the committed (HEAD) and current (working directory) content of files,
for rendering two-way diffs.""")

console = Console()
err_console = Console(stderr=True)


CHANGE_LABELS = {
    ChangeType.ADDED: "[green]+ added[/green]",
    ChangeType.DELETED: "[red]- deleted[/red]",
    ChangeType.MODIFIED: "[yellow]M modified[/yellow]",
    ChangeType.UNCHANGED: "[green]✓ unchanged[/green]",
    ChangeType.MISSING: "[dim]? missing[/dim]",
}


@app.callback()
def callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log repository resolution details"),
):
    """Configure logging for all commands."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )


def make_resolver(project: Path) -> FileSnapshotResolver:
    """Create a resolver configured for project.

    Raises:
        typer.Exit: If the configuration is invalid
    """
    try:
        config = load_resolver_config(project)
    except ConfigError as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(1)
    return FileSnapshotResolver(config=config)


@app.command()
def show(
    file: str = typer.Argument(..., help="File to show (absolute or relative to --project)"),
    project: Path = typer.Option(Path("."), "--project", "-p", help="Project root (fallback repository)"),
    side: Optional[str] = typer.Option(None, "--side", help="Print only one side: 'head' or 'workdir'"),
    as_json: bool = typer.Option(False, "--json", help="Print the snapshot record as JSON"),
):
    """Show HEAD and working-directory content of a file.

    Examples:
        workdiff show src/app.py --json
        workdiff show src/app.py --side head
    """
    if side not in (None, "head", "workdir"):
        console.print(f"[red]✗[/red] --side must be 'head' or 'workdir', got '{escape(side)}'")
        raise typer.Exit(2)

    resolver = make_resolver(project)
    try:
        snapshot = resolver.resolve(project, file)
    except SnapshotError as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(snapshot.to_record(), ensure_ascii=False))
        return

    if side == "head":
        typer.echo(snapshot.original, nl=False)
        return
    if side == "workdir":
        typer.echo(snapshot.current, nl=False)
        return

    console.print(f"[bold]{escape(file)}[/bold]  {CHANGE_LABELS[snapshot.change_type]}")
    console.rule("HEAD")
    if snapshot.exists_at_head:
        console.print(snapshot.original, markup=False, highlight=False)
    else:
        console.print("[dim](not in HEAD)[/dim]")
    console.rule("Working directory")
    if snapshot.exists_in_workdir:
        console.print(snapshot.current, markup=False, highlight=False)
    else:
        console.print("[dim](not on disk)[/dim]")


@app.command()
def status(
    files: List[str] = typer.Argument(..., help="Files to check"),
    project: Path = typer.Option(Path("."), "--project", "-p", help="Project root (fallback repository)"),
):
    """Show how each file differs between HEAD and the working directory.

    Each file is resolved independently; a failure for one file is shown in
    its row and makes the command exit with status 1.
    """
    resolver = make_resolver(project)

    table = Table(show_header=True)
    table.add_column("Path")
    table.add_column("Change")
    table.add_column("HEAD", justify="center")
    table.add_column("Workdir", justify="center")

    failed = False
    for file in files:
        try:
            snapshot = resolver.resolve(project, file)
        except SnapshotError as e:
            failed = True
            table.add_row(escape(file), f"[red]✗ {escape(str(e))}[/red]", "", "")
            continue
        table.add_row(
            escape(file),
            CHANGE_LABELS[snapshot.change_type],
            "✓" if snapshot.exists_at_head else "-",
            "✓" if snapshot.exists_in_workdir else "-",
        )

    console.print(table)
    if failed:
        raise typer.Exit(1)


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
