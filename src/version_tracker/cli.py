"""Command-line interface for version_tracker.

Provides the entry point that walks a project directory, collects library
version evidence, writes the snapshot and evaluates version conditions.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from version_tracker.analysis import VersionAnalysis
from version_tracker.config import AnalysisOptions

app = typer.Typer(
    name="version-tracker",
    help="Collect third-party library version evidence and evaluate version conditions.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
)
logger = logging.getLogger("version_tracker")


def _setup_logging(verbose: bool) -> None:
    """Configure logging level based on verbosity flag."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.getLogger("version_tracker").setLevel(level)
    # Condition evaluation details are always reported
    logging.getLogger("version_tracker.conditions").setLevel(
        logging.NOTSET if verbose else logging.INFO
    )


def _load_options(config: Optional[Path]) -> AnalysisOptions:
    if config is None:
        return AnalysisOptions.default()
    return AnalysisOptions.from_toml(config)


def _format_result(result: Optional[bool]) -> str:
    if result is None:
        return "[yellow]unknown[/yellow]"
    return "[red]true[/red]" if result else "[green]false[/green]"


async def _run_scan(
    project: Path,
    output: Path,
    config: Optional[Path],
    checks: list[str],
    verbose: bool,
) -> int:
    """Async implementation of the scan command."""
    _setup_logging(verbose)

    try:
        analysis = VersionAnalysis(options=_load_options(config))
    except (ValueError, FileNotFoundError) as e:
        err_console.print(f"[red]Error:[/red] {e}")
        return 1

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Collecting version evidence...", total=None)

        try:
            snapshot = await analysis.run(project, output)
        except OSError as e:
            err_console.print(f"[red]Error writing snapshot:[/red] {e}")
            return 1

        progress.update(task, completed=True)

    grouped = analysis.store.grouped()
    if not grouped:
        console.print("[yellow]No library version evidence found[/yellow]")
    else:
        table = Table(title="Library versions")
        table.add_column("Library")
        table.add_column("Versions")
        table.add_column("Sources", justify="right")
        for key in sorted(grouped):
            evidence = grouped[key]
            versions = sorted({e.coordinate.version for e in evidence})
            table.add_row(key, ", ".join(versions), str(len(evidence)))
        console.print(table)

    console.print(f"[green]Snapshot:[/green] {snapshot}")

    exit_code = 0
    for name in checks:
        result = analysis.evaluator.evaluate(name)
        console.print(f"{name}: {_format_result(result)}")
        if result is None:
            exit_code = 1

    return exit_code


@app.command()
def scan(
    project: Annotated[
        Path,
        typer.Argument(
            help="Project directory to scan",
            exists=True,
            readable=True,
        ),
    ],
    output: Annotated[
        Path,
        typer.Option(
            "--output",
            "-o",
            help="Output directory receiving project-env/versions.txt",
        ),
    ] = Path("output"),
    config: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="TOML file with additional conditions and options",
            exists=True,
            readable=True,
        ),
    ] = None,
    check: Annotated[
        Optional[list[str]],
        typer.Option(
            "--check",
            help="Condition name to evaluate (repeatable)",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output",
        ),
    ] = False,
) -> None:
    """Collect version evidence for a project.

    Scans pom.xml, pom.properties and jar files, writes the evidence
    snapshot and evaluates the requested conditions.

    Exit codes:
        0 - Snapshot written, all checked conditions known
        1 - Error occurred or a checked condition is unknown
    """
    exit_code = asyncio.run(
        _run_scan(
            project=project,
            output=output,
            config=config,
            checks=check or [],
            verbose=verbose,
        )
    )
    raise typer.Exit(code=exit_code)


@app.command()
def conditions(
    config: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="TOML file with additional conditions and options",
            exists=True,
            readable=True,
        ),
    ] = None,
) -> None:
    """List the registered version conditions."""
    try:
        options = _load_options(config)
    except (ValueError, FileNotFoundError) as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    table = Table(title="Version conditions")
    table.add_column("Name")
    table.add_column("Mode")
    table.add_column("Condition")
    for name, condition in options.conditions.items():
        target = condition.coordinate
        library = f"{target.group_id}:{target.artifact_id}" if target.group_id else target.artifact_id
        table.add_row(name, condition.mode.value, f"{library} {condition.op.code} {target.version}")
    console.print(table)


if __name__ == "__main__":
    app()
