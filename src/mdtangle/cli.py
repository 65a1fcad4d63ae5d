"""mdtangle CLI."""

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from mdtangle.config import settings
from mdtangle.pipeline import Tangler, find_unresolved

app = typer.Typer(
    name="mdtangle",
    help="Tangle source files out of literate markdown documents",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Route the package's log records to stderr through rich."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = settings.log_level

    logger = logging.getLogger("mdtangle")
    logger.handlers = [
        RichHandler(console=err_console, show_time=False, show_path=False)
    ]
    logger.setLevel(level)


@app.command()
def tangle(
    documents: list[str] = typer.Argument(..., help="Markdown documents to tangle, in order"),
    output_dir: Optional[str] = typer.Option(
        None, "--output-dir", "-o", help="Output directory (default: current directory)"
    ),
    line_directives: Optional[bool] = typer.Option(
        None,
        "--line-directives/--no-line-directives",
        help="Emit //line and #line directives",
    ),
    max_depth: Optional[int] = typer.Option(
        None, "--max-depth", min=0, help="Maximum macro nesting depth"
    ),
    strict: bool = typer.Option(False, "--strict", help="Fail on unresolved references"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
) -> None:
    """Extract code blocks from DOCUMENTS and write the files they define."""
    configure_logging(verbose, quiet)

    tangler = Tangler(
        output_dir=output_dir,
        line_directives=line_directives,
        max_depth=max_depth,
    )
    report = tangler.run(documents)

    if not quiet:
        for write in report.writes:
            if write.ok:
                console.print(
                    f"[green]wrote[/green] {write.path} "
                    f"[dim]({write.bytes_written} bytes)[/dim]"
                )
            else:
                console.print(f"[red]failed[/red] {write.target}: {write.error}")
        console.print(
            f"[bold]{len(report.writes)}[/bold] file(s) from "
            f"[bold]{len(report.scans)}[/bold] document(s)"
        )

    if not report.ok or (strict and report.unresolved):
        raise typer.Exit(code=1)


@app.command("list")
def list_blocks(
    documents: list[str] = typer.Argument(..., help="Markdown documents to scan, in order"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Show the target files and named blocks DOCUMENTS define, without writing."""
    configure_logging(verbose)

    registry, scans = Tangler().scan_documents(documents)

    table = Table(title="Registry")
    table.add_column("Kind", no_wrap=True)
    table.add_column("Name", no_wrap=True)
    table.add_column("Lines", justify="right")
    table.add_column("Documents")
    for target, block in registry.files.items():
        table.add_row("file", target, str(len(block)), ", ".join(block.documents))
    for name, block in registry.blocks.items():
        table.add_row("block", name, str(len(block)), ", ".join(block.documents))
    console.print(table)

    for diagnostic in find_unresolved(registry):
        console.print(f"[yellow]unresolved[/yellow] {diagnostic}")

    if not all(scan.ok for scan in scans):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
