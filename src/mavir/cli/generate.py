from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from mavir.cli.logging_setup import configure_logging
from mavir.config import get_settings
from mavir.core.generate import run_generate
from mavir.errors import MavirError

console = Console()


def generate(
    output_path: Annotated[
        str,
        typer.Option(
            "--output-path",
            "-o",
            help="Source JAR to write (.jar or .srcjar). Its parent directory must exist.",
        ),
    ],
    file_paths: Annotated[
        list[str] | None,
        typer.Option("--file-path", "-f", help="Path to a Java source file. Repeat for several files."),
    ] = None,
    jobs: Annotated[int | None, typer.Option("--jobs", "-j", min=1, help="Files to extract in parallel.")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Print verbose output.")] = False,
) -> None:
    """Generate AutoValue classes for the given Java files and package them as a source JAR."""
    settings = get_settings()
    configure_logging("DEBUG" if verbose else settings.log_level)

    if not file_paths:
        console.print("[red]Error:[/red] at least one --file-path is required.")
        raise typer.Exit(1)

    try:
        result = run_generate(file_paths, output_path, jobs=jobs or settings.jobs)
    except MavirError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc

    for class_name in result.class_names:
        console.print(f"[green]Generated[/green] {escape(class_name)}")
    console.print(f"[green]Wrote[/green] {escape(str(result.output_path))}")
