from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from mavir.core.generate import extract_files
from mavir.errors import MavirError

console = Console()


def inspect(
    file_paths: Annotated[list[str], typer.Option("--file-path", "-f", help="Path to a Java source file.")],
) -> None:
    """Show the value classes found in the given Java files without generating anything."""
    try:
        units = extract_files(file_paths)
    except MavirError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc

    table = Table(show_lines=False)
    for header in ("file", "package", "class", "generated", "accessors"):
        table.add_column(header)
    rows = 0
    for unit in units:
        for entry in unit.classes:
            accessors = ", ".join(
                f"{a.name}: {a.return_type}{'?' if a.is_nullable else ''}" for a in entry.accessors
            )
            table.add_row(
                escape(unit.source_path or ""),
                unit.package_name,
                entry.qualified_name,
                entry.synthesized_name,
                escape(accessors),
            )
            rows += 1
    console.print(table)
    console.print(f"({rows} rows)")
