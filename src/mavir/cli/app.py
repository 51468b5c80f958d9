import typer

from mavir.cli.generate import generate
from mavir.cli.inspect import inspect

app = typer.Typer(
    name="mavir",
    help="Generate AutoValue value classes from Java sources into a source JAR.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("generate")(generate)
app.command("inspect")(inspect)


def main() -> None:
    app()
