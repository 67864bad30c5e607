"""callaudit CLI entry point."""

import typer

from callaudit import __version__
from callaudit.cli.demo_cmd import demo
from callaudit.cli.status_cmd import status

app = typer.Typer(
    name="callaudit",
    help="Audit logging for completion API requests and responses",
    no_args_is_help=True,
)

# Register subcommands
app.command()(demo)
app.command()(status)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"callaudit {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Audit logging for completion API requests and responses."""
