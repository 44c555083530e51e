"""retrymute CLI."""

import typer

from retrymute.cli._console import console
from retrymute.cli.probe import probe
from retrymute.cli.show import key, show

app = typer.Typer(
    name="retrymute",
    help="Inspect retry-suppressed job failures.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        from retrymute import __version__

        console.print(f"[bold]retrymute[/bold] [dim]{__version__}[/dim]")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version",
    ),
) -> None:
    """Retry-aware failure routing for background jobs."""


# Register commands
app.command()(key)
app.command()(show)
app.command()(probe)


def cli() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    cli()
