"""CLI application for mapping override tooling."""

import typer

from reveng.cli.commands.overrides import app as overrides_app

app = typer.Typer(
    help="reveng - mapping override tooling",
    no_args_is_help=True,
)

app.add_typer(
    overrides_app,
    name="overrides",
    help="Validate / summarize / explain override documents.",
)


if __name__ == "__main__":
    app()
