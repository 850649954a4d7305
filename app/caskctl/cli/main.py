"""caskctl command line entry point.

Global options (verbosity, version) are handled here; each command lives
in its own module under ``caskctl.cli.commands``.
"""

from typing import Annotated

import typer

from caskctl import __version__
from caskctl.cli.commands import check, ignore, upgrade
from caskctl.utils.log import configure_logging

app = typer.Typer(
    name="caskctl",
    help="Pre-emptive Homebrew cask remediation and selective upgrades.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"caskctl version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=_show_version,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            envvar="CASKCTL_VERBOSE",
            help="Log per-cask progress and raw brew output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Only log errors. The final summary is still printed.",
        ),
    ] = False,
) -> None:
    """Keep Homebrew casks upgraded without tripping over broken ones.

    Broken casks are repaired or set aside before upgrading, casks in the
    ignore file are never touched, and each cask is upgraded on its own.
    """
    ctx.obj = {"verbose": verbose, "quiet": quiet}
    configure_logging(verbose=verbose, quiet=quiet)


app.add_typer(upgrade.app, name="upgrade")
app.add_typer(check.app, name="check")
app.add_typer(ignore.app, name="ignore")


if __name__ == "__main__":
    app()
