"""Ignore command implementation.

Shows which ignore file is in effect and what it contains.
"""

from pathlib import Path
from typing import Annotated

import typer

from caskctl.cli.display import create_ignore_table
from caskctl.cli.types import load_config_or_exit
from caskctl.core.ignore import load_ignore_list
from caskctl.core.paths import resolve_ignore_path
from caskctl.utils.formatting import console, print_info

app = typer.Typer(
    help="Show the ignore file in effect and its entries.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def show_ignore(
    ctx: typer.Context,
    ignore_file: Annotated[
        Path | None,
        typer.Option(
            "--ignore-file",
            "-i",
            envvar="CASKCTL_IGNORE_FILE",
            help="Ignore file to show.",
        ),
    ] = None,
) -> None:
    """Show the resolved ignore file and the casks it excludes."""
    if ctx.invoked_subcommand is not None:
        return

    config = load_config_or_exit()
    path = resolve_ignore_path(ignore_file, config.ignore_file)

    if not path.exists():
        print_info(f"No ignore file at {path}; no casks are ignored.")
        return

    ignore = load_ignore_list(path)
    if not ignore:
        print_info(f"Ignore file {path} has no entries.")
        return

    console.print(create_ignore_table(ignore))
    console.print(f"\n[muted]{len(ignore)} cask(s) ignored[/muted]")
