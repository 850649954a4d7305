"""Check command implementation.

Runs the read-only health scan and reports problematic casks.
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from caskctl.cli.display import create_issues_table
from caskctl.cli.types import EXIT_FATAL, OutputFormat, get_manager, load_config_or_exit
from caskctl.core.ignore import load_ignore_list
from caskctl.core.paths import resolve_ignore_path
from caskctl.core.pipeline import RunOptions, scan_health
from caskctl.managers.base import PackageManagerUnavailableError
from caskctl.utils.formatting import console, print_error, print_success, print_warning

app = typer.Typer(
    help="Check installed casks for problems without changing anything.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def check_casks(
    ctx: typer.Context,
    ignore_file: Annotated[
        Path | None,
        typer.Option(
            "--ignore-file",
            "-i",
            envvar="CASKCTL_IGNORE_FILE",
            help="File listing casks to leave out of the check.",
        ),
    ] = None,
    appdir: Annotated[
        Path | None,
        typer.Option(
            "--appdir",
            help="Applications directory to check.",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Scan installed casks for missing apps, duplicate versions and stale metadata.

    Exits 1 if any issue was found.
    """
    if ctx.invoked_subcommand is not None:
        return

    config = load_config_or_exit()
    options = RunOptions(
        ignore_path=resolve_ignore_path(ignore_file, config.ignore_file),
        appdir=appdir or Path(config.appdir).expanduser(),
    )
    manager = get_manager(config)

    if not manager.is_available():
        print_error("brew is not available on this system. Install Homebrew from https://brew.sh")
        raise typer.Exit(code=EXIT_FATAL)

    ignore = load_ignore_list(options.ignore_path)
    try:
        issues = scan_health(manager, options, ignore)
    except PackageManagerUnavailableError as e:
        print_error(str(e))
        raise typer.Exit(code=EXIT_FATAL) from e

    if output_format == OutputFormat.JSON:
        payload = [
            {"package": i.package, "kind": i.kind.value, "detail": i.detail} for i in issues
        ]
        console.print_json(json.dumps(payload))
    elif issues:
        console.print(create_issues_table(issues))
        packages = sorted({i.package for i in issues})
        print_warning(f"{len(packages)} cask(s) need attention: {', '.join(packages)}")
    else:
        print_success("All installed casks look healthy.")

    if issues:
        raise typer.Exit(code=1)
