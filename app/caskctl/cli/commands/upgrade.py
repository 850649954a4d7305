"""Upgrade command implementation.

Runs the full pipeline: ignore list -> health scan -> remediation ->
selective upgrade, then prints the run summary.
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from caskctl.cli.display import print_run_summary
from caskctl.cli.types import EXIT_FATAL, OutputFormat, get_manager, load_config_or_exit
from caskctl.core.ignore import load_ignore_list
from caskctl.core.paths import resolve_ignore_path
from caskctl.core.pipeline import RunOptions, run_upgrade
from caskctl.managers.base import PackageManagerUnavailableError, PackageQueryError
from caskctl.utils.formatting import console, print_error, print_info

app = typer.Typer(
    help="Upgrade outdated casks, repairing or skipping broken ones first.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def upgrade_casks(
    ctx: typer.Context,
    ignore_file: Annotated[
        Path | None,
        typer.Option(
            "--ignore-file",
            "-i",
            envvar="CASKCTL_IGNORE_FILE",
            help="File listing casks never to upgrade (default: .cask-ignore).",
        ),
    ] = None,
    skip_remediation: Annotated[
        bool | None,
        typer.Option(
            "--skip-remediation/--remediate",
            envvar="CASKCTL_SKIP_REMEDIATION",
            help="Skip the health scan and remediation stages.",
        ),
    ] = None,
    greedy: Annotated[
        bool | None,
        typer.Option(
            "--greedy/--no-greedy",
            help="Include casks that update themselves.",
        ),
    ] = None,
    update: Annotated[
        bool | None,
        typer.Option(
            "--update/--no-update",
            help="Run 'brew update' before upgrading.",
        ),
    ] = None,
    cleanup: Annotated[
        bool | None,
        typer.Option(
            "--cleanup/--no-cleanup",
            help="Run 'brew cleanup' and 'brew autoremove' afterwards.",
        ),
    ] = None,
    appdir: Annotated[
        Path | None,
        typer.Option(
            "--appdir",
            help="Applications directory checked by the health scan.",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be done without reinstalling or upgrading anything.",
        ),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format of the final summary: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Upgrade outdated Homebrew casks one at a time.

    Casks listed in the ignore file are never touched. Installed casks
    are health-checked first; broken ones get up to two forced
    reinstalls and are skipped for this run if those fail.

    Exits 0 when every attempted upgrade succeeded, 1 when any failed.

    Examples:
        caskctl upgrade                       # Full run
        caskctl upgrade --skip-remediation    # Straight to upgrading
        caskctl upgrade -i ~/dotfiles/.cask-ignore
        caskctl upgrade --dry-run             # Show what would happen
        caskctl -v upgrade                    # Per-cask progress
    """
    if ctx.invoked_subcommand is not None:
        return

    config = load_config_or_exit()
    options = RunOptions(
        ignore_path=resolve_ignore_path(ignore_file, config.ignore_file),
        skip_remediation=config.skip_remediation if skip_remediation is None else skip_remediation,
        greedy=config.greedy if greedy is None else greedy,
        update=config.update if update is None else update,
        cleanup=config.cleanup if cleanup is None else cleanup,
        appdir=appdir or Path(config.appdir).expanduser(),
    )
    manager = get_manager(config, dry_run=dry_run)

    if output_format == OutputFormat.TABLE:
        if dry_run:
            print_info("Dry run: nothing will be reinstalled or upgraded.")
        print_info(f"Using ignore file: {options.ignore_path}")

    ignore = load_ignore_list(options.ignore_path)
    try:
        summary = run_upgrade(manager, options, ignore=ignore)
    except PackageManagerUnavailableError as e:
        print_error(f"{e}. Install Homebrew from https://brew.sh")
        raise typer.Exit(code=EXIT_FATAL) from e
    except PackageQueryError as e:
        print_error(f"Cannot determine outdated casks: {e}")
        raise typer.Exit(code=EXIT_FATAL) from e

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(summary.to_dict()))
    else:
        print_run_summary(summary, ignore)

    raise typer.Exit(code=summary.exit_code)
