"""Shared Rich display functions for run summaries and health issues."""

from rich.table import Table

from caskctl.core.ignore import IgnoreList
from caskctl.models.health import HealthIssue
from caskctl.models.summary import ExclusionReason, OutcomeStatus, RunSummary
from caskctl.utils.formatting import console, print_section, print_success, print_warning

_EXCLUSION_LABELS: dict[ExclusionReason, str] = {
    ExclusionReason.IGNORE_LIST: "ignore list",
    ExclusionReason.SESSION: "remediation failed this run",
}


def create_outcomes_table(summary: RunSummary, ignore: IgnoreList | None = None) -> Table:
    """Create a Rich table with one row per outdated package.

    Args:
        summary: Run summary to display.
        ignore: Ignore list, used to show the reason given in the ignore file.

    Returns:
        Rich Table configured for outcome display.
    """
    table = Table(
        title="Upgrade Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=10, justify="center")
    table.add_column("Package", no_wrap=True)
    table.add_column("Detail")

    for outcome in summary.outcomes:
        if outcome.status == OutcomeStatus.UPGRADED:
            status = "[upgraded]upgraded[/upgraded]"
            detail = ""
        elif outcome.status == OutcomeStatus.EXCLUDED:
            status = "[excluded]excluded[/excluded]"
            detail = _exclusion_detail(outcome.package, outcome.reason, ignore)
        else:
            status = "[failed]FAILED[/failed]"
            detail = outcome.error or "Unknown error"

        table.add_row(status, outcome.package, f"[muted]{detail}[/muted]")

    return table


def _exclusion_detail(
    package: str,
    reason: ExclusionReason | None,
    ignore: IgnoreList | None,
) -> str:
    if reason is None:
        return ""
    label = _EXCLUSION_LABELS[reason]
    if reason == ExclusionReason.IGNORE_LIST and ignore is not None:
        note = ignore.reason_for(package)
        if note:
            return f"{label}: {note}"
    return label


def create_issues_table(issues: list[HealthIssue]) -> Table:
    """Create a Rich table listing health issues."""
    table = Table(
        title="Health Issues",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Package", no_wrap=True)
    table.add_column("Issue")
    table.add_column("Detail")

    for issue in issues:
        table.add_row(
            f"[package.name]{issue.package}[/]",
            f"[issue]{issue.kind.value}[/issue]",
            f"[muted]{issue.detail or ''}[/muted]",
        )

    return table


def create_ignore_table(ignore: IgnoreList) -> Table:
    """Create a Rich table listing ignore file entries."""
    table = Table(
        title=f"Ignored Packages ({ignore.path})" if ignore.path else "Ignored Packages",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Package", no_wrap=True)
    table.add_column("Reason")

    for entry in ignore:
        table.add_row(entry.name, f"[muted]{entry.reason or ''}[/muted]")

    return table


def print_run_summary(summary: RunSummary, ignore: IgnoreList | None = None) -> None:
    """Print the final report of an upgrade run.

    Always shows counts, exclusions and failures; per-package rows are
    only shown when there is something to report.

    Args:
        summary: Finalized run summary.
        ignore: Ignore list used for the run.
    """
    print_section("Summary")

    if summary.outcomes:
        console.print(create_outcomes_table(summary, ignore))

    if summary.remediation_failures:
        console.print("\n[warning]Excluded after failed remediation:[/warning]")
        for package, reason in summary.remediation_failures.items():
            console.print(f"  [excluded]{package}[/excluded] [muted]({reason})[/muted]")

    counts = summary.counts
    console.print(
        f"\n[upgraded]{counts[OutcomeStatus.UPGRADED.value]} upgraded[/upgraded], "
        f"[excluded]{counts[OutcomeStatus.EXCLUDED.value]} excluded[/excluded], "
        f"[failed]{counts[OutcomeStatus.FAILED.value]} failed[/failed]"
    )

    for warning in summary.warnings:
        print_warning(warning)

    minutes, seconds = divmod(int(summary.duration_seconds), 60)
    console.print(f"[muted]Time taken: {minutes}m {seconds}s[/muted]")

    if summary.had_errors:
        failed = " ".join(summary.failed)
        console.print(f"\n[failed]Failed packages:[/failed] {failed}")
        target = ignore.path if ignore is not None and ignore.path else "your ignore file"
        console.print(f"[info]To skip them on future runs, add them to {target}.[/info]")
    else:
        print_success("All upgrades completed successfully.")
