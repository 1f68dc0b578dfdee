"""
Rendering functions for versiondocs output.

This module handles all pretty-printing and table formatting.
Services return data, this module makes it human-readable.
"""

from rich.table import Table
from rich.console import Console
from rich import box
from typing import List

from .domain.build import BuildStatus, PublishSummary
from .domain.version import Version

console = Console()

STATUS_STYLES = {
    BuildStatus.BUILT: "green",
    BuildStatus.SKIPPED: "yellow",
    BuildStatus.FAILED: "red",
    BuildStatus.DRY_RUN: "cyan",
}


def render_versions_table(versions: List[Version]) -> None:
    """
    Render resolved versions in publish order.

    Args:
        versions: Versions from VersionResolver
    """
    if not versions:
        console.print("[yellow]No versions found.[/yellow]")
        return

    table = Table(
        title="Documentation Versions",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )

    table.add_column("#", justify="right", style="dim")
    table.add_column("Label", style="cyan")
    table.add_column("Ref", style="green")
    table.add_column("Directory", style="blue")
    table.add_column("Note", style="dim")

    for position, version in enumerate(versions, 1):
        if version.is_head:
            note = "head"
        elif version.is_alias:
            note = "alias"
        else:
            note = ""
        table.add_row(str(position), version.label, version.source_ref, version.directory, note)

    console.print(table)


def render_publish_summary(summary: PublishSummary) -> None:
    """
    Render the outcome of a publish run as a table plus totals.

    Args:
        summary: PublishSummary from PublishService
    """
    if summary.results:
        table = Table(
            title=f"Publish to {summary.branch}",
            box=box.ROUNDED,
            show_header=True,
            header_style="bold magenta"
        )

        table.add_column("Version", style="cyan")
        table.add_column("Ref", style="green")
        table.add_column("Directory", style="blue")
        table.add_column("Status", justify="center")
        table.add_column("Detail", style="dim")

        for result in summary.results:
            style = STATUS_STYLES.get(result.status, "white")
            detail = result.error or ""
            if len(detail) > 60:
                detail = detail[:57] + "..."
            table.add_row(
                result.version.label,
                result.version.source_ref,
                result.version.directory,
                f"[{style}]{result.status.value}[/{style}]",
                detail,
            )

        console.print(table)
    else:
        console.print("[yellow]No versions processed.[/yellow]")

    text = "\n[bold]Summary:[/bold]"
    text += f"\n  [bold green]Built:[/bold green] {summary.built}"
    text += f"\n  [bold yellow]Skipped:[/bold yellow] {summary.skipped}"
    text += f"\n  [bold red]Failed:[/bold red] {summary.failed}"

    if summary.aborted:
        text += f"\n  [bold red]Aborted at {summary.aborted_stage}:[/bold red] {summary.abort_reason}"
    elif summary.commit:
        text += f"\n  Commit: {summary.commit[:12]} on {summary.branch}"
    elif summary.empty_commit:
        text += f"\n  [yellow]Nothing changed on {summary.branch}[/yellow]"
    elif summary.output_worktree:
        text += f"\n  Output left in {summary.output_worktree} (not committed)"

    console.print(text)
