"""
wslprovision CLI - UI Components & Branding
Standardized headers and outcome tables
"""

from rich.console import Console
from rich.table import Table

from wslprovision.models.results import RunReport, StepOutcome

LOGO = "wslprovision"

# Color scheme
SUCCESS_COLOR = "green"
ERROR_COLOR = "red"

OUTCOME_STYLES = {
    StepOutcome.APPLIED: f"[{SUCCESS_COLOR}]applied[/{SUCCESS_COLOR}]",
    StepOutcome.SKIPPED: "[dim]skipped[/dim]",
    StepOutcome.FAILED: f"[{ERROR_COLOR}]failed[/{ERROR_COLOR}]",
}


def show_header(
    title: str,
    subtitle: str = None,
    distro: str = None,
    details: dict = None,
    console: Console = None,
):
    """
    Display a standardized wslprovision command header.

    Args:
        title: Main title (e.g., "Provision", "Status")
        subtitle: Optional subtitle line
        distro: Target distro (if applicable)
        details: Additional key-value pairs to display
        console: Rich Console instance (creates new if None)
    """
    if console is None:
        console = Console()

    prefix = f" [bold color(214)]{LOGO}[/bold color(214)] [dim]›[/dim]"

    console.print(f"{prefix} [bold white]{title}[/bold white]")

    if subtitle:
        console.print(f"{prefix} [dim]{subtitle}[/dim]")

    if distro:
        console.print(f"{prefix} Distro: [cyan]{distro}[/cyan]")

    if details:
        for key, value in details.items():
            console.print(f"{prefix} {key}: [cyan]{value}[/cyan]")

    console.print()


def outcome_table(report: RunReport) -> Table:
    """Build a summary table of step outcomes."""
    table = Table(title="Provisioning Summary", title_justify="left", padding=(0, 1))
    table.add_column("Step", style="cyan", no_wrap=True)
    table.add_column("Outcome")
    table.add_column("Details", style="dim")

    for step in report.steps:
        detail = step.detail
        if step.probe is not None and step.outcome != StepOutcome.SKIPPED:
            detail = f"{detail} (probe: {step.probe.value})"
        table.add_row(step.name, OUTCOME_STYLES[step.outcome], detail)

    return table
