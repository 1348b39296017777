"""CLI UI components (Rich).

Keeps command logic apart from presentation so tables can be reused by
several commands.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import InstallOutcome, PlatformDescriptor


def print_banner(console: Console, platform: PlatformDescriptor) -> None:
    """Print the welcome banner with the detected host platform."""

    title = Text("webdriver-installer", style="bold cyan")
    family = platform.os_family.label() if platform.os_family else "unsupported"
    subtitle = Text(f"{family} • {platform.machine or 'unknown arch'}", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def _status(outcome: InstallOutcome) -> Text:
    if outcome.error:
        return Text("FAILED", style="bold red")
    if outcome.skipped:
        return Text("UP TO DATE", style="green")
    return Text("INSTALLED", style="bold green")


def build_install_table(outcomes: list[InstallOutcome]) -> Table:
    table = Table(title="Driver installs")
    table.add_column("Browser", style="cyan", no_wrap=True)
    table.add_column("Browser version", style="white")
    table.add_column("Driver", style="white")
    table.add_column("Driver version", style="white")
    table.add_column("Status")
    table.add_column("Details", style="dim")

    for outcome in outcomes:
        if outcome.error:
            details = Text(outcome.error, style="red")
        elif outcome.artifact:
            details = Text(str(outcome.artifact.path))
        else:
            details = Text("")
        table.add_row(
            outcome.browser_name,
            outcome.browser_version or "not found",
            outcome.driver_name,
            outcome.driver_version or "-",
            _status(outcome),
            details,
        )
    return table


def build_status_table(outcomes: list[InstallOutcome]) -> Table:
    table = Table(title="Installed versions")
    table.add_column("Browser", style="cyan", no_wrap=True)
    table.add_column("Browser version", style="white")
    table.add_column("Driver", style="white")
    table.add_column("Driver version", style="white")

    for outcome in outcomes:
        browser_version = outcome.error or outcome.browser_version or "not found"
        table.add_row(
            outcome.browser_name,
            browser_version,
            outcome.driver_name,
            outcome.driver_version or "not installed",
        )
    return table
