"""webdriver-installer CLI (Typer + Rich)."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from adapters.drivers import INSTALLERS, available_browsers, build_installer
from adapters.json_exporter import export_outcomes_json
from cli.doctor import app as doctor_app
from cli.ui_components import build_install_table, build_status_table, print_banner
from core.config import AppSettings
from core.domain.errors import UnknownBrowserError
from core.platform import detect_platform
from core.services.install_pipeline import (
    InstallRequest,
    PipelineHooks,
    inspect_installed,
    normalize_browsers,
    run_install,
)

app = typer.Typer(no_args_is_help=True, help="Install WebDriver binaries matching local browsers.")
app.add_typer(doctor_app, name="doctor")

log = logging.getLogger(__name__)

_console = Console()


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _validate_browsers(browsers: list[str] | None) -> list[str]:
    names = normalize_browsers(browsers)
    unknown = [name for name in names if name not in INSTALLERS]
    if unknown:
        raise typer.BadParameter(str(UnknownBrowserError(unknown[0], available_browsers())))
    return names


@app.command()
def install(
    browsers: Optional[List[str]] = typer.Argument(None, help="Browsers to install drivers for (default: all)."),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Directory for driver binaries."),
    force: bool = typer.Option(False, "--force", "-f", help="Reinstall even if the driver is up to date."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="No banner."),
    json_output: Optional[Path] = typer.Option(None, "--json", help="Also write the outcomes as JSON to this file."),
) -> None:
    """Detect browsers, resolve driver versions and install the drivers."""

    configure_logging(verbose)
    settings = AppSettings()
    platform = detect_platform()
    names = _validate_browsers(browsers)
    if not quiet:
        print_banner(_console, platform)

    request = InstallRequest(browsers=names, output_directory=output_dir, force=force)
    hooks = PipelineHooks(started=lambda name: log.info("Installing driver for %s", name))
    result = asyncio.run(run_install(settings=settings, request=request, hooks=hooks, platform=platform))

    _console.print(build_install_table(result.outcomes))
    if json_output:
        export_outcomes_json(outcomes=result.outcomes, output_path=json_output)
    if not result.ok:
        raise typer.Exit(code=1)


@app.command()
def status(
    browsers: Optional[List[str]] = typer.Argument(None, help="Browsers to inspect (default: all)."),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Directory for driver binaries."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Show installed browser and driver versions (no network access)."""

    configure_logging(verbose)
    settings = AppSettings()
    platform = detect_platform()
    installers = [build_installer(name, settings, platform=platform) for name in _validate_browsers(browsers)]
    outcomes = asyncio.run(inspect_installed(installers, output_dir or settings.output_directory))
    _console.print(build_status_table(outcomes))


@app.command(name="browsers")
def list_browsers() -> None:
    """List supported browsers."""

    table = Table(title="Supported browsers")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Browser", style="white")
    table.add_column("Driver", style="white")
    table.add_column("Repository", style="dim")
    for name in available_browsers():
        spec = INSTALLERS[name].spec
        table.add_row(name, spec.browser_name, spec.driver_name, spec.repository)
    _console.print(table)


def run() -> None:
    app()
