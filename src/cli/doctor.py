"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
import tempfile
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client, github_headers
from core.config import AppSettings, write_user_env_vars
from core.platform import detect_platform

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_github(settings: AppSettings) -> tuple[bool, str]:
    url = f"{settings.github_api_base_url.rstrip('/')}/rate_limit"
    try:
        async with build_async_client(settings, extra_headers=github_headers(settings)) as client:
            response = await client.get(url)
    except Exception as exc:
        return False, str(exc)
    if response.status_code != 200:
        return False, f"HTTP {response.status_code}"
    try:
        remaining = response.json()["resources"]["core"]["remaining"]
    except (ValueError, KeyError, TypeError):
        return True, "HTTP 200"
    return True, f"HTTP 200, {remaining} requests left"


def _check_output_dir(path: Path) -> tuple[bool, str]:
    """Create the output directory and a throwaway file inside it."""

    try:
        path.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(dir=path):
            pass
        return True, str(path.resolve())
    except OSError as exc:
        return False, str(exc)


@app.command()
def run(
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Directory for driver binaries."),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()
    platform = detect_platform()

    table = Table(title="webdriver-installer Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    if platform.os_family:
        table.add_row("Platform", "OK", f"{platform.os_family.label()} ({platform.machine})")
    else:
        table.add_row("Platform", "FAIL", f"Unsupported: {platform.system}")

    if settings.github_token:
        table.add_row("GitHub token", "OK", "Authenticated API requests")
    else:
        table.add_row("GitHub token", "OPTIONAL", "Anonymous requests (60/hour rate limit)")

    ok_api, detail_api = asyncio.run(_check_github(settings))
    table.add_row("GitHub API", "OK" if ok_api else "FAIL", detail_api)

    ok_dir, detail_dir = _check_output_dir(output_dir or settings.output_directory)
    table.add_row("Output directory", "OK" if ok_dir else "FAIL", detail_dir)

    _console.print(table)

    if not ok_api:
        _console.print(
            "\n[yellow]Note:[/yellow] `install` needs the GitHub API to resolve the latest driver release."
        )


@app.command(name="setup-token")
def setup_token() -> None:
    """Store a GitHub token in the user config .env."""

    token = typer.prompt("GitHub token", hide_input=True, confirmation_prompt=False).strip()
    if not token:
        raise typer.BadParameter("token is required")

    env_path = write_user_env_vars({"WEBDRIVER_INSTALLER_GITHUB_TOKEN": token})
    _console.print(f"[green]Saved GitHub token to:[/green] {env_path}")
