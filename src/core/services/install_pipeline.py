"""Driver install orchestration.

Runs the detect -> resolve -> fetch -> place workflow for one or several
browsers. Installers share no state, so browsers are processed concurrently.
Side-effects for the user (tables, progress) stay in the CLI; this module
only returns `InstallOutcome` values.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from adapters.drivers import available_browsers, build_installer
from core.config import AppSettings
from core.domain.errors import InstallerError
from core.domain.models import InstallOutcome, PlatformDescriptor
from core.interfaces.installer import DriverInstaller
from core.platform import detect_platform

log = logging.getLogger(__name__)


@dataclass
class InstallRequest:
    """Parameters that control an install run."""

    browsers: Sequence[str] | None = None
    output_directory: Path | None = None
    force: bool = False


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers."""

    started: Callable[[str], None] | None = None
    finished: Callable[[InstallOutcome], None] | None = None


@dataclass
class PipelineResult:
    outcomes: list[InstallOutcome] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(outcome.ok for outcome in self.outcomes)


def normalize_browsers(browsers: Sequence[str] | None) -> list[str]:
    """Lowercased, deduplicated browser names; all registered ones by default."""

    names: list[str] = []
    for name in browsers or available_browsers():
        key = name.strip().lower()
        if key and key not in names:
            names.append(key)
    return names


async def install_driver(
    installer: DriverInstaller,
    output_directory: Path,
    *,
    force: bool = False,
    outcome: InstallOutcome | None = None,
) -> InstallOutcome:
    """Run the four steps for a single installer.

    The install step is skipped when the driver already in `output_directory`
    reports the resolved version, unless `force` is set. Fatal errors
    propagate; when `outcome` is given it keeps whatever was resolved before
    the failure.
    """

    if outcome is None:
        outcome = InstallOutcome(
            browser_name=installer.get_browser_name(),
            driver_name=installer.get_driver_name(),
        )
    outcome.browser_version = await installer.get_installed_browser_version()
    if outcome.browser_version is None:
        log.info("%s not found; installing the latest driver anyway", outcome.browser_name)

    outcome.previous_driver_version = await installer.get_installed_driver_version(output_directory)
    outcome.driver_version = await installer.get_best_driver_version(outcome.browser_version)

    if outcome.previous_driver_version == outcome.driver_version and not force:
        log.info("%s %s already installed", outcome.driver_name, outcome.driver_version)
        outcome.skipped = True
        return outcome

    outcome.artifact = await installer.install(outcome.driver_version, output_directory)
    return outcome


async def install_all(
    installers: Sequence[DriverInstaller],
    output_directory: Path,
    *,
    force: bool = False,
    hooks: PipelineHooks | None = None,
) -> PipelineResult:
    """Install every driver concurrently; one failure does not stop the rest."""

    hooks = hooks or PipelineHooks()

    async def safe_install(installer: DriverInstaller) -> InstallOutcome:
        if hooks.started:
            hooks.started(installer.get_browser_name())
        outcome = InstallOutcome(
            browser_name=installer.get_browser_name(),
            driver_name=installer.get_driver_name(),
        )
        try:
            await install_driver(installer, output_directory, force=force, outcome=outcome)
        except (InstallerError, OSError) as exc:
            log.debug("Install of %s failed", installer.get_driver_name(), exc_info=True)
            outcome.error = str(exc)
        if hooks.finished:
            hooks.finished(outcome)
        return outcome

    outcomes = await asyncio.gather(*(safe_install(installer) for installer in installers))
    return PipelineResult(outcomes=list(outcomes))


async def run_install(
    *,
    settings: AppSettings,
    request: InstallRequest,
    hooks: PipelineHooks | None = None,
    platform: PlatformDescriptor | None = None,
) -> PipelineResult:
    """Build installers for the requested browsers and install their drivers."""

    platform = platform or detect_platform()
    output_directory = request.output_directory or settings.output_directory
    installers = [
        build_installer(name, settings, platform=platform)
        for name in normalize_browsers(request.browsers)
    ]
    return await install_all(installers, output_directory, force=request.force, hooks=hooks)


async def inspect_installed(
    installers: Sequence[DriverInstaller],
    output_directory: Path,
) -> list[InstallOutcome]:
    """Installed browser and driver versions, without network access."""

    async def inspect(installer: DriverInstaller) -> InstallOutcome:
        outcome = InstallOutcome(
            browser_name=installer.get_browser_name(),
            driver_name=installer.get_driver_name(),
        )
        try:
            outcome.browser_version = await installer.get_installed_browser_version()
            outcome.driver_version = await installer.get_installed_driver_version(output_directory)
        except InstallerError as exc:
            outcome.error = str(exc)
        return outcome

    return list(await asyncio.gather(*(inspect(installer) for installer in installers)))
