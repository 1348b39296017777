"""Glue shared by every browser's driver installer.

A concrete installer only supplies a `DriverSpec` (names, repository, URL
templates) and the ordered list of browser-version probes per OS family.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import ClassVar, Iterable

from adapters.archive_installer import ArchiveInstaller
from adapters.platform_probe import PlatformProbe
from core.config import AppSettings
from core.domain.models import DriverSpec, InstalledArtifact, OSFamily, PlatformDescriptor
from core.domain.versions import second_token, strip_tag_prefix
from core.interfaces.host import HostProbe, ReleaseFetcher
from core.interfaces.installer import VersionProbe
from core.platform import detect_platform, require_os_family

log = logging.getLogger(__name__)


async def first_version(probes: Iterable[VersionProbe]) -> str | None:
    """Evaluate candidate probes in order; the first non-empty result wins."""

    for probe in probes:
        version = await probe()
        if version:
            return version
    return None


class BaseDriverInstaller:
    """Default implementation of `core.interfaces.installer.DriverInstaller`."""

    spec: ClassVar[DriverSpec]

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        platform: PlatformDescriptor | None = None,
        probe: HostProbe | None = None,
        releases: ReleaseFetcher | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._platform = platform or detect_platform()
        self._probe = probe or PlatformProbe(self._settings)
        self._releases = releases or ArchiveInstaller(self._settings)

    @property
    def platform(self) -> PlatformDescriptor:
        return self._platform

    def get_browser_name(self) -> str:
        return self.spec.browser_name

    def get_driver_name(self) -> str:
        return self.spec.driver_name

    def output_name(self) -> str:
        return self.spec.output_file_name + self._platform.binary_suffix

    def output_path(self, output_directory: Path) -> Path:
        return Path(output_directory) / self.output_name()

    def browser_version_probes(self, os_family: OSFamily) -> list[VersionProbe]:
        raise NotImplementedError

    async def get_installed_browser_version(self) -> str | None:
        os_family = require_os_family(self._platform)
        version = await first_version(self.browser_version_probes(os_family))
        log.debug("%s version on %s: %s", self.get_browser_name(), os_family.label(), version)
        return version

    async def get_installed_driver_version(self, output_directory: Path) -> str | None:
        path = self.output_path(output_directory)
        if not path.is_file():
            return None
        output = await self._probe.get_command_output_or_none([str(path), "--version"])
        return second_token(output.strip() if output else None)

    async def get_best_driver_version(self, browser_version: str | None) -> str:
        # Latest release regardless of the browser build: an exact match may
        # not have a published driver.
        tag = await self._releases.fetch_latest_github_tag(self.spec.repository)
        return strip_tag_prefix(tag)

    def archive_url(self, driver_version: str, os_family: OSFamily) -> str:
        return self.spec.archive_url_template.format(
            repository=self.spec.repository,
            version=driver_version,
            platform=self.spec.platform_tags[os_family],
        )

    def entry_path(self, os_family: OSFamily) -> str:
        return self.spec.entry_path_template.format(
            platform=self.spec.platform_tags[os_family],
            binary=self.spec.driver_name + self._platform.binary_suffix,
        )

    async def install(self, driver_version: str, output_directory: Path) -> InstalledArtifact:
        os_family = require_os_family(self._platform)
        return await self._releases.install_binary(
            self.archive_url(driver_version, os_family),
            self.entry_path(os_family),
            self.output_name(),
            Path(output_directory),
            self.spec.is_zip,
        )
