"""OperaDriver installer.

Opera publishes `operadriver` on GitHub (operasoftware/operachromiumdriver).
Release tags look like "v.114.0.5735.90" and each platform zip nests the
binary one directory deep (`operadriver_linux64/operadriver`).
"""

from __future__ import annotations

import functools
import getpass

from adapters.drivers.base import BaseDriverInstaller
from core.domain.models import DriverSpec, OSFamily
from core.domain.versions import first_token
from core.interfaces.installer import VersionProbe

_MAC_APP_NAMES = ("Opera", "Opera Stable")
_LINUX_COMMANDS = ("/snap/bin/opera", "opera")
_WINDOWS_EXE = "opera.exe"


class OperaDriverInstaller(BaseDriverInstaller):
    """Driver installer for Opera (macOS, Linux incl. Snap, Windows)."""

    spec = DriverSpec(
        browser_name="Opera",
        driver_name="operadriver",
        repository="operasoftware/operachromiumdriver",
        archive_url_template=(
            "https://github.com/{repository}/releases/download/"
            "v.{version}/operadriver_{platform}.zip"
        ),
        entry_path_template="operadriver_{platform}/{binary}",
        platform_tags={
            OSFamily.LINUX: "linux64",
            OSFamily.MAC: "mac64",
            OSFamily.WINDOWS: "win64",
        },
        is_zip=True,
    )

    def windows_install_paths(self) -> list[str]:
        username = getpass.getuser()
        return [
            "C:\\Program Files\\Opera\\opera.exe",
            "C:\\Program Files (x86)\\Opera\\opera.exe",
            f"C:\\Users\\{username}\\AppData\\Local\\Programs\\Opera\\opera.exe",
        ]

    async def _linux_version(self, command: str) -> str | None:
        output = await self._probe.get_command_output_or_none([command, "--version"])
        # "114.0.5735.90 stable" -> "114.0.5735.90"
        return first_token(output.strip() if output else None)

    def browser_version_probes(self, os_family: OSFamily) -> list[VersionProbe]:
        if os_family is OSFamily.MAC:
            return [functools.partial(self._probe.get_mac_app_version, name) for name in _MAC_APP_NAMES]
        if os_family is OSFamily.LINUX:
            return [functools.partial(self._linux_version, command) for command in _LINUX_COMMANDS]
        paths = [*self.windows_install_paths(), _WINDOWS_EXE]
        return [functools.partial(self._probe.get_windows_exe_version, path) for path in paths]
