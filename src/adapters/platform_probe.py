"""Version probes on the host.

Browser vendors expose their version through different surfaces: bundle
metadata on macOS, `--version` on Linux, the PE version resource on Windows.
`PlatformProbe` reduces them to three narrow primitives. None of them raise
for "not found"; they return `None`.
"""

from __future__ import annotations

import asyncio
import logging
import os
import plistlib
import shutil
import subprocess
from pathlib import Path
from typing import Sequence

from core.config import AppSettings
from core.domain.errors import CommandTimeoutError

log = logging.getLogger(__name__)

_PLIST_VERSION_KEYS = ("CFBundleShortVersionString", "CFBundleVersion")


def _read_plist_version(plist_path: Path) -> str | None:
    try:
        with plist_path.open("rb") as fh:
            data = plistlib.load(fh)
    except (OSError, plistlib.InvalidFileException, ValueError) as exc:
        log.debug("Cannot read %s: %s", plist_path, exc)
        return None
    if not isinstance(data, dict):
        return None
    for key in _PLIST_VERSION_KEYS:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _has_directory(path: str) -> bool:
    return "/" in path or "\\" in path


def _powershell_quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


class PlatformProbe:
    """Host version lookups (implements `core.interfaces.host.HostProbe`)."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        applications_dir: Path = Path("/Applications"),
    ) -> None:
        self._settings = settings or AppSettings()
        self._applications_dir = applications_dir

    async def get_mac_app_version(self, app_name: str) -> str | None:
        """Version from `/Applications/<app_name>.app/Contents/Info.plist`."""

        plist_path = self._applications_dir / f"{app_name}.app" / "Contents" / "Info.plist"
        if not plist_path.is_file():
            log.debug("No app bundle at %s", plist_path.parent.parent)
            return None
        return _read_plist_version(plist_path)

    async def get_command_output_or_none(self, argv: Sequence[str]) -> str | None:
        """Run `argv` and return raw stdout, or None if missing/failed.

        Raises `CommandTimeoutError` when the command outlives
        `command_timeout_seconds`.
        """

        argv = [str(a) for a in argv]
        timeout = self._settings.command_timeout_seconds
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
            )
        except OSError as exc:
            log.debug("Command %s unavailable: %s", argv[0], exc)
            return None

        try:
            stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            raise CommandTimeoutError(argv, timeout) from None

        if proc.returncode != 0:
            log.debug("Command %s exited with %s", argv[0], proc.returncode)
            return None
        return stdout.decode("utf-8", errors="replace")

    async def get_windows_exe_version(self, path: str) -> str | None:
        """Product version of a Windows executable.

        Bare names (`opera.exe`) are resolved through PATH first.
        """

        resolved = path if _has_directory(path) else shutil.which(path)
        if not resolved or not os.path.isfile(resolved):
            log.debug("Executable not found: %s", path)
            return None

        output = await self.get_command_output_or_none(
            [
                "powershell",
                "-NoProfile",
                "-NonInteractive",
                "-Command",
                f"(Get-Item -LiteralPath {_powershell_quote(resolved)}).VersionInfo.ProductVersion",
            ]
        )
        version = output.strip() if output else ""
        return version or None
