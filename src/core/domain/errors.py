"""Errors of the install domain.

All fatal conditions of the install workflow derive from `InstallerError`.
"Not found" (browser or driver absent) is never an error: probes return
`None` instead.
"""

from __future__ import annotations


class InstallerError(Exception):
    """Base class for fatal install-workflow errors."""


class UnsupportedPlatformError(InstallerError):
    """Host OS is not one of macOS, Linux or Windows."""

    def __init__(self, system: str) -> None:
        self.system = system
        super().__init__(f"Unsupported platform: {system}")


class CommandTimeoutError(InstallerError):
    """An external command did not finish within the configured timeout."""

    def __init__(self, argv: list[str], timeout: float) -> None:
        self.argv = list(argv)
        self.timeout = timeout
        super().__init__(f"Command timed out after {timeout:g}s: {' '.join(argv)}")


class RemoteResolutionError(InstallerError):
    """The release tag API was unreachable or returned nothing usable."""


class DownloadError(InstallerError):
    """Archive download failed (network error, timeout or non-2xx status)."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Download of {url} failed: {reason}")


class ArchiveEntryMissingError(InstallerError):
    """Archive is unreadable or does not contain the expected entry."""

    def __init__(self, name_in_archive: str, archive_url: str, reason: str = "entry not found") -> None:
        self.name_in_archive = name_in_archive
        self.archive_url = archive_url
        super().__init__(f"{reason}: '{name_in_archive}' in {archive_url}")


class UnknownBrowserError(InstallerError):
    """No installer is registered under the requested browser name."""

    def __init__(self, browser: str, known: list[str]) -> None:
        self.browser = browser
        super().__init__(f"Unknown browser '{browser}' (known: {', '.join(known) or 'none'})")
