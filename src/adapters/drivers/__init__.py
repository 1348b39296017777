"""Driver installers per browser.

Registry keyed by lowercase browser name. Each entry implements
`core.interfaces.installer.DriverInstaller`.
"""

from __future__ import annotations

from adapters.drivers.base import BaseDriverInstaller, first_version
from adapters.drivers.opera import OperaDriverInstaller
from core.config import AppSettings
from core.domain.errors import UnknownBrowserError
from core.domain.models import PlatformDescriptor
from core.interfaces.host import HostProbe, ReleaseFetcher

INSTALLERS: dict[str, type[BaseDriverInstaller]] = {
    "opera": OperaDriverInstaller,
}


def available_browsers() -> list[str]:
    return sorted(INSTALLERS)


def build_installer(
    browser: str,
    settings: AppSettings | None = None,
    *,
    platform: PlatformDescriptor | None = None,
    probe: HostProbe | None = None,
    releases: ReleaseFetcher | None = None,
) -> BaseDriverInstaller:
    """Instantiate the installer registered for `browser`."""

    try:
        installer_cls = INSTALLERS[browser.strip().lower()]
    except KeyError:
        raise UnknownBrowserError(browser, available_browsers()) from None
    return installer_cls(settings, platform=platform, probe=probe, releases=releases)


__all__ = [
    "INSTALLERS",
    "BaseDriverInstaller",
    "OperaDriverInstaller",
    "available_browsers",
    "build_installer",
    "first_version",
]
