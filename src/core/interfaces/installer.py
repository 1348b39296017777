"""Driver installer contract.

A structural Protocol: each browser ships one implementation and tests can
substitute fakes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Awaitable, Callable, Protocol, runtime_checkable

from core.domain.models import InstalledArtifact

# A candidate in an ordered fallback chain: returns a version or None.
VersionProbe = Callable[[], Awaitable[str | None]]


@runtime_checkable
class DriverInstaller(Protocol):
    """Four-step workflow: detect -> resolve -> fetch -> place.

    Design rules:
    - Methods touching the host or the network are asynchronous.
    - "Not found" is `None`, never an exception.
    - OS-dispatched methods raise `UnsupportedPlatformError` on unknown hosts.
    """

    def get_browser_name(self) -> str:
        ...

    def get_driver_name(self) -> str:
        ...

    async def get_installed_browser_version(self) -> str | None:
        ...

    async def get_installed_driver_version(self, output_directory: Path) -> str | None:
        ...

    async def get_best_driver_version(self, browser_version: str | None) -> str:
        """Resolve the driver version to install.

        Implementations may ignore `browser_version` (e.g. always pick the
        latest published release).
        """

        ...

    async def install(self, driver_version: str, output_directory: Path) -> InstalledArtifact:
        ...
