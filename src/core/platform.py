"""Host platform detection.

The descriptor is computed once (per run or per installer construction) and
passed explicitly, so every OS-dispatched method sees the same answer.
"""

from __future__ import annotations

import platform as _platform

from core.domain.errors import UnsupportedPlatformError
from core.domain.models import OSFamily, PlatformDescriptor

_SYSTEMS: dict[str, OSFamily] = {
    "darwin": OSFamily.MAC,
    "linux": OSFamily.LINUX,
    "windows": OSFamily.WINDOWS,
}


def detect_platform(*, system: str | None = None, machine: str | None = None) -> PlatformDescriptor:
    """Build a `PlatformDescriptor` for the host (or for the given overrides).

    Never raises: unsupported systems get `os_family=None`.
    """

    system = system if system is not None else _platform.system()
    machine = machine if machine is not None else _platform.machine()
    return PlatformDescriptor(
        system=system,
        os_family=_SYSTEMS.get(system.lower()),
        machine=machine.lower(),
    )


def require_os_family(descriptor: PlatformDescriptor) -> OSFamily:
    """Return the OS family or raise `UnsupportedPlatformError`."""

    if descriptor.os_family is None:
        raise UnsupportedPlatformError(descriptor.system)
    return descriptor.os_family
