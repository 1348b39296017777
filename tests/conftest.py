"""Shared fakes: no real browsers, subprocesses or network needed."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pytest

from core.config import AppSettings
from core.domain.models import InstalledArtifact
from core.platform import detect_platform


class FakeProbe:
    """In-memory `HostProbe` recording every lookup."""

    def __init__(
        self,
        *,
        mac_apps: dict[str, str] | None = None,
        commands: dict[tuple[str, ...], str] | None = None,
        windows_exes: dict[str, str] | None = None,
    ) -> None:
        self.mac_apps = mac_apps or {}
        self.commands = commands or {}
        self.windows_exes = windows_exes or {}
        self.calls: list[tuple[str, object]] = []

    async def get_mac_app_version(self, app_name: str) -> str | None:
        self.calls.append(("mac", app_name))
        return self.mac_apps.get(app_name)

    async def get_command_output_or_none(self, argv: Sequence[str]) -> str | None:
        self.calls.append(("command", tuple(argv)))
        return self.commands.get(tuple(argv))

    async def get_windows_exe_version(self, path: str) -> str | None:
        self.calls.append(("windows", path))
        return self.windows_exes.get(path)


class FakeReleases:
    """In-memory `ReleaseFetcher` that never touches the network or disk."""

    def __init__(self, tag: str = "v.114.0.5735.90") -> None:
        self.tag = tag
        self.tag_requests: list[str] = []
        self.installs: list[dict[str, object]] = []

    async def fetch_latest_github_tag(self, repository: str) -> str:
        self.tag_requests.append(repository)
        return self.tag

    async def install_binary(
        self,
        archive_url: str,
        name_in_archive: str,
        output_name: str,
        output_directory: Path,
        is_zip: bool,
    ) -> InstalledArtifact:
        self.installs.append(
            {
                "archive_url": archive_url,
                "name_in_archive": name_in_archive,
                "output_name": output_name,
                "output_directory": output_directory,
                "is_zip": is_zip,
            }
        )
        return InstalledArtifact(
            path=Path(output_directory) / output_name,
            source_url=archive_url,
            name_in_archive=name_in_archive,
        )


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(_env_file=None, command_timeout_seconds=5.0, http_timeout_seconds=5.0)


@pytest.fixture
def linux():
    return detect_platform(system="Linux", machine="x86_64")


@pytest.fixture
def mac():
    return detect_platform(system="Darwin", machine="arm64")


@pytest.fixture
def windows():
    return detect_platform(system="Windows", machine="AMD64")


@pytest.fixture
def freebsd():
    return detect_platform(system="FreeBSD", machine="amd64")
