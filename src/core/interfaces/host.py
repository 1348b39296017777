"""Host and remote collaborators used by driver installers."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable

from core.domain.models import InstalledArtifact


@runtime_checkable
class HostProbe(Protocol):
    """Best-effort version lookups on the local machine."""

    async def get_mac_app_version(self, app_name: str) -> str | None:
        ...

    async def get_command_output_or_none(self, argv: Sequence[str]) -> str | None:
        ...

    async def get_windows_exe_version(self, path: str) -> str | None:
        ...


@runtime_checkable
class ReleaseFetcher(Protocol):
    """Release tag lookup plus archive download/extraction."""

    async def fetch_latest_github_tag(self, repository: str) -> str:
        ...

    async def install_binary(
        self,
        archive_url: str,
        name_in_archive: str,
        output_name: str,
        output_directory: Path,
        is_zip: bool,
    ) -> InstalledArtifact:
        ...
