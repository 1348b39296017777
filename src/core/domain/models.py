"""Domain models (Pydantic v2).

These models describe *what* an install run works with (host platform,
driver layout, produced artifacts), not *how* it is obtained.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class OSFamily(str, Enum):
    """Host operating system families with driver builds."""

    MAC = "mac"
    LINUX = "linux"
    WINDOWS = "windows"

    def label(self) -> str:
        return {"mac": "macOS", "linux": "Linux", "windows": "Windows"}[self.value]


class PlatformDescriptor(BaseModel):
    """Host platform, detected once per run.

    `os_family` is `None` on hosts outside the supported families; callers
    that dispatch on it raise `UnsupportedPlatformError`.
    """

    model_config = ConfigDict(frozen=True)

    system: str = Field(
        ...,
        description="Raw OS name as reported by the interpreter (e.g. 'Linux', 'Darwin').",
    )
    os_family: OSFamily | None = Field(
        default=None,
        description="Normalized OS family, or None when unsupported.",
    )
    machine: str = Field(
        default="",
        description="CPU architecture (e.g. 'x86_64', 'arm64').",
    )

    @property
    def binary_suffix(self) -> str:
        return ".exe" if self.os_family is OSFamily.WINDOWS else ""

    @property
    def is_supported(self) -> bool:
        return self.os_family is not None


class DriverSpec(BaseModel):
    """Static layout of one browser driver's releases.

    Templates use `str.format` fields: `{repository}`, `{version}`,
    `{platform}` and, for the entry path, `{binary}`.
    """

    model_config = ConfigDict(frozen=True)

    browser_name: str = Field(..., min_length=1)
    driver_name: str = Field(..., min_length=1)
    repository: str = Field(
        ...,
        pattern=r"^[\w.-]+/[\w.-]+$",
        description="owner/repo identifier on GitHub.",
    )
    archive_url_template: str = Field(..., min_length=1)
    entry_path_template: str = Field(default="{binary}")
    platform_tags: dict[OSFamily, str] = Field(
        ...,
        description="Archive platform tag per OS family (e.g. linux -> 'linux64').",
    )
    is_zip: bool = Field(default=True)

    @property
    def output_file_name(self) -> str:
        return self.driver_name


class InstalledArtifact(BaseModel):
    """A driver binary written by `ArchiveInstaller.install_binary`."""

    path: Path
    source_url: str
    name_in_archive: str
    size: int = Field(default=0, ge=0)


class InstallOutcome(BaseModel):
    """Per-browser result of the install pipeline."""

    browser_name: str
    driver_name: str
    browser_version: str | None = None
    driver_version: str | None = None
    previous_driver_version: str | None = None
    artifact: InstalledArtifact | None = None
    skipped: bool = Field(
        default=False,
        description="True when the installed driver already matched the resolved version.",
    )
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
