"""Core configuration.

Centralizes environment variables (pydantic-settings) so adapters (HTTP,
subprocess probes) and the CLI read timeouts and endpoints consistently.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "webdriver-installer"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "webdriver-installer"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "webdriver-installer"
    return Path.home() / ".config" / "webdriver-installer"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if key:
            data[key] = value.strip().strip('"').strip("'")
    return data


def write_user_env_vars(values: dict[str, str], env_path: Path | None = None) -> Path:
    """Write/update variables in the user's global .env."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# webdriver-installer user config (.env)"]
    for key in sorted(existing):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Application settings.

    Sources, in order: process environment, `./.env`, then the user config
    `.env`. Every key is prefixed with `WEBDRIVER_INSTALLER_`.
    """

    model_config = SettingsConfigDict(
        env_prefix="WEBDRIVER_INSTALLER_",
        extra="ignore",
        case_sensitive=False,
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout per HTTP step (connect, read, write) for the tag API and downloads.",
    )
    download_timeout_seconds: float = Field(
        default=600.0,
        gt=0,
        description="Deadline for a whole archive download, however slowly bytes arrive.",
    )
    command_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout for external commands (`--version`, PowerShell).",
    )
    user_agent: str = Field(
        default="webdriver-installer/0.1",
        min_length=1,
        description="User-Agent for GitHub requests.",
    )
    github_api_base_url: str = Field(
        default="https://api.github.com",
        min_length=8,
        description="Base URL of the GitHub REST API.",
    )
    github_token: str | None = Field(
        default=None,
        description="Optional GitHub token, raises the anonymous API rate limit.",
    )
    output_directory: Path = Field(
        default=Path("drivers"),
        description="Default directory where driver binaries are placed.",
    )
