"""Download and installation of binaries from release archives.

`ArchiveInstaller` covers the network half of an install: the latest release
tag of a GitHub repository, and "download archive, pull one entry out, write
it as an executable". Everything is held in memory; the target file is only
written once the entry has been fully read.
"""

from __future__ import annotations

import asyncio
import io
import logging
import lzma
import os
import tarfile
import tempfile
import zipfile
import zlib
from pathlib import Path

import httpx

from adapters.http_client import build_async_client, github_headers
from core.config import AppSettings
from core.domain.errors import ArchiveEntryMissingError, DownloadError, RemoteResolutionError
from core.domain.models import InstalledArtifact

log = logging.getLogger(__name__)

_EXECUTABLE_MODE = 0o755

# Corrupt or unsupported member data surfaces while reading, not while opening.
_ZIP_READ_ERRORS = (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError, RuntimeError)
# gzip.BadGzipFile and bz2 stream errors are OSError subclasses.
_TAR_READ_ERRORS = (tarfile.TarError, zlib.error, lzma.LZMAError, EOFError, OSError)


def _read_zip_entry(data: bytes, name_in_archive: str, archive_url: str) -> bytes:
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            try:
                info = zf.getinfo(name_in_archive)
            except KeyError:
                raise ArchiveEntryMissingError(name_in_archive, archive_url) from None
            if info.is_dir():
                raise ArchiveEntryMissingError(name_in_archive, archive_url, "entry is a directory")
            return zf.read(info)
    except _ZIP_READ_ERRORS as exc:
        raise ArchiveEntryMissingError(name_in_archive, archive_url, f"unreadable zip archive ({exc})") from exc


def _read_tar_entry(data: bytes, name_in_archive: str, archive_url: str) -> bytes:
    try:
        with tarfile.open(fileobj=io.BytesIO(data), mode="r:*") as tf:
            try:
                member = tf.getmember(name_in_archive)
            except KeyError:
                raise ArchiveEntryMissingError(name_in_archive, archive_url) from None
            fh = tf.extractfile(member) if member.isfile() else None
            if fh is None:
                raise ArchiveEntryMissingError(name_in_archive, archive_url, "entry is not a regular file")
            with fh:
                return fh.read()
    except _TAR_READ_ERRORS as exc:
        raise ArchiveEntryMissingError(name_in_archive, archive_url, f"unreadable tar archive ({exc})") from exc


def extract_entry(data: bytes, name_in_archive: str, *, is_zip: bool, archive_url: str = "<memory>") -> bytes:
    """Return the bytes of the entry whose path equals `name_in_archive`."""

    if is_zip:
        return _read_zip_entry(data, name_in_archive, archive_url)
    return _read_tar_entry(data, name_in_archive, archive_url)


def write_executable(output_directory: Path, output_name: str, payload: bytes) -> Path:
    """Atomically write `payload` to `output_directory/output_name` with exec bits."""

    output_directory.mkdir(parents=True, exist_ok=True)
    target = output_directory / output_name

    fd, tmp_name = tempfile.mkstemp(dir=output_directory, prefix=f".{output_name}.", suffix=".tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(payload)
        try:
            os.chmod(tmp_path, _EXECUTABLE_MODE)
        except OSError as exc:
            log.debug("chmod not supported for %s: %s", tmp_path, exc)
        os.replace(tmp_path, target)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    return target


class ArchiveInstaller:
    """Release tag lookup and archive-based binary installation.

    Implements `core.interfaces.host.ReleaseFetcher`.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    async def fetch_latest_github_tag(self, repository: str) -> str:
        """Raw tag name (vendor prefix included) of the latest release."""

        base = self._settings.github_api_base_url.rstrip("/")
        url = f"{base}/repos/{repository}/releases/latest"
        try:
            async with build_async_client(
                self._settings,
                extra_headers=github_headers(self._settings),
                transport=self._transport,
            ) as client:
                resp = await client.get(url)
        except httpx.HTTPError as exc:
            raise RemoteResolutionError(f"Cannot reach {url}: {exc!r}") from exc

        if resp.status_code != 200:
            raise RemoteResolutionError(f"{url} returned HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise RemoteResolutionError(f"{url} returned invalid JSON") from exc

        tag = data.get("tag_name") if isinstance(data, dict) else None
        if not isinstance(tag, str) or not tag.strip():
            raise RemoteResolutionError(f"No release tag found for {repository}")

        log.debug("Latest release of %s is %s", repository, tag)
        return tag.strip()

    async def _get(self, url: str) -> httpx.Response:
        async with build_async_client(self._settings, transport=self._transport) as client:
            return await client.get(url)

    async def fetch_bytes(self, url: str) -> bytes:
        """Download `url` fully into memory.

        `http_timeout_seconds` bounds each network step and
        `download_timeout_seconds` bounds the whole transfer.
        """

        log.info("Downloading %s", url)
        deadline = self._settings.download_timeout_seconds
        try:
            resp = await asyncio.wait_for(self._get(url), timeout=deadline)
        except asyncio.TimeoutError as exc:
            raise DownloadError(url, f"timed out after {deadline:g}s overall") from exc
        except httpx.TimeoutException as exc:
            raise DownloadError(url, f"timed out after {self._settings.http_timeout_seconds:g}s") from exc
        except httpx.HTTPError as exc:
            raise DownloadError(url, str(exc) or exc.__class__.__name__) from exc

        if not resp.is_success:
            raise DownloadError(url, f"HTTP {resp.status_code}")
        return resp.content

    async def install_binary(
        self,
        archive_url: str,
        name_in_archive: str,
        output_name: str,
        output_directory: Path,
        is_zip: bool,
    ) -> InstalledArtifact:
        """Download `archive_url` and install one entry as an executable."""

        data = await self.fetch_bytes(archive_url)
        payload = await asyncio.to_thread(
            extract_entry, data, name_in_archive, is_zip=is_zip, archive_url=archive_url
        )
        target = await asyncio.to_thread(write_executable, Path(output_directory), output_name, payload)
        log.info("Installed %s -> %s", name_in_archive, target)
        return InstalledArtifact(
            path=target,
            source_url=archive_url,
            name_in_archive=name_in_archive,
            size=len(payload),
        )
