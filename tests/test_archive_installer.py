"""Tests for ArchiveInstaller, network replaced by httpx.MockTransport."""
import asyncio
import io
import os
import random
import stat
import tarfile
import zipfile

import httpx
import pytest

from adapters.archive_installer import ArchiveInstaller, extract_entry
from core.config import AppSettings
from core.domain.errors import ArchiveEntryMissingError, DownloadError, RemoteResolutionError

ENTRY = "operadriver_linux64/operadriver"
PAYLOAD = b"\x7fELF fake operadriver binary"
ARCHIVE_URL = "https://github.com/operasoftware/operachromiumdriver/releases/download/v.114.0.5735.90/operadriver_linux64.zip"


def build_zip(entries: dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, data in entries.items():
            zf.writestr(name, data)
    return buf.getvalue()


def build_tar_gz(entries: dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tf:
        for name, data in entries.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tf.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def serving(body: bytes, status_code: int = 200, seen: list | None = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, content=body)

    return httpx.MockTransport(handler)


def failing(exc_type) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_type("boom", request=request)

    return httpx.MockTransport(handler)


def test_install_zip_round_trip(settings, tmp_path):
    archive = build_zip({"operadriver_linux64/": b"", ENTRY: PAYLOAD, "operadriver_linux64/sha512_sum": b"x"})
    installer = ArchiveInstaller(settings, transport=serving(archive))

    artifact = asyncio.run(installer.install_binary(ARCHIVE_URL, ENTRY, "operadriver", tmp_path, True))

    target = tmp_path / "operadriver"
    assert artifact.path == target
    assert artifact.size == len(PAYLOAD)
    assert artifact.source_url == ARCHIVE_URL
    assert target.read_bytes() == PAYLOAD
    if os.name != "nt":
        assert target.stat().st_mode & stat.S_IXUSR
    assert sorted(p.name for p in tmp_path.iterdir()) == ["operadriver"]


def test_install_tarball_round_trip(settings, tmp_path):
    archive = build_tar_gz({"geckodriver": PAYLOAD})
    installer = ArchiveInstaller(settings, transport=serving(archive))

    artifact = asyncio.run(
        installer.install_binary("https://example.test/driver.tar.gz", "geckodriver", "geckodriver", tmp_path / "bin", False)
    )
    assert artifact.path.read_bytes() == PAYLOAD


def test_install_overwrites_existing(settings, tmp_path):
    (tmp_path / "operadriver").write_bytes(b"old")
    installer = ArchiveInstaller(settings, transport=serving(build_zip({ENTRY: PAYLOAD})))
    asyncio.run(installer.install_binary(ARCHIVE_URL, ENTRY, "operadriver", tmp_path, True))
    assert (tmp_path / "operadriver").read_bytes() == PAYLOAD


def test_missing_entry_writes_nothing(settings, tmp_path):
    archive = build_zip({"operadriver": PAYLOAD})
    installer = ArchiveInstaller(settings, transport=serving(archive))
    out = tmp_path / "out"

    with pytest.raises(ArchiveEntryMissingError) as excinfo:
        asyncio.run(installer.install_binary(ARCHIVE_URL, ENTRY, "operadriver", out, True))

    assert excinfo.value.name_in_archive == ENTRY
    assert ENTRY in str(excinfo.value)
    assert not out.exists()


def test_unreadable_archive(settings, tmp_path):
    installer = ArchiveInstaller(settings, transport=serving(b"<html>not a zip</html>"))
    with pytest.raises(ArchiveEntryMissingError, match="unreadable"):
        asyncio.run(installer.install_binary(ARCHIVE_URL, ENTRY, "operadriver", tmp_path, True))
    assert list(tmp_path.iterdir()) == []


def test_directory_entry_is_not_a_binary():
    with pytest.raises(ArchiveEntryMissingError):
        extract_entry(build_zip({"operadriver_linux64/": b""}), "operadriver_linux64/", is_zip=True)


def test_entry_match_is_exact():
    archive = build_zip({"./" + ENTRY: PAYLOAD})
    with pytest.raises(ArchiveEntryMissingError):
        extract_entry(archive, ENTRY, is_zip=True)


def test_download_http_error(settings, tmp_path):
    installer = ArchiveInstaller(settings, transport=serving(b"Not Found", status_code=404))
    with pytest.raises(DownloadError, match="HTTP 404"):
        asyncio.run(installer.install_binary(ARCHIVE_URL, ENTRY, "operadriver", tmp_path, True))
    assert list(tmp_path.iterdir()) == []


def test_download_network_error(settings):
    installer = ArchiveInstaller(settings, transport=failing(httpx.ConnectError))
    with pytest.raises(DownloadError):
        asyncio.run(installer.fetch_bytes(ARCHIVE_URL))


def test_download_timeout(settings):
    installer = ArchiveInstaller(settings, transport=failing(httpx.ReadTimeout))
    with pytest.raises(DownloadError, match="timed out"):
        asyncio.run(installer.fetch_bytes(ARCHIVE_URL))


def test_fetch_latest_tag(settings):
    seen: list[httpx.Request] = []
    installer = ArchiveInstaller(settings, transport=serving(b'{"tag_name": "v.114.0.5735.90"}', seen=seen))

    tag = asyncio.run(installer.fetch_latest_github_tag("operasoftware/operachromiumdriver"))

    assert tag == "v.114.0.5735.90"
    assert str(seen[0].url) == "https://api.github.com/repos/operasoftware/operachromiumdriver/releases/latest"
    assert "authorization" not in seen[0].headers


def test_fetch_latest_tag_sends_token():
    settings = AppSettings(_env_file=None, github_token="ghp_test")
    seen: list[httpx.Request] = []
    installer = ArchiveInstaller(settings, transport=serving(b'{"tag_name": "v1"}', seen=seen))
    asyncio.run(installer.fetch_latest_github_tag("owner/repo"))
    assert seen[0].headers["authorization"] == "Bearer ghp_test"


@pytest.mark.parametrize(
    "body, status_code",
    [
        (b'{"tag_name": ""}', 200),
        (b'{"message": "Not Found"}', 404),
        (b"[]", 200),
        (b"not json", 200),
    ],
)
def test_fetch_latest_tag_failures(settings, body, status_code):
    installer = ArchiveInstaller(settings, transport=serving(body, status_code=status_code))
    with pytest.raises(RemoteResolutionError):
        asyncio.run(installer.fetch_latest_github_tag("owner/repo"))


def test_fetch_latest_tag_unreachable(settings):
    installer = ArchiveInstaller(settings, transport=failing(httpx.ConnectError))
    with pytest.raises(RemoteResolutionError):
        asyncio.run(installer.fetch_latest_github_tag("owner/repo"))


def compressible_payload() -> bytes:
    rng = random.Random(0)
    words = ["operadriver", "chromium", "webdriver", "session", "capabilities", "114.0.5735.90"]
    return " ".join(rng.choice(words) for _ in range(4000)).encode()


def flip(data: bytes, start: int, count: int = 40) -> bytes:
    corrupted = bytearray(data)
    for i in range(start, start + count):
        corrupted[i] ^= 0xFF
    return bytes(corrupted)


def test_corrupt_deflate_entry_is_unreadable(settings, tmp_path):
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(ENTRY, compressible_payload())
    # Local header is 30 bytes plus the entry name; compressed data follows.
    archive = flip(buf.getvalue(), 30 + len(ENTRY) + 16)
    installer = ArchiveInstaller(settings, transport=serving(archive))

    with pytest.raises(ArchiveEntryMissingError, match="unreadable zip archive"):
        asyncio.run(installer.install_binary(ARCHIVE_URL, ENTRY, "operadriver", tmp_path, True))
    assert list(tmp_path.iterdir()) == []


def test_corrupt_tar_gz_is_unreadable(settings, tmp_path):
    archive = build_tar_gz({"geckodriver": compressible_payload()})
    archive = flip(archive, len(archive) // 2)
    installer = ArchiveInstaller(settings, transport=serving(archive))

    with pytest.raises(ArchiveEntryMissingError, match="unreadable tar archive"):
        asyncio.run(
            installer.install_binary("https://example.test/driver.tar.gz", "geckodriver", "geckodriver", tmp_path, False)
        )
    assert list(tmp_path.iterdir()) == []


def test_slow_download_hits_overall_deadline():
    settings = AppSettings(_env_file=None, download_timeout_seconds=0.3)

    async def trickle():
        while True:
            await asyncio.sleep(0.05)
            yield b"x"

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=trickle())

    installer = ArchiveInstaller(settings, transport=httpx.MockTransport(handler))
    with pytest.raises(DownloadError, match="timed out after 0.3s overall"):
        asyncio.run(installer.fetch_bytes(ARCHIVE_URL))
