"""
Per-platform download and extraction toolchains

Windows downloads through PowerShell and extracts zips with
Expand-Archive; every other platform streams over HTTP and untars.
The toolchain is picked once, when the installer is built.
"""

from dataclasses import dataclass
from typing import Any, Optional

from binfetch.client.http import HTTPClient
from binfetch.client.powershell import PowerShellDownloader
from binfetch.downloader.cache import get_archive_extension
from binfetch.runtime.binaries.archive import ExpandArchiveExtractor, TarExtractor
from binfetch.utils.platform import is_windows


@dataclass
class PlatformToolchain:
    """Downloader/extractor pair for one OS family"""
    os_family: str
    downloader: Any
    extractor: Any
    archive_extension: str
    needs_chmod: bool


def _windows_toolchain(http_client: HTTPClient, extract_timeout: Optional[float]) -> PlatformToolchain:
    return PlatformToolchain(
        os_family="win32",
        downloader=PowerShellDownloader(http_client),
        extractor=ExpandArchiveExtractor(timeout=extract_timeout),
        archive_extension=get_archive_extension("win32"),
        needs_chmod=False,
    )


def _posix_toolchain(
    os_family: str, http_client: HTTPClient, extract_timeout: Optional[float]
) -> PlatformToolchain:
    return PlatformToolchain(
        os_family=os_family,
        downloader=http_client,
        extractor=TarExtractor(timeout=extract_timeout),
        archive_extension=get_archive_extension(os_family),
        needs_chmod=True,
    )


def select_toolchain(
    os_family: str,
    http_client: HTTPClient,
    extract_timeout: Optional[float] = None,
) -> PlatformToolchain:
    """Toolchain for `os_family` ("win32" gets PowerShell, everything else tar)"""
    if is_windows(os_family):
        return _windows_toolchain(http_client, extract_timeout)
    return _posix_toolchain(os_family, http_client, extract_timeout)
