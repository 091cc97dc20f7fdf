"""
Binary installer

Installs a prebuilt release binary for the host platform:

    Init -> ResolvingAsset -> Downloading (cache miss only) -> Extracting
         -> FixingPermissions (not on Windows) -> Done

A failure while downloading, extracting or fixing permissions deletes
the cached archive before the error is re-raised, so the next run starts
from a clean download. Nothing is retried automatically.
"""

import asyncio
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from binfetch.client.http import HTTPClient
from binfetch.core.config import Config
from binfetch.downloader.cache import (
    get_asset_name,
    invalidate,
    resolve_cache_path,
    should_use_cache,
)
from binfetch.downloader.release import ReleaseLocator, auth_headers
from binfetch.models.release import InstallRequest
from binfetch.runtime.binaries.archive import Archiver, WINDOWS_EXECUTABLE_SUFFIX, make_executable
from binfetch.runtime.binaries.platforms import PlatformToolchain, select_toolchain
from binfetch.runtime.binaries.registry import detect_target
from binfetch.utils.logging import get_logger, set_log_level
from binfetch.utils.platform import get_os_family, is_windows

logger = get_logger(__name__)


class InstallState(Enum):
    """Installer progress, exposed for diagnostics"""
    INIT = "init"
    RESOLVING_ASSET = "resolving_asset"
    DOWNLOADING = "downloading"
    EXTRACTING = "extracting"
    FIXING_PERMISSIONS = "fixing_permissions"
    DONE = "done"
    CLEANING_CACHE = "cleaning_cache"
    FAILED = "failed"


class BinaryInstaller:
    """
    Downloads, caches, extracts and installs one release binary.

    Usage:
        installer = BinaryInstaller(Config())
        exe = installer.install(InstallRequest(
            version="v0.24.0",
            target="x86_64-unknown-linux-musl",
            dest_dir=Path("bin"),
        ))
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        os_family: Optional[str] = None,
        http_client: Optional[HTTPClient] = None,
        toolchain: Optional[PlatformToolchain] = None,
    ):
        """
        Args:
            config: Release source, paths and timeouts (defaults to Config())
            os_family: Platform family to install for (defaults to the host)
            http_client: Client for API requests and non-Windows downloads
            toolchain: Downloader/extractor pair (selected from os_family by default)
        """
        self.config = config or Config()
        set_log_level(self.config.log_level)
        self.os_family = os_family or get_os_family()
        self.http = http_client or HTTPClient.from_config(self.config)
        self.toolchain = toolchain or select_toolchain(
            self.os_family, self.http, self.config.extract_timeout_sec
        )
        self.locator = ReleaseLocator(self.http)
        self.archiver = Archiver(self.toolchain.extractor, self.config.app_name)
        self.state = InstallState.INIT

    def install(self, request: InstallRequest) -> Path:
        """
        Run one install.

        Args:
            request: What to install and where

        Returns:
            Path to the installed executable

        Raises:
            PreconditionError: If version or target is missing
            BinfetchError: Any download, extraction or permission failure,
                after the cached archive has been removed
        """
        self.state = InstallState.INIT
        request.validate()

        cache_dir = self.config.resolve_cache_dir(request.version)
        cache_dir.mkdir(parents=True, exist_ok=True)
        Path(request.dest_dir).mkdir(parents=True, exist_ok=True)

        self.state = InstallState.RESOLVING_ASSET
        cache_path = resolve_cache_path(
            cache_dir, self.config.app_name, request.version, request.target, self.os_family
        )

        if should_use_cache(cache_path, request.force):
            logger.info(f"Using cached download: {cache_path}")
        else:
            self.state = InstallState.DOWNLOADING
            try:
                self._download(request, cache_path)
            except Exception:
                logger.info("Deleting invalid download cache")
                self._discard_cache(cache_path)
                raise

        logger.info(f"Unzipping to {request.dest_dir}")
        try:
            self.state = InstallState.EXTRACTING
            executable = self.archiver.extract(cache_path, request.dest_dir)

            if self.toolchain.needs_chmod:
                self.state = InstallState.FIXING_PERMISSIONS
                make_executable(executable)
        except Exception:
            logger.info("Deleting invalid download")
            self._discard_cache(cache_path)
            raise

        self.state = InstallState.DONE
        logger.info(f"✓ Installed {self.config.app_name} to {executable}")
        return executable

    async def install_async(self, request: InstallRequest) -> Path:
        """Run `install` in a worker thread"""
        return await asyncio.to_thread(self.install, request)

    def _download(self, request: InstallRequest, cache_path: Path) -> None:
        asset_name = get_asset_name(
            self.config.app_name, request.version, request.target, self.os_family
        )
        release = self.locator.locate(self.config.repo, request.version, request.token)
        asset = self.locator.find_asset(release, asset_name, cache_path)

        logger.info(f"Downloading from: {asset.download_url}")
        logger.info(f"Downloading to: {asset.local_cache_path}")

        headers = auth_headers(request.token)
        headers["accept"] = "application/octet-stream"
        self.toolchain.downloader.download_to_file(
            asset.download_url, asset.local_cache_path, headers
        )

    def _discard_cache(self, cache_path: Path) -> None:
        # invalidate() never raises
        self.state = InstallState.CLEANING_CACHE
        if invalidate(cache_path):
            logger.debug(f"Removed {cache_path}")
        self.state = InstallState.FAILED


def get_binary_path(bin_dir: Union[str, Path], app_name: str, os_family: Optional[str] = None) -> Path:
    """Where the installed executable lives: bin/app or bin/app.exe on Windows"""
    suffix = WINDOWS_EXECUTABLE_SUFFIX if is_windows(os_family or get_os_family()) else ""
    return Path(bin_dir) / f"{app_name}{suffix}"


def ensure_binary(
    version: Optional[str] = None,
    bin_dir: Optional[Path] = None,
    config: Optional[Config] = None,
    force: bool = False,
    token: Optional[str] = None,
    os_family: Optional[str] = None,
    cpu_arch: Optional[str] = None,
) -> Path:
    """
    Install the configured binary for the running host.

    Args:
        version: Release tag (defaults to config.binary_version)
        bin_dir: Destination directory (defaults to config.bin_dir)
        config: Configuration (defaults to Config())
        force: Ignore any cached download
        token: Release API token
        os_family: Override the detected OS family
        cpu_arch: Override the detected CPU architecture

    Returns:
        Path to the installed executable
    """
    config = config or Config()
    os_family = os_family or get_os_family()
    request = InstallRequest(
        version=version or config.binary_version,
        target=detect_target(os_family, cpu_arch),
        dest_dir=Path(bin_dir or config.bin_dir),
        force=force,
        token=token,
    )
    return BinaryInstaller(config, os_family=os_family).install(request)
