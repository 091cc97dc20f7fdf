"""
Download cache for release assets

A cached asset is simply a file named after the asset in the cache
directory. There is no index and no partial-download marker, so a file
that exists is treated as complete; every failed download must remove
its file.
"""

import tempfile
from pathlib import Path
from typing import Union

from binfetch.utils.logging import get_logger
from binfetch.utils.platform import is_windows

logger = get_logger(__name__)


def get_archive_extension(os_family: str) -> str:
    """Archive format published for an OS family"""
    return ".zip" if is_windows(os_family) else ".tar.gz"


def get_asset_name(app_name: str, version: str, target: str, os_family: str) -> str:
    """
    Release asset name, e.g. "rustywind-v1.0.0-x86_64-unknown-linux-musl.tar.gz"
    """
    return "-".join([app_name, version, target]) + get_archive_extension(os_family)


def get_cache_path(app_name: str, version: str) -> Path:
    """
    Default per-version cache directory under the system temp dir.

    Creates the directory if needed.
    """
    cache_dir = Path(tempfile.gettempdir()) / f"{app_name}-cache-{version}"
    cache_dir.mkdir(parents=True, exist_ok=True)
    return cache_dir


def resolve_cache_path(
    cache_dir: Union[str, Path],
    app_name: str,
    version: str,
    target: str,
    os_family: str,
) -> Path:
    """Where the asset for (app, version, target) lives in the cache"""
    return Path(cache_dir) / get_asset_name(app_name, version, target, os_family)


def should_use_cache(path: Path, force: bool) -> bool:
    """True when a cached asset exists and the caller did not force a download"""
    if force:
        return False
    return path.is_file()


def invalidate(path: Path) -> bool:
    """
    Remove a cached asset, best effort.

    A missing file is not an error. Any other failure is logged and
    swallowed so cleanup never hides the error that triggered it.

    Returns:
        True if a file was removed
    """
    try:
        path.unlink()
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.warning(f"Could not delete cached download {path}: {e}")
        return False
