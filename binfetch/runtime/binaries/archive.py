"""
Archive extraction and executable installation

Extraction is delegated to the platform's own tools:
- tar for .tar.gz archives on macOS and Linux
- PowerShell's Expand-Archive for .zip archives on Windows
"""

import os
import subprocess
from pathlib import Path
from typing import Optional, Union

from binfetch.client.powershell import escape_powershell_path
from binfetch.core.exceptions import (
    ExecutableNotFoundError,
    ExtractionFailedError,
    PermissionFixupError,
)
from binfetch.utils.logging import get_logger

logger = get_logger(__name__)

EXECUTABLE_MODE = 0o755
WINDOWS_EXECUTABLE_SUFFIX = ".exe"


class TarExtractor:
    """Extracts tarballs with the system `tar`"""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    def build_command(self, archive_path: Path, dest_dir: Path) -> list:
        return ["tar", "xvf", str(archive_path), "-C", str(dest_dir)]

    def extract(self, archive_path: Union[str, Path], dest_dir: Union[str, Path]) -> None:
        """
        Raises:
            ExtractionFailedError: If tar cannot be started or exits non-zero
        """
        command = self.build_command(Path(archive_path).resolve(), Path(dest_dir).resolve())
        try:
            result = subprocess.run(command, timeout=self.timeout)
        except (OSError, subprocess.TimeoutExpired) as e:
            raise ExtractionFailedError(f"tar could not run: {e}", cause=e) from e

        if result.returncode != 0:
            raise ExtractionFailedError(
                f"tar xvf exited with {result.returncode}", exit_code=result.returncode
            )
        logger.info("Unzipping completed successfully")


class ExpandArchiveExtractor:
    """
    Extracts zip archives with PowerShell's Expand-Archive.

    Expand-Archive can report problems on stderr while still exiting 0,
    so any stderr output counts as a failure.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    def build_command(self, archive_path: Path, dest_dir: Path) -> list:
        expand = " ".join([
            "Expand-Archive",
            "-Path", escape_powershell_path(archive_path),
            "-DestinationPath", escape_powershell_path(dest_dir),
            "-Force",
        ])
        return ["powershell", "-ExecutionPolicy", "Bypass", "-Command", expand]

    def extract(self, archive_path: Union[str, Path], dest_dir: Union[str, Path]) -> None:
        """
        Raises:
            ExtractionFailedError: If PowerShell fails, including a zero
                exit with output on stderr
        """
        command = self.build_command(Path(archive_path).resolve(), Path(dest_dir).resolve())
        try:
            result = subprocess.run(command, capture_output=True, text=True, timeout=self.timeout)
        except (OSError, subprocess.TimeoutExpired) as e:
            raise ExtractionFailedError(f"Expand-Archive could not run: {e}", cause=e) from e

        if result.returncode != 0:
            raise ExtractionFailedError(
                f"Expand-Archive exited with {result.returncode}: {result.stderr.strip()}",
                exit_code=result.returncode,
                stderr=result.stderr or None,
            )
        if result.stderr:
            logger.error(result.stderr.strip())
            raise ExtractionFailedError(result.stderr.strip(), stderr=result.stderr)

        logger.info("Expand-Archive completed")


def locate_executable(dest_dir: Union[str, Path], app_name: str) -> Path:
    """
    Find the extracted executable: `app_name`, then `app_name.exe`.

    Raises:
        ExecutableNotFoundError: If neither file exists in dest_dir
    """
    expected = Path(dest_dir) / app_name
    if expected.exists():
        return expected

    with_suffix = expected.with_name(app_name + WINDOWS_EXECUTABLE_SUFFIX)
    if with_suffix.exists():
        return with_suffix

    raise ExecutableNotFoundError(
        f"Expecting {app_name} or {app_name}{WINDOWS_EXECUTABLE_SUFFIX} unzipped into "
        f"{dest_dir}, didn't find one.",
        dest_dir=dest_dir,
    )


def make_executable(path: Union[str, Path]) -> None:
    """
    chmod 755 the installed binary.

    Raises:
        PermissionFixupError: If the mode cannot be changed
    """
    try:
        os.chmod(path, EXECUTABLE_MODE)
    except OSError as e:
        raise PermissionFixupError(f"Could not make {path} executable: {e}") from e


class Archiver:
    """Runs an extractor, then finds the executable it produced"""

    def __init__(self, extractor, app_name: str):
        self.extractor = extractor
        self.app_name = app_name

    def extract(self, archive_path: Union[str, Path], dest_dir: Union[str, Path]) -> Path:
        """
        Extract `archive_path` into `dest_dir`.

        Returns:
            Path to the extracted executable

        Raises:
            ExtractionFailedError: If the extractor fails
            ExecutableNotFoundError: If the archive held no executable
        """
        self.extractor.extract(archive_path, dest_dir)
        return locate_executable(dest_dir, self.app_name)
