"""
Prebuilt binary management: target resolution, extraction and installation.
"""

from binfetch.runtime.binaries.registry import resolve_target, detect_target
from binfetch.runtime.binaries.archive import Archiver, locate_executable, make_executable
from binfetch.runtime.binaries.platforms import PlatformToolchain, select_toolchain
from binfetch.runtime.binaries.installer import (
    BinaryInstaller,
    InstallState,
    ensure_binary,
    get_binary_path,
)

__all__ = [
    "resolve_target",
    "detect_target",
    "Archiver",
    "locate_executable",
    "make_executable",
    "PlatformToolchain",
    "select_toolchain",
    "BinaryInstaller",
    "InstallState",
    "ensure_binary",
    "get_binary_path",
]
