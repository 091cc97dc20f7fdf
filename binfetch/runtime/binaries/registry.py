"""
Target triple registry

Closed table of the prebuilt targets published for each OS family.
Supporting a new platform means adding a row here, nothing else.
"""

from typing import Dict, Optional

from binfetch.core.exceptions import UnsupportedPlatformError
from binfetch.utils.platform import get_cpu_arch, get_os_family


# os family -> cpu arch -> triple
TARGETS: Dict[str, Dict[str, str]] = {
    "darwin": {
        "x64": "x86_64-apple-darwin",
    },
    "win32": {
        "x64": "x86_64-pc-windows-msvc",
    },
    "linux": {
        "x64": "x86_64-unknown-linux-musl",
        "arm": "arm-unknown-linux-gnueabihf",
        "arm64": "aarch64-unknown-linux-gnu",
        "ppc64": "powerpc64le-unknown-linux-gnu",
    },
}

# Used when the architecture has no row of its own
FALLBACK_TARGETS: Dict[str, str] = {
    "darwin": "aarch64-apple-darwin",
    "win32": "i686-pc-windows-msvc",
    "linux": "i686-unknown-linux-musl",
}


def resolve_target(os_family: str, cpu_arch: str) -> str:
    """
    Map an OS family and CPU architecture to a target triple.

    Args:
        os_family: "darwin", "win32" or "linux"
        cpu_arch: "x64", "arm", "arm64", "ppc64", ...

    Returns:
        Target triple, e.g. "x86_64-unknown-linux-musl"

    Raises:
        UnsupportedPlatformError: If no binaries exist for the OS family
    """
    if os_family not in FALLBACK_TARGETS:
        raise UnsupportedPlatformError(f"Unknown platform: {os_family}", os_name=os_family)
    return TARGETS[os_family].get(cpu_arch, FALLBACK_TARGETS[os_family])


def detect_target(os_family: Optional[str] = None, cpu_arch: Optional[str] = None) -> str:
    """Target triple for the running host"""
    return resolve_target(os_family or get_os_family(), cpu_arch or get_cpu_arch())
