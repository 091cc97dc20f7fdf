"""
Host platform detection

Normalizes `platform.system()` / `platform.machine()` into the OS family
and CPU architecture names used by the target table.
"""

import platform

OS_FAMILIES = {
    "darwin": "darwin",
    "windows": "win32",
    "linux": "linux",
}

CPU_ARCHES = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "arm",
    "armv6l": "arm",
    "arm": "arm",
    "ppc64le": "ppc64",
    "ppc64": "ppc64",
    "i386": "ia32",
    "i686": "ia32",
    "x86": "ia32",
}


def get_platform() -> str:
    """Raw OS name, e.g. "Linux", "Darwin", "Windows" """
    return platform.system()


def get_os_family() -> str:
    """
    OS family of the host: "darwin", "win32" or "linux".

    Unknown systems are returned exactly as `platform.system()` reports
    them so the target resolver can name them in its error.
    """
    system = get_platform()
    return OS_FAMILIES.get(system.lower(), system)


def get_cpu_arch() -> str:
    """CPU architecture of the host: "x64", "arm64", "arm", "ppc64", "ia32", ..."""
    machine = platform.machine().lower()
    return CPU_ARCHES.get(machine, machine)


def is_windows(os_family: str) -> bool:
    return os_family == "win32"
