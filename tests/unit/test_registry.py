"""
Tests for target triple resolution
"""

import pytest
from unittest.mock import patch

from binfetch.core.exceptions import UnsupportedPlatformError
from binfetch.runtime.binaries.registry import detect_target, resolve_target
from binfetch.utils.platform import get_cpu_arch, get_os_family


class TestResolveTarget:
    """Test the OS family / architecture table"""

    @pytest.mark.parametrize("os_family,cpu_arch,expected", [
        ("darwin", "x64", "x86_64-apple-darwin"),
        ("darwin", "arm64", "aarch64-apple-darwin"),
        ("win32", "x64", "x86_64-pc-windows-msvc"),
        ("win32", "ia32", "i686-pc-windows-msvc"),
        ("linux", "x64", "x86_64-unknown-linux-musl"),
        ("linux", "arm", "arm-unknown-linux-gnueabihf"),
        ("linux", "arm64", "aarch64-unknown-linux-gnu"),
        ("linux", "ppc64", "powerpc64le-unknown-linux-gnu"),
        ("linux", "ia32", "i686-unknown-linux-musl"),
    ])
    def test_documented_targets(self, os_family, cpu_arch, expected):
        assert resolve_target(os_family, cpu_arch) == expected

    @pytest.mark.parametrize("os_family,expected", [
        ("darwin", "aarch64-apple-darwin"),
        ("win32", "i686-pc-windows-msvc"),
        ("linux", "i686-unknown-linux-musl"),
    ])
    def test_unknown_arch_falls_back(self, os_family, expected):
        assert resolve_target(os_family, "s390x") == expected

    @pytest.mark.parametrize("os_family", ["freebsd", "sunos", "aix", ""])
    def test_unsupported_os_family(self, os_family):
        with pytest.raises(UnsupportedPlatformError) as exc_info:
            resolve_target(os_family, "x64")

        assert exc_info.value.os_name == os_family
        assert "Unknown platform" in str(exc_info.value)


class TestHostDetection:
    """Test host platform normalization"""

    @pytest.mark.parametrize("system,machine,expected", [
        ("Linux", "x86_64", "x86_64-unknown-linux-musl"),
        ("Linux", "aarch64", "aarch64-unknown-linux-gnu"),
        ("Linux", "armv7l", "arm-unknown-linux-gnueabihf"),
        ("Linux", "ppc64le", "powerpc64le-unknown-linux-gnu"),
        ("Darwin", "arm64", "aarch64-apple-darwin"),
        ("Darwin", "x86_64", "x86_64-apple-darwin"),
        ("Windows", "AMD64", "x86_64-pc-windows-msvc"),
        ("Windows", "x86", "i686-pc-windows-msvc"),
    ])
    def test_detect_target(self, system, machine, expected):
        with patch("platform.system", return_value=system), \
                patch("platform.machine", return_value=machine):
            assert detect_target() == expected

    def test_detect_unsupported_host(self):
        with patch("platform.system", return_value="FreeBSD"), \
                patch("platform.machine", return_value="amd64"):
            assert get_os_family() == "FreeBSD"
            assert get_cpu_arch() == "x64"
            with pytest.raises(UnsupportedPlatformError) as exc_info:
                detect_target()

        assert exc_info.value.os_name == "FreeBSD"

    def test_explicit_overrides_win(self):
        with patch("platform.system", return_value="Linux"):
            assert detect_target("darwin", "x64") == "x86_64-apple-darwin"
