"""
Basic usage examples for binfetch
"""

import asyncio
import os
from pathlib import Path

from binfetch import BinaryInstaller, Config, InstallRequest, ensure_binary
from binfetch.runtime.binaries import detect_target


# Example 1: Install rustywind for this machine
def install_for_host():
    """Detects the target triple and installs into ./bin"""
    exe = ensure_binary(token=os.environ.get("GITHUB_TOKEN"))
    print(f"Installed: {exe}")


# Example 2: Explicit version, target and directories
def explicit_request():
    """Pin everything instead of relying on detection"""
    config = Config(cache_dir=Path(".cache/rustywind"), show_progress=False)
    installer = BinaryInstaller(config, os_family="linux")

    exe = installer.install(InstallRequest(
        version="v0.24.0",
        target="x86_64-unknown-linux-musl",
        dest_dir=Path("vendor/bin"),
    ))
    print(f"Installed: {exe} ({installer.state.value})")


# Example 3: Another project that publishes the same asset layout
def other_project():
    """Any `{app}-{version}-{target}` release works"""
    config = Config(app_name="mytool", repo="me/mytool", user_agent="mytool")
    exe = ensure_binary(version="v1.2.0", config=config, force=True)
    print(f"Installed: {exe}")


# Example 4: From async code
async def install_async():
    """Runs the blocking install in a worker thread"""
    installer = BinaryInstaller()
    exe = await installer.install_async(InstallRequest(
        version="v0.24.0",
        target=detect_target(),
        dest_dir=Path("bin"),
    ))
    print(f"Installed: {exe}")


if __name__ == "__main__":
    install_for_host()
    # explicit_request()
    # other_project()
    # asyncio.run(install_async())
