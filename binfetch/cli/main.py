"""
Main CLI entry point for binfetch.
"""
import argparse
import os
import sys
from pathlib import Path

from binfetch import __version__
from binfetch.core.exceptions import BinfetchError
from binfetch.utils.logging import set_log_level, get_logger

logger = get_logger(__name__)

TOKEN_ENV_VAR = "GITHUB_TOKEN"


def _build_config(args: argparse.Namespace):
    from binfetch.core.config import Config

    overrides = {}
    if getattr(args, "cache_dir", None):
        overrides["cache_dir"] = Path(args.cache_dir)
    if getattr(args, "dest", None):
        overrides["bin_dir"] = Path(args.dest)
    if getattr(args, "no_progress", False):
        overrides["show_progress"] = False
    if getattr(args, "verbose", False):
        overrides["log_level"] = "DEBUG"
    elif getattr(args, "quiet", False):
        overrides["log_level"] = "CRITICAL"
    return Config(**overrides)


def cmd_install(args: argparse.Namespace) -> int:
    """Download and install the release binary"""
    from binfetch.models.release import InstallRequest
    from binfetch.runtime.binaries.installer import BinaryInstaller
    from binfetch.runtime.binaries.registry import detect_target
    from binfetch.utils.platform import get_cpu_arch, get_os_family

    config = _build_config(args)
    os_family = get_os_family()

    if args.force:
        logger.info("--force, ignoring caches")

    logger.info(f"Downloading: {config.app_name}")
    logger.info(f" from: https://github.com/{config.repo}")
    logger.info(f" for platform: {get_cpu_arch()}-{os_family}")

    try:
        request = InstallRequest(
            version=args.version or config.binary_version,
            target=args.target or detect_target(os_family),
            dest_dir=config.bin_dir,
            force=args.force,
            token=os.environ.get(TOKEN_ENV_VAR),
        )
        BinaryInstaller(config, os_family=os_family).install(request)
    except BinfetchError as e:
        logger.error(f"Downloading {config.app_name} failed: {e}")
        return 1
    return 0


def cmd_target(args: argparse.Namespace) -> int:
    """Print the target triple for this host"""
    from binfetch.runtime.binaries.registry import detect_target

    try:
        print(detect_target())
    except BinfetchError as e:
        logger.error(str(e))
        return 1
    return 0


def cmd_export_metadata(args: argparse.Namespace) -> int:
    """Fetch release metadata and write it to a JSON file"""
    from binfetch.client.http import HTTPClient
    from binfetch.downloader.release import ReleaseLocator, export_release_metadata

    config = _build_config(args)
    locator = ReleaseLocator(HTTPClient.from_config(config))
    try:
        release = locator.locate(
            config.repo, args.version or config.binary_version, os.environ.get(TOKEN_ENV_VAR)
        )
        export_release_metadata(release, args.output)
    except BinfetchError as e:
        logger.error(f"Downloading {config.app_name} metadata failed: {e}")
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="binfetch",
        description="Install prebuilt release binaries for this platform",
    )
    parser.add_argument("--version", action="version", version=f"binfetch {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log critical errors")

    subparsers = parser.add_subparsers(dest="command")

    install_parser = subparsers.add_parser("install", help="Download and install the binary")
    install_parser.add_argument("--release", dest="version", help="Release tag to install")
    install_parser.add_argument("--target", help="Target triple (detected by default)")
    install_parser.add_argument("--dest", help="Directory to install into")
    install_parser.add_argument("--cache-dir", help="Download cache directory")
    install_parser.add_argument("--force", action="store_true", help="Ignore cached downloads")
    install_parser.add_argument("--no-progress", action="store_true", help="Hide the progress bar")

    subparsers.add_parser("target", help="Print the target triple for this host")

    export_parser = subparsers.add_parser("export-metadata", help="Save release metadata as JSON")
    export_parser.add_argument("--release", dest="version", help="Release tag to describe")
    export_parser.add_argument("--output", default="release.json", help="Output file")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        set_log_level("DEBUG")
    elif args.quiet:
        set_log_level("CRITICAL")

    if args.command == "install":
        return cmd_install(args)
    elif args.command == "target":
        return cmd_target(args)
    elif args.command == "export-metadata":
        return cmd_export_metadata(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
