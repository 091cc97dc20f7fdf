"""
Global configuration management

Settings for locating, downloading and installing prebuilt release binaries.
"""

from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field


DEFAULT_BINARY_VERSION = "v0.24.0"


class Config(BaseModel):
    """
    Global configuration for binfetch.

    Defaults install rustywind from its GitHub releases. Any other
    project publishing `{app}-{version}-{target}` archives works by
    overriding `app_name` and `repo`.
    """

    # Release source
    app_name: str = Field(default="rustywind", description="Executable and asset name prefix")
    repo: str = Field(default="avencera/rustywind", description="Release repository as owner/name")
    api_host: str = Field(
        default="api.github.com",
        description="Release API host; the only host that ever receives the auth token",
    )
    user_agent: str = Field(default="rustywind", description="User-agent sent with every request")
    binary_version: str = Field(
        default=DEFAULT_BINARY_VERSION, description="Release tag installed when none is given"
    )

    # Paths
    cache_dir: Optional[Path] = Field(
        default=None,
        description="Download cache directory (None for a per-version temp directory)",
    )
    bin_dir: Path = Field(
        default_factory=lambda: Path.cwd() / "bin",
        description="Directory the executable is extracted into",
    )

    # Timeouts
    connect_timeout_sec: float = Field(
        default=30.0, description="Connection timeout in seconds"
    )
    read_timeout_sec: float = Field(
        default=300.0, description="Read timeout in seconds (per chunk while streaming)"
    )
    extract_timeout_sec: Optional[float] = Field(
        default=None, description="Timeout for the extraction process (None to wait forever)"
    )

    # Transfer
    max_redirects: int = Field(default=5, description="Longest 302 chain that is followed")
    chunk_size: int = Field(default=64 * 1024, description="Streaming chunk size in bytes")
    show_progress: bool = Field(default=True, description="Show a tqdm progress bar for downloads")

    # Logging
    log_level: str = Field(
        default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    class Config:
        arbitrary_types_allowed = True

    @property
    def api_url(self) -> str:
        return f"https://{self.api_host}"

    def resolve_cache_dir(self, version: str) -> Path:
        """
        Cache directory for a given release version.

        An explicit `cache_dir` wins; otherwise each version gets its own
        directory under the system temp dir, created on first use.
        """
        if self.cache_dir is not None:
            return Path(self.cache_dir)
        from binfetch.downloader.cache import get_cache_path

        return get_cache_path(self.app_name, version)

    def ensure_dirs(self, version: Optional[str] = None) -> None:
        """Create necessary directories if they don't exist"""
        self.resolve_cache_dir(version or self.binary_version).mkdir(parents=True, exist_ok=True)
        self.bin_dir.mkdir(parents=True, exist_ok=True)
