"""
Data models for release installs.

InstallRequest and AssetDescriptor are plain frozen dataclasses built by
the caller and the installer. ReleaseMetadata / ReleaseAsset are pydantic
models parsed straight from the release API JSON.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from binfetch.core.exceptions import PreconditionError


@dataclass(frozen=True)
class InstallRequest:
    """One install of one release asset"""
    version: str
    target: str
    dest_dir: Path
    force: bool = False
    token: Optional[str] = None

    def validate(self) -> None:
        """
        Check the fields the pipeline cannot run without.

        Raises:
            PreconditionError: If version or target is missing
        """
        if not self.version:
            raise PreconditionError("Missing version")
        if not self.target:
            raise PreconditionError("Missing target")

    def __repr__(self) -> str:
        # keep the token out of logs
        return (
            f"InstallRequest(version={self.version!r}, target={self.target!r}, "
            f"dest_dir={str(self.dest_dir)!r}, force={self.force}, "
            f"token={'***' if self.token else None})"
        )


@dataclass(frozen=True)
class AssetDescriptor:
    """A concrete downloadable asset and where it is cached locally"""
    name: str
    download_url: str
    local_cache_path: Path


class ReleaseAsset(BaseModel):
    """A single file attached to a release"""

    name: str = Field(..., description="Asset file name")
    url: str = Field(..., description="API URL serving the asset bytes")
    download_count: Optional[int] = Field(default=None, description="Download counter")

    model_config = ConfigDict(extra="allow")


class ReleaseMetadata(BaseModel):
    """
    Release as returned by `GET /repos/{owner}/{repo}/releases/tags/{tag}`.

    Unknown fields are kept so the full document can be exported.
    """

    tag_name: Optional[str] = Field(default=None, description="Release tag")
    assets: List[ReleaseAsset] = Field(default_factory=list, description="Downloadable assets")

    model_config = ConfigDict(extra="allow")

    _raw_body: Optional[str] = PrivateAttr(default=None)

    @property
    def raw_body(self) -> str:
        """Response body the release was parsed from, or the model as JSON"""
        if self._raw_body is not None:
            return self._raw_body
        return self.model_dump_json()

    def asset_names(self) -> List[str]:
        return [asset.name for asset in self.assets]
