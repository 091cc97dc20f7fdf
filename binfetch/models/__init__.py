"""
Data models for binfetch.
"""

from binfetch.models.release import (
    InstallRequest,
    AssetDescriptor,
    ReleaseAsset,
    ReleaseMetadata,
)

__all__ = [
    "InstallRequest",
    "AssetDescriptor",
    "ReleaseAsset",
    "ReleaseMetadata",
]
