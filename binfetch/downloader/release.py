"""
Release lookup against the GitHub releases API

Translates a version tag into the list of downloadable assets and picks
the one built for the requested target.
"""

import json
from pathlib import Path
from typing import Dict, Optional, Union

from pydantic import ValidationError

from binfetch.client.http import DEFAULT_API_HOST, HTTPClient
from binfetch.core.exceptions import (
    AssetNotFoundError,
    MalformedResponseError,
    MissingAssetsError,
    PreconditionError,
)
from binfetch.models.release import AssetDescriptor, ReleaseMetadata
from binfetch.utils.logging import get_logger

logger = get_logger(__name__)


def get_api_url(repo: str, tag: str, api_host: str = DEFAULT_API_HOST) -> str:
    return f"https://{api_host}/repos/{repo}/releases/tags/{tag}"


def auth_headers(token: Optional[str]) -> Dict[str, str]:
    if not token:
        return {}
    return {"authorization": f"token {token}"}


def parse_release(body: str) -> ReleaseMetadata:
    """
    Parse a release API response body.

    Raises:
        MalformedResponseError: If the body is not a JSON object
        MissingAssetsError: If the object has no assets list
    """
    try:
        data = json.loads(body)
    except ValueError as e:
        raise MalformedResponseError(f"Malformed API response: {e}", body=body) from e

    if not isinstance(data, dict):
        raise MalformedResponseError(
            f"Malformed API response: expected an object, got {type(data).__name__}", body=body
        )

    if not isinstance(data.get("assets"), list):
        raise MissingAssetsError(f"Bad API response: {body}", body=body)

    try:
        release = ReleaseMetadata(**data)
    except ValidationError as e:
        raise MalformedResponseError(f"Malformed API response: {e}", body=body) from e
    release._raw_body = body
    return release


class ReleaseLocator:
    """
    Looks up releases by tag on a single release host.

    Usage:
        locator = ReleaseLocator(HTTPClient())
        release = locator.locate("avencera/rustywind", "v0.24.0")
        asset = locator.find_asset(release, "rustywind-v0.24.0-x86_64-apple-darwin.tar.gz",
                                   Path("/tmp/rustywind-cache-v0.24.0"))
    """

    def __init__(self, http_client: HTTPClient):
        self.http = http_client

    def locate(self, repo: str, tag: str, token: Optional[str] = None) -> ReleaseMetadata:
        """
        Fetch release metadata for `tag`.

        Args:
            repo: Repository as "owner/name"
            tag: Release tag, e.g. "v0.24.0"
            token: Optional API token

        Returns:
            Parsed ReleaseMetadata

        Raises:
            PreconditionError: If no tag is given
            HttpStatusError: If the API does not answer 200
            MalformedResponseError: If the body is not JSON
            MissingAssetsError: If the release lists no assets
        """
        if not tag:
            raise PreconditionError("Missing version")

        logger.info(f"Finding release for {tag}")
        body = self.http.get(get_api_url(repo, tag, self.http.api_host), auth_headers(token))
        release = parse_release(body)
        logger.debug(f"Release {release.tag_name or tag} has assets: {release.asset_names()}")
        return release

    def find_asset(
        self,
        release: ReleaseMetadata,
        asset_name: str,
        cache_path: Union[str, Path],
    ) -> AssetDescriptor:
        """
        Pick the asset called exactly `asset_name`.

        Raises:
            AssetNotFoundError: If the release has no such asset
        """
        for asset in release.assets:
            if asset.name == asset_name:
                return AssetDescriptor(
                    name=asset.name,
                    download_url=asset.url,
                    local_cache_path=Path(cache_path),
                )
        raise AssetNotFoundError(
            f"Asset not found with name: {asset_name}",
            asset_name=asset_name,
            body=release.raw_body,
        )


def export_release_metadata(release: ReleaseMetadata, output_path: Union[str, Path]) -> Path:
    """
    Write release metadata to disk without per-asset download counts.

    Download counters change on every fetch; dropping them keeps the
    exported file stable between runs.
    """
    data = release.model_dump()
    for asset in data.get("assets", []):
        asset.pop("download_count", None)

    output = Path(output_path)
    output.write_text(json.dumps(data, indent=2), encoding="utf-8")
    logger.info(f"Wrote release metadata to {output}")
    return output
