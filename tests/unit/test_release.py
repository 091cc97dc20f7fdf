"""
Tests for release lookup and metadata export
"""

import json

import pytest

from binfetch.client.http import HTTPClient
from binfetch.core.exceptions import (
    AssetNotFoundError,
    HttpStatusError,
    MalformedResponseError,
    MissingAssetsError,
    PreconditionError,
)
from binfetch.downloader.release import (
    ReleaseLocator,
    export_release_metadata,
    get_api_url,
    parse_release,
)

API_URL = "https://api.github.com/repos/avencera/rustywind/releases/tags/v1.0.0"
ASSET_NAME = "rustywind-v1.0.0-x86_64-unknown-linux-musl.tar.gz"


def _locator(session):
    return ReleaseLocator(HTTPClient(session=session, show_progress=False))


class TestApiUrl:
    """Test release API URL construction"""

    def test_default_host(self):
        assert get_api_url("avencera/rustywind", "v1.0.0") == API_URL

    def test_custom_host(self):
        url = get_api_url("o/r", "v2", api_host="api.example.com")
        assert url == "https://api.example.com/repos/o/r/releases/tags/v2"


class TestParseRelease:
    """Test release body validation"""

    def test_parses_assets(self, release_json):
        release = parse_release(json.dumps(release_json()))

        assert release.tag_name == "v1.0.0"
        assert release.asset_names() == [ASSET_NAME]
        assert release.assets[0].download_count == 101

    def test_not_json(self):
        with pytest.raises(MalformedResponseError) as exc_info:
            parse_release("<html>rate limited</html>")

        assert exc_info.value.body == "<html>rate limited</html>"

    def test_json_but_not_an_object(self):
        with pytest.raises(MalformedResponseError):
            parse_release("[1, 2, 3]")

    def test_missing_assets(self):
        body = json.dumps({"message": "Not Found"})

        with pytest.raises(MissingAssetsError) as exc_info:
            parse_release(body)

        assert exc_info.value.body == body
        assert "Not Found" in str(exc_info.value)

    def test_assets_not_a_list(self):
        with pytest.raises(MissingAssetsError):
            parse_release(json.dumps({"assets": None}))

    def test_empty_assets_is_valid(self):
        assert parse_release(json.dumps({"assets": []})).assets == []

    def test_asset_missing_url(self):
        with pytest.raises(MalformedResponseError):
            parse_release(json.dumps({"assets": [{"name": ASSET_NAME}]}))


class TestLocate:
    """Test release lookup over HTTP"""

    def test_locate_sends_token(self, make_session, make_response, release_json):
        body = json.dumps(release_json()).encode()
        session = make_session({API_URL: make_response(200, [body])})

        release = _locator(session).locate("avencera/rustywind", "v1.0.0", token="abc123")

        assert release.asset_names() == [ASSET_NAME]
        assert session.calls[0]["url"] == API_URL
        assert session.calls[0]["headers"]["authorization"] == "token abc123"

    def test_locate_without_token(self, make_session, make_response, release_json):
        body = json.dumps(release_json()).encode()
        session = make_session({API_URL: make_response(200, [body])})

        _locator(session).locate("avencera/rustywind", "v1.0.0")

        assert "authorization" not in session.calls[0]["headers"]

    def test_locate_requires_tag(self, make_session):
        session = make_session()

        with pytest.raises(PreconditionError):
            _locator(session).locate("avencera/rustywind", "")

        assert session.calls == []

    def test_locate_unknown_tag(self, make_session):
        with pytest.raises(HttpStatusError) as exc_info:
            _locator(make_session()).locate("avencera/rustywind", "v1.0.0")

        assert exc_info.value.status_code == 404


class TestFindAsset:
    """Test asset selection by exact name"""

    def test_exact_match(self, release_json, temp_cache):
        release = parse_release(json.dumps(release_json(
            targets=("x86_64-unknown-linux-musl", "aarch64-unknown-linux-gnu")
        )))
        cache_path = temp_cache / ASSET_NAME

        asset = ReleaseLocator(HTTPClient()).find_asset(release, ASSET_NAME, cache_path)

        assert asset.name == ASSET_NAME
        assert asset.download_url.endswith("/releases/assets/1")
        assert asset.local_cache_path == cache_path

    def test_no_partial_matches(self, release_json, temp_cache):
        release = parse_release(json.dumps(release_json()))

        with pytest.raises(AssetNotFoundError) as exc_info:
            ReleaseLocator(HTTPClient()).find_asset(release, ASSET_NAME[:-3], temp_cache / "x")

        assert exc_info.value.asset_name == ASSET_NAME[:-3]
        assert ASSET_NAME in exc_info.value.body

    def test_error_carries_response_body(self, release_json, temp_cache):
        body = json.dumps(release_json(), indent=4)
        release = parse_release(body)

        with pytest.raises(AssetNotFoundError) as exc_info:
            ReleaseLocator(HTTPClient()).find_asset(release, "rustywind-missing.zip", temp_cache / "x")

        assert exc_info.value.body == body


class TestExportMetadata:
    """Test sanitized release.json export"""

    def test_drops_download_count(self, release_json, tmp_path):
        release = parse_release(json.dumps(release_json(
            targets=("x86_64-unknown-linux-musl", "x86_64-apple-darwin")
        )))
        output = tmp_path / "release.json"

        export_release_metadata(release, output)

        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["tag_name"] == "v1.0.0"
        assert len(data["assets"]) == 2
        for asset in data["assets"]:
            assert "download_count" not in asset
            assert "browser_download_url" in asset

    def test_output_is_indented(self, release_json, tmp_path):
        release = parse_release(json.dumps(release_json()))
        output = export_release_metadata(release, tmp_path / "release.json")

        assert output.read_text(encoding="utf-8").startswith('{\n  "')
