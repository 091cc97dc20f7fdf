"""
Pytest configuration and shared fixtures
"""

import subprocess

import pytest

from requests.structures import CaseInsensitiveDict

from binfetch.core.config import Config

PROXY_ENV_VARS = [
    "HTTPS_PROXY", "https_proxy",
    "HTTP_PROXY", "http_proxy",
    "ALL_PROXY", "all_proxy",
    "NO_PROXY", "no_proxy",
]


class FakeResponse:
    """Minimal stand-in for requests.Response"""

    def __init__(self, status_code=200, chunks=None, headers=None, error=None):
        self.status_code = status_code
        self.headers = CaseInsensitiveDict(headers or {})
        self._chunks = list(chunks or [])
        self._error = error
        self.closed = False

    @property
    def content(self):
        if self._error is not None:
            raise self._error
        return b"".join(self._chunks)

    def iter_content(self, chunk_size=1):
        for chunk in self._chunks:
            yield chunk
        if self._error is not None:
            raise self._error

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


class FakeSession:
    """requests.Session replacement that serves canned responses by URL"""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def get(self, url, headers=None, **kwargs):
        self.calls.append({"url": url, "headers": dict(headers or {}), **kwargs})
        response = self.routes.get(url)
        if response is None:
            return FakeResponse(status_code=404)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def make_response():
    """Factory for fake HTTP responses"""
    return FakeResponse


@pytest.fixture
def make_session():
    """Factory for fake sessions; pass {url: FakeResponse | Exception}"""
    return FakeSession


@pytest.fixture
def temp_cache(tmp_path):
    """Temporary download cache directory for testing"""
    cache_dir = tmp_path / "cache"
    cache_dir.mkdir()
    return cache_dir


@pytest.fixture
def temp_bin_dir(tmp_path):
    """Temporary install directory for testing"""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    return bin_dir


@pytest.fixture
def test_config(temp_cache, temp_bin_dir):
    """Test configuration with temporary directories"""
    return Config(
        cache_dir=temp_cache,
        bin_dir=temp_bin_dir,
        show_progress=False,
        log_level="DEBUG",
    )


@pytest.fixture
def release_json():
    """Release API document for rustywind v1.0.0"""
    def _release(version="v1.0.0", targets=("x86_64-unknown-linux-musl",), extension=".tar.gz"):
        assets = []
        for index, target in enumerate(targets, start=1):
            assets.append({
                "name": f"rustywind-{version}-{target}{extension}",
                "url": f"https://api.github.com/repos/avencera/rustywind/releases/assets/{index}",
                "download_count": 100 + index,
                "browser_download_url": f"https://github.com/avencera/rustywind/releases/download/{version}/rustywind-{version}-{target}{extension}",
            })
        return {"tag_name": version, "name": version, "assets": assets}
    return _release


@pytest.fixture
def completed_process():
    """Factory for subprocess.CompletedProcess results"""
    def _completed(returncode=0, stdout="", stderr=""):
        return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)
    return _completed


@pytest.fixture(autouse=True)
def clean_proxy_env(monkeypatch):
    """Keep the developer's proxy settings out of the tests"""
    for name in PROXY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration between tests"""
    import logging

    # Remove all handlers from binfetch loggers
    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith('binfetch'):
            logger = logging.getLogger(name)
            logger.handlers.clear()
            logger.setLevel(logging.NOTSET)

    yield

    # Cleanup after test
    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith('binfetch'):
            logger = logging.getLogger(name)
            logger.handlers.clear()
