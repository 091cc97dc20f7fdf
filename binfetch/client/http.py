"""
HTTP client for the release host

Features:
- Identifying user-agent on every request
- Authorization header only ever sent to the release API host
- Per-URL proxy resolution from the standard proxy environment variables
- Manual 302 following, re-checking the authorization rule at every hop
- Streaming downloads with a tqdm progress bar; partial files are
  deleted on every failure path

Timeout Strategy:
- Connection timeout: 30s (fail fast if the host is unreachable)
- Read timeout: applied per chunk, so large assets are not cut off
"""

from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple, Union
from urllib.parse import urljoin, urlparse

import requests
from requests.structures import CaseInsensitiveDict
from requests.utils import get_environ_proxies, select_proxy
from tqdm import tqdm

from binfetch.core.exceptions import HttpStatusError, TransferError
from binfetch.utils.logging import get_logger

logger = get_logger(__name__)


DEFAULT_API_HOST = "api.github.com"
DEFAULT_USER_AGENT = "rustywind"
DEFAULT_CONNECT_TIMEOUT = 30.0
DEFAULT_READ_TIMEOUT = 300.0
DEFAULT_MAX_REDIRECTS = 5
DEFAULT_CHUNK_SIZE = 64 * 1024


def remove_partial_file(path: Path) -> None:
    """Delete a partially written download, ignoring a file that is already gone"""
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove partial download {path}: {e}")


class HTTPClient:
    """
    Blocking HTTP client used for both the release API and asset downloads.

    Usage:
        client = HTTPClient(api_host="api.github.com", user_agent="rustywind")

        # JSON body into memory
        body = client.get("https://api.github.com/repos/o/r/releases/tags/v1")

        # Binary asset streamed to disk
        client.download_to_file(asset_url, Path("/tmp/asset.tar.gz"),
                                {"accept": "application/octet-stream"})
    """

    def __init__(
        self,
        api_host: str = DEFAULT_API_HOST,
        user_agent: str = DEFAULT_USER_AGENT,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        show_progress: bool = True,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize HTTP client.

        Args:
            api_host: Host allowed to receive the authorization header
            user_agent: User-agent sent with every request
            connect_timeout: Connection timeout in seconds
            read_timeout: Read timeout in seconds
            max_redirects: Longest chain of 302 responses that is followed
            chunk_size: Bytes read per chunk when streaming to a file
            show_progress: Show a progress bar while downloading
            session: Preconfigured requests session (a new one by default)
        """
        self.api_host = api_host
        self.user_agent = user_agent
        self.timeout = (connect_timeout, read_timeout)
        self.max_redirects = max_redirects
        self.chunk_size = chunk_size
        self.show_progress = show_progress
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config, session: Optional[requests.Session] = None) -> "HTTPClient":
        """Build a client from a binfetch Config"""
        return cls(
            api_host=config.api_host,
            user_agent=config.user_agent,
            connect_timeout=config.connect_timeout_sec,
            read_timeout=config.read_timeout_sec,
            max_redirects=config.max_redirects,
            chunk_size=config.chunk_size,
            show_progress=config.show_progress,
            session=session,
        )

    def is_api_url(self, url: str) -> bool:
        return urlparse(url).hostname == self.api_host

    def prepare_headers(self, url: str, headers: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """
        Headers that will actually be sent to `url`.

        Adds the user-agent when missing and drops `authorization` for any
        host other than the release API, so tokens never follow a redirect
        to a CDN or mirror.
        """
        prepared = CaseInsensitiveDict(headers or {})
        if "user-agent" not in prepared:
            prepared["user-agent"] = self.user_agent
        if "authorization" in prepared and not self.is_api_url(url):
            logger.debug(f"Dropping authorization header for {urlparse(url).hostname}")
            del prepared["authorization"]
        return dict(prepared)

    def proxies_for(self, url: str) -> Dict[str, str]:
        """Proxy mapping for `url` resolved from HTTPS_PROXY / HTTP_PROXY / NO_PROXY"""
        proxies = get_environ_proxies(url)
        proxy = select_proxy(url, proxies)
        if not proxy:
            return {}
        logger.debug(f"Routing {url} through proxy {proxy}")
        return {urlparse(url).scheme: proxy}

    def _open(
        self,
        url: str,
        headers: Optional[Mapping[str, str]],
        redirects: int = 0,
    ) -> Tuple[str, requests.Response]:
        """
        Issue a GET and return the final URL with its open 200 response.

        Each 302 is handled by calling `_open` again with the Location URL
        and the caller's original headers.
        """
        sent_headers = self.prepare_headers(url, headers)
        try:
            response = self.session.get(
                url,
                headers=sent_headers,
                proxies=self.proxies_for(url),
                timeout=self.timeout,
                allow_redirects=False,
                stream=True,
            )
        except requests.exceptions.RequestException as e:
            raise TransferError(f"Request to {url} failed: {e}") from e

        if response.status_code == 302:
            location = response.headers.get("location")
            response.close()
            if not location:
                raise HttpStatusError(
                    f"Redirect from {url} has no Location header", status_code=302, url=url
                )
            if redirects >= self.max_redirects:
                raise HttpStatusError(
                    f"Too many redirects (>{self.max_redirects}) starting at {url}",
                    status_code=302,
                    url=url,
                )
            target = urljoin(url, location)
            logger.debug(f"Following redirect {url} -> {target}")
            return self._open(target, headers, redirects + 1)

        if response.status_code != 200:
            response.close()
            raise HttpStatusError(
                f"Request failed: {response.status_code} for {url}",
                status_code=response.status_code,
                url=url,
            )

        return url, response

    def resolve_url(self, url: str, headers: Optional[Mapping[str, str]] = None) -> str:
        """
        Follow 302s from `url` and return the URL that finally answers 200.

        The body is never read. Used by downloaders that cannot re-check
        the authorization rule between hops themselves.
        """
        final_url, response = self._open(url, headers)
        response.close()
        return final_url

    def get(self, url: str, headers: Optional[Mapping[str, str]] = None) -> str:
        """
        GET `url` and return the whole body as text.

        Raises:
            HttpStatusError: On any final status other than 200
            TransferError: If the connection fails
        """
        logger.info(f"GET {url}")
        _, response = self._open(url, headers)
        try:
            with response:
                return response.content.decode("utf-8", errors="replace")
        except requests.exceptions.RequestException as e:
            raise TransferError(f"Reading response from {url} failed: {e}") from e

    def download_to_file(
        self,
        url: str,
        dest_path: Union[str, Path],
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        """
        Stream `url` into `dest_path`.

        The destination is only created once a 200 response arrives, and it
        is removed again if anything goes wrong before the last chunk is
        written.

        Raises:
            HttpStatusError: On any final status other than 200
            TransferError: If the network fails mid-stream
        """
        dest = Path(dest_path)
        _, response = self._open(url, headers)

        completed = False
        try:
            with response, open(dest, "wb") as out:
                total = int(response.headers.get("content-length") or 0) or None
                with tqdm(
                    total=total,
                    unit="B",
                    unit_scale=True,
                    unit_divisor=1024,
                    desc=f"Downloading {dest.name}",
                    disable=not self.show_progress,
                ) as pbar:
                    for chunk in response.iter_content(chunk_size=self.chunk_size):
                        if chunk:
                            out.write(chunk)
                            pbar.update(len(chunk))
            completed = True
        except requests.exceptions.RequestException as e:
            raise TransferError(f"Download of {url} failed: {e}") from e
        finally:
            if not completed:
                remove_partial_file(dest)

        logger.debug(f"Finished writing {dest}")
