"""
PowerShell-driven downloads for Windows hosts

Asset downloads are delegated to `Invoke-WebRequest`; API JSON requests
still go through the regular HTTPClient. Redirects are resolved by the
HTTPClient first so the authorization rule is applied to the final host,
and Invoke-WebRequest is never allowed to follow one itself.
"""

import subprocess
from pathlib import Path
from typing import Mapping, Optional, Union

from binfetch.client.http import HTTPClient, remove_partial_file
from binfetch.core.exceptions import TransferError
from binfetch.utils.logging import get_logger

logger = get_logger(__name__)


def escape_powershell_path(path: Union[str, Path]) -> str:
    """
    Escape whitespace so PowerShell does not split a path into arguments.

    Every space becomes a backtick-escaped space.
    """
    return str(path).replace(" ", "` ")


def _quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def build_header_table(headers: Mapping[str, str]) -> str:
    """Encode headers as a PowerShell hashtable literal: @{'k'='v'; ...}"""
    pairs = "; ".join(f"{_quote(key)}={_quote(value)}" for key, value in headers.items())
    return "@{" + pairs + "}"


class PowerShellDownloader:
    """
    Downloader that shells out to PowerShell's Invoke-WebRequest.

    The user-agent travels as -UserAgent because Invoke-WebRequest refuses
    it inside -Headers; everything else goes into the header table.
    """

    def __init__(self, http_client: HTTPClient, timeout: Optional[float] = None):
        self.http = http_client
        self.timeout = timeout

    def build_command(self, url: str, dest_path: Union[str, Path], headers: Optional[Mapping[str, str]] = None) -> str:
        prepared = self.http.prepare_headers(url, headers)
        user_agent = None
        for key in list(prepared):
            if key.lower() == "user-agent":
                user_agent = prepared.pop(key)

        command = (
            "[Net.ServicePointManager]::SecurityProtocol = [Net.SecurityProtocolType]::Tls12; "
            f"Invoke-WebRequest -URI {_quote(url)} -UseBasicParsing "
            f"-OutFile {escape_powershell_path(dest_path)} "
            "-MaximumRedirection 0 "
            f"-Headers {build_header_table(prepared)}"
        )
        if user_agent:
            command += f" -UserAgent {_quote(user_agent)}"

        proxy = next(iter(self.http.proxies_for(url).values()), None)
        if proxy:
            command += f" -Proxy {_quote(proxy)}"
        return command

    def download_to_file(
        self,
        url: str,
        dest_path: Union[str, Path],
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        """
        Download `url` into `dest_path` with Invoke-WebRequest.

        Raises:
            TransferError: If PowerShell fails to run to a zero exit code.
                Any partial output is removed first.
        """
        dest = Path(dest_path)
        final_url = self.http.resolve_url(url, headers)
        command = self.build_command(final_url, dest, headers)
        logger.info("Downloading with Invoke-WebRequest")

        try:
            result = subprocess.run(
                ["powershell", "-NoProfile", "-Command", command],
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            remove_partial_file(dest)
            raise TransferError(f"Invoke-WebRequest could not run: {e}") from e

        if result.returncode != 0:
            remove_partial_file(dest)
            raise TransferError(
                f"Invoke-WebRequest exited with {result.returncode}: {result.stderr.strip()}"
            )
