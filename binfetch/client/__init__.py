"""
HTTP transport for binfetch.
"""

from binfetch.client.http import HTTPClient
from binfetch.client.powershell import PowerShellDownloader

__all__ = ["HTTPClient", "PowerShellDownloader"]
