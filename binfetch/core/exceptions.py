"""
Custom exceptions for binfetch

Every failure in the install pipeline maps to one of these categories.
"""

from pathlib import Path
from typing import Optional, Union


class BinfetchError(Exception):
    """Base exception for all binfetch errors"""
    pass


class PreconditionError(BinfetchError):
    """Raised when an install request is missing its version or target"""
    pass


class UnsupportedPlatformError(BinfetchError):
    """
    Raised when running on an OS family with no prebuilt binaries.

    Attributes:
        os_name: The raw OS name that could not be mapped
    """
    def __init__(self, message: str, os_name: str = ""):
        super().__init__(message)
        self.os_name = os_name


class HttpStatusError(BinfetchError):
    """
    Raised when the release host answers with anything but 200 or 302.

    Attributes:
        status_code: The HTTP status code received
        url: The URL that was requested
    """
    def __init__(self, message: str, status_code: int = 0, url: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class TransferError(BinfetchError):
    """Raised when the network fails mid-transfer"""
    pass


class ReleaseApiError(BinfetchError):
    """
    Raised when the release API response breaks its contract.

    Attributes:
        body: The raw response body, kept for diagnostics
    """
    def __init__(self, message: str, body: str = ""):
        super().__init__(message)
        self.body = body


class MalformedResponseError(ReleaseApiError):
    """Raised when the release API body is not a JSON object"""
    pass


class MissingAssetsError(ReleaseApiError):
    """Raised when the release API body has no assets list"""
    pass


class AssetNotFoundError(ReleaseApiError):
    """
    Raised when no release asset matches the expected name.

    Attributes:
        asset_name: The asset name that was searched for
    """
    def __init__(self, message: str, asset_name: str = "", body: str = ""):
        super().__init__(message, body=body)
        self.asset_name = asset_name


class ExtractionFailedError(BinfetchError):
    """
    Raised when the archive extractor fails.

    Exactly one of the attributes is usually set, depending on how
    the extractor failed.

    Attributes:
        exit_code: Non-zero exit status of the extractor process
        cause: Exception raised while spawning or waiting on the process
        stderr: Diagnostic output the extractor wrote to its error stream
    """
    def __init__(
        self,
        message: str,
        exit_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
        stderr: Optional[str] = None,
    ):
        super().__init__(message)
        self.exit_code = exit_code
        self.cause = cause
        self.stderr = stderr


class ExecutableNotFoundError(BinfetchError):
    """
    Raised when the extracted archive did not contain the expected binary.

    Attributes:
        dest_dir: Directory that was probed
    """
    def __init__(self, message: str, dest_dir: Union[str, Path] = ""):
        super().__init__(message)
        self.dest_dir = Path(dest_dir)


class PermissionFixupError(BinfetchError):
    """Raised when the execute bit cannot be set on the installed binary"""
    pass
