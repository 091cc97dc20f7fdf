"""
binfetch - install prebuilt release binaries for the host platform
"""

__version__ = "0.1.0"

from binfetch.core.config import Config
from binfetch.core.exceptions import BinfetchError
from binfetch.models.release import InstallRequest
from binfetch.runtime.binaries.installer import BinaryInstaller, ensure_binary

__all__ = [
    "__version__",
    "Config",
    "BinfetchError",
    "InstallRequest",
    "BinaryInstaller",
    "ensure_binary",
]
