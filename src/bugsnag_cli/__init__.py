"""
Bugsnag CLI - An interactive command-line client for Bugsnag.

This package authenticates against the Bugsnag data access API, fetches
account resources and manages the local CLI configuration.
"""

__version__ = "0.1.0"
__author__ = "Bugsnag CLI Team"
__license__ = "Apache-2.0"

from typing import Final

# Package metadata
VERSION: Final[str] = __version__
PACKAGE_NAME: Final[str] = "bugsnag-cli"
USER_AGENT: Final[str] = f"{PACKAGE_NAME}/{VERSION}"

__all__ = [
    "__version__",
    "VERSION",
    "PACKAGE_NAME",
    "USER_AGENT",
]
