"""
Configuration package for Bugsnag CLI.

This package contains the config document and its file store, the
credential sources (netrc and OS keyring), the credential resolver and
the interactive config generator.
"""

from .resolver import CredentialProfile, CredentialResolver, command_requires_token
from .settings import ConfigDocument
from .store import ConfigStore, get_config_home

__all__ = [
    "ConfigDocument",
    "ConfigStore",
    "CredentialProfile",
    "CredentialResolver",
    "command_requires_token",
    "get_config_home",
]
