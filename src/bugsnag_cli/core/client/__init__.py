"""
Bugsnag API client package.

The command surface constructs one client per process and reuses it;
``get_client`` memoizes the first instance built.
"""

from typing import Optional

from .bugsnag_client import DEFAULT_TIMEOUT, BugsnagClient, ClientConfig

_client: Optional[BugsnagClient] = None


def get_client(config: ClientConfig, **kwargs) -> BugsnagClient:
    """Get the process-wide client, building it from ``config`` on first use."""
    global _client
    if _client is None:
        _client = BugsnagClient(config, timeout=kwargs.pop("timeout", DEFAULT_TIMEOUT), **kwargs)
    return _client


def set_client(client: Optional[BugsnagClient]) -> None:
    """Replace the process-wide client."""
    global _client
    _client = client


def reset_client() -> None:
    set_client(None)


__all__ = [
    "DEFAULT_TIMEOUT",
    "BugsnagClient",
    "ClientConfig",
    "get_client",
    "set_client",
    "reset_client",
]
