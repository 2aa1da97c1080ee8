"""OS keyring access for the Bugsnag API token."""

import logging
from typing import Optional

import keyring
from keyring.errors import KeyringError

logger = logging.getLogger(__name__)

KEYRING_SERVICE = "bugsnag-data-cli"


def get_secret(login: str, service: str = KEYRING_SERVICE) -> Optional[str]:
    """
    Fetch the token stored for a login in the OS keyring.

    Args:
        login: Account name the secret is stored under
        service: Keyring service name

    Returns:
        The secret, or None when absent or when the keyring is unavailable
    """
    if not login:
        return None

    try:
        secret = keyring.get_password(service, login)
    except (KeyringError, RuntimeError, OSError) as e:
        logger.debug(f"Keyring lookup failed for {login}: {e}")
        return None

    return secret or None
