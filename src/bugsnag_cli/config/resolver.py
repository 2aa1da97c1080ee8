"""
Credential resolution for Bugsnag CLI.

Precedence, highest first:
1. Explicit arguments
2. Config document (file, overridden by BUGSNAG_* environment variables)
3. Netrc entry for (host of api_endpoint, login), token only
4. OS keyring entry for login, token only
5. Auth type defaults to ``token``

Empty strings count as unset and never shadow a lower source. Nothing
here touches the network.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ..core.client import ClientConfig
from ..core.models import AuthType, OrganizationRef
from .keychain import get_secret
from .netrc import NetrcEntry, NetrcError, read_netrc
from .settings import ConfigDocument
from .store import ConfigStore

logger = logging.getLogger(__name__)

# Commands that run without an API token.
TOKEN_FREE_COMMANDS = frozenset({"init", "help", "version", "bugsnag"})

NetrcLookup = Callable[[str, str], NetrcEntry]
KeyringLookup = Callable[[str], Optional[str]]


@dataclass(frozen=True)
class CredentialProfile:
    """Effective configuration for one process run."""
    api_endpoint: str
    login: str
    api_token: str
    auth_type: AuthType
    organization: Optional[OrganizationRef] = None

    @property
    def is_operational(self) -> bool:
        return bool(self.api_endpoint and self.login and self.api_token and self.auth_type)

    def client_config(self, insecure: bool = False, debug: bool = False) -> ClientConfig:
        return ClientConfig(
            api_endpoint=self.api_endpoint,
            login=self.login,
            api_token=self.api_token,
            auth_type=self.auth_type,
            insecure=insecure,
            debug=debug,
        )


def command_requires_token(command: str) -> bool:
    """Check whether a subcommand needs a reachable API token."""
    return command not in TOKEN_FREE_COMMANDS


def _first(*values: Optional[str]) -> str:
    for value in values:
        if value:
            return value
    return ""


class CredentialResolver:
    """Composes explicit input, config, netrc and keyring into a profile."""

    def __init__(
        self,
        store: ConfigStore,
        netrc_lookup: NetrcLookup = read_netrc,
        keyring_lookup: KeyringLookup = get_secret,
    ):
        self.store = store
        self._netrc_lookup = netrc_lookup
        self._keyring_lookup = keyring_lookup
        self._document: Optional[ConfigDocument] = None

    @property
    def document(self) -> ConfigDocument:
        """Config document, loaded once; a missing file yields env-only values."""
        if self._document is None:
            self._document = self.store.read(missing_ok=True)
        return self._document

    def resolve(
        self,
        api_endpoint: str = "",
        login: str = "",
        api_token: str = "",
        auth_type: str = "",
        organization: str = "",
    ) -> CredentialProfile:
        """
        Resolve the effective credential profile.

        Args:
            api_endpoint: Explicit API endpoint
            login: Explicit login
            api_token: Explicit token
            auth_type: Explicit auth type
            organization: Explicit organization id or name

        Returns:
            The resolved profile
        """
        doc = self.document

        endpoint = _first(api_endpoint, doc.api_endpoint).rstrip("/")
        user = _first(login, doc.login)
        token = _first(api_token, doc.api_token) or self._secret_from_stores(endpoint, user)
        kind = AuthType(_first(auth_type, doc.auth_type, AuthType.TOKEN.value).lower())

        return CredentialProfile(
            api_endpoint=endpoint,
            login=user,
            api_token=token,
            auth_type=kind,
            organization=self._organization(organization, doc.organization),
        )

    def token_reachable(self, api_endpoint: str = "", login: str = "") -> bool:
        """Check whether any source supplies a token, without network I/O."""
        return bool(self.resolve(api_endpoint=api_endpoint, login=login).api_token)

    def _secret_from_stores(self, api_endpoint: str, login: str) -> str:
        if api_endpoint and login:
            try:
                entry = self._netrc_lookup(api_endpoint, login)
                logger.debug(f"Using token from netrc for {entry.machine}")
                return entry.password
            except (NetrcError, ValueError) as e:
                logger.debug(f"No netrc token: {e}")

        secret = self._keyring_lookup(login) if login else None
        if secret:
            logger.debug("Using token from OS keyring")
            return secret
        return ""

    @staticmethod
    def _organization(
        explicit: str, configured: Optional[OrganizationRef]
    ) -> Optional[OrganizationRef]:
        if not explicit:
            return configured
        if configured is not None and (
            explicit == configured.id or explicit.casefold() == configured.name.casefold()
        ):
            return configured
        return OrganizationRef(id=explicit, name=explicit)
