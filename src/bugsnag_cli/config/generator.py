"""
Interactive config generator for Bugsnag CLI.

The wizard prompts for missing endpoint and login, verifies them against
``/user``, lets the user pick a default organization from
``/user/organizations`` and writes the config file.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional
from urllib.parse import urlsplit

from ..core.client import BugsnagClient, ClientConfig, get_client
from ..core.errors import ConfigGenerationError, SkipError
from ..core.models import AuthType, OrganizationRef
from ..ui.prompts import WizardPrompter
from .resolver import CredentialResolver
from .settings import ConfigDocument
from .store import ConfigStore

logger = logging.getLogger(__name__)

DEFAULT_API_ENDPOINT = "https://api.bugsnag.com"
MIN_LOGIN_LENGTH = 3
MAX_LOGIN_LENGTH = 254

ClientFactory = Callable[[ClientConfig], BugsnagClient]


def validate_endpoint(value: str) -> str:
    """Accept absolute https URLs with a host.

    Raises:
        ValueError: With "not a valid URL" otherwise
    """
    try:
        parts = urlsplit(value)
        host = parts.hostname
    except (ValueError, TypeError):
        raise ValueError("not a valid URL") from None

    if parts.scheme != "https" or not host:
        raise ValueError("not a valid URL")
    return value


def validate_login(value: str) -> str:
    """Accept logins of 3 to 254 characters.

    Raises:
        ValueError: With "not a valid user" otherwise
    """
    if not isinstance(value, str) or not MIN_LOGIN_LENGTH <= len(value) <= MAX_LOGIN_LENGTH:
        raise ValueError("not a valid user")
    return value


@dataclass
class GeneratorInput:
    """User-supplied values for the wizard; empty fields are prompted for."""
    api_endpoint: str = ""
    login: str = ""
    organization: str = ""
    force: bool = False


class ConfigGenerator:
    """Drives the ``init`` wizard."""

    def __init__(
        self,
        params: GeneratorInput,
        store: ConfigStore,
        resolver: CredentialResolver,
        prompter: Optional[WizardPrompter] = None,
        client_factory: ClientFactory = get_client,
        debug: bool = False,
    ):
        self.params = params
        self.store = store
        self.resolver = resolver
        self.prompter = prompter or WizardPrompter()
        self.client_factory = client_factory
        self.debug = debug

        self.api_endpoint = ""
        self.login = ""
        self.organization: Optional[OrganizationRef] = None
        self.client: Optional[BugsnagClient] = None

        self.organizations_map: Dict[str, OrganizationRef] = {}
        self.organizations_by_id: Dict[str, OrganizationRef] = {}
        self.organization_suggestions: List[str] = []

    async def generate(self) -> Path:
        """
        Run the wizard and write the config file.

        Returns:
            Path of the written config file

        Raises:
            SkipError: If the user declined to overwrite the existing file
            ConfigGenerationError: If the chosen organization is unknown
            BugsnagError: For failures of the verification requests
        """
        with self.prompter.status("Checking configuration..."):
            exists = self.store.exists()

        if exists and not self.params.force and not self._shall_overwrite():
            raise SkipError()

        await self.configure_endpoint_and_login()
        await self.configure_organization()

        with self.prompter.status("Creating new configuration..."):
            return self.write()

    def _shall_overwrite(self) -> bool:
        return self.prompter.confirm("Config already exist. Do you want to overwrite?", default=False)

    async def configure_endpoint_and_login(self) -> None:
        api_endpoint = self.params.api_endpoint
        login = self.params.login

        if not api_endpoint:
            api_endpoint = self.prompter.ask(
                "Link to Bugsnag API Endpoint",
                default=DEFAULT_API_ENDPOINT,
                validate=validate_endpoint,
                help_text="This is a link to your bugsnag api endpoint, eg: https://api.bugsnag.com",
            )

        if not login:
            login = self.prompter.ask(
                "Login username",
                validate=validate_login,
                help_text="This is the username you use to login to your bugsnag account.",
            )

        await self.verify_login_details(api_endpoint, login)

    async def verify_login_details(self, api_endpoint: str, login: str) -> None:
        """Call ``/user`` with the candidate endpoint and login.

        With token auth the login is replaced by the email ``/user``
        returns; with basic auth the supplied login is kept.
        """
        api_endpoint = api_endpoint.rstrip("/")
        profile = self.resolver.resolve(api_endpoint=api_endpoint, login=login)

        self.client = self.client_factory(profile.client_config(debug=self.debug))

        with self.prompter.status("Verifying login details..."):
            user = await self.client.me()

        if profile.auth_type == AuthType.TOKEN and user.email:
            logger.debug(f"Canonical login from /user: {user.email}")
            login = user.email

        self.api_endpoint = api_endpoint
        self.login = login

    async def configure_organization(self) -> None:
        organization = self.params.organization

        await self.fetch_organization_suggestions()

        if not organization:
            if not self.organization_suggestions:
                raise ConfigGenerationError(
                    "organization not found\n  No organizations are available for this account"
                )
            organization = self.prompter.select(
                "Default organization:",
                self.organization_suggestions,
                help_text="This is your organization id that you want to access by default when using the cli.",
            )

        self.organization = self.lookup_organization(organization)
        if self.organization is None:
            raise ConfigGenerationError(
                "organization not found\n  Please check the organization id and try again"
            )

    async def fetch_organization_suggestions(self) -> None:
        with self.prompter.status("Fetching organizations..."):
            organizations = await self.client.organizations()

        for organization in organizations:
            ref = organization.to_ref()
            self.organizations_map[organization.name.casefold()] = ref
            self.organizations_by_id[organization.id] = ref
            self.organization_suggestions.append(organization.name)

    def lookup_organization(self, value: str) -> Optional[OrganizationRef]:
        """Resolve a selection by case-folded name, then by exact id."""
        found = self.organizations_map.get(value.casefold())
        if found is not None:
            return found
        return self.organizations_by_id.get(value)

    def write(self) -> Path:
        # Built without settings sources so BUGSNAG_* variables cannot leak in.
        doc = ConfigDocument.model_construct(
            api_endpoint=self.api_endpoint,
            login=self.login,
            organization=self.organization,
        )
        return self.store.write(doc)
