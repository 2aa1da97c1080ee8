"""
HTTP client for the Bugsnag data access API.

This module provides a thin authenticated GET client with a uniform
error-decoding policy: anything but ``200`` becomes an ``ApiError``.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError
from rich.console import Console

from ... import USER_AGENT
from ..errors import ApiError, EmptyResponseError, NetworkError, UnexpectedResponseFormatError
from ..models import AuthType, Organization, User
from .debug import dump

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0

_organizations_adapter = TypeAdapter(List[Organization])


@dataclass
class ClientConfig:
    """Configuration for a BugsnagClient."""
    api_endpoint: str
    login: str = ""
    api_token: str = ""
    auth_type: AuthType = AuthType.TOKEN
    insecure: bool = False
    debug: bool = False


class BugsnagClient:
    """Authenticated client for the Bugsnag data access API.

    The underlying ``httpx.AsyncClient`` is opened lazily and closed by
    ``aclose()``; a closed client reopens on the next request, so one
    instance can serve several event loops in sequence.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        console: Optional[Console] = None,
    ):
        """Initialize the client.

        Args:
            config: Endpoint, credentials and flags
            timeout: Connect timeout in seconds
            transport: Custom transport, used by tests
            console: Where debug dumps are printed (stdout by default)
        """
        self.api_endpoint = config.api_endpoint.rstrip("/")
        self.login = config.login
        self.api_token = config.api_token
        self.auth_type = AuthType(config.auth_type or AuthType.TOKEN)
        self.insecure = config.insecure
        self.debug = config.debug
        self.timeout = timeout

        self._transport = transport
        self._console = console or Console(soft_wrap=True, emoji=False)
        self._http: Optional[httpx.AsyncClient] = None

    def _get_http(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(
                timeout=httpx.Timeout(None, connect=self.timeout),
                verify=not self.insecure,
                trust_env=True,
                transport=self._transport,
                headers={"User-Agent": USER_AGENT},
            )
        return self._http

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def __aenter__(self) -> "BugsnagClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def get(self, path: str, headers: Optional[Dict[str, str]] = None) -> httpx.Response:
        """Send an authenticated GET request.

        Args:
            path: Path with a leading slash, may carry a query string
            headers: Extra headers applied verbatim

        Returns:
            The response, whatever its status

        Raises:
            NetworkError: If the request could not be completed
        """
        http = self._get_http()
        request = http.build_request("GET", f"{self.api_endpoint}{path}", headers=headers)

        auth: Optional[httpx.Auth] = None
        if self.auth_type == AuthType.BASIC:
            auth = httpx.BasicAuth(self.login, self.api_token)
        else:
            request.headers["Authorization"] = f"token {self.api_token}"

        response: Optional[httpx.Response] = None
        try:
            logger.debug(f"GET {request.url}")
            response = await http.send(request, auth=auth)
            await response.aread()
            return response
        except httpx.TransportError as e:
            raise NetworkError(f"Network error: {e}", original_error=e) from e
        finally:
            if self.debug:
                sent = response.request if response is not None else request
                dump(self._console, sent, response)

    async def me(self) -> User:
        """Fetch the authenticated user from ``/user``."""
        response = await self.get("/user")
        if response.status_code != httpx.codes.OK:
            raise ApiError.from_response(response)

        try:
            return User.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise UnexpectedResponseFormatError(original_error=e) from e

    async def organizations(self) -> List[Organization]:
        """Fetch the organizations of the authenticated user."""
        response = await self.get("/user/organizations")
        if response.status_code != httpx.codes.OK:
            raise ApiError.from_response(response)
        if not response.content.strip():
            raise EmptyResponseError()

        try:
            return _organizations_adapter.validate_python(response.json())
        except (ValueError, ValidationError) as e:
            raise UnexpectedResponseFormatError(original_error=e) from e
