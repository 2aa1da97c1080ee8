"""
Structured error system for Bugsnag CLI.

Inner layers raise these typed errors; only the command surface turns
them into user-facing text (see ``format_error``).
"""

from typing import Any, Dict, Iterable, Optional

import httpx

from .models import ErrorEnvelope

TOKEN_HELP_LINK = "https://bugsnagapiv2.docs.apiary.io/#introduction/authentication"
CLI_HELP_LINK = "https://github.com/teamupstart/bugsnag-data-cli#getting-started"


class BugsnagError(Exception):
    """Base exception for all Bugsnag CLI errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.original_error = original_error

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "message": self.message,
            "details": self.details,
            "type": self.__class__.__name__
        }

    def __str__(self) -> str:
        return self.message


class ApiError(BugsnagError):
    """The API answered with a status other than the expected one."""

    def __init__(
        self,
        status_text: str,
        status_code: int,
        body: Optional[ErrorEnvelope] = None,
    ):
        self.status_text = status_text
        self.status_code = status_code
        self.body = body or ErrorEnvelope()
        super().__init__(str(self.body), details={"status_code": status_code})

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        """Build an error from a response, decoding the body best-effort."""
        body = ErrorEnvelope()
        try:
            payload = response.json()
            if isinstance(payload, dict):
                body = ErrorEnvelope.model_validate(payload)
        except ValueError:
            # Undecodable error bodies leave only the status fields.
            pass

        status_text = f"{response.status_code} {response.reason_phrase}".strip()
        return cls(status_text, response.status_code, body)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["status"] = self.status_text
        data["body"] = self.body.model_dump(by_alias=True)
        return data


class EmptyResponseError(BugsnagError):
    """The API returned no body where one was required."""

    def __init__(self, message: str = "bugsnag: empty response from server", **kwargs):
        super().__init__(message, **kwargs)


class NetworkError(BugsnagError):
    """Transport-level failure: DNS, connect, TLS, timeouts."""

    def __init__(self, message: str = "Network error", **kwargs):
        super().__init__(message, **kwargs)


class UnexpectedResponseFormatError(BugsnagError):
    """A response body did not match the expected shape."""

    def __init__(self, message: str = "unexpected response format", **kwargs):
        super().__init__(message, **kwargs)


class MultipleFailedError(BugsnagError):
    """Several requests of one batch failed."""

    @classmethod
    def from_errors(cls, errors: Iterable[Exception]) -> "MultipleFailedError":
        errors = list(errors)
        message = "".join(f"\n{error}" for error in errors)
        return cls(message, details={"count": len(errors)})


class ConfigMissingError(BugsnagError):
    """A command needs the config file and there is none."""

    def __init__(self, path: Any = None, message: Optional[str] = None):
        super().__init__(
            message or "Missing configuration file.\nRun 'bugsnag init' to configure the tool.",
            details={"path": str(path)} if path else None,
        )


class ConfigReadError(BugsnagError):
    """The config file exists but cannot be read or parsed."""


class TokenMissingError(BugsnagError):
    """No API token could be found in any supported source."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or token_missing_guidance())


class SkipError(BugsnagError):
    """The user declined to overwrite an existing config."""

    def __init__(self, message: str = "skipping config generation"):
        super().__init__(message)


class ConfigGenerationError(BugsnagError):
    """Generic failure of the config generator."""


def token_missing_guidance() -> str:
    """Instructions shown when no API token is reachable."""
    return (
        "The tool needs a Bugsnag API token to function.\n"
        "\n"
        f"You can generate the token using this link: {TOKEN_HELP_LINK}\n"
        "\n"
        "After generating the token, you can either:\n"
        "  - Export API token to your shell as a BUGSNAG_API_TOKEN env variable\n"
        "  - Or, you can use a .netrc file to define required machine details\n"
        "\n"
        "Once you are done with the above steps, run 'bugsnag init' to generate "
        "the config if you haven't already.\n"
        "\n"
        f"For more details, see: {CLI_HELP_LINK}\n"
    )


def format_error(error: BaseException) -> str:
    """
    Create the user-facing message for an error.

    Args:
        error: The error that reached the command surface

    Returns:
        Text to print on standard error
    """
    if isinstance(error, ApiError):
        status_line = (
            f"\nbugsnag: Received unexpected response '{error.status_text}'.\n"
            "Please check the parameters you supplied and try again."
        )
        body = str(error.body)
        return f"{body}{status_line}" if body else status_line

    if isinstance(error, MultipleFailedError):
        return f"\nSOME REQUESTS REPORTED ERROR:{error.message}"

    if isinstance(error, EmptyResponseError):
        return "bugsnag: Received empty response.\nPlease try again."

    if isinstance(error, (TokenMissingError, ConfigMissingError)):
        return error.message

    return f"Error: {error}"
