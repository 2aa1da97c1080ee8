"""
Core package for Bugsnag CLI.

This package contains the API client, the wire models and the error
types shared by the rest of the application.
"""

from .errors import (
    ApiError,
    BugsnagError,
    EmptyResponseError,
    NetworkError,
    UnexpectedResponseFormatError,
    format_error,
)
from .models import AuthType, ErrorEnvelope, Organization, OrganizationRef, User

__all__ = [
    "ApiError",
    "AuthType",
    "BugsnagError",
    "EmptyResponseError",
    "ErrorEnvelope",
    "NetworkError",
    "Organization",
    "OrganizationRef",
    "UnexpectedResponseFormatError",
    "User",
    "format_error",
]
