"""
Data models shared across Bugsnag CLI.

Wire shapes returned by the Bugsnag data access API are pydantic models
that ignore unknown fields, so additions on the server side never break
decoding.
"""

from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator


class AuthType(str, Enum):
    """Authentication scheme used against the API."""
    BASIC = "basic"
    TOKEN = "token"

    def __str__(self) -> str:
        return self.value


class User(BaseModel):
    """Response of the ``/user`` endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    display_name: str = Field(default="", alias="displayName")
    email: str = ""


class Organization(BaseModel):
    """An organization as listed by ``/user/organizations``."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    slug: str = ""
    projects_url: str = ""

    def to_ref(self) -> "OrganizationRef":
        return OrganizationRef(id=self.id, name=self.name)


class OrganizationRef(BaseModel):
    """Minimal organization handle persisted in the config file."""

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)


class ErrorEnvelope(BaseModel):
    """Error body the API may attach to any non-success response.

    All fields are optional; the ``errors`` key maps field names to
    messages.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    field_errors: Dict[str, str] = Field(default_factory=dict, alias="errors")
    error_messages: List[str] = Field(default_factory=list)
    warning_messages: List[str] = Field(default_factory=list)

    @field_validator("field_errors", "error_messages", "warning_messages", mode="wrap")
    @classmethod
    def skip_mistyped(cls, value: Any, handler: Any, info: ValidationInfo) -> Any:
        # A mistyped field falls back to its default; the other fields survive.
        try:
            return handler(value)
        except ValidationError:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)

    @property
    def is_empty(self) -> bool:
        return not (self.field_errors or self.error_messages or self.warning_messages)

    def __str__(self) -> str:
        lines: List[str] = []

        if self.error_messages or self.field_errors:
            lines.append("\nError:\n")
            for message in self.error_messages:
                lines.append(f"  - {message}\n")
            for field, message in self.field_errors.items():
                lines.append(f"  - {field}: {message}\n")

        if self.warning_messages:
            lines.append("\nWarning:\n")
            for message in self.warning_messages:
                lines.append(f"  - {message}\n")

        return "".join(lines)
