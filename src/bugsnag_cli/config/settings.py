"""
Configuration document for Bugsnag CLI.

This module provides the config document model using Pydantic settings:
values come from the YAML config file and are overridden by environment
variables prefixed with BUGSNAG_.
"""

from typing import Any, Dict, Optional, Tuple, Type

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from ..core.models import AuthType, OrganizationRef

ENV_PREFIX = "BUGSNAG_"

# Keys written to the config file; the token never is.
PERSISTED_KEYS = ("api_endpoint", "login", "organization")


class ConfigDocument(BaseSettings):
    """
    Bugsnag CLI configuration document.

    Settings are loaded from these sources in order of preference:
    1. Environment variables (prefixed with BUGSNAG_, nested keys joined by __)
    2. A .env file in the working directory
    3. Values passed to the constructor (the config file contents)
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
    )

    api_endpoint: str = Field(
        default="",
        description="Bugsnag API endpoint"
    )

    login: str = Field(
        default="",
        description="Login of the Bugsnag user"
    )

    api_token: str = Field(
        default="",
        description="Bugsnag API token, never persisted",
        repr=False,
    )

    auth_type: str = Field(
        default="",
        description="Authentication type: basic or token"
    )

    organization: Optional[OrganizationRef] = Field(
        default=None,
        description="Default organization"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug output"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        # Constructor values are the file contents, so they rank lowest.
        return env_settings, dotenv_settings, init_settings

    @field_validator("api_endpoint")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("organization", mode="before")
    @classmethod
    def organization_from_id(cls, v: Any) -> Any:
        """Accept a bare id, as given by BUGSNAG_ORGANIZATION."""
        if isinstance(v, str):
            v = v.strip()
            return {"id": v, "name": v} if v else None
        return v

    @field_validator("auth_type")
    @classmethod
    def validate_auth_type(cls, v: str) -> str:
        """Validate authentication type."""
        v = v.strip().lower()
        valid_types = {t.value for t in AuthType}
        if v and v not in valid_types:
            raise ValueError(f"Invalid auth type '{v}'. Valid types: {', '.join(sorted(valid_types))}")
        return v

    def persisted(self) -> Dict[str, Any]:
        """Mapping written to the config file."""
        data: Dict[str, Any] = {
            "api_endpoint": self.api_endpoint,
            "login": self.login,
        }
        if self.organization is not None:
            data["organization"] = self.organization.model_dump()
        return data

    def to_dict(self) -> Dict[str, Any]:
        """Convert document to dictionary, excluding sensitive data."""
        data = self.model_dump()
        if data.get("api_token"):
            data["api_token"] = "***masked***"
        return data
