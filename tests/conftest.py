"""
Shared fixtures for Bugsnag CLI tests.
"""

import os
from pathlib import Path
from typing import Callable

import httpx
import pytest
import yaml

from bugsnag_cli.config.netrc import reset_netrc_cache
from bugsnag_cli.core.client import BugsnagClient, ClientConfig, reset_client


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep every test away from the real home, keyring and environment."""
    for key in list(os.environ):
        if key.upper().startswith("BUGSNAG_"):
            monkeypatch.delenv(key)

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("NETRC", str(tmp_path / "netrc"))
    monkeypatch.chdir(tmp_path)

    monkeypatch.setattr("keyring.get_password", lambda service, login: None)

    reset_netrc_cache()
    reset_client()
    yield
    reset_netrc_cache()
    reset_client()


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Default config file location inside the isolated XDG home."""
    return tmp_path / "xdg" / ".bugsnag" / ".config.yml"


@pytest.fixture
def write_config(config_path: Path) -> Callable[..., Path]:
    """Write a config document to the default location."""

    def _write(data: dict, path: Path = config_path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def netrc_file(tmp_path: Path) -> Callable[[str], Path]:
    """Write the netrc file that $NETRC points to."""

    def _write(content: str) -> Path:
        path = tmp_path / "netrc"
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_client() -> Callable[..., BugsnagClient]:
    """Build clients whose requests are answered by a handler function."""

    def _make(handler, **config) -> BugsnagClient:
        config.setdefault("api_endpoint", "https://api.example.com")
        config.setdefault("api_token", "abc")
        return BugsnagClient(ClientConfig(**config), transport=httpx.MockTransport(handler))

    return _make
