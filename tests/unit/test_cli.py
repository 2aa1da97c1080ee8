"""
Tests for the command surface.
"""

from pathlib import Path
from typing import Dict, List

import httpx
import pytest
import yaml
from typer.testing import CliRunner

from bugsnag_cli import VERSION
from bugsnag_cli.cli.app import app
from bugsnag_cli.config.generator import ConfigGenerator
from bugsnag_cli.core.client import set_client
from bugsnag_cli.core.errors import CLI_HELP_LINK, TOKEN_HELP_LINK

runner = CliRunner()

ORGANIZATIONS = [
    {"id": "o1", "name": "Acme", "slug": "acme", "projects_url": "https://api.bugsnag.com/organizations/o1/projects"},
]


class FakeApi:
    """Bugsnag API stand-in installed as the process-wide client."""

    def __init__(self, responses):
        self.responses = responses
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses[request.url.path]()


@pytest.fixture
def fake_api(make_client):
    """Install a client answering from a path table."""

    def _install(responses) -> FakeApi:
        api = FakeApi(responses)
        set_client(make_client(api))
        return api

    return _install


class TestBasicCommands:
    """Test commands that need no credentials."""

    def test_version(self) -> None:
        """Test the version command."""
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert result.output == f"bugsnag-cli version {VERSION}\n"

    def test_no_command_prints_help(self) -> None:
        """Test that the bare root command shows help."""
        result = runner.invoke(app, [])
        assert result.exit_code == 0
        assert "init" in result.output
        assert "organization" in result.output

    def test_help_command(self) -> None:
        """Test the help command."""
        result = runner.invoke(app, ["help"])
        assert result.exit_code == 0
        assert "Usage" in result.output

    def test_organization_without_subcommand(self) -> None:
        """Test that the organization group shows help."""
        result = runner.invoke(app, ["organization"])
        assert result.exit_code == 0
        assert "list" in result.output

    def test_subcommand_help_not_gated(self) -> None:
        """Test that --help works without a token."""
        result = runner.invoke(app, ["me", "--help"])
        assert result.exit_code == 0
        assert "configured bugsnag user" in result.output


class TestInit:
    """Test the init command."""

    def test_fresh_init(self, fake_api, config_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a fresh init with every value supplied."""
        monkeypatch.setenv("BUGSNAG_API_TOKEN", "abc")
        api = fake_api({
            "/user": lambda: httpx.Response(200, json={"email": "bob@example.com"}),
            "/user/organizations": lambda: httpx.Response(200, json=ORGANIZATIONS),
        })

        result = runner.invoke(app, [
            "init", "--api_endpoint", "https://api.bugsnag.com",
            "--login", "bob", "--organization", "acme",
        ])

        assert result.exit_code == 0, result.output
        assert f"Configuration generated: {config_path}" in result.output
        assert yaml.safe_load(config_path.read_text(encoding="utf-8")) == {
            "api_endpoint": "https://api.bugsnag.com",
            "login": "bob@example.com",
            "organization": {"id": "o1", "name": "Acme"},
        }
        assert [r.url.path for r in api.requests] == ["/user", "/user/organizations"]

    def test_decline_overwrite(self, fake_api, write_config, config_path: Path,
                               monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that declining keeps the existing file."""
        monkeypatch.setenv("BUGSNAG_API_TOKEN", "abc")
        write_config({"api_endpoint": "https://api.bugsnag.com", "login": "old"})
        before = config_path.read_text(encoding="utf-8")
        api = fake_api({})

        result = runner.invoke(app, ["init"], input="n\n")

        assert result.exit_code == 0, result.output
        assert f"Skipping config generation. Current config: {config_path}" in result.output
        assert config_path.read_text(encoding="utf-8") == before
        assert not config_path.with_name(".config.yml.bkp").exists()
        assert api.requests == []

    def test_init_alias(self, fake_api, write_config, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that hidden aliases run init."""
        monkeypatch.setenv("BUGSNAG_API_TOKEN", "abc")
        write_config({"login": "old"})
        fake_api({})

        result = runner.invoke(app, ["configure"], input="n\n")

        assert result.exit_code == 0
        assert "Skipping config generation" in result.output

    @pytest.mark.parametrize("args,env", [
        (["--debug", "init"], {}),
        (["init"], {"BUGSNAG_DEBUG": "true"}),
    ])
    def test_init_debug_sources(self, fake_api, write_config, monkeypatch: pytest.MonkeyPatch,
                                args: List[str], env: Dict[str, str]) -> None:
        """Test that init turns on debug from the flag or from BUGSNAG_DEBUG."""
        monkeypatch.setenv("BUGSNAG_API_TOKEN", "abc")
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        write_config({"login": "old"})
        fake_api({})
        created = []

        class RecordingGenerator(ConfigGenerator):
            def __init__(self, *args, **kwargs):
                super().__init__(*args, **kwargs)
                created.append(self)

        monkeypatch.setattr("bugsnag_cli.cli.app.ConfigGenerator", RecordingGenerator)

        result = runner.invoke(app, args, input="n\n")

        assert result.exit_code == 0, result.output
        assert created[0].debug is True

    def test_init_unauthorized(self, fake_api, config_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that a rejected token is reported with the error body."""
        monkeypatch.setenv("BUGSNAG_API_TOKEN", "bad")
        fake_api({
            "/user": lambda: httpx.Response(401, json={"errors": {"token": "invalid token"}}),
        })

        result = runner.invoke(app, [
            "init", "--api_endpoint", "https://api.bugsnag.com", "--login", "bob", "--organization", "o1",
        ])

        assert result.exit_code == 1
        assert "invalid token" in result.output
        assert "Received unexpected response '401 Unauthorized' from bugsnag" in result.output
        assert not config_path.exists()

    def test_init_unknown_organization(self, fake_api, config_path: Path,
                                       monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that an unknown organization fails the run."""
        monkeypatch.setenv("BUGSNAG_API_TOKEN", "abc")
        fake_api({
            "/user": lambda: httpx.Response(200, json={"email": "bob@example.com"}),
            "/user/organizations": lambda: httpx.Response(200, json=ORGANIZATIONS),
        })

        result = runner.invoke(app, [
            "init", "--api_endpoint", "https://api.bugsnag.com", "--login", "bob", "--organization", "nope",
        ])

        assert result.exit_code == 1
        assert "Unable to generate configuration: organization not found" in result.output
        assert not config_path.exists()

    def test_init_bad_response_format(self, fake_api, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a /user response of the wrong shape."""
        monkeypatch.setenv("BUGSNAG_API_TOKEN", "abc")
        fake_api({"/user": lambda: httpx.Response(200, json=[1, 2, 3])})

        result = runner.invoke(app, [
            "init", "--api_endpoint", "https://api.bugsnag.com", "--login", "bob", "--organization", "o1",
        ])

        assert result.exit_code == 1
        assert "Got response in unexpected format" in result.output


class TestMe:
    """Test the me command."""

    def test_me(self, write_config, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test printing the configured login without network access."""
        monkeypatch.setenv("BUGSNAG_API_TOKEN", "abc")
        write_config({"api_endpoint": "https://api.bugsnag.com", "login": "bob@example.com"})

        result = runner.invoke(app, ["me"])

        assert result.exit_code == 0
        assert result.output == "bob@example.com\n"

    def test_me_with_organization_env(self, write_config, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that a bare BUGSNAG_ORGANIZATION does not break config loading."""
        monkeypatch.setenv("BUGSNAG_API_TOKEN", "abc")
        monkeypatch.setenv("BUGSNAG_ORGANIZATION", "o1")
        write_config({
            "api_endpoint": "https://api.bugsnag.com",
            "login": "bob@example.com",
            "organization": {"id": "o9", "name": "Old"},
        })

        result = runner.invoke(app, ["me"])

        assert result.exit_code == 0, result.output
        assert result.output == "bob@example.com\n"

    def test_me_without_token(self, write_config, fake_api) -> None:
        """Test the guidance shown when no token is reachable."""
        write_config({"api_endpoint": "https://api.bugsnag.com", "login": "bob@example.com"})
        api = fake_api({})

        result = runner.invoke(app, ["me"])

        assert result.exit_code == 1
        assert TOKEN_HELP_LINK in result.output
        assert CLI_HELP_LINK in result.output
        assert "BUGSNAG_API_TOKEN" in result.output
        assert api.requests == []

    def test_me_token_from_netrc(self, write_config, netrc_file) -> None:
        """Test that a netrc entry satisfies the token gate."""
        write_config({"api_endpoint": "https://api.bugsnag.com", "login": "bob@example.com"})
        netrc_file("machine api.bugsnag.com login bob@example.com password nr-token\n")

        result = runner.invoke(app, ["me"])

        assert result.exit_code == 0
        assert result.output == "bob@example.com\n"

    def test_me_without_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the message for a missing config file."""
        monkeypatch.setenv("BUGSNAG_API_TOKEN", "abc")

        result = runner.invoke(app, ["me"])

        assert result.exit_code == 1
        assert "Missing configuration file." in result.output
        assert "bugsnag init" in result.output

    def test_custom_config_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test --config selecting another file."""
        monkeypatch.setenv("BUGSNAG_API_TOKEN", "abc")
        custom = tmp_path / "custom.yml"
        custom.write_text(yaml.safe_dump({"login": "carol@example.com"}), encoding="utf-8")

        result = runner.invoke(app, ["--config", str(custom), "me"])

        assert result.exit_code == 0
        assert result.output == "carol@example.com\n"


class TestOrganizationList:
    """Test the organization list command."""

    def test_list(self, fake_api, write_config, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test printing the organizations."""
        monkeypatch.setenv("BUGSNAG_API_TOKEN", "abc")
        write_config({"api_endpoint": "https://api.bugsnag.com", "login": "bob@example.com"})
        fake_api({"/user/organizations": lambda: httpx.Response(200, json=ORGANIZATIONS)})

        result = runner.invoke(app, ["organization", "list"])

        assert result.exit_code == 0, result.output
        assert (
            "id=o1 name=Acme slug=acme "
            "projects_url=https://api.bugsnag.com/organizations/o1/projects"
        ) in result.output

    def test_list_aliases(self, fake_api, write_config, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test hidden group and command aliases."""
        monkeypatch.setenv("BUGSNAG_API_TOKEN", "abc")
        write_config({"api_endpoint": "https://api.bugsnag.com", "login": "bob@example.com"})
        fake_api({"/user/organizations": lambda: httpx.Response(200, json=ORGANIZATIONS)})

        result = runner.invoke(app, ["orgs", "ls"])

        assert result.exit_code == 0, result.output
        assert "id=o1 name=Acme" in result.output

    def test_list_unauthorized(self, fake_api, write_config, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that API errors show the body and the status."""
        monkeypatch.setenv("BUGSNAG_API_TOKEN", "bad")
        write_config({"api_endpoint": "https://api.bugsnag.com", "login": "bob@example.com"})
        fake_api({
            "/user/organizations": lambda: httpx.Response(401, json={"errors": {"token": "invalid token"}}),
        })

        result = runner.invoke(app, ["organization", "list"])

        assert result.exit_code == 1
        assert "  - token: invalid token" in result.output
        assert "bugsnag: Received unexpected response '401 Unauthorized'." in result.output

    def test_list_empty(self, fake_api, write_config, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test an account without organizations."""
        monkeypatch.setenv("BUGSNAG_API_TOKEN", "abc")
        write_config({"api_endpoint": "https://api.bugsnag.com", "login": "bob@example.com"})
        fake_api({"/user/organizations": lambda: httpx.Response(200, json=[])})

        result = runner.invoke(app, ["organization", "list"])

        assert result.exit_code == 1
        assert "No organizations found." in result.output

    def test_list_empty_body(self, fake_api, write_config, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test an empty response body."""
        monkeypatch.setenv("BUGSNAG_API_TOKEN", "abc")
        write_config({"api_endpoint": "https://api.bugsnag.com", "login": "bob@example.com"})
        fake_api({"/user/organizations": lambda: httpx.Response(200, content=b"")})

        result = runner.invoke(app, ["organization", "list"])

        assert result.exit_code == 1
        assert "bugsnag: Received empty response." in result.output

    def test_list_without_token(self, fake_api, write_config) -> None:
        """Test that the gate stops the request."""
        write_config({"api_endpoint": "https://api.bugsnag.com", "login": "bob@example.com"})
        api = fake_api({})

        result = runner.invoke(app, ["organization", "list"])

        assert result.exit_code == 1
        assert TOKEN_HELP_LINK in result.output
        assert api.requests == []
