"""
Main CLI application entry point.

This module contains the main Typer application and command handlers
for Bugsnag CLI.
"""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import typer

from bugsnag_cli import PACKAGE_NAME, VERSION
from bugsnag_cli.cli.output import (
    configure_logging,
    console,
    err_console,
    exit_with_error,
    failed,
    success,
    warn,
)
from bugsnag_cli.config.generator import ConfigGenerator, GeneratorInput
from bugsnag_cli.config.resolver import CredentialResolver, command_requires_token
from bugsnag_cli.config.store import ConfigStore, default_config_path
from bugsnag_cli.core.client import BugsnagClient, get_client
from bugsnag_cli.core.errors import (
    ApiError,
    BugsnagError,
    ConfigMissingError,
    SkipError,
    UnexpectedResponseFormatError,
    token_missing_guidance,
)
from bugsnag_cli.core.models import Organization
from bugsnag_cli.ui.prompts import WizardPrompter

# Create the main Typer application
app = typer.Typer(
    name="bugsnag",
    help="Interactive Bugsnag CLI.",
    add_completion=False,
)

organization_app = typer.Typer(
    help="Organization manages Bugsnag Organizations. See available commands below.",
    add_completion=False,
)


@dataclass
class CliState:
    """Per-invocation state shared by all commands."""
    store: ConfigStore
    resolver: CredentialResolver
    organization: str = ""
    debug: bool = False


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help=f"Config file (default is {default_config_path()})",
    ),
    organization: str = typer.Option(
        "",
        "--organization",
        "-o",
        help="Bugsnag organization to look into (defaults to the configured one)",
    ),
    debug: bool = typer.Option(False, "--debug", help="Turn on debug output"),
) -> None:
    """
    Interactive Bugsnag CLI.
    """
    configure_logging(debug)

    store = ConfigStore(config)
    ctx.obj = CliState(
        store=store,
        resolver=CredentialResolver(store),
        organization=organization,
        debug=debug,
    )

    if debug and store.exists():
        console.print(f"Using config file: {store.path()}", markup=False, highlight=False)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _ensure_ready(ctx: typer.Context) -> CliState:
    """Gate commands that need a token and a config file."""
    state: CliState = ctx.obj
    if not command_requires_token(ctx.info_name or ""):
        return state

    try:
        if not state.resolver.token_reachable():
            warn(token_missing_guidance())
            raise typer.Exit(1)
    except (BugsnagError, ValueError) as e:
        exit_with_error(e)

    if not state.store.exists():
        failed(ConfigMissingError(state.store.path()).message)

    return state


def _debug(state: CliState) -> bool:
    return state.debug or state.resolver.document.debug


def _client(state: CliState) -> BugsnagClient:
    profile = state.resolver.resolve(organization=state.organization)
    return get_client(profile.client_config(debug=_debug(state)))


def init_command(
    ctx: typer.Context,
    api_endpoint: str = typer.Option("", "--api_endpoint", help="Link to your bugsnag api endpoint"),
    login: str = typer.Option("", "--login", help="Bugsnag login"),
    organization: str = typer.Option("", "--organization", help="Your default organization id"),
    force: bool = typer.Option(False, "--force", help="Forcefully override existing config if it exists"),
) -> None:
    """Init initializes bugsnag configuration required for the tool to work properly."""
    state: CliState = ctx.obj

    try:
        generator = ConfigGenerator(
            GeneratorInput(
                api_endpoint=api_endpoint,
                login=login,
                organization=organization,
                force=force,
            ),
            state.store,
            state.resolver,
            prompter=WizardPrompter(console, err_console),
            debug=_debug(state),
        )
        path = asyncio.run(_generate(generator))
    except SkipError:
        success(f"Skipping config generation. Current config: {state.store.path()}")
        return
    except ApiError as e:
        console.print()
        if not e.body.is_empty:
            err_console.print(str(e.body), markup=False, highlight=False)
        failed(f"Received unexpected response '{e.status_text}' from bugsnag. Please try again.")
    except UnexpectedResponseFormatError:
        console.print()
        failed("Got response in unexpected format when fetching metadata. Please try again.")
    except KeyboardInterrupt:
        console.print()
        failed("Interrupted")
    except (BugsnagError, ValueError) as e:
        console.print()
        failed(f"Unable to generate configuration: {e}")

    success(f"Configuration generated: {path}")


async def _generate(generator: ConfigGenerator) -> Path:
    try:
        return await generator.generate()
    finally:
        if generator.client is not None:
            await generator.client.aclose()


for _name, _hidden in [
    ("init", False),
    ("initialize", True),
    ("configure", True),
    ("config", True),
    ("setup", True),
]:
    app.command(_name, hidden=_hidden)(init_command)


@app.command("me")
def me_command(ctx: typer.Context) -> None:
    """Displays configured bugsnag user."""
    state = _ensure_ready(ctx)
    typer.echo(state.resolver.document.login)


@app.command("version")
def version_command() -> None:
    """Prints the version."""
    typer.echo(f"{PACKAGE_NAME} version {VERSION}")


@app.command("help")
def help_command(ctx: typer.Context) -> None:
    """Help about any command."""
    typer.echo(ctx.parent.get_help() if ctx.parent else ctx.get_help())


@organization_app.callback(invoke_without_command=True)
def organization_callback(ctx: typer.Context) -> None:
    """Organization manages Bugsnag Organizations."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def list_command(ctx: typer.Context) -> None:
    """Lists Bugsnag organizations that a user has access to."""
    state = _ensure_ready(ctx)

    try:
        client = _client(state)
        organizations = asyncio.run(_fetch_organizations(client))
    except (BugsnagError, ValueError) as e:
        exit_with_error(e)

    if not organizations:
        failed("No organizations found.")

    for org in organizations:
        typer.echo(
            f"id={org.id} name={org.name} slug={org.slug} projects_url={org.projects_url}"
        )


async def _fetch_organizations(client: BugsnagClient) -> List[Organization]:
    try:
        with err_console.status("[dim]Fetching organizations...[/dim]"):
            return await client.organizations()
    finally:
        await client.aclose()


for _name, _hidden in [("list", False), ("ls", True), ("lists", True)]:
    organization_app.command(_name, hidden=_hidden)(list_command)

for _name, _hidden in [
    ("organization", False),
    ("organizations", True),
    ("orgs", True),
    ("org", True),
]:
    app.add_typer(organization_app, name=_name, hidden=_hidden)


def main() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    main()
