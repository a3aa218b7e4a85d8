"""Command-line interface for Gatehouse.

This module provides CLI commands for managing the credential store and
for signing in and out. The session token is kept in ``session_file``.
"""

import asyncio
from typing import Awaitable, Callable, NoReturn, TypeVar

import click
from sqlalchemy.engine import make_url

from gatehouse.application.schemas import AuthResponse
from gatehouse.application.services import AuthService
from gatehouse.core.config import Settings, get_settings
from gatehouse.core.logging import configure_logging, get_logger
from gatehouse.infrastructure.auth import FileSessionCache

T = TypeVar("T")


def _run_with_service(settings: Settings, fn: Callable[[AuthService], Awaitable[T]]) -> T:
    """Run ``fn`` against a freshly wired service and dispose of it afterwards."""

    async def runner() -> T:
        service = AuthService.from_settings(settings)
        try:
            if not settings.is_production:
                await service.store.db.create_tables()
            return await fn(service)
        finally:
            await service.store.db.disconnect()

    return asyncio.run(runner())


def _report(response: AuthResponse) -> None:
    if response.success:
        click.echo(response.message)
        if response.user is not None:
            click.echo(f"  User ID: {response.user.id}")
            click.echo(f"  Email:   {response.user.email}")
        return
    click.echo(f"Error: {response.message}", err=True)
    raise SystemExit(1)


@click.group()
@click.version_option(version="0.1.0", prog_name="Gatehouse")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="Set log level (overrides configuration)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """Gatehouse - account registration and session management."""
    settings = get_settings()
    if log_level is not None:
        settings = settings.model_copy(update={"log_level": log_level})
    configure_logging(settings)
    ctx.obj = settings


@cli.command()
@click.option(
    "--force",
    is_flag=True,
    help="Drop existing tables first (asks for confirmation)",
)
@click.pass_obj
def init_db(settings: Settings, force: bool) -> None:
    """Create the credential store tables."""
    logger = get_logger(__name__)

    if force:
        click.confirm(
            "This will delete all registered users. Continue?",
            abort=True,
            default=False,
        )

    async def initialize(service: AuthService) -> None:
        if force:
            await service.store.db.drop_tables()
        await service.store.db.create_tables()

    _run_with_service(settings, initialize)
    logger.info("Database initialized via CLI", force=force)
    click.echo("Database initialized successfully.")


@cli.command()
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True, help="Account password")
@click.option(
    "--confirm-password",
    prompt="Confirm password",
    hide_input=True,
    help="Repeat the password",
)
@click.pass_obj
def sign_up(settings: Settings, email: str, password: str, confirm_password: str) -> None:
    """Register EMAIL and sign in as the new account."""
    session = FileSessionCache(settings.session_file)
    response = _run_with_service(
        settings,
        lambda service: service.sign_up(email, password, confirm_password, session=session),
    )
    _report(response)


@cli.command()
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True, help="Account password")
@click.pass_obj
def sign_in(settings: Settings, email: str, password: str) -> None:
    """Sign in as EMAIL."""
    session = FileSessionCache(settings.session_file)
    response = _run_with_service(
        settings,
        lambda service: service.sign_in(email, password, session=session),
    )
    _report(response)


@cli.command()
@click.pass_obj
def sign_out(settings: Settings) -> None:
    """Forget the stored session."""
    session = FileSessionCache(settings.session_file)
    # The engine is created lazily, so signing out never opens the database
    service = AuthService.from_settings(settings)
    asyncio.run(service.sign_out(session))
    click.echo("Signed out.")


@cli.command()
@click.pass_obj
def whoami(settings: Settings) -> None:
    """Show the signed-in user."""
    session = FileSessionCache(settings.session_file)
    user = _run_with_service(settings, lambda service: service.get_current_user(session))
    if user is None:
        click.echo("Not signed in", err=True)
        raise SystemExit(1)
    click.echo(f"{user.email} ({user.id})")


@cli.command()
@click.pass_obj
def info(settings: Settings) -> None:
    """Display Gatehouse configuration."""
    click.echo(f"""
Gatehouse v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}

Credential store:
  URL:          {make_url(settings.database_url).render_as_string(hide_password=True)}
  Timeout:      {settings.store_timeout_seconds} seconds

Tokens:
  Issuer:       {settings.token_issuer}
  Expire:       {settings.token_expire_days} days

Session:
  File:         {settings.session_file}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    This function is called when the `gatehouse` command is run
    or when using `python -m gatehouse`.
    """
    cli()


if __name__ == "__main__":
    main()
