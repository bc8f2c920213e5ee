"""Main CLI entry point for authzforce-client.

Defines the CLI group and registers all subcommands.

Commands:
    build          - Normalize and format authored policies
    wait           - Wait until the AuthzForce server is ready
    clean-domains  - Delete every domain on the server

Configuration precedence (lowest first): defaults, --config file,
AUTHZFORCE_URL / AUTHZFORCE_TIMEOUT / LOG_LEVEL, --url / --log-level.

Subcommand help:
    authzforce-client COMMAND -h   Show help for a specific command
"""

from __future__ import annotations

__all__ = ["cli", "main"]

import sys
from pathlib import Path

import click

from authzforce_client import __version__
from authzforce_client.config import ClientConfig
from authzforce_client.constants import APP_NAME, LOG_LEVELS
from authzforce_client.exceptions import ConfigurationError
from authzforce_client.logging_setup import get_console_logger

from .commands.build import build
from .commands.domains import clean_domains
from .commands.wait import wait
from .state import CliState
from .styling import style_error


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.option("--url", default=None, help="AuthzForce base URL (overrides AUTHZFORCE_URL)")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Console verbosity (overrides LOG_LEVEL)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="JSON config file",
)
@click.pass_context
def cli(
    ctx: click.Context,
    version: bool,
    url: str | None,
    log_level: str | None,
    config_path: Path | None,
) -> None:
    """authzforce-client: XACML policy tooling for AuthzForce CE."""
    if version:
        click.echo(f"{APP_NAME} {__version__}")
        sys.exit(0)

    try:
        base = ClientConfig.load_from_file(config_path) if config_path else None
        config = ClientConfig.from_env(base=base).with_overrides(pdp_url=url, log_level=log_level)
    except ConfigurationError as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(1)

    ctx.obj = CliState(config=config, logger=get_console_logger(config.log_level))

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Register commands
cli.add_command(build)
cli.add_command(clean_domains)
cli.add_command(wait)


def main() -> None:
    """CLI entry point."""
    cli()
