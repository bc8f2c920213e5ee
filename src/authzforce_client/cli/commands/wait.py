"""Wait command: block until the PDP answers health checks."""

from __future__ import annotations

__all__ = ["wait"]

import asyncio
import sys

import click

from authzforce_client.cli.state import CliState
from authzforce_client.cli.styling import style_error, style_success
from authzforce_client.pdp.readiness import wait_until_ready


async def _wait(state: CliState, timeout: float, interval: float) -> bool:
    async with state.create_client() as client:
        return await wait_until_ready(client, timeout=timeout, interval=interval, logger=state.logger)


@click.command()
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), default=None, help="Seconds to wait in total")
@click.option("--interval", type=click.FloatRange(min=0, min_open=True), default=None, help="Seconds between checks")
@click.pass_obj
def wait(state: CliState, timeout: float | None, interval: float | None) -> None:
    """Wait for AuthzForce to become ready.

    Exits 0 once GET /domains answers 200, or 1 when the timeout expires.

    Examples:
        authzforce-client wait
        authzforce-client --url http://pdp:8080/authzforce-ce wait --timeout 120
    """
    effective_timeout = timeout if timeout is not None else state.config.readiness_timeout_seconds
    effective_interval = interval if interval is not None else state.config.readiness_interval_seconds

    if asyncio.run(_wait(state, effective_timeout, effective_interval)):
        click.echo(style_success(f"AuthzForce is ready at {state.config.pdp_url}"))
        return

    click.echo(style_error(f"AuthzForce not ready after {effective_timeout:g}s"), err=True)
    sys.exit(1)
