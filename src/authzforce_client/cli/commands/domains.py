"""Domain maintenance commands."""

from __future__ import annotations

__all__ = ["clean_domains"]

import asyncio
import sys

import click

from authzforce_client.cli.state import CliState
from authzforce_client.cli.styling import style_dim, style_error, style_label, style_success
from authzforce_client.exceptions import AuthzForceClientError
from authzforce_client.pdp.cleanup import CleanupOutcome, clean_all_domains


async def _clean(state: CliState) -> list[CleanupOutcome]:
    async with state.create_client() as client:
        return await clean_all_domains(client, logger=state.logger)


@click.command("clean-domains")
@click.pass_obj
def clean_domains(state: CliState) -> None:
    """Delete every domain on the AuthzForce server.

    Deletions run concurrently; one failure does not stop the others.
    Exits 1 if listing fails or any deletion failed.
    """
    try:
        outcomes = asyncio.run(_clean(state))
    except AuthzForceClientError as e:
        click.echo(style_error(f"Failed to list domains: {e}"), err=True)
        sys.exit(1)

    if not outcomes:
        click.echo(style_dim("No domains to delete."))
        return

    click.echo(style_label("Domains") + f" {len(outcomes)}")
    for outcome in outcomes:
        if outcome.ok:
            click.echo(f"  {style_success(outcome.domain_id)}")
        else:
            click.echo(f"  {style_error(f'{outcome.domain_id}: {outcome.error}')}")

    failed = sum(1 for outcome in outcomes if not outcome.ok)
    if failed:
        click.echo(style_error(f"{failed} of {len(outcomes)} domain(s) could not be deleted"), err=True)
        sys.exit(1)
