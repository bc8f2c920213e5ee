"""Build command: normalize and format authored policies."""

from __future__ import annotations

__all__ = ["build"]

import sys
from pathlib import Path

import click

from authzforce_client.build import build_policies
from authzforce_client.cli.state import CliState
from authzforce_client.cli.styling import style_error, style_success, style_warning


@click.command()
@click.argument("src", type=click.Path(file_okay=False, path_type=Path))
@click.argument("dest", type=click.Path(file_okay=False, path_type=Path))
@click.pass_obj
def build(state: CliState, src: Path, dest: Path) -> None:
    """Build PDP-ready policies from SRC into DEST.

    DEST is emptied first. Each SRC/*.xml file has its authoring namespace
    prefix replaced by the XACML default namespace and is pretty-printed.

    Example:
        authzforce-client build src-gen build
    """
    try:
        written = build_policies(src, dest, logger=state.logger)
    except FileNotFoundError as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(1)
    except (OSError, ValueError) as e:
        click.echo(style_error(f"Build failed: {e}"), err=True)
        sys.exit(1)

    if not written:
        click.echo(style_warning(f"No XML files found in {src}"))
        return
    click.echo(style_success(f"Built {len(written)} policy file(s) into {dest}"))
