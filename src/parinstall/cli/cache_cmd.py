"""``parinstall clear-cache`` — Remove cached registry responses."""

from __future__ import annotations

from pathlib import Path

import click

from parinstall.config import DEFAULT_CACHE_DIR
from parinstall.registry.cache import ResponseCache


@click.command("clear-cache")
@click.option(
    "--cache-dir",
    type=click.Path(file_okay=False),
    default=DEFAULT_CACHE_DIR, show_default=True,
    envvar="PARINSTALL_CACHE_DIR",
    help="Directory for cached registry responses.",
)
def clear_cache_command(cache_dir: str) -> None:
    """Delete every cached MetaCPAN response."""
    path = Path(cache_dir)
    if not path.is_dir():
        click.echo(f"No cache at {path}.")
        return
    removed = ResponseCache(path).clear()
    click.echo(f"Removed {removed} cached response(s) from {path}.")
