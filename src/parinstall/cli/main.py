"""parinstall CLI — Parallel installation of cpanfile dependencies.

Entry point for the ``parinstall`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    install     — Resolve the cpanfile and install everything in parallel.
    resolve     — Resolve the cpanfile and print the dependency graph.
    clear-cache — Remove cached registry responses.

Usage::

    parinstall install                     # ./cpanfile, 4 workers
    parinstall install -j 8 --cache        # 8 workers, cached lookups
    parinstall -v install --dry-run        # log what would be installed
    parinstall resolve --format json
    parinstall clear-cache
"""

from __future__ import annotations

import logging

import click

from parinstall import __version__
from parinstall.cli.cache_cmd import clear_cache_command
from parinstall.cli.install_cmd import install_command
from parinstall.cli.resolve_cmd import resolve_command

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(threadName)s] %(name)s: %(message)s"


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--verbose", "-v", count=True,
    help="Log lookups and task progress (-vv for debug output).",
)
def cli(verbose: int) -> None:
    """parinstall: Install a cpanfile's dependency graph in parallel.

    Resolves every module against MetaCPAN, then installs one package per
    worker, dependencies first.
    """
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=LOG_FORMAT)


# Register all subcommands
cli.add_command(install_command)
cli.add_command(resolve_command)
cli.add_command(clear_cache_command)
