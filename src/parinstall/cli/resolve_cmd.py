"""``parinstall resolve`` — Resolve a cpanfile and show the dependency graph.

Exit Codes:
    0 — Resolution finished (unresolvable modules are reported, not fatal).
    2 — Configuration, manifest or lockfile error.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from parinstall.cli.options import config_from_options, registry_options
from parinstall.config import InstallConfig
from parinstall.core.dependency.graph import DependencyGraph
from parinstall.core.dependency.resolver import DependencyResolver, ResolutionStats
from parinstall.core.lockfile import Lockfile
from parinstall.exceptions import ConfigurationError, LockfileError, ParInstallError
from parinstall.manifest import load_cpanfile


def resolve_manifest(config: InstallConfig) -> tuple[DependencyGraph, ResolutionStats]:
    """Validate *config*, parse its manifest and resolve it.

    Writes the lockfile when ``config.lockfile`` is set.

    Raises:
        ConfigurationError: Before any lookup, if the configuration or the
            manifest is invalid.
        LockfileError: If the lockfile cannot be written.
    """
    config.validate()
    requirements = load_cpanfile(config.manifest_path)
    registry = config.build_registry()
    try:
        resolver = DependencyResolver(registry, config.build_filter())
        graph = resolver.resolve_graph(requirements)
    finally:
        registry.close()

    if config.lockfile is not None:
        Lockfile.from_graph(graph, registry=config.registry_url).write(config.lockfile)
    return graph, resolver.last_stats


def fail_configuration(exc: ParInstallError) -> None:
    click.echo(f"Error: {exc}", err=True)
    sys.exit(2)


@click.command("resolve")
@registry_options
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def resolve_command(output_format: str, **options: object) -> None:
    """Resolve the cpanfile against MetaCPAN without installing anything.

    Examples:

        parinstall resolve

        parinstall resolve --cpanfile app/cpanfile --format json
    """
    config = config_from_options(**options)
    try:
        graph, stats = resolve_manifest(config)
    except (ConfigurationError, LockfileError) as exc:
        fail_configuration(exc)
        return

    if output_format == "json":
        from parinstall.cli.output import graph_to_dict
        data = graph_to_dict(graph)
        data["failed"] = dict(sorted(stats.failed.items()))
        click.echo(json.dumps(data, indent=2))
    else:
        from parinstall.cli.output import print_dependency_tree, print_resolution_summary
        print_dependency_tree(graph)
        print_resolution_summary(graph, stats)
        if config.lockfile is not None:
            click.echo(f"\nLockfile written to: {Path(config.lockfile)}")
