"""``parinstall install`` — Resolve a cpanfile and install it in parallel.

Exit Codes:
    0 — Every package installed.
    1 — One or more packages failed to install.
    2 — Configuration, manifest or lockfile error; nothing was installed.
"""

from __future__ import annotations

import sys

import click

from parinstall.cli.options import config_from_options, registry_options
from parinstall.cli.resolve_cmd import fail_configuration, resolve_manifest
from parinstall.core.scheduler import DEFAULT_WORKERS, ParallelScheduler
from parinstall.exceptions import ConfigurationError, LockfileError


@click.command("install")
@registry_options
@click.option(
    "--workers", "-j",
    type=int, default=DEFAULT_WORKERS, show_default=True,
    envvar="PARINSTALL_WORKERS",
    help="Maximum number of packages installed at once.",
)
@click.option("--dry-run", is_flag=True, help="Show what would be installed.")
@click.option("--cpanm", default="cpanm", show_default=True, help="cpanm executable.")
@click.option("--notest", is_flag=True, help="Skip test suites (cpanm --notest).")
def install_command(**options: object) -> None:
    """Install every module in the cpanfile and its dependencies.

    Dependencies are submitted before the modules that need them, but with
    more than one worker a module may start while a dependency is still
    installing. Use -j 1 for strictly ordered installs.

    Examples:

        parinstall install -j 8

        parinstall install --cache --dry-run
    """
    config = config_from_options(**options)
    try:
        graph, stats = resolve_manifest(config)
        installer = config.build_installer()
        scheduler = ParallelScheduler(config.workers)
    except (ConfigurationError, LockfileError) as exc:
        fail_configuration(exc)
        return

    from parinstall.cli.output import print_resolution_summary, print_run_report
    print_resolution_summary(graph, stats)
    report = scheduler.run(graph, installer)
    print_run_report(report, graph)

    sys.exit(0 if report.ok else 1)
