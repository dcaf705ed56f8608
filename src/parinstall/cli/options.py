"""Click options shared by the resolve and install commands."""

from __future__ import annotations

from typing import Any, Callable

import click

from parinstall.config import DEFAULT_CACHE_DIR, InstallConfig
from parinstall.manifest.cpanfile import DEFAULT_CPANFILE
from parinstall.registry.http_client import DEFAULT_TIMEOUT
from parinstall.registry.metacpan import METACPAN_API

F = Callable[..., Any]

_REGISTRY_OPTIONS: list[F] = [
    click.option(
        "--cpanfile", "manifest_path",
        type=click.Path(dir_okay=False),
        default=DEFAULT_CPANFILE, show_default=True,
        envvar="PARINSTALL_CPANFILE",
        help="Manifest listing the modules to install.",
    ),
    click.option(
        "--cache/--no-cache", "use_cache",
        default=False, envvar="PARINSTALL_CACHE",
        help="Cache registry responses on disk (default: off).",
    ),
    click.option(
        "--cache-dir",
        type=click.Path(),
        default=DEFAULT_CACHE_DIR, show_default=True,
        envvar="PARINSTALL_CACHE_DIR",
        help="Directory for cached registry responses.",
    ),
    click.option(
        "--registry-url",
        default=METACPAN_API, show_default=True,
        envvar="PARINSTALL_REGISTRY_URL",
        help="MetaCPAN API root.",
    ),
    click.option(
        "--timeout",
        type=float, default=DEFAULT_TIMEOUT, show_default=True,
        help="Registry request timeout in seconds.",
    ),
    click.option(
        "--skip", multiple=True, metavar="MODULE",
        help="Never resolve or install MODULE (repeatable).",
    ),
    click.option(
        "--lockfile",
        type=click.Path(dir_okay=False),
        default=None,
        help="Also write the resolved graph to this JSON lockfile.",
    ),
]


def registry_options(fn: F) -> F:
    """Apply the options every registry-backed command accepts."""
    for option in reversed(_REGISTRY_OPTIONS):
        fn = option(fn)
    return fn


def config_from_options(**options: Any) -> InstallConfig:
    """Build an ``InstallConfig`` from command keyword arguments."""
    return InstallConfig(**{k: v for k, v in options.items() if v is not None})
