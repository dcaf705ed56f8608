"""Installer that shells out to ``cpanm`` (App::cpanminus)."""

from __future__ import annotations

import logging
import subprocess
from typing import Sequence

from parinstall.core.dependency.graph import PackageNode
from parinstall.exceptions import InstallError
from parinstall.installers.base import Installer

logger = logging.getLogger(__name__)

# Lines of cpanm output kept in an InstallError message.
_ERROR_TAIL_LINES: int = 10


class CpanmInstaller(Installer):
    """Installs each package with one ``cpanm`` invocation.

    The release tarball URL is preferred over the module name so that
    cpanm installs exactly the release the resolver saw. ``--notest`` skips
    test suites. Dependencies are still installed by cpanm itself if the
    scheduler has not finished them yet.

    Args:
        executable: cpanm command or path.
        extra_args: Extra arguments placed before the target.
        notest: Pass ``--notest``.
        timeout: Optional per-package timeout in seconds.
    """

    def __init__(
        self,
        executable: str = "cpanm",
        extra_args: Sequence[str] = (),
        *,
        notest: bool = False,
        timeout: float | None = None,
    ) -> None:
        self._executable = executable
        self._extra_args = list(extra_args)
        self._notest = notest
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "cpanm"

    def command_for(self, node: PackageNode) -> list[str]:
        """Return the argv used to install *node*."""
        cmd = [self._executable]
        if self._notest:
            cmd.append("--notest")
        cmd.extend(self._extra_args)
        cmd.append(node.download_url or node.name)
        return cmd

    def install(self, node: PackageNode) -> None:
        cmd = self.command_for(node)
        logger.debug("Running %s", " ".join(cmd))
        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise InstallError(node.name, f"{self._executable} not found") from exc
        except subprocess.TimeoutExpired as exc:
            raise InstallError(node.name, f"timed out after {exc.timeout}s") from exc

        if proc.returncode != 0:
            output = (proc.stdout or "") + (proc.stderr or "")
            tail = "\n".join(output.strip().splitlines()[-_ERROR_TAIL_LINES:])
            raise InstallError(
                node.name, f"cpanm exited with status {proc.returncode}\n{tail}"
            )
