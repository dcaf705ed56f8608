"""Tests for the cpanm and dry-run installers."""

from __future__ import annotations

import subprocess
from unittest.mock import patch

import pytest

from parinstall.core.dependency.graph import PackageNode
from parinstall.exceptions import InstallError
from parinstall.installers import CpanmInstaller, DryRunInstaller, Installer

_RUN = "parinstall.installers.cpanm.subprocess.run"


def _node(name: str = "Moose", url: str = "https://cpan.example/Moose-2.2.tar.gz") -> PackageNode:
    return PackageNode(name=name, download_url=url)


def _completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(["cpanm"], returncode, stdout, stderr)


class TestCpanmCommand:
    """Tests for the argv CpanmInstaller builds."""

    def test_uses_download_url(self) -> None:
        assert CpanmInstaller().command_for(_node()) == [
            "cpanm", "https://cpan.example/Moose-2.2.tar.gz",
        ]

    def test_falls_back_to_module_name(self) -> None:
        assert CpanmInstaller().command_for(_node(url="")) == ["cpanm", "Moose"]

    def test_notest_and_extra_args(self) -> None:
        installer = CpanmInstaller("/opt/bin/cpanm", ["--quiet"], notest=True)
        assert installer.command_for(_node(url="")) == [
            "/opt/bin/cpanm", "--notest", "--quiet", "Moose",
        ]

    def test_name(self) -> None:
        assert CpanmInstaller().name == "cpanm"


class TestCpanmInstall:
    """Tests for CpanmInstaller.install with subprocess mocked out."""

    def test_success(self) -> None:
        with patch(_RUN, return_value=_completed()) as run:
            CpanmInstaller(timeout=60).install(_node())
        args, kwargs = run.call_args
        assert args[0][-1].endswith("Moose-2.2.tar.gz")
        assert kwargs["timeout"] == 60
        assert kwargs["check"] is False

    def test_non_zero_exit_raises_with_output_tail(self) -> None:
        output = "\n".join(f"line {i}" for i in range(30))
        with patch(_RUN, return_value=_completed(1, stdout=output)):
            with pytest.raises(InstallError) as info:
                CpanmInstaller().install(_node())
        assert info.value.name == "Moose"
        assert "status 1" in info.value.reason
        assert "line 29" in info.value.reason
        assert "line 5\n" not in info.value.reason

    def test_missing_executable(self) -> None:
        with patch(_RUN, side_effect=FileNotFoundError("cpanm")):
            with pytest.raises(InstallError, match="not found"):
                CpanmInstaller().install(_node())

    def test_timeout(self) -> None:
        with patch(_RUN, side_effect=subprocess.TimeoutExpired("cpanm", 5)):
            with pytest.raises(InstallError, match="timed out"):
                CpanmInstaller(timeout=5).install(_node())

    def test_callable_delegates_to_install(self) -> None:
        with patch(_RUN, return_value=_completed()) as run:
            CpanmInstaller()(_node())
        assert run.call_count == 1


class TestDryRunInstaller:
    """Tests for DryRunInstaller."""

    def test_records_in_call_order(self) -> None:
        installer = DryRunInstaller()
        installer(_node("B"))
        installer(_node("A"))
        assert installer.installed == ["B", "A"]
        assert installer.name == "dry-run"

    def test_installed_is_a_copy(self) -> None:
        installer = DryRunInstaller()
        installer(_node())
        installer.installed.clear()
        assert installer.installed == ["Moose"]

    def test_is_an_installer(self) -> None:
        assert isinstance(DryRunInstaller(), Installer)
