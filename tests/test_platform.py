# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for service and package manager backends."""

from __future__ import annotations

from subprocess import CompletedProcess

import pytest
from conftest import FakeRunner

from devpool.errors import BackendUnavailableError, ExternalToolFailure
from devpool.platform import Apt, Dnf, Pacman, Systemd, select_backend

LIST_UNITS = """nginx.service           loaded active running A high performance web server
worker@8.2.14.service   loaded active running Worker pool 8.2.14
sshd.service            loaded active running OpenSSH Daemon
"""


class Probe:
    def __init__(self, name: str, available: bool) -> None:
        self.name = name
        self.available = available

    def is_available(self) -> bool:
        return self.available


def test_select_backend_returns_first_available() -> None:
    chosen = select_backend([Probe("a", False), Probe("b", True), Probe("c", True)], kind="service manager")

    assert chosen.name == "b"


def test_select_backend_without_candidates() -> None:
    with pytest.raises(BackendUnavailableError, match="No compatible package manager found."):
        select_backend([Probe("a", False)], kind="package manager")


def test_systemd_list_running_strips_suffix() -> None:
    listing = ("list-units", "--type=service", "--state=running", "--no-pager", "--no-legend", "--plain")
    runner = FakeRunner({listing: LIST_UNITS})

    assert Systemd(runner=runner).list_running() == frozenset({"nginx", "worker@8.2.14", "sshd"})


def test_systemd_controls_each_service_with_sudo() -> None:
    runner = FakeRunner()

    Systemd(runner=runner, use_sudo=True).restart("worker@8.2.14", "worker@8.3.0")

    assert runner.commands == [
        ["sudo", "systemctl", "restart", "worker@8.2.14"],
        ["sudo", "systemctl", "restart", "worker@8.3.0"],
    ]


def test_systemd_stop_failure_propagates() -> None:
    runner = FakeRunner(failures=[("systemctl", "stop", "nginx")])

    with pytest.raises(ExternalToolFailure):
        Systemd(runner=runner, use_sudo=True).stop("nginx")


def test_systemd_is_running_uses_exit_status() -> None:
    def runner(args, *, options=None):  # noqa: ANN001
        return CompletedProcess(list(args), 0 if args[-1] == "nginx" else 3, "", "")

    systemd = Systemd(runner=runner)

    assert systemd.is_running("nginx")
    assert not systemd.is_running("worker@8.3.0")


@pytest.mark.parametrize(
    ("backend", "expected"),
    [
        (Pacman, ["pacman", "-S", "--needed", "--noconfirm", "nginx"]),
        (Apt, ["apt-get", "install", "-y", "nginx"]),
        (Dnf, ["dnf", "install", "-y", "nginx"]),
    ],
)
def test_package_install_commands(backend, expected: list[str]) -> None:  # noqa: ANN001
    runner = FakeRunner()

    backend(runner=runner, use_sudo=False).install_or_fail("nginx")

    assert runner.commands == [expected]


def test_package_install_failure_message() -> None:
    runner = FakeRunner(failures=[("-S", "--needed", "--noconfirm", "nginx")])

    with pytest.raises(ExternalToolFailure, match=r"Pacman was unable to install \[nginx\]\."):
        Pacman(runner=runner, use_sudo=False).install_or_fail("nginx")


def test_ensure_installed_skips_present_package() -> None:
    runner = FakeRunner()

    Pacman(runner=runner, use_sudo=False).ensure_installed("nginx")

    assert runner.commands == [["pacman", "-Q", "nginx"]]


def test_apt_is_installed_reads_status() -> None:
    runner = FakeRunner({("-W", "-f=${Status}", "nginx"): "install ok installed"})

    assert Apt(runner=runner).is_installed("nginx")
    assert not Apt(runner=runner).is_installed("php")
