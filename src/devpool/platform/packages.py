# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""OS package manager backends."""

from __future__ import annotations

import shutil
from typing import ClassVar, Protocol, runtime_checkable

from ..errors import ExternalToolFailure
from ..process import CommandOptions, CommandRunner, run_command, with_sudo


@runtime_checkable
class PackageManager(Protocol):
    """Install and query OS packages."""

    name: str

    def is_installed(self, package: str) -> bool: ...

    def install_or_fail(self, package: str) -> None: ...

    def ensure_installed(self, package: str) -> None: ...

    def uninstall(self, package: str) -> None: ...

    def is_available(self) -> bool: ...


class _CommandPackageManager:
    """Shared behaviour for package managers driven by a single executable.

    Subclasses declare the executable plus the argument lists used to query,
    install and remove a package.
    """

    name: ClassVar[str]
    executable: ClassVar[str]
    query_args: ClassVar[tuple[str, ...]]
    install_args: ClassVar[tuple[str, ...]]
    remove_args: ClassVar[tuple[str, ...]]

    def __init__(self, *, runner: CommandRunner = run_command, use_sudo: bool = True) -> None:
        self._runner = runner
        self._use_sudo = use_sudo

    def is_installed(self, package: str) -> bool:
        try:
            completed = self._runner(
                [self.executable, *self.query_args, package],
                options=CommandOptions(check=False),
            )
        except FileNotFoundError:
            return False
        return completed.returncode == 0

    def _privileged(self, args: tuple[str, ...], package: str, failure: str) -> None:
        command = with_sudo([self.executable, *args, package], enabled=self._use_sudo)
        try:
            self._runner(command, options=CommandOptions())
        except FileNotFoundError as exc:
            raise ExternalToolFailure(command, 127, str(exc), message=failure) from exc
        except ExternalToolFailure as exc:
            raise ExternalToolFailure(exc.command, exc.returncode, exc.stderr, message=failure) from exc

    def install_or_fail(self, package: str) -> None:
        self._privileged(self.install_args, package, f"{self.name} was unable to install [{package}].")

    def ensure_installed(self, package: str) -> None:
        if not self.is_installed(package):
            self.install_or_fail(package)

    def uninstall(self, package: str) -> None:
        self._privileged(self.remove_args, package, f"{self.name} was unable to uninstall [{package}].")

    def is_available(self) -> bool:
        return shutil.which(self.executable) is not None


class Pacman(_CommandPackageManager):
    name = "Pacman"
    executable = "pacman"
    query_args = ("-Q",)
    install_args = ("-S", "--needed", "--noconfirm")
    remove_args = ("-Rns", "--noconfirm")


class Apt(_CommandPackageManager):
    name = "Apt"
    executable = "apt-get"
    query_args = ()
    install_args = ("install", "-y")
    remove_args = ("remove", "--purge", "-y")

    def is_installed(self, package: str) -> bool:
        try:
            completed = self._runner(
                ["dpkg-query", "-W", "-f=${Status}", package],
                options=CommandOptions(check=False),
            )
        except FileNotFoundError:
            return False
        return completed.returncode == 0 and "install ok installed" in (completed.stdout or "")


class Dnf(_CommandPackageManager):
    name = "Dnf"
    executable = "dnf"
    query_args = ("list", "--installed")
    install_args = ("install", "-y")
    remove_args = ("remove", "-y")


__all__ = ["Apt", "Dnf", "PackageManager", "Pacman"]
