# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""OS service manager backends."""

from __future__ import annotations

import shutil
from collections.abc import Iterable
from typing import Final, Protocol, runtime_checkable

from ..errors import ExternalToolFailure
from ..process import CommandOptions, CommandRunner, run_command, with_sudo

_SERVICE_SUFFIX: Final[str] = ".service"


@runtime_checkable
class ServiceManager(Protocol):
    """Start, stop and inspect system services."""

    name: str

    def restart(self, *services: str) -> None: ...

    def stop(self, *services: str) -> None: ...

    def list_running(self) -> frozenset[str]: ...

    def is_running(self, service: str) -> bool: ...

    def is_available(self) -> bool: ...


class Systemd:
    """Service manager backed by ``systemctl``."""

    name = "systemd"

    def __init__(self, *, runner: CommandRunner = run_command, use_sudo: bool = True) -> None:
        self._runner = runner
        self._use_sudo = use_sudo

    def _control(self, action: str, services: Iterable[str]) -> None:
        for service in services:
            command = with_sudo(["systemctl", action, service], enabled=self._use_sudo)
            try:
                self._runner(command, options=CommandOptions())
            except FileNotFoundError as exc:
                raise ExternalToolFailure(command, 127, str(exc)) from exc

    def restart(self, *services: str) -> None:
        self._control("restart", services)

    def stop(self, *services: str) -> None:
        self._control("stop", services)

    def list_running(self) -> frozenset[str]:
        """Return running unit names with the ``.service`` suffix removed."""

        completed = self._runner(
            [
                "systemctl",
                "list-units",
                "--type=service",
                "--state=running",
                "--no-pager",
                "--no-legend",
                "--plain",
            ],
            options=CommandOptions(),
        )
        running: set[str] = set()
        for line in (completed.stdout or "").splitlines():
            fields = line.split()
            if not fields:
                continue
            unit = fields[0]
            running.add(unit[: -len(_SERVICE_SUFFIX)] if unit.endswith(_SERVICE_SUFFIX) else unit)
        return frozenset(running)

    def is_running(self, service: str) -> bool:
        completed = self._runner(
            ["systemctl", "is-active", "--quiet", service],
            options=CommandOptions(check=False),
        )
        return completed.returncode == 0

    def is_available(self) -> bool:
        return shutil.which("systemctl") is not None


__all__ = ["ServiceManager", "Systemd"]
