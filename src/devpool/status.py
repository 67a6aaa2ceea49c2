# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Health checks across installed runtimes, worker pools and the reverse proxy."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from .config import DevpoolConfig
from .interfaces import RuntimeVersions
from .orchestrator import Orchestrator
from .platform.packages import PackageManager
from .platform.services import ServiceManager
from .sockets import primary_socket_path, service_name, socket_path

_RUN_INSTALL = "Run `devpool install`."
_RUN_RESTART = "Run `devpool restart`."


@dataclass(slots=True, frozen=True)
class StatusCheck:
    """A named probe plus the hint shown when it fails."""

    description: str
    check: Callable[[], bool]
    debug: str


@dataclass(slots=True, frozen=True)
class CheckResult:
    description: str
    success: bool


@dataclass(slots=True)
class StatusReport:
    """Aggregated check outcomes."""

    results: list[CheckResult] = field(default_factory=list)
    debug: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return all(result.success for result in self.results)


class StatusChecker:
    """Build and evaluate the health checks for the current installation."""

    def __init__(
        self,
        config: DevpoolConfig,
        *,
        orchestrator: Orchestrator,
        versions: RuntimeVersions,
        services: ServiceManager,
        packages: PackageManager,
    ) -> None:
        self._config = config
        self._orchestrator = orchestrator
        self._versions = versions
        self._services = services
        self._packages = packages

    def checks(self) -> list[StatusCheck]:
        home = self._config.home_path
        checks = [
            StatusCheck("Is a runtime version installed?", self._versions.has_installed_any, _RUN_INSTALL),
            StatusCheck(
                f"Is {self._config.proxy_package} installed?",
                lambda: self._packages.is_installed(self._config.proxy_package),
                _RUN_INSTALL,
            ),
            StatusCheck(
                f"Is {self._config.proxy_service} running?",
                lambda: self._services.is_running(self._config.proxy_service),
                _RUN_RESTART,
            ),
        ]
        for version in self._orchestrator.utilized_versions():
            checks.extend(
                [
                    StatusCheck(
                        f"Is {version} installed?",
                        lambda version=version: self._versions.is_installed(version),
                        _RUN_INSTALL,
                    ),
                    StatusCheck(
                        f"Is {version} running?",
                        lambda version=version: self._services.is_running(service_name(version)),
                        _RUN_RESTART,
                    ),
                    StatusCheck(
                        f"Is the {version} socket present?",
                        lambda version=version: socket_path(home, version).exists(),
                        _RUN_INSTALL,
                    ),
                ]
            )
        checks.append(
            StatusCheck(
                "Is the primary socket present?",
                lambda: primary_socket_path(home).is_symlink(),
                _RUN_INSTALL,
            )
        )
        return checks

    def run(self) -> StatusReport:
        """Evaluate every check and collect unique debug hints for failures."""

        report = StatusReport()
        for item in self.checks():
            passed = bool(item.check())
            report.results.append(CheckResult(description=item.description, success=passed))
            if not passed and item.debug not in report.debug:
                report.debug.append(item.debug)
        return report


__all__ = ["CheckResult", "StatusCheck", "StatusChecker", "StatusReport"]
