# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures and in-memory collaborators."""

from __future__ import annotations

import getpass
from collections.abc import Iterable, Mapping
from pathlib import Path
from subprocess import CompletedProcess

import pytest

from devpool.config import DevpoolConfig
from devpool.console import get_console_manager
from devpool.errors import ExternalToolFailure
from devpool.pools import WorkerPoolConfigurator
from devpool.proxy import ReverseProxy
from devpool.versions import newest, normalize


def _completed(
    args: list[str],
    *,
    stdout: str = "",
    stderr: str = "",
    returncode: int = 0,
) -> CompletedProcess[str]:
    return CompletedProcess(args=args, returncode=returncode, stdout=stdout, stderr=stderr)


class FakeRunner:
    """Record commands and answer them from canned output.

    Keys are the command arguments after the executable, as a tuple.
    """

    def __init__(
        self,
        responses: Mapping[tuple[str, ...], str] | None = None,
        failures: Iterable[tuple[str, ...]] = (),
    ) -> None:
        self.responses = dict(responses or {})
        self.failures = set(failures)
        self.commands: list[list[str]] = []
        self.options: list[object] = []

    def __call__(self, args, *, options=None):  # noqa: ANN001
        command = list(args)
        self.commands.append(command)
        self.options.append(options)
        key = tuple(command[1:])
        if key in self.failures:
            raise ExternalToolFailure(command, 1, "boom")
        return _completed(command, stdout=self.responses.get(key, ""))

    def tails(self) -> list[tuple[str, ...]]:
        return [tuple(command[1:]) for command in self.commands]


class FakeServices:
    """Service manager double tracking restarts, stops and running units."""

    name = "fake"

    def __init__(self, running: Iterable[str] = ()) -> None:
        self.running = set(running)
        self.restarted: list[str] = []
        self.stopped: list[str] = []

    def restart(self, *services: str) -> None:
        self.restarted.extend(services)
        self.running.update(services)

    def stop(self, *services: str) -> None:
        self.stopped.extend(services)
        self.running.difference_update(services)

    def list_running(self) -> frozenset[str]:
        return frozenset(self.running)

    def is_running(self, service: str) -> bool:
        return service in self.running

    def is_available(self) -> bool:
        return True


class FakePackages:
    name = "fake"

    def __init__(self, installed: Iterable[str] = ()) -> None:
        self.installed = set(installed)

    def is_installed(self, package: str) -> bool:
        return package in self.installed

    def install_or_fail(self, package: str) -> None:
        self.installed.add(package)

    def ensure_installed(self, package: str) -> None:
        self.installed.add(package)

    def uninstall(self, package: str) -> None:
        self.installed.discard(package)

    def is_available(self) -> bool:
        return True


class FakeVersions:
    """In-memory version manager."""

    def __init__(
        self,
        catalog: Iterable[str],
        *,
        installed: Iterable[str] = (),
        default: str | None = None,
    ) -> None:
        self.catalog = tuple(catalog)
        self.installed = list(installed)
        self.default = default
        self.installs: list[str] = []
        self.uninstalled: list[str] = []

    def list_supported_catalog(self) -> tuple[str, ...]:
        return self.catalog

    def global_default(self) -> str | None:
        return self.default

    def list_installed(self) -> tuple[str, ...]:
        return tuple(self.installed)

    def latest(self) -> str | None:
        return newest(self.catalog)

    def _resolve(self, version: str) -> str:
        return self.latest() if version == "latest" else normalize(version)

    def is_installed(self, version: str) -> bool:
        return self._resolve(version) in self.installed

    def has_installed_any(self) -> bool:
        return bool(self.installed)

    def ensure_installed(self, version: str) -> str:
        resolved = self._resolve(version)
        if resolved not in self.installed:
            self.installed.append(resolved)
            self.installs.append(resolved)
        return resolved

    def uninstall(self, version: str) -> None:
        self.installed.remove(version)
        self.uninstalled.append(version)

    def uninstall_all(self) -> tuple[str, ...]:
        removed = tuple(self.installed)
        for version in removed:
            self.uninstall(version)
        return removed

    def set_global_default(self, version: str) -> None:
        self.default = self._resolve(version)

    def is_using_latest(self) -> bool:
        return self.default is not None and self.default == self.latest()

    def executable_path(self, version: str | None = None) -> Path:
        return Path("/usr/bin/rt")

    def installed_summary(self) -> list[tuple[str, bool]]:
        return [(version, version == self.default) for version in self.installed]


@pytest.fixture(autouse=True)
def _reset_console() -> Iterable[None]:
    """Rebind cached Rich consoles to the stdout captured by each test."""

    get_console_manager().reset()
    yield
    get_console_manager().reset()


@pytest.fixture
def config(tmp_path: Path) -> DevpoolConfig:
    return DevpoolConfig(
        home_path=tmp_path / "home",
        owner=getpass.getuser(),
        version_manager=Path("/opt/rtenv/bin/rtenv"),
        versions_root=tmp_path / "versions",
        use_sudo=False,
    )


@pytest.fixture
def services() -> FakeServices:
    return FakeServices()


@pytest.fixture
def pools(config: DevpoolConfig) -> WorkerPoolConfigurator:
    return WorkerPoolConfigurator(config, notify=lambda _msg: None)


@pytest.fixture
def proxy(config: DevpoolConfig, services: FakeServices) -> ReverseProxy:
    return ReverseProxy(config, services)
