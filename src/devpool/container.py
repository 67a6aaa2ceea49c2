# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Minimal service container wiring devpool's collaborators together."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from typing import Any, Final

from .config import DevpoolConfig
from .filesystem import Filesystem
from .logging import info
from .orchestrator import Orchestrator
from .platform import Apt, Dnf, Pacman, Systemd, select_backend
from .pools import WorkerPoolConfigurator
from .process import CommandRunner, run_command
from .proxy import ReverseProxy
from .status import StatusChecker
from .templates import StubProvider
from .version_store import VersionStore

ServiceFactory = Callable[["ServiceContainer"], Any]

CONFIG: Final[str] = "config"
RUNNER: Final[str] = "runner"
NOTIFY: Final[str] = "notify"
FILES: Final[str] = "files"
STUBS: Final[str] = "stubs"
SERVICES: Final[str] = "services"
PACKAGES: Final[str] = "packages"
VERSIONS: Final[str] = "versions"
POOLS: Final[str] = "pools"
PROXY: Final[str] = "proxy"
ORCHESTRATOR: Final[str] = "orchestrator"
STATUS: Final[str] = "status"


class ServiceResolutionError(KeyError):
    """Raise when a requested service has not been registered."""


@dataclass(frozen=True, slots=True)
class _ServiceRecord:
    factory: ServiceFactory
    singleton: bool


class ServiceContainer:
    """Provide a lightweight registry for service factories."""

    def __init__(self) -> None:
        self._factories: dict[str, _ServiceRecord] = {}
        self._singletons: dict[str, Any] = {}

    def register(
        self,
        key: str,
        factory: ServiceFactory,
        *,
        singleton: bool = True,
        replace: bool = False,
    ) -> None:
        """Register ``factory`` under ``key``.

        Args:
            key: Unique service identifier used during lookups.
            factory: Callable receiving the container and building the service.
            singleton: When ``True`` the service is cached after first resolution.
            replace: When ``True`` replace an existing registration for ``key``.

        Raises:
            ValueError: If ``key`` is already registered and ``replace`` is ``False``.
        """

        if not replace and key in self._factories:
            raise ValueError(f"service '{key}' already registered")
        self._factories[key] = _ServiceRecord(factory=factory, singleton=singleton)
        self._singletons.pop(key, None)

    def resolve(self, key: str) -> Any:
        record = self._factories.get(key)
        if record is None:
            raise ServiceResolutionError(key)
        if not record.singleton:
            return record.factory(self)
        if key not in self._singletons:
            self._singletons[key] = record.factory(self)
        return self._singletons[key]

    def provide(self, key: str) -> Callable[[], Any]:
        return partial(self.resolve, key)

    def __contains__(self, key: str) -> bool:
        return key in self._factories

    def __repr__(self) -> str:
        keys = ", ".join(sorted(self._factories))
        return f"ServiceContainer(keys=[{keys}])"


def _services(container: ServiceContainer) -> Any:
    config: DevpoolConfig = container.resolve(CONFIG)
    runner = container.resolve(RUNNER)
    return select_backend([Systemd(runner=runner, use_sudo=config.use_sudo)], kind="service manager")


def _packages(container: ServiceContainer) -> Any:
    config: DevpoolConfig = container.resolve(CONFIG)
    runner = container.resolve(RUNNER)
    candidates = [backend(runner=runner, use_sudo=config.use_sudo) for backend in (Pacman, Apt, Dnf)]
    return select_backend(candidates, kind="package manager")


def build_container(
    config: DevpoolConfig,
    *,
    runner: CommandRunner = run_command,
    notify: Callable[[str], None] = info,
) -> ServiceContainer:
    """Register every devpool service for ``config``.

    Backends are selected lazily, the first time a command needs them.
    """

    container = ServiceContainer()
    container.register(CONFIG, lambda _: config)
    container.register(RUNNER, lambda _: runner)
    container.register(NOTIFY, lambda _: notify)
    container.register(FILES, lambda c: Filesystem(c.resolve(CONFIG).owner))
    container.register(STUBS, lambda c: StubProvider(c.resolve(CONFIG).stub_dir))
    container.register(SERVICES, _services)
    container.register(PACKAGES, _packages)
    container.register(
        VERSIONS,
        lambda c: VersionStore(c.resolve(CONFIG), runner=c.resolve(RUNNER), notify=c.resolve(NOTIFY)),
    )
    container.register(
        POOLS,
        lambda c: WorkerPoolConfigurator(
            c.resolve(CONFIG),
            files=c.resolve(FILES),
            stubs=c.resolve(STUBS),
            notify=c.resolve(NOTIFY),
        ),
    )
    container.register(
        PROXY,
        lambda c: ReverseProxy(c.resolve(CONFIG), c.resolve(SERVICES), files=c.resolve(FILES), stubs=c.resolve(STUBS)),
    )
    container.register(
        ORCHESTRATOR,
        lambda c: Orchestrator(
            c.resolve(CONFIG),
            versions=c.resolve(VERSIONS),
            pools=c.resolve(POOLS),
            proxy=c.resolve(PROXY),
            services=c.resolve(SERVICES),
            files=c.resolve(FILES),
            notify=c.resolve(NOTIFY),
        ),
    )
    container.register(
        STATUS,
        lambda c: StatusChecker(
            c.resolve(CONFIG),
            orchestrator=c.resolve(ORCHESTRATOR),
            versions=c.resolve(VERSIONS),
            services=c.resolve(SERVICES),
            packages=c.resolve(PACKAGES),
        ),
    )
    return container


__all__ = [
    "CONFIG",
    "FILES",
    "NOTIFY",
    "ORCHESTRATOR",
    "PACKAGES",
    "POOLS",
    "PROXY",
    "RUNNER",
    "SERVICES",
    "STATUS",
    "STUBS",
    "VERSIONS",
    "ServiceContainer",
    "ServiceResolutionError",
    "build_container",
]
