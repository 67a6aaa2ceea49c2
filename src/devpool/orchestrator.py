# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Lifecycle operations over runtime versions, worker pools and site isolation.

Each operation is idempotent and safe to re-run. Validation happens before any
mutation; an external failure part-way through aborts the remaining steps and
leaves completed steps in place, so re-running the operation converges.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

from .config import DevpoolConfig
from .errors import AlreadyLatestError
from .filesystem import Filesystem
from .interfaces import PoolWriter, RuntimeVersions, SiteLedger
from .logging import info
from .platform.services import ServiceManager
from .sockets import is_worker_service, primary_socket_path, service_name, socket_path
from .utilization import UtilizationResolver, candidate_sockets
from .versions import is_default_alias, newest, normalize, validate

LOGGER = logging.getLogger(__name__)

DEFAULT_ALIAS = "latest"


@dataclass(slots=True, frozen=True)
class SwitchOutcome:
    """Result of a global version switch."""

    version: str
    changed: bool
    message: str


@dataclass(slots=True, frozen=True)
class IsolationOutcome:
    """Result of isolating or un-isolating a site."""

    site: str
    version: str | None
    previous: str | None
    changed: bool
    message: str


@dataclass(slots=True, frozen=True)
class IsolatedSite:
    site: str
    version: str


class Orchestrator:
    """Coordinate the version store, pool configurator, proxy and service manager."""

    def __init__(
        self,
        config: DevpoolConfig,
        *,
        versions: RuntimeVersions,
        pools: PoolWriter,
        proxy: SiteLedger,
        services: ServiceManager,
        files: Filesystem | None = None,
        notify: Callable[[str], None] = info,
    ) -> None:
        self._config = config
        self._versions = versions
        self._pools = pools
        self._proxy = proxy
        self._services = services
        self._files = files or Filesystem(config.owner)
        self._notify = notify
        self._resolver = UtilizationResolver(versions, proxy)

    @property
    def primary_socket(self) -> Path:
        return primary_socket_path(self._config.home_path)

    def utilized_versions(self) -> tuple[str, ...]:
        return self._resolver.utilized_versions()

    def _catalog(self) -> tuple[str, ...]:
        return self._versions.list_supported_catalog()

    def _pinned_version(self, site: str) -> str | None:
        return self._proxy.custom_version(site, candidate_sockets(self._catalog()))

    def install(self) -> str:
        """Provision the default runtime's pool and point the primary socket at it.

        Returns:
            str: The global default version the primary socket now targets.
        """

        self._notify("Installing and configuring worker pools...")
        if not self._versions.has_installed_any():
            self._versions.ensure_installed(DEFAULT_ALIAS)
        self._files.ensure_dir_exists(self._config.log_dir)

        version = self._versions.global_default()
        if version is None:
            version = newest(self._versions.list_installed()) or self._versions.ensure_installed(DEFAULT_ALIAS)
            self._versions.set_global_default(version)

        self._pools.write_config(version)
        if self._files.unlink(self.primary_socket):
            LOGGER.debug("removed stale primary socket %s", self.primary_socket)
        self.restart()
        self._files.symlink(socket_path(self._config.home_path, version), self.primary_socket)
        return version

    def switch_global(self, requested: str, *, force: bool = False) -> SwitchOutcome:
        """Make ``requested`` the global default version.

        Args:
            requested: Version in any accepted form, or the default alias.
            force: Re-link and re-configure even when already active.

        Returns:
            SwitchOutcome: ``changed`` is ``False`` when nothing was touched.

        Raises:
            ValidationError: If ``requested`` is unsupported or redundant.
        """

        current = self._versions.global_default()
        if is_default_alias(requested) and self._versions.is_using_latest():
            raise AlreadyLatestError(current or requested)
        version = validate(requested, self._catalog())
        if version == current and not force:
            return SwitchOutcome(
                version=version,
                changed=False,
                message=(
                    f"devpool is already using version: {version}. "
                    "To re-link and re-configure use the --force parameter."
                ),
            )

        self._versions.ensure_installed(version)
        self._notify(f"Setting up new version: {version}")
        self._versions.set_global_default(version)
        self.stop_running()
        self.install()
        self._proxy.reload()
        return SwitchOutcome(version=version, changed=True, message=f"devpool is now using {version}.")

    def isolate(self, directory: str | Path, version: str) -> IsolationOutcome:
        """Pin the site served from ``directory`` to ``version``."""

        site = self._proxy.site_for_directory(directory)
        canonical = validate(version, self._catalog())
        self._versions.ensure_installed(canonical)

        previous = self._pinned_version(site.name)
        self._pools.write_config(canonical)
        self._proxy.isolate(site, canonical)

        self.stop_unused(previous)
        self.restart(canonical)
        self._proxy.reload()
        return IsolationOutcome(
            site=site.name,
            version=canonical,
            previous=previous,
            changed=True,
            message=f"The site [{site.name}] is now using {canonical}.",
        )

    def unisolate(self, directory: str | Path) -> IsolationOutcome:
        """Return the site served from ``directory`` to the global default version."""

        site = self._proxy.site_for_directory(directory)
        previous = self._pinned_version(site.name)
        if previous is None:
            return IsolationOutcome(
                site=site.name,
                version=None,
                previous=None,
                changed=False,
                message=f"The site [{site.name}] is already using the default version.",
            )

        self._proxy.remove_isolation(site.name, candidate_sockets(self._catalog()))
        self.stop_unused(previous)
        self._proxy.reload()
        return IsolationOutcome(
            site=site.name,
            version=None,
            previous=previous,
            changed=True,
            message=f"The site [{site.name}] is now using the default version.",
        )

    def isolated_sites(self) -> list[IsolatedSite]:
        return [
            IsolatedSite(site=site, version=version)
            for site, version in sorted(self._resolver.isolated_versions().items())
        ]

    def stop_unused(self, version: str | None) -> bool:
        """Stop ``version``'s pool unless the default or a site still uses it.

        Returns:
            bool: ``True`` when a stop was issued.
        """

        if not version:
            return False
        canonical = normalize(version)
        if canonical in self.utilized_versions():
            return False
        self._services.stop(service_name(canonical))
        return True

    def _stop(self, versions: Iterable[str]) -> tuple[str, ...]:
        names = tuple(service_name(version) for version in versions)
        if names:
            self._services.stop(*names)
        return names

    def stop_all(self) -> tuple[str, ...]:
        """Stop every cataloged version's pool, used or not."""

        self._notify("Stopping worker pools...")
        return self._stop(self._catalog())

    def stop_running(self) -> tuple[str, ...]:
        """Stop only worker pools the service manager reports as running."""

        self._notify("Stopping worker pools...")
        running = tuple(sorted(name for name in self._services.list_running() if is_worker_service(name)))
        if running:
            self._services.stop(*running)
        return running

    def restart(self, version: str | None = None) -> tuple[str, ...]:
        """Restart one version's pool, or every utilised pool when ``version`` is ``None``.

        Raises:
            UnsupportedVersionError: If ``version`` matches no cataloged entry.
        """

        if version:
            targets: tuple[str, ...] = (validate(version, self._catalog()),)
        else:
            targets = self.utilized_versions()
        names = tuple(service_name(target) for target in targets)
        if names:
            self._services.restart(*names)
        return names

    def uninstall(self) -> tuple[str, ...]:
        """Stop every pool and remove all installed versions, links and logs."""

        self.stop_all()
        removed = self._versions.uninstall_all()
        for version in removed:
            self._files.unlink(self._pools.log_path(version))
        self._files.unlink(self.primary_socket)
        return removed

    def executable_path(self, version: str | None = None) -> Path:
        return self._versions.executable_path(version)


__all__ = ["DEFAULT_ALIAS", "IsolatedSite", "IsolationOutcome", "Orchestrator", "SwitchOutcome"]
