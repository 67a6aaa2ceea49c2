# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Protocols describing the collaborators consumed by the orchestrator."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from .pools import PoolFiles
from .proxy import Site


@runtime_checkable
class VersionCatalog(Protocol):
    """Read-only view of installed and installable runtime versions."""

    def list_supported_catalog(self) -> tuple[str, ...]: ...

    def global_default(self) -> str | None: ...


@runtime_checkable
class RuntimeVersions(VersionCatalog, Protocol):
    """Mutating operations offered by the version manager facade."""

    def list_installed(self) -> tuple[str, ...]: ...

    def latest(self) -> str | None: ...

    def is_installed(self, version: str) -> bool: ...

    def has_installed_any(self) -> bool: ...

    def ensure_installed(self, version: str) -> str: ...

    def uninstall(self, version: str) -> None: ...

    def uninstall_all(self) -> tuple[str, ...]: ...

    def set_global_default(self, version: str) -> None: ...

    def is_using_latest(self) -> bool: ...

    def executable_path(self, version: str | None = None) -> Path: ...


@runtime_checkable
class SiteConfigs(Protocol):
    """Read access to per-site proxy configuration."""

    def configured_sites(self) -> list[str]: ...

    def read(self, site: str) -> str: ...


@runtime_checkable
class SiteLedger(SiteConfigs, Protocol):
    """Site resolution, isolation records and proxy reloads."""

    def site_for_directory(self, directory: str | Path) -> Site: ...

    def custom_version(self, site: str, sockets: Sequence[str] = ()) -> str | None: ...

    def isolate(self, site: Site, version: str) -> None: ...

    def remove_isolation(self, site: str, sockets: Sequence[str] = ()) -> bool: ...

    def reload(self) -> None: ...


@runtime_checkable
class PoolWriter(Protocol):
    def write_config(self, version: str) -> PoolFiles: ...

    def log_path(self, version: str) -> Path: ...


__all__ = ["PoolWriter", "RuntimeVersions", "SiteConfigs", "SiteLedger", "VersionCatalog"]
