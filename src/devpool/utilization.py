# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Derive the runtime versions that currently need a live worker pool."""

from __future__ import annotations

from collections.abc import Iterable

from .interfaces import SiteConfigs, VersionCatalog
from .proxy import site_version
from .sockets import socket_name


def candidate_sockets(catalog: Iterable[str]) -> tuple[str, ...]:
    """Return de-duplicated socket names for every cataloged version."""

    return tuple(dict.fromkeys(socket_name(version) for version in catalog))


class UtilizationResolver:
    """Recompute the utilised version set from site configs on every call."""

    def __init__(self, versions: VersionCatalog, sites: SiteConfigs) -> None:
        self._versions = versions
        self._sites = sites

    def isolated_versions(self) -> dict[str, str]:
        """Return ``{site: version}`` for every site pinned to a version."""

        sockets = candidate_sockets(self._versions.list_supported_catalog())
        pinned: dict[str, str] = {}
        for site in self._sites.configured_sites():
            version = site_version(self._sites.read(site), sockets)
            if version is not None:
                pinned[site] = version
        return pinned

    def utilized_versions(self) -> tuple[str, ...]:
        """Return the global default plus every isolated version, sorted."""

        utilized = set(self.isolated_versions().values())
        default = self._versions.global_default()
        if default:
            utilized.add(default)
        return tuple(sorted(utilized))

    def is_utilized(self, version: str) -> bool:
        return version in self.utilized_versions()


__all__ = ["UtilizationResolver", "candidate_sockets", "site_version"]
