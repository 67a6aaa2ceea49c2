# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-site reverse-proxy configuration and the embedded isolation marker."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .config import DevpoolConfig
from .errors import SiteNotFoundError
from .filesystem import Filesystem
from .platform.services import ServiceManager
from .sockets import socket_name, version_from_socket
from .templates import ISOLATED_SITE_STUB, StubProvider, render
from .versions import normalize

ISOLATION_MARKER: Final[str] = "ISOLATED_RUNTIME_VERSION"

_MARKER_PATTERN = re.compile(rf"^# {ISOLATION_MARKER}=(?P<version>\S*)\s*$", re.MULTILINE)
_SITE_NAME_PATTERN = re.compile(r"^[a-z0-9][a-z0-9._-]*$")


@dataclass(slots=True, frozen=True)
class Site:
    """A site identifier and the project directory it serves."""

    name: str
    path: Path


def isolation_marker(text: str) -> str | None:
    """Return the version recorded by the isolation marker in ``text``."""

    match = _MARKER_PATTERN.search(text)
    if match is None or not match.group("version"):
        return None
    return normalize(match.group("version"))


def site_version(text: str, sockets: Sequence[str] = ()) -> str | None:
    """Return the version a site config is pinned to, or ``None`` for the default.

    The isolation marker wins; configs written without one are scanned for the
    first known socket name.
    """

    marked = isolation_marker(text)
    if marked is not None:
        return marked
    for sock in sockets:
        if sock in text:
            return version_from_socket(sock)
    return None


class ReverseProxy:
    """Read and write site configs under ``<home>/Nginx`` and reload the proxy."""

    def __init__(
        self,
        config: DevpoolConfig,
        services: ServiceManager,
        *,
        files: Filesystem | None = None,
        stubs: StubProvider | None = None,
    ) -> None:
        self._config = config
        self._services = services
        self._files = files or Filesystem(config.owner)
        self._stubs = stubs or StubProvider(config.stub_dir)

    @property
    def config_dir(self) -> Path:
        return self._config.proxy_dir

    def path(self, site: str) -> Path:
        return self.config_dir / site

    def configured_sites(self) -> list[str]:
        """Return site config filenames in a stable order."""

        if not self.config_dir.is_dir():
            return []
        return sorted(
            entry.name for entry in self.config_dir.iterdir() if entry.is_file() and not entry.name.startswith(".")
        )

    def read(self, site: str) -> str:
        return self._files.read(self.path(site))

    def write(self, site: str, text: str) -> None:
        self._files.ensure_dir_exists(self.config_dir)
        self._files.put(self.path(site), text)

    def remove(self, site: str) -> bool:
        return self._files.unlink(self.path(site))

    def site_for_directory(self, directory: str | Path) -> Site:
        """Resolve ``directory`` (a path or a bare site name) to a :class:`Site`.

        Raises:
            SiteNotFoundError: If no valid site name can be derived.
        """

        candidate = Path(directory).expanduser()
        resolved = candidate.resolve()
        label = resolved.name if candidate.is_dir() or str(directory) in {".", ""} else str(directory)
        name = label.strip().lower()
        suffix = f".{self._config.tld}"
        if name.endswith(suffix):
            name = name[: -len(suffix)]
        if not _SITE_NAME_PATTERN.match(name):
            raise SiteNotFoundError(str(directory))
        return Site(name=f"{name}{suffix}", path=resolved)

    def custom_version(self, site: str, sockets: Sequence[str] = ()) -> str | None:
        """Return the version ``site`` is pinned to, if any.

        Args:
            site: Site config filename.
            sockets: Worker socket names to look for when the config carries no
                isolation marker.
        """

        path = self.path(site)
        if not path.is_file():
            return None
        return site_version(self._files.read(path), sockets)

    def isolate(self, site: Site, version: str) -> None:
        """Write ``site``'s config pinned to ``version``'s worker socket."""

        canonical = normalize(version)
        contents = render(
            self._stubs.get_stub(ISOLATED_SITE_STUB),
            {
                "ISOLATED_VERSION": canonical,
                "SITE_NAME": site.name,
                "SITE_PATH": str(site.path),
                "HOME_PATH": str(self._config.home_path),
                "SOCKET_NAME": socket_name(canonical),
            },
        )
        self.write(site.name, contents)

    def remove_isolation(self, site: str, sockets: Sequence[str] = ()) -> bool:
        """Drop ``site``'s isolated config; returns ``False`` when none existed."""

        if self.custom_version(site, sockets) is None:
            return False
        return self.remove(site)

    def restart(self) -> None:
        self._services.restart(self._config.proxy_service)

    def reload(self) -> None:
        """Pick up changed site configs; the proxy is restarted to drop stale upstreams."""

        self.restart()

    def is_running(self) -> bool:
        return self._services.is_running(self._config.proxy_service)


__all__ = ["ISOLATION_MARKER", "ReverseProxy", "Site", "isolation_marker", "site_version"]
