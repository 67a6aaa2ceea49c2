# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Facade over the external runtime version-manager tool."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final

from .config import DevpoolConfig
from .errors import ExternalToolFailure, InstallFailure, UninstallFailure
from .logging import info
from .process import CommandOptions, CommandRunner, run_command
from .versions import is_default_alias, matches, newest, normalize, raw

LOGGER = logging.getLogger(__name__)

Notify = Callable[[str], None]

_CATALOG_HEADER: Final[str] = "Available"
_SNAPSHOT_SUFFIX: Final[str] = "snapshot"
_NO_GLOBAL: Final[frozenset[str]] = frozenset({"", "system"})
_TOOL_MISSING_STATUS: Final[int] = 127


def _parse_versions(output: str) -> tuple[str, ...]:
    """Return canonical versions from newline separated tool output."""

    seen: dict[str, None] = {}
    for line in output.splitlines():
        entry = line.strip()
        if not entry or not entry[0].isdigit():
            continue
        seen.setdefault(normalize(entry), None)
    return tuple(seen)


class VersionStore:
    """Track installed runtime versions through the version-manager CLI.

    Queries treat a missing tool as an empty result. Mutations surface both a
    missing tool and a failing command as :class:`ExternalToolFailure`.
    """

    def __init__(
        self,
        config: DevpoolConfig,
        *,
        runner: CommandRunner = run_command,
        notify: Notify = info,
    ) -> None:
        self._config = config
        self._runner = runner
        self._notify = notify

    def _command(self, *args: str) -> list[str]:
        return [str(self._config.version_manager), *args]

    def _query(self, *args: str) -> str:
        try:
            completed = self._runner(self._command(*args), options=CommandOptions())
        except FileNotFoundError:
            LOGGER.debug("version manager %s not found", self._config.version_manager)
            return ""
        return completed.stdout or ""

    def _mutate(self, *args: str, env: dict[str, str] | None = None) -> CompletedProcess[str]:
        command = self._command(*args)
        options = CommandOptions()
        if env:
            options = options.with_env(env)
        try:
            return self._runner(command, options=options)
        except FileNotFoundError as exc:
            raise ExternalToolFailure(command, _TOOL_MISSING_STATUS, str(exc)) from exc

    def list_installed(self) -> tuple[str, ...]:
        """Return installed versions as reported by ``versions --bare``."""

        return _parse_versions(self._query("versions", "--bare"))

    def list_supported_catalog(self) -> tuple[str, ...]:
        """Return the installable catalog without header or snapshot lines."""

        lines = [
            line
            for line in self._query("install", "--list").splitlines()
            if not line.strip().startswith(_CATALOG_HEADER) and not line.strip().endswith(_SNAPSHOT_SUFFIX)
        ]
        return _parse_versions("\n".join(lines))

    def latest(self) -> str | None:
        return newest(self.list_supported_catalog())

    def resolve(self, version: str) -> str:
        """Map the default alias onto the newest cataloged version."""

        if is_default_alias(version):
            latest = self.latest()
            if latest is None:
                raise ExternalToolFailure(self._command("install", "--list"), 1, "empty version catalog")
            return latest
        return normalize(version)

    def _installed_match(self, version: str) -> str | None:
        return newest(entry for entry in self.list_installed() if matches(version, entry))

    def is_installed(self, version: str) -> bool:
        return self._installed_match(self.resolve(version)) is not None

    def has_installed_any(self) -> bool:
        return bool(self.list_installed())

    def install(self, version: str) -> str:
        """Install ``version`` with the development profile and extension list.

        On failure the half-installed version is removed before the error is
        re-raised.

        Args:
            version: Version to install, in any accepted form.

        Returns:
            str: Canonical version that was installed.

        Raises:
            InstallFailure: If the version manager exits with a non-zero status.
        """

        resolved = self.resolve(version)
        self._notify(f"Installing {resolved}...")
        env = {self._config.extensions_env: ",".join(self._config.install_extensions)}
        try:
            self._mutate("install", "--ini", self._config.install_profile, raw(resolved), env=env)
        except ExternalToolFailure as exc:
            self._rollback(resolved)
            raise InstallFailure(resolved, exc.stderr, command=exc.command, returncode=exc.returncode) from exc
        self._mutate("rehash")
        return resolved

    def _rollback(self, version: str) -> None:
        try:
            self._mutate("uninstall", "-f", raw(version))
        except ExternalToolFailure as exc:
            LOGGER.warning("cleanup of %s after failed install did not succeed: %s", version, exc)

    def ensure_installed(self, version: str) -> str:
        """Install ``version`` unless already present and return its canonical form."""

        resolved = self.resolve(version)
        present = self._installed_match(resolved)
        if present is not None:
            return present
        return self.install(resolved)

    def uninstall(self, version: str) -> None:
        resolved = normalize(version)
        self._notify(f"Uninstalling {resolved}...")
        try:
            self._mutate("uninstall", "-f", raw(resolved))
        except ExternalToolFailure as exc:
            raise UninstallFailure(resolved, exc.stderr, command=exc.command, returncode=exc.returncode) from exc

    def uninstall_all(self) -> tuple[str, ...]:
        """Remove every installed version and return the removed identifiers."""

        installed = self.list_installed()
        for version in installed:
            self.uninstall(version)
        return installed

    def global_default(self) -> str | None:
        """Return the global default version or ``None`` when unset."""

        name = self._query("version-name").strip()
        if name in _NO_GLOBAL:
            return None
        return normalize(name)

    def set_global_default(self, version: str) -> None:
        resolved = self.resolve(version)
        try:
            self._mutate("global", raw(resolved))
        except ExternalToolFailure as exc:
            raise ExternalToolFailure(
                exc.command,
                exc.returncode,
                exc.stderr,
                message=f"Version manager was unable to link [{resolved}]: {(exc.stderr or '').strip() or '<none>'}",
            ) from exc
        self._mutate("rehash")

    def is_using_latest(self) -> bool:
        current = self.global_default()
        return current is not None and current == self.latest()

    def executable_path(self, version: str | None = None) -> Path:
        """Return the version-specific binary, falling back to the system binary."""

        target = self._installed_match(self.resolve(version)) if version else self.global_default()
        if target:
            candidate = self._config.versions_root / raw(target) / "bin" / self._config.runtime_binary
            if candidate.exists():
                return candidate
        return self._config.system_binary

    def installed_summary(self) -> Sequence[tuple[str, bool]]:
        """Return ``(version, is_default)`` pairs for installed versions."""

        current = self.global_default()
        return [(version, version == current) for version in self.list_installed()]


__all__ = ["Notify", "VersionStore"]
