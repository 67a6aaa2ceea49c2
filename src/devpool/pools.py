# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Render the on-disk worker-pool configuration for a runtime version."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .config import DevpoolConfig
from .filesystem import Filesystem
from .logging import info
from .sockets import SOCKET_PREFIX, socket_name
from .templates import ERROR_LOG_STUB, MEMORY_LIMITS_STUB, POOL_STUB, StubProvider, render
from .versions import normalize, raw

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class PoolFiles:
    """Paths written for a single version's worker pool."""

    pool_file: Path
    memory_limits: Path
    error_log_ini: Path
    log_file: Path


class WorkerPoolConfigurator:
    """Create (or re-create) pool definition, ini overrides and log file per version.

    Every call rewrites whole files from templates, so repeated calls for the
    same version produce identical output. No service is restarted here.
    """

    def __init__(
        self,
        config: DevpoolConfig,
        *,
        files: Filesystem | None = None,
        stubs: StubProvider | None = None,
        notify: Callable[[str], None] = info,
    ) -> None:
        self._config = config
        self._files = files or Filesystem(config.owner)
        self._stubs = stubs or StubProvider(config.stub_dir)
        self._notify = notify

    def etc_dir(self, version: str) -> Path:
        return self._config.versions_root / raw(normalize(version)) / "etc"

    def config_path(self, version: str) -> Path:
        """Return the pool definition path for ``version``."""

        return self.etc_dir(version) / self._config.pool_dir / self._config.pool_file

    def ini_dir(self, version: str) -> Path:
        return self.etc_dir(version) / "conf.d"

    def log_path(self, version: str) -> Path:
        return self._config.log_dir / f"{SOCKET_PREFIX}{raw(normalize(version))}.log"

    def files_for(self, version: str) -> PoolFiles:
        ini_dir = self.ini_dir(version)
        return PoolFiles(
            pool_file=self.config_path(version),
            memory_limits=ini_dir / MEMORY_LIMITS_STUB,
            error_log_ini=ini_dir / ERROR_LOG_STUB,
            log_file=self.log_path(version),
        )

    def write_config(self, version: str) -> PoolFiles:
        """Write every configuration file for ``version``.

        A pre-existing default pool file is renamed aside so the runtime does
        not start a second, conflicting pool.

        Args:
            version: Runtime version in any accepted form.

        Returns:
            PoolFiles: Paths that were written.

        Raises:
            ConfigIOFailure: If a template is missing or a path is not writable.
        """

        canonical = normalize(version)
        self._notify(f"Updating worker pool configuration for {canonical}...")
        paths = self.files_for(canonical)
        replacements = {
            "OWNER": self._config.owner,
            "HOME_PATH": str(self._config.home_path),
            "SOCKET_NAME": socket_name(canonical),
            "LOG_PATH": str(paths.log_file),
        }

        pool_dir = self._files.ensure_dir_exists(paths.pool_file.parent)
        backup = self._files.rename_aside(pool_dir / self._config.legacy_pool_file)
        if backup is not None:
            LOGGER.info("disabled default pool file, backup at %s", backup)
        self._files.put(paths.pool_file, render(self._stubs.get_stub(POOL_STUB), replacements))

        self._files.ensure_dir_exists(paths.memory_limits.parent)
        self._files.put(paths.memory_limits, self._stubs.get_stub(MEMORY_LIMITS_STUB))
        self._files.put(paths.error_log_ini, render(self._stubs.get_stub(ERROR_LOG_STUB), replacements))

        self._files.ensure_dir_exists(paths.log_file.parent)
        self._files.touch(paths.log_file)
        return paths


__all__ = ["PoolFiles", "WorkerPoolConfigurator"]
