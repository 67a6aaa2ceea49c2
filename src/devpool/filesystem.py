# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Filesystem helpers that preserve the invoking user's ownership."""

from __future__ import annotations

import logging
import os
import pwd
import shutil
from pathlib import Path

from .errors import ConfigIOFailure

LOGGER = logging.getLogger(__name__)


def _running_as_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


class Filesystem:
    """Whole-file writes and directory management on behalf of ``owner``.

    Files are replaced in full on every write; no append mode is used. When the
    process runs as root, created paths are handed back to ``owner``.
    """

    def __init__(self, owner: str | None = None) -> None:
        self._owner = owner

    def _chown(self, path: Path) -> None:
        if not self._owner or not _running_as_root():
            return
        try:
            shutil.chown(path, user=self._owner)
        except (LookupError, OSError) as exc:
            raise ConfigIOFailure(path, f"cannot assign ownership to {self._owner}: {exc}") from exc

    def ensure_dir_exists(self, path: Path) -> Path:
        """Create ``path`` (and parents) when missing and return it."""

        if path.is_dir():
            return path
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigIOFailure(path, str(exc)) from exc
        self._chown(path)
        return path

    def put(self, path: Path, contents: str) -> None:
        """Replace the contents of ``path`` with ``contents``."""

        try:
            path.write_text(contents, encoding="utf-8")
        except OSError as exc:
            raise ConfigIOFailure(path, str(exc)) from exc
        self._chown(path)

    def touch(self, path: Path) -> None:
        try:
            path.touch(exist_ok=True)
        except OSError as exc:
            raise ConfigIOFailure(path, str(exc)) from exc
        self._chown(path)

    def read(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigIOFailure(path, str(exc)) from exc

    def rename_aside(self, path: Path, suffix: str = "-backup") -> Path | None:
        """Move ``path`` to ``path + suffix`` when it exists; never deletes.

        Returns:
            Path | None: Backup location, or ``None`` when nothing was moved.
        """

        if not path.exists():
            return None
        backup = path.with_name(f"{path.name}{suffix}")
        try:
            os.replace(path, backup)
        except OSError as exc:
            raise ConfigIOFailure(path, str(exc)) from exc
        LOGGER.debug("moved %s aside to %s", path, backup)
        return backup

    def unlink(self, path: Path) -> bool:
        """Remove ``path`` (file or symlink) and report whether it existed."""

        if not path.is_symlink() and not path.exists():
            return False
        try:
            path.unlink()
        except OSError as exc:
            raise ConfigIOFailure(path, str(exc)) from exc
        return True

    def symlink(self, target: Path, link: Path) -> None:
        """Point ``link`` at ``target``, replacing any previous link in one step.

        The new link is created beside ``link`` and renamed over it, so callers
        never observe a missing link.
        """

        staging = link.with_name(f".{link.name}.tmp")
        try:
            if staging.is_symlink() or staging.exists():
                staging.unlink()
            staging.symlink_to(target)
            os.replace(staging, link)
        except OSError as exc:
            raise ConfigIOFailure(link, str(exc)) from exc
        if self._owner and _running_as_root():
            try:
                os.lchown(link, pwd.getpwnam(self._owner).pw_uid, -1)
            except (KeyError, OSError) as exc:
                LOGGER.debug("unable to chown link %s: %s", link, exc)


__all__ = ["Filesystem"]
