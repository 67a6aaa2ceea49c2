# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the runtime orchestration layers."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class DevpoolError(RuntimeError):
    """Base class for failures surfaced to CLI users."""


class ValidationError(DevpoolError):
    """Raised before any mutation when a request cannot be honoured."""


class UnsupportedVersionError(ValidationError):
    """Raised when a requested version is absent from the supported catalog."""

    def __init__(self, version: str) -> None:
        super().__init__(
            f"devpool doesn't support runtime version: {version} (try something like 'rt@8.3.0' instead)",
        )
        self.version = version


class AlreadyLatestError(ValidationError):
    """Raised when the default alias is requested while already on the newest version."""

    def __init__(self, version: str) -> None:
        super().__init__(
            f"Already using the newest runtime version ({version}). To use another version, "
            "please specify one, e.g. rt@8.1.0",
        )
        self.version = version


class SiteNotFoundError(ValidationError):
    """Raised when a directory cannot be mapped to a site identifier."""

    def __init__(self, directory: str) -> None:
        super().__init__(f"Unable to determine a site for directory: {directory}")
        self.directory = directory


class ExternalToolFailure(DevpoolError):
    """Raised when an external tool exits with a non-zero status.

    Args:
        command: Command sequence that was executed.
        returncode: Exit status reported by the process.
        stderr: Captured standard error, kept for diagnostics.
    """

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stderr: str | None,
        *,
        message: str | None = None,
    ) -> None:
        detail = (stderr or "").strip() or "<none>"
        head = command[0] if command else "<unknown>"
        super().__init__(message or f"Command '{head}' exited with status {returncode}. stderr: {detail}")
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr


class InstallFailure(ExternalToolFailure):
    """Raised when the version manager cannot install a runtime version."""

    def __init__(self, version: str, stderr: str | None, *, command: Sequence[str] = (), returncode: int = 1) -> None:
        detail = (stderr or "").strip()
        message = f"Runtime version [{version}] could not be installed."
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(command, returncode, stderr, message=message)
        self.version = version


class UninstallFailure(ExternalToolFailure):
    """Raised when the version manager cannot uninstall a runtime version."""

    def __init__(self, version: str, stderr: str | None, *, command: Sequence[str] = (), returncode: int = 1) -> None:
        detail = (stderr or "").strip()
        message = f"Runtime version [{version}] could not be uninstalled."
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(command, returncode, stderr, message=message)
        self.version = version


class ConfigIOFailure(DevpoolError):
    """Raised when a template is missing or a configuration path is not writable."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"Unable to write configuration at {path}: {reason}")
        self.path = Path(path)
        self.reason = reason


class BackendUnavailableError(DevpoolError):
    """Raised when no compatible service or package manager is present."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"No compatible {kind} found.")
        self.kind = kind


__all__ = [
    "AlreadyLatestError",
    "BackendUnavailableError",
    "ConfigIOFailure",
    "DevpoolError",
    "ExternalToolFailure",
    "InstallFailure",
    "SiteNotFoundError",
    "UninstallFailure",
    "UnsupportedVersionError",
    "ValidationError",
]
