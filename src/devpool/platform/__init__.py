# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Host platform backends and startup-time backend selection."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, TypeVar

from ..errors import BackendUnavailableError
from .packages import Apt, Dnf, PackageManager, Pacman
from .services import ServiceManager, Systemd


class _Probe(Protocol):
    def is_available(self) -> bool: ...


BackendT = TypeVar("BackendT", bound=_Probe)


def select_backend(candidates: Iterable[BackendT], *, kind: str) -> BackendT:
    """Return the first candidate whose ``is_available`` probe succeeds.

    Args:
        candidates: Backends in priority order.
        kind: Human-readable backend category used in error messages.

    Returns:
        BackendT: The first available backend.

    Raises:
        BackendUnavailableError: If no candidate is available on this host.
    """

    for candidate in candidates:
        if candidate.is_available():
            return candidate
    raise BackendUnavailableError(kind)


__all__ = [
    "Apt",
    "Dnf",
    "PackageManager",
    "Pacman",
    "ServiceManager",
    "Systemd",
    "select_backend",
]
