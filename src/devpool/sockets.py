# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Deterministic socket and service names for worker pools."""

from __future__ import annotations

from pathlib import Path
from typing import Final

from .versions import normalize, raw

SOCKET_PREFIX: Final[str] = "worker"
SOCKET_SUFFIX: Final[str] = ".sock"
SERVICE_PREFIX: Final[str] = "worker@"
PRIMARY_SOCKET: Final[str] = "devpool.sock"


def socket_name(version: str) -> str:
    """Return the socket filename for ``version`` (``worker8.3.0.sock``)."""

    return f"{SOCKET_PREFIX}{raw(version)}{SOCKET_SUFFIX}"


def version_from_socket(name: str) -> str:
    """Invert :func:`socket_name` and return the canonical version."""

    stem = name.strip()
    if stem.startswith(SOCKET_PREFIX):
        stem = stem[len(SOCKET_PREFIX) :]
    if stem.endswith(SOCKET_SUFFIX):
        stem = stem[: -len(SOCKET_SUFFIX)]
    return normalize(stem)


def socket_path(home: Path, version: str) -> Path:
    return home / socket_name(version)


def primary_socket_path(home: Path) -> Path:
    """Return the fixed location of the primary socket link."""

    return home / PRIMARY_SOCKET


def service_name(version: str) -> str:
    """Return the service-manager unit name controlling ``version``'s pool."""

    return f"{SERVICE_PREFIX}{raw(version)}"


def is_worker_service(name: str) -> bool:
    return name.startswith(SERVICE_PREFIX)


__all__ = [
    "PRIMARY_SOCKET",
    "SERVICE_PREFIX",
    "SOCKET_PREFIX",
    "SOCKET_SUFFIX",
    "is_worker_service",
    "primary_socket_path",
    "service_name",
    "socket_name",
    "socket_path",
    "version_from_socket",
]
