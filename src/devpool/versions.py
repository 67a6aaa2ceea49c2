# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Normalisation and validation of runtime version identifiers.

Canonical identifiers use the tagged ``rt@<major>.<minor>.<patch>`` form. The
normaliser is deliberately permissive: it rewrites every numeric run matching
the version pattern and passes everything else through untouched, so a short
input such as ``"83"`` becomes ``"rt@8.3."`` with a blank patch group.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Final

from packaging.version import InvalidVersion, Version

from .errors import AlreadyLatestError, UnsupportedVersionError

VERSION_TAG: Final[str] = "rt@"
DEFAULT_ALIASES: Final[frozenset[str]] = frozenset({"rt", "rt@", "latest"})

_VERSION_PATTERN = re.compile(r"(?:rt@?)?([0-9]+)\.?([0-9]+)\.?([0-9]+)?", re.IGNORECASE)


def normalize(version: str | None) -> str:
    """Return the tagged form of ``version``.

    ``8.3.0``, ``830``, ``rt8.3.0`` and ``rt@8.3.0`` style inputs are accepted.
    Inputs without a match are returned stripped but otherwise unchanged.
    """

    text = (version or "").strip()
    return _VERSION_PATTERN.sub(
        lambda match: f"{VERSION_TAG}{match.group(1)}.{match.group(2)}.{match.group(3) or ''}",
        text,
    )


def raw(version: str) -> str:
    """Strip the tag from ``version`` (``rt@7.4.0`` becomes ``7.4.0``)."""

    return version.strip().replace(VERSION_TAG, "")


def is_default_alias(version: str | None) -> bool:
    """Return ``True`` when ``version`` requests the newest cataloged version."""

    return (version or "").strip().lower() in DEFAULT_ALIASES


def matches(candidate: str, entry: str) -> bool:
    """Return ``True`` when ``candidate`` selects catalog ``entry``.

    A blank patch group in ``candidate`` acts as a wildcard.
    """

    if candidate == entry:
        return True
    return candidate.endswith(".") and candidate.count(".") == 2 and entry.startswith(candidate)


def _sort_key(version: str) -> tuple[int, Version | str]:
    try:
        return (1, Version(raw(version)))
    except InvalidVersion:
        return (0, version)


def newest(versions: Iterable[str]) -> str | None:
    """Return the newest entry of ``versions`` or ``None`` when empty."""

    ordered = sorted(versions, key=_sort_key)
    return ordered[-1] if ordered else None


def validate(version: str, catalog: Sequence[str], *, current: str | None = None) -> str:
    """Return the catalog entry selected by ``version``.

    Args:
        version: User supplied version in any accepted form.
        catalog: Supported catalog reported by the version manager.
        current: Active global default, consulted for the default alias.

    Returns:
        str: Canonical catalog entry.

    Raises:
        AlreadyLatestError: If the default alias is requested while the
            newest catalog entry is already active.
        UnsupportedVersionError: If no catalog entry matches ``version``.
    """

    if is_default_alias(version):
        latest = newest(catalog)
        if latest is None:
            raise UnsupportedVersionError(version.strip())
        if current == latest:
            raise AlreadyLatestError(latest)
        return latest

    normalized = normalize(version)
    candidates = [entry for entry in catalog if matches(normalized, entry)]
    selected = newest(candidates)
    if selected is None:
        raise UnsupportedVersionError(normalized)
    return selected


__all__ = [
    "DEFAULT_ALIASES",
    "VERSION_TAG",
    "is_default_alias",
    "matches",
    "newest",
    "normalize",
    "raw",
    "validate",
]
