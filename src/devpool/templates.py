# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Stub templates used to render worker-pool and site configuration."""

from __future__ import annotations

import re
from collections.abc import Mapping
from importlib import resources
from pathlib import Path
from typing import Final

from .errors import ConfigIOFailure

POOL_STUB: Final[str] = "worker-pool.conf"
MEMORY_LIMITS_STUB: Final[str] = "memory-limits.ini"
ERROR_LOG_STUB: Final[str] = "error-log.ini"
ISOLATED_SITE_STUB: Final[str] = "site-isolated.conf"


class StubProvider:
    """Load stubs from an override directory, falling back to packaged copies."""

    def __init__(self, override_dir: Path | None = None) -> None:
        self._override_dir = override_dir

    def get_stub(self, name: str) -> str:
        """Return the text of stub ``name``.

        Raises:
            ConfigIOFailure: If the stub exists in neither location.
        """

        if self._override_dir is not None:
            candidate = self._override_dir / name
            if candidate.is_file():
                return candidate.read_text(encoding="utf-8")
        packaged = resources.files("devpool").joinpath("stubs", name)
        if not packaged.is_file():
            raise ConfigIOFailure(name, "template not found")
        return packaged.read_text(encoding="utf-8")


def render(text: str, replacements: Mapping[str, str]) -> str:
    """Substitute each placeholder key in ``text`` with its value in one pass.

    Substituted values are never rescanned for placeholders.
    """

    if not replacements:
        return text
    keys = sorted(replacements, key=len, reverse=True)
    pattern = re.compile("|".join(re.escape(key) for key in keys))
    return pattern.sub(lambda match: replacements[match.group(0)], text)


__all__ = [
    "ERROR_LOG_STUB",
    "ISOLATED_SITE_STUB",
    "MEMORY_LIMITS_STUB",
    "POOL_STUB",
    "StubProvider",
    "render",
]
