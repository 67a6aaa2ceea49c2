# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared state and error handling for CLI commands."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Any

import typer

from ..config import ConfigError, load_config
from ..container import ORCHESTRATOR, ServiceContainer, build_container
from ..errors import DevpoolError
from ..logging import fail, info
from ..orchestrator import Orchestrator


@dataclass(slots=True)
class CLIState:
    """Global options captured by the root callback."""

    config_path: Path | None = None
    use_emoji: bool = True
    container: ServiceContainer | None = None

    def services(self) -> ServiceContainer:
        """Return the service container, building it on first use."""

        if self.container is None:
            config = load_config(self.config_path)
            self.container = build_container(config, notify=partial(info, use_emoji=self.use_emoji))
        return self.container


def cli_state(ctx: typer.Context) -> CLIState:
    state = ctx.find_object(CLIState)
    if state is None:
        state = ctx.ensure_object(CLIState)
    return state


def resolve(ctx: typer.Context, key: str) -> Any:
    return cli_state(ctx).services().resolve(key)


def orchestrator(ctx: typer.Context) -> Orchestrator:
    return resolve(ctx, ORCHESTRATOR)


@contextmanager
def cli_errors(ctx: typer.Context) -> Iterator[CLIState]:
    """Translate devpool failures into a ``fail`` message and exit status 1."""

    state = cli_state(ctx)
    try:
        yield state
    except (DevpoolError, ConfigError) as exc:
        fail(str(exc), use_emoji=state.use_emoji)
        raise typer.Exit(code=1) from exc


__all__ = ["CLIState", "cli_errors", "cli_state", "orchestrator", "resolve"]
