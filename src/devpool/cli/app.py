# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands and shared services."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer

from .commands import register_commands
from .shared import CLIState
from .typer_ext import create_typer

app = create_typer(help="Run several runtime versions side by side for local development.", no_args_is_help=True)


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to config.toml; defaults to <home>/config.toml."),
    ] = None,
    emoji: Annotated[bool, typer.Option("--emoji/--no-emoji", help="Toggle emoji in CLI output.")] = True,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log external commands.")] = False,
) -> None:
    """Capture global options shared by every command."""

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    state = ctx.ensure_object(CLIState)
    state.config_path = config
    state.use_emoji = emoji


register_commands(app)

__all__ = ["app", "main"]
