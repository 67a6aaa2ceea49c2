# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Per-site isolation commands."""

from __future__ import annotations

from typing import Annotated

import typer

from ...logging import info, ok, table
from ..shared import cli_errors, orchestrator

SITE_OPTION = Annotated[
    str,
    typer.Option("--site", "-s", help="Project directory or site name; defaults to the current directory."),
]


def isolate_command(
    ctx: typer.Context,
    version: Annotated[str, typer.Argument(help="Runtime version the site should use.")],
    site: SITE_OPTION = ".",
) -> None:
    """Pin a project directory to a specific runtime version."""

    with cli_errors(ctx) as state:
        outcome = orchestrator(ctx).isolate(site, version)
        ok(outcome.message, use_emoji=state.use_emoji)


def unisolate_command(ctx: typer.Context, site: SITE_OPTION = ".") -> None:
    """Return a project directory to the global default runtime version."""

    with cli_errors(ctx) as state:
        outcome = orchestrator(ctx).unisolate(site)
        if outcome.changed:
            ok(outcome.message, use_emoji=state.use_emoji)
        else:
            info(outcome.message, use_emoji=state.use_emoji)


def isolated_command(ctx: typer.Context) -> None:
    """List sites pinned to a specific runtime version."""

    with cli_errors(ctx) as state:
        sites = orchestrator(ctx).isolated_sites()
        if not sites:
            info("No isolated sites.", use_emoji=state.use_emoji)
            return
        table(("Site", "Version"), [(entry.site, entry.version) for entry in sites])


def register(app: typer.Typer) -> None:
    app.command("isolate")(isolate_command)
    app.command("unisolate")(unisolate_command)
    app.command("isolated")(isolated_command)


__all__ = ["register"]
