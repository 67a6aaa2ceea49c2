# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Install, switch, restart, stop and uninstall commands."""

from __future__ import annotations

from typing import Annotated

import typer

from ...logging import fail, info, ok, warn
from ..shared import cli_errors, orchestrator

VERSION_ARGUMENT = Annotated[str, typer.Argument(help="Runtime version, e.g. rt@8.3.0, 8.3 or 'latest'.")]
OPTIONAL_VERSION_ARGUMENT = Annotated[
    str | None,
    typer.Argument(help="Runtime version to restart; all utilised versions when omitted."),
]
FORCE_OPTION = Annotated[
    bool,
    typer.Option("--force", "-f", help="Re-link and re-configure even when already active."),
]


def install_command(ctx: typer.Context) -> None:
    """Install the default runtime and configure its worker pool."""

    with cli_errors(ctx) as state:
        version = orchestrator(ctx).install()
        ok(f"devpool is installed and using {version}.", use_emoji=state.use_emoji)


def use_command(ctx: typer.Context, version: VERSION_ARGUMENT, force: FORCE_OPTION = False) -> None:
    """Switch the global default runtime version."""

    with cli_errors(ctx) as state:
        outcome = orchestrator(ctx).switch_global(version, force=force)
        if not outcome.changed:
            info(outcome.message, use_emoji=state.use_emoji)
            return
        ok(outcome.message, use_emoji=state.use_emoji)
        info(
            "Note that you might need to update globally installed packages if the version change affects them.",
            use_emoji=state.use_emoji,
        )


def restart_command(ctx: typer.Context, version: OPTIONAL_VERSION_ARGUMENT = None) -> None:
    """Restart worker pools."""

    with cli_errors(ctx) as state:
        restarted = orchestrator(ctx).restart(version)
        if restarted:
            ok(f"Restarted {', '.join(restarted)}.", use_emoji=state.use_emoji)
        else:
            warn("No worker pools to restart.", use_emoji=state.use_emoji)


def stop_command(
    ctx: typer.Context,
    stop_all: Annotated[
        bool,
        typer.Option("--all", help="Stop every cataloged pool, not only running ones."),
    ] = False,
) -> None:
    """Stop worker pools."""

    with cli_errors(ctx) as state:
        service = orchestrator(ctx)
        stopped = service.stop_all() if stop_all else service.stop_running()
        if stopped:
            ok(f"Stopped {', '.join(stopped)}.", use_emoji=state.use_emoji)
        else:
            info("No worker pools were running.", use_emoji=state.use_emoji)


def uninstall_command(
    ctx: typer.Context,
    force: Annotated[bool, typer.Option("--force", "-f", help="Confirm removal of every runtime version.")] = False,
) -> None:
    """Stop every pool and remove all installed runtime versions."""

    with cli_errors(ctx) as state:
        if not force:
            fail("Refusing to remove every runtime version without --force.", use_emoji=state.use_emoji)
            raise typer.Exit(code=1)
        removed = orchestrator(ctx).uninstall()
        ok(f"Removed {len(removed)} runtime version(s).", use_emoji=state.use_emoji)


def register(app: typer.Typer) -> None:
    app.command("install")(install_command)
    app.command("use")(use_command)
    app.command("restart")(restart_command)
    app.command("stop")(stop_command)
    app.command("uninstall")(uninstall_command)


__all__ = ["register"]
