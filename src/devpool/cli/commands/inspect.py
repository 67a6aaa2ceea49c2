# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Read-only commands: status, versions and which."""

from __future__ import annotations

from typing import Annotated

import typer

from ...console import detect_tty
from ...container import STATUS, VERSIONS
from ...logging import info, ok, section, table, warn
from ...status import StatusChecker
from ...version_store import VersionStore
from ..shared import cli_errors, orchestrator, resolve


def status_command(ctx: typer.Context) -> None:
    """Check the health of installed runtimes, worker pools and the proxy."""

    with cli_errors(ctx) as state:
        checker: StatusChecker = resolve(ctx, STATUS)
        report = checker.run()
    section("devpool status", use_color=detect_tty())
    table(
        ("Check", "Success?"),
        [(result.description, "Yes" if result.success else "No") for result in report.results],
    )
    if report.success:
        ok("devpool status: healthy", use_emoji=state.use_emoji)
        return
    for hint in report.debug:
        warn(hint, use_emoji=state.use_emoji)
    raise typer.Exit(code=1)


def versions_command(
    ctx: typer.Context,
    catalog: Annotated[bool, typer.Option("--catalog", help="List installable versions instead.")] = False,
) -> None:
    """List installed runtime versions."""

    with cli_errors(ctx) as state:
        store: VersionStore = resolve(ctx, VERSIONS)
        if catalog:
            entries = store.list_supported_catalog()
            if not entries:
                warn("The version manager reported no installable versions.", use_emoji=state.use_emoji)
                return
            table(("Version",), [(entry,) for entry in entries])
            return
        utilized = set(orchestrator(ctx).utilized_versions())
        rows = [
            (version, "yes" if is_default else "", "yes" if version in utilized else "")
            for version, is_default in store.installed_summary()
        ]
    if not rows:
        info("No runtime versions installed. Run `devpool install`.", use_emoji=state.use_emoji)
        return
    table(("Version", "Default", "In use"), rows)


def which_command(
    ctx: typer.Context,
    version: Annotated[str | None, typer.Argument(help="Runtime version; the global default when omitted.")] = None,
) -> None:
    """Print the runtime executable used for a version."""

    with cli_errors(ctx):
        typer.echo(str(orchestrator(ctx).executable_path(version)))


def register(app: typer.Typer) -> None:
    app.command("status")(status_command)
    app.command("versions")(versions_command)
    app.command("which")(which_command)


__all__ = ["register"]
