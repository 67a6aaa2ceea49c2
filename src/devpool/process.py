# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import logging
import os
import shutil

# Bandit: subprocess usage is intentional; every call goes through this
# wrapper with argument lists and ``shell=False``.
import subprocess  # nosec B404
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, replace
from pathlib import Path
from subprocess import CompletedProcess

from .errors import ExternalToolFailure

LOGGER = logging.getLogger(__name__)

CommandRunner = Callable[..., CompletedProcess[str]]


@dataclass(slots=True, frozen=True)
class CommandOptions:
    """Execution options applied to a single external command."""

    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    check: bool = True
    capture_output: bool = True
    discard_stdin: bool = True

    def with_env(self, overrides: Mapping[str, str]) -> CommandOptions:
        """Return a copy whose environment extends the current process environment.

        Args:
            overrides: Variables layered over ``os.environ``.

        Returns:
            CommandOptions: Updated options instance.
        """

        merged = dict(os.environ)
        if self.env:
            merged.update(self.env)
        merged.update(overrides)
        return replace(self, env=merged)


def _normalize_args(args: Sequence[str]) -> list[str]:
    """Resolve the executable of ``args`` to an absolute path.

    Args:
        args: Raw command arguments supplied by the caller.

    Returns:
        list[str]: Argument list with a resolved executable.

    Raises:
        ValueError: If no arguments are provided.
        FileNotFoundError: If the executable cannot be located.
    """

    if not args:
        raise ValueError("subprocess command requires at least one argument")

    head, *rest = args
    head_path = Path(head).expanduser()
    if head_path.is_absolute():
        if not head_path.exists():
            raise FileNotFoundError(f"Executable '{head_path}' does not exist")
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        raise FileNotFoundError(f"Executable '{head}' was not found on PATH")
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    options: CommandOptions | None = None,
) -> CompletedProcess[str]:
    """Execute ``args`` after normalising the executable path.

    Commands block until the external tool exits; no timeout is imposed here.

    Args:
        args: Command and argument sequence to execute.
        options: Execution options; defaults to checked, captured output.

    Returns:
        CompletedProcess[str]: Subprocess execution metadata.

    Raises:
        FileNotFoundError: If the executable cannot be resolved.
        ExternalToolFailure: When ``check`` is true and the process exits
            with a non-zero status.
    """

    resolved_options = options or CommandOptions()
    normalized = _normalize_args(args)
    LOGGER.debug("running %s", " ".join(normalized))

    completed: CompletedProcess[str] = subprocess.run(  # nosec B603 - argument list, no shell
        normalized,
        cwd=str(resolved_options.cwd) if resolved_options.cwd is not None else None,
        env=dict(resolved_options.env) if resolved_options.env is not None else None,
        check=False,
        capture_output=resolved_options.capture_output,
        text=True,
        stdin=subprocess.DEVNULL if resolved_options.discard_stdin else None,
    )

    if resolved_options.check and completed.returncode != 0:
        raise ExternalToolFailure(
            normalized,
            completed.returncode,
            completed.stderr if isinstance(completed.stderr, str) else None,
        )
    return completed


def with_sudo(args: Sequence[str], *, enabled: bool) -> list[str]:
    """Prefix ``args`` with ``sudo`` when privileged execution is requested."""

    return ["sudo", *args] if enabled else list(args)


__all__ = [
    "CommandOptions",
    "CommandRunner",
    "run_command",
    "with_sudo",
]
