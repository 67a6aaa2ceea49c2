# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration model and TOML loader for devpool."""

from __future__ import annotations

import getpass
import os
import re
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

HOME_ENV: Final[str] = "DEVPOOL_HOME"
CONFIG_FILENAME: Final[str] = "config.toml"

_ENV_VAR_PATTERN = re.compile(r"\$(\w+)|\$\{([^}]+)\}")

DEFAULT_EXTENSIONS: Final[tuple[str, ...]] = (
    "bcmath",
    "curl",
    "gd",
    "intl",
    "mbstring",
    "openssl",
    "pdo_mysql",
    "pdo_sqlite",
    "sodium",
    "zip",
)


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


def current_user(env: Mapping[str, str] | None = None) -> str:
    """Return the invoking user, preferring ``SUDO_USER`` over ``USER``."""

    source = os.environ if env is None else env
    return source.get("SUDO_USER") or source.get("USER") or getpass.getuser()


def default_home(env: Mapping[str, str] | None = None) -> Path:
    """Return the config-home directory, honouring ``DEVPOOL_HOME``."""

    source = os.environ if env is None else env
    override = source.get(HOME_ENV)
    if override:
        return Path(override).expanduser()
    return Path("~/.config/devpool").expanduser()


class DevpoolConfig(BaseModel):
    """Resolved settings shared by every orchestration component."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    home_path: Path = Field(default_factory=default_home)
    owner: str = Field(default_factory=current_user)
    tld: str = "test"
    version_manager: Path = Path("~/.rtenv/bin/rtenv").expanduser()
    versions_root: Path = Path("~/.rtenv/versions").expanduser()
    runtime_binary: str = "rt"
    system_binary: Path = Path("/usr/bin/rt")
    install_profile: str = "development"
    install_extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    extensions_env: str = "RTENV_CONFIGURE_EXTENSIONS"
    pool_dir: str = "pool.d"
    pool_file: str = "devpool.conf"
    legacy_pool_file: str = "www.conf"
    proxy_service: str = "nginx"
    proxy_package: str = "nginx"
    use_sudo: bool = True
    stub_dir: Path | None = None

    @field_validator("home_path", "version_manager", "versions_root", "stub_dir", mode="after")
    @classmethod
    def _expand_user(cls, value: Path | None) -> Path | None:
        return value.expanduser() if value is not None else None

    @field_validator("tld")
    @classmethod
    def _strip_tld(cls, value: str) -> str:
        tld = value.strip().lstrip(".")
        if not tld:
            raise ValueError("tld must not be empty")
        return tld

    @property
    def log_dir(self) -> Path:
        return self.home_path / "Log"

    @property
    def proxy_dir(self) -> Path:
        return self.home_path / "Nginx"

    @property
    def config_file(self) -> Path:
        return self.home_path / CONFIG_FILENAME


def _expand_env_value(value: Any, env: Mapping[str, str]) -> Any:
    if isinstance(value, str):

        def _replace(match: re.Match[str]) -> str:
            key = match.group(1) or match.group(2)
            return env.get(key, match.group(0))

        return _ENV_VAR_PATTERN.sub(_replace, value)
    if isinstance(value, Mapping):
        return {k: _expand_env_value(v, env) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env_value(v, env) for v in value]
    return value


def load_config(path: Path | None = None, *, env: Mapping[str, str] | None = None) -> DevpoolConfig:
    """Load :class:`DevpoolConfig` from ``path`` layered over built-in defaults.

    A missing file yields the defaults. ``$VAR`` and ``${VAR}`` references in
    string values are expanded from ``env``.

    Args:
        path: Optional TOML document; defaults to ``<home>/config.toml``.
        env: Environment mapping used for expansion and home discovery.

    Returns:
        DevpoolConfig: Validated configuration.

    Raises:
        ConfigError: If the document cannot be parsed or fails validation.
    """

    source_env = dict(os.environ if env is None else env)
    target = path or default_home(source_env) / CONFIG_FILENAME
    data: dict[str, Any] = {}
    if target.exists():
        try:
            with target.open("rb") as handle:
                data = tomllib.load(handle)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise ConfigError(f"Unable to read configuration at {target}: {exc}") from exc

    expanded = _expand_env_value(data, source_env)
    expanded.setdefault("home_path", str(default_home(source_env)))
    expanded.setdefault("owner", current_user(source_env))
    try:
        return DevpoolConfig.model_validate(expanded)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration at {target}: {exc}") from exc


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DEFAULT_EXTENSIONS",
    "DevpoolConfig",
    "HOME_ENV",
    "current_user",
    "default_home",
    "load_config",
]
