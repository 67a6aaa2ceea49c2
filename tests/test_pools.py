# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for worker-pool configuration rendering."""

from __future__ import annotations

from pathlib import Path

import pytest

from devpool.config import DevpoolConfig
from devpool.errors import ConfigIOFailure
from devpool.pools import WorkerPoolConfigurator
from devpool.templates import StubProvider


def test_write_config_renders_every_file(config: DevpoolConfig, pools: WorkerPoolConfigurator) -> None:
    paths = pools.write_config("8.2.14")

    assert paths.pool_file == config.versions_root / "8.2.14" / "etc" / "pool.d" / "devpool.conf"
    pool_text = paths.pool_file.read_text(encoding="utf-8")
    assert f"listen = {config.home_path}/worker8.2.14.sock" in pool_text
    assert f"user = {config.owner}" in pool_text
    assert "OWNER" not in pool_text
    assert paths.memory_limits.read_text(encoding="utf-8").startswith("; Max memory")
    assert str(config.log_dir / "worker8.2.14.log") in paths.error_log_ini.read_text(encoding="utf-8")
    assert paths.log_file.exists()


def test_write_config_is_idempotent(pools: WorkerPoolConfigurator) -> None:
    first = pools.write_config("rt@8.3.0")
    snapshot = {path: path.read_text(encoding="utf-8") for path in (first.pool_file, first.error_log_ini)}

    second = pools.write_config("8.3.0")

    assert second == first
    assert {path: path.read_text(encoding="utf-8") for path in snapshot} == snapshot


def test_write_config_moves_default_pool_aside(config: DevpoolConfig, pools: WorkerPoolConfigurator) -> None:
    pool_dir = config.versions_root / "8.3.0" / "etc" / "pool.d"
    pool_dir.mkdir(parents=True)
    (pool_dir / "www.conf").write_text("[www]\n", encoding="utf-8")

    pools.write_config("8.3.0")

    assert not (pool_dir / "www.conf").exists()
    assert (pool_dir / "www.conf-backup").read_text(encoding="utf-8") == "[www]\n"


def test_override_stub_directory(config: DevpoolConfig, tmp_path: Path) -> None:
    stub_dir = tmp_path / "stubs"
    stub_dir.mkdir()
    (stub_dir / "worker-pool.conf").write_text("socket=HOME_PATH/SOCKET_NAME\n", encoding="utf-8")
    configurator = WorkerPoolConfigurator(config, stubs=StubProvider(stub_dir), notify=lambda _msg: None)

    paths = configurator.write_config("8.1.27")

    assert paths.pool_file.read_text(encoding="utf-8") == f"socket={config.home_path}/worker8.1.27.sock\n"


def test_unwritable_location_raises(config: DevpoolConfig, tmp_path: Path) -> None:
    blocker = tmp_path / "blocked"
    blocker.write_text("", encoding="utf-8")
    configurator = WorkerPoolConfigurator(
        config.model_copy(update={"versions_root": blocker}),
        notify=lambda _msg: None,
    )

    with pytest.raises(ConfigIOFailure):
        configurator.write_config("8.3.0")
