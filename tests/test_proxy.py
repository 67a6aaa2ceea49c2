# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for per-site proxy configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
from conftest import FakeServices

from devpool.config import DevpoolConfig
from devpool.errors import SiteNotFoundError
from devpool.proxy import ReverseProxy, isolation_marker


def test_site_for_directory_uses_directory_name(proxy: ReverseProxy, tmp_path: Path) -> None:
    project = tmp_path / "Blog"
    project.mkdir()

    site = proxy.site_for_directory(project)

    assert site.name == "blog.test"
    assert site.path == project.resolve()


def test_site_for_directory_accepts_site_names(proxy: ReverseProxy) -> None:
    assert proxy.site_for_directory("shop.test").name == "shop.test"
    assert proxy.site_for_directory("shop").name == "shop.test"


def test_site_for_directory_rejects_invalid_names(proxy: ReverseProxy) -> None:
    with pytest.raises(SiteNotFoundError):
        proxy.site_for_directory("no such site!")


def test_isolate_writes_marker_and_socket(config: DevpoolConfig, proxy: ReverseProxy, tmp_path: Path) -> None:
    project = tmp_path / "blog"
    project.mkdir()
    site = proxy.site_for_directory(project)

    proxy.isolate(site, "8.2.14")

    text = (config.proxy_dir / "blog.test").read_text(encoding="utf-8")
    assert text.startswith("# ISOLATED_RUNTIME_VERSION=rt@8.2.14\n")
    assert f'fastcgi_pass "unix:{config.home_path}/worker8.2.14.sock";' in text
    assert f"root {project.resolve()};" in text
    assert proxy.custom_version("blog.test") == "rt@8.2.14"
    assert proxy.configured_sites() == ["blog.test"]


def test_remove_isolation_only_removes_marked_configs(config: DevpoolConfig, proxy: ReverseProxy) -> None:
    config.proxy_dir.mkdir(parents=True)
    (config.proxy_dir / "plain.test").write_text("server {}\n", encoding="utf-8")

    assert proxy.remove_isolation("plain.test") is False
    assert (config.proxy_dir / "plain.test").exists()
    assert proxy.remove_isolation("missing.test") is False


def test_unmarked_config_is_pinned_by_socket_reference(config: DevpoolConfig, proxy: ReverseProxy) -> None:
    config.proxy_dir.mkdir(parents=True)
    (config.proxy_dir / "legacy.test").write_text(
        f'fastcgi_pass "unix:{config.home_path}/worker8.1.27.sock";\n', encoding="utf-8"
    )
    sockets = ("worker8.1.27.sock", "worker8.3.0.sock")

    assert proxy.custom_version("legacy.test") is None
    assert proxy.custom_version("legacy.test", sockets) == "rt@8.1.27"
    assert proxy.remove_isolation("legacy.test", sockets) is True
    assert not (config.proxy_dir / "legacy.test").exists()


def test_isolation_marker_parsing() -> None:
    assert isolation_marker("# ISOLATED_RUNTIME_VERSION=8.1.27\nserver {}") == "rt@8.1.27"
    assert isolation_marker("server {}\n") is None
    assert isolation_marker("# ISOLATED_RUNTIME_VERSION=\n") is None


def test_reload_restarts_proxy_service(config: DevpoolConfig) -> None:
    services = FakeServices()
    proxy = ReverseProxy(config, services)

    proxy.reload()

    assert services.restarted == ["nginx"]
    assert proxy.is_running()
