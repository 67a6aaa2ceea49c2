# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the status health checks."""

from __future__ import annotations

from conftest import FakePackages, FakeServices, FakeVersions

from devpool.config import DevpoolConfig
from devpool.orchestrator import Orchestrator
from devpool.pools import WorkerPoolConfigurator
from devpool.proxy import ReverseProxy
from devpool.status import StatusChecker

CATALOG = ("rt@8.2.14", "rt@8.3.0")


def _checker(
    config: DevpoolConfig,
    versions: FakeVersions,
    services: FakeServices,
    packages: FakePackages,
) -> tuple[StatusChecker, Orchestrator]:
    orchestrator = Orchestrator(
        config,
        versions=versions,
        pools=WorkerPoolConfigurator(config, notify=lambda _msg: None),
        proxy=ReverseProxy(config, services),
        services=services,
        notify=lambda _msg: None,
    )
    checker = StatusChecker(
        config,
        orchestrator=orchestrator,
        versions=versions,
        services=services,
        packages=packages,
    )
    return checker, orchestrator


def test_fresh_host_reports_failures(config: DevpoolConfig) -> None:
    checker, _ = _checker(config, FakeVersions(CATALOG), FakeServices(), FakePackages())

    report = checker.run()

    assert not report.success
    assert report.debug == ["Run `devpool install`.", "Run `devpool restart`."]


def test_healthy_installation(config: DevpoolConfig) -> None:
    versions = FakeVersions(CATALOG)
    services = FakeServices(running={"nginx"})
    checker, orchestrator = _checker(config, versions, services, FakePackages(installed={"nginx"}))
    orchestrator.install()
    # The fake service manager never creates sockets.
    (config.home_path / "worker8.3.0.sock").touch()

    report = checker.run()

    assert report.success, report.results
    descriptions = [result.description for result in report.results]
    assert "Is rt@8.3.0 running?" in descriptions
    assert descriptions[-1] == "Is the primary socket present?"
    assert report.debug == []


def test_stopped_pool_suggests_restart(config: DevpoolConfig) -> None:
    versions = FakeVersions(CATALOG, installed=["rt@8.2.14"], default="rt@8.2.14")
    services = FakeServices(running={"nginx"})
    checker, _ = _checker(config, versions, services, FakePackages(installed={"nginx"}))

    report = checker.run()

    failed = [result.description for result in report.results if not result.success]
    assert "Is rt@8.2.14 running?" in failed
    assert "Run `devpool restart`." in report.debug
