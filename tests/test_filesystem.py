# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for filesystem and template helpers."""

from __future__ import annotations

import getpass
from pathlib import Path

import pytest

from devpool.errors import ConfigIOFailure
from devpool.filesystem import Filesystem
from devpool.templates import POOL_STUB, StubProvider, render


@pytest.fixture
def files() -> Filesystem:
    return Filesystem(getpass.getuser())


def test_symlink_replaces_existing_link(files: Filesystem, tmp_path: Path) -> None:
    link = tmp_path / "devpool.sock"
    files.symlink(tmp_path / "worker8.2.14.sock", link)
    files.symlink(tmp_path / "worker8.3.0.sock", link)

    assert link.is_symlink()
    assert link.readlink() == tmp_path / "worker8.3.0.sock"
    assert not (tmp_path / ".devpool.sock.tmp").exists()


def test_unlink_reports_presence(files: Filesystem, tmp_path: Path) -> None:
    target = tmp_path / "worker.log"
    target.write_text("", encoding="utf-8")

    assert files.unlink(target) is True
    assert files.unlink(target) is False


def test_unlink_removes_dangling_symlink(files: Filesystem, tmp_path: Path) -> None:
    link = tmp_path / "devpool.sock"
    link.symlink_to(tmp_path / "missing.sock")

    assert files.unlink(link) is True
    assert not link.is_symlink()


def test_rename_aside_without_source(files: Filesystem, tmp_path: Path) -> None:
    assert files.rename_aside(tmp_path / "www.conf") is None


def test_read_missing_file_raises(files: Filesystem, tmp_path: Path) -> None:
    with pytest.raises(ConfigIOFailure):
        files.read(tmp_path / "absent")


def test_render_does_not_rescan_substitutions() -> None:
    text = render("OWNER at HOME_PATH", {"OWNER": "HOME_PATH", "HOME_PATH": "/srv"})

    assert text == "HOME_PATH at /srv"


def test_render_prefers_longest_placeholder() -> None:
    assert render("SITE_PATH SITE", {"SITE": "a", "SITE_PATH": "/b"}) == "/b a"


def test_packaged_stub_is_available() -> None:
    assert "SOCKET_NAME" in StubProvider().get_stub(POOL_STUB)


def test_missing_stub_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigIOFailure, match="template not found"):
        StubProvider(tmp_path).get_stub("nope.conf")
