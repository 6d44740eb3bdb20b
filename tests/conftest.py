# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Pytest configuration and shared fixtures for lxc-cifs-share tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from lxc_cifs_share.share.config import Settings
from lxc_cifs_share.share.runner import CommandResult, CommandRunner
from lxc_cifs_share.share.share_options import ShareRequest


class FakeRunner(CommandRunner):
    """Records every command and answers from canned results.

    Results are matched by argv prefix, most recently registered first.
    A list of results is consumed one per call; its last entry then
    repeats.  Unmatched commands succeed with empty output.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, ...]] = []
        self._rules: list[tuple[tuple[str, ...], list[dict[str, Any]]]] = []

    def respond(self, *prefix: str, results: list[dict[str, Any]] | None = None, **result: Any) -> None:
        self._rules.insert(0, (prefix, list(results) if results else [result]))

    async def run(self, *argv: str) -> CommandResult:
        self.calls.append(tuple(argv))
        for prefix, results in self._rules:
            if tuple(argv[: len(prefix)]) == prefix:
                fields = results.pop(0) if len(results) > 1 else results[0]
                return CommandResult(argv=tuple(argv), **{"returncode": 0, **fields})
        return CommandResult(argv=tuple(argv), returncode=0)

    def commands(self, program: str) -> list[tuple[str, ...]]:
        return [c for c in self.calls if c[0] == program]


@pytest.fixture
def runner() -> FakeRunner:
    """A runner for a healthy host: container stops at once, nothing mounted."""
    fake = FakeRunner()
    fake.respond("pct", "status", stdout="status: stopped\n")
    fake.respond("mountpoint", returncode=32)
    return fake


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings with every host path redirected under ``tmp_path``."""
    (tmp_path / "pve" / "lxc").mkdir(parents=True)
    return Settings(
        mount_root=tmp_path / "mnt" / "lxc_shares",
        fstab_path=tmp_path / "fstab",
        pve_config_dir=tmp_path / "pve" / "lxc",
        lock_dir=tmp_path / "lock",
        credentials_dir=tmp_path / "credentials",
        stop_poll_interval=0,
        stop_max_attempts=5,
    )


@pytest.fixture
def make_request() -> Callable[..., ShareRequest]:
    def factory(**overrides: Any) -> ShareRequest:
        fields: dict[str, Any] = {
            "folder_name": "media",
            "cifs_host": "NAS",
            "share_name": "media",
            "smb_username": "smbuser",
            "smb_password": "s3cret",
            "container_id": "105",
            "guest_username": "jellyfin",
            "file_mode": "0770",
            "dir_mode": "0770",
            "read_only": False,
        }
        fields.update(overrides)
        return ShareRequest(**fields)

    return factory
