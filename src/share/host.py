# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Host mount operations: directories, systemd, mount/umount."""

from __future__ import annotations

import os

from .runner import CommandRunner


class HostCommandError(Exception):
    """A host-side command failed."""


class HostMounts:
    """Mount-related actions on the PVE host."""

    def __init__(self, runner: CommandRunner | None = None):
        self._runner = runner or CommandRunner()

    async def _check(self, *argv: str) -> None:
        result = await self._runner.run(*argv)
        if not result.ok:
            raise HostCommandError(result.describe())

    def ensure_directory(self, path: str | os.PathLike[str]) -> None:
        """Create *path* and its parents; existing directories are fine."""
        os.makedirs(path, exist_ok=True)

    async def daemon_reload(self) -> None:
        """Regenerate systemd mount units from fstab."""
        await self._check("systemctl", "daemon-reload")

    async def is_mounted(self, path: str | os.PathLike[str]) -> bool:
        result = await self._runner.run("mountpoint", "-q", os.fspath(path))
        return result.ok

    async def lazy_unmount(self, path: str | os.PathLike[str]) -> None:
        await self._check("umount", "-l", os.fspath(path))

    async def mount(self, path: str | os.PathLike[str]) -> None:
        """Mount *path* using its fstab entry."""
        await self._check("mount", os.fspath(path))
