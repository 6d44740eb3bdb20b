# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Async wrapper around the Proxmox ``pct`` container tool.

Only the four operations share setup needs are covered: exec, stop,
status and start.  Each call runs ``pct`` as a subprocess through a
:class:`~.runner.CommandRunner`.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from .runner import CommandResult, CommandRunner

logger = logging.getLogger(__name__)

# Exact output of `pct status` for a stopped container
STATUS_STOPPED = "status: stopped"

PVE_LXC_CONFIG_DIR = Path("/etc/pve/lxc")


class PctError(Exception):
    """A ``pct`` command failed."""

    def __init__(self, message: str, result: CommandResult | None = None):
        super().__init__(message)
        self.result = result


class PctTimeoutError(PctError):
    """A container did not reach the expected state in time."""


class PctClient:
    """Async client for the ``pct`` CLI."""

    def __init__(
        self,
        runner: CommandRunner | None = None,
        config_dir: Path = PVE_LXC_CONFIG_DIR,
        binary: str = "pct",
    ):
        self._runner = runner or CommandRunner()
        self._config_dir = config_dir
        self._binary = binary

    async def _pct(self, *args: str) -> CommandResult:
        """Run ``pct`` and raise :class:`PctError` on non-zero exit."""
        result = await self._runner.run(self._binary, *args)
        if not result.ok:
            raise PctError(result.describe(), result)
        return result

    # -------------------------------------------------------------------------
    # Container operations
    # -------------------------------------------------------------------------

    async def exec(self, ctid: str, *command: str) -> CommandResult:
        """Run *command* inside the container.

        Unlike the other operations this does not raise on failure: the
        caller decides which exit statuses are acceptable.
        """
        return await self._runner.run(self._binary, "exec", ctid, "--", *command)

    async def stop(self, ctid: str) -> None:
        await self._pct("stop", ctid)

    async def start(self, ctid: str) -> None:
        await self._pct("start", ctid)

    async def status(self, ctid: str) -> str:
        """Return the raw ``pct status`` line, e.g. ``status: running``."""
        result = await self._pct("status", ctid)
        return result.stdout.rstrip("\n")

    async def wait_stopped(
        self,
        ctid: str,
        interval: float = 1.0,
        max_attempts: int = 300,
    ) -> int:
        """Poll ``pct status`` until it reports exactly ``status: stopped``.

        Args:
            ctid: Container ID.
            interval: Seconds to sleep between polls.
            max_attempts: Number of polls before giving up.

        Returns:
            The number of polls it took.

        Raises:
            PctTimeoutError: The container was still not stopped after
                *max_attempts* polls.
        """
        for attempt in range(1, max_attempts + 1):
            status = await self.status(ctid)
            if status == STATUS_STOPPED:
                return attempt
            logger.debug("Container %s: %r (poll %d/%d)", ctid, status, attempt, max_attempts)
            if attempt < max_attempts:
                await asyncio.sleep(interval)
        raise PctTimeoutError(
            f"Container {ctid} did not stop after {max_attempts} status checks"
        )

    def config_path(self, ctid: str) -> Path:
        """Path of the container's PVE config file."""
        return self._config_dir / f"{ctid}.conf"
