# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Run external commands as asyncio subprocesses."""

from __future__ import annotations

import asyncio
import logging
import shlex
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command."""

    argv: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def describe(self) -> str:
        """Short failure text: the command line and its stderr."""
        detail = self.stderr.strip() or self.stdout.strip() or f"exit status {self.returncode}"
        return f"{shlex.join(self.argv)}: {detail}"


class CommandRunner:
    """Executes commands and captures their output.

    Tests substitute a fake that records the argv and returns canned
    results, so nothing here should hold state.
    """

    async def run(self, *argv: str) -> CommandResult:
        logger.debug("Running: %s", shlex.join(argv))
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await proc.communicate()
        result = CommandResult(
            argv=tuple(argv),
            returncode=proc.returncode if proc.returncode is not None else -1,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
        )
        if not result.ok:
            logger.debug("Exit status %d: %s", result.returncode, result.stderr.strip())
        return result
