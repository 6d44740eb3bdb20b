# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Operation errors and progress reporting for share setup steps."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class OperationError(Exception):
    """A share setup step could not complete."""


class StopTimeoutError(OperationError):
    """The container did not reach the stopped state in time."""


class OperationReporter:
    """Receives progress messages from pipeline steps.

    The base implementation only logs.  The CLI passes a subclass that
    also prints to the terminal.
    """

    def info(self, msg: str) -> None:
        logger.info(msg)

    def dim(self, msg: str) -> None:
        logger.debug(msg)

    def success(self, msg: str) -> None:
        logger.info(msg)

    def warning(self, msg: str) -> None:
        logger.warning(msg)
