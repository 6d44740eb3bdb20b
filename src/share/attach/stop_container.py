# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Attach step: shut the container down before touching its config."""

from ..operations import OperationError, StopTimeoutError
from ..pct_client import PctError, PctTimeoutError
from ..contexts import AttachContext
from . import attach_pipeline


@attach_pipeline.step(order=300)
async def stop_container(ctx: AttachContext) -> None:
    """Stop the container and wait until ``pct status`` says it stopped."""
    ctx.info("Shutting down the LXC...")
    try:
        await ctx.pct.stop(ctx.ctid)
    except PctError as e:
        raise OperationError(f"Failed to stop container: {e}")
    # From here on the cleanup step is responsible for starting it again
    ctx.container_stopped = True

    ctx.dim(f"Waiting for LXC {ctx.ctid} to stop...")
    try:
        await ctx.pct.wait_stopped(
            ctx.ctid,
            interval=ctx.settings.stop_poll_interval,
            max_attempts=ctx.settings.stop_max_attempts,
        )
    except PctTimeoutError as e:
        raise StopTimeoutError(f"Timeout waiting for stop: {e}")
    except PctError as e:
        raise OperationError(f"Failed to query container status: {e}")
