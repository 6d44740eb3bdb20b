# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Cleanup step: start the container again."""

from ..operations import OperationError
from ..pct_client import PctError
from ..contexts import AttachContext
from . import attach_pipeline


@attach_pipeline.step(order=900, cleanup=True)
async def resume_container(ctx: AttachContext) -> None:
    """Start the container if this run stopped it.

    Runs even when an earlier step failed, so a failed attach does not
    leave the guest down.
    """
    if not ctx.container_stopped:
        return
    if not ctx.request.resume:
        ctx.warning(f"Leaving LXC {ctx.ctid} stopped (resume disabled)")
        return

    ctx.info("Starting the LXC...")
    try:
        await ctx.pct.start(ctx.ctid)
    except PctError as e:
        raise OperationError(f"Failed to start container: {e}")
    ctx.container_stopped = False
    ctx.success(f"LXC {ctx.ctid} started")
