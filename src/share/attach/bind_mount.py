# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Attach step: add the host mount to the container as a bind mount."""

from ..lxc_config import MountIndexError, add_bind_mount
from ..operations import OperationError
from ..contexts import AttachContext
from . import attach_pipeline


@attach_pipeline.step(order=700)
async def add_container_bind_mount(ctx: AttachContext) -> None:
    """Add an ``mpN:`` entry for the share to the container config.

    The index is one past the highest one already in the file.  The
    service holds the per-container lock for the whole run, so no other
    attach can pick the same index in between.
    """
    config_path = ctx.pct.config_path(ctx.ctid)
    ctx.info("Determining the next available mount point index...")
    try:
        ctx.mount_index, ctx.bind_mount_entry = add_bind_mount(
            config_path,
            ctx.host_mount_path,
            ctx.guest_mount_path,
            ctx.request.read_only,
        )
    except MountIndexError as e:
        raise OperationError(str(e))
    except OSError as e:
        raise OperationError(f"Failed to update {config_path}: {e}")
    ctx.info(f"Added bind mount to the LXC config: {ctx.bind_mount_entry}")
