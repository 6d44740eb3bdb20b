# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Attach step: create the share group in the guest and add the user to it."""

from ..operations import OperationError
from ..contexts import AttachContext
from . import attach_pipeline

# groupadd exit status when the group name is taken
_GROUPADD_NAME_EXISTS = 9


@attach_pipeline.step(order=100)
async def create_share_group(ctx: AttachContext) -> None:
    """Create the share group with its fixed GID inside the container.

    An existing group of the same name is fine: re-running the tool for
    a second share on the same container hits exactly that case.
    """
    group = ctx.settings.group_name
    gid = ctx.settings.group_gid
    ctx.info(f"Creating group '{group}' with GID={gid} in LXC {ctx.ctid}...")
    result = await ctx.pct.exec(ctx.ctid, "groupadd", "-g", str(gid), group)
    if result.ok:
        return
    if result.returncode == _GROUPADD_NAME_EXISTS or "already exists" in result.stderr:
        ctx.dim(f"Group '{group}' already exists")
        return
    raise OperationError(f"groupadd failed: {result.describe()}")


@attach_pipeline.step(order=200)
async def add_guest_user(ctx: AttachContext) -> None:
    """Add the guest user to the share group."""
    group = ctx.settings.group_name
    user = ctx.request.guest_username
    ctx.info(f"Adding user {user} to group '{group}'...")
    result = await ctx.pct.exec(ctx.ctid, "usermod", "-aG", group, user)
    if not result.ok:
        raise OperationError(f"usermod failed: {result.describe()}")
