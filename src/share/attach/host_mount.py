# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Attach steps: create the host mount point, add the fstab entry, mount."""

from pathlib import Path

from ..fstab import build_fstab_entry, ensure_entry, write_credentials_file
from ..host import HostCommandError
from ..operations import OperationError
from ..contexts import AttachContext
from . import attach_pipeline


@attach_pipeline.step(order=400)
async def prepare_mountpoint(ctx: AttachContext) -> None:
    """Create the mount point directory on the host."""
    ctx.info("Creating mount point on PVE host...")
    try:
        ctx.host.ensure_directory(ctx.host_mount_path)
    except OSError as e:
        raise OperationError(f"Failed to create {ctx.host_mount_path}: {e}")


@attach_pipeline.step(order=500)
async def write_fstab_entry(ctx: AttachContext) -> None:
    """Add the share to fstab unless it is already listed."""
    request = ctx.request
    fstab_path = Path(ctx.settings.fstab_path)
    try:
        if request.use_credentials_file:
            ctx.credentials_path = write_credentials_file(request, ctx.settings)
            ctx.dim(f"SMB credentials stored in {ctx.credentials_path}")
        ctx.fstab_entry = build_fstab_entry(request, ctx.settings, ctx.credentials_path)
        ctx.fstab_added = ensure_entry(
            fstab_path,
            ctx.fstab_entry,
            request.remote_path,
            str(ctx.host_mount_path),
        )
    except OSError as e:
        raise OperationError(f"Failed to update {fstab_path}: {e}")

    if ctx.fstab_added:
        ctx.info(f"Added CIFS share to {fstab_path}")
    else:
        ctx.info(
            f"Entry for {request.cifs_host}/{request.share_name} "
            f"on {ctx.host_mount_path} already exists."
        )


@attach_pipeline.step(order=600)
async def mount_share(ctx: AttachContext) -> None:
    """Reload systemd and (re)mount the share from its fstab entry."""
    path = ctx.host_mount_path
    try:
        ctx.info("Reloading systemd daemon...")
        await ctx.host.daemon_reload()

        if await ctx.host.is_mounted(path):
            ctx.info("Unmounting the already mounted share to avoid conflicts...")
            await ctx.host.lazy_unmount(path)

        ctx.info("Mounting the share on the PVE host...")
        await ctx.host.mount(path)
    except HostCommandError as e:
        raise OperationError(f"Failed to mount {path}: {e}")
