# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Share attach operations.

:class:`ShareService` is what the CLI talks to.  ``attach`` runs the
attach pipeline under a per-container lock; ``preview`` computes what
``attach`` would write without touching anything.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .attach import attach_pipeline
from .config import Settings
from .contexts import AttachContext
from .files import LockBusyError, file_lock, read_text
from .fstab import build_fstab_entry, has_entry
from .host import HostMounts
from .lxc_config import bind_mount_entry, next_mount_index
from .operations import OperationError, OperationReporter
from .pct_client import PctClient
from .runner import CommandRunner
from .share_options import ShareRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttachResult:
    """What an attach run changed."""

    fstab_entry: str
    fstab_added: bool
    mount_index: int
    bind_mount_entry: str
    steps: list[str]


@dataclass(frozen=True)
class SharePreview:
    """Side effects ``attach`` would perform, in order."""

    steps: list[str]
    fstab_entry: str
    fstab_present: bool
    config_path: Path
    mount_index: int
    bind_mount_entry: str


class ShareService:
    """Attach CIFS shares to containers on this PVE host."""

    def __init__(self, settings: Settings, runner: CommandRunner | None = None):
        """Initialize the service.

        Args:
            settings: Host-side settings (paths, IDs, timeouts).
            runner: Command runner shared by the pct and host clients.
        """
        runner = runner or CommandRunner()
        self._settings = settings
        self._pct = PctClient(runner, config_dir=Path(settings.pve_config_dir))
        self._host = HostMounts(runner)

    def _lock_path(self, ctid: str) -> Path:
        return Path(self._settings.lock_dir) / f"{ctid}.lock"

    async def attach(
        self,
        request: ShareRequest,
        progress: OperationReporter | None = None,
    ) -> AttachResult:
        """Run the full attach procedure for *request*.

        Raises:
            OperationError: Another attach is running for the container.
            StepFailed: A step failed; the container has been started
                again unless the request disabled resuming.
        """
        ctx = AttachContext(
            request=request,
            settings=self._settings,
            pct=self._pct,
            host=self._host,
            progress=progress,
        )
        logger.debug("Attaching %s to LXC %s", request.remote_path, request.container_id)
        try:
            with file_lock(self._lock_path(request.container_id), blocking=False):
                steps = await attach_pipeline.run(ctx)
        except LockBusyError:
            raise OperationError(
                f"Another lxc-cifs-share run is in progress for LXC {request.container_id}"
            ) from None

        if ctx.fstab_entry is None or ctx.mount_index is None or ctx.bind_mount_entry is None:
            raise OperationError(
                f"Attach for LXC {request.container_id} finished without writing its entries"
            )
        return AttachResult(
            fstab_entry=ctx.fstab_entry,
            fstab_added=ctx.fstab_added,
            mount_index=ctx.mount_index,
            bind_mount_entry=ctx.bind_mount_entry,
            steps=steps,
        )

    def preview(self, request: ShareRequest) -> SharePreview:
        """Compute the fstab and bind-mount lines without changing anything.

        With ``use_credentials_file`` the fstab line shows the path the
        credentials file would be written to.
        """
        settings = self._settings
        credentials_path = None
        if request.use_credentials_file:
            credentials_path = Path(settings.credentials_dir) / f"{request.folder_name}.cred"
        fstab_entry = build_fstab_entry(request, settings, credentials_path)
        host_path = request.host_mount_path(settings)

        config_path = self._pct.config_path(request.container_id)
        index = next_mount_index(read_text(config_path))
        return SharePreview(
            steps=attach_pipeline.step_names(),
            fstab_entry=fstab_entry,
            fstab_present=has_entry(
                read_text(Path(settings.fstab_path)), request.remote_path, str(host_path),
            ),
            config_path=config_path,
            mount_index=index,
            bind_mount_entry=bind_mount_entry(
                index, host_path, request.guest_mount_path(settings), request.read_only,
            ),
        )
