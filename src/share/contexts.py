# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Context dataclass passed through the attach pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from .config import Settings
from .host import HostMounts
from .operations import OperationReporter
from .pct_client import PctClient
from .share_options import ShareRequest


@dataclass
class AttachContext:
    """Context passed through the share attach pipeline.

    Steps record what they did in the result fields so later steps,
    the cleanup step and the caller can see how far the run got.
    """

    request: ShareRequest
    settings: Settings
    pct: PctClient
    host: HostMounts
    progress: OperationReporter | None

    # Filled in by pipeline steps
    container_stopped: bool = False
    credentials_path: Path | None = None
    fstab_entry: str | None = None
    fstab_added: bool = False
    mount_index: int | None = None
    bind_mount_entry: str | None = None

    @property
    def ctid(self) -> str:
        return self.request.container_id

    @property
    def host_mount_path(self) -> PurePosixPath:
        return self.request.host_mount_path(self.settings)

    @property
    def guest_mount_path(self) -> PurePosixPath:
        return self.request.guest_mount_path(self.settings)

    def info(self, msg: str) -> None:
        if self.progress:
            self.progress.info(msg)

    def dim(self, msg: str) -> None:
        if self.progress:
            self.progress.dim(msg)

    def success(self, msg: str) -> None:
        if self.progress:
            self.progress.success(msg)

    def warning(self, msg: str) -> None:
        if self.progress:
            self.progress.warning(msg)
