# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Share request schema and input validation.

A :class:`ShareRequest` holds everything the operator supplies for one
share: where the share lives, how to log in to it, which container
gets it, and how it is exposed inside the guest.  The CLI collects the
fields one prompt at a time and validates each answer as soon as it is
given, using the same helpers the dataclass runs on construction.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import PurePosixPath

from .config import Settings

# Three or four octal digits, e.g. 770 or 0770.
_MODE_RE = re.compile(r"[0-7]{3,4}")

_MODE_KIND_LABELS = {
    "file": "file",
    "dir": "directory",
}

READ_ONLY_ANSWERS = {"Y": True, "y": True, "N": False, "n": False}


class ShareValidationError(Exception):
    """Raised when an operator-supplied value is malformed."""


def validate_mode(value: str, kind: str) -> str:
    """Check a CIFS ``file_mode``/``dir_mode`` value.

    Args:
        value: Raw answer from the operator.
        kind: ``"file"`` or ``"dir"``; selects the error message.

    Returns:
        The value, unchanged.

    Raises:
        ShareValidationError: Unless *value* is 3–4 octal digits.
    """
    if not _MODE_RE.fullmatch(value):
        raise ShareValidationError(f"Invalid {_MODE_KIND_LABELS[kind]} permissions format")
    return value


def parse_read_only(answer: str) -> bool:
    """Interpret the read-only prompt answer.

    Only a single ``Y``/``y``/``N``/``n`` is accepted; an empty answer
    is an error, not a default.
    """
    try:
        return READ_ONLY_ANSWERS[answer]
    except KeyError:
        raise ShareValidationError(
            "Invalid input for read-only option. Please enter Y or N."
        ) from None


@dataclass(frozen=True)
class ShareRequest:
    """Validated description of one share attachment."""

    folder_name: str
    cifs_host: str
    share_name: str
    smb_username: str
    smb_password: str = field(repr=False)
    container_id: str
    guest_username: str
    file_mode: str
    dir_mode: str
    read_only: bool
    resume: bool = True
    use_credentials_file: bool = False

    def __post_init__(self) -> None:
        validate_mode(self.file_mode, "file")
        validate_mode(self.dir_mode, "dir")

    @property
    def remote_path(self) -> str:
        """UNC-style source (``//host/share``), before fstab escaping."""
        return f"//{self.cifs_host}/{self.share_name}"

    def host_mount_path(self, settings: Settings) -> PurePosixPath:
        return PurePosixPath(settings.mount_root) / self.folder_name

    def guest_mount_path(self, settings: Settings) -> PurePosixPath:
        return PurePosixPath(settings.guest_mount_root) / self.folder_name
