# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""fstab entries for CIFS shares.

The entry is keyed by the (remote share, local mount point) pair: a
share already listed for the same mount point is never added twice,
so repeated runs converge on exactly one line.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from .config import Settings
from .files import append_line, file_lock, read_text, write_atomic
from .share_options import ShareRequest

logger = logging.getLogger(__name__)

FSTYPE = "cifs"

# Options that precede ownership, modes and credentials, in this order
BASE_OPTIONS = ("_netdev", "x-systemd.automount", "noatime", "nobrl")

_PASSWORD_RE = re.compile(r"(\bpassword=)[^,\s]*")

# Characters fstab(5) cannot hold literally in the device and mount point fields
_FIELD_ESCAPES = {"\\": r"\134", " ": r"\040", "\t": r"\011", "\n": r"\012"}


def escape_field(value: str) -> str:
    """Octal-escape *value* for use as an fstab field."""
    return "".join(_FIELD_ESCAPES.get(c, c) for c in value)


def build_fstab_entry(
    request: ShareRequest,
    settings: Settings,
    credentials_path: Path | None = None,
) -> str:
    """Compose the fstab line for *request*.

    Ownership is pinned to the host-side IDs that the unprivileged
    container's root and share group are mapped to, so files on the
    share show up inside the guest as owned by root:lxc_shares.

    With *credentials_path*, a ``credentials=`` option replaces the
    inline ``username=``/``password=`` pair.
    """
    options = [
        *BASE_OPTIONS,
        f"uid={settings.host_uid}",
        f"gid={settings.host_gid}",
        f"dir_mode={request.dir_mode}",
        f"file_mode={request.file_mode}",
    ]
    if credentials_path is not None:
        options.append(f"credentials={credentials_path}")
    else:
        options.append(f"username={request.smb_username}")
        options.append(f"password={request.smb_password}")

    remote = escape_field(request.remote_path)
    local = escape_field(str(request.host_mount_path(settings)))
    return f"{remote} {local} {FSTYPE} {','.join(options)} 0 0"


def has_entry(content: str | None, remote: str, local: str) -> bool:
    """Whether *content* already mounts *remote* on *local*.

    *remote* and *local* are given unescaped.  Comment and blank lines
    are ignored; only the first two fields of each line are compared.
    """
    if not content:
        return False
    remote, local = escape_field(remote), escape_field(local)
    for line in content.splitlines():
        fields = line.split()
        if not fields or fields[0].startswith("#"):
            continue
        if len(fields) >= 2 and fields[0] == remote and fields[1] == local:
            return True
    return False


def ensure_entry(path: Path, entry: str, remote: str, local: str) -> bool:
    """Append *entry* to the fstab at *path* unless the pair is present.

    The whole read-check-write runs under an exclusive lock on a
    sibling ``.lock`` file, and the write replaces the file atomically.

    Returns:
        True if the entry was added, False if it already existed.
    """
    with file_lock(path.with_name(path.name + ".lock")):
        content = read_text(path)
        if has_entry(content, remote, local):
            logger.debug("fstab already mounts %s on %s", remote, local)
            return False
        write_atomic(path, append_line(content, entry))
    return True


def credentials_file_content(request: ShareRequest) -> str:
    """Body of a mount.cifs credentials file."""
    return f"username={request.smb_username}\npassword={request.smb_password}\n"


def write_credentials_file(request: ShareRequest, settings: Settings) -> Path:
    """Store the SMB login in a root-only file and return its path."""
    directory = Path(settings.credentials_dir)
    directory.mkdir(mode=0o700, parents=True, exist_ok=True)
    path = directory / f"{request.folder_name}.cred"
    write_atomic(path, credentials_file_content(request), preserve_mode=False)
    path.chmod(0o600)
    return path


def redact(entry: str) -> str:
    """*entry* with the password option value masked, for display."""
    return _PASSWORD_RE.sub(r"\1****", entry)
