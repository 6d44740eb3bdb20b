# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Advisory locks and atomic rewrites for shared host files."""

from __future__ import annotations

import contextlib
import fcntl
import os
import tempfile
from collections.abc import Iterator
from pathlib import Path


class LockBusyError(Exception):
    """Another process holds the lock."""


@contextlib.contextmanager
def file_lock(path: Path, blocking: bool = True) -> Iterator[None]:
    """Hold an exclusive ``flock`` on *path* for the ``with`` block.

    The lock file is created if needed and left in place afterwards;
    removing it would let a waiting process lock a stale inode.

    Raises:
        LockBusyError: *blocking* is False and the lock is taken.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a") as lock_file:
        flags = fcntl.LOCK_EX if blocking else fcntl.LOCK_EX | fcntl.LOCK_NB
        try:
            fcntl.flock(lock_file.fileno(), flags)
        except BlockingIOError:
            raise LockBusyError(f"{path} is locked by another process") from None
        try:
            yield
        finally:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)


def read_text(path: Path) -> str | None:
    """Return the file's content, or None when it does not exist."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None


def write_atomic(path: Path, content: str, preserve_mode: bool = True) -> None:
    """Replace *path* with *content* via a temp file and ``rename``.

    Readers see either the old or the new file, never a partial one.
    A symlinked *path* is followed: the link target is replaced and the
    link itself stays.

    Args:
        path: Destination file.
        content: Full new content.
        preserve_mode: Copy the existing file's permission bits onto the
            replacement (new files get 0644).  Pass False for
            filesystems that manage permissions themselves, such as the
            PVE cluster filesystem under ``/etc/pve``.
    """
    path = Path(os.path.realpath(path))
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            tmp.write(content)
            tmp.flush()
            os.fsync(tmp.fileno())
        if preserve_mode:
            try:
                mode = path.stat().st_mode & 0o7777
            except FileNotFoundError:
                mode = 0o644
            os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise


def append_line(content: str | None, line: str) -> str:
    """Return *content* with *line* appended as its own line."""
    if not content:
        return line + "\n"
    if not content.endswith("\n"):
        content += "\n"
    return content + line + "\n"
