# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Bind-mount (``mpN:``) entries in a PVE container config file."""

from __future__ import annotations

import re
from pathlib import Path, PurePosixPath

from .files import append_line, read_text, write_atomic

# Matches the key of every mount point entry, wherever it appears
_MP_KEY_RE = re.compile(r"mp(\d+):")

# PVE accepts mp0 .. mp255
MAX_MOUNT_POINTS = 256


class MountIndexError(Exception):
    """No free mount point index is left."""


def mount_indices(content: str | None) -> list[int]:
    """All ``mp<N>:`` indices found in *content*."""
    if not content:
        return []
    return [int(n) for n in _MP_KEY_RE.findall(content)]


def next_mount_index(content: str | None) -> int:
    """Index for a new mount point: one past the highest existing index.

    Gaps are never filled: with ``mp0``, ``mp1`` and ``mp3`` present
    the result is 4.  A missing file or one without mount points gives 0.
    """
    indices = mount_indices(content)
    return max(indices) + 1 if indices else 0


def bind_mount_entry(
    index: int,
    host_path: PurePosixPath,
    guest_path: PurePosixPath,
    read_only: bool,
) -> str:
    line = f"mp{index}: {host_path},mp={guest_path}"
    if read_only:
        line += ":ro"
    return line


def insert_bind_mount(content: str | None, entry: str) -> str:
    """Add *entry* to the main section of a container config.

    Snapshot sections (``[name]`` headers) follow the main section, so
    the entry goes right before the first header, or at the end of the
    file when there is none.
    """
    if not content:
        return entry + "\n"

    lines = content.splitlines(keepends=True)
    for pos, line in enumerate(lines):
        if line.startswith("["):
            # Keep the blank separator line(s) after the new entry
            while pos > 0 and not lines[pos - 1].strip():
                pos -= 1
            head = "".join(lines[:pos])
            return append_line(head, entry) + "".join(lines[pos:])
    return append_line(content, entry)


def add_bind_mount(
    config_path: Path,
    host_path: PurePosixPath,
    guest_path: PurePosixPath,
    read_only: bool,
) -> tuple[int, str]:
    """Add a bind mount of *host_path* to the container config.

    Returns:
        The index used and the line written.

    Raises:
        MountIndexError: Every mount point index is taken.
    """
    content = read_text(config_path)
    index = next_mount_index(content)
    if index >= MAX_MOUNT_POINTS:
        raise MountIndexError(
            f"{config_path} already uses mp{index - 1}; no mount point index left"
        )
    entry = bind_mount_entry(index, host_path, guest_path, read_only)
    write_atomic(config_path, insert_bind_mount(content, entry), preserve_mode=False)
    return index, entry
