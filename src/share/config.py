# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Layered configuration for lxc-cifs-share.

Configuration is read from (highest to lowest priority):

  1. an explicit ``--config`` file
  2. ``~/.config/lxc-cifs-share/lxc-cifs-share.conf``  (user)
  3. ``/etc/lxc-cifs-share/lxc-cifs-share.conf``       (system)
  4. ``/usr/lib/lxc-cifs-share/lxc-cifs-share.conf``   (package defaults)

Every file is optional.  Each is an INI file with a single
``[lxc-cifs-share]`` section; keys set in a higher-priority file
override the same keys from lower ones.  Example::

    [lxc-cifs-share]
    mount_root = /mnt/lxc_shares
    stop_max_attempts = 120
"""

from __future__ import annotations

import configparser
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

SECTION = "lxc-cifs-share"
_CONF_NAME = "lxc-cifs-share.conf"

PACKAGE_CONFIG = Path("/usr/lib/lxc-cifs-share") / _CONF_NAME
SYSTEM_CONFIG = Path("/etc/lxc-cifs-share") / _CONF_NAME


class ConfigError(Exception):
    """A configuration file is unreadable or holds invalid values."""


class Settings(BaseModel):
    """Host-side settings shared by every share attached on this host.

    The defaults reproduce the classic Proxmox recipe for unprivileged
    containers: the container's root is mapped to host UID 100000, and
    the in-guest group ``lxc_shares`` (GID 10000) appears on the host as
    GID 110000.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    mount_root: Path = Path("/mnt/lxc_shares")
    guest_mount_root: Path = Path("/mnt")
    group_name: str = "lxc_shares"
    group_gid: int = Field(default=10000, ge=0)
    host_uid: int = Field(default=100000, ge=0)
    host_gid: int = Field(default=110000, ge=0)
    fstab_path: Path = Path("/etc/fstab")
    pve_config_dir: Path = Path("/etc/pve/lxc")
    lock_dir: Path = Path("/run/lock/lxc-cifs-share")
    credentials_dir: Path = Path("/etc/cifs-credentials")
    stop_poll_interval: float = Field(default=1.0, ge=0)
    stop_max_attempts: int = Field(default=300, ge=1)


def config_paths(home_dir: str | None = None) -> list[Path]:
    """Config file locations, lowest priority first."""
    home = Path(home_dir) if home_dir else Path(os.path.expanduser("~"))
    return [
        PACKAGE_CONFIG,
        SYSTEM_CONFIG,
        home / ".config" / "lxc-cifs-share" / _CONF_NAME,
    ]


def load_config(
    extra_path: str | os.PathLike[str] | None = None,
    home_dir: str | None = None,
) -> Settings:
    """Merge every config layer into a validated :class:`Settings`.

    Args:
        extra_path: File given on the command line.  Unlike the
            standard locations it must exist.
        home_dir: Home directory used to locate the user config.

    Raises:
        ConfigError: On unreadable files, unknown keys or bad values.
    """
    paths = config_paths(home_dir)
    if extra_path is not None:
        extra = Path(extra_path)
        if not extra.is_file():
            raise ConfigError(f"Config file not found: {extra}")
        paths.append(extra)

    values: dict[str, str] = {}
    for path in paths:
        if not path.is_file():
            continue
        parser = configparser.ConfigParser(interpolation=None)
        try:
            parser.read(path, encoding="utf-8")
        except configparser.Error as e:
            raise ConfigError(f"Cannot parse {path}: {e}") from e
        if parser.has_section(SECTION):
            values.update(parser.items(SECTION))

    try:
        return Settings.model_validate(values)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
