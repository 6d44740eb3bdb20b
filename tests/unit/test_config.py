# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from pathlib import Path

import pytest

from lxc_cifs_share.share import config as config_mod
from lxc_cifs_share.share.config import ConfigError, Settings, load_config


@pytest.fixture(autouse=True)
def isolated_paths(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the package and system config locations into tmp_path."""
    monkeypatch.setattr(config_mod, "PACKAGE_CONFIG", tmp_path / "usr" / "lxc-cifs-share.conf")
    monkeypatch.setattr(config_mod, "SYSTEM_CONFIG", tmp_path / "etc" / "lxc-cifs-share.conf")
    return tmp_path


def _write(path: Path, body: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body)
    return path


def test_defaults_without_files(tmp_path: Path) -> None:
    settings = load_config(home_dir=str(tmp_path / "home"))
    assert settings == Settings()
    assert settings.mount_root == Path("/mnt/lxc_shares")
    assert (settings.group_gid, settings.host_uid, settings.host_gid) == (10000, 100000, 110000)


def test_layers_override_in_priority_order(tmp_path: Path) -> None:
    home = tmp_path / "home"
    _write(tmp_path / "usr" / "lxc-cifs-share.conf",
           "[lxc-cifs-share]\nmount_root = /srv/shares\nstop_max_attempts = 10\n")
    _write(tmp_path / "etc" / "lxc-cifs-share.conf",
           "[lxc-cifs-share]\nstop_max_attempts = 20\ngroup_name = nas\n")
    _write(home / ".config" / "lxc-cifs-share" / "lxc-cifs-share.conf",
           "[lxc-cifs-share]\ngroup_name = media\n")
    extra = _write(tmp_path / "extra.conf", "[lxc-cifs-share]\nstop_poll_interval = 0.5\n")

    settings = load_config(extra, home_dir=str(home))
    assert settings.mount_root == Path("/srv/shares")
    assert settings.stop_max_attempts == 20
    assert settings.group_name == "media"
    assert settings.stop_poll_interval == 0.5


def test_other_sections_are_ignored(tmp_path: Path) -> None:
    extra = _write(tmp_path / "x.conf", "[something-else]\nmount_root = /nope\n")
    assert load_config(extra, home_dir=str(tmp_path)).mount_root == Path("/mnt/lxc_shares")


def test_unknown_key_is_rejected(tmp_path: Path) -> None:
    extra = _write(tmp_path / "x.conf", "[lxc-cifs-share]\nmount_rot = /typo\n")
    with pytest.raises(ConfigError, match="mount_rot"):
        load_config(extra, home_dir=str(tmp_path))


def test_bad_value_is_rejected(tmp_path: Path) -> None:
    extra = _write(tmp_path / "x.conf", "[lxc-cifs-share]\nstop_max_attempts = 0\n")
    with pytest.raises(ConfigError):
        load_config(extra, home_dir=str(tmp_path))


def test_missing_explicit_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "absent.conf", home_dir=str(tmp_path))


def test_unparsable_file(tmp_path: Path) -> None:
    extra = _write(tmp_path / "x.conf", "mount_root = /no/section\n")
    with pytest.raises(ConfigError, match="Cannot parse"):
        load_config(extra, home_dir=str(tmp_path))
