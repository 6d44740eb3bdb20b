# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""End-to-end attach runs against a fake pct/mount and temp files."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from lxc_cifs_share.share import ShareService
from lxc_cifs_share.share import service as service_mod
from lxc_cifs_share.share.contexts import AttachContext
from lxc_cifs_share.share.config import Settings
from lxc_cifs_share.share.files import file_lock
from lxc_cifs_share.share.operations import OperationError, StopTimeoutError
from lxc_cifs_share.share.pipeline import Pipeline, StepFailed

from conftest import FakeRunner


def _config(settings: Settings, ctid: str = "105") -> Path:
    return Path(settings.pve_config_dir) / f"{ctid}.conf"


def test_attach_runs_every_step_in_order(runner: FakeRunner, settings: Settings, make_request) -> None:
    _config(settings).write_text("arch: amd64\nmp0: /a,mp=/a\nmp1: /b,mp=/b\n")
    result = asyncio.run(ShareService(settings, runner).attach(make_request()))

    assert runner.calls == [
        ("pct", "exec", "105", "--", "groupadd", "-g", "10000", "lxc_shares"),
        ("pct", "exec", "105", "--", "usermod", "-aG", "lxc_shares", "jellyfin"),
        ("pct", "stop", "105"),
        ("pct", "status", "105"),
        ("systemctl", "daemon-reload"),
        ("mountpoint", "-q", str(settings.mount_root / "media")),
        ("mount", str(settings.mount_root / "media")),
        ("pct", "start", "105"),
    ]
    host_path = settings.mount_root / "media"
    assert host_path.is_dir()
    assert result.fstab_added
    assert result.fstab_entry == (
        f"//NAS/media {host_path} cifs _netdev,x-systemd.automount,noatime,nobrl,"
        "uid=100000,gid=110000,dir_mode=0770,file_mode=0770,"
        "username=smbuser,password=s3cret 0 0"
    )
    assert Path(settings.fstab_path).read_text() == result.fstab_entry + "\n"
    assert result.mount_index == 2
    assert result.bind_mount_entry == f"mp2: {host_path},mp=/mnt/media"
    assert _config(settings).read_text().endswith(f"mp2: {host_path},mp=/mnt/media\n")
    assert result.steps[-1] == "resume_container"


def test_attach_read_only_suffix(runner: FakeRunner, settings: Settings, make_request) -> None:
    result = asyncio.run(ShareService(settings, runner).attach(make_request(read_only=True)))
    assert result.mount_index == 0
    assert result.bind_mount_entry.endswith(",mp=/mnt/media:ro")


def test_rerun_converges_to_one_fstab_line(runner: FakeRunner, settings: Settings, make_request) -> None:
    service = ShareService(settings, runner)
    runner.respond("pct", "exec", "105", "--", "groupadd", returncode=9, stderr="group 'lxc_shares' already exists")
    for _ in range(3):
        asyncio.run(service.attach(make_request()))

    lines = Path(settings.fstab_path).read_text().splitlines()
    assert len(lines) == 1
    assert _config(settings).read_text().count("mp=/mnt/media") == 3


def test_rerun_with_spaces_in_share_name_keeps_one_fstab_line(
    runner: FakeRunner, settings: Settings, make_request
) -> None:
    service = ShareService(settings, runner)
    runner.respond("pct", "exec", "105", "--", "groupadd", returncode=9, stderr="group 'lxc_shares' already exists")
    results = [asyncio.run(service.attach(make_request(share_name="My Media"))) for _ in range(3)]

    assert [r.fstab_added for r in results] == [True, False, False]
    lines = Path(settings.fstab_path).read_text().splitlines()
    assert len(lines) == 1
    assert lines[0].startswith(r"//NAS/My\040Media ")


def test_symlinked_fstab_is_updated_in_place(runner: FakeRunner, settings: Settings, make_request) -> None:
    fstab = Path(settings.fstab_path)
    real = fstab.with_name("real_fstab")
    real.write_text("proc /proc proc defaults 0 0\n")
    fstab.symlink_to(real)

    result = asyncio.run(ShareService(settings, runner).attach(make_request()))

    assert fstab.is_symlink()
    assert real.read_text() == f"proc /proc proc defaults 0 0\n{result.fstab_entry}\n"


def test_mounted_share_is_lazily_unmounted_first(runner: FakeRunner, settings: Settings, make_request) -> None:
    runner.respond("mountpoint", returncode=0)
    asyncio.run(ShareService(settings, runner).attach(make_request()))
    host_path = str(settings.mount_root / "media")
    calls = runner.calls
    assert calls.index(("umount", "-l", host_path)) < calls.index(("mount", host_path))


def test_failed_mount_aborts_and_restarts_container(runner: FakeRunner, settings: Settings, make_request) -> None:
    runner.respond("mount", returncode=32, stderr="mount error(13): Permission denied")
    with pytest.raises(StepFailed) as excinfo:
        asyncio.run(ShareService(settings, runner).attach(make_request()))

    assert excinfo.value.step == "mount_share"
    assert "Permission denied" in str(excinfo.value.cause)
    assert "prepare_mountpoint" in excinfo.value.completed
    assert not _config(settings).exists()
    assert runner.calls[-1] == ("pct", "start", "105")


def test_failure_before_stop_leaves_container_alone(runner: FakeRunner, settings: Settings, make_request) -> None:
    runner.respond("pct", "exec", "105", "--", "usermod", returncode=6, stderr="user 'nobody2' does not exist")
    with pytest.raises(StepFailed) as excinfo:
        asyncio.run(ShareService(settings, runner).attach(make_request()))
    assert excinfo.value.step == "add_guest_user"
    assert runner.commands("pct")[-1][1] == "exec"
    assert not Path(settings.fstab_path).exists()


def test_groupadd_failure_other_than_existing_group_aborts(runner: FakeRunner, settings: Settings, make_request) -> None:
    runner.respond("pct", "exec", "105", "--", "groupadd", returncode=4, stderr="GID '10000' already in use")
    with pytest.raises(StepFailed) as excinfo:
        asyncio.run(ShareService(settings, runner).attach(make_request()))
    assert excinfo.value.step == "create_share_group"


def test_stop_timeout(runner: FakeRunner, settings: Settings, make_request) -> None:
    runner.respond("pct", "status", stdout="status: running\n")
    with pytest.raises(StepFailed) as excinfo:
        asyncio.run(ShareService(settings, runner).attach(make_request()))

    assert excinfo.value.step == "stop_container"
    assert isinstance(excinfo.value.cause, StopTimeoutError)
    assert runner.commands("pct").count(("pct", "status", "105")) == settings.stop_max_attempts
    # Still try to bring the container back up
    assert runner.calls[-1] == ("pct", "start", "105")


def test_no_resume_leaves_container_stopped(runner: FakeRunner, settings: Settings, make_request) -> None:
    asyncio.run(ShareService(settings, runner).attach(make_request(resume=False)))
    assert ("pct", "start", "105") not in runner.calls


def test_credentials_file_mode(runner: FakeRunner, settings: Settings, make_request) -> None:
    result = asyncio.run(ShareService(settings, runner).attach(make_request(use_credentials_file=True)))
    cred = Path(settings.credentials_dir) / "media.cred"
    assert cred.read_text() == "username=smbuser\npassword=s3cret\n"
    assert f"credentials={cred}" in result.fstab_entry
    assert "s3cret" not in Path(settings.fstab_path).read_text()


def test_concurrent_attach_for_same_container_is_refused(runner: FakeRunner, settings: Settings, make_request) -> None:
    service = ShareService(settings, runner)
    with file_lock(Path(settings.lock_dir) / "105.lock"):
        with pytest.raises(OperationError, match="in progress"):
            asyncio.run(service.attach(make_request()))
    assert runner.calls == []


def test_preview_changes_nothing(runner: FakeRunner, settings: Settings, make_request) -> None:
    _config(settings).write_text("mp0: /a,mp=/a\nmp3: /b,mp=/b\nmp1: /c,mp=/c\n")
    preview = ShareService(settings, runner).preview(make_request(read_only=True))

    assert preview.steps == [
        "create_share_group",
        "add_guest_user",
        "stop_container",
        "prepare_mountpoint",
        "write_fstab_entry",
        "mount_share",
        "add_container_bind_mount",
        "resume_container",
    ]
    assert preview.mount_index == 4
    assert preview.bind_mount_entry == f"mp4: {settings.mount_root / 'media'},mp=/mnt/media:ro"
    assert not preview.fstab_present
    assert runner.calls == []
    assert not Path(settings.fstab_path).exists()
    assert not (settings.mount_root / "media").exists()


def test_attach_without_entries_is_an_error(
    runner: FakeRunner, settings: Settings, make_request, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(service_mod, "attach_pipeline", Pipeline[AttachContext]("empty"))
    with pytest.raises(OperationError, match="without writing its entries"):
        asyncio.run(ShareService(settings, runner).attach(make_request()))
