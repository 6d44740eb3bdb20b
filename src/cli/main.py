#!/usr/bin/env python3
"""
lxc-cifs-share CLI - Main entry point.

Usage:
    lxc-cifs-share [OPTIONS]

Mounts a CIFS/SMB share on a Proxmox VE host through /etc/fstab and
bind-mounts it into an LXC container, creating the shared
``lxc_shares`` group inside the guest.  Run it as root on the PVE
host.  Every value not given as an option is asked for interactively.
"""

import os
from pathlib import Path
from typing import Optional

import typer

from . import __version__
from ..share import ShareService
from ..share.config import load_config
from ..share.fstab import redact
from ..share.share_options import ShareRequest, parse_read_only, validate_mode
from .async_typer import AsyncTyper
from .decorators import require_pve
from .output import ConsoleReporter, out, setup_logging


# Create the main Typer app
app = AsyncTyper(
    name="lxc-cifs-share",
    help="Attach a CIFS/SMB share to a Proxmox VE LXC container",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        out.info(f"lxc-cifs-share version {__version__}")
        raise typer.Exit()


def _ask(value: Optional[str], text: str, hide_input: bool = False, allow_empty: bool = False) -> str:
    """Return *value* if it was given as an option, otherwise prompt for it.

    With *allow_empty*, pressing Enter yields an empty answer instead of
    re-prompting, so the caller's validation can reject it.
    """
    if value is not None:
        return value
    if allow_empty:
        return typer.prompt(text, default="", show_default=False, hide_input=hide_input)
    return typer.prompt(text, hide_input=hide_input)


@app.command()
@require_pve
async def attach(
    folder: Optional[str] = typer.Option(
        None, "--folder", help="Folder name used for the host and guest mount points"
    ),
    host: Optional[str] = typer.Option(None, "--host", help="CIFS server hostname or IP"),
    share: Optional[str] = typer.Option(None, "--share", help="Share name on the server"),
    username: Optional[str] = typer.Option(None, "--username", help="SMB username"),
    password: Optional[str] = typer.Option(
        None, "--password", help="SMB password (prompted without echo if omitted)"
    ),
    ctid: Optional[str] = typer.Option(None, "--ctid", help="ID of the LXC container"),
    guest_user: Optional[str] = typer.Option(
        None, "--guest-user", help="User inside the container that needs access"
    ),
    file_mode: Optional[str] = typer.Option(None, "--file-mode", help="file_mode, e.g. 0770"),
    dir_mode: Optional[str] = typer.Option(None, "--dir-mode", help="dir_mode, e.g. 0770"),
    read_only: Optional[str] = typer.Option(
        None, "--read-only", help="Y to bind-mount read-only, N for read-write"
    ),
    no_resume: bool = typer.Option(
        False, "--no-resume", help="Leave the container stopped afterwards"
    ),
    credentials_file: bool = typer.Option(
        False,
        "--credentials-file",
        help="Store the SMB login in a root-only credentials file instead of fstab",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Show what would be done without changing anything"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Extra config file (highest priority)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every command run"),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Mount a CIFS share on the PVE host and bind it into an LXC.

    The container is stopped while its config is edited and started
    again afterwards, also when a step fails (unless --no-resume).

    Configuration is read from (highest to lowest priority):
      1. --config FILE
      2. ~/.config/lxc-cifs-share/lxc-cifs-share.conf  (user)
      3. /etc/lxc-cifs-share/lxc-cifs-share.conf       (system)
      4. /usr/lib/lxc-cifs-share/lxc-cifs-share.conf   (package defaults)
    """
    setup_logging(verbose)
    settings = load_config(config)

    folder = _ask(folder, "Enter the folder name (e.g., nas_rwx)")
    host = _ask(host, "Enter the CIFS hostname or IP (e.g., NAS)")
    share = _ask(share, "Enter the share name (e.g., media)")
    username = _ask(username, "Enter SMB username")
    password = _ask(password, "Enter SMB password", hide_input=True)
    ctid = _ask(ctid, "Enter the LXC ID")
    guest_user = _ask(
        guest_user,
        "Enter the username within the LXC that needs access to the share (e.g., jellyfin, plex)",
    )

    # Each answer is checked before the next question is asked
    file_mode = validate_mode(
        _ask(file_mode, "Enter the required file permissions (e.g., 0770)", allow_empty=True),
        "file",
    )
    dir_mode = validate_mode(
        _ask(dir_mode, "Enter the required dir permissions (e.g., 0770)", allow_empty=True),
        "dir",
    )
    is_read_only = parse_read_only(
        _ask(read_only, "Is the mount read-only? (Y/n)", allow_empty=True)
    )

    request = ShareRequest(
        folder_name=folder,
        cifs_host=host,
        share_name=share,
        smb_username=username,
        smb_password=password,
        container_id=ctid,
        guest_username=guest_user,
        file_mode=file_mode,
        dir_mode=dir_mode,
        read_only=is_read_only,
        resume=not no_resume,
        use_credentials_file=credentials_file,
    )
    service = ShareService(settings)

    if dry_run:
        preview = service.preview(request)
        out.info("Steps: " + ", ".join(preview.steps))
        state = "already present" if preview.fstab_present else "would be added"
        out.info(f"fstab ({state}): {redact(preview.fstab_entry)}")
        out.info(f"{preview.config_path}: {preview.bind_mount_entry}")
        out.dim("Dry run: nothing was changed.")
        return

    await service.attach(request, ConsoleReporter())
    out.info("Configuration complete.")


def cli() -> None:
    """CLI entry point for setuptools."""
    prog_name = os.environ.get("LXC_CIFS_SHARE_PROG_NAME", "lxc-cifs-share")
    app(prog_name=prog_name)


if __name__ == "__main__":
    cli()
