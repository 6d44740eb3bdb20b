# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Attach CIFS/SMB shares to Proxmox VE LXC containers."""

__version__ = "0.3.0"
