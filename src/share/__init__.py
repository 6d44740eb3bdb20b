# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Host-side share setup: public API re-exports."""

from .service import AttachResult, SharePreview, ShareService

__all__ = ["AttachResult", "SharePreview", "ShareService"]
