# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Attach pipeline: provision the guest, mount the share, bind it in.

Importing this package registers all steps with the pipeline.
"""

from ..contexts import AttachContext
from ..pipeline import Pipeline

attach_pipeline = Pipeline[AttachContext]("attach")

# Import step modules so their decorators register with the pipeline.
# Guest side (container still running)
from . import provision_guest as _  # noqa: F401, E402
from . import stop_container as _  # noqa: F401, E402

# Host side (container stopped)
from . import host_mount as _  # noqa: F401, E402
from . import bind_mount as _  # noqa: F401, E402

# Cleanup (always runs)
from . import resume as _  # noqa: F401, E402
