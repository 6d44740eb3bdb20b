"""Decorators for CLI commands."""

import os
import shutil
from functools import wraps
from typing import Callable, Coroutine, TypeVar

import typer

from ..share.config import ConfigError
from ..share.operations import OperationError
from ..share.pipeline import StepFailed
from ..share.share_options import ShareValidationError
from .output import out

R = TypeVar("R")


def require_pve(func: Callable[..., Coroutine[None, None, R]]) -> Callable[..., Coroutine[None, None, R]]:
    """Decorator that checks for root and ``pct``, and reports failures.

    Every expected error ends the command with exit status 1.
    """
    @wraps(func)
    async def wrapper(*args: object, **kwargs: object) -> R:
        if os.geteuid() != 0:
            out.error("This script must be run as root")
            raise typer.Exit(1)

        if shutil.which("pct") is None:
            out.error("pct is not available.")
            out.hint("Run this on a Proxmox VE host.")
            raise typer.Exit(1)

        try:
            return await func(*args, **kwargs)
        except (ShareValidationError, ConfigError, OperationError, OSError) as e:
            out.error(str(e))
            raise typer.Exit(1)
        except StepFailed as e:
            out.error(f"Step '{e.step}' failed: {e.cause}")
            out.hint(f"Completed steps: {', '.join(e.completed) or 'none'}")
            raise typer.Exit(1)
    return wrapper
