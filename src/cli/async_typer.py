# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Typer subclass that accepts ``async def`` commands."""

from __future__ import annotations

import asyncio
import inspect
from functools import wraps
from typing import Any, Callable

import typer


class AsyncTyper(typer.Typer):
    """Typer app whose commands may be coroutines.

    Coroutine commands are wrapped so Typer sees a plain function that
    runs them to completion with :func:`asyncio.run`.
    """

    def command(self, *args: Any, **kwargs: Any) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        decorator = super().command(*args, **kwargs)

        def register(fn: Callable[..., Any]) -> Callable[..., Any]:
            if not inspect.iscoroutinefunction(fn):
                return decorator(fn)

            @wraps(fn)
            def run_sync(*f_args: Any, **f_kwargs: Any) -> Any:
                return asyncio.run(fn(*f_args, **f_kwargs))

            decorator(run_sync)
            return fn

        return register
