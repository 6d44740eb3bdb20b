# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Generic ordered pipeline for async step functions.

Create a :class:`Pipeline` instance at module level and use its
:meth:`~Pipeline.step` method as a decorator.  When the steps are
split across files, each file just imports the pipeline instance and
decorates its functions — no central list to maintain.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar, overload

from .operations import OperationError

_Ctx = TypeVar("_Ctx")

_StepFn = Callable[[_Ctx], Awaitable[None]]

# Default order for steps that don't specify one.
_DEFAULT_ORDER = 500

logger = logging.getLogger(__name__)


class StepFailed(Exception):
    """A pipeline step raised :class:`OperationError`.

    Carries the failing step's name, the underlying error and the names
    of the steps that completed before it, so callers can tell the
    operator exactly how far the run got.
    """

    def __init__(self, step: str, cause: OperationError, completed: list[str]):
        super().__init__(f"Step '{step}' failed: {cause}")
        self.step = step
        self.cause = cause
        self.completed = completed


class Pipeline(Generic[_Ctx]):
    """A registry of async step functions executed by ``order``.

    Ordering
    --------
    Every step has a numeric *order* (default 500).  Steps run in
    ascending order; steps with equal order run in registration
    (decoration) order.  This keeps sequencing explicit even when
    steps live in different modules with unpredictable import order.

    Convention: use multiples of 100 so there's room to insert
    steps between existing ones.

    Failure handling
    ----------------
    The first step that raises :class:`OperationError` stops the run;
    the remaining regular steps are skipped.  Steps registered with
    ``cleanup=True`` always run afterwards, in their own order, so they
    can undo or finish whatever the regular steps left half done.

    Example::

        attach = Pipeline[AttachContext]("attach")

        @attach.step(order=300)
        async def stop_container(ctx: AttachContext) -> None: ...

        @attach.step(order=900, cleanup=True)
        async def resume_container(ctx: AttachContext) -> None: ...
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._entries: list[tuple[int, int, _StepFn[_Ctx]]] = []
        self._cleanup: list[tuple[int, int, _StepFn[_Ctx]]] = []
        self._seq = 0  # registration counter for stable sort

    @overload
    def step(self, fn: _StepFn[_Ctx]) -> _StepFn[_Ctx]: ...
    @overload
    def step(
        self, *, order: int = ..., cleanup: bool = ...
    ) -> Callable[[_StepFn[_Ctx]], _StepFn[_Ctx]]: ...

    def step(
        self,
        fn: _StepFn[_Ctx] | None = None,
        *,
        order: int = _DEFAULT_ORDER,
        cleanup: bool = False,
    ) -> _StepFn[_Ctx] | Callable[[_StepFn[_Ctx]], _StepFn[_Ctx]]:
        """Register *fn* as a step in this pipeline.

        Can be used bare (``@pipeline.step``) or with arguments
        (``@pipeline.step(order=200)``).
        """
        def _register(f: _StepFn[_Ctx]) -> _StepFn[_Ctx]:
            target = self._cleanup if cleanup else self._entries
            target.append((order, self._seq, f))
            self._seq += 1
            return f

        if fn is not None:
            # Called as @pipeline.step (no parentheses)
            return _register(fn)
        # Called as @pipeline.step(order=...)
        return _register

    async def run(self, ctx: _Ctx) -> list[str]:
        """Execute every registered step in order.

        Returns:
            Names of the steps that ran, cleanup steps included.

        Raises:
            StepFailed: A regular step failed, or a cleanup step failed
                after every regular step succeeded.
        """
        completed: list[str] = []
        failure: StepFailed | None = None

        for _ord, _seq, s in sorted(self._entries):
            try:
                await s(ctx)
            except OperationError as e:
                failure = StepFailed(s.__name__, e, list(completed))
                break
            completed.append(s.__name__)

        for _ord, _seq, s in sorted(self._cleanup):
            try:
                await s(ctx)
            except OperationError as e:
                if failure is None:
                    failure = StepFailed(s.__name__, e, list(completed))
                else:
                    logger.error("Cleanup step %s failed: %s", s.__name__, e)
                continue
            completed.append(s.__name__)

        if failure is not None:
            raise failure
        return completed

    def step_names(self) -> list[str]:
        """Names of all steps in execution order, cleanup steps last."""
        ordered = sorted(self._entries) + sorted(self._cleanup)
        return [f.__name__ for _o, _s, f in ordered]

    def __len__(self) -> int:
        return len(self._entries) + len(self._cleanup)

    def __repr__(self) -> str:
        ordered = sorted(self._entries) + sorted(self._cleanup)
        names = ", ".join(f"{f.__name__}({o})" for o, _s, f in ordered)
        return f"Pipeline({self.name!r}, [{names}])"
