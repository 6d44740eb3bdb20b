# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Terminal output helpers built on rich."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from ..share.operations import OperationReporter


class Output:
    """Styled messages for the operator.

    Normal progress goes to stdout; errors and hints go to stderr.
    """

    def __init__(self) -> None:
        self.console = Console(highlight=False, soft_wrap=True)
        self.err_console = Console(stderr=True, highlight=False, soft_wrap=True)

    def info(self, msg: str) -> None:
        self.console.print(escape(msg))

    def dim(self, msg: str) -> None:
        self.console.print(f"[dim]{escape(msg)}[/dim]")

    def success(self, msg: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(msg)}")

    def warning(self, msg: str) -> None:
        self.err_console.print(f"[yellow]Warning:[/yellow] {escape(msg)}")

    def error(self, msg: str) -> None:
        self.err_console.print(f"[bold red]Error:[/bold red] {escape(msg)}")

    def hint(self, msg: str) -> None:
        self.err_console.print(f"  [dim]→[/dim] {msg}")


out = Output()


class ConsoleReporter(OperationReporter):
    """Operation reporter that prints through :data:`out`."""

    def __init__(self, output: Output = out):
        self._out = output

    def info(self, msg: str) -> None:
        self._out.info(msg)

    def dim(self, msg: str) -> None:
        self._out.dim(msg)

    def success(self, msg: str) -> None:
        self._out.success(msg)

    def warning(self, msg: str) -> None:
        self._out.warning(msg)


def setup_logging(verbose: bool) -> None:
    """Send log records to stderr through rich; DEBUG when *verbose*."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=out.err_console, show_path=False)],
        force=True,
    )
