"""Console output — tagged status lines, summary tables, log setup."""

from __future__ import annotations

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from cloudrun_deploy.output.tables import kv_table

console = Console()
err_console = Console(stderr=True)


def info(message: str) -> None:
    console.print(f"[green]\\[INFO][/] {escape(message)}", soft_wrap=True)


def warn(message: str) -> None:
    console.print(f"[yellow]\\[WARN][/] {escape(message)}", soft_wrap=True)


def plain(message: str = "") -> None:
    console.print(escape(message), highlight=False, soft_wrap=True)


def output_summary(data: dict[str, Any], title: str | None = None) -> None:
    """Print a labelled key/value block."""
    if title:
        info(title)
    console.print(kv_table(data))


def setup_logging(level: str) -> None:
    """Route stdlib logging through rich on stderr."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.WARNING
    logging.basicConfig(
        level=numeric,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
