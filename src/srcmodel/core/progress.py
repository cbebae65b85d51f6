"""User-facing progress feedback for CLI operations.

Design principles:
- Single line updates, no spam
- Graceful degradation in non-TTY (CI, pipes)
- Suppress structlog console output during spinners to avoid line collision

Usage::

    from srcmodel.core.progress import spinner, status, task

    status("Discovering files...")

    with spinner("Parsing 42 files"):
        do_work()  # structlog console output suppressed during this block

    status("Ready", style="success")  # ✓ Ready
"""

from __future__ import annotations

import sys
import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

_console = Console(stderr=True)

_STYLES = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
    "none": "",
}

_suppress_console_logs = threading.local()

# Show a bar only for runs at least this large, unless forced
_PROGRESS_THRESHOLD = 100


def is_console_suppressed() -> bool:
    """Check if console logging is currently suppressed."""
    return getattr(_suppress_console_logs, "active", False)


@contextmanager
def suppress_console_logs() -> Iterator[None]:
    """Suppress structlog console output; file handlers still receive logs."""
    _suppress_console_logs.active = True
    try:
        yield
    finally:
        _suppress_console_logs.active = False


def _get_logger() -> BoundLogger:
    """Get logger lazily to respect runtime config."""
    from srcmodel.core.logging import get_logger

    return get_logger("progress")


def _is_tty() -> bool:
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print a styled status message to stderr."""
    prefix = _STYLES.get(style, "")
    padding = " " * indent
    _console.print(f"{padding}{prefix}{message}", highlight=False)
    _get_logger().debug("status", message=message, style=style)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return "1 file" / "3 files"."""
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"


@contextmanager
def spinner(message: str, *, indent: int = 0) -> Iterator[None]:
    """Spinner with log suppression on a TTY, plain message otherwise."""
    padding = " " * indent
    if _is_tty():
        with (
            suppress_console_logs(),
            _console.status(f"{padding}[cyan]{message}[/cyan]", spinner="dots"),
        ):
            yield
    else:
        _console.print(f"{padding}{message}...", highlight=False)
        yield


@contextmanager
def task(name: str) -> Iterator[None]:
    """Named task with timing.

    Usage::

        with task("Indexing"):
            ...
        # Prints: ✓ Indexing (3.2s)
    """
    log = _get_logger()
    log.debug("task_start", task=name)
    start = time.perf_counter()

    try:
        with spinner(name):
            yield
        elapsed = time.perf_counter() - start
        status(f"{name} ({elapsed:.1f}s)", style="success")
        log.debug("task_done", task=name, elapsed_s=elapsed)
    except Exception as e:
        elapsed = time.perf_counter() - start
        status(f"{name} failed: {e}", style="error")
        log.error("task_failed", task=name, elapsed_s=elapsed, error=str(e))
        raise


@contextmanager
def progress_bar(
    desc: str,
    *,
    unit: str = "files",
    force: bool = False,
) -> Iterator[Callable[[int, int], None]]:
    """Yield a ``(done, total)`` callback that drives a progress bar.

    The total is only known once the callback first fires, so the bar is
    created lazily. Non-TTY runs (and small runs unless ``force``) get a
    callback that only logs at start and end.

    Usage::

        with progress_bar("Indexing") as on_progress:
            walker = FileWalker(root, on_progress=on_progress)
    """
    if not _is_tty():
        log = _get_logger()

        def _log_only(done: int, total: int) -> None:
            if done == 1:
                log.debug("progress_start", desc=desc, total=total)
            if done == total:
                log.debug("progress_done", desc=desc, total=total)

        yield _log_only
        return

    with (
        suppress_console_logs(),
        Progress(
            TextColumn("    {task.description}:"),
            BarColumn(bar_width=25, style="cyan", complete_style="cyan"),
            TaskProgressColumn(),
            TextColumn("{task.completed}/{task.total} {task.fields[unit]}"),
            console=_console,
            transient=True,
        ) as pbar,
    ):
        task_ids: list[int] = []

        def _advance(done: int, total: int) -> None:
            if not force and total <= _PROGRESS_THRESHOLD:
                return
            if not task_ids:
                task_ids.append(pbar.add_task(desc, total=total, unit=unit))
            pbar.update(task_ids[0], completed=done)

        yield _advance
