"""
Scoped progress indicator
A spinner on stderr that is always stopped before any command output
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from rich.console import Console
from rich.status import Status


class ProgressHandle:
    """Handle returned by start_progress; inert when progress is disabled"""

    def __init__(self, status: Optional[Status] = None):
        self._status = status
        self.active = status is not None


def start_progress(label: str, enabled: bool = True, console: Optional[Console] = None) -> ProgressHandle:
    if not enabled:
        return ProgressHandle()
    status = (console or Console(stderr=True)).status(label, spinner="dots")
    status.start()
    return ProgressHandle(status)


def stop_progress(handle: ProgressHandle) -> None:
    """Stop the spinner; safe to call more than once"""
    if handle.active:
        handle._status.stop()
        handle.active = False


@contextmanager
def progress(label: str, enabled: bool = True, console: Optional[Console] = None) -> Iterator[ProgressHandle]:
    """
    Show a spinner for the duration of the block.

    Example:
        with progress("Fetching domains...", enabled=sys.stderr.isatty()):
            result = service.list_domains()
    """
    handle = start_progress(label, enabled, console)
    try:
        yield handle
    finally:
        stop_progress(handle)
