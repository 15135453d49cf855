"""Wait for the Windows status file written by the elevated batch script.

``Start-Process -Verb runAs`` cannot wait on the elevated process on every
Windows release, so completion is observed by polling. There is no built-in
deadline; callers bound the wait by setting ``cancel``.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum

from elevx.errors import ElevationCancelledError, PermissionDeniedError
from elevx.host import Host
from elevx.types import WindowsContext

logger = logging.getLogger(__name__)


class PollState(str, Enum):
    WAITING = "waiting"
    DONE = "done"


def check_status(host: Host, context: WindowsContext, *, min_bytes: int) -> PollState:
    """Single tick: stat the status file.

    Missing or undersized means the batch script is still running or still
    writing; the write is not atomic from this side.
    """
    try:
        size = host.stat(context.status_path).st_size
    except FileNotFoundError:
        return PollState.WAITING
    return PollState.DONE if size >= min_bytes else PollState.WAITING


def wait_for_status(
    host: Host,
    context: WindowsContext,
    *,
    interval: float,
    min_bytes: int,
    cancel: threading.Event | None = None,
) -> None:
    """Block until the status file is complete.

    Raises:
        PermissionDeniedError: If the stdout file never appeared or cannot be
            stat-ed, meaning the outer script was not run. An administrator without a password who
            clicks Yes gets no error from PowerShell and no execution either.
        ElevationCancelledError: If ``cancel`` is set while waiting.
    """
    ticks = 0
    while check_status(host, context, min_bytes=min_bytes) is PollState.WAITING:
        if cancel is not None and cancel.is_set():
            raise ElevationCancelledError("Elevation wait cancelled.")
        host.sleep(interval)
        ticks += 1
        try:
            host.stat(context.stdout_path)
        except OSError as exc:
            logger.debug("stdout file unavailable after %d tick(s); command never started: %s", ticks, exc)
            raise PermissionDeniedError(cause=exc) from exc
    logger.debug("status file complete after %d tick(s)", ticks)
