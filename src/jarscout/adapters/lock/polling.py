"""Lock-file mutex implemented as a bounded busy-poll.

This emulates an advisory lock for environments without a usable native
one: the lock is held by whoever manages to create the lock file with
O_CREAT | O_EXCL, and released by deleting it. Waiters retry at a fixed
interval until the timeout elapses.
"""

from __future__ import annotations

import logging
import os
import time
from typing import TYPE_CHECKING

from jarscout.core.exceptions import LockTimeoutError


if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path
    from types import TracebackType


logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.1


def poll_until(
    attempt: Callable[[], bool],
    timeout: float,
    interval: float = POLL_INTERVAL,
) -> float | None:
    """Call attempt() every interval seconds until it returns True.

    attempt() is always called at least once, even with a zero timeout.

    Returns:
        None on success, or the seconds elapsed when the timeout ran out.
    """
    start = time.monotonic()
    while True:
        if attempt():
            return None
        elapsed = time.monotonic() - start
        if elapsed >= timeout:
            return elapsed
        time.sleep(min(interval, timeout - elapsed))


class PollingFileLock:
    """Cross-process mutex backed by the existence of a lock file.

    Attributes:
        path: The lock file.
        timeout: Seconds to wait before raising LockTimeoutError.
        interval: Seconds between attempts.

    Example:
        with PollingFileLock(cache_dir / "slot.lock", timeout=10):
            ...  # exclusive section
    """

    def __init__(self, path: Path, timeout: float, interval: float = POLL_INTERVAL) -> None:
        self.path = path
        self.timeout = timeout
        self.interval = interval

    def _try_create(self) -> bool:
        try:
            fd = os.open(self.path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
        except FileExistsError:
            return False
        try:
            os.write(fd, str(os.getpid()).encode("ascii"))
        finally:
            os.close(fd)
        return True

    def acquire(self) -> None:
        """Create the lock file, waiting for a current holder to remove it.

        Raises:
            LockTimeoutError: If the file still exists after timeout seconds.
        """
        elapsed = poll_until(self._try_create, self.timeout, self.interval)
        if elapsed is not None:
            raise LockTimeoutError(self.path, elapsed)
        logger.debug("Acquired lock %s", self.path)

    def release(self) -> None:
        """Delete the lock file."""
        self.path.unlink(missing_ok=True)
        logger.debug("Released lock %s", self.path)

    def __enter__(self) -> PollingFileLock:
        """Acquire the lock."""
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Release the lock."""
        self.release()
