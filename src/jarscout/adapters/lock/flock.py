"""Lock-file mutex backed by an OS advisory lock (POSIX flock).

Drop-in replacement for PollingFileLock where fcntl is available. The
lock file is still created on acquire and deleted on release, so the
cache layout looks the same to other agents. After each successful
flock the inode is compared with the path on disk: if a previous holder
deleted the file in between, the lock is on an orphaned inode and the
attempt is retried.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from jarscout.adapters.lock.polling import POLL_INTERVAL, poll_until
from jarscout.core.exceptions import LockTimeoutError


try:
    import fcntl
except ImportError:  # pragma: no cover - non-POSIX platforms
    fcntl = None  # type: ignore[assignment]


if TYPE_CHECKING:
    from pathlib import Path
    from types import TracebackType


logger = logging.getLogger(__name__)


class FlockFileLock:
    """Cross-process mutex using fcntl.flock on the lock file.

    Attributes:
        path: The lock file.
        timeout: Seconds to wait before raising LockTimeoutError.
        interval: Seconds between non-blocking attempts.
    """

    def __init__(self, path: Path, timeout: float, interval: float = POLL_INTERVAL) -> None:
        if fcntl is None:
            raise RuntimeError("FlockFileLock requires fcntl (POSIX only)")
        self.path = path
        self.timeout = timeout
        self.interval = interval
        self._fd: int | None = None

    @staticmethod
    def is_supported() -> bool:
        """Return True when the platform provides fcntl.flock."""
        return fcntl is not None

    def _try_lock(self) -> bool:
        fd = os.open(self.path, os.O_CREAT | os.O_RDWR)
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            os.close(fd)
            return False

        try:
            current = os.stat(self.path)
        except FileNotFoundError:
            current = None
        if current is None or current.st_ino != os.fstat(fd).st_ino:
            # Previous holder unlinked the file after we opened it
            fcntl.flock(fd, fcntl.LOCK_UN)
            os.close(fd)
            return False

        self._fd = fd
        return True

    def acquire(self) -> None:
        """Take an exclusive flock on the lock file.

        Raises:
            LockTimeoutError: If the lock is still held after timeout seconds.
        """
        elapsed = poll_until(self._try_lock, self.timeout, self.interval)
        if elapsed is not None:
            raise LockTimeoutError(self.path, elapsed)
        logger.debug("Acquired flock %s", self.path)

    def release(self) -> None:
        """Delete the lock file, then drop the flock."""
        if self._fd is None:
            return
        self.path.unlink(missing_ok=True)
        fcntl.flock(self._fd, fcntl.LOCK_UN)
        os.close(self._fd)
        self._fd = None
        logger.debug("Released flock %s", self.path)

    def __enter__(self) -> FlockFileLock:
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
