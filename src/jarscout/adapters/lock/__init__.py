"""Lock-file adapters implementing FileLockPort."""

from jarscout.adapters.lock.flock import FlockFileLock
from jarscout.adapters.lock.polling import PollingFileLock


__all__ = ["FlockFileLock", "PollingFileLock"]
